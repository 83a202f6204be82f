from .constants import ARCHIVER_NODES, RELAY_NODES
from .geography import (
    CountryNodeCount,
    GeographicalData,
    build_geographical_data,
    nodes_by_country,
)
from .grafana import decode_frame, parse_grafana_response
from .nodes import (
    DEFAULT_NODE_TYPES,
    HistoricalPoint,
    NodeData,
    NodeDataResult,
    NodeTypeCounts,
    aggregate_node_data,
    detect_anomalies,
    parse_historical_data,
    parse_node_types,
)

__all__ = [
    "ARCHIVER_NODES",
    "DEFAULT_NODE_TYPES",
    "RELAY_NODES",
    "CountryNodeCount",
    "GeographicalData",
    "HistoricalPoint",
    "NodeData",
    "NodeDataResult",
    "NodeTypeCounts",
    "aggregate_node_data",
    "build_geographical_data",
    "decode_frame",
    "detect_anomalies",
    "nodes_by_country",
    "parse_grafana_response",
    "parse_historical_data",
    "parse_node_types",
]
