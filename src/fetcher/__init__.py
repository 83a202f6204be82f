import logging

from .clients import (
    FetchSettings,
    fetch_carbon_intensity,
    fetch_node_data,
    fetch_nodes_by_country,
    query_grafana,
)
from .metrics import DashboardMetrics, compute_dashboard_metrics
from .orchestrator import SOURCES, run_fetch_cycle, utc_timestamp
from .schemas import DataFreshness, ErrorLog, Metadata
from .writers import read_existing_data, write_json_file, write_latest_data

LOGGER = logging.getLogger("fetcher")
if not LOGGER.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    LOGGER.addHandler(handler)
LOGGER.setLevel(logging.INFO)
LOGGER.propagate = False

__all__ = [
    "SOURCES",
    "DashboardMetrics",
    "DataFreshness",
    "ErrorLog",
    "FetchSettings",
    "Metadata",
    "compute_dashboard_metrics",
    "fetch_carbon_intensity",
    "fetch_node_data",
    "fetch_nodes_by_country",
    "query_grafana",
    "read_existing_data",
    "run_fetch_cycle",
    "utc_timestamp",
    "write_json_file",
    "write_latest_data",
]
