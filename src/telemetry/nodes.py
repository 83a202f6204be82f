"""Build the node-count record from decoded node-type and history rows."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from .constants import (
    ARCHIVER_NODES,
    HISTORY_COUNT_FIELD,
    HISTORY_TIMESTAMP_FIELD,
    NODE_TYPE_FIELDS,
    RELAY_NODES,
)

LOGGER = logging.getLogger("telemetry")

Number = int | float


@dataclass(frozen=True)
class NodeTypeCounts:
    api_nodes: Number
    validators: Number
    relays: Number
    archivers: Number

    @property
    def total(self) -> Number:
        return self.api_nodes + self.validators + self.relays + self.archivers


DEFAULT_NODE_TYPES = NodeTypeCounts(
    api_nodes=0,
    validators=0,
    relays=RELAY_NODES,
    archivers=ARCHIVER_NODES,
)


@dataclass(frozen=True)
class HistoricalPoint:
    date: str
    node_count: Number

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "nodeCount": self.node_count}


@dataclass(frozen=True)
class NodeData:
    """Node counts for one fetch cycle; ``total_nodes`` is the sum of the parts."""

    timestamp: str
    total_nodes: Number
    validators: Number
    relays: Number
    archivers: Number
    api_nodes: Number
    historical_data: tuple[HistoricalPoint, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "timestamp": self.timestamp,
            "totalNodes": self.total_nodes,
            "validators": self.validators,
            "relays": self.relays,
            "archivers": self.archivers,
            "apiNodes": self.api_nodes,
        }
        if self.historical_data is not None:
            payload["historicalData"] = [point.to_dict() for point in self.historical_data]
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "NodeData":
        history = payload.get("historicalData")
        return cls(
            timestamp=str(payload["timestamp"]),
            total_nodes=payload["totalNodes"],
            validators=payload["validators"],
            relays=payload["relays"],
            archivers=payload["archivers"],
            api_nodes=payload["apiNodes"],
            historical_data=(
                tuple(HistoricalPoint(str(p["date"]), p["nodeCount"]) for p in history)
                if history is not None
                else None
            ),
        )


@dataclass(frozen=True)
class NodeDataResult:
    """Node data plus the advisory anomaly messages raised while building it."""

    data: NodeData
    anomalies: tuple[str, ...] = ()

    @property
    def has_anomalies(self) -> bool:
        return bool(self.anomalies)


def to_number(value: Any) -> float:
    """Loose numeric coercion; anything unparseable becomes NaN."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def as_count(value: float) -> Number:
    return int(value) if math.isfinite(value) and value.is_integer() else value


def _count_or_default(value: Any, default: Number) -> Number:
    number = to_number(value)
    if math.isnan(number) or number == 0:
        return default
    return as_count(number)


def parse_node_types(rows: Sequence[Mapping[str, Any]]) -> NodeTypeCounts:
    """Read node-type counts from the first row, falling back per field."""
    if not rows:
        return DEFAULT_NODE_TYPES
    first = rows[0]
    values = {
        attr: _count_or_default(first.get(field), getattr(DEFAULT_NODE_TYPES, attr))
        for attr, field in NODE_TYPE_FIELDS.items()
    }
    return NodeTypeCounts(**values)


def _parse_date(ts: Any) -> str | None:
    if isinstance(ts, bool) or not isinstance(ts, (str, int, float)):
        return None
    try:
        if isinstance(ts, str):
            stamp = pd.to_datetime(ts, utc=True)
        else:
            stamp = pd.to_datetime(ts, unit="ms", utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(stamp):
        return None
    return stamp.strftime("%Y-%m-%d")


def parse_historical_data(
    rows: Iterable[Mapping[str, Any]],
    ts_field: str = HISTORY_TIMESTAMP_FIELD,
    count_field: str = HISTORY_COUNT_FIELD,
) -> list[HistoricalPoint]:
    """Return ``(date, node_count)`` points, dropping rows with unusable timestamps.

    Numeric timestamps are epoch milliseconds; strings without an offset are
    read as UTC.
    """
    points: list[HistoricalPoint] = []
    for row in rows:
        date = _parse_date(row.get(ts_field))
        if date is None:
            continue
        count = to_number(row.get(count_field))
        node_count = 0 if math.isnan(count) else as_count(count)
        points.append(HistoricalPoint(date=date, node_count=node_count))
    return points


def detect_anomalies(counts: NodeTypeCounts, total_nodes: Number) -> list[str]:
    """Describe internally inconsistent counts; an empty list means consistent."""
    anomalies: list[str] = []
    if counts.api_nodes < 0:
        anomalies.append(
            f"API nodes count is negative ({counts.api_nodes}). "
            f"Validator count ({counts.validators}) may exceed total tracked nodes."
        )
    if counts.validators > total_nodes:
        anomalies.append(
            f"Validator count ({counts.validators}) exceeds total nodes ({total_nodes}). "
            "Upstream data source may be inconsistent."
        )
    if counts.validators < 0 or counts.relays < 0 or counts.archivers < 0:
        anomalies.append("One or more node type counts are negative.")
    return anomalies


def aggregate_node_data(
    node_type_rows: Sequence[Mapping[str, Any]],
    history_rows: Iterable[Mapping[str, Any]],
    timestamp: str,
) -> NodeDataResult:
    """Combine node-type and history rows into a ``NodeDataResult``."""
    counts = parse_node_types(node_type_rows)
    history = parse_historical_data(history_rows)
    total_nodes = counts.total

    anomalies = detect_anomalies(counts, total_nodes)
    if anomalies:
        LOGGER.warning("Node data anomalies detected: %s", "; ".join(anomalies))

    data = NodeData(
        timestamp=timestamp,
        total_nodes=total_nodes,
        validators=counts.validators,
        relays=counts.relays,
        archivers=counts.archivers,
        api_nodes=counts.api_nodes,
        historical_data=tuple(history) if history else None,
    )
    return NodeDataResult(data=data, anomalies=tuple(anomalies))
