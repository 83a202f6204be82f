"""Nodes-per-country dataset built from the decoded geography query."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from .constants import COUNTRY_CODE_FIELD, COUNTRY_COUNT_FIELD
from .nodes import Number, as_count, to_number

GEOGRAPHY_SOURCE = "Nodely Node Telemetry Service"
GEOGRAPHY_DESCRIPTION = "Distribution of Algorand nodes by country (last 24h)"


@dataclass(frozen=True)
class CountryNodeCount:
    country_code: str
    node_count: Number

    def to_dict(self) -> dict[str, Any]:
        return {"countryCode": self.country_code, "nodeCount": self.node_count}


@dataclass(frozen=True)
class GeographicalData:
    timestamp: str
    nodes_by_country: tuple[CountryNodeCount, ...]
    source: str | None = GEOGRAPHY_SOURCE
    description: str | None = GEOGRAPHY_DESCRIPTION

    @property
    def total_countries(self) -> int:
        return len(self.nodes_by_country)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "timestamp": self.timestamp,
            "nodesByCountry": [entry.to_dict() for entry in self.nodes_by_country],
            "totalCountries": self.total_countries,
        }
        if self.source is not None and self.description is not None:
            payload["metadata"] = {"source": self.source, "description": self.description}
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "GeographicalData":
        metadata = payload.get("metadata") or {}
        return cls(
            timestamp=str(payload["timestamp"]),
            nodes_by_country=tuple(
                CountryNodeCount(str(entry["countryCode"]), entry["nodeCount"])
                for entry in payload.get("nodesByCountry", [])
            ),
            source=metadata.get("source"),
            description=metadata.get("description"),
        )


def nodes_by_country(
    rows: Iterable[Mapping[str, Any]],
    code_field: str = COUNTRY_CODE_FIELD,
    count_field: str = COUNTRY_COUNT_FIELD,
) -> list[CountryNodeCount]:
    """Upper-case codes, keep positive counts and sort by count descending."""
    entries: list[CountryNodeCount] = []
    for row in rows:
        raw_code = row.get(code_field)
        code = "" if raw_code is None else str(raw_code).upper()
        count = to_number(row.get(count_field))
        if not code or math.isnan(count) or count <= 0:
            continue
        entries.append(CountryNodeCount(country_code=code, node_count=as_count(count)))
    return sorted(entries, key=lambda entry: entry.node_count, reverse=True)


def build_geographical_data(rows: Iterable[Mapping[str, Any]], timestamp: str) -> GeographicalData:
    return GeographicalData(timestamp=timestamp, nodes_by_country=tuple(nodes_by_country(rows)))
