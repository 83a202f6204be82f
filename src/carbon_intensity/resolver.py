"""Resolve the latest electricity carbon intensity per country from OWID data.

The OWID indicator API returns three parallel arrays (``entities``, ``years``,
``values``) covering countries as well as continents and income groups. Only
entities carrying a three-letter ISO code are kept, each at its most recent
year.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

LOGGER = logging.getLogger("carbon_intensity")

ISO3_LENGTH = 3


@dataclass(frozen=True)
class EntityInfo:
    name: str
    code: str | None = None


@dataclass(frozen=True)
class CountryIntensity:
    code: str
    name: str
    intensity: float
    year: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "intensity": self.intensity,
            "year": self.year,
        }


@dataclass(frozen=True)
class CarbonIntensityData:
    timestamp: str
    countries: tuple[CountryIntensity, ...]
    global_average: float | None = None
    unit: str = ""
    description: str | None = None
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"timestamp": self.timestamp}
        if self.global_average is not None:
            payload["globalAverage"] = self.global_average
        payload["countries"] = [country.to_dict() for country in self.countries]
        metadata: dict[str, Any] = {"unit": self.unit}
        if self.description is not None:
            metadata["description"] = self.description
        if self.source is not None:
            metadata["source"] = self.source
        payload["metadata"] = metadata
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CarbonIntensityData":
        metadata = payload.get("metadata") or {}
        return cls(
            timestamp=str(payload["timestamp"]),
            countries=tuple(
                CountryIntensity(
                    code=str(entry["code"]),
                    name=str(entry["name"]),
                    intensity=float(entry["intensity"]),
                    year=int(entry["year"]),
                )
                for entry in payload.get("countries", [])
            ),
            global_average=payload.get("globalAverage"),
            unit=str(metadata.get("unit", "")),
            description=metadata.get("description"),
            source=metadata.get("source"),
        )


def entity_table(metadata: Mapping[str, Any]) -> dict[int, EntityInfo]:
    """Map entity IDs to names and codes from an OWID metadata document."""
    dimensions = metadata.get("dimensions") or {}
    entities = (dimensions.get("entities") or {}).get("values") or []
    table: dict[int, EntityInfo] = {}
    for entity in entities:
        table[int(entity["id"])] = EntityInfo(
            name=str(entity["name"]),
            code=entity.get("code") or None,
        )
    return table


def latest_by_entity(
    entities: Sequence[int],
    years: Sequence[int],
    values: Sequence[float],
) -> dict[int, tuple[int, float]]:
    """Return ``{entity: (year, value)}`` for each entity's most recent year.

    A later year replaces the stored record; a repeated year does not.
    """
    if not len(entities) == len(years) == len(values):
        raise ValueError(
            "OWID data arrays must be aligned: "
            f"{len(entities)} entities, {len(years)} years, {len(values)} values."
        )
    latest: dict[int, tuple[int, float]] = {}
    for entity_id, year, value in zip(entities, years, values):
        existing = latest.get(entity_id)
        if existing is None or year > existing[0]:
            latest[entity_id] = (year, value)
    return latest


def resolve_country_intensities(
    data: Mapping[str, Sequence],
    entities: Mapping[int, EntityInfo],
) -> list[CountryIntensity]:
    """Return one ``CountryIntensity`` per ISO-coded country, highest intensity first."""
    latest = latest_by_entity(data["entities"], data["years"], data["values"])

    countries: list[CountryIntensity] = []
    for entity_id, (year, value) in latest.items():
        entity = entities.get(entity_id)
        if entity is None:
            LOGGER.warning("Unknown entity ID: %s", entity_id)
            continue
        # Continents and income groups share the indicator but have no ISO code.
        if not entity.code or len(entity.code) != ISO3_LENGTH:
            continue
        countries.append(
            CountryIntensity(code=entity.code, name=entity.name, intensity=value, year=int(year))
        )
    return sorted(countries, key=lambda country: country.intensity, reverse=True)


def global_average(countries: Sequence[CountryIntensity]) -> float | None:
    """Unweighted mean intensity, or ``None`` when there are no countries."""
    if not countries:
        return None
    return sum(country.intensity for country in countries) / len(countries)


def build_carbon_intensity_data(
    data: Mapping[str, Sequence],
    metadata: Mapping[str, Any],
    timestamp: str,
) -> CarbonIntensityData:
    """Combine OWID data and metadata into the persisted carbon-intensity record."""
    countries = resolve_country_intensities(data, entity_table(metadata))
    presentation = metadata.get("presentation") or {}
    LOGGER.info("Resolved carbon intensity for %d countries", len(countries))
    return CarbonIntensityData(
        timestamp=timestamp,
        countries=tuple(countries),
        global_average=global_average(countries),
        unit=str(metadata.get("shortUnit") or metadata.get("unit") or ""),
        description=metadata.get("descriptionShort"),
        source=presentation.get("attributionShort"),
    )
