"""Merge per-country node counts with grid carbon intensity.

Node locations are keyed by ISO alpha-2 codes while the OWID intensity data
uses alpha-3 codes. For each country hosting nodes the merge reports:

* node percentage: ``100 * nodes / total_nodes``
* weighted emissions: ``nodes * intensity`` (intermediate only)
* emissions percentage: ``100 * weighted / total_weighted``
* relative emissions: ``emissions % / node %``; 1.0 means proportional,
  above 1.0 means the country's nodes run on a dirtier grid than average.

Countries without intensity data keep their node share but report ``None``
for every emissions-derived field. They still count towards ``total_nodes``,
which nudges the relative emissions of covered countries upward.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Sequence

import pandas as pd

from carbon_intensity import CountryIntensity
from telemetry import CountryNodeCount

from .country_codes import country_code_to_alpha3, country_flag, country_name

LOGGER = logging.getLogger("country_emissions")

FRAME_COLUMNS = [
    "country_code2",
    "country_code3",
    "country_name",
    "flag_emoji",
    "node_count",
    "node_percentage",
    "carbon_intensity",
    "emissions_percentage",
    "relative_emissions",
]


@dataclass(frozen=True)
class MergedCountryData:
    country_code2: str
    country_code3: str | None
    country_name: str
    flag_emoji: str
    node_count: int | float
    node_percentage: float
    carbon_intensity: float | None
    emissions_percentage: float | None
    relative_emissions: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "countryCode2": self.country_code2,
            "countryCode3": self.country_code3,
            "countryName": self.country_name,
            "flagEmoji": self.flag_emoji,
            "nodeCount": self.node_count,
            "nodePercentage": self.node_percentage,
            "carbonIntensity": self.carbon_intensity,
            "emissionsPercentage": self.emissions_percentage,
            "relativeEmissions": self.relative_emissions,
        }


@dataclass(frozen=True)
class _CountryFigures:
    country_code2: str
    country_code3: str | None
    intensity: float | None
    node_count: int | float
    weighted_emissions: float


def _raw_figures(
    nodes_by_country: Iterable[CountryNodeCount],
    intensity_by_code: dict[str, float],
) -> list[_CountryFigures]:
    figures = []
    for country in nodes_by_country:
        code3 = country_code_to_alpha3(country.country_code)
        intensity = intensity_by_code.get(code3) if code3 else None
        weighted = country.node_count * intensity if intensity is not None else 0
        figures.append(
            _CountryFigures(
                country_code2=country.country_code,
                country_code3=code3,
                intensity=intensity,
                node_count=country.node_count,
                weighted_emissions=weighted,
            )
        )
    return figures


def _to_merged(
    figures: _CountryFigures,
    total_nodes: int | float,
    total_weighted_emissions: float,
) -> MergedCountryData:
    node_percentage = (figures.node_count / total_nodes) * 100
    if figures.intensity is not None and total_weighted_emissions > 0:
        emissions_percentage = (figures.weighted_emissions / total_weighted_emissions) * 100
    else:
        emissions_percentage = None
    if emissions_percentage is not None and node_percentage > 0:
        relative_emissions = emissions_percentage / node_percentage
    else:
        relative_emissions = None
    return MergedCountryData(
        country_code2=figures.country_code2,
        country_code3=figures.country_code3,
        country_name=country_name(figures.country_code2),
        flag_emoji=country_flag(figures.country_code2),
        node_count=figures.node_count,
        node_percentage=node_percentage,
        carbon_intensity=figures.intensity,
        emissions_percentage=emissions_percentage,
        relative_emissions=relative_emissions,
    )


def merge_country_emissions(
    nodes_by_country: Sequence[CountryNodeCount],
    carbon_countries: Sequence[CountryIntensity],
) -> list[MergedCountryData]:
    """Join node distribution and carbon intensity, one row per node country.

    Rows keep the order of ``nodes_by_country``. An empty node distribution
    (or one summing to zero nodes) produces an empty list.
    """
    intensity_by_code = {country.code: country.intensity for country in carbon_countries}

    figures = _raw_figures(nodes_by_country, intensity_by_code)

    total_nodes = sum(entry.node_count for entry in figures)
    total_weighted_emissions = sum(entry.weighted_emissions for entry in figures)
    if total_nodes <= 0:
        return []

    merged = [_to_merged(entry, total_nodes, total_weighted_emissions) for entry in figures]
    uncovered = [entry.country_code2 for entry in merged if entry.carbon_intensity is None]
    if uncovered:
        LOGGER.info(
            "No carbon intensity for %d of %d countries: %s",
            len(uncovered),
            len(merged),
            ", ".join(uncovered),
        )
    return merged


def country_emissions_frame(merged: Sequence[MergedCountryData]) -> pd.DataFrame:
    """Tabulate merged rows; missing emissions figures become NaN."""
    frame = pd.DataFrame([asdict(entry) for entry in merged], columns=FRAME_COLUMNS)
    numeric = ["carbon_intensity", "emissions_percentage", "relative_emissions"]
    frame[numeric] = frame[numeric].astype(float)
    return frame
