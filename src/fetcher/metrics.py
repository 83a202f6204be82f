"""Derive country emissions and network power figures from stored snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from carbon_intensity import CarbonIntensityData
from country_emissions import MergedCountryData, merge_country_emissions
from network_power import (
    DEFAULT_CONSTANTS,
    NetworkPowerResults,
    PowerConstants,
    compute_network_power,
)
from telemetry import GeographicalData, NodeData

from .writers import (
    CARBON_INTENSITY_FILE,
    COUNTRY_EMISSIONS_FILE,
    GEOGRAPHICAL_FILE,
    NETWORK_POWER_FILE,
    NODES_FILE,
    read_existing_data,
    write_latest_data,
)

LOGGER = logging.getLogger("fetcher")


@dataclass(frozen=True)
class DashboardMetrics:
    countries: list[MergedCountryData]
    power: NetworkPowerResults


def compute_dashboard_metrics(
    output_dir: Path | str,
    constants: PowerConstants = DEFAULT_CONSTANTS,
    *,
    write: bool = True,
) -> DashboardMetrics | None:
    """Merge the latest snapshots and write ``country-emissions.json`` and ``network-power.json``.

    Returns ``None`` when any of the node, carbon or geography snapshots is missing.
    """
    output_dir = Path(output_dir)
    snapshots = {
        name: read_existing_data(name, output_dir)
        for name in (NODES_FILE, CARBON_INTENSITY_FILE, GEOGRAPHICAL_FILE)
    }
    missing = [name for name, payload in snapshots.items() if payload is None]
    if missing:
        LOGGER.warning("Cannot derive metrics; missing snapshots: %s", ", ".join(missing))
        return None

    node_data = NodeData.from_dict(snapshots[NODES_FILE])
    carbon = CarbonIntensityData.from_dict(snapshots[CARBON_INTENSITY_FILE])
    geography = GeographicalData.from_dict(snapshots[GEOGRAPHICAL_FILE])

    countries = merge_country_emissions(geography.nodes_by_country, carbon.countries)
    power = compute_network_power(node_data, countries, constants)
    LOGGER.info(
        "Derived metrics for %d countries; mainnet %.1f kW, %.2f t CO2e/year",
        len(countries),
        power.mainnet_power_kw,
        power.annualized_mainnet_ghg_emissions,
    )

    if write:
        write_latest_data(
            COUNTRY_EMISSIONS_FILE,
            {
                "timestamp": geography.timestamp,
                "countries": [country.to_dict() for country in countries],
            },
            output_dir,
        )
        write_latest_data(
            NETWORK_POWER_FILE,
            {"timestamp": node_data.timestamp, **power.to_dict()},
            output_dir,
        )
    return DashboardMetrics(countries=countries, power=power)
