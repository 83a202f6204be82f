"""Estimate annual power, energy and GHG emissions of the Algorand network.

Power draw assumes every node consumes ``AVERAGE_NODE_POWER_W``. Emissions
combine the energy figure with the node-weighted grid intensity of the host
countries and add an embodied-storage term for the ledger copies held by
each node. Results are annual, in kW, kWh and tonnes CO2e.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping, Sequence

from country_emissions import MergedCountryData
from telemetry import NodeData

from .constants import (
    ARCHIVE_INDEXER_SIZE_GB,
    AVERAGE_NODE_POWER_W,
    AVG_SSD_ANNUALIZED_EMISSIONS_INTENSITY,
    GRAMS_PER_KG,
    HOURS_PER_YEAR,
    KG_PER_TONNE,
    LEDGER_SIZE_GB,
    WATTS_PER_KILOWATT,
)

LOGGER = logging.getLogger("network_power")


@dataclass(frozen=True)
class PowerConstants:
    average_node_power_w: float = AVERAGE_NODE_POWER_W
    hours_per_year: float = HOURS_PER_YEAR
    ledger_size_gb: float = LEDGER_SIZE_GB
    archive_indexer_size_gb: float = ARCHIVE_INDEXER_SIZE_GB
    storage_emissions_kg_per_gb_year: float = AVG_SSD_ANNUALIZED_EMISSIONS_INTENSITY

    @property
    def average_node_power_kw(self) -> float:
        return self.average_node_power_w / WATTS_PER_KILOWATT

    @classmethod
    def from_config(cls, cfg: Mapping[str, object] | None) -> "PowerConstants":
        """Build constants from a ``network_power`` config section."""
        if not cfg:
            return cls()
        known = {field.name for field in fields(cls)}
        unknown = sorted(str(key) for key in cfg if key not in known)
        if unknown:
            raise KeyError(f"Unknown network_power settings: {unknown}")
        values = {}
        for key, value in cfg.items():
            number = float(value)
            if number < 0:
                raise ValueError(f"network_power.{key} must be non-negative, got {value!r}.")
            values[key] = number
        return cls(**values)


DEFAULT_CONSTANTS = PowerConstants()


@dataclass(frozen=True)
class NetworkPowerResults:
    mainnet_power_kw: float
    validator_power_kw: float
    node_energy_kwh: float
    mainnet_energy_kwh: float
    validator_energy_kwh: float
    weighted_avg_emissions_intensity: float
    annualized_mainnet_ghg_emissions: float
    annualized_validation_ghg_emissions: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "mainnetPowerKW": self.mainnet_power_kw,
            "validatorPowerKW": self.validator_power_kw,
            "nodeEnergyKWh": self.node_energy_kwh,
            "mainnetEnergyKWh": self.mainnet_energy_kwh,
            "validatorEnergyKWh": self.validator_energy_kwh,
            "weightedAvgEmissionsIntensity": self.weighted_avg_emissions_intensity,
            "annualizedMainnetGHGEmissions": self.annualized_mainnet_ghg_emissions,
            "annualizedValidationGHGEmissions": self.annualized_validation_ghg_emissions,
        }


def weighted_average_intensity(merged: Sequence[MergedCountryData]) -> float:
    """Node-share weighted grid intensity in gCO2e/kWh.

    Countries without intensity data add nothing while their node share stays
    in the weights, so partial coverage understates the average.
    """
    total = 0.0
    for country in merged:
        if country.carbon_intensity is not None:
            total += (country.node_percentage / 100) * country.carbon_intensity
    return total


def _annual_ghg_tonnes(
    energy_kwh: float,
    intensity_g_per_kwh: float,
    ledger_gb: float,
    constants: PowerConstants,
) -> float:
    energy_kg = (energy_kwh * intensity_g_per_kwh) / GRAMS_PER_KG
    storage_kg = ledger_gb * constants.storage_emissions_kg_per_gb_year
    return (energy_kg + storage_kg) / KG_PER_TONNE


def compute_network_power(
    node_data: NodeData,
    merged: Sequence[MergedCountryData],
    constants: PowerConstants = DEFAULT_CONSTANTS,
) -> NetworkPowerResults:
    """Derive power, energy and annual GHG figures for mainnet and validators."""
    node_power_kw = constants.average_node_power_kw
    mainnet_power_kw = node_data.total_nodes * node_power_kw
    validator_power_kw = node_data.validators * node_power_kw

    node_energy_kwh = node_power_kw * constants.hours_per_year
    mainnet_energy_kwh = mainnet_power_kw * constants.hours_per_year
    validator_energy_kwh = validator_power_kw * constants.hours_per_year

    intensity = weighted_average_intensity(merged)

    # Relays share the archival ledger size with archivers.
    mainnet_ledger_gb = (
        constants.ledger_size_gb * node_data.total_nodes
        + (node_data.archivers + node_data.relays) * constants.archive_indexer_size_gb
    )
    validator_ledger_gb = constants.ledger_size_gb * node_data.validators

    results = NetworkPowerResults(
        mainnet_power_kw=mainnet_power_kw,
        validator_power_kw=validator_power_kw,
        node_energy_kwh=node_energy_kwh,
        mainnet_energy_kwh=mainnet_energy_kwh,
        validator_energy_kwh=validator_energy_kwh,
        weighted_avg_emissions_intensity=intensity,
        annualized_mainnet_ghg_emissions=_annual_ghg_tonnes(
            mainnet_energy_kwh, intensity, mainnet_ledger_gb, constants
        ),
        annualized_validation_ghg_emissions=_annual_ghg_tonnes(
            validator_energy_kwh, intensity, validator_ledger_gb, constants
        ),
    )
    LOGGER.debug("Network power results: %s", asdict(results))
    return results
