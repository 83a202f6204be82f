from .constants import (
    ARCHIVE_INDEXER_SIZE_GB,
    AVERAGE_NODE_POWER_W,
    AVG_SSD_ANNUALIZED_EMISSIONS_INTENSITY,
    HOURS_PER_YEAR,
    LEDGER_SIZE_GB,
)
from .estimator import (
    DEFAULT_CONSTANTS,
    NetworkPowerResults,
    PowerConstants,
    compute_network_power,
    weighted_average_intensity,
)

__all__ = [
    "ARCHIVE_INDEXER_SIZE_GB",
    "AVERAGE_NODE_POWER_W",
    "AVG_SSD_ANNUALIZED_EMISSIONS_INTENSITY",
    "DEFAULT_CONSTANTS",
    "HOURS_PER_YEAR",
    "LEDGER_SIZE_GB",
    "NetworkPowerResults",
    "PowerConstants",
    "compute_network_power",
    "weighted_average_intensity",
]
