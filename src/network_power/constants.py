from __future__ import annotations

# "Proof of Stake Blockchain Efficiency Framework" (Algorand Foundation, 2024).
AVERAGE_NODE_POWER_W = 40.0

# 365.25 days x 24 hours.
HOURS_PER_YEAR = 8766.0

# Ledger held by a standard participation node.
LEDGER_SIZE_GB = 20.0

# Ledger held by archival nodes, relays and indexers.
ARCHIVE_INDEXER_SIZE_GB = 4700.0

# kgCO2e per GB of SSD storage per year.
AVG_SSD_ANNUALIZED_EMISSIONS_INTENSITY = 0.02

WATTS_PER_KILOWATT = 1000.0
KG_PER_TONNE = 1000.0
GRAMS_PER_KG = 1000.0
