from __future__ import annotations

# Infrastructure nodes run by the Algorand Foundation. The upstream node-type
# query reports them as literals, so they double as fallbacks.
RELAY_NODES = 78
ARCHIVER_NODES = 19

GRAFANA_REF_ID = "A"

NODE_TYPE_FIELDS: dict[str, str] = {
    "api_nodes": "apiNodes",
    "validators": "validators",
    "relays": "relays",
    "archivers": "archivers",
}

HISTORY_TIMESTAMP_FIELD = "ts"
HISTORY_COUNT_FIELD = "node_cnt"

COUNTRY_CODE_FIELD = "c"
COUNTRY_COUNT_FIELD = "nodes"
