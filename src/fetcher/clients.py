"""aiohttp clients for the Nodely Grafana query API and the OWID indicator API.

Every client takes a shared ``aiohttp.ClientSession``, validates the payload
with the models in :mod:`fetcher.schemas` and returns the domain records built
by the telemetry and carbon-intensity packages. Errors propagate to the caller;
the orchestrator decides what a failed source means for the cycle.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, fields
from typing import Any, Mapping

import aiohttp

from carbon_intensity import CarbonIntensityData, build_carbon_intensity_data
from telemetry import (
    ARCHIVER_NODES,
    RELAY_NODES,
    GeographicalData,
    NodeDataResult,
    aggregate_node_data,
    build_geographical_data,
    parse_grafana_response,
)

from .schemas import GrafanaResponse, OwidDataResponse, OwidMetadataResponse

LOGGER = logging.getLogger("fetcher")

ONE_YEAR_MS = 365 * 24 * 60 * 60 * 1000
ONE_DAY_MS = 24 * 60 * 60 * 1000
SIX_HOURS_MS = 6 * 60 * 60 * 1000
TWO_MINUTES_MS = 2 * 60 * 1000

CLICKHOUSE_PLUGIN_ID = "grafana-clickhouse-datasource"
CLICKHOUSE_PLUGIN_VERSION = "4.8.2"
GRAFANA_REQUEST_ID = "SQR100"
GRAFANA_DEFAULT_MAX_DATA_POINTS = 751
GRAFANA_FORMAT_TABLE = 1
GRAFANA_FORMAT_LOGS = 2

NODE_COUNT_SQL = "select * from nodely.v_node_cnt_daily where ts < toDate(now())"

NODE_TYPE_DISTRIBUTION_SQL = f"""with
  (select * from mainnet.v_nodes_cnt) as nodes
  ,(select count() from mainnet.account where is_online) as validatingNodes
select
'nodes' as series
, nodes - validatingNodes - {RELAY_NODES} - {ARCHIVER_NODES} as apiNodes
, validatingNodes as validators
, {RELAY_NODES} as relays
, {ARCHIVER_NODES} as archivers
SETTINGS use_query_cache=true,query_cache_ttl=300,query_cache_nondeterministic_function_handling = 'save' ;"""

NODES_PER_COUNTRY_SQL = (
    "select c, ftne as nodes from nodely.v_nodes_per_country_24h order by nodes desc"
)


@dataclass(frozen=True)
class FetchSettings:
    nodely_query_url: str = "https://g.nodely.io/api/ds/query"
    nodely_origin: str = "https://g.nodely.io"
    nodes_datasource_uid: str = "fc25640e-50ee-4e04-aad6-2a5336c09eaf"
    node_types_datasource_uid: str = "ef3cbeeb-9fbe-48b0-a068-1cc8cfb61461"
    owid_data_url: str = "https://api.ourworldindata.org/v1/indicators/1077602.data.json"
    owid_metadata_url: str = (
        "https://api.ourworldindata.org/v1/indicators/1077602.metadata.json"
    )
    timeout_seconds: float = 30.0

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any] | None) -> "FetchSettings":
        """Read settings from the ``fetcher`` section (``nodely``/``owid`` subsections)."""
        if not cfg:
            return cls()
        nodely = cfg.get("nodely") or {}
        owid = cfg.get("owid") or {}
        candidates = {
            "nodely_query_url": nodely.get("query_url"),
            "nodely_origin": nodely.get("origin"),
            "nodes_datasource_uid": nodely.get("nodes_datasource_uid"),
            "node_types_datasource_uid": nodely.get("node_types_datasource_uid"),
            "owid_data_url": owid.get("data_url"),
            "owid_metadata_url": owid.get("metadata_url"),
            "timeout_seconds": cfg.get("timeout_seconds"),
        }
        values: dict[str, Any] = {}
        for field in fields(cls):
            raw = candidates.get(field.name)
            if raw is None:
                continue
            values[field.name] = float(raw) if field.name == "timeout_seconds" else str(raw)
        if values.get("timeout_seconds", 1.0) <= 0:
            raise ValueError("fetcher.timeout_seconds must be positive.")
        return cls(**values)


async def _request_json(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    settings: FetchSettings,
    **kwargs: Any,
) -> Any:
    timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
    async with session.request(method, url, timeout=timeout, **kwargs) as resp:
        resp.raise_for_status()
        return await resp.json(content_type=None)


async def query_grafana(
    session: aiohttp.ClientSession,
    settings: FetchSettings,
    *,
    datasource_uid: str,
    sql: str,
    time_range_ms: int,
    query_format: int,
    query_type: str,
    interval_ms: int,
    max_data_points: int = GRAFANA_DEFAULT_MAX_DATA_POINTS,
    now_ms: int | None = None,
) -> dict[str, Any]:
    """POST a single ClickHouse SQL query (refId ``A``) and return the validated payload."""
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    body = {
        "queries": [
            {
                "datasource": {"type": CLICKHOUSE_PLUGIN_ID, "uid": datasource_uid},
                "refId": "A",
                "editorType": "sql",
                "pluginVersion": CLICKHOUSE_PLUGIN_VERSION,
                "format": query_format,
                "queryType": query_type,
                "rawSql": sql,
                "intervalMs": interval_ms,
                "maxDataPoints": max_data_points,
            }
        ],
        "from": str(now_ms - time_range_ms),
        "to": str(now_ms),
    }
    headers = {
        "accept": "application/json, text/plain, */*",
        "content-type": "application/json",
        "origin": settings.nodely_origin,
        "x-grafana-org-id": "1",
        "x-datasource-uid": datasource_uid,
        "x-plugin-id": CLICKHOUSE_PLUGIN_ID,
    }
    payload = await _request_json(
        session,
        "POST",
        settings.nodely_query_url,
        settings,
        params={"ds_type": CLICKHOUSE_PLUGIN_ID, "requestId": GRAFANA_REQUEST_ID},
        json=body,
        headers=headers,
    )
    return GrafanaResponse.model_validate(payload).model_dump(by_alias=True)


async def fetch_node_count(session: aiohttp.ClientSession, settings: FetchSettings) -> dict:
    return await query_grafana(
        session,
        settings,
        datasource_uid=settings.nodes_datasource_uid,
        sql=NODE_COUNT_SQL,
        time_range_ms=ONE_YEAR_MS,
        query_format=GRAFANA_FORMAT_LOGS,
        query_type="logs",
        interval_ms=ONE_DAY_MS,
    )


async def fetch_node_type_distribution(
    session: aiohttp.ClientSession, settings: FetchSettings
) -> dict:
    return await query_grafana(
        session,
        settings,
        datasource_uid=settings.node_types_datasource_uid,
        sql=NODE_TYPE_DISTRIBUTION_SQL,
        time_range_ms=SIX_HOURS_MS,
        query_format=GRAFANA_FORMAT_TABLE,
        query_type="table",
        interval_ms=TWO_MINUTES_MS,
    )


async def fetch_node_data(
    session: aiohttp.ClientSession,
    settings: FetchSettings,
    timestamp: str,
) -> NodeDataResult:
    """Fetch node history and node-type distribution concurrently and aggregate them."""
    count_response, type_response = await asyncio.gather(
        fetch_node_count(session, settings),
        fetch_node_type_distribution(session, settings),
    )
    return aggregate_node_data(
        parse_grafana_response(type_response),
        parse_grafana_response(count_response),
        timestamp,
    )


async def fetch_nodes_by_country(
    session: aiohttp.ClientSession,
    settings: FetchSettings,
    timestamp: str,
) -> GeographicalData:
    response = await query_grafana(
        session,
        settings,
        datasource_uid=settings.nodes_datasource_uid,
        sql=NODES_PER_COUNTRY_SQL,
        time_range_ms=ONE_DAY_MS,
        query_format=GRAFANA_FORMAT_TABLE,
        query_type="table",
        interval_ms=ONE_DAY_MS,
        max_data_points=200,
    )
    return build_geographical_data(parse_grafana_response(response), timestamp)


async def fetch_owid_data(session: aiohttp.ClientSession, settings: FetchSettings) -> dict:
    payload = await _request_json(
        session, "GET", settings.owid_data_url, settings, headers={"Accept": "application/json"}
    )
    return OwidDataResponse.model_validate(payload).model_dump()


async def fetch_owid_metadata(session: aiohttp.ClientSession, settings: FetchSettings) -> dict:
    payload = await _request_json(
        session,
        "GET",
        settings.owid_metadata_url,
        settings,
        headers={"Accept": "application/json"},
    )
    return OwidMetadataResponse.model_validate(payload).model_dump()


async def fetch_carbon_intensity(
    session: aiohttp.ClientSession,
    settings: FetchSettings,
    timestamp: str,
) -> CarbonIntensityData:
    """Fetch OWID data and its entity metadata, then resolve per-country intensity."""
    data, metadata = await asyncio.gather(
        fetch_owid_data(session, settings),
        fetch_owid_metadata(session, settings),
    )
    return build_carbon_intensity_data(data, metadata, timestamp)
