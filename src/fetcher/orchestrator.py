"""Run one fetch cycle: query every source concurrently and persist what succeeded.

Sources settle independently (``asyncio.gather(..., return_exceptions=True)``).
A failed source keeps its previous ``latest/`` snapshot and is reported as
stale in ``metadata.json``. Node data with anomalies is not persisted either.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping

import aiohttp

from telemetry import NodeDataResult

from .clients import (
    FetchSettings,
    fetch_carbon_intensity,
    fetch_node_data,
    fetch_nodes_by_country,
)
from .schemas import DataFreshness, ErrorLog, Metadata
from .writers import (
    CARBON_INTENSITY_FILE,
    GEOGRAPHICAL_FILE,
    METADATA_FILE,
    NODES_FILE,
    read_existing_data,
    write_json_file,
    write_latest_data,
)

LOGGER = logging.getLogger("fetcher")

METADATA_VERSION = "1.0.0"
NODES_ANOMALY_SOURCE = "nodes-anomaly"

FetchFn = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class Source:
    key: str
    label: str
    filename: str


NODES = Source("nodes", "nodes", NODES_FILE)
CARBON_INTENSITY = Source("carbonIntensity", "Carbon intensity", CARBON_INTENSITY_FILE)
GEOGRAPHICAL = Source("geographical", "Geographical", GEOGRAPHICAL_FILE)
SOURCES = (NODES, CARBON_INTENSITY, GEOGRAPHICAL)


def utc_timestamp() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_fetchers(
    session: aiohttp.ClientSession,
    settings: FetchSettings,
) -> dict[str, FetchFn]:
    return {
        NODES.key: lambda ts: fetch_node_data(session, settings, ts),
        CARBON_INTENSITY.key: lambda ts: fetch_carbon_intensity(session, settings, ts),
        GEOGRAPHICAL.key: lambda ts: fetch_nodes_by_country(session, settings, ts),
    }


class _CycleState:
    def __init__(self, output_dir: Path, timestamp: str) -> None:
        self.output_dir = output_dir
        self.timestamp = timestamp
        self.errors: list[ErrorLog] = []
        self.freshness: dict[str, DataFreshness] = {}

    def fresh(self, source: Source) -> None:
        self.freshness[source.key] = DataFreshness(
            lastSuccessfulFetch=self.timestamp, isStale=False
        )

    def stale(self, source: Source, message: str) -> None:
        self.freshness[source.key] = DataFreshness(
            lastSuccessfulFetch=None, isStale=True, error=message
        )

    def record_error(self, source_name: str, message: str) -> None:
        self.errors.append(
            ErrorLog(source=source_name, message=message, timestamp=self.timestamp)
        )

    def reject(self, source: Source, reason: BaseException) -> None:
        message = str(reason) or type(reason).__name__
        LOGGER.error("Failed to fetch %s data: %s", source.label, message)
        self.record_error(source.label, message)
        self.stale(source, message)
        if read_existing_data(source.filename, self.output_dir) is not None:
            LOGGER.warning("Keeping previous %s data", source.label)

    def persist(self, source: Source, payload: Any) -> None:
        try:
            write_latest_data(source.filename, payload, self.output_dir)
        except (OSError, TypeError, ValueError) as exc:
            self.reject(source, exc)
            return
        LOGGER.info("%s data fetched and saved", source.label)
        self.fresh(source)


def _process_nodes(state: _CycleState, result: Any) -> None:
    if isinstance(result, BaseException):
        state.reject(NODES, result)
        return
    if not isinstance(result, NodeDataResult):
        raise TypeError(f"nodes fetcher returned {type(result).__name__}, expected NodeDataResult")
    if result.has_anomalies:
        LOGGER.warning(
            "Skipping %s write due to %d anomaly(s):", NODES.filename, len(result.anomalies)
        )
        for anomaly in result.anomalies:
            LOGGER.warning("  - %s", anomaly)
        message = "; ".join(result.anomalies)
        state.record_error(NODES_ANOMALY_SOURCE, message)
        state.stale(NODES, f"Anomalous data skipped: {message}")
        return
    state.persist(NODES, result.data.to_dict())


def _process_result(state: _CycleState, source: Source, result: Any) -> None:
    if isinstance(result, BaseException):
        state.reject(source, result)
        return
    state.persist(source, result.to_dict())


async def _run_cycle(
    output_dir: Path,
    timestamp: str,
    fetchers: Mapping[str, FetchFn],
) -> Metadata:
    missing = [source.key for source in SOURCES if source.key not in fetchers]
    if missing:
        raise KeyError(f"No fetcher configured for sources: {missing}")

    results = await asyncio.gather(
        *(fetchers[source.key](timestamp) for source in SOURCES),
        return_exceptions=True,
    )
    state = _CycleState(output_dir, timestamp)
    by_source = dict(zip(SOURCES, results))
    _process_nodes(state, by_source[NODES])
    _process_result(state, CARBON_INTENSITY, by_source[CARBON_INTENSITY])
    _process_result(state, GEOGRAPHICAL, by_source[GEOGRAPHICAL])

    metadata = Metadata(
        lastUpdate=timestamp,
        dataFreshness={source.key: state.freshness[source.key] for source in SOURCES},
        errors=state.errors or None,
        version=METADATA_VERSION,
    )
    try:
        write_json_file(METADATA_FILE, metadata.to_dict(), output_dir)
    except OSError as exc:
        LOGGER.error("Failed to save metadata: %s", exc)
    return metadata


async def run_fetch_cycle(
    output_dir: Path | str,
    *,
    settings: FetchSettings | None = None,
    timestamp: str | None = None,
    fetchers: Mapping[str, FetchFn] | None = None,
) -> Metadata:
    """Fetch nodes, carbon intensity and geography, write snapshots and ``metadata.json``.

    ``fetchers`` maps source keys (``nodes``, ``carbonIntensity``,
    ``geographical``) to coroutine functions taking the cycle timestamp; when
    omitted the HTTP clients are used with a shared aiohttp session.
    """
    output_dir = Path(output_dir)
    timestamp = timestamp or utc_timestamp()
    started = time.monotonic()
    LOGGER.info("Starting Algorand energy data fetch")

    if fetchers is None:
        async with aiohttp.ClientSession() as session:
            metadata = await _run_cycle(
                output_dir, timestamp, default_fetchers(session, settings or FetchSettings())
            )
    else:
        metadata = await _run_cycle(output_dir, timestamp, fetchers)

    LOGGER.info("Data fetch completed in %.2fs", time.monotonic() - started)
    if metadata.errors:
        LOGGER.warning("%d error(s) occurred during fetch", len(metadata.errors))
    return metadata
