"""Fetch the latest node telemetry and carbon intensity data and store snapshots.

Snapshots land in ``<output>/latest/`` and a freshness record in
``<output>/metadata.json``. Unless ``--skip-metrics`` is given, the derived
country emissions and network power figures are refreshed afterwards. The
script exits with status 1 when any source failed or was skipped.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import _path_setup  # noqa: F401

from config_paths import get_config_path, get_section, load_config, resolve_output_directory
from fetcher import FetchSettings, compute_dashboard_metrics, run_fetch_cycle
from network_power import PowerConstants

LOGGER = logging.getLogger("fetcher.run")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch Algorand node and carbon intensity data")
    parser.add_argument("--config", help="Path to config.yaml (default: ALGO_ENERGY_CONFIG_PATH)")
    parser.add_argument("--output-dir", help="Override fetcher.output_directory")
    parser.add_argument(
        "--skip-metrics",
        action="store_true",
        help="Do not recompute country-emissions.json and network-power.json",
    )
    args = parser.parse_args(argv)

    config_path = Path(args.config) if args.config else get_config_path()
    config = load_config(config_path)
    output_dir = resolve_output_directory(config, args.output_dir)
    settings = FetchSettings.from_config(get_section(config, "fetcher"))
    LOGGER.info("Writing data to %s", output_dir)

    metadata = asyncio.run(run_fetch_cycle(output_dir, settings=settings))

    if not args.skip_metrics:
        constants = PowerConstants.from_config(get_section(config, "network_power"))
        compute_dashboard_metrics(output_dir, constants)

    return 1 if metadata.errors else 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    sys.exit(main())
