"""Recompute country emissions and network power figures from stored snapshots."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import _path_setup  # noqa: F401

from config_paths import get_config_path, get_section, load_config, resolve_output_directory
from country_emissions import country_emissions_frame
from fetcher import compute_dashboard_metrics
from network_power import PowerConstants

LOGGER = logging.getLogger("fetcher.metrics")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Derive emissions metrics from latest snapshots")
    parser.add_argument("--config", help="Path to config.yaml (default: ALGO_ENERGY_CONFIG_PATH)")
    parser.add_argument("--output-dir", help="Override fetcher.output_directory")
    parser.add_argument("--csv", help="Also write the merged country table to this CSV file")
    args = parser.parse_args(argv)

    config_path = Path(args.config) if args.config else get_config_path()
    config = load_config(config_path)
    output_dir = resolve_output_directory(config, args.output_dir)
    constants = PowerConstants.from_config(get_section(config, "network_power"))

    metrics = compute_dashboard_metrics(output_dir, constants)
    if metrics is None:
        return 1

    frame = country_emissions_frame(metrics.countries)
    LOGGER.info(
        "Country emissions:\n%s",
        frame.drop(columns=["flag_emoji"]).head(20).to_string(index=False),
    )
    power_lines = [f"  {key}: {value:,.2f}" for key, value in metrics.power.to_dict().items()]
    LOGGER.info("Network power:\n%s", "\n".join(power_lines))
    if args.csv:
        csv_path = Path(args.csv)
        csv_path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(csv_path, index=False)
        LOGGER.info("Country table written to %s", csv_path)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    sys.exit(main())
