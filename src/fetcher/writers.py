from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

LOGGER = logging.getLogger("fetcher")

LATEST_DIRECTORY = "latest"

NODES_FILE = "nodes.json"
CARBON_INTENSITY_FILE = "carbon-intensity.json"
GEOGRAPHICAL_FILE = "geographical.json"
COUNTRY_EMISSIONS_FILE = "country-emissions.json"
NETWORK_POWER_FILE = "network-power.json"
METADATA_FILE = "metadata.json"

TMP_SUFFIX = ".tmp"


def write_json_file(filename: str, data: Any, output_dir: Path) -> Path:
    """Write ``data`` as indented JSON to ``<output_dir>/<filename>``.

    The payload goes to a sibling ``.tmp`` file first and replaces the target
    only once fully written, so a failed write leaves the previous file intact.
    """
    dest_dir = Path(output_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    path = dest_dir / filename
    tmp_path = path.with_name(path.name + TMP_SUFFIX)
    try:
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, ensure_ascii=False)
            fh.write("\n")
        tmp_path.replace(path)
    except (OSError, TypeError, ValueError):
        LOGGER.error("Failed to write %s", path)
        tmp_path.unlink(missing_ok=True)
        raise
    LOGGER.info("Written: %s", path)
    return path


def write_latest_data(filename: str, data: Any, output_dir: Path) -> Path:
    """Write a snapshot to the ``latest/`` subdirectory of ``output_dir``."""
    return write_json_file(filename, data, Path(output_dir) / LATEST_DIRECTORY)


def read_existing_data(filename: str, output_dir: Path) -> Any | None:
    """Return the stored ``latest/`` snapshot, or ``None`` if it is missing or unreadable."""
    path = Path(output_dir) / LATEST_DIRECTORY / filename
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, ValueError):
        return None
