"""Helpers to locate and load ``config.yaml`` and resolve its relative paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]

CONFIG_ENV_VAR = "ALGO_ENERGY_CONFIG_PATH"
CONFIG_ROOT_KEY = "_config_root"
DEFAULT_OUTPUT_DIRECTORY = "data"


def get_config_path(default: Path | None = None) -> Path:
    """Return the configuration path, honouring ALGO_ENERGY_CONFIG_PATH when set."""

    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    if default is not None:
        return default.resolve()
    return (REPO_ROOT / "config.yaml").resolve()


def set_config_root(config: MutableMapping[str, object], root: Path) -> None:
    """Annotate a config mapping with its filesystem root for relative paths."""

    if not isinstance(config, MutableMapping):
        return
    config[CONFIG_ROOT_KEY] = str(root.resolve())


def get_config_root(config: Mapping[str, object], fallback: Path | None = None) -> Path:
    """Return the base directory that relative paths should resolve against."""

    if isinstance(config, Mapping):
        value = config.get(CONFIG_ROOT_KEY)
        if isinstance(value, str):
            try:
                return Path(value).expanduser().resolve()
            except OSError:
                pass
    return (fallback or REPO_ROOT).resolve()


def load_config(path: Path | str | None = None) -> dict[str, Any]:
    """Read ``config.yaml``; a missing file yields an empty configuration."""

    config_path = Path(path) if path is not None else get_config_path()
    config: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open(encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, Mapping):
            raise ValueError(f"Configuration root in {config_path} must be a mapping.")
        config = dict(loaded)
    set_config_root(config, config_path.parent)
    return config


def get_section(config: Mapping[str, object] | None, name: str) -> Mapping[str, Any]:
    """Return a top-level section, or an empty mapping when it is absent."""

    if not isinstance(config, Mapping):
        return {}
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ValueError(f"'{name}' section of config.yaml must be a mapping.")
    return section


def resolve_output_directory(
    config: Mapping[str, object] | None,
    override: Path | str | None = None,
) -> Path:
    """Directory holding the ``latest/`` snapshots and ``metadata.json``."""

    if override is not None:
        return Path(override).expanduser().resolve()
    fetcher_cfg = get_section(config, "fetcher")
    path = Path(str(fetcher_cfg.get("output_directory", DEFAULT_OUTPUT_DIRECTORY)))
    if path.is_absolute():
        return path
    return (get_config_root(config or {}) / path).resolve()
