"""Configuration loading for the tab manager runtime."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from world_model.tab_manager_state import TabManagerState

DEFAULT_CONFIG: dict[str, Any] = {
    "store": {"folder_id": None, "archive_folder_id": None},
    "logging": {"level": "WARNING"},
}


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_effective_config(root: Path) -> dict[str, Any]:
    """Built-in defaults, then config/default.yaml, then config/local.yaml."""
    config_dir = root / "config"
    merged = merge_dicts(DEFAULT_CONFIG, load_yaml(config_dir / "default.yaml"))
    return merge_dicts(merged, load_yaml(config_dir / "local.yaml"))


def _optional_id(value: Any) -> str | None:
    return None if value is None else str(value)


def build_initial_state(config: dict[str, Any]) -> TabManagerState:
    """Create the empty store for a freshly started process."""
    store_cfg = config.get("store", {}) or {}
    return TabManagerState.create(
        folder_id=_optional_id(store_cfg.get("folder_id")),
        archive_folder_id=_optional_id(store_cfg.get("archive_folder_id")),
    )
