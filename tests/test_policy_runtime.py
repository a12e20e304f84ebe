"""Configuration loading tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.orchestrator import Orchestrator
from core.policy_runtime import build_initial_state, load_effective_config, load_yaml, merge_dicts


def test_defaults_when_config_missing(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config["store"] == {"folder_id": None, "archive_folder_id": None}
    assert config["logging"]["level"] == "WARNING"


def test_local_overrides_default(tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text(
        "store:\n  folder_id: 12\n  archive_folder_id: 13\n", encoding="utf-8"
    )
    (config_dir / "local.yaml").write_text("store:\n  archive_folder_id: 99\n", encoding="utf-8")

    state = build_initial_state(load_effective_config(tmp_path))

    assert state.folder_id == "12"
    assert state.archive_folder_id == "99"
    assert state.get_all() == []


def test_non_mapping_yaml_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_yaml(path)


def test_merge_dicts_is_recursive() -> None:
    merged = merge_dicts({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"c": 3}})

    assert merged == {"a": {"b": 1, "c": 3}, "d": 1}


def test_orchestrator_builds_bound_runtime(tmp_path: Path) -> None:
    bundle = Orchestrator(root=tmp_path).build()

    bundle.event_bus.emit("window.created", {"window": {"id": 1, "tabs": [{"id": 10, "url": "https://a.example/"}]}})

    assert bundle.state_manager.state.count_open_tabs() == 1
