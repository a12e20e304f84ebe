"""Typer command handlers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from core.orchestrator import Orchestrator, RuntimeBundle
from world_model.host_snapshots import HostSnapshot, load_host_snapshot
from world_model.tab_window import TabWindow


def _runtime(root: Path | None = None) -> RuntimeBundle:
    bundle = Orchestrator(root=root).build()
    return bundle


def _load_snapshot(path: Path) -> HostSnapshot:
    try:
        return load_host_snapshot(path)
    except FileNotFoundError:
        typer.echo(f"Snapshot file not found: {path}", err=True)
        raise typer.Exit(code=1)
    except (json.JSONDecodeError, ValidationError) as exc:
        typer.echo(f"Invalid snapshot {path}: {exc}", err=True)
        raise typer.Exit(code=1)


def _loaded_runtime(snapshot_path: Path, root: Path | None = None) -> RuntimeBundle:
    bundle = _runtime(root)
    bundle.load_snapshot(_load_snapshot(snapshot_path))
    return bundle


def _window_summary(tab_window: TabWindow) -> dict[str, Any]:
    return {
        "title": tab_window.title,
        "status": tab_window.status.value,
        "open_window_id": tab_window.open_window_id,
        "saved_folder_id": tab_window.saved_folder_id,
        "window_type": tab_window.window_type,
        "open_tabs": tab_window.open_tab_count,
        "tabs": len(tab_window.tab_items),
    }


def sync(snapshot_path: Path, root: Path | None = None) -> None:
    """Sync a host snapshot and print the resulting state summary."""
    state = _loaded_runtime(snapshot_path, root).state_manager.state
    data = {
        "open_windows": state.count_open_windows(),
        "saved_windows": state.count_saved_windows(),
        "open_tabs": state.count_open_tabs(),
        "current_window_id": state.current_window_id,
        "windows": [_window_summary(w) for w in state.get_all()],
    }
    typer.echo(json.dumps(data, indent=2))


def windows_list(snapshot_path: Path, window_type: str | None = None, root: Path | None = None) -> None:
    """Print open windows, optionally filtered by window type."""
    state = _loaded_runtime(snapshot_path, root).state_manager.state
    selected = state.get_tab_windows_by_type(window_type) if window_type else state.get_open()
    typer.echo(json.dumps([_window_summary(w) for w in selected], indent=2))


def config_show(root: Path | None = None) -> None:
    """Print effective config."""
    typer.echo(json.dumps(_runtime(root).config, indent=2, default=str))
