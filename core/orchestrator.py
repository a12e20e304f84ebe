"""Top-level runtime wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.event_bus import EventBus
from core.policy_runtime import build_initial_state, load_effective_config
from core.state_manager import StateManager
from world_model.host_snapshots import HostSnapshot
from world_model.tab_window import make_folder_tab_window


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    event_bus: EventBus
    state_manager: StateManager

    def load_snapshot(self, snapshot: HostSnapshot) -> None:
        """Register saved window folders, then sync the live window list."""
        saved_windows = [
            make_folder_tab_window(folder) for folder in snapshot.folders if folder.is_folder
        ]
        self.state_manager.apply(lambda st: st.register_tab_windows(saved_windows))
        self.state_manager.apply(lambda st: st.sync_window_list(snapshot.windows))


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root)
        level = str(config.get("logging", {}).get("level", "WARNING")).upper()
        logging.getLogger("tm").setLevel(level)

        event_bus = EventBus()
        state_manager = StateManager(state=build_initial_state(config))
        state_manager.bind(event_bus)
        return RuntimeBundle(config=config, event_bus=event_bus, state_manager=state_manager)
