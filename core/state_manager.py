"""Holds the current tab manager state and advances it on host events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from core import event_bus as events
from core.event_bus import EventBus
from world_model.host_snapshots import LiveTab, LiveWindow
from world_model.tab_manager_state import TabManagerState
from world_model.tab_window import TabWindow

logger = logging.getLogger("tm.state_manager")

StateTransform = Callable[[TabManagerState], TabManagerState]


class StateManager:
    """Owns the latest state value; earlier values stay valid for their readers."""

    def __init__(self, state: TabManagerState, event_bus: EventBus | None = None) -> None:
        self.state = state
        self.event_bus = event_bus

    def apply(self, transform: StateTransform) -> TabManagerState:
        """Replace the current state with ``transform(state)`` and announce it."""
        previous = self.state
        self.state = transform(previous)
        if self.event_bus is not None:
            self.event_bus.emit(events.STATE_CHANGED, {"previous": previous, "state": self.state})
        return self.state

    def bind(self, bus: EventBus) -> None:
        """Subscribe host event handlers on ``bus``."""
        self.event_bus = bus
        bus.subscribe(events.WINDOW_CREATED, self.on_window_created)
        bus.subscribe(events.WINDOW_REMOVED, self.on_window_removed)
        bus.subscribe(events.WINDOW_FOCUS_CHANGED, self.on_window_focus_changed)
        bus.subscribe(events.WINDOWS_SNAPSHOT, self.on_windows_snapshot)
        bus.subscribe(events.TAB_CREATED, self.on_tab_updated)
        bus.subscribe(events.TAB_UPDATED, self.on_tab_updated)
        bus.subscribe(events.TAB_ACTIVATED, self.on_tab_activated)
        bus.subscribe(events.TAB_REMOVED, self.on_tab_removed)

    def _window(self, window_id: Any, event_name: str) -> TabWindow | None:
        tab_window = self.state.get_tab_window_by_chrome_id(int(window_id))
        if tab_window is None:
            logger.debug("Ignoring %s for unknown window %s", event_name, window_id)
        return tab_window

    def on_window_created(self, payload: dict[str, Any]) -> None:
        chrome_window = LiveWindow.model_validate(payload["window"])
        self.apply(lambda st: st.sync_chrome_window(chrome_window))

    def on_window_removed(self, payload: dict[str, Any]) -> None:
        tab_window = self._window(payload["window_id"], events.WINDOW_REMOVED)
        if tab_window is not None:
            self.apply(lambda st: st.handle_tab_window_closed(tab_window))

    def on_window_focus_changed(self, payload: dict[str, Any]) -> None:
        window_id = payload.get("window_id")
        self.apply(lambda st: st.set_current_window(None if window_id is None else int(window_id)))

    def on_windows_snapshot(self, payload: dict[str, Any]) -> None:
        chrome_windows = [LiveWindow.model_validate(w) for w in payload.get("windows", [])]
        self.apply(lambda st: st.sync_window_list(chrome_windows))

    def on_tab_updated(self, payload: dict[str, Any]) -> None:
        tab = LiveTab.model_validate(payload["tab"])
        window_id = payload.get("window_id", tab.window_id)
        if window_id is None:
            logger.debug("Ignoring tab %s without a window id", tab.id)
            return
        tab_window = self._window(window_id, events.TAB_UPDATED)
        if tab_window is not None:
            self.apply(lambda st: st.handle_tab_updated(tab_window, tab))

    def on_tab_activated(self, payload: dict[str, Any]) -> None:
        tab_window = self._window(payload["window_id"], events.TAB_ACTIVATED)
        if tab_window is not None:
            tab_id = int(payload["tab_id"])
            self.apply(lambda st: st.handle_tab_activated(tab_window, tab_id))

    def on_tab_removed(self, payload: dict[str, Any]) -> None:
        # The window.removed event that follows handles the whole window.
        if payload.get("is_window_closing"):
            return
        tab_window = self._window(payload["window_id"], events.TAB_REMOVED)
        if tab_window is not None:
            tab_id = int(payload["tab_id"])
            self.apply(lambda st: st.handle_tab_closed(tab_window, tab_id))
