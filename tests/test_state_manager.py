"""Event wiring tests for StateManager."""

from __future__ import annotations

from typing import Any

from core import event_bus as events
from core.event_bus import EventBus
from core.state_manager import StateManager
from world_model.tab_manager_state import TabManagerState


def chrome_window(window_id: int, *urls: str, focused: bool = False) -> dict[str, Any]:
    return {
        "id": window_id,
        "focused": focused,
        "type": "normal",
        "tabs": [
            {"id": window_id * 10 + i, "index": i, "windowId": window_id, "url": url, "favIconUrl": None}
            for i, url in enumerate(urls)
        ],
    }


def bound_manager() -> tuple[StateManager, EventBus]:
    bus = EventBus()
    manager = StateManager(state=TabManagerState.create())
    manager.bind(bus)
    return manager, bus


def test_event_bus_dispatches_in_subscription_order() -> None:
    bus = EventBus()
    seen: list[str] = []
    first = lambda payload: seen.append("first")  # noqa: E731
    bus.subscribe("ping", first)
    bus.subscribe("ping", lambda payload: seen.append("second"))

    bus.emit("ping", {})
    bus.unsubscribe("ping", first)
    bus.emit("ping", {})
    bus.emit("unknown", {})

    assert seen == ["first", "second", "second"]


def test_snapshot_event_syncs_window_list() -> None:
    manager, bus = bound_manager()

    bus.emit(
        events.WINDOWS_SNAPSHOT,
        {"windows": [chrome_window(1, "https://a.example/"), chrome_window(2, "https://b.example/", focused=True)]},
    )

    assert manager.state.count_open_windows() == 2
    assert manager.state.current_window_id == 2


def test_state_changed_carries_previous_value() -> None:
    manager, bus = bound_manager()
    changes: list[dict[str, Any]] = []
    bus.subscribe(events.STATE_CHANGED, changes.append)
    initial = manager.state

    bus.emit(events.WINDOW_CREATED, {"window": chrome_window(4, "https://a.example/")})

    assert len(changes) == 1
    assert changes[0]["previous"] is initial
    assert changes[0]["state"] is manager.state
    assert initial.count_open_windows() == 0


def test_tab_events_update_window() -> None:
    manager, bus = bound_manager()
    bus.emit(events.WINDOW_CREATED, {"window": chrome_window(4, "https://a.example/")})

    bus.emit(events.TAB_CREATED, {"tab": {"id": 41, "index": 1, "windowId": 4, "url": "https://b.example/"}})
    bus.emit(events.TAB_ACTIVATED, {"window_id": 4, "tab_id": 41})
    w = manager.state.get_tab_window_by_chrome_id(4)
    assert w.open_tab_count == 2
    assert [item.open_tab_id for item in w.tab_items if item.active] == [41]

    bus.emit(events.TAB_REMOVED, {"window_id": 4, "tab_id": 40})
    assert manager.state.count_open_tabs() == 1


def test_tab_removed_during_window_close_is_skipped() -> None:
    manager, bus = bound_manager()
    bus.emit(events.WINDOW_CREATED, {"window": chrome_window(4, "https://a.example/")})
    before = manager.state

    bus.emit(events.TAB_REMOVED, {"window_id": 4, "tab_id": 40, "is_window_closing": True})

    assert manager.state is before


def test_window_removed_and_focus_events() -> None:
    manager, bus = bound_manager()
    bus.emit(events.WINDOW_CREATED, {"window": chrome_window(4, "https://a.example/")})

    bus.emit(events.WINDOW_FOCUS_CHANGED, {"window_id": 4})
    assert manager.state.current_window_id == 4

    bus.emit(events.WINDOW_REMOVED, {"window_id": 4})
    assert manager.state.count_open_windows() == 0

    bus.emit(events.WINDOW_FOCUS_CHANGED, {"window_id": None})
    assert manager.state.current_window_id is None


def test_events_for_unknown_windows_are_ignored() -> None:
    manager, bus = bound_manager()
    before = manager.state

    bus.emit(events.WINDOW_REMOVED, {"window_id": 99})
    bus.emit(events.TAB_ACTIVATED, {"window_id": 99, "tab_id": 1})
    bus.emit(events.TAB_UPDATED, {"tab": {"id": 5, "index": 0, "windowId": 99}})
    bus.emit(events.TAB_UPDATED, {"tab": {"id": 5, "index": 0}})

    assert manager.state is before
