"""In-process bus that fans host events out to state handlers."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]

# Host event names understood by StateManager.bind().
WINDOW_CREATED = "window.created"
WINDOW_REMOVED = "window.removed"
WINDOW_FOCUS_CHANGED = "window.focus_changed"
WINDOWS_SNAPSHOT = "windows.snapshot"
TAB_CREATED = "tab.created"
TAB_UPDATED = "tab.updated"
TAB_ACTIVATED = "tab.activated"
TAB_REMOVED = "tab.removed"
STATE_CHANGED = "state.changed"


class EventBus:
    """Dispatches events to subscribers by event name, one at a time."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a callback for an event."""
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Deliver an event to every subscriber in subscription order."""
        for handler in list(self._handlers.get(event_name, [])):
            handler(payload)
