"""Immutable application state for the tab manager.

The state keeps two indices over the same tab windows: open windows keyed by
browser window id, and saved windows keyed by bookmark folder id. A window
that is both open and saved appears in both. Every method returns a new
state value; existing values are never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from functools import reduce

from world_model import tab_window as tw
from world_model.host_snapshots import BookmarkNode, LiveTab, LiveWindow
from world_model.tab_window import TabItem, TabWindow

logger = logging.getLogger("tm.tab_manager_state")


@dataclass(frozen=True)
class TabManagerState:
    """Snapshot of all open and saved tab windows."""

    window_id_map: Mapping[int, TabWindow] = field(default_factory=dict)
    bookmark_id_map: Mapping[str, TabWindow] = field(default_factory=dict)
    folder_id: str | None = None
    archive_folder_id: str | None = None
    # Not guaranteed to refer to an entry in window_id_map.
    current_window_id: int | None = None

    @classmethod
    def create(
        cls, folder_id: str | None = None, archive_folder_id: str | None = None
    ) -> TabManagerState:
        return cls(folder_id=folder_id, archive_folder_id=archive_folder_id)

    def register_tab_window(self, tab_window: TabWindow) -> TabManagerState:
        """Index the window by open window id and/or bookmark folder id.

        An earlier value registered under the same key is replaced.
        """
        window_id_map = self.window_id_map
        if tab_window.open:
            window_id_map = {**window_id_map, tab_window.open_window_id: tab_window}
        bookmark_id_map = self.bookmark_id_map
        if tab_window.saved:
            bookmark_id_map = {**bookmark_id_map, tab_window.saved_folder_id: tab_window}
        return replace(self, window_id_map=window_id_map, bookmark_id_map=bookmark_id_map)

    def register_tab_windows(self, tab_windows: Iterable[TabWindow]) -> TabManagerState:
        return reduce(lambda acc, w: acc.register_tab_window(w), tab_windows, self)

    def _register_if_attached(self, tab_window: TabWindow | None) -> TabManagerState:
        return self if tab_window is None else self.register_tab_window(tab_window)

    def handle_tab_window_closed(self, tab_window: TabWindow) -> TabManagerState:
        """Drop the window from the open index; a saved window stays saved."""
        window_id_map = {
            k: v for k, v in self.window_id_map.items() if k != tab_window.open_window_id
        }
        closed = replace(self, window_id_map=window_id_map)
        # Re-registering the reverted form overwrites the stale open+saved
        # value in bookmark_id_map.
        return closed._register_if_attached(tw.remove_open_window_state(tab_window))

    def handle_tab_closed(self, tab_window: TabWindow, tab_id: int) -> TabManagerState:
        return self.register_tab_window(tw.close_tab(tab_window, tab_id))

    def handle_tab_saved(
        self, tab_window: TabWindow, tab_item: TabItem, tab_node: BookmarkNode
    ) -> TabManagerState:
        return self.register_tab_window(tw.save_tab(tab_window, tab_item, tab_node))

    def handle_tab_unsaved(self, tab_window: TabWindow, tab_item: TabItem) -> TabManagerState:
        return self.register_tab_window(tw.unsave_tab(tab_window, tab_item))

    def handle_tab_activated(self, tab_window: TabWindow, tab_id: int) -> TabManagerState:
        return self.register_tab_window(tw.set_active_tab(tab_window, tab_id))

    def handle_tab_updated(self, tab_window: TabWindow, tab: LiveTab) -> TabManagerState:
        return self.register_tab_window(tw.update_tab_item(tab_window, tab))

    def attach_chrome_window(
        self, tab_window: TabWindow, chrome_window: LiveWindow
    ) -> TabManagerState:
        """Attach a live window to a tab window, e.g. after opening a saved window.

        Any other tab window already registered under the live window's id is
        closed first so the two never share an open-index key.
        """
        previous = self.window_id_map.get(chrome_window.id)
        store = self
        if previous is not None and previous is not tab_window:
            logger.debug(
                "Evicting tab window %s from chrome window %s",
                previous.saved_folder_id or previous.title,
                chrome_window.id,
            )
            store = self.handle_tab_window_closed(previous)
        attached = tw.update_window(tab_window, chrome_window)
        return store.register_tab_window(attached)

    def attach_bookmark_folder(
        self, bookmark_folder: BookmarkNode, chrome_window: LiveWindow
    ) -> TabManagerState:
        folder_window = tw.make_folder_tab_window(bookmark_folder)
        merged = tw.update_window(folder_window, chrome_window)
        return self.register_tab_window(merged)

    def sync_chrome_window(self, chrome_window: LiveWindow) -> TabManagerState:
        """Bring one open window in line with its live snapshot."""
        prev = self.window_id_map.get(chrome_window.id)
        if prev is not None:
            synced = tw.update_window(prev, chrome_window)
        else:
            synced = tw.make_chrome_tab_window(chrome_window)
        store = self.register_tab_window(synced)
        if chrome_window.focused:
            store = store.set_current_window(chrome_window.id)
        return store

    def sync_window_list(self, chrome_windows: Iterable[LiveWindow]) -> TabManagerState:
        """Reconcile the open index with the full list of live windows.

        Windows missing from the list are closed before any window is synced,
        so a reused window id is never matched to the stale window.
        """
        chrome_windows = list(chrome_windows)
        live_ids = {cw.id for cw in chrome_windows}
        closed_windows = [w for w in self.get_open() if w.open_window_id not in live_ids]
        if closed_windows:
            logger.debug("Closing %d windows missing from live window list", len(closed_windows))
        closed_store = reduce(
            lambda acc, w: acc.handle_tab_window_closed(w), closed_windows, self
        )
        return reduce(lambda acc, cw: acc.sync_chrome_window(cw), chrome_windows, closed_store)

    def set_current_window(self, window_id: int | None) -> TabManagerState:
        return replace(self, current_window_id=window_id)

    def remove_bookmark_id_map_entry(self, tab_window: TabWindow) -> TabManagerState:
        bookmark_id_map = {
            k: v for k, v in self.bookmark_id_map.items() if k != tab_window.saved_folder_id
        }
        return replace(self, bookmark_id_map=bookmark_id_map)

    def unmanage_window(self, tab_window: TabWindow) -> TabManagerState:
        """Disconnect a window from its bookmark folder; an open window stays open."""
        removed = self.remove_bookmark_id_map_entry(tab_window)
        return removed._register_if_attached(tw.remove_saved_window_state(tab_window))

    def get_open(self) -> list[TabWindow]:
        return list(self.window_id_map.values())

    def get_all(self) -> list[TabWindow]:
        """Open windows followed by saved windows that are not open."""
        closed_saved = [w for w in self.bookmark_id_map.values() if not w.open]
        return self.get_open() + closed_saved

    def get_tab_windows_by_type(self, window_type: str) -> list[TabWindow]:
        return [w for w in self.get_open() if w.window_type == window_type]

    def get_tab_window_by_chrome_id(self, window_id: int) -> TabWindow | None:
        return self.window_id_map.get(window_id)

    def count_open_windows(self) -> int:
        return len(self.window_id_map)

    def count_saved_windows(self) -> int:
        return len(self.bookmark_id_map)

    def count_open_tabs(self) -> int:
        return sum(w.open_tab_count for w in self.window_id_map.values())
