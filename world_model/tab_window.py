"""Tab window entity and the pure transforms applied to it.

A tab window is a browser window that may be open, saved as a bookmark
folder, or both. Every transform returns a new value; functions that can
strip the last of those two states return ``None`` instead of an entity
with neither, which cannot be constructed.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from world_model.host_snapshots import BookmarkNode, LiveTab, LiveWindow


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class WindowStatus(str, Enum):
    """Which of the two views a tab window currently belongs to."""

    OPEN_ONLY = "open_only"
    SAVED_ONLY = "saved_only"
    OPEN_AND_SAVED = "open_and_saved"


class OpenTabState(_Frozen):
    open_tab_id: int
    open_tab_index: int = 0
    url: str = ""
    title: str = ""
    fav_icon_url: str | None = None
    active: bool = False
    pinned: bool = False
    audible: bool = False


class SavedTabState(_Frozen):
    bookmark_id: str
    bookmark_index: int = 0
    url: str = ""
    title: str = ""


class TabItem(_Frozen):
    """One tab, open in the browser, saved as a bookmark, or both."""

    open_state: OpenTabState | None = None
    saved_state: SavedTabState | None = None

    @model_validator(mode="after")
    def _require_state(self) -> TabItem:
        if self.open_state is None and self.saved_state is None:
            raise ValueError("tab item must be open, saved, or both")
        return self

    @property
    def open(self) -> bool:
        return self.open_state is not None

    @property
    def saved(self) -> bool:
        return self.saved_state is not None

    @property
    def open_tab_id(self) -> int | None:
        return self.open_state.open_tab_id if self.open_state else None

    @property
    def saved_bookmark_id(self) -> str | None:
        return self.saved_state.bookmark_id if self.saved_state else None

    @property
    def active(self) -> bool:
        return bool(self.open_state and self.open_state.active)

    @property
    def url(self) -> str:
        if self.open_state is not None:
            return self.open_state.url
        return self.saved_state.url if self.saved_state else ""

    @property
    def title(self) -> str:
        if self.open_state is not None and self.open_state.title:
            return self.open_state.title
        if self.saved_state is not None and self.saved_state.title:
            return self.saved_state.title
        return self.url


class OpenWindowState(_Frozen):
    open_window_id: int
    window_type: str = "normal"
    focused: bool = False


class SavedWindowState(_Frozen):
    saved_folder_id: str
    saved_title: str = ""


class TabWindow(_Frozen):
    """Window entity tracked by the tab manager state."""

    open_state: OpenWindowState | None = None
    saved_state: SavedWindowState | None = None
    tab_items: tuple[TabItem, ...] = ()

    @model_validator(mode="after")
    def _require_state(self) -> TabWindow:
        if self.open_state is None and self.saved_state is None:
            raise ValueError("tab window must be open, saved, or both")
        return self

    @property
    def open(self) -> bool:
        return self.open_state is not None

    @property
    def saved(self) -> bool:
        return self.saved_state is not None

    @property
    def status(self) -> WindowStatus:
        if self.open and self.saved:
            return WindowStatus.OPEN_AND_SAVED
        return WindowStatus.OPEN_ONLY if self.open else WindowStatus.SAVED_ONLY

    @property
    def open_window_id(self) -> int | None:
        return self.open_state.open_window_id if self.open_state else None

    @property
    def saved_folder_id(self) -> str | None:
        return self.saved_state.saved_folder_id if self.saved_state else None

    @property
    def window_type(self) -> str | None:
        return self.open_state.window_type if self.open_state else None

    @property
    def open_tab_count(self) -> int:
        return sum(1 for item in self.tab_items if item.open)

    @property
    def title(self) -> str:
        if self.saved_state is not None and self.saved_state.saved_title:
            return self.saved_state.saved_title
        active = next((item for item in self.tab_items if item.active), None)
        if active is not None:
            return active.title
        return self.tab_items[0].title if self.tab_items else ""


def _open_tab_state(tab: LiveTab) -> OpenTabState:
    return OpenTabState(
        open_tab_id=tab.id,
        open_tab_index=tab.index,
        url=tab.url,
        title=tab.title,
        fav_icon_url=tab.fav_icon_url,
        active=tab.active,
        pinned=tab.pinned,
        audible=tab.audible,
    )


def _saved_tab_state(node: BookmarkNode) -> SavedTabState:
    return SavedTabState(
        bookmark_id=node.id,
        bookmark_index=node.index,
        url=node.url or "",
        title=node.title,
    )


def _open_window_state(live_window: LiveWindow) -> OpenWindowState:
    return OpenWindowState(
        open_window_id=live_window.id,
        window_type=live_window.type,
        focused=live_window.focused,
    )


def _sorted_tabs(live_window: LiveWindow) -> list[LiveTab]:
    return sorted(live_window.tabs, key=lambda tab: tab.index)


def _with_items(tab_window: TabWindow, items: list[TabItem]) -> TabWindow:
    return tab_window.model_copy(update={"tab_items": tuple(items)})


def _map_items(tab_window: TabWindow, fn: Callable[[TabItem], TabItem | None]) -> TabWindow:
    """Apply ``fn`` to each item, dropping items it maps to ``None``."""
    items = [fn(item) for item in tab_window.tab_items]
    return _with_items(tab_window, [item for item in items if item is not None])


def make_chrome_tab_window(live_window: LiveWindow) -> TabWindow:
    """Build an open-only tab window from a live window snapshot."""
    items = tuple(TabItem(open_state=_open_tab_state(tab)) for tab in _sorted_tabs(live_window))
    return TabWindow(open_state=_open_window_state(live_window), tab_items=items)


def make_folder_tab_window(folder: BookmarkNode) -> TabWindow:
    """Build a saved-only tab window from a bookmark folder."""
    bookmarks = sorted(
        (child for child in folder.children or [] if not child.is_folder),
        key=lambda node: node.index,
    )
    return TabWindow(
        saved_state=SavedWindowState(saved_folder_id=folder.id, saved_title=folder.title),
        tab_items=tuple(TabItem(saved_state=_saved_tab_state(node)) for node in bookmarks),
    )


def update_window(tab_window: TabWindow, live_window: LiveWindow) -> TabWindow:
    """Merge a live window snapshot into a tab window, keeping saved state.

    Live tabs keep the saved state of the item already bound to their tab id;
    otherwise they claim the first unclaimed bookmark with the same URL.
    Bookmarks left unclaimed follow the open tabs as saved-only items.
    """
    live_tabs = _sorted_tabs(live_window)
    prev_by_tab_id = {item.open_tab_id: item for item in tab_window.tab_items if item.open}
    saved_states = [item.saved_state for item in tab_window.tab_items if item.saved_state is not None]

    claimed: set[str] = set()
    for tab in live_tabs:
        prev = prev_by_tab_id.get(tab.id)
        if prev is not None and prev.saved_state is not None:
            claimed.add(prev.saved_state.bookmark_id)

    merged: list[TabItem] = []
    for tab in live_tabs:
        prev = prev_by_tab_id.get(tab.id)
        saved_state = prev.saved_state if prev is not None else None
        if saved_state is None:
            saved_state = next(
                (s for s in saved_states if s.bookmark_id not in claimed and s.url == tab.url),
                None,
            )
            if saved_state is not None:
                claimed.add(saved_state.bookmark_id)
        merged.append(TabItem(open_state=_open_tab_state(tab), saved_state=saved_state))

    leftover = sorted(
        (s for s in saved_states if s.bookmark_id not in claimed),
        key=lambda s: s.bookmark_index,
    )
    merged.extend(TabItem(saved_state=s) for s in leftover)
    return tab_window.model_copy(
        update={"open_state": _open_window_state(live_window), "tab_items": tuple(merged)}
    )


def remove_open_window_state(tab_window: TabWindow) -> TabWindow | None:
    """Return the saved-only form of a window, or None if it was not saved."""
    if not tab_window.saved:
        return None
    saved_items = sorted(
        (TabItem(saved_state=item.saved_state) for item in tab_window.tab_items if item.saved),
        key=lambda item: item.saved_state.bookmark_index,
    )
    return tab_window.model_copy(update={"open_state": None, "tab_items": tuple(saved_items)})


def remove_saved_window_state(tab_window: TabWindow) -> TabWindow | None:
    """Return the open-only form of a window, or None if it was not open."""
    if not tab_window.open:
        return None
    open_items = tuple(
        TabItem(open_state=item.open_state) for item in tab_window.tab_items if item.open
    )
    return tab_window.model_copy(update={"saved_state": None, "tab_items": open_items})


def close_tab(tab_window: TabWindow, tab_id: int) -> TabWindow:
    def _close(item: TabItem) -> TabItem | None:
        if item.open_tab_id != tab_id:
            return item
        return TabItem(saved_state=item.saved_state) if item.saved else None

    return _map_items(tab_window, _close)


def save_tab(tab_window: TabWindow, tab_item: TabItem, tab_node: BookmarkNode) -> TabWindow:
    saved_state = _saved_tab_state(tab_node)

    def _save(item: TabItem) -> TabItem:
        if item.open and item.open_tab_id == tab_item.open_tab_id:
            return item.model_copy(update={"saved_state": saved_state})
        return item

    return _map_items(tab_window, _save)


def unsave_tab(tab_window: TabWindow, tab_item: TabItem) -> TabWindow:
    def _unsave(item: TabItem) -> TabItem | None:
        if not item.saved or item.saved_bookmark_id != tab_item.saved_bookmark_id:
            return item
        return TabItem(open_state=item.open_state) if item.open else None

    return _map_items(tab_window, _unsave)


def set_active_tab(tab_window: TabWindow, tab_id: int) -> TabWindow:
    def _activate(item: TabItem) -> TabItem:
        if item.open_state is None:
            return item
        active = item.open_tab_id == tab_id
        if item.open_state.active == active:
            return item
        return item.model_copy(update={"open_state": item.open_state.model_copy(update={"active": active})})

    return _map_items(tab_window, _activate)


def update_tab_item(tab_window: TabWindow, live_tab: LiveTab) -> TabWindow:
    """Refresh the open state of one tab, inserting it if the window lacks it."""
    open_state = _open_tab_state(live_tab)
    items = list(tab_window.tab_items)
    for pos, item in enumerate(items):
        if item.open_tab_id == live_tab.id:
            items[pos] = item.model_copy(update={"open_state": open_state})
            return _with_items(tab_window, items)

    insert_at = next(
        (
            pos
            for pos, item in enumerate(items)
            if item.open_state is not None and item.open_state.open_tab_index >= live_tab.index
        ),
        None,
    )
    if insert_at is None:
        open_positions = [pos for pos, item in enumerate(items) if item.open]
        insert_at = open_positions[-1] + 1 if open_positions else 0
    items.insert(insert_at, TabItem(open_state=open_state))
    return _with_items(tab_window, items)
