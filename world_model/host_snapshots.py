"""Pydantic models for window and bookmark payloads delivered by the host."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class _HostModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class LiveTab(_HostModel):
    """Snapshot of one open browser tab."""

    id: int
    index: int = 0
    window_id: int | None = Field(default=None, alias="windowId")
    url: str = ""
    title: str = ""
    fav_icon_url: str | None = Field(default=None, alias="favIconUrl")
    active: bool = False
    pinned: bool = False
    audible: bool = False


class LiveWindow(_HostModel):
    """Snapshot of one open browser window and its tabs."""

    id: int
    focused: bool = False
    type: str = "normal"
    tabs: list[LiveTab] = Field(default_factory=list)


class BookmarkNode(_HostModel):
    """Bookmark tree node; nodes without a URL are folders."""

    id: str
    parent_id: str | None = Field(default=None, alias="parentId")
    index: int = 0
    title: str = ""
    url: str | None = None
    children: list[BookmarkNode] | None = None

    @property
    def is_folder(self) -> bool:
        return self.url is None


class HostSnapshot(_HostModel):
    """Full picture of the host: open windows plus saved window folders."""

    windows: list[LiveWindow] = Field(default_factory=list)
    folders: list[BookmarkNode] = Field(default_factory=list)


def load_host_snapshot(path: Path) -> HostSnapshot:
    """Read and validate a host snapshot JSON file."""
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    return HostSnapshot.model_validate(data)
