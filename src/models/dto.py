#!/usr/bin/env python
"""
Pydantic DTOs for the on-device library: songs, playlists and the song cache.

Every model round-trips through JSON so it can live in the local store.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SongOrigin(str, Enum):
    ASSET = "asset"
    DEVICE = "device"
    CATALOG = "catalog"


class Song(BaseModel):
    """A playable track snapshot, whatever its source."""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    title: str
    artist: str = "Unknown Artist"
    duration: float = Field(default=0, ge=0)  # seconds
    uri: Optional[str] = None
    cover: Optional[str] = None
    origin: SongOrigin = SongOrigin.DEVICE
    preview_url: Optional[str] = None
    created_at: Optional[float] = None

    @property
    def is_asset(self) -> bool:
        return self.origin == SongOrigin.ASSET.value

    @property
    def playable_uri(self) -> Optional[str]:
        """Catalog tracks play their preview clip; everything else plays ``uri``."""
        if self.origin == SongOrigin.CATALOG.value:
            return self.preview_url
        return self.uri


class Playlist(BaseModel):
    id: str
    name: str
    description: str = ""
    is_public: bool = False
    cover_image: Optional[str] = None
    songs: List[Song] = Field(default_factory=list)
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Playlist name is required")
        return cleaned


class SongCacheRecord(BaseModel):
    """Cached device song list; superseded wholesale on every write."""

    songs: List[Song]
    refreshed_at: float  # epoch seconds
    end_cursor: Optional[str] = None
    has_next_page: bool = False

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.refreshed_at < ttl_seconds


class MediaPage(BaseModel):
    """One page of device media plus its opaque continuation marker."""

    assets: List[Song]
    end_cursor: Optional[str] = None
    has_next_page: bool = False


__all__ = ["SongOrigin", "Song", "Playlist", "SongCacheRecord", "MediaPage"]
