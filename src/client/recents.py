#!/usr/bin/env python
"""Recently played songs and recent search queries."""

from __future__ import annotations

import logging
from typing import List

from pydantic import ValidationError as SchemaError

from src.core.errors import CacheError
from src.models.dto import Song

from .storage import RECENT_SEARCHES_KEY, RECENT_SONGS_KEY, LocalStore

logger = logging.getLogger(__name__)

MAX_RECENT_SONGS = 20
MAX_RECENT_SEARCHES = 5


class RecentSongs:
    def __init__(self, store: LocalStore, limit: int = MAX_RECENT_SONGS):
        self._store = store
        self.limit = limit

    def list(self) -> List[Song]:
        try:
            raw = self._store.get(RECENT_SONGS_KEY) or []
            return [Song.model_validate(entry) for entry in raw]
        except (CacheError, SchemaError) as exc:
            logger.error("Error getting recent songs: %s", exc)
            return []

    def save(self, song: Song) -> List[Song]:
        """Move ``song`` to the front, dropping the oldest past the limit."""
        songs = [s for s in self.list() if s.id != song.id]
        updated = [song, *songs][: self.limit]
        self._store.set(RECENT_SONGS_KEY, [s.model_dump(mode="json") for s in updated])
        return updated


class RecentSearches:
    def __init__(self, store: LocalStore, limit: int = MAX_RECENT_SEARCHES):
        self._store = store
        self.limit = limit

    def list(self) -> List[str]:
        try:
            raw = self._store.get(RECENT_SEARCHES_KEY) or []
        except CacheError as exc:
            logger.error("Error loading recent searches: %s", exc)
            return []
        return [q for q in raw if isinstance(q, str)]

    def add(self, query: str) -> List[str]:
        searches = self.list()
        if not (query or "").strip() or query in searches:
            return searches
        updated = [query, *searches][: self.limit]
        try:
            self._store.set(RECENT_SEARCHES_KEY, updated)
        except CacheError as exc:
            logger.error("Error saving recent searches: %s", exc)
        return updated


__all__ = ["RecentSongs", "RecentSearches", "MAX_RECENT_SONGS", "MAX_RECENT_SEARCHES"]
