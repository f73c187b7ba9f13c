#!/usr/bin/env python
"""JSON key-value store standing in for the device's local storage."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict

from src.core.errors import CacheError

logger = logging.getLogger(__name__)

# Fixed keys shared by the client components
DEVICE_SONGS_KEY = "deviceSongs"
SONGS_CACHE_TIMESTAMP_KEY = "songsCacheTimestamp"
SONGS_CACHE_CURSOR_KEY = "songsCacheCursor"
PLAYLISTS_KEY = "playlists"
RECENT_SONGS_KEY = "recentSongs"
RECENT_SEARCHES_KEY = "recentSearches"
USER_TOKEN_KEY = "userToken"
USER_DATA_KEY = "userData"
SPOTIFY_TOKEN_KEY = "spotifyToken"


class LocalStore:
    """Opaque JSON blobs under string keys, persisted to a single file.

    Every write rewrites the file through a temp file and ``os.replace``.
    Overlapping writers are last-write-wins. All failures surface as
    :class:`CacheError`.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.RLock()

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise CacheError(f"Could not read local store {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CacheError(f"Local store {self.path} is not a JSON object")
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".store-", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise CacheError(f"Could not write local store {self.path}: {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def set_many(self, items: Dict[str, Any]) -> None:
        with self._lock:
            data = self._read_all()
            data.update(items)
            self._write_all(data)

    def remove(self, *keys: str) -> None:
        with self._lock:
            data = self._read_all()
            changed = False
            for key in keys:
                if key in data:
                    data.pop(key)
                    changed = True
            if changed:
                self._write_all(data)

    def clear(self) -> None:
        with self._lock:
            self._write_all({})

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._read_all()


__all__ = [
    "LocalStore",
    "DEVICE_SONGS_KEY",
    "SONGS_CACHE_TIMESTAMP_KEY",
    "SONGS_CACHE_CURSOR_KEY",
    "PLAYLISTS_KEY",
    "RECENT_SONGS_KEY",
    "RECENT_SEARCHES_KEY",
    "USER_TOKEN_KEY",
    "USER_DATA_KEY",
    "SPOTIFY_TOKEN_KEY",
]
