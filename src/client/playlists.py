#!/usr/bin/env python
"""Playlists kept in local storage as song snapshots."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

from pydantic import ValidationError as SchemaError

from src.core.errors import ValidationError
from src.models.dto import Playlist, Song

from .storage import PLAYLISTS_KEY, LocalStore

logger = logging.getLogger(__name__)


class PlaylistLibrary:
    def __init__(self, store: LocalStore, clock: Callable[[], float] = time.time):
        self._store = store
        self._clock = clock
        self._lock = threading.RLock()

    def list(self) -> List[Playlist]:
        raw = self._store.get(PLAYLISTS_KEY) or []
        playlists: List[Playlist] = []
        for entry in raw:
            try:
                playlists.append(Playlist.model_validate(entry))
            except SchemaError as exc:
                logger.warning("Skipping unreadable playlist entry: %s", exc)
        return playlists

    def _save(self, playlists: List[Playlist]) -> None:
        self._store.set(PLAYLISTS_KEY, [p.model_dump(mode="json") for p in playlists])

    def _next_id(self, playlists: List[Playlist]) -> str:
        candidate = int(self._clock() * 1000)
        taken = {p.id for p in playlists}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def create(
        self,
        name: str,
        description: str = "",
        is_public: bool = False,
        cover_image: Optional[str] = None,
    ) -> Playlist:
        if not (name or "").strip():
            raise ValidationError.single("name", "Playlist name is required")
        with self._lock:
            playlists = self.list()
            playlist = Playlist(
                id=self._next_id(playlists),
                name=name,
                description=(description or "").strip(),
                is_public=bool(is_public),
                cover_image=cover_image,
            )
            playlists.append(playlist)
            self._save(playlists)
        logger.info("Created playlist %s (%s)", playlist.id, playlist.name)
        return playlist

    def get(self, playlist_id: str) -> Optional[Playlist]:
        return next((p for p in self.list() if p.id == playlist_id), None)

    def _update(self, playlist_id: str, mutate: Callable[[Playlist], None]) -> Playlist:
        with self._lock:
            playlists = self.list()
            target = next((p for p in playlists if p.id == playlist_id), None)
            if target is None:
                raise KeyError(playlist_id)
            mutate(target)
            self._save(playlists)
            return target

    def add_song(self, playlist_id: str, song: Song) -> Playlist:
        def _add(playlist: Playlist) -> None:
            if all(existing.id != song.id for existing in playlist.songs):
                playlist.songs.append(song)

        return self._update(playlist_id, _add)

    def remove_song(self, playlist_id: str, song_id: str) -> Playlist:
        def _remove(playlist: Playlist) -> None:
            playlist.songs = [s for s in playlist.songs if s.id != song_id]

        return self._update(playlist_id, _remove)

    def delete(self, playlist_id: str) -> bool:
        with self._lock:
            playlists = self.list()
            remaining = [p for p in playlists if p.id != playlist_id]
            if len(remaining) == len(playlists):
                return False
            self._save(remaining)
            return True


__all__ = ["PlaylistLibrary"]
