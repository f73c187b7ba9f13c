#!/usr/bin/env python
"""Wires the client components together and exposes the screen-level flows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from src.core.errors import CacheError, ValidationError
from src.models.dto import Song
from src.settings import ClientSettings, load_client_settings

from .api import BackendClient
from .builtin import DEFAULT_COVER
from .media import DeviceMediaSource
from .playback import PlaybackState, Player
from .playlists import PlaylistLibrary
from .recents import RecentSearches, RecentSongs
from .session import AuthSession
from .song_loader import SongLoader
from .storage import LocalStore

logger = logging.getLogger(__name__)


@dataclass
class ClientApp:
    settings: ClientSettings
    store: LocalStore
    backend: BackendClient
    session: AuthSession
    loader: SongLoader
    playlists: PlaylistLibrary
    recent_songs: RecentSongs
    recent_searches: RecentSearches
    playback: PlaybackState
    catalog: Optional[object] = None

    def sign_in(self, email: str, password: str) -> dict:
        result = self.backend.login(email, password)
        self.session.sign_in(result["token"], result["user"])
        return result["user"]

    def search(self, query: str) -> List[Song]:
        """Search the catalog and remember the query."""
        if not (query or "").strip():
            return []
        if self.catalog is None:
            raise ValidationError.single("query", "Search is unavailable")
        results = self.catalog.search_tracks(query)
        self.recent_searches.add(query)
        return results

    def play(self, song: Song) -> bool:
        """Start ``song`` and record it as recently played; False if it can't play."""
        if not song.playable_uri:
            logger.info("No playable source for %s", song.id)
            return False
        started = self.playback.set_current_song(song)
        if started:
            try:
                self.recent_songs.save(song)
            except CacheError as exc:
                logger.error("Error saving to recent songs: %s", exc)
        return started

    def close(self) -> None:
        self.loader.close()
        self.playback.stop()


def build_client(player: Player, settings: Optional[ClientSettings] = None, *, catalog=None) -> ClientApp:
    settings = settings or load_client_settings()
    store = LocalStore(settings.local_store_path)
    backend = BackendClient(settings.api_url, timeout=settings.api_timeout)
    if catalog is None and settings.spotify_client_id and settings.spotify_client_secret:
        from src.domain.catalog import CatalogService

        catalog = CatalogService(
            spotify_client_id=settings.spotify_client_id,
            spotify_client_secret=settings.spotify_client_secret,
            market=settings.catalog_market,
        )
    return ClientApp(
        settings=settings,
        store=store,
        backend=backend,
        session=AuthSession(store, backend.validate_token),
        loader=SongLoader(DeviceMediaSource(settings.music_dir, default_cover=DEFAULT_COVER), store, settings.loader),
        playlists=PlaylistLibrary(store),
        recent_songs=RecentSongs(store),
        recent_searches=RecentSearches(store),
        playback=PlaybackState(player),
        catalog=catalog,
    )


__all__ = ["ClientApp", "build_client"]
