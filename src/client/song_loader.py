#!/usr/bin/env python
"""
Cached, paginated loader for the device song list.

States run ``idle -> loading -> success | error``; ``showing_fallback`` is
tracked separately and marks that the bundled catalog is on screen.

A fallback timer races the first device batch. Each load generation owns a
:class:`CancellationToken`; the timer, the batch commit, the delayed
full-list reveal and the background refresh all check it before touching
visible state, so a superseded or closed generation never commits.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from pydantic import ValidationError as SchemaError

from src.core.errors import CacheError
from src.models.dto import Song, SongCacheRecord
from src.settings import LoaderSettings
from src.utils.cancellation import CancellationRequested, CancellationToken

from .builtin import builtin_songs
from .storage import DEVICE_SONGS_KEY, SONGS_CACHE_CURSOR_KEY, SONGS_CACHE_TIMESTAMP_KEY, LocalStore

logger = logging.getLogger(__name__)


class LoaderState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class LoaderSnapshot:
    state: LoaderState
    songs: List[Song]
    showing_fallback: bool
    has_more: bool
    loading_more: bool


class SongLoader:
    def __init__(
        self,
        media,
        store: LocalStore,
        settings: Optional[LoaderSettings] = None,
        *,
        clock: Callable[[], float] = time.time,
        fallback_songs: Callable[[], List[Song]] = builtin_songs,
    ):
        self.media = media
        self.store = store
        self.settings = settings or LoaderSettings()
        self._clock = clock
        self._fallback_songs = fallback_songs

        self._lock = threading.RLock()
        self.state = LoaderState.IDLE
        self.songs: List[Song] = []
        self.showing_fallback = False
        self.has_more = True
        self.loading_more = False
        self.last_error: Optional[BaseException] = None
        self.last_refresh_at = 0.0

        self._cursor: Optional[str] = None
        self._replace_on_next_batch = False
        self._token = CancellationToken()
        self._fallback_timer: Optional[threading.Timer] = None
        self._timers: List[threading.Timer] = []
        self._listeners: List[Callable[[LoaderSnapshot], None]] = []
        self._closed = False

    # ------------------------------------------------------------------ state

    def snapshot(self) -> LoaderSnapshot:
        with self._lock:
            return LoaderSnapshot(
                state=self.state,
                songs=list(self.songs),
                showing_fallback=self.showing_fallback,
                has_more=self.has_more,
                loading_more=self.loading_more,
            )

    def subscribe(self, listener: Callable[[LoaderSnapshot], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.warning("Song list listener failed", exc_info=True)

    def _begin_generation(self) -> CancellationToken:
        with self._lock:
            self._token.cancel()
            self._token = CancellationToken()
            return self._token

    # ----------------------------------------------------------------- timers

    def _schedule(self, delay: float, fn: Callable, *args) -> threading.Timer:
        timer = threading.Timer(delay, fn, args=args)
        timer.daemon = True
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()
        return timer

    def _arm_fallback(self, token: CancellationToken) -> None:
        with self._lock:
            self._cancel_fallback()
            self._fallback_timer = self._schedule(self.settings.fallback_timeout, self._on_fallback_timeout, token)

    def _cancel_fallback(self) -> None:
        with self._lock:
            if self._fallback_timer is not None:
                self._fallback_timer.cancel()
                self._fallback_timer = None

    def _on_fallback_timeout(self, token: CancellationToken) -> None:
        with self._lock:
            if token.cancelled or self._closed or self.songs:
                return
            logger.info("Device songs not ready in %.1fs; showing built-in music", self.settings.fallback_timeout)
            self._fallback_timer = None
            self.songs = self._fallback_songs()
            self.showing_fallback = True
            self.state = LoaderState.SUCCESS
        self._notify()

    # ------------------------------------------------------------------ cache

    def read_cache(self) -> Optional[SongCacheRecord]:
        try:
            raw_songs = self.store.get(DEVICE_SONGS_KEY)
            timestamp_ms = self.store.get(SONGS_CACHE_TIMESTAMP_KEY)
            cursor = self.store.get(SONGS_CACHE_CURSOR_KEY) or {}
        except CacheError as exc:
            logger.warning("Error reading song cache: %s", exc)
            return None
        if raw_songs is None or timestamp_ms is None:
            return None
        try:
            return SongCacheRecord(
                songs=raw_songs,
                refreshed_at=float(timestamp_ms) / 1000.0,
                end_cursor=cursor.get("end_cursor"),
                has_next_page=bool(cursor.get("has_next_page", False)),
            )
        except (SchemaError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Discarding unreadable song cache: %s", exc)
            return None

    def write_cache(self, songs: List[Song], end_cursor: Optional[str], has_next_page: bool) -> None:
        try:
            self.store.set_many({
                DEVICE_SONGS_KEY: [song.model_dump(mode="json") for song in songs],
                SONGS_CACHE_TIMESTAMP_KEY: int(self._clock() * 1000),
                SONGS_CACHE_CURSOR_KEY: {"end_cursor": end_cursor, "has_next_page": has_next_page},
            })
        except CacheError as exc:
            logger.warning("Error caching songs: %s", exc)

    # ---------------------------------------------------------------- loading

    def _load_batch(self, token: CancellationToken, after: Optional[str], size: int) -> bool:
        page = self.media.get_assets(first=size, after=after)
        with self._lock:
            token.raise_if_cancelled()
            if self.showing_fallback or self._replace_on_next_batch:
                previous: List[Song] = []
                self.showing_fallback = False
                self._replace_on_next_batch = False
            else:
                previous = list(self.songs)
            self.songs = previous + list(page.assets)
            self._cursor = page.end_cursor
            self.has_more = page.has_next_page
            should_cache = not previous or len(self.songs) >= self.settings.cache_write_threshold
            to_cache = list(self.songs)
        self._notify()
        if should_cache:
            self.write_cache(to_cache, page.end_cursor, page.has_next_page)
        return page.has_next_page

    def load_initial(self) -> LoaderState:
        token = self._begin_generation()
        with self._lock:
            if self._closed:
                return self.state
            self.state = LoaderState.LOADING
            self.last_error = None
        self._notify()
        self._arm_fallback(token)

        try:
            cache = self.read_cache()
            now = self._clock()
            if cache is not None and cache.is_fresh(now, self.settings.cache_ttl):
                self._apply_cache(token, cache, now)
                return self.state

            self.media.request_permission()
            self._load_batch(token, None, self.settings.initial_batch_size)
            with self._lock:
                token.raise_if_cancelled()
                self._cancel_fallback()
                self.state = LoaderState.SUCCESS
                self.showing_fallback = False
                self.last_refresh_at = self._clock()
            self._notify()
        except CancellationRequested:
            logger.debug("Initial song load superseded")
        except Exception as exc:
            logger.error("Error loading songs: %s", exc, exc_info=True)
            with self._lock:
                if not token.cancelled:
                    self.last_error = exc
                    # Built-ins already on screen stay the visible result
                    if not self.showing_fallback:
                        self.state = LoaderState.ERROR
            self._notify()
        return self.state

    def _apply_cache(self, token: CancellationToken, cache: SongCacheRecord, now: float) -> None:
        with self._lock:
            token.raise_if_cancelled()
            self._cancel_fallback()
            prefix = cache.songs[:self.settings.initial_batch_size]
            self.songs = prefix
            self._cursor = cache.end_cursor
            self.has_more = cache.has_next_page
            self.state = LoaderState.SUCCESS
            self.showing_fallback = False
        self._notify()

        if len(cache.songs) > len(prefix):
            if self.settings.reveal_delay > 0:
                self._schedule(self.settings.reveal_delay, self._reveal_full_list, token, prefix, cache.songs)
            else:
                self._reveal_full_list(token, prefix, cache.songs)

        with self._lock:
            stale_for = now - max(cache.refreshed_at, self.last_refresh_at)
            due = stale_for > self.settings.background_refresh_after
            if due:
                self.last_refresh_at = now
        if due:
            self._schedule(self.settings.background_refresh_delay, self._background_refresh, token)

    def _reveal_full_list(self, token: CancellationToken, prefix: List[Song], full: List[Song]) -> None:
        with self._lock:
            # Anything else touching the list since the first paint wins.
            if token.cancelled or self._closed or self.songs is not prefix:
                return
            self.songs = list(full)
        self._notify()

    def _background_refresh(self, token: CancellationToken) -> None:
        if token.cancelled or self._closed:
            return
        try:
            self.refresh()
        except Exception as exc:
            logger.warning("Background song refresh failed: %s", exc)

    def refresh(self) -> None:
        """Reload from the first page; the visible list stays until new songs land."""
        with self._lock:
            if self._closed:
                return
        self.media.request_permission()
        token = self._begin_generation()
        with self._lock:
            if self._closed:
                return
            self._cursor = None
            self.has_more = True
            self._replace_on_next_batch = bool(self.songs) and not self.showing_fallback
        self._arm_fallback(token)
        try:
            self._load_batch(token, None, self.settings.initial_batch_size)
        except CancellationRequested:
            return
        except Exception as exc:
            with self._lock:
                self._replace_on_next_batch = False
                self.last_error = exc
            logger.error("Error refreshing device songs: %s", exc)
            raise
        with self._lock:
            if token.cancelled:
                return
            self._cancel_fallback()
            self.last_refresh_at = self._clock()
            if self.state != LoaderState.SUCCESS:
                self.state = LoaderState.SUCCESS
        self._notify()

    def load_more(self) -> bool:
        """Fetch the next page; returns False when the request was a no-op or failed."""
        with self._lock:
            if (
                self._closed
                or not self.has_more
                or self.loading_more
                or self.state == LoaderState.LOADING
                or self.showing_fallback
            ):
                return False
            self.loading_more = True
            token = self._token
            cursor = self._cursor
        self._notify()
        try:
            self._load_batch(token, cursor, self.settings.batch_size)
            return True
        except CancellationRequested:
            return False
        except Exception as exc:
            logger.error("Error loading more songs: %s", exc)
            with self._lock:
                self.last_error = exc
            return False
        finally:
            with self._lock:
                self.loading_more = False
            self._notify()

    def start(self) -> threading.Thread:
        """Run :meth:`load_initial` on a daemon worker thread."""
        worker = threading.Thread(target=self.load_initial, name="song-loader", daemon=True)
        worker.start()
        return worker

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._token.cancel()
            self._cancel_fallback()
            for timer in self._timers:
                timer.cancel()
            self._timers = []


__all__ = ["SongLoader", "LoaderState", "LoaderSnapshot"]
