#!/usr/bin/env python
"""Playback state holder driving an injected audio backend."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from src.models.dto import Song

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackStatus:
    """One status report from the audio backend (it is polled for position)."""

    is_loaded: bool
    is_playing: bool = False
    position_ms: int = 0
    duration_ms: int = 0
    did_just_finish: bool = False


class Player(Protocol):
    def load(self, uri: str, on_status: Callable[[PlaybackStatus], None], autoplay: bool = True) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, position_ms: int) -> None: ...

    def unload(self) -> None: ...


class PlaybackState:
    def __init__(self, player: Player):
        self._player = player
        self._lock = threading.RLock()
        self.current_song: Optional[Song] = None
        self.is_loaded = False
        self.is_playing = False
        self.position_ms = 0
        self.duration_ms = 0
        self.last_error: Optional[Exception] = None
        self._listeners: List[Callable[["PlaybackState"], None]] = []

    def subscribe(self, listener: Callable[["PlaybackState"], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def set_current_song(self, song: Optional[Song]) -> bool:
        """Swap the current song; returns True when the new one started loading."""
        with self._lock:
            if self.is_loaded:
                self._player.unload()
            self.current_song = song
            self.is_loaded = False
            self.is_playing = False
            self.position_ms = 0
            self.duration_ms = 0
            self.last_error = None

            uri = song.playable_uri if song else None
            if not uri:
                self._notify()
                return False
            try:
                self._player.load(uri, self.on_status, autoplay=True)
            except Exception as exc:
                logger.error("Error loading audio %s: %s", uri, exc)
                self.last_error = exc
                self._notify()
                return False
            self.is_loaded = True
            self.is_playing = True
        self._notify()
        return True

    def on_status(self, status: PlaybackStatus) -> None:
        with self._lock:
            if not status.is_loaded:
                return
            self.position_ms = status.position_ms
            self.duration_ms = status.duration_ms
            self.is_playing = status.is_playing and not status.did_just_finish
        self._notify()

    def toggle(self) -> None:
        with self._lock:
            if not self.is_loaded:
                return
            if self.is_playing:
                self._player.pause()
                self.is_playing = False
            else:
                self._player.play()
                self.is_playing = True
        self._notify()

    def seek(self, position_ms: int) -> None:
        with self._lock:
            if not self.is_loaded:
                return
            target = max(0, int(position_ms))
            if self.duration_ms:
                target = min(target, self.duration_ms)
            self._player.seek(target)
            self.position_ms = target
        self._notify()

    def stop(self) -> None:
        with self._lock:
            if self.is_loaded:
                self._player.unload()
            self.is_loaded = False
            self.is_playing = False
        self._notify()


__all__ = ["PlaybackState", "PlaybackStatus", "Player"]
