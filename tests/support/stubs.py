"""Shared test stubs for the media source, audio player and Spotipy interfaces."""

import threading
from typing import Dict, List, Optional

from src.client.media import decode_cursor, encode_cursor
from src.core.errors import MediaPermissionError
from src.models.dto import MediaPage, Song, SongOrigin


def make_song(n: int, origin: SongOrigin = SongOrigin.DEVICE, **overrides) -> Song:
    data = {
        "id": f"song-{n}",
        "title": f"Song {n}",
        "artist": "Unknown Artist",
        "duration": 180,
        "uri": f"/music/song-{n}.mp3",
        "origin": origin,
    }
    data.update(overrides)
    return Song(**data)


class FakeMediaSource:
    """In-memory device library with an optional gate that holds back pages."""

    def __init__(self, count: int = 0, *, permission: bool = True, error: Optional[Exception] = None):
        self.songs: List[Song] = [make_song(i) for i in range(count)]
        self.permission = permission
        self.error = error
        self.gate: Optional[threading.Event] = None
        self.calls: List[Dict] = []
        self.permission_requests = 0

    def block(self) -> threading.Event:
        self.gate = threading.Event()
        return self.gate

    def request_permission(self) -> bool:
        self.permission_requests += 1
        if not self.permission:
            raise MediaPermissionError("Media library permission denied")
        return True

    def get_assets(self, first: int, after: Optional[str] = None) -> MediaPage:
        self.calls.append({"first": first, "after": after})
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        offset = decode_cursor(after)
        window = self.songs[offset:offset + first]
        next_offset = offset + len(window)
        return MediaPage(
            assets=window,
            end_cursor=encode_cursor(next_offset),
            has_next_page=next_offset < len(self.songs),
        )


class FakePlayer:
    """Records calls made by PlaybackState."""

    def __init__(self, fail_on_load: bool = False):
        self.fail_on_load = fail_on_load
        self.calls: List[tuple] = []
        self.on_status = None

    def load(self, uri, on_status, autoplay=True):
        self.calls.append(("load", uri, autoplay))
        if self.fail_on_load:
            raise RuntimeError("unsupported format")
        self.on_status = on_status

    def play(self):
        self.calls.append(("play",))

    def pause(self):
        self.calls.append(("pause",))

    def seek(self, position_ms):
        self.calls.append(("seek", position_ms))

    def unload(self):
        self.calls.append(("unload",))


class SpotipyStub:
    """Minimal Spotipy client stub; ``responses`` maps method name to payload."""

    def __init__(self, responses: Optional[dict] = None, error: Optional[Exception] = None):
        self.responses = responses or {}
        self.error = error
        self.calls: List[tuple] = []

    def _respond(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error:
            raise self.error
        return self.responses.get(name, {})

    def search(self, *args, **kwargs):
        return self._respond("search", *args, **kwargs)

    def featured_playlists(self, *args, **kwargs):
        return self._respond("featured_playlists", *args, **kwargs)

    def playlist(self, *args, **kwargs):
        return self._respond("playlist", *args, **kwargs)

    def new_releases(self, *args, **kwargs):
        return self._respond("new_releases", *args, **kwargs)


def spotify_track(track_id: str, name: str = "Track", preview_url: Optional[str] = "http://p/clip.mp3") -> dict:
    return {
        "id": track_id,
        "name": name,
        "artists": [{"name": "Artist A"}, {"name": "Artist B"}],
        "duration_ms": 215000,
        "uri": f"spotify:track:{track_id}",
        "preview_url": preview_url,
        "album": {"images": [{"url": f"http://img/{track_id}.jpg"}]},
    }


__all__ = ["FakeMediaSource", "FakePlayer", "SpotipyStub", "make_song", "spotify_track"]
