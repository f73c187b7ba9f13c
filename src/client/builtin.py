"""Songs bundled with the app, shown when device media can't be listed in time."""

from __future__ import annotations

from typing import List

from src.models.dto import Song, SongOrigin

DEFAULT_COVER = "assets/images/default-cover.jpeg"

_BUILTIN = (
    ("asset-1", "Jowo", "Davido", 218, "assets/music/davido-jowo.m4a"),
    ("asset-2", "You Wanna Bamba", "Goya Menor", 187, "assets/music/goya-menor-you-wanna-bamba.mp3"),
    ("asset-3", "Fathermoh ft Odi wa Muranga", "Kwa Bar", 242, "assets/music/kwa-bar-fathermoh.mp3"),
)


def builtin_songs() -> List[Song]:
    """Fresh copies of the bundled catalog, in display order."""
    return [
        Song(id=song_id, title=title, artist=artist, duration=duration, uri=uri,
             cover=DEFAULT_COVER, origin=SongOrigin.ASSET)
        for song_id, title, artist, duration, uri in _BUILTIN
    ]


__all__ = ["builtin_songs", "DEFAULT_COVER"]
