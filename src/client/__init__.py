"""On-device client library: storage, session, song loading and playback state."""

from .api import BackendClient
from .builtin import builtin_songs
from .container import ClientApp, build_client
from .media import DeviceMediaSource
from .playback import PlaybackState, PlaybackStatus, Player
from .playlists import PlaylistLibrary
from .recents import RecentSearches, RecentSongs
from .session import AuthSession
from .song_loader import LoaderSnapshot, LoaderState, SongLoader
from .storage import LocalStore

__all__ = [
    "AuthSession",
    "BackendClient",
    "ClientApp",
    "DeviceMediaSource",
    "LoaderSnapshot",
    "LoaderState",
    "LocalStore",
    "PlaybackState",
    "PlaybackStatus",
    "Player",
    "PlaylistLibrary",
    "RecentSearches",
    "RecentSongs",
    "SongLoader",
    "build_client",
    "builtin_songs",
]
