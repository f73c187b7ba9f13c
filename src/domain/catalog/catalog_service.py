# src/domain/catalog/catalog_service.py
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import spotipy
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials

from config import Config
from src.core.errors import NetworkError
from src.models.dto import Playlist, Song, SongOrigin
from src.utils.cache import TTLCache

logger = logging.getLogger(__name__)


def ms_to_min_sec(ms: Optional[int]) -> str:
    """Format a millisecond duration as ``M:SS``."""
    if not ms or ms < 0:
        return "0:00"
    minutes, remainder = divmod(int(ms), 60000)
    return f"{minutes}:{remainder // 1000:02d}"


def _first_image(images) -> Optional[str]:
    if images:
        return (images[0] or {}).get('url')
    return None


def track_to_song(track: Dict[str, Any]) -> Song:
    """Map a Spotify track object onto a catalog Song."""
    album = track.get('album') or {}
    artists = ', '.join(a.get('name', '') for a in track.get('artists') or [] if a.get('name'))
    return Song(
        id=track.get('id') or 'unknown',
        title=track.get('name') or 'Unknown Track',
        artist=artists or 'Unknown Artist',
        duration=(track.get('duration_ms') or 0) / 1000.0,
        uri=track.get('uri'),
        cover=_first_image(album.get('images')),
        origin=SongOrigin.CATALOG,
        preview_url=track.get('preview_url'),
    )


class CatalogService:
    def __init__(self, spotify_client_id=None,
                 spotify_client_secret=None,
                 spotify_client=None,
                 market=None,
                 cache_maxsize=None,
                 cache_ttl=None):
        """Music catalog lookups; keys come from Config unless given explicitly."""
        self._spotify_client_id = spotify_client_id or Config.SPOTIPY_CLIENT_ID
        self._spotify_client_secret = spotify_client_secret or Config.SPOTIPY_CLIENT_SECRET
        self.market = market or Config.CATALOG_MARKET

        self._spotify_client_lock = threading.RLock()
        self._spotify_client_warned = False

        self.sp = spotify_client
        if not self.sp:
            self._initialize_spotify_client()
        else:
            logger.info("Spotipy client injected into CatalogService.")

        self._cache = TTLCache(
            maxsize=cache_maxsize or Config.CATALOG_CACHE_MAXSIZE,
            ttl=cache_ttl or Config.CATALOG_CACHE_TTL_SECONDS,
        )

    def _initialize_spotify_client(self, *, log_success_as_debug: bool = False) -> bool:
        if not self._spotify_client_id or not self._spotify_client_secret:
            if not self._spotify_client_warned:
                logger.warning("Spotify client ID and secret not provided. Catalog lookups are unavailable.")
                self._spotify_client_warned = True
            self.sp = None
            return False
        with self._spotify_client_lock:
            try:
                client = spotipy.Spotify(auth_manager=SpotifyClientCredentials(
                    client_id=self._spotify_client_id,
                    client_secret=self._spotify_client_secret
                ))
            except Exception as exc:
                logger.error("Failed to initialize Spotipy client in CatalogService: %s", exc, exc_info=True)
                self.sp = None
                return False
            self.sp = client
            message = "Spotipy client initialized successfully in CatalogService."
            if log_success_as_debug:
                logger.debug("%s (refreshed)", message)
            else:
                logger.info(message)
            return True

    def _refresh_spotify_client(self) -> bool:
        logger.debug("Refreshing Spotipy client credentials in CatalogService.")
        return self._initialize_spotify_client(log_success_as_debug=True)

    def _call_spotify_with_retry(self, action: str, call: Callable[[], Any]) -> Any:
        if not self.sp:
            raise NetworkError(f"Music catalog unavailable; cannot {action}")
        try:
            return call()
        except SpotifyException as exc:
            if exc.http_status == 401:
                logger.warning('Spotify token expired during %s. Attempting to refresh credentials.', action)
                if self._refresh_spotify_client():
                    try:
                        return call()
                    except SpotifyException as retry_exc:
                        logger.error('Spotify API call failed after token refresh during %s: %s', action, retry_exc)
                        raise NetworkError(f"Spotify API error: {retry_exc.msg}") from retry_exc
            logger.error('Spotify API call failed during %s: %s', action, exc)
            raise NetworkError(f"Spotify API error: {exc.msg}") from exc
        except NetworkError:
            raise
        except Exception as exc:
            logger.error('Unexpected error during %s: %s', action, exc, exc_info=True)
            raise NetworkError(f"Could not {action}") from exc

    def search_tracks(self, query: str, limit: int = 20) -> List[Song]:
        if not query or not query.strip():
            return []
        query = query.strip()

        def _search():
            data = self._call_spotify_with_retry(
                f'search tracks for {query!r}',
                lambda: self.sp.search(q=query, type='track', limit=limit, market=self.market),
            )
            items = ((data or {}).get('tracks') or {}).get('items') or []
            return [track_to_song(item) for item in items if item]

        return self._cache.get_or_set(('search_tracks', query.lower(), limit), _search)

    def featured_playlists(self, limit: int = 4) -> List[Dict[str, Any]]:
        def _featured():
            timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S')
            data = self._call_spotify_with_retry(
                'fetch featured playlists',
                lambda: self.sp.featured_playlists(limit=limit, country=self.market, timestamp=timestamp),
            )
            items = ((data or {}).get('playlists') or {}).get('items') or []
            return [
                {
                    'id': item['id'],
                    'name': item.get('name'),
                    'description': item.get('description') or '',
                    'songs': (item.get('tracks') or {}).get('total', 0),
                    'cover': _first_image(item.get('images')),
                    'owner': (item.get('owner') or {}).get('display_name'),
                    'isPublic': item.get('public') is not False,
                }
                for item in items if item
            ]

        return self._cache.get_or_set(('featured_playlists', limit), _featured)

    def playlist_details(self, playlist_id: str) -> Playlist:
        def _details():
            data = self._call_spotify_with_retry(
                f'fetch playlist {playlist_id}',
                lambda: self.sp.playlist(playlist_id, market=self.market),
            )
            entries = ((data or {}).get('tracks') or {}).get('items') or []
            songs = [track_to_song(entry['track']) for entry in entries if entry and entry.get('track')]
            return Playlist(
                id=data['id'],
                name=data.get('name') or 'Untitled',
                description=data.get('description') or '',
                is_public=data.get('public') is not False,
                cover_image=_first_image(data.get('images')),
                songs=songs,
            )

        return self._cache.get_or_set(('playlist_details', playlist_id), _details)

    def new_release_artists(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Distinct lead artists of new releases (no user authorization needed)."""
        def _artists():
            data = self._call_spotify_with_retry(
                'fetch new releases',
                lambda: self.sp.new_releases(country=self.market, limit=limit),
            )
            albums = ((data or {}).get('albums') or {}).get('items') or []
            seen: Dict[str, Dict[str, Any]] = {}
            for album in albums:
                artists = album.get('artists') or []
                if not artists:
                    continue
                lead = artists[0]
                if lead.get('id') in seen:
                    continue
                seen[lead['id']] = {
                    'id': lead['id'],
                    'name': lead.get('name'),
                    'genre': (album.get('genres') or ['Unknown'])[0],
                    'image': _first_image(album.get('images')),
                }
            return list(seen.values())[:limit]

        return self._cache.get_or_set(('new_release_artists', limit), _artists)


__all__ = ["CatalogService", "ms_to_min_sec", "track_to_song"]
