#!/usr/bin/env python
"""
Client library settings.

Merges defaults from config.Config with optional runtime overrides into a
validated snapshot the on-device components are built from.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import Config


class LoaderSettings(BaseModel):
    """Song loader batching, timing and cache thresholds."""

    model_config = ConfigDict(extra="ignore")

    initial_batch_size: int = Field(default=20, ge=1)
    batch_size: int = Field(default=50, ge=1)
    fallback_timeout: float = Field(default=5.0, gt=0)
    cache_ttl: float = Field(default=30 * 60, gt=0)
    background_refresh_after: float = Field(default=5 * 60, ge=0)
    background_refresh_delay: float = Field(default=2.0, ge=0)
    reveal_delay: float = Field(default=0.3, ge=0)
    cache_write_threshold: int = Field(default=100, ge=1)


class ClientSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    api_url: str
    api_timeout: float = 10.0
    music_dir: str
    local_store_path: str
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None
    catalog_market: str = "US"
    loader: LoaderSettings = Field(default_factory=LoaderSettings)

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned:
            raise ValueError("API URL cannot be empty")
        return cleaned


def load_client_settings(overrides: Optional[Dict[str, Any]] = None) -> ClientSettings:
    """Load settings merging config defaults with optional runtime overrides."""
    data: Dict[str, Any] = {
        "api_url": Config.API_URL,
        "api_timeout": Config.API_TIMEOUT_SECONDS,
        "music_dir": Config.MUSIC_DIR,
        "local_store_path": Config.LOCAL_STORE_PATH,
        "spotify_client_id": Config.SPOTIPY_CLIENT_ID,
        "spotify_client_secret": Config.SPOTIPY_CLIENT_SECRET,
        "catalog_market": Config.CATALOG_MARKET,
        "loader": {
            "initial_batch_size": Config.SONGS_INITIAL_BATCH_SIZE,
            "batch_size": Config.SONGS_BATCH_SIZE,
            "fallback_timeout": Config.SONGS_FALLBACK_TIMEOUT_SECONDS,
            "cache_ttl": Config.SONGS_CACHE_TTL_SECONDS,
            "background_refresh_after": Config.SONGS_BACKGROUND_REFRESH_SECONDS,
            "background_refresh_delay": Config.SONGS_BACKGROUND_REFRESH_DELAY_SECONDS,
            "reveal_delay": Config.SONGS_REVEAL_DELAY_SECONDS,
            "cache_write_threshold": Config.SONGS_CACHE_WRITE_THRESHOLD,
        },
    }
    if overrides:
        data.update(overrides)
    return ClientSettings.model_validate(data)


__all__ = ["ClientSettings", "LoaderSettings", "load_client_settings"]
