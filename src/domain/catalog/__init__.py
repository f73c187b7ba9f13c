"""Catalog domain services (third-party music search and browse)."""

from .catalog_service import CatalogService, ms_to_min_sec, track_to_song

__all__ = ["CatalogService", "ms_to_min_sec", "track_to_song"]
