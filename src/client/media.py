#!/usr/bin/env python
"""Paginated enumeration of audio files stored on the device."""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import os
from typing import List, Optional

from mutagen import File as MutagenFile

from src.core.errors import MediaPermissionError
from src.models.dto import MediaPage, Song, SongOrigin

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = (".mp3", ".m4a", ".flac", ".wav", ".ogg", ".aac")


def encode_cursor(offset: int) -> str:
    return base64.urlsafe_b64encode(f"offset:{offset}".encode("ascii")).decode("ascii")


def decode_cursor(cursor: Optional[str]) -> int:
    if not cursor:
        return 0
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("ascii")
        prefix, _, value = raw.partition(":")
        if prefix != "offset":
            raise ValueError(raw)
        return max(0, int(value))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise ValueError(f"Malformed media cursor: {cursor!r}") from exc


def read_duration(path: str) -> float:
    """Track length in seconds, or 0 when mutagen can't parse the file."""
    try:
        mf = MutagenFile(path)
        length = getattr(getattr(mf, "info", None), "length", None)
        return float(length) if length else 0.0
    except Exception as exc:
        logger.debug("Could not read duration of %s: %s", path, exc)
        return 0.0


class DeviceMediaSource:
    """Audio files under ``root`` in path order, served in cursor pages."""

    def __init__(self, root: str, default_cover: Optional[str] = None):
        self.root = root
        self.default_cover = default_cover

    def request_permission(self) -> bool:
        if not os.path.isdir(self.root):
            raise MediaPermissionError(f"Music folder not found: {self.root}")
        if not os.access(self.root, os.R_OK | os.X_OK):
            raise MediaPermissionError(f"Media library permission denied: {self.root}")
        return True

    def _list_files(self) -> List[str]:
        found: List[str] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames.sort()
            for name in filenames:
                if name.lower().endswith(AUDIO_EXTENSIONS):
                    found.append(os.path.join(dirpath, name))
        found.sort()
        return found

    def _to_song(self, path: str) -> Song:
        rel = os.path.relpath(path, self.root)
        try:
            created = os.path.getctime(path)
        except OSError:
            created = None
        return Song(
            id=hashlib.sha1(rel.encode("utf-8")).hexdigest()[:16],
            title=os.path.splitext(os.path.basename(path))[0],
            artist="Unknown Artist",
            duration=read_duration(path),
            uri=path,
            cover=self.default_cover,
            origin=SongOrigin.DEVICE,
            created_at=created,
        )

    def get_assets(self, first: int, after: Optional[str] = None) -> MediaPage:
        if first <= 0:
            raise ValueError("first must be positive")
        offset = decode_cursor(after)
        try:
            files = self._list_files()
        except OSError as exc:
            raise MediaPermissionError(f"Unable to read music folder: {exc}") from exc
        window = files[offset:offset + first]
        next_offset = offset + len(window)
        return MediaPage(
            assets=[self._to_song(path) for path in window],
            end_cursor=encode_cursor(next_offset),
            has_next_page=next_offset < len(files),
        )


__all__ = ["DeviceMediaSource", "AUDIO_EXTENSIONS", "encode_cursor", "decode_cursor", "read_duration"]
