"""Core primitives shared across backend and client layers."""

from .errors import (
    AppError,
    AuthError,
    CacheError,
    ConflictError,
    MediaPermissionError,
    NetworkError,
    ValidationError,
)

__all__ = [
    "AppError",
    "AuthError",
    "CacheError",
    "ConflictError",
    "MediaPermissionError",
    "NetworkError",
    "ValidationError",
]
