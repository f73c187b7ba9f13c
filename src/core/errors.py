#!/usr/bin/env python
"""Error taxonomy shared by the backend service and the client library."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for errors that carry a user-facing message and HTTP status."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(AppError):
    """Client-correctable input; lists every violated rule."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None) -> None:
        self.errors = list(errors)
        if message is None and len(self.errors) == 1:
            message = self.errors[0].get("message")
        super().__init__(message)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class ConflictError(AppError):
    status_code = 400
    default_message = "Email already in use"


class AuthError(AppError):
    """Bad credentials. The message never says which part was wrong."""

    status_code = 400
    default_message = "Invalid email or password"


class MediaPermissionError(AppError):
    status_code = 403
    default_message = "Unable to access your music files"


class NetworkError(AppError):
    status_code = 502
    default_message = "Service unreachable"


class CacheError(AppError):
    """Local storage read/write failure. Callers log it and carry on."""

    default_message = "Local storage failure"


__all__ = [
    "AppError",
    "ValidationError",
    "ConflictError",
    "AuthError",
    "MediaPermissionError",
    "NetworkError",
    "CacheError",
]
