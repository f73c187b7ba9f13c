#!/usr/bin/env python
"""Signed, time-limited bearer tokens (HS256 JWT)."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

logger = logging.getLogger(__name__)


class TokenIssuer:
    """Mint and verify bearer tokens carrying the user id."""

    def __init__(self, secret: str, *, expires_in: int = 3600, algorithm: str = "HS256") -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self.expires_in = expires_in
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config) -> "TokenIssuer":
        return cls(
            config.get("JWT_SECRET") or config.get("SECRET_KEY"),
            expires_in=int(config.get("JWT_EXPIRES_SECONDS", 3600)),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        )

    def issue(self, user_id: int, issued_at: Optional[datetime] = None) -> str:
        issued = issued_at or datetime.now(timezone.utc)
        if issued.tzinfo is None:
            issued = issued.replace(tzinfo=timezone.utc)
        payload = {
            "id": user_id,
            "iat": issued,
            "exp": issued + timedelta(seconds=self.expires_in),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the claims of a well-signed, unexpired token, else None."""
        if not token:
            return None
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired bearer token")
            return None
        except jwt.InvalidTokenError as exc:
            logger.debug("Rejected invalid bearer token: %s", exc)
            return None

    def is_valid(self, token: str) -> bool:
        return self.decode(token) is not None


def bearer_token_from_header(header_value: Optional[str]) -> Optional[str]:
    if not header_value:
        return None
    scheme, _, credentials = header_value.strip().partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


__all__ = ["TokenIssuer", "bearer_token_from_header"]
