#!/usr/bin/env python
"""Auth state holder passed explicitly to whatever needs the signed-in user."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from src.core.errors import CacheError

from .storage import USER_DATA_KEY, USER_TOKEN_KEY, LocalStore

logger = logging.getLogger(__name__)


class AuthSession:
    def __init__(self, store: LocalStore, validator: Callable[[str], bool]):
        self._store = store
        self._validate = validator
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.is_loading = True
        self._listeners: List[Callable[["AuthSession"], None]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def subscribe(self, listener: Callable[["AuthSession"], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _clear(self) -> None:
        self.token = None
        self.user = None

    def restore(self) -> bool:
        """Adopt a previously stored token only if the backend still accepts it."""
        try:
            token = self._store.get(USER_TOKEN_KEY)
            if token:
                if self._validate(token):
                    user = self._store.get(USER_DATA_KEY)
                    if user:
                        self.token = token
                        self.user = user
                else:
                    logger.info("Stored token rejected; clearing saved credentials")
                    self._store.remove(USER_TOKEN_KEY, USER_DATA_KEY)
                    self._clear()
        except CacheError as exc:
            logger.error("Failed to load auth state: %s", exc)
            self._clear()
        finally:
            self.is_loading = False
        self._notify()
        return self.is_authenticated

    def sign_in(self, token: str, user: Dict[str, Any]) -> None:
        try:
            self._store.set_many({USER_TOKEN_KEY: token, USER_DATA_KEY: user})
        except CacheError as exc:
            logger.error("Error during sign in: %s", exc)
            return
        self.token = token
        self.user = user
        self._notify()

    def sign_out(self) -> None:
        try:
            self._store.remove(USER_TOKEN_KEY, USER_DATA_KEY)
        except CacheError as exc:
            logger.error("Error during sign out: %s", exc)
        self._clear()
        self._notify()


__all__ = ["AuthSession"]
