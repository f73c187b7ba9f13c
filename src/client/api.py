#!/usr/bin/env python
"""HTTP client for the account API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from src.core.errors import AuthError, ConflictError, NetworkError, ValidationError

logger = logging.getLogger(__name__)


class BackendClient:
    def __init__(self, base_url: str, *, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Could not reach {url}") from exc
        if response.status_code >= 500:
            logger.warning("%s %s returned %s", method, url, response.status_code)
            raise NetworkError(f"Server error ({response.status_code})")
        return response

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def signup(self, email: str, full_name: str, password: str, confirm_password: str) -> int:
        response = self._request(
            "POST",
            "/users/signup",
            json={
                "email": email,
                "fullName": full_name,
                "password": password,
                "confirmPassword": confirm_password,
            },
        )
        body = self._json(response)
        if response.status_code == 201:
            return int(body["userId"])
        if body.get("errors"):
            raise ValidationError(body["errors"])
        # A 400 carrying only a message is the duplicate-email rejection
        if response.status_code in (400, 409) and body.get("message"):
            raise ConflictError(body["message"])
        raise ValidationError.single("form", "Signup failed")

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Return ``{"token", "user"}``; any rejection is an AuthError."""
        response = self._request("POST", "/users/login", json={"email": email, "password": password})
        body = self._json(response)
        if response.status_code == 200 and body.get("token"):
            return body
        raise AuthError(body.get("message"))

    def validate_token(self, token: str) -> bool:
        try:
            response = self._request("GET", "/users/validate", headers={"Authorization": f"Bearer {token}"})
        except NetworkError:
            return False
        return response.status_code == 200

    def me(self, token: str) -> Dict[str, Any]:
        response = self._request("GET", "/users/me", headers={"Authorization": f"Bearer {token}"})
        if response.status_code != 200:
            raise AuthError("Session expired")
        return self._json(response).get("user") or {}


__all__ = ["BackendClient"]
