#!/usr/bin/env python
"""Account registration, login and token validation."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.auth.tokens import TokenIssuer
from src.core.errors import AppError, AuthError, ConflictError, ValidationError
from src.database.db_manager import User, db

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


def _normalize_email(value: Any) -> Any:
    if value is None:
        return ""
    if not isinstance(value, str):
        return value
    return value.strip().lower()


def _type_errors(**fields: Any) -> List[Dict[str, str]]:
    labels = {"email": "Email", "fullName": "Full name", "password": "Password", "confirmPassword": "Password confirmation"}
    return [
        {"field": field, "message": f"{labels[field]} must be a string"}
        for field, value in fields.items()
        if value is not None and not isinstance(value, str)
    ]


def validate_signup(email: Any, full_name: Any, password: Any, confirm_password: Any) -> List[Dict[str, str]]:
    """Return every violated signup rule; an empty list means the input is acceptable."""
    errors = _type_errors(email=email, fullName=full_name, password=password, confirmPassword=confirm_password)
    mistyped = {error["field"] for error in errors}
    if "email" not in mistyped and (not email or not EMAIL_RE.match(email)):
        errors.append({"field": "email", "message": "Invalid email format"})
    if "fullName" not in mistyped and not (full_name or "").strip():
        errors.append({"field": "fullName", "message": "Full name is required"})
    if "password" not in mistyped and len(password or "") < MIN_PASSWORD_LENGTH:
        errors.append({"field": "password", "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"})
    if not mistyped & {"password", "confirmPassword"} and (confirm_password or "") != (password or ""):
        errors.append({"field": "confirmPassword", "message": "Passwords do not match"})
    return errors


class AccountService:
    def __init__(self, token_issuer: TokenIssuer):
        self.tokens = token_issuer

    def register(self, email: str, full_name: str, password: str, confirm_password: str) -> int:
        email = _normalize_email(email)
        if isinstance(full_name, str):
            full_name = full_name.strip()
        errors = validate_signup(email, full_name, password, confirm_password)
        if errors:
            raise ValidationError(errors)

        # Not atomic with the insert; the unique index settles concurrent signups.
        if User.query.filter_by(email=email).first() is not None:
            raise ConflictError("Email already in use")

        user = User(email=email, full_name=full_name)
        user.set_password(password)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.info("Concurrent signup lost the race for %s", email)
            raise ConflictError("Email already in use")
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("Registration failed for %s: %s", email, exc, exc_info=True)
            raise AppError("Server error") from exc

        logger.info("Registered user %s", user.id)
        return user.id

    def login(self, email: str, password: str) -> Dict[str, Any]:
        email = _normalize_email(email)
        errors = _type_errors(email=email, password=password)
        mistyped = {error["field"] for error in errors}
        if "email" not in mistyped and (not email or not EMAIL_RE.match(email)):
            errors.append({"field": "email", "message": "Invalid email format"})
        if "password" not in mistyped and not password:
            errors.append({"field": "password", "message": "Password is required"})
        if errors:
            raise ValidationError(errors)

        try:
            user = User.query.filter_by(email=email).first()
        except SQLAlchemyError as exc:
            logger.error("Login lookup failed: %s", exc, exc_info=True)
            raise AppError("Server error") from exc

        if user is None or not user.check_password(password):
            raise AuthError("Invalid email or password")

        return {"token": self.tokens.issue(user.id), "user": user.to_dict()}

    def issue_token(self, user_id: int, issued_at: Optional[datetime] = None) -> str:
        return self.tokens.issue(user_id, issued_at=issued_at)

    def validate_token(self, token: str) -> bool:
        return self.tokens.is_valid(token)

    def resolve_token(self, token: str) -> Optional[User]:
        claims = self.tokens.decode(token)
        if not claims:
            return None
        try:
            return db.session.get(User, int(claims.get("id")))
        except (TypeError, ValueError):
            return None


__all__ = ["AccountService", "validate_signup", "EMAIL_RE", "MIN_PASSWORD_LENGTH"]
