"""Account domain services (signup, login, bearer tokens)."""

from .service import AccountService, validate_signup

__all__ = ["AccountService", "validate_signup"]
