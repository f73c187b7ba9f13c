"""Route blueprints exposed via Flask."""

from .users import users_bp
from .health import health_bp

__all__ = [
    "users_bp",
    "health_bp",
]
