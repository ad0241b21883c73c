"""Request authentication and authorization dependencies."""

from .auth import get_current_user, get_optional_user, require_role

__all__ = ["get_current_user", "get_optional_user", "require_role"]
