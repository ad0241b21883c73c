"""
Shared infrastructure for Taskboard backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- logging: Root logger setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import AuthConfig, Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    TaskboardError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .models import AuthenticatedUser, Role

__all__ = [
    "AuthConfig",
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "TaskboardError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "AuthenticatedUser",
    "Role",
]
