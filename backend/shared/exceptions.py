"""
Base exception classes for the Taskboard backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base class to a single HTTP status code.
"""

from typing import Optional, Any


class TaskboardError(Exception):
    """
    Base exception for all Taskboard errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(TaskboardError):
    """Resource not found."""

    pass


class ValidationError(TaskboardError):
    """Input validation failed."""

    pass


class ConflictError(TaskboardError):
    """Resource already exists or would violate a uniqueness rule."""

    pass


class AuthenticationError(TaskboardError):
    """Authentication failed (invalid or missing credentials)."""

    pass


class AuthorizationError(TaskboardError):
    """Authorization failed (insufficient permissions)."""

    pass


class ExternalServiceError(TaskboardError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
