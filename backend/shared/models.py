"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum
from pydantic import BaseModel, Field


class Role(str, Enum):
    """Privilege level carried by a user and their bearer tokens."""

    USER = "user"
    ADMIN = "admin"


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated caller.

    Populated from verified bearer-token claims and made available
    to route handlers via dependency injection. The store is not
    consulted, so this reflects the role at token issue time.
    """

    id: str = Field(..., description="User ID")
    role: Role = Field(default=Role.USER, description="User role")

    model_config = {
        "frozen": True,  # Read-only for downstream handlers
        "extra": "ignore",
    }

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
