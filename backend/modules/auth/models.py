"""
Authentication module data models.

Stored records (User, ResetTokenRecord), token claims, and the
request/response bodies exposed by the auth routes. Wire bodies use
camelCase; Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from shared.models import Role


class ResetTokenRecord(BaseModel):
    """Pending password reset: only the digest of the plaintext is kept."""

    token_hash: str = Field(..., description="SHA-256 hex digest of the plaintext token")
    expires_at: datetime = Field(..., description="Expiry instant (UTC)")

    model_config = {"frozen": True}


class User(BaseModel):
    """
    Durable user record owned by the credential store.

    Contains the password hash, so it must never be returned from an
    API route directly. Use PublicUser for that.
    """

    id: str = Field(..., description="Opaque user ID")
    email: str = Field(..., description="Normalized (lower-case) email")
    display_name: str = Field(default="", description="Display name")
    secret_hash: str = Field(..., repr=False, description="PasswordHasher output")
    role: Role = Field(default=Role.USER, description="User role")
    profile_image_ref: Optional[str] = Field(None, description="Profile image URL")
    reset_token: Optional[ResetTokenRecord] = Field(None, repr=False)
    created_at: datetime = Field(..., description="Account creation time")
    updated_at: datetime = Field(..., description="Last update time")

    model_config = {"frozen": True}


class ProfileChanges(BaseModel):
    """Partial update applied by the credential store. None means unchanged."""

    display_name: Optional[str] = None
    email: Optional[str] = None
    secret_hash: Optional[str] = Field(None, repr=False)
    profile_image_ref: Optional[str] = None

    def as_updates(self) -> dict:
        """Return only the fields that were provided."""
        return self.model_dump(exclude_none=True)


class TokenClaims(BaseModel):
    """Decoded bearer token payload."""

    sub: str = Field(..., min_length=1, description="Subject (user ID)")
    role: Role = Field(..., description="Role at issue time")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")


# -----------------------------------------------------------------------------
# API bodies
# -----------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(_CamelModel):
    email: EmailStr
    secret: str = Field(..., min_length=1)


class RegisterRequest(_CamelModel):
    email: EmailStr
    secret: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)
    profile_image_ref: Optional[str] = None
    invite_token: Optional[str] = None


class ProfileUpdateRequest(_CamelModel):
    display_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    secret: Optional[str] = Field(None, min_length=1)
    profile_image_ref: Optional[str] = None


class PasswordResetRequest(_CamelModel):
    email: EmailStr


class PasswordResetConfirm(_CamelModel):
    token: str = Field(..., min_length=1)
    new_secret: str = Field(..., min_length=1)


class AuthResponse(_CamelModel):
    """Returned by login and register."""

    token: str
    role: Role
    user_id: str


class ImageUploadResponse(_CamelModel):
    """Returned by the image upload endpoint."""

    message: str
    image_url: str


class PublicUser(_CamelModel):
    """User projection safe to return to clients."""

    id: str
    email: str
    display_name: str
    role: Role
    profile_image_ref: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            profile_image_ref=user.profile_image_ref,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
