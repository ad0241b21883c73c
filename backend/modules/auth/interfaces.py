"""
Authentication module interfaces.

Other modules and the API layer depend on these protocols, not on the
concrete implementations. The credential store in particular is backed by
an external document store and is swapped per deployment.
"""

from datetime import datetime
from typing import Protocol, Optional, runtime_checkable

from shared.models import Role

from .models import (
    AuthResponse,
    LoginRequest,
    ProfileChanges,
    ProfileUpdateRequest,
    PublicUser,
    RegisterRequest,
    User,
)


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Durable user records.

    Implementations must make create() an atomic check-and-insert on the
    normalized email, and reset-token writes atomic per record.
    """

    def find_by_email(self, email: str) -> Optional[User]:
        """Look up a user by email, case-insensitively."""
        ...

    def find_by_id(self, user_id: str) -> Optional[User]:
        """Look up a user by ID."""
        ...

    def create(
        self,
        email: str,
        display_name: str,
        secret_hash: str,
        role: Role,
        profile_image_ref: Optional[str] = None,
    ) -> User:
        """
        Create a user.

        Raises:
            EmailAlreadyExistsError: If the email is taken (case-insensitive)
        """
        ...

    def update_profile(self, user_id: str, changes: ProfileChanges) -> User:
        """
        Apply a partial profile update.

        Raises:
            UserNotFoundError: If the user does not exist
            EmailAlreadyExistsError: If the new email belongs to another user
        """
        ...

    def set_reset_token(self, user_id: str, token_hash: str, expires_at: datetime) -> None:
        """Store a reset token digest, replacing any pending one."""
        ...

    def claim_reset_token(self, user_id: str, token_hash: str, now: datetime) -> bool:
        """
        Atomically clear the pending reset token if it matches.

        The token is cleared only when its digest equals ``token_hash`` and
        it has not expired at ``now``. Returns True for the single caller
        that cleared it.
        """
        ...

    def clear_expired_reset_token(self, user_id: str, now: datetime) -> None:
        """Clear the pending reset token only if it is expired at ``now``."""
        ...

    def list_users(self) -> list[User]:
        """Return all users, oldest first."""
        ...

    def delete(self, user_id: str) -> None:
        """
        Remove a user record.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...


@runtime_checkable
class IResetMailer(Protocol):
    """Out-of-band delivery of password reset links."""

    async def send_reset_link(self, to_address: str, reset_link: str) -> None:
        ...


@runtime_checkable
class IImageUploader(Protocol):
    """Storage for uploaded profile images."""

    async def upload(self, filename: str, data: bytes) -> str:
        """
        Store an image and return the URL it can be fetched from.

        Raises:
            InvalidInputError: If the file is not an acceptable image
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for the auth entry points.

    This protocol defines the contract that the auth module exposes
    to the routing layer.
    """

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """
        Create an account and return a bearer token for it.

        Raises:
            EmailAlreadyExistsError: If the email is taken
        """
        ...

    async def login(self, request: LoginRequest) -> AuthResponse:
        """
        Check credentials and return a bearer token.

        Raises:
            InvalidCredentialsError: On unknown email or wrong secret
        """
        ...

    async def get_profile(self, user_id: str) -> PublicUser:
        """Return the public profile of a user."""
        ...

    async def update_profile(self, user_id: str, request: ProfileUpdateRequest) -> PublicUser:
        """Apply a profile update made by the user themselves."""
        ...

    async def request_password_reset(self, email: str) -> None:
        """Issue and deliver a reset token. Silent for unknown emails."""
        ...

    async def confirm_password_reset(self, token: str, new_secret: str) -> None:
        """
        Consume a reset token and set a new secret.

        Raises:
            InvalidResetTokenError: For any reset token failure
        """
        ...
