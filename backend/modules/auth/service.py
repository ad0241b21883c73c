"""
Authentication service implementation.

Orchestrates registration, login, profile updates and the password
reset flow on top of the credential store, password hasher, token
service and registration policy. Password hashing is CPU-bound and
runs in a worker thread so it does not stall the event loop.
"""

import asyncio
import logging

from .exceptions import (
    AccountNotFoundError,
    InvalidCredentialsError,
    InvalidResetTokenError,
    ResetTokenError,
    UserNotFoundError,
)
from .interfaces import ICredentialStore, IResetMailer
from .mailer import build_reset_link
from .models import (
    AuthResponse,
    LoginRequest,
    ProfileChanges,
    ProfileUpdateRequest,
    PublicUser,
    RegisterRequest,
    User,
)
from .passwords import PasswordHasher
from .registration import RegistrationPolicy
from .reset_tokens import ResetTokenService
from .tokens import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Implementation of IAuthService."""

    def __init__(
        self,
        store: ICredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        reset_tokens: ResetTokenService,
        policy: RegistrationPolicy,
        mailer: IResetMailer,
        frontend_url: str,
    ):
        self._store = store
        self._hasher = hasher
        self._tokens = tokens
        self._reset_tokens = reset_tokens
        self._policy = policy
        self._mailer = mailer
        self._frontend_url = frontend_url

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """Create a user, granting admin only for the correct invite token."""
        role = self._policy.resolve_role(request.invite_token)
        secret_hash = await asyncio.to_thread(self._hasher.hash, request.secret)

        user = self._store.create(
            email=request.email,
            display_name=request.display_name,
            secret_hash=secret_hash,
            role=role,
            profile_image_ref=request.profile_image_ref,
        )
        logger.info("Registered user %s with role %s", user.id, user.role.value)
        return self._auth_response(user)

    async def login(self, request: LoginRequest) -> AuthResponse:
        """Verify credentials; unknown email and wrong secret look the same."""
        user = self._store.find_by_email(request.email)
        if user is None:
            await asyncio.to_thread(self._hasher.dummy_verify)
            raise InvalidCredentialsError()

        valid = await asyncio.to_thread(self._hasher.verify, request.secret, user.secret_hash)
        if not valid:
            logger.debug("Failed login for user %s", user.id)
            raise InvalidCredentialsError()

        if self._hasher.needs_rehash(user.secret_hash):
            new_hash = await asyncio.to_thread(self._hasher.hash, request.secret)
            user = self._store.update_profile(user.id, ProfileChanges(secret_hash=new_hash))
            logger.info("Upgraded password hash for user %s", user.id)

        logger.info("User %s logged in", user.id)
        return self._auth_response(user)

    async def get_profile(self, user_id: str) -> PublicUser:
        user = self._store.find_by_id(user_id)
        if user is None:
            raise AccountNotFoundError()
        return PublicUser.from_user(user)

    async def update_profile(self, user_id: str, request: ProfileUpdateRequest) -> PublicUser:
        """Apply a self-service profile update. Role cannot change here."""
        secret_hash = None
        if request.secret:
            secret_hash = await asyncio.to_thread(self._hasher.hash, request.secret)

        changes = ProfileChanges(
            display_name=request.display_name,
            email=request.email,
            secret_hash=secret_hash,
            profile_image_ref=request.profile_image_ref,
        )
        try:
            user = self._store.update_profile(user_id, changes)
        except UserNotFoundError:
            raise AccountNotFoundError()
        return PublicUser.from_user(user)

    async def request_password_reset(self, email: str) -> None:
        """
        Issue a reset token and hand the link to the mailer.

        Returns quietly for unknown emails so callers cannot discover
        which accounts exist.
        """
        user = self._store.find_by_email(email)
        if user is None:
            logger.debug("Password reset requested for unknown email")
            return

        token = self._reset_tokens.issue(user)
        await self._mailer.send_reset_link(user.email, build_reset_link(self._frontend_url, token))

    async def confirm_password_reset(self, token: str, new_secret: str) -> None:
        try:
            await asyncio.to_thread(self._reset_tokens.consume_token, token, new_secret)
        except (ResetTokenError, UserNotFoundError) as e:
            logger.debug("Password reset rejected: %s", e.code)
            raise InvalidResetTokenError() from None

    def _auth_response(self, user: User) -> AuthResponse:
        token = self._tokens.issue(user.id, user.role)
        return AuthResponse(token=token, role=user.role, user_id=user.id)
