"""
Password reset tokens.

A reset token is a high-entropy random value handed to the user out of
band. Only its SHA-256 digest is stored on the user record, together with
an expiry. The plaintext is prefixed with the user ID so the confirm step
can find the record; the prefix grants nothing without the random part.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime
from typing import Callable

from shared.config import AuthConfig

from .exceptions import (
    ResetTokenExpiredError,
    ResetTokenMismatchError,
    ResetTokenNotFoundError,
)
from .interfaces import ICredentialStore
from .models import ProfileChanges, User
from .passwords import PasswordHasher
from .tokens import utcnow

logger = logging.getLogger(__name__)

_TOKEN_BYTES = 32
_SEPARATOR = "."


def hash_reset_token(plaintext: str) -> str:
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()


class ResetTokenService:
    """Issues and consumes single-use password reset tokens."""

    def __init__(
        self,
        store: ICredentialStore,
        hasher: PasswordHasher,
        config: AuthConfig,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._store = store
        self._hasher = hasher
        self._ttl = config.reset_token_ttl
        self._clock = clock

    def issue(self, user: User) -> str:
        """
        Create a reset token for a user, replacing any pending one.

        Returns:
            The plaintext token. It is not recoverable after this call.
        """
        plaintext = f"{user.id}{_SEPARATOR}{secrets.token_urlsafe(_TOKEN_BYTES)}"
        expires_at = self._clock() + self._ttl
        self._store.set_reset_token(user.id, hash_reset_token(plaintext), expires_at)
        logger.info("Issued password reset token for user %s", user.id)
        return plaintext

    def consume(self, user_id: str, plaintext: str, new_secret: str) -> None:
        """
        Check a reset token and, if valid, replace the user's secret.

        The token is claimed with a single conditional write on the store,
        so of several concurrent confirms with the same token exactly one
        succeeds, and a token issued in the meantime is left in place.

        Raises:
            ResetTokenNotFoundError: No user, no pending token, or the token
                was claimed by another request
            ResetTokenExpiredError: Pending token is past its expiry
            ResetTokenMismatchError: Token does not match the stored digest
            InvalidInputError: If ``new_secret`` is empty
        """
        user = self._store.find_by_id(user_id)
        if user is None or user.reset_token is None:
            raise ResetTokenNotFoundError()

        now = self._clock()
        if now > user.reset_token.expires_at:
            self._store.clear_expired_reset_token(user_id, now)
            raise ResetTokenExpiredError()

        token_hash = hash_reset_token(plaintext)
        if not hmac.compare_digest(token_hash, user.reset_token.token_hash):
            raise ResetTokenMismatchError()

        # An empty secret must not spend the token.
        new_hash = self._hasher.hash(new_secret)
        if not self._store.claim_reset_token(user_id, token_hash, now):
            raise ResetTokenNotFoundError()

        self._store.update_profile(user_id, ProfileChanges(secret_hash=new_hash))
        logger.info("Password reset completed for user %s", user_id)

    def consume_token(self, plaintext: str, new_secret: str) -> None:
        """Like consume(), taking the user ID from the token prefix."""
        user_id, sep, _ = plaintext.partition(_SEPARATOR)
        if not sep or not user_id:
            raise ResetTokenNotFoundError()
        self.consume(user_id, plaintext, new_secret)
