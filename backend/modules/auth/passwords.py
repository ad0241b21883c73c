"""
Password hashing.

Salted, self-describing pbkdf2_sha256 hashes via passlib. The rounds
count is the work factor and is embedded in every hash, so raising it
only affects new hashes; older ones are re-hashed on the next login.
"""

from passlib.context import CryptContext

from shared.config import AuthConfig

from .exceptions import InvalidInputError


class PasswordHasher:
    """One-way hashing and constant-time verification of user secrets."""

    def __init__(self, config: AuthConfig):
        rounds = config.password_hash_rounds
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__rounds=rounds,
        )

    def hash(self, secret: str) -> str:
        """
        Hash a secret.

        Raises:
            InvalidInputError: If the secret is empty
        """
        if not secret:
            raise InvalidInputError("Password must not be empty", field="secret")
        return self._context.hash(secret)

    def verify(self, secret: str, secret_hash: str) -> bool:
        """Return True iff ``secret`` reproduces ``secret_hash``."""
        if not secret or not secret_hash:
            return False
        try:
            return self._context.verify(secret, secret_hash)
        except (ValueError, TypeError):
            # Unrecognized or corrupt hash string
            return False

    def needs_rehash(self, secret_hash: str) -> bool:
        """True when the hash was made with a different work factor than configured."""
        try:
            return self._context.needs_update(secret_hash)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> bool:
        """
        Spend the cost of one verify against a throwaway hash.

        Called when no account matches, so a missing user takes as long
        to reject as a wrong secret. Always returns False.
        """
        return self._context.dummy_verify()
