"""
Bearer token issuance and verification.

Tokens are HS256 JWTs carrying the user ID and role. Verification trusts
the embedded claims and never touches the credential store, so a role
change or account removal only takes effect once outstanding tokens
expire. There is no revocation list.
"""

from datetime import datetime, timezone
from typing import Callable

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.config import AuthConfig
from shared.models import AuthenticatedUser, Role

from .exceptions import ExpiredTokenError, InvalidSignatureError, MalformedTokenError
from .models import TokenClaims


_REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Signs and verifies stateless bearer tokens."""

    def __init__(
        self,
        config: AuthConfig,
        clock: Callable[[], datetime] = utcnow,
    ):
        if not config.jwt_secret:
            raise RuntimeError(
                "Server authentication not configured. Set the JWT_SECRET environment variable."
            )
        self._secret = config.jwt_secret
        self._algorithm = config.jwt_algorithm
        self._ttl = config.access_token_ttl
        self._clock = clock

    def issue(self, user_id: str, role: Role) -> str:
        """Create a signed token valid for the configured TTL."""
        now = self._clock()
        payload = {
            "sub": user_id,
            "role": Role(role).value,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> AuthenticatedUser:
        """
        Verify a token and return the identity it carries.

        Raises:
            MalformedTokenError: Token cannot be decoded or has bad claims
            InvalidSignatureError: Signature does not match
            ExpiredTokenError: Token is past its expiry
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS},
                leeway=0,
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidSignatureError:
            raise InvalidSignatureError()
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(f"Malformed authentication token: {e}")

        try:
            claims = TokenClaims(**payload)
        except PydanticValidationError:
            raise MalformedTokenError("Token claims are invalid")

        return AuthenticatedUser(id=claims.sub, role=claims.role)
