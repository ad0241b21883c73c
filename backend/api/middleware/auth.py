"""
Bearer token authentication and role gating.

Every protected route depends on get_current_user, which resolves the
``Authorization: Bearer <token>`` header into an AuthenticatedUser.
Role gates built with require_role() always run after authentication.
"""

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import (
    InsufficientPermissionsError,
    MissingTokenError,
    UnauthenticatedError,
)
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser, Role

from ..dependencies import get_token_service

if TYPE_CHECKING:
    from modules.auth.tokens import TokenService

logger = logging.getLogger(__name__)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


def authenticate(token: str, tokens: "TokenService") -> AuthenticatedUser:
    """
    Resolve a bearer token to the identity it carries.

    Malformed, wrongly signed and expired tokens all raise the same
    UnauthenticatedError; the real cause is only logged.
    """
    try:
        return tokens.verify(token)
    except AuthenticationError as e:
        logger.debug("Rejected bearer token: %s", e.code)
        raise UnauthenticatedError() from None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: "TokenService" = Depends(get_token_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()
    return authenticate(credentials.credentials, tokens)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: "TokenService" = Depends(get_token_service),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts user if authenticated.

    Use this for endpoints that work with or without authentication.
    """
    if credentials is None:
        return None

    try:
        return authenticate(credentials.credentials, tokens)
    except UnauthenticatedError:
        return None


def require_role(allowed: Iterable[Role]):
    """
    Build a dependency that admits only users whose role is in ``allowed``.

    Usage:
        @router.get("/admin", dependencies=[Depends(require_role({Role.ADMIN}))])
    """
    allowed_roles = frozenset(Role(r) for r in allowed)

    async def role_gate(
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> AuthenticatedUser:
        if user.role not in allowed_roles:
            raise InsufficientPermissionsError(
                required_roles=sorted(r.value for r in allowed_roles),
                user_role=user.role.value,
            )
        return user

    return role_gate


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_user)
OptionalAuth = Depends(get_optional_user)
RequireAdmin = Depends(require_role({Role.ADMIN}))
