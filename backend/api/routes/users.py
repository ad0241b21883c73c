"""
User directory endpoints.

Admin-only listing and removal of accounts, plus lookup by ID for any
authenticated user. Removing an account invalidates its pending reset
token; bearer tokens already issued stay valid until they expire.
"""

import logging

from fastapi import APIRouter, Depends

from modules.auth.exceptions import UserNotFoundError
from modules.auth.interfaces import ICredentialStore
from modules.auth.models import PublicUser
from shared.models import AuthenticatedUser, Role

from ..dependencies import get_credential_store
from ..middleware.auth import get_current_user, require_role

logger = logging.getLogger(__name__)

router = APIRouter()

require_admin = require_role({Role.ADMIN})


@router.get("", response_model=list[PublicUser])
async def list_users(
    admin: AuthenticatedUser = Depends(require_admin),
    store: ICredentialStore = Depends(get_credential_store),
) -> list[PublicUser]:
    """List all users. Admin only."""
    return [PublicUser.from_user(u) for u in store.list_users()]


@router.get("/{user_id}", response_model=PublicUser)
async def get_user(
    user_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ICredentialStore = Depends(get_credential_store),
) -> PublicUser:
    found = store.find_by_id(user_id)
    if found is None:
        raise UserNotFoundError(user_id)
    return PublicUser.from_user(found)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    admin: AuthenticatedUser = Depends(require_admin),
    store: ICredentialStore = Depends(get_credential_store),
) -> None:
    """Delete a user. Admin only."""
    store.delete(user_id)
    logger.info("User %s deleted by admin %s", user_id, admin.id)
