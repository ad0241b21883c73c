"""
Supabase-backed credential store.

Expects a ``users`` table with a unique index on ``email``; emails are
normalized before every write so the index enforces case-insensitive
uniqueness. Each method is a single PostgREST statement, which gives
atomicity at the record level. Store failures are not retried.

Columns:
    id, email, display_name, secret_hash, role, profile_image_ref,
    reset_token_hash, reset_token_expires_at, created_at, updated_at
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from shared.models import Role
from shared.repository import BaseRepository

from .exceptions import (
    CredentialStoreUnavailableError,
    EmailAlreadyExistsError,
    UserNotFoundError,
)
from .models import ProfileChanges, ResetTokenRecord, User
from .store import normalize_email

logger = logging.getLogger(__name__)

# Postgres unique_violation
_UNIQUE_VIOLATION = "23505"

_CLEARED_RESET_TOKEN = {"reset_token_hash": None, "reset_token_expires_at": None}


@contextmanager
def _store_errors() -> Iterator[None]:
    """Translate client failures into store exceptions."""
    try:
        yield
    except APIError as e:
        if e.code == _UNIQUE_VIOLATION:
            raise EmailAlreadyExistsError() from e
        logger.warning("Credential store request failed: %s", e.message)
        raise CredentialStoreUnavailableError() from e
    except httpx.HTTPError as e:
        logger.warning("Credential store unreachable: %s", e)
        raise CredentialStoreUnavailableError() from e


class SupabaseCredentialStore(BaseRepository[User]):
    """Credential store backed by a Supabase table."""

    def __init__(self, db: Client, table: str = "users") -> None:
        super().__init__(db)
        self._table = table

    def find_by_email(self, email: str) -> Optional[User]:
        with _store_errors():
            result = (
                self._db.table(self._table)
                .select("*")
                .eq("email", normalize_email(email))
                .execute()
            )
        return self._map_to_user(result.data[0]) if result.data else None

    def find_by_id(self, user_id: str) -> Optional[User]:
        with _store_errors():
            result = self._db.table(self._table).select("*").eq("id", user_id).execute()
        return self._map_to_user(result.data[0]) if result.data else None

    def create(
        self,
        email: str,
        display_name: str,
        secret_hash: str,
        role: Role,
        profile_image_ref: Optional[str] = None,
    ) -> User:
        now = datetime.now(timezone.utc).isoformat()
        data = {
            "id": str(uuid.uuid4()),
            "email": normalize_email(email),
            "display_name": display_name,
            "secret_hash": secret_hash,
            "role": Role(role).value,
            "profile_image_ref": profile_image_ref,
            "created_at": now,
            "updated_at": now,
        }
        with _store_errors():
            result = self._db.table(self._table).insert(data).execute()
        return self._map_to_user(result.data[0])

    def update_profile(self, user_id: str, changes: ProfileChanges) -> User:
        data: dict[str, Any] = changes.as_updates()
        if "email" in data:
            data["email"] = normalize_email(data["email"])
        data["updated_at"] = datetime.now(timezone.utc).isoformat()

        with _store_errors():
            result = self._db.table(self._table).update(data).eq("id", user_id).execute()
        if not result.data:
            raise UserNotFoundError(user_id)
        return self._map_to_user(result.data[0])

    def set_reset_token(self, user_id: str, token_hash: str, expires_at: datetime) -> None:
        data = {
            "reset_token_hash": token_hash,
            "reset_token_expires_at": expires_at.isoformat(),
        }
        with _store_errors():
            result = self._db.table(self._table).update(data).eq("id", user_id).execute()
        if not result.data:
            raise UserNotFoundError(user_id)

    def claim_reset_token(self, user_id: str, token_hash: str, now: datetime) -> bool:
        # Conditional update; only the statement that matches the row wins.
        with _store_errors():
            result = (
                self._db.table(self._table)
                .update(_CLEARED_RESET_TOKEN)
                .eq("id", user_id)
                .eq("reset_token_hash", token_hash)
                .gte("reset_token_expires_at", now.isoformat())
                .execute()
            )
        return bool(result.data)

    def clear_expired_reset_token(self, user_id: str, now: datetime) -> None:
        # The expiry filter keeps a token re-issued in the meantime.
        with _store_errors():
            (
                self._db.table(self._table)
                .update(_CLEARED_RESET_TOKEN)
                .eq("id", user_id)
                .lt("reset_token_expires_at", now.isoformat())
                .execute()
            )

    def list_users(self) -> list[User]:
        with _store_errors():
            result = self._db.table(self._table).select("*").order("created_at").execute()
        return [self._map_to_user(row) for row in result.data]

    def delete(self, user_id: str) -> None:
        with _store_errors():
            result = self._db.table(self._table).delete().eq("id", user_id).execute()
        if not result.data:
            raise UserNotFoundError(user_id)

    def _map_to_user(self, data: dict[str, Any]) -> User:
        """Map database row to User model."""
        reset_token = None
        if data.get("reset_token_hash") and data.get("reset_token_expires_at"):
            reset_token = ResetTokenRecord(
                token_hash=data["reset_token_hash"],
                expires_at=data["reset_token_expires_at"],
            )

        return User(
            id=str(data["id"]),
            email=data["email"],
            display_name=data.get("display_name") or "",
            secret_hash=data["secret_hash"],
            role=Role(data.get("role") or Role.USER.value),
            profile_image_ref=data.get("profile_image_ref"),
            reset_token=reset_token,
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
