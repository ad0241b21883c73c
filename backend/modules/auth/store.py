"""
In-memory credential store.

For testing and local development. Use SupabaseCredentialStore for
production. Every read-modify-write happens under one lock, which gives
the same per-record atomicity the document store provides.
"""

import hmac
import threading
import uuid
from datetime import datetime, timezone
from typing import Optional

from shared.models import Role

from .exceptions import EmailAlreadyExistsError, UserNotFoundError
from .models import ProfileChanges, ResetTokenRecord, User


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class InMemoryCredentialStore:
    """Credential store holding users in process memory."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}
        self._ids_by_email: dict[str, str] = {}

    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._ids_by_email.get(normalize_email(email))
            return self._users.get(user_id) if user_id else None

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def create(
        self,
        email: str,
        display_name: str,
        secret_hash: str,
        role: Role,
        profile_image_ref: Optional[str] = None,
    ) -> User:
        key = normalize_email(email)
        now = datetime.now(timezone.utc)
        with self._lock:
            if key in self._ids_by_email:
                raise EmailAlreadyExistsError()
            user = User(
                id=str(uuid.uuid4()),
                email=key,
                display_name=display_name,
                secret_hash=secret_hash,
                role=role,
                profile_image_ref=profile_image_ref,
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user
            self._ids_by_email[key] = user.id
            return user

    def update_profile(self, user_id: str, changes: ProfileChanges) -> User:
        updates = changes.as_updates()
        with self._lock:
            user = self._require(user_id)
            if "email" in updates:
                updates["email"] = normalize_email(updates["email"])
                owner = self._ids_by_email.get(updates["email"])
                if owner is not None and owner != user_id:
                    raise EmailAlreadyExistsError()
            updates["updated_at"] = datetime.now(timezone.utc)
            updated = user.model_copy(update=updates)
            if updated.email != user.email:
                del self._ids_by_email[user.email]
                self._ids_by_email[updated.email] = user_id
            self._users[user_id] = updated
            return updated

    def set_reset_token(self, user_id: str, token_hash: str, expires_at: datetime) -> None:
        record = ResetTokenRecord(token_hash=token_hash, expires_at=expires_at)
        with self._lock:
            user = self._require(user_id)
            self._users[user_id] = user.model_copy(update={"reset_token": record})

    def claim_reset_token(self, user_id: str, token_hash: str, now: datetime) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None or user.reset_token is None:
                return False
            record = user.reset_token
            if now > record.expires_at:
                return False
            if not hmac.compare_digest(record.token_hash, token_hash):
                return False
            self._users[user_id] = user.model_copy(update={"reset_token": None})
            return True

    def clear_expired_reset_token(self, user_id: str, now: datetime) -> None:
        with self._lock:
            user = self._users.get(user_id)
            if user is None or user.reset_token is None:
                return
            if now > user.reset_token.expires_at:
                self._users[user_id] = user.model_copy(update={"reset_token": None})

    def list_users(self) -> list[User]:
        with self._lock:
            return sorted(self._users.values(), key=lambda u: u.created_at)

    def delete(self, user_id: str) -> None:
        with self._lock:
            user = self._require(user_id)
            del self._users[user_id]
            del self._ids_by_email[user.email]

    def _require(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
