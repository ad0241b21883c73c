"""
Role assignment at registration.

A single shared invite secret lifts a new account to admin. It is not
per-invite, not revocable and not audited; rotating it means changing
ADMIN_INVITE_TOKEN and restarting.
"""

import hmac
from typing import Optional

from shared.config import AuthConfig
from shared.models import Role


class RegistrationPolicy:
    """Decides the role granted to a registering identity."""

    def __init__(self, config: AuthConfig):
        self._invite_token = config.admin_invite_token

    def resolve_role(self, invite_token: Optional[str]) -> Role:
        # An unset secret must never match an empty token.
        if not invite_token or not self._invite_token:
            return Role.USER
        if hmac.compare_digest(invite_token.encode("utf-8"), self._invite_token.encode("utf-8")):
            return Role.ADMIN
        return Role.USER
