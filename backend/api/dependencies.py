"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations from one Settings instance. Route handlers receive
services through the dependency functions at the bottom, so tests can
swap the whole container with ``app.dependency_overrides[get_container]``.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from fastapi import Depends

from shared.config import AuthConfig, Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import (
        IAuthService,
        ICredentialStore,
        IImageUploader,
        IResetMailer,
    )
    from modules.auth.passwords import PasswordHasher
    from modules.auth.registration import RegistrationPolicy
    from modules.auth.reset_tokens import ResetTokenService
    from modules.auth.tokens import TokenService


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._credential_store: "ICredentialStore | None" = None
        self._password_hasher: "PasswordHasher | None" = None
        self._token_service: "TokenService | None" = None
        self._reset_token_service: "ResetTokenService | None" = None
        self._registration_policy: "RegistrationPolicy | None" = None
        self._reset_mailer: "IResetMailer | None" = None
        self._image_uploader: "IImageUploader | None" = None
        self._auth_service: "IAuthService | None" = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def auth_config(self) -> AuthConfig:
        return self.settings.auth_config()

    @property
    def credential_store(self) -> "ICredentialStore":
        """Get the credential store selected by CREDENTIAL_BACKEND."""
        if self._credential_store is None:
            if self.settings.credential_backend == "supabase":
                from modules.auth.repository import SupabaseCredentialStore
                from shared.database import get_supabase_client
                self._credential_store = SupabaseCredentialStore(
                    get_supabase_client(self.settings), table=self.settings.users_table
                )
            else:
                from modules.auth.store import InMemoryCredentialStore
                self._credential_store = InMemoryCredentialStore()
        return self._credential_store

    @property
    def password_hasher(self) -> "PasswordHasher":
        if self._password_hasher is None:
            from modules.auth.passwords import PasswordHasher
            self._password_hasher = PasswordHasher(self.auth_config)
        return self._password_hasher

    @property
    def token_service(self) -> "TokenService":
        if self._token_service is None:
            from modules.auth.tokens import TokenService
            self._token_service = TokenService(self.auth_config)
        return self._token_service

    @property
    def reset_token_service(self) -> "ResetTokenService":
        if self._reset_token_service is None:
            from modules.auth.reset_tokens import ResetTokenService
            self._reset_token_service = ResetTokenService(
                store=self.credential_store,
                hasher=self.password_hasher,
                config=self.auth_config,
            )
        return self._reset_token_service

    @property
    def registration_policy(self) -> "RegistrationPolicy":
        if self._registration_policy is None:
            from modules.auth.registration import RegistrationPolicy
            self._registration_policy = RegistrationPolicy(self.auth_config)
        return self._registration_policy

    @property
    def reset_mailer(self) -> "IResetMailer":
        if self._reset_mailer is None:
            from modules.auth.mailer import LoggingResetMailer
            self._reset_mailer = LoggingResetMailer()
        return self._reset_mailer

    @property
    def image_uploader(self) -> "IImageUploader":
        if self._image_uploader is None:
            from modules.auth.uploads import LocalImageUploader
            self._image_uploader = LocalImageUploader(
                directory=Path(self.settings.upload_dir),
                public_url=self.settings.public_url,
                max_bytes=self.settings.max_upload_bytes,
            )
        return self._image_uploader

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                store=self.credential_store,
                hasher=self.password_hasher,
                tokens=self.token_service,
                reset_tokens=self.reset_token_service,
                policy=self.registration_policy,
                mailer=self.reset_mailer,
                frontend_url=self.settings.frontend_url,
            )
        return self._auth_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._credential_store = None
        self._password_hasher = None
        self._token_service = None
        self._reset_token_service = None
        self._registration_policy = None
        self._reset_mailer = None
        self._image_uploader = None
        self._auth_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() will create a fresh container
    with new service instances. Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> "IAuthService":
    """FastAPI dependency for auth service."""
    return container.auth


def get_token_service(container: ServiceContainer = Depends(get_container)) -> "TokenService":
    """FastAPI dependency for token service."""
    return container.token_service


def get_credential_store(
    container: ServiceContainer = Depends(get_container),
) -> "ICredentialStore":
    """FastAPI dependency for the credential store."""
    return container.credential_store


def get_image_uploader(
    container: ServiceContainer = Depends(get_container),
) -> "IImageUploader":
    """FastAPI dependency for the profile image uploader."""
    return container.image_uploader
