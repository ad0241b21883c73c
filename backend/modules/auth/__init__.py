"""
Authentication module.

Handles credential storage, password hashing, bearer tokens, password
reset tokens and the role granted at registration.

Public API:
- IAuthService / ICredentialStore / IResetMailer: module interfaces
- User, PublicUser, TokenClaims: data models
- Auth exceptions: token, credential, store and reset errors
"""

from .interfaces import IAuthService, ICredentialStore, IImageUploader, IResetMailer
from .models import (
    AuthResponse,
    ImageUploadResponse,
    ProfileChanges,
    PublicUser,
    ResetTokenRecord,
    TokenClaims,
    User,
)
from .exceptions import (
    AccountNotFoundError,
    CredentialStoreUnavailableError,
    EmailAlreadyExistsError,
    ExpiredTokenError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    InvalidInputError,
    InvalidResetTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    MissingTokenError,
    ResetTokenExpiredError,
    ResetTokenMismatchError,
    ResetTokenNotFoundError,
    UnauthenticatedError,
    UserNotFoundError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "ICredentialStore",
    "IImageUploader",
    "IResetMailer",
    # Models
    "AuthResponse",
    "ImageUploadResponse",
    "ProfileChanges",
    "PublicUser",
    "ResetTokenRecord",
    "TokenClaims",
    "User",
    # Exceptions
    "AccountNotFoundError",
    "CredentialStoreUnavailableError",
    "EmailAlreadyExistsError",
    "ExpiredTokenError",
    "InsufficientPermissionsError",
    "InvalidCredentialsError",
    "InvalidInputError",
    "InvalidResetTokenError",
    "InvalidSignatureError",
    "MalformedTokenError",
    "MissingTokenError",
    "ResetTokenExpiredError",
    "ResetTokenMismatchError",
    "ResetTokenNotFoundError",
    "UnauthenticatedError",
    "UserNotFoundError",
]
