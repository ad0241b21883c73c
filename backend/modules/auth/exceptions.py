"""
Authentication module exceptions.

These exceptions are raised by the auth module and caught by the API
error handlers, which map each base class to an HTTP status.
"""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class InvalidInputError(ValidationError):
    """Raised when a request field is empty or malformed."""

    def __init__(self, message: str = "Invalid input", field: str | None = None):
        super().__init__(
            message,
            code="INVALID_INPUT",
            details={"field": field} if field else None,
        )


# -----------------------------------------------------------------------------
# Bearer token errors
# -----------------------------------------------------------------------------


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Not authorized, no token"):
        super().__init__(message, code="MISSING_TOKEN")


class MalformedTokenError(AuthenticationError):
    """Raised when a token cannot be parsed or lacks required claims."""

    def __init__(self, message: str = "Malformed authentication token"):
        super().__init__(message, code="MALFORMED_TOKEN")


class InvalidSignatureError(AuthenticationError):
    """Raised when a token signature does not match the signing key."""

    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message, code="INVALID_SIGNATURE")


class ExpiredTokenError(AuthenticationError):
    """Raised when a token has expired."""

    def __init__(self, message: str = "Authentication token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class InvalidCredentialsError(AuthenticationError):
    """Raised on login with an unknown email or a wrong secret."""

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user lacks required permissions."""

    def __init__(self, required_roles: list[str], user_role: str):
        super().__init__(
            "Access denied",
            code="INSUFFICIENT_PERMISSIONS",
            details={"required_roles": required_roles, "user_role": user_role},
        )


# -----------------------------------------------------------------------------
# Credential store errors
# -----------------------------------------------------------------------------


class UserNotFoundError(NotFoundError):
    """Raised when a user record does not exist."""

    def __init__(self, user_id: str):
        super().__init__(
            f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class EmailAlreadyExistsError(ConflictError):
    """Raised when an email is already taken by another user."""

    def __init__(self):
        super().__init__("User already exists", code="EMAIL_EXISTS")


class CredentialStoreUnavailableError(ExternalServiceError):
    """Raised when the backing document store fails."""

    def __init__(self, message: str = "Credential store unavailable"):
        super().__init__(message, service="credential_store", code="STORE_UNAVAILABLE")


# -----------------------------------------------------------------------------
# Password reset errors
# -----------------------------------------------------------------------------


class ResetTokenError(ValidationError):
    """Base class for reset token failures."""

    pass


class ResetTokenNotFoundError(ResetTokenError):
    """Raised when no reset token is pending for the user."""

    def __init__(self):
        super().__init__("No pending reset token", code="RESET_TOKEN_NOT_FOUND")


class ResetTokenExpiredError(ResetTokenError):
    """Raised when the pending reset token is past its expiry."""

    def __init__(self):
        super().__init__("Reset token has expired", code="RESET_TOKEN_EXPIRED")


class ResetTokenMismatchError(ResetTokenError):
    """Raised when the presented reset token does not match the stored hash."""

    def __init__(self):
        super().__init__("Reset token does not match", code="RESET_TOKEN_MISMATCH")


class InvalidResetTokenError(ValidationError):
    """Client-facing reset failure; never says which check failed."""

    def __init__(self):
        super().__init__("Invalid or expired reset token", code="INVALID_RESET_TOKEN")


class AccountNotFoundError(AuthenticationError):
    """Raised when a valid token refers to an account that no longer exists."""

    def __init__(self):
        super().__init__("Not authorized, account not found", code="ACCOUNT_NOT_FOUND")


class UnauthenticatedError(AuthenticationError):
    """Client-facing bearer token failure; never says which check failed."""

    def __init__(self):
        super().__init__("Not authorized, token failed", code="UNAUTHENTICATED")
