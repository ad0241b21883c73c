"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
import jwt  # PyJWT
from fastapi.testclient import TestClient

from api import app
from api.dependencies import ServiceContainer, get_container, reset_container
from shared.config import AuthConfig, Settings


# Test secrets (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only-0123456789"
TEST_INVITE_TOKEN = "admin-invite-for-tests"

# Keeps hashing fast; production default is far higher.
TEST_HASH_ROUNDS = 1000


def create_test_token(
    user_id: str = "test-user-123",
    role: str = "user",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a bearer token without going through TokenService.

    Args:
        user_id: User ID to include in the token
        role: Role claim
        expired: If True, creates an expired token
        secret: Signing key

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "role": role,
        "exp": int(exp.timestamp()),
        "iat": int((now - timedelta(hours=2)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def auth_config() -> AuthConfig:
    """Auth configuration with test secrets and a cheap work factor."""
    return AuthConfig(
        jwt_secret=TEST_JWT_SECRET,
        password_hash_rounds=TEST_HASH_ROUNDS,
        admin_invite_token=TEST_INVITE_TOKEN,
    )


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        password_hash_rounds=TEST_HASH_ROUNDS,
        admin_invite_token=TEST_INVITE_TOKEN,
        credential_backend="memory",
        frontend_url="http://frontend.test",
        upload_dir=str(tmp_path / "uploads"),
        public_url="http://api.test",
    )


@pytest.fixture
def container(test_settings: Settings) -> ServiceContainer:
    """A fresh service container backed by the in-memory store."""
    return ServiceContainer(test_settings)


@pytest.fixture
def client(container: ServiceContainer):
    """TestClient whose routes resolve services from ``container``."""
    app.dependency_overrides[get_container] = lambda: container
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        reset_container()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def auth_token(test_user_id: str) -> str:
    """Create a valid user-role token for testing."""
    return create_test_token(user_id=test_user_id)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers with a valid token."""
    return {"Authorization": f"Bearer {auth_token}"}
