"""Tests for password hashing."""

import pytest
from unittest.mock import patch

from modules.auth.exceptions import InvalidInputError
from modules.auth.passwords import PasswordHasher
from shared.config import AuthConfig


@pytest.fixture
def hasher(auth_config) -> PasswordHasher:
    return PasswordHasher(auth_config)


class TestPasswordHasher:
    def test_verify_own_hash(self, hasher):
        """A secret should verify against its own hash."""
        secret_hash = hasher.hash("secret123")
        assert hasher.verify("secret123", secret_hash) is True

    @pytest.mark.parametrize(
        "secret,other",
        [("secret123", "secret124"), ("a", "A"), ("pässwörd", "passwort"), ("x" * 200, "x" * 199)],
    )
    def test_other_secret_does_not_verify(self, hasher, secret, other):
        """A different secret must never verify."""
        assert hasher.verify(secret, hasher.hash(other)) is False

    def test_hash_is_salted(self, hasher):
        """Hashing the same secret twice should give different digests."""
        assert hasher.hash("secret123") != hasher.hash("secret123")

    def test_hash_is_not_plaintext(self, hasher):
        """The hash must not contain the plaintext."""
        secret_hash = hasher.hash("secret123")
        assert "secret123" not in secret_hash
        assert secret_hash.startswith("$pbkdf2-sha256$")

    def test_hash_embeds_work_factor(self, hasher, auth_config):
        """The rounds count should be recorded in the hash."""
        secret_hash = hasher.hash("secret123")
        assert f"${auth_config.password_hash_rounds}$" in secret_hash

    def test_empty_secret_rejected(self, hasher):
        """Hashing an empty secret should raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            hasher.hash("")

    def test_verify_empty_inputs(self, hasher):
        """Empty secret or hash should not verify."""
        secret_hash = hasher.hash("secret123")
        assert hasher.verify("", secret_hash) is False
        assert hasher.verify("secret123", "") is False

    def test_verify_garbage_hash(self, hasher):
        """An unrecognized hash string should not verify or raise."""
        assert hasher.verify("secret123", "not-a-hash") is False


class TestNeedsRehash:
    def test_same_cost_does_not_need_rehash(self, hasher):
        assert hasher.needs_rehash(hasher.hash("secret123")) is False

    def test_changed_cost_needs_rehash(self, hasher):
        """Hashes made with a different work factor should be flagged."""
        stronger = PasswordHasher(AuthConfig(jwt_secret="x", password_hash_rounds=2000))
        secret_hash = hasher.hash("secret123")
        assert stronger.needs_rehash(secret_hash) is True
        # Still verifies under the new cost.
        assert stronger.verify("secret123", secret_hash) is True

    def test_garbage_hash(self, hasher):
        assert hasher.needs_rehash("not-a-hash") is False


class TestDummyVerify:
    def test_always_false(self, hasher):
        assert hasher.dummy_verify() is False

    def test_runs_a_real_verify(self, hasher):
        """The throwaway check goes through the configured scheme."""
        with patch.object(hasher._context, "verify", wraps=hasher._context.verify) as verify:
            hasher.dummy_verify()
        verify.assert_called_once()
