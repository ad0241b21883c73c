"""Tests for the /api/auth endpoints."""

from pathlib import Path

import pytest

from tests.conftest import TEST_INVITE_TOKEN, create_test_token


BOB = {"email": "bob@example.com", "secret": "hunter22", "displayName": "Bob"}
ALICE = {
    "email": "alice@example.com",
    "secret": "wonderland",
    "displayName": "Alice",
    "inviteToken": TEST_INVITE_TOKEN,
}


def register(client, body: dict) -> dict:
    response = client.post("/api/auth/register", json=body)
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sent_links(container, monkeypatch) -> list[str]:
    """Capture reset links handed to the mailer."""
    links: list[str] = []

    async def capture(to_address: str, reset_link: str) -> None:
        links.append(reset_link)

    monkeypatch.setattr(container.reset_mailer, "send_reset_link", capture)
    return links


class TestRegister:
    def test_register_user(self, client):
        data = register(client, BOB)
        assert data["role"] == "user"
        assert data["userId"]
        assert data["token"]

    def test_register_admin_with_invite(self, client):
        assert register(client, ALICE)["role"] == "admin"

    def test_register_with_wrong_invite(self, client):
        data = register(client, {**BOB, "inviteToken": "wrong"})
        assert data["role"] == "user"

    def test_duplicate_email(self, client):
        register(client, BOB)
        response = client.post("/api/auth/register", json={**BOB, "email": "Bob@Example.com"})
        assert response.status_code == 409
        assert response.json()["message"] == "User already exists"

    def test_invalid_body(self, client):
        response = client.post("/api/auth/register", json={"email": "bob@example.com"})
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "INVALID_INPUT"
        assert "secret" in data["details"]["fields"]


class TestLogin:
    def test_login(self, client):
        registered = register(client, BOB)

        response = client.post(
            "/api/auth/login", json={"email": "bob@example.com", "secret": "hunter22"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == registered["userId"]
        assert data["role"] == "user"

    def test_wrong_secret_and_unknown_email_match(self, client):
        register(client, BOB)

        wrong = client.post("/api/auth/login", json={"email": "bob@example.com", "secret": "x"})
        unknown = client.post("/api/auth/login", json={"email": "eve@example.com", "secret": "x"})

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["message"] == "Invalid email or password"


class TestProfile:
    def test_get_profile(self, client):
        token = register(client, BOB)["token"]

        response = client.get("/api/auth/profile", headers=bearer(token))

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "bob@example.com"
        assert data["displayName"] == "Bob"
        assert "secretHash" not in data

    def test_profile_requires_token(self, client):
        assert client.get("/api/auth/profile").status_code == 401

    def test_profile_of_deleted_account(self, client):
        token = create_test_token(user_id="ghost")
        response = client.get("/api/auth/profile", headers=bearer(token))
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, account not found"

    def test_update_profile(self, client):
        token = register(client, BOB)["token"]

        response = client.put(
            "/api/auth/profile",
            headers=bearer(token),
            json={"displayName": "Robert", "secret": "changed"},
        )

        assert response.status_code == 200
        assert response.json()["displayName"] == "Robert"
        login = client.post("/api/auth/login", json={"email": "bob@example.com", "secret": "changed"})
        assert login.status_code == 200

    def test_update_profile_ignores_role(self, client):
        token = register(client, BOB)["token"]
        response = client.put("/api/auth/profile", headers=bearer(token), json={"role": "admin"})
        assert response.status_code == 200
        assert response.json()["role"] == "user"

    def test_update_email_to_taken_address(self, client):
        register(client, ALICE)
        token = register(client, BOB)["token"]

        response = client.put(
            "/api/auth/profile", headers=bearer(token), json={"email": "alice@example.com"}
        )

        assert response.status_code == 409


class TestPasswordReset:
    def test_unknown_email_is_accepted(self, client, sent_links):
        response = client.post("/api/auth/password-reset/request", json={"email": "nobody@example.com"})
        assert response.status_code == 202
        assert sent_links == []

    def test_reset_flow(self, client, sent_links):
        register(client, BOB)

        response = client.post("/api/auth/password-reset/request", json={"email": "bob@example.com"})
        assert response.status_code == 202
        assert len(sent_links) == 1
        assert sent_links[0].startswith("http://frontend.test/reset-password?token=")
        token = sent_links[0].split("token=", 1)[1]

        confirm = client.post(
            "/api/auth/password-reset/confirm",
            json={"token": token, "newSecret": "fresh-start"},
        )
        assert confirm.status_code == 200

        old = client.post("/api/auth/login", json={"email": "bob@example.com", "secret": "hunter22"})
        new = client.post("/api/auth/login", json={"email": "bob@example.com", "secret": "fresh-start"})
        assert old.status_code == 401
        assert new.status_code == 200

        reuse = client.post(
            "/api/auth/password-reset/confirm",
            json={"token": token, "newSecret": "again"},
        )
        assert reuse.status_code == 400
        assert reuse.json()["message"] == "Invalid or expired reset token"

    def test_confirm_with_forged_token(self, client, sent_links):
        user_id = register(client, BOB)["userId"]
        client.post("/api/auth/password-reset/request", json={"email": "bob@example.com"})

        response = client.post(
            "/api/auth/password-reset/confirm",
            json={"token": f"{user_id}.forged", "newSecret": "x"},
        )

        assert response.status_code == 400


class TestAdminScenario:
    def test_bob_and_alice(self, client):
        """Only the account registered with the invite token passes the admin gate."""
        bob = register(
            client, {"email": "bob@example.com", "secret": "secret123", "displayName": "Bob"}
        )
        alice = register(
            client,
            {
                "email": "alice@example.com",
                "secret": "secret123",
                "displayName": "Alice",
                "inviteToken": TEST_INVITE_TOKEN,
            },
        )
        assert bob["role"] == "user"
        assert alice["role"] == "admin"

        bob_login = client.post(
            "/api/auth/login", json={"email": "bob@example.com", "secret": "secret123"}
        ).json()
        alice_login = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "secret": "secret123"}
        ).json()

        denied = client.get("/api/users", headers=bearer(bob_login["token"]))
        allowed = client.get("/api/users", headers=bearer(alice_login["token"]))

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert {u["email"] for u in allowed.json()} == {"bob@example.com", "alice@example.com"}


class TestUploadImage:
    def test_upload_returns_image_url(self, client, test_settings):
        response = client.post(
            "/api/auth/upload-image",
            files={"image": ("me.png", b"\x89PNG\r\n\x1a\n", "image/png")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Image uploaded successfully"
        assert data["imageUrl"].startswith("http://api.test/uploads/")
        name = data["imageUrl"].rsplit("/", 1)[1]
        assert (Path(test_settings.upload_dir) / name).exists()

    def test_url_can_be_used_as_profile_image(self, client):
        image_url = client.post(
            "/api/auth/upload-image",
            files={"image": ("me.jpg", b"\xff\xd8\xff", "image/jpeg")},
        ).json()["imageUrl"]

        data = register(client, {**BOB, "profileImageRef": image_url})
        profile = client.get("/api/auth/profile", headers=bearer(data["token"])).json()

        assert profile["profileImageRef"] == image_url

    def test_no_file(self, client):
        response = client.post("/api/auth/upload-image", data={"note": "no image"})
        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded"

    def test_unsupported_format(self, client):
        response = client.post(
            "/api/auth/upload-image",
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 400
