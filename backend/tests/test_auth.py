"""
Marknote Backend — Auth Tests
=============================

What:  Registration, login, session probe and logout; password hashing.
How:   HTTP tests through ASGITransport plus direct calls to the hashing helpers.
"""

import pytest

from pydantic import ValidationError
from werkzeug.security import check_password_hash

from marknote.schemas.auth import LoginRequest, RegisterRequest
from marknote.services.passwords import hash_password, verify_password


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_logs_the_user_in(self, test_client):
        response = await test_client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "Alice@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["email"] == "alice@example.com"
        assert "password" not in body["data"]
        assert "password_hash" not in body["data"]

        me = await test_client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["data"]["id"] == body["data"]["id"]

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(self, test_client, other_client, register):
        await register(test_client, "alice@example.com")

        response = await other_client.post(
            "/api/auth/register",
            json={"name": "Imposter", "email": "ALICE@example.com", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "email"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, field",
        [
            ({"name": "A", "email": "not-an-email", "password": "secret123"}, "email"),
            ({"name": "A", "email": "a@example.com", "password": "123"}, "password"),
            ({"name": "  ", "email": "a@example.com", "password": "secret123"}, "name"),
        ],
    )
    async def test_invalid_registration(self, test_client, body, field):
        response = await test_client.post("/api/auth/register", json=body)

        assert response.status_code == 400
        assert response.json()["details"]["field"] == field


class TestEmailField:

    @pytest.mark.parametrize("model", [LoginRequest, RegisterRequest])
    def test_email_is_lower_cased(self, model):
        body = model(name="Alice", email="Alice.Smith@Example.COM", password="secret123")

        assert body.email == "alice.smith@example.com"

    @pytest.mark.parametrize(
        "email",
        ["not-an-email", "alice@", "@example.com", "alice@@example.com", "alice smith@example.com"],
    )
    @pytest.mark.parametrize("model", [LoginRequest, RegisterRequest])
    def test_malformed_email_is_rejected(self, model, email):
        with pytest.raises(ValidationError) as exc_info:
            model(name="Alice", email=email, password="secret123")

        assert exc_info.value.errors()[0]["loc"] == ("email",)

    @pytest.mark.asyncio
    async def test_login_with_malformed_email_is_400(self, test_client):
        response = await test_client.post(
            "/api/auth/login", json={"email": "not-an-email", "password": "secret123"}
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "email"

    @pytest.mark.asyncio
    async def test_login_is_case_insensitive(self, test_client, other_client, register):
        await register(test_client, "alice@example.com")

        response = await other_client.post(
            "/api/auth/login", json={"email": "ALICE@Example.com", "password": "secret123"}
        )

        assert response.status_code == 200


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_with_valid_credentials(self, test_client, other_client, register):
        await register(test_client, "alice@example.com", name="Alice")

        response = await other_client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Alice"
        assert (await other_client.get("/api/notes")).status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email, password",
        [("alice@example.com", "wrong-password"), ("nobody@example.com", "secret123")],
    )
    async def test_bad_credentials_get_the_same_401(
        self, test_client, other_client, register, email, password
    ):
        await register(test_client, "alice@example.com")

        response = await other_client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"
        assert (await other_client.get("/api/notes")).status_code == 401


class TestSession:

    @pytest.mark.asyncio
    async def test_me_without_session_is_401(self, test_client):
        response = await test_client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_logout_clears_session(self, test_client, register):
        await register(test_client, "alice@example.com")

        response = await test_client.get("/api/auth/logout")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert (await test_client.get("/api/auth/me")).status_code == 401

    @pytest.mark.asyncio
    async def test_logout_without_session_succeeds(self, test_client):
        response = await test_client.get("/api/auth/logout")
        assert response.status_code == 200


class TestPasswords:

    def test_hash_round_trip(self):
        stored = hash_password("correct horse", iterations=1000)

        assert stored.startswith("pbkdf2:sha256:1000$")
        assert verify_password("correct horse", stored)
        assert not verify_password("wrong horse", stored)

    def test_hash_is_a_standard_werkzeug_hash(self):
        stored = hash_password("correct horse", iterations=1000)

        assert check_password_hash(stored, "correct horse")

    def test_hashes_are_salted(self):
        assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)

    @pytest.mark.parametrize(
        "stored",
        ["", "plaintext", "md5$1$aa$bb", "pbkdf2_sha256$x$zz$yy", "pbkdf2:sha256:x$aa$bb"],
    )
    def test_malformed_hash_never_verifies(self, stored):
        assert verify_password("anything", stored) is False
