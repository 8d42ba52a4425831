"""
HTTP-level tests: request parsing, status codes and response bodies.
"""

import logging

import pytest

from config.settings import FALLBACK_IDENTIFIER_SALT, Settings, config


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


async def _register(client, email="a@b.com", password="pw1"):
    resp = await client.post("/register", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["sessionId"]


class TestRegisterAndLogin:
    @pytest.mark.asyncio
    async def test_register(self, client):
        resp = await client.post("/register", json={"email": "a@b.com", "password": "pw1"})
        body = resp.json()
        assert resp.status_code == 200
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["sessionId"]
        assert "X-Process-Time" in resp.headers
        assert resp.headers["Cache-Control"] == "no-store"

    @pytest.mark.asyncio
    async def test_register_duplicate(self, client):
        await _register(client)
        resp = await client.post("/register", json={"email": "A@B.COM", "password": "x"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "User already exists"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content",
        [b'{"email": "a@b.com"}', b'{"password": "pw"}', b"not json", b"", b'{"email": "", "password": "pw"}'],
    )
    async def test_register_bad_body(self, client, content):
        resp = await client.post("/register", content=content, headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Email and password required"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [b"{not json", b'{"email": "a@b.com", "password": ""}', b"[]"])
    async def test_login_bad_body(self, client, content):
        resp = await client.post("/login", content=content, headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Email and password required"}

    @pytest.mark.asyncio
    async def test_login_failures_are_identical(self, client):
        await _register(client)
        unknown = await client.post("/login", json={"email": "x@y.com", "password": "pw1"})
        wrong = await client.post("/login", json={"email": "a@b.com", "password": "bad"})
        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json() == {"error": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_login(self, client):
        await _register(client)
        resp = await client.post("/login", json={"email": " a@b.com ", "password": "pw1"})
        assert resp.status_code == 200
        assert resp.json()["message"] == "Login successful"


class TestProtectedRoutes:
    @pytest.mark.asyncio
    async def test_users_requires_token(self, client):
        assert (await client.get("/users")).status_code == 401
        resp = await client.get("/users", headers=_bearer("bogus"))
        assert resp.status_code == 401
        assert resp.json() == {"error": "Authentication required"}

    @pytest.mark.asyncio
    async def test_users_lists_hashes_only(self, client):
        token = await _register(client, "secret.person@example.com")
        resp = await client.get("/users", headers=_bearer(token))
        body = resp.json()
        assert resp.status_code == 200
        assert body["total_users"] == 1
        assert "Argon2id" in body["security_note"]
        assert "secret.person" not in resp.text
        assert len(body["users"][0]["identifier_hash"]) == 64

    @pytest.mark.asyncio
    async def test_reset_checks_token_before_body(self, client):
        resp = await client.post("/reset-password", content=b"not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_reset_missing_fields(self, client):
        token = await _register(client)
        resp = await client.post("/reset-password", json={"email": "a@b.com"}, headers=_bearer(token))
        assert resp.status_code == 400
        assert resp.json() == {"error": "Email, current password, and new password required"}

    @pytest.mark.asyncio
    async def test_reset_unknown_user(self, client):
        token = await _register(client)
        resp = await client.post(
            "/reset-password",
            json={"email": "x@y.com", "currentPassword": "pw1", "newPassword": "pw2"},
            headers=_bearer(token),
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found"}

    @pytest.mark.asyncio
    async def test_reset_wrong_current_password(self, client):
        token = await _register(client)
        resp = await client.post(
            "/reset-password",
            json={"email": "a@b.com", "currentPassword": "nope", "newPassword": "pw2"},
            headers=_bearer(token),
        )
        assert resp.status_code == 401
        assert resp.json() == {"error": "Current password is incorrect"}

    @pytest.mark.asyncio
    async def test_logout(self, client):
        token = await _register(client)
        resp = await client.post("/logout", headers=_bearer(token))
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Logged out successfully"}

        again = await client.post("/logout", headers=_bearer(token))
        assert again.status_code == 400
        assert again.json() == {"error": "No active session found"}
        assert (await client.get("/users", headers=_bearer(token))).status_code == 401

    @pytest.mark.asyncio
    async def test_logout_without_header(self, client):
        assert (await client.post("/logout")).status_code == 400


class TestScenario:
    @pytest.mark.asyncio
    async def test_full_flow(self, client):
        t1 = await _register(client)
        login = await client.post("/login", json={"email": "a@b.com", "password": "pw1"})
        t2 = login.json()["sessionId"]
        assert (await client.get("/users", headers=_bearer(t1))).status_code == 200

        reset = await client.post(
            "/reset-password",
            json={"email": "a@b.com", "currentPassword": "pw1", "newPassword": "pw2"},
            headers=_bearer(t2),
        )
        assert reset.json() == {"success": True, "message": "Password updated successfully"}

        old = await client.post("/login", json={"email": "a@b.com", "password": "pw1"})
        new = await client.post("/login", json={"email": "a@b.com", "password": "pw2"})
        assert old.status_code == 401
        assert new.status_code == 200


class TestMiscRoutes:
    @pytest.mark.asyncio
    async def test_index(self, client):
        body = (await client.get("/")).json()
        assert body["message"] == "Secure Authentication API"
        assert "POST /register" in body["endpoints"]

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        resp = await client.get("/nowhere")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Route not found"
        assert "/register" in resp.json()["available_routes"]

    @pytest.mark.asyncio
    async def test_hash_debug(self, client):
        resp = await client.post("/debug/test-hash", json={"email": "Foo@Bar.com"})
        body = resp.json()
        assert body["deterministic"] is True
        assert body["hash1"] == body["hash3"]
        assert body["message"] == "Email hashing is working correctly"

    @pytest.mark.asyncio
    async def test_hash_debug_requires_email(self, client):
        resp = await client.post("/debug/test-hash", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Email required"}

    @pytest.mark.asyncio
    async def test_hash_debug_disabled(self, client, monkeypatch):
        monkeypatch.setattr(config, "enable_hash_debug", False)
        resp = await client.post("/debug/test-hash", json={"email": "a@b.com"})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_cors_preflight(self, client):
        resp = await client.options(
            "/login",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type, Authorization",
            },
        )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"


class TestSettings:
    def test_fallback_salt_warns(self, caplog, monkeypatch):
        from main import warn_if_fallback_salt

        monkeypatch.delenv("IDENTIFIER_SALT", raising=False)
        monkeypatch.delenv("EMAIL_SALT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.identifier_salt == FALLBACK_IDENTIFIER_SALT
        with caplog.at_level(logging.WARNING):
            assert warn_if_fallback_salt(settings) is True
        assert "fallback" in caplog.text.lower()

    def test_salt_from_environment(self, monkeypatch):
        from main import warn_if_fallback_salt

        monkeypatch.setenv("EMAIL_SALT", "from-env")
        settings = Settings(_env_file=None)
        assert settings.identifier_salt == "from-env"
        assert not settings.uses_fallback_salt
        assert warn_if_fallback_salt(settings) is False

    @pytest.mark.parametrize("var", ["IDENTIFIER_SALT", "EMAIL_SALT"])
    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_salt_falls_back_and_warns(self, caplog, monkeypatch, var, value):
        from main import warn_if_fallback_salt

        monkeypatch.delenv("IDENTIFIER_SALT", raising=False)
        monkeypatch.delenv("EMAIL_SALT", raising=False)
        monkeypatch.setenv(var, value)
        settings = Settings(_env_file=None)
        assert settings.identifier_salt == FALLBACK_IDENTIFIER_SALT
        with caplog.at_level(logging.WARNING):
            assert warn_if_fallback_salt(settings) is True
