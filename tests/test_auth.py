"""
Tests - session authentication, user service, password hashing, CLI.

Covers:
    - bcrypt hash / verify helpers
    - create_user validation and duplicates
    - POST /auth/login, POST /auth/logout, GET /auth/user
    - login_required on resource endpoints
    - flask create-user / create-admin commands
"""

import pytest

from tracker.models.auth import User
from tracker.services.user_service import UserServiceError, authenticate_user, create_user
from tracker.utils.crypto import hash_password, verify_password

TEST_PASSWORD = "s3cret-pass"


# ═════════════════════════════════════════════════════════════════════════════
# CRYPTO
# ═════════════════════════════════════════════════════════════════════════════

class TestCrypto:
    def test_hash_and_verify(self):
        hashed = hash_password("hunter2")
        assert hashed != "hunter2"
        assert verify_password("hunter2", hashed)

    def test_wrong_password(self):
        assert not verify_password("wrong", hash_password("hunter2"))

    def test_empty_or_malformed_hash(self):
        assert not verify_password("hunter2", "")
        assert not verify_password("hunter2", "not-a-bcrypt-hash")


# ═════════════════════════════════════════════════════════════════════════════
# USER SERVICE
# ═════════════════════════════════════════════════════════════════════════════

class TestUserService:
    def test_create_user_normalises_email(self):
        user = create_user("carol", "pw", email="Carol@Example.com")
        assert user.id is not None
        assert user.email == "Carol@example.com"
        assert user.password_hash != "pw"

    def test_duplicate_username(self, user):
        with pytest.raises(UserServiceError) as exc_info:
            create_user(user.username, "pw")
        assert exc_info.value.status_code == 409

    def test_duplicate_email(self, user):
        with pytest.raises(UserServiceError) as exc_info:
            create_user("alice2", "pw", email=user.email)
        assert exc_info.value.status_code == 409

    def test_invalid_email(self):
        with pytest.raises(UserServiceError) as exc_info:
            create_user("dave", "pw", email="not-an-email")
        assert exc_info.value.status_code == 400

    def test_blank_username_or_password(self):
        with pytest.raises(UserServiceError):
            create_user("  ", "pw")
        with pytest.raises(UserServiceError):
            create_user("erin", "")

    def test_authenticate(self, user):
        assert authenticate_user(user.username, TEST_PASSWORD).id == user.id
        with pytest.raises(UserServiceError) as exc_info:
            authenticate_user(user.username, "nope")
        assert exc_info.value.status_code == 401


# ═════════════════════════════════════════════════════════════════════════════
# AUTH ENDPOINTS
# ═════════════════════════════════════════════════════════════════════════════

class TestAuthEndpoints:
    def test_login_sets_session_cookie(self, client, user):
        res = client.post("/api/v1/auth/login", json={"username": "alice", "password": TEST_PASSWORD})
        assert res.status_code == 200
        assert res.get_json()["username"] == "alice"
        assert "password_hash" not in res.get_json()
        assert "sessionId=" in res.headers.get("Set-Cookie", "")

    def test_login_wrong_password(self, client, user):
        res = client.post("/api/v1/auth/login", json={"username": "alice", "password": "bad"})
        assert res.status_code == 401
        assert res.get_json()["error"] == "Invalid credentials"

    def test_login_unknown_user(self, client):
        res = client.post("/api/v1/auth/login", json={"username": "ghost", "password": "x"})
        assert res.status_code == 401

    def test_login_missing_fields(self, client):
        res = client.post("/api/v1/auth/login", json={"username": "alice"})
        assert res.status_code == 400

    def test_current_user(self, auth_client, user):
        res = auth_client.get("/api/v1/auth/user")
        assert res.status_code == 200
        assert res.get_json()["id"] == user.id

    def test_anonymous_user_endpoint(self, client):
        res = client.get("/api/v1/auth/user")
        assert res.status_code == 401
        assert res.get_json()["error"] == "Unauthorized"

    def test_logout_clears_session(self, auth_client):
        assert auth_client.post("/api/v1/auth/logout").status_code == 200
        assert auth_client.get("/api/v1/auth/user").status_code == 401
        assert auth_client.get("/api/v1/programs").status_code == 401

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/v1/programs"),
        ("post", "/api/v1/programs"),
        ("get", "/api/v1/projects"),
        ("get", "/api/v1/statistics"),
        ("get", "/api/v1/import/history"),
        ("get", "/api/v1/import/template"),
        ("post", "/api/v1/import/excel"),
    ])
    def test_resource_endpoints_require_login(self, client, method, path):
        res = getattr(client, method)(path)
        assert res.status_code == 401
        assert res.get_json()["code"] == "ERR_UNAUTHORIZED"


# ═════════════════════════════════════════════════════════════════════════════
# CLI
# ═════════════════════════════════════════════════════════════════════════════

class TestCli:
    def test_create_user_command(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["create-user", "frank", "pw", "--email", "frank@example.com"])
        assert result.exit_code == 0, result.output
        assert "Created user frank" in result.output
        assert User.query.filter_by(username="frank").one().email == "frank@example.com"

    def test_create_user_duplicate_fails(self, app, user):
        result = app.test_cli_runner().invoke(args=["create-user", user.username, "pw"])
        assert result.exit_code != 0
        assert "already exists" in result.output

    def test_create_admin_is_idempotent(self, app):
        runner = app.test_cli_runner()
        first = runner.invoke(args=["create-admin"])
        second = runner.invoke(args=["create-admin"])
        assert first.exit_code == 0
        assert second.exit_code == 0
        assert "already exists" in second.output
        assert User.query.filter_by(username="admin").count() == 1
        assert authenticate_user("admin", "admin").username == "admin"
