import pytest
from datetime import datetime, timedelta, UTC
from jose import jwt
from churchapp.config import settings
from tests.conftest import bearer, create_test_token, make_user


def test_health_endpoint_no_auth(client):
    """Health endpoint should not require authentication"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_endpoint_no_auth(client):
    """Root endpoint should not require authentication"""
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_valid_token_accepted(client):
    """Valid JWT token should be accepted"""
    response = client.get("/api/auth/me", headers=bearer(create_test_token()))
    assert response.status_code == 200
    assert response.json()["user_id"] == "test-user-123"


def test_missing_token_rejected(client):
    """Request without Authorization header should return 401"""
    response = client.get("/api/members/")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_expired_token_rejected(client):
    """Expired tokens should return 401"""
    response = client.get("/api/auth/me", headers=bearer(create_test_token(expired=True)))
    assert response.status_code == 401
    assert "detail" in response.json()


def test_invalid_signature_rejected(client):
    """Tokens signed with wrong key should fail"""
    payload = {
        "sub": "test-user",
        "email": "t@example.com",
        "name": "T",
        "type": "user",
        "exp": datetime.now(UTC) + timedelta(minutes=15),
    }
    token = jwt.encode(payload, "wrong-secret-key", algorithm="HS256")

    response = client.get("/api/auth/me", headers=bearer(token))
    assert response.status_code == 401


def test_malformed_token_rejected(client):
    """Malformed tokens should return 401"""
    response = client.get("/api/auth/me", headers=bearer("not-a-valid-jwt-token"))
    assert response.status_code == 401


def test_token_missing_exp_rejected(client):
    """Tokens without expiration should be rejected"""
    payload = {"sub": "test-user", "email": "t@example.com", "name": "T", "type": "user"}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")

    response = client.get("/api/auth/me", headers=bearer(token))
    assert response.status_code == 401
    assert response.json()["detail"] == "Token missing expiration"


def test_token_missing_sub_rejected(client):
    """Tokens without a subject should be rejected"""
    payload = {
        "email": "t@example.com",
        "name": "T",
        "type": "user",
        "exp": datetime.now(UTC) + timedelta(minutes=15),
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")

    response = client.get("/api/auth/me", headers=bearer(token))
    assert response.status_code == 401
    assert response.json()["detail"] == "Token missing user identifier"


def test_token_with_unknown_role_rejected(client):
    """A role outside the fixed enum is a malformed token"""
    token = create_test_token(
        type="member", memberId="m-1", role="SUPERUSER", branchId="b-1", churchId="c-1"
    )
    response = client.get("/api/auth/me", headers=bearer(token))
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token claims"


class TestRegisterAndLogin:
    """Tests for /api/auth register, login and refresh"""

    def test_register_returns_user_token(self, client):
        response = client.post(
            "/api/auth/register",
            json={"email": "New@Example.com", "password": "secret123", "first_name": "Ana"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "user"
        assert data["user"]["email"] == "new@example.com"

        me = client.get("/api/auth/me", headers=bearer(data["token"])).json()
        assert me["complete"] is False
        assert me["member_id"] is None
        assert me["effective_permissions"] == []

    def test_register_duplicate_email(self, client, db_session):
        make_user(db_session, "taken@example.com")

        response = client.post(
            "/api/auth/register",
            json={"email": "taken@example.com", "password": "secret123", "first_name": "Ana"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_login_success(self, client, db_session):
        make_user(db_session, "ana@example.com")

        response = client.post(
            "/api/auth/login", json={"email": "ana@example.com", "password": "secret123"}
        )
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "ana@example.com"

    def test_register_and_login_with_password_over_72_bytes(self, client):
        long_password = "a" * 100

        register = client.post(
            "/api/auth/register",
            json={"email": "long@example.com", "password": long_password, "first_name": "Ana"},
        )
        assert register.status_code == 201

        login = client.post(
            "/api/auth/login", json={"email": "long@example.com", "password": long_password}
        )
        assert login.status_code == 200
        assert login.json()["user"]["email"] == "long@example.com"

    def test_login_with_long_password_still_checks_first_72_bytes(self, client):
        client.post(
            "/api/auth/register",
            json={"email": "long@example.com", "password": "a" * 100, "first_name": "Ana"},
        )

        response = client.post(
            "/api/auth/login", json={"email": "long@example.com", "password": "b" + "a" * 99}
        )
        assert response.status_code == 401

    @pytest.mark.parametrize(
        "email,password",
        [("ana@example.com", "wrong-password"), ("nobody@example.com", "secret123")],
    )
    def test_login_invalid_credentials(self, client, db_session, email, password):
        make_user(db_session, "ana@example.com")

        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_login_as_member_returns_tenant_claims(self, client, church_a):
        response = client.post(
            "/api/auth/login", json={"email": "founder-a@example.com", "password": "secret123"}
        )
        assert response.status_code == 200
        assert response.json()["type"] == "member"

        me = client.get("/api/auth/me", headers=bearer(response.json()["token"])).json()
        assert me["member_id"] == church_a.id
        assert me["church_id"] == church_a.church_id
        assert me["role"] == "ADMINGERAL"
        assert me["complete"] is True

    def test_refresh_for_deleted_user(self, client):
        token = create_test_token(user_id="ghost")
        response = client.post("/api/auth/refresh", headers=bearer(token))
        assert response.status_code == 401
