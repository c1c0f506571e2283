import time
from unittest.mock import patch

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from jose import jwt

from agency_crm.auth import find_or_create_profile, gsa_only, verify_access_token
from agency_crm.config import AUTH_JWT_SECRET
from agency_crm.database import get_db
from agency_crm.main import app
from agency_crm.models import Profile, UserRole


def make_token(secret=AUTH_JWT_SECRET, **claims):
    payload = {
        "sub": "auth-user-1",
        "email": "Staff@ECASL.test",
        "aud": "authenticated",
        "exp": int(time.time()) + 3600,
        "user_metadata": {"first_name": "Casey", "last_name": "Nguyen"},
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


class TestVerifyAccessToken:
    def test_valid_token(self):
        claims = verify_access_token(make_token())
        assert claims["sub"] == "auth-user-1"

    def test_expired_token(self):
        with pytest.raises(HTTPException) as exc:
            verify_access_token(make_token(exp=int(time.time()) - 10))
        assert exc.value.status_code == 401
        assert exc.value.headers == {"X-Token-Expired": "true"}

    def test_wrong_secret(self):
        with pytest.raises(HTTPException) as exc:
            verify_access_token(make_token(secret="someone-else"))
        assert exc.value.status_code == 401

    def test_wrong_audience(self):
        with pytest.raises(HTTPException):
            verify_access_token(make_token(aud="anon"))

    def test_missing_subject(self):
        with pytest.raises(HTTPException) as exc:
            verify_access_token(make_token(sub=""))
        assert exc.value.detail == "Invalid token claims"


class TestProfiles:
    def test_profile_created_once(self, db):
        claims = verify_access_token(make_token())
        first = find_or_create_profile(db, claims)
        second = find_or_create_profile(db, claims)
        assert first.id == second.id
        assert first.email == "staff@ecasl.test"
        assert first.first_name == "Casey"
        assert not first.is_team_member

    def test_bootstrap_admin(self, db):
        with patch("agency_crm.auth.ADMIN_EMAILS", ["staff@ecasl.test"]):
            profile = find_or_create_profile(db, verify_access_token(make_token()))
        assert profile.has_role("admin")

    def test_gsa_only(self, db):
        profile = Profile(auth_uid="gsa", email="gsa@ecasl.test")
        profile.roles = [UserRole(role="gsa_contributor")]
        assert gsa_only(profile)
        profile.roles.append(UserRole(role="bookkeeper"))
        assert not gsa_only(profile)


class TestAuthenticatedRequests:
    @pytest.fixture
    def client(self, db):
        app.dependency_overrides[get_db] = lambda: db
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_me_without_roles(self, client):
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {make_token()}"})
        assert response.status_code == 200
        assert response.json()["roles"] == []
        assert response.json()["is_team_member"] is False

    def test_missing_header_is_unauthorized(self, client):
        assert client.get("/auth/me").status_code in (401, 403)

    def test_non_member_is_forbidden(self, client):
        response = client.get("/interpreters", headers={"Authorization": f"Bearer {make_token()}"})
        assert response.status_code == 403

    def test_invalid_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
