"""Tests for JWT verification and admin authorization."""

from __future__ import annotations

import time
from unittest.mock import patch

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from yachtme.api.middleware.auth import (
    UserPayload,
    _verify_jwt,
    get_current_user,
    is_admin,
    require_admin,
)

SECRET = "test-secret-with-at-least-32-bytes!!"


def _token(secret=SECRET, aud="authenticated", expires_in=3600, **claims):
    payload = {
        "sub": "user-1",
        "email": "guest@example.com",
        "aud": aud,
        "exp": int(time.time()) + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture(autouse=True)
def patched_settings(mock_settings):
    with patch("yachtme.api.middleware.auth.get_settings", return_value=mock_settings):
        yield mock_settings


@pytest.mark.unit
class TestVerifyJwt:
    def test_valid_hs256(self):
        user = _verify_jwt(_token(app_metadata={"role": "admin"}))
        assert user.sub == "user-1"
        assert user.app_metadata == {"role": "admin"}
        assert user.token is not None

    def test_expired(self):
        assert _verify_jwt(_token(expires_in=-60)) is None

    def test_wrong_audience(self):
        assert _verify_jwt(_token(aud="anon")) is None

    def test_wrong_secret(self):
        assert _verify_jwt(_token(secret="another-secret-with-at-least-32-bytes")) is None

    def test_garbage(self):
        assert _verify_jwt("not.a.jwt") is None

    def test_no_secret_configured(self, patched_settings):
        patched_settings.supabase_jwt_secret = None
        assert _verify_jwt(_token()) is None


@pytest.mark.unit
class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc:
            await get_current_user(None)
        assert exc.value.status_code == 401
        assert exc.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="bad")
        with pytest.raises(HTTPException) as exc:
            await get_current_user(creds)
        assert exc.value.status_code == 401

    @pytest.mark.asyncio
    async def test_valid_token(self):
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=_token())
        user = await get_current_user(creds)
        assert user.email == "guest@example.com"


@pytest.mark.unit
class TestAdminAuthorization:
    def test_role_claim(self, settings):
        user = UserPayload(sub="1", email="x@example.com", app_metadata={"role": "admin"})
        assert is_admin(user, settings) == "role"

    def test_allow_list_case_insensitive(self, settings):
        user = UserPayload(sub="1", email="Owner@YachtMe.it")
        assert is_admin(user, settings) == "allow-list"

    def test_plain_user(self, settings):
        assert is_admin(UserPayload(sub="1", email="guest@example.com"), settings) is None

    def test_user_metadata_role_not_trusted(self, settings):
        user = UserPayload(sub="1", email="guest@example.com", role="admin")
        assert is_admin(user, settings) is None

    @pytest.mark.asyncio
    async def test_require_admin_forbidden(self, settings):
        with pytest.raises(HTTPException) as exc:
            await require_admin(UserPayload(sub="1", email="guest@example.com"), settings)
        assert exc.value.status_code == 403

    @pytest.mark.asyncio
    async def test_require_admin_identity(self, settings):
        identity = await require_admin(UserPayload(sub="1", email="owner@yachtme.it"), settings)
        assert identity.via == "allow-list"
        assert identity.user.sub == "1"
