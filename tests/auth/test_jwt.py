"""Tests for JWT token management."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from skillswap.auth.jwt import create_access_token, reset_keys, verify_token
from skillswap.config import get_settings

SECRET = "unit-test-secret-key-long-enough-for-hs256"


@pytest.fixture(autouse=True)
def _hs256(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SKILLSWAP_JWT_SECRET_KEY", SECRET)
    monkeypatch.setenv("SKILLSWAP_JWT_ALGORITHM", "HS256")
    get_settings.cache_clear()
    reset_keys()
    yield
    get_settings.cache_clear()
    reset_keys()


class TestAccessToken:
    def test_create_and_verify(self):
        token = create_access_token("abc123")
        payload = verify_token(token)
        assert payload["sub"] == "abc123"
        assert payload["type"] == "access"
        assert payload["iss"] == "skillswap"

    def test_expires_after_seven_days(self):
        payload = verify_token(create_access_token("abc123"))
        assert payload["exp"] - payload["iat"] == int(timedelta(days=7).total_seconds())

    def test_wrong_type_rejected(self):
        token = jwt.encode(
            {"sub": "abc123", "type": "refresh", "iss": "skillswap", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(jwt.InvalidTokenError, match="Expected token type"):
            verify_token(token)

    def test_expired_token_rejected(self):
        token = jwt.encode(
            {"sub": "abc123", "type": "access", "iss": "skillswap", "exp": datetime.now(timezone.utc) - timedelta(seconds=5)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(jwt.InvalidTokenError, match="expired"):
            verify_token(token)

    def test_wrong_secret_rejected(self):
        token = jwt.encode(
            {"sub": "abc123", "type": "access", "iss": "skillswap", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "some-other-secret-that-is-also-long-enough",
            algorithm="HS256",
        )
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            verify_token("not.a.jwt")
