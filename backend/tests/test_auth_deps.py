import os

import jwt
import pytest
from fastapi import HTTPException

from app.core.errors import AuthenticationError
from app.modules.auth.deps import ExtractBearerToken, RequireAuthenticated, ResolveIdentity
from app.modules.auth.service import CreateAccessToken


class _FakeRequest:
    def __init__(self, headers=None):
        self.headers = headers or {}


def test_extract_bearer_token():
    assert ExtractBearerToken("Bearer abc.def") == "abc.def"


@pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer   "])
def test_extract_bearer_token_rejects_bad_headers(header):
    with pytest.raises(AuthenticationError):
        ExtractBearerToken(header)


def test_access_token_resolves_to_identity(jwt_env):
    token, ttl_seconds = CreateAccessToken("user-alice", "alice@example.com")

    user = ResolveIdentity(token)

    assert ttl_seconds == 3600
    assert user.Id == "user-alice"
    assert user.Email == "alice@example.com"


def test_expired_token_is_rejected(jwt_env, monkeypatch):
    monkeypatch.setenv("JWT_ACCESS_TTL_MINUTES", "-5")
    token, _ttl = CreateAccessToken("user-alice")

    with pytest.raises(AuthenticationError, match="Token expired"):
        ResolveIdentity(token)


def test_token_signed_with_other_secret_is_rejected(jwt_env):
    token = jwt.encode({"sub": "user-alice"}, "someone-else", algorithm="HS256")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        ResolveIdentity(token)


def test_token_without_subject_is_rejected(jwt_env):
    token = jwt.encode({"email": "nobody@example.com"}, os.environ["JWT_SECRET_KEY"], algorithm="HS256")

    with pytest.raises(AuthenticationError):
        ResolveIdentity(token)


def test_audience_is_enforced_when_configured(jwt_env, monkeypatch):
    token, _ttl = CreateAccessToken("user-alice")
    monkeypatch.setenv("JWT_AUDIENCE", "pantry")

    with pytest.raises(AuthenticationError):
        ResolveIdentity(token)

    scoped, _ttl = CreateAccessToken("user-alice")
    assert ResolveIdentity(scoped).Id == "user-alice"


def test_missing_secret_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

    with pytest.raises(RuntimeError):
        CreateAccessToken("user-alice")


def test_require_authenticated_maps_to_401(jwt_env):
    with pytest.raises(HTTPException) as exc_info:
        RequireAuthenticated(_FakeRequest())

    assert exc_info.value.status_code == 401


def test_require_authenticated_returns_caller(jwt_env):
    token, _ttl = CreateAccessToken("user-bob")

    user = RequireAuthenticated(_FakeRequest({"Authorization": f"Bearer {token}"}))

    assert user.Id == "user-bob"
