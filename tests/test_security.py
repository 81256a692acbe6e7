import pytest
from datetime import timedelta
from fastapi import status
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt
from starlette.requests import Request
from unittest.mock import AsyncMock, patch
import logging

from community_registry.api.v1.dependencies.auth import (
    get_current_admin,
    require_admin,
    require_registrations_token,
)
from community_registry.api.v1.security.jwt import create_access_token, decode_jwt
from community_registry.api.v1.security.passwords import hash_password, verify_password
from community_registry.core.config import ALGORITHM, SECRET_KEY
from community_registry.core.errors import UnauthorizedError
from tests.conftest import DummyAdmin

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


def make_request(headers=None) -> Request:
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers})


# --- Passwords ---

def test_hash_and_verify_password():
    hashed = hash_password("CorrectHorse1")
    assert hashed != "CorrectHorse1"
    assert verify_password("CorrectHorse1", hashed) is True
    assert verify_password("wrong-password", hashed) is False


def test_verify_password_with_garbage_hash():
    assert verify_password("anything", "not-an-argon2-hash") is False


# --- JWT ---

def test_create_and_decode_token():
    token = create_access_token({"sub": "admin-1"})
    payload = decode_jwt(token)
    assert payload["sub"] == "admin-1"
    assert isinstance(payload["exp"], int)


def test_decode_expired_token():
    token = create_access_token({"sub": "admin-1"}, expires_delta=timedelta(seconds=-10))
    with pytest.raises(UnauthorizedError) as exc_info:
        decode_jwt(token)
    assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
    assert exc_info.value.detail == "Session expired"


def test_decode_token_with_wrong_key():
    token = jwt.encode({"sub": "admin-1"}, "some-other-secret", algorithm=ALGORITHM)
    with pytest.raises(UnauthorizedError, match="Invalid session token"):
        decode_jwt(token)


def test_decode_garbage_token():
    with pytest.raises(UnauthorizedError):
        decode_jwt("not.a.jwt")


# --- Dependencies ---

@pytest.mark.asyncio
async def test_get_current_admin_from_cookie():
    token = create_access_token({"sub": "admin-1"})
    with patch(
        "community_registry.api.v1.dependencies.auth.AuthService.get_admin",
        new=AsyncMock(return_value=DummyAdmin()),
    ) as get_admin:
        admin = await get_current_admin(session=token, bearer=None, db=AsyncMock())
    assert admin.id == "admin-1"
    get_admin.assert_awaited_once_with("admin-1")


@pytest.mark.asyncio
async def test_get_current_admin_from_bearer_header():
    token = create_access_token({"sub": "admin-1"})
    bearer = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)
    with patch(
        "community_registry.api.v1.dependencies.auth.AuthService.get_admin",
        new=AsyncMock(return_value=DummyAdmin()),
    ):
        admin = await get_current_admin(session=None, bearer=bearer, db=AsyncMock())
    assert admin.username == "admin"


@pytest.mark.asyncio
async def test_get_current_admin_without_token():
    assert await get_current_admin(session=None, bearer=None, db=AsyncMock()) is None


@pytest.mark.asyncio
async def test_get_current_admin_with_invalid_token():
    assert await get_current_admin(session="garbage", bearer=None, db=AsyncMock()) is None


@pytest.mark.asyncio
async def test_get_current_admin_token_without_subject():
    token = jwt.encode({"role": "admin"}, str(SECRET_KEY), algorithm=ALGORITHM)
    assert await get_current_admin(session=token, bearer=None, db=AsyncMock()) is None


@pytest.mark.asyncio
async def test_require_admin():
    admin = DummyAdmin()
    assert await require_admin(admin) is admin
    with pytest.raises(UnauthorizedError, match="Unauthorized"):
        await require_admin(None)


def test_require_registrations_token_open_when_unset(monkeypatch):
    monkeypatch.setattr("community_registry.api.v1.dependencies.auth.REGISTRATIONS_ADMIN_TOKEN", "")
    assert require_registrations_token(make_request()) is None


def test_require_registrations_token_when_set(monkeypatch):
    monkeypatch.setattr("community_registry.api.v1.dependencies.auth.REGISTRATIONS_ADMIN_TOKEN", "tok")

    assert require_registrations_token(make_request({"Authorization": "Bearer tok"})) is None
    with pytest.raises(UnauthorizedError):
        require_registrations_token(make_request())
    with pytest.raises(UnauthorizedError):
        require_registrations_token(make_request({"Authorization": "tok"}))
