"""Unit tests for token verification and the Principal dependency."""

from collections.abc import Callable
from datetime import timedelta

import pytest
from fastapi import HTTPException

from src.lp_common.errors import InvalidCredentialsError
from src.lp_gateway.auth.dependencies import Principal, get_current_principal
from src.lp_gateway.auth.jwt_handler import decode_token


def test_decode_valid_access_token(make_token: Callable[..., str]) -> None:
    payload = decode_token(make_token(sub="staff-abc"), expected_type="access")
    assert payload["sub"] == "staff-abc"
    assert payload["type"] == "access"


def test_refresh_token_used_as_access_raises_error(make_token: Callable[..., str]) -> None:
    """A refresh token must not open the ledger API."""
    with pytest.raises(InvalidCredentialsError):
        decode_token(make_token(token_type="refresh"), expected_type="access")


def test_expired_token_raises_credentials_error(make_token: Callable[..., str]) -> None:
    token = make_token(expires_in=timedelta(seconds=-1))
    with pytest.raises(InvalidCredentialsError):
        decode_token(token)


def test_tampered_token_raises_error(make_token: Callable[..., str]) -> None:
    token = make_token()
    tampered = token[:-4] + "xxxx"
    with pytest.raises(InvalidCredentialsError):
        decode_token(tampered)


def test_wrong_secret_raises_error(make_token: Callable[..., str]) -> None:
    with pytest.raises(InvalidCredentialsError):
        decode_token(make_token(secret="some-other-secret"))


async def test_principal_from_claims(make_token: Callable[..., str]) -> None:
    principal = await get_current_principal(make_token(sub="ops-7", role="admin"))
    assert principal == Principal(id="ops-7", role="admin")


async def test_principal_rejects_bad_token() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_principal("not-a-jwt")
    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
