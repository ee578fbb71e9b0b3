"""Shared test fixtures."""

import os

# Settings() is built at import time and JWT_SECRET has no default
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from config.settings import settings
from src.main import app


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture(scope="session")
def make_token() -> Callable[..., str]:
    """Mint a token the way the external auth service does."""

    def _make(
        sub: str = "staff-1",
        role: str = "staff",
        token_type: str = "access",
        expires_in: timedelta = timedelta(minutes=15),
        secret: str | None = None,
    ) -> str:
        claims = {
            "sub": sub,
            "role": role,
            "type": token_type,
            "exp": datetime.now(UTC) + expires_in,
        }
        return jwt.encode(claims, secret or settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    return _make


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}
