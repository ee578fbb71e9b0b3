"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session. Tests are skipped when PostgreSQL is unreachable.

Pre-condition: PostgreSQL at DATABASE_URL and `alembic upgrade head`.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.lp_common.database import engine
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client, keeps the engine pool alive."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM ledger_entries LIMIT 1"))
    except Exception as exc:
        pytest.skip(f"PostgreSQL with migrated schema not available: {exc}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def auth_client(client: AsyncClient, make_token) -> AsyncClient:  # type: ignore[no-untyped-def]
    """Client carrying a staff Bearer token minted with the shared secret."""
    client.headers.update({"Authorization": f"Bearer {make_token()}"})
    return client
