# tests/unit/test_api_routes.py
"""HTTP-level tests: auth, validation, envelope shape, AppError mapping.

Services are patched on each router module and the DB session dependency is
overridden, so no database is needed.
"""
import uuid
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient

from src.lp_common.database import get_db_session
from src.lp_common.errors import InsufficientPointsError, MemberNotFoundError
from src.lp_ledger.application.schemas import LedgerListResponse
from src.lp_ledger.domain.models import LedgerEntry
from src.lp_member.application.schemas import BalanceResponse
from src.main import app

MEMBER_ID = str(uuid.uuid4())
REWARD_ID = str(uuid.uuid4())


@pytest.fixture(autouse=True)
def _fake_db() -> Iterator[MagicMock]:
    db = MagicMock()

    async def _override():  # type: ignore[no-untyped-def]
        yield db

    app.dependency_overrides[get_db_session] = _override
    yield db
    app.dependency_overrides.pop(get_db_session, None)


def _entry() -> LedgerEntry:
    return LedgerEntry(
        id=2,
        reference_number="TXN-2",
        member_id=MEMBER_ID,
        transaction_type="ACCRUAL",
        points=50,
        balance_after=150,
        description="accrual transaction",
        created_at=datetime.now(UTC),
    )


class TestAuth:
    async def test_missing_token_is_401(self, client: AsyncClient) -> None:
        resp = await client.get(f"/api/v1/members/{MEMBER_ID}/balance")
        assert resp.status_code == 401

    async def test_expired_token_is_401(self, client: AsyncClient, make_token) -> None:  # type: ignore[no-untyped-def]
        token = make_token(expires_in=timedelta(seconds=-5))
        resp = await client.get(
            f"/api/v1/members/{MEMBER_ID}/balance",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 401

    async def test_refresh_token_rejected(self, client: AsyncClient, make_token) -> None:  # type: ignore[no-untyped-def]
        token = make_token(token_type="refresh")
        resp = await client.get(
            f"/api/v1/members/{MEMBER_ID}/balance",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert resp.status_code == 401


class TestMemberRoutes:
    async def test_balance_envelope(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        balance = BalanceResponse(
            member_id=MEMBER_ID,
            available_points=12500,
            available_points_display="12,500 pts",
            total_points=12500,
            lifetime_points=15000,
        )
        with patch("src.lp_member.api.router._service") as svc:
            svc.get_balance = AsyncMock(return_value=balance)
            resp = await client.get(f"/api/v1/members/{MEMBER_ID}/balance", headers=auth_headers)

        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["available_points"] == 12500
        assert body["request_id"] == resp.headers["X-Request-ID"]

    async def test_unknown_member_maps_to_404(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        with patch("src.lp_member.api.router._service") as svc:
            svc.get_balance = AsyncMock(side_effect=MemberNotFoundError(MEMBER_ID))
            resp = await client.get(f"/api/v1/members/{MEMBER_ID}/balance", headers=auth_headers)

        assert resp.status_code == 404
        body = resp.json()
        assert body["code"] == 2001
        assert body["data"] is None

    async def test_non_uuid_member_id_is_422(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        resp = await client.get("/api/v1/members/not-a-uuid/balance", headers=auth_headers)
        assert resp.status_code == 422


class TestPointTransactionRoute:
    async def test_accrual_created(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        with patch("src.lp_ledger.api.router._service") as svc:
            svc.apply_transaction = AsyncMock(return_value=_entry())
            resp = await client.post(
                "/api/v1/point-transactions",
                json={"member_id": MEMBER_ID, "transaction_type": "ACCRUAL", "points": 50},
                headers=auth_headers,
            )

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["balance_after"] == 150
        assert data["points_display"] == "+50 pts"

    async def test_zero_points_is_422(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        resp = await client.post(
            "/api/v1/point-transactions",
            json={"member_id": MEMBER_ID, "transaction_type": "ACCRUAL", "points": 0},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    async def test_unknown_type_is_422(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        resp = await client.post(
            "/api/v1/point-transactions",
            json={"member_id": MEMBER_ID, "transaction_type": "GIFT", "points": 5},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    async def test_reversal_link_on_accrual_is_422(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        resp = await client.post(
            "/api/v1/point-transactions",
            json={
                "member_id": MEMBER_ID,
                "transaction_type": "ACCRUAL",
                "points": 5,
                "reversal_of": "TXN-1",
            },
            headers=auth_headers,
        )
        assert resp.status_code == 422

    async def test_insufficient_points_maps_to_422_envelope(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        with patch("src.lp_ledger.api.router._service") as svc:
            svc.apply_transaction = AsyncMock(side_effect=InsufficientPointsError(50, 30))
            resp = await client.post(
                "/api/v1/point-transactions",
                json={"member_id": MEMBER_ID, "transaction_type": "REDEMPTION", "points": 50},
                headers=auth_headers,
            )

        assert resp.status_code == 422
        body = resp.json()
        assert body["code"] == 2002
        assert "required 50" in body["message"]


class TestLedgerRoutes:
    async def test_limit_bounds(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        resp = await client.get(
            f"/api/v1/members/{MEMBER_ID}/ledger", params={"limit": 500}, headers=auth_headers
        )
        assert resp.status_code == 422

    async def test_list_passes_cursor(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        with patch("src.lp_ledger.api.router._service") as svc:
            svc.list_ledger = AsyncMock(
                return_value=LedgerListResponse(items=[], next_cursor=None, has_more=False)
            )
            resp = await client.get(
                f"/api/v1/members/{MEMBER_ID}/ledger",
                params={"cursor": "abc", "limit": 10},
                headers=auth_headers,
            )

        assert resp.status_code == 200
        assert resp.json()["data"]["has_more"] is False
        assert svc.list_ledger.await_args.args[1:] == (MEMBER_ID, "abc", 10)


class TestRedemptionRoutes:
    async def test_redeem_requires_uuid_ids(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        resp = await client.post(
            "/api/v1/redemptions",
            json={"member_id": "m-1", "reward_id": REWARD_ID},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    async def test_redemption_id_must_be_positive(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        resp = await client.get("/api/v1/redemptions/0", headers=auth_headers)
        assert resp.status_code == 422


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
