"""Unit tests for MemberApplicationService using a mock repository."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.lp_common.errors import MemberAlreadyEnrolledError, MemberNotFoundError
from src.lp_member.application.schemas import BalanceResponse, MemberResponse
from src.lp_member.application.service import MemberApplicationService
from src.lp_member.domain.models import MemberAccount


def _make_member(available: int = 0) -> MemberAccount:
    return MemberAccount(
        id="m-1",
        member_number="MEM-1",
        available_points=available,
        total_points=available,
        lifetime_points=available,
        version=0,
        user_id="user-1",
        enrolled_at=datetime.now(UTC),
    )


def _make_db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


class TestEnroll:
    async def test_creates_member_with_zero_balances(self) -> None:
        repo = AsyncMock()
        repo.get_member_by_user_id.return_value = None
        repo.create_member.return_value = _make_member()
        svc = MemberApplicationService(repo=repo)
        db = _make_db()

        result = await svc.enroll(db, "user-1", "BRONZE", "STANDARD")

        assert isinstance(result, MemberResponse)
        assert result.available_points == 0
        number = repo.create_member.await_args.args[1]
        assert number.startswith("MEM-")
        db.commit.assert_awaited_once()

    async def test_duplicate_user(self) -> None:
        repo = AsyncMock()
        repo.get_member_by_user_id.return_value = _make_member()
        svc = MemberApplicationService(repo=repo)
        db = _make_db()

        with pytest.raises(MemberAlreadyEnrolledError):
            await svc.enroll(db, "user-1", "BRONZE", "STANDARD")
        repo.create_member.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_unique_race_maps_to_already_enrolled(self) -> None:
        repo = AsyncMock()
        repo.get_member_by_user_id.return_value = None
        repo.create_member.side_effect = IntegrityError("INSERT", {}, Exception("dup"))
        svc = MemberApplicationService(repo=repo)
        db = _make_db()

        with pytest.raises(MemberAlreadyEnrolledError):
            await svc.enroll(db, "user-1", "BRONZE", "STANDARD")
        db.rollback.assert_awaited_once()

    async def test_anonymous_member_skips_lookup(self) -> None:
        repo = AsyncMock()
        repo.create_member.return_value = _make_member()
        svc = MemberApplicationService(repo=repo)

        await svc.enroll(_make_db(), None, "GOLD", "VIP")

        repo.get_member_by_user_id.assert_not_awaited()


class TestGetBalance:
    async def test_returns_balance(self) -> None:
        repo = AsyncMock()
        repo.get_member.return_value = _make_member(12500)
        svc = MemberApplicationService(repo=repo)

        result = await svc.get_balance(MagicMock(), "m-1")

        assert isinstance(result, BalanceResponse)
        assert result.available_points == 12500
        assert result.available_points_display == "12,500 pts"

    async def test_missing_member(self) -> None:
        repo = AsyncMock()
        repo.get_member.return_value = None
        svc = MemberApplicationService(repo=repo)

        with pytest.raises(MemberNotFoundError):
            await svc.get_balance(MagicMock(), "m-x")
