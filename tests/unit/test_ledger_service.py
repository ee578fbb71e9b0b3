"""Unit tests for LedgerApplicationService using mock repositories."""

from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import ANY, AsyncMock, MagicMock

import pytest

from src.lp_common.enums import TransactionType
from src.lp_common.errors import InsufficientPointsError, MemberNotFoundError
from src.lp_ledger.application.schemas import LedgerListResponse, cursor_decode, cursor_encode
from src.lp_ledger.application.service import LedgerApplicationService
from src.lp_ledger.domain.models import LedgerEntry
from src.lp_member.domain.models import MemberAccount


def _make_member(available: int = 150, version: int = 2) -> MemberAccount:
    return MemberAccount(
        id="m-1",
        member_number="MEM-1",
        available_points=available,
        total_points=available,
        lifetime_points=available,
        version=version,
    )


def _make_entry(entry_id: int, points: int, balance_after: int) -> LedgerEntry:
    return LedgerEntry(
        id=entry_id,
        reference_number=f"TXN-{entry_id}",
        member_id="m-1",
        transaction_type="ACCRUAL" if points > 0 else "REDEMPTION",
        points=points,
        balance_after=balance_after,
        created_at=datetime.now(UTC),
    )


def _make_db() -> MagicMock:
    db = MagicMock()
    db.execute = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


class TestApplyTransaction:
    async def test_accrual_commits_once(self) -> None:
        members = AsyncMock()
        ledger = AsyncMock()
        members.lock_member.return_value = _make_member(100, version=1)
        members.save_balances.side_effect = lambda db, acct: replace(acct, version=acct.version + 1)
        ledger.get_latest_entry.return_value = _make_entry(1, 100, 100)
        ledger.insert_entry.return_value = _make_entry(2, 50, 150)
        svc = LedgerApplicationService(members=members, ledger=ledger)
        db = _make_db()

        entry = await svc.apply_transaction(db, "m-1", TransactionType.ACCRUAL, 50)

        assert entry.balance_after == 150
        saved = members.save_balances.await_args.args[1]
        assert saved.available_points == 150
        assert saved.version == 1
        posting = ledger.insert_entry.await_args.args[1]
        assert posting.points == 50
        assert posting.balance_after == 150
        assert posting.description == "accrual transaction"
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    async def test_insufficient_points_rolls_back_without_writes(self) -> None:
        members = AsyncMock()
        ledger = AsyncMock()
        members.lock_member.return_value = _make_member(30)
        ledger.get_latest_entry.return_value = _make_entry(3, -120, 30)
        svc = LedgerApplicationService(members=members, ledger=ledger)
        db = _make_db()

        with pytest.raises(InsufficientPointsError):
            await svc.apply_transaction(db, "m-1", TransactionType.REDEMPTION, 50)

        members.save_balances.assert_not_awaited()
        ledger.insert_entry.assert_not_awaited()
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_member_not_found(self) -> None:
        members = AsyncMock()
        members.lock_member.return_value = None
        svc = LedgerApplicationService(members=members, ledger=AsyncMock())
        db = _make_db()

        with pytest.raises(MemberNotFoundError):
            await svc.apply_transaction(db, "m-x", TransactionType.ACCRUAL, 5)
        db.rollback.assert_awaited_once()


class TestListLedger:
    async def test_first_page_with_more(self) -> None:
        members = AsyncMock()
        ledger = AsyncMock()
        members.get_member.return_value = _make_member()
        ledger.list_entries.return_value = [
            _make_entry(1, 100, 100),
            _make_entry(2, 50, 150),
            _make_entry(3, -120, 30),
        ]
        svc = LedgerApplicationService(members=members, ledger=ledger)

        result = await svc.list_ledger(MagicMock(), "m-1", cursor=None, limit=2)

        assert isinstance(result, LedgerListResponse)
        assert [i.id for i in result.items] == [1, 2]
        assert result.has_more is True
        assert cursor_decode(result.next_cursor) == 2
        ledger.list_entries.assert_awaited_once_with(ANY, "m-1", None, 3)

    async def test_cursor_passed_as_after_id(self) -> None:
        members = AsyncMock()
        ledger = AsyncMock()
        members.get_member.return_value = _make_member()
        ledger.list_entries.return_value = [_make_entry(3, -120, 30)]
        svc = LedgerApplicationService(members=members, ledger=ledger)

        result = await svc.list_ledger(MagicMock(), "m-1", cursor=cursor_encode(2), limit=2)

        assert result.has_more is False
        assert result.next_cursor is None
        assert result.items[0].points_display == "-120 pts"
        assert ledger.list_entries.await_args.args[2] == 2

    async def test_unknown_member(self) -> None:
        members = AsyncMock()
        members.get_member.return_value = None
        svc = LedgerApplicationService(members=members, ledger=AsyncMock())

        with pytest.raises(MemberNotFoundError):
            await svc.list_ledger(MagicMock(), "m-x", cursor=None, limit=10)


class TestVerifyLedger:
    async def test_consistent(self) -> None:
        members = AsyncMock()
        ledger = AsyncMock()
        members.get_member.return_value = _make_member(30)
        ledger.list_entries.return_value = [
            _make_entry(1, 100, 100),
            _make_entry(2, 50, 150),
            _make_entry(3, -120, 30),
        ]
        svc = LedgerApplicationService(members=members, ledger=ledger)

        result = await svc.verify_ledger(MagicMock(), "m-1")

        assert result.consistent is True
        assert result.entries_checked == 3
        assert result.violations == []

    async def test_drift_reported(self) -> None:
        members = AsyncMock()
        ledger = AsyncMock()
        members.get_member.return_value = _make_member(40)
        ledger.list_entries.return_value = [_make_entry(1, 100, 100), _make_entry(2, -70, 30)]
        svc = LedgerApplicationService(members=members, ledger=ledger)

        result = await svc.verify_ledger(MagicMock(), "m-1")

        assert result.consistent is False
        assert any("available_points 40" in v for v in result.violations)


class TestCursor:
    def test_roundtrip(self) -> None:
        assert cursor_decode(cursor_encode(12345)) == 12345

    def test_garbage_is_none(self) -> None:
        assert cursor_decode("!!not-base64!!") is None
        assert cursor_decode(None) is None

