"""LedgerApplicationService — transaction boundary for point movements.

apply_transaction wraps LedgerEngine in run_in_transaction (lock, check,
write, commit, bounded retry). Reads need no row locks.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_catalog.domain.repository import RewardRepositoryProtocol
from src.lp_common.enums import TransactionType
from src.lp_common.errors import MemberNotFoundError
from src.lp_common.unit_of_work import UnitOfWork, run_in_transaction
from src.lp_ledger.application.schemas import (
    LedgerEntryItem,
    LedgerListResponse,
    LedgerVerifyResponse,
    cursor_decode,
    cursor_encode,
)
from src.lp_ledger.domain.engine import LedgerEngine
from src.lp_ledger.domain.invariants import replay_violations
from src.lp_ledger.domain.models import LedgerEntry, LedgerLinks
from src.lp_ledger.domain.repository import LedgerRepositoryProtocol
from src.lp_ledger.infrastructure.persistence import LedgerRepository
from src.lp_member.domain.models import MemberAccount
from src.lp_member.domain.repository import MemberRepositoryProtocol
from src.lp_member.infrastructure.persistence import MemberRepository

logger = logging.getLogger(__name__)


class LedgerApplicationService:
    def __init__(
        self,
        members: MemberRepositoryProtocol | None = None,
        ledger: LedgerRepositoryProtocol | None = None,
        rewards: RewardRepositoryProtocol | None = None,
    ) -> None:
        self._members: MemberRepositoryProtocol = members or MemberRepository()
        self._ledger: LedgerRepositoryProtocol = ledger or LedgerRepository()
        self._engine = LedgerEngine(self._members, self._ledger, rewards)

    async def apply_transaction(
        self,
        db: AsyncSession,
        member_id: str,
        transaction_type: TransactionType,
        points: int,
        description: str | None = None,
        links: LedgerLinks | None = None,
        idempotency_key: str | None = None,
    ) -> LedgerEntry:
        async def work(uow: UnitOfWork) -> LedgerEntry:
            return await self._engine.apply_transaction(
                uow,
                member_id,
                transaction_type,
                points,
                description=description,
                links=links,
                idempotency_key=idempotency_key,
            )

        return await run_in_transaction(db, work, operation="apply_transaction")

    async def list_ledger(
        self,
        db: AsyncSession,
        member_id: str,
        cursor: str | None,
        limit: int,
    ) -> LedgerListResponse:
        await self._require_member(db, member_id)
        after_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._ledger.list_entries(db, member_id, after_id, limit + 1)
        has_more = len(entries) > limit
        page = entries[:limit]
        items = [LedgerEntryItem.from_domain(e) for e in page]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def verify_ledger(self, db: AsyncSession, member_id: str) -> LedgerVerifyResponse:
        account = await self._require_member(db, member_id)
        entries = await self._ledger.list_entries(db, member_id)
        violations = replay_violations(account, entries)
        if not violations:
            logger.info("Ledger verified: member=%s entries=%d", member_id, len(entries))
        return LedgerVerifyResponse(
            member_id=member_id,
            entries_checked=len(entries),
            available_points=account.available_points,
            consistent=not violations,
            violations=violations,
        )

    async def _require_member(self, db: AsyncSession, member_id: str) -> MemberAccount:
        account = await self._members.get_member(db, member_id)
        if account is None:
            raise MemberNotFoundError(member_id)
        return account
