"""LedgerEngine — the only code path that changes a member's point balances.

Every posting runs inside a UnitOfWork that holds the member row lock:
  1. lock_account(): claim MEMBER rank, SELECT ... FOR UPDATE, replay-head check
  2. compute_change(): sign semantics + InsufficientPoints check
  3. save_balances(): version-guarded UPDATE of the three balance columns
  4. insert_entry(): append the ledger row with balance_after = new available

Steps 3 and 4 share one transaction, so the balance and its ledger entry
become visible together or not at all.
"""

import logging
from dataclasses import replace

from src.lp_catalog.domain.repository import RewardRepositoryProtocol
from src.lp_catalog.infrastructure.persistence import RewardRepository
from src.lp_common.enums import TransactionType
from src.lp_common.errors import (
    IdempotencyConflictError,
    LedgerEntryNotFoundError,
    LedgerIntegrityError,
    MemberNotFoundError,
    ReversalNotAllowedError,
    RewardNotFoundError,
)
from src.lp_common.id_generator import transaction_reference
from src.lp_common.points import validate_points
from src.lp_common.unit_of_work import LockRank, UnitOfWork
from src.lp_ledger.domain.models import LedgerEntry, LedgerLinks, LedgerPosting
from src.lp_ledger.domain.repository import LedgerRepositoryProtocol
from src.lp_ledger.domain.rules import compute_change
from src.lp_ledger.infrastructure.persistence import LedgerRepository
from src.lp_member.domain.models import MemberAccount
from src.lp_member.domain.repository import MemberRepositoryProtocol
from src.lp_member.infrastructure.persistence import MemberRepository

logger = logging.getLogger(__name__)


def default_description(transaction_type: TransactionType) -> str:
    return f"{transaction_type.value.lower()} transaction"


class LedgerEngine:
    def __init__(
        self,
        members: MemberRepositoryProtocol | None = None,
        ledger: LedgerRepositoryProtocol | None = None,
        rewards: RewardRepositoryProtocol | None = None,
    ) -> None:
        self._members: MemberRepositoryProtocol = members or MemberRepository()
        self._ledger: LedgerRepositoryProtocol = ledger or LedgerRepository()
        self._rewards: RewardRepositoryProtocol = rewards or RewardRepository()

    async def lock_account(self, uow: UnitOfWork, member_id: str) -> MemberAccount:
        """Lock the member row for the rest of the transaction and return it."""
        uow.claim(LockRank.MEMBER, member_id)
        account = await self._members.lock_member(uow.db, member_id)
        if account is None:
            raise MemberNotFoundError(member_id)
        await self._check_ledger_head(uow, account)
        return account

    async def apply_transaction(
        self,
        uow: UnitOfWork,
        member_id: str,
        transaction_type: TransactionType,
        points: int,
        description: str | None = None,
        links: LedgerLinks | None = None,
        idempotency_key: str | None = None,
    ) -> LedgerEntry:
        """Post one movement for a member.

        A repeated idempotency_key with the same type and magnitude returns the
        original entry without posting again.
        """
        validate_points(points)
        links = links or LedgerLinks()
        if links.reversal_of is not None and transaction_type != TransactionType.REVERSAL:
            raise ReversalNotAllowedError(
                links.reversal_of, "reversal_of requires transaction_type REVERSAL"
            )

        account = await self.lock_account(uow, member_id)

        if idempotency_key is not None:
            existing = await self._ledger.find_by_idempotency_key(
                uow.db, member_id, idempotency_key
            )
            if existing is not None:
                if (
                    existing.transaction_type != transaction_type.value
                    or abs(existing.points) != points
                ):
                    raise IdempotencyConflictError(idempotency_key)
                logger.info(
                    "Ledger idempotent replay: member=%s key=%s ref=%s",
                    member_id, idempotency_key, existing.reference_number,
                )
                return existing

        if links.reversal_of is not None:
            await self._check_reversal(uow, member_id, links.reversal_of, points)
        if links.reward_id is not None:
            # Unknown reward is a caller error, not an FK violation at insert
            if await self._rewards.get_reward(uow.db, links.reward_id) is None:
                raise RewardNotFoundError(links.reward_id)

        return await self.post(
            uow,
            account,
            transaction_type,
            points,
            description=description or default_description(transaction_type),
            links=links,
            idempotency_key=idempotency_key,
        )

    async def post(
        self,
        uow: UnitOfWork,
        account: MemberAccount,
        transaction_type: TransactionType,
        points: int,
        *,
        description: str,
        links: LedgerLinks | None = None,
        idempotency_key: str | None = None,
        reference_number: str | None = None,
    ) -> LedgerEntry:
        """Apply a movement to an account already locked by lock_account() in uow."""
        if (LockRank.MEMBER, account.id) not in uow.held_locks:
            raise LedgerIntegrityError(f"posting to member {account.id} without its row lock")

        change = compute_change(account, transaction_type, points)
        saved = await self._members.save_balances(
            uow.db,
            replace(
                account,
                available_points=change.available_after,
                total_points=change.total_after,
                lifetime_points=change.lifetime_after,
            ),
        )
        entry = await self._ledger.insert_entry(
            uow.db,
            LedgerPosting(
                reference_number=reference_number or transaction_reference(),
                member_id=account.id,
                transaction_type=transaction_type.value,
                points=change.delta,
                balance_after=saved.available_points,
                links=links or LedgerLinks(),
                description=description,
                idempotency_key=idempotency_key,
            ),
        )
        logger.info(
            "Ledger %s %+d member=%s balance_after=%d ref=%s",
            transaction_type.value, change.delta, account.id,
            entry.balance_after, entry.reference_number,
        )
        # Caller keeps using the same account object within this transaction
        account.available_points = saved.available_points
        account.total_points = saved.total_points
        account.lifetime_points = saved.lifetime_points
        account.version = saved.version
        return entry

    async def _check_ledger_head(self, uow: UnitOfWork, account: MemberAccount) -> None:
        latest = await self._ledger.get_latest_entry(uow.db, account.id)
        expected = latest.balance_after if latest is not None else 0
        if account.available_points != expected:
            raise LedgerIntegrityError(
                f"member {account.id} available_points {account.available_points} "
                f"!= latest balance_after {expected}"
            )

    async def _check_reversal(
        self, uow: UnitOfWork, member_id: str, reference_number: str, points: int
    ) -> None:
        target = await self._ledger.get_by_reference(uow.db, reference_number)
        if target is None or target.member_id != member_id:
            raise LedgerEntryNotFoundError(reference_number)
        if not target.is_credit:
            raise ReversalNotAllowedError(reference_number, "only credit entries can be reversed")
        if target.points != points:
            raise ReversalNotAllowedError(
                reference_number, f"reversal must be exactly {target.points} points"
            )
        if await self._ledger.find_reversal_of(uow.db, reference_number) is not None:
            raise ReversalNotAllowedError(reference_number, "entry is already reversed")
