"""RedemptionSettlement — exchange points for one unit of a reward, atomically.

Runs inside one UnitOfWork. Lock order is REWARD then MEMBER (UnitOfWork
enforces it):
  1. lock reward FOR UPDATE   -> RewardNotFound
     (idempotency re-check)
     validate                 -> RewardInactive / OutOfStock
  2. lock member FOR UPDATE   -> MemberNotFound
     (idempotency re-check)
  3. points check             -> InsufficientPoints
  4. stock - 1, insert redemption (PENDING), post REDEMPTION ledger entry

Any error between 1 and 4 rolls back everything, so stock, balance,
redemption record and ledger entry change together or not at all.
"""

import logging

from src.lp_catalog.domain.models import Reward
from src.lp_catalog.domain.repository import RewardRepositoryProtocol
from src.lp_catalog.infrastructure.persistence import RewardRepository
from src.lp_common.datetime_utils import utc_now
from src.lp_common.enums import RedemptionChannel, TransactionType
from src.lp_common.errors import (
    IdempotencyConflictError,
    InsufficientPointsError,
    LedgerIntegrityError,
    OutOfStockError,
    RewardInactiveError,
    RewardNotFoundError,
)
from src.lp_common.id_generator import redemption_reference
from src.lp_common.unit_of_work import LockRank, UnitOfWork
from src.lp_ledger.domain.engine import LedgerEngine
from src.lp_ledger.domain.models import LedgerLinks
from src.lp_ledger.domain.repository import LedgerRepositoryProtocol
from src.lp_ledger.infrastructure.persistence import LedgerRepository
from src.lp_redemption.domain.models import RedemptionReceipt
from src.lp_redemption.domain.repository import RedemptionRepositoryProtocol
from src.lp_redemption.infrastructure.persistence import RedemptionRepository

logger = logging.getLogger(__name__)


class RedemptionSettlement:
    def __init__(
        self,
        engine: LedgerEngine | None = None,
        rewards: RewardRepositoryProtocol | None = None,
        redemptions: RedemptionRepositoryProtocol | None = None,
        ledger: LedgerRepositoryProtocol | None = None,
    ) -> None:
        self._ledger: LedgerRepositoryProtocol = ledger or LedgerRepository()
        self._rewards: RewardRepositoryProtocol = rewards or RewardRepository()
        self._engine = engine or LedgerEngine(ledger=self._ledger, rewards=self._rewards)
        self._redemptions: RedemptionRepositoryProtocol = redemptions or RedemptionRepository()

    async def redeem(
        self,
        uow: UnitOfWork,
        member_id: str,
        reward_id: str,
        channel: RedemptionChannel = RedemptionChannel.ONLINE,
        idempotency_key: str | None = None,
    ) -> RedemptionReceipt:
        # Step 1: reward row lock
        uow.claim(LockRank.REWARD, reward_id)
        reward = await self._rewards.lock_reward(uow.db, reward_id)
        if reward is None:
            raise RewardNotFoundError(reward_id)

        replay = await self._replay(uow, member_id, reward_id, idempotency_key)
        if replay is not None:
            return replay

        reason = reward.inactive_reason(utc_now())
        if reason is not None:
            raise RewardInactiveError(reward_id, reason)
        if not reward.in_stock:
            raise OutOfStockError(reward_id)

        # Step 2: member row lock
        account = await self._engine.lock_account(uow, member_id)

        replay = await self._replay(uow, member_id, reward_id, idempotency_key)
        if replay is not None:
            return replay

        # Step 3: affordability, before any write
        if account.available_points < reward.points_required:
            raise InsufficientPointsError(reward.points_required, account.available_points)

        # Step 4: writes
        reward = await self._rewards.decrement_stock(uow.db, reward_id)
        reference = redemption_reference()
        record = await self._redemptions.insert_redemption(
            uow.db,
            redemption_number=reference,
            member_id=member_id,
            reward_id=reward_id,
            points_redeemed=reward.points_required,
            monetary_value_cents=reward.monetary_value_cents,
            partner_code=reward.partner_code,
            channel=channel.value,
            idempotency_key=idempotency_key,
        )
        entry = await self._engine.post(
            uow,
            account,
            TransactionType.REDEMPTION,
            reward.points_required,
            description=redeemed_description(reward),
            links=LedgerLinks(reward_id=reward_id, redemption_id=record.id),
            reference_number=reference,
        )
        logger.info(
            "Redemption settled: %s member=%s reward=%s points=%d stock_left=%d",
            reference, member_id, reward_id, reward.points_required, reward.stock_quantity,
        )
        return RedemptionReceipt(record=record, entry=entry)

    async def _replay(
        self,
        uow: UnitOfWork,
        member_id: str,
        reward_id: str,
        idempotency_key: str | None,
    ) -> RedemptionReceipt | None:
        if idempotency_key is None:
            return None
        existing = await self._redemptions.find_by_idempotency_key(
            uow.db, member_id, idempotency_key
        )
        if existing is None:
            return None
        if existing.reward_id != reward_id:
            raise IdempotencyConflictError(idempotency_key)
        entry = await self._ledger.get_by_reference(uow.db, existing.redemption_number)
        if entry is None:
            raise LedgerIntegrityError(
                f"redemption {existing.redemption_number} has no ledger entry"
            )
        logger.info(
            "Redemption idempotent replay: member=%s key=%s ref=%s",
            member_id, idempotency_key, existing.redemption_number,
        )
        return RedemptionReceipt(record=existing, entry=entry, replayed=True)


def redeemed_description(reward: Reward) -> str:
    return f"Redeemed: {reward.name}"
