"""CatalogApplicationService — reward creation and reads."""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_catalog.application.schemas import RewardListResponse, RewardResponse
from src.lp_catalog.domain.repository import RewardRepositoryProtocol
from src.lp_catalog.infrastructure.persistence import RewardRepository
from src.lp_common.datetime_utils import ensure_utc
from src.lp_common.errors import InvalidRewardWindowError, RewardNotFoundError
from src.lp_common.id_generator import cost_id

logger = logging.getLogger(__name__)


class CatalogApplicationService:
    def __init__(self, repo: RewardRepositoryProtocol | None = None) -> None:
        self._repo: RewardRepositoryProtocol = repo or RewardRepository()

    async def create_reward(
        self,
        db: AsyncSession,
        name: str,
        points_required: int,
        monetary_value_cents: int,
        stock_quantity: int,
        status: str = "ACTIVE",
        valid_from: datetime | None = None,
        valid_until: datetime | None = None,
        partner_code: str | None = None,
    ) -> RewardResponse:
        valid_from, valid_until = ensure_utc(valid_from), ensure_utc(valid_until)
        if valid_from is not None and valid_until is not None and valid_until <= valid_from:
            raise InvalidRewardWindowError()
        try:
            reward = await self._repo.create_reward(
                db,
                cost_id(),
                name,
                points_required,
                monetary_value_cents,
                stock_quantity,
                status,
                valid_from,
                valid_until,
                partner_code,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Reward created: id=%s cost_id=%s points=%d stock=%d",
            reward.id, reward.cost_id, reward.points_required, reward.stock_quantity,
        )
        return RewardResponse.from_domain(reward)

    async def get_reward(self, db: AsyncSession, reward_id: str) -> RewardResponse:
        reward = await self._repo.get_reward(db, reward_id)
        if reward is None:
            raise RewardNotFoundError(reward_id)
        return RewardResponse.from_domain(reward)

    async def list_rewards(
        self, db: AsyncSession, status: str | None = None
    ) -> RewardListResponse:
        rewards = await self._repo.list_rewards(db, status)
        return RewardListResponse(items=[RewardResponse.from_domain(r) for r in rewards])
