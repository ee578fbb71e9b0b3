"""Repository Protocol for the reward catalog."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_catalog.domain.models import Reward


class RewardRepositoryProtocol(Protocol):
    async def get_reward(self, db: AsyncSession, reward_id: str) -> Reward | None: ...

    async def lock_reward(self, db: AsyncSession, reward_id: str) -> Reward | None:
        """SELECT ... FOR UPDATE; the row stays locked until commit/rollback."""
        ...

    async def decrement_stock(self, db: AsyncSession, reward_id: str) -> Reward:
        """stock_quantity - 1, only while it is still positive."""
        ...

    async def create_reward(
        self,
        db: AsyncSession,
        cost_id: str,
        name: str,
        points_required: int,
        monetary_value_cents: int,
        stock_quantity: int,
        status: str,
        valid_from: datetime | None,
        valid_until: datetime | None,
        partner_code: str | None,
    ) -> Reward: ...

    async def list_rewards(
        self, db: AsyncSession, status: str | None = None
    ) -> list[Reward]: ...
