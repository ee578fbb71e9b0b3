"""Repository Protocol for redemption records."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_redemption.domain.models import RedemptionRecord


class RedemptionRepositoryProtocol(Protocol):
    async def insert_redemption(
        self,
        db: AsyncSession,
        redemption_number: str,
        member_id: str,
        reward_id: str,
        points_redeemed: int,
        monetary_value_cents: int,
        partner_code: str | None,
        channel: str,
        idempotency_key: str | None,
    ) -> RedemptionRecord: ...

    async def get_redemption(
        self, db: AsyncSession, redemption_id: int
    ) -> RedemptionRecord | None: ...

    async def find_by_idempotency_key(
        self, db: AsyncSession, member_id: str, idempotency_key: str
    ) -> RedemptionRecord | None: ...
