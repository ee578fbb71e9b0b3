"""RedemptionApplicationService — transaction boundary for redemptions."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_common.enums import RedemptionChannel
from src.lp_common.errors import RedemptionNotFoundError
from src.lp_common.unit_of_work import UnitOfWork, run_in_transaction
from src.lp_redemption.application.schemas import RedeemResponse, RedemptionResponse
from src.lp_redemption.domain.models import RedemptionReceipt
from src.lp_redemption.domain.repository import RedemptionRepositoryProtocol
from src.lp_redemption.domain.settlement import RedemptionSettlement
from src.lp_redemption.infrastructure.persistence import RedemptionRepository


class RedemptionApplicationService:
    def __init__(
        self,
        settlement: RedemptionSettlement | None = None,
        repo: RedemptionRepositoryProtocol | None = None,
    ) -> None:
        self._repo: RedemptionRepositoryProtocol = repo or RedemptionRepository()
        self._settlement = settlement or RedemptionSettlement(redemptions=self._repo)

    async def redeem(
        self,
        db: AsyncSession,
        member_id: str,
        reward_id: str,
        channel: RedemptionChannel = RedemptionChannel.ONLINE,
        idempotency_key: str | None = None,
    ) -> RedeemResponse:
        async def work(uow: UnitOfWork) -> RedemptionReceipt:
            return await self._settlement.redeem(
                uow, member_id, reward_id, channel, idempotency_key
            )

        receipt = await run_in_transaction(db, work, operation="redeem")
        return RedeemResponse.from_receipt(receipt)

    async def get_redemption(
        self, db: AsyncSession, redemption_id: int
    ) -> RedemptionResponse:
        record = await self._repo.get_redemption(db, redemption_id)
        if record is None:
            raise RedemptionNotFoundError(redemption_id)
        return RedemptionResponse.from_domain(record)
