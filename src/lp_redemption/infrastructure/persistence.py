"""RedemptionRepository — raw SQL over the redemptions table.

Records are inserted once by settlement. fulfillment_status is owned by the
external fulfillment workflow and never written here after insert.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_common.enums import FulfillmentStatus
from src.lp_common.errors import InternalError
from src.lp_redemption.domain.models import RedemptionRecord

_REDEMPTION_COLUMNS = """
    id, redemption_number, member_id, reward_id, points_redeemed,
    monetary_value_cents, partner_code, fulfillment_status, channel,
    idempotency_key, created_at
"""

_INSERT_REDEMPTION_SQL = text(f"""
    INSERT INTO redemptions
        (redemption_number, member_id, reward_id, points_redeemed,
         monetary_value_cents, partner_code, fulfillment_status, channel,
         idempotency_key)
    VALUES
        (:redemption_number, :member_id, :reward_id, :points_redeemed,
         :monetary_value_cents, :partner_code, :fulfillment_status, :channel,
         :idempotency_key)
    RETURNING {_REDEMPTION_COLUMNS}
""")

_GET_REDEMPTION_SQL = text(f"""
    SELECT {_REDEMPTION_COLUMNS}
    FROM redemptions
    WHERE id = :redemption_id
""")

_FIND_BY_IDEMPOTENCY_SQL = text(f"""
    SELECT {_REDEMPTION_COLUMNS}
    FROM redemptions
    WHERE member_id = :member_id AND idempotency_key = :idempotency_key
""")


def _row_to_redemption(row: object) -> RedemptionRecord:
    return RedemptionRecord(
        id=row.id,  # type: ignore[attr-defined]
        redemption_number=row.redemption_number,  # type: ignore[attr-defined]
        member_id=str(row.member_id),  # type: ignore[attr-defined]
        reward_id=str(row.reward_id),  # type: ignore[attr-defined]
        points_redeemed=row.points_redeemed,  # type: ignore[attr-defined]
        monetary_value_cents=row.monetary_value_cents,  # type: ignore[attr-defined]
        partner_code=row.partner_code,  # type: ignore[attr-defined]
        fulfillment_status=row.fulfillment_status,  # type: ignore[attr-defined]
        channel=row.channel,  # type: ignore[attr-defined]
        idempotency_key=row.idempotency_key,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class RedemptionRepository:
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
    ) -> RedemptionRecord:
        result = await db.execute(
            _INSERT_REDEMPTION_SQL,
            {
                "redemption_number": redemption_number,
                "member_id": member_id,
                "reward_id": reward_id,
                "points_redeemed": points_redeemed,
                "monetary_value_cents": monetary_value_cents,
                "partner_code": partner_code,
                "fulfillment_status": FulfillmentStatus.PENDING.value,
                "channel": channel,
                "idempotency_key": idempotency_key,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Redemption insert returned no rows — this should never happen")
        return _row_to_redemption(row)

    async def get_redemption(
        self, db: AsyncSession, redemption_id: int
    ) -> RedemptionRecord | None:
        result = await db.execute(_GET_REDEMPTION_SQL, {"redemption_id": redemption_id})
        row = result.fetchone()
        return _row_to_redemption(row) if row else None

    async def find_by_idempotency_key(
        self, db: AsyncSession, member_id: str, idempotency_key: str
    ) -> RedemptionRecord | None:
        result = await db.execute(
            _FIND_BY_IDEMPOTENCY_SQL,
            {"member_id": member_id, "idempotency_key": idempotency_key},
        )
        row = result.fetchone()
        return _row_to_redemption(row) if row else None
