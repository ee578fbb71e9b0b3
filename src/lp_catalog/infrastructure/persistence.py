"""RewardRepository — raw SQL over the rewards table.

stock_quantity changes after creation ONLY through decrement_stock(), called
by redemption settlement while it holds the lock from lock_reward().
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_catalog.domain.models import Reward
from src.lp_common.errors import InternalError, OutOfStockError

_REWARD_COLUMNS = """
    id, cost_id, name, points_required, monetary_value_cents, stock_quantity,
    status, valid_from, valid_until, partner_code, created_at, updated_at
"""

_GET_REWARD_SQL = text(f"""
    SELECT {_REWARD_COLUMNS}
    FROM rewards
    WHERE id = :reward_id
""")

_LOCK_REWARD_SQL = text(f"""
    SELECT {_REWARD_COLUMNS}
    FROM rewards
    WHERE id = :reward_id
    FOR UPDATE
""")

_DECREMENT_STOCK_SQL = text(f"""
    UPDATE rewards
    SET stock_quantity = stock_quantity - 1,
        updated_at = NOW()
    WHERE id = :reward_id AND stock_quantity > 0
    RETURNING {_REWARD_COLUMNS}
""")

_INSERT_REWARD_SQL = text(f"""
    INSERT INTO rewards
        (cost_id, name, points_required, monetary_value_cents, stock_quantity,
         status, valid_from, valid_until, partner_code)
    VALUES
        (:cost_id, :name, :points_required, :monetary_value_cents, :stock_quantity,
         :status, :valid_from, :valid_until, :partner_code)
    RETURNING {_REWARD_COLUMNS}
""")

_LIST_REWARDS_SQL = text(f"""
    SELECT {_REWARD_COLUMNS}
    FROM rewards
    WHERE (CAST(:status AS TEXT) IS NULL OR status = :status)
    ORDER BY created_at DESC, id
""")


def _row_to_reward(row: object) -> Reward:
    return Reward(
        id=str(row.id),  # type: ignore[attr-defined]
        cost_id=row.cost_id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        points_required=row.points_required,  # type: ignore[attr-defined]
        monetary_value_cents=row.monetary_value_cents,  # type: ignore[attr-defined]
        stock_quantity=row.stock_quantity,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        valid_from=row.valid_from,  # type: ignore[attr-defined]
        valid_until=row.valid_until,  # type: ignore[attr-defined]
        partner_code=row.partner_code,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class RewardRepository:
    async def get_reward(self, db: AsyncSession, reward_id: str) -> Reward | None:
        result = await db.execute(_GET_REWARD_SQL, {"reward_id": reward_id})
        row = result.fetchone()
        return _row_to_reward(row) if row else None

    async def lock_reward(self, db: AsyncSession, reward_id: str) -> Reward | None:
        result = await db.execute(_LOCK_REWARD_SQL, {"reward_id": reward_id})
        row = result.fetchone()
        return _row_to_reward(row) if row else None

    async def decrement_stock(self, db: AsyncSession, reward_id: str) -> Reward:
        result = await db.execute(_DECREMENT_STOCK_SQL, {"reward_id": reward_id})
        row = result.fetchone()
        if row is None:
            raise OutOfStockError(reward_id)
        return _row_to_reward(row)

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
    ) -> Reward:
        result = await db.execute(
            _INSERT_REWARD_SQL,
            {
                "cost_id": cost_id,
                "name": name,
                "points_required": points_required,
                "monetary_value_cents": monetary_value_cents,
                "stock_quantity": stock_quantity,
                "status": status,
                "valid_from": valid_from,
                "valid_until": valid_until,
                "partner_code": partner_code,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Reward insert returned no rows — this should never happen")
        return _row_to_reward(row)

    async def list_rewards(
        self, db: AsyncSession, status: str | None = None
    ) -> list[Reward]:
        result = await db.execute(_LIST_REWARDS_SQL, {"status": status})
        return [_row_to_reward(row) for row in result.fetchall()]
