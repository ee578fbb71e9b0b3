"""MemberRepository — concrete implementation of MemberRepositoryProtocol.

Balance columns are written ONLY through save_balances(), which is called ONLY
by the ledger engine while it holds the row lock taken by lock_member().

Transaction ownership: the CALLER (unit of work / application service) is
responsible for committing or rolling back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_common.enums import MemberStatus
from src.lp_common.errors import InternalError, LedgerIntegrityError
from src.lp_member.domain.models import MemberAccount

_MEMBER_COLUMNS = """
    id, member_number, user_id, current_tier, segment, status,
    available_points, total_points, lifetime_points, version,
    enrolled_at, created_at, updated_at
"""

_GET_MEMBER_SQL = text(f"""
    SELECT {_MEMBER_COLUMNS}
    FROM members
    WHERE id = :member_id
""")

_GET_MEMBER_BY_USER_SQL = text(f"""
    SELECT {_MEMBER_COLUMNS}
    FROM members
    WHERE user_id = :user_id
""")

_LOCK_MEMBER_SQL = text(f"""
    SELECT {_MEMBER_COLUMNS}
    FROM members
    WHERE id = :member_id
    FOR UPDATE
""")

_SAVE_BALANCES_SQL = text(f"""
    UPDATE members
    SET available_points = :available_points,
        total_points     = :total_points,
        lifetime_points  = :lifetime_points,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :member_id AND version = :version
    RETURNING {_MEMBER_COLUMNS}
""")

_INSERT_MEMBER_SQL = text(f"""
    INSERT INTO members
        (member_number, user_id, current_tier, segment, status,
         available_points, total_points, lifetime_points, version)
    VALUES
        (:member_number, :user_id, :current_tier, :segment, :status,
         0, 0, 0, 0)
    RETURNING {_MEMBER_COLUMNS}
""")


def _row_to_member(row: object) -> MemberAccount:
    return MemberAccount(
        id=str(row.id),  # type: ignore[attr-defined]
        member_number=row.member_number,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        current_tier=row.current_tier,  # type: ignore[attr-defined]
        segment=row.segment,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        available_points=row.available_points,  # type: ignore[attr-defined]
        total_points=row.total_points,  # type: ignore[attr-defined]
        lifetime_points=row.lifetime_points,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        enrolled_at=row.enrolled_at,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class MemberRepository:
    """Concrete repository — raw SQL over the members table."""

    async def get_member(
        self, db: AsyncSession, member_id: str
    ) -> MemberAccount | None:
        result = await db.execute(_GET_MEMBER_SQL, {"member_id": member_id})
        row = result.fetchone()
        return _row_to_member(row) if row else None

    async def get_member_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> MemberAccount | None:
        result = await db.execute(_GET_MEMBER_BY_USER_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_member(row) if row else None

    async def lock_member(
        self, db: AsyncSession, member_id: str
    ) -> MemberAccount | None:
        result = await db.execute(_LOCK_MEMBER_SQL, {"member_id": member_id})
        row = result.fetchone()
        return _row_to_member(row) if row else None

    async def save_balances(
        self, db: AsyncSession, account: MemberAccount
    ) -> MemberAccount:
        result = await db.execute(
            _SAVE_BALANCES_SQL,
            {
                "member_id": account.id,
                "available_points": account.available_points,
                "total_points": account.total_points,
                "lifetime_points": account.lifetime_points,
                "version": account.version,
            },
        )
        row = result.fetchone()
        if row is None:
            # Row is locked by us, so a version mismatch means someone wrote around the lock
            raise LedgerIntegrityError(
                f"member {account.id} changed while locked (expected version {account.version})"
            )
        return _row_to_member(row)

    async def create_member(
        self,
        db: AsyncSession,
        member_number: str,
        user_id: str | None,
        tier: str,
        segment: str,
    ) -> MemberAccount:
        result = await db.execute(
            _INSERT_MEMBER_SQL,
            {
                "member_number": member_number,
                "user_id": user_id,
                "current_tier": tier,
                "segment": segment,
                "status": MemberStatus.ACTIVE.value,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Member insert returned no rows — this should never happen")
        return _row_to_member(row)
