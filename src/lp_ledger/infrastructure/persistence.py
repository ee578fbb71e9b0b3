"""LedgerRepository — raw SQL over ledger_entries.

ledger_entries is append-only: this module has INSERT and SELECT only.
Transaction ownership: the CALLER (unit of work) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_common.errors import InternalError
from src.lp_ledger.domain.models import LedgerEntry, LedgerPosting

_ENTRY_COLUMNS = """
    id, reference_number, member_id, transaction_type, points, balance_after,
    rule_id, reward_id, redemption_id, reversal_of, description,
    idempotency_key, created_at
"""

_INSERT_ENTRY_SQL = text(f"""
    INSERT INTO ledger_entries
        (reference_number, member_id, transaction_type, points, balance_after,
         rule_id, reward_id, redemption_id, reversal_of, description,
         idempotency_key)
    VALUES
        (:reference_number, :member_id, :transaction_type, :points, :balance_after,
         :rule_id, :reward_id, :redemption_id, :reversal_of, :description,
         :idempotency_key)
    RETURNING {_ENTRY_COLUMNS}
""")

_LATEST_ENTRY_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM ledger_entries
    WHERE member_id = :member_id
    ORDER BY id DESC
    LIMIT 1
""")

_GET_BY_REFERENCE_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM ledger_entries
    WHERE reference_number = :reference_number
""")

_FIND_BY_IDEMPOTENCY_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM ledger_entries
    WHERE member_id = :member_id AND idempotency_key = :idempotency_key
""")

_FIND_REVERSAL_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM ledger_entries
    WHERE reversal_of = :reference_number
""")

_LIST_ENTRIES_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM ledger_entries
    WHERE member_id = :member_id
      AND (CAST(:after_id AS BIGINT) IS NULL OR id > :after_id)
    ORDER BY id ASC
    LIMIT CAST(:limit AS BIGINT)
""")


def _row_to_entry(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        reference_number=row.reference_number,  # type: ignore[attr-defined]
        member_id=str(row.member_id),  # type: ignore[attr-defined]
        transaction_type=row.transaction_type,  # type: ignore[attr-defined]
        points=row.points,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        rule_id=row.rule_id,  # type: ignore[attr-defined]
        reward_id=str(row.reward_id) if row.reward_id is not None else None,  # type: ignore[attr-defined]
        redemption_id=row.redemption_id,  # type: ignore[attr-defined]
        reversal_of=row.reversal_of,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        idempotency_key=row.idempotency_key,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    async def insert_entry(
        self, db: AsyncSession, posting: LedgerPosting
    ) -> LedgerEntry:
        result = await db.execute(
            _INSERT_ENTRY_SQL,
            {
                "reference_number": posting.reference_number,
                "member_id": posting.member_id,
                "transaction_type": posting.transaction_type,
                "points": posting.points,
                "balance_after": posting.balance_after,
                "rule_id": posting.links.rule_id,
                "reward_id": posting.links.reward_id,
                "redemption_id": posting.links.redemption_id,
                "reversal_of": posting.links.reversal_of,
                "description": posting.description,
                "idempotency_key": posting.idempotency_key,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows — this should never happen")
        return _row_to_entry(row)

    async def get_latest_entry(
        self, db: AsyncSession, member_id: str
    ) -> LedgerEntry | None:
        result = await db.execute(_LATEST_ENTRY_SQL, {"member_id": member_id})
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def get_by_reference(
        self, db: AsyncSession, reference_number: str
    ) -> LedgerEntry | None:
        result = await db.execute(
            _GET_BY_REFERENCE_SQL, {"reference_number": reference_number}
        )
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def find_by_idempotency_key(
        self, db: AsyncSession, member_id: str, idempotency_key: str
    ) -> LedgerEntry | None:
        result = await db.execute(
            _FIND_BY_IDEMPOTENCY_SQL,
            {"member_id": member_id, "idempotency_key": idempotency_key},
        )
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def find_reversal_of(
        self, db: AsyncSession, reference_number: str
    ) -> LedgerEntry | None:
        result = await db.execute(
            _FIND_REVERSAL_SQL, {"reference_number": reference_number}
        )
        row = result.fetchone()
        return _row_to_entry(row) if row else None

    async def list_entries(
        self,
        db: AsyncSession,
        member_id: str,
        after_id: int | None = None,
        limit: int | None = None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_ENTRIES_SQL,
            {"member_id": member_id, "after_id": after_id, "limit": limit},
        )
        return [_row_to_entry(row) for row in result.fetchall()]
