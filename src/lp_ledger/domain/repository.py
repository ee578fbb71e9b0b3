"""Repository Protocol for the append-only ledger."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_ledger.domain.models import LedgerEntry, LedgerPosting


class LedgerRepositoryProtocol(Protocol):
    async def insert_entry(
        self, db: AsyncSession, posting: LedgerPosting
    ) -> LedgerEntry: ...

    async def get_latest_entry(
        self, db: AsyncSession, member_id: str
    ) -> LedgerEntry | None: ...

    async def get_by_reference(
        self, db: AsyncSession, reference_number: str
    ) -> LedgerEntry | None: ...

    async def find_by_idempotency_key(
        self, db: AsyncSession, member_id: str, idempotency_key: str
    ) -> LedgerEntry | None: ...

    async def find_reversal_of(
        self, db: AsyncSession, reference_number: str
    ) -> LedgerEntry | None: ...

    async def list_entries(
        self,
        db: AsyncSession,
        member_id: str,
        after_id: int | None = None,
        limit: int | None = None,
    ) -> list[LedgerEntry]:
        """Entries in chronological (id ascending) order, strictly after after_id."""
        ...
