"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock (or the in-memory store) that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_member.domain.models import MemberAccount


class MemberRepositoryProtocol(Protocol):
    async def get_member(
        self, db: AsyncSession, member_id: str
    ) -> MemberAccount | None: ...

    async def get_member_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> MemberAccount | None: ...

    async def lock_member(
        self, db: AsyncSession, member_id: str
    ) -> MemberAccount | None:
        """Read the member row under an exclusive lock held until commit/rollback."""
        ...

    async def save_balances(
        self, db: AsyncSession, account: MemberAccount
    ) -> MemberAccount:
        """Write the three point balances; account.version must match the stored row."""
        ...

    async def create_member(
        self,
        db: AsyncSession,
        member_number: str,
        user_id: str | None,
        tier: str,
        segment: str,
    ) -> MemberAccount: ...
