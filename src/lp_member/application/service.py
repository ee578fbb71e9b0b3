"""MemberApplicationService — enrollment and balance reads.

Enrollment creates the member row with zero balances; every later balance
change goes through the ledger engine.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.lp_common.errors import MemberAlreadyEnrolledError, MemberNotFoundError
from src.lp_common.id_generator import member_number
from src.lp_member.application.schemas import BalanceResponse, MemberResponse
from src.lp_member.domain.repository import MemberRepositoryProtocol
from src.lp_member.infrastructure.persistence import MemberRepository

logger = logging.getLogger(__name__)


class MemberApplicationService:
    def __init__(self, repo: MemberRepositoryProtocol | None = None) -> None:
        self._repo: MemberRepositoryProtocol = repo or MemberRepository()

    async def enroll(
        self,
        db: AsyncSession,
        user_id: str | None,
        tier: str,
        segment: str,
    ) -> MemberResponse:
        try:
            # Uniqueness check; the DB UNIQUE constraint is the final guard
            if user_id is not None and await self._repo.get_member_by_user_id(db, user_id):
                raise MemberAlreadyEnrolledError(user_id)
            member = await self._repo.create_member(
                db, member_number(), user_id, tier, segment
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise MemberAlreadyEnrolledError(str(user_id)) from None
        except Exception:
            await db.rollback()
            raise
        logger.info("Member enrolled: id=%s number=%s", member.id, member.member_number)
        return MemberResponse.from_domain(member)

    async def get_member(self, db: AsyncSession, member_id: str) -> MemberResponse:
        member = await self._repo.get_member(db, member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return MemberResponse.from_domain(member)

    async def get_balance(self, db: AsyncSession, member_id: str) -> BalanceResponse:
        member = await self._repo.get_member(db, member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return BalanceResponse.from_domain(member)
