"""Pydantic schemas for lp_member API."""

from pydantic import BaseModel, Field

from src.lp_common.enums import MemberTier
from src.lp_common.points import points_to_display
from src.lp_member.domain.models import MemberAccount


class EnrollRequest(BaseModel):
    user_id: str | None = Field(
        None, min_length=1, max_length=64, description="External user id, unique if given"
    )
    tier: MemberTier = MemberTier.BRONZE
    segment: str = Field("STANDARD", min_length=1, max_length=30)


class MemberResponse(BaseModel):
    member_id: str
    member_number: str
    user_id: str | None
    current_tier: str
    segment: str
    status: str
    available_points: int
    total_points: int
    lifetime_points: int
    enrolled_at: str | None  # ISO8601 string

    @classmethod
    def from_domain(cls, m: MemberAccount) -> "MemberResponse":
        return cls(
            member_id=m.id,
            member_number=m.member_number,
            user_id=m.user_id,
            current_tier=m.current_tier,
            segment=m.segment,
            status=m.status,
            available_points=m.available_points,
            total_points=m.total_points,
            lifetime_points=m.lifetime_points,
            enrolled_at=m.enrolled_at.isoformat() if m.enrolled_at else None,
        )


class BalanceResponse(BaseModel):
    member_id: str
    available_points: int
    available_points_display: str
    total_points: int
    lifetime_points: int

    @classmethod
    def from_domain(cls, m: MemberAccount) -> "BalanceResponse":
        return cls(
            member_id=m.id,
            available_points=m.available_points,
            available_points_display=points_to_display(m.available_points),
            total_points=m.total_points,
            lifetime_points=m.lifetime_points,
        )
