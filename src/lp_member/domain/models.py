"""Domain models for lp_member — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.lp_common.enums import MemberStatus


@dataclass
class MemberAccount:
    id: str
    member_number: str
    available_points: int    # spendable, never < 0
    total_points: int        # net: credits minus redemptions/reversals
    lifetime_points: int     # ACCRUAL + BONUS only, never decreases
    version: int
    user_id: str | None = None
    current_tier: str = "BRONZE"
    segment: str = "STANDARD"
    status: str = MemberStatus.ACTIVE.value
    enrolled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
