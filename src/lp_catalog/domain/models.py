"""Domain models for lp_catalog — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.lp_common.datetime_utils import within_window
from src.lp_common.enums import RewardStatus


@dataclass
class Reward:
    id: str
    cost_id: str
    name: str
    points_required: int
    monetary_value_cents: int
    stock_quantity: int
    status: str = "ACTIVE"           # RewardStatus value
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    partner_code: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def inactive_reason(self, now: datetime) -> str | None:
        """Why the reward cannot be redeemed at `now`, or None if it can."""
        if self.status != RewardStatus.ACTIVE.value:
            return f"status is {self.status}"
        if not within_window(now, self.valid_from, self.valid_until):
            return "outside validity window"
        return None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0
