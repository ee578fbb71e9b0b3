"""Pydantic schemas for lp_catalog API."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.lp_catalog.domain.models import Reward
from src.lp_common.enums import RewardStatus
from src.lp_common.points import cents_to_display, points_to_display


class CreateRewardRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    points_required: int = Field(..., gt=0)
    monetary_value_cents: int = Field(0, ge=0)
    stock_quantity: int = Field(..., ge=0)
    status: RewardStatus = RewardStatus.ACTIVE
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    partner_code: str | None = Field(None, max_length=50)


class RewardResponse(BaseModel):
    reward_id: str
    cost_id: str
    name: str
    points_required: int
    points_required_display: str
    monetary_value_cents: int
    monetary_value_display: str
    stock_quantity: int
    status: str
    valid_from: str | None  # ISO8601 string
    valid_until: str | None
    partner_code: str | None

    @classmethod
    def from_domain(cls, r: Reward) -> "RewardResponse":
        return cls(
            reward_id=r.id,
            cost_id=r.cost_id,
            name=r.name,
            points_required=r.points_required,
            points_required_display=points_to_display(r.points_required),
            monetary_value_cents=r.monetary_value_cents,
            monetary_value_display=cents_to_display(r.monetary_value_cents),
            stock_quantity=r.stock_quantity,
            status=r.status,
            valid_from=r.valid_from.isoformat() if r.valid_from else None,
            valid_until=r.valid_until.isoformat() if r.valid_until else None,
            partner_code=r.partner_code,
        )


class RewardListResponse(BaseModel):
    items: list[RewardResponse]
