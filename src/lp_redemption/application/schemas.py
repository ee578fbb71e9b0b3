"""Pydantic schemas for lp_redemption API."""

import uuid

from pydantic import BaseModel, Field

from src.lp_common.enums import RedemptionChannel
from src.lp_common.points import cents_to_display
from src.lp_redemption.domain.models import RedemptionReceipt, RedemptionRecord


class RedeemRequest(BaseModel):
    member_id: uuid.UUID
    reward_id: uuid.UUID
    channel: RedemptionChannel = RedemptionChannel.ONLINE
    idempotency_key: str | None = Field(None, min_length=1, max_length=64)


class RedemptionResponse(BaseModel):
    redemption_id: int
    redemption_number: str
    member_id: str
    reward_id: str
    points_redeemed: int
    monetary_value_cents: int
    monetary_value_display: str
    partner_code: str | None
    fulfillment_status: str
    channel: str
    created_at: str | None  # ISO8601 string

    @classmethod
    def from_domain(cls, r: RedemptionRecord) -> "RedemptionResponse":
        return cls(
            redemption_id=r.id,
            redemption_number=r.redemption_number,
            member_id=r.member_id,
            reward_id=r.reward_id,
            points_redeemed=r.points_redeemed,
            monetary_value_cents=r.monetary_value_cents,
            monetary_value_display=cents_to_display(r.monetary_value_cents),
            partner_code=r.partner_code,
            fulfillment_status=r.fulfillment_status,
            channel=r.channel,
            created_at=r.created_at.isoformat() if r.created_at else None,
        )


class RedeemResponse(RedemptionResponse):
    ledger_reference_number: str
    balance_after: int
    idempotent_replay: bool

    @classmethod
    def from_receipt(cls, receipt: RedemptionReceipt) -> "RedeemResponse":
        base = RedemptionResponse.from_domain(receipt.record)
        return cls(
            **base.model_dump(),
            ledger_reference_number=receipt.entry.reference_number,
            balance_after=receipt.entry.balance_after,
            idempotent_replay=receipt.replayed,
        )
