"""Domain models for lp_redemption — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.lp_common.enums import FulfillmentStatus
from src.lp_ledger.domain.models import LedgerEntry


@dataclass
class RedemptionRecord:
    id: int
    redemption_number: str           # RED-<snowflake>, shared with its ledger entry
    member_id: str
    reward_id: str
    points_redeemed: int             # reward.points_required at redemption time
    monetary_value_cents: int        # snapshot
    partner_code: str | None         # snapshot
    fulfillment_status: str = FulfillmentStatus.PENDING.value
    channel: str = "ONLINE"
    idempotency_key: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class RedemptionReceipt:
    """A redemption plus the REDEMPTION ledger entry committed with it."""
    record: RedemptionRecord
    entry: LedgerEntry
    replayed: bool = False           # True when returned for a repeated idempotency_key
