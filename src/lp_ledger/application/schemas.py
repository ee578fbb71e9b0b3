"""Pydantic schemas and cursor utilities for lp_ledger API."""

import base64
import json
import uuid

from pydantic import BaseModel, Field, model_validator

from src.lp_common.enums import TransactionType
from src.lp_common.points import points_to_display
from src.lp_ledger.domain.models import LedgerEntry

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a ledger entry id into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PointTransactionRequest(BaseModel):
    member_id: uuid.UUID
    transaction_type: TransactionType
    points: int = Field(..., gt=0, description="Positive magnitude; the type decides the sign")
    description: str | None = Field(None, max_length=500)
    rule_id: str | None = Field(None, max_length=64)
    reward_id: uuid.UUID | None = None
    reversal_of: str | None = Field(
        None, max_length=32, description="reference_number of the credit being reversed"
    )
    idempotency_key: str | None = Field(None, min_length=1, max_length=64)

    @model_validator(mode="after")
    def _reversal_link_needs_reversal_type(self) -> "PointTransactionRequest":
        if self.reversal_of is not None and self.transaction_type != TransactionType.REVERSAL:
            raise ValueError("reversal_of is only allowed with transaction_type REVERSAL")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LedgerEntryItem(BaseModel):
    id: int
    reference_number: str
    member_id: str
    transaction_type: str
    points: int
    points_display: str
    balance_after: int
    rule_id: str | None
    reward_id: str | None
    redemption_id: int | None
    reversal_of: str | None
    description: str | None
    created_at: str | None  # ISO8601 string

    @classmethod
    def from_domain(cls, e: LedgerEntry) -> "LedgerEntryItem":
        return cls(
            id=e.id,
            reference_number=e.reference_number,
            member_id=e.member_id,
            transaction_type=e.transaction_type,
            points=e.points,
            points_display=("+" if e.points > 0 else "-") + points_to_display(abs(e.points)),
            balance_after=e.balance_after,
            rule_id=e.rule_id,
            reward_id=e.reward_id,
            redemption_id=e.redemption_id,
            reversal_of=e.reversal_of,
            description=e.description,
            created_at=e.created_at.isoformat() if e.created_at else None,
        )


class LedgerListResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool


class LedgerVerifyResponse(BaseModel):
    member_id: str
    entries_checked: int
    available_points: int
    consistent: bool
    violations: list[str]
