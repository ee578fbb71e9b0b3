"""Domain models for lp_ledger — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LedgerLinks:
    """Optional pointers from an entry to whatever caused it."""
    rule_id: str | None = None
    reward_id: str | None = None
    redemption_id: int | None = None
    reversal_of: str | None = None   # reference_number of the credit being reversed


@dataclass(frozen=True)
class LedgerPosting:
    """An entry about to be appended; the DB assigns id and created_at."""
    reference_number: str
    member_id: str
    transaction_type: str
    points: int                      # signed delta
    balance_after: int
    links: LedgerLinks
    description: str
    idempotency_key: str | None = None


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL, commit order per member
    reference_number: str
    member_id: str
    transaction_type: str            # TransactionType value
    points: int                      # positive=credit negative=debit
    balance_after: int               # available_points snapshot after this entry
    rule_id: str | None = None
    reward_id: str | None = None
    redemption_id: int | None = None
    reversal_of: str | None = None
    description: str | None = None
    idempotency_key: str | None = None
    created_at: datetime | None = None
    # NOTE: No updated_at, ledger_entries is append-only

    @property
    def is_credit(self) -> bool:
        return self.points > 0
