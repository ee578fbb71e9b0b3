"""Global enums — must match DB CHECK constraints exactly.

See alembic/versions/002-005 for the matching CHECK clauses.
"""

from enum import Enum


class TransactionType(str, Enum):
    # Credits
    ACCRUAL = "ACCRUAL"
    BONUS = "BONUS"
    ADJUSTMENT = "ADJUSTMENT"
    # Debits
    REDEMPTION = "REDEMPTION"
    REVERSAL = "REVERSAL"


class MemberStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    CLOSED = "CLOSED"


class MemberTier(str, Enum):
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


class RewardStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class FulfillmentStatus(str, Enum):
    """PENDING -> FULFILLED | CANCELLED, driven by the fulfillment workflow."""
    PENDING = "PENDING"
    FULFILLED = "FULFILLED"
    CANCELLED = "CANCELLED"


class RedemptionChannel(str, Enum):
    ONLINE = "ONLINE"
    MOBILE = "MOBILE"
    STORE = "STORE"
    CALL_CENTER = "CALL_CENTER"
