"""Sign semantics of each transaction type.

| type       | available | total | lifetime |
|------------|-----------|-------|----------|
| ACCRUAL    | +p        | +p    | +p       |
| BONUS      | +p        | +p    | +p       |
| ADJUSTMENT | +p        | +p    |          |
| REDEMPTION | -p        | -p    |          |
| REVERSAL   | -p        | -p    |          |

p is always a positive magnitude; the type alone decides the sign.
"""

from dataclasses import dataclass

from src.lp_common.enums import TransactionType
from src.lp_common.errors import InsufficientPointsError, LedgerIntegrityError
from src.lp_common.points import validate_points
from src.lp_member.domain.models import MemberAccount

CREDIT_TYPES = frozenset({
    TransactionType.ACCRUAL,
    TransactionType.BONUS,
    TransactionType.ADJUSTMENT,
})
DEBIT_TYPES = frozenset({TransactionType.REDEMPTION, TransactionType.REVERSAL})
LIFETIME_TYPES = frozenset({TransactionType.ACCRUAL, TransactionType.BONUS})


@dataclass(frozen=True)
class BalanceChange:
    delta: int
    available_after: int
    total_after: int
    lifetime_after: int


def signed_delta(transaction_type: TransactionType, points: int) -> int:
    validate_points(points)
    if transaction_type in CREDIT_TYPES:
        return points
    if transaction_type in DEBIT_TYPES:
        return -points
    raise ValueError(f"Unknown transaction type: {transaction_type}")


def compute_change(
    account: MemberAccount, transaction_type: TransactionType, points: int
) -> BalanceChange:
    """Balances after applying one movement. Raises before anything is written."""
    delta = signed_delta(transaction_type, points)
    if delta < 0 and account.available_points < points:
        raise InsufficientPointsError(points, account.available_points)

    available_after = account.available_points + delta
    total_after = account.total_points + delta
    lifetime_after = account.lifetime_points + (
        points if transaction_type in LIFETIME_TYPES else 0
    )
    if total_after < 0:
        raise LedgerIntegrityError(
            f"member {account.id} total_points would become {total_after}"
        )
    return BalanceChange(
        delta=delta,
        available_after=available_after,
        total_after=total_after,
        lifetime_after=lifetime_after,
    )
