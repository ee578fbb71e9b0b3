"""Ledger replay invariant.

For one member, summing signed deltas in id order must give each entry's
balance_after, and the final sum must equal the member's available_points.
"""

import logging
from collections.abc import Iterable

from src.lp_ledger.domain.models import LedgerEntry
from src.lp_member.domain.models import MemberAccount

logger = logging.getLogger(__name__)


def replay_violations(
    account: MemberAccount, entries: Iterable[LedgerEntry]
) -> list[str]:
    """Replay entries (chronological) against account. Returns violation strings."""
    violations: list[str] = []
    running = 0
    for entry in entries:
        running += entry.points
        if running != entry.balance_after:
            violations.append(
                f"entry {entry.reference_number}: running sum {running} "
                f"!= balance_after {entry.balance_after}"
            )
            running = entry.balance_after  # report each break once, not every later entry
        if entry.balance_after < 0:
            violations.append(
                f"entry {entry.reference_number}: negative balance_after {entry.balance_after}"
            )
    if running != account.available_points:
        violations.append(
            f"member {account.id}: replayed balance {running} "
            f"!= available_points {account.available_points}"
        )
    for msg in violations:
        logger.error("Ledger replay violated: %s", msg)
    return violations
