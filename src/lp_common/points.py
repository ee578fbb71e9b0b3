"""Integer helpers for points and money.

Points are whole integers. Monetary values (reward value snapshots) are
integer cents. No float, no Decimal.
"""

from src.lp_common.errors import InvalidPointsError


def validate_points(points: int) -> None:
    """Reject zero, negative, and non-int magnitudes (bool is not a point count)."""
    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise InvalidPointsError(points)


def points_to_display(points: int) -> str:
    """12500 -> '12,500 pts', -120 -> '-120 pts'."""
    return f"{points:,} pts"


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
