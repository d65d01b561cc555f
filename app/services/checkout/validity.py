"""
Purchase reward tiers and course validity windows.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from app.config.business_constants import (
    PURCHASE_POINTS,
    PURCHASE_VALIDITY_MONTHS,
)
from app.utils.datetime_utils import add_months, ensure_utc


def round_amount(amount: Decimal | int | float | str) -> int:
    """Round a purchase amount to whole currency units (half up)."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def points_for_amount(amount: Decimal | int | float | str) -> Decimal:
    """
    Self points granted for a purchase.

    Exact match on the rounded amount; anything else earns 0.
    """
    return Decimal(PURCHASE_POINTS.get(round_amount(amount), 0))


def validity_months_for_amount(amount: Decimal | int | float | str) -> int:
    """Validity extension in months for a purchase (0 if unmapped)."""
    return PURCHASE_VALIDITY_MONTHS.get(round_amount(amount), 0)


def compute_validity_window(
    start: datetime | None,
    end: datetime | None,
    months: int,
    now: datetime,
) -> tuple[datetime, datetime]:
    """
    New validity window after a purchase.

    - no window yet: [now, now + months]
    - expired (end < now): [now, now + months]
    - active: [start, end + months]

    Args:
        start: Current validity start (None if no window)
        end: Current validity end (None if no window)
        months: Months granted by the purchase
        now: Purchase time

    Returns:
        Tuple of (validity_start, validity_end)
    """
    if start is None or end is None:
        return now, add_months(now, months)

    start = ensure_utc(start)
    end = ensure_utc(end)
    if end < now:
        return now, add_months(now, months)
    return start, add_months(end, months)
