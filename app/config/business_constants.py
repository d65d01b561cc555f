"""
Business logic constants.

Central location for referral weights and purchase reward tiers.
Importable by services, jobs and scripts without circular dependencies.
"""

from decimal import Decimal

# Weight applied to a descendant's self points, keyed by its level relative
# to the queried user (the user itself is level 1, direct referrals level 2).
REFERRAL_LEVEL_WEIGHTS: dict[int, Decimal] = {
    2: Decimal("0.12"),
    3: Decimal("0.05"),
    4: Decimal("0.03"),
    5: Decimal("0.02"),
    6: Decimal("0.01"),
    7: Decimal("0.008"),
    8: Decimal("0.008"),
    9: Decimal("0.008"),
    10: Decimal("0.008"),
}

# Direct team share (level 2 only)
DIRECT_REFERRAL_RATE = Decimal("0.12")

DEFAULT_MAX_REFERRAL_LEVEL = 10

# Purchase reward tiers, keyed by the rounded purchase amount.
# Exact match only: amounts between tiers earn nothing.
PURCHASE_POINTS: dict[int, int] = {
    944: 800,
    1770: 1500,
    3540: 3000,
    7080: 6000,
    11800: 10000,
    59000: 25000,
}

PURCHASE_VALIDITY_MONTHS: dict[int, int] = {
    944: 1,
    1770: 1,
    3540: 3,
    7080: 6,
    11800: 12,
    59000: 12,
}

# Public user id format: prefix + 5 random digits
USER_ID_PREFIX = "SA"
USER_ID_MIN = 10000
USER_ID_MAX = 99999
