"""
Referral system configuration.

Contains constants and configuration for the referral engines.
"""

from decimal import Decimal

from app.config.business_constants import (
    DIRECT_REFERRAL_RATE,
    REFERRAL_LEVEL_WEIGHTS,
)
from app.config.settings import settings

# Multi-level referral program: levels 2..REFERRAL_DEPTH earn a share of
# the descendant's self points (the queried user itself is level 1)
REFERRAL_DEPTH = settings.referral_max_level
REFERRAL_RATES = REFERRAL_LEVEL_WEIGHTS
DIRECT_RATE = DIRECT_REFERRAL_RATE

# Safety ceiling on nodes visited by one traversal
REFERRAL_NODE_LIMIT = settings.referral_node_limit


def level_weight(level: int) -> Decimal:
    """Weight for a descendant at the given relative level (0 if none)."""
    return REFERRAL_RATES.get(level, Decimal("0"))
