"""
Referral points engine.

Weighted multi-level aggregation of downline self points.
"""

from dataclasses import dataclass
from decimal import Decimal

from app.services.referral.config import (
    DIRECT_RATE,
    REFERRAL_DEPTH,
    REFERRAL_NODE_LIMIT,
    level_weight,
)
from app.services.referral.graph_index import UserGraphIndex
from app.services.referral.traversal import walk_downline


@dataclass(frozen=True)
class ReferralPointsSnapshot:
    """
    Referral points of one user at one moment.

    direct_referred_points repeats the level-2 term already contained in
    referred_points; both are reported, and so is their sum.
    """

    user_id: str
    referred_points: Decimal
    direct_referred_points: Decimal

    @property
    def referral_point_total(self) -> Decimal:
        return self.referred_points + self.direct_referred_points


class ReferralPointsEngine:
    """Computes referral points over a prepared index (read-only)."""

    def __init__(
        self,
        index: UserGraphIndex,
        max_level: int = REFERRAL_DEPTH,
        node_limit: int | None = REFERRAL_NODE_LIMIT,
    ) -> None:
        self.index = index
        self.max_level = max_level
        self.node_limit = node_limit

    def calculate_referral_points(self, user_id: str) -> Decimal:
        """
        Weighted sum of descendants' self points, levels 2..max_level.

        Args:
            user_id: Query root

        Returns:
            Referral points (0 for unknown users or empty downlines)
        """
        total = Decimal("0")
        for node, level in walk_downline(
            self.index, user_id, self.max_level, self.node_limit
        ):
            weight = level_weight(level)
            if weight:
                total += node.self_points * weight
        return total

    def calculate_direct_points(self, user_id: str) -> Decimal:
        """12% of each direct child's self points, summed."""
        return sum(
            (child.self_points * DIRECT_RATE
             for child in self.index.children_of(user_id)),
            Decimal("0"),
        )

    def snapshot(self, user_id: str) -> ReferralPointsSnapshot:
        """Compute both figures for a user."""
        return ReferralPointsSnapshot(
            user_id=user_id,
            referred_points=self.calculate_referral_points(user_id),
            direct_referred_points=self.calculate_direct_points(user_id),
        )
