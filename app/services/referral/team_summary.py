"""
Team summary engine.

Downline size and point mass, counting only qualifying (paying) members.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from decimal import Decimal

from app.services.referral.config import REFERRAL_DEPTH, REFERRAL_NODE_LIMIT
from app.services.referral.graph_index import UserGraphIndex
from app.services.referral.traversal import walk_downline


@dataclass(frozen=True)
class TeamSummary:
    """Team statistics for one root user."""

    user_id: str
    name: str
    total_points: Decimal
    total_downline_count: int
    direct_referrals: int

    def to_dict(self) -> dict:
        return asdict(self)


class TeamSummaryEngine:
    """Computes team summaries over a prepared index (read-only)."""

    def __init__(
        self,
        index: UserGraphIndex,
        qualifying_ids: Iterable[str],
        max_level: int = REFERRAL_DEPTH,
        node_limit: int | None = REFERRAL_NODE_LIMIT,
    ) -> None:
        self.index = index
        self.qualifying_ids = frozenset(qualifying_ids)
        self.max_level = max_level
        self.node_limit = node_limit

    def summarize(self, user_id: str) -> TeamSummary:
        """
        Summarize the downline of one user.

        total_points sums every descendant's lifetime self points (no
        weighting); total_downline_count counts qualifying descendants only.

        Args:
            user_id: Query root

        Returns:
            TeamSummary (zeros for unknown users or empty downlines)
        """
        total_points = Decimal("0")
        downline_count = 0

        for node, _level in walk_downline(
            self.index, user_id, self.max_level, self.node_limit
        ):
            total_points += node.total_self_points
            if node.user_id in self.qualifying_ids:
                downline_count += 1

        root = self.index.get(user_id)
        direct_referrals = 0
        if root is not None:
            direct_referrals = sum(
                1 for child_id in root.referred_ids
                if child_id in self.qualifying_ids
            )

        return TeamSummary(
            user_id=user_id,
            name=root.name if root is not None else "",
            total_points=total_points,
            total_downline_count=downline_count,
            direct_referrals=direct_referrals,
        )

    def summarize_all(self) -> list[TeamSummary]:
        """Summarize every user independently (one walk per root)."""
        return [self.summarize(node.user_id) for node in self.index]
