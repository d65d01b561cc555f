"""
Referral services package.

- config: level weights, depth cap and node ceiling
- graph_index: in-memory referral graph for one computation pass
- traversal: bounded depth-first downline walk
- points_engine: weighted referral points and direct points
- team_summary: team size and point mass
- query_manager: read-only referral queries
"""

from app.services.referral.config import (
    DIRECT_RATE,
    REFERRAL_DEPTH,
    REFERRAL_NODE_LIMIT,
    REFERRAL_RATES,
)
from app.services.referral.graph_index import UserGraphIndex, UserNode
from app.services.referral.points_engine import (
    ReferralPointsEngine,
    ReferralPointsSnapshot,
)
from app.services.referral.query_manager import ReferralQueryManager
from app.services.referral.team_summary import TeamSummary, TeamSummaryEngine
from app.services.referral.traversal import walk_downline


__all__ = [
    # Configuration
    "DIRECT_RATE",
    "REFERRAL_DEPTH",
    "REFERRAL_NODE_LIMIT",
    "REFERRAL_RATES",
    # Graph
    "UserGraphIndex",
    "UserNode",
    "walk_downline",
    # Engines
    "ReferralPointsEngine",
    "ReferralPointsSnapshot",
    "TeamSummary",
    "TeamSummaryEngine",
    # Queries
    "ReferralQueryManager",
]
