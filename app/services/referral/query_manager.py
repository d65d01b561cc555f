"""
Referral query management module.

Read-only queries over the referral graph: team summaries, direct referral
views and downline reports.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.checkout_repository import CheckoutRepository
from app.repositories.user_repository import UserRepository
from app.services.referral.config import REFERRAL_DEPTH, REFERRAL_NODE_LIMIT
from app.services.referral.graph_index import UserGraphIndex
from app.services.referral.team_summary import TeamSummary, TeamSummaryEngine
from app.services.referral.traversal import walk_downline
from app.utils.exceptions import UserNotFoundError


class ReferralQueryManager:
    """Manages referral query operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize query manager."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.checkout_repo = CheckoutRepository(session)

    async def _team_engine(self) -> TeamSummaryEngine:
        index = await UserGraphIndex.build(self.user_repo)
        qualifying = await self.checkout_repo.get_qualifying_user_ids()
        return TeamSummaryEngine(index, qualifying)

    async def get_team_summary(self, user_id: str) -> TeamSummary:
        """
        Get team summary for one user.

        Args:
            user_id: Public user id

        Returns:
            TeamSummary

        Raises:
            UserNotFoundError: If the user does not exist
        """
        engine = await self._team_engine()
        if user_id not in engine.index:
            raise UserNotFoundError(user_id)
        return engine.summarize(user_id)

    async def get_all_team_summaries(self) -> list[TeamSummary]:
        """Get team summaries for every user, one independent walk each."""
        engine = await self._team_engine()
        summaries = engine.summarize_all()
        logger.info(
            "Team summaries computed", extra={"users": len(summaries)}
        )
        return summaries

    async def get_user_with_referrals(self, user_id: str) -> dict:
        """
        Get a user together with their direct referrals.

        Args:
            user_id: Public user id

        Returns:
            Dict with user and referrals (registration order)

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        referrals = await self.user_repo.find_children(user_id)
        return {
            "user": user,
            "referrals": referrals,
            "total": len(referrals),
        }

    async def get_referred_self_points(self, user_id: str) -> dict:
        """
        Sum the unweighted self points of a user's direct referrals.

        Args:
            user_id: Public user id

        Returns:
            Dict with the total and the direct referrals it was summed over

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        referrals = await self.user_repo.find_children(user_id)
        return {
            "user_id": user_id,
            "total_self_points": sum(
                (r.self_points or Decimal("0") for r in referrals),
                Decimal("0"),
            ),
            "referrals": referrals,
        }

    async def get_downline_stats(
        self, user_id: str, max_level: int = REFERRAL_DEPTH
    ) -> dict:
        """
        Count downline members and lifetime points per relative level.

        Args:
            user_id: Public user id
            max_level: Deepest level to report

        Returns:
            Dict with per-level counts/points and totals

        Raises:
            UserNotFoundError: If the user does not exist
        """
        index = await UserGraphIndex.build(self.user_repo)
        if user_id not in index:
            raise UserNotFoundError(user_id)

        levels: dict[int, dict] = {}
        for node, level in walk_downline(
            index, user_id, max_level, REFERRAL_NODE_LIMIT
        ):
            bucket = levels.setdefault(
                level, {"count": 0, "points": Decimal("0")}
            )
            bucket["count"] += 1
            bucket["points"] += node.total_self_points

        return {
            "user_id": user_id,
            "levels": dict(sorted(levels.items())),
            "total_members": sum(b["count"] for b in levels.values()),
            "total_points": sum(
                (b["points"] for b in levels.values()), Decimal("0")
            ),
        }
