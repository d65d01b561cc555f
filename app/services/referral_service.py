"""
Referral service.

Realtime referral points report and referral graph queries.
"""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.payout import PayoutRecord
from app.repositories.payout_repository import PayoutRepository
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService
from app.services.referral import (
    ReferralPointsEngine,
    ReferralPointsSnapshot,
    ReferralQueryManager,
    TeamSummary,
    UserGraphIndex,
)
from app.utils.db_decorators import with_rollback_on_error
from app.utils.exceptions import UserNotFoundError


class ReferralService(BaseService):
    """Referral points reporting and referral graph queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral service."""
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.payout_repo = PayoutRepository(session)
        self.query_manager = ReferralQueryManager(session)

    async def calculate_referral_points(
        self, user_id: str
    ) -> ReferralPointsSnapshot:
        """
        Compute a user's referral points without persisting anything.

        Args:
            user_id: Public user id

        Returns:
            ReferralPointsSnapshot (zeros for unknown users)
        """
        index = await UserGraphIndex.build(self.user_repo)
        return ReferralPointsEngine(index).snapshot(user_id)

    @with_rollback_on_error
    async def get_realtime_referral_points(
        self, user_id: str, name: str | None = None
    ) -> ReferralPointsSnapshot:
        """
        Compute a user's referral points and store them on the payout record.

        The record is created on first use with zero settled points; an
        existing record keeps its total_points and only its snapshot
        columns are overwritten.

        Args:
            user_id: Public user id
            name: Display name for a newly created record (defaults to
                the user's name)

        Returns:
            ReferralPointsSnapshot

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        snapshot = await self.calculate_referral_points(user_id)

        record = await self.payout_repo.get_by_user_id(user_id)
        if record is None:
            record = PayoutRecord(
                user_id=user_id,
                name=name or user.name,
                total_points=Decimal("0"),
                payouts=[],
            )
        record.referred_points = snapshot.referred_points
        record.direct_referred_points = snapshot.direct_referred_points

        await self.payout_repo.save(record)
        await self.commit()

        self.logger.info(
            "Realtime referral points stored",
            extra={
                "user_id": user_id,
                "referred_points": str(snapshot.referred_points),
                "direct_referred_points": str(snapshot.direct_referred_points),
            },
        )
        return snapshot

    async def get_team_summary(self, user_id: str) -> TeamSummary:
        """Get team summary for one user."""
        return await self.query_manager.get_team_summary(user_id)

    async def get_all_team_summaries(self) -> list[TeamSummary]:
        """Get team summaries for all users."""
        return await self.query_manager.get_all_team_summaries()

    async def get_user_with_referrals(self, user_id: str) -> dict:
        """Get a user with their direct referrals."""
        return await self.query_manager.get_user_with_referrals(user_id)

    async def get_downline_stats(self, user_id: str) -> dict:
        """Get per-level downline statistics."""
        return await self.query_manager.get_downline_stats(user_id)

    async def get_referred_self_points(self, user_id: str) -> dict:
        """Get the unweighted self points of a user's direct referrals."""
        return await self.query_manager.get_referred_self_points(user_id)
