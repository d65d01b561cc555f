"""
Rank service.

Records rank achievements; each rank is rewarded once and approved by an
operator.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import RankRewardStatus
from app.models.rank import Rank, RankReward
from app.repositories.rank_repository import RankRepository
from app.services.base_service import BaseService, transaction
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import InvalidStatusTransitionError, RankNotFoundError


class RankService(BaseService):
    """Rank achievements and reward approval."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize rank service."""
        super().__init__(session)
        self.rank_repo = RankRepository(session)

    @transaction
    async def save_rank_achievement(
        self,
        user_id: str,
        name: str,
        rank_name: str,
        total_team: int | None = None,
        direct_team: int | None = None,
        points: Decimal | None = None,
    ) -> tuple[Rank, bool]:
        """
        Record that a user reached a rank.

        Team stats are overwritten when given. A rank already present in
        the user's rewards is not added again.

        Args:
            user_id: Public user id
            name: Display name
            rank_name: Rank reached
            total_team: Current team size
            direct_team: Current direct team size
            points: Current team points

        Returns:
            Tuple of (rank document, whether a reward was added)
        """
        now = utc_now()
        rank = await self.rank_repo.get_by_user_id(user_id)

        if rank is None:
            rank = Rank(
                user_id=user_id,
                name=name,
                total_team=total_team or 0,
                direct_team=direct_team or 0,
                points=points if points is not None else Decimal("0"),
                rewards=[self._new_reward(rank_name, now)],
            )
            await self.rank_repo.save(rank)
            self.logger.info(
                "Rank created with first reward",
                extra={"user_id": user_id, "rank_name": rank_name},
            )
            return rank, True

        if total_team is not None:
            rank.total_team = total_team
        if direct_team is not None:
            rank.direct_team = direct_team
        if points is not None:
            rank.points = points

        added = rank.find_reward(rank_name) is None
        if added:
            rank.rewards.append(self._new_reward(rank_name, now))

        await self.rank_repo.save(rank)
        self.logger.info(
            "Rank achievement saved",
            extra={"user_id": user_id, "rank_name": rank_name, "added": added},
        )
        return rank, added

    @staticmethod
    def _new_reward(rank_name: str, achieved_at: datetime) -> RankReward:
        return RankReward(
            rank_name=rank_name,
            status=RankRewardStatus.PENDING,
            achieved_at=achieved_at,
        )

    @transaction
    async def approve_rank(self, user_id: str, rank_name: str) -> Rank:
        """
        Approve a pending rank reward.

        Raises:
            RankNotFoundError: No rank document or no such reward
            InvalidStatusTransitionError: Reward is not pending
        """
        rank = await self.rank_repo.get_by_user_id(user_id)
        if rank is None:
            raise RankNotFoundError(f"No rank record found for user {user_id}")

        reward = rank.find_reward(rank_name)
        if reward is None:
            raise RankNotFoundError(
                f"Rank {rank_name!r} not found in rewards of user {user_id}"
            )

        if reward.status != RankRewardStatus.PENDING:
            raise InvalidStatusTransitionError(
                reward.status, RankRewardStatus.APPROVED
            )

        reward.status = RankRewardStatus.APPROVED
        await self.rank_repo.save(rank)
        self.logger.info(
            "Rank reward approved",
            extra={"user_id": user_id, "rank_name": rank_name},
        )
        return rank

    async def get_user_rank(self, user_id: str) -> Rank | None:
        """Get a user's rank document, if any."""
        return await self.rank_repo.get_by_user_id(user_id)

    async def get_all_ranks(self) -> list[Rank]:
        """Get all rank documents, most recently created first."""
        return await self.rank_repo.find_all_newest_first()
