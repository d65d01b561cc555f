"""
Rank achievement models.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import RankRewardStatus
from app.models.types import PointsType


class Rank(Base):
    """Rank document of a user: latest team stats and earned rewards."""

    __tablename__ = "ranks"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_team: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    direct_team: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    points: Mapped[Decimal] = mapped_column(
        PointsType, default=Decimal("0"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    rewards: Mapped[list["RankReward"]] = relationship(
        "RankReward",
        back_populates="rank",
        cascade="all, delete-orphan",
        order_by="RankReward.id",
        lazy="selectin",
    )

    def find_reward(self, rank_name: str) -> "RankReward | None":
        """Return the reward with the given rank name, if earned."""
        for reward in self.rewards:
            if reward.rank_name == rank_name:
                return reward
        return None


class RankReward(Base):
    """Rank reached by a user, awaiting or granted approval."""

    __tablename__ = "rank_rewards"
    __table_args__ = (
        UniqueConstraint("rank_id", "rank_name", name="uq_rank_reward_name"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    rank_id: Mapped[int] = mapped_column(
        ForeignKey("ranks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rank_name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=RankRewardStatus.PENDING, nullable=False
    )
    achieved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    rank: Mapped["Rank"] = relationship("Rank", back_populates="rewards")
