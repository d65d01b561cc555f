"""
User model.

Represents a registered member and its place in the referral forest.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import UserStatus
from app.models.types import PointsType


class User(Base):
    """User model - members of the referral network."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "self_points >= 0", name="check_user_self_points_non_negative"
        ),
        CheckConstraint(
            "total_self_points >= 0",
            name="check_user_total_self_points_non_negative",
        ),
        CheckConstraint(
            "parent_id IS NULL OR parent_id <> user_id",
            name="check_user_not_own_parent",
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Public identity
    user_id: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True
    )
    phone: Mapped[str | None] = mapped_column(
        String(50), nullable=True, unique=True
    )
    referral_link: Mapped[str | None] = mapped_column(
        String(512), nullable=True
    )

    # Referral: user_id of the referrer; children are users pointing here
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Points
    self_points: Mapped[Decimal] = mapped_column(
        PointsType, default=Decimal("0"), nullable=False,
        comment="Accrued since last payout settlement",
    )
    total_self_points: Mapped[Decimal] = mapped_column(
        PointsType, default=Decimal("0"), nullable=False,
        comment="Lifetime accrual, never reset",
    )

    status: Mapped[str] = mapped_column(
        String(20), default=UserStatus.PENDING, nullable=False, index=True
    )

    # Optimistic concurrency counter for point mutations
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(user_id={self.user_id!r}, parent_id={self.parent_id!r}, "
            f"self_points={self.self_points})>"
        )
