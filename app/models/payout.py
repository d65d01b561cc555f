"""
Payout ledger models.

PayoutRecord is the per-user ledger; PayoutEntry rows are appended by every
global payout run and only their status ever changes afterwards.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import PayoutStatus
from app.models.types import PointsType


class PayoutRecord(Base):
    """Per-user payout ledger."""

    __tablename__ = "payout_records"

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

    total_points: Mapped[Decimal] = mapped_column(
        PointsType, default=Decimal("0"), nullable=False,
        comment="Lifetime settled points, cumulative across runs",
    )
    referred_points: Mapped[Decimal] = mapped_column(
        PointsType, default=Decimal("0"), nullable=False,
        comment="Last multi-level snapshot, reset on settlement",
    )
    direct_referred_points: Mapped[Decimal] = mapped_column(
        PointsType, default=Decimal("0"), nullable=False,
        comment="Last direct-team snapshot, reset on settlement",
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

    payouts: Mapped[list["PayoutEntry"]] = relationship(
        "PayoutEntry",
        back_populates="record",
        cascade="all, delete-orphan",
        order_by="PayoutEntry.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<PayoutRecord(user_id={self.user_id!r}, "
            f"total_points={self.total_points}, entries={len(self.payouts)})>"
        )


class PayoutEntry(Base):
    """Single payout produced by a settlement run."""

    __tablename__ = "payout_entries"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_payout_amount_non_negative"),
        CheckConstraint(
            "payout_amount <= amount",
            name="check_payout_amount_not_exceeds_entitlement",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    record_id: Mapped[int] = mapped_column(
        ForeignKey("payout_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(
        PointsType, nullable=False, comment="Entitlement before deduction"
    )
    payout_amount: Mapped[Decimal] = mapped_column(
        PointsType, nullable=False, comment="Entitlement after deduction"
    )
    status: Mapped[str] = mapped_column(
        String(20), default=PayoutStatus.PENDING, nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    status_changed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    record: Mapped["PayoutRecord"] = relationship(
        "PayoutRecord", back_populates="payouts"
    )
