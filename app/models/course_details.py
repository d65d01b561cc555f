"""
Course details models.

Tracks a user's course validity window and its append-only purchase history.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import PurchaseStatus
from app.models.types import AmountType


class CourseDetails(Base):
    """Per-user course validity window."""

    __tablename__ = "course_details"

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
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    package_name: Mapped[str] = mapped_column(String(255), nullable=False)

    validity_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    validity_end: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
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

    purchase_history: Mapped[list["PurchaseHistoryEntry"]] = relationship(
        "PurchaseHistoryEntry",
        back_populates="course_details",
        cascade="all, delete-orphan",
        order_by="PurchaseHistoryEntry.id",
        lazy="selectin",
    )


class PurchaseHistoryEntry(Base):
    """Single purchase appended to a user's course history."""

    __tablename__ = "purchase_history"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    course_details_id: Mapped[int] = mapped_column(
        ForeignKey("course_details.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    package_name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(AmountType, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PurchaseStatus.COMPLETED, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    course_details: Mapped["CourseDetails"] = relationship(
        "CourseDetails", back_populates="purchase_history"
    )
