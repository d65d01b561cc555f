"""
Checkout model.

One row per verified gateway payment. A user with at least one row is a
qualifying (paying) member for team statistics.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import AmountType


class Checkout(Base):
    """Verified purchase."""

    __tablename__ = "checkouts"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    package_name: Mapped[str] = mapped_column(String(255), nullable=False)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(AmountType, nullable=False)

    gateway_order_id: Mapped[str] = mapped_column(String(128), nullable=False)
    gateway_payment_id: Mapped[str] = mapped_column(
        String(128), nullable=False, unique=True
    )
    gateway_signature: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )
