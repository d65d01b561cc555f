"""
Checkout repository.

Data access layer for verified purchases and the qualification source.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.checkout import Checkout
from app.repositories.base import BaseRepository


class CheckoutRepository(BaseRepository[Checkout]):
    """Checkout repository with qualification and revenue queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize checkout repository."""
        super().__init__(Checkout, session)

    async def get_qualifying_user_ids(self) -> set[str]:
        """
        Get ids of users with at least one settled purchase.

        Returns:
            Set of public user ids
        """
        stmt = select(Checkout.user_id).distinct()
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def find_by_user_id(self, user_id: str) -> list[Checkout]:
        """Get a user's purchases, oldest first."""
        return await self.find_by(user_id=user_id)

    async def get_by_payment_id(self, payment_id: str) -> Checkout | None:
        """Get a purchase by gateway payment id."""
        return await self.get_by(gateway_payment_id=payment_id)

    async def total_amount(
        self,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> Decimal:
        """
        Sum purchase amounts, optionally within [since, until).

        Args:
            since: Inclusive lower bound on created_at
            until: Exclusive upper bound on created_at

        Returns:
            Total amount (0 when there are no purchases)
        """
        stmt = select(func.coalesce(func.sum(Checkout.amount), 0))
        if since is not None:
            stmt = stmt.where(Checkout.created_at >= since)
        if until is not None:
            stmt = stmt.where(Checkout.created_at < until)

        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))
