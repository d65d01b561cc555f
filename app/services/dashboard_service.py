"""
Dashboard service.

Admin statistics over users and purchases.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.checkout_repository import CheckoutRepository
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService
from app.utils.datetime_utils import month_bounds, utc_now


@dataclass(frozen=True)
class DashboardStats:
    """Admin dashboard figures."""

    total_users: int
    total_amount: Decimal
    current_month_amount: Decimal
    current_month: str


class DashboardService(BaseService):
    """Admin dashboard statistics."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize dashboard service."""
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.checkout_repo = CheckoutRepository(session)

    async def get_dashboard_stats(
        self, now: datetime | None = None
    ) -> DashboardStats:
        """
        Total users, all-time purchase amount and current month amount.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            DashboardStats
        """
        now = now or utc_now()
        month_start, next_month_start = month_bounds(now)

        total_users = await self.user_repo.count()
        total_amount = await self.checkout_repo.total_amount()
        month_amount = await self.checkout_repo.total_amount(
            since=month_start, until=next_month_start
        )

        return DashboardStats(
            total_users=total_users,
            total_amount=total_amount,
            current_month_amount=month_amount,
            current_month=now.strftime("%B %Y"),
        )
