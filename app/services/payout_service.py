"""
Payout service.

Entry point for payout runs, status changes and payout queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.payout import PayoutEntry, PayoutRecord
from app.repositories.payout_repository import PayoutRepository
from app.services.base_service import BaseService
from app.services.payout import (
    PayoutRunResult,
    PayoutSettlementEngine,
    PayoutStatusService,
)
from app.utils.exceptions import PayoutRecordNotFoundError


class PayoutService(BaseService):
    """Payout ledger operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payout service."""
        super().__init__(session)
        self.payout_repo = PayoutRepository(session)
        self.settlement = PayoutSettlementEngine(session)
        self.status_service = PayoutStatusService(session)

    async def run_global_payout(self) -> PayoutRunResult:
        """Settle every user (see PayoutSettlementEngine)."""
        return await self.settlement.run_global_payout()

    async def update_payout_status(
        self, user_id: str, entry_id: int, status: str
    ) -> PayoutEntry:
        """Change one payout entry's status."""
        return await self.status_service.update_payout_status(
            user_id, entry_id, status
        )

    async def get_user_payouts(self, user_id: str) -> PayoutRecord:
        """
        Get a user's payout record with all entries.

        Raises:
            PayoutRecordNotFoundError: If the user was never settled or reported
        """
        record = await self.payout_repo.get_by_user_id(user_id)
        if record is None:
            raise PayoutRecordNotFoundError(user_id)
        return record

    async def get_all_payouts(self) -> list[PayoutRecord]:
        """Get every payout record, most recently created first."""
        return await self.payout_repo.find_all_newest_first()
