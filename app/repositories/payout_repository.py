"""
Payout repository.

Data access layer for PayoutRecord and PayoutEntry models.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.payout import PayoutEntry, PayoutRecord
from app.repositories.base import BaseRepository


class PayoutRepository(BaseRepository[PayoutRecord]):
    """Payout ledger repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payout repository."""
        super().__init__(PayoutRecord, session)

    async def get_by_user_id(
        self, user_id: str, for_update: bool = False
    ) -> PayoutRecord | None:
        """
        Get a user's payout record with its entries.

        Args:
            user_id: Public user id
            for_update: Lock the row (SELECT ... FOR UPDATE)

        Returns:
            PayoutRecord or None
        """
        stmt = select(PayoutRecord).where(PayoutRecord.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_all_newest_first(self) -> list[PayoutRecord]:
        """Get all payout records, most recently created first."""
        stmt = select(PayoutRecord).order_by(
            PayoutRecord.created_at.desc(), PayoutRecord.id.desc()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_entry(
        self, record_id: int, entry_id: int
    ) -> PayoutEntry | None:
        """
        Get a payout entry belonging to a record.

        Args:
            record_id: PayoutRecord id
            entry_id: PayoutEntry id

        Returns:
            PayoutEntry or None if it belongs to another record
        """
        stmt = select(PayoutEntry).where(
            PayoutEntry.id == entry_id,
            PayoutEntry.record_id == record_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
