"""
Bank details repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.bank_details import BankDetails
from app.repositories.base import BaseRepository


class BankDetailsRepository(BaseRepository[BankDetails]):
    """Bank details / KYC repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize bank details repository."""
        super().__init__(BankDetails, session)

    async def get_by_user_id(self, user_id: str) -> BankDetails | None:
        """Get bank details of a user."""
        return await self.get_by(user_id=user_id)
