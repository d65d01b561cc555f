"""
KYC service.

Stores users' bank details and moves them through verification.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.bank_details import BankDetails
from app.models.enums import KycStatus
from app.repositories.bank_details_repository import BankDetailsRepository
from app.repositories.user_repository import UserRepository
from app.services.base_service import BaseService, parse_status, transaction
from app.utils.exceptions import (
    BankDetailsNotFoundError,
    DuplicateEntityError,
    UserNotFoundError,
)


class KycService(BaseService):
    """Bank details and KYC verification status."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize KYC service."""
        super().__init__(session)
        self.bank_repo = BankDetailsRepository(session)
        self.user_repo = UserRepository(session)

    @transaction
    async def save_bank_details(
        self,
        user_id: str,
        name_as_per_document: str,
        bank_name: str,
        branch_name: str,
        account_no: str,
        ifsc_code: str,
    ) -> BankDetails:
        """
        Store bank details for a user; verification starts as pending.

        Raises:
            UserNotFoundError: Unknown user
            DuplicateEntityError: Bank details already stored
        """
        user = await self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        if await self.bank_repo.get_by_user_id(user_id):
            raise DuplicateEntityError(
                f"Bank details already exist for user {user_id}"
            )

        details = await self.bank_repo.create(
            user_id=user_id,
            name=user.name,
            name_as_per_document=name_as_per_document,
            bank_name=bank_name,
            branch_name=branch_name,
            account_no=account_no,
            ifsc_code=ifsc_code.upper(),
            status=KycStatus.PENDING,
        )
        self.logger.info("Bank details saved", extra={"user_id": user_id})
        return details

    async def get_bank_details(self, user_id: str) -> BankDetails:
        """
        Get a user's bank details.

        Raises:
            BankDetailsNotFoundError: If none are stored
        """
        details = await self.bank_repo.get_by_user_id(user_id)
        if details is None:
            raise BankDetailsNotFoundError(user_id)
        return details

    async def get_all_kyc_details(self) -> list[BankDetails]:
        """Get every stored bank details record."""
        return await self.bank_repo.find_all()

    @transaction
    async def update_kyc_status(
        self, user_id: str, status: str
    ) -> BankDetails:
        """
        Set the KYC status of a user's bank details.

        Args:
            user_id: Public user id
            status: pending, verified or rejected (case-insensitive)

        Returns:
            Updated BankDetails

        Raises:
            InvalidStatusError: Unknown status value
            BankDetailsNotFoundError: If none are stored
        """
        new_status = parse_status(KycStatus, status)

        details = await self.get_bank_details(user_id)
        details.status = new_status
        await self.bank_repo.save(details)

        self.logger.info(
            "KYC status updated",
            extra={"user_id": user_id, "status": new_status.value},
        )
        return details
