"""
Payout status transitions.

A payout entry leaves pending exactly once, and only for users whose
bank details are verified.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import PayoutStatus
from app.models.payout import PayoutEntry
from app.repositories.bank_details_repository import BankDetailsRepository
from app.repositories.payout_repository import PayoutRepository
from app.services.base_service import parse_status
from app.utils.datetime_utils import utc_now
from app.utils.db_decorators import with_rollback_on_error
from app.utils.exceptions import (
    InvalidStatusTransitionError,
    KycNotVerifiedError,
    PayoutEntryNotFoundError,
    PayoutRecordNotFoundError,
)


def parse_payout_status(status: str) -> PayoutStatus:
    """
    Parse a status value case-insensitively.

    Raises:
        InvalidStatusError: If the value is not a payout status
    """
    return parse_status(PayoutStatus, status)


class PayoutStatusService:
    """Moves payout entries out of pending."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payout status service."""
        self.session = session
        self.payout_repo = PayoutRepository(session)
        self.bank_repo = BankDetailsRepository(session)

    @with_rollback_on_error
    async def update_payout_status(
        self, user_id: str, entry_id: int, status: str
    ) -> PayoutEntry:
        """
        Change the status of one payout entry.

        Args:
            user_id: Public user id owning the entry
            entry_id: PayoutEntry id
            status: Requested status (completed or failed)

        Returns:
            Updated PayoutEntry

        Raises:
            InvalidStatusError: Unknown status value
            KycNotVerifiedError: Bank details missing or not verified
            PayoutRecordNotFoundError: User has no payout record
            PayoutEntryNotFoundError: Entry not found in the user's record
            InvalidStatusTransitionError: Entry is already completed/failed,
                or the requested status is pending
        """
        requested = parse_payout_status(status)

        bank_details = await self.bank_repo.get_by_user_id(user_id)
        if bank_details is None or not bank_details.is_verified:
            raise KycNotVerifiedError(user_id)

        record = await self.payout_repo.get_by_user_id(user_id, for_update=True)
        if record is None:
            raise PayoutRecordNotFoundError(user_id)

        entry = await self.payout_repo.get_entry(record.id, entry_id)
        if entry is None:
            raise PayoutEntryNotFoundError(user_id, entry_id)

        current = PayoutStatus(entry.status)
        if current.is_terminal or not requested.is_terminal:
            raise InvalidStatusTransitionError(current, requested)

        entry.status = requested
        entry.status_changed_at = utc_now()
        await self.session.commit()

        logger.info(
            "Payout status updated",
            extra={
                "user_id": user_id,
                "entry_id": entry_id,
                "from": current.value,
                "to": requested.value,
            },
        )
        return entry
