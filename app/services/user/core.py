"""
Core user service functionality.

Handles user retrieval and profile or account status changes.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import UserStatus
from app.models.user import User
from app.repositories.bank_details_repository import BankDetailsRepository
from app.repositories.checkout_repository import CheckoutRepository
from app.repositories.course_details_repository import CourseDetailsRepository
from app.repositories.payout_repository import PayoutRepository
from app.repositories.user_repository import UserRepository
from app.services.base_service import parse_status
from app.utils.db_decorators import with_rollback_on_error
from app.utils.exceptions import DuplicateEntityError, UserNotFoundError


class UserServiceCore:
    """
    Core user service.

    Provides user retrieval, profile and status management methods.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize user service core.

        Args:
            session: Database session
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.payout_repo = PayoutRepository(session)
        self.bank_details_repo = BankDetailsRepository(session)
        self.course_details_repo = CourseDetailsRepository(session)
        self.checkout_repo = CheckoutRepository(session)

    async def get_user(self, user_id: str) -> User:
        """
        Get user by public id.

        Args:
            user_id: Public user id

        Returns:
            User

        Raises:
            UserNotFoundError: If the user does not exist
        """
        user = await self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def get_all_users(self) -> list[User]:
        """Get all users in registration order."""
        return await self.user_repo.find_all()

    @with_rollback_on_error
    async def update_user_status(self, user_id: str, status: str) -> User:
        """
        Change a user's account status.

        Args:
            user_id: Public user id
            status: pending, active or rejected (case-insensitive)

        Returns:
            Updated user

        Raises:
            InvalidStatusError: Unknown status value
            UserNotFoundError: If the user does not exist
        """
        new_status = parse_status(UserStatus, status)

        user = await self.get_user(user_id)
        user.status = new_status
        await self.user_repo.save(user)
        await self.session.commit()

        logger.info(
            "User status updated",
            extra={"user_id": user_id, "status": new_status.value},
        )
        return user

    async def get_user_full_details(self, user_id: str) -> dict:
        """
        Collect everything stored for a user.

        Only the parts that exist are included: "user", "payout",
        "bank_details", "course_details" and "checkouts" (omitted when empty).

        Args:
            user_id: Public user id

        Returns:
            Dict of the stored documents

        Raises:
            UserNotFoundError: If nothing at all is stored for the id
        """
        details = {
            "user": await self.user_repo.get_by_user_id(user_id),
            "payout": await self.payout_repo.get_by_user_id(user_id),
            "bank_details": await self.bank_details_repo.get_by_user_id(user_id),
            "course_details": await self.course_details_repo.get_by_user_id(
                user_id
            ),
            "checkouts": await self.checkout_repo.find_by_user_id(user_id),
        }
        details = {key: value for key, value in details.items() if value}
        if not details:
            raise UserNotFoundError(user_id)
        return details

    @with_rollback_on_error
    async def update_user_details(
        self,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
    ) -> User:
        """
        Update a user's profile fields.

        Empty or omitted fields are left unchanged.

        Args:
            user_id: Public user id
            name: New display name
            email: New email (stored lowercase)
            phone: New phone number

        Returns:
            Updated user

        Raises:
            UserNotFoundError: If the user does not exist
            DuplicateEntityError: If another user has the email or phone
        """
        user = await self.get_user(user_id)

        if email:
            email = email.lower()
            other = await self.user_repo.get_by(email=email)
            if other is not None and other.user_id != user_id:
                raise DuplicateEntityError("Email already in use")
        if phone:
            other = await self.user_repo.get_by(phone=phone)
            if other is not None and other.user_id != user_id:
                raise DuplicateEntityError("Phone number already in use")

        changed = []
        updates = {"name": name, "email": email, "phone": phone}
        for field_name, value in updates.items():
            if value:
                setattr(user, field_name, value)
                changed.append(field_name)

        if changed:
            await self.user_repo.save(user)
            await self.session.commit()
            logger.info(
                "User details updated",
                extra={"user_id": user_id, "fields": changed},
            )
        return user
