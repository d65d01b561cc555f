"""
User registration functionality.

Creates users with generated public ids and links them into the referral
forest.
"""

import secrets

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    USER_ID_MAX,
    USER_ID_MIN,
    USER_ID_PREFIX,
)
from app.config.settings import settings
from app.models.enums import UserStatus
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.utils.db_decorators import with_rollback_on_error
from app.utils.exceptions import (
    DuplicateEntityError,
    ReferralCycleError,
    UserNotFoundError,
)

# Attempts before giving up on finding a free public id
MAX_USER_ID_ATTEMPTS = 50


class UserRegistrationMixin:
    """
    Mixin for user registration functionality.

    Handles new user registration with referral support.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user registration mixin."""
        self.session = session
        self.user_repo = UserRepository(session)

    async def generate_user_id(self) -> str:
        """
        Generate an unused public id ("SA" + 5 digits).

        Raises:
            DuplicateEntityError: If no free id was found
        """
        span = USER_ID_MAX - USER_ID_MIN + 1
        for _ in range(MAX_USER_ID_ATTEMPTS):
            candidate = f"{USER_ID_PREFIX}{USER_ID_MIN + secrets.randbelow(span)}"
            if not await self.user_repo.user_id_exists(candidate):
                return candidate
        raise DuplicateEntityError("Could not allocate a free user id")

    @with_rollback_on_error
    async def register_user(
        self,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        parent_id: str | None = None,
        user_id: str | None = None,
    ) -> User:
        """
        Register new user with referral support.

        Args:
            name: Display name
            email: Email (unique, stored lowercase)
            phone: Phone number (unique)
            parent_id: Referrer's public id
            user_id: Explicit public id (generated when omitted)

        Returns:
            Created user

        Raises:
            ReferralCycleError: If the user would be its own referrer
            UserNotFoundError: If the referrer does not exist
            DuplicateEntityError: If the email, phone or id is taken
        """
        if user_id is not None and parent_id == user_id:
            raise ReferralCycleError(f"User {user_id} cannot refer itself")

        if await self.user_repo.find_conflicting(email, phone):
            raise DuplicateEntityError(
                "User already exists with given email or phone"
            )

        if parent_id is not None:
            referrer = await self.user_repo.get_by_user_id(parent_id)
            if referrer is None:
                raise UserNotFoundError(parent_id)

        if user_id is None:
            user_id = await self.generate_user_id()
        elif await self.user_repo.user_id_exists(user_id):
            raise DuplicateEntityError(f"User id {user_id} is taken")

        user = await self.user_repo.create(
            user_id=user_id,
            name=name,
            email=email.lower() if email else None,
            phone=phone,
            referral_link=f"{settings.referral_base_url}{user_id}",
            parent_id=parent_id,
            status=UserStatus.PENDING,
        )
        await self.session.commit()

        logger.info(
            "User registered",
            extra={
                "user_id": user_id,
                "parent_id": parent_id,
                "has_referrer": parent_id is not None,
            },
        )
        return user

    @with_rollback_on_error
    async def set_referrer(self, user_id: str, parent_id: str) -> User:
        """
        Attach an existing user under a referrer.

        The referrer must not be the user or any of the user's descendants.

        Args:
            user_id: Public id of the user to move
            parent_id: Public id of the new referrer

        Returns:
            Updated user

        Raises:
            ReferralCycleError: If the link would create a cycle
            UserNotFoundError: If either user does not exist
        """
        if user_id == parent_id:
            raise ReferralCycleError(f"User {user_id} cannot refer itself")

        user = await self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        ancestor = await self.user_repo.get_by_user_id(parent_id)
        if ancestor is None:
            raise UserNotFoundError(parent_id)

        seen = {parent_id}
        while ancestor.parent_id is not None:
            if ancestor.parent_id == user_id:
                raise ReferralCycleError(
                    f"User {parent_id} is in the downline of {user_id}"
                )
            if ancestor.parent_id in seen:
                break
            seen.add(ancestor.parent_id)
            ancestor = await self.user_repo.get_by_user_id(ancestor.parent_id)
            if ancestor is None:
                break

        user.parent_id = parent_id
        await self.user_repo.save(user)
        await self.session.commit()

        logger.info(
            "Referrer updated",
            extra={"user_id": user_id, "parent_id": parent_id},
        )
        return user
