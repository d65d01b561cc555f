"""
User repository.

Data access layer for User model and the referral graph.
"""

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with referral graph queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_user_id(self, user_id: str) -> User | None:
        """
        Get user by public user id.

        Args:
            user_id: Public user id (e.g. "SA12345")

        Returns:
            User or None
        """
        return await self.get_by(user_id=user_id)

    async def find_children(self, parent_id: str) -> list[User]:
        """
        Get direct referrals of a user, in registration order.

        Args:
            parent_id: Referrer's public user id

        Returns:
            List of direct children
        """
        stmt = (
            select(User)
            .where(User.parent_id == parent_id)
            .order_by(User.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def user_id_exists(self, user_id: str) -> bool:
        """Check whether a public user id is taken."""
        return await self.exists(user_id=user_id)

    async def find_conflicting(
        self, email: str | None, phone: str | None
    ) -> User | None:
        """
        Find a user already registered with the given email or phone.

        Args:
            email: Email to check
            phone: Phone to check

        Returns:
            Conflicting user or None
        """
        conditions = []
        if email:
            conditions.append(User.email == email.lower())
        if phone:
            conditions.append(User.phone == phone)
        if not conditions:
            return None

        stmt = select(User).where(or_(*conditions)).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
