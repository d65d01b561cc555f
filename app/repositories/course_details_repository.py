"""
Course details repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.course_details import CourseDetails
from app.repositories.base import BaseRepository


class CourseDetailsRepository(BaseRepository[CourseDetails]):
    """Course validity window repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize course details repository."""
        super().__init__(CourseDetails, session)

    async def get_by_user_id(self, user_id: str) -> CourseDetails | None:
        """Get a user's course details with purchase history."""
        return await self.get_by(user_id=user_id)
