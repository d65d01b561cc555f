"""
Rank repository.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.rank import Rank
from app.repositories.base import BaseRepository


class RankRepository(BaseRepository[Rank]):
    """Rank achievements repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize rank repository."""
        super().__init__(Rank, session)

    async def get_by_user_id(self, user_id: str) -> Rank | None:
        """Get a user's rank document with rewards."""
        return await self.get_by(user_id=user_id)

    async def find_all_newest_first(self) -> list[Rank]:
        """Get all rank documents, most recently created first."""
        stmt = select(Rank).order_by(Rank.created_at.desc(), Rank.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
