"""
Blog repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from realty.repositories.base import BaseRepository
from realty.models.blog import Blog
from typing import List, Optional


class BlogRepository(BaseRepository[Blog]):

    def __init__(self, db: AsyncSession):
        super().__init__(Blog, db)

    async def list_posts(self, include_unpublished: bool = False, limit: Optional[int] = 20) -> List[Blog]:
        """Posts newest first; unpublished ones only on request."""
        filters = None if include_unpublished else {"published": True}
        return await self.get_multi(limit=limit, filters=filters, order_by="-created_at")
