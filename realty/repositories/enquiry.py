"""
Enquiry repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from realty.repositories.base import BaseRepository
from realty.models.enquiry import Enquiry
from typing import List


class EnquiryRepository(BaseRepository[Enquiry]):

    def __init__(self, db: AsyncSession):
        super().__init__(Enquiry, db)

    async def list_recent(self) -> List[Enquiry]:
        return await self.get_multi(limit=None, order_by="-created_at")
