"""
Property repository for listing search, moderation queues and location lookups.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, func, desc
from realty.repositories.base import BaseRepository
from realty.database import utc_now
from realty.models.property import Property, PropertyStatus
from typing import Optional, List, Dict, Tuple
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """LIKE pattern matching term literally anywhere in a column."""
    escaped = term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PropertySearchFilters:
    """Data class for property search filters."""

    def __init__(
        self,
        status: Optional[PropertyStatus] = PropertyStatus.ACTIVE,
        include_removed: bool = False,
        city: Optional[str] = None,
        country: Optional[str] = None,
        property_type: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_rooms: Optional[int] = None,
        seller_id: Optional[uuid.UUID] = None,
        search_text: Optional[str] = None,
    ):
        self.status = status
        self.include_removed = include_removed
        self.city = city
        self.country = country
        self.property_type = property_type
        self.min_price = min_price
        self.max_price = max_price
        self.min_rooms = min_rooms
        self.seller_id = seller_id
        self.search_text = search_text


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_obj: Property) -> Property:
        """
        Validate and insert a new listing.

        Raises:
            ValueError: If validation fails
        """
        property_obj.validate_all()
        property_obj.prepare_new()
        created = await self.add(property_obj)
        logger.info(f"Created property: {created.title} ({created.ref_number}, status={created.status.value})")
        return created

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Property], int]:
        """
        Search listings with filtering and pagination, newest first.

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            count_query = select(func.count(Property.id))
            query = select(Property)
            if conditions:
                count_query = count_query.where(and_(*conditions))
                query = query.where(and_(*conditions))

            total_count = (await self.db.execute(count_query)).scalar() or 0

            query = query.order_by(desc(Property.created_at)).offset(skip).limit(limit)
            properties = (await self.db.execute(query)).scalars().all()

            logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
            return list(properties), total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        conditions = []

        if filters.status is not None:
            conditions.append(Property.status == filters.status)
        if not filters.include_removed:
            conditions.append(Property.owner_removed.is_(False))

        # Location filters are case-insensitive exact matches
        if filters.city:
            conditions.append(func.lower(Property.city) == filters.city.strip().lower())
        if filters.country:
            conditions.append(func.lower(Property.country) == filters.country.strip().lower())

        if filters.property_type:
            conditions.append(func.lower(Property.property_type) == filters.property_type.strip().lower())

        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)
        if filters.min_rooms is not None:
            conditions.append(Property.rooms >= filters.min_rooms)

        if filters.seller_id is not None:
            conditions.append(Property.seller_id == filters.seller_id)

        if filters.search_text:
            pattern = contains_pattern(filters.search_text.strip())
            conditions.append(or_(
                Property.title.ilike(pattern, escape=LIKE_ESCAPE),
                Property.description.ilike(pattern, escape=LIKE_ESCAPE),
            ))

        return conditions

    async def get_by_seller(self, seller_id: uuid.UUID, owner_removed: Optional[bool] = None) -> List[Property]:
        """All listings of a seller, newest first."""
        filters: Dict = {"seller_id": seller_id}
        if owner_removed is not None:
            filters["owner_removed"] = owner_removed
        return await self.get_multi(limit=None, filters=filters, order_by="-created_at")

    async def get_pending(self) -> List[Property]:
        """Moderation queue, most recent submission first."""
        try:
            query = (
                select(Property)
                .where(Property.status == PropertyStatus.PENDING, Property.owner_removed.is_(False))
                .order_by(desc(Property.submitted_at), desc(Property.created_at))
            )
            return list((await self.db.execute(query)).scalars().all())
        except Exception as e:
            logger.error(f"Failed to load pending properties: {e}")
            raise

    async def count_by_status(self) -> Dict[PropertyStatus, int]:
        try:
            query = select(Property.status, func.count(Property.id)).group_by(Property.status)
            rows = (await self.db.execute(query)).all()
            return {status: count for status, count in rows}
        except Exception as e:
            logger.error(f"Failed to count properties by status: {e}")
            raise

    async def find_location_candidates(self, term: str, scan_limit: int = 200) -> List[Tuple[str, str]]:
        """
        (city, zip) pairs of listings whose city or postal code contains the term.
        """
        try:
            pattern = contains_pattern(term)
            query = (
                select(Property.city, Property.zip)
                .where(or_(
                    Property.city.ilike(pattern, escape=LIKE_ESCAPE),
                    Property.zip.ilike(pattern, escape=LIKE_ESCAPE),
                ))
                .limit(scan_limit)
            )
            rows = (await self.db.execute(query)).all()
            return [(city or "", zip_code or "") for city, zip_code in rows]
        except Exception as e:
            logger.error(f"Failed to search locations for '{term}': {e}")
            raise

    async def backfill_workflow_timestamps(self) -> Tuple[int, int]:
        """
        Stamp rows created before the moderation workflow existed: active
        listings get `published_at`, pending ones `submitted_at`.

        Returns:
            Tuple of (published stamped, submitted stamped)
        """
        published_query = select(Property).where(
            Property.status == PropertyStatus.ACTIVE, Property.published_at.is_(None)
        )
        submitted_query = select(Property).where(
            Property.status == PropertyStatus.PENDING, Property.submitted_at.is_(None)
        )
        published = list((await self.db.execute(published_query)).scalars().all())
        submitted = list((await self.db.execute(submitted_query)).scalars().all())

        for property_obj in published:
            property_obj.published_at = property_obj.created_at or utc_now()
        for property_obj in submitted:
            property_obj.submitted_at = property_obj.created_at or utc_now()

        await self.save_all([*published, *submitted])
        logger.info(f"Backfilled {len(published)} published and {len(submitted)} submitted timestamps")
        return len(published), len(submitted)
