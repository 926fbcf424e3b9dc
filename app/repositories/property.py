"""
Property repository for managing property listings with search and filtering.
Provides database operations for listing management, reporting and cascading deletion.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, or_, desc
from app.repositories.base import BaseRepository
from app.models.property import Property, PropertyType, PropertyStatus
from app.models.bid import Bid, BidStatus
from app.schemas.property import PropertySearchFilters
from typing import List, Dict, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property management with search and filtering capabilities.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination, newest first.

        Args:
            filters: PropertySearchFilters instance with search criteria
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            count_query = select(func.count(Property.id)).where(*conditions)
            total_count = (await self.db.execute(count_query)).scalar()

            query = (
                select(Property)
                .where(*conditions)
                .order_by(desc(Property.created_at))
                .offset(skip)
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            properties = (await self.db.execute(query)).scalars().all()

            logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
            return list(properties), total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.

        Args:
            filters: PropertySearchFilters instance

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []

        if filters.property_type is not None:
            conditions.append(Property.property_type == filters.property_type)

        if filters.status is not None:
            conditions.append(Property.status == filters.status)

        # Location filters (case-insensitive partial match)
        if filters.city:
            conditions.append(Property.city.icontains(filters.city, autoescape=True))
        if filters.state:
            conditions.append(Property.state.icontains(filters.state, autoescape=True))

        # Price range filters
        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        # Free text over title and description
        if filters.search:
            conditions.append(or_(
                Property.title.icontains(filters.search, autoescape=True),
                Property.description.icontains(filters.search, autoescape=True)
            ))

        return conditions

    async def get_by_owner(self, owner_id: uuid.UUID) -> List[Property]:
        """
        Get all properties owned by a user, newest first.

        Args:
            owner_id: UUID of the owner

        Returns:
            List of the owner's properties
        """
        try:
            query = (
                select(Property)
                .where(Property.owner_id == owner_id)
                .order_by(desc(Property.created_at))
                .execution_options(populate_existing=True)
            )
            properties = (await self.db.execute(query)).scalars().all()
            logger.debug(f"Retrieved {len(properties)} properties for owner {owner_id}")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to get properties for owner {owner_id}: {e}")
            raise

    async def count_by_type(self) -> Dict[str, int]:
        """Number of properties per type; types without listings are reported as zero."""
        counts = await self.count_grouped(Property.property_type)
        return {kind.value: counts.get(kind.value, 0) for kind in PropertyType}

    async def count_by_status(self) -> Dict[str, int]:
        """Number of properties per status; unused statuses are reported as zero."""
        counts = await self.count_grouped(Property.status)
        return {state.value: counts.get(state.value, 0) for state in PropertyStatus}

    async def get_recent(self, limit: int = 5) -> List[Property]:
        """Most recently created properties."""
        return await self.get_multi(skip=0, limit=limit)

    async def save_reopened(self, property_obj: Property) -> Property:
        """
        Commit a listing that is back on the market. Accepted bids on it are
        rejected in the same transaction, so an available property never holds
        an accepted bid.

        Args:
            property_obj: Property already set to available

        Returns:
            Reloaded property instance
        """
        property_id = property_obj.id
        try:
            released = await self.db.execute(
                update(Bid)
                .where(Bid.property_id == property_id, Bid.status == BidStatus.ACCEPTED)
                .values(status=BidStatus.REJECTED)
            )
            self.db.add(property_obj)
            await self.db.commit()
            logger.info(f"Property {property_id} reopened; {released.rowcount} accepted bids rejected")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to reopen property {property_id}: {e}")
            raise

        return await self.get_by_id(property_id)

    async def delete_property_cascade(self, property_id: uuid.UUID) -> bool:
        """
        Delete a property and its bids in one transaction.

        Args:
            property_id: UUID of the property

        Returns:
            True if the property was deleted, False if not found
        """
        try:
            bids = await self.db.execute(delete(Bid).where(Bid.property_id == property_id))
            properties = await self.db.execute(delete(Property).where(Property.id == property_id))

            if properties.rowcount == 0:
                await self.db.rollback()
                logger.debug(f"Property with id {property_id} not found for deletion")
                return False

            await self.db.commit()
            logger.info(f"Deleted property {property_id} with {bids.rowcount} bids")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise
