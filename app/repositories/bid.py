"""
Bid repository for the bid ledger.
Provides visibility-scoped listings and the transactional status transitions.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_, desc
from app.repositories.base import BaseRepository
from app.models.bid import Bid, BidStatus
from app.models.property import Property, PropertyStatus
from typing import Optional, List
import uuid
import logging

logger = logging.getLogger(__name__)


class BidRepository(BaseRepository[Bid]):
    """
    Repository for bids placed on properties.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Bid, db)

    async def find_pending(self, property_id: uuid.UUID, bidder_id: uuid.UUID) -> Optional[Bid]:
        """
        Get the bidder's open bid on a property, if any.

        Args:
            property_id: UUID of the property
            bidder_id: UUID of the bidder

        Returns:
            Pending bid or None
        """
        try:
            query = select(Bid).where(
                Bid.property_id == property_id,
                Bid.bidder_id == bidder_id,
                Bid.status == BidStatus.PENDING
            )
            result = await self.db.execute(query)
            return result.scalars().first()
        except Exception as e:
            logger.error(f"Failed to look up pending bid on {property_id} by {bidder_id}: {e}")
            raise

    async def list_bids(
        self,
        visible_to: Optional[uuid.UUID] = None,
        property_id: Optional[uuid.UUID] = None
    ) -> List[Bid]:
        """
        List bids newest first.

        Args:
            visible_to: When set, only bids placed by this user or placed on
                        properties this user owns
            property_id: Optional property filter

        Returns:
            List of bids
        """
        try:
            query = select(Bid)

            if visible_to is not None:
                owned_properties = select(Property.id).where(Property.owner_id == visible_to)
                query = query.where(or_(
                    Bid.bidder_id == visible_to,
                    Bid.property_id.in_(owned_properties)
                ))

            if property_id is not None:
                query = query.where(Bid.property_id == property_id)

            query = query.order_by(desc(Bid.created_at)).execution_options(populate_existing=True)
            bids = (await self.db.execute(query)).scalars().all()

            logger.debug(f"Retrieved {len(bids)} bids")
            return list(bids)
        except Exception as e:
            logger.error(f"Failed to list bids: {e}")
            raise

    async def reject_bid(self, bid_id: uuid.UUID) -> bool:
        """
        Move a single pending bid to rejected.

        Args:
            bid_id: UUID of the bid

        Returns:
            True if the bid was still pending and is now rejected
        """
        try:
            result = await self.db.execute(
                update(Bid)
                .where(Bid.id == bid_id, Bid.status == BidStatus.PENDING)
                .values(status=BidStatus.REJECTED)
            )
            if result.rowcount != 1:
                await self.db.rollback()
                return False

            await self.db.commit()
            logger.info(f"Bid {bid_id} rejected")
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to reject bid {bid_id}: {e}")
            raise

    async def accept_bid(self, bid_id: uuid.UUID, property_id: uuid.UUID) -> bool:
        """
        Accept a bid in a single transaction.

        The property is moved from available to pending with a conditional update
        that can succeed only once; the bid is accepted and every other pending bid
        on the property is rejected. Nothing is changed unless all three steps apply.

        Args:
            bid_id: UUID of the bid to accept
            property_id: UUID of the bid's property

        Returns:
            True if the bid was accepted, False if the property was no longer
            available or the bid no longer pending
        """
        try:
            claimed = await self.db.execute(
                update(Property)
                .where(Property.id == property_id, Property.status == PropertyStatus.AVAILABLE)
                .values(status=PropertyStatus.PENDING)
            )
            if claimed.rowcount != 1:
                await self.db.rollback()
                logger.warning(f"Property {property_id} no longer available; bid {bid_id} not accepted")
                return False

            accepted = await self.db.execute(
                update(Bid)
                .where(Bid.id == bid_id, Bid.status == BidStatus.PENDING)
                .values(status=BidStatus.ACCEPTED)
            )
            if accepted.rowcount != 1:
                await self.db.rollback()
                logger.warning(f"Bid {bid_id} is no longer pending; acceptance rolled back")
                return False

            rejected = await self.db.execute(
                update(Bid)
                .where(
                    Bid.property_id == property_id,
                    Bid.id != bid_id,
                    Bid.status == BidStatus.PENDING
                )
                .values(status=BidStatus.REJECTED)
            )

            await self.db.commit()
            logger.info(
                f"Bid {bid_id} accepted; property {property_id} pending, "
                f"{rejected.rowcount} competing bids rejected"
            )
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to accept bid {bid_id}: {e}")
            raise
