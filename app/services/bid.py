"""
Bid service implementing the bid lifecycle.
Handles bid placement, role-scoped visibility and the accept/reject/delete rules.
"""

from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.bid import BidRepository
from app.repositories.property import PropertyRepository
from app.models.bid import Bid, BidStatus
from app.models.property import PropertyStatus
from app.models.user import User
from app.schemas.bid import BidCreate
from app.utils.exceptions import (
    BidNotFoundError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    PropertyNotFoundError,
    ValidationError
)
import uuid
import logging

logger = logging.getLogger(__name__)

DUPLICATE_BID_MESSAGE = "You already have a pending bid on this property"


class BidService:
    """
    Bid service for the bid ledger.

    A bid may be placed only on an available property the bidder does not own,
    and a bidder holds at most one pending bid per property. Only the property
    owner or an admin decides on a bid; accepting one moves the property to
    pending and rejects every competing pending bid.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.bid_repo = BidRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def create_bid(self, bid_data: BidCreate, current_user: User) -> Bid:
        """
        Place a bid on a property.

        Args:
            bid_data: Property id, amount and optional message
            current_user: Bidder

        Returns:
            Created pending bid

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            InvalidStateError: If the property is not available
            ForbiddenError: If the bidder owns the property
            ConflictError: If the bidder already has a pending bid on it
        """
        bidder_id = current_user.id
        property_id = bid_data.property_id

        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise PropertyNotFoundError()

        if property_obj.status != PropertyStatus.AVAILABLE:
            raise InvalidStateError("Property is not available for bidding")

        if property_obj.owner_id == bidder_id:
            logger.warning(f"User {bidder_id} attempted to bid on own property {property_id}")
            raise ForbiddenError("You cannot bid on your own property")

        if await self.bid_repo.find_pending(property_id, bidder_id):
            raise ConflictError(DUPLICATE_BID_MESSAGE)

        try:
            bid = await self.bid_repo.create({
                "property_id": property_id,
                "bidder_id": bidder_id,
                "amount": bid_data.amount,
                "message": bid_data.message,
                "status": BidStatus.PENDING,
            })
        except IntegrityError:
            # A concurrent request placed the same pending bid first
            logger.warning(f"Duplicate pending bid by {bidder_id} on {property_id} rejected by index")
            raise ConflictError(DUPLICATE_BID_MESSAGE)

        logger.info(f"Bid {bid.id} of {bid.amount} placed by {bidder_id} on property {property_id}")
        return bid

    async def list_bids(
        self,
        current_user: User,
        property_id: Optional[uuid.UUID] = None
    ) -> List[Bid]:
        """
        List bids newest first. Admins see every bid; other users see the bids
        they placed and the bids on properties they own.

        Args:
            current_user: Requesting user
            property_id: Optional property filter

        Returns:
            Visible bids
        """
        visible_to = None if current_user.is_admin else current_user.id
        return await self.bid_repo.list_bids(visible_to=visible_to, property_id=property_id)

    async def get_bid(self, bid_id: uuid.UUID, current_user: User) -> Bid:
        """
        Get a bid visible to the current user.

        Raises:
            BidNotFoundError: If the bid doesn't exist
            ForbiddenError: If the user is not admin, bidder or property owner
        """
        bid = await self._get_bid_or_404(bid_id)

        if not (
            current_user.is_admin
            or bid.bidder_id == current_user.id
            or bid.property_rel.owner_id == current_user.id
        ):
            raise ForbiddenError("You don't have permission to view this bid")

        return bid

    async def update_bid_status(
        self,
        bid_id: uuid.UUID,
        new_status: BidStatus,
        current_user: User
    ) -> Bid:
        """
        Accept or reject a pending bid.

        Accepting moves the property from available to pending and rejects every
        other pending bid on it, atomically. Rejecting changes only this bid.

        Args:
            bid_id: UUID of the bid
            new_status: BidStatus.ACCEPTED or BidStatus.REJECTED
            current_user: Property owner or admin

        Returns:
            Updated bid

        Raises:
            ValidationError: If new_status is not a decision
            BidNotFoundError: If the bid doesn't exist
            ForbiddenError: If the user is neither property owner nor admin
            InvalidStateError: If the bid is not pending or the property is no longer available
        """
        if new_status not in (BidStatus.ACCEPTED, BidStatus.REJECTED):
            raise ValidationError("Status must be accepted or rejected")

        bid = await self._get_bid_or_404(bid_id)
        property_id = bid.property_id

        if not current_user.can_manage_property(bid.property_rel.owner_id):
            logger.warning(f"User {current_user.id} denied status change on bid {bid_id}")
            raise ForbiddenError("Only the property owner can update bid status")

        if bid.status != BidStatus.PENDING:
            raise InvalidStateError(f"Bid has already been {bid.status.value}")

        if new_status == BidStatus.ACCEPTED:
            if not await self.bid_repo.accept_bid(bid_id, property_id):
                raise InvalidStateError("Property is no longer available")
        else:
            if not await self.bid_repo.reject_bid(bid_id):
                raise InvalidStateError("Bid is no longer pending")
            logger.info(f"Bid {bid_id} on property {property_id} rejected")

        return await self._get_bid_or_404(bid_id)

    async def delete_bid(self, bid_id: uuid.UUID, current_user: User) -> None:
        """
        Withdraw a bid. The property's bid list is derived from the bid rows, so
        removing the row detaches it in the same statement.

        Raises:
            BidNotFoundError: If the bid doesn't exist
            ForbiddenError: If the user is neither bidder nor admin
        """
        bid = await self._get_bid_or_404(bid_id)

        if not (current_user.is_admin or bid.bidder_id == current_user.id):
            raise ForbiddenError("You don't have permission to delete this bid")

        if not await self.bid_repo.delete(bid_id):
            raise BidNotFoundError()

        logger.info(f"Bid {bid_id} deleted")

    async def _get_bid_or_404(self, bid_id: uuid.UUID) -> Bid:
        bid = await self.bid_repo.get_by_id(bid_id)
        if not bid:
            raise BidNotFoundError()
        return bid
