"""
Bid API endpoints: place, list, view, decide on and withdraw bids.
All endpoints require authentication.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional
from uuid import UUID

from app.models.user import User
from app.models.bid import Bid
from app.services.bid import BidService
from app.schemas.common import APIResponse
from app.schemas.bid import BidCreate, BidStatusUpdate, BidResponse, BidListResponse
from app.schemas.error import get_auth_error_responses, get_crud_error_responses
from app.utils.dependencies import get_current_user, get_bid_service


router = APIRouter(prefix="/bids", tags=["Bids"])


def _to_response(bid: Bid) -> BidResponse:
    return BidResponse.model_validate(bid.to_dict())


@router.post(
    "",
    response_model=APIResponse[BidResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Place a bid",
    description="Bid on an available property you do not own. One pending bid per property.",
    responses=get_crud_error_responses()
)
async def create_bid(
    bid_data: BidCreate,
    current_user: User = Depends(get_current_user),
    bid_service: BidService = Depends(get_bid_service)
) -> APIResponse[BidResponse]:
    """
    Place a bid on a property.

    Raises:
        PropertyNotFoundError: If the property doesn't exist
        InvalidStateError: If the property is not available
        ForbiddenError: If bidding on your own property
        ConflictError: If a pending bid already exists
    """
    bid = await bid_service.create_bid(bid_data, current_user)
    return APIResponse(message="Bid created successfully", data=_to_response(bid))


@router.get(
    "",
    response_model=APIResponse[BidListResponse],
    summary="List bids",
    description="Admins see all bids; other users see bids they placed or bids on their properties.",
    responses=get_auth_error_responses()
)
async def list_bids(
    property_id: Optional[UUID] = Query(None, alias="propertyId", description="Filter by property"),
    current_user: User = Depends(get_current_user),
    bid_service: BidService = Depends(get_bid_service)
) -> APIResponse[BidListResponse]:
    bids = await bid_service.list_bids(current_user, property_id=property_id)
    return APIResponse(data=BidListResponse(
        bids=[_to_response(bid) for bid in bids],
        count=len(bids)
    ))


@router.get(
    "/{bid_id}",
    response_model=APIResponse[BidResponse],
    summary="Get bid",
    description="Visible to admins, the bidder and the property owner.",
    responses=get_crud_error_responses()
)
async def get_bid(
    bid_id: UUID = Path(..., description="Bid ID"),
    current_user: User = Depends(get_current_user),
    bid_service: BidService = Depends(get_bid_service)
) -> APIResponse[BidResponse]:
    bid = await bid_service.get_bid(bid_id, current_user)
    return APIResponse(data=_to_response(bid))


@router.put(
    "/{bid_id}/status",
    response_model=APIResponse[BidResponse],
    summary="Accept or reject a bid",
    description=(
        "Only the property owner or an admin. Accepting marks the property pending "
        "and rejects all other pending bids on it."
    ),
    responses=get_crud_error_responses()
)
async def update_bid_status(
    status_data: BidStatusUpdate,
    bid_id: UUID = Path(..., description="Bid ID"),
    current_user: User = Depends(get_current_user),
    bid_service: BidService = Depends(get_bid_service)
) -> APIResponse[BidResponse]:
    """
    Decide on a pending bid.

    Raises:
        ForbiddenError: If the caller is not the property owner or an admin
        InvalidStateError: If the bid is not pending or the property is no longer available
    """
    bid = await bid_service.update_bid_status(bid_id, status_data.status, current_user)
    return APIResponse(message=f"Bid {bid.status.value} successfully", data=_to_response(bid))


@router.delete(
    "/{bid_id}",
    response_model=APIResponse[None],
    summary="Delete bid",
    description="Withdraw a bid. Only the bidder or an admin.",
    responses=get_crud_error_responses()
)
async def delete_bid(
    bid_id: UUID = Path(..., description="Bid ID"),
    current_user: User = Depends(get_current_user),
    bid_service: BidService = Depends(get_bid_service)
) -> APIResponse[None]:
    await bid_service.delete_bid(bid_id, current_user)
    return APIResponse(message="Bid deleted successfully")
