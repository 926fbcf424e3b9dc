"""
Property listing API endpoints for CRUD operations, search and filtering.
Reads are public; writes require the owner or an admin.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from pydantic import ValidationError as PydanticValidationError
from typing import List, Optional
from decimal import Decimal
from uuid import UUID

from app.config import settings
from app.models.user import User, UserRole
from app.models.property import Property, PropertyType, PropertyStatus
from app.services.property import PropertyService
from app.schemas.common import APIResponse
from app.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    PropertySearchFilters
)
from app.schemas.error import get_crud_error_responses, get_error_responses
from app.utils.dependencies import (
    get_current_user,
    get_optional_current_user,
    get_property_service,
    require_roles
)
from app.utils.exceptions import ValidationError


router = APIRouter(prefix="/properties", tags=["Properties"])


def _to_response(property_obj: Property, include_bids: bool = False) -> PropertyResponse:
    return PropertyResponse.model_validate(property_obj.to_dict(include_bids=include_bids))


@router.get(
    "",
    response_model=APIResponse[PropertyListResponse],
    summary="Search properties",
    description="List properties with filters and pagination, newest first.",
    responses=get_error_responses(400, 500)
)
async def list_properties(
    property_type: Optional[PropertyType] = Query(None, alias="type", description="Filter by property type"),
    property_status: Optional[PropertyStatus] = Query(None, alias="status", description="Filter by status"),
    city: Optional[str] = Query(None, max_length=120, description="Case-insensitive city match"),
    state: Optional[str] = Query(None, max_length=120, description="Case-insensitive state match"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0, description="Maximum price"),
    search: Optional[str] = Query(None, max_length=255, description="Search in title and description"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Properties per page"
    ),
    property_service: PropertyService = Depends(get_property_service)
) -> APIResponse[PropertyListResponse]:
    """
    Search properties.

    Raises:
        ValidationError: If the price range is inverted
    """
    try:
        filters = PropertySearchFilters(
            property_type=property_type,
            status=property_status,
            city=city,
            state=state,
            min_price=min_price,
            max_price=max_price,
            search=search,
            page=page,
            limit=limit
        )
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid search filters",
            field_errors=[{"field": ".".join(str(p) for p in err["loc"]) or None, "message": err["msg"]}
                          for err in e.errors()]
        )

    properties, pagination = await property_service.list_properties(filters)

    return APIResponse(data=PropertyListResponse(
        properties=[_to_response(p) for p in properties],
        pagination=pagination
    ))


@router.get(
    "/my/properties",
    response_model=APIResponse[List[PropertyResponse]],
    summary="Get my properties",
    description="Properties owned by the authenticated user, with their bids.",
    responses=get_error_responses(401, 500)
)
async def get_my_properties(
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> APIResponse[List[PropertyResponse]]:
    properties = await property_service.get_my_properties(current_user)
    return APIResponse(data=[_to_response(p, include_bids=True) for p in properties])


@router.get(
    "/{property_id}",
    response_model=APIResponse[PropertyResponse],
    summary="Get property",
    description="Public property details. Authenticated callers also receive the full bids.",
    responses=get_error_responses(400, 404, 500)
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> APIResponse[PropertyResponse]:
    property_obj = await property_service.get_property(property_id)
    return APIResponse(data=_to_response(property_obj, include_bids=current_user is not None))


@router.post(
    "",
    response_model=APIResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a property listing. Requires property_owner or admin role.",
    responses=get_error_responses(400, 401, 403, 500)
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(require_roles(UserRole.PROPERTY_OWNER, UserRole.ADMIN)),
    property_service: PropertyService = Depends(get_property_service)
) -> APIResponse[PropertyResponse]:
    """
    Create a new property listing.

    Raises:
        InsufficientPermissionsError: If the role cannot list properties
        ValidationError: If property data is invalid
    """
    property_obj = await property_service.create_property(property_data, current_user)
    return APIResponse(message="Property created successfully", data=_to_response(property_obj))


@router.put(
    "/{property_id}",
    response_model=APIResponse[PropertyResponse],
    summary="Update property",
    description="Partially update a property. Only the owner or an admin may update it.",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(require_roles(UserRole.PROPERTY_OWNER, UserRole.ADMIN)),
    property_service: PropertyService = Depends(get_property_service)
) -> APIResponse[PropertyResponse]:
    property_obj = await property_service.update_property(property_id, property_data, current_user)
    return APIResponse(message="Property updated successfully", data=_to_response(property_obj))


@router.delete(
    "/{property_id}",
    response_model=APIResponse[None],
    summary="Delete property",
    description="Delete a property and all bids on it. Only the owner or an admin may delete it.",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(require_roles(UserRole.PROPERTY_OWNER, UserRole.ADMIN)),
    property_service: PropertyService = Depends(get_property_service)
) -> APIResponse[None]:
    await property_service.delete_property(property_id, current_user)
    return APIResponse(message="Property deleted successfully")
