"""
Property service for managing property listings with business logic validation.
Handles CRUD operations, ownership validation and search functionality.
"""

from typing import Optional, List, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import Settings, settings as default_settings
from app.repositories.property import PropertyRepository
from app.models.property import Property, PropertyStatus
from app.models.user import User, UserRole
from app.schemas.common import PaginationInfo
from app.schemas.property import PropertyCreate, PropertyUpdate, PropertySearchFilters
from app.utils.auth import is_allowed
from app.utils.exceptions import (
    ForbiddenError,
    InsufficientPermissionsError,
    InternalServerError,
    PropertyNotFoundError,
    ValidationError
)
import uuid
import logging

logger = logging.getLogger(__name__)

LISTING_ROLES = (UserRole.ADMIN, UserRole.PROPERTY_OWNER)


class PropertyService:
    """
    Property service for managing property listings.
    Only the owner or an admin may change or remove a listing, and a listing
    becomes pending only through bid acceptance.
    """

    def __init__(self, db_session: AsyncSession, settings: Optional[Settings] = None):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.settings = settings or default_settings

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a new property listing owned by the current user.

        Args:
            property_data: Property creation data
            current_user: User creating the property

        Returns:
            Created property instance

        Raises:
            InsufficientPermissionsError: If the user's role cannot list properties
        """
        if not is_allowed(current_user.role, LISTING_ROLES):
            raise InsufficientPermissionsError("create properties")

        user_id = current_user.id
        location = property_data.location

        create_data = {
            "owner_id": user_id,
            "title": property_data.title,
            "description": property_data.description,
            "property_type": property_data.property_type,
            "status": PropertyStatus.AVAILABLE,
            "price": property_data.price,
            "address": location.address,
            "city": location.city,
            "state": location.state,
            "zip_code": location.zip_code,
            "country": location.country or self.settings.default_country,
            "images": list(property_data.images),
            "features": dict(property_data.features),
        }

        try:
            property_obj = await self.property_repo.create(create_data)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create property for user {user_id}: {e}")
            raise InternalServerError("Failed to create property")

        logger.info(f"Property created by user {user_id}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def list_properties(self, filters: PropertySearchFilters) -> Tuple[List[Property], PaginationInfo]:
        """
        Search listings with filters and pagination, newest first.

        Args:
            filters: Search filters including page and limit

        Returns:
            Tuple of (properties on the requested page, pagination info)
        """
        skip = (filters.page - 1) * filters.limit
        properties, total = await self.property_repo.search_properties(
            filters,
            skip=skip,
            limit=filters.limit
        )
        return properties, PaginationInfo.build(filters.page, filters.limit, total)

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get property by ID.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.property_repo.get_by_id(property_id)

        if not property_obj:
            raise PropertyNotFoundError()

        logger.debug(f"Retrieved property: {property_id}")
        return property_obj

    async def get_my_properties(self, current_user: User) -> List[Property]:
        """Listings owned by the current user, newest first."""
        return await self.property_repo.get_by_owner(current_user.id)

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Partially update a property. The owner is never changed and new images
        are appended to the existing list. Putting a pending, sold or rented
        listing back to available rejects its accepted bid.

        Args:
            property_id: UUID of the property to update
            property_data: Property update data
            current_user: User updating the property

        Returns:
            Updated property instance

        Raises:
            PropertyNotFoundError: If property doesn't exist
            ForbiddenError: If user is neither owner nor admin
            ValidationError: If status is set to pending
        """
        property_obj = await self.get_property(property_id)
        self._check_can_manage(property_obj, current_user, "update")

        updates = property_data.model_dump(exclude_unset=True, exclude_none=True)

        if updates.get("status") == PropertyStatus.PENDING:
            raise ValidationError("Status can only become pending by accepting a bid")

        reopening = (
            updates.get("status") == PropertyStatus.AVAILABLE
            and property_obj.status != PropertyStatus.AVAILABLE
        )

        location = updates.pop("location", None) or {}
        for field, value in location.items():
            setattr(property_obj, field, value)

        new_images = updates.pop("images", None)
        if new_images:
            property_obj.images = list(property_obj.images or []) + new_images

        for field, value in updates.items():
            setattr(property_obj, field, value)

        try:
            if reopening:
                property_obj = await self.property_repo.save_reopened(property_obj)
            else:
                property_obj = await self.property_repo.save(property_obj)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise InternalServerError("Failed to update property")

        logger.info(f"Property {property_id} updated")
        return property_obj

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> None:
        """
        Delete a property and all bids on it.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            ForbiddenError: If user is neither owner nor admin
        """
        property_obj = await self.get_property(property_id)
        self._check_can_manage(property_obj, current_user, "delete")

        if not await self.property_repo.delete_property_cascade(property_id):
            raise PropertyNotFoundError()

        logger.info(f"Property {property_id} deleted")

    def _check_can_manage(self, property_obj: Property, current_user: User, action: str) -> None:
        if not current_user.can_manage_property(property_obj.owner_id):
            logger.warning(f"User {current_user.id} denied {action} on property {property_obj.id}")
            raise ForbiddenError(f"You don't have permission to {action} this property")
