"""
Admin service for platform statistics and user management.
"""

from typing import Any, Dict, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository
from app.repositories.bid import BidRepository
from app.models.user import User
from app.schemas.common import PaginationInfo
from app.schemas.user import UserFilters, UserUpdate
from app.utils.exceptions import BadRequestError, UserNotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)

RECENT_ITEMS = 5


class AdminService:
    """
    Read-only reporting over users, properties and bids, plus user moderation.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.bid_repo = BidRepository(db_session)

    async def get_statistics(self) -> Dict[str, Any]:
        """
        Aggregate platform counts and the most recent activity.

        Returns:
            Dictionary with overview totals, grouped counts and recent users/properties
        """
        overview = {
            "total_users": await self.user_repo.count(),
            "total_properties": await self.property_repo.count(),
            "total_bids": await self.bid_repo.count(),
        }

        recent_users = await self.user_repo.get_recent(RECENT_ITEMS)
        recent_properties = await self.property_repo.get_recent(RECENT_ITEMS)

        return {
            "overview": overview,
            "users_by_role": await self.user_repo.count_by_role(),
            "properties_by_type": await self.property_repo.count_by_type(),
            "properties_by_status": await self.property_repo.count_by_status(),
            "recent_users": [user.to_dict() for user in recent_users],
            "recent_properties": [prop.to_dict(include_owner=True) for prop in recent_properties],
        }

    async def list_users(self, filters: UserFilters) -> Tuple[List[User], PaginationInfo]:
        """
        List users with optional role filter and name/email search.

        Args:
            filters: Role, search text and pagination

        Returns:
            Tuple of (users on the requested page, pagination info)
        """
        users, total = await self.user_repo.search_users(
            role=filters.role,
            search=filters.search,
            skip=(filters.page - 1) * filters.limit,
            limit=filters.limit
        )
        return users, PaginationInfo.build(filters.page, filters.limit, total)

    async def update_user(self, user_id: uuid.UUID, user_data: UserUpdate) -> User:
        """
        Change a user's role or verification flag.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError()

        if user_data.role is not None:
            user.role = user_data.role
        if user_data.is_verified is not None:
            user.is_verified = user_data.is_verified

        user = await self.user_repo.save(user)
        logger.info(f"User {user_id} updated by admin: role={user.role.value}, verified={user.is_verified}")
        return user

    async def delete_user(self, user_id: uuid.UUID, current_user: User) -> None:
        """
        Delete a user with their properties and all related bids.

        Raises:
            BadRequestError: If an admin tries to delete their own account
            UserNotFoundError: If the user doesn't exist
        """
        if user_id == current_user.id:
            raise BadRequestError("You cannot delete your own account")

        if not await self.user_repo.delete_user_cascade(user_id):
            raise UserNotFoundError()

        logger.info(f"User {user_id} deleted by admin {current_user.id}")
