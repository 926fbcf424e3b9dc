"""
User repository for authentication and user management operations.
Provides account lookups by email and one-time token, admin search and cascading deletion.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_
from app.repositories.base import BaseRepository
from app.models.user import User, UserRole
from app.models.property import Property
from app.models.bid import Bid
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication and authorization support.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: name, email, password
                      Optional: role (defaults to PROPERTY_SEEKER), verification token fields

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the email is taken
            Exception: If database operation fails
        """
        try:
            email = User.validate_email_format(user_data["email"])

            if await self.get_by_email(email):
                raise ValueError(f"User with email {email} already exists")

            user = User(
                **{k: v for k, v in user_data.items() if k not in ("email", "password", "role")},
                email=email,
                role=user_data.get("role") or UserRole.PROPERTY_SEEKER,
            )
            user.set_password(user_data["password"])

            created_user = await self.save(user)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.error(f"User validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        return await self.get_by_field("email", email.lower().strip())

    async def get_by_verification_token(self, token: str) -> Optional[User]:
        """Find the user holding an email verification token."""
        return await self.get_by_field("verification_token", token)

    async def get_by_reset_token(self, token: str) -> Optional[User]:
        """Find the user holding a password reset token."""
        return await self.get_by_field("reset_password_token", token)

    async def search_users(
        self,
        role: Optional[UserRole] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[User], int]:
        """
        Search users by role and a case-insensitive name or email fragment.

        Args:
            role: Optional role filter
            search: Optional text matched against name and email
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (users list, total count)
        """
        try:
            conditions = []
            if role is not None:
                conditions.append(User.role == role)
            if search:
                conditions.append(or_(
                    User.name.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True)
                ))

            count_query = select(func.count(User.id)).where(*conditions)
            total = (await self.db.execute(count_query)).scalar()

            query = (
                select(User)
                .where(*conditions)
                .order_by(User.created_at.desc())
                .offset(skip)
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            users = (await self.db.execute(query)).scalars().all()

            logger.debug(f"User search returned {len(users)} of {total} total results")
            return list(users), total
        except Exception as e:
            logger.error(f"Failed to search users: {e}")
            raise

    async def count_by_role(self) -> Dict[str, int]:
        """Number of users per role; roles without users are reported as zero."""
        counts = await self.count_grouped(User.role)
        return {role.value: counts.get(role.value, 0) for role in UserRole}

    async def get_recent(self, limit: int = 5) -> List[User]:
        """Most recently registered users."""
        return await self.get_multi(skip=0, limit=limit)

    async def delete_user_cascade(self, user_id: uuid.UUID) -> bool:
        """
        Delete a user together with everything that depends on it, in one transaction:
        bids placed by the user, bids on the user's properties, the properties, the user.

        Args:
            user_id: UUID of the user to delete

        Returns:
            True if the user was deleted, False if not found
        """
        try:
            owned_properties = select(Property.id).where(Property.owner_id == user_id)

            bids_by_user = await self.db.execute(
                delete(Bid).where(Bid.bidder_id == user_id)
            )
            bids_on_properties = await self.db.execute(
                delete(Bid).where(Bid.property_id.in_(owned_properties))
            )
            properties = await self.db.execute(
                delete(Property).where(Property.owner_id == user_id)
            )
            users = await self.db.execute(
                delete(User).where(User.id == user_id)
            )

            if users.rowcount == 0:
                await self.db.rollback()
                logger.debug(f"User with id {user_id} not found for deletion")
                return False

            await self.db.commit()
            logger.info(
                f"Deleted user {user_id} with {properties.rowcount} properties and "
                f"{bids_by_user.rowcount + bids_on_properties.rowcount} bids"
            )
            return True
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise
