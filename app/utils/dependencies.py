"""
FastAPI dependency injection utilities for authentication and service construction.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import Settings, get_settings
from app.database import get_db
from app.models.user import User, UserRole
from app.services.admin import AdminService
from app.services.auth import AuthService
from app.services.bid import BidService
from app.services.email import EmailService
from app.services.property import PropertyService
from app.utils.auth import is_allowed
from app.utils.exceptions import UnauthorizedError, InsufficientPermissionsError


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_email_service(settings: Settings = Depends(get_settings)) -> EmailService:
    """Email service bound to the application settings."""
    return EmailService(settings)


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_settings)
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session
        email_service: Email service
        settings: Application settings

    Returns:
        AuthService instance
    """
    return AuthService(db, email_service=email_service, settings=settings)


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> PropertyService:
    """Get property service instance."""
    return PropertyService(db, settings=settings)


async def get_bid_service(db: AsyncSession = Depends(get_db)) -> BidService:
    """Get bid service instance."""
    return BidService(db)


async def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    """Get admin service instance."""
    return AdminService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the bearer token.

    Args:
        credentials: HTTP Bearer credentials
        auth_service: Authentication service

    Returns:
        Current User object

    Raises:
        UnauthorizedError: If no token is provided, the token is invalid or
                           expired, or the user no longer exists
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return await auth_service.get_current_user(credentials.credentials)


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Get current user if a valid token is provided, otherwise None.

    Args:
        credentials: HTTP Bearer credentials (optional)
        auth_service: Authentication service

    Returns:
        User object if authenticated, None otherwise
    """
    if not credentials:
        return None

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except UnauthorizedError:
        return None


def require_roles(*roles: UserRole):
    """
    Create a dependency that allows only the given roles.

    Args:
        roles: Roles permitted to call the endpoint

    Returns:
        Dependency function returning the current user
    """
    async def role_dependency(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.role, roles):
            allowed = ", ".join(role.value for role in roles)
            raise InsufficientPermissionsError(f"access this resource (requires {allowed})")
        return current_user

    return role_dependency
