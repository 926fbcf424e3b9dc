"""
Admin API endpoints for statistics and user management.
Every endpoint requires the admin role.
"""

from fastapi import APIRouter, Depends, Query, Path
from typing import Optional
from uuid import UUID

from app.config import settings
from app.models.user import User, UserRole
from app.services.admin import AdminService
from app.schemas.admin import StatisticsResponse
from app.schemas.common import APIResponse
from app.schemas.user import UserFilters, UserListResponse, UserResponse, UserUpdate
from app.schemas.error import get_auth_error_responses, get_crud_error_responses
from app.utils.dependencies import get_admin_service, require_roles


router = APIRouter(prefix="/admin", tags=["Admin"])

require_admin = require_roles(UserRole.ADMIN)


@router.get(
    "/statistics",
    response_model=APIResponse[StatisticsResponse],
    summary="Platform statistics",
    description="Totals, counts by role/type/status and the most recent users and properties.",
    responses=get_auth_error_responses()
)
async def get_statistics(
    current_user: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> APIResponse[StatisticsResponse]:
    statistics = await admin_service.get_statistics()
    return APIResponse(data=StatisticsResponse.model_validate(statistics))


@router.get(
    "/users",
    response_model=APIResponse[UserListResponse],
    summary="List users",
    description="Paginated users with optional role filter and name/email search.",
    responses=get_auth_error_responses()
)
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    search: Optional[str] = Query(None, max_length=255, description="Search name or email"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Users per page"),
    current_user: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> APIResponse[UserListResponse]:
    filters = UserFilters(role=role, search=search, page=page, limit=limit)
    users, pagination = await admin_service.list_users(filters)
    return APIResponse(data=UserListResponse(
        users=[UserResponse.model_validate(user.to_dict()) for user in users],
        pagination=pagination
    ))


@router.put(
    "/users/{user_id}",
    response_model=APIResponse[UserResponse],
    summary="Update user",
    description="Change a user's role or verification flag.",
    responses=get_crud_error_responses()
)
async def update_user(
    user_data: UserUpdate,
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> APIResponse[UserResponse]:
    user = await admin_service.update_user(user_id, user_data)
    return APIResponse(
        message="User updated successfully",
        data=UserResponse.model_validate(user.to_dict())
    )


@router.delete(
    "/users/{user_id}",
    response_model=APIResponse[None],
    summary="Delete user",
    description="Delete a user with their properties and all related bids. Admins cannot delete themselves.",
    responses=get_crud_error_responses()
)
async def delete_user(
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> APIResponse[None]:
    await admin_service.delete_user(user_id, current_user)
    return APIResponse(message="User deleted successfully")
