"""
Pydantic schemas for user responses and admin user management.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.models.user import UserRole
from app.schemas.common import PaginationInfo


class UserSummary(BaseModel):
    """Minimal public user view embedded in bids and listings."""

    id: str = Field(..., description="User's unique identifier")
    name: str = Field(..., description="User's display name")
    email: str = Field(..., description="User's email address")


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    id: str = Field(
        ...,
        description="User's unique identifier",
        examples=["123e4567-e89b-12d3-a456-426614174000"]
    )
    name: str = Field(
        ...,
        description="User's display name",
        examples=["Ama Mensah"]
    )
    email: str = Field(
        ...,
        description="User's email address",
        examples=["owner@example.com"]
    )
    role: UserRole = Field(
        ...,
        description="User's role",
        examples=["property_owner"]
    )
    is_verified: bool = Field(
        ...,
        description="Whether the email address has been verified"
    )
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class UserUpdate(BaseModel):
    """Admin update of a user's role or verification flag."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"role": "property_owner", "isVerified": True}}
    )

    role: Optional[UserRole] = Field(
        None,
        description="New role for the user"
    )

    is_verified: Optional[bool] = Field(
        None,
        alias="isVerified",
        description="Set or clear the verification flag"
    )


class UserListResponse(BaseModel):
    """Paginated list of users."""

    users: List[UserResponse] = Field(..., description="Users on this page")
    pagination: PaginationInfo


class UserFilters(BaseModel):
    """Filters for the admin user listing."""

    role: Optional[UserRole] = Field(None, description="Filter by role")

    search: Optional[str] = Field(
        None,
        max_length=255,
        description="Case-insensitive match on name or email"
    )

    page: int = Field(1, ge=1, description="Page number (starts from 1)")

    limit: int = Field(10, ge=1, le=100, description="Users per page (max 100)")

    @field_validator("search")
    @classmethod
    def clean_search(cls, v):
        """Treat blank search terms as absent."""
        if v is not None:
            v = v.strip()
            return v or None
        return v
