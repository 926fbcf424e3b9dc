"""
Pydantic schemas for request/response validation.
"""

# Shared envelope
from .common import APIResponse, PaginationInfo

# Authentication schemas
from .auth import (
    RegisterRequest,
    LoginRequest,
    VerifyEmailRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    AuthResponse,
    TokenResponse
)

# User schemas
from .user import (
    UserSummary,
    UserResponse,
    UserUpdate,
    UserListResponse,
    UserFilters
)

# Bid schemas
from .bid import (
    BidCreate,
    BidStatusUpdate,
    BidResponse,
    BidListResponse
)

# Property schemas
from .property import (
    Location,
    LocationUpdate,
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    PropertySearchFilters
)

# Admin schemas
from .admin import StatisticsResponse

# Error schemas
from .error import ErrorDetail, ErrorResponse

__all__ = [
    "APIResponse",
    "PaginationInfo",

    # Authentication
    "RegisterRequest",
    "LoginRequest",
    "VerifyEmailRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "AuthResponse",
    "TokenResponse",

    # User
    "UserSummary",
    "UserResponse",
    "UserUpdate",
    "UserListResponse",
    "UserFilters",

    # Bid
    "BidCreate",
    "BidStatusUpdate",
    "BidResponse",
    "BidListResponse",

    # Property
    "Location",
    "LocationUpdate",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyListResponse",
    "PropertySearchFilters",

    # Admin
    "StatisticsResponse",

    # Errors
    "ErrorDetail",
    "ErrorResponse",
]
