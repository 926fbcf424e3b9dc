"""
Error response schemas for API documentation and consistent error formatting.
Provides the standardized error envelope used in OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["email"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid email format"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["value_error"]
    )


class ErrorResponse(BaseModel):
    """Schema for the error envelope returned by every failing request."""

    success: bool = Field(
        False,
        description="Always false for errors"
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Property is not available for bidding"]
    )

    error_code: str = Field(
        ...,
        description="Error code identifier",
        examples=["INVALID_STATE"]
    )

    errors: Optional[List[ErrorDetail]] = Field(
        None,
        description="Per-field details for validation errors"
    )

    request_id: Optional[str] = Field(
        None,
        description="Unique request identifier for tracking",
        examples=["abc12345"]
    )


_STATUS_DESCRIPTIONS = {
    400: ("Bad Request - Validation failed, duplicate state or invalid status", "VALIDATION_ERROR",
          "Request validation failed"),
    401: ("Unauthorized - Authentication required", "UNAUTHORIZED", "Authentication required"),
    403: ("Forbidden - Access denied", "FORBIDDEN", "Access forbidden"),
    404: ("Not Found - Resource does not exist", "NOT_FOUND", "Property not found"),
    500: ("Internal Server Error", "INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Build OpenAPI `responses` entries for the given status codes.

    Args:
        status_codes: HTTP status codes to document

    Returns:
        Mapping usable as the `responses` argument of a route decorator
    """
    responses: Dict[int, Dict[str, Any]] = {}
    for code in status_codes:
        description, error_code, message = _STATUS_DESCRIPTIONS[code]
        responses[code] = {
            "description": description,
            "model": ErrorResponse,
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "message": message,
                        "error_code": error_code,
                        "request_id": "abc12345"
                    }
                }
            }
        }
    return responses


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Responses for authenticated endpoints."""
    return get_error_responses(400, 401, 403, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Responses for endpoints operating on a single resource."""
    return get_error_responses(400, 401, 403, 404, 500)
