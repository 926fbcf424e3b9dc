"""
Shared response envelope and pagination schemas.
"""

from pydantic import BaseModel, Field
from typing import Generic, Optional, TypeVar
import math

DataT = TypeVar("DataT")


class APIResponse(BaseModel, Generic[DataT]):
    """Success envelope wrapping every response payload."""

    success: bool = Field(
        True,
        description="Always true for successful requests"
    )

    message: Optional[str] = Field(
        None,
        description="Optional human-readable message",
        examples=["Bid created successfully"]
    )

    data: Optional[DataT] = Field(
        None,
        description="Response payload"
    )


class PaginationInfo(BaseModel):
    """Pagination metadata for list responses."""

    page: int = Field(..., ge=1, description="Current page number", examples=[1])
    limit: int = Field(..., ge=1, description="Records per page", examples=[10])
    total: int = Field(..., ge=0, description="Total number of matching records", examples=[42])
    pages: int = Field(..., ge=0, description="Total number of pages", examples=[5])

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        """Compute the page count as ceil(total / limit)."""
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))
