"""
Pydantic schemas for bid requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import uuid
from app.models.bid import BidStatus
from app.models.property import PropertyStatus
from app.schemas.user import UserSummary


class BidCreate(BaseModel):
    """Schema for placing a bid on a property."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "propertyId": "123e4567-e89b-12d3-a456-426614174000",
                "amount": 48000,
                "message": "Ready to close within a month"
            }
        }
    )

    property_id: uuid.UUID = Field(
        ...,
        alias="propertyId",
        description="ID of the property being bid on"
    )

    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=14,
        decimal_places=2,
        description="Offered amount"
    )

    message: Optional[str] = Field(
        None,
        max_length=2000,
        description="Optional note to the owner"
    )

    @field_validator('message')
    @classmethod
    def clean_message(cls, v):
        """Trim the message; blank messages are dropped."""
        if v is not None:
            v = v.strip()
            return v or None
        return v


class BidStatusUpdate(BaseModel):
    """Schema for accepting or rejecting a bid."""

    status: BidStatus = Field(
        ...,
        description="New status: accepted or rejected",
        examples=["accepted"]
    )

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        """Only decisions are accepted; a bid cannot be moved back to pending."""
        if v == BidStatus.PENDING:
            raise ValueError("Status must be accepted or rejected")
        return v


class BidPropertySummary(BaseModel):
    """Property summary embedded in bid responses."""

    id: str
    title: str
    price: float
    status: PropertyStatus


class BidResponse(BaseModel):
    """Schema for bid response with bidder and property summaries."""

    id: str = Field(..., description="Bid unique identifier")
    property_id: str = Field(..., description="ID of the property")
    bidder_id: str = Field(..., description="ID of the bidder")
    amount: float = Field(..., description="Offered amount", examples=[48000.0])
    message: Optional[str] = Field(None, description="Note to the owner")
    status: BidStatus = Field(..., description="Bid status", examples=["pending"])
    created_at: datetime = Field(..., description="Bid creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    bidder: Optional[UserSummary] = Field(
        None,
        description="Bidder information"
    )

    property: Optional[BidPropertySummary] = Field(
        None,
        description="Property information (omitted when nested in a property)"
    )


class BidListResponse(BaseModel):
    """Schema for a list of bids, newest first."""

    bids: List[BidResponse] = Field(..., description="Bids visible to the caller")
    count: int = Field(..., description="Number of bids returned")
