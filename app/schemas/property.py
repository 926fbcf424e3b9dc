"""
Pydantic schemas for property requests and responses.
Handles property CRUD operations, search filters, and validation.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator
from typing import Dict, List, Optional, Union
from datetime import datetime
from decimal import Decimal
from urllib.parse import urlparse
from app.models.property import PropertyType, PropertyStatus
from app.schemas.bid import BidResponse
from app.schemas.common import PaginationInfo
from app.schemas.user import UserSummary

# Feature values are flat scalars: numbers, flags or short labels
FeatureValue = Union[StrictBool, int, float, str]


def _clean_required(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} is required")
    return value.strip()


def _validate_image_urls(urls: List[str]) -> List[str]:
    cleaned = []
    for url in urls:
        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid image URL: {url}")
        cleaned.append(url)
    return cleaned


class Location(BaseModel):
    """Postal location of a property."""

    model_config = ConfigDict(populate_by_name=True)

    address: str = Field(..., max_length=255, description="Street address", examples=["12 Oxford Street"])
    city: str = Field(..., max_length=120, description="City", examples=["Accra"])
    state: str = Field(..., max_length=120, description="State or region", examples=["Greater Accra"])
    zip_code: str = Field(..., alias="zipCode", max_length=20, description="Postal code", examples=["00233"])
    country: Optional[str] = Field(
        None,
        max_length=120,
        description="Country; defaults to the configured country"
    )

    @field_validator('address')
    @classmethod
    def validate_address(cls, v):
        return _clean_required(v, "Address")

    @field_validator('city')
    @classmethod
    def validate_city(cls, v):
        return _clean_required(v, "City")

    @field_validator('state')
    @classmethod
    def validate_state(cls, v):
        return _clean_required(v, "State")

    @field_validator('zip_code')
    @classmethod
    def validate_zip_code(cls, v):
        return _clean_required(v, "Zip code")

    @field_validator('country')
    @classmethod
    def validate_country(cls, v):
        if v is not None:
            v = v.strip()
            return v or None
        return v


class LocationUpdate(BaseModel):
    """Partial location update; omitted fields keep their current value."""

    model_config = ConfigDict(populate_by_name=True)

    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=120)
    state: Optional[str] = Field(None, max_length=120)
    zip_code: Optional[str] = Field(None, alias="zipCode", max_length=20)
    country: Optional[str] = Field(None, max_length=120)

    @field_validator('address', 'city', 'state', 'zip_code', 'country')
    @classmethod
    def validate_not_blank(cls, v, info):
        if v is not None:
            return _clean_required(v, info.field_name.replace("_", " ").capitalize())
        return v


class PropertyCreate(BaseModel):
    """Schema for creating a new property."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "House1",
                "description": "Four-bedroom family home with a garden",
                "type": "house",
                "price": 50000,
                "location": {
                    "address": "12 Oxford Street",
                    "city": "Accra",
                    "state": "Greater Accra",
                    "zipCode": "00233"
                },
                "images": ["https://media.example.com/house1/front.jpg"],
                "features": {"bedrooms": 4, "parking": True}
            }
        }
    )

    title: str = Field(
        ...,
        max_length=255,
        description="Property listing title"
    )

    description: str = Field(
        ...,
        max_length=5000,
        description="Detailed property description"
    )

    property_type: PropertyType = Field(
        ...,
        alias="type",
        description="Kind of asset being listed"
    )

    price: Decimal = Field(
        ...,
        ge=0,
        max_digits=14,
        decimal_places=2,
        description="Asking price"
    )

    location: Location

    images: List[str] = Field(
        default_factory=list,
        description="Image URLs already hosted by the media store"
    )

    features: Dict[str, FeatureValue] = Field(
        default_factory=dict,
        description="Flat map of scalar attributes"
    )

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Validate and clean title."""
        return _clean_required(v, "Title")

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        """Validate and clean description."""
        return _clean_required(v, "Description")

    @field_validator('images')
    @classmethod
    def validate_images(cls, v):
        """Only absolute http(s) URLs are stored."""
        return _validate_image_urls(v)


class PropertyUpdate(BaseModel):
    """Schema for updating an existing property. Owner and bids cannot be changed."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"price": 52000, "status": "sold"}}
    )

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    property_type: Optional[PropertyType] = Field(None, alias="type")
    status: Optional[PropertyStatus] = Field(
        None,
        description="available, sold or rented; pending is reached only by accepting a bid"
    )
    price: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    location: Optional[LocationUpdate] = None
    images: Optional[List[str]] = Field(
        None,
        description="Image URLs appended to the existing list"
    )
    features: Optional[Dict[str, FeatureValue]] = Field(
        None,
        description="Replacement feature map"
    )

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Validate and clean title."""
        if v is not None:
            return _clean_required(v, "Title")
        return v

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        """Validate and clean description."""
        if v is not None:
            return _clean_required(v, "Description")
        return v

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v == PropertyStatus.PENDING:
            raise ValueError("Status can only become pending by accepting a bid")
        return v

    @field_validator('images')
    @classmethod
    def validate_images(cls, v):
        if v is not None:
            return _validate_image_urls(v)
        return v


class LocationResponse(BaseModel):
    address: str
    city: str
    state: str
    zip_code: str
    country: str


class PropertyResponse(BaseModel):
    """Schema for property response with owner and bids."""

    id: str = Field(..., description="Property unique identifier")
    owner_id: str = Field(..., description="ID of the owning user")
    title: str
    description: str
    property_type: PropertyType
    status: PropertyStatus
    price: float
    location: LocationResponse
    images: List[str]
    features: Dict[str, FeatureValue]
    created_at: datetime
    updated_at: datetime

    owner: Optional[UserSummary] = Field(
        None,
        description="Owner information"
    )

    bids: List[Union[BidResponse, str]] = Field(
        default_factory=list,
        description="Full bids for authenticated callers, otherwise bid ids"
    )


class PropertyListResponse(BaseModel):
    """Schema for paginated property list response."""

    properties: List[PropertyResponse] = Field(..., description="Properties on this page")
    pagination: PaginationInfo


class PropertySearchFilters(BaseModel):
    """Schema for property search filters with optional parameters."""

    property_type: Optional[PropertyType] = Field(None, description="Property type filter")
    status: Optional[PropertyStatus] = Field(None, description="Status filter")
    city: Optional[str] = Field(None, max_length=120, description="Case-insensitive city match")
    state: Optional[str] = Field(None, max_length=120, description="Case-insensitive state match")
    min_price: Optional[Decimal] = Field(None, ge=0, description="Minimum price (inclusive)")
    max_price: Optional[Decimal] = Field(None, ge=0, description="Maximum price (inclusive)")
    search: Optional[str] = Field(
        None,
        max_length=255,
        description="Case-insensitive match on title or description"
    )
    page: int = Field(1, ge=1, description="Page number (starts from 1)")
    limit: int = Field(10, ge=1, le=100, description="Properties per page (max 100)")

    @field_validator('city', 'state', 'search')
    @classmethod
    def clean_text(cls, v):
        """Treat blank text filters as absent."""
        if v is not None:
            v = v.strip()
            return v or None
        return v

    @model_validator(mode='after')
    def validate_price_range(self):
        """Validate price range."""
        if self.min_price is not None and self.max_price is not None:
            if self.min_price > self.max_price:
                raise ValueError("Minimum price cannot be greater than maximum price")
        return self
