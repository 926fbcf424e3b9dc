"""
Property model for real-estate listings.
Handles listing data with location, pricing, status and bid relationships.
"""

from sqlalchemy import String, Text, Numeric, JSON, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from decimal import Decimal
import enum
import uuid
from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.bid import Bid


class PropertyType(str, enum.Enum):
    """Kind of asset being listed."""
    HOUSE = "house"
    APARTMENT = "apartment"
    LAND = "land"
    COMMERCIAL = "commercial"
    CAR = "car"
    OTHER = "other"


class PropertyStatus(str, enum.Enum):
    """Listing status. PENDING is reached only through bid acceptance."""
    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"
    RENTED = "rented"


class Property(Base):
    """
    Property model for managing listings.
    Bids are attached through the bid table's foreign key, newest first.
    """

    __tablename__ = "properties"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who owns this listing"
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, values_callable=lambda types: [t.value for t in types]),
        nullable=False,
        index=True
    )

    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        nullable=False,
        default=PropertyStatus.AVAILABLE,
        index=True
    )

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        index=True,
        comment="Asking price in local currency"
    )

    # Location
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(120), nullable=False, default="Ghana")

    # Ordered list of image URLs held by the external media store
    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list
    )

    # Flat map of scalar attributes (bedrooms, parking, yearBuilt, ...)
    features: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="selectin"
    )

    bids: Mapped[List["Bid"]] = relationship(
        "Bid",
        back_populates="property_rel",
        passive_deletes=True,
        lazy="selectin",
        order_by="desc(Bid.created_at)"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}, status={self.status})>"

    @property
    def is_available(self) -> bool:
        return self.status == PropertyStatus.AVAILABLE

    @property
    def location(self) -> dict:
        return {
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
        }

    def validate_price(self) -> None:
        """
        Validate property price.

        Raises:
            ValueError: If price is invalid
        """
        if self.price is None or self.price < 0:
            raise ValueError("Price must be a positive number")

    def to_summary(self) -> dict:
        """Minimal view embedded in bid responses."""
        return {
            "id": str(self.id),
            "title": self.title,
            "price": float(self.price),
            "status": self.status.value,
        }

    def to_dict(self, include_owner: bool = True, include_bids: bool = False) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_owner: Whether to include the owner summary
            include_bids: Whether to expand bids instead of listing their ids

        Returns:
            Dictionary representation of property
        """
        result = {
            "id": str(self.id),
            "owner_id": str(self.owner_id),
            "title": self.title,
            "description": self.description,
            "property_type": self.property_type.value,
            "status": self.status.value,
            "price": float(self.price),
            "location": self.location,
            "images": list(self.images or []),
            "features": dict(self.features or {}),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if include_owner and self.owner:
            result["owner"] = self.owner.to_summary()

        if include_bids:
            result["bids"] = [bid.to_dict(include_property=False) for bid in self.bids]
        else:
            result["bids"] = [str(bid.id) for bid in self.bids]

        return result


# Composite index for location filtering
location_index = Index(
    'idx_properties_city_state',
    Property.city,
    Property.state
)

# Composite index for type/status filtering
type_status_index = Index(
    'idx_properties_type_status',
    Property.property_type,
    Property.status
)

# Owner's listings, newest first
owner_created_index = Index(
    'idx_properties_owner_created',
    Property.owner_id,
    Property.created_at.desc()
)
