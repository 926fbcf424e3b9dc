"""
Bid model for offers placed on property listings.
"""

from sqlalchemy import Text, Numeric, Enum as SQLEnum, Index, ForeignKey, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from decimal import Decimal
import enum
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.property import Property


class BidStatus(str, enum.Enum):
    """Bid lifecycle. Only PENDING bids may change status."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Bid(Base):
    """
    An offer from a bidder on a property.
    A bidder holds at most one pending bid per property.
    """

    __tablename__ = "bids"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    bidder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        comment="Offered amount"
    )

    message: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    status: Mapped[BidStatus] = mapped_column(
        SQLEnum(BidStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        nullable=False,
        default=BidStatus.PENDING,
        index=True
    )

    # Relationships
    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="bids",
        lazy="selectin"
    )

    bidder: Mapped["User"] = relationship(
        "User",
        back_populates="bids",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        """String representation of the bid."""
        return f"<Bid(id={self.id}, property_id={self.property_id}, status={self.status})>"

    @property
    def is_pending(self) -> bool:
        return self.status == BidStatus.PENDING

    def to_dict(self, include_property: bool = True) -> dict:
        """
        Convert bid to dictionary with bidder and property summaries.

        Args:
            include_property: Whether to embed the property summary

        Returns:
            Dictionary representation of bid
        """
        result = {
            "id": str(self.id),
            "property_id": str(self.property_id),
            "bidder_id": str(self.bidder_id),
            "amount": float(self.amount),
            "message": self.message,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.bidder:
            result["bidder"] = self.bidder.to_summary()

        if include_property and self.property_rel:
            result["property"] = self.property_rel.to_summary()

        return result


# One open offer per bidder and property
pending_bid_index = Index(
    'uq_bids_pending_property_bidder',
    Bid.property_id,
    Bid.bidder_id,
    unique=True,
    postgresql_where=text("status = 'pending'"),
    sqlite_where=text("status = 'pending'")
)

# Listing a property's bids by status
property_status_index = Index(
    'idx_bids_property_status',
    Bid.property_id,
    Bid.status
)
