"""
Database models for the Real Estate Bidding API.
Includes User, Property, and Bid models with relationships and validation.
"""

from app.models.user import User, UserRole
from app.models.property import Property, PropertyType, PropertyStatus
from app.models.bid import Bid, BidStatus

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyType",
    "PropertyStatus",
    "Bid",
    "BidStatus",
]
