"""
Repository layer for data access operations.
Provides database operations with proper error handling and transactional cascades.
"""

from app.repositories.base import BaseRepository
from app.repositories.bid import BidRepository
from app.repositories.property import PropertyRepository
from app.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "BidRepository",
    "PropertyRepository",
    "UserRepository"
]
