"""
Service layer for business logic implementation.
Contains services for authentication, properties, bids, admin reporting, email and error handling.
"""

from .auth import AuthService
from .property import PropertyService
from .bid import BidService
from .admin import AdminService
from .email import EmailService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "BidService",
    "AdminService",
    "EmailService",
    "ErrorHandlerService"
]
