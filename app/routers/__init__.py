"""
API route handlers for the Real Estate Bidding API.
Provides organized routing for different API endpoints.
"""

from .admin import router as admin_router
from .auth import router as auth_router
from .bids import router as bids_router
from .properties import router as properties_router

__all__ = ["admin_router", "auth_router", "bids_router", "properties_router"]
