"""
Middleware package for the Real Estate Bidding API.
"""

from .request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware"
]
