"""
API route handlers for the Realty Marketplace API.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .sellers import router as sellers_router
from .admin import router as admin_router
from .blogs import router as blogs_router
from .enquiries import router as enquiries_router
from .locations import router as locations_router

__all__ = [
    "auth_router",
    "properties_router",
    "sellers_router",
    "admin_router",
    "blogs_router",
    "enquiries_router",
    "locations_router",
]
