"""
Database models for the Realty Marketplace API.
Includes User, Property, Enquiry and Blog models.
"""

from realty.models.user import User, UserRole
from realty.models.property import Property, PropertyStatus
from realty.models.enquiry import Enquiry
from realty.models.blog import Blog

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyStatus",
    "Enquiry",
    "Blog",
]
