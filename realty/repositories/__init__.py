"""
Repository layer for data access operations.
"""

from realty.repositories.base import BaseRepository
from realty.repositories.property import PropertyRepository, PropertySearchFilters
from realty.repositories.user import UserRepository
from realty.repositories.enquiry import EnquiryRepository
from realty.repositories.blog import BlogRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "UserRepository",
    "EnquiryRepository",
    "BlogRepository",
]
