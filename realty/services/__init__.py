"""
Service layer for business logic implementation.
"""

from .auth import AuthService
from .property import PropertyService
from .moderation import ModerationService
from .seller import SellerService
from .enquiry import EnquiryService
from .blog import BlogService
from .notification import NotificationService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "ModerationService",
    "SellerService",
    "EnquiryService",
    "BlogService",
    "NotificationService",
    "ErrorHandlerService",
]
