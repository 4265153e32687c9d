"""
Pydantic schemas for request/response validation.
"""

from .auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
    CurrentUserResponse,
    MessageResponse,
)

from .user import (
    SellerRegisterRequest,
    SellerCreate,
    SellerUpdate,
    SellerProfileUpdate,
    ActivateRequest,
    UserResponse,
    UserListResponse,
)

from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    ApproveRequest,
    RejectRequest,
    LocationSuggestion,
)

from .enquiry import EnquiryCreate, EnquiryCreatedResponse, EnquiryResponse, EnquiryListResponse
from .blog import BlogCreate, BlogUpdate, BlogResponse
from .admin import StatsResponse, BulkActionResponse

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "AccessTokenResponse",
    "CurrentUserResponse",
    "MessageResponse",
    "SellerRegisterRequest",
    "SellerCreate",
    "SellerUpdate",
    "SellerProfileUpdate",
    "ActivateRequest",
    "UserResponse",
    "UserListResponse",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyListResponse",
    "ApproveRequest",
    "RejectRequest",
    "LocationSuggestion",
    "EnquiryCreate",
    "EnquiryCreatedResponse",
    "EnquiryResponse",
    "EnquiryListResponse",
    "BlogCreate",
    "BlogUpdate",
    "BlogResponse",
    "StatsResponse",
    "BulkActionResponse",
]
