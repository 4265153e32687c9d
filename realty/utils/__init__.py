"""
Utility modules for the Realty Marketplace API.
"""

from .exceptions import (
    APIException,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    BadRequestError,
    InvalidCredentialsError,
    TokenExpiredError,
    InvalidTokenError,
    InsufficientPermissionsError,
    SellerDeletedError,
    SellerNotActivatedError,
)
from .text import slugify, split_amenities

# Auth helpers and dependencies are imported directly where needed to avoid circular imports

__all__ = [
    "APIException",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "BadRequestError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
    "SellerDeletedError",
    "SellerNotActivatedError",
    "slugify",
    "split_amenities",
]
