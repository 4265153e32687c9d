"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from realty.database import get_db
from realty.models.user import User
from realty.services.auth import AuthService
from realty.services.property import PropertyService
from realty.services.moderation import ModerationService
from realty.services.seller import SellerService
from realty.services.enquiry import EnquiryService
from realty.services.blog import BlogService
from realty.utils.exceptions import (
    APIException,
    UnauthorizedError,
    InsufficientPermissionsError,
)
import logging

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_moderation_service(db: AsyncSession = Depends(get_db)) -> ModerationService:
    return ModerationService(db)


async def get_seller_service(db: AsyncSession = Depends(get_db)) -> SellerService:
    return SellerService(db)


async def get_enquiry_service(db: AsyncSession = Depends(get_db)) -> EnquiryService:
    return EnquiryService(db)


async def get_blog_service(db: AsyncSession = Depends(get_db)) -> BlogService:
    return BlogService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        UnauthorizedError: If no token provided or token is invalid
        TokenExpiredError: If token is expired
        SellerDeletedError: If the seller account was soft-deleted
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except APIException:
        raise
    except Exception as e:
        logger.error(f"Authentication failed: {e}")
        raise UnauthorizedError("Authentication failed")


async def get_current_admin_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Raises:
        InsufficientPermissionsError: If user is not an admin
    """
    if not current_user.is_admin:
        raise InsufficientPermissionsError("access admin resources")
    return current_user


async def get_current_seller_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Raises:
        InsufficientPermissionsError: If user is not a seller
    """
    if not current_user.is_seller:
        raise InsufficientPermissionsError("access seller resources")
    return current_user


async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Get current user if a valid token is provided, otherwise None.
    Public endpoints use this to widen visibility for owners and admins.
    """
    if not credentials:
        return None

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except APIException as e:
        logger.debug(f"Ignoring invalid optional credentials: {e.detail}")
        return None
