"""
Authentication API endpoints shared by all roles: identity and token refresh.
"""

from fastapi import APIRouter, Depends, status
from realty.models.user import User
from realty.services.auth import AuthService
from realty.schemas.auth import (
    RefreshTokenRequest,
    AccessTokenResponse,
    CurrentUserResponse,
)
from realty.utils.dependencies import get_auth_service, get_current_user
from realty.schemas.error import get_auth_error_responses


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user",
    description="Identity of the bearer token",
    responses=get_auth_error_responses()
)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
) -> CurrentUserResponse:
    return CurrentUserResponse(
        id=str(current_user.id),
        role=current_user.role,
        name=current_user.full_name,
        email=current_user.email,
        is_active=current_user.is_active,
    )


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
    description="Generate new access token using refresh token",
    responses=get_auth_error_responses()
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AccessTokenResponse:
    """
    Raises:
        InvalidTokenError: If refresh token is invalid
        TokenExpiredError: If refresh token is expired
    """
    access_token = await auth_service.refresh_access_token(refresh_data.refresh_token)
    return AccessTokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=auth_service.access_token_lifetime(),
    )
