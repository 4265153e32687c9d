"""
Seller API endpoints: registration, login and the seller's own profile and listings.
"""

from fastapi import APIRouter, Depends, status
from typing import List

from realty.models.user import User, UserRole
from realty.services.auth import AuthService
from realty.services.seller import SellerService
from realty.services.property import PropertyService
from realty.schemas.auth import LoginRequest, LoginResponse, MessageResponse
from realty.schemas.user import SellerRegisterRequest, SellerProfileUpdate, UserResponse
from realty.schemas.property import PropertyResponse
from realty.routers.properties import to_response
from realty.utils.dependencies import (
    get_auth_service,
    get_seller_service,
    get_property_service,
    get_current_seller_user,
)
from realty.schemas.error import get_error_responses, get_auth_error_responses


router = APIRouter(prefix="/sellers", tags=["Sellers"])


def login_response(auth_service: AuthService, user: User, access_token: str, refresh_token: str) -> LoginResponse:
    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=auth_service.access_token_lifetime(),
        role=user.role,
        is_active=user.is_active,
        user=UserResponse.model_validate(user.to_dict()),
    )


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register as a seller",
    description="New sellers must be activated by an admin before they can list properties.",
    responses=get_error_responses(400, 422)
)
async def register(
    data: SellerRegisterRequest,
    seller_service: SellerService = Depends(get_seller_service)
) -> MessageResponse:
    await seller_service.register(data)
    return MessageResponse(message="Registration successful. Your account awaits admin activation.")


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Seller login",
    responses=get_error_responses(401, 403, 422)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    user, access_token, refresh_token = await auth_service.login(
        login_data.email, login_data.password, UserRole.SELLER
    )
    return login_response(auth_service, user, access_token, refresh_token)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get own seller profile",
    responses=get_auth_error_responses()
)
async def get_me(current_user: User = Depends(get_current_seller_user)) -> UserResponse:
    return UserResponse.model_validate(current_user.to_dict())


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Update own seller profile",
    responses=get_error_responses(400, 401, 403, 422)
)
async def update_me(
    data: SellerProfileUpdate,
    current_user: User = Depends(get_current_seller_user),
    seller_service: SellerService = Depends(get_seller_service)
) -> UserResponse:
    updated = await seller_service.update_profile(current_user, data)
    return UserResponse.model_validate(updated.to_dict())


@router.get(
    "/me/properties",
    response_model=List[PropertyResponse],
    summary="List own properties",
    description="Every listing of the seller in any state, newest first.",
    responses=get_auth_error_responses()
)
async def my_properties(
    current_user: User = Depends(get_current_seller_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.get_seller_properties(current_user.id)
    return [to_response(p) for p in properties]
