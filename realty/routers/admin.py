"""
Admin API endpoints: login, seller management, listing moderation and stats.
"""

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from uuid import UUID

from realty.models.user import User, UserRole
from realty.services.auth import AuthService
from realty.services.moderation import ModerationService
from realty.schemas.auth import LoginRequest, LoginResponse
from realty.schemas.user import (
    SellerCreate,
    SellerUpdate,
    ActivateRequest,
    UserResponse,
    UserListResponse,
)
from realty.schemas.property import PropertyResponse, ApproveRequest, RejectRequest
from realty.schemas.admin import StatsResponse, BulkActionResponse
from realty.routers.properties import to_response
from realty.routers.sellers import login_response
from realty.utils.dependencies import (
    get_auth_service,
    get_moderation_service,
    get_current_admin_user,
)
from realty.schemas.error import get_error_responses, get_crud_error_responses


router = APIRouter(prefix="/admin", tags=["Admin"])


def user_list(users: List[User]) -> UserListResponse:
    return UserListResponse(
        users=[UserResponse.model_validate(u.to_dict()) for u in users],
        total=len(users),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Admin login",
    responses=get_error_responses(401, 422)
)
async def admin_login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    user, access_token, refresh_token = await auth_service.login(
        login_data.email, login_data.password, UserRole.ADMIN
    )
    return login_response(auth_service, user, access_token, refresh_token)


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Dashboard counts",
    responses=get_error_responses(401, 403)
)
async def stats(
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> StatsResponse:
    return StatsResponse(**await moderation.stats())


# Sellers

@router.get(
    "/sellers",
    response_model=UserListResponse,
    summary="List sellers",
    description="Sellers that are not soft-deleted, newest first.",
    responses=get_error_responses(401, 403)
)
async def list_sellers(
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> UserListResponse:
    return user_list(await moderation.list_sellers())


@router.get(
    "/sellers/deleted",
    response_model=UserListResponse,
    summary="List soft-deleted sellers",
    responses=get_error_responses(401, 403)
)
async def list_deleted_sellers(
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> UserListResponse:
    return user_list(await moderation.list_sellers(deleted=True))


@router.post(
    "/sellers",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create seller",
    responses=get_crud_error_responses()
)
async def create_seller(
    seller_data: SellerCreate,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> UserResponse:
    seller = await moderation.create_seller(seller_data)
    return UserResponse.model_validate(seller.to_dict())


@router.get(
    "/sellers/{seller_id}",
    response_model=UserResponse,
    summary="Get seller",
    responses=get_error_responses(401, 403, 404, 422)
)
async def get_seller(
    seller_id: UUID,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> UserResponse:
    seller = await moderation.get_seller(seller_id)
    return UserResponse.model_validate(seller.to_dict())


@router.put(
    "/sellers/{seller_id}",
    response_model=UserResponse,
    summary="Update seller",
    responses=get_crud_error_responses()
)
async def update_seller(
    seller_id: UUID,
    seller_data: SellerUpdate,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> UserResponse:
    seller = await moderation.update_seller(seller_id, seller_data)
    return UserResponse.model_validate(seller.to_dict())


@router.put(
    "/sellers/{seller_id}/activate",
    response_model=UserResponse,
    summary="Activate or deactivate seller",
    responses=get_crud_error_responses()
)
async def activate_seller(
    seller_id: UUID,
    data: ActivateRequest,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> UserResponse:
    seller = await moderation.set_activation(seller_id, data.activate)
    return UserResponse.model_validate(seller.to_dict())


@router.delete(
    "/sellers/{seller_id}",
    response_model=BulkActionResponse,
    summary="Delete seller",
    description="Soft-delete the seller and their listings, or remove both permanently with hard=true.",
    responses=get_crud_error_responses()
)
async def delete_seller(
    seller_id: UUID,
    hard: bool = Query(False, description="Permanently delete the seller and listings"),
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> BulkActionResponse:
    if hard:
        affected = await moderation.hard_delete_seller(seller_id)
    else:
        affected = await moderation.soft_delete_seller(seller_id)
    return BulkActionResponse(affected=affected)


@router.put(
    "/sellers/{seller_id}/restore",
    response_model=UserResponse,
    summary="Restore soft-deleted seller",
    responses=get_crud_error_responses()
)
async def restore_seller(
    seller_id: UUID,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> UserResponse:
    seller = await moderation.restore_seller(seller_id)
    return UserResponse.model_validate(seller.to_dict())


@router.get(
    "/sellers/{seller_id}/properties",
    response_model=List[PropertyResponse],
    summary="List a seller's properties",
    responses=get_error_responses(401, 403, 404, 422)
)
async def seller_properties(
    seller_id: UUID,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> List[PropertyResponse]:
    properties = await moderation.seller_properties(seller_id)
    return [to_response(p) for p in properties]


@router.put(
    "/sellers/{seller_id}/properties/soft-delete-all",
    response_model=BulkActionResponse,
    summary="Soft-delete all of a seller's properties",
    responses=get_crud_error_responses()
)
async def soft_delete_all(
    seller_id: UUID,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> BulkActionResponse:
    return BulkActionResponse(affected=await moderation.soft_delete_all(seller_id))


@router.put(
    "/sellers/{seller_id}/properties/restore-all",
    response_model=BulkActionResponse,
    summary="Restore all of a seller's removed properties",
    responses=get_crud_error_responses()
)
async def restore_all(
    seller_id: UUID,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> BulkActionResponse:
    return BulkActionResponse(affected=await moderation.restore_all(seller_id))


# Listing moderation

@router.get(
    "/properties/pending",
    response_model=List[PropertyResponse],
    summary="Listings awaiting review",
    description="Most recent submission first.",
    responses=get_error_responses(401, 403)
)
async def pending_properties(
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> List[PropertyResponse]:
    properties = await moderation.pending_properties()
    return [to_response(p, include_seller=True) for p in properties]


@router.put(
    "/properties/{property_id}/approve",
    response_model=PropertyResponse,
    summary="Approve listing",
    description="Publish the listing and notify the seller by email.",
    responses=get_crud_error_responses()
)
async def approve_property(
    property_id: UUID,
    data: Optional[ApproveRequest] = None,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> PropertyResponse:
    notify_message = data.notify_message if data else None
    property_obj = await moderation.approve(property_id, notify_message)
    return to_response(property_obj)


@router.put(
    "/properties/{property_id}/reject",
    response_model=PropertyResponse,
    summary="Reject listing",
    description="A reason is required and is sent to the seller.",
    responses=get_crud_error_responses()
)
async def reject_property(
    property_id: UUID,
    data: RejectRequest,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> PropertyResponse:
    property_obj = await moderation.reject(property_id, data.reason)
    return to_response(property_obj)


@router.put(
    "/properties/{property_id}/soft-delete",
    response_model=PropertyResponse,
    summary="Soft-delete listing",
    responses=get_crud_error_responses()
)
async def soft_delete_property(
    property_id: UUID,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> PropertyResponse:
    property_obj = await moderation.soft_delete_property(property_id)
    return to_response(property_obj)


@router.put(
    "/properties/{property_id}/restore",
    response_model=PropertyResponse,
    summary="Restore listing",
    responses=get_crud_error_responses()
)
async def restore_property(
    property_id: UUID,
    _: User = Depends(get_current_admin_user),
    moderation: ModerationService = Depends(get_moderation_service)
) -> PropertyResponse:
    property_obj = await moderation.restore_property(property_id)
    return to_response(property_obj)
