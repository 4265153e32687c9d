"""
Property API endpoints: public browsing, listing CRUD and image upload.
"""

from fastapi import APIRouter, Depends, status, Query, File, UploadFile
from fastapi.responses import Response
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
import math

from realty.config import settings
from realty.models.user import User
from realty.models.property import Property, PropertyStatus
from realty.services.property import PropertyService
from realty.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
)
from realty.utils.dependencies import (
    get_current_user,
    get_optional_current_user,
    get_property_service,
)
from realty.schemas.error import get_crud_error_responses, get_error_responses


router = APIRouter(prefix="/properties", tags=["Properties"])


def to_response(property_obj: Property, include_seller: bool = False) -> PropertyResponse:
    return PropertyResponse.model_validate(property_obj.to_dict(include_seller=include_seller))


def build_page(properties: List[Property], total: int, page: int, page_size: int) -> PropertyListResponse:
    total_pages = math.ceil(total / page_size) if total > 0 else 1
    return PropertyListResponse(
        properties=[to_response(p) for p in properties],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1,
    )


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="Browse properties",
    description="Paginated listings, newest first. Only published listings unless an admin asks for another status.",
    responses=get_error_responses(403, 422)
)
async def list_properties(
    status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="Listing status (admin only unless 'active')"),
    city: Optional[str] = Query(None),
    country: Optional[str] = Query(None),
    property_type: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    min_rooms: Optional[int] = Query(None, ge=0),
    q: Optional[str] = Query(None, max_length=255, description="Search in title and description"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    properties, total = await property_service.list_properties(
        current_user,
        status=status_filter,
        page=page,
        page_size=page_size,
        city=city,
        country=country,
        property_type=property_type,
        min_price=min_price,
        max_price=max_price,
        min_rooms=min_rooms,
        q=q,
    )
    return build_page(properties, total, page, page_size)


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Sellers submit listings for review; admins may publish directly and assign an owner.",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.create_property(property_data, current_user)
    return to_response(property_obj)


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get property",
    responses=get_error_responses(404, 422)
)
async def get_property(
    property_id: UUID,
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Published listings are public. Owners and admins also see unpublished ones.
    """
    property_obj = await property_service.get_property(property_id, current_user)
    return to_response(property_obj, include_seller=True)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update property",
    description="Owners may edit listing details; workflow fields are admin only.",
    responses=get_crud_error_responses()
)
async def update_property(
    property_id: UUID,
    property_data: PropertyUpdate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.update_property(property_id, property_data, current_user)
    return to_response(property_obj)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> Response:
    await property_service.delete_property(property_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{property_id}/images",
    response_model=PropertyResponse,
    summary="Upload property images",
    description="Replace the listing's images with 1 to 10 uploaded JPEG, PNG or WebP files.",
    responses=get_crud_error_responses()
)
async def upload_property_images(
    property_id: UUID,
    files: List[UploadFile] = File(..., description="Image files"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.upload_images(property_id, files, current_user)
    return to_response(property_obj)
