"""
Enquiry API endpoints. Anyone may submit; admins read and delete.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from uuid import UUID

from realty.models.user import User
from realty.services.enquiry import EnquiryService
from realty.schemas.enquiry import (
    EnquiryCreate,
    EnquiryCreatedResponse,
    EnquiryResponse,
    EnquiryListResponse,
)
from realty.utils.dependencies import get_enquiry_service, get_current_admin_user
from realty.schemas.error import get_error_responses, get_crud_error_responses


router = APIRouter(prefix="/enquiry", tags=["Enquiries"])


@router.post(
    "",
    response_model=EnquiryCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit enquiry",
    description="General or property enquiry. Name, email and message are required.",
    responses=get_error_responses(400, 422)
)
async def submit_enquiry(
    data: EnquiryCreate,
    enquiry_service: EnquiryService = Depends(get_enquiry_service)
) -> EnquiryCreatedResponse:
    enquiry = await enquiry_service.submit(data)
    return EnquiryCreatedResponse(ref_number=enquiry.ref_number)


@router.get(
    "",
    response_model=EnquiryListResponse,
    summary="List enquiries",
    responses=get_error_responses(401, 403)
)
async def list_enquiries(
    _: User = Depends(get_current_admin_user),
    enquiry_service: EnquiryService = Depends(get_enquiry_service)
) -> EnquiryListResponse:
    enquiries = await enquiry_service.list_enquiries()
    return EnquiryListResponse(
        enquiries=[EnquiryResponse.model_validate(e.to_dict()) for e in enquiries],
        total=len(enquiries),
    )


@router.delete(
    "/{enquiry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete enquiry",
    responses=get_crud_error_responses()
)
async def delete_enquiry(
    enquiry_id: UUID,
    _: User = Depends(get_current_admin_user),
    enquiry_service: EnquiryService = Depends(get_enquiry_service)
) -> Response:
    await enquiry_service.delete_enquiry(enquiry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
