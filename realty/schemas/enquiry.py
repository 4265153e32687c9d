"""
Pydantic schemas for enquiries.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class EnquiryCreate(BaseModel):
    """
    Public enquiry submission.

    Required fields are checked by the service so that a missing one is a 400.
    """

    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    message: Optional[str] = Field(None, max_length=5000)
    phone: Optional[str] = Field(None, max_length=50)
    property_id: Optional[str] = None
    property_title: Optional[str] = Field(None, max_length=255)
    property_ref: Optional[str] = Field(None, max_length=32)


class EnquiryCreatedResponse(BaseModel):
    success: bool = True
    ref_number: str


class EnquiryResponse(BaseModel):
    id: str
    ref_number: str
    property_id: Optional[str] = None
    property_ref: str = ""
    property_title: str = ""
    name: str
    email: str
    phone: str = ""
    message: str
    created_at: Optional[datetime] = None


class EnquiryListResponse(BaseModel):
    enquiries: List[EnquiryResponse]
    total: int
