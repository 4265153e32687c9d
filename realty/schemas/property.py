"""
Pydantic schemas for property requests and responses.
Handles listing CRUD, moderation payloads and paginated results.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Union
from datetime import datetime
from decimal import Decimal
from realty.models.property import PropertyStatus
from realty.utils.text import split_amenities


class PropertyFields(BaseModel):
    """Listing fields shared by create and update payloads."""

    description: Optional[str] = Field(None, max_length=10000, description="Detailed property description")
    price: Optional[Decimal] = Field(None, ge=0, description="Asking price")
    square_meters: Optional[int] = Field(None, ge=0, description="Living area in square meters")
    rooms: Optional[int] = Field(None, ge=0, le=500)
    bathrooms: Optional[int] = Field(None, ge=0, le=500)
    property_type: Optional[str] = Field(None, max_length=60, description="Free form type such as 'apartment'")

    place: Optional[str] = Field(None, max_length=255)
    zip: Optional[str] = Field(None, max_length=20)
    city: Optional[str] = Field(None, max_length=120)
    country: Optional[str] = Field(None, max_length=120)

    pool: Optional[bool] = None
    parking: Optional[bool] = None
    garden: Optional[bool] = None
    amenities: Optional[List[str]] = Field(
        None,
        description="List of amenities; a comma separated string is accepted"
    )
    agent_number: Optional[str] = Field(None, max_length=40)

    @field_validator("amenities", mode="before")
    @classmethod
    def normalize_amenities(cls, v: Union[str, List[str], None]):
        if v is None:
            return v
        return split_amenities(v)

    @field_validator("agent_number", "place", "zip", "city", "country", "property_type")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class PropertyCreate(PropertyFields):
    """
    Schema for creating a new listing.

    `seller_id` and `status` are honoured only for admins.
    """

    title: str = Field(..., min_length=1, max_length=255, description="Property listing title")
    seller_id: Optional[str] = Field(None, description="Owner to assign (admin only)")
    status: Optional[PropertyStatus] = Field(None, description="Initial status (admin only)")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        """Validate and clean title."""
        if not v or not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Sunny 3 room apartment",
                "description": "Bright apartment close to the old town.",
                "price": 320000,
                "square_meters": 85,
                "rooms": 3,
                "bathrooms": 1,
                "property_type": "apartment",
                "place": "Hauptstrasse 12",
                "zip": "8001",
                "city": "Zurich",
                "country": "Switzerland",
                "parking": True,
                "amenities": "balcony, lift",
                "agent_number": "+41 44 000 00 00",
            }
        }
    }


class PropertyUpdate(PropertyFields):
    """
    Schema for updating an existing listing.

    Workflow fields are dropped for sellers by the service.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    seller_id: Optional[str] = None

    status: Optional[PropertyStatus] = None
    published_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    submitted_by_id: Optional[str] = None
    rejection_reason: Optional[str] = None
    owner_removed: Optional[bool] = None
    deleted_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        """Validate and clean title."""
        if v is not None:
            if not v.strip():
                raise ValueError("Title cannot be empty")
            return v.strip()
        return v


class SellerSummary(BaseModel):
    id: str
    name: str
    email: str


class PropertyResponse(BaseModel):
    """Schema for property response."""

    id: str
    ref_number: Optional[str] = None
    title: str
    description: str = ""
    price: Optional[float] = None
    square_meters: Optional[int] = None
    rooms: Optional[int] = None
    bathrooms: Optional[int] = None
    property_type: Optional[str] = None
    place: str = ""
    zip: str = ""
    city: str = ""
    country: str = ""
    pool: bool = False
    parking: bool = False
    garden: bool = False
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    agent_number: str = ""
    seller_id: Optional[str] = None
    submitted_by_id: Optional[str] = None
    status: PropertyStatus
    rejection_reason: str = ""
    submitted_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    owner_removed: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    seller: Optional[SellerSummary] = Field(None, description="Owner (if included)")


class PropertyListResponse(BaseModel):
    """Schema for paginated property list response."""

    properties: List[PropertyResponse]
    total: int = Field(..., description="Total number of properties matching the criteria")
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class ApproveRequest(BaseModel):
    notify_message: Optional[str] = Field(
        None,
        max_length=2000,
        description="Optional note included in the approval e-mail to the seller"
    )


class RejectRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000, description="Why the listing was rejected")


class LocationSuggestion(BaseModel):
    city: str
    postal_code: str
