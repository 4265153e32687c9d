"""
Pydantic schemas for seller accounts: registration, profile and admin management.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from realty.models.user import UserRole


class SellerRegisterRequest(BaseModel):
    """
    Public seller registration.

    Fields are optional at the schema level so that missing values are
    reported as a single 400 by the service.
    """

    name: Optional[str] = Field(None, max_length=255, examples=["Jane Seller"])
    email: Optional[str] = Field(None, max_length=255, examples=["jane@example.com"])
    password: Optional[str] = Field(None, max_length=128)
    confirm_password: Optional[str] = Field(None, max_length=128)
    company: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    city: str = Field("", max_length=120)
    pincode: str = Field("", max_length=20)


class SellerCreate(BaseModel):
    """Admin-created seller; active unless stated otherwise."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    company: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    city: str = Field("", max_length=120)
    pincode: str = Field("", max_length=20)
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class SellerProfileUpdate(BaseModel):
    """Fields a seller may change on their own profile."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    company: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    city: Optional[str] = Field(None, max_length=120)
    pincode: Optional[str] = Field(None, max_length=20)
    password: Optional[str] = Field(None, min_length=6, max_length=128)


class SellerUpdate(SellerProfileUpdate):
    """Admin update of a seller account."""

    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None


class ActivateRequest(BaseModel):
    activate: bool = Field(..., description="True to activate the seller, False to deactivate")


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    id: str
    email: str
    full_name: str
    role: UserRole
    company: str = ""
    phone: str = ""
    city: str = ""
    pincode: str = ""
    is_active: bool
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int
