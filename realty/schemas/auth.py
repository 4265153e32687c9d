"""
Pydantic schemas for authentication requests and responses.
Handles login, token refresh, and identity payloads.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from realty.models.user import UserRole
from realty.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request schema, shared by sellers and admins."""

    email: EmailStr = Field(..., description="User's email address", examples=["seller@example.com"])
    password: str = Field(..., min_length=1, max_length=128, description="User's password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str = Field(..., description="Valid refresh token")


class AccessTokenResponse(BaseModel):
    """Access token response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration time in seconds")


class LoginResponse(BaseModel):
    """Complete login response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration time in seconds")
    role: UserRole
    is_active: bool
    user: UserResponse


class CurrentUserResponse(BaseModel):
    """Identity of the bearer."""

    id: str
    role: UserRole
    name: str
    email: str
    is_active: bool


class MessageResponse(BaseModel):
    success: bool = True
    message: str
