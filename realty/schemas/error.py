"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error")
    message: str = Field(..., description="Human-readable error message")
    type: Optional[str] = Field(None, description="Error type identifier")
    input: Optional[Any] = Field(None, description="Input value that caused the error")


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking")
    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Detailed error information for validation errors"
    )


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    message: str = Field(..., description="Same text as error.message, for simple clients")
    error: ErrorResponse


_ERROR_DESCRIPTIONS = {
    400: ("BAD_REQUEST", "Bad Request - Invalid request parameters"),
    401: ("UNAUTHORIZED", "Unauthorized - Authentication required"),
    403: ("FORBIDDEN", "Forbidden - Insufficient permissions"),
    404: ("NOT_FOUND", "Not Found - Resource does not exist"),
    409: ("CONFLICT", "Conflict - Resource state conflict"),
    422: ("VALIDATION_ERROR", "Unprocessable Entity - Request validation failed"),
    500: ("INTERNAL_SERVER_ERROR", "Internal Server Error"),
}


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "message": message,
        "error": {
            "code": code,
            "message": message,
            "timestamp": "2025-01-01T00:00:00Z",
            "request_id": "abc12345",
        },
    }


COMMON_ERROR_RESPONSES = {
    status_code: {
        "description": description,
        "model": APIErrorResponse,
        "content": {"application/json": {"example": _example(code, description.split(" - ")[-1])}},
    }
    for status_code, (code, description) in _ERROR_DESCRIPTIONS.items()
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for CRUD operations."""
    return get_error_responses(400, 401, 403, 404, 422, 500)
