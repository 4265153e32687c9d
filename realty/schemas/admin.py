"""
Pydantic schemas for admin-only responses.
"""

from pydantic import BaseModel, Field


class StatsResponse(BaseModel):
    """Aggregate counts for the admin dashboard."""

    total_properties: int
    active: int
    pending: int
    rejected: int
    inactive: int
    total_sellers: int = Field(..., description="Sellers that are not soft-deleted")
    new_sellers_7d: int = Field(..., description="Sellers registered in the last seven days")


class BulkActionResponse(BaseModel):
    success: bool = True
    affected: int = Field(..., description="Number of listings changed")
