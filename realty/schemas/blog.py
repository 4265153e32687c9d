"""
Pydantic schemas for blog posts.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class BlogCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    excerpt: str = Field("", max_length=1000)
    content: str = ""
    image_url: str = Field("", max_length=500)
    author: str = Field("Admin", max_length=120)
    published: bool = True

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    excerpt: Optional[str] = Field(None, max_length=1000)
    content: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    author: Optional[str] = Field(None, max_length=120)
    published: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None:
            if not v.strip():
                raise ValueError("Title cannot be empty")
            return v.strip()
        return v


class BlogResponse(BaseModel):
    id: str
    title: str
    slug: str
    excerpt: str = ""
    content: str = ""
    image_url: str = ""
    author: str = "Admin"
    published: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
