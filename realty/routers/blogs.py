"""
Blog API endpoints. Reading is public; writing is admin only.
"""

from fastapi import APIRouter, Depends, Query, File, UploadFile, status
from fastapi.responses import Response
from typing import List, Optional
from uuid import UUID

from realty.models.user import User
from realty.services.blog import BlogService
from realty.schemas.blog import BlogCreate, BlogUpdate, BlogResponse
from realty.utils.dependencies import (
    get_blog_service,
    get_current_admin_user,
    get_optional_current_user,
)
from realty.schemas.error import get_crud_error_responses, get_error_responses


router = APIRouter(prefix="/blogs", tags=["Blogs"])


@router.get(
    "",
    response_model=List[BlogResponse],
    summary="List blog posts",
    description="Published posts newest first. Admins may pass all=true to include drafts."
)
async def list_blogs(
    limit: int = Query(20, ge=1, le=100),
    include_all: bool = Query(False, alias="all"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    blog_service: BlogService = Depends(get_blog_service)
) -> List[BlogResponse]:
    posts = await blog_service.list_posts(current_user, limit=limit, include_all=include_all)
    return [BlogResponse.model_validate(p.to_dict()) for p in posts]


@router.get(
    "/{blog_id}",
    response_model=BlogResponse,
    summary="Get blog post",
    responses=get_error_responses(404, 422)
)
async def get_blog(
    blog_id: UUID,
    current_user: Optional[User] = Depends(get_optional_current_user),
    blog_service: BlogService = Depends(get_blog_service)
) -> BlogResponse:
    post = await blog_service.get_post(blog_id, current_user)
    return BlogResponse.model_validate(post.to_dict())


@router.post(
    "",
    response_model=BlogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create blog post",
    responses=get_crud_error_responses()
)
async def create_blog(
    data: BlogCreate,
    _: User = Depends(get_current_admin_user),
    blog_service: BlogService = Depends(get_blog_service)
) -> BlogResponse:
    post = await blog_service.create_post(data)
    return BlogResponse.model_validate(post.to_dict())


@router.put(
    "/{blog_id}",
    response_model=BlogResponse,
    summary="Update blog post",
    description="Changing the title regenerates the slug.",
    responses=get_crud_error_responses()
)
async def update_blog(
    blog_id: UUID,
    data: BlogUpdate,
    _: User = Depends(get_current_admin_user),
    blog_service: BlogService = Depends(get_blog_service)
) -> BlogResponse:
    post = await blog_service.update_post(blog_id, data)
    return BlogResponse.model_validate(post.to_dict())


@router.delete(
    "/{blog_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete blog post",
    responses=get_crud_error_responses()
)
async def delete_blog(
    blog_id: UUID,
    _: User = Depends(get_current_admin_user),
    blog_service: BlogService = Depends(get_blog_service)
) -> Response:
    await blog_service.delete_post(blog_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{blog_id}/image",
    response_model=BlogResponse,
    summary="Upload cover image",
    responses=get_crud_error_responses()
)
async def upload_blog_image(
    blog_id: UUID,
    file: UploadFile = File(...),
    _: User = Depends(get_current_admin_user),
    blog_service: BlogService = Depends(get_blog_service)
) -> BlogResponse:
    post = await blog_service.upload_image(blog_id, file)
    return BlogResponse.model_validate(post.to_dict())
