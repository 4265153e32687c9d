"""
Blog service: public reading, admin authoring and cover images.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from realty.repositories.blog import BlogRepository
from realty.models.blog import Blog
from realty.models.user import User
from realty.schemas.blog import BlogCreate, BlogUpdate
from realty.utils.file_utils import FileValidator, FileStorage
from realty.utils.exceptions import NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)

BLOG_FOLDER = "blogs"


class BlogService:

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.blog_repo = BlogRepository(db_session)
        self.storage = storage or FileStorage()

    async def list_posts(
        self,
        current_user: Optional[User] = None,
        limit: int = 20,
        include_all: bool = False
    ) -> List[Blog]:
        """Published posts newest first; `include_all` shows drafts to admins only."""
        include_unpublished = include_all and current_user is not None and current_user.is_admin
        return await self.blog_repo.list_posts(include_unpublished=include_unpublished, limit=limit)

    async def get_post(self, blog_id: uuid.UUID, current_user: Optional[User] = None) -> Blog:
        blog = await self.blog_repo.get_by_id(blog_id)
        if blog is None:
            raise NotFoundError("Blog", str(blog_id))
        if not blog.published and not (current_user is not None and current_user.is_admin):
            raise NotFoundError("Blog", str(blog_id))
        return blog

    async def create_post(self, data: BlogCreate) -> Blog:
        values = data.model_dump()
        blog = Blog(**{k: v for k, v in values.items() if k != "title"})
        blog.set_title(values["title"])
        created = await self.blog_repo.add(blog)
        logger.info(f"Blog post created: {created.slug}")
        return created

    async def update_post(self, blog_id: uuid.UUID, data: BlogUpdate) -> Blog:
        blog = await self.blog_repo.get_by_id(blog_id)
        if blog is None:
            raise NotFoundError("Blog", str(blog_id))

        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        title = changes.pop("title", None)
        if title is not None and title != blog.title:
            blog.set_title(title)
        for field, value in changes.items():
            setattr(blog, field, value)

        updated = await self.blog_repo.save(blog)
        logger.info(f"Blog post updated: {updated.slug}")
        return updated

    async def delete_post(self, blog_id: uuid.UUID) -> None:
        blog = await self.blog_repo.get_by_id(blog_id)
        if blog is None:
            raise NotFoundError("Blog", str(blog_id))
        image_url = blog.image_url
        await self.blog_repo.delete_obj(blog)
        if image_url:
            self.storage.delete_url(image_url, BLOG_FOLDER)
        logger.info(f"Blog post {blog_id} deleted")

    async def upload_image(self, blog_id: uuid.UUID, file: UploadFile) -> Blog:
        """Store a cover image and point the post at it."""
        blog = await self.blog_repo.get_by_id(blog_id)
        if blog is None:
            raise NotFoundError("Blog", str(blog_id))

        content, extension = await FileValidator.read_and_validate(file)
        old_url = blog.image_url
        blog.image_url = await self.storage.save_bytes(BLOG_FOLDER, content, extension)
        updated = await self.blog_repo.save(blog)

        if old_url and old_url != updated.image_url:
            self.storage.delete_url(old_url, BLOG_FOLDER)
        return updated
