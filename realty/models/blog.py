"""
Blog post model.
"""

from sqlalchemy import String, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from realty.database import Base
from realty.utils.text import slugify


class Blog(Base):
    """Marketing article shown on the public site."""

    __tablename__ = "blogs"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    author: Mapped[str] = mapped_column(String(120), nullable=False, default="Admin")
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def set_title(self, title: str) -> None:
        """Set the title and re-derive the slug from it."""
        self.title = title
        self.slug = slugify(title)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "content": self.content,
            "image_url": self.image_url,
            "author": self.author,
            "published": self.published,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
