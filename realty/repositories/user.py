"""
User repository for authentication and seller management operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from realty.repositories.base import BaseRepository
from realty.models.user import User, UserRole
from datetime import datetime
from typing import Optional, List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Sellers and admins share the table and are told apart by role.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Must include email, password, full_name.
                       Optional: role (defaults to SELLER), is_active and profile fields.

        Raises:
            ValueError: If validation fails or the email is taken
        """
        data = dict(user_data)
        email = User.validate_email_format(data.pop("email"))

        if await self.get_by_email(email):
            raise ValueError(f"User with email {email} already exists")

        hashed_password = User.hash_password(data.pop("password"))

        user = User(
            **data,
            email=email,
            hashed_password=hashed_password,
        )
        if user.role is None:
            user.role = UserRole.SELLER
        if user.is_active is None:
            user.is_active = False

        created_user = await self.add(user)
        logger.info(f"Created {created_user.role.value}: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by normalised email address."""
        try:
            result = await self.db.execute(select(User).where(User.email == email.lower().strip()))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def get_seller(self, seller_id) -> Optional[User]:
        user = await self.get_by_id(seller_id)
        if user is None or user.role != UserRole.SELLER:
            return None
        return user

    async def list_sellers(self, deleted: bool = False) -> List[User]:
        """Sellers newest first, either the live ones or the soft-deleted ones."""
        return await self.get_multi(
            limit=None,
            filters={"role": UserRole.SELLER, "is_deleted": deleted},
            order_by="-created_at",
        )

    async def count_sellers(self, since: Optional[datetime] = None) -> int:
        """Count non-deleted sellers, optionally only those registered since a moment."""
        try:
            query = select(func.count(User.id)).where(
                User.role == UserRole.SELLER,
                User.is_deleted.is_(False),
            )
            if since is not None:
                query = query.where(User.created_at >= since)
            result = await self.db.execute(query)
            return result.scalar() or 0
        except Exception as e:
            logger.error(f"Failed to count sellers: {e}")
            raise

    async def admin_exists(self) -> bool:
        return await self.count({"role": UserRole.ADMIN}) > 0
