"""
Seller self-service: registration and profile maintenance.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from realty.repositories.user import UserRepository
from realty.models.user import User, UserRole
from realty.schemas.user import SellerRegisterRequest, SellerProfileUpdate
from realty.utils.exceptions import BadRequestError
import logging

logger = logging.getLogger(__name__)


class SellerService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, data: SellerRegisterRequest) -> User:
        """
        Register a seller. New sellers stay inactive until an admin activates them.

        Raises:
            BadRequestError: On missing fields, mismatched passwords or a taken email
        """
        name = (data.name or "").strip()
        if not name or not data.email or not data.password or not data.confirm_password:
            raise BadRequestError("Name, email, password and confirm password are required")
        if data.password != data.confirm_password:
            raise BadRequestError("Passwords do not match")

        try:
            seller = await self.user_repo.create_user({
                "email": data.email,
                "password": data.password,
                "full_name": name,
                "role": UserRole.SELLER,
                "is_active": False,
                "company": data.company.strip(),
                "phone": data.phone.strip(),
                "city": data.city.strip(),
                "pincode": data.pincode.strip(),
            })
        except ValueError as e:
            raise BadRequestError(str(e))

        logger.info(f"Seller registered: {seller.email} (awaiting activation)")
        return seller

    async def update_profile(self, seller: User, data: SellerProfileUpdate) -> User:
        """Update a seller's own profile; email and activation are admin matters."""
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

        if "password" in changes:
            try:
                seller.set_password(changes.pop("password"))
            except ValueError as e:
                raise BadRequestError(str(e))
        if "name" in changes:
            seller.full_name = changes.pop("name").strip()
        for field, value in changes.items():
            setattr(seller, field, value.strip())

        updated = await self.user_repo.save(seller)
        logger.info(f"Seller {updated.email} updated their profile")
        return updated
