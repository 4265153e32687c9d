"""
Admin moderation service.

Seller account management (activation, soft delete with listing cascade,
restore, hard delete) and the listing workflow: approve, reject,
soft-delete and restore, single or in bulk per seller.
"""

from typing import List, Optional, Dict, Any
from datetime import timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from realty.repositories.property import PropertyRepository
from realty.repositories.user import UserRepository
from realty.models.property import Property, PropertyStatus
from realty.models.user import User, UserRole
from realty.database import utc_now
from realty.schemas.user import SellerCreate, SellerUpdate
from realty.services.notification import NotificationService
from realty.utils.file_utils import FileStorage, listing_folder
from realty.utils.exceptions import (
    APIException,
    NotFoundError,
    BadRequestError,
    PropertyNotFoundError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


class ModerationService:
    """
    Admin operations on sellers and listings.
    Every transition is unconditional; the last write wins.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        notifier: Optional[NotificationService] = None,
        storage: Optional[FileStorage] = None,
    ):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.notifier = notifier or NotificationService()
        self.storage = storage or FileStorage()

    # Sellers

    async def get_seller(self, seller_id: uuid.UUID) -> User:
        seller = await self.user_repo.get_seller(seller_id)
        if seller is None:
            raise NotFoundError("Seller", str(seller_id))
        return seller

    async def list_sellers(self, deleted: bool = False) -> List[User]:
        return await self.user_repo.list_sellers(deleted=deleted)

    async def create_seller(self, seller_data: SellerCreate) -> User:
        """
        Create a seller account on behalf of the seller.

        Raises:
            BadRequestError: If the email is taken or the data is invalid
        """
        data = seller_data.model_dump()
        data["full_name"] = data.pop("name")
        data["role"] = UserRole.SELLER
        try:
            seller = await self.user_repo.create_user(data)
        except ValueError as e:
            raise BadRequestError(str(e))

        logger.info(f"Admin created seller {seller.email} (active={seller.is_active})")
        return seller

    async def update_seller(self, seller_id: uuid.UUID, seller_data: SellerUpdate) -> User:
        """Partial update of a seller, including password and activation."""
        seller = await self.get_seller(seller_id)
        data = {k: v for k, v in seller_data.model_dump(exclude_unset=True).items() if v is not None}

        try:
            if "email" in data:
                email = User.validate_email_format(data.pop("email"))
                existing = await self.user_repo.get_by_email(email)
                if existing is not None and existing.id != seller.id:
                    raise BadRequestError(f"User with email {email} already exists")
                seller.email = email
            if "password" in data:
                seller.set_password(data.pop("password"))
        except ValueError as e:
            raise BadRequestError(str(e))

        if "name" in data:
            seller.full_name = data.pop("name")
        for field, value in data.items():
            setattr(seller, field, value)

        updated = await self.user_repo.save(seller)
        logger.info(f"Seller {updated.email} updated by admin")
        return updated

    async def set_activation(self, seller_id: uuid.UUID, activate: bool) -> User:
        seller = await self.get_seller(seller_id)
        seller.is_active = activate
        updated = await self.user_repo.save(seller)
        logger.info(f"Seller {updated.email} {'activated' if activate else 'deactivated'}")
        return updated

    async def soft_delete_seller(self, seller_id: uuid.UUID) -> int:
        """
        Soft-delete a seller and every listing they own, in one transaction.

        Returns:
            Number of listings soft-deleted
        """
        seller = await self.get_seller(seller_id)
        properties = await self.property_repo.get_by_seller(seller.id)

        seller.is_deleted = True
        seller.is_active = False
        for property_obj in properties:
            property_obj.soft_delete()

        await self.user_repo.save_all([seller, *properties])
        logger.info(f"Seller {seller.email} soft-deleted with {len(properties)} listings")
        return len(properties)

    async def restore_seller(self, seller_id: uuid.UUID) -> User:
        """
        Undo a seller soft delete; the seller is re-activated and their
        removed listings restored.

        Raises:
            BadRequestError: If the seller is not deleted
        """
        seller = await self.get_seller(seller_id)
        if not seller.is_deleted:
            raise BadRequestError("Seller is not deleted")

        properties = await self.property_repo.get_by_seller(seller.id, owner_removed=True)
        seller.is_deleted = False
        seller.is_active = True
        for property_obj in properties:
            property_obj.restore()

        await self.user_repo.save_all([seller, *properties])
        logger.info(f"Seller {seller.email} restored with {len(properties)} listings")
        return seller

    async def hard_delete_seller(self, seller_id: uuid.UUID) -> int:
        """
        Permanently delete a seller and all of their listings.

        Returns:
            Number of listings deleted
        """
        seller = await self.get_seller(seller_id)
        properties = await self.property_repo.get_by_seller(seller.id)
        images = [(p.id, list(p.images or [])) for p in properties]

        try:
            for property_obj in properties:
                await self.db.delete(property_obj)
            await self.db.delete(seller)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to hard delete seller {seller_id}: {e}")
            raise

        for property_id, urls in images:
            self.storage.delete_urls(urls, listing_folder(property_id))
        logger.info(f"Seller {seller_id} permanently deleted with {len(properties)} listings")
        return len(properties)

    async def seller_properties(self, seller_id: uuid.UUID) -> List[Property]:
        seller = await self.get_seller(seller_id)
        return await self.property_repo.get_by_seller(seller.id)

    async def soft_delete_all(self, seller_id: uuid.UUID) -> int:
        """Soft-delete every listing of a seller, leaving the account alone."""
        seller = await self.get_seller(seller_id)
        properties = await self.property_repo.get_by_seller(seller.id)
        for property_obj in properties:
            property_obj.soft_delete()
        await self.property_repo.save_all(properties)
        logger.info(f"Soft-deleted {len(properties)} listings of seller {seller.email}")
        return len(properties)

    async def restore_all(self, seller_id: uuid.UUID) -> int:
        """Restore every removed listing of a seller."""
        seller = await self.get_seller(seller_id)
        properties = await self.property_repo.get_by_seller(seller.id, owner_removed=True)
        for property_obj in properties:
            property_obj.restore()
        await self.property_repo.save_all(properties)
        logger.info(f"Restored {len(properties)} listings of seller {seller.email}")
        return len(properties)

    # Listings

    async def _get_property(self, property_id: uuid.UUID) -> Property:
        property_obj = await self.property_repo.get_by_id(property_id)
        if property_obj is None:
            raise PropertyNotFoundError(str(property_id))
        return property_obj

    async def pending_properties(self) -> List[Property]:
        return await self.property_repo.get_pending()

    async def approve(self, property_id: uuid.UUID, notify_message: Optional[str] = None) -> Property:
        property_obj = await self._get_property(property_id)
        property_obj.approve()
        approved = await self.property_repo.save(property_obj)
        logger.info(f"Property {approved.ref_number} approved")

        await self.notifier.property_approved(approved, await self._owner(approved), notify_message)
        return approved

    async def reject(self, property_id: uuid.UUID, reason: Optional[str]) -> Property:
        """
        Raises:
            BadRequestError: If the reason is missing or blank
        """
        property_obj = await self._get_property(property_id)
        try:
            property_obj.reject(reason)
        except ValueError as e:
            raise BadRequestError(str(e))

        rejected = await self.property_repo.save(property_obj)
        logger.info(f"Property {rejected.ref_number} rejected: {rejected.rejection_reason}")

        await self.notifier.property_rejected(rejected, await self._owner(rejected))
        return rejected

    async def soft_delete_property(self, property_id: uuid.UUID) -> Property:
        property_obj = await self._get_property(property_id)
        property_obj.soft_delete()
        removed = await self.property_repo.save(property_obj)
        logger.info(f"Property {removed.ref_number} soft-deleted")
        return removed

    async def restore_property(self, property_id: uuid.UUID) -> Property:
        property_obj = await self._get_property(property_id)
        property_obj.restore()
        restored = await self.property_repo.save(property_obj)
        logger.info(f"Property {restored.ref_number} restored as {restored.status.value}")
        return restored

    async def _owner(self, property_obj: Property) -> Optional[User]:
        if property_obj.seller_id is None:
            return None
        return await self.user_repo.get_by_id(property_obj.seller_id)

    async def stats(self) -> Dict[str, Any]:
        """Dashboard counts."""
        try:
            by_status = await self.property_repo.count_by_status()
            total_sellers = await self.user_repo.count_sellers()
            new_sellers = await self.user_repo.count_sellers(since=utc_now() - timedelta(days=7))
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to compute stats: {e}")
            raise BadRequestError(f"Failed to compute stats: {str(e)}")

        return {
            "total_properties": sum(by_status.values()),
            "active": by_status.get(PropertyStatus.ACTIVE, 0),
            "pending": by_status.get(PropertyStatus.PENDING, 0),
            "rejected": by_status.get(PropertyStatus.REJECTED, 0),
            "inactive": by_status.get(PropertyStatus.INACTIVE, 0),
            "total_sellers": total_sellers,
            "new_sellers_7d": new_sellers,
        }
