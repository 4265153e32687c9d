"""
Property service for managing listings with ownership and workflow rules.
Handles CRUD, public browsing, image uploads and location autocomplete.
"""

from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from realty.config import settings
from realty.repositories.property import PropertyRepository, PropertySearchFilters
from realty.repositories.user import UserRepository
from realty.models.property import Property, PropertyStatus, WORKFLOW_FIELDS
from realty.models.user import User
from realty.database import utc_now
from realty.schemas.property import PropertyCreate, PropertyUpdate
from realty.utils.file_utils import FileValidator, FileStorage, listing_folder
from realty.utils.exceptions import (
    APIException,
    NotFoundError,
    BadRequestError,
    InsufficientPermissionsError,
    PropertyNotFoundError,
    PropertyOwnershipError,
    SellerDeletedError,
    SellerNotActivatedError,
)
import uuid
import logging

logger = logging.getLogger(__name__)

LOCATION_SCAN_LIMIT = 200
LOCATION_RESULT_LIMIT = 20


def parse_uuid(value: Any, label: str = "ID") -> uuid.UUID:
    """Parse a UUID coming from a request body or query."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid {label}: {value}")


def _drop_nulls(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop explicit nulls for columns that cannot hold them."""
    columns = Property.__table__.c
    return {
        key: value for key, value in data.items()
        if value is not None or key not in columns or columns[key].nullable
    }


class PropertyService:
    """
    Property service for managing listings.
    Only admins may move a listing to `active`; sellers always submit `pending`.
    """

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.storage = storage or FileStorage()

    async def list_properties(
        self,
        current_user: Optional[User],
        status: Optional[PropertyStatus] = None,
        page: int = 1,
        page_size: Optional[int] = None,
        **filters: Any
    ) -> Tuple[List[Property], int]:
        """
        Browse listings. Without an explicit status only published listings are returned.

        Raises:
            ForbiddenError: If a non-admin asks for a status other than active
        """
        is_admin = current_user is not None and current_user.is_admin
        requested = status or PropertyStatus.ACTIVE
        if requested != PropertyStatus.ACTIVE and not is_admin:
            raise InsufficientPermissionsError(f"list {requested.value} properties")

        page = max(page, 1)
        page_size = min(page_size or settings.default_page_size, settings.max_page_size)

        search_filters = PropertySearchFilters(
            status=requested,
            include_removed=is_admin and requested == PropertyStatus.INACTIVE,
            city=filters.get("city"),
            country=filters.get("country"),
            property_type=filters.get("property_type"),
            min_price=filters.get("min_price"),
            max_price=filters.get("max_price"),
            min_rooms=filters.get("min_rooms"),
            search_text=filters.get("q"),
        )
        return await self.property_repo.search_properties(
            search_filters, skip=(page - 1) * page_size, limit=page_size
        )

    async def get_property(self, property_id: uuid.UUID, current_user: Optional[User] = None) -> Property:
        """
        Get a listing with visibility rules applied.

        Admins see everything, owners see their own listings in any state,
        everybody else only sees published ones. Hidden listings are a 404.
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if property_obj is None:
            raise PropertyNotFoundError(str(property_id))

        if property_obj.is_published:
            return property_obj
        if current_user is not None and current_user.can_manage_property(property_obj.seller_id):
            return property_obj

        logger.debug(f"Property {property_id} hidden from caller")
        raise PropertyNotFoundError(str(property_id))

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a listing.

        Sellers always submit a pending listing they own. Admins may assign an
        owner and publish directly.

        Raises:
            ForbiddenError: If the caller may not list properties
            NotFoundError: If the assigned seller does not exist
        """
        try:
            data = _drop_nulls(property_data.model_dump(exclude_unset=True))
            seller_id = data.pop("seller_id", None)
            requested_status = data.pop("status", None)
            property_obj = Property(**data)

            if current_user.is_admin:
                if seller_id:
                    seller = await self._require_listing_seller(parse_uuid(seller_id, "seller ID"))
                    property_obj.seller_id = seller.id
                    property_obj.submitted_by_id = seller.id
                if requested_status == PropertyStatus.PENDING:
                    property_obj.status = PropertyStatus.PENDING
                else:
                    property_obj.approve()
            elif current_user.is_seller:
                self._check_seller_can_list(current_user)
                property_obj.seller_id = current_user.id
                property_obj.submitted_by_id = current_user.id
                property_obj.status = PropertyStatus.PENDING
                property_obj.submitted_at = utc_now()
            else:
                raise InsufficientPermissionsError("create properties")

            created = await self.property_repo.create_property(property_obj)
            logger.info(f"Property created by {current_user.email}: {created.ref_number} ({created.status.value})")
            return created

        except APIException:
            raise
        except ValueError as e:
            raise BadRequestError(str(e))
        except Exception as e:
            logger.error(f"Failed to create property for user {current_user.id}: {e}")
            raise BadRequestError(f"Failed to create property: {str(e)}")

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Update a listing. Workflow fields are ignored for sellers.

        Raises:
            NotFoundError: If the listing doesn't exist
            ForbiddenError: If the caller doesn't own it or may not list
        """
        try:
            property_obj = await self._get_managed_property(property_id, current_user)
            update_data = _drop_nulls(property_data.model_dump(exclude_unset=True))

            if current_user.is_admin:
                await self._apply_admin_fields(property_obj, update_data)
            else:
                for field in WORKFLOW_FIELDS + ("seller_id",):
                    update_data.pop(field, None)

            for field, value in update_data.items():
                setattr(property_obj, field, value)

            property_obj.validate_all()
            updated = await self.property_repo.save(property_obj)
            logger.info(f"Property {updated.ref_number} updated by {current_user.email}")
            return updated

        except APIException:
            raise
        except ValueError as e:
            raise BadRequestError(str(e))
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise BadRequestError(f"Failed to update property: {str(e)}")

    async def _apply_admin_fields(self, property_obj: Property, update_data: Dict[str, Any]) -> None:
        """Consume owner and status changes from an admin update payload."""
        if "seller_id" in update_data:
            seller_id = update_data.pop("seller_id")
            if seller_id:
                seller = await self._require_listing_seller(parse_uuid(seller_id, "seller ID"))
                property_obj.seller_id = seller.id
            else:
                property_obj.seller_id = None

        if update_data.get("submitted_by_id"):
            update_data["submitted_by_id"] = parse_uuid(update_data["submitted_by_id"], "submitter ID")

        status = update_data.pop("status", None)
        if status == PropertyStatus.ACTIVE:
            property_obj.approve()
            update_data.pop("published_at", None)
            update_data.pop("rejection_reason", None)
        elif status is not None:
            property_obj.status = status
            if status == PropertyStatus.PENDING and property_obj.submitted_at is None:
                property_obj.submitted_at = utc_now()

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> None:
        """Hard delete a listing and its stored images."""
        property_obj = await self._get_managed_property(property_id, current_user)
        images = list(property_obj.images or [])

        await self.property_repo.delete_obj(property_obj)
        removed = self.storage.delete_urls(images, listing_folder(property_id))
        logger.info(f"Property {property_id} deleted by {current_user.email} ({removed} image files removed)")

    async def upload_images(
        self,
        property_id: uuid.UUID,
        files: List[UploadFile],
        current_user: User
    ) -> Property:
        """
        Replace a listing's images with the uploaded files.

        Raises:
            BadRequestError: If no files, too many files, or an invalid image is sent
        """
        property_obj = await self._get_managed_property(property_id, current_user)

        if not files:
            raise BadRequestError("At least one image is required")
        if len(files) > settings.max_images_per_property:
            raise BadRequestError(f"At most {settings.max_images_per_property} images are allowed")

        # Validate everything before writing anything
        validated = [await FileValidator.read_and_validate(f) for f in files]

        old_images = list(property_obj.images or [])
        folder = listing_folder(property_obj.id)
        new_urls = []
        try:
            for content, ext in validated:
                new_urls.append(await self.storage.save_bytes(folder, content, ext))
            property_obj.images = new_urls
            updated = await self.property_repo.save(property_obj)
        except Exception:
            self.storage.delete_urls(new_urls, folder)
            raise

        self.storage.delete_urls([url for url in old_images if url not in new_urls], folder)
        logger.info(f"Stored {len(new_urls)} images for property {updated.ref_number}")
        return updated

    async def get_seller_properties(self, seller_id: uuid.UUID) -> List[Property]:
        return await self.property_repo.get_by_seller(seller_id)

    async def search_locations(self, term: Optional[str]) -> List[Dict[str, str]]:
        """
        Autocomplete cities and postal codes present in listings.

        Results are unique per (postal code, city) ignoring case, sorted by
        postal code then city.
        """
        term = (term or "").strip()
        if not term:
            return []

        candidates = await self.property_repo.find_location_candidates(term, LOCATION_SCAN_LIMIT)

        seen = set()
        results = []
        for city, postal_code in candidates:
            city, postal_code = city.strip(), postal_code.strip()
            if not city and not postal_code:
                continue
            key = (postal_code.lower(), city.lower())
            if key in seen:
                continue
            seen.add(key)
            results.append({"city": city, "postal_code": postal_code})

        results.sort(key=lambda r: (r["postal_code"].lower(), r["city"].lower()))
        return results[:LOCATION_RESULT_LIMIT]

    async def _get_managed_property(self, property_id: uuid.UUID, current_user: User) -> Property:
        """Load a listing the caller may modify."""
        property_obj = await self.property_repo.get_by_id(property_id)
        if property_obj is None:
            raise PropertyNotFoundError(str(property_id))

        if not current_user.can_manage_property(property_obj.seller_id):
            raise PropertyOwnershipError()
        if current_user.is_seller:
            self._check_seller_can_list(current_user)
        return property_obj

    async def _require_listing_seller(self, seller_id: uuid.UUID) -> User:
        seller = await self.user_repo.get_seller(seller_id)
        if seller is None:
            raise NotFoundError("Seller", str(seller_id))
        self._check_seller_can_list(seller)
        return seller

    @staticmethod
    def _check_seller_can_list(seller: User) -> None:
        if seller.can_list_properties:
            return
        if seller.is_deleted:
            raise SellerDeletedError()
        raise SellerNotActivatedError()
