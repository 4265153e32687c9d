"""
Enquiry service: lead capture from the public site.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from realty.repositories.enquiry import EnquiryRepository
from realty.repositories.property import PropertyRepository
from realty.models.enquiry import Enquiry, generate_enquiry_ref
from realty.schemas.enquiry import EnquiryCreate
from realty.services.notification import NotificationService
from realty.utils.exceptions import BadRequestError, NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class EnquiryService:

    def __init__(self, db_session: AsyncSession, notifier: Optional[NotificationService] = None):
        self.db = db_session
        self.enquiry_repo = EnquiryRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.notifier = notifier or NotificationService()

    async def submit(self, data: EnquiryCreate) -> Enquiry:
        """
        Store an enquiry and send the optional notifications.

        A property_id that resolves to a listing links the enquiry and fills a
        missing title and reference. A lookup that fails is ignored.

        Raises:
            BadRequestError: If name, email or message is missing
        """
        name = (data.name or "").strip()
        email = (data.email or "").strip()
        message = (data.message or "").strip()
        if not name or not email or not message:
            raise BadRequestError("Missing required fields")

        property_title = (data.property_title or "").strip()
        property_ref = (data.property_ref or "").strip()
        linked = await self._find_property(data.property_id)
        if linked is not None:
            property_title = property_title or linked.title
            property_ref = property_ref or (linked.ref_number or "")

        is_property = linked is not None or bool(property_title or property_ref)
        if not property_title:
            property_title = "Property Enquiry" if is_property else "General Enquiry"

        enquiry = Enquiry(
            ref_number=generate_enquiry_ref(is_property),
            property_id=linked.id if linked is not None else None,
            property_ref=property_ref,
            property_title=property_title,
            name=name,
            email=email,
            phone=(data.phone or "").strip(),
            message=message,
        )
        created = await self.enquiry_repo.add(enquiry)
        logger.info(f"Enquiry {created.ref_number} received from {created.email}")

        await self.notifier.enquiry_received(created)
        return created

    async def _find_property(self, property_id: Optional[str]):
        if not property_id:
            return None
        try:
            return await self.property_repo.get_by_id(uuid.UUID(str(property_id)))
        except ValueError:
            logger.debug(f"Ignoring malformed property id on enquiry: {property_id}")
            return None

    async def list_enquiries(self) -> List[Enquiry]:
        return await self.enquiry_repo.list_recent()

    async def delete_enquiry(self, enquiry_id: uuid.UUID) -> None:
        if not await self.enquiry_repo.delete(enquiry_id):
            raise NotFoundError("Enquiry", str(enquiry_id))
        logger.info(f"Enquiry {enquiry_id} deleted")
