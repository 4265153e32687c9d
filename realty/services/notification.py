"""
Outgoing e-mail notifications.

Mail is only sent when SMTP settings are configured. Callers treat delivery
as best effort: failures are logged and never propagate into a request.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from realty.config import settings

logger = logging.getLogger(__name__)


class EmailSendError(Exception):
    """Raised when the SMTP server rejects or cannot deliver a message."""


def send_email(to_email: str, subject: str, text: str) -> None:
    """
    Send a plain text e-mail synchronously over SMTP.

    Raises:
        EmailSendError: If delivery fails
    """
    message = EmailMessage()
    message["From"] = settings.mail_from or settings.mail_user
    message["To"] = to_email
    message["Subject"] = subject
    message.set_content(text)

    try:
        with smtplib.SMTP(settings.mail_host, settings.mail_port, timeout=15) as smtp:
            if settings.mail_use_tls:
                smtp.starttls()
            if settings.mail_user and settings.mail_password:
                smtp.login(settings.mail_user, settings.mail_password)
            smtp.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        raise EmailSendError(str(e)) from e


class NotificationService:
    """Builds and dispatches the marketplace e-mails."""

    def __init__(self, sender=send_email):
        self._send = sender

    @property
    def enabled(self) -> bool:
        return settings.mail_enabled

    async def _deliver(self, to_email: Optional[str], subject: str, text: str) -> bool:
        if not self.enabled or not to_email:
            logger.debug(f"Mail disabled or no recipient, skipping '{subject}'")
            return False
        try:
            await asyncio.to_thread(self._send, to_email, subject, text)
            logger.info(f"Sent mail '{subject}' to {to_email}")
            return True
        except EmailSendError as e:
            logger.warning(f"Mail '{subject}' to {to_email} failed: {e}")
            return False

    async def enquiry_received(self, enquiry) -> None:
        """Admin notification plus an acknowledgement for the customer."""
        kind = "Property" if enquiry.is_property_enquiry else "General"
        admin_text = (
            f"Reference: {enquiry.ref_number}\n"
            f"Type: {kind} enquiry\n"
            f"Property: {enquiry.property_title} {enquiry.property_ref}\n"
            f"Name: {enquiry.name}\n"
            f"Email: {enquiry.email}\n"
            f"Phone: {enquiry.phone or 'N/A'}\n\n"
            f"{enquiry.message}\n"
        )
        await self._deliver(settings.admin_email, f"New enquiry {enquiry.ref_number}", admin_text)

        customer_text = (
            f"Dear {enquiry.name},\n\n"
            f"Thank you for your enquiry about {enquiry.property_title}. "
            f"Your reference number is {enquiry.ref_number}. We will get back to you shortly.\n"
        )
        await self._deliver(enquiry.email, f"We received your enquiry ({enquiry.ref_number})", customer_text)

    async def property_approved(self, property_obj, seller, note: Optional[str] = None) -> None:
        if seller is None:
            return
        text = (
            f"Hello {seller.full_name},\n\n"
            f"Your listing '{property_obj.title}' ({property_obj.ref_number}) is now live.\n"
        )
        if note:
            text += f"\n{note}\n"
        await self._deliver(seller.email, f"Listing approved: {property_obj.title}", text)

    async def property_rejected(self, property_obj, seller) -> None:
        if seller is None:
            return
        text = (
            f"Hello {seller.full_name},\n\n"
            f"Your listing '{property_obj.title}' ({property_obj.ref_number}) was not approved.\n"
            f"Reason: {property_obj.rejection_reason}\n"
        )
        await self._deliver(seller.email, f"Listing rejected: {property_obj.title}", text)
