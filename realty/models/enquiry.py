"""
Enquiry model for buyer leads.
An enquiry is either general or linked to a listing.
"""

from sqlalchemy import String, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from realty.database import Base, utc_now
from datetime import datetime
import random
import uuid
from typing import Optional


def generate_enquiry_ref(is_property: bool, now: Optional[datetime] = None) -> str:
    """PROP-2025-1234 for listing enquiries, GEN-2025-1234 otherwise."""
    prefix = "PROP" if is_property else "GEN"
    year = (now or utc_now()).year
    return f"{prefix}-{year}-{random.randint(1000, 9999)}"


class Enquiry(Base):
    """Contact request left by a prospective buyer."""

    __tablename__ = "enquiries"

    ref_number: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    property_ref: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    property_title: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    message: Mapped[str] = mapped_column(Text, nullable=False)

    @property
    def is_property_enquiry(self) -> bool:
        return self.ref_number.startswith("PROP-")

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "ref_number": self.ref_number,
            "property_id": str(self.property_id) if self.property_id else None,
            "property_ref": self.property_ref,
            "property_title": self.property_title,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "message": self.message,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
