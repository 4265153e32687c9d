"""
Property model for marketplace listings.
Holds listing details, location data, the moderation status and soft-delete flags.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, DateTime, JSON, Enum as SQLEnum, Index, ForeignKey, Uuid, inspect
from sqlalchemy.orm import Mapped, mapped_column, relationship
from realty.database import Base, utc_now
from datetime import datetime
from decimal import Decimal
import enum
import random
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from realty.models.user import User


class PropertyStatus(str, enum.Enum):
    """Moderation status of a listing."""
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    REJECTED = "rejected"
    ARCHIVED = "archived"


# Fields only an admin may write through the update endpoint
WORKFLOW_FIELDS = (
    "status",
    "published_at",
    "submitted_at",
    "submitted_by_id",
    "rejection_reason",
    "owner_removed",
    "deleted_at",
)



def generate_ref_number(now: Optional[datetime] = None) -> str:
    """Human-readable listing reference such as PROP-2025-123456."""
    year = (now or utc_now()).year
    return f"PROP-{year}-{random.randint(100000, 999999)}"


class Property(Base):
    """
    Property listing owned by a seller.

    Lifecycle: pending -> active (approve) or rejected (reject); any state
    -> inactive with owner_removed set (soft delete) and back (restore).
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True
    )

    ref_number: Mapped[Optional[str]] = mapped_column(
        String(32),
        unique=True,
        nullable=True,
        comment="Human-readable listing reference"
    )

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=True,
        index=True
    )

    square_meters: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    property_type: Mapped[Optional[str]] = mapped_column(String(60), nullable=True, index=True)

    # Location
    place: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    zip: Mapped[str] = mapped_column(String(20), nullable=False, default="", index=True)
    city: Mapped[str] = mapped_column(String(120), nullable=False, default="", index=True)
    country: Mapped[str] = mapped_column(String(120), nullable=False, default="", index=True)

    # Features
    pool: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    parking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    garden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    agent_number: Mapped[str] = mapped_column(String(40), nullable=False, default="")

    # Ownership
    seller_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    submitted_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Moderation workflow
    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        nullable=False,
        default=PropertyStatus.PENDING,
        index=True
    )

    rejection_reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Soft delete
    owner_removed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    seller: Mapped[Optional["User"]] = relationship(
        "User",
        back_populates="properties",
        foreign_keys=[seller_id],
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, ref={self.ref_number}, status={self.status})>"

    @property
    def is_published(self) -> bool:
        """Visible to the public: approved and not removed."""
        return self.status == PropertyStatus.ACTIVE and not self.owner_removed

    def prepare_new(self) -> None:
        """Fill defaults a new listing needs before its first insert."""
        if not self.ref_number:
            self.ref_number = generate_ref_number()
        if self.status is None:
            self.status = PropertyStatus.PENDING
        if self.status == PropertyStatus.PENDING and self.submitted_at is None:
            self.submitted_at = utc_now()

    def approve(self) -> None:
        self.status = PropertyStatus.ACTIVE
        self.published_at = utc_now()
        self.rejection_reason = ""

    def reject(self, reason: str) -> None:
        reason = (reason or "").strip()
        if not reason:
            raise ValueError("A rejection reason is required")
        self.status = PropertyStatus.REJECTED
        self.rejection_reason = reason

    def soft_delete(self) -> None:
        self.status = PropertyStatus.INACTIVE
        self.owner_removed = True
        self.deleted_at = utc_now()

    def restore(self) -> None:
        """
        Undo a soft delete. Listings that were never published go back to
        the moderation queue instead of becoming active.
        """
        self.owner_removed = False
        self.deleted_at = None
        self.status = PropertyStatus.ACTIVE if self.published_at else PropertyStatus.PENDING

    def validate_all(self) -> None:
        """
        Run numeric sanity checks on the listing.

        Raises:
            ValueError: If any validation fails
        """
        if self.price is not None and self.price < 0:
            raise ValueError("Property price cannot be negative")
        for field in ("square_meters", "rooms", "bathrooms"):
            value = getattr(self, field)
            if value is not None and value < 0:
                raise ValueError(f"{field} cannot be negative")

    def to_dict(self, include_seller: bool = False) -> dict:
        """
        Convert property to dictionary.

        Args:
            include_seller: Whether to include the seller's name and email
        """
        result = {
            "id": str(self.id),
            "ref_number": self.ref_number,
            "title": self.title,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
            "square_meters": self.square_meters,
            "rooms": self.rooms,
            "bathrooms": self.bathrooms,
            "property_type": self.property_type,
            "place": self.place,
            "zip": self.zip,
            "city": self.city,
            "country": self.country,
            "pool": self.pool,
            "parking": self.parking,
            "garden": self.garden,
            "amenities": list(self.amenities or []),
            "images": list(self.images or []),
            "agent_number": self.agent_number,
            "seller_id": str(self.seller_id) if self.seller_id else None,
            "submitted_by_id": str(self.submitted_by_id) if self.submitted_by_id else None,
            "status": self.status.value,
            "rejection_reason": self.rejection_reason,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "owner_removed": self.owner_removed,
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_seller:
            # Never trigger a lazy load here; async sessions cannot do implicit IO
            seller = None if "seller" in inspect(self).unloaded else self.seller
            result["seller"] = (
                {"id": str(seller.id), "name": seller.full_name, "email": seller.email}
                if seller else None
            )

        return result


# Public browse: status + removal flag, newest first
status_listing_index = Index(
    "idx_properties_status_removed_created",
    Property.status,
    Property.owner_removed,
    Property.created_at.desc()
)

# Seller dashboards and cascades
seller_status_index = Index(
    "idx_properties_seller_status",
    Property.seller_id,
    Property.status
)

# Location filters
location_index = Index(
    "idx_properties_city_country",
    Property.city,
    Property.country
)
