"""
User model with authentication and role management.
Handles seller accounts and administrators in a single table.
"""

from sqlalchemy import String, Boolean, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from realty.database import Base
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
import enum
import uuid
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from realty.models.property import Property

# pbkdf2_sha256 has no 72-byte password limit and no bcrypt backend version issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    SELLER = "seller"
    ADMIN = "admin"


class User(Base):
    """
    User model for authentication and authorization.
    Sellers carry a profile and two moderation flags: activation and soft delete.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.SELLER,
        index=True
    )

    # Seller profile
    company: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    pincode: Mapped[str] = mapped_column(String(20), nullable=False, default="")

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Sellers must be activated by an admin before listing"
    )

    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Seller soft-delete flag"
    )

    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="seller",
        foreign_keys="Property.seller_id",
        lazy="raise",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password.

        Raises:
            ValueError: If the password is shorter than 6 characters
        """
        if not password or len(password) < 6:
            raise ValueError("Password must be at least 6 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    def set_password(self, password: str) -> None:
        """Set a new password for the user."""
        self.hashed_password = self.hash_password(password)

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == UserRole.ADMIN

    @property
    def is_seller(self) -> bool:
        """Check if user has seller role."""
        return self.role == UserRole.SELLER

    @property
    def can_list_properties(self) -> bool:
        """A seller may submit listings only while activated and not deleted."""
        if self.is_admin:
            return True
        return self.is_active and not self.is_deleted

    def can_manage_property(self, property_seller_id: uuid.UUID) -> bool:
        """
        Check if user can manage a specific property.

        Admins manage every listing; sellers only their own.
        """
        if self.is_admin:
            return True

        return property_seller_id is not None and self.id == property_seller_id

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).
        """
        return {
            "id": str(self.id),
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role.value,
            "company": self.company,
            "phone": self.phone,
            "city": self.city,
            "pincode": self.pincode,
            "is_active": self.is_active,
            "is_deleted": self.is_deleted,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
