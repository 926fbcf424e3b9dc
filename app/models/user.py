"""
User model with authentication, verification and role management.
Handles accounts for property owners, property seekers and administrators.
"""

from sqlalchemy import String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base, utcnow
from app.utils.auth import hash_password, verify_password
from email_validator import validate_email, EmailNotValidError
from datetime import datetime, timezone
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.property import Property
    from app.models.bid import Bid


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    ADMIN = "admin"
    PROPERTY_OWNER = "property_owner"
    PROPERTY_SEEKER = "property_seeker"


def _is_unexpired(expiry: Optional[datetime]) -> bool:
    """True while an optional expiry timestamp lies in the future."""
    if expiry is None:
        return False
    # SQLite hands back naive datetimes; they are stored as UTC
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry > utcnow()


class User(Base):
    """
    User model for authentication and authorization.
    Carries the one-time tokens used for email verification and password reset.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="User's display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.PROPERTY_SEEKER,
        index=True,
        comment="User role for access control"
    )

    # Email verification
    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the email address has been verified"
    )

    verification_token: Mapped[Optional[str]] = mapped_column(
        String(128),
        nullable=True,
        index=True
    )

    verification_token_expiry: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    # Password reset
    reset_password_token: Mapped[Optional[str]] = mapped_column(
        String(128),
        nullable=True,
        index=True
    )

    reset_password_expiry: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )

    # Relationships
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="owner",
        passive_deletes=True,
        lazy="raise"
    )

    bids: Mapped[List["Bid"]] = relationship(
        "Bid",
        back_populates="bidder",
        passive_deletes=True,
        lazy="raise"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
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

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return verify_password(password, self.hashed_password)

    def set_password(self, password: str) -> None:
        """Set a new password for the user."""
        self.hashed_password = hash_password(password)

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.role == UserRole.ADMIN

    @property
    def has_valid_verification_token(self) -> bool:
        return bool(self.verification_token) and _is_unexpired(self.verification_token_expiry)

    @property
    def has_valid_reset_token(self) -> bool:
        return bool(self.reset_password_token) and _is_unexpired(self.reset_password_expiry)

    def can_manage_property(self, property_owner_id: uuid.UUID) -> bool:
        """
        Check if user can manage a specific property.

        Args:
            property_owner_id: UUID of the property's owner

        Returns:
            True if user can manage the property, False otherwise
        """
        if self.is_admin:
            return True

        return self.id == property_owner_id

    def to_summary(self) -> dict:
        """Minimal public view embedded in bids and listings."""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
        }

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).

        Returns:
            Dictionary representation of user
        """
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "is_verified": self.is_verified,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
