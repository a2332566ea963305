"""
User model with authentication and role management.
Handles accounts for landlords and tenants.
"""

from sqlalchemy import String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from app.utils.auth import hash_password, verify_password
import enum
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.property import Property
    from app.models.message import Message
    from app.models.review import Review
    from app.models.favorite import Favorite


class UserRole(str, enum.Enum):
    """User role enumeration."""
    LANDLORD = "landlord"
    TENANT = "tenant"


class User(Base):
    """
    User model for authentication and authorization.
    Landlords list properties; tenants browse, favorite and inquire.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Login email - unique, stored lowercase"
    )

    phone_no: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
        comment="Ten digit phone number - unique"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, values_callable=lambda enum_cls: [member.value for member in enum_cls]),
        nullable=False,
        default=UserRole.TENANT,
        index=True,
        comment="landlord or tenant"
    )

    # Owned records are removed together with the account
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="landlord",
        cascade="all, delete-orphan",
        order_by="Property.created_at.desc()"
    )

    sent_messages: Mapped[List["Message"]] = relationship(
        "Message",
        foreign_keys="Message.sender_id",
        back_populates="sender",
        cascade="all, delete-orphan"
    )

    received_messages: Mapped[List["Message"]] = relationship(
        "Message",
        foreign_keys="Message.recipient_id",
        back_populates="recipient",
        cascade="all, delete-orphan"
    )

    favorites: Mapped[List["Favorite"]] = relationship(
        "Favorite",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Favorite.created_at"
    )

    review: Mapped["Review"] = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    def set_password(self, password: str) -> None:
        """Hash and store a new password."""
        self.hashed_password = hash_password(password)

    def verify_password(self, password: str) -> bool:
        """Check a plain text password against the stored hash."""
        return verify_password(password, self.hashed_password)

    @property
    def is_landlord(self) -> bool:
        """Check if user has the landlord role."""
        return self.role == UserRole.LANDLORD

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).

        Favorites are not included; callers add them from the favorites table.
        """
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone_no": self.phone_no,
            "role": self.role.value,
            "created_at": self.created_at,
        }

    def to_public_dict(self) -> dict:
        """Fields other users may see when a record references this user."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone_no": self.phone_no,
        }
