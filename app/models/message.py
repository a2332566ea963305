"""
Message model for property inquiries between tenants and landlords.
"""

from sqlalchemy import String, Text, DateTime, Uuid, Enum as SQLEnum, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from datetime import datetime
import enum
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.property import Property


class InquiryType(str, enum.Enum):
    """What the sender is asking about."""
    GENERAL = "general"
    VIEWING = "viewing"
    APPLICATION = "application"
    AVAILABILITY = "availability"


class MessageStatus(str, enum.Enum):
    """
    Lifecycle of a message as seen by its recipient.

    Moves forward only: unread -> read -> replied.
    """
    UNREAD = "unread"
    READ = "read"
    REPLIED = "replied"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [MessageStatus.UNREAD, MessageStatus.READ, MessageStatus.REPLIED]


class Message(Base):
    """A single inquiry or reply tied to one property."""

    __tablename__ = "messages"

    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    recipient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    reply_to_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("messages.id", ondelete="SET NULL"),
        nullable=True,
        comment="Message this one answers"
    )

    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    inquiry_type: Mapped[InquiryType] = mapped_column(
        SQLEnum(InquiryType, values_callable=lambda enum_cls: [m.value for m in enum_cls]),
        nullable=False,
        default=InquiryType.GENERAL
    )

    preferred_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    status: Mapped[MessageStatus] = mapped_column(
        SQLEnum(MessageStatus, values_callable=lambda enum_cls: [m.value for m in enum_cls]),
        nullable=False,
        default=MessageStatus.UNREAD,
        index=True
    )

    sender: Mapped["User"] = relationship(
        "User",
        foreign_keys=[sender_id],
        back_populates="sent_messages",
        lazy="selectin"
    )

    recipient: Mapped["User"] = relationship(
        "User",
        foreign_keys=[recipient_id],
        back_populates="received_messages",
        lazy="selectin"
    )

    property: Mapped["Property"] = relationship(
        "Property",
        back_populates="messages",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, subject={self.subject[:30]}, status={self.status})>"

    def involves(self, user_id: uuid.UUID) -> bool:
        """Check whether the user is the sender or the recipient."""
        return user_id in (self.sender_id, self.recipient_id)

    def advance_status(self, new_status: MessageStatus) -> bool:
        """
        Move the status forward, never backward.

        Returns:
            True if the status changed
        """
        if new_status.rank <= self.status.rank:
            return False
        self.status = new_status
        return True

    def to_dict(self) -> dict:
        """Convert message to dictionary with its parties and property summarized."""
        return {
            "id": self.id,
            "sender": _party(self.sender, self.sender_id),
            "recipient": _party(self.recipient, self.recipient_id),
            "property": _property_summary(self.property, self.property_id),
            "reply_to_id": self.reply_to_id,
            "subject": self.subject,
            "message": self.message,
            "inquiry_type": self.inquiry_type.value,
            "preferred_date": self.preferred_date,
            "phone": self.phone,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def _party(user, user_id: uuid.UUID) -> dict:
    if user is None:
        return {"id": user_id, "name": None, "email": None}
    return {"id": user.id, "name": user.name, "email": user.email}


def _property_summary(prop, property_id: uuid.UUID) -> dict:
    if prop is None:
        return {"id": property_id, "title": None, "location": None}
    return {"id": prop.id, "title": prop.title, "location": prop.location}


conversation_index = Index(
    "idx_messages_property_created",
    Message.property_id,
    Message.created_at.desc()
)
