"""
Review model for platform feedback.
Each user may leave a single review.
"""

from sqlalchemy import String, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User


class Review(Base):
    """Platform review with a snapshot of the author's name and role."""

    __tablename__ = "reviews"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="Author - unique, one review per user"
    )

    comment: Mapped[str] = mapped_column(String(1000), nullable=False)

    user_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Author name at the time of writing"
    )

    user_role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Author role at the time of writing"
    )

    user: Mapped["User"] = relationship("User", back_populates="review")

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, user_id={self.user_id})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "comment": self.comment,
            "user_name": self.user_name,
            "user_role": self.user_role,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
