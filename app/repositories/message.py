"""
Message repository for inquiry threads between users about properties.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, func, desc
from app.repositories.base import BaseRepository
from app.models.message import Message
from typing import List
import uuid
import logging

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):
    """Repository for messages."""

    def __init__(self, db: AsyncSession):
        super().__init__(Message, db)

    async def get_user_messages(self, user_id: uuid.UUID) -> List[Message]:
        """
        Get messages the user sent or received, newest first.

        Args:
            user_id: UUID of the user

        Returns:
            List of messages
        """
        query = (
            select(Message)
            .where(or_(Message.sender_id == user_id, Message.recipient_id == user_id))
            .order_by(desc(Message.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_property_messages(self, property_id: uuid.UUID) -> List[Message]:
        """Get every message about a property, newest first."""
        query = (
            select(Message)
            .where(Message.property_id == property_id)
            .order_by(desc(Message.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_property_messages_for_user(self, property_id: uuid.UUID, user_id: uuid.UUID) -> List[Message]:
        """Get messages about a property where the user is sender or recipient, newest first."""
        query = (
            select(Message)
            .where(
                Message.property_id == property_id,
                or_(Message.sender_id == user_id, Message.recipient_id == user_id)
            )
            .order_by(desc(Message.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def has_sent_about_property(self, property_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """
        Check whether the user has sent at least one message about the property.

        Args:
            property_id: UUID of the property
            user_id: UUID of the user

        Returns:
            True if a prior message exists
        """
        query = select(func.count(Message.id)).where(
            Message.property_id == property_id,
            Message.sender_id == user_id
        )
        return (await self.db.execute(query)).scalar_one() > 0
