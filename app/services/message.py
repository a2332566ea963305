"""
Message service for property inquiries and replies.
Recipients are always the property's landlord; status only moves forward.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from app.repositories.message import MessageRepository
from app.repositories.property import PropertyRepository
from app.models.message import Message, MessageStatus
from app.models.user import User
from app.schemas.message import MessageCreate, MessageReply
from app.database import utcnow
from app.utils.exceptions import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    PropertyNotFoundError,
    ValidationError
)
from app.utils.validators import ensure_utc
import uuid
import logging

logger = logging.getLogger(__name__)

MAX_SUBJECT_LENGTH = 200
REPLY_PREFIX = "Re: "


class MessageService:
    """
    Message service for inquiry threads.
    Only the two parties of a message can see or delete it.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.message_repo = MessageRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def send_message(self, message_data: MessageCreate, current_user: User) -> Message:
        """
        Send an inquiry to the landlord of a property.

        Args:
            message_data: Validated inquiry
            current_user: Sender

        Returns:
            Stored message with status unread

        Raises:
            ValidationError: If the preferred date is not in the future
            PropertyNotFoundError: If the property does not exist
            BadRequestError: If the sender owns the property
        """
        preferred_date = ensure_utc(message_data.preferred_date)
        if preferred_date is not None and preferred_date <= utcnow():
            raise ValidationError.for_field("preferredDate", "Preferred date must be in the future")

        property_obj = await self.property_repo.get_by_id(message_data.property_id)
        if not property_obj:
            raise PropertyNotFoundError(str(message_data.property_id))

        if property_obj.is_owned_by(current_user.id):
            raise BadRequestError("You cannot send a message about your own property")

        message = await self.message_repo.create({
            "sender_id": current_user.id,
            "recipient_id": property_obj.landlord_id,
            "property_id": property_obj.id,
            "subject": message_data.subject,
            "message": message_data.message,
            "inquiry_type": message_data.inquiry_type,
            "preferred_date": preferred_date,
            "phone": message_data.phone,
            "status": MessageStatus.UNREAD,
        })

        logger.info(f"Message {message.id} sent by {current_user.id} about property {property_obj.id}")
        return message

    async def get_my_messages(self, current_user: User) -> List[Message]:
        """Messages the caller sent or received, newest first."""
        return await self.message_repo.get_user_messages(current_user.id)

    async def get_property_messages(self, property_id: uuid.UUID, current_user: User) -> List[Message]:
        """
        Messages about a property visible to the caller.

        The landlord sees every message. Anyone else must have written about the
        property before and then sees only the messages they are a party to.

        Raises:
            PropertyNotFoundError: If the property does not exist
            ForbiddenError: If the caller has no standing on the property
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise PropertyNotFoundError(str(property_id))

        if property_obj.is_owned_by(current_user.id):
            return await self.message_repo.get_property_messages(property_id)

        if not await self.message_repo.has_sent_about_property(property_id, current_user.id):
            logger.warning(f"User {current_user.id} denied messages of property {property_id}")
            raise ForbiddenError("Not authorized to view messages for this property")

        return await self.message_repo.get_property_messages_for_user(property_id, current_user.id)

    async def mark_read(self, message_id: uuid.UUID, current_user: User) -> Message:
        """
        Mark a received message as read. A replied message stays replied.

        Raises:
            NotFoundError: If the message does not exist
            ForbiddenError: If the caller is not the recipient
        """
        message = await self._get_message(message_id)
        if message.recipient_id != current_user.id:
            raise ForbiddenError("Only the recipient can mark this message as read")

        if message.advance_status(MessageStatus.READ):
            message = await self.message_repo.save(message)
            logger.info(f"Message {message_id} marked read")
        return message

    async def reply(self, message_id: uuid.UUID, reply_data: MessageReply, current_user: User) -> Message:
        """
        Answer a received message and mark it replied.

        Args:
            message_id: Message being answered
            reply_data: Reply body and optional subject
            current_user: Recipient of the original message

        Returns:
            The new reply message
        """
        original = await self._get_message(message_id)
        if original.recipient_id != current_user.id:
            raise ForbiddenError("Only the recipient can reply to this message")

        if reply_data.subject:
            subject = reply_data.subject
        else:
            # Shorten the quoted subject so the prefix always fits
            quoted = original.subject[:MAX_SUBJECT_LENGTH - len(REPLY_PREFIX)].rstrip()
            subject = f"{REPLY_PREFIX}{quoted}"
        original.advance_status(MessageStatus.REPLIED)

        reply = Message(
            sender_id=current_user.id,
            recipient_id=original.sender_id,
            property_id=original.property_id,
            reply_to_id=original.id,
            subject=subject,
            message=reply_data.message,
            inquiry_type=original.inquiry_type,
            status=MessageStatus.UNREAD,
        )
        # Both rows are written in one commit
        self.db.add(original)
        reply = await self.message_repo.save(reply)

        logger.info(f"Message {message_id} replied with {reply.id}")
        return reply

    async def delete_message(self, message_id: uuid.UUID, current_user: User) -> None:
        """
        Delete a message the caller sent or received.

        Raises:
            ForbiddenError: If the caller is neither sender nor recipient
        """
        message = await self._get_message(message_id)
        if not message.involves(current_user.id):
            raise ForbiddenError("Not authorized to delete this message")

        await self.message_repo.delete(message)
        logger.info(f"Message {message_id} deleted by {current_user.id}")

    async def _get_message(self, message_id: uuid.UUID) -> Message:
        message = await self.message_repo.get_by_id(message_id)
        if not message:
            raise NotFoundError("Message", str(message_id))
        return message
