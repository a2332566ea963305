"""
Message API endpoints for property inquiries.
All routes require a signed-in user.
"""

from fastapi import APIRouter, Depends, status, Path
from typing import List
from uuid import UUID

from app.models.user import User
from app.services.message import MessageService
from app.schemas.common import DataResponse, MessageOnlyResponse
from app.schemas.message import MessageCreate, MessageReply, MessageResponse
from app.schemas.error import get_crud_error_responses, get_auth_error_responses
from app.utils.dependencies import get_current_user, get_message_service


router = APIRouter(prefix="/message", tags=["Messages"])


@router.post(
    "/send",
    response_model=DataResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Send inquiry",
    description="Send a message to the landlord of a property",
    responses=get_auth_error_responses()
)
async def send_message(
    message_data: MessageCreate,
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service)
) -> DataResponse[MessageResponse]:
    """
    Send an inquiry about a property.

    Args:
        message_data: Inquiry content
        current_user: Sender
        message_service: Message service instance

    Returns:
        Stored message
    """
    message = await message_service.send_message(message_data, current_user)
    return DataResponse(message="Message sent successfully", data=MessageResponse.model_validate(message.to_dict()))


@router.get(
    "/my-messages",
    response_model=DataResponse[List[MessageResponse]],
    summary="My messages",
    description="Messages the signed-in user sent or received, newest first",
    responses=get_auth_error_responses()
)
async def my_messages(
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service)
) -> DataResponse[List[MessageResponse]]:
    """Messages involving the caller."""
    messages = await message_service.get_my_messages(current_user)
    return DataResponse(data=[MessageResponse.model_validate(m.to_dict()) for m in messages])


@router.get(
    "/property/{property_id}",
    response_model=DataResponse[List[MessageResponse]],
    summary="Messages for a property",
    description="All messages for the landlord; a prior inquirer sees their own conversation",
    responses=get_crud_error_responses()
)
async def property_messages(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service)
) -> DataResponse[List[MessageResponse]]:
    """
    Messages about one property.

    Raises:
        PropertyNotFoundError: If the property doesn't exist
        ForbiddenError: If the caller is neither landlord nor a prior inquirer
    """
    messages = await message_service.get_property_messages(property_id, current_user)
    return DataResponse(data=[MessageResponse.model_validate(m.to_dict()) for m in messages])


@router.put(
    "/mark-read/{message_id}",
    response_model=DataResponse[MessageResponse],
    summary="Mark message as read",
    responses=get_crud_error_responses()
)
async def mark_read(
    message_id: UUID = Path(..., description="Message ID"),
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service)
) -> DataResponse[MessageResponse]:
    """Mark a received message as read."""
    message = await message_service.mark_read(message_id, current_user)
    return DataResponse(data=MessageResponse.model_validate(message.to_dict()))


@router.post(
    "/reply/{message_id}",
    response_model=DataResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Reply to message",
    description="Answer a received message; the original is marked replied",
    responses=get_crud_error_responses()
)
async def reply_to_message(
    reply_data: MessageReply,
    message_id: UUID = Path(..., description="Message ID"),
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service)
) -> DataResponse[MessageResponse]:
    """Reply to a received message."""
    reply = await message_service.reply(message_id, reply_data, current_user)
    return DataResponse(message="Reply sent successfully", data=MessageResponse.model_validate(reply.to_dict()))


@router.delete(
    "/delete/{message_id}",
    response_model=MessageOnlyResponse,
    summary="Delete message",
    responses=get_crud_error_responses()
)
async def delete_message(
    message_id: UUID = Path(..., description="Message ID"),
    current_user: User = Depends(get_current_user),
    message_service: MessageService = Depends(get_message_service)
) -> MessageOnlyResponse:
    """Delete a message the caller sent or received."""
    await message_service.delete_message(message_id, current_user)
    return MessageOnlyResponse(message="Message deleted successfully")
