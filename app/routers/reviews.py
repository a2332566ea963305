"""
Review API endpoints for platform feedback.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import List
from uuid import UUID

from app.config import settings
from app.models.user import User
from app.services.review import ReviewService
from app.schemas.common import DataResponse, MessageOnlyResponse
from app.schemas.review import ReviewWrite, ReviewResponse
from app.schemas.error import get_crud_error_responses, get_public_error_responses, get_auth_error_responses
from app.utils.dependencies import get_current_user, get_review_service


router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get(
    "",
    response_model=DataResponse[List[ReviewResponse]],
    summary="Latest reviews",
    responses=get_public_error_responses()
)
async def list_reviews(
    limit: int = Query(settings.reviews_limit, ge=1, le=settings.max_page_size),
    review_service: ReviewService = Depends(get_review_service)
) -> DataResponse[List[ReviewResponse]]:
    """Most recent reviews, newest first."""
    reviews = await review_service.get_latest_reviews(limit)
    return DataResponse(data=[ReviewResponse.model_validate(r.to_dict()) for r in reviews])


@router.post(
    "",
    response_model=DataResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review the platform",
    description="Each user may leave one review",
    responses=get_auth_error_responses()
)
async def create_review(
    review_data: ReviewWrite,
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
) -> DataResponse[ReviewResponse]:
    """
    Leave a review.

    Raises:
        DuplicateReviewError: If the caller already reviewed the platform
    """
    review = await review_service.create_review(review_data.comment, current_user)
    return DataResponse(message="Review submitted successfully", data=ReviewResponse.model_validate(review.to_dict()))


@router.put(
    "/{review_id}",
    response_model=DataResponse[ReviewResponse],
    summary="Edit review",
    responses=get_crud_error_responses()
)
async def update_review(
    review_data: ReviewWrite,
    review_id: UUID = Path(..., description="Review ID"),
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
) -> DataResponse[ReviewResponse]:
    """Change the text of the caller's review."""
    review = await review_service.update_review(review_id, review_data.comment, current_user)
    return DataResponse(message="Review updated successfully", data=ReviewResponse.model_validate(review.to_dict()))


@router.delete(
    "/{review_id}",
    response_model=MessageOnlyResponse,
    summary="Delete review",
    responses=get_crud_error_responses()
)
async def delete_review(
    review_id: UUID = Path(..., description="Review ID"),
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
) -> MessageOnlyResponse:
    """Delete the caller's review."""
    await review_service.delete_review(review_id, current_user)
    return MessageOnlyResponse(message="Review deleted successfully")
