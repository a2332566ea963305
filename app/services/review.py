"""
Review service for platform feedback.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from app.repositories.review import ReviewRepository
from app.models.review import Review
from app.models.user import User
from app.utils.exceptions import DuplicateReviewError, ForbiddenError, NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class ReviewService:
    """Review service; each user reviews the platform at most once."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.review_repo = ReviewRepository(db_session)

    async def get_latest_reviews(self, limit: int = 6) -> List[Review]:
        """Latest reviews, newest first."""
        return await self.review_repo.get_latest(limit)

    async def create_review(self, comment: str, current_user: User) -> Review:
        """
        Store the caller's review with a snapshot of their name and role.

        Args:
            comment: Review text
            current_user: Author

        Returns:
            Created review

        Raises:
            DuplicateReviewError: If the caller has already reviewed the platform
        """
        if await self.review_repo.get_by_user(current_user.id):
            raise DuplicateReviewError()

        try:
            review = await self.review_repo.create({
                "user_id": current_user.id,
                "comment": comment,
                "user_name": current_user.name,
                "user_role": current_user.role.value,
            })
        except IntegrityError:
            # A concurrent request from the same user got there first
            raise DuplicateReviewError()

        logger.info(f"Review {review.id} created by user {current_user.id}")
        return review

    async def update_review(self, review_id: uuid.UUID, comment: str, current_user: User) -> Review:
        """
        Change the text of the caller's review.

        Raises:
            NotFoundError: If the review does not exist
            ForbiddenError: If the caller did not write it
        """
        review = await self._get_own_review(review_id, current_user)
        updated = await self.review_repo.update(review, {"comment": comment})
        logger.info(f"Review {review_id} updated")
        return updated

    async def delete_review(self, review_id: uuid.UUID, current_user: User) -> None:
        """Delete the caller's review."""
        review = await self._get_own_review(review_id, current_user)
        await self.review_repo.delete(review)
        logger.info(f"Review {review_id} deleted")

    async def _get_own_review(self, review_id: uuid.UUID, current_user: User) -> Review:
        review = await self.review_repo.get_by_id(review_id)
        if not review:
            raise NotFoundError("Review", str(review_id))
        if review.user_id != current_user.id:
            raise ForbiddenError("Not authorized to modify this review")
        return review
