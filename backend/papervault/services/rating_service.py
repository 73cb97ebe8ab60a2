"""Rating aggregation: one vote per user per paper, kept as a running average."""
from __future__ import annotations

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..db.repositories.paper_repo import PaperRepository
from ..db.repositories.rating_repo import RatingRepository
from ..db.repositories.user_repo import UserRepository
from ..domain.paper import RatingSummary
from ..errors import Conflict, NotFound, ValidationFailed, returns_result

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
        raise ValidationFailed(
            "Rating must be a whole number from 1 to 5.",
            errors={"value": [f"must be an integer between {MIN_RATING} and {MAX_RATING}"]},
        )
    return value


class RatingService:
    def __init__(self, session: Session, max_retries: int = 5) -> None:
        self.ratings = RatingRepository(session)
        self.papers = PaperRepository(session)
        self.users = UserRepository(session)
        self.max_retries = max(1, max_retries)

    @returns_result
    def submit_rating(self, paper_id: str, user_id: str, value: int) -> RatingSummary:
        value = validate_rating(value)
        if not self.users.exists(user_id):
            raise NotFound("User not found.")

        for attempt in range(1, self.max_retries + 1):
            try:
                summary = self.ratings.apply(paper_id, user_id, value)
            except (StaleDataError, IntegrityError) as e:
                logger.warning("rating on {} lost a race (attempt {}/{}): {}",
                               paper_id, attempt, self.max_retries, type(e).__name__)
                continue
            if summary is None:
                raise NotFound("Paper not found.")
            logger.info("user {} rated paper {} -> avg {:.2f} over {}",
                        user_id, paper_id, summary.average_rating, summary.ratings_count)
            return summary

        raise Conflict("The paper was being rated by others at the same time. Please try again.")

    @returns_result
    def get_rating(self, paper_id: str, user_id: str | None) -> RatingSummary:
        paper = self.papers.get(paper_id)
        if paper is None:
            raise NotFound("Paper not found.")
        user_rating = self.ratings.get_value(paper_id, user_id) if user_id else None
        return RatingSummary(
            average_rating=paper.average_rating,
            ratings_count=paper.ratings_count,
            user_rating=user_rating,
        )
