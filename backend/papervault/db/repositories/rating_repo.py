"""Rating log access and the transactional aggregate update."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import PaperModel, RatingLogModel
from ...domain.paper import RatingSummary


class RatingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_value(self, paper_id: str, user_id: str) -> Optional[int]:
        stmt = select(RatingLogModel.value).where(
            RatingLogModel.paper_id == paper_id, RatingLogModel.user_id == user_id
        )
        return self.session.scalars(stmt).first()

    def values_for(self, paper_id: str) -> list[int]:
        stmt = select(RatingLogModel.value).where(RatingLogModel.paper_id == paper_id)
        return list(self.session.scalars(stmt).all())

    def apply(self, paper_id: str, user_id: str, value: int) -> Optional[RatingSummary]:
        """Run one read-modify-write attempt as a single transaction.

        Returns None when the paper does not exist. Raises StaleDataError or
        IntegrityError when a concurrent writer won; the transaction is rolled
        back and the caller decides whether to retry.
        """
        try:
            paper = self.session.scalars(
                select(PaperModel)
                .where(PaperModel.id == paper_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).first()
            if paper is None:
                self.session.rollback()
                return None

            entry = self.session.scalars(
                select(RatingLogModel)
                .where(RatingLogModel.paper_id == paper_id, RatingLogModel.user_id == user_id)
                .execution_options(populate_existing=True)
            ).first()

            count = paper.ratings_count or 0
            # Votes are integers, so the sum is too; rounding drops float drift.
            total = round((paper.average_rating or 0.0) * count)
            if entry is not None:
                total += value - entry.value
                entry.value = value
            else:
                total += value
                count += 1
                self.session.add(RatingLogModel(paper_id=paper_id, user_id=user_id, value=value))

            paper.ratings_count = count
            paper.average_rating = total / count
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return RatingSummary(average_rating=paper.average_rating, ratings_count=paper.ratings_count, user_rating=value)
