# This project was developed with assistance from AI tools.
"""Review decision and resubmission schemas."""

from datetime import datetime

from db.enums import ReviewStatus
from pydantic import BaseModel


class ReviewOutcome(BaseModel):
    """Result of a decision: what was written and the recomputed parent statuses."""

    file_ids: list[int]
    document_id: int
    submission_id: int
    decision: ReviewStatus
    document_status: ReviewStatus
    submission_status: ReviewStatus
    reviewed_at: datetime


class ReviewFeedback(BaseModel):
    """A predecessor file's decision, exposed read-only through a resubmission link."""

    document_id: int
    file_id: int
    file_name: str
    status: ReviewStatus
    review_notes: str
    reviewer_id: str | None = None
    reviewed_at: datetime | None = None
