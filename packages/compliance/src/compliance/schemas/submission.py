# This project was developed with assistance from AI tools.
"""Submission, document and file schemas.

The snapshot models serialize a submission tree without losing anything the
rollup needs: statuses are always recomputed from ``files[].status``.
"""

from datetime import datetime

from db.enums import ReviewStatus
from pydantic import BaseModel, ConfigDict, Field


class FileUpload(BaseModel):
    """Metadata for one uploaded artifact. Bytes live with the storage collaborator."""

    file_name: str = Field(min_length=1)
    mime_type: str
    size: int = Field(ge=0)


class FileSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    document_id: int | None = None
    file_name: str
    mime_type: str
    size: int
    status: ReviewStatus
    review_notes: str = ""
    reviewer_id: str | None = None
    reviewed_at: datetime | None = None


class DocumentSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    submission_id: int | None = None
    doc_type: str
    title: str
    status: ReviewStatus
    is_reupload: bool = False
    original_document_id: int | None = None
    files: list[FileSnapshot] = Field(min_length=1)


class SubmissionSnapshot(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    reference: str
    vendor_id: str
    period_year: int
    period_month: int = Field(ge=1, le=12)
    status: ReviewStatus
    submitted_at: datetime | None = None
    documents: list[DocumentSnapshot] = []

    @property
    def period(self) -> tuple[int, int]:
        return (self.period_year, self.period_month)
