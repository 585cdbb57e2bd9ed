# This project was developed with assistance from AI tools.
"""Resubmission tracker.

Replaces a rejected or change-requested document with a new one in the same
submission. The original stays untouched for the audit trail and is linked
from the replacement through ``original_document_id``; its review notes are
read back through that link rather than copied.
"""

import logging
from collections.abc import Sequence

from db import SubmissionDocument
from db.enums import ReviewStatus
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.review import ReviewFeedback
from ..schemas.submission import FileUpload
from .audit import write_audit_event
from .exceptions import InvalidStateError, ValidationError
from .rollup import document_status, refresh_parent_statuses, superseded_ids
from .submission import build_files, get_document, get_submission, save_document

logger = logging.getLogger(__name__)


async def create_resubmission(
    session: AsyncSession,
    original_document_id: int,
    files: Sequence[FileUpload],
    *,
    uploaded_by: str | None = None,
) -> SubmissionDocument:
    """Create the replacement for a rejected/change-requested document.

    Raises:
        ValidationError: Unknown document id or invalid file metadata.
        InvalidStateError: The original is not rejected/change_requested, or
            it already has a replacement.
    """
    try:
        original = await get_document(session, original_document_id, for_update=True)
        if original is None:
            raise ValidationError(f"Document #{original_document_id} not found")

        current = document_status(original)
        if current not in ReviewStatus.resubmittable():
            raise InvalidStateError(
                f"Document #{original_document_id} is {current.value}; only rejected or "
                "change-requested documents can be resubmitted."
            )

        submission = await get_submission(session, original.submission_id, for_update=True)
        if submission is None:
            raise ValidationError(f"Submission #{original.submission_id} not found")
        if original.id in superseded_ids(submission.documents):
            raise InvalidStateError(
                f"Document #{original_document_id} already has a resubmission; "
                "resubmit the latest version instead."
            )

        replacement = SubmissionDocument(
            doc_type=original.doc_type,
            title=original.title,
            status=ReviewStatus.PENDING,
            is_reupload=True,
            original_document_id=original.id,
            uploaded_by=uploaded_by,
            files=build_files(files),
        )
        submission.documents.append(replacement)
        refresh_parent_statuses(replacement, submission)
        await save_document(session, replacement)

        await write_audit_event(
            session,
            event_type="resubmission_created",
            user_id=uploaded_by,
            submission_id=submission.id,
            document_id=replacement.id,
            event_data={
                "original_document_id": original.id,
                "original_status": current.value,
                "doc_type": original.doc_type,
                "file_count": len(replacement.files),
            },
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        "Document %s resubmitted as %s (%s)", original_document_id, replacement.id, original.doc_type
    )
    return replacement


async def get_rejection_history(
    session: AsyncSession,
    document_id: int,
) -> list[ReviewFeedback]:
    """Return review feedback from every predecessor of a document, newest first."""
    document = await get_document(session, document_id)
    if document is None:
        raise ValidationError(f"Document #{document_id} not found")

    history: list[ReviewFeedback] = []
    seen = {document.id}
    current = document
    while current.original_document_id is not None:
        predecessor = await get_document(session, current.original_document_id)
        if predecessor is None or predecessor.id in seen:
            break
        seen.add(predecessor.id)
        history.extend(
            ReviewFeedback(
                document_id=predecessor.id,
                file_id=f.id,
                file_name=f.file_name,
                status=f.status,
                review_notes=f.review_notes or "",
                reviewer_id=f.reviewer_id,
                reviewed_at=f.reviewed_at,
            )
            for f in predecessor.files
        )
        current = predecessor
    return history
