# This project was developed with assistance from AI tools.
"""Review decision recorder.

Individual and bulk review share one validation path and one rollup path:
a decision needs a non-pending status and non-empty remarks (approvals
included), is written to the file(s), and the document and submission caches
are recomputed in the same transaction. The document row is locked first,
then its submission, so concurrent decisions on sibling files serialize.
"""

import logging

from db import SubmissionDocument, VendorSubmission
from db.enums import ReviewStatus
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import Clock, utc_now
from ..core.config import settings
from ..schemas.review import ReviewOutcome
from .audit import write_audit_event
from .exceptions import ValidationError
from .rollup import document_status, refresh_parent_statuses, superseded_ids
from .submission import get_document, get_file, get_submission, save_file

logger = logging.getLogger(__name__)


def validate_decision(status: ReviewStatus | str, notes: str | None) -> ReviewStatus:
    """Return the decision as a ReviewStatus or raise ValidationError."""
    try:
        decision = ReviewStatus(status)
    except ValueError:
        raise ValidationError(f"Invalid review status: {status!r}") from None
    if decision not in ReviewStatus.decision_statuses():
        raise ValidationError(
            f"Cannot record a '{decision.value}' decision. Allowed: approved, rejected, "
            "change_requested."
        )
    if not isinstance(notes, str) or not notes.strip():
        raise ValidationError("Review remarks are required for every decision, including approvals.")
    return decision


def _ensure_reviewable(
    document: SubmissionDocument,
    submission: VendorSubmission,
    lock_approved: bool,
) -> None:
    if document.id in superseded_ids(submission.documents):
        raise ValidationError(
            f"Document #{document.id} was replaced by a resubmission and is read-only."
        )
    if lock_approved and document_status(document) == ReviewStatus.APPROVED:
        raise ValidationError(f"Document #{document.id} is approved and locked against re-review.")


async def _lock_parents(
    session: AsyncSession,
    document_id: int,
) -> tuple[SubmissionDocument, VendorSubmission]:
    document = await get_document(session, document_id, for_update=True)
    if document is None:
        raise ValidationError(f"Document #{document_id} not found")
    submission = await get_submission(session, document.submission_id, for_update=True)
    if submission is None:
        raise ValidationError(f"Submission #{document.submission_id} not found")
    return document, submission


async def record_decision(
    session: AsyncSession,
    file_id: int,
    status: ReviewStatus | str,
    notes: str,
    *,
    reviewer_id: str,
    now: Clock = utc_now,
    lock_approved: bool | None = None,
) -> ReviewOutcome:
    """Record a reviewer's decision on a single file.

    Args:
        session: Database session; committed on success, rolled back on error.
        file_id: The file under review.
        status: approved, rejected or change_requested.
        notes: Reviewer remarks, required for every status.
        reviewer_id: Who made the decision.
        now: Clock for ``reviewed_at``.
        lock_approved: Override LOCK_APPROVED_DOCUMENTS for this call.

    Raises:
        ValidationError: Bad status, empty remarks, unknown file, or a
            read-only parent document.
    """
    decision = validate_decision(status, notes)
    if lock_approved is None:
        lock_approved = settings.LOCK_APPROVED_DOCUMENTS

    try:
        file = await get_file(session, file_id)
        if file is None:
            raise ValidationError(f"File #{file_id} not found")

        document, submission = await _lock_parents(session, file.document_id)
        _ensure_reviewable(document, submission, lock_approved)

        reviewed_at = now()
        file.status = decision
        file.review_notes = notes
        file.reviewer_id = reviewer_id
        file.reviewed_at = reviewed_at
        await save_file(session, file)

        submission_state = refresh_parent_statuses(document, submission)
        await write_audit_event(
            session,
            event_type="review_decision",
            user_id=reviewer_id,
            submission_id=submission.id,
            document_id=document.id,
            event_data={
                "file_id": file_id,
                "decision": decision.value,
                "notes": notes,
                "document_status": document.status.value,
                "submission_status": submission_state.value,
            },
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        "File %s marked %s by %s (document %s -> %s)",
        file_id, decision.value, reviewer_id, document.id, document.status.value,
    )
    return ReviewOutcome(
        file_ids=[file_id],
        document_id=document.id,
        submission_id=submission.id,
        decision=decision,
        document_status=document.status,
        submission_status=submission_state,
        reviewed_at=reviewed_at,
    )


async def record_bulk_decision(
    session: AsyncSession,
    document_id: int,
    status: ReviewStatus | str,
    notes: str,
    *,
    reviewer_id: str,
    now: Clock = utc_now,
    lock_approved: bool | None = None,
) -> ReviewOutcome:
    """Apply one decision and one set of remarks to every file of a document.

    All-or-nothing: validation runs before any file is touched and a single
    commit covers every write; any failure rolls the whole batch back.
    """
    decision = validate_decision(status, notes)
    if lock_approved is None:
        lock_approved = settings.LOCK_APPROVED_DOCUMENTS

    try:
        document, submission = await _lock_parents(session, document_id)
        _ensure_reviewable(document, submission, lock_approved)
        if not document.files:
            raise ValidationError(f"Document #{document_id} has no files to review")

        reviewed_at = now()
        for file in document.files:
            file.status = decision
            file.review_notes = notes
            file.reviewer_id = reviewer_id
            file.reviewed_at = reviewed_at
            await save_file(session, file)

        submission_state = refresh_parent_statuses(document, submission)
        file_ids = [f.id for f in document.files]
        await write_audit_event(
            session,
            event_type="bulk_review_decision",
            user_id=reviewer_id,
            submission_id=submission.id,
            document_id=document_id,
            event_data={
                "file_ids": file_ids,
                "decision": decision.value,
                "notes": notes,
                "document_status": document.status.value,
                "submission_status": submission_state.value,
            },
        )
        await session.commit()
    except Exception:
        await session.rollback()
        logger.warning("Bulk decision on document %s rolled back", document_id)
        raise

    logger.info(
        "Bulk %s on document %s (%d file(s)) by %s",
        decision.value, document_id, len(file_ids), reviewer_id,
    )
    return ReviewOutcome(
        file_ids=file_ids,
        document_id=document_id,
        submission_id=submission.id,
        decision=decision,
        document_status=document.status,
        submission_status=submission_state,
        reviewed_at=reviewed_at,
    )
