# This project was developed with assistance from AI tools.
"""Submission service: storage access and upload intake.

Loads and saves submissions, documents and files through an AsyncSession,
creates dated submissions, attaches uploaded documents, and gates final
submission on mandatory-document completeness. Loaders called with
``for_update=True`` take row locks; callers always lock the document before
its submission so concurrent reviewers queue instead of deadlocking.
"""

import calendar
import logging
import secrets
import string
from collections.abc import Sequence

from db import DocumentFile, SubmissionDocument, VendorSubmission
from db.enums import ReviewStatus
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.clock import Clock, utc_now
from ..core.config import settings
from ..schemas.submission import FileUpload, SubmissionSnapshot
from .audit import write_audit_event
from .catalog import DocumentTypeCatalog, get_document_catalog
from .completeness import check_submission_completeness
from .exceptions import IncompleteSubmissionError, InvalidStateError, ValidationError
from .rollup import refresh_submission_status

logger = logging.getLogger(__name__)

_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


# ---------------------------------------------------------------------------
# Storage access
# ---------------------------------------------------------------------------


def _locked(stmt, for_update: bool):
    if for_update:
        # Reload already-mapped rows so decisions see what the lock protects.
        return stmt.with_for_update().execution_options(populate_existing=True)
    return stmt


async def get_submission(
    session: AsyncSession,
    submission_id: int,
    *,
    for_update: bool = False,
) -> VendorSubmission | None:
    """Load a submission with its documents and their files."""
    stmt = (
        select(VendorSubmission)
        .options(selectinload(VendorSubmission.documents).selectinload(SubmissionDocument.files))
        .where(VendorSubmission.id == submission_id)
    )
    result = await session.execute(_locked(stmt, for_update))
    return result.scalar_one_or_none()


async def get_document(
    session: AsyncSession,
    document_id: int,
    *,
    for_update: bool = False,
) -> SubmissionDocument | None:
    """Load a document with its files."""
    stmt = (
        select(SubmissionDocument)
        .options(selectinload(SubmissionDocument.files))
        .where(SubmissionDocument.id == document_id)
    )
    result = await session.execute(_locked(stmt, for_update))
    return result.scalar_one_or_none()


async def get_file(session: AsyncSession, file_id: int) -> DocumentFile | None:
    result = await session.execute(select(DocumentFile).where(DocumentFile.id == file_id))
    return result.scalar_one_or_none()


async def list_vendor_submissions(
    session: AsyncSession,
    vendor_id: str,
    *,
    year: int | None = None,
) -> list[VendorSubmission]:
    """Return a vendor's submissions, newest period first."""
    stmt = (
        select(VendorSubmission)
        .options(selectinload(VendorSubmission.documents).selectinload(SubmissionDocument.files))
        .where(VendorSubmission.vendor_id == vendor_id)
        .order_by(VendorSubmission.period_year.desc(), VendorSubmission.period_month.desc())
    )
    if year is not None:
        stmt = stmt.where(VendorSubmission.period_year == year)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def save_document(session: AsyncSession, document: SubmissionDocument) -> SubmissionDocument:
    session.add(document)
    await session.flush()
    return document


async def save_file(session: AsyncSession, file: DocumentFile) -> DocumentFile:
    session.add(file)
    await session.flush()
    return file


def snapshot_submission(submission: VendorSubmission) -> SubmissionSnapshot:
    """Serializable copy of a loaded submission tree."""
    return SubmissionSnapshot.model_validate(submission)


# ---------------------------------------------------------------------------
# Intake
# ---------------------------------------------------------------------------


def generate_reference(year: int, month: int) -> str:
    """Human-facing id such as ``SUB-2025-Jan-7K2QXA``."""
    suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(6))
    return f"SUB-{year}-{calendar.month_abbr[month]}-{suffix}"


def validate_period(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid period month: {month} (expected 1-12)")
    if not settings.MIN_PERIOD_YEAR <= year <= settings.MAX_PERIOD_YEAR:
        raise ValidationError(
            f"Invalid period year: {year} (expected {settings.MIN_PERIOD_YEAR}-"
            f"{settings.MAX_PERIOD_YEAR})"
        )


def build_files(uploads: Sequence[FileUpload]) -> list[DocumentFile]:
    """Validate upload metadata and create pending, unreviewed file rows.

    Raises ValidationError for an empty list, an oversized file or a mime
    type outside ALLOWED_FILE_TYPES.
    """
    if not uploads:
        raise ValidationError("A document needs at least one file")

    max_bytes = settings.UPLOAD_MAX_SIZE_MB * 1024 * 1024
    files = []
    for upload in uploads:
        if upload.size > max_bytes:
            raise ValidationError(
                f"File {upload.file_name} is {upload.size} bytes; the limit is "
                f"{settings.UPLOAD_MAX_SIZE_MB}MB"
            )
        if upload.mime_type not in settings.ALLOWED_FILE_TYPES:
            raise ValidationError(f"Unsupported file type for {upload.file_name}: {upload.mime_type}")
        files.append(
            DocumentFile(
                file_name=upload.file_name,
                mime_type=upload.mime_type,
                size=upload.size,
                status=ReviewStatus.PENDING,
                review_notes="",
            )
        )
    return files


async def create_submission(
    session: AsyncSession,
    vendor_id: str,
    year: int,
    month: int,
) -> VendorSubmission:
    """Open an empty submission for a vendor's reporting period."""
    validate_period(year, month)
    submission = VendorSubmission(
        reference=generate_reference(year, month),
        vendor_id=vendor_id,
        period_year=year,
        period_month=month,
        status=ReviewStatus.PENDING,
        documents=[],
    )
    session.add(submission)
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    logger.info("Created submission %s for vendor %s", submission.reference, vendor_id)
    return submission


async def add_document(
    session: AsyncSession,
    submission_id: int,
    doc_type: str,
    title: str,
    files: Sequence[FileUpload],
    *,
    uploaded_by: str | None = None,
    catalog: DocumentTypeCatalog | None = None,
) -> SubmissionDocument:
    """Attach a document with one or more files to an open submission."""
    if catalog is None:
        catalog = get_document_catalog()
    entry = catalog.require(doc_type)
    file_rows = build_files(files)

    try:
        submission = await get_submission(session, submission_id, for_update=True)
        if submission is None:
            raise ValidationError(f"Submission #{submission_id} not found")
        if submission.submitted_at is not None:
            raise InvalidStateError(
                f"Submission #{submission_id} was already submitted; use a resubmission instead"
            )

        document = SubmissionDocument(
            doc_type=entry.id,
            title=title.strip() or entry.display_name,
            status=ReviewStatus.PENDING,
            is_reupload=False,
            uploaded_by=uploaded_by,
            files=file_rows,
        )
        submission.documents.append(document)
        refresh_submission_status(submission)
        await save_document(session, document)
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info("Added %s (%d file(s)) to submission %s", entry.id, len(file_rows), submission_id)
    return document


async def submit_submission(
    session: AsyncSession,
    submission_id: int,
    *,
    user_id: str | None = None,
    catalog: DocumentTypeCatalog | None = None,
    now: Clock = utc_now,
) -> VendorSubmission:
    """Finalize an upload batch once every mandatory type for its period is present.

    Raises IncompleteSubmissionError carrying the missing types split by
    mandatory class.
    """
    try:
        submission = await get_submission(session, submission_id, for_update=True)
        if submission is None:
            raise ValidationError(f"Submission #{submission_id} not found")
        if submission.submitted_at is not None:
            raise InvalidStateError(f"Submission #{submission_id} was already submitted")

        completeness = check_submission_completeness(submission, catalog)
        if not completeness.is_complete:
            raise IncompleteSubmissionError(submission_id, completeness)

        submission.submitted_at = now()
        await write_audit_event(
            session,
            event_type="submission_submitted",
            user_id=user_id,
            submission_id=submission_id,
            event_data={
                "reference": submission.reference,
                "period": f"{submission.period_year}-{submission.period_month:02d}",
                "document_count": len(submission.documents),
            },
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info("Submission %s submitted", submission.reference)
    return submission
