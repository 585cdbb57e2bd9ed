# This project was developed with assistance from AI tools.
"""Status rollup engine.

One precedence-ordered rule maps a collection of child statuses to a parent
status. It is applied identically at document level (over file statuses) and
submission level (over active document statuses). The stored ``status``
columns on documents and submissions are caches written only from here.
"""

import logging
from collections.abc import Iterable, Sequence

from db.enums import ReviewStatus

from .exceptions import InconsistentRollupError

logger = logging.getLogger(__name__)


def _coerce(value: object) -> ReviewStatus:
    if isinstance(value, ReviewStatus):
        return value
    try:
        return ReviewStatus(value)
    except ValueError:
        logger.error("Rollup aborted: unrecognised status %r", value)
        raise InconsistentRollupError(value) from None


def rollup(statuses: Iterable[ReviewStatus | str]) -> ReviewStatus:
    """Aggregate child statuses, first matching rule wins.

    1. empty                       -> pending
    2. every child approved        -> approved
    3. any child rejected          -> rejected
    4. any child change_requested  -> change_requested
    5. otherwise                   -> under_review
    """
    children = [_coerce(s) for s in statuses]
    if not children:
        return ReviewStatus.PENDING
    if all(s == ReviewStatus.APPROVED for s in children):
        return ReviewStatus.APPROVED
    if ReviewStatus.REJECTED in children:
        return ReviewStatus.REJECTED
    if ReviewStatus.CHANGE_REQUESTED in children:
        return ReviewStatus.CHANGE_REQUESTED
    return ReviewStatus.UNDER_REVIEW


def superseded_ids(documents: Iterable) -> set[int]:
    """Ids of documents that a later reupload in the same collection replaces."""
    return {d.original_document_id for d in documents if d.original_document_id is not None}


def active_documents(documents: Sequence) -> list:
    """Documents that still count: everything not replaced by a reupload."""
    replaced = superseded_ids(documents)
    return [d for d in documents if d.id is None or d.id not in replaced]


def document_status(document) -> ReviewStatus:
    """Rollup over a document's file statuses (ignores the cached column)."""
    return rollup(f.status for f in document.files)


def submission_status(submission) -> ReviewStatus:
    """Rollup over the recomputed statuses of a submission's active documents."""
    return rollup(document_status(d) for d in active_documents(submission.documents))


def refresh_document_status(document) -> ReviewStatus:
    """Recompute and write the document's cached status."""
    status = document_status(document)
    document.status = status
    return status


def refresh_parent_statuses(document, submission) -> ReviewStatus:
    """Recompute one document's cache, then its submission's; returns the submission status."""
    refresh_document_status(document)
    status = submission_status(submission)
    submission.status = status
    return status


def refresh_submission_status(submission) -> ReviewStatus:
    """Recompute every document cache, then the submission cache."""
    for document in submission.documents:
        refresh_document_status(document)
    status = submission_status(submission)
    submission.status = status
    return status
