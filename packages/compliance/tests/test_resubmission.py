# This project was developed with assistance from AI tools.
"""Tests for the resubmission tracker."""

from unittest.mock import AsyncMock, patch

import pytest
from db.enums import ReviewStatus

from compliance.schemas.submission import FileUpload
from compliance.services.exceptions import InvalidStateError, ValidationError
from compliance.services.resubmission import create_resubmission, get_rejection_history

from .factories import FIXED_NOW, make_document, make_submission

A = ReviewStatus.APPROVED
R = ReviewStatus.REJECTED
C = ReviewStatus.CHANGE_REQUESTED
P = ReviewStatus.PENDING

_MOD = "compliance.services.resubmission"
_UPLOAD = [FileUpload(file_name="ecr-corrected.pdf", mime_type="application/pdf", size=2048)]


@pytest.fixture
def storage():
    """Patch the loaders, saver and audit writer; yields the mocks by name."""
    with (
        patch(f"{_MOD}.get_document", AsyncMock()) as get_document,
        patch(f"{_MOD}.get_submission", AsyncMock()) as get_submission,
        patch(f"{_MOD}.save_document", AsyncMock()) as save_document,
        patch(f"{_MOD}.write_audit_event", AsyncMock()) as audit,
    ):
        yield {
            "get_document": get_document,
            "get_submission": get_submission,
            "save_document": save_document,
            "audit": audit,
        }


# ---------------------------------------------------------------------------
# create_resubmission
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [R, C])
async def test_resubmission_links_replacement_and_keeps_original(storage, status):
    original = make_document(id=2, doc_type="ECR", statuses=[A, status], notes="Wrong month")
    other = make_document(id=1, doc_type="INVOICE", statuses=[A])
    sub = make_submission(documents=[other, original])
    storage["get_document"].return_value = original
    storage["get_submission"].return_value = sub
    session = AsyncMock()

    replacement = await create_resubmission(session, 2, _UPLOAD, uploaded_by="vendor-user")

    assert replacement.is_reupload is True
    assert replacement.original_document_id == 2
    assert replacement.doc_type == "ECR"
    assert [f.status for f in replacement.files] == [P]
    assert replacement.files[0].review_notes == ""
    assert replacement in sub.documents
    # Original untouched.
    assert [f.status for f in original.files] == [A, status]
    assert all(f.review_notes == "Wrong month" for f in original.files)
    # Original drops out of the rollup; the pending replacement puts it under review.
    assert sub.status == ReviewStatus.UNDER_REVIEW
    assert storage["audit"].call_args.kwargs["event_type"] == "resubmission_created"
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_approved_document_cannot_be_resubmitted(storage):
    original = make_document(id=1, statuses=[A, A])
    sub = make_submission(documents=[original])
    storage["get_document"].return_value = original
    storage["get_submission"].return_value = sub
    session = AsyncMock()

    with pytest.raises(InvalidStateError, match="approved"):
        await create_resubmission(session, 1, _UPLOAD)

    assert len(sub.documents) == 1
    assert [f.status for f in original.files] == [A, A]
    storage["save_document"].assert_not_awaited()
    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_under_review_document_cannot_be_resubmitted(storage):
    storage["get_document"].return_value = make_document(id=1, statuses=[A, P])

    with pytest.raises(InvalidStateError):
        await create_resubmission(AsyncMock(), 1, _UPLOAD)


@pytest.mark.asyncio
async def test_already_resubmitted_document_rejected(storage):
    original = make_document(id=1, doc_type="ECR", statuses=[R])
    replacement = make_document(id=2, doc_type="ECR", statuses=[P], original_document_id=1)
    sub = make_submission(documents=[original, replacement])
    storage["get_document"].return_value = original
    storage["get_submission"].return_value = sub

    with pytest.raises(InvalidStateError, match="already has a resubmission"):
        await create_resubmission(AsyncMock(), 1, _UPLOAD)

    assert len(sub.documents) == 2


@pytest.mark.asyncio
async def test_unknown_document(storage):
    storage["get_document"].return_value = None

    with pytest.raises(ValidationError, match="not found"):
        await create_resubmission(AsyncMock(), 404, _UPLOAD)


@pytest.mark.asyncio
async def test_resubmission_needs_files(storage):
    original = make_document(id=1, statuses=[R])
    storage["get_document"].return_value = original
    storage["get_submission"].return_value = make_submission(documents=[original])

    with pytest.raises(ValidationError, match="at least one file"):
        await create_resubmission(AsyncMock(), 1, [])


# ---------------------------------------------------------------------------
# get_rejection_history
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_history_walks_predecessors_newest_first(storage):
    first = make_document(id=1, doc_type="ECR", statuses=[R], notes="Unsigned")
    second = make_document(id=2, doc_type="ECR", statuses=[C], original_document_id=1,
                           notes="Wrong period")
    third = make_document(id=3, doc_type="ECR", statuses=[P], original_document_id=2)
    for f in first.files + second.files:
        f.reviewer_id = "rev-1"
        f.reviewed_at = FIXED_NOW
    docs = {1: first, 2: second, 3: third}
    storage["get_document"].side_effect = lambda session, doc_id, **kw: docs.get(doc_id)

    history = await get_rejection_history(AsyncMock(), 3)

    assert [h.document_id for h in history] == [2, 1]
    assert [h.review_notes for h in history] == ["Wrong period", "Unsigned"]
    assert [h.status for h in history] == [C, R]


@pytest.mark.asyncio
async def test_history_of_first_upload_is_empty(storage):
    storage["get_document"].return_value = make_document(id=1, statuses=[R])
    assert await get_rejection_history(AsyncMock(), 1) == []


@pytest.mark.asyncio
async def test_history_stops_on_cycle(storage):
    a = make_document(id=1, statuses=[R], original_document_id=2)
    b = make_document(id=2, statuses=[R], original_document_id=1)
    docs = {1: a, 2: b}
    storage["get_document"].side_effect = lambda session, doc_id, **kw: docs.get(doc_id)

    history = await get_rejection_history(AsyncMock(), 1)
    assert [h.document_id for h in history] == [2]
