# This project was developed with assistance from AI tools.
"""Tests for compliance scoring."""

from unittest.mock import patch

import pytest
from db.enums import ReviewStatus

from compliance.schemas.compliance import ComplianceMetrics
from compliance.services.catalog import get_document_catalog
from compliance.services.rollup import document_status
from compliance.services.scoring import (
    can_finalize,
    compliance_rate,
    compute_metrics,
    compute_vendor_metrics,
    default_excluded_types,
    finalize_compliance,
)

from .factories import make_document, make_file, make_submission

A = ReviewStatus.APPROVED
R = ReviewStatus.REJECTED
C = ReviewStatus.CHANGE_REQUESTED
P = ReviewStatus.PENDING

# ---------------------------------------------------------------------------
# compliance_rate
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "approved,rejected,expected",
    [
        (0, 0, 0), (2, 0, 100), (0, 3, 0), (2, 1, 67), (1, 2, 33), (1, 1, 50),
        (1, 7, 13), (5, 3, 63),
    ],
)
def test_compliance_rate(approved, rejected, expected):
    assert compliance_rate(approved, rejected) == expected


# ---------------------------------------------------------------------------
# compute_metrics
# ---------------------------------------------------------------------------


def test_mixed_submission_blocks_finalization():
    sub = make_submission(documents=[
        make_document(id=1, doc_type="INVOICE", statuses=[A, A]),
        make_document(id=2, doc_type="ECR", statuses=[A, R]),
        make_document(id=3, doc_type="BANK_STATEMENT", statuses=[A]),
    ])

    metrics = compute_metrics(sub)

    assert metrics.total_documents == 3
    assert metrics.approved_documents == 2
    assert metrics.rejected_documents == 1
    assert metrics.pending_documents == 0
    assert metrics.compliance_rate == 67
    assert can_finalize(metrics) is False


def test_after_resubmission_approved_everything_finalizes():
    sub = make_submission(documents=[
        make_document(id=1, doc_type="INVOICE", statuses=[A, A]),
        make_document(id=2, doc_type="ECR", statuses=[A, R]),
        make_document(id=3, doc_type="BANK_STATEMENT", statuses=[A]),
        make_document(id=4, doc_type="ECR", statuses=[A, A], original_document_id=2),
    ])

    metrics = compute_metrics(sub)

    assert metrics.total_documents == 3
    assert metrics.approved_documents == 3
    assert metrics.rejected_documents == 0
    assert metrics.compliance_rate == 100
    assert can_finalize(metrics) is True


def test_single_split_document_scores_zero():
    doc = make_document(id=1, doc_type="ECR", statuses=[A])
    doc.files[0].review_notes = "ok"
    doc.files.append(make_file(id=102, status=R, notes="missing signature", document_id=1))
    sub = make_submission(documents=[doc])

    metrics = compute_metrics(sub)

    assert document_status(doc) == R
    assert metrics.rejected_documents == 1
    assert metrics.approved_documents == 0
    assert metrics.compliance_rate == 0


def test_pending_document_does_not_block_finalization():
    sub = make_submission(documents=[
        make_document(id=1, doc_type="INVOICE", statuses=[A]),
        make_document(id=2, doc_type="ECR", statuses=[A, A]),
        make_document(id=3, doc_type="BANK_STATEMENT", statuses=[A]),
        make_document(id=4, doc_type="ESI_CHALLAN", statuses=[P]),
    ])

    metrics = compute_metrics(sub)

    assert metrics.total_documents == 4
    assert metrics.approved_documents == 3
    assert metrics.pending_documents == 1
    assert metrics.compliance_rate == 100
    assert can_finalize(metrics) is True


def test_change_requested_counts_as_pending():
    sub = make_submission(documents=[
        make_document(id=1, doc_type="INVOICE", statuses=[C]),
        make_document(id=2, doc_type="ECR", statuses=[P, A]),
        make_document(id=3, doc_type="BANK_STATEMENT", statuses=[A]),
    ])

    metrics = compute_metrics(sub)

    assert metrics.pending_documents == 2
    assert metrics.approved_documents == 1
    assert metrics.compliance_rate == 100


def test_nothing_decided_scores_zero():
    sub = make_submission(documents=[make_document(id=1, statuses=[P])])
    metrics = compute_metrics(sub)

    assert metrics.compliance_rate == 0
    assert metrics.pending_documents == 1


def test_empty_submission():
    metrics = compute_metrics(make_submission())
    assert metrics == ComplianceMetrics()


def test_default_exclusions_drop_administrative_types():
    sub = make_submission(documents=[
        make_document(id=1, doc_type="INVOICE", statuses=[A]),
        make_document(id=2, doc_type="ESIC_REGISTRATION", statuses=[R]),
    ])

    metrics = compute_metrics(sub)

    assert metrics.total_documents == 1
    assert metrics.rejected_documents == 0
    assert metrics.compliance_rate == 100


def test_explicit_exclusions_override_defaults():
    sub = make_submission(documents=[
        make_document(id=1, doc_type="INVOICE", statuses=[A]),
        make_document(id=2, doc_type="ESIC_REGISTRATION", statuses=[R]),
    ])

    assert compute_metrics(sub, excluded_types=[]).rejected_documents == 1
    assert compute_metrics(sub, excluded_types=["INVOICE", "ESIC_REGISTRATION"]).total_documents == 0


def test_exclusions_accept_catalog_entries():
    entry = get_document_catalog().require("INVOICE")
    sub = make_submission(documents=[make_document(id=1, doc_type="INVOICE", statuses=[A])])

    assert compute_metrics(sub, excluded_types=[entry]).total_documents == 0


def test_configured_exclusions_join_catalog_flags():
    with patch("compliance.services.scoring.settings") as mock_settings:
        mock_settings.SCORING_EXCLUDED_DOCUMENT_TYPES = ["VENDOR_AGREEMENT"]
        excluded = default_excluded_types()

    assert "VENDOR_AGREEMENT" in excluded
    assert "PT_ENROLLMENT" in excluded


def test_vendor_metrics_aggregate_submissions():
    january = make_submission(id=1, month=1, documents=[
        make_document(id=1, doc_type="INVOICE", statuses=[A], submission_id=1),
        make_document(id=2, doc_type="ECR", statuses=[R], submission_id=1),
    ])
    february = make_submission(id=2, month=2, documents=[
        make_document(id=3, doc_type="INVOICE", statuses=[A], submission_id=2),
        make_document(id=4, doc_type="ECR", statuses=[A], submission_id=2),
    ])

    metrics = compute_vendor_metrics([january, february])

    assert metrics.total_documents == 4
    assert metrics.approved_documents == 3
    assert metrics.rejected_documents == 1
    assert metrics.compliance_rate == 75


# ---------------------------------------------------------------------------
# finalize_compliance
# ---------------------------------------------------------------------------


def test_finalize_blocked_while_rejections_remain():
    metrics = ComplianceMetrics(total_documents=2, approved_documents=1, rejected_documents=1,
                                compliance_rate=50)
    result = finalize_compliance(metrics)

    assert result.outcome == "blocked"
    assert "1 document(s) are rejected" in result.reason


def test_finalize_produces_report():
    metrics = ComplianceMetrics(total_documents=2, approved_documents=1, pending_documents=1,
                                compliance_rate=100)
    result = finalize_compliance(metrics)

    assert result.outcome == "finalized"
    assert result.metrics == metrics
