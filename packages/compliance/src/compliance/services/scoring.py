# This project was developed with assistance from AI tools.
"""Compliance scoring service.

Counts a submission's active documents by rolled-up status and derives the
compliance rate: of the decided (approved or rejected) documents, the share
that was approved. Administrative document types flagged in the catalog (and
any configured extras) are left out before counting.
"""

import logging
from collections.abc import Iterable

from db.enums import ReviewStatus

from ..core.config import settings
from ..schemas.catalog import DocumentTypeEntry
from ..schemas.compliance import ComplianceMetrics, ComplianceReport, FinalizationBlocked
from .catalog import DocumentTypeCatalog, get_document_catalog
from .rollup import active_documents, document_status

logger = logging.getLogger(__name__)

_PENDING_BUCKET = frozenset(
    {ReviewStatus.PENDING, ReviewStatus.UNDER_REVIEW, ReviewStatus.CHANGE_REQUESTED}
)


def default_excluded_types(catalog: DocumentTypeCatalog | None = None) -> frozenset[str]:
    """Catalog-flagged types plus SCORING_EXCLUDED_DOCUMENT_TYPES."""
    if catalog is None:
        catalog = get_document_catalog()
    return catalog.excluded_from_scoring() | frozenset(settings.SCORING_EXCLUDED_DOCUMENT_TYPES)


def _resolve_excluded(excluded_types: Iterable[str | DocumentTypeEntry] | None) -> frozenset[str]:
    if excluded_types is None:
        return default_excluded_types()
    return frozenset(t.id if isinstance(t, DocumentTypeEntry) else t for t in excluded_types)


def compliance_rate(approved: int, rejected: int) -> int:
    """Percentage of decided documents approved, halves rounded up; 0 when nothing is decided."""
    decided = approved + rejected
    if decided == 0:
        return 0
    return (200 * approved + decided) // (2 * decided)


def _metrics_for(submissions: Iterable, excluded: frozenset[str]) -> ComplianceMetrics:
    total = approved = rejected = pending = 0
    for submission in submissions:
        for doc in active_documents(submission.documents):
            if doc.doc_type in excluded:
                continue
            total += 1
            status = document_status(doc)
            if status == ReviewStatus.APPROVED:
                approved += 1
            elif status == ReviewStatus.REJECTED:
                rejected += 1
            elif status in _PENDING_BUCKET:
                pending += 1
    return ComplianceMetrics(
        total_documents=total,
        approved_documents=approved,
        rejected_documents=rejected,
        pending_documents=pending,
        compliance_rate=compliance_rate(approved, rejected),
    )


def compute_metrics(
    submission,
    excluded_types: Iterable[str | DocumentTypeEntry] | None = None,
) -> ComplianceMetrics:
    """Compute compliance metrics for one submission's active documents.

    Args:
        submission: A submission with ``documents`` (each with ``files``).
        excluded_types: Type ids or catalog entries to leave out. Defaults to
            ``default_excluded_types()``.
    """
    return _metrics_for([submission], _resolve_excluded(excluded_types))


def compute_vendor_metrics(
    submissions: Iterable,
    excluded_types: Iterable[str | DocumentTypeEntry] | None = None,
) -> ComplianceMetrics:
    """Aggregate metrics across several submissions (e.g. a vendor's year)."""
    return _metrics_for(submissions, _resolve_excluded(excluded_types))


def can_finalize(metrics: ComplianceMetrics) -> bool:
    """A final report may only be produced when nothing in scope is rejected."""
    return metrics.rejected_documents == 0


def finalize_compliance(metrics: ComplianceMetrics) -> ComplianceReport | FinalizationBlocked:
    """Return a final report, or a blocked result while rejections remain."""
    if not can_finalize(metrics):
        logger.info(
            "Compliance finalization blocked: %d rejected document(s)", metrics.rejected_documents
        )
        return FinalizationBlocked(
            metrics=metrics,
            reason=(
                f"{metrics.rejected_documents} document(s) are rejected. Resolve or "
                "resubmit them before producing a final compliance report."
            ),
        )
    return ComplianceReport(metrics=metrics)
