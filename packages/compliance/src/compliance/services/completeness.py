# This project was developed with assistance from AI tools.
"""Document completeness checking service.

Determines which document types are mandatory for a reporting period, then
compares against the types a vendor uploaded to produce the missing set.
Optional types are never required and never reported missing.
"""

import logging
from collections.abc import Iterable

from ..schemas.completeness import CompletenessResult
from .catalog import DocumentTypeCatalog, get_document_catalog
from .exceptions import ValidationError
from .rollup import active_documents

logger = logging.getLogger(__name__)


def _validate_month(month: int) -> None:
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise ValidationError(f"Invalid period month: {month!r} (expected 1-12)")


def missing_mandatory_types(
    period: tuple[int, int],
    uploaded_types: Iterable[str],
    catalog: DocumentTypeCatalog | None = None,
) -> set[str]:
    """Return the mandatory type ids for ``period`` that are not in ``uploaded_types``."""
    _, month = period
    _validate_month(month)
    if catalog is None:
        catalog = get_document_catalog()
    return set(catalog.required_types(month)) - set(uploaded_types)


def check_completeness(
    period: tuple[int, int],
    uploaded_types: Iterable[str],
    catalog: DocumentTypeCatalog | None = None,
) -> CompletenessResult:
    """Build a completeness summary with the missing set partitioned by class."""
    year, month = period
    _validate_month(month)
    if catalog is None:
        catalog = get_document_catalog()

    required = catalog.required_types(month)
    uploaded = set(uploaded_types)
    missing = [type_id for type_id in required if type_id not in uploaded]

    missing_by_class: dict = {}
    for type_id in missing:
        missing_by_class.setdefault(required[type_id], []).append(type_id)

    return CompletenessResult(
        year=year,
        month=month,
        is_complete=not missing,
        required=list(required),
        missing=missing,
        missing_by_class=missing_by_class,
    )


def check_submission_completeness(
    submission,
    catalog: DocumentTypeCatalog | None = None,
) -> CompletenessResult:
    """Completeness over a submission's active documents.

    A superseded original does not count; its replacement does.
    """
    uploaded = {d.doc_type for d in active_documents(submission.documents)}
    result = check_completeness(submission.period, uploaded, catalog)
    if not result.is_complete:
        logger.info(
            "Submission %s incomplete for %s-%02d: missing %s",
            submission.id, result.year, result.month, ", ".join(result.missing),
        )
    return result
