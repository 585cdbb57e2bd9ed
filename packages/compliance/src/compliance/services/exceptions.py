# This project was developed with assistance from AI tools.
"""Exceptions raised by the compliance review services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..schemas.completeness import CompletenessResult


class ComplianceError(Exception):
    """Base class for errors surfaced to callers of the review core."""


class ValidationError(ComplianceError):
    """Caller input violates a precondition (empty remarks, unknown id, bad status)."""


class InvalidStateError(ComplianceError):
    """Operation not permitted given the current state of the entity."""


class InconsistentRollupError(ComplianceError):
    """A rollup input contained a status value the engine does not recognise."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unrecognised status in rollup input: {value!r}")


class IncompleteSubmissionError(InvalidStateError):
    """Raised when a submission is finalised with mandatory documents missing."""

    def __init__(self, submission_id: int, result: CompletenessResult):
        self.submission_id = submission_id
        self.result = result
        parts = []
        if result.missing_monthly:
            parts.append(f"monthly: {', '.join(result.missing_monthly)}")
        if result.missing_annual:
            parts.append(f"annual: {', '.join(result.missing_annual)}")
        super().__init__(
            f"Submission #{submission_id} is missing mandatory documents ({'; '.join(parts)})"
        )
