# This project was developed with assistance from AI tools.
"""
Domain enums for the vendor compliance review lifecycle.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (compliance package).
"""

import enum


class ReviewStatus(str, enum.Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    CHANGE_REQUESTED = "change_requested"

    @classmethod
    def file_statuses(cls) -> frozenset["ReviewStatus"]:
        """Statuses a single file can hold (under_review is rollup-only)."""
        return frozenset({cls.PENDING, cls.APPROVED, cls.REJECTED, cls.CHANGE_REQUESTED})

    @classmethod
    def decision_statuses(cls) -> frozenset["ReviewStatus"]:
        """Statuses a reviewer may write. Pending is only ever the initial state."""
        return frozenset({cls.APPROVED, cls.REJECTED, cls.CHANGE_REQUESTED})

    @classmethod
    def resubmittable(cls) -> frozenset["ReviewStatus"]:
        """Document statuses that allow a replacement upload."""
        return frozenset({cls.REJECTED, cls.CHANGE_REQUESTED})


class MandatoryClass(str, enum.Enum):
    MONTHLY = "monthly"
    ANNUAL_JANUARY_ONLY = "annual-january-only"
    OPTIONAL = "optional"
