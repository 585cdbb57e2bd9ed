# This project was developed with assistance from AI tools.
"""Mandatory-document completeness schemas."""

from db.enums import MandatoryClass
from pydantic import BaseModel


class CompletenessResult(BaseModel):
    """Which mandatory document types a period still lacks, grouped by class."""

    year: int
    month: int
    is_complete: bool
    required: list[str]
    missing: list[str]
    missing_by_class: dict[MandatoryClass, list[str]] = {}

    @property
    def missing_monthly(self) -> list[str]:
        return self.missing_by_class.get(MandatoryClass.MONTHLY, [])

    @property
    def missing_annual(self) -> list[str]:
        return self.missing_by_class.get(MandatoryClass.ANNUAL_JANUARY_ONLY, [])
