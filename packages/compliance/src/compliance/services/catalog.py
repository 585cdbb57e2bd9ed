# This project was developed with assistance from AI tools.
"""Document type catalog.

Static classification of vendor document kinds into monthly-mandatory,
annual (January-only) mandatory and one-time optional, plus the period rule
table that says in which months each class is required. The catalog is built
once at import time and handed to the completeness and scoring services;
callers may inject their own table.
"""

from collections.abc import Iterable, Mapping

from db.enums import MandatoryClass

from ..schemas.catalog import AvailableDocumentTypes, DocumentTypeEntry
from .exceptions import ValidationError


ALL_MONTHS: frozenset[int] = frozenset(range(1, 13))

# Months in which each mandatory class is required.
PERIOD_RULES: dict[MandatoryClass, frozenset[int]] = {
    MandatoryClass.MONTHLY: ALL_MONTHS,
    MandatoryClass.ANNUAL_JANUARY_ONLY: frozenset({1}),
    MandatoryClass.OPTIONAL: frozenset(),
}

_M = MandatoryClass.MONTHLY
_A = MandatoryClass.ANNUAL_JANUARY_ONLY
_O = MandatoryClass.OPTIONAL

DEFAULT_DOCUMENT_TYPES: tuple[DocumentTypeEntry, ...] = (
    DocumentTypeEntry(id="INVOICE", display_name="Invoice", mandatory_class=_M),
    DocumentTypeEntry(id="FORM_T_MUSTER_ROLL", display_name="Form T Muster Roll", mandatory_class=_M),
    DocumentTypeEntry(id="BANK_STATEMENT", display_name="Bank Statement", mandatory_class=_M),
    DocumentTypeEntry(id="ECR", display_name="ECR", mandatory_class=_M),
    DocumentTypeEntry(id="PF_COMBINED_CHALLAN", display_name="PF Combined Challan", mandatory_class=_M),
    DocumentTypeEntry(id="PF_TRRN_DETAILS", display_name="PF TRRN Details", mandatory_class=_M),
    DocumentTypeEntry(
        id="ESI_CONTRIBUTION_HISTORY", display_name="ESIC Contribution History", mandatory_class=_M
    ),
    DocumentTypeEntry(id="ESI_CHALLAN", display_name="ESIC Challan", mandatory_class=_M),
    DocumentTypeEntry(
        id="PROFESSIONAL_TAX_RETURNS", display_name="Professional Tax Returns", mandatory_class=_M
    ),
    DocumentTypeEntry(id="LABOUR_WELFARE_FUND", display_name="Labour Welfare Fund", mandatory_class=_A),
    DocumentTypeEntry(id="VENDOR_AGREEMENT", display_name="Vendor Agreement", mandatory_class=_O),
    DocumentTypeEntry(
        id="EPF_CODE_LETTER", display_name="EPF Code Letter", mandatory_class=_O,
        excluded_from_scoring=True,
    ),
    DocumentTypeEntry(id="EPF_FORM_5A", display_name="EPF Form 5A", mandatory_class=_O),
    DocumentTypeEntry(
        id="ESIC_REGISTRATION", display_name="ESIC Registration", mandatory_class=_O,
        excluded_from_scoring=True,
    ),
    DocumentTypeEntry(
        id="PT_REGISTRATION", display_name="PT Registration", mandatory_class=_O,
        excluded_from_scoring=True,
    ),
    DocumentTypeEntry(
        id="PT_ENROLLMENT", display_name="PT Enrollment", mandatory_class=_O,
        excluded_from_scoring=True,
    ),
    DocumentTypeEntry(
        id="CONTRACT_LABOUR_LICENSE", display_name="Contract Labour License", mandatory_class=_O
    ),
    DocumentTypeEntry(id="ADDITIONAL_DOCUMENT", display_name="Additional Document", mandatory_class=_O),
)


class DocumentTypeCatalog:
    """Lookup table over catalog entries and their period rules."""

    def __init__(
        self,
        entries: Iterable[DocumentTypeEntry],
        period_rules: Mapping[MandatoryClass, frozenset[int]] | None = None,
    ):
        self._entries: dict[str, DocumentTypeEntry] = {}
        for entry in entries:
            if entry.id in self._entries:
                raise ValueError(f"Duplicate document type id in catalog: {entry.id}")
            self._entries[entry.id] = entry
        self._period_rules = dict(period_rules if period_rules is not None else PERIOD_RULES)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._entries

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, type_id: str) -> DocumentTypeEntry | None:
        return self._entries.get(type_id)

    def require(self, type_id: str) -> DocumentTypeEntry:
        """Return the entry for ``type_id`` or raise ValidationError."""
        entry = self._entries.get(type_id)
        if entry is None:
            raise ValidationError(f"Unknown document type: {type_id}")
        return entry

    def by_class(self, mandatory_class: MandatoryClass) -> list[DocumentTypeEntry]:
        return [e for e in self._entries.values() if e.mandatory_class == mandatory_class]

    def is_required(self, type_id: str, month: int) -> bool:
        """True when ``type_id`` is mandatory for a period in ``month``."""
        entry = self._entries.get(type_id)
        if entry is None:
            return False
        return month in self._period_rules.get(entry.mandatory_class, frozenset())

    def required_types(self, month: int) -> dict[str, MandatoryClass]:
        """Map each type id required in ``month`` to its mandatory class."""
        return {
            e.id: e.mandatory_class
            for e in self._entries.values()
            if month in self._period_rules.get(e.mandatory_class, frozenset())
        }

    def excluded_from_scoring(self) -> frozenset[str]:
        return frozenset(e.id for e in self._entries.values() if e.excluded_from_scoring)

    def available_document_types(self, month: int) -> AvailableDocumentTypes:
        """Group the catalog for an upload form; annual types only show when required."""
        annual = self.by_class(MandatoryClass.ANNUAL_JANUARY_ONLY)
        return AvailableDocumentTypes(
            month=month,
            monthly_mandatory=self.by_class(MandatoryClass.MONTHLY),
            annual_mandatory=[e for e in annual if self.is_required(e.id, month)],
            one_time_optional=self.by_class(MandatoryClass.OPTIONAL),
        )


_catalog = DocumentTypeCatalog(DEFAULT_DOCUMENT_TYPES)


def get_document_catalog() -> DocumentTypeCatalog:
    """Return the process-wide catalog."""
    return _catalog
