# This project was developed with assistance from AI tools.
"""Document type catalog schemas."""

from db.enums import MandatoryClass
from pydantic import BaseModel, ConfigDict


class DocumentTypeEntry(BaseModel):
    """Immutable catalog entry for one kind of vendor document."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    mandatory_class: MandatoryClass
    excluded_from_scoring: bool = False


class AvailableDocumentTypes(BaseModel):
    """Document types offered on an upload form for a given month."""

    month: int
    monthly_mandatory: list[DocumentTypeEntry]
    annual_mandatory: list[DocumentTypeEntry]
    one_time_optional: list[DocumentTypeEntry]
