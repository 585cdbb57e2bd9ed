# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import MandatoryClass, ReviewStatus
from .models import AuditEvent, DocumentFile, SubmissionDocument, VendorSubmission

__all__ = [
    "Base",
    "DatabaseService",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "MandatoryClass",
    "ReviewStatus",
    # Models
    "AuditEvent",
    "DocumentFile",
    "SubmissionDocument",
    "VendorSubmission",
]
