# This project was developed with assistance from AI tools.
"""
Vendor compliance -- domain models

Dated vendor submissions, the documents inside them, the individually
reviewable files of each document, and the audit trail.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import ReviewStatus


class VendorSubmission(Base):
    """A vendor's batch of documents for one (year, month) period."""

    __tablename__ = "vendor_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reference = Column(String(32), unique=True, nullable=False)
    vendor_id = Column(String(255), nullable=False, index=True)
    period_year = Column(Integer, nullable=False)
    period_month = Column(Integer, nullable=False)
    # Cache of the rollup over active documents; written only by the rollup engine.
    status = Column(
        Enum(ReviewStatus, name="review_status", native_enum=False),
        nullable=False,
        default=ReviewStatus.PENDING,
    )
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    documents = relationship(
        "SubmissionDocument", back_populates="submission", cascade="all, delete-orphan",
        order_by="SubmissionDocument.id",
    )

    @property
    def period(self) -> tuple[int, int]:
        return (self.period_year, self.period_month)

    def __repr__(self):
        return f"<VendorSubmission(id={self.id}, ref='{self.reference}', status='{self.status}')>"


class SubmissionDocument(Base):
    """One logical document instance within a submission."""

    __tablename__ = "submission_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    submission_id = Column(
        Integer, ForeignKey("vendor_submissions.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    doc_type = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    # Cache of the rollup over this document's files.
    status = Column(
        Enum(ReviewStatus, name="review_status", native_enum=False),
        nullable=False,
        default=ReviewStatus.PENDING,
    )
    is_reupload = Column(Boolean, nullable=False, default=False)
    # Lookup link to the rejected predecessor -- never an ownership edge.
    original_document_id = Column(
        Integer, ForeignKey("submission_documents.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    uploaded_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    submission = relationship("VendorSubmission", back_populates="documents")
    files = relationship(
        "DocumentFile", back_populates="document", cascade="all, delete-orphan",
        order_by="DocumentFile.id",
    )
    original_document = relationship("SubmissionDocument", remote_side=[id])

    def __repr__(self):
        return f"<SubmissionDocument(id={self.id}, type='{self.doc_type}', status='{self.status}')>"


class DocumentFile(Base):
    """One uploaded artifact -- the unit a reviewer decides on."""

    __tablename__ = "document_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(
        Integer, ForeignKey("submission_documents.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    file_name = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    size = Column(Integer, nullable=False)
    status = Column(
        Enum(ReviewStatus, name="review_status", native_enum=False),
        nullable=False,
        default=ReviewStatus.PENDING,
    )
    review_notes = Column(Text, nullable=False, default="")
    reviewer_id = Column(String(255), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    document = relationship("SubmissionDocument", back_populates="files")

    def __repr__(self):
        return f"<DocumentFile(id={self.id}, doc_id={self.document_id}, status='{self.status}')>"


class AuditEvent(Base):
    """Append-only audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "audit_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    prev_hash = Column(String(64), nullable=True)
    user_id = Column(String(255), nullable=True)
    event_type = Column(String(100), nullable=False, index=True)
    submission_id = Column(Integer, nullable=True, index=True)
    document_id = Column(Integer, nullable=True, index=True)
    event_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditEvent(id={self.id}, type='{self.event_type}')>"
