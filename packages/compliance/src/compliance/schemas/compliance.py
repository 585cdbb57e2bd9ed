# This project was developed with assistance from AI tools.
"""Compliance scoring schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class ComplianceMetrics(BaseModel):
    """Document counts by rolled-up status and the derived compliance rate."""

    total_documents: int = 0
    approved_documents: int = 0
    rejected_documents: int = 0
    pending_documents: int = Field(
        default=0,
        description="Pending, under review and change-requested documents.",
    )
    compliance_rate: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Approved share of decided (approved + rejected) documents, in percent.",
    )


class ComplianceReport(BaseModel):
    """A compliance result that may be published as final."""

    outcome: Literal["finalized"] = "finalized"
    metrics: ComplianceMetrics


class FinalizationBlocked(BaseModel):
    """Returned instead of a final report while rejected documents remain."""

    outcome: Literal["blocked"] = "blocked"
    metrics: ComplianceMetrics
    reason: str
