"""
Assessment Input Models
=======================

Per-requirement status records posted alongside a questionnaire profile.

Version: 0.1.0
"""

from datetime import date

from pydantic import BaseModel, Field

from shared.models.compliance import ComplianceStatus


class AssessmentItem(BaseModel):
    """Status recorded against a single requirement or guideline."""

    requirement_id: str = Field(..., min_length=1)
    status: ComplianceStatus = ComplianceStatus.NOT_ASSESSED
    notes: str | None = None
    evidence_notes: str | None = None
    target_date: date | None = None
    responsible_party: str | None = None
