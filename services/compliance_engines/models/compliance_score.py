"""
Compliance Score Models
=======================

Snapshot of an operator's EU Space Act compliance state, one section
per scored module.

Version: 0.1.0
"""

from datetime import datetime

from pydantic import BaseModel, Field


class AuthorizationWorkflowSnapshot(BaseModel):
    status: str
    document_statuses: list[str] = Field(default_factory=list)


class DebrisSnapshot(BaseModel):
    plan_generated: bool = False
    has_passivation_cap: bool = False
    deorbit_strategy: str | None = None


class CybersecuritySnapshot(BaseModel):
    framework_generated_at: datetime | None = None
    maturity_score: float | None = Field(default=None, ge=0, le=100)
    has_incident_response_plan: bool = False


class InsurancePolicySnapshot(BaseModel):
    status: str
    coverage_amount: float | None = None
    expiration_date: datetime | None = None


class InsuranceSnapshot(BaseModel):
    report_generated: bool = False
    calculated_tpl: float | None = None
    policies: list[InsurancePolicySnapshot] = Field(default_factory=list)


class EnvironmentalSnapshot(BaseModel):
    status: str = "draft"
    total_gwp: float | None = None


class IncidentSnapshot(BaseModel):
    """Incident as seen by the reporting module."""

    category: str
    status: str = "detected"
    detected_at: datetime
    requires_nca_notification: bool = True
    reported_to_nca: bool = False


class ComplianceSnapshot(BaseModel):
    """
    Operator state the compliance score is computed from.

    Missing sections score as not started. Incidents registered under
    ``supervision_id`` are added to ``incidents`` by the scores route.
    """

    supervision_id: str | None = None
    authorization_workflows: list[AuthorizationWorkflowSnapshot] = Field(
        default_factory=list,
        description="Most recently updated first",
    )
    debris: DebrisSnapshot | None = None
    cybersecurity: CybersecuritySnapshot | None = None
    insurance: InsuranceSnapshot | None = None
    environmental: EnvironmentalSnapshot | None = None
    supplier_request_statuses: list[str] = Field(default_factory=list)
    has_supervision_config: bool = False
    incidents: list[IncidentSnapshot] = Field(default_factory=list)
    report_statuses: list[str] = Field(default_factory=list)
