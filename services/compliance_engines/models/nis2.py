"""
NIS2 Models
===========

Questionnaire answers for the NIS2 Directive assessment.

Version: 0.1.0
"""

from typing import Literal

from pydantic import BaseModel, Field

from services.compliance_engines.models.common import AssessmentItem


EntitySize = Literal["micro", "small", "medium", "large"]


class NIS2Answers(BaseModel):
    """NIS2 scoping questionnaire answers."""

    sector: str | None = Field(default="space", description="NIS2 Annex sector")
    space_sub_sector: str | None = Field(
        default=None,
        description="ground_infrastructure, satellite_communications, spacecraft_manufacturing, "
        "launch_services, earth_observation, ...",
    )

    # Activities
    operates_ground_infra: bool | None = None
    operates_sat_comms: bool | None = None
    provides_launch_services: bool | None = None

    # Organisation; size falls back to headcount and turnover (EUR)
    entity_size: EntitySize | None = None
    employee_count: int | None = Field(default=None, ge=0)
    annual_revenue: float | None = Field(default=None, ge=0)
    member_state_count: int | None = Field(default=None, ge=0)
    is_eu_established: bool | None = None

    # Existing posture
    has_iso27001: bool | None = None
    has_existing_csirt: bool | None = None
    has_risk_management: bool | None = None


class NIS2MaturityRequest(BaseModel):
    """Requirement statuses for a NIS2 maturity score."""

    assessments: list[AssessmentItem] = Field(default_factory=list)


class NIS2RecommendationsRequest(BaseModel):
    """Questionnaire answers with the statuses recorded so far."""

    answers: NIS2Answers = Field(default_factory=NIS2Answers)
    assessments: list[AssessmentItem] = Field(default_factory=list)
