"""
Incident Models
===============

Request bodies for incident registration and lifecycle updates.

Version: 0.1.0
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


IncidentCategory = Literal[
    "loss_of_contact",
    "debris_generation",
    "cyber_incident",
    "spacecraft_anomaly",
    "conjunction_event",
    "regulatory_breach",
    "other",
]
IncidentSeverity = Literal["critical", "high", "medium", "low"]
IncidentStatus = Literal["detected", "investigating", "contained", "resolved", "reported"]
DetectionMethod = Literal["automated", "manual", "external_report"]


class SeverityFactors(BaseModel):
    """Escalation factors raising an incident above its category default."""

    affected_asset_count: int = Field(default=0, ge=0)
    has_debris_generated: bool = False
    has_data_breach: bool = False
    has_third_party_impact: bool = False
    has_media_attention: bool = False
    is_recurring: bool = False


class AffectedAsset(BaseModel):
    asset_name: str = Field(..., min_length=1)
    cospar_id: str | None = None
    norad_id: str | None = None


class CreateIncidentRequest(BaseModel):
    """New incident reported by an operator."""

    supervision_id: str = Field(..., min_length=1)
    category: IncidentCategory
    title: str = Field(..., min_length=1, max_length=500)
    description: str
    detected_at: datetime | None = None
    detected_by: str
    detection_method: DetectionMethod = "manual"
    affected_assets: list[AffectedAsset] = Field(default_factory=list)
    severity_factors: SeverityFactors | None = None


class UpdateIncidentStatusRequest(BaseModel):
    status: IncidentStatus
    root_cause: str | None = None
    impact_assessment: str | None = None
    immediate_actions: list[str] | None = None
    containment_measures: list[str] | None = None
    resolution_steps: list[str] | None = None
    lessons_learned: str | None = None


class RecordNCANotificationRequest(BaseModel):
    nca_reference_number: str | None = None
    notify_euspa: bool = False
