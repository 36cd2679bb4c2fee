"""
Incidents Routes
================

API endpoints for incident registration and NCA notification tracking.

Version: 0.1.0
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Query, status

from services.compliance_engines.engines.incidents import (
    INCIDENT_CLASSIFICATION,
    IncidentService,
)
from services.compliance_engines.models.incidents import (
    CreateIncidentRequest,
    RecordNCANotificationRequest,
    UpdateIncidentStatusRequest,
)


router = APIRouter()

# Initialize incident registry
incident_service = IncidentService()


@router.get("/classification")
async def classification() -> dict[str, dict[str, Any]]:
    """Default severity and NCA deadline per incident category."""
    return {category: asdict(rule) for category, rule in INCIDENT_CLASSIFICATION.items()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_incident(request: CreateIncidentRequest) -> dict[str, Any]:
    """Register an incident and schedule its NCA notification."""
    return asdict(incident_service.create_incident(request))


@router.get("")
async def list_incidents(
    supervision_id: str | None = Query(default=None, description="Filter by supervision"),
) -> list[dict[str, Any]]:
    return [asdict(i) for i in incident_service.list_incidents(supervision_id)]


@router.get("/pending/{supervision_id}")
async def pending_notifications(supervision_id: str) -> list[dict[str, Any]]:
    """Unreported incidents still owing an NCA notification."""
    return [asdict(s) for s in incident_service.get_pending_nca_notifications(supervision_id)]


@router.get("/{incident_id}")
async def get_incident(incident_id: str) -> dict[str, Any]:
    """Incident summary with deadline status."""
    return asdict(incident_service.get_incident_summary(incident_id))


@router.get("/{incident_id}/deadlines")
async def get_deadlines(incident_id: str) -> list[dict[str, Any]]:
    incident_service.get_incident(incident_id)
    return [asdict(d) for d in incident_service.get_deadlines(incident_id)]


@router.patch("/{incident_id}/status")
async def update_status(incident_id: str, request: UpdateIncidentStatusRequest) -> dict[str, Any]:
    return asdict(incident_service.update_status(incident_id, request))


@router.post("/{incident_id}/nca-notification")
async def record_nca_notification(
    incident_id: str,
    request: RecordNCANotificationRequest,
) -> dict[str, Any]:
    """Mark an incident reported to the NCA, and to EUSPA if requested."""
    return asdict(incident_service.record_nca_notification(incident_id, request))
