"""
Compliance Score Routes
=======================

API endpoints for the EU Space Act module-weighted compliance score.

Version: 0.1.0
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter

from services.compliance_engines.engines.compliance_score import (
    MODULE_WEIGHTS,
    calculate_compliance_score,
)
from services.compliance_engines.engines.incidents import INCIDENT_CLASSIFICATION
from services.compliance_engines.models.compliance_score import (
    ComplianceSnapshot,
    IncidentSnapshot,
)
from services.compliance_engines.routes.incidents import incident_service


router = APIRouter()


@router.get("/weights")
async def weights() -> dict[str, float]:
    return dict(MODULE_WEIGHTS)


@router.post("/compliance")
async def compliance_score(snapshot: ComplianceSnapshot) -> dict[str, Any]:
    """
    Calculate the compliance score for an operator snapshot.

    Incidents registered under the snapshot's supervision id are
    included in the reporting and cybersecurity modules.
    """
    if snapshot.supervision_id:
        registered = [
            IncidentSnapshot(
                category=incident.category,
                status=incident.status,
                detected_at=incident.detected_at,
                requires_nca_notification=(
                    INCIDENT_CLASSIFICATION[incident.category].requires_nca_notification
                ),
                reported_to_nca=incident.reported_to_nca,
            )
            for incident in incident_service.list_incidents(snapshot.supervision_id)
        ]
        snapshot = snapshot.model_copy(update={"incidents": [*snapshot.incidents, *registered]})

    return asdict(calculate_compliance_score(snapshot))
