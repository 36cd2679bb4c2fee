"""
Incident Response Engine
========================

Classification, severity escalation and NCA notification deadlines for
space incidents, with an in-memory incident registry.

Lifecycle:
1. Create incident -> Detected (severity and NCA deadline computed)
2. Investigate / contain / resolve
3. Record NCA notification -> Reported (notification deadline completed)

Version: 0.1.0
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from services.compliance_engines.engines.scoring import round_half_up
from services.compliance_engines.models.incidents import (
    CreateIncidentRequest,
    RecordNCANotificationRequest,
    SeverityFactors,
    UpdateIncidentStatusRequest,
)
from shared.config import get_settings
from shared.logging import get_logger
from shared.models.compliance import Priority, RiskLevel
from shared.models.errors import NotFoundError


logger = get_logger(__name__)


@dataclass(frozen=True)
class IncidentClassification:
    default_severity: str
    nca_deadline_hours: int
    requires_nca_notification: bool
    requires_euspa_notification: bool
    description: str
    article_ref: str


INCIDENT_CLASSIFICATION: dict[str, IncidentClassification] = {
    "loss_of_contact": IncidentClassification(
        default_severity="critical",
        nca_deadline_hours=4,
        requires_nca_notification=True,
        requires_euspa_notification=True,
        description="Loss of communication or control with spacecraft",
        article_ref="Art. 33-34",
    ),
    "debris_generation": IncidentClassification(
        default_severity="critical",
        nca_deadline_hours=4,
        requires_nca_notification=True,
        requires_euspa_notification=True,
        description="Debris-generating event or fragmentation",
        article_ref="Art. 58-72",
    ),
    "cyber_incident": IncidentClassification(
        default_severity="critical",
        nca_deadline_hours=4,
        requires_nca_notification=True,
        requires_euspa_notification=True,
        description="Cybersecurity breach or attack on space systems",
        article_ref="Art. 74-95",
    ),
    "spacecraft_anomaly": IncidentClassification(
        default_severity="high",
        nca_deadline_hours=24,
        requires_nca_notification=True,
        requires_euspa_notification=False,
        description="Significant spacecraft malfunction or anomaly",
        article_ref="Art. 33-34",
    ),
    "conjunction_event": IncidentClassification(
        default_severity="high",
        nca_deadline_hours=72,
        requires_nca_notification=True,
        requires_euspa_notification=True,
        description="Close approach or collision avoidance maneuver",
        article_ref="Art. 55-57",
    ),
    "regulatory_breach": IncidentClassification(
        default_severity="medium",
        nca_deadline_hours=72,
        requires_nca_notification=True,
        requires_euspa_notification=False,
        description="Non-compliance with regulatory requirements",
        article_ref="Art. 33-34",
    ),
    "other": IncidentClassification(
        default_severity="low",
        nca_deadline_hours=168,
        requires_nca_notification=False,
        requires_euspa_notification=False,
        description="Other operational incident",
        article_ref="Art. 33-34",
    ),
}

SEVERITY_SCORES: dict[str, float] = {"low": 1, "medium": 2, "high": 3, "critical": 4}

PENALTY_NOTE = "Failure to report may result in penalties under EU Space Act Art. 101-104"


# =============================================================================
# Classification
# =============================================================================


def calculate_severity(category: str, factors: SeverityFactors | None = None) -> str:
    """
    Escalate the category's default severity by incident factors.

    Args:
        category: Incident category
        factors: Escalation factors, if any

    Returns:
        Severity level (critical, high, medium, low)
    """
    factors = factors or SeverityFactors()
    classification = INCIDENT_CLASSIFICATION.get(category)
    base = classification.default_severity if classification else "medium"

    score = SEVERITY_SCORES[base]
    if factors.affected_asset_count > 1:
        score += 0.5
    if factors.affected_asset_count > 5:
        score += 0.5
    if factors.has_debris_generated:
        score += 1
    if factors.has_data_breach:
        score += 1
    if factors.has_third_party_impact:
        score += 0.5
    if factors.has_media_attention:
        score += 0.5
    if factors.is_recurring:
        score += 0.5

    if score >= 4:
        return RiskLevel.CRITICAL.value
    if score >= 3:
        return RiskLevel.HIGH.value
    if score >= 2:
        return RiskLevel.MEDIUM.value
    return RiskLevel.LOW.value


def nca_deadline_hours(category: str) -> int:
    classification = INCIDENT_CLASSIFICATION.get(category)
    if classification is None:
        return get_settings().incidents.default_nca_hours
    return classification.nca_deadline_hours


def calculate_nca_deadline(category: str, detected_at: datetime) -> datetime:
    return detected_at + timedelta(hours=nca_deadline_hours(category))


def is_nca_notification_overdue(
    category: str,
    detected_at: datetime,
    reported_to_nca: bool,
    now: datetime | None = None,
) -> bool:
    if reported_to_nca:
        return False
    now = now or datetime.now(UTC)
    return now > calculate_nca_deadline(category, detected_at)


def _aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


# =============================================================================
# Records
# =============================================================================


@dataclass
class Incident:
    id: str
    incident_number: str
    supervision_id: str
    category: str
    severity: str
    status: str
    title: str
    description: str
    detected_at: datetime
    detected_by: str
    detection_method: str
    affected_assets: list[dict[str, Any]] = field(default_factory=list)
    reported_to_nca: bool = False
    nca_report_date: datetime | None = None
    nca_reference_number: str | None = None
    reported_to_euspa: bool = False
    euspa_report_date: datetime | None = None
    contained_at: datetime | None = None
    resolved_at: datetime | None = None
    root_cause: str | None = None
    impact_assessment: str | None = None
    immediate_actions: list[str] = field(default_factory=list)
    containment_measures: list[str] = field(default_factory=list)
    resolution_steps: list[str] = field(default_factory=list)
    lessons_learned: str | None = None


@dataclass
class NotificationDeadline:
    """Regulatory deadline for reporting an incident to the NCA."""

    incident_id: str
    title: str
    description: str
    due_date: datetime
    priority: str
    regulatory_ref: str
    penalty_info: str = PENALTY_NOTE
    status: str = "upcoming"
    reminder_days: list[int] = field(default_factory=lambda: [1, 0])
    completed_at: datetime | None = None


@dataclass
class CreateIncidentResult:
    incident_id: str
    incident_number: str
    severity: str
    nca_deadline: datetime
    requires_nca_notification: bool


@dataclass
class IncidentSummary:
    id: str
    incident_number: str
    category: str
    severity: str
    status: str
    title: str
    detected_at: datetime
    nca_deadline: datetime
    nca_deadline_hours: int
    hours_remaining: float
    is_overdue: bool
    requires_nca_notification: bool
    reported_to_nca: bool
    reported_to_euspa: bool
    affected_asset_count: int


# =============================================================================
# Incident Service
# =============================================================================


class IncidentService:
    """
    In-memory incident registry.

    Clock is injectable so deadline arithmetic can be tested.
    """

    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        self._now = now or (lambda: datetime.now(UTC))
        self._incidents: dict[str, Incident] = {}
        self._deadlines: list[NotificationDeadline] = []

    def generate_incident_number(self) -> str:
        """Next number in the form INC-YYYY-NNN for the current year."""
        prefix = f"{get_settings().incidents.number_prefix}-{self._now().year}-"
        numbers = [
            int(incident.incident_number.rsplit("-", 1)[1])
            for incident in self._incidents.values()
            if incident.incident_number.startswith(prefix)
        ]
        return f"{prefix}{max(numbers, default=0) + 1:03d}"

    def create_incident(self, request: CreateIncidentRequest) -> CreateIncidentResult:
        """
        Register an incident, classify it and schedule its NCA notification.

        Args:
            request: Incident details

        Returns:
            CreateIncidentResult with severity and NCA deadline
        """
        detected_at = _aware(request.detected_at) if request.detected_at else self._now()

        factors = (request.severity_factors or SeverityFactors()).model_copy(
            update={"affected_asset_count": len(request.affected_assets) or 1}
        )
        severity = calculate_severity(request.category, factors)
        classification = INCIDENT_CLASSIFICATION[request.category]

        incident = Incident(
            id=str(uuid.uuid4()),
            incident_number=self.generate_incident_number(),
            supervision_id=request.supervision_id,
            category=request.category,
            severity=severity,
            status="detected",
            title=request.title,
            description=request.description,
            detected_at=detected_at,
            detected_by=request.detected_by,
            detection_method=request.detection_method,
            affected_assets=[a.model_dump() for a in request.affected_assets],
        )
        self._incidents[incident.id] = incident

        deadline = calculate_nca_deadline(request.category, detected_at)
        if classification.requires_nca_notification:
            self._deadlines.append(
                NotificationDeadline(
                    incident_id=incident.id,
                    title=f"NCA Notification: {incident.incident_number}",
                    description=(
                        f"Report incident {incident.incident_number} to National Competent "
                        f"Authority within {classification.nca_deadline_hours} hours of detection."
                    ),
                    due_date=deadline,
                    priority=(
                        Priority.CRITICAL.value
                        if severity == RiskLevel.CRITICAL
                        else Priority.HIGH.value
                    ),
                    regulatory_ref=classification.article_ref,
                )
            )

        logger.info(
            "incident_created",
            incident_number=incident.incident_number,
            category=incident.category,
            severity=severity,
            nca_deadline=deadline.isoformat(),
        )

        return CreateIncidentResult(
            incident_id=incident.id,
            incident_number=incident.incident_number,
            severity=severity,
            nca_deadline=deadline,
            requires_nca_notification=classification.requires_nca_notification,
        )

    def get_incident(self, incident_id: str) -> Incident:
        """
        Raises:
            NotFoundError: If no incident has this id
        """
        incident = self._incidents.get(incident_id)
        if incident is None:
            raise NotFoundError(f"Incident {incident_id} not found")
        return incident

    def list_incidents(self, supervision_id: str | None = None) -> list[Incident]:
        incidents = [
            i
            for i in self._incidents.values()
            if supervision_id is None or i.supervision_id == supervision_id
        ]
        return sorted(incidents, key=lambda i: i.detected_at)

    def update_status(self, incident_id: str, request: UpdateIncidentStatusRequest) -> Incident:
        """Move an incident to a new status, stamping containment and resolution once."""
        incident = self.get_incident(incident_id)
        previous = incident.status

        incident.status = request.status
        for name, value in request.model_dump(exclude={"status"}, exclude_none=True).items():
            setattr(incident, name, value)

        if request.status == "contained" and incident.contained_at is None:
            incident.contained_at = self._now()
        if request.status == "resolved" and incident.resolved_at is None:
            incident.resolved_at = self._now()

        logger.info(
            "incident_status_updated",
            incident_number=incident.incident_number,
            previous=previous,
            status=request.status,
        )
        return incident

    def record_nca_notification(
        self,
        incident_id: str,
        request: RecordNCANotificationRequest,
    ) -> Incident:
        """Mark the incident reported and complete its notification deadline."""
        incident = self.get_incident(incident_id)
        now = self._now()

        incident.reported_to_nca = True
        incident.nca_report_date = now
        incident.status = "reported"
        if request.nca_reference_number:
            incident.nca_reference_number = request.nca_reference_number
        if request.notify_euspa:
            incident.reported_to_euspa = True
            incident.euspa_report_date = now

        for deadline in self.get_deadlines(incident_id):
            deadline.status = "completed"
            deadline.completed_at = now

        logger.info(
            "incident_reported_to_nca",
            incident_number=incident.incident_number,
            reference=request.nca_reference_number,
            euspa=request.notify_euspa,
        )
        return incident

    def get_deadlines(self, incident_id: str | None = None) -> list[NotificationDeadline]:
        return [d for d in self._deadlines if incident_id is None or d.incident_id == incident_id]

    def summarize(self, incident: Incident) -> IncidentSummary:
        classification = INCIDENT_CLASSIFICATION[incident.category]
        deadline = calculate_nca_deadline(incident.category, incident.detected_at)
        now = self._now()
        hours_remaining = max(0.0, (deadline - now).total_seconds() / 3600)

        return IncidentSummary(
            id=incident.id,
            incident_number=incident.incident_number,
            category=incident.category,
            severity=incident.severity,
            status=incident.status,
            title=incident.title,
            detected_at=incident.detected_at,
            nca_deadline=deadline,
            nca_deadline_hours=classification.nca_deadline_hours,
            hours_remaining=round_half_up(hours_remaining * 10) / 10,
            is_overdue=not incident.reported_to_nca and now > deadline,
            requires_nca_notification=classification.requires_nca_notification,
            reported_to_nca=incident.reported_to_nca,
            reported_to_euspa=incident.reported_to_euspa,
            affected_asset_count=len(incident.affected_assets),
        )

    def get_incident_summary(self, incident_id: str) -> IncidentSummary:
        return self.summarize(self.get_incident(incident_id))

    def get_pending_nca_notifications(self, supervision_id: str) -> list[IncidentSummary]:
        """Unreported incidents needing NCA notification, oldest first."""
        return [
            self.summarize(incident)
            for incident in self.list_incidents(supervision_id)
            if not incident.reported_to_nca
            and INCIDENT_CLASSIFICATION[incident.category].requires_nca_notification
        ]
