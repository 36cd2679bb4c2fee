"""
Compliance Score Engine
=======================

EU Space Act compliance score weighted across six modules.

Modules:
- authorization (25%): Art. 6-27
- debris (20%): Art. 55-73
- cybersecurity (20%): Art. 74-95
- insurance (15%): Art. 28-32
- environmental (10%): Art. 96-100
- reporting (10%): Art. 33-54

Each module awards points per factor; the module score is the share of
points earned and the overall score sums the weighted module scores.

Version: 0.1.0
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from services.compliance_engines.engines.incidents import calculate_nca_deadline
from services.compliance_engines.engines.scoring import round_half_up
from services.compliance_engines.models.compliance_score import (
    AuthorizationWorkflowSnapshot,
    ComplianceSnapshot,
    CybersecuritySnapshot,
    DebrisSnapshot,
    EnvironmentalSnapshot,
    IncidentSnapshot,
    InsuranceSnapshot,
)
from shared.logging import get_logger
from shared.models.compliance import RISK_ORDER, Priority


logger = get_logger(__name__)


MODULE_WEIGHTS: dict[str, float] = {
    "authorization": 0.25,
    "debris": 0.2,
    "cybersecurity": 0.2,
    "insurance": 0.15,
    "environmental": 0.1,
    "reporting": 0.1,
}

AUTHORIZATION_STATUS_POINTS: dict[str, int] = {
    "approved": 40,
    "submitted": 30,
    "ready_for_submission": 25,
    "in_progress": 15,
}

MAX_RECOMMENDATIONS = 10


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class ScoringFactor:
    id: str
    name: str
    description: str
    max_points: int
    earned_points: int
    is_critical: bool
    article_ref: str | None = None


@dataclass
class ModuleScore:
    score: int
    weight: float
    weighted_score: int
    status: str
    factors: list[ScoringFactor] = field(default_factory=list)
    article_references: list[str] = field(default_factory=list)


@dataclass
class ScoreRecommendation:
    priority: str
    module: str
    action: str
    impact: str
    estimated_effort: str
    article_ref: str | None = None


@dataclass
class ComplianceScore:
    """Overall score with grade, status and per-module breakdown."""

    overall: int
    grade: str
    status: str
    breakdown: dict[str, ModuleScore]
    recommendations: list[ScoreRecommendation]
    last_calculated: datetime


# =============================================================================
# Helpers
# =============================================================================


def get_module_status(score: int) -> str:
    if score >= 80:
        return "compliant"
    if score >= 50:
        return "partial"
    if score > 0:
        return "non_compliant"
    return "not_started"


def get_grade(score: int) -> str:
    if score >= 90:
        return "A"
    if score >= 80:
        return "B"
    if score >= 70:
        return "C"
    if score >= 60:
        return "D"
    return "F"


def get_status(score: int, breakdown: dict[str, ModuleScore]) -> str:
    """
    Overall compliance status.

    A non-compliant module with a critical factor at zero points makes the
    whole operator non-compliant regardless of score.
    """
    critical_failure = any(
        module.status == "non_compliant"
        and any(f.is_critical and f.earned_points == 0 for f in module.factors)
        for module in breakdown.values()
    )
    if critical_failure:
        return "non_compliant"
    if score >= 80:
        return "compliant"
    if score >= 60:
        return "mostly_compliant"
    if score > 0:
        return "partial"
    return "not_assessed"


def _module_score(module: str, factors: list[ScoringFactor], article_range: str) -> ModuleScore:
    total = sum(f.max_points for f in factors)
    earned = sum(f.earned_points for f in factors)
    score = round_half_up(earned / total * 100) if total > 0 else 0
    weight = MODULE_WEIGHTS[module]

    return ModuleScore(
        score=score,
        weight=weight,
        weighted_score=round_half_up(score * weight),
        status=get_module_status(score),
        factors=factors,
        article_references=[article_range],
    )


# =============================================================================
# Module Scores
# =============================================================================


def calculate_authorization_score(workflows: list[AuthorizationWorkflowSnapshot]) -> ModuleScore:
    """Workflow status, document completeness and NCA designation."""
    status_points = 0
    doc_points = 0
    if workflows:
        status_points = AUTHORIZATION_STATUS_POINTS.get(workflows[0].status, 5)
        documents = [s for w in workflows for s in w.document_statuses]
        if documents:
            ready = sum(1 for s in documents if s == "ready")
            doc_points = round_half_up(ready / len(documents) * 35)

    factors = [
        ScoringFactor(
            "auth_status",
            "Authorization Status",
            "Current status of authorization workflow",
            40,
            status_points,
            True,
            "Art. 6-10",
        ),
        ScoringFactor(
            "doc_completeness",
            "Document Completeness",
            "Required documents uploaded and verified",
            35,
            doc_points,
            False,
            "Art. 11-14",
        ),
        ScoringFactor(
            "nca_designation",
            "NCA Designation",
            "Proper NCA authority designated",
            25,
            25 if workflows else 0,
            False,
            "Art. 15-17",
        ),
    ]
    return _module_score("authorization", factors, "Art. 6-27")


def calculate_debris_score(assessment: DebrisSnapshot | None) -> ModuleScore:
    debris = assessment or DebrisSnapshot()
    factors = [
        ScoringFactor(
            "debris_assessment",
            "Debris Assessment",
            "Debris mitigation assessment completed",
            30,
            30 if debris.plan_generated else 0,
            True,
            "Art. 55-57",
        ),
        ScoringFactor(
            "passivation_plan",
            "Passivation Plan",
            "End-of-life passivation procedures defined",
            25,
            25 if debris.has_passivation_cap else 0,
            True,
            "Art. 58-62",
        ),
        ScoringFactor(
            "deorbit_strategy",
            "Deorbit Strategy",
            "25-year deorbit compliance plan",
            25,
            25 if debris.deorbit_strategy else 0,
            True,
            "Art. 63-67",
        ),
        ScoringFactor(
            "collision_avoidance",
            "Collision Avoidance",
            "Collision avoidance procedures in place",
            20,
            20 if debris.plan_generated else 0,
            False,
            "Art. 68-73",
        ),
    ]
    return _module_score("debris", factors, "Art. 55-73")


def calculate_cybersecurity_score(
    assessment: CybersecuritySnapshot | None,
    cyber_incidents: list[IncidentSnapshot],
) -> ModuleScore:
    """Each unresolved cyber incident costs 5 of the 20 incident response points."""
    cyber = assessment or CybersecuritySnapshot()
    maturity_points = (
        round_half_up(cyber.maturity_score / 4) if cyber.maturity_score is not None else 0
    )
    unresolved = sum(1 for i in cyber_incidents if i.status not in ("resolved", "closed"))

    factors = [
        ScoringFactor(
            "risk_assessment",
            "Risk Assessment",
            "NIS2-compliant risk assessment completed",
            35,
            35 if cyber.framework_generated_at else 0,
            True,
            "Art. 74-78",
        ),
        ScoringFactor(
            "maturity_score",
            "Security Maturity",
            "Security maturity level achieved",
            25,
            maturity_points,
            False,
            "Art. 79-82",
        ),
        ScoringFactor(
            "incident_response_plan",
            "Incident Response Plan",
            "Incident response procedures documented",
            20,
            20 if cyber.has_incident_response_plan else 0,
            False,
            "Art. 83-88",
        ),
        ScoringFactor(
            "incident_response",
            "Incident Response",
            "Cyber incidents properly managed",
            20,
            max(0, 20 - unresolved * 5),
            False,
            "Art. 89-95",
        ),
    ]
    return _module_score("cybersecurity", factors, "Art. 74-95")


def calculate_insurance_score(assessment: InsuranceSnapshot | None, now: datetime) -> ModuleScore:
    """Assessment, active policies and days until the earliest active policy expires."""
    insurance = assessment or InsuranceSnapshot()

    if insurance.report_generated:
        assessment_points = 40
    elif insurance.calculated_tpl and insurance.calculated_tpl > 0:
        assessment_points = 20
    else:
        assessment_points = 0

    active = [p for p in insurance.policies if p.status == "active"]
    expiries = sorted(_aware(p.expiration_date) for p in active if p.expiration_date)

    validity_points = 0
    if expiries and expiries[0] > now:
        days = math.ceil((expiries[0] - now).total_seconds() / 86400)
        if days > 90:
            validity_points = 30
        elif days > 30:
            validity_points = 20
        else:
            validity_points = 10

    factors = [
        ScoringFactor(
            "insurance_assessment",
            "Insurance Assessment",
            "Insurance requirements assessed",
            40,
            assessment_points,
            True,
            "Art. 28-29",
        ),
        ScoringFactor(
            "active_policies",
            "Active Policies",
            "Active insurance policies in place",
            30,
            30 if active else 0,
            True,
            "Art. 30",
        ),
        ScoringFactor(
            "policy_validity",
            "Policy Validity",
            "Insurance policy is current and valid",
            30,
            validity_points,
            True,
            "Art. 31-32",
        ),
    ]
    return _module_score("insurance", factors, "Art. 28-32")


def calculate_environmental_score(
    assessment: EnvironmentalSnapshot | None,
    supplier_request_statuses: list[str],
) -> ModuleScore:
    """No supplier requests earns half of the supplier data points."""
    if supplier_request_statuses:
        completed = sum(1 for s in supplier_request_statuses if s == "completed")
        supplier_points = round_half_up(completed / len(supplier_request_statuses) * 30)
    else:
        supplier_points = 15

    factors = [
        ScoringFactor(
            "efd_submission",
            "EFD Submission",
            "Environmental Footprint Declaration submitted",
            50,
            50 if assessment and assessment.status in ("submitted", "approved") else 0,
            True,
            "Art. 96-97",
        ),
        ScoringFactor(
            "supplier_data",
            "Supplier Data",
            "LCA data collected from suppliers",
            30,
            supplier_points,
            False,
            "Art. 98-99",
        ),
        ScoringFactor(
            "gwp_calculation",
            "GWP Calculation",
            "Global Warming Potential calculated",
            20,
            20 if assessment and assessment.total_gwp is not None else 0,
            False,
            "Art. 100",
        ),
    ]
    return _module_score("environmental", factors, "Art. 96-100")


def calculate_reporting_score(
    has_supervision_config: bool,
    incidents: list[IncidentSnapshot],
    report_statuses: list[str],
    now: datetime,
) -> ModuleScore:
    """Each overdue NCA notification costs 20 of the 40 notification points."""
    overdue = sum(
        1
        for i in incidents
        if i.requires_nca_notification
        and not i.reported_to_nca
        and now > calculate_nca_deadline(i.category, _aware(i.detected_at))
    )

    if report_statuses:
        submitted = sum(1 for s in report_statuses if s in ("submitted", "acknowledged"))
        report_points = round_half_up(submitted / len(report_statuses) * 30)
    else:
        report_points = 30

    factors = [
        ScoringFactor(
            "nca_config",
            "NCA Configuration",
            "Supervision and NCA reporting configured",
            30,
            30 if has_supervision_config else 0,
            False,
            "Art. 33-37",
        ),
        ScoringFactor(
            "incident_notifications",
            "Incident Notifications",
            "Incidents reported to NCA within deadlines",
            40,
            max(0, 40 - overdue * 20),
            True,
            "Art. 38-42",
        ),
        ScoringFactor(
            "report_submissions",
            "Report Submissions",
            "Required reports submitted to NCA",
            30,
            report_points,
            False,
            "Art. 43-54",
        ),
    ]
    return _module_score("reporting", factors, "Art. 33-54")


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


# =============================================================================
# Overall Score
# =============================================================================


def generate_recommendations(breakdown: dict[str, ModuleScore]) -> list[ScoreRecommendation]:
    """Top recommendations for factors short of full points, most urgent first."""
    recommendations = []

    for module_id, module in breakdown.items():
        for factor in module.factors:
            if factor.earned_points >= factor.max_points:
                continue
            missing = factor.max_points - factor.earned_points
            percent_missing = missing / factor.max_points * 100

            if factor.is_critical and factor.earned_points == 0:
                priority = Priority.CRITICAL.value
            elif factor.is_critical or percent_missing > 50:
                priority = Priority.HIGH.value
            elif percent_missing > 25:
                priority = Priority.MEDIUM.value
            else:
                priority = Priority.LOW.value

            if missing > 25:
                effort = "high"
            elif missing > 10:
                effort = "medium"
            else:
                effort = "low"

            recommendations.append(
                ScoreRecommendation(
                    priority=priority,
                    module=module_id,
                    action=f"Complete {factor.name}",
                    impact=f"+{missing} points on {module_id} module",
                    estimated_effort=effort,
                    article_ref=factor.article_ref,
                )
            )

    recommendations.sort(key=lambda r: RISK_ORDER[r.priority])
    return recommendations[:MAX_RECOMMENDATIONS]


def calculate_compliance_score(
    snapshot: ComplianceSnapshot,
    now: Callable[[], datetime] | None = None,
) -> ComplianceScore:
    """
    Score an operator's compliance state.

    Args:
        snapshot: Current operator state
        now: Clock override

    Returns:
        ComplianceScore with breakdown and recommendations
    """
    current = now() if now else datetime.now(UTC)

    cyber_incidents = [
        i
        for i in snapshot.incidents
        if i.category == "cyber_incident" and i.detected_at.year == current.year
    ]

    breakdown = {
        "authorization": calculate_authorization_score(snapshot.authorization_workflows),
        "debris": calculate_debris_score(snapshot.debris),
        "cybersecurity": calculate_cybersecurity_score(snapshot.cybersecurity, cyber_incidents),
        "insurance": calculate_insurance_score(snapshot.insurance, current),
        "environmental": calculate_environmental_score(
            snapshot.environmental, snapshot.supplier_request_statuses
        ),
        "reporting": calculate_reporting_score(
            snapshot.has_supervision_config,
            snapshot.incidents,
            snapshot.report_statuses,
            current,
        ),
    }

    overall = sum(module.weighted_score for module in breakdown.values())
    result = ComplianceScore(
        overall=overall,
        grade=get_grade(overall),
        status=get_status(overall, breakdown),
        breakdown=breakdown,
        recommendations=generate_recommendations(breakdown),
        last_calculated=current,
    )

    logger.info(
        "compliance_score_calculated",
        overall=overall,
        grade=result.grade,
        status=result.status,
    )

    return result
