"""
COPUOS Engine
=============

Assesses a mission against the COPUOS Long-Term Sustainability
guidelines, the IADC Space Debris Mitigation Guidelines and
ISO 24113:2024.

Version: 0.1.0
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from services.compliance_engines.catalogs import copuos_guidelines
from services.compliance_engines.catalogs.models import CopuosGuideline
from services.compliance_engines.engines.scoring import (
    calculate_group_score,
    severity_weight,
    status_map,
)
from services.compliance_engines.models.copuos import MissionProfile, MissionProfileInput
from shared.logging import get_logger
from shared.models.compliance import Priority, RiskLevel, Severity
from shared.models.errors import ProfileValidationError


logger = get_logger(__name__)


SOURCES = ("COPUOS", "IADC", "ISO")

CATEGORIES = (
    "policy_regulatory",
    "safety_operations",
    "international_cooperation",
    "science_research",
    "space_debris",
    "space_weather",
    "design_passivation",
    "collision_avoidance",
    "disposal",
    "tracking_monitoring",
)

ORBIT_REGIME_LABELS = {
    "LEO": "Low Earth Orbit",
    "MEO": "Medium Earth Orbit",
    "GEO": "Geostationary Orbit",
    "HEO": "Highly Elliptical Orbit",
    "GTO": "Geostationary Transfer Orbit",
    "cislunar": "Cislunar Space",
    "deep_space": "Deep Space",
}

MISSION_TYPE_LABELS = {
    "commercial": "Commercial",
    "scientific": "Scientific Research",
    "governmental": "Governmental",
    "educational": "Educational",
    "military": "Defense/Military",
}

SATELLITE_CATEGORY_LABELS = {
    "cubesat": "CubeSat",
    "smallsat": "Small Satellite",
    "medium": "Medium Satellite",
    "large": "Large Satellite",
    "mega": "Mega Satellite",
}

DEBRIS_MODULE_ARTICLES = (
    "Art. 63",  # trackability
    "Art. 64",  # collision avoidance service
    "Art. 65",  # collision avoidance procedures
    "Art. 66",  # manoeuvrability
    "Art. 67",  # debris mitigation
    "Art. 72",  # end-of-life disposal
    "Art. 73",  # re-entry
)

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

MAX_RECOMMENDATIONS = 8


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class ComplianceScore:
    overall: int
    by_source: dict[str, int]
    by_category: dict[str, int]
    mandatory: int
    recommended: int


@dataclass
class GuidelineGap:
    guideline_id: str
    status: str
    priority: str
    gap: str
    recommendation: str
    estimated_effort: str
    dependencies: list[str] = field(default_factory=list)


@dataclass
class CopuosAssessmentResult:
    """Full COPUOS/IADC/ISO assessment of a mission."""

    profile: MissionProfile
    applicable_guidelines: list[CopuosGuideline]
    score: ComplianceScore
    gap_analysis: list[GuidelineGap]
    risk_level: str
    eu_space_act_overlaps: list[str]
    recommendations: list[str]


@dataclass
class ArticleCrossReference:
    eu_space_act_article: str
    copuos_guidelines: list[CopuosGuideline]
    iadc_guidelines: list[CopuosGuideline]
    iso_requirements: list[CopuosGuideline]


@dataclass
class ComplianceSummary:
    total_guidelines: int
    applicable: int
    compliant: int = 0
    partial: int = 0
    non_compliant: int = 0
    not_assessed: int = 0
    not_applicable: int = 0
    critical_gaps: int = 0
    major_gaps: int = 0


# =============================================================================
# Profile
# =============================================================================


def get_satellite_category(mass_kg: float) -> str:
    """Satellite class from its mass in kilograms."""
    if mass_kg < 10:
        return "cubesat"
    if mass_kg < 100:
        return "smallsat"
    if mass_kg < 1000:
        return "medium"
    if mass_kg < 5000:
        return "large"
    return "mega"


def validate_mission_profile(profile: MissionProfileInput) -> MissionProfile:
    """
    Validate a submitted mission profile and apply defaults.

    Raises:
        ProfileValidationError: If orbit, mission type or mass is missing
    """
    if not profile.orbit_regime:
        raise ProfileValidationError("Orbit regime is required")
    if not profile.mission_type:
        raise ProfileValidationError("Mission type is required")
    if not profile.satellite_mass_kg or profile.satellite_mass_kg <= 0:
        raise ProfileValidationError("Valid satellite mass is required")

    return MissionProfile(
        orbit_regime=profile.orbit_regime,
        altitude_km=profile.altitude_km,
        inclination_deg=profile.inclination_deg,
        mission_type=profile.mission_type,
        satellite_category=get_satellite_category(profile.satellite_mass_kg),
        satellite_mass_kg=profile.satellite_mass_kg,
        has_maneuverability=bool(profile.has_maneuverability),
        has_propulsion=bool(profile.has_propulsion),
        planned_lifetime_years=(
            profile.planned_lifetime_years if profile.planned_lifetime_years is not None else 5
        ),
        is_constellation=bool(profile.is_constellation),
        constellation_size=profile.constellation_size,
        launch_date=profile.launch_date,
        country_of_registry=profile.country_of_registry,
    )


def _guideline_applies(guideline: CopuosGuideline, profile: MissionProfile) -> bool:
    app = guideline.applicability
    if app.orbit_regimes is not None and profile.orbit_regime not in app.orbit_regimes:
        return False
    if app.mission_types is not None and profile.mission_type not in app.mission_types:
        return False
    if (
        app.satellite_categories is not None
        and profile.satellite_category not in app.satellite_categories
    ):
        return False
    if app.min_mass_kg is not None and profile.satellite_mass_kg < app.min_mass_kg:
        return False
    # an unknown or zero altitude never excludes a guideline
    if profile.altitude_km:
        if app.max_altitude_km is not None and profile.altitude_km > app.max_altitude_km:
            return False
        if app.min_altitude_km is not None and profile.altitude_km < app.min_altitude_km:
            return False
    if app.constellations_only and not profile.is_constellation:
        return False
    if app.requires_propulsion and not profile.has_propulsion:
        return False
    return True


def get_applicable_guidelines(profile: MissionProfile) -> list[CopuosGuideline]:
    """Guidelines whose applicability predicates match the mission."""
    return [g for g in copuos_guidelines() if _guideline_applies(g, profile)]


# =============================================================================
# Scoring
# =============================================================================


def _weight(guideline: CopuosGuideline) -> int:
    return severity_weight(guideline.severity)


def calculate_compliance_score(
    guidelines: list[CopuosGuideline],
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> ComplianceScore:
    """
    Severity-weighted scores overall and per source, category and binding level.

    Args:
        guidelines: Applicable guidelines
        assessments: Guideline statuses

    Returns:
        ComplianceScore
    """
    statuses = status_map(assessments)

    def group(items: Iterable[CopuosGuideline]) -> int:
        return calculate_group_score(list(items), statuses, _weight)

    return ComplianceScore(
        overall=group(guidelines),
        by_source={s: group(g for g in guidelines if g.source == s) for s in SOURCES},
        by_category={c: group(g for g in guidelines if g.category == c) for c in CATEGORIES},
        mandatory=group(g for g in guidelines if g.binding_level == "mandatory"),
        recommended=group(
            g for g in guidelines if g.binding_level in ("recommended", "best_practice")
        ),
    )


def determine_risk_level(
    score: ComplianceScore,
    guidelines: list[CopuosGuideline],
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> str:
    """Critical on any non-compliant critical guideline, otherwise by mandatory score."""
    statuses = status_map(assessments)
    if any(
        g.severity == Severity.CRITICAL and statuses.get(g.id) == "non_compliant"
        for g in guidelines
    ):
        return RiskLevel.CRITICAL.value

    if score.mandatory < 50:
        return RiskLevel.CRITICAL.value
    if score.mandatory < 70:
        return RiskLevel.HIGH.value
    if score.mandatory < 85:
        return RiskLevel.MEDIUM.value
    return RiskLevel.LOW.value


def generate_gap_analysis(
    guidelines: list[CopuosGuideline],
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> list[GuidelineGap]:
    """
    Gaps for every guideline that is not compliant or not applicable.

    Returns:
        Gaps ordered high, medium, low priority; catalog order within a priority
    """
    statuses = status_map(assessments)
    gaps = []

    for guideline in guidelines:
        status = statuses.get(guideline.id, "not_assessed")
        if status in ("compliant", "not_applicable"):
            continue

        mandatory = guideline.binding_level == "mandatory"
        critical = guideline.severity == Severity.CRITICAL
        if mandatory and critical:
            priority = Priority.HIGH.value
        elif mandatory or critical:
            priority = Priority.MEDIUM.value
        else:
            priority = Priority.LOW.value

        if guideline.category in ("design_passivation", "disposal"):
            effort = "high"
        elif guideline.category in ("policy_regulatory", "international_cooperation"):
            effort = "low"
        else:
            effort = "medium"

        ref = f"{guideline.reference_number}: {guideline.title}"
        if status == "non_compliant":
            gap = f"Non-compliant with {ref}"
        elif status == "partial":
            gap = f"Partially compliant with {ref}"
        else:
            gap = f"Not yet assessed: {ref}"

        dependencies = []
        if (
            guideline.category == "collision_avoidance"
            and not guideline.applicability.requires_propulsion
        ):
            dependencies.append("Propulsion system capability")
        if guideline.category == "disposal":
            dependencies.append("Passivation capability (IADC 5.3.1)")

        gaps.append(
            GuidelineGap(
                guideline_id=guideline.id,
                status=status,
                priority=priority,
                gap=gap,
                recommendation=(
                    guideline.implementation_guidance[0]
                    if guideline.implementation_guidance
                    else f"Review and implement {guideline.title}"
                ),
                estimated_effort=effort,
                dependencies=dependencies,
            )
        )

    gaps.sort(key=lambda g: PRIORITY_ORDER[g.priority])
    return gaps


def find_eu_space_act_cross_references(guidelines: Iterable[CopuosGuideline]) -> list[str]:
    """Sorted unique EU Space Act articles referenced by the guidelines."""
    refs: set[str] = set()
    for guideline in guidelines:
        refs.update(guideline.eu_space_act_cross_ref)
    return sorted(refs)


def generate_recommendations(
    profile: MissionProfile,
    score: ComplianceScore,
    gaps: list[GuidelineGap],
) -> list[str]:
    """Orbit, mission and gap driven recommendations, at most eight."""
    recommendations = []
    by_category = score.by_category

    if profile.orbit_regime == "LEO" and by_category["disposal"] < 80:
        recommendations.append(
            "Priority: Develop 25-year deorbit compliance plan as per IADC 5.3.2 and "
            "ISO 24113:2024 §6.4.2"
        )
    if profile.orbit_regime == "GEO" and by_category["disposal"] < 80:
        recommendations.append(
            "Priority: Ensure propellant budget includes graveyard orbit transfer reserve "
            "(~11 m/s)"
        )

    if by_category["collision_avoidance"] < 70:
        recommendations.append(
            "Subscribe to a conjunction warning service (EUSST, LeoLabs, or equivalent)"
        )
        if profile.has_propulsion:
            recommendations.append("Develop and document collision avoidance maneuver procedures")

    if by_category["design_passivation"] < 80:
        recommendations.append(
            "Develop comprehensive passivation plan for all stored energy sources"
        )

    if any(g.guideline_id == "copuos-lts-a5" and g.status != "compliant" for g in gaps):
        recommendations.append("Complete UN space object registration through UNOOSA")

    for gap in [g for g in gaps if g.priority == Priority.HIGH][:3]:
        recommendations.append(f"Address: {gap.recommendation}")

    if (
        profile.is_constellation
        and (profile.constellation_size or 0) > 10
        and by_category["collision_avoidance"] < 90
    ):
        recommendations.append("Implement automated constellation-wide collision avoidance system")

    return recommendations[:MAX_RECOMMENDATIONS]


def perform_assessment(
    profile: MissionProfile,
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> CopuosAssessmentResult:
    """
    Run the full guideline assessment for a validated mission profile.

    Args:
        profile: Validated mission profile
        assessments: Guideline statuses

    Returns:
        CopuosAssessmentResult
    """
    statuses = status_map(assessments)
    applicable = get_applicable_guidelines(profile)
    score = calculate_compliance_score(applicable, statuses)
    gaps = generate_gap_analysis(applicable, statuses)

    result = CopuosAssessmentResult(
        profile=profile,
        applicable_guidelines=applicable,
        score=score,
        gap_analysis=gaps,
        risk_level=determine_risk_level(score, applicable, statuses),
        eu_space_act_overlaps=find_eu_space_act_cross_references(applicable),
        recommendations=generate_recommendations(profile, score, gaps),
    )

    logger.info(
        "copuos_assessment_performed",
        orbit=profile.orbit_regime,
        applicable=len(applicable),
        overall=score.overall,
        risk=result.risk_level,
    )

    return result


# =============================================================================
# Cross References and Reporting
# =============================================================================


def get_guideline(guideline_id: str) -> CopuosGuideline | None:
    return next((g for g in copuos_guidelines() if g.id == guideline_id), None)


def get_cross_reference_for_article(article_ref: str) -> ArticleCrossReference:
    """Guidelines whose EU Space Act references contain ``article_ref``, by source."""
    matching = [
        g
        for g in copuos_guidelines()
        if any(article_ref in ref for ref in g.eu_space_act_cross_ref)
    ]
    return ArticleCrossReference(
        eu_space_act_article=article_ref,
        copuos_guidelines=[g for g in matching if g.source == "COPUOS"],
        iadc_guidelines=[g for g in matching if g.source == "IADC"],
        iso_requirements=[g for g in matching if g.source == "ISO"],
    )


def get_debris_guidelines() -> list[CopuosGuideline]:
    return [
        g
        for g in copuos_guidelines()
        if g.category in ("space_debris", "disposal", "design_passivation")
    ]


def map_to_eu_space_act_debris_module() -> dict[str, list[CopuosGuideline]]:
    """Guidelines behind each article of the EU Space Act debris module."""
    mapping = {}
    for article in DEBRIS_MODULE_ARTICLES:
        xref = get_cross_reference_for_article(article)
        mapping[article] = [*xref.copuos_guidelines, *xref.iadc_guidelines, *xref.iso_requirements]
    return mapping


def get_compliance_summary(
    guidelines: list[CopuosGuideline],
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> ComplianceSummary:
    """Status counts and critical/major gap counts for the applicable guidelines."""
    statuses = status_map(assessments)
    summary = ComplianceSummary(
        total_guidelines=len(copuos_guidelines()),
        applicable=len(guidelines),
    )

    for guideline in guidelines:
        status = statuses.get(guideline.id, "not_assessed")
        if status == "compliant":
            summary.compliant += 1
            continue
        if status == "not_applicable":
            summary.not_applicable += 1
            continue

        if status == "partial":
            summary.partial += 1
        elif status == "non_compliant":
            summary.non_compliant += 1
        else:
            summary.not_assessed += 1

        if guideline.severity == Severity.CRITICAL:
            summary.critical_gaps += 1
        elif guideline.severity == Severity.MAJOR:
            summary.major_gaps += 1

    return summary
