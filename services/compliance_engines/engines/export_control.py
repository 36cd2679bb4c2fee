"""
Export Control Engine
=====================

ITAR (22 CFR 120-130) and EAR (15 CFR 730-774) compliance for space
companies: applicable requirements, weighted scores, gaps, deemed
export and screening obligations, Technology Control Plans, license
exceptions and penalty exposure.

Version: 0.1.0
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from services.compliance_engines.catalogs import export_control_catalog
from services.compliance_engines.catalogs.models import (
    CCLCategory,
    DeemedExportRule,
    EUComparison,
    ExportControlRequirement,
    PenaltyInfo,
    ScreeningList,
    USMLCategory,
)
from services.compliance_engines.engines.scoring import (
    GAP_STATUSES,
    calculate_group_score,
    gap_description,
    risk_weight,
    status_map,
)
from services.compliance_engines.models.export_control import (
    ExportControlProfile,
    ExportControlProfileInput,
)
from shared.logging import get_logger
from shared.models.compliance import RISK_ORDER, Priority, RiskLevel
from shared.models.errors import ProfileValidationError


logger = get_logger(__name__)


ITAR_LICENSE_TYPES = frozenset({"DSP_5", "DSP_73", "DSP_61", "DSP_85", "TAA", "MLA", "WDA"})
EAR_LICENSE_TYPES = frozenset({"BIS_LICENSE", "LICENSE_EXCEPTION"})

DDTC_REGISTRATION = "DDTC Registration (22 CFR § 122.1)"

# Country Group D (national security) and E (embargoed)
RESTRICTED_COUNTRIES = frozenset({"CN", "RU", "IR", "KP", "SY", "CU", "BY", "VE"})

TCP_ELEMENTS = (
    "Physical security measures (locked storage, access badges)",
    "IT security controls (access restrictions, encryption)",
    "Personnel security procedures (background checks, clearances)",
    "Visitor control procedures",
    "Foreign national identification and tracking",
    "Training and awareness program",
    "Audit and monitoring procedures",
    "Incident response procedures",
    "Documentation and record keeping",
)

ADDITIONAL_CONSEQUENCES = (
    "Debarment from government contracts",
    "Denial of export privileges",
    "Loss of security clearances",
    "Reputational damage",
    "Civil litigation from affected parties",
)


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class ExportControlScore:
    overall: int
    by_regulation: dict[str, int]
    by_category: dict[str, int]
    mandatory: int
    critical: int


@dataclass
class ExportControlGap:
    requirement_id: str
    requirement: str
    gap: str
    risk_level: str
    regulation: str
    priority: str
    recommendation: str
    estimated_effort: str
    potential_penalty: str


@dataclass
class RegulationStatus:
    regulation: str
    requirements: list[ExportControlRequirement]
    assessed_count: int
    compliant_count: int
    partial_count: int
    non_compliant_count: int
    score: int
    risk_level: str
    gaps: list[ExportControlGap]
    required_licenses: list[str]
    required_registrations: list[str]


@dataclass
class ExportControlRecommendation:
    priority: int
    title: str
    description: str
    category: str
    timeframe: str
    resources: list[str] = field(default_factory=list)


@dataclass
class PenaltyExposure:
    civil: float
    criminal: float
    imprisonment: int


@dataclass
class ExportControlAssessmentResult:
    """Full ITAR/EAR assessment."""

    profile: ExportControlProfile
    jurisdiction_determination: str
    applicable_requirements: list[ExportControlRequirement]
    score: ExportControlScore
    regulation_statuses: list[RegulationStatus]
    gap_analysis: list[ExportControlGap]
    risk_level: str
    deemed_export_risks: list[DeemedExportRule]
    screening_required: list[ScreeningList]
    recommendations: list[ExportControlRecommendation]
    required_licenses: list[str]
    required_registrations: list[str]
    penalty_exposure: PenaltyExposure
    eu_comparisons: list[EUComparison]


@dataclass
class DeemedExportAssessment:
    has_foreign_nationals: bool
    foreign_national_countries: list[str]
    itar_risks: list[DeemedExportRule]
    ear_risks: list[DeemedExportRule]
    tcp_required: bool
    deemed_export_licenses_required: list[str]
    recommendations: list[str]


@dataclass
class ScreeningAssessment:
    required_lists: list[ScreeningList]
    screening_frequency: str
    automated_screening_required: bool
    red_flag_procedures_required: bool


@dataclass
class TCPAssessment:
    tcp_required: bool
    reasons: list[str]
    required_elements: list[str]
    implementation_priority: str


@dataclass
class LicenseExceptionAnalysis:
    exception: str
    name: str
    description: str
    eligibility_criteria: list[str]
    applicable_to_profile: bool
    considerations: list[str]


@dataclass
class RequiredDocument:
    name: str
    required: bool
    description: str
    retention_period: str


@dataclass
class DocumentationChecklist:
    category: str
    documents: list[RequiredDocument]


@dataclass
class PenaltyAssessment:
    max_civil_per_violation: float
    max_criminal_per_violation: float
    max_imprisonment_years: int
    additional_consequences: list[str]
    mitigating_factors: list[str]
    aggravating_factors: list[str]


# =============================================================================
# Profile and Catalog Lookups
# =============================================================================


def validate_export_control_profile(profile: ExportControlProfileInput) -> ExportControlProfile:
    """
    Validate a submitted company profile and apply defaults.

    Raises:
        ProfileValidationError: If no company type is given
    """
    if not profile.company_type:
        raise ProfileValidationError("At least one company type is required")

    return ExportControlProfile(
        company_type=profile.company_type,
        has_itar_items=bool(profile.has_itar_items),
        has_ear_items=bool(profile.has_ear_items),
        has_foreign_nationals=bool(profile.has_foreign_nationals),
        foreign_national_countries=profile.foreign_national_countries or [],
        exports_to_countries=profile.exports_to_countries or [],
        has_technology_transfer=bool(profile.has_technology_transfer),
        has_defense_contracts=bool(profile.has_defense_contracts),
        has_manufacturing_abroad=bool(profile.has_manufacturing_abroad),
        has_joint_ventures=bool(profile.has_joint_ventures),
        annual_export_value=profile.annual_export_value,
        registered_with_ddtc=bool(profile.registered_with_ddtc),
        has_tcp=bool(profile.has_tcp),
        has_ecl=bool(profile.has_ecl),
    )


def get_applicable_requirements(profile: ExportControlProfile) -> list[ExportControlRequirement]:
    """
    Requirements applying to the company's types and controlled items.

    ITAR requirements without ITAR items only apply to DDTC registrants,
    except screening which always applies. EAR requirements need EAR or
    ITAR items.
    """
    applicable = []
    for req in export_control_catalog().requirements:
        if "all" not in req.applicable_to and not set(req.applicable_to) & set(
            profile.company_type
        ):
            continue
        if (
            req.regulation == "ITAR"
            and not profile.has_itar_items
            and not profile.registered_with_ddtc
            and req.category != "SCREENING"
        ):
            continue
        if req.regulation == "EAR" and not profile.has_ear_items and not profile.has_itar_items:
            continue
        applicable.append(req)
    return applicable


def determine_jurisdiction(
    item_description: str,
    is_specifically_designed_for_military: bool,
    has_commercial_equivalent: bool,
    is_on_usml: bool,
) -> str:
    """
    Likely jurisdiction of a single item.

    Unclear cases resolve to dual_use, which calls for a Commodity
    Jurisdiction request.
    """
    if is_on_usml:
        return "itar_only"
    if is_specifically_designed_for_military:
        return "dual_use" if has_commercial_equivalent else "itar_only"
    if has_commercial_equivalent:
        return "ear_only"
    return "dual_use"


def determine_jurisdiction_from_profile(profile: ExportControlProfile) -> str:
    if profile.has_itar_items and profile.has_ear_items:
        return "itar_with_ear_parts"
    if profile.has_itar_items:
        return "itar_only"
    if profile.has_ear_items:
        return "ear_only"
    return "ear99"


def get_required_screening_lists(
    has_itar: bool,
    has_ear: bool,
    has_financial_transactions: bool,
) -> list[ScreeningList]:
    lists = []
    for screen in export_control_catalog().screening_requirements:
        if screen.screening_required == "all_transactions":
            needed = has_financial_transactions or has_itar or has_ear
        elif screen.screening_required == "export_only":
            needed = has_itar or has_ear
        else:
            needed = has_financial_transactions
        if needed:
            lists.append(screen)
    return lists


def get_applicable_deemed_export_rules(profile: ExportControlProfile) -> list[DeemedExportRule]:
    if not profile.has_foreign_nationals:
        return []
    return [
        rule
        for rule in export_control_catalog().deemed_export_rules
        if (rule.regulation == "ITAR" and profile.has_itar_items)
        or (rule.regulation == "EAR" and profile.has_ear_items)
    ]


def calculate_max_penalty_exposure(profile: ExportControlProfile) -> PenaltyExposure:
    """Highest civil, criminal and imprisonment exposure over applicable requirements."""
    exposure = PenaltyExposure(civil=0, criminal=0, imprisonment=0)
    for req in get_applicable_requirements(profile):
        info = req.penalty_info
        exposure.civil = max(exposure.civil, info.max_civil_penalty)
        exposure.criminal = max(exposure.criminal, info.max_criminal_penalty)
        exposure.imprisonment = max(exposure.imprisonment, info.max_imprisonment)
    return exposure


def get_required_registrations(profile: ExportControlProfile) -> list[str]:
    return [DDTC_REGISTRATION] if profile.has_itar_items else []


def get_required_license_types(profile: ExportControlProfile) -> list[str]:
    licenses = []
    if profile.has_itar_items:
        licenses.append("DSP_5")
        if profile.has_technology_transfer:
            licenses.append("TAA")
        if profile.has_manufacturing_abroad:
            licenses.append("MLA")
    if profile.has_ear_items:
        licenses.append("BIS_LICENSE")
    return licenses


def determine_overall_risk(profile: ExportControlProfile) -> str:
    """Inherent export control risk of a profile, before any assessment."""
    itar = profile.has_itar_items
    if itar and profile.has_foreign_nationals and not profile.has_tcp:
        return RiskLevel.CRITICAL.value
    if itar and not profile.registered_with_ddtc:
        return RiskLevel.CRITICAL.value
    if itar and (profile.has_manufacturing_abroad or profile.has_foreign_nationals):
        return RiskLevel.HIGH.value
    if profile.has_ear_items and profile.has_joint_ventures:
        return RiskLevel.HIGH.value
    if itar or profile.has_ear_items:
        return RiskLevel.MEDIUM.value
    return RiskLevel.LOW.value


def format_penalty(amount: float) -> str:
    """Dollar amount as ``$1.2M`` from one million up, otherwise with separators."""
    if amount >= 1_000_000:
        return f"${amount / 1_000_000:.1f}M"
    if float(amount).is_integer():
        return f"${int(amount):,}"
    return f"${amount:,}"


def format_penalty_description(info: PenaltyInfo) -> str:
    parts = []
    if info.max_civil_penalty > 0:
        parts.append(f"Civil: up to {format_penalty(info.max_civil_penalty)}")
    if info.max_criminal_penalty > 0:
        parts.append(f"Criminal: up to {format_penalty(info.max_criminal_penalty)}")
    if info.max_imprisonment > 0:
        parts.append(f"Imprisonment: up to {info.max_imprisonment} years")
    return "; ".join(parts)


def get_usml_category(category: str) -> USMLCategory | None:
    return next((c for c in export_control_catalog().usml_categories if c.category == category), None)


def get_ccl_category(category: str) -> CCLCategory | None:
    return next((c for c in export_control_catalog().ccl_categories if c.category == category), None)


def get_requirements_by_regulation(regulation: str) -> list[ExportControlRequirement]:
    return [r for r in export_control_catalog().requirements if r.regulation == regulation]


def get_mandatory_requirements() -> list[ExportControlRequirement]:
    return [r for r in export_control_catalog().requirements if r.is_mandatory]


def get_requirements_by_risk_level(risk_level: str) -> list[ExportControlRequirement]:
    return [r for r in export_control_catalog().requirements if r.risk_level == risk_level]


# =============================================================================
# Scoring and Gaps
# =============================================================================


def _weight(requirement: ExportControlRequirement) -> int:
    return risk_weight(requirement.risk_level)


def calculate_compliance_score(
    requirements: list[ExportControlRequirement],
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> ExportControlScore:
    """Risk-weighted scores overall, per regulation and category, mandatory and critical."""
    statuses = status_map(assessments)

    def group(items: Iterable[ExportControlRequirement]) -> int:
        return calculate_group_score(list(items), statuses, _weight)

    categories = dict.fromkeys(r.category for r in requirements)

    return ExportControlScore(
        overall=group(requirements),
        by_regulation={
            reg: group(r for r in requirements if r.regulation == reg) for reg in ("ITAR", "EAR")
        },
        by_category={c: group(r for r in requirements if r.category == c) for c in categories},
        mandatory=group(r for r in requirements if r.is_mandatory),
        critical=group(r for r in requirements if r.risk_level == RiskLevel.CRITICAL),
    )


def _gap_priority(requirement: ExportControlRequirement, status: str) -> str:
    if requirement.risk_level == RiskLevel.CRITICAL:
        return Priority.HIGH.value
    if requirement.risk_level == RiskLevel.HIGH and requirement.is_mandatory:
        return Priority.HIGH.value
    if requirement.risk_level == RiskLevel.HIGH or requirement.is_mandatory:
        return Priority.MEDIUM.value
    if status == "non_compliant":
        return Priority.MEDIUM.value
    return Priority.LOW.value


def _gap_recommendation(requirement: ExportControlRequirement, status: str) -> str:
    if requirement.compliance_actions:
        first = requirement.compliance_actions[0]
        if status == "not_assessed":
            return f"Assess compliance with {requirement.title}. Key actions: {first}"
        return first
    return f"Review and implement {requirement.title} requirements per {requirement.cfr_reference}"


def estimate_effort(requirement: ExportControlRequirement) -> str:
    if requirement.category in ("GENERAL", "SCREENING"):
        return "days"
    if requirement.risk_level == RiskLevel.CRITICAL or len(requirement.documentation_required) > 4:
        return "months"
    return "weeks"


def generate_gap_analysis(
    requirements: list[ExportControlRequirement],
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> list[ExportControlGap]:
    """Gaps for non-compliant, partial and unassessed requirements, by risk."""
    statuses = status_map(assessments)
    gaps = []

    for req in requirements:
        status = statuses.get(req.id, "not_assessed")
        if status not in GAP_STATUSES:
            continue
        gaps.append(
            ExportControlGap(
                requirement_id=req.id,
                requirement=req.title,
                gap=gap_description(status, req.title, req.cfr_reference),
                risk_level=req.risk_level,
                regulation=req.regulation,
                priority=_gap_priority(req, status),
                recommendation=_gap_recommendation(req, status),
                estimated_effort=estimate_effort(req),
                potential_penalty=format_penalty_description(req.penalty_info),
            )
        )

    gaps.sort(key=lambda g: RISK_ORDER[g.risk_level])
    return gaps


def determine_regulation_risk(regulation: str, score: int, non_compliant: int) -> str:
    """ITAR is held to stricter thresholds than EAR."""
    if regulation == "ITAR":
        if score < 50 or non_compliant > 5:
            return RiskLevel.CRITICAL.value
        if score < 70 or non_compliant > 2:
            return RiskLevel.HIGH.value
        if score < 85:
            return RiskLevel.MEDIUM.value
        return RiskLevel.LOW.value

    if score < 40 or non_compliant > 8:
        return RiskLevel.CRITICAL.value
    if score < 60 or non_compliant > 4:
        return RiskLevel.HIGH.value
    if score < 80:
        return RiskLevel.MEDIUM.value
    return RiskLevel.LOW.value


def generate_regulation_statuses(
    requirements: list[ExportControlRequirement],
    assessments: Iterable[Any] | Mapping[str, str] | None,
    profile: ExportControlProfile,
) -> list[RegulationStatus]:
    statuses = status_map(assessments)
    licenses = get_required_license_types(profile)
    results = []

    for regulation in ("ITAR", "EAR"):
        reqs = [r for r in requirements if r.regulation == regulation]
        counts = {"compliant": 0, "partial": 0, "non_compliant": 0}
        assessed = 0
        for req in reqs:
            status = statuses.get(req.id)
            if status and status != "not_assessed":
                assessed += 1
                if status in counts:
                    counts[status] += 1

        score = calculate_compliance_score(reqs, statuses).overall
        allowed = ITAR_LICENSE_TYPES if regulation == "ITAR" else EAR_LICENSE_TYPES

        results.append(
            RegulationStatus(
                regulation=regulation,
                requirements=reqs,
                assessed_count=assessed,
                compliant_count=counts["compliant"],
                partial_count=counts["partial"],
                non_compliant_count=counts["non_compliant"],
                score=score,
                risk_level=determine_regulation_risk(regulation, score, counts["non_compliant"]),
                gaps=generate_gap_analysis(reqs, statuses),
                required_licenses=[lic for lic in licenses if lic in allowed],
                required_registrations=(
                    [DDTC_REGISTRATION] if regulation == "ITAR" and profile.has_itar_items else []
                ),
            )
        )

    return results


def determine_assessment_risk(
    score: ExportControlScore,
    gaps: list[ExportControlGap],
    profile: ExportControlProfile,
) -> str:
    critical_gaps = sum(1 for g in gaps if g.risk_level == RiskLevel.CRITICAL)
    high_gaps = sum(1 for g in gaps if g.risk_level == RiskLevel.HIGH)

    if profile.has_itar_items and not profile.registered_with_ddtc:
        return RiskLevel.CRITICAL.value
    if profile.has_itar_items and profile.has_foreign_nationals and not profile.has_tcp:
        return RiskLevel.CRITICAL.value

    if score.overall < 40 or critical_gaps >= 3:
        return RiskLevel.CRITICAL.value
    if score.overall < 60 or critical_gaps >= 1 or high_gaps >= 5:
        return RiskLevel.HIGH.value
    if score.overall < 80 or high_gaps >= 2:
        return RiskLevel.MEDIUM.value
    return RiskLevel.LOW.value


def generate_recommendations(
    profile: ExportControlProfile,
    gaps: list[ExportControlGap],
    score: ExportControlScore,
) -> list[ExportControlRecommendation]:
    """Numbered recommendations, registration and TCP first."""
    recommendations: list[ExportControlRecommendation] = []
    has_controlled_items = profile.has_itar_items or profile.has_ear_items

    def add(
        title: str,
        description: str,
        category: str,
        timeframe: str,
        resources: list[str] | None = None,
    ) -> None:
        recommendations.append(
            ExportControlRecommendation(
                priority=len(recommendations) + 1,
                title=title,
                description=description,
                category=category,
                timeframe=timeframe,
                resources=list(resources or []),
            )
        )

    if profile.has_itar_items and not profile.registered_with_ddtc:
        add(
            "Register with DDTC Immediately",
            "ITAR requires registration with DDTC before engaging in any defense trade "
            "activities. Operating without registration is a serious violation.",
            "registration",
            "Immediate (within 30 days)",
            [
                "DDTC Registration Portal: https://www.pmddtc.state.gov",
                "22 CFR § 122.1 - Registration Requirements",
            ],
        )

    if profile.has_foreign_nationals and not profile.has_tcp and profile.has_itar_items:
        add(
            "Implement Technology Control Plan (TCP)",
            "Foreign national employees require a TCP to control access to ITAR-controlled "
            "technical data. Without a TCP, deemed exports may occur.",
            "tcp",
            "Immediate (within 60 days)",
            ["22 CFR § 125.4 - Technical Data Exports", "DDTC Guidelines on TCPs"],
        )

    if has_controlled_items and any("SCREEN" in g.requirement_id for g in gaps):
        add(
            "Implement Automated Restricted Party Screening",
            "All export transactions require screening against government restricted party "
            "lists including SDN, Entity List, DPL, and Debarred Parties.",
            "screening",
            "High Priority (within 90 days)",
            [
                "BIS Consolidated Screening List",
                "OFAC Sanctions List Search",
                "DDTC Debarred Parties List",
            ],
        )

    if score.overall < 70:
        add(
            "Establish Comprehensive Export Compliance Program",
            "A strong compliance program is a mitigating factor in enforcement actions. "
            "Include policies, procedures, training, auditing, and corrective action "
            "processes.",
            "documentation",
            "High Priority (within 6 months)",
            ["BIS ECP Guidelines", "DDTC Compliance Program Guidelines"],
        )

    if not any(g.requirement_id == "TRAINING-001" for g in gaps):
        add(
            "Conduct Export Control Training",
            "Provide initial and annual refresher training to all personnel involved in "
            "export activities.",
            "training",
            "Within 90 days, then annually",
        )

    license_gaps = [
        g for g in gaps if any(tag in g.requirement_id for tag in ("LIC", "TAA", "MLA"))
    ]
    if license_gaps:
        add(
            "Obtain Required Export Licenses",
            f"{len(license_gaps)} licensing gaps identified. Review and obtain required DDTC "
            "and/or BIS licenses before any controlled exports.",
            "licensing",
            "Before any controlled exports",
        )

    if has_controlled_items:
        add(
            "Conduct Internal Compliance Audit",
            "Perform a comprehensive audit of export activities, including sample "
            "transaction reviews and process evaluations.",
            "audit",
            "Annually",
        )

    return recommendations


def perform_assessment(
    profile: ExportControlProfileInput,
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> ExportControlAssessmentResult:
    """
    Run the full ITAR/EAR assessment.

    Screening assumes the company has financial transactions.

    Args:
        profile: Submitted company profile
        assessments: Requirement statuses

    Returns:
        ExportControlAssessmentResult

    Raises:
        ProfileValidationError: If the profile has no company type
    """
    validated = validate_export_control_profile(profile)
    statuses = status_map(assessments)

    applicable = get_applicable_requirements(validated)
    score = calculate_compliance_score(applicable, statuses)
    gaps = generate_gap_analysis(applicable, statuses)

    result = ExportControlAssessmentResult(
        profile=validated,
        jurisdiction_determination=determine_jurisdiction_from_profile(validated),
        applicable_requirements=applicable,
        score=score,
        regulation_statuses=generate_regulation_statuses(applicable, statuses, validated),
        gap_analysis=gaps,
        risk_level=determine_assessment_risk(score, gaps, validated),
        deemed_export_risks=get_applicable_deemed_export_rules(validated),
        screening_required=get_required_screening_lists(
            validated.has_itar_items, validated.has_ear_items, True
        ),
        recommendations=generate_recommendations(validated, gaps, score),
        required_licenses=get_required_license_types(validated),
        required_registrations=get_required_registrations(validated),
        penalty_exposure=calculate_max_penalty_exposure(validated),
        eu_comparisons=list(export_control_catalog().eu_comparisons),
    )

    logger.info(
        "export_control_assessment_performed",
        jurisdiction=result.jurisdiction_determination,
        applicable=len(applicable),
        overall=score.overall,
        risk=result.risk_level,
    )

    return result


# =============================================================================
# Deemed Exports, Screening and TCP
# =============================================================================


def is_restricted_country(country_code: str) -> bool:
    return country_code.upper() in RESTRICTED_COUNTRIES


def assess_deemed_export_risks(profile: ExportControlProfile) -> DeemedExportAssessment:
    """Deemed export exposure from foreign national access to controlled technology."""
    rules = export_control_catalog().deemed_export_rules
    tcp_required = profile.has_foreign_nationals and profile.has_itar_items and not profile.has_tcp

    licenses_required = []
    if profile.has_foreign_nationals:
        for country in profile.foreign_national_countries:
            if profile.has_itar_items:
                licenses_required.append(
                    f"TAA/DSP-5 required for {country} nationals accessing ITAR data"
                )
            if profile.has_ear_items and is_restricted_country(country):
                licenses_required.append(f"EAR license may be required for {country} nationals")

    recommendations = []
    if tcp_required:
        recommendations.append("Implement Technology Control Plan to protect ITAR technical data")
    if profile.has_foreign_nationals:
        recommendations.extend(
            [
                "Screen all foreign national employees for denied party list matches",
                "Maintain documentation of citizenship/residency for all employees",
                "Implement physical and IT access controls for controlled areas",
            ]
        )

    return DeemedExportAssessment(
        has_foreign_nationals=profile.has_foreign_nationals,
        foreign_national_countries=list(profile.foreign_national_countries),
        itar_risks=[r for r in rules if r.regulation == "ITAR"] if profile.has_itar_items else [],
        ear_risks=[r for r in rules if r.regulation == "EAR"] if profile.has_ear_items else [],
        tcp_required=tcp_required,
        deemed_export_licenses_required=licenses_required,
        recommendations=recommendations,
    )


def assess_screening_requirements(profile: ExportControlProfile) -> ScreeningAssessment:
    """Restricted party lists and screening cadence by export volume."""
    value = profile.annual_export_value or 0
    if value > 10_000_000:
        frequency = "daily"
    elif value > 1_000_000:
        frequency = "weekly"
    else:
        frequency = "transaction"

    return ScreeningAssessment(
        required_lists=get_required_screening_lists(
            profile.has_itar_items, profile.has_ear_items, True
        ),
        screening_frequency=frequency,
        automated_screening_required=profile.has_itar_items or value > 500_000,
        red_flag_procedures_required=profile.has_itar_items or profile.has_ear_items,
    )


def assess_tcp_requirements(profile: ExportControlProfile) -> TCPAssessment:
    itar = profile.has_itar_items
    required = itar and (
        profile.has_foreign_nationals or profile.has_joint_ventures or profile.has_manufacturing_abroad
    )

    reasons = []
    if itar and profile.has_foreign_nationals:
        reasons.append("Foreign national employees have potential access to ITAR technical data")
    if itar and profile.has_joint_ventures:
        reasons.append("Joint ventures may involve foreign party access to ITAR data")
    if itar and profile.has_manufacturing_abroad:
        reasons.append("Foreign manufacturing requires protection of ITAR technical data")

    if itar and profile.has_foreign_nationals and not profile.has_tcp:
        priority = "immediate"
    elif itar and not profile.has_tcp:
        priority = "high"
    else:
        priority = "medium"

    return TCPAssessment(
        tcp_required=required,
        reasons=reasons,
        required_elements=list(TCP_ELEMENTS) if required else [],
        implementation_priority=priority,
    )


# =============================================================================
# License Exceptions, Documentation and Penalties
# =============================================================================


def analyze_license_exceptions(profile: ExportControlProfile) -> list[LicenseExceptionAnalysis]:
    """EAR license exceptions the company may be able to use."""
    ear = profile.has_ear_items
    exceptions = [
        LicenseExceptionAnalysis(
            exception="TMP",
            name="Temporary Exports",
            description="Permits temporary exports for exhibitions, demonstrations, or testing",
            eligibility_criteria=[
                "Items must be returned to the U.S. within 1-4 years",
                "Cannot export to embargoed destinations",
                "Technology transfer must not occur",
                "Detailed records required",
            ],
            applicable_to_profile=ear,
            considerations=[
                "Useful for trade shows and demonstrations",
                "Requires written assurance from foreign consignee",
            ],
        ),
        LicenseExceptionAnalysis(
            exception="RPL",
            name="Servicing and Replacement Parts",
            description=(
                "Permits export of replacement parts and components for previously exported "
                "equipment"
            ),
            eligibility_criteria=[
                "One-for-one replacement only",
                "Original export was legal",
                "Destination must be same end-user",
            ],
            applicable_to_profile=ear,
            considerations=[
                "Streamlines after-sale service",
                "Records of original export required",
            ],
        ),
        LicenseExceptionAnalysis(
            exception="GOV",
            name="Government and International Organizations",
            description=(
                "Permits exports to U.S. government agencies and certain international "
                "organizations"
            ),
            eligibility_criteria=[
                "End-user must be USG or eligible organization",
                "For official use only",
                "Specific limitations by item type",
            ],
            applicable_to_profile=profile.has_defense_contracts or ear,
            considerations=[
                "Commonly used for government contractors",
                "Verify organization eligibility",
            ],
        ),
        LicenseExceptionAnalysis(
            exception="TSR",
            name="Technology and Software Unrestricted",
            description="Permits export of technology and software under certain conditions",
            eligibility_criteria=[
                "Technology must not be controlled for MT, SI, or CB reasons",
                "Destination must not be in Country Group D:5 or E:1",
                "End-use restrictions apply",
            ],
            applicable_to_profile=profile.has_technology_transfer and ear,
            considerations=[
                "Review technology classification carefully",
                "Does not apply to most spacecraft technology",
            ],
        ),
        LicenseExceptionAnalysis(
            exception="STA",
            name="Strategic Trade Authorization",
            description="Permits exports of specified items to trusted destinations",
            eligibility_criteria=[
                "Destination must be STA-eligible country",
                "Items must be STA-eligible per ECCN",
                "Consignee statement required",
                "Record-keeping requirements",
            ],
            applicable_to_profile=ear,
            considerations=[
                "Most comprehensive exception for eligible items",
                "Not available for most sensitive space items",
                "36 eligible destinations (2024)",
            ],
        ),
    ]
    return [e for e in exceptions if e.applicable_to_profile]


def _doc(name: str, description: str, retention: str, required: bool = True) -> RequiredDocument:
    return RequiredDocument(
        name=name, required=required, description=description, retention_period=retention
    )


def generate_documentation_checklist(profile: ExportControlProfile) -> list[DocumentationChecklist]:
    """Records the company must keep, grouped by compliance area."""
    checklists = []

    if profile.has_itar_items:
        checklists.append(
            DocumentationChecklist(
                "ITAR Registration & Licensing",
                [
                    _doc(
                        "DDTC Registration Certificate",
                        "Current registration with State Department DDTC",
                        "Duration of activities + 5 years",
                    ),
                    _doc(
                        "Empowered Official Designation",
                        "Formal designation of authorized signatories",
                        "Duration of employment + 5 years",
                    ),
                    _doc(
                        "DSP-5 Licenses",
                        "All permanent export licenses",
                        "5 years from license expiration",
                    ),
                    _doc(
                        "TAAs and MLAs",
                        "Technical assistance and manufacturing agreements",
                        "5 years from agreement expiration",
                        required=profile.has_technology_transfer or profile.has_manufacturing_abroad,
                    ),
                    _doc(
                        "Shipping Documentation",
                        "Export manifests, bills of lading, customs entries",
                        "5 years from export",
                    ),
                ],
            )
        )

    if profile.has_ear_items:
        checklists.append(
            DocumentationChecklist(
                "EAR Export Documentation",
                [
                    _doc(
                        "ECCN Classification Records",
                        "Documentation of all item classifications",
                        "5 years from export",
                    ),
                    _doc(
                        "BIS License Applications & Approvals",
                        "License applications and approval letters",
                        "5 years from license expiration",
                    ),
                    _doc(
                        "License Exception Records",
                        "Documentation supporting use of license exceptions",
                        "5 years from export",
                    ),
                    _doc(
                        "Destination Control Statements",
                        "DCS on commercial invoices and shipping docs",
                        "5 years from export",
                    ),
                ],
            )
        )

    checklists.append(
        DocumentationChecklist(
            "Restricted Party Screening",
            [
                _doc(
                    "Screening Results",
                    "Results of denied party screening for each transaction",
                    "5 years from transaction",
                ),
                _doc(
                    "Match Resolution Documentation",
                    "Documentation of potential match resolution",
                    "5 years from resolution",
                ),
                _doc(
                    "End-User Due Diligence",
                    "Know Your Customer documentation",
                    "5 years from last transaction",
                ),
            ],
        )
    )

    checklists.append(
        DocumentationChecklist(
            "Compliance Program",
            [
                _doc(
                    "Export Compliance Manual",
                    "Written policies and procedures",
                    "Maintain current version + 5 years of prior versions",
                ),
                _doc(
                    "Training Records",
                    "Attendance and completion records for all training",
                    "Duration of employment + 5 years",
                ),
                _doc(
                    "Audit Reports",
                    "Internal and external audit findings and responses",
                    "5 years from audit",
                ),
            ],
        )
    )

    if profile.has_foreign_nationals and profile.has_itar_items:
        checklists.append(
            DocumentationChecklist(
                "Technology Control Plan",
                [
                    _doc(
                        "Technology Control Plan",
                        "Written TCP approved by empowered official",
                        "Duration of activities + 5 years",
                    ),
                    _doc(
                        "Foreign National Records",
                        "Citizenship/residency documentation for all FNs",
                        "Duration of access + 5 years",
                    ),
                    _doc(
                        "Access Logs",
                        "Records of foreign national access to controlled areas",
                        "5 years",
                    ),
                    _doc("Visitor Control Logs", "Records of foreign visitor access", "5 years"),
                ],
            )
        )

    return checklists


def assess_penalty_exposure(
    profile: ExportControlProfile,
    has_compliance_program: bool,
    has_voluntary_disclosure: bool,
) -> PenaltyAssessment:
    """Maximum penalties with the factors that would mitigate or aggravate them."""
    mitigating = []
    if has_compliance_program:
        mitigating.append("Existence of compliance program")
    if has_voluntary_disclosure:
        mitigating.append("Voluntary disclosure (typically 50%+ penalty reduction)")

    aggravating = []
    if profile.has_itar_items and not profile.registered_with_ddtc:
        aggravating.append("Operating without required DDTC registration")
    if profile.has_foreign_nationals and not profile.has_tcp and profile.has_itar_items:
        aggravating.append("Potential deemed exports without authorization")

    exposure = calculate_max_penalty_exposure(profile)

    return PenaltyAssessment(
        max_civil_per_violation=exposure.civil,
        max_criminal_per_violation=exposure.criminal,
        max_imprisonment_years=exposure.imprisonment,
        additional_consequences=list(ADDITIONAL_CONSEQUENCES),
        mitigating_factors=mitigating,
        aggravating_factors=aggravating,
    )
