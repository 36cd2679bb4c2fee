"""
NIS2 Engine
===========

Classifies space-sector entities under the NIS2 Directive and derives the
applicable Art. 21 security requirements, reporting timeline, penalties
and overlap with the EU Space Act.

Classification follows entity size and activity:
- Large entities are essential (Art. 3(1)(a))
- Medium entities are important, or essential when they run ground
  infrastructure or satellite communications (Art. 3(1)(e))
- Small and micro entities are out of scope unless they provide
  critical space services (Art. 2(2)(b))
- Entities not established in the EU are out of scope (Art. 26)

Version: 0.1.0
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from services.compliance_engines.catalogs import cross_references, nis2_requirements
from services.compliance_engines.catalogs.models import NIS2Requirement
from services.compliance_engines.engines.scoring import (
    GAP_STATUSES,
    round_half_up,
    severity_weight,
    status_map,
)
from services.compliance_engines.models.common import AssessmentItem
from services.compliance_engines.models.nis2 import NIS2Answers
from shared.logging import get_logger
from shared.models.compliance import ComplianceStatus, Severity


logger = get_logger(__name__)


ESSENTIAL = "essential"
IMPORTANT = "important"
OUT_OF_SCOPE = "out_of_scope"

NIS2_CATEGORIES: tuple[str, ...] = (
    "policies_risk_analysis",
    "incident_handling",
    "business_continuity",
    "supply_chain",
    "network_acquisition",
    "effectiveness_assessment",
    "cyber_hygiene",
    "cryptography",
    "hr_access_asset",
    "mfa_authentication",
    "governance",
    "registration",
    "reporting",
    "information_sharing",
)

PENALTY_ESSENTIAL = (
    "Up to €10,000,000 or 2% of total annual worldwide turnover (whichever is higher)"
)
PENALTY_IMPORTANT = (
    "Up to €7,000,000 or 1.4% of total annual worldwide turnover (whichever is higher)"
)

# Weeks saved per overlapping EU Space Act obligation
SAVINGS_WEEKS_SINGLE = 3
SAVINGS_WEEKS_PARTIAL = 1.5


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class Classification:
    """NIS2 entity classification with its legal basis."""

    classification: str
    reason: str
    article_ref: str


@dataclass
class TimelineStep:
    deadline: str
    description: str


@dataclass
class OverlappingRequirement:
    nis2_requirement_id: str
    nis2_article: str
    eu_space_act_article: str
    description: str
    effort_type: str


@dataclass
class EUSpaceActOverlap:
    count: int = 0
    total_potential_savings_weeks: int = 0
    overlapping_requirements: list[OverlappingRequirement] = field(default_factory=list)


@dataclass
class Penalties:
    essential: str
    important: str
    applicable: str


@dataclass
class KeyDate:
    date: str
    description: str


@dataclass
class NIS2ComplianceResult:
    """Complete NIS2 scoping result for an entity."""

    entity_classification: str
    classification_reason: str
    classification_article_ref: str
    sector: str
    sub_sector: str | None
    organization_size: str
    applicable_requirements: list[NIS2Requirement]
    total_nis2_requirements: int
    applicable_count: int
    incident_reporting_timeline: dict[str, TimelineStep]
    eu_space_act_overlap: EUSpaceActOverlap
    supervisory_authority: str
    supervisory_authority_note: str
    penalties: Penalties
    registration_required: bool
    registration_deadline: str
    key_dates: list[KeyDate]


@dataclass
class MaturityScore:
    score: int
    level: str
    breakdown: dict[str, int]


@dataclass
class ProportionalityResult:
    eligible: bool
    reason: str


# =============================================================================
# Classification
# =============================================================================


def classify_nis2_entity(answers: NIS2Answers) -> Classification:
    """
    Classify an entity as essential, important or out of scope.

    Args:
        answers: NIS2 questionnaire answers

    Returns:
        Classification with reason and article reference
    """
    if answers.is_eu_established is False:
        return Classification(
            OUT_OF_SCOPE,
            "NIS2 primarily applies to entities established in EU member states. "
            "Non-EU entities providing services in the EU may need to designate an "
            "EU representative under Art. 26.",
            "NIS2 Art. 2, Art. 26",
        )

    size = resolve_entity_size(answers)

    if size == "micro":
        if answers.operates_sat_comms:
            return Classification(
                IMPORTANT,
                "Although micro enterprises are generally excluded, satellite "
                "communications providers may be designated as important entities by "
                "member states under Art. 2(2)(b) due to the critical nature of SATCOM "
                "services.",
                "NIS2 Art. 2(2)(b)",
            )
        return Classification(
            OUT_OF_SCOPE,
            "Micro enterprises (< 10 employees, < €2M turnover) are generally excluded "
            "from NIS2 scope under Art. 2(1). However, member states may designate "
            "critical space operators regardless of size under Art. 2(2).",
            "NIS2 Art. 2(1)",
        )

    if size == "large":
        return Classification(
            ESSENTIAL,
            "Large entities (> 250 employees or > €50M turnover) operating in the space "
            "sector (NIS2 Annex I, Sector 11) are classified as essential entities under "
            "Art. 3(1).",
            "NIS2 Art. 3(1)(a)",
        )

    if size == "medium":
        if answers.operates_ground_infra or answers.operates_sat_comms:
            return Classification(
                ESSENTIAL,
                "Medium entities operating critical space infrastructure (ground "
                "stations, SATCOM) may be classified as essential entities by member "
                "states under Art. 3(1)(e) due to the criticality of space "
                "infrastructure services.",
                "NIS2 Art. 3(1)(e)",
            )
        return Classification(
            IMPORTANT,
            "Medium entities (50-250 employees) in the space sector (NIS2 Annex I) are "
            "classified as important entities under Art. 3(2). This means full NIS2 "
            "compliance is required, with lighter supervisory measures than essential "
            "entities.",
            "NIS2 Art. 3(2)",
        )

    if size == "small":
        if (
            answers.operates_ground_infra
            or answers.operates_sat_comms
            or answers.provides_launch_services
        ):
            return Classification(
                IMPORTANT,
                "Small entities providing critical space services (ground "
                "infrastructure, SATCOM, launch services) may be designated as important "
                "entities by member states under Art. 2(2)(b), as disruption could have "
                "significant impact on public safety or national security.",
                "NIS2 Art. 2(2)(b)",
            )
        return Classification(
            OUT_OF_SCOPE,
            "Small enterprises (< 50 employees, < €10M turnover) are generally excluded "
            "from NIS2 under Art. 2(1), unless designated by a member state under "
            "Art. 2(2). Monitor your national authority's designations.",
            "NIS2 Art. 2(1), Art. 2(2)",
        )

    return Classification(
        OUT_OF_SCOPE,
        "Based on your organization's profile, you do not appear to fall within the "
        "scope of NIS2. However, member states may designate additional space operators "
        "under Art. 2(2). Consult your national competent authority.",
        "NIS2 Art. 2",
    )


def get_applicable_nis2_requirements(
    classification: str,
    answers: NIS2Answers,
) -> list[NIS2Requirement]:
    """
    Filter the NIS2 catalog to the requirements that apply to an entity.

    A None answer does not restrict the corresponding dimension.
    """
    if classification == OUT_OF_SCOPE:
        return []

    size = resolve_entity_size(answers)
    applicable = []
    for req in nis2_requirements():
        scope = req.applicable_to
        if scope.entity_classifications and classification not in scope.entity_classifications:
            continue
        if scope.sectors and answers.sector is not None and answers.sector not in scope.sectors:
            continue
        if (
            scope.sub_sectors
            and answers.space_sub_sector is not None
            and answers.space_sub_sector not in scope.sub_sectors
        ):
            continue
        if (
            scope.organization_sizes
            and size is not None
            and size not in scope.organization_sizes
        ):
            continue
        applicable.append(req)
    return applicable


# =============================================================================
# Compliance Result
# =============================================================================


def _incident_reporting_timeline() -> dict[str, TimelineStep]:
    return {
        "early_warning": TimelineStep(
            "24 hours",
            "Submit an early warning to the CSIRT or competent authority without undue "
            "delay and in any event within 24 hours of becoming aware of the significant "
            "incident. Must indicate whether the incident is suspected to be caused by "
            "unlawful or malicious acts and whether it could have a cross-border impact.",
        ),
        "notification": TimelineStep(
            "72 hours",
            "Submit an incident notification updating the early warning with an initial "
            "assessment of the significant incident, including its severity and impact, "
            "and indicators of compromise where available.",
        ),
        "intermediate_report": TimelineStep(
            "Upon request",
            "Submit an intermediate report upon the request of the CSIRT or competent "
            "authority, providing relevant status updates.",
        ),
        "final_report": TimelineStep(
            "1 month",
            "Submit a final report no later than one month after the incident "
            "notification, including: (a) detailed description of the incident; (b) type "
            "of threat or root cause; (c) applied and ongoing mitigation measures; (d) "
            "cross-border impact if applicable.",
        ),
    }


def calculate_eu_space_act_overlap(classification: str) -> EUSpaceActOverlap:
    """Overlapping or superseding EU Space Act obligations and the weeks they save."""
    if classification == OUT_OF_SCOPE:
        return EUSpaceActOverlap()

    overlapping: list[OverlappingRequirement] = []
    for ref in cross_references():
        regulations = {ref.source_regulation, ref.target_regulation}
        if regulations != {"nis2", "eu_space_act"}:
            continue
        if ref.relationship not in ("overlaps", "supersedes"):
            continue
        nis2_is_source = ref.source_regulation == "nis2"
        overlapping.append(
            OverlappingRequirement(
                nis2_requirement_id="",
                nis2_article=ref.source_article if nis2_is_source else ref.target_article,
                eu_space_act_article=ref.target_article if nis2_is_source else ref.source_article,
                description=ref.description,
                effort_type=(
                    "single_implementation"
                    if ref.relationship == "supersedes"
                    else "partial_overlap"
                ),
            )
        )

    single = sum(1 for r in overlapping if r.effort_type == "single_implementation")
    partial = len(overlapping) - single
    weeks = single * SAVINGS_WEEKS_SINGLE + partial * SAVINGS_WEEKS_PARTIAL

    return EUSpaceActOverlap(
        count=len(overlapping),
        total_potential_savings_weeks=round_half_up(weeks),
        overlapping_requirements=overlapping,
    )


def _supervisory_authority(answers: NIS2Answers) -> tuple[str, str]:
    if (answers.member_state_count or 1) > 1:
        return (
            "Primary: Member state of main establishment. Additional: coordination with "
            "other member state authorities.",
            "Under NIS2 Art. 26(1), if you operate in multiple member states, the "
            "competent authority of your main establishment has primary jurisdiction. "
            "However, you must also comply with any additional requirements of other "
            "member states where you operate.",
        )
    return (
        "National competent authority of your member state of establishment.",
        "Each EU member state has designated (or will designate) a competent authority "
        "for NIS2 supervision. For space sector entities, this is typically the national "
        "cybersecurity agency or the entity also responsible for critical infrastructure "
        "protection. Check ENISA's NIS2 implementation tracker for your country.",
    )


def _penalties(classification: str) -> Penalties:
    applicable = {
        ESSENTIAL: PENALTY_ESSENTIAL,
        IMPORTANT: PENALTY_IMPORTANT,
    }.get(classification, "N/A — out of scope")
    return Penalties(
        essential=PENALTY_ESSENTIAL,
        important=PENALTY_IMPORTANT,
        applicable=applicable,
    )


def _key_dates(classification: str) -> list[KeyDate]:
    dates = [
        KeyDate(
            "17 October 2024",
            "NIS2 Directive transposition deadline — member states must have national "
            "laws in place",
        ),
        KeyDate(
            "17 April 2025",
            "Member states must establish list of essential and important entities "
            "(Art. 3(3))",
        ),
    ]
    if classification != OUT_OF_SCOPE:
        dates.extend(
            [
                KeyDate(
                    "17 October 2024 onwards",
                    "NIS2 obligations apply — entities must comply with national "
                    "transposition laws",
                ),
                KeyDate(
                    "1 January 2030",
                    "EU Space Act enters into force — will become lex specialis for "
                    "space sector, partially superseding NIS2",
                ),
            ]
        )
    return dates


def calculate_nis2_compliance(answers: NIS2Answers) -> NIS2ComplianceResult:
    """
    Run the full NIS2 scoping assessment.

    Args:
        answers: NIS2 questionnaire answers

    Returns:
        NIS2ComplianceResult with classification, requirements and obligations
    """
    classified = classify_nis2_entity(answers)
    in_scope = classified.classification != OUT_OF_SCOPE

    applicable = get_applicable_nis2_requirements(classified.classification, answers)
    authority, authority_note = _supervisory_authority(answers)

    result = NIS2ComplianceResult(
        entity_classification=classified.classification,
        classification_reason=classified.reason,
        classification_article_ref=classified.article_ref,
        sector="space",
        sub_sector=answers.space_sub_sector,
        organization_size=resolve_entity_size(answers) or "unknown",
        applicable_requirements=applicable,
        total_nis2_requirements=len(nis2_requirements()),
        applicable_count=len(applicable),
        incident_reporting_timeline=_incident_reporting_timeline(),
        eu_space_act_overlap=calculate_eu_space_act_overlap(classified.classification),
        supervisory_authority=authority,
        supervisory_authority_note=authority_note,
        penalties=_penalties(classified.classification),
        registration_required=in_scope,
        registration_deadline=(
            "Without undue delay — entities must register with their competent "
            "authority under Art. 3(4)"
            if in_scope
            else "N/A"
        ),
        key_dates=_key_dates(classified.classification),
    )

    logger.info(
        "nis2_compliance_calculated",
        classification=result.entity_classification,
        applicable=result.applicable_count,
        overlap=result.eu_space_act_overlap.count,
    )

    return result


def redact_nis2_result_for_client(result: NIS2ComplianceResult) -> dict[str, Any]:
    """
    Strip requirement guidance and internal fields from a NIS2 result.

    Requirements keep only id, article, category, title and severity.
    """
    return {
        "entity_classification": result.entity_classification,
        "classification_reason": result.classification_reason,
        "sector": result.sector,
        "sub_sector": result.sub_sector,
        "organization_size": result.organization_size,
        "applicable_requirements": [
            {
                "id": req.id,
                "article_ref": req.article_ref,
                "category": req.category,
                "title": req.title,
                "severity": req.severity,
            }
            for req in result.applicable_requirements
        ],
        "total_nis2_requirements": result.total_nis2_requirements,
        "applicable_count": result.applicable_count,
        "incident_reporting_timeline": {
            key: {"deadline": step.deadline, "description": step.description}
            for key, step in result.incident_reporting_timeline.items()
        },
        "eu_space_act_overlap": {
            "count": result.eu_space_act_overlap.count,
            "total_potential_savings_weeks": result.eu_space_act_overlap.total_potential_savings_weeks,
        },
        "penalties": {
            "essential": result.penalties.essential,
            "important": result.penalties.important,
            "applicable": result.penalties.applicable,
        },
        "registration_required": result.registration_required,
        "key_dates": [{"date": d.date, "description": d.description} for d in result.key_dates],
    }


# =============================================================================
# Maturity and Proportionality
# =============================================================================


def _maturity_level(score: int) -> str:
    if score <= 20:
        return "Initial — Ad-hoc security practices with minimal formal processes"
    if score <= 40:
        return "Developing — Some security processes defined but inconsistently applied"
    if score <= 60:
        return "Defined — Documented security procedures consistently followed"
    if score <= 80:
        return "Managed — Security measures actively measured and controlled"
    return "Optimizing — Continuous improvement with proactive threat management"


def calculate_nis2_maturity_score(
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> MaturityScore:
    """
    Severity-weighted maturity score over the whole NIS2 catalog.

    Unlike the applicable-requirement scores, every catalog requirement
    counts here and not-applicable statuses earn nothing.

    Args:
        assessments: Requirement statuses

    Returns:
        MaturityScore with a 0-100 score, maturity label and per-category scores
    """
    statuses = status_map(assessments)
    credit = {"compliant": 1.0, "partial": 0.5}

    category_total: dict[str, int] = {}
    category_achieved: dict[str, float] = {}
    total = 0
    achieved = 0.0

    for req in nis2_requirements():
        weight = severity_weight(req.severity)
        earned = weight * credit.get(statuses.get(req.id, "not_assessed"), 0.0)
        total += weight
        achieved += earned
        category_total[req.category] = category_total.get(req.category, 0) + weight
        category_achieved[req.category] = category_achieved.get(req.category, 0.0) + earned

    score = round_half_up(achieved / total * 100) if total else 0

    breakdown = {}
    for category in NIS2_CATEGORIES:
        cat_total = category_total.get(category, 0)
        breakdown[category] = (
            round_half_up(category_achieved[category] / cat_total * 100) if cat_total else 0
        )

    return MaturityScore(score=score, level=_maturity_level(score), breakdown=breakdown)


def check_proportionality_eligibility(answers: NIS2Answers) -> ProportionalityResult:
    """Whether Art. 21(1) proportionate implementation is available to the entity."""
    size = resolve_entity_size(answers)

    if size == "large":
        return ProportionalityResult(
            False,
            "Large entities (250+ employees or EUR 50M+ turnover) are expected to "
            "implement the full set of NIS2 Art. 21 measures without significant "
            "simplifications. Proportionality under Art. 21(1) primarily benefits smaller "
            "entities with limited resources.",
        )

    if size == "medium" and (answers.operates_ground_infra or answers.operates_sat_comms):
        return ProportionalityResult(
            False,
            "Medium-sized entities operating critical space infrastructure (ground "
            "stations, satellite communications) are expected to implement comprehensive "
            "NIS2 measures due to the potential impact of service disruption. Limited "
            "proportionality may apply to non-critical support systems.",
        )

    if size == "medium":
        return ProportionalityResult(
            True,
            "As a medium-sized entity without critical space infrastructure "
            "responsibilities, you may apply proportionate implementation of NIS2 Art. 21 "
            "measures. This means: risk assessments may use simplified methodologies, "
            "security audits may be less frequent, and some advanced measures (e.g., "
            "TLPT, 24/7 SOC) may be implemented in reduced form. Requirements marked "
            "'can_be_simplified' in the assessment indicate where proportionality can be "
            "applied.",
        )

    if size == "small":
        return ProportionalityResult(
            True,
            "As a small entity, you are eligible for proportionate implementation under "
            "NIS2 Art. 21(1). This allows: use of standardised risk assessment templates "
            "rather than full methodologies, reduced audit frequency, basic monitoring "
            "rather than 24/7 SOC, and simplified documentation requirements. "
            "Requirements marked 'can_be_simplified' indicate where proportionality "
            "applies. Focus on the most critical requirements first.",
        )

    if size == "micro":
        return ProportionalityResult(
            True,
            "Micro entities are generally excluded from NIS2 scope. If your entity falls "
            "under an exception (Art. 2(2)), maximum proportionality applies. Implement "
            "only the most critical measures with simplified approaches. Consider pooling "
            "resources with other micro operators for shared security services.",
        )

    return ProportionalityResult(
        False,
        "Unable to determine proportionality eligibility. Please provide organisation "
        "size information.",
    )


# =============================================================================
# Auto-Assessment and Recommendations
# =============================================================================

AUTO_ASSESSED_PREFIX = "[Auto-assessed]"

CATEGORY_LABELS: dict[str, str] = {
    "policies_risk_analysis": "Risk Analysis & Policies",
    "incident_handling": "Incident Handling",
    "business_continuity": "Business Continuity",
    "supply_chain": "Supply Chain Security",
    "network_acquisition": "Network & System Security",
    "effectiveness_assessment": "Effectiveness Assessment",
    "cyber_hygiene": "Cyber Hygiene & Training",
    "cryptography": "Cryptography & Encryption",
    "hr_access_asset": "HR, Access & Asset Management",
    "mfa_authentication": "Authentication & MFA",
    "governance": "Governance & Accountability",
    "reporting": "Incident Reporting",
    "registration": "Registration & Notification",
    "information_sharing": "Information Sharing",
}

GROUND_INFRA_KEYWORDS = ("ground station", "ground segment", "mission control", "tt&c")

# Upper bounds (employees, EUR turnover) per enterprise size, smallest first
SIZE_THRESHOLDS: tuple[tuple[str, int, float], ...] = (
    ("micro", 10, 2_000_000),
    ("small", 50, 10_000_000),
    ("medium", 250, 50_000_000),
)

SMALL_SIZES = ("small", "micro")


@dataclass
class AutoAssessment:
    """Suggested starting status for one applicable requirement."""

    requirement_id: str
    suggested_status: str
    reason: str
    proportionality_note: str | None = None
    priority_flags: list[str] = field(default_factory=list)


@dataclass
class ISO27001Coverage:
    count: int
    total: int
    percentage: int


@dataclass
class CriticalGap:
    id: str
    title: str
    article_ref: str
    implementation_weeks: int


@dataclass
class SpaceActOverlapSummary:
    count: int
    articles: list[str]


@dataclass
class PhaseRequirement:
    id: str
    title: str
    article_ref: str
    severity: str
    category: str
    estimated_weeks: int
    rationale: str


@dataclass
class ImplementationPhase:
    phase: int
    name: str
    description: str
    total_weeks: int
    requirements: list[PhaseRequirement]


@dataclass
class NIS2Recommendations:
    """Coverage, critical gaps and a phased plan for a NIS2 assessment."""

    iso27001_coverage: ISO27001Coverage
    critical_gaps: list[CriticalGap]
    eu_space_act_overlap: SpaceActOverlapSummary
    total_implementation_weeks: int
    recommendations: list[str]
    implementation_phases: list[ImplementationPhase]
    auto_assessed_count: int


def resolve_entity_size(answers: NIS2Answers) -> str | None:
    """
    Entity size as answered, or derived from headcount and turnover.

    Either metric above a size's ceiling moves the entity up a size.
    """
    if answers.entity_size is not None:
        return answers.entity_size
    if answers.employee_count is None and answers.annual_revenue is None:
        return None

    sizes = [name for name, _, _ in SIZE_THRESHOLDS] + ["large"]
    ranks = []
    if answers.employee_count is not None:
        ranks.append(_size_rank(lambda staff, _: answers.employee_count < staff))
    if answers.annual_revenue is not None:
        ranks.append(_size_rank(lambda _, turnover: answers.annual_revenue <= turnover))
    return sizes[max(ranks)]


def _size_rank(fits: Callable[[int, float], bool]) -> int:
    for rank, (_, staff, turnover) in enumerate(SIZE_THRESHOLDS):
        if fits(staff, turnover):
            return rank
    return len(SIZE_THRESHOLDS)


def generate_auto_assessments(
    requirements: Iterable[NIS2Requirement],
    answers: NIS2Answers,
) -> list[AutoAssessment]:
    """
    Pre-populate requirement statuses from the existing security posture.

    ISO 27001 certification, an existing CSIRT or a risk management
    framework mark the requirements they cover as partial. Small and
    micro entities get a proportionality note on simplifiable
    requirements, and ground infrastructure operators get a priority
    flag on ground segment requirements.

    Args:
        requirements: Applicable NIS2 requirements
        answers: NIS2 questionnaire answers

    Returns:
        One AutoAssessment per requirement, in catalog order
    """
    size = resolve_entity_size(answers)
    results = []

    for req in requirements:
        status = ComplianceStatus.NOT_ASSESSED.value
        reasons: list[str] = []
        flags: list[str] = []
        note = None

        if answers.has_iso27001 and req.iso27001_ref:
            status = ComplianceStatus.PARTIAL.value
            reasons.append(
                f"ISO 27001 {req.iso27001_ref} partially covers this requirement. "
                "Review space-specific additions."
            )

        if answers.has_existing_csirt and req.category in ("incident_handling", "reporting"):
            status = ComplianceStatus.PARTIAL.value
            reasons.append(
                "Your CSIRT must align reporting procedures with NIS2 Art. 23 timelines "
                "(24h early warning, 72h notification)."
                if req.category == "reporting"
                else "Your existing incident response capability provides a foundation. "
                "Verify NIS2 timeline compliance."
            )

        if answers.has_risk_management and req.category == "policies_risk_analysis":
            status = ComplianceStatus.PARTIAL.value
            reasons.append(
                "Existing risk management framework detected. Integrate space-specific "
                "threats (jamming, RF interference, orbital debris)."
            )

        if size in SMALL_SIZES and req.can_be_simplified:
            note = (
                "Proportionate implementation allowed under NIS2 Art. 21(1). Simplified "
                "measures may apply for your entity size."
            )

        if answers.operates_ground_infra:
            guidance = req.space_specific_guidance.lower()
            if any(keyword in guidance for keyword in GROUND_INFRA_KEYWORDS):
                flags.append("high_priority_ground_infra")

        if req.eu_space_act_ref:
            flags.append("eu_space_act_overlap")
        if req.severity == Severity.CRITICAL:
            flags.append("critical_severity")

        results.append(
            AutoAssessment(
                requirement_id=req.id,
                suggested_status=status,
                reason=f"{AUTO_ASSESSED_PREFIX} {' '.join(reasons)}" if reasons else "",
                proportionality_note=note,
                priority_flags=flags,
            )
        )

    return results


def _notes(assessments: Iterable[Any] | Mapping[str, str] | None) -> dict[str, str]:
    if not assessments or isinstance(assessments, Mapping):
        return {}
    return {
        a.requirement_id: a.notes for a in assessments if getattr(a, "notes", None)
    }


def _category_label(category: str | None) -> str:
    return CATEGORY_LABELS.get(category or "", category or "")


def generate_recommendations(
    answers: NIS2Answers,
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> NIS2Recommendations:
    """
    Coverage figures, critical gaps and a phased plan for recorded statuses.

    Args:
        answers: NIS2 questionnaire answers
        assessments: Statuses of the requirements under assessment

    Returns:
        NIS2Recommendations for the assessed requirement set
    """
    statuses = status_map(assessments)
    notes = _notes(assessments)
    catalog = {req.id: req for req in nis2_requirements()}
    meta = {rid: catalog.get(rid) for rid in statuses}
    size = resolve_entity_size(answers)
    total = len(statuses)

    iso_count = sum(1 for req in meta.values() if req and req.iso27001_ref)
    coverage = ISO27001Coverage(
        count=iso_count,
        total=total,
        percentage=round_half_up(iso_count / total * 100) if total else 0,
    )

    critical_gaps = sorted(
        (
            CriticalGap(
                id=rid,
                title=req.title,
                article_ref=req.article_ref,
                implementation_weeks=req.implementation_time_weeks or 0,
            )
            for rid, req in meta.items()
            if req
            and req.severity == Severity.CRITICAL
            and statuses[rid] in ("not_assessed", "non_compliant")
        ),
        key=lambda gap: -gap.implementation_weeks,
    )

    overlap_reqs = [req for req in meta.values() if req and req.eu_space_act_ref]
    overlap = SpaceActOverlapSummary(
        count=len(overlap_reqs),
        articles=list(dict.fromkeys(req.eu_space_act_ref for req in overlap_reqs)),
    )

    total_weeks = sum(
        (meta[rid].implementation_time_weeks or 0) if meta[rid] else 0
        for rid, status in statuses.items()
        if status in GAP_STATUSES
    )
    auto_assessed = sum(1 for note in notes.values() if note.startswith(AUTO_ASSESSED_PREFIX))

    recommendations = []
    if answers.has_iso27001:
        recommendations.append(
            f"Your ISO 27001 certification covers {coverage.count} of {total} requirements "
            f"({coverage.percentage}%). Focus on the space-specific additions that go beyond "
            "your existing ISMS."
        )
    else:
        recommendations.append(
            "Consider pursuing ISO 27001 certification — it would provide a foundation "
            f"covering {coverage.count} of {total} NIS2 requirements ({coverage.percentage}%)."
        )

    if critical_gaps:
        top = critical_gaps[0]
        recommendations.append(
            f"Priority: {len(critical_gaps)} critical gaps identified. Start with "
            f'"{top.title}" ({top.article_ref}, ~{top.implementation_weeks} weeks).'
        )
    else:
        recommendations.append(
            "No critical gaps remaining — focus on achieving full compliance for major and "
            "minor requirements."
        )

    if overlap_reqs:
        recommendations.append(
            f"{len(overlap_reqs)} requirements overlap with EU Space Act compliance. "
            "Coordinate with your existing Art. 74-85 measures to avoid duplicate work."
        )

    if answers.has_existing_csirt:
        recommendations.append(
            "Your existing CSIRT reduces incident response implementation time. Ensure 24h "
            "early warning and 72h detailed reporting procedures are documented per Art. 23."
        )
    else:
        recommendations.append(
            "Establish an incident response capability (CSIRT/SOC) — NIS2 Art. 23 requires "
            "24-hour early warning and 72-hour detailed notification to competent authorities."
        )

    if answers.operates_ground_infra:
        recommendations.append(
            "As a ground infrastructure operator, prioritize physical security, TT&C link "
            "encryption, and network segmentation for mission control centres."
        )

    if size in SMALL_SIZES:
        simplifiable = sum(1 for req in meta.values() if req and req.can_be_simplified)
        recommendations.append(
            f"As a {size} entity, {simplifiable} of {total} requirements allow proportionate "
            "implementation under Art. 21(1)."
        )

    if auto_assessed:
        recommendations.append(
            f'{auto_assessed} requirements were auto-assessed as "partial" based on your '
            "profile. Review and confirm or adjust each one."
        )

    logger.info(
        "nis2_recommendations_generated",
        requirements=total,
        critical_gaps=len(critical_gaps),
        auto_assessed=auto_assessed,
    )

    return NIS2Recommendations(
        iso27001_coverage=coverage,
        critical_gaps=critical_gaps[:5],
        eu_space_act_overlap=overlap,
        total_implementation_weeks=total_weeks,
        recommendations=recommendations,
        implementation_phases=_implementation_phases(
            answers.has_iso27001, size, statuses, meta
        ),
        auto_assessed_count=auto_assessed,
    )


def _implementation_phases(
    has_iso27001: bool | None,
    size: str | None,
    statuses: dict[str, str],
    meta: dict[str, NIS2Requirement | None],
) -> list[ImplementationPhase]:
    """Split open requirements into quick wins, critical, major and minor phases."""

    def entry(rid: str, rationale: str) -> PhaseRequirement:
        req = meta[rid]
        return PhaseRequirement(
            id=rid,
            title=req.title if req else rid,
            article_ref=req.article_ref if req else "",
            severity=req.severity if req else Severity.MINOR.value,
            category=_category_label(req.category if req else None),
            estimated_weeks=(req.implementation_time_weeks or 0) if req else 0,
            rationale=rationale,
        )

    def phase(number: int, name: str, description: str, reqs: list[PhaseRequirement]) -> None:
        if reqs:
            phases.append(
                ImplementationPhase(
                    phase=number,
                    name=name,
                    description=description,
                    total_weeks=max(r.estimated_weeks for r in reqs),
                    requirements=reqs,
                )
            )

    phases: list[ImplementationPhase] = []
    open_ids = [
        rid
        for rid, status in statuses.items()
        if status not in (ComplianceStatus.COMPLIANT.value, ComplianceStatus.NOT_APPLICABLE.value)
    ]
    used: set[str] = set()

    quick_wins = []
    for rid in open_ids:
        req = meta[rid]
        if not req:
            continue
        if statuses[rid] == "partial":
            rationale = "Already partially implemented — complete remaining gaps"
        elif has_iso27001 and req.iso27001_ref:
            rationale = f"Leverage ISO 27001 {req.iso27001_ref}"
        elif size in SMALL_SIZES and req.can_be_simplified:
            rationale = "Eligible for proportionate implementation"
        else:
            continue
        quick_wins.append(entry(rid, rationale))
    quick_wins.sort(key=lambda r: r.estimated_weeks)
    used.update(r.id for r in quick_wins)
    phase(
        1,
        "Quick Wins",
        "Leverage existing certifications, partial implementations, and proportionate measures",
        quick_wins,
    )

    critical = [
        entry(rid, "Critical for NIS2 baseline compliance")
        for rid in open_ids
        if rid not in used and meta[rid] and meta[rid].severity == Severity.CRITICAL
    ]
    used.update(r.id for r in critical)
    phase(
        2,
        "Critical Gaps",
        "Essential requirements that must be addressed first for NIS2 compliance",
        critical,
    )

    major = [
        entry(rid, f"Category: {_category_label(meta[rid].category) or 'General'}")
        for rid in open_ids
        if rid not in used and meta[rid] and meta[rid].severity == Severity.MAJOR
    ]
    used.update(r.id for r in major)
    phase(
        3,
        "Major Items",
        "Important requirements for comprehensive compliance coverage",
        major,
    )

    minor = [
        entry(rid, "Documentation and continuous improvement")
        for rid in open_ids
        if rid not in used
    ]
    phase(
        4,
        "Minor Items",
        "Lower-priority requirements, documentation, and refinements",
        minor,
    )

    return phases


def run_auto_assessment(
    answers: NIS2Answers,
) -> tuple[Classification, list[AutoAssessment], NIS2Recommendations]:
    """
    Classify, pre-populate statuses and build recommendations in one pass.

    The suggested statuses and their reasons feed the recommendations as if
    they had been recorded.
    """
    classified = classify_nis2_entity(answers)
    applicable = get_applicable_nis2_requirements(classified.classification, answers)
    suggestions = generate_auto_assessments(applicable, answers)
    recorded = [
        AssessmentItem(
            requirement_id=s.requirement_id,
            status=ComplianceStatus(s.suggested_status),
            notes=s.reason or None,
        )
        for s in suggestions
    ]
    return classified, suggestions, generate_recommendations(answers, recorded)
