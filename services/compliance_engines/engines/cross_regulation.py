"""
Cross-Regulation Service
========================

Maps NIS2 requirements across the EU Space Act, the ENISA space threat
landscape controls and ISO 27001 so operators can see where a single
implementation satisfies several frameworks.

Version: 0.1.0
"""

import math
from dataclasses import dataclass, field
from collections.abc import Iterable

from services.compliance_engines.catalogs import (
    cross_references,
    enisa_controls,
    nis2_requirements,
)
from services.compliance_engines.catalogs.models import CrossReference, NIS2Requirement
from services.compliance_engines.engines.scoring import round_half_up
from shared.logging import get_logger
from shared.models.errors import NotFoundError


logger = get_logger(__name__)


CATEGORY_LABELS: dict[str, str] = {
    "policies_risk_analysis": "Risk Analysis & Security Policies",
    "incident_handling": "Incident Handling",
    "business_continuity": "Business Continuity & Crisis Management",
    "supply_chain": "Supply Chain Security",
    "network_acquisition": "Network & System Security",
    "effectiveness_assessment": "Security Effectiveness Assessment",
    "cyber_hygiene": "Cyber Hygiene & Training",
    "cryptography": "Cryptography & Encryption",
    "hr_access_asset": "HR Security & Access Control",
    "mfa_authentication": "Multi-Factor Authentication",
    "governance": "Governance & Accountability",
    "registration": "Registration & Notification",
    "reporting": "Incident Reporting",
    "information_sharing": "Information Sharing",
}

SINGLE_IMPLEMENTATION = "single_implementation"
PARTIAL_OVERLAP = "partial_overlap"
SEPARATE_EFFORT = "separate_effort"

EFFORT_ORDER = {SINGLE_IMPLEMENTATION: 0, PARTIAL_OVERLAP: 1, SEPARATE_EFFORT: 2}

# Implementation time assumed for requirements without an estimate
DEFAULT_IMPLEMENTATION_WEEKS = 2


@dataclass
class UnifiedComplianceCategory:
    """One row of the unified compliance matrix."""

    category: str
    category_label: str
    nis2_requirement: NIS2Requirement
    eu_space_act_articles: list[str]
    enisa_controls: list[str]
    iso27001_refs: list[str]
    compliance_effort: str
    description: str


@dataclass
class OverlapSavingsReport:
    total_nis2_requirements: int
    satisfied_by_eu_space_act: int
    partially_satisfied: int
    additional_effort_required: int
    estimated_weeks_saved: int
    savings_percentage: int


@dataclass
class RequirementOverlap:
    nis2_requirement_id: str
    nis2_article: str
    nis2_title: str
    eu_space_act_article: str
    relationship: str
    description: str
    effort_type: str


@dataclass
class RequirementCrossReferences:
    eu_space_act: list[CrossReference] = field(default_factory=list)
    enisa: list[CrossReference] = field(default_factory=list)
    iso27001: list[CrossReference] = field(default_factory=list)
    total: int = 0


@dataclass
class NIS2ToSpaceActTotals:
    total: int
    overlapping: int
    superseded: int


@dataclass
class CrossRegulationSummary:
    total_cross_references: int
    by_relationship: dict[str, int]
    by_source_regulation: dict[str, int]
    nis2_to_eu_space_act: NIS2ToSpaceActTotals


# =============================================================================
# Helpers
# =============================================================================


def _involves(ref: CrossReference, regulation: str) -> bool:
    return regulation in (ref.source_regulation, ref.target_regulation)


def _refs_for_nis2_article(article: str) -> list[CrossReference]:
    return [
        ref
        for ref in cross_references()
        if (ref.source_regulation == "nis2" and ref.source_article == article)
        or (ref.target_regulation == "nis2" and ref.target_article == article)
    ]


def _nis2_space_act_refs() -> list[CrossReference]:
    return [
        ref
        for ref in cross_references()
        if {ref.source_regulation, ref.target_regulation} == {"nis2", "eu_space_act"}
    ]


def get_requirement(requirement_id: str) -> NIS2Requirement:
    """
    Look up a NIS2 requirement by id.

    Raises:
        NotFoundError: If no requirement has the id
    """
    for req in nis2_requirements():
        if req.id == requirement_id:
            return req
    raise NotFoundError(f"NIS2 requirement not found: {requirement_id}")


# =============================================================================
# Unified Matrix
# =============================================================================


def build_unified_compliance_matrix(
    requirements: Iterable[NIS2Requirement],
) -> list[UnifiedComplianceCategory]:
    """
    Group requirements by category and map each group across frameworks.

    Args:
        requirements: Applicable NIS2 requirements

    Returns:
        Matrix rows, single implementations first
    """
    by_category: dict[str, list[NIS2Requirement]] = {}
    for req in requirements:
        by_category.setdefault(req.category, []).append(req)

    controls = enisa_controls()
    matrix = []

    for category, reqs in by_category.items():
        # dicts keep first-seen order for the output lists
        eu_articles: dict[str, None] = {}
        enisa_ids: dict[str, None] = {}
        iso_refs: dict[str, None] = {}

        for req in reqs:
            if req.eu_space_act_ref:
                eu_articles[req.eu_space_act_ref] = None
            for control_id in req.enisa_control_ids:
                enisa_ids[control_id] = None
            if req.iso27001_ref:
                iso_refs[req.iso27001_ref] = None

        articles = [req.article for req in reqs]
        for control in controls:
            if control.nis2_mapping and any(a in control.nis2_mapping for a in articles):
                enisa_ids[control.id] = None

        if eu_articles and (enisa_ids or iso_refs):
            effort = SINGLE_IMPLEMENTATION
            note = (
                f" Implementing this for NIS2 also satisfies EU Space Act "
                f"{', '.join(eu_articles)} and {len(enisa_ids)} ENISA control(s)."
            )
        elif eu_articles:
            effort = PARTIAL_OVERLAP
            note = f" Partial overlap with EU Space Act {', '.join(eu_articles)}."
        else:
            effort = SEPARATE_EFFORT
            note = ""

        matrix.append(
            UnifiedComplianceCategory(
                category=category,
                category_label=CATEGORY_LABELS.get(category, category),
                nis2_requirement=reqs[0],
                eu_space_act_articles=list(eu_articles),
                enisa_controls=list(enisa_ids),
                iso27001_refs=list(iso_refs),
                compliance_effort=effort,
                description=f"{len(reqs)} NIS2 requirement(s) in this category.{note}",
            )
        )

    matrix.sort(key=lambda row: EFFORT_ORDER[row.compliance_effort])
    return matrix


# =============================================================================
# Overlap
# =============================================================================


def calculate_overlap_savings(
    requirements: Iterable[NIS2Requirement],
) -> OverlapSavingsReport:
    """
    How much of NIS2 an operator preparing for the EU Space Act already covers.

    Superseded requirements save their full implementation time and
    overlapping ones save half of it, rounded up.
    """
    reqs = list(requirements)
    satisfied = 0
    partial = 0
    additional = 0
    weeks_saved = 0

    for req in reqs:
        xrefs = _refs_for_nis2_article(req.article)
        if not any(_involves(ref, "eu_space_act") for ref in xrefs):
            additional += 1
            continue

        weeks = req.implementation_time_weeks or DEFAULT_IMPLEMENTATION_WEEKS
        relationships = {ref.relationship for ref in xrefs}
        if "supersedes" in relationships:
            satisfied += 1
            weeks_saved += weeks
        elif "overlaps" in relationships:
            partial += 1
            weeks_saved += math.ceil(weeks * 0.5)
        else:
            additional += 1

    percentage = (
        round_half_up((satisfied + partial * 0.5) / len(reqs) * 100) if reqs else 0
    )

    logger.debug(
        "overlap_savings_calculated",
        total=len(reqs),
        satisfied=satisfied,
        partial=partial,
        weeks_saved=weeks_saved,
    )

    return OverlapSavingsReport(
        total_nis2_requirements=len(reqs),
        satisfied_by_eu_space_act=satisfied,
        partially_satisfied=partial,
        additional_effort_required=additional,
        estimated_weeks_saved=weeks_saved,
        savings_percentage=percentage,
    )


def get_overlapping_requirements(
    requirements: Iterable[NIS2Requirement],
) -> list[RequirementOverlap]:
    """Every NIS2 to EU Space Act relation for the given requirements."""
    overlaps = []
    for req in requirements:
        article = req.article
        for xref in _nis2_space_act_refs():
            nis2_article = (
                xref.source_article if xref.source_regulation == "nis2" else xref.target_article
            )
            if nis2_article != article:
                continue

            if xref.relationship in ("supersedes", "implements"):
                effort = SINGLE_IMPLEMENTATION
            elif xref.relationship == "overlaps":
                effort = PARTIAL_OVERLAP
            else:
                effort = SEPARATE_EFFORT

            overlaps.append(
                RequirementOverlap(
                    nis2_requirement_id=req.id,
                    nis2_article=req.article_ref,
                    nis2_title=req.title,
                    eu_space_act_article=(
                        xref.source_article
                        if xref.source_regulation == "eu_space_act"
                        else xref.target_article
                    ),
                    relationship=xref.relationship,
                    description=xref.description,
                    effort_type=effort,
                )
            )
    return overlaps


def get_cross_references_for_requirement(
    requirement: NIS2Requirement,
) -> RequirementCrossReferences:
    """Cross references of a NIS2 requirement bucketed by the other framework."""
    refs = _refs_for_nis2_article(requirement.article)
    return RequirementCrossReferences(
        eu_space_act=[r for r in refs if _involves(r, "eu_space_act")],
        enisa=[r for r in refs if _involves(r, "enisa_space")],
        iso27001=[r for r in refs if _involves(r, "iso27001")],
        total=len(refs),
    )


def get_cross_regulation_summary() -> CrossRegulationSummary:
    """Counts of cross references by relationship and source regulation."""
    by_relationship: dict[str, int] = {}
    by_source: dict[str, int] = {}
    refs = cross_references()

    for ref in refs:
        by_relationship[ref.relationship] = by_relationship.get(ref.relationship, 0) + 1
        by_source[ref.source_regulation] = by_source.get(ref.source_regulation, 0) + 1

    nis2_space_act = _nis2_space_act_refs()

    return CrossRegulationSummary(
        total_cross_references=len(refs),
        by_relationship=by_relationship,
        by_source_regulation=by_source,
        nis2_to_eu_space_act=NIS2ToSpaceActTotals(
            total=len(nis2_space_act),
            overlapping=sum(1 for r in nis2_space_act if r.relationship == "overlaps"),
            superseded=sum(1 for r in nis2_space_act if r.relationship == "supersedes"),
        ),
    )
