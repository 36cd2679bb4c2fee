"""
Cross-Regulation Routes
=======================

API endpoints for NIS2 / EU Space Act / ISO 27001 overlap analysis.

Version: 0.1.0
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter

from services.compliance_engines.catalogs.models import NIS2Requirement
from services.compliance_engines.engines.cross_regulation import (
    build_unified_compliance_matrix,
    calculate_overlap_savings,
    get_cross_references_for_requirement,
    get_cross_regulation_summary,
    get_overlapping_requirements,
    get_requirement,
)
from services.compliance_engines.engines.nis2 import (
    classify_nis2_entity,
    get_applicable_nis2_requirements,
)
from services.compliance_engines.models.nis2 import NIS2Answers


router = APIRouter()


def _applicable(answers: NIS2Answers) -> list[NIS2Requirement]:
    classification = classify_nis2_entity(answers)
    return get_applicable_nis2_requirements(classification.classification, answers)


@router.get("/summary")
async def summary() -> dict[str, Any]:
    """Counts of cross references by relationship and source."""
    return asdict(get_cross_regulation_summary())


@router.post("/matrix")
async def matrix(answers: NIS2Answers) -> list[dict[str, Any]]:
    """Unified compliance matrix over the entity's applicable NIS2 requirements."""
    return [asdict(category) for category in build_unified_compliance_matrix(_applicable(answers))]


@router.post("/savings")
async def savings(answers: NIS2Answers) -> dict[str, Any]:
    return asdict(calculate_overlap_savings(_applicable(answers)))


@router.post("/overlaps")
async def overlaps(answers: NIS2Answers) -> list[dict[str, Any]]:
    return [asdict(overlap) for overlap in get_overlapping_requirements(_applicable(answers))]


@router.get("/requirements/{requirement_id}")
async def requirement_cross_references(requirement_id: str) -> dict[str, Any]:
    """
    A NIS2 requirement with its EU Space Act and ISO 27001 cross references.

    Unknown ids are answered with 404.
    """
    requirement = get_requirement(requirement_id)
    return {
        "requirement": requirement.model_dump(),
        "cross_references": asdict(get_cross_references_for_requirement(requirement)),
    }
