"""
COPUOS Routes
=============

API endpoints for COPUOS, IADC and ISO 24113 debris guideline assessment.

Version: 0.1.0
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from services.compliance_engines.engines.copuos import (
    get_applicable_guidelines,
    get_compliance_summary,
    get_cross_reference_for_article,
    get_guideline,
    map_to_eu_space_act_debris_module,
    perform_assessment,
    validate_mission_profile,
)
from services.compliance_engines.models.copuos import CopuosAssessmentRequest


router = APIRouter()


@router.post("/assess")
async def assess(request: CopuosAssessmentRequest) -> dict[str, Any]:
    """
    Assess a mission against the applicable guidelines.

    Raises 400 when the mission profile is incomplete.
    """
    profile = validate_mission_profile(request.profile)
    return asdict(perform_assessment(profile, request.assessments))


@router.post("/summary")
async def summary(request: CopuosAssessmentRequest) -> dict[str, Any]:
    """Status counts over the mission's applicable guidelines."""
    profile = validate_mission_profile(request.profile)
    guidelines = get_applicable_guidelines(profile)
    return asdict(get_compliance_summary(guidelines, request.assessments))


@router.get("/guidelines/{guideline_id}")
async def guideline(guideline_id: str) -> dict[str, Any]:
    found = get_guideline(guideline_id)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Guideline {guideline_id} not found",
        )
    return found.model_dump()


@router.get("/cross-references")
async def cross_references(
    article: str = Query(..., min_length=1, description="EU Space Act article, e.g. Art. 58"),
) -> dict[str, Any]:
    """Guidelines referencing an EU Space Act article, grouped by source."""
    return asdict(get_cross_reference_for_article(article))


@router.get("/debris-module")
async def debris_module() -> dict[str, list[dict[str, Any]]]:
    """Guidelines mapped onto each EU Space Act debris article."""
    return {
        article: [g.model_dump() for g in guidelines]
        for article, guidelines in map_to_eu_space_act_debris_module().items()
    }
