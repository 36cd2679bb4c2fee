"""
NIS2 Routes
===========

API endpoints for NIS2 Directive classification, maturity scoring and
auto-assessment.

Version: 0.1.0
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter

from services.compliance_engines.engines.nis2 import (
    calculate_nis2_compliance,
    calculate_nis2_maturity_score,
    check_proportionality_eligibility,
    classify_nis2_entity,
    generate_recommendations,
    redact_nis2_result_for_client,
    run_auto_assessment,
)
from services.compliance_engines.models.nis2 import (
    NIS2Answers,
    NIS2MaturityRequest,
    NIS2RecommendationsRequest,
)


router = APIRouter()


@router.post("/classify")
async def classify(answers: NIS2Answers) -> dict[str, Any]:
    """Classify an entity as essential, important or out of scope."""
    return asdict(classify_nis2_entity(answers))


@router.post("/assess")
async def assess(answers: NIS2Answers) -> dict[str, Any]:
    """Full NIS2 scoping assessment with requirement guidance stripped."""
    return redact_nis2_result_for_client(calculate_nis2_compliance(answers))


@router.post("/maturity")
async def maturity(request: NIS2MaturityRequest) -> dict[str, Any]:
    return asdict(calculate_nis2_maturity_score(request.assessments))


@router.post("/proportionality")
async def proportionality(answers: NIS2Answers) -> dict[str, Any]:
    """Whether the entity qualifies for proportionate measures."""
    return asdict(check_proportionality_eligibility(answers))


@router.post("/auto-assessment")
async def auto_assessment(answers: NIS2Answers) -> dict[str, Any]:
    """
    Suggested starting statuses and a phased plan from the questionnaire.

    Requirements covered by ISO 27001, an existing CSIRT or risk
    management framework start as partial.
    """
    classified, suggestions, recommendations = run_auto_assessment(answers)
    return {
        "entity_classification": classified.classification,
        "auto_assessments": [asdict(s) for s in suggestions],
        "recommendations": asdict(recommendations),
    }


@router.post("/recommendations")
async def recommendations(request: NIS2RecommendationsRequest) -> dict[str, Any]:
    """Coverage, critical gaps and implementation phases for recorded statuses."""
    return asdict(generate_recommendations(request.answers, request.assessments))
