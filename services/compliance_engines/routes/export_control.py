"""
Export Control Routes
=====================

API endpoints for ITAR / EAR export control assessment.

Version: 0.1.0
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException, status

from services.compliance_engines.engines.export_control import (
    analyze_license_exceptions,
    assess_deemed_export_risks,
    assess_penalty_exposure,
    assess_screening_requirements,
    assess_tcp_requirements,
    determine_jurisdiction,
    determine_overall_risk,
    generate_documentation_checklist,
    get_ccl_category,
    get_usml_category,
    perform_assessment,
    validate_export_control_profile,
)
from services.compliance_engines.models.export_control import (
    ExportControlAssessmentRequest,
    ExportControlProfileInput,
    JurisdictionRequest,
    PenaltyExposureRequest,
)


router = APIRouter()


@router.post("/assess")
async def assess(request: ExportControlAssessmentRequest) -> dict[str, Any]:
    """Full ITAR/EAR assessment. Raises 400 without a company type."""
    return asdict(perform_assessment(request.profile, request.assessments))


@router.post("/risk")
async def risk(profile: ExportControlProfileInput) -> dict[str, str]:
    """Inherent export control risk before any requirement is assessed."""
    return {"risk_level": determine_overall_risk(validate_export_control_profile(profile))}


@router.post("/deemed-exports")
async def deemed_exports(profile: ExportControlProfileInput) -> dict[str, Any]:
    return asdict(assess_deemed_export_risks(validate_export_control_profile(profile)))


@router.post("/screening")
async def screening(profile: ExportControlProfileInput) -> dict[str, Any]:
    return asdict(assess_screening_requirements(validate_export_control_profile(profile)))


@router.post("/tcp")
async def technology_control_plan(profile: ExportControlProfileInput) -> dict[str, Any]:
    return asdict(assess_tcp_requirements(validate_export_control_profile(profile)))


@router.post("/license-exceptions")
async def license_exceptions(profile: ExportControlProfileInput) -> list[dict[str, Any]]:
    validated = validate_export_control_profile(profile)
    return [asdict(e) for e in analyze_license_exceptions(validated)]


@router.post("/documentation")
async def documentation(profile: ExportControlProfileInput) -> list[dict[str, Any]]:
    """Record keeping checklist grouped by compliance area."""
    validated = validate_export_control_profile(profile)
    return [asdict(c) for c in generate_documentation_checklist(validated)]


@router.post("/penalty-exposure")
async def penalty_exposure(request: PenaltyExposureRequest) -> dict[str, Any]:
    result = assess_penalty_exposure(
        validate_export_control_profile(request.profile),
        request.has_compliance_program,
        request.has_voluntary_disclosure,
    )
    return asdict(result)


@router.post("/jurisdiction")
async def jurisdiction(request: JurisdictionRequest) -> dict[str, str]:
    """Likely jurisdiction of a single item."""
    return {
        "item_description": request.item_description,
        "jurisdiction": determine_jurisdiction(
            request.item_description,
            request.is_specifically_designed_for_military,
            request.has_commercial_equivalent,
            request.is_on_usml,
        ),
    }


@router.get("/usml/{category}")
async def usml_category(category: str) -> dict[str, Any]:
    found = get_usml_category(category)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"USML category {category} not found",
        )
    return found.model_dump()


@router.get("/ccl/{category}")
async def ccl_category(category: str) -> dict[str, Any]:
    found = get_ccl_category(category)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"CCL category {category} not found",
        )
    return found.model_dump()
