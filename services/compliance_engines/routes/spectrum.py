"""
Spectrum Routes
===============

API endpoints for ITU and national spectrum licensing assessment.

Version: 0.1.0
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, HTTPException, Query, status

from services.compliance_engines.engines.spectrum import (
    calculate_estimated_fees,
    generate_filing_timeline_report,
    get_applicable_licenses,
    get_bands_for_service,
    get_frequency_band_info,
    get_impacting_wrc_decisions,
    perform_assessment,
    recommend_service_types,
    recommend_service_types_for_use_case,
    validate_spectrum_profile,
)
from services.compliance_engines.models.spectrum import (
    SpectrumAssessmentRequest,
    SpectrumProfileInput,
)


router = APIRouter()


@router.post("/assess")
async def assess(request: SpectrumAssessmentRequest) -> dict[str, Any]:
    """Full spectrum assessment including filing progress and coordination."""
    result = perform_assessment(
        request.profile,
        request.assessments,
        filing_statuses=request.filing_statuses,
        coordination=request.coordination_statuses,
    )
    return asdict(result)


@router.post("/filing-timeline")
async def filing_timeline(profile: SpectrumProfileInput) -> dict[str, Any]:
    """
    ITU filing timeline working back from the target launch date.

    Raises 400 when the profile has no launch date.
    """
    return asdict(generate_filing_timeline_report(validate_spectrum_profile(profile)))


@router.post("/licenses")
async def licenses(profile: SpectrumProfileInput) -> dict[str, Any]:
    """National licenses, WRC decisions and fee estimate for a profile."""
    validated = validate_spectrum_profile(profile)
    applicable = get_applicable_licenses(validated)
    return {
        "licenses": [lic.model_dump() for lic in applicable],
        "wrc_decisions": [d.model_dump() for d in get_impacting_wrc_decisions(validated)],
        "estimated_fees": asdict(calculate_estimated_fees(applicable)),
    }


@router.get("/bands/{band}")
async def band(band: str) -> dict[str, Any]:
    info = get_frequency_band_info(band)
    if info is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Frequency band {band} not found",
        )
    return info.model_dump()


@router.get("/services/{service_type}/bands")
async def service_bands(service_type: str) -> list[str]:
    return get_bands_for_service(service_type)


@router.get("/service-types")
async def service_types(
    bands: list[str] = Query(default=[]),
    use_case: str | None = Query(default=None),
) -> list[str]:
    """Service types suggested by a use case, or else by frequency bands."""
    if use_case:
        return recommend_service_types_for_use_case(use_case)
    return recommend_service_types(bands)
