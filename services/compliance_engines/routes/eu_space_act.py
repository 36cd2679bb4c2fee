"""
EU Space Act Routes
===================

API endpoints for EU Space Act applicability.

Version: 0.1.0
"""

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Query

from services.compliance_engines.catalogs import eu_space_act_catalog
from services.compliance_engines.engines.eu_space_act import (
    calculate_compliance,
    check_scope,
    get_checklist,
    redact_articles,
)
from services.compliance_engines.models.eu_space_act import SpaceActAnswers
from shared.logging import get_logger


logger = get_logger(__name__)

router = APIRouter()


@router.post("/assess")
async def assess(answers: SpaceActAnswers) -> dict[str, Any]:
    """
    Assess EU Space Act applicability from questionnaire answers.

    Operators excluded by Art. 2 get the exclusion instead of a result.
    """
    verdict = check_scope(answers)
    if verdict is not None:
        logger.info("eu_space_act_out_of_scope", reason=verdict.message)
        return {"in_scope": False, "out_of_scope": asdict(verdict)}

    return {"in_scope": True, "result": redact_articles(calculate_compliance(answers))}


@router.get("/checklist")
async def checklist(
    operator_type: str = Query(default="spacecraft_operator"),
    third_country: bool = Query(default=False),
) -> list[dict[str, Any]]:
    """Compliance checklist for an operator type."""
    items = get_checklist(eu_space_act_catalog(), operator_type, third_country)
    return [item.model_dump() for item in items]


@router.get("/modules")
async def modules() -> list[dict[str, Any]]:
    """Regulation modules with their article ranges."""
    return [module.model_dump() for module in eu_space_act_catalog().modules]
