"""
EU Space Act Models
===================

Questionnaire answers for the EU Space Act applicability assessment.

Version: 0.1.0
"""

from typing import Literal

from pydantic import BaseModel, Field


ActivityType = Literal["spacecraft", "launch_vehicle", "launch_site", "isos", "data_provider"]
Establishment = Literal["eu", "third_country_eu_services", "third_country_no_eu"]
SpaceActEntitySize = Literal["small", "research", "medium", "large"]
Orbit = Literal["LEO", "MEO", "GEO", "beyond"]


class SpaceActAnswers(BaseModel):
    """EU Space Act questionnaire answers. Unanswered questions stay None."""

    activity_type: ActivityType | None = None
    is_defense_only: bool | None = None
    has_post_launch_assets: bool | None = Field(
        default=None,
        description="Whether any asset launches on or after 1 January 2030",
    )
    establishment: Establishment | None = None
    entity_size: SpaceActEntitySize | None = None
    operates_constellation: bool | None = None
    constellation_size: int | None = Field(default=None, ge=0)
    primary_orbit: Orbit | None = None
    offers_eu_services: bool | None = None
