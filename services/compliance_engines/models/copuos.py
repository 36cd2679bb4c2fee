"""
COPUOS Models
=============

Mission profile for the COPUOS LTS / IADC / ISO 24113 debris assessment.

Version: 0.1.0
"""

from typing import Literal

from pydantic import BaseModel, Field

from services.compliance_engines.models.common import AssessmentItem


OrbitRegime = Literal["LEO", "MEO", "GEO", "HEO", "GTO", "cislunar", "deep_space"]
MissionType = Literal["commercial", "scientific", "governmental", "educational", "military"]
SatelliteCategory = Literal["cubesat", "smallsat", "medium", "large", "mega"]


class MissionProfileInput(BaseModel):
    """Mission profile as submitted; validated by ``validate_mission_profile``."""

    orbit_regime: OrbitRegime | None = None
    altitude_km: float | None = None
    inclination_deg: float | None = None
    mission_type: MissionType | None = None
    satellite_mass_kg: float | None = None
    has_maneuverability: bool | None = None
    has_propulsion: bool | None = None
    planned_lifetime_years: float | None = None
    is_constellation: bool | None = None
    constellation_size: int | None = None
    launch_date: str | None = None
    country_of_registry: str | None = None


class MissionProfile(BaseModel):
    """Validated mission profile with defaults applied."""

    orbit_regime: OrbitRegime
    altitude_km: float | None = None
    inclination_deg: float | None = None
    mission_type: MissionType
    satellite_category: SatelliteCategory
    satellite_mass_kg: float = Field(gt=0)
    has_maneuverability: bool = False
    has_propulsion: bool = False
    planned_lifetime_years: float = 5
    is_constellation: bool = False
    constellation_size: int | None = None
    launch_date: str | None = None
    country_of_registry: str | None = None


class CopuosAssessmentRequest(BaseModel):
    """Mission profile plus per-guideline statuses."""

    profile: MissionProfileInput
    assessments: list[AssessmentItem] = Field(default_factory=list)
