"""
Export Control Models
=====================

Company profile for the ITAR / EAR export control assessment.

Version: 0.1.0
"""

from typing import Literal

from pydantic import BaseModel, Field

from services.compliance_engines.models.common import AssessmentItem


CompanyType = Literal[
    "spacecraft_manufacturer",
    "satellite_operator",
    "launch_provider",
    "component_supplier",
    "software_developer",
    "technology_provider",
    "defense_contractor",
    "research_institution",
    "university",
    "foreign_subsidiary",
    "all",
]


class ExportControlProfileInput(BaseModel):
    """Company profile as submitted; validated by ``validate_export_control_profile``."""

    company_type: list[CompanyType] = Field(default_factory=list)
    has_itar_items: bool | None = None
    has_ear_items: bool | None = None
    has_foreign_nationals: bool | None = None
    foreign_national_countries: list[str] | None = None
    exports_to_countries: list[str] | None = None
    has_technology_transfer: bool | None = None
    has_defense_contracts: bool | None = None
    has_manufacturing_abroad: bool | None = None
    has_joint_ventures: bool | None = None
    annual_export_value: float | None = Field(default=None, ge=0)
    registered_with_ddtc: bool | None = None
    has_tcp: bool | None = Field(default=None, description="Technology Control Plan in place")
    has_ecl: bool | None = Field(default=None, description="Export control licensing in place")


class ExportControlProfile(BaseModel):
    """Validated company profile with defaults applied."""

    company_type: list[CompanyType]
    has_itar_items: bool = False
    has_ear_items: bool = False
    has_foreign_nationals: bool = False
    foreign_national_countries: list[str] = Field(default_factory=list)
    exports_to_countries: list[str] = Field(default_factory=list)
    has_technology_transfer: bool = False
    has_defense_contracts: bool = False
    has_manufacturing_abroad: bool = False
    has_joint_ventures: bool = False
    annual_export_value: float | None = None
    registered_with_ddtc: bool = False
    has_tcp: bool = False
    has_ecl: bool = False


class ExportControlAssessmentRequest(BaseModel):
    """Company profile plus per-requirement statuses."""

    profile: ExportControlProfileInput
    assessments: list[AssessmentItem] = Field(default_factory=list)


class PenaltyExposureRequest(BaseModel):
    profile: ExportControlProfileInput
    has_compliance_program: bool = False
    has_voluntary_disclosure: bool = False


class JurisdictionRequest(BaseModel):
    """Facts used to determine whether an item is ITAR or EAR controlled."""

    item_description: str
    is_specifically_designed_for_military: bool = False
    has_commercial_equivalent: bool = False
    is_on_usml: bool = False
