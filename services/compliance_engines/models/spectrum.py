"""
Spectrum Models
===============

Spectrum profile and filing/coordination state for the ITU and national
spectrum licensing assessment.

Version: 0.1.0
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from services.compliance_engines.models.common import AssessmentItem


SpectrumSource = Literal["ITU", "FCC", "OFCOM", "BNETZA", "CEPT", "WRC"]
ServiceType = Literal["FSS", "MSS", "BSS", "EESS", "SRS", "RNS", "AMSS", "MMSS", "ISL"]
FrequencyBand = Literal["L", "S", "C", "X", "Ku", "Ka", "V", "Q", "W", "O", "UHF", "VHF"]
OrbitType = Literal["GEO", "NGSO", "LEO", "MEO", "HEO"]
FilingPhase = Literal["API", "CR_C", "NOTIFICATION", "RECORDING"]
FilingStatus = Literal[
    "not_started",
    "in_preparation",
    "submitted",
    "under_review",
    "coordination_ongoing",
    "favorable",
    "unfavorable",
    "recorded",
    "expired",
]
CoordinationStatus = Literal["not_required", "pending", "in_progress", "completed", "disputed"]


class SpectrumProfileInput(BaseModel):
    """Spectrum profile as submitted; validated by ``validate_spectrum_profile``."""

    service_types: list[ServiceType] = Field(default_factory=list)
    frequency_bands: list[FrequencyBand] = Field(default_factory=list)
    orbit_type: OrbitType | None = None
    number_of_satellites: int | None = Field(default=None, ge=0)
    is_constellation: bool | None = None
    primary_jurisdiction: SpectrumSource | None = None
    additional_jurisdictions: list[SpectrumSource] | None = None
    has_existing_filings: bool | None = None
    target_launch_date: date | None = None
    uplink_bands: list[FrequencyBand] = Field(default_factory=list)
    downlink_bands: list[FrequencyBand] = Field(default_factory=list)
    intersatellite_links: bool | None = None
    gso_proximity: bool | None = None


class SpectrumProfile(BaseModel):
    """Validated spectrum profile with defaults applied."""

    service_types: list[ServiceType]
    frequency_bands: list[FrequencyBand]
    orbit_type: OrbitType
    number_of_satellites: int = 1
    is_constellation: bool = False
    primary_jurisdiction: SpectrumSource = "ITU"
    additional_jurisdictions: list[SpectrumSource] = Field(default_factory=list)
    has_existing_filings: bool = False
    target_launch_date: date | None = None
    uplink_bands: list[FrequencyBand] = Field(default_factory=list)
    downlink_bands: list[FrequencyBand] = Field(default_factory=list)
    intersatellite_links: bool = False
    gso_proximity: bool | None = None


class BilateralCoordination(BaseModel):
    administration: str
    status: CoordinationStatus


class CoordinationStatuses(BaseModel):
    itu_status: CoordinationStatus | None = None
    bilateral: list[BilateralCoordination] = Field(default_factory=list)


class SpectrumAssessmentRequest(BaseModel):
    """Spectrum profile, requirement statuses and filing progress."""

    profile: SpectrumProfileInput
    assessments: list[AssessmentItem] = Field(default_factory=list)
    filing_statuses: dict[FilingPhase, FilingStatus] | None = None
    coordination_statuses: CoordinationStatuses | None = None
