"""
Spectrum Engine
===============

Spectrum and ITU compliance for satellite operators: ITU Radio
Regulations filings (API, CR/C, notification, recording), national
licensing (FCC, Ofcom, BNetzA, CEPT), bilateral coordination, EPFD
limits and WRC outcomes.

Filing windows are computed with calendar-month arithmetic
(``dateutil.relativedelta``); dates that do not exist in the target
month clamp to its last day.

Version: 0.1.0
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from dateutil.relativedelta import relativedelta

from services.compliance_engines.catalogs import spectrum_catalog
from services.compliance_engines.catalogs.models import (
    FrequencyBandInfo,
    JurisdictionLicense,
    SpectrumRequirement,
    WRCDecision,
)
from services.compliance_engines.engines.scoring import (
    GAP_STATUSES,
    calculate_group_score,
    gap_description,
    risk_weight,
    round_half_up,
    status_map,
)
from services.compliance_engines.models.spectrum import (
    CoordinationStatuses,
    SpectrumProfile,
    SpectrumProfileInput,
)
from shared.logging import get_logger
from shared.models.compliance import RISK_ORDER, RiskLevel
from shared.models.errors import ProfileValidationError


logger = get_logger(__name__)


SOURCES = ("ITU", "FCC", "OFCOM", "BNETZA", "CEPT", "WRC")
STATUS_SOURCES = ("ITU", "FCC", "OFCOM", "BNETZA", "CEPT")
CATEGORIES = ("filing", "coordination", "licensing", "interference", "technical", "environmental")

NGSO_ORBITS = frozenset({"LEO", "MEO"})

SOURCE_NAMES = {
    "ITU": "International Telecommunication Union",
    "FCC": "FCC (United States)",
    "OFCOM": "Ofcom (United Kingdom)",
    "BNETZA": "BNetzA (Germany)",
    "CEPT": "CEPT/ECC (Europe)",
    "WRC": "World Radiocommunication Conference",
}

SERVICE_TYPE_NAMES = {
    "FSS": "Fixed-Satellite Service",
    "MSS": "Mobile-Satellite Service",
    "BSS": "Broadcasting-Satellite Service",
    "EESS": "Earth Exploration-Satellite Service",
    "SRS": "Space Research Service",
    "RNS": "Radionavigation-Satellite Service",
    "AMSS": "Aeronautical Mobile-Satellite Service",
    "MMSS": "Maritime Mobile-Satellite Service",
    "ISL": "Inter-Satellite Links",
}

ORBIT_TYPE_NAMES = {
    "GEO": "Geostationary Orbit",
    "NGSO": "Non-Geostationary Orbit",
    "LEO": "Low Earth Orbit",
    "MEO": "Medium Earth Orbit",
    "HEO": "Highly Elliptical Orbit",
}

SERVICE_BANDS: dict[str, tuple[str, ...]] = {
    "FSS": ("C", "Ku", "Ka", "V", "Q"),
    "MSS": ("L", "S", "UHF"),
    "BSS": ("Ku", "Ka", "S"),
    "EESS": ("X", "Ka", "S"),
    "SRS": ("X", "S", "Ka"),
    "RNS": ("L", "S"),
    "AMSS": ("L", "Ku", "Ka"),
    "MMSS": ("L", "C"),
    "ISL": ("Ka", "V"),
}

PHASE_NAMES = {
    "API": "Advance Publication Information",
    "CR_C": "Coordination Request / Coordination",
    "NOTIFICATION": "Notification for Recording",
    "RECORDING": "Recording in MIFR",
}

NEXT_ACTIONS = {
    "not_started": "Prepare and submit filing",
    "in_preparation": "Complete documentation and submit",
    "submitted": "Monitor ITU processing",
    "under_review": "Respond to any ITU queries",
    "coordination_ongoing": "Continue bilateral coordination",
    "favorable": "Proceed to next phase",
    "unfavorable": "Address deficiencies and resubmit",
    "recorded": "Maintain and update as needed",
    "expired": "Assess options for new filing",
}

COMPLETION_BY_STATUS = {
    "recorded": 100,
    "favorable": 100,
    "coordination_ongoing": 75,
    "under_review": 75,
    "submitted": 50,
    "in_preparation": 25,
}

# Major GSO operator administrations for Ka-band NGSO coordination
GSO_OPERATOR_ADMINISTRATIONS = (
    "United States",
    "Luxembourg",
    "United Kingdom",
    "France",
    "Singapore",
)

# Rough conversion to USD
USD_RATES = {"USD": 1.0, "CHF": 1.1, "GBP": 1.25, "EUR": 1.08}

USE_CASE_SERVICES: dict[str, tuple[str, ...]] = {
    "broadband": ("FSS",),
    "broadcasting": ("BSS",),
    "earth_observation": ("EESS",),
    "iot": ("MSS",),
    "mobile": ("MSS",),
    "navigation": ("RNS",),
    "science": ("SRS",),
    "aviation": ("AMSS",),
    "maritime": ("MMSS",),
    "relay": ("ISL",),
}


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class SpectrumScore:
    overall: int
    by_source: dict[str, int]
    by_category: dict[str, int]
    mandatory: int
    filing: int
    coordination: int


@dataclass
class SpectrumGap:
    requirement_id: str
    requirement: str
    gap: str
    source: str
    risk_level: str
    recommendation: str
    estimated_effort: str
    deadline: date | None = None


@dataclass
class FilingTimeline:
    phase: str
    start_date: date
    deadline: date
    status: str = "not_started"


@dataclass
class FilingStatusSummary:
    phase: str
    phase_name: str
    status: str
    timeline: FilingTimeline
    completion_percentage: int
    next_action: str
    deadline_warning: str | None = None


@dataclass
class Coordination:
    administration: str
    status: str
    bands: list[str]


@dataclass
class CoordinationSummary:
    itu_status: str
    bilateral_coordinations: list[Coordination]
    pending_count: int
    completed_count: int
    overall_progress: int


@dataclass
class FrequencyBandAnalysis:
    band: str
    band_info: FrequencyBandInfo
    usage: str
    applicable_requirements: list[SpectrumRequirement]
    coordination_required: bool
    risk_factors: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass
class SourceStatus:
    source: str
    source_name: str
    requirements: list[SpectrumRequirement]
    assessed_count: int
    compliant_count: int
    partial_count: int
    non_compliant_count: int
    score: int
    risk_level: str
    gaps: list[SpectrumGap]
    required_licenses: list[JurisdictionLicense]


@dataclass
class SpectrumRecommendation:
    priority: int
    title: str
    description: str
    category: str
    timeframe: str
    resources: list[str] = field(default_factory=list)


@dataclass
class EstimatedFees:
    total: float
    by_currency: dict[str, float]


@dataclass
class CriticalDate:
    date: date
    event: str
    phase: str


@dataclass
class FilingTimelineReport:
    timeline: list[FilingTimeline]
    total_duration_months: int
    critical_dates: list[CriticalDate]


@dataclass
class SpectrumAssessmentResult:
    """Full spectrum assessment."""

    profile: SpectrumProfile
    applicable_requirements: list[SpectrumRequirement]
    score: SpectrumScore
    source_statuses: list[SourceStatus]
    filing_status_summary: list[FilingStatusSummary]
    coordination_summary: CoordinationSummary
    band_analysis: list[FrequencyBandAnalysis]
    gap_analysis: list[SpectrumGap]
    risk_level: str
    required_licenses: list[JurisdictionLicense]
    wrc_impacts: list[WRCDecision]
    recommendations: list[SpectrumRecommendation]
    estimated_fees: EstimatedFees
    eu_space_act_cross_refs: list[str]


# =============================================================================
# Profile and Catalog Lookups
# =============================================================================


def validate_spectrum_profile(profile: SpectrumProfileInput) -> SpectrumProfile:
    """
    Validate a submitted spectrum profile and apply defaults.

    When neither uplink nor downlink bands are given, every band is
    used in both directions.

    Raises:
        ProfileValidationError: If services, bands or orbit are missing
    """
    if not profile.service_types:
        raise ProfileValidationError("At least one service type is required")
    if not profile.frequency_bands:
        raise ProfileValidationError("At least one frequency band is required")
    if not profile.orbit_type:
        raise ProfileValidationError("Orbit type is required")

    uplink = list(profile.uplink_bands)
    downlink = list(profile.downlink_bands)
    if not uplink and not downlink:
        uplink = list(profile.frequency_bands)
        downlink = list(profile.frequency_bands)

    return SpectrumProfile(
        service_types=profile.service_types,
        frequency_bands=profile.frequency_bands,
        orbit_type=profile.orbit_type,
        number_of_satellites=(
            profile.number_of_satellites if profile.number_of_satellites is not None else 1
        ),
        is_constellation=bool(profile.is_constellation),
        primary_jurisdiction=profile.primary_jurisdiction or "ITU",
        additional_jurisdictions=profile.additional_jurisdictions or [],
        has_existing_filings=bool(profile.has_existing_filings),
        target_launch_date=profile.target_launch_date,
        uplink_bands=uplink,
        downlink_bands=downlink,
        intersatellite_links=bool(profile.intersatellite_links),
        gso_proximity=profile.gso_proximity,
    )


def get_frequency_band_info(band: str) -> FrequencyBandInfo | None:
    return next((b for b in spectrum_catalog().frequency_bands if b.band == band), None)


def get_bands_for_service(service_type: str) -> list[str]:
    return list(SERVICE_BANDS.get(service_type, ()))


def get_service_type_name(service_type: str) -> str:
    return SERVICE_TYPE_NAMES.get(service_type, service_type)


def get_orbit_type_name(orbit_type: str) -> str:
    return ORBIT_TYPE_NAMES.get(orbit_type, orbit_type)


def _orbit_matches(requirement: SpectrumRequirement, orbit: str) -> bool:
    if not requirement.orbit_types or orbit in requirement.orbit_types:
        return True
    return orbit in NGSO_ORBITS and "NGSO" in requirement.orbit_types


def get_applicable_requirements(profile: SpectrumProfile) -> list[SpectrumRequirement]:
    """
    Requirements matching the profile's services, bands, orbit and jurisdictions.

    An empty service, band or orbit list on a requirement matches anything.
    ITU requirements always apply; LEO and MEO also match NGSO requirements.
    """
    jurisdictions = {profile.primary_jurisdiction, *profile.additional_jurisdictions}
    applicable = []
    for req in spectrum_catalog().requirements:
        if req.service_types and not set(req.service_types) & set(profile.service_types):
            continue
        if req.frequency_bands and not set(req.frequency_bands) & set(profile.frequency_bands):
            continue
        if not _orbit_matches(req, profile.orbit_type):
            continue
        if req.source != "ITU" and req.source not in jurisdictions:
            continue
        applicable.append(req)
    return applicable


def get_requirements_by_service_type(service_type: str) -> list[SpectrumRequirement]:
    """Requirements naming the service type, plus those with no service restriction."""
    return [
        r
        for r in spectrum_catalog().requirements
        if not r.service_types or service_type in r.service_types
    ]


def get_applicable_licenses(profile: SpectrumProfile) -> list[JurisdictionLicense]:
    jurisdictions = {profile.primary_jurisdiction, *profile.additional_jurisdictions}
    return [
        lic
        for lic in spectrum_catalog().jurisdiction_licenses
        if lic.jurisdiction in jurisdictions
        and set(lic.applicable_to) & set(profile.service_types)
        and set(lic.frequency_bands) & set(profile.frequency_bands)
    ]


def get_impacting_wrc_decisions(profile: SpectrumProfile) -> list[WRCDecision]:
    """WRC outcomes touching any of the profile's bands or services."""
    return [
        d
        for d in spectrum_catalog().wrc_decisions
        if set(d.impacted_bands) & set(profile.frequency_bands)
        or set(d.impacted_services) & set(profile.service_types)
    ]


def determine_spectrum_risk(profile: SpectrumProfile) -> str:
    """Inherent spectrum risk of a profile, before any assessment."""
    if profile.orbit_type == "GEO" and not profile.has_existing_filings:
        return RiskLevel.CRITICAL.value
    if (
        profile.is_constellation
        and profile.number_of_satellites > 100
        and not profile.has_existing_filings
    ):
        return RiskLevel.CRITICAL.value
    if "Ka" in profile.frequency_bands and profile.orbit_type in NGSO_ORBITS:
        return RiskLevel.HIGH.value
    if len(profile.additional_jurisdictions) >= 3:
        return RiskLevel.HIGH.value
    return RiskLevel.MEDIUM.value


def calculate_estimated_fees(licenses: Iterable[JurisdictionLicense]) -> EstimatedFees:
    """Application plus annual fees over the license validity, per currency and in USD."""
    by_currency: dict[str, float] = {}
    for lic in licenses:
        amount = lic.fees.application + (lic.fees.annual or 0) * lic.validity_years
        by_currency[lic.fees.currency] = by_currency.get(lic.fees.currency, 0) + amount

    total = sum(amount * USD_RATES.get(cur, 1.0) for cur, amount in by_currency.items())
    return EstimatedFees(total=total, by_currency=by_currency)


def recommend_service_types(bands: Iterable[str]) -> list[str]:
    """Satellite services typically operated in any of the given bands.

    Services are listed in the order their first matching band appears.
    """
    services: dict[str, None] = {}
    for band in bands:
        for service in ("FSS", "MSS", "BSS", "EESS"):
            if band in SERVICE_BANDS[service]:
                services.setdefault(service)
    return list(services)


def recommend_service_types_for_use_case(use_case: str) -> list[str]:
    return list(USE_CASE_SERVICES.get(use_case, ()))


# =============================================================================
# ITU Filing Timeline
# =============================================================================


def calculate_itu_filing_timeline(
    target_launch_date: date,
    orbit_type: str,
    service_types: Iterable[str],
) -> list[FilingTimeline]:
    """
    ITU filing windows working back from the target launch date.

    Lead times:
    - API: 7 years for BSS, 5 for GEO, 3 otherwise, opening 6 months earlier
    - CR/C: 4 years before launch for GEO, 2 otherwise
    - Notification: 12 months before launch
    - Recording: within 3 months after launch

    Args:
        target_launch_date: Planned launch date
        orbit_type: GEO or non-geostationary orbit
        service_types: Satellite services

    Returns:
        One window per filing phase, in phase order
    """
    is_geo = orbit_type == "GEO"
    api_lead = 84 if "BSS" in service_types else 60 if is_geo else 36
    crc_lead = 48 if is_geo else 24

    api_deadline = target_launch_date - relativedelta(months=api_lead)
    crc_deadline = target_launch_date - relativedelta(months=crc_lead)

    return [
        FilingTimeline(
            phase="API",
            start_date=target_launch_date - relativedelta(months=api_lead + 6),
            deadline=api_deadline,
        ),
        FilingTimeline(
            phase="CR_C",
            start_date=api_deadline + relativedelta(months=3),
            deadline=crc_deadline,
        ),
        FilingTimeline(
            phase="NOTIFICATION",
            start_date=crc_deadline + relativedelta(months=6),
            deadline=target_launch_date - relativedelta(months=12),
        ),
        FilingTimeline(
            phase="RECORDING",
            start_date=target_launch_date,
            deadline=target_launch_date + relativedelta(months=3),
        ),
    ]


def generate_filing_timeline_report(profile: SpectrumProfile) -> FilingTimelineReport:
    """
    Filing timeline with total duration and date-ordered critical dates.

    Raises:
        ProfileValidationError: If the profile has no target launch date
    """
    if not profile.target_launch_date:
        raise ProfileValidationError("Target launch date required for timeline calculation")

    timeline = calculate_itu_filing_timeline(
        profile.target_launch_date, profile.orbit_type, profile.service_types
    )
    duration_days = (timeline[-1].deadline - timeline[0].start_date).days
    total_months = math.ceil(duration_days / 30)

    critical_dates = [
        CriticalDate(t.deadline, f"{t.phase} submission deadline", t.phase) for t in timeline
    ]
    critical_dates.append(CriticalDate(profile.target_launch_date, "Target launch date", "RECORDING"))
    critical_dates.sort(key=lambda c: c.date)

    return FilingTimelineReport(
        timeline=timeline,
        total_duration_months=total_months,
        critical_dates=critical_dates,
    )


def generate_filing_status_summary(
    profile: SpectrumProfile,
    filing_statuses: Mapping[str, str] | None = None,
    today: date | None = None,
) -> list[FilingStatusSummary]:
    """
    Progress and deadline warnings per filing phase.

    Completed phases (favorable or recorded) never carry a warning.
    Without a target launch date there is no timeline and the summary is empty.

    Args:
        profile: Validated spectrum profile
        filing_statuses: Current status per phase
        today: Reference date for deadline warnings, defaults to today
    """
    if not profile.target_launch_date:
        return []

    today = today or date.today()
    statuses = filing_statuses or {}
    summaries = []

    for window in calculate_itu_filing_timeline(
        profile.target_launch_date, profile.orbit_type, profile.service_types
    ):
        status = statuses.get(window.phase) or window.status
        completion = COMPLETION_BY_STATUS.get(status, 0)
        days_left = (window.deadline - today).days

        warning = None
        if completion < 100:
            if days_left < 0:
                warning = f"Deadline passed {abs(days_left)} days ago"
            elif days_left < 90:
                warning = f"Deadline in {days_left} days - urgent action required"
            elif days_left < 180:
                warning = f"Deadline in {days_left} days - plan accordingly"

        summaries.append(
            FilingStatusSummary(
                phase=window.phase,
                phase_name=PHASE_NAMES[window.phase],
                status=status,
                timeline=window,
                completion_percentage=completion,
                next_action=NEXT_ACTIONS[status],
                deadline_warning=warning,
            )
        )

    return summaries


# =============================================================================
# Scoring and Gaps
# =============================================================================


def _weight(requirement: SpectrumRequirement) -> int:
    return risk_weight(requirement.risk_level)


def calculate_compliance_score(
    requirements: list[SpectrumRequirement],
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> SpectrumScore:
    """
    Risk-weighted scores overall, per source and category, and for the
    mandatory, filing and coordination subsets.

    Categories without requirements are left out of ``by_category``.
    """
    statuses = status_map(assessments)

    def group(items: Iterable[SpectrumRequirement]) -> int:
        return calculate_group_score(list(items), statuses, _weight)

    by_category = {}
    for category in CATEGORIES:
        reqs = [r for r in requirements if r.category == category]
        if reqs:
            by_category[category] = group(reqs)

    return SpectrumScore(
        overall=group(requirements),
        by_source={s: group(r for r in requirements if r.source == s) for s in SOURCES},
        by_category=by_category,
        mandatory=group(r for r in requirements if r.is_mandatory),
        filing=group(r for r in requirements if r.category == "filing"),
        coordination=group(r for r in requirements if r.category == "coordination"),
    )


def estimate_effort(requirement: SpectrumRequirement) -> str:
    if requirement.category == "filing" and requirement.source == "ITU":
        return "years"
    if requirement.category in ("coordination", "licensing"):
        return "months"
    if requirement.risk_level == RiskLevel.CRITICAL:
        return "months"
    return "weeks"


def _gap_recommendation(requirement: SpectrumRequirement, status: str) -> str:
    if requirement.compliance_actions:
        first = requirement.compliance_actions[0]
        if status == "not_assessed":
            return f"Assess compliance with {requirement.title}. Key action: {first}"
        return first
    return f"Review and implement {requirement.title} requirements per {requirement.reference}"


def _target_dates(assessments: Iterable[Any] | Mapping[str, str] | None) -> dict[str, date]:
    if not assessments or isinstance(assessments, Mapping):
        return {}
    return {
        a.requirement_id: a.target_date
        for a in assessments
        if getattr(a, "target_date", None) is not None
    }


def generate_gap_analysis(
    requirements: list[SpectrumRequirement],
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> list[SpectrumGap]:
    """Gaps for non-compliant, partial and unassessed requirements, by risk."""
    if assessments is not None and not isinstance(assessments, Mapping):
        assessments = list(assessments)
    statuses = status_map(assessments)
    target_dates = _target_dates(assessments)

    gaps = []
    for req in requirements:
        status = statuses.get(req.id, "not_assessed")
        if status not in GAP_STATUSES:
            continue
        gaps.append(
            SpectrumGap(
                requirement_id=req.id,
                requirement=req.title,
                gap=gap_description(status, req.title, req.reference),
                source=req.source,
                risk_level=req.risk_level,
                recommendation=_gap_recommendation(req, status),
                estimated_effort=estimate_effort(req),
                deadline=target_dates.get(req.id),
            )
        )

    gaps.sort(key=lambda g: RISK_ORDER[g.risk_level])
    return gaps


# =============================================================================
# Bands, Coordination and Sources
# =============================================================================


def analyze_frequency_bands(
    profile: SpectrumProfile,
    requirements: list[SpectrumRequirement],
) -> list[FrequencyBandAnalysis]:
    """Usage, risk factors and actions per profile band. Unknown bands are skipped."""
    analyses = []
    for band in profile.frequency_bands:
        info = get_frequency_band_info(band)
        if info is None:
            continue

        uplink = band in profile.uplink_bands
        downlink = band in profile.downlink_bands
        if profile.intersatellite_links and band in ("Ka", "V"):
            usage = "isl"
        elif uplink and not downlink:
            usage = "uplink"
        elif downlink and not uplink:
            usage = "downlink"
        else:
            usage = "both"

        risk_factors = list(info.key_restrictions)
        if band == "Ka" and profile.orbit_type in NGSO_ORBITS:
            risk_factors.append("EPFD limits apply for NGSO operation")
        if band == "C":
            risk_factors.append("5G reallocation may affect availability")

        recommendations = []
        if not profile.has_existing_filings:
            recommendations.append(f"Submit ITU API for {band}-band operation")
        if info.coordination_required:
            recommendations.append(f"Complete coordination for {band}-band")

        analyses.append(
            FrequencyBandAnalysis(
                band=band,
                band_info=info,
                usage=usage,
                applicable_requirements=[r for r in requirements if band in r.frequency_bands],
                coordination_required=info.coordination_required,
                risk_factors=risk_factors,
                recommendations=recommendations,
            )
        )
    return analyses


def generate_coordination_summary(
    profile: SpectrumProfile,
    coordination: CoordinationStatuses | None = None,
) -> CoordinationSummary:
    """
    Bilateral coordination progress.

    Ka-band NGSO systems always need coordination with the major GSO
    operator administrations.
    """
    coordination = coordination or CoordinationStatuses()
    reported = {b.administration: b.status for b in coordination.bilateral}
    coordinations: list[Coordination] = []

    if "Ka" in profile.frequency_bands and profile.orbit_type in NGSO_ORBITS:
        for admin in GSO_OPERATOR_ADMINISTRATIONS:
            coordinations.append(Coordination(admin, reported.get(admin, "pending"), ["Ka"]))

    known = {c.administration for c in coordinations}
    for bilateral in coordination.bilateral:
        if bilateral.administration not in known:
            coordinations.append(
                Coordination(
                    bilateral.administration, bilateral.status, list(profile.frequency_bands)
                )
            )
            known.add(bilateral.administration)

    pending = sum(1 for c in coordinations if c.status in ("pending", "in_progress"))
    completed = sum(1 for c in coordinations if c.status == "completed")
    progress = round_half_up(completed / len(coordinations) * 100) if coordinations else 100

    return CoordinationSummary(
        itu_status=coordination.itu_status or "pending",
        bilateral_coordinations=coordinations,
        pending_count=pending,
        completed_count=completed,
        overall_progress=progress,
    )


def determine_source_risk(source: str, score: int, non_compliant: int) -> str:
    """ITU is held to stricter thresholds than national jurisdictions."""
    if source == "ITU":
        if score < 50 or non_compliant > 3:
            return RiskLevel.CRITICAL.value
        if score < 70 or non_compliant > 1:
            return RiskLevel.HIGH.value
        if score < 85:
            return RiskLevel.MEDIUM.value
        return RiskLevel.LOW.value

    if score < 40 or non_compliant > 5:
        return RiskLevel.CRITICAL.value
    if score < 60 or non_compliant > 2:
        return RiskLevel.HIGH.value
    if score < 80:
        return RiskLevel.MEDIUM.value
    return RiskLevel.LOW.value


def generate_source_statuses(
    requirements: list[SpectrumRequirement],
    assessments: Iterable[Any] | Mapping[str, str] | None,
    profile: SpectrumProfile,
) -> list[SourceStatus]:
    """Per-jurisdiction status for every source with applicable requirements."""
    if assessments is not None and not isinstance(assessments, Mapping):
        assessments = list(assessments)
    statuses = status_map(assessments)
    results = []

    for source in STATUS_SOURCES:
        reqs = [r for r in requirements if r.source == source]
        if not reqs:
            continue

        counts = {"compliant": 0, "partial": 0, "non_compliant": 0}
        assessed = 0
        for req in reqs:
            status = statuses.get(req.id)
            if status and status != "not_assessed":
                assessed += 1
                if status in counts:
                    counts[status] += 1

        score = calculate_compliance_score(reqs, statuses).overall
        source_profile = profile.model_copy(
            update={"primary_jurisdiction": source, "additional_jurisdictions": []}
        )

        results.append(
            SourceStatus(
                source=source,
                source_name=SOURCE_NAMES[source],
                requirements=reqs,
                assessed_count=assessed,
                compliant_count=counts["compliant"],
                partial_count=counts["partial"],
                non_compliant_count=counts["non_compliant"],
                score=score,
                risk_level=determine_source_risk(source, score, counts["non_compliant"]),
                gaps=generate_gap_analysis(reqs, assessments),
                required_licenses=get_applicable_licenses(source_profile),
            )
        )

    return results


# =============================================================================
# Recommendations and Risk
# =============================================================================


def generate_recommendations(
    profile: SpectrumProfile,
    gaps: list[SpectrumGap],
    score: SpectrumScore,
    filing_status: list[FilingStatusSummary],
) -> list[SpectrumRecommendation]:
    """Numbered recommendations, most urgent first."""
    recommendations: list[SpectrumRecommendation] = []

    def add(
        title: str,
        description: str,
        category: str,
        timeframe: str,
        resources: list[str] | None = None,
    ) -> None:
        recommendations.append(
            SpectrumRecommendation(
                priority=len(recommendations) + 1,
                title=title,
                description=description,
                category=category,
                timeframe=timeframe,
                resources=list(resources or []),
            )
        )

    if not profile.has_existing_filings:
        add(
            "Initiate ITU Filing Process",
            "Submit Advance Publication Information (API) to ITU through your national "
            "administration. This is the foundational step for international spectrum "
            "rights recognition.",
            "filing",
            "Immediate - GEO requires 7 years, NGSO requires 2-4 years lead time",
            ["ITU Radio Regulations Article 9", "National administration (FCC/Ofcom/BNetzA)"],
        )

    for filing in filing_status:
        if filing.deadline_warning and filing.completion_percentage < 100:
            add(
                f"Complete {filing.phase_name}",
                f"{filing.deadline_warning}. {filing.next_action}",
                "filing",
                "Urgent",
            )

    if (
        profile.orbit_type in NGSO_ORBITS
        and "Ka" in profile.frequency_bands
        and any("EPFD" in g.requirement_id for g in gaps)
    ):
        add(
            "Verify EPFD Compliance",
            "NGSO systems in Ka-band must demonstrate compliance with equivalent power flux "
            "density (EPFD) limits to protect GSO networks per RR Article 22.",
            "technical",
            "Before coordination completion",
            ["ITU-R S.1503", "ITU-R S.1428", "RR Appendix 5"],
        )

    if profile.is_constellation and profile.number_of_satellites > 10:
        add(
            "Establish Deployment Milestone Tracking",
            "NGSO constellations must meet deployment milestones: 10% within 2 years, 50% "
            "within 5 years, 100% within 7 years of bringing-into-use deadline.",
            "planning",
            "Continuous",
            ["RR No. 11.44C", "Resolution 35 (WRC-19)"],
        )

    if score.coordination < 70:
        add(
            "Advance Coordination Activities",
            "Complete coordination with affected administrations. Coordination agreements "
            "are typically required before notification can be submitted.",
            "coordination",
            "2-3 years before notification",
        )

    licensing_gaps = [g for g in gaps if "LIC" in g.requirement_id]
    if licensing_gaps:
        add(
            "Obtain Required Spectrum Licenses",
            f"{len(licensing_gaps)} licensing gaps identified across jurisdictions. Apply "
            "for required national/regional licenses in parallel with ITU process.",
            "licensing",
            "12-18 months before operations",
        )

    if "C" in profile.frequency_bands or "Ka" in profile.frequency_bands:
        add(
            "Monitor WRC Developments",
            "Stay informed about World Radiocommunication Conference decisions that may "
            "impact your frequency bands, particularly IMT identification discussions.",
            "planning",
            "Ongoing",
            ["WRC agenda items", "ITU-R Study Group 4 outputs"],
        )

    return recommendations


def determine_assessment_risk(
    score: SpectrumScore,
    gaps: list[SpectrumGap],
    profile: SpectrumProfile,
    filing_status: list[FilingStatusSummary],
) -> str:
    critical_gaps = sum(1 for g in gaps if g.risk_level == RiskLevel.CRITICAL)
    urgent_filings = sum(
        1 for f in filing_status if f.deadline_warning and "urgent" in f.deadline_warning
    )

    if profile.orbit_type == "GEO" and not profile.has_existing_filings:
        return RiskLevel.CRITICAL.value
    if urgent_filings:
        return RiskLevel.CRITICAL.value
    if score.overall < 40 or critical_gaps >= 3:
        return RiskLevel.CRITICAL.value
    if score.overall < 60 or critical_gaps >= 1:
        return RiskLevel.HIGH.value
    if score.overall < 80:
        return RiskLevel.MEDIUM.value
    return RiskLevel.LOW.value


def get_eu_space_act_cross_refs(requirements: Iterable[SpectrumRequirement]) -> list[str]:
    """Distinct EU Space Act references in first-seen order."""
    refs: dict[str, None] = {}
    for req in requirements:
        if req.eu_space_act_ref:
            refs[req.eu_space_act_ref] = None
    return list(refs)


def perform_assessment(
    profile: SpectrumProfileInput,
    assessments: Iterable[Any] | Mapping[str, str] | None,
    filing_statuses: Mapping[str, str] | None = None,
    coordination: CoordinationStatuses | None = None,
    today: date | None = None,
) -> SpectrumAssessmentResult:
    """
    Run the full spectrum assessment.

    Args:
        profile: Submitted spectrum profile
        assessments: Requirement statuses
        filing_statuses: Current status per ITU filing phase
        coordination: ITU and bilateral coordination progress
        today: Reference date for filing deadline warnings

    Returns:
        SpectrumAssessmentResult

    Raises:
        ProfileValidationError: If the profile is incomplete
    """
    validated = validate_spectrum_profile(profile)
    if assessments is not None and not isinstance(assessments, Mapping):
        assessments = list(assessments)

    applicable = get_applicable_requirements(validated)
    score = calculate_compliance_score(applicable, assessments)
    gaps = generate_gap_analysis(applicable, assessments)
    filing_summary = generate_filing_status_summary(validated, filing_statuses, today)
    licenses = get_applicable_licenses(validated)

    result = SpectrumAssessmentResult(
        profile=validated,
        applicable_requirements=applicable,
        score=score,
        source_statuses=generate_source_statuses(applicable, assessments, validated),
        filing_status_summary=filing_summary,
        coordination_summary=generate_coordination_summary(validated, coordination),
        band_analysis=analyze_frequency_bands(validated, applicable),
        gap_analysis=gaps,
        risk_level=determine_assessment_risk(score, gaps, validated, filing_summary),
        required_licenses=licenses,
        wrc_impacts=get_impacting_wrc_decisions(validated),
        recommendations=generate_recommendations(validated, gaps, score, filing_summary),
        estimated_fees=calculate_estimated_fees(licenses),
        eu_space_act_cross_refs=get_eu_space_act_cross_refs(applicable),
    )

    logger.info(
        "spectrum_assessment_performed",
        orbit=validated.orbit_type,
        applicable=len(applicable),
        overall=score.overall,
        risk=result.risk_level,
        gaps=len(gaps),
    )

    return result
