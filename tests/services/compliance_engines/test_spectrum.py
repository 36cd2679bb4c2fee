"""
Spectrum Engine Tests
=====================

Tests for spectrum profile validation, ITU filing timelines, license
fees and the spectrum assessment.

Version: 0.1.0
"""

from datetime import date

import pytest

from services.compliance_engines.catalogs import spectrum_catalog
from services.compliance_engines.engines import spectrum
from services.compliance_engines.models.spectrum import (
    BilateralCoordination,
    CoordinationStatuses,
    SpectrumProfile,
    SpectrumProfileInput,
)
from shared.models.errors import ProfileValidationError


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def leo_input() -> SpectrumProfileInput:
    return SpectrumProfileInput(
        service_types=["FSS"],
        frequency_bands=["Ku"],
        orbit_type="LEO",
        target_launch_date=date(2030, 1, 31),
    )


@pytest.fixture
def leo_profile(leo_input: SpectrumProfileInput) -> SpectrumProfile:
    return spectrum.validate_spectrum_profile(leo_input)


# =============================================================================
# Profile Tests
# =============================================================================


class TestSpectrumProfile:
    """Tests for spectrum profile validation."""

    def test_defaults(self, leo_profile: SpectrumProfile) -> None:
        assert leo_profile.primary_jurisdiction == "ITU"
        assert leo_profile.number_of_satellites == 1
        assert leo_profile.uplink_bands == ["Ku"]
        assert leo_profile.downlink_bands == ["Ku"]

    def test_explicit_directions_kept(self, leo_input: SpectrumProfileInput) -> None:
        profile = spectrum.validate_spectrum_profile(
            leo_input.model_copy(update={"frequency_bands": ["Ku", "Ka"], "downlink_bands": ["Ka"]})
        )

        assert profile.uplink_bands == []
        assert profile.downlink_bands == ["Ka"]

    @pytest.mark.parametrize(
        "update",
        [
            {"service_types": []},
            {"frequency_bands": []},
            {"orbit_type": None},
        ],
    )
    def test_incomplete_profile_rejected(
        self, leo_input: SpectrumProfileInput, update: dict
    ) -> None:
        with pytest.raises(ProfileValidationError):
            spectrum.validate_spectrum_profile(leo_input.model_copy(update=update))


# =============================================================================
# Filing Timeline Tests
# =============================================================================


class TestFilingTimeline:
    """Tests for ITU filing windows."""

    def test_ngso_windows(self) -> None:
        timeline = spectrum.calculate_itu_filing_timeline(date(2030, 1, 31), "LEO", ["FSS"])
        windows = {t.phase: t for t in timeline}

        assert [t.phase for t in timeline] == ["API", "CR_C", "NOTIFICATION", "RECORDING"]
        assert windows["API"].start_date == date(2026, 7, 31)
        assert windows["API"].deadline == date(2027, 1, 31)
        assert windows["CR_C"].deadline == date(2028, 1, 31)
        assert windows["NOTIFICATION"].deadline == date(2029, 1, 31)

    def test_month_end_clamps(self) -> None:
        """Adding months to the 31st lands on the last day of shorter months."""
        timeline = spectrum.calculate_itu_filing_timeline(date(2030, 1, 31), "LEO", ["FSS"])
        windows = {t.phase: t for t in timeline}

        assert windows["CR_C"].start_date == date(2027, 4, 30)
        assert windows["RECORDING"].deadline == date(2030, 4, 30)

    def test_geo_and_bss_lead_times(self) -> None:
        geo = spectrum.calculate_itu_filing_timeline(date(2032, 6, 1), "GEO", ["FSS"])
        bss = spectrum.calculate_itu_filing_timeline(date(2032, 6, 1), "GEO", ["BSS"])

        assert geo[0].deadline == date(2027, 6, 1)
        assert geo[1].deadline == date(2028, 6, 1)
        assert bss[0].deadline == date(2025, 6, 1)

    def test_report_requires_launch_date(self, leo_profile: SpectrumProfile) -> None:
        with pytest.raises(ProfileValidationError):
            spectrum.generate_filing_timeline_report(
                leo_profile.model_copy(update={"target_launch_date": None})
            )

    def test_report_critical_dates(self, leo_profile: SpectrumProfile) -> None:
        report = spectrum.generate_filing_timeline_report(leo_profile)
        dates = [c.date for c in report.critical_dates]

        assert len(report.critical_dates) == 5
        assert dates == sorted(dates)
        assert report.total_duration_months > 36

    def test_deadline_warnings(self, leo_profile: SpectrumProfile) -> None:
        summary = spectrum.generate_filing_status_summary(
            leo_profile, {"CR_C": "submitted"}, today=date(2026, 12, 1)
        )
        phases = {s.phase: s for s in summary}

        assert phases["API"].deadline_warning == "Deadline in 61 days - urgent action required"
        assert phases["CR_C"].completion_percentage == 50
        assert phases["CR_C"].next_action == "Monitor ITU processing"
        assert phases["RECORDING"].deadline_warning is None

    def test_completed_phase_never_warns(self, leo_profile: SpectrumProfile) -> None:
        summary = spectrum.generate_filing_status_summary(
            leo_profile, {"API": "favorable"}, today=date(2028, 1, 1)
        )

        assert summary[0].completion_percentage == 100
        assert summary[0].deadline_warning is None

    def test_overdue_phase(self, leo_profile: SpectrumProfile) -> None:
        summary = spectrum.generate_filing_status_summary(leo_profile, today=date(2027, 2, 10))

        assert summary[0].deadline_warning == "Deadline passed 10 days ago"

    def test_no_launch_date_means_no_summary(self, leo_profile: SpectrumProfile) -> None:
        profile = leo_profile.model_copy(update={"target_launch_date": None})

        assert spectrum.generate_filing_status_summary(profile) == []


# =============================================================================
# Licensing and Risk Tests
# =============================================================================


class TestLicensing:
    """Tests for licenses, fees and inherent risk."""

    def test_itu_only_fees(self, leo_profile: SpectrumProfile) -> None:
        licenses = spectrum.get_applicable_licenses(leo_profile)
        fees = spectrum.calculate_estimated_fees(licenses)

        assert [lic.jurisdiction for lic in licenses] == ["ITU"]
        assert fees.by_currency == {"CHF": 75000}
        assert fees.total == pytest.approx(82500)

    def test_fcc_fees_include_annual(self, leo_profile: SpectrumProfile) -> None:
        profile = leo_profile.model_copy(update={"additional_jurisdictions": ["FCC"]})

        fees = spectrum.calculate_estimated_fees(spectrum.get_applicable_licenses(profile))

        assert fees.by_currency["USD"] == 502450 + 125000 * 15 + 115910

    def test_foreign_jurisdictions_excluded(self, leo_profile: SpectrumProfile) -> None:
        requirements = spectrum.get_applicable_requirements(leo_profile)

        assert requirements
        assert {r.source for r in requirements} == {"ITU"}

    @pytest.mark.parametrize(
        ("update", "risk"),
        [
            ({"orbit_type": "GEO"}, "critical"),
            ({"orbit_type": "GEO", "has_existing_filings": True}, "medium"),
            ({"frequency_bands": ["Ka"]}, "high"),
            ({"additional_jurisdictions": ["FCC", "OFCOM", "BNETZA"]}, "high"),
            ({}, "medium"),
        ],
    )
    def test_inherent_risk(self, leo_profile: SpectrumProfile, update: dict, risk: str) -> None:
        assert spectrum.determine_spectrum_risk(leo_profile.model_copy(update=update)) == risk

    def test_service_recommendations(self) -> None:
        assert spectrum.recommend_service_types(["L"]) == ["MSS"]
        assert spectrum.recommend_service_types(["Ka"]) == ["FSS", "BSS", "EESS"]
        assert spectrum.recommend_service_types_for_use_case("earth_observation") == ["EESS"]

    def test_service_recommendations_follow_band_order(self) -> None:
        assert spectrum.recommend_service_types(["S", "Ku"]) == ["MSS", "BSS", "EESS", "FSS"]
        assert spectrum.recommend_service_types(["Ku", "S"]) == ["FSS", "BSS", "MSS", "EESS"]

    def test_recording_phase_has_no_per_frequency_fee(self) -> None:
        phases = {p.phase: p for p in spectrum_catalog().itu_filing_phases}

        assert phases["RECORDING"].fees.per_frequency is None
        assert phases["API"].fees.per_frequency is not None
        assert spectrum.recommend_service_types_for_use_case("unknown") == []


# =============================================================================
# Coordination Tests
# =============================================================================


class TestCoordination:
    """Tests for bilateral coordination tracking."""

    def test_ka_ngso_needs_gso_coordination(self, leo_profile: SpectrumProfile) -> None:
        profile = leo_profile.model_copy(update={"frequency_bands": ["Ka"]})
        coordination = CoordinationStatuses(
            bilateral=[
                BilateralCoordination(administration="France", status="completed"),
                BilateralCoordination(administration="Japan", status="in_progress"),
            ]
        )

        summary = spectrum.generate_coordination_summary(profile, coordination)

        assert len(summary.bilateral_coordinations) == 6
        assert summary.completed_count == 1
        assert summary.pending_count == 5
        assert summary.overall_progress == 17
        assert summary.itu_status == "pending"

    def test_nothing_to_coordinate(self, leo_profile: SpectrumProfile) -> None:
        summary = spectrum.generate_coordination_summary(leo_profile)

        assert summary.bilateral_coordinations == []
        assert summary.overall_progress == 100


# =============================================================================
# Assessment Tests
# =============================================================================


class TestAssessment:
    """Tests for the full spectrum assessment."""

    def test_new_operator(self, leo_input: SpectrumProfileInput) -> None:
        result = spectrum.perform_assessment(leo_input, None, today=date(2026, 12, 1))

        assert result.risk_level == "critical"
        assert result.recommendations[0].title == "Initiate ITU Filing Process"
        assert [r.priority for r in result.recommendations] == list(
            range(1, len(result.recommendations) + 1)
        )
        assert len(result.gap_analysis) == len(result.applicable_requirements)
        assert [s.source for s in result.source_statuses] == ["ITU"]

    def test_gaps_sorted_by_risk(self, leo_input: SpectrumProfileInput) -> None:
        result = spectrum.perform_assessment(leo_input, None, today=date(2026, 12, 1))
        order = ["critical", "high", "medium", "low"]
        ranks = [order.index(g.risk_level) for g in result.gap_analysis]

        assert ranks == sorted(ranks)

    def test_incomplete_profile(self) -> None:
        with pytest.raises(ProfileValidationError):
            spectrum.perform_assessment(SpectrumProfileInput(), None)
