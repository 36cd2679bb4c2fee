"""
Export Control Engine Tests
===========================

Tests for ITAR / EAR applicability, scoring, gaps and profile helpers.

Version: 0.1.0
"""

import pytest

from services.compliance_engines.engines.export_control import (
    DDTC_REGISTRATION,
    analyze_license_exceptions,
    assess_deemed_export_risks,
    assess_penalty_exposure,
    assess_screening_requirements,
    assess_tcp_requirements,
    determine_jurisdiction,
    determine_jurisdiction_from_profile,
    determine_regulation_risk,
    format_penalty,
    generate_documentation_checklist,
    generate_gap_analysis,
    get_applicable_requirements,
    get_ccl_category,
    get_requirements_by_regulation,
    get_usml_category,
    perform_assessment,
    validate_export_control_profile,
)
from services.compliance_engines.models.export_control import (
    ExportControlProfile,
    ExportControlProfileInput,
)
from shared.models.errors import ProfileValidationError


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def itar_manufacturer() -> ExportControlProfile:
    """Registered spacecraft manufacturer holding ITAR and EAR items."""
    return ExportControlProfile(
        company_type=["spacecraft_manufacturer"],
        has_itar_items=True,
        has_ear_items=True,
        registered_with_ddtc=True,
        has_tcp=True,
    )


@pytest.fixture
def plain_operator() -> ExportControlProfile:
    """Satellite operator with no controlled items."""
    return ExportControlProfile(company_type=["satellite_operator"])


# =============================================================================
# Profile Validation Tests
# =============================================================================


class TestProfileValidation:
    """Tests for profile validation."""

    def test_company_type_required(self) -> None:
        """A profile without company type is rejected."""
        with pytest.raises(ProfileValidationError, match="At least one company type"):
            validate_export_control_profile(ExportControlProfileInput())

    def test_defaults_applied(self) -> None:
        """Unanswered flags default to False and lists to empty."""
        profile = validate_export_control_profile(
            ExportControlProfileInput(company_type=["university"], has_ear_items=True)
        )

        assert profile.has_ear_items is True
        assert profile.has_itar_items is False
        assert profile.foreign_national_countries == []


# =============================================================================
# Applicability Tests
# =============================================================================


class TestApplicability:
    """Tests for requirement applicability."""

    def test_no_controlled_items_keeps_only_itar_screening(
        self, plain_operator: ExportControlProfile
    ) -> None:
        """Without controlled items only ITAR screening survives the filters."""
        ids = [r.id for r in get_applicable_requirements(plain_operator)]

        assert ids == ["ITAR-SCREEN-001"]

    def test_ddtc_registration_keeps_itar_requirements(self) -> None:
        """DDTC registrants keep ITAR requirements even without ITAR items."""
        profile = ExportControlProfile(
            company_type=["spacecraft_manufacturer"], registered_with_ddtc=True
        )
        ids = {r.id for r in get_applicable_requirements(profile)}

        assert "ITAR-REG-001" in ids
        assert "EAR-CLASS-001" not in ids

    def test_itar_items_bring_ear_requirements(self) -> None:
        """ITAR items alone are enough for EAR requirements."""
        profile = ExportControlProfile(
            company_type=["spacecraft_manufacturer"], has_itar_items=True
        )
        ids = {r.id for r in get_applicable_requirements(profile)}

        assert "EAR-CLASS-001" in ids
        assert "ITAR-LIC-001" in ids

    def test_company_type_filters_requirements(
        self, itar_manufacturer: ExportControlProfile
    ) -> None:
        """Brokering does not apply to spacecraft manufacturers."""
        ids = {r.id for r in get_applicable_requirements(itar_manufacturer)}

        assert "ITAR-BROKERING-001" not in ids

    def test_jurisdiction_from_profile(self, itar_manufacturer: ExportControlProfile) -> None:
        assert determine_jurisdiction_from_profile(itar_manufacturer) == "itar_with_ear_parts"
        assert determine_jurisdiction_from_profile(
            ExportControlProfile(company_type=["all"])
        ) == "ear99"


# =============================================================================
# Scoring and Gap Tests
# =============================================================================


class TestAssessment:
    """Tests for the full assessment."""

    def test_fully_compliant_assessment(self, itar_manufacturer: ExportControlProfile) -> None:
        """All requirements compliant gives 100 and low risk."""
        applicable = get_applicable_requirements(itar_manufacturer)
        statuses = {r.id: "compliant" for r in applicable}

        result = perform_assessment(
            ExportControlProfileInput(**itar_manufacturer.model_dump()), statuses
        )

        assert result.score.overall == 100
        assert result.score.by_regulation == {"ITAR": 100, "EAR": 100}
        assert result.gap_analysis == []
        assert result.risk_level == "low"
        assert [r.title for r in result.recommendations] == [
            "Conduct Export Control Training",
            "Conduct Internal Compliance Audit",
        ]
        assert [r.priority for r in result.recommendations] == [1, 2]

    def test_unregistered_itar_holder_is_critical(self) -> None:
        """ITAR items without DDTC registration is critical whatever the score."""
        result = perform_assessment(
            ExportControlProfileInput(company_type=["component_supplier"], has_itar_items=True),
            None,
        )

        assert result.risk_level == "critical"
        assert result.recommendations[0].title == "Register with DDTC Immediately"
        assert result.required_registrations == [DDTC_REGISTRATION]
        assert result.penalty_exposure.civil == 1227364

    def test_regulation_statuses_split_licenses(
        self, itar_manufacturer: ExportControlProfile
    ) -> None:
        """Each regulation lists only its own license types."""
        profile = itar_manufacturer.model_copy(update={"has_technology_transfer": True})
        result = perform_assessment(ExportControlProfileInput(**profile.model_dump()), {})
        statuses = {s.regulation: s for s in result.regulation_statuses}

        assert statuses["ITAR"].required_licenses == ["DSP_5", "TAA"]
        assert statuses["EAR"].required_licenses == ["BIS_LICENSE"]
        assert statuses["ITAR"].required_registrations == [DDTC_REGISTRATION]
        assert statuses["EAR"].required_registrations == []

    def test_gaps_sorted_by_risk(self, itar_manufacturer: ExportControlProfile) -> None:
        """Critical gaps come first."""
        gaps = generate_gap_analysis(get_applicable_requirements(itar_manufacturer), {})
        order = {"critical": 0, "high": 1, "medium": 2, "low": 3}

        assert [order[g.risk_level] for g in gaps] == sorted(order[g.risk_level] for g in gaps)

    def test_gap_details(self) -> None:
        """Gap text, priority, effort and penalty for individual requirements."""
        reqs = [r for r in get_requirements_by_regulation("ITAR") if r.id == "ITAR-REG-001"]
        reqs += [r for r in get_requirements_by_regulation("EAR") if r.id == "EAR-EXC-001"]

        gaps = {g.requirement_id: g for g in generate_gap_analysis(reqs, {"EAR-EXC-001": "partial"})}

        reg = gaps["ITAR-REG-001"]
        assert reg.priority == "high"
        assert reg.estimated_effort == "days"
        assert reg.gap.startswith("Not yet assessed against")
        assert reg.recommendation.startswith("Assess compliance with")
        assert reg.potential_penalty == (
            "Civil: up to $1.2M; Criminal: up to $1.0M; Imprisonment: up to 20 years"
        )

        exc = gaps["EAR-EXC-001"]
        assert exc.priority == "low"
        assert exc.gap.startswith("Partially compliant with")

    def test_not_applicable_excluded_from_score(
        self, plain_operator: ExportControlProfile
    ) -> None:
        result = perform_assessment(
            ExportControlProfileInput(**plain_operator.model_dump()),
            {"ITAR-SCREEN-001": "not_applicable"},
        )

        assert result.score.overall == 100
        assert result.gap_analysis == []


class TestRegulationRisk:
    """Tests for per-regulation risk thresholds."""

    def test_itar_stricter_than_ear(self) -> None:
        """The same score ranks higher risk under ITAR."""
        assert determine_regulation_risk("ITAR", 55, 0) == "high"
        assert determine_regulation_risk("EAR", 55, 0) == "high"
        assert determine_regulation_risk("ITAR", 45, 0) == "critical"
        assert determine_regulation_risk("EAR", 45, 0) == "high"

    def test_non_compliant_count_escalates(self) -> None:
        assert determine_regulation_risk("ITAR", 95, 3) == "high"
        assert determine_regulation_risk("EAR", 95, 3) == "low"
        assert determine_regulation_risk("EAR", 95, 9) == "critical"


# =============================================================================
# Helper Tests
# =============================================================================


class TestHelpers:
    """Tests for profile helpers and lookups."""

    def test_format_penalty(self) -> None:
        assert format_penalty(1_227_364) == "$1.2M"
        assert format_penalty(353_534) == "$353,534"

    @pytest.mark.parametrize(
        ("military", "commercial", "usml", "expected"),
        [
            (False, False, True, "itar_only"),
            (True, False, False, "itar_only"),
            (True, True, False, "dual_use"),
            (False, True, False, "ear_only"),
            (False, False, False, "dual_use"),
        ],
    )
    def test_determine_jurisdiction(
        self, military: bool, commercial: bool, usml: bool, expected: str
    ) -> None:
        assert determine_jurisdiction("star tracker", military, commercial, usml) == expected

    def test_category_lookups(self) -> None:
        assert get_usml_category("USML_XV") is not None
        assert get_ccl_category("CCL_9A") is not None
        assert get_usml_category("USML_XXI") is None

    def test_deemed_export_licenses(self) -> None:
        """Restricted countries need an EAR license on top of ITAR authorization."""
        profile = ExportControlProfile(
            company_type=["spacecraft_manufacturer"],
            has_itar_items=True,
            has_ear_items=True,
            has_foreign_nationals=True,
            foreign_national_countries=["cn", "FR"],
        )

        result = assess_deemed_export_risks(profile)

        assert result.tcp_required is True
        assert result.deemed_export_licenses_required == [
            "TAA/DSP-5 required for cn nationals accessing ITAR data",
            "EAR license may be required for cn nationals",
            "TAA/DSP-5 required for FR nationals accessing ITAR data",
        ]
        assert result.recommendations[0] == (
            "Implement Technology Control Plan to protect ITAR technical data"
        )

    @pytest.mark.parametrize(
        ("value", "frequency"),
        [(20_000_000, "daily"), (2_000_000, "weekly"), (None, "transaction")],
    )
    def test_screening_frequency(self, value: float | None, frequency: str) -> None:
        profile = ExportControlProfile(company_type=["all"], annual_export_value=value)

        assert assess_screening_requirements(profile).screening_frequency == frequency

    def test_tcp_priority(self) -> None:
        profile = ExportControlProfile(
            company_type=["university"], has_itar_items=True, has_foreign_nationals=True
        )

        result = assess_tcp_requirements(profile)

        assert result.tcp_required is True
        assert result.implementation_priority == "immediate"
        assert len(result.required_elements) == 9

    def test_license_exceptions_without_ear_items(self) -> None:
        """Defense contractors without EAR items can only use GOV."""
        profile = ExportControlProfile(
            company_type=["defense_contractor"], has_defense_contracts=True
        )

        assert [e.exception for e in analyze_license_exceptions(profile)] == ["GOV"]

    def test_documentation_checklist_minimal(
        self, plain_operator: ExportControlProfile
    ) -> None:
        categories = [c.category for c in generate_documentation_checklist(plain_operator)]

        assert categories == ["Restricted Party Screening", "Compliance Program"]

    def test_penalty_exposure_factors(self) -> None:
        profile = ExportControlProfile(company_type=["launch_provider"], has_itar_items=True)

        result = assess_penalty_exposure(profile, True, True)

        assert result.max_imprisonment_years == 20
        assert len(result.mitigating_factors) == 2
        assert result.aggravating_factors == ["Operating without required DDTC registration"]
        assert len(result.additional_consequences) == 5
