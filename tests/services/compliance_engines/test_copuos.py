"""
COPUOS Engine Tests
===================

Tests for mission profile validation, guideline applicability, scoring
and gap analysis against COPUOS LTS, IADC and ISO 24113.

Version: 0.1.0
"""

import pytest

from services.compliance_engines.engines import copuos
from services.compliance_engines.models.copuos import MissionProfile, MissionProfileInput
from shared.models.errors import ProfileValidationError


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def leo_profile() -> MissionProfile:
    """Commercial 500 kg LEO satellite with propulsion."""
    return copuos.validate_mission_profile(
        MissionProfileInput(
            orbit_regime="LEO",
            altitude_km=550,
            mission_type="commercial",
            satellite_mass_kg=500,
            has_propulsion=True,
        )
    )


@pytest.fixture
def leo_guidelines(leo_profile: MissionProfile) -> list:
    return copuos.get_applicable_guidelines(leo_profile)


def _ids(guidelines) -> set[str]:
    return {g.id for g in guidelines}


# =============================================================================
# Profile Tests
# =============================================================================


class TestMissionProfile:
    """Tests for mission profile validation."""

    def test_defaults_applied(self, leo_profile: MissionProfile) -> None:
        assert leo_profile.satellite_category == "medium"
        assert leo_profile.planned_lifetime_years == 5
        assert leo_profile.is_constellation is False

    @pytest.mark.parametrize(
        "missing",
        [
            {"orbit_regime": None},
            {"mission_type": None},
            {"satellite_mass_kg": 0},
        ],
    )
    def test_incomplete_profile_rejected(self, missing: dict) -> None:
        fields = {"orbit_regime": "LEO", "mission_type": "commercial", "satellite_mass_kg": 5}
        fields.update(missing)

        with pytest.raises(ProfileValidationError):
            copuos.validate_mission_profile(MissionProfileInput(**fields))

    @pytest.mark.parametrize(
        ("mass", "category"),
        [
            (9.9, "cubesat"),
            (10, "smallsat"),
            (100, "medium"),
            (1000, "large"),
            (5000, "mega"),
        ],
    )
    def test_satellite_category(self, mass: float, category: str) -> None:
        assert copuos.get_satellite_category(mass) == category


# =============================================================================
# Applicability Tests
# =============================================================================


class TestApplicability:
    """Tests for guideline applicability predicates."""

    def test_leo_disposal_guidelines(self, leo_guidelines: list) -> None:
        ids = _ids(leo_guidelines)

        assert "iadc-5.3.2-leo" in ids
        assert "iadc-5.3.2-geo" not in ids
        assert "iso-24113-6.4.2" in ids

    def test_mission_type_filter(self, leo_guidelines: list) -> None:
        ids = _ids(leo_guidelines)

        assert "copuos-lts-a1" in ids
        assert "copuos-lts-c2" not in ids

    def test_propulsion_required(self, leo_profile: MissionProfile) -> None:
        without = copuos.get_applicable_guidelines(
            leo_profile.model_copy(update={"has_propulsion": False})
        )

        assert "copuos-lts-b5" in _ids(copuos.get_applicable_guidelines(leo_profile))
        assert "copuos-lts-b5" not in _ids(without)
        assert "iadc-5.2.2" not in _ids(without)

    def test_minimum_mass(self) -> None:
        cubesat = copuos.validate_mission_profile(
            MissionProfileInput(orbit_regime="LEO", mission_type="commercial", satellite_mass_kg=4)
        )
        ids = _ids(copuos.get_applicable_guidelines(cubesat))

        assert "iadc-5.3.4" not in ids
        assert "iso-24113-6.3.2" not in ids

    def test_geo_disposal(self, leo_profile: MissionProfile) -> None:
        geo = leo_profile.model_copy(update={"orbit_regime": "GEO", "altitude_km": None})
        ids = _ids(copuos.get_applicable_guidelines(geo))

        assert "iadc-5.3.2-geo" in ids
        assert "iadc-5.3.2-leo" not in ids


# =============================================================================
# Scoring Tests
# =============================================================================


class TestScoring:
    """Tests for severity-weighted scoring and risk."""

    def test_unassessed_mission(self, leo_guidelines: list) -> None:
        score = copuos.calculate_compliance_score(leo_guidelines, None)

        assert score.overall == 0
        assert score.mandatory == 0
        assert copuos.determine_risk_level(score, leo_guidelines, None) == "critical"

    def test_fully_compliant_mission(self, leo_guidelines: list) -> None:
        statuses = {g.id: "compliant" for g in leo_guidelines}

        score = copuos.calculate_compliance_score(leo_guidelines, statuses)

        assert score.overall == 100
        assert set(score.by_source) == {"COPUOS", "IADC", "ISO"}
        assert copuos.determine_risk_level(score, leo_guidelines, statuses) == "low"
        assert copuos.generate_gap_analysis(leo_guidelines, statuses) == []

    def test_non_compliant_critical_guideline(self, leo_guidelines: list) -> None:
        statuses = {g.id: "compliant" for g in leo_guidelines}
        statuses["iadc-5.3.2-leo"] = "non_compliant"

        score = copuos.calculate_compliance_score(leo_guidelines, statuses)

        assert score.overall < 100
        assert copuos.determine_risk_level(score, leo_guidelines, statuses) == "critical"

    def test_empty_category_scores_full(self) -> None:
        score = copuos.calculate_compliance_score([], None)

        assert score.overall == 100
        assert score.by_category["space_weather"] == 100


# =============================================================================
# Gap Analysis Tests
# =============================================================================


class TestGapAnalysis:
    """Tests for gap priorities and recommendations."""

    def test_gaps_ordered_by_priority(self, leo_guidelines: list) -> None:
        gaps = copuos.generate_gap_analysis(leo_guidelines, None)
        order = [copuos.PRIORITY_ORDER[g.priority] for g in gaps]

        assert order == sorted(order)
        assert len(gaps) == len(leo_guidelines)

    def test_gap_priority_rules(self, leo_guidelines: list) -> None:
        gaps = {g.guideline_id: g for g in copuos.generate_gap_analysis(leo_guidelines, None)}

        assert gaps["copuos-lts-b1"].priority == "high"
        assert gaps["copuos-lts-a1"].priority == "medium"
        assert gaps["copuos-lts-b6"].priority == "low"

    def test_gap_details(self, leo_guidelines: list) -> None:
        gaps = {
            g.guideline_id: g
            for g in copuos.generate_gap_analysis(
                leo_guidelines, {"iadc-5.3.2-leo": "partial"}
            )
        }

        disposal = gaps["iadc-5.3.2-leo"]
        assert disposal.gap.startswith("Partially compliant with")
        assert disposal.estimated_effort == "high"
        assert disposal.dependencies == ["Passivation capability (IADC 5.3.1)"]
        assert gaps["copuos-lts-a2"].gap.startswith("Not yet assessed:")

    def test_recommendations_capped(self, leo_profile: MissionProfile) -> None:
        result = copuos.perform_assessment(leo_profile, None)

        assert len(result.recommendations) <= copuos.MAX_RECOMMENDATIONS
        assert result.recommendations[0].startswith("Priority: Develop 25-year deorbit")

    def test_perform_assessment(self, leo_profile: MissionProfile) -> None:
        result = copuos.perform_assessment(leo_profile, {"copuos-lts-a1": "compliant"})

        assert result.risk_level == "critical"
        assert "Art. 72" in result.eu_space_act_overlaps
        assert result.eu_space_act_overlaps == sorted(result.eu_space_act_overlaps)


# =============================================================================
# Cross Reference Tests
# =============================================================================


class TestCrossReferences:
    """Tests for EU Space Act article mapping."""

    def test_article_cross_reference(self) -> None:
        xref = copuos.get_cross_reference_for_article("Art. 72")

        assert "copuos-lts-b9" in _ids(xref.copuos_guidelines)
        assert "iadc-5.3.3" in _ids(xref.iadc_guidelines)
        assert all(g.source == "ISO" for g in xref.iso_requirements)

    def test_debris_module_mapping(self) -> None:
        mapping = copuos.map_to_eu_space_act_debris_module()

        assert list(mapping) == list(copuos.DEBRIS_MODULE_ARTICLES)
        assert "copuos-lts-b2" in _ids(mapping["Art. 63"])

    def test_guideline_lookup(self) -> None:
        assert copuos.get_guideline("iadc-5.1.1").source == "IADC"
        assert copuos.get_guideline("missing") is None

    def test_compliance_summary(self, leo_guidelines: list) -> None:
        summary = copuos.get_compliance_summary(leo_guidelines, {"copuos-lts-a1": "compliant"})

        assert summary.total_guidelines == 42
        assert summary.applicable == len(leo_guidelines)
        assert summary.compliant == 1
        assert summary.not_assessed == len(leo_guidelines) - 1
