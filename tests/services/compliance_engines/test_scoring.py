"""
Weighted Scoring Tests
======================

Tests for the weighted group score shared by the rule engines.

Version: 0.1.0
"""

from dataclasses import dataclass

import pytest

from services.compliance_engines.engines import scoring
from shared.models.compliance import ComplianceStatus, RiskLevel, Severity


@dataclass
class Item:
    id: str
    severity: str


def _score(items: list[Item], statuses: dict[str, str]) -> int:
    return scoring.calculate_group_score(
        items, statuses, lambda item: scoring.severity_weight(item.severity)
    )


# =============================================================================
# Rounding Tests
# =============================================================================


class TestRoundHalfUp:
    """Tests for half-up rounding."""

    @pytest.mark.parametrize(
        "value,expected",
        [(12.5, 13), (0.5, 1), (2.5, 3), (12.49, 12), (99.5, 100), (0.0, 0)],
    )
    def test_half_goes_up(self, value: float, expected: int) -> None:
        assert scoring.round_half_up(value) == expected


# =============================================================================
# Group Score Tests
# =============================================================================


class TestGroupScore:
    """Tests for calculate_group_score."""

    def test_half_point_boundary_rounds_up(self) -> None:
        """One partial major out of a weight of 8 is 12.5%, reported as 13."""
        items = [
            Item("a", Severity.MAJOR.value),
            Item("b", Severity.CRITICAL.value),
            Item("c", Severity.CRITICAL.value),
        ]
        statuses = {"a": "partial", "b": "non_compliant", "c": "non_compliant"}

        assert _score(items, statuses) == 13

    def test_empty_group_scores_100(self) -> None:
        assert _score([], {}) == 100

    def test_all_not_applicable_scores_100(self) -> None:
        items = [Item("a", "critical"), Item("b", "minor")]
        statuses = {"a": "not_applicable", "b": "not_applicable"}

        assert _score(items, statuses) == 100

    def test_not_applicable_leaves_denominator(self) -> None:
        items = [Item("a", "critical"), Item("b", "minor")]
        statuses = {"a": "not_applicable", "b": "compliant"}

        assert _score(items, statuses) == 100

    def test_unassessed_items_earn_nothing(self) -> None:
        items = [Item("a", "major"), Item("b", "major")]

        assert _score(items, {"a": "compliant"}) == 50

    def test_severity_weighting(self) -> None:
        items = [Item("a", "critical"), Item("b", "minor")]

        assert _score(items, {"b": "compliant"}) == 25
        assert _score(items, {"a": "compliant"}) == 75


# =============================================================================
# Weight And Status Tests
# =============================================================================


class TestWeights:
    """Tests for severity and risk weights."""

    def test_severity_weights(self) -> None:
        assert scoring.severity_weight(Severity.CRITICAL) == 3
        assert scoring.severity_weight(Severity.MAJOR) == 2
        assert scoring.severity_weight(Severity.MINOR) == 1

    def test_risk_weights(self) -> None:
        assert scoring.risk_weight(RiskLevel.CRITICAL) == 3
        assert scoring.risk_weight(RiskLevel.HIGH) == 2
        assert scoring.risk_weight(RiskLevel.MEDIUM) == 1
        assert scoring.risk_weight("low") == 1


class TestStatusMap:
    """Tests for assessment normalization."""

    def test_none_is_empty(self) -> None:
        assert scoring.status_map(None) == {}

    def test_enum_statuses_become_strings(self) -> None:
        mapping = scoring.status_map({"a": ComplianceStatus.PARTIAL})

        assert mapping == {"a": "partial"}

    def test_assessment_objects(self) -> None:
        @dataclass
        class Assessment:
            requirement_id: str
            status: ComplianceStatus

        mapping = scoring.status_map([Assessment("x", ComplianceStatus.COMPLIANT)])

        assert mapping == {"x": "compliant"}

    def test_gap_description(self) -> None:
        text = scoring.gap_description("partial", "Debris mitigation plan", "Art. 58")

        assert text == "Partially compliant with Debris mitigation plan (Art. 58)"
