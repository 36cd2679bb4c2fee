"""
Compliance Score Tests
======================

Tests for the EU Space Act module-weighted compliance score.

Version: 0.1.0
"""

from datetime import UTC, datetime, timedelta

import pytest

from services.compliance_engines.engines import compliance_score as scoring
from services.compliance_engines.models.compliance_score import (
    AuthorizationWorkflowSnapshot,
    ComplianceSnapshot,
    CybersecuritySnapshot,
    DebrisSnapshot,
    EnvironmentalSnapshot,
    IncidentSnapshot,
    InsurancePolicySnapshot,
    InsuranceSnapshot,
)


NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


def _clock() -> datetime:
    return NOW


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def complete_snapshot() -> ComplianceSnapshot:
    """Operator with every module fully evidenced."""
    return ComplianceSnapshot(
        supervision_id="sup-1",
        authorization_workflows=[
            AuthorizationWorkflowSnapshot(status="approved", document_statuses=["ready", "ready"])
        ],
        debris=DebrisSnapshot(
            plan_generated=True, has_passivation_cap=True, deorbit_strategy="controlled_reentry"
        ),
        cybersecurity=CybersecuritySnapshot(
            framework_generated_at=NOW - timedelta(days=30),
            maturity_score=100,
            has_incident_response_plan=True,
        ),
        insurance=InsuranceSnapshot(
            report_generated=True,
            policies=[
                InsurancePolicySnapshot(status="active", expiration_date=NOW + timedelta(days=200))
            ],
        ),
        environmental=EnvironmentalSnapshot(status="approved", total_gwp=1250.0),
        supplier_request_statuses=["completed"],
        has_supervision_config=True,
        report_statuses=["submitted"],
    )


# =============================================================================
# Overall Score Tests
# =============================================================================


class TestOverallScore:
    """Tests for weighted totals, grade and status."""

    def test_weights_sum_to_one(self) -> None:
        assert sum(scoring.MODULE_WEIGHTS.values()) == pytest.approx(1.0)

    def test_empty_snapshot(self) -> None:
        result = scoring.calculate_compliance_score(ComplianceSnapshot(), now=_clock)

        assert result.breakdown["cybersecurity"].score == 20
        assert result.breakdown["environmental"].score == 15
        assert result.breakdown["environmental"].weighted_score == 2
        assert result.breakdown["reporting"].score == 70
        assert result.overall == 13
        assert result.grade == "F"
        assert result.status == "non_compliant"
        assert result.last_calculated == NOW

    def test_complete_snapshot(self, complete_snapshot: ComplianceSnapshot) -> None:
        result = scoring.calculate_compliance_score(complete_snapshot, now=_clock)

        assert {m: s.score for m, s in result.breakdown.items()} == dict.fromkeys(
            scoring.MODULE_WEIGHTS, 100
        )
        assert result.overall == 100
        assert result.grade == "A"
        assert result.status == "compliant"
        assert result.recommendations == []

    @pytest.mark.parametrize(
        ("score", "grade"),
        [(90, "A"), (89, "B"), (80, "B"), (70, "C"), (60, "D"), (59, "F")],
    )
    def test_grade(self, score: int, grade: str) -> None:
        assert scoring.get_grade(score) == grade

    def test_status_without_critical_failure(self) -> None:
        assert scoring.get_status(85, {}) == "compliant"
        assert scoring.get_status(65, {}) == "mostly_compliant"
        assert scoring.get_status(10, {}) == "partial"
        assert scoring.get_status(0, {}) == "not_assessed"

    @pytest.mark.parametrize(
        ("score", "status"),
        [(80, "compliant"), (50, "partial"), (1, "non_compliant"), (0, "not_started")],
    )
    def test_module_status(self, score: int, status: str) -> None:
        assert scoring.get_module_status(score) == status


# =============================================================================
# Module Tests
# =============================================================================


class TestModules:
    """Tests for individual module factors."""

    def test_unknown_workflow_status(self) -> None:
        module = scoring.calculate_authorization_score(
            [
                AuthorizationWorkflowSnapshot(
                    status="draft", document_statuses=["ready", "ready", "missing"]
                )
            ]
        )

        earned = {f.id: f.earned_points for f in module.factors}
        assert earned == {"auth_status": 5, "doc_completeness": 23, "nca_designation": 25}
        assert module.score == 53

    @pytest.mark.parametrize(("days", "points"), [(200, 30), (60, 20), (10, 10), (-1, 0)])
    def test_policy_validity(self, days: int, points: int) -> None:
        insurance = InsuranceSnapshot(
            policies=[
                InsurancePolicySnapshot(status="active", expiration_date=NOW + timedelta(days=days))
            ]
        )

        module = scoring.calculate_insurance_score(insurance, NOW)

        assert {f.id: f.earned_points for f in module.factors}["policy_validity"] == points

    def test_tpl_only_earns_partial_assessment(self) -> None:
        module = scoring.calculate_insurance_score(InsuranceSnapshot(calculated_tpl=60e6), NOW)

        assert module.factors[0].earned_points == 20

    def test_unresolved_cyber_incidents(self, complete_snapshot: ComplianceSnapshot) -> None:
        incidents = [
            IncidentSnapshot(category="cyber_incident", detected_at=NOW - timedelta(days=3)),
            IncidentSnapshot(category="cyber_incident", detected_at=NOW - timedelta(days=2)),
            IncidentSnapshot(
                category="cyber_incident", status="resolved", detected_at=NOW - timedelta(days=1)
            ),
            IncidentSnapshot(category="cyber_incident", detected_at=datetime(2025, 5, 1, tzinfo=UTC)),
        ]
        snapshot = complete_snapshot.model_copy(
            update={
                "incidents": [
                    i.model_copy(update={"reported_to_nca": True}) for i in incidents
                ]
            }
        )

        result = scoring.calculate_compliance_score(snapshot, now=_clock)

        assert result.breakdown["cybersecurity"].score == 90

    def test_overdue_notifications(self) -> None:
        overdue = IncidentSnapshot(category="spacecraft_anomaly", detected_at=NOW - timedelta(days=2))
        on_time = IncidentSnapshot(category="conjunction_event", detected_at=NOW - timedelta(days=1))

        one = scoring.calculate_reporting_score(True, [overdue, on_time], [], NOW)
        two = scoring.calculate_reporting_score(True, [overdue, overdue], [], NOW)

        assert one.score == 80
        assert two.score == 60

    def test_naive_detection_times(self) -> None:
        incident = IncidentSnapshot(
            category="loss_of_contact",
            detected_at=(NOW - timedelta(hours=5)).replace(tzinfo=None),
        )

        module = scoring.calculate_reporting_score(True, [incident], [], NOW)

        assert module.score == 80

    def test_supplier_requests(self) -> None:
        module = scoring.calculate_environmental_score(
            EnvironmentalSnapshot(status="submitted"), ["completed", "pending", "pending"]
        )

        assert module.score == 60


# =============================================================================
# Recommendation Tests
# =============================================================================


class TestRecommendations:
    """Tests for score recommendations."""

    def test_empty_snapshot_recommendations(self) -> None:
        result = scoring.calculate_compliance_score(ComplianceSnapshot(), now=_clock)
        recs = result.recommendations

        assert len(recs) == scoring.MAX_RECOMMENDATIONS
        assert [r.priority for r in recs[:9]] == ["critical"] * 9
        assert recs[9].priority == "high"
        assert recs[0].action == "Complete Authorization Status"
        assert recs[0].impact == "+40 points on authorization module"
        assert recs[0].estimated_effort == "high"
        assert recs[0].article_ref == "Art. 6-10"

    def test_partial_factor_priority(self) -> None:
        module = scoring.calculate_environmental_score(EnvironmentalSnapshot(), [])

        recs = {r.action: r for r in scoring.generate_recommendations({"environmental": module})}

        assert recs["Complete Supplier Data"].priority == "medium"
        assert recs["Complete Supplier Data"].estimated_effort == "medium"
        assert recs["Complete GWP Calculation"].priority == "high"
