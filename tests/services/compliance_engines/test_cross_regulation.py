"""
Cross-Regulation Tests
======================

Tests for the unified compliance matrix and NIS2 / EU Space Act overlap.

Version: 0.1.0
"""

import pytest

from services.compliance_engines.catalogs import nis2_requirements
from services.compliance_engines.engines.cross_regulation import (
    EFFORT_ORDER,
    build_unified_compliance_matrix,
    calculate_overlap_savings,
    get_cross_references_for_requirement,
    get_cross_regulation_summary,
    get_overlapping_requirements,
    get_requirement,
)
from shared.models.errors import NotFoundError


class TestSummary:
    """Tests for the cross reference summary."""

    def test_counts(self) -> None:
        summary = get_cross_regulation_summary()

        assert summary.total_cross_references == 47
        assert sum(summary.by_relationship.values()) == 47
        assert sum(summary.by_source_regulation.values()) == 47
        assert summary.nis2_to_eu_space_act.total == 21
        assert summary.nis2_to_eu_space_act.overlapping == 12
        assert summary.nis2_to_eu_space_act.superseded == 3


class TestMatrix:
    """Tests for the unified compliance matrix."""

    def test_one_row_per_category(self) -> None:
        reqs = nis2_requirements()
        matrix = build_unified_compliance_matrix(reqs)

        assert len(matrix) == len({r.category for r in reqs})

    def test_rows_ordered_by_effort(self) -> None:
        matrix = build_unified_compliance_matrix(nis2_requirements())
        ranks = [EFFORT_ORDER[row.compliance_effort] for row in matrix]

        assert ranks == sorted(ranks)

    def test_row_description_counts_requirements(self) -> None:
        reqs = nis2_requirements()
        for row in build_unified_compliance_matrix(reqs):
            count = sum(1 for r in reqs if r.category == row.category)
            assert row.description.startswith(f"{count} NIS2 requirement(s) in this category.")

    def test_empty_input(self) -> None:
        assert build_unified_compliance_matrix([]) == []


class TestOverlap:
    """Tests for overlap savings and per-requirement overlaps."""

    def test_savings_partition_requirements(self) -> None:
        """Every requirement is satisfied, partial or additional effort."""
        report = calculate_overlap_savings(nis2_requirements())

        assert report.total_nis2_requirements == 51
        assert (
            report.satisfied_by_eu_space_act
            + report.partially_satisfied
            + report.additional_effort_required
        ) == 51
        assert 0 <= report.savings_percentage <= 100
        assert report.estimated_weeks_saved > 0

    def test_savings_empty(self) -> None:
        report = calculate_overlap_savings([])

        assert report.savings_percentage == 0
        assert report.estimated_weeks_saved == 0

    def test_overlaps_reference_given_requirements(self) -> None:
        reqs = nis2_requirements()
        ids = {r.id for r in reqs}
        overlaps = get_overlapping_requirements(reqs)

        assert overlaps
        assert all(o.nis2_requirement_id in ids for o in overlaps)
        assert {o.effort_type for o in overlaps} <= set(EFFORT_ORDER)


class TestRequirementLookup:
    """Tests for requirement lookups and their cross references."""

    def test_unknown_requirement(self) -> None:
        with pytest.raises(NotFoundError):
            get_requirement("NIS2-DOES-NOT-EXIST")

    def test_cross_references_buckets(self) -> None:
        requirement = get_requirement(nis2_requirements()[0].id)
        refs = get_cross_references_for_requirement(requirement)

        assert refs.total >= len(refs.eu_space_act)
        assert all("eu_space_act" in (r.source_regulation, r.target_regulation) for r in refs.eu_space_act)
