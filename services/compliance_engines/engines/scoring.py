"""
Weighted Scoring
================

Weighted group score shared by every rule engine.

Each requirement contributes a severity weight to the denominator.
Compliant items earn the full weight, partial items half of it, and
not-applicable items are removed from the denominator entirely.
An empty group, or one that is entirely not applicable, scores 100.

Version: 0.1.0
"""

import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from shared.models.compliance import ComplianceStatus, RiskLevel, Severity


T = TypeVar("T")

# Credit earned per status; statuses not listed earn nothing
STATUS_CREDIT: dict[str, float] = {
    ComplianceStatus.COMPLIANT.value: 1.0,
    ComplianceStatus.PARTIAL.value: 0.5,
}

SEVERITY_WEIGHTS: dict[str, int] = {
    Severity.CRITICAL.value: 3,
    Severity.MAJOR.value: 2,
}

RISK_WEIGHTS: dict[str, int] = {
    RiskLevel.CRITICAL.value: 3,
    RiskLevel.HIGH.value: 2,
}

STATUS_PREFIXES: dict[str, str] = {
    ComplianceStatus.NON_COMPLIANT.value: "Not currently compliant with",
    ComplianceStatus.PARTIAL.value: "Partially compliant with",
    ComplianceStatus.NOT_ASSESSED.value: "Not yet assessed against",
    ComplianceStatus.COMPLIANT.value: "Compliant with",
    ComplianceStatus.NOT_APPLICABLE.value: "Not applicable:",
}

GAP_STATUSES = frozenset(
    {
        ComplianceStatus.NON_COMPLIANT.value,
        ComplianceStatus.NOT_ASSESSED.value,
        ComplianceStatus.PARTIAL.value,
    }
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return math.floor(value + 0.5)


def severity_weight(severity: str) -> int:
    """Weight for a critical/major/minor severity."""
    return SEVERITY_WEIGHTS.get(severity, 1)


def risk_weight(risk_level: str) -> int:
    """Weight for a critical/high/medium/low risk level."""
    return RISK_WEIGHTS.get(risk_level, 1)


def status_map(
    assessments: Iterable[Any] | Mapping[str, str] | None,
) -> dict[str, str]:
    """
    Normalize assessments into a requirement-id to status mapping.

    Args:
        assessments: Items with requirement_id and status, an id-to-status
            mapping, or None

    Returns:
        Mapping of requirement id to plain status string
    """
    if not assessments:
        return {}
    if isinstance(assessments, Mapping):
        return {k: _status_value(v) for k, v in assessments.items()}
    return {a.requirement_id: _status_value(a.status) for a in assessments}


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, ComplianceStatus) else str(status)


def calculate_group_score(
    items: Iterable[T],
    statuses: Mapping[str, str],
    weight: Callable[[T], int],
    key: Callable[[T], str] = lambda item: item.id,  # type: ignore[attr-defined]
) -> int:
    """
    Calculate a 0-100 weighted compliance score for a group of requirements.

    Args:
        items: Requirements in the group
        statuses: Requirement id to status
        weight: Severity weight of a requirement
        key: Requirement id accessor

    Returns:
        Rounded percentage of achieved over applicable weight
    """
    total_weight = 0
    achieved = 0.0
    for item in items:
        item_weight = weight(item)
        total_weight += item_weight
        status = statuses.get(key(item))
        if status == ComplianceStatus.NOT_APPLICABLE.value:
            total_weight -= item_weight
        else:
            achieved += item_weight * STATUS_CREDIT.get(status or "", 0.0)

    if total_weight <= 0:
        return 100
    return round_half_up(achieved / total_weight * 100)


def gap_description(status: str, title: str, reference: str) -> str:
    """Human-readable gap line such as 'Partially compliant with X (ref)'."""
    return f"{STATUS_PREFIXES[status]} {title} ({reference})"
