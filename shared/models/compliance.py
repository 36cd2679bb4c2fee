"""
Compliance Models
=================

Status, risk and severity vocabularies shared by every engine.

Version: 0.1.0
"""

from enum import Enum


class ComplianceStatus(str, Enum):
    """Per-requirement assessment status."""

    COMPLIANT = "compliant"
    PARTIAL = "partial"
    NON_COMPLIANT = "non_compliant"
    NOT_ASSESSED = "not_assessed"
    NOT_APPLICABLE = "not_applicable"


class RiskLevel(str, Enum):
    """Risk level of a requirement, gap or assessment."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Severity(str, Enum):
    """Severity of a catalog requirement or guideline."""

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class Priority(str, Enum):
    """Priority of a gap or recommendation."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Sort rank shared by risk levels and priorities
RISK_ORDER: dict[str, int] = {
    RiskLevel.CRITICAL.value: 0,
    RiskLevel.HIGH.value: 1,
    RiskLevel.MEDIUM.value: 2,
    RiskLevel.LOW.value: 3,
}
