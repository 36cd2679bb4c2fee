"""
Shared Models
=============

Pydantic models and vocabularies shared across the compliance engines.

Models:
- Compliance vocabularies (ComplianceStatus, RiskLevel, Severity, Priority)
- Error types (ProfileValidationError, CatalogError, NotFoundError)
- Response envelopes (ErrorResponse, HealthResponse)
"""

from shared.models.compliance import (
    ComplianceStatus,
    Priority,
    RISK_ORDER,
    RiskLevel,
    Severity,
)
from shared.models.errors import (
    CatalogError,
    ComplianceEngineError,
    NotFoundError,
    ProfileValidationError,
)
from shared.models.common import (
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Compliance
    "ComplianceStatus",
    "Priority",
    "RISK_ORDER",
    "RiskLevel",
    "Severity",
    # Errors
    "CatalogError",
    "ComplianceEngineError",
    "NotFoundError",
    "ProfileValidationError",
    # Common
    "ErrorResponse",
    "HealthResponse",
]
