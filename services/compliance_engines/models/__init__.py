"""
Compliance Engines Models
=========================

Pydantic request models: questionnaire answers, profiles and statuses.

Version: 0.1.0
"""

from services.compliance_engines.models.common import AssessmentItem
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
from services.compliance_engines.models.copuos import (
    CopuosAssessmentRequest,
    MissionProfile,
    MissionProfileInput,
)
from services.compliance_engines.models.eu_space_act import SpaceActAnswers
from services.compliance_engines.models.export_control import (
    ExportControlAssessmentRequest,
    ExportControlProfile,
    ExportControlProfileInput,
    JurisdictionRequest,
    PenaltyExposureRequest,
)
from services.compliance_engines.models.incidents import (
    AffectedAsset,
    CreateIncidentRequest,
    RecordNCANotificationRequest,
    SeverityFactors,
    UpdateIncidentStatusRequest,
)
from services.compliance_engines.models.nis2 import (
    NIS2Answers,
    NIS2MaturityRequest,
    NIS2RecommendationsRequest,
)
from services.compliance_engines.models.spectrum import (
    BilateralCoordination,
    CoordinationStatuses,
    SpectrumAssessmentRequest,
    SpectrumProfile,
    SpectrumProfileInput,
)


__all__ = [
    # Common
    "AssessmentItem",
    # EU Space Act
    "SpaceActAnswers",
    # NIS2
    "NIS2Answers",
    "NIS2MaturityRequest",
    "NIS2RecommendationsRequest",
    # COPUOS
    "MissionProfileInput",
    "MissionProfile",
    "CopuosAssessmentRequest",
    # Spectrum
    "SpectrumProfileInput",
    "SpectrumProfile",
    "BilateralCoordination",
    "CoordinationStatuses",
    "SpectrumAssessmentRequest",
    # Export control
    "ExportControlProfileInput",
    "ExportControlProfile",
    "ExportControlAssessmentRequest",
    "PenaltyExposureRequest",
    "JurisdictionRequest",
    # Incidents
    "SeverityFactors",
    "AffectedAsset",
    "CreateIncidentRequest",
    "UpdateIncidentStatusRequest",
    "RecordNCANotificationRequest",
    # Compliance score
    "ComplianceSnapshot",
    "AuthorizationWorkflowSnapshot",
    "DebrisSnapshot",
    "CybersecuritySnapshot",
    "InsuranceSnapshot",
    "InsurancePolicySnapshot",
    "EnvironmentalSnapshot",
    "IncidentSnapshot",
]
