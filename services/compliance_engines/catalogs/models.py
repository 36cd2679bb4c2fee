"""
Catalog Models
==============

Pydantic models for the static requirement catalogs. Records are
read-only reference data, so every model is frozen.

Version: 0.1.0
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CatalogRecord(BaseModel):
    """Base for immutable catalog records."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# NIS2 / ENISA / Cross References
# =============================================================================


class NIS2Applicability(CatalogRecord):
    """Which entities a NIS2 requirement applies to."""

    entity_classifications: list[str] = Field(default_factory=list)
    sectors: list[str] = Field(default_factory=list)
    sub_sectors: list[str] = Field(default_factory=list)
    organization_sizes: list[str] = Field(default_factory=list)


class NIS2Requirement(CatalogRecord):
    """A NIS2 Directive obligation with space-sector guidance."""

    id: str
    article_ref: str
    category: str
    title: str
    description: str
    compliance_question: str
    space_specific_guidance: str
    applicable_to: NIS2Applicability
    eu_space_act_ref: str | None = None
    eu_space_act_article_numbers: list[int] = Field(default_factory=list)
    enisa_control_ids: list[str] = Field(default_factory=list)
    iso27001_ref: str | None = None
    tips: list[str] = Field(default_factory=list)
    evidence_required: list[str] = Field(default_factory=list)
    severity: Literal["critical", "major", "minor"]
    implementation_time_weeks: int | None = None
    can_be_simplified: bool = False

    @property
    def article(self) -> str:
        """Article reference without the regulation prefix."""
        return self.article_ref.replace("NIS2 ", "")


class CrossReference(CatalogRecord):
    """A relationship between articles of two regulations."""

    id: str
    source_regulation: str
    source_article: str
    source_title: str
    target_regulation: str
    target_article: str
    target_title: str
    relationship: Literal["implements", "overlaps", "extends", "supersedes", "references"]
    description: str
    confidence: str


class EnisaControl(CatalogRecord):
    """ENISA space threat landscape control."""

    id: str
    category: str
    subcategory: str
    title: str
    description: str
    threat_addressed: str
    nis2_mapping: str
    eu_space_act_mapping: str
    iso27001_mapping: str
    priority: str
    implementation_complexity: str
    space_segment: list[str] = Field(default_factory=list)


# =============================================================================
# COPUOS / IADC / ISO 24113
# =============================================================================


class GuidelineApplicability(CatalogRecord):
    """Mission characteristics a guideline applies to."""

    orbit_regimes: list[str] | None = None
    mission_types: list[str] | None = None
    satellite_categories: list[str] | None = None
    min_mass_kg: float | None = None
    max_altitude_km: float | None = None
    min_altitude_km: float | None = None
    constellations_only: bool = False
    requires_propulsion: bool = False


class CopuosGuideline(CatalogRecord):
    """A COPUOS LTS, IADC or ISO 24113 guideline."""

    id: str
    source: Literal["COPUOS", "IADC", "ISO"]
    reference_number: str
    title: str
    description: str
    category: str
    binding_level: Literal["mandatory", "recommended", "best_practice"]
    applicability: GuidelineApplicability
    compliance_question: str
    evidence_required: list[str] = Field(default_factory=list)
    implementation_guidance: list[str] = Field(default_factory=list)
    eu_space_act_cross_ref: list[str] = Field(default_factory=list)
    iadc_reference: str | None = None
    iso_reference: str | None = None
    severity: Literal["critical", "major", "minor"]


# =============================================================================
# Spectrum / ITU
# =============================================================================


class FrequencyRange(CatalogRecord):
    min: float
    max: float


class FrequencyBandInfo(CatalogRecord):
    """Satellite frequency band characteristics."""

    band: str
    name: str
    range_ghz: FrequencyRange
    primary_services: list[str]
    typical_uses: list[str]
    geo_allocation: bool
    ngso_allocation: bool
    coordination_required: bool
    itu_region: list[int]
    key_restrictions: list[str]


class PhaseTimeline(CatalogRecord):
    before_launch: int
    processing_time: int


class PhaseFees(CatalogRecord):
    base_fee: float
    per_frequency: float | None = None
    currency: str


class ITUFilingPhase(CatalogRecord):
    """A phase of the ITU satellite network filing process."""

    phase: str
    name: str
    description: str
    timeline_months: PhaseTimeline
    required_documents: list[str]
    fees: PhaseFees
    rule_reference: str
    coordination_required: bool
    publication_required: bool


class LicenseFees(CatalogRecord):
    application: float
    annual: float | None = None
    currency: str


class JurisdictionLicense(CatalogRecord):
    """A national or international spectrum license."""

    jurisdiction: str
    license_name: str
    description: str
    applicable_to: list[str]
    frequency_bands: list[str]
    processing_time_days: int
    validity_years: int
    renewal_required: bool
    requirements: list[str]
    fees: LicenseFees
    contact_authority: str


class WRCDecision(CatalogRecord):
    """World Radiocommunication Conference outcome."""

    id: str
    conference: str
    agenda_item: str
    title: str
    description: str
    impacted_bands: list[str]
    impacted_services: list[str]
    effective_date: str
    implications: list[str]
    action_required: list[str]


class SpectrumRequirement(CatalogRecord):
    """A spectrum filing, coordination or licensing obligation."""

    id: str
    title: str
    description: str
    source: Literal["ITU", "FCC", "OFCOM", "BNETZA", "CEPT", "WRC"]
    category: str
    frequency_bands: list[str] = Field(default_factory=list)
    service_types: list[str] = Field(default_factory=list)
    orbit_types: list[str] = Field(default_factory=list)
    risk_level: Literal["critical", "high", "medium", "low"]
    is_mandatory: bool
    reference: str
    compliance_actions: list[str] = Field(default_factory=list)
    documentation_required: list[str] = Field(default_factory=list)
    deadlines: str | None = None
    related_requirements: list[str] = Field(default_factory=list)
    eu_space_act_ref: str | None = None


class SpectrumCatalog(CatalogRecord):
    frequency_bands: list[FrequencyBandInfo]
    itu_filing_phases: list[ITUFilingPhase]
    jurisdiction_licenses: list[JurisdictionLicense]
    wrc_decisions: list[WRCDecision]
    requirements: list[SpectrumRequirement]


# =============================================================================
# Export Control (ITAR / EAR)
# =============================================================================


class USMLCategory(CatalogRecord):
    category: str
    roman_numeral: str
    title: str
    description: str
    key_articles: list[str]
    related_eccns: list[str]
    common_items: list[str]
    technical_data_covered: list[str]
    defensive_services: list[str]


class CCLCategory(CatalogRecord):
    category: str
    eccn_prefix: str
    title: str
    description: str
    control_reasons: list[str]
    key_items: list[str]
    license_exceptions: list[str]
    de_control_notes: str | None = None


class PenaltyInfo(CatalogRecord):
    max_civil_penalty: float
    max_criminal_penalty: float
    max_imprisonment: int
    additional_consequences: list[str] = Field(default_factory=list)


class ExportControlRequirement(CatalogRecord):
    """An ITAR or EAR compliance obligation."""

    id: str
    title: str
    description: str
    regulation: Literal["ITAR", "EAR"]
    category: str
    cfr_reference: str
    risk_level: Literal["critical", "high", "medium", "low"]
    is_mandatory: bool
    applicable_to: list[str]
    penalty_info: PenaltyInfo
    compliance_actions: list[str] = Field(default_factory=list)
    documentation_required: list[str] = Field(default_factory=list)
    related_requirements: list[str] = Field(default_factory=list)
    eu_equivalent: str | None = None


class DeemedExportRule(CatalogRecord):
    id: str
    title: str
    description: str
    regulation: Literal["ITAR", "EAR"]
    cfr_reference: str
    risk_level: str
    applicable_scenarios: list[str]
    exemptions: list[str]
    required_actions: list[str]


class ScreeningList(CatalogRecord):
    """A restricted party list that transactions are screened against."""

    id: str
    list_name: str
    list_code: str
    managing_agency: str
    description: str
    update_frequency: str
    screening_required: Literal["all_transactions", "export_only", "financial_only"]
    consequences: list[str]


class EUComparison(CatalogRecord):
    us_requirement: str
    eu_equivalent: str
    key_difference: str
    harmonization_status: Literal["aligned", "partial", "divergent"]


class ExportControlCatalog(CatalogRecord):
    usml_categories: list[USMLCategory]
    ccl_categories: list[CCLCategory]
    requirements: list[ExportControlRequirement]
    deemed_export_rules: list[DeemedExportRule]
    screening_requirements: list[ScreeningList]
    eu_comparisons: list[EUComparison]


# =============================================================================
# EU Space Act
# =============================================================================


class Article(CatalogRecord):
    """An EU Space Act article with its operator applicability."""

    number: int | str
    title: str
    compliance_type: str
    applies_to: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)


class ModuleDefinition(CatalogRecord):
    id: str
    name: str
    description: str
    article_range: str


class ChecklistItem(CatalogRecord):
    requirement: str
    articles: str
    module: str


class OperatorChecklist(CatalogRecord):
    pre_authorization: list[ChecklistItem] = Field(default_factory=list)
    pre_registration: list[ChecklistItem] = Field(default_factory=list)
    ongoing: list[ChecklistItem] = Field(default_factory=list)
    operational: list[ChecklistItem] = Field(default_factory=list)
    end_of_life: list[ChecklistItem] = Field(default_factory=list)


class SpaceActMetadata(CatalogRecord):
    regulation: str
    reference: str
    total_articles: int


class SpaceActCatalog(CatalogRecord):
    metadata: SpaceActMetadata
    compliance_type_map: dict[str, str] = Field(default_factory=dict)
    modules: list[ModuleDefinition]
    articles: list[Article]
    compliance_checklist_by_operator_type: dict[str, OperatorChecklist]
