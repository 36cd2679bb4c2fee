"""
EU Space Act Engine
===================

Determines which EU Space Act (COM(2025) 335) articles apply to an
operator, the status of each compliance module, the operator checklist
and the authorization pathway.

Operator kinds:
- SCO: Spacecraft Operator
- LO: Launch Operator
- LSO: Launch Site Operator
- ISOS: In-Space Services Provider
- PDP: Primary Data Provider
- TCO: Third-country operator serving the EU market

Version: 0.1.0
"""

import re
from dataclasses import asdict, dataclass
from typing import Any

from services.compliance_engines.catalogs import eu_space_act_catalog
from services.compliance_engines.catalogs.models import Article, ChecklistItem, SpaceActCatalog
from services.compliance_engines.engines.scoring import round_half_up
from services.compliance_engines.models.eu_space_act import SpaceActAnswers
from shared.logging import get_logger


logger = get_logger(__name__)


MANDATORY_TYPES = frozenset({"mandatory_pre_activity", "mandatory_ongoing"})
SIMPLIFIED_TYPE = "conditional_simplified"

LIGHT_REGIME_SIZES = frozenset({"small", "research"})


@dataclass(frozen=True)
class OperatorMapping:
    operator_type: str
    abbreviation: str
    label: str


OPERATOR_MAP: dict[str, OperatorMapping] = {
    "spacecraft": OperatorMapping("spacecraft_operator", "SCO", "Spacecraft Operator"),
    "launch_vehicle": OperatorMapping("launch_operator", "LO", "Launch Operator"),
    "launch_site": OperatorMapping("launch_site_operator", "LSO", "Launch Site Operator"),
    "isos": OperatorMapping("isos_provider", "ISOS", "In-Space Services Provider"),
    "data_provider": OperatorMapping("primary_data_provider", "PDP", "Primary Data Provider"),
}

ENTITY_SIZE_LABELS = {
    "small": "Small Enterprise",
    "research": "Research/Educational Institution",
    "medium": "Medium Enterprise",
    "large": "Large Enterprise",
}

ORBIT_LABELS = {
    "LEO": "Low Earth Orbit (LEO)",
    "MEO": "Medium Earth Orbit (MEO)",
    "GEO": "Geostationary Orbit (GEO)",
    "beyond": "Beyond Earth Orbit (Cislunar/Deep Space)",
}

_RANGE_RE = re.compile(r"(\d+)\s*[–-]\s*(\d+)")
_NUMBER_RE = re.compile(r"(\d+)")
_LEADING_NUMBER_RE = re.compile(r"^(\d+)")


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class ScopeVerdict:
    """Reason an operator falls outside the regulation."""

    message: str
    detail: str


@dataclass
class ModuleStatus:
    id: str
    name: str
    description: str
    status: str
    article_count: int
    summary: str


@dataclass
class KeyDate:
    date: str
    description: str


@dataclass
class SpaceActComplianceResult:
    """Applicability of the EU Space Act to one operator."""

    operator_type: str
    operator_type_label: str
    operator_abbreviation: str
    is_eu: bool
    is_third_country: bool
    regime: str
    regime_label: str
    regime_reason: str
    entity_size: str
    entity_size_label: str
    constellation_tier: str | None
    constellation_tier_label: str | None
    orbit: str
    orbit_label: str
    offers_eu_services: bool
    applicable_articles: list[Article]
    total_articles: int
    applicable_count: int
    applicable_percentage: int
    module_statuses: list[ModuleStatus]
    checklist: list[ChecklistItem]
    key_dates: list[KeyDate]
    estimated_authorization_cost: str
    authorization_path: str


# =============================================================================
# Scope and Operator
# =============================================================================


def check_scope(answers: SpaceActAnswers) -> ScopeVerdict | None:
    """
    Check the Art. 2 exclusions in questionnaire order.

    Returns:
        The first exclusion that applies, or None when in scope
    """
    if answers.is_defense_only is True:
        return ScopeVerdict(
            "Your assets are excluded under Art. 2(3)(a)",
            "Space objects used exclusively for defense or national security purposes "
            "are excluded from the EU Space Act scope. However, dual-use assets (serving "
            "both military and commercial purposes) may still be covered. Consider "
            "consulting a space law specialist if your situation involves dual-use "
            "applications.",
        )
    if answers.has_post_launch_assets is False:
        return ScopeVerdict(
            "Pre-existing assets are grandfathered under Art. 2(3)(d)",
            "Space objects launched before January 1, 2030 are excluded from the EU "
            "Space Act scope. However, any new launches after this date will be fully in "
            "scope. If you plan future missions, those will require compliance with the "
            "new regulations.",
        )
    if answers.establishment == "third_country_no_eu":
        return ScopeVerdict(
            "Out of scope for non-EU operators without EU market activity",
            "The EU Space Act applies to third-country operators only if they provide "
            "space services or space-based data within the EU single market. If you have "
            "no current or planned EU market activity, the regulation does not apply to "
            "you. Note that this may change if you expand into the EU market in the "
            "future.",
        )
    return None


def get_operator_mapping(activity_type: str | None) -> OperatorMapping:
    """Operator kind for an activity, defaulting to spacecraft operator."""
    return OPERATOR_MAP.get(activity_type or "spacecraft", OPERATOR_MAP["spacecraft"])


def filter_articles_by_operator(
    articles: list[Article],
    abbreviation: str,
    is_third_country: bool,
) -> list[Article]:
    """Articles applying to an operator kind. Exclusions win over inclusions."""
    applicable = []
    for article in articles:
        if abbreviation in article.excludes:
            continue
        if is_third_country and "TCO" in article.excludes:
            continue
        if (
            "ALL" in article.applies_to
            or abbreviation in article.applies_to
            or (is_third_country and "TCO" in article.applies_to)
        ):
            applicable.append(article)
    return applicable


# =============================================================================
# Article Ranges and Modules
# =============================================================================


def parse_article_range(article_range: str) -> list[tuple[int, int]]:
    """
    Parse a module article range such as ``"Art. 6–16, 32–39"``.

    Args:
        article_range: Comma separated single articles or ranges, with an
            en-dash or hyphen between range bounds

    Returns:
        Inclusive (start, end) pairs
    """
    ranges = []
    cleaned = re.sub(r"Art\.\s*", "", article_range)
    for part in (p.strip() for p in cleaned.split(",")):
        match = _RANGE_RE.search(part)
        if match:
            ranges.append((int(match.group(1)), int(match.group(2))))
            continue
        single = _NUMBER_RE.search(part)
        if single:
            number = int(single.group(1))
            ranges.append((number, number))
    return ranges


def get_article_number(article: Article) -> int:
    """Leading integer of an article number such as ``"10a"``; 0 if none."""
    if isinstance(article.number, int):
        return article.number
    match = _LEADING_NUMBER_RE.match(str(article.number))
    return int(match.group(1)) if match else 0


def _in_ranges(number: int, ranges: list[tuple[int, int]]) -> bool:
    return any(start <= number <= end for start, end in ranges)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


def calculate_module_statuses(
    catalog: SpaceActCatalog,
    applicable_articles: list[Article],
    is_light_regime: bool,
) -> list[ModuleStatus]:
    """Status of each compliance module given the applicable articles."""
    type_map = catalog.compliance_type_map
    statuses = []

    for module in catalog.modules:
        ranges = parse_article_range(module.article_range)
        module_articles = [
            a for a in applicable_articles if _in_ranges(get_article_number(a), ranges)
        ]
        count = len(module_articles)
        types = {type_map.get(a.compliance_type, a.compliance_type) for a in module_articles}
        has_mandatory = bool(types & MANDATORY_TYPES)
        has_simplified = SIMPLIFIED_TYPE in types

        if count == 0:
            status, summary = "not_applicable", "No specific requirements for your operator type."
        elif has_mandatory and is_light_regime and has_simplified:
            status, summary = "simplified", "Simplified requirements apply under the Light Regime."
        elif has_mandatory:
            status = "required"
            summary = f"Full compliance required with {_plural(count, 'article')}."
        elif has_simplified and is_light_regime:
            status, summary = "simplified", "Simplified requirements available."
        else:
            status = "recommended"
            summary = f"{_plural(count, 'relevant article')} for your operation."

        statuses.append(
            ModuleStatus(
                id=module.id,
                name=module.name,
                description=module.description,
                status=status,
                article_count=count,
                summary=summary,
            )
        )

    return statuses


# =============================================================================
# Checklist, Dates and Labels
# =============================================================================


def get_checklist(
    catalog: SpaceActCatalog,
    operator_type: str,
    is_third_country: bool,
) -> list[ChecklistItem]:
    checklists = catalog.compliance_checklist_by_operator_type

    if is_third_country:
        tco = checklists["third_country_operator"]
        return [*tco.pre_registration, *tco.ongoing]
    if operator_type in ("launch_operator", "launch_site_operator"):
        lo = checklists["launch_operator_eu"]
        return [*lo.pre_authorization, *lo.operational]

    sco = checklists["spacecraft_operator_eu"]
    if operator_type == "spacecraft_operator":
        return [*sco.pre_authorization, *sco.ongoing, *sco.end_of_life]
    return [*sco.pre_authorization, *sco.ongoing]


def get_key_dates(is_light_regime: bool) -> list[KeyDate]:
    dates = [
        KeyDate("1 January 2030", "EU Space Act enters into application"),
        KeyDate("31 December 2031", "End of transitional period for existing operators"),
    ]
    if is_light_regime:
        dates.append(
            KeyDate(
                "31 December 2031",
                "EFD deadline for small enterprises & research institutions",
            )
        )
    dates.append(KeyDate("1 January 2035", "Five-year regulatory review"))
    return dates


def get_entity_size_label(size: str | None) -> str:
    if not size:
        return "Not specified"
    return ENTITY_SIZE_LABELS.get(size, "Unknown")


def get_constellation_tier(
    operates_constellation: bool | None,
    size: int | None,
) -> tuple[str | None, str | None]:
    """Constellation tier and label; both None when the size is unknown."""
    if not operates_constellation:
        return "single_satellite", "Single Satellite"
    if size is None:
        return None, None
    if size >= 1000:
        return "mega_constellation", f"Mega Constellation ({size}+ satellites)"
    if size >= 100:
        return "large_constellation", f"Large Constellation ({size} satellites)"
    if size >= 10:
        return "medium_constellation", f"Medium Constellation ({size} satellites)"
    if size >= 2:
        return "small_constellation", f"Small Constellation ({size} satellites)"
    return "single_satellite", "Single Satellite"


def get_orbit_label(orbit: str | None) -> str:
    if not orbit:
        return "Not specified"
    return ORBIT_LABELS.get(orbit, orbit)


def get_authorization_cost(operator_type: str, is_third_country: bool) -> str:
    if is_third_country:
        return "Registration fee (TBD by EUSPA)"
    if operator_type == "spacecraft_operator":
        return "~€100,000 per satellite platform"
    if operator_type in ("launch_operator", "launch_site_operator"):
        return "~€150,000-300,000 per launch system"
    return "€50,000-100,000 estimated"


def get_authorization_path(is_third_country: bool, is_eu: bool) -> str:
    if is_third_country:
        return "EUSPA Registration → Commission Decision"
    if is_eu:
        return "National Authority (NCA) → URSO Registration"
    return "Determine establishment status"


# =============================================================================
# Calculation
# =============================================================================


def calculate_compliance(
    answers: SpaceActAnswers,
    catalog: SpaceActCatalog | None = None,
) -> SpaceActComplianceResult:
    """
    Calculate EU Space Act applicability for an operator.

    Args:
        answers: Questionnaire answers
        catalog: Article catalog, the bundled one when omitted

    Returns:
        SpaceActComplianceResult
    """
    catalog = catalog or eu_space_act_catalog()
    operator = get_operator_mapping(answers.activity_type)

    is_eu = answers.establishment == "eu"
    is_third_country = answers.establishment == "third_country_eu_services"
    is_light = answers.entity_size in LIGHT_REGIME_SIZES

    applicable = filter_articles_by_operator(
        catalog.articles, operator.abbreviation, is_third_country
    )
    total = catalog.metadata.total_articles
    tier, tier_label = get_constellation_tier(
        answers.operates_constellation, answers.constellation_size
    )

    result = SpaceActComplianceResult(
        operator_type=operator.operator_type,
        operator_type_label=(
            f"{operator.label} (Third Country)" if is_third_country else f"{operator.label} (EU)"
        ),
        operator_abbreviation=operator.abbreviation,
        is_eu=is_eu,
        is_third_country=is_third_country,
        regime="light" if is_light else "standard",
        regime_label="Light Regime" if is_light else "Standard (Full Requirements)",
        regime_reason=(
            "Eligible for simplified resilience and delayed EFD (Art. 10)"
            if is_light
            else "Full compliance required across all pillars"
        ),
        entity_size=answers.entity_size or "unknown",
        entity_size_label=get_entity_size_label(answers.entity_size),
        constellation_tier=tier,
        constellation_tier_label=tier_label,
        orbit=answers.primary_orbit or "unknown",
        orbit_label=get_orbit_label(answers.primary_orbit),
        offers_eu_services=bool(answers.offers_eu_services),
        applicable_articles=applicable,
        total_articles=total,
        applicable_count=len(applicable),
        applicable_percentage=round_half_up(len(applicable) / total * 100) if total else 0,
        module_statuses=calculate_module_statuses(catalog, applicable, is_light),
        checklist=get_checklist(catalog, operator.operator_type, is_third_country),
        key_dates=get_key_dates(is_light),
        estimated_authorization_cost=get_authorization_cost(
            operator.operator_type, is_third_country
        ),
        authorization_path=get_authorization_path(is_third_country, is_eu),
    )

    logger.info(
        "eu_space_act_compliance_calculated",
        operator=result.operator_abbreviation,
        regime=result.regime,
        applicable=result.applicable_count,
    )

    return result


def redact_articles(result: SpaceActComplianceResult) -> dict[str, Any]:
    """Serialize a result keeping only the public article fields."""
    data = asdict(result)
    data["applicable_articles"] = [
        article.model_dump(include={"number", "title", "compliance_type", "applies_to", "excludes"})
        for article in result.applicable_articles
    ]
    data["checklist"] = [item.model_dump() for item in result.checklist]
    return data
