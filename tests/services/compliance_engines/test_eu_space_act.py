"""
EU Space Act Engine Tests
=========================

Tests for scope exclusions, article filtering, module statuses and the
applicability result.

Version: 0.1.0
"""

import pytest

from services.compliance_engines.catalogs.models import (
    Article,
    ModuleDefinition,
    OperatorChecklist,
    SpaceActCatalog,
    SpaceActMetadata,
)
from services.compliance_engines.engines.eu_space_act import (
    calculate_compliance,
    calculate_module_statuses,
    check_scope,
    filter_articles_by_operator,
    get_article_number,
    get_authorization_path,
    get_constellation_tier,
    parse_article_range,
    redact_articles,
)
from services.compliance_engines.models.eu_space_act import SpaceActAnswers


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mini_catalog() -> SpaceActCatalog:
    """Small catalog exercising every module status."""
    return SpaceActCatalog(
        metadata=SpaceActMetadata(regulation="EU Space Act", reference="TEST", total_articles=10),
        compliance_type_map={
            "pre_activity": "mandatory_pre_activity",
            "light_regime": "conditional_simplified",
        },
        modules=[
            ModuleDefinition(id="authorization", name="Authorization", description="", article_range="Art. 6–10"),
            ModuleDefinition(id="debris", name="Debris", description="", article_range="Art. 58"),
            ModuleDefinition(id="future", name="Future", description="", article_range="Art. 200"),
        ],
        articles=[
            Article(number=6, title="Authorization", compliance_type="pre_activity", applies_to=["ALL"]),
            Article(number="7a", title="Light regime", compliance_type="light_regime", applies_to=["SCO"]),
            Article(number=9, title="Launch only", compliance_type="pre_activity", applies_to=["ALL"], excludes=["SCO"]),
            Article(number=58, title="Debris", compliance_type="informational", applies_to=["SCO"]),
        ],
        compliance_checklist_by_operator_type={"spacecraft_operator_eu": OperatorChecklist()},
    )


@pytest.fixture
def eu_operator() -> SpaceActAnswers:
    return SpaceActAnswers(
        activity_type="spacecraft",
        is_defense_only=False,
        has_post_launch_assets=True,
        establishment="eu",
        entity_size="large",
        operates_constellation=False,
        primary_orbit="LEO",
    )


# =============================================================================
# Scope Tests
# =============================================================================


class TestScope:
    """Tests for Art. 2 exclusions."""

    def test_defense_only_excluded(self) -> None:
        verdict = check_scope(SpaceActAnswers(is_defense_only=True))

        assert verdict is not None
        assert "Art. 2(3)(a)" in verdict.message

    def test_pre_2030_assets_grandfathered(self) -> None:
        verdict = check_scope(SpaceActAnswers(is_defense_only=False, has_post_launch_assets=False))

        assert verdict is not None
        assert "Art. 2(3)(d)" in verdict.message

    def test_third_country_without_eu_activity(self) -> None:
        verdict = check_scope(SpaceActAnswers(establishment="third_country_no_eu"))

        assert verdict is not None
        assert verdict.message.startswith("Out of scope")

    def test_defense_checked_first(self) -> None:
        """Exclusions are checked in questionnaire order."""
        verdict = check_scope(
            SpaceActAnswers(is_defense_only=True, establishment="third_country_no_eu")
        )

        assert "Art. 2(3)(a)" in verdict.message

    def test_unanswered_is_in_scope(self, eu_operator: SpaceActAnswers) -> None:
        assert check_scope(SpaceActAnswers()) is None
        assert check_scope(eu_operator) is None


# =============================================================================
# Article Tests
# =============================================================================


class TestArticles:
    """Tests for article ranges and operator filtering."""

    def test_parse_article_range(self) -> None:
        assert parse_article_range("Art. 6–16, 32–39, 105–108") == [(6, 16), (32, 39), (105, 108)]
        assert parse_article_range("Art. 24") == [(24, 24)]
        assert parse_article_range("Art. 26-31, 73") == [(26, 31), (73, 73)]

    def test_article_number(self) -> None:
        assert get_article_number(Article(number="10a", title="", compliance_type="x")) == 10
        assert get_article_number(Article(number="Annex", title="", compliance_type="x")) == 0

    def test_exclusions_win(self, mini_catalog: SpaceActCatalog) -> None:
        numbers = [a.number for a in filter_articles_by_operator(mini_catalog.articles, "SCO", False)]

        assert numbers == [6, "7a", 58]

    def test_other_operator(self, mini_catalog: SpaceActCatalog) -> None:
        numbers = [a.number for a in filter_articles_by_operator(mini_catalog.articles, "LO", False)]

        assert numbers == [6, 9]


# =============================================================================
# Module Status Tests
# =============================================================================


class TestModuleStatuses:
    """Tests for module status derivation."""

    def test_standard_regime(self, mini_catalog: SpaceActCatalog) -> None:
        applicable = filter_articles_by_operator(mini_catalog.articles, "SCO", False)
        statuses = {m.id: m for m in calculate_module_statuses(mini_catalog, applicable, False)}

        assert statuses["authorization"].status == "required"
        assert statuses["authorization"].summary == "Full compliance required with 2 articles."
        assert statuses["debris"].status == "recommended"
        assert statuses["debris"].summary == "1 relevant article for your operation."
        assert statuses["future"].status == "not_applicable"

    def test_light_regime_simplifies(self, mini_catalog: SpaceActCatalog) -> None:
        applicable = filter_articles_by_operator(mini_catalog.articles, "SCO", False)
        statuses = {m.id: m for m in calculate_module_statuses(mini_catalog, applicable, True)}

        assert statuses["authorization"].status == "simplified"


# =============================================================================
# Result Tests
# =============================================================================


class TestCalculateCompliance:
    """Tests for the applicability result."""

    def test_eu_spacecraft_operator(self, eu_operator: SpaceActAnswers) -> None:
        result = calculate_compliance(eu_operator)

        assert result.operator_abbreviation == "SCO"
        assert result.operator_type_label == "Spacecraft Operator (EU)"
        assert result.regime == "standard"
        assert result.total_articles == 119
        assert result.applicable_count == len(result.applicable_articles)
        assert len(result.module_statuses) == 8
        assert len(result.checklist) == 12
        assert len(result.key_dates) == 3
        assert result.authorization_path == "National Authority (NCA) → URSO Registration"
        assert result.constellation_tier == "single_satellite"

    def test_light_regime_adds_efd_date(self, eu_operator: SpaceActAnswers) -> None:
        result = calculate_compliance(eu_operator.model_copy(update={"entity_size": "small"}))

        assert result.regime == "light"
        assert len(result.key_dates) == 4

    def test_third_country_operator(self, eu_operator: SpaceActAnswers) -> None:
        answers = eu_operator.model_copy(update={"establishment": "third_country_eu_services"})

        result = calculate_compliance(answers)

        assert result.is_third_country is True
        assert result.operator_type_label.endswith("(Third Country)")
        assert result.estimated_authorization_cost == "Registration fee (TBD by EUSPA)"
        assert len(result.checklist) == 5

    def test_custom_catalog(self, eu_operator: SpaceActAnswers, mini_catalog: SpaceActCatalog) -> None:
        """A supplied catalog replaces the bundled one."""
        result = calculate_compliance(eu_operator, mini_catalog)

        assert result.applicable_count == 3
        assert result.applicable_percentage == 30

    def test_redaction(self, eu_operator: SpaceActAnswers) -> None:
        data = redact_articles(calculate_compliance(eu_operator))

        assert set(data["applicable_articles"][0]) <= {
            "number",
            "title",
            "compliance_type",
            "applies_to",
            "excludes",
        }


class TestLabels:
    """Tests for tiers and paths."""

    @pytest.mark.parametrize(
        ("size", "tier"),
        [
            (1500, "mega_constellation"),
            (100, "large_constellation"),
            (10, "medium_constellation"),
            (2, "small_constellation"),
            (1, "single_satellite"),
            (None, None),
        ],
    )
    def test_constellation_tier(self, size: int | None, tier: str | None) -> None:
        assert get_constellation_tier(True, size)[0] == tier

    def test_authorization_path_unknown_establishment(self) -> None:
        assert get_authorization_path(False, False) == "Determine establishment status"
