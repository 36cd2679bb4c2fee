"""
Catalog Loader
==============

Reads the bundled JSON requirement catalogs once per process and
validates them into frozen pydantic models.

The directory can be overridden with ``CATALOG_DATA_DIR``.

Version: 0.1.0
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from services.compliance_engines.catalogs.models import (
    CopuosGuideline,
    CrossReference,
    EnisaControl,
    ExportControlCatalog,
    NIS2Requirement,
    SpaceActCatalog,
    SpectrumCatalog,
)
from shared.config import settings
from shared.logging import get_logger
from shared.models.errors import CatalogError


logger = get_logger(__name__)

BUNDLED_DATA_DIR = Path(__file__).parent / "data"

CATALOG_FILES = {
    "nis2": "nis2_requirements.json",
    "cross_references": "cross_references.json",
    "enisa": "enisa_space_controls.json",
    "copuos": "copuos_guidelines.json",
    "spectrum": "spectrum_itu.json",
    "export_control": "export_control.json",
    "eu_space_act": "eu_space_act.json",
}


def data_dir() -> Path:
    """Directory the catalogs are read from."""
    return settings.catalogs.path or BUNDLED_DATA_DIR


def _read_json(filename: str) -> Any:
    path = data_dir() / filename
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog file is not valid JSON: {path}: {e}") from e


def _load(filename: str, model: Any) -> Any:
    raw = _read_json(filename)
    try:
        parsed = TypeAdapter(model).validate_python(raw)
    except ValidationError as e:
        raise CatalogError(f"Catalog file failed validation: {filename}: {e}") from e

    logger.debug(
        "catalog_loaded",
        catalog=filename,
        records=len(parsed) if isinstance(parsed, list) else None,
    )
    return parsed


# =============================================================================
# Cached Accessors
# =============================================================================


@lru_cache
def nis2_requirements() -> tuple[NIS2Requirement, ...]:
    """All NIS2 requirements for the space sector."""
    return tuple(_load(CATALOG_FILES["nis2"], list[NIS2Requirement]))


@lru_cache
def cross_references() -> tuple[CrossReference, ...]:
    """Cross-regulation article relationships."""
    return tuple(_load(CATALOG_FILES["cross_references"], list[CrossReference]))


@lru_cache
def enisa_controls() -> tuple[EnisaControl, ...]:
    """ENISA space threat landscape controls."""
    return tuple(_load(CATALOG_FILES["enisa"], list[EnisaControl]))


@lru_cache
def copuos_guidelines() -> tuple[CopuosGuideline, ...]:
    """COPUOS LTS, IADC and ISO 24113 guidelines."""
    return tuple(_load(CATALOG_FILES["copuos"], list[CopuosGuideline]))


@lru_cache
def spectrum_catalog() -> SpectrumCatalog:
    """Frequency bands, ITU phases, licenses, WRC decisions and requirements."""
    return _load(CATALOG_FILES["spectrum"], SpectrumCatalog)


@lru_cache
def export_control_catalog() -> ExportControlCatalog:
    """USML/CCL categories, ITAR/EAR requirements and screening lists."""
    return _load(CATALOG_FILES["export_control"], ExportControlCatalog)


@lru_cache
def eu_space_act_catalog() -> SpaceActCatalog:
    """EU Space Act articles, modules and operator checklists."""
    return _load(CATALOG_FILES["eu_space_act"], SpaceActCatalog)


ALL_LOADERS = (
    nis2_requirements,
    cross_references,
    enisa_controls,
    copuos_guidelines,
    spectrum_catalog,
    export_control_catalog,
    eu_space_act_catalog,
)


def catalog_counts() -> dict[str, int]:
    """Record count of every catalog, loading any that are not cached yet."""
    return {
        "nis2": len(nis2_requirements()),
        "cross_references": len(cross_references()),
        "enisa": len(enisa_controls()),
        "copuos": len(copuos_guidelines()),
        "spectrum": len(spectrum_catalog().requirements),
        "export_control": len(export_control_catalog().requirements),
        "eu_space_act": len(eu_space_act_catalog().articles),
    }


def warm_catalogs() -> dict[str, int]:
    """
    Load every catalog so malformed data fails at startup.

    Returns:
        Record counts keyed by catalog name
    """
    counts = catalog_counts()
    logger.info("catalogs_loaded", **counts)
    return counts


def clear_catalog_cache() -> None:
    """Drop cached catalogs so the next access re-reads from disk."""
    for loader in ALL_LOADERS:
        loader.cache_clear()
