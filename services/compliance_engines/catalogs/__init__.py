"""
Requirement Catalogs
====================

Static, read-only regulatory reference data and its loader.
"""

from services.compliance_engines.catalogs.loader import (
    catalog_counts,
    clear_catalog_cache,
    copuos_guidelines,
    cross_references,
    enisa_controls,
    eu_space_act_catalog,
    export_control_catalog,
    nis2_requirements,
    spectrum_catalog,
    warm_catalogs,
)


__all__ = [
    "catalog_counts",
    "clear_catalog_cache",
    "copuos_guidelines",
    "cross_references",
    "enisa_controls",
    "eu_space_act_catalog",
    "export_control_catalog",
    "nis2_requirements",
    "spectrum_catalog",
    "warm_catalogs",
]
