"""
Compliance Engines
==================

One module per regulatory framework. Engines are pure functions over
questionnaire answers and requirement statuses, except incidents which
keeps an in-memory registry.

Version: 0.1.0
"""

from services.compliance_engines.engines import (
    compliance_score,
    copuos,
    cross_regulation,
    eu_space_act,
    export_control,
    incidents,
    nis2,
    scoring,
    spectrum,
)


__all__ = [
    "compliance_score",
    "copuos",
    "cross_regulation",
    "eu_space_act",
    "export_control",
    "incidents",
    "nis2",
    "scoring",
    "spectrum",
]
