"""
Compliance Engines Routes
=========================

API route handlers for the Compliance Engines Service.
"""

from services.compliance_engines.routes import (
    copuos,
    cross_regulation,
    eu_space_act,
    export_control,
    incidents,
    nis2,
    scores,
    spectrum,
)


__all__ = [
    "copuos",
    "cross_regulation",
    "eu_space_act",
    "export_control",
    "incidents",
    "nis2",
    "scores",
    "spectrum",
]
