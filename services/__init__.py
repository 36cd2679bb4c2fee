"""
Services
========

Services of the space compliance platform.

Services:
- compliance_engines: EU Space Act, NIS2, COPUOS/IADC, spectrum and export
  control rule engines, incident tracking and compliance scoring
"""

__all__ = [
    "compliance_engines",
]
