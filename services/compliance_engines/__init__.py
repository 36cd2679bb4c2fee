"""
Compliance Engines Service
==========================

Rule and scoring engines for space-industry regulatory compliance.

Engines:
- eu_space_act: EU Space Act applicability and module statuses
- nis2: NIS2 Directive classification and requirements
- cross_regulation: NIS2 / EU Space Act / ISO 27001 overlap
- copuos: COPUOS, IADC and ISO 24113 debris guidelines
- spectrum: ITU and national spectrum licensing
- export_control: ITAR and EAR
- incidents: Incident classification and NCA notification deadlines
- compliance_score: EU Space Act module-weighted score

Port: 8010
"""
