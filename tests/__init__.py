"""
Compliance Engines Test Suite
=============================

Test organization:
- tests/services/compliance_engines/   - Engine and API tests (no external services)

Run tests:
    pytest                          # All tests
    pytest -k incidents             # One engine only
"""
