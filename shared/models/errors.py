"""
Error Types
===========

Exceptions raised by the compliance engines and mapped to HTTP
responses at the service boundary.

Version: 0.1.0
"""


class ComplianceEngineError(Exception):
    """Base error for the compliance engines."""


class ProfileValidationError(ComplianceEngineError, ValueError):
    """A questionnaire profile is missing a required field or holds an invalid value."""


class CatalogError(ComplianceEngineError, RuntimeError):
    """A static requirement catalog could not be loaded."""


class NotFoundError(ComplianceEngineError, LookupError):
    """A requested catalog record or incident does not exist."""
