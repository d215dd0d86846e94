from __future__ import annotations


class TexcheckError(Exception):
    """Base class for engine errors."""


class ConfigurationError(TexcheckError):
    """A required policy, exclusion rule set or setting is missing or malformed."""


class PreconditionViolation(TexcheckError):
    """An internal contract was broken by the caller (a programming error)."""
