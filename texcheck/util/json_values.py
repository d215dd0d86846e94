from __future__ import annotations

from typing import Any

from texcheck.errors import ConfigurationError


def as_bool(value: Any, what: str) -> bool:
    """JSON true/false only; "false" or 0 are configuration mistakes, not falsy values."""
    if isinstance(value, bool):
        return value
    raise ConfigurationError(f"'{what}' must be true or false, got {value!r}")
