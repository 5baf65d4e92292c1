"""Exceptions raised at the package boundary."""

from __future__ import annotations


class PIIShieldError(Exception):
    """Base class for pii-shield errors."""


class UnknownStrategyError(PIIShieldError, ValueError):
    """Raised when a redaction strategy name is not registered."""

    def __init__(self, name: str, known: list[str]) -> None:
        self.name = name
        self.known = known
        super().__init__(
            f"unknown redaction strategy {name!r}; expected one of: {', '.join(known)}"
        )


class ConfigError(PIIShieldError, ValueError):
    """Raised for invalid configuration values."""


class RecognizerUnavailable(PIIShieldError):
    """The statistical recognizer could not be initialized."""
