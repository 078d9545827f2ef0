"""
Custom exception hierarchy for currency operations.

Each exception type maps to one category of failure so callers can branch
on the class or on the machine-readable ``code``. Checked arithmetic does
NOT raise; it returns ``None``. These are for everything else.
"""

from __future__ import annotations


class CurrencyError(Exception):
    """Base exception for all currency failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class CurrencyOverflowError(CurrencyError):
    """A strict computation exceeded the upper integer bound."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("OVERFLOW", message, details)


class CurrencyUnderflowError(CurrencyError):
    """A strict computation fell below the lower integer bound."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("UNDERFLOW", message, details)


class DivisionByZeroError(CurrencyError):
    """Division by zero. Even saturating division reports this."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("DIVISION_BY_ZERO", message, details)


class FractionalKeysError(CurrencyError):
    """An approximate amount carried a non-integer key count."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("FRACTIONAL_KEYS", message, details)


class OutOfRangeError(CurrencyError):
    """A converted or rounded value does not fit the integer type."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("OUT_OF_RANGE", message, details)


class MalformedTextError(CurrencyError):
    """Text could not be parsed as an amount."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("MALFORMED_TEXT", message, details)


class MalformedRecordError(CurrencyError):
    """A structured record had the wrong shape or field types."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("MALFORMED_RECORD", message, details)


class InvalidRateError(CurrencyError):
    """An exchange rate was zero or negative."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_RATE", message, details)
