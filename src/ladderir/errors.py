"""Exception hierarchy for ladderir.

Parsing and validation are lenient and report problems as values; these
exceptions are raised only by the strict entry points.
"""


class LadderError(Exception):
    """Base exception for all ladderir errors."""


class AddressError(LadderError, ValueError):
    """Raised when a device or target address string cannot be parsed."""


class ConfigError(LadderError):
    """Raised when a caller-supplied configuration table is invalid."""
