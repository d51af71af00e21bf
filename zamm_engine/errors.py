"""Exception types for the quoting engine.

Every engine failure derives from ``EngineError`` (itself a ``ValueError``) so
callers can either catch the specific kind or treat any of them as "do not
submit a transaction built from this result".
"""

from __future__ import annotations


class EngineError(ValueError):
    """Base class for all engine-level failures."""


class InvalidPair(EngineError):
    """Raised for a degenerate or unsupported asset pair."""


class NoLiquidity(EngineError):
    """Raised when a pool has zero reserves (or zero LP supply where one is needed)."""


class InsufficientLiquidity(EngineError):
    """Raised when a requested output meets or exceeds the available reserve."""


class DivisionByZero(EngineError):
    """Raised when an integer formula would divide by zero."""


class BelowMinimumLiquidity(EngineError):
    """Raised when a deposit is too small to mint any LP tokens."""


class SaleNotOpen(EngineError):
    """Raised when a bonding-curve sale no longer accepts trades."""

    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__(f"sale is not open (status={status})")


class SaleCapExceeded(EngineError):
    """Raised when a purchase would sell past the sale cap."""


class QuantizationViolation(EngineError):
    """Raised when a curve parameter is not a multiple of UNIT_SCALE."""

    def __init__(self, name: str, value: int, unit: int) -> None:
        self.name = name
        self.value = value
        self.unit = unit
        super().__init__(f"{name}={value} is not a multiple of {unit}")


class ConfigError(EngineError):
    """Raised when an engine configuration file or mapping is invalid."""
