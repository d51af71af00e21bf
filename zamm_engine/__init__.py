"""
zamm_engine: pool routing and integer-exact quoting for the ZAMM/Cookbook AMMs
and zCurve bonding-curve sales.
"""

from .config import DEFAULT_CONFIG, EngineConfig, load_config
from .errors import (
    BelowMinimumLiquidity,
    ConfigError,
    DivisionByZero,
    EngineError,
    InsufficientLiquidity,
    InvalidPair,
    NoLiquidity,
    QuantizationViolation,
    SaleCapExceeded,
    SaleNotOpen,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "load_config",
    "BelowMinimumLiquidity",
    "ConfigError",
    "DivisionByZero",
    "EngineError",
    "InsufficientLiquidity",
    "InvalidPair",
    "NoLiquidity",
    "QuantizationViolation",
    "SaleCapExceeded",
    "SaleNotOpen",
]
