"""
Fixed-point integer helpers shared by every kernel.

All on-chain formulas in the ZAMM contracts round down (``floor``) unless they
explicitly add one; these helpers make that rounding visible at call sites.
Python ints are arbitrary precision, so no intermediate product can overflow.
"""

from __future__ import annotations

from ..errors import DivisionByZero


BPS_DENOM = 10_000
WAD = 10**18
MAX_UINT256 = (1 << 256) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_nonneg(name: str, value: int) -> None:
    _require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Compute ``floor(a * b / denominator)``.

    Raises:
        DivisionByZero: if ``denominator == 0``.
        ValueError: if any operand is negative.
    """
    _require_nonneg("a", a)
    _require_nonneg("b", b)
    _require_nonneg("denominator", denominator)
    if denominator == 0:
        raise DivisionByZero(f"mul_div({a}, {b}, 0)")
    return (a * b) // denominator


def mul_div_up(a: int, b: int, denominator: int) -> int:
    """Compute ``ceil(a * b / denominator)``."""
    _require_nonneg("a", a)
    _require_nonneg("b", b)
    _require_nonneg("denominator", denominator)
    if denominator == 0:
        raise DivisionByZero(f"mul_div_up({a}, {b}, 0)")
    return -((-(a * b)) // denominator)


def ceil_div(numerator: int, denominator: int) -> int:
    _require_nonneg("numerator", numerator)
    _require_nonneg("denominator", denominator)
    if denominator == 0:
        raise DivisionByZero(f"ceil_div({numerator}, 0)")
    return (numerator + denominator - 1) // denominator


def integer_sqrt(value: int) -> int:
    """
    Floor square root by Newton's method.

    The first guess is a power of two at or above the true root, so the
    iteration decreases monotonically and stops the first time it fails to
    shrink. Converges in O(log value) steps and is exact: the result ``r``
    satisfies ``r*r <= value < (r+1)*(r+1)``.
    """
    _require_nonneg("value", value)
    if value < 2:
        return value

    x = 1 << ((value.bit_length() + 1) // 2)
    while True:
        y = (x + value // x) // 2
        if y >= x:
            return x
        x = y
