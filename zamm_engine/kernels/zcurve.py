"""
zCurve bonding-curve cost kernel.

Supply is counted in ticks of ``UNIT_SCALE`` base units. With ``m`` ticks sold,
``K = quad_cap // UNIT_SCALE`` and divisor ``d``:

    m < 2       cost = 0                                  (first tick is free)
    m <= K      cost = floor(S(m) * 1e18 / (6d))          S(m) = m(m-1)(2m-1)/6
    m > K       cost = floor(S(K) * 1e18 / (6d)) + pK * (m - K)
                pK   = floor(K^2 * 1e18 / (6d))

so the price grows quadratically up to the cap and stays flat at ``pK`` after
it. The same integer steps are used by the sale contract's view functions.
"""

from __future__ import annotations

from ..errors import DivisionByZero
from .fixed_point import WAD, _require_int


UNIT_SCALE = 10**12


def _sum_of_squares(m: int) -> int:
    # sum_{i=0..m-1} i^2
    return (m * (m - 1) * (2 * m - 1)) // 6


def cost(n: int, quad_cap: int, divisor: int) -> int:
    """
    Total cost in wei of the first ``n`` base units of supply.

    ``quad_cap`` must already be unpacked (no flag bits).
    """
    _require_int("n", n)
    _require_int("quad_cap", quad_cap)
    _require_int("divisor", divisor)
    if n < 0 or quad_cap < 0:
        raise ValueError("n and quad_cap must be non-negative")
    if divisor <= 0:
        raise DivisionByZero(f"invalid divisor: {divisor}")

    m = n // UNIT_SCALE
    if m < 2:
        return 0

    k = quad_cap // UNIT_SCALE
    denom = 6 * divisor

    if m <= k:
        return (_sum_of_squares(m) * WAD) // denom

    quad_cost = (_sum_of_squares(k) * WAD) // denom
    p_k = (k * k * WAD) // denom
    return quad_cost + p_k * (m - k)
