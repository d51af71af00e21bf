"""
Liquidity math kernel (Uniswap-v2 style, as deployed in ZAMM and Cookbook).

Small pure functions with explicit rounding rules:
- ratio-preserving amount selection (floor both ways),
- first-deposit mint ``isqrt(a0*a1) - MINIMUM_LIQUIDITY`` with the lock never minted,
- proportional mint ``min(a0*S/r0, a1*S/r1)``,
- proportional burn ``r*lp/S``.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import BelowMinimumLiquidity, InsufficientLiquidity, NoLiquidity
from .fixed_point import _require_int, integer_sqrt, mul_div


MINIMUM_LIQUIDITY = 1000


@dataclass(frozen=True)
class OptimalLiquidityResult:
    amount0_used: int
    amount1_used: int
    amount0_refund: int
    amount1_refund: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount0_out: int
    amount1_out: int


def optimal_liquidity(
    *,
    reserve0: int,
    reserve1: int,
    amount0_desired: int,
    amount1_desired: int,
) -> OptimalLiquidityResult:
    """
    Mirror the contract's amount selection for ``addLiquidity``.

    For an empty pool (both reserves zero), uses everything and refunds nothing.
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("amount0_desired", amount0_desired),
        ("amount1_desired", amount1_desired),
    ):
        _require_int(name, v)

    if reserve0 < 0 or reserve1 < 0:
        raise ValueError("reserves must be non-negative")
    if amount0_desired < 0 or amount1_desired < 0:
        raise ValueError("desired amounts must be non-negative")

    if reserve0 == 0 and reserve1 == 0:
        return OptimalLiquidityResult(
            amount0_used=amount0_desired,
            amount1_used=amount1_desired,
            amount0_refund=0,
            amount1_refund=0,
        )
    if reserve0 == 0 or reserve1 == 0:
        raise NoLiquidity(f"one-sided pool cannot price a deposit: ({reserve0}, {reserve1})")

    amount1_optimal = mul_div(amount0_desired, reserve1, reserve0)
    if amount1_optimal <= amount1_desired:
        amount0_used = amount0_desired
        amount1_used = amount1_optimal
    else:
        amount0_used = mul_div(amount1_desired, reserve0, reserve1)
        amount1_used = amount1_desired

    if amount0_used > amount0_desired or amount1_used > amount1_desired:
        raise AssertionError("used amounts exceed desired amounts")

    return OptimalLiquidityResult(
        amount0_used=amount0_used,
        amount1_used=amount1_used,
        amount0_refund=amount0_desired - amount0_used,
        amount1_refund=amount1_desired - amount1_used,
    )


def mint_liquidity_initial(*, amount0: int, amount1: int, minimum_liquidity: int = MINIMUM_LIQUIDITY) -> int:
    """
    LP minted to the first depositor (the locked minimum is excluded).

    Raises BelowMinimumLiquidity when ``isqrt(amount0*amount1) <= minimum_liquidity``.
    """
    _require_int("amount0", amount0)
    _require_int("amount1", amount1)
    _require_int("minimum_liquidity", minimum_liquidity)
    if amount0 < 0 or amount1 < 0:
        raise ValueError("initial amounts must be non-negative")
    if minimum_liquidity < 0:
        raise ValueError("minimum_liquidity must be non-negative")

    minted = integer_sqrt(amount0 * amount1) - minimum_liquidity
    if minted <= 0:
        raise BelowMinimumLiquidity(
            f"initial deposit too small: isqrt({amount0}*{amount1}) <= {minimum_liquidity}"
        )
    return minted


def mint_liquidity(*, amount0: int, amount1: int, reserve0: int, reserve1: int, total_supply: int) -> int:
    """LP minted for a deposit into a live pool; floor both sides, keep the smaller."""
    for name, v in (
        ("amount0", amount0),
        ("amount1", amount1),
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
    ):
        _require_int(name, v)

    if amount0 < 0 or amount1 < 0:
        raise ValueError("deposit amounts must be non-negative")
    if total_supply <= 0:
        raise ValueError("total_supply must be positive for a proportional mint")
    if reserve0 <= 0 or reserve1 <= 0:
        raise NoLiquidity(f"cannot mint against empty reserves: ({reserve0}, {reserve1})")

    minted = min(mul_div(amount0, total_supply, reserve0), mul_div(amount1, total_supply, reserve1))
    if minted <= 0:
        raise BelowMinimumLiquidity("deposit too small to mint any LP tokens")
    return minted


def burn_liquidity(*, lp_amount: int, reserve0: int, reserve1: int, total_supply: int) -> BurnLiquidityResult:
    """
    Burn LP tokens for underlying assets (floor rounding).
    """
    for name, v in (
        ("lp_amount", lp_amount),
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_supply", total_supply),
    ):
        _require_int(name, v)

    if lp_amount < 0:
        raise ValueError("lp_amount must be non-negative")
    if reserve0 < 0 or reserve1 < 0:
        raise ValueError("reserves must be non-negative")
    if total_supply == 0:
        raise NoLiquidity("pool has no LP supply")
    if total_supply < 0:
        raise ValueError("total_supply must be non-negative")
    if lp_amount > total_supply:
        raise InsufficientLiquidity(f"cannot burn more than total_supply: {lp_amount} > {total_supply}")

    return BurnLiquidityResult(
        amount0_out=mul_div(lp_amount, reserve0, total_supply),
        amount1_out=mul_div(lp_amount, reserve1, total_supply),
    )
