"""
Constant-product swap kernel (ZAMM semantics).

The ZAMM contracts charge the fee as a multiplier on the input side:

    amount_in_with_fee = amount_in * (10_000 - fee_bps)
    amount_out = floor(amount_in_with_fee * reserve_out / (reserve_in * 10_000 + amount_in_with_fee))

and the inverse used for exact-out quotes adds one after the floor division so
the quoted input is never short:

    amount_in = floor(reserve_in * amount_out * 10_000 / ((reserve_out - amount_out) * (10_000 - fee_bps))) + 1

Unlike a settlement kernel this one never mutates reserves; it returns the
projected post-trade reserves so callers can estimate price impact.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InsufficientLiquidity, NoLiquidity
from .fixed_point import BPS_DENOM, _require_int, mul_div


@dataclass(frozen=True)
class SwapExactInResult:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int


@dataclass(frozen=True)
class SwapExactOutResult:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int


def _check_inputs(reserve_in: int, reserve_out: int, amount: int, fee_bps: int, amount_name: str) -> None:
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        (amount_name, amount),
        ("fee_bps", fee_bps),
    ):
        _require_int(name, v)

    if reserve_in < 0 or reserve_out < 0:
        raise ValueError(f"reserves must be non-negative: ({reserve_in}, {reserve_out})")
    if amount < 0:
        raise ValueError(f"{amount_name} must be non-negative: {amount}")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    Exact-in quote.

    Returns 0 for a zero input. Raises NoLiquidity if either reserve is zero.
    The result is always strictly below ``reserve_out``.
    """
    _check_inputs(reserve_in, reserve_out, amount_in, fee_bps, "amount_in")
    if reserve_in == 0 or reserve_out == 0:
        raise NoLiquidity(f"pool has no liquidity: ({reserve_in}, {reserve_out})")
    if amount_in == 0:
        return 0

    amount_in_with_fee = amount_in * (BPS_DENOM - fee_bps)
    return mul_div(amount_in_with_fee, reserve_out, reserve_in * BPS_DENOM + amount_in_with_fee)


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int) -> int:
    """
    Exact-out quote (rounded up by one after the floor division).

    Returns 0 for a zero output. Raises NoLiquidity for an empty pool and
    InsufficientLiquidity when ``amount_out >= reserve_out``.
    """
    _check_inputs(reserve_in, reserve_out, amount_out, fee_bps, "amount_out")
    if reserve_in == 0 or reserve_out == 0:
        raise NoLiquidity(f"pool has no liquidity: ({reserve_in}, {reserve_out})")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"amount_out ({amount_out}) >= reserve_out ({reserve_out})"
        )
    if amount_out == 0:
        return 0

    # A 100% fee makes the denominator zero; mul_div reports it as DivisionByZero.
    return mul_div(reserve_in * amount_out, BPS_DENOM, (reserve_out - amount_out) * (BPS_DENOM - fee_bps)) + 1


def swap_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int, fee_bps: int) -> SwapExactInResult:
    """Exact-in quote plus projected post-trade reserves (whole input stays in the pool)."""
    amount_out = get_amount_out(amount_in, reserve_in, reserve_out, fee_bps)
    return SwapExactInResult(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=reserve_in + amount_in,
        new_reserve_out=reserve_out - amount_out,
    )


def swap_exact_out(*, reserve_in: int, reserve_out: int, amount_out: int, fee_bps: int) -> SwapExactOutResult:
    """Exact-out quote plus projected post-trade reserves."""
    amount_in = get_amount_in(amount_out, reserve_in, reserve_out, fee_bps)
    return SwapExactOutResult(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=reserve_in + amount_in,
        new_reserve_out=reserve_out - amount_out,
    )
