"""
Swap quoting on top of the constant-product kernel.

All amounts are integer base units. Slippage tolerances are basis points in
``[0, 10_000]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Optional, Tuple

from ..kernels.cpmm_swap import get_amount_in, get_amount_out, swap_exact_in, swap_exact_out
from ..kernels.fixed_point import BPS_DENOM, _require_int
from ..state.pools import ReserveSnapshot


DEFAULT_SLIPPAGE_BPS = 200
SINGLE_ETH_SLIPPAGE_BPS = 500
SLIPPAGE_OPTIONS: Tuple[Tuple[str, int], ...] = (
    ("0.5%", 50),
    ("1%", 100),
    ("2%", 200),
    ("3%", 300),
    ("5%", 500),
)

__all__ = [
    "DEFAULT_SLIPPAGE_BPS",
    "SINGLE_ETH_SLIPPAGE_BPS",
    "SLIPPAGE_OPTIONS",
    "SlippageDirection",
    "with_slippage",
    "get_amount_out",
    "get_amount_in",
    "SwapQuote",
    "to_gross",
    "to_net",
    "quote_exact_in",
    "quote_exact_out",
    "PriceImpact",
    "estimate_price_impact",
    "CoinToCoinQuote",
    "estimate_coin_to_coin",
    "pick_slippage",
]


class SlippageDirection(Enum):
    MIN_OUT = "MIN_OUT"
    MAX_IN = "MAX_IN"


def _check_tolerance(tolerance_bps: int) -> None:
    _require_int("tolerance_bps", tolerance_bps)
    if not (0 <= tolerance_bps <= BPS_DENOM):
        raise ValueError(f"tolerance_bps must be in [0, {BPS_DENOM}]: {tolerance_bps}")


def with_slippage(
    amount: int,
    tolerance_bps: int = DEFAULT_SLIPPAGE_BPS,
    direction: SlippageDirection = SlippageDirection.MIN_OUT,
) -> int:
    """
    Apply a slippage tolerance to a quoted amount.

    MIN_OUT: ``floor(amount * (10000 - tol) / 10000)``, never above ``amount``.
    MAX_IN:  ``amount + floor(amount * tol / 10000)``, never below ``amount``.
    """
    _require_int("amount", amount)
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")
    _check_tolerance(tolerance_bps)

    if direction is SlippageDirection.MIN_OUT:
        return amount * (BPS_DENOM - tolerance_bps) // BPS_DENOM
    if direction is SlippageDirection.MAX_IN:
        return amount + amount * tolerance_bps // BPS_DENOM
    raise ValueError(f"unknown slippage direction: {direction!r}")


@dataclass(frozen=True)
class SwapQuote:
    """
    A single-pool swap quote.

    ``minimum_out`` and ``maximum_in`` are the bounds the transaction should
    enforce. Exact-in quotes pin ``maximum_in`` to ``amount_in``; exact-out
    quotes pin ``minimum_out`` to ``amount_out``.

    ``native_value`` is the wei to attach when the native coin is the input.
    Taxed pools (hooks that skim the native side) quote pool-facing amounts
    net of tax and gross the attached value up with ``to_gross``.
    """

    exact_in: bool
    zero_for_one: bool
    amount_in: int
    amount_out: int
    fee_bps: int
    slippage_bps: int
    minimum_out: int
    maximum_in: int
    new_reserve_in: int
    new_reserve_out: int
    tax_bps: int = 0
    native_value: int = 0


def _check_tax(tax_bps: int) -> None:
    _require_int("tax_bps", tax_bps)
    if not (0 <= tax_bps < BPS_DENOM):
        raise ValueError(f"tax_bps must be in [0, {BPS_DENOM}): {tax_bps}")


def to_gross(net: int, tax_bps: int) -> int:
    """Smallest gross amount that leaves at least ``net`` after the tax (ceiling)."""
    _require_int("net", net)
    _check_tax(tax_bps)
    if net < 0:
        raise ValueError(f"net must be non-negative: {net}")
    basis = BPS_DENOM - tax_bps
    return (net * BPS_DENOM + basis - 1) // basis


def to_net(gross: int, tax_bps: int) -> int:
    """What remains of ``gross`` after the tax (floor)."""
    _require_int("gross", gross)
    _check_tax(tax_bps)
    if gross < 0:
        raise ValueError(f"gross must be non-negative: {gross}")
    return gross * (BPS_DENOM - tax_bps) // BPS_DENOM


def quote_exact_in(
    amount_in: int,
    reserves: ReserveSnapshot,
    *,
    zero_for_one: bool,
    fee_bps: int,
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    tax_bps: int = 0,
    native_in: Optional[bool] = None,
) -> SwapQuote:
    """
    Quote selling exactly ``amount_in``.

    ``native_in`` says which side is the native coin: True for input, False
    for output, None when neither is. The tax only touches the native side.
    """
    _check_tax(tax_bps)
    reserve_in, reserve_out = reserves.oriented(zero_for_one)
    res = swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, fee_bps=fee_bps)
    amount_out = res.amount_out
    if native_in is False:
        amount_out = to_net(amount_out, tax_bps)
    return SwapQuote(
        exact_in=True,
        zero_for_one=zero_for_one,
        amount_in=res.amount_in,
        amount_out=amount_out,
        fee_bps=fee_bps,
        slippage_bps=slippage_bps,
        minimum_out=with_slippage(amount_out, slippage_bps, SlippageDirection.MIN_OUT),
        maximum_in=res.amount_in,
        new_reserve_in=res.new_reserve_in,
        new_reserve_out=res.new_reserve_out,
        tax_bps=tax_bps,
        native_value=to_gross(res.amount_in, tax_bps) if native_in else 0,
    )


def quote_exact_out(
    amount_out: int,
    reserves: ReserveSnapshot,
    *,
    zero_for_one: bool,
    fee_bps: int,
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    tax_bps: int = 0,
    native_in: Optional[bool] = None,
) -> SwapQuote:
    """Quote buying exactly ``amount_out`` (net of tax when the output is native)."""
    _check_tax(tax_bps)
    reserve_in, reserve_out = reserves.oriented(zero_for_one)
    pool_out = to_gross(amount_out, tax_bps) if native_in is False else amount_out
    res = swap_exact_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_out=pool_out, fee_bps=fee_bps)
    maximum_in = with_slippage(res.amount_in, slippage_bps, SlippageDirection.MAX_IN)
    return SwapQuote(
        exact_in=False,
        zero_for_one=zero_for_one,
        amount_in=res.amount_in,
        amount_out=amount_out,
        fee_bps=fee_bps,
        slippage_bps=slippage_bps,
        minimum_out=amount_out,
        maximum_in=maximum_in,
        new_reserve_in=res.new_reserve_in,
        new_reserve_out=res.new_reserve_out,
        tax_bps=tax_bps,
        native_value=to_gross(maximum_in, tax_bps) if native_in else 0,
    )


@dataclass(frozen=True)
class PriceImpact:
    """
    Price of the output asset, in input units, before and after a trade.

    ``impact_bps`` is the relative move, floored to whole basis points.
    """

    price_before: Fraction
    price_after: Fraction
    impact_bps: int
    new_reserve_in: int
    new_reserve_out: int


def estimate_price_impact(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_bps: int,
) -> PriceImpact:
    """
    Estimate how much an exact-in trade moves the pool price.

    Buying the output asset never lowers its price, so ``impact_bps >= 0``.
    """
    res = swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, fee_bps=fee_bps)
    price_before = Fraction(reserve_in, reserve_out)
    price_after = Fraction(res.new_reserve_in, res.new_reserve_out)
    impact = (price_after - price_before) / price_before
    return PriceImpact(
        price_before=price_before,
        price_after=price_after,
        impact_bps=int(impact * BPS_DENOM),
        new_reserve_in=res.new_reserve_in,
        new_reserve_out=res.new_reserve_out,
    )


@dataclass(frozen=True)
class CoinToCoinQuote:
    native_amount: int
    amount_out: int
    min_amount_out: int


def estimate_coin_to_coin(
    amount_in: int,
    source_reserves: ReserveSnapshot,
    target_reserves: ReserveSnapshot,
    *,
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    source_fee_bps: int = 100,
    target_fee_bps: int = 100,
    source_native_is_token0: bool = True,
    target_native_is_token0: bool = True,
) -> CoinToCoinQuote:
    """
    Two-leg quote ``coin -> native -> coin``.

    The native amount carried into the second leg is first reduced by the
    slippage tolerance, so the second leg is quoted against an amount the
    first leg is guaranteed to deliver.
    """
    # coin -> native: the coin side is the input
    native_out = get_amount_out(
        amount_in,
        *source_reserves.oriented(not source_native_is_token0),
        source_fee_bps,
    )
    if native_out == 0:
        return CoinToCoinQuote(native_amount=0, amount_out=0, min_amount_out=0)

    safe_native = with_slippage(native_out, slippage_bps)
    amount_out = get_amount_out(
        safe_native,
        *target_reserves.oriented(target_native_is_token0),
        target_fee_bps,
    )
    return CoinToCoinQuote(
        native_amount=safe_native,
        amount_out=amount_out,
        min_amount_out=with_slippage(amount_out, slippage_bps),
    )


def pick_slippage(resolved_bps: Optional[int], requested_bps: Optional[int]) -> int:
    """User request wins, else the resolved pool's tolerance, else the default."""
    if requested_bps is not None:
        _check_tolerance(requested_bps)
        return requested_bps
    if resolved_bps is not None:
        return resolved_bps
    return DEFAULT_SLIPPAGE_BPS
