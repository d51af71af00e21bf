"""
Liquidity quoting: deposits, withdrawals and the single-ETH zap.

Pool orientation follows the pool key: ``reserves.reserve0`` belongs to
token0. For the zap helpers the native coin is assumed to be token0, which
holds for every pool the engine derives (the zero address sorts first under
both orderings).
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import NoLiquidity
from ..kernels.fixed_point import BPS_DENOM, _require_int, mul_div
from ..kernels.lp_math import (
    MINIMUM_LIQUIDITY,
    burn_liquidity,
    mint_liquidity,
    mint_liquidity_initial,
    optimal_liquidity,
)
from ..state.pools import ReserveSnapshot
from .swap import DEFAULT_SLIPPAGE_BPS, SINGLE_ETH_SLIPPAGE_BPS, get_amount_out, with_slippage


def optimal_deposit(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B matching ``amount_a`` of A at the current ratio (floor)."""
    _require_int("amount_a", amount_a)
    if amount_a < 0:
        raise ValueError(f"amount_a must be non-negative: {amount_a}")
    if reserve_a <= 0 or reserve_b <= 0:
        raise NoLiquidity(f"pool has no liquidity: ({reserve_a}, {reserve_b})")
    return mul_div(amount_a, reserve_b, reserve_a)


def optimal_amounts(amount0_desired: int, amount1_desired: int, reserves: ReserveSnapshot):
    """The contract's ``addLiquidity`` amount selection for a snapshot."""
    return optimal_liquidity(
        reserve0=reserves.reserve0,
        reserve1=reserves.reserve1,
        amount0_desired=amount0_desired,
        amount1_desired=amount1_desired,
    )


def _supply_of(reserves: ReserveSnapshot, total_supply) -> int:
    supply = reserves.supply if total_supply is None else total_supply
    if supply is None:
        raise ValueError("LP total supply is required (pass total_supply or a snapshot with supply)")
    _require_int("total_supply", supply)
    return supply


def estimate_lp_minted(
    amount0: int,
    amount1: int,
    reserves: ReserveSnapshot,
    total_supply=None,
    *,
    minimum_liquidity: int = MINIMUM_LIQUIDITY,
) -> int:
    """
    LP tokens a deposit would mint.

    An empty pool (zero supply) takes the first-deposit path, which locks
    ``minimum_liquidity`` forever and rejects deposits that cannot cover it.
    """
    supply = _supply_of(reserves, total_supply)
    if supply == 0:
        return mint_liquidity_initial(amount0=amount0, amount1=amount1, minimum_liquidity=minimum_liquidity)
    return mint_liquidity(
        amount0=amount0,
        amount1=amount1,
        reserve0=reserves.reserve0,
        reserve1=reserves.reserve1,
        total_supply=supply,
    )


def estimate_pool_share(lp_amount: int, total_supply: int) -> int:
    """Share of the pool, in bps, that ``lp_amount`` newly minted tokens represent."""
    _require_int("lp_amount", lp_amount)
    _require_int("total_supply", total_supply)
    if lp_amount < 0 or total_supply < 0:
        raise ValueError("lp_amount and total_supply must be non-negative")
    if lp_amount == 0:
        return 0
    return mul_div(lp_amount, BPS_DENOM, total_supply + lp_amount)


def estimate_remove_liquidity(lp_amount: int, reserves: ReserveSnapshot, total_supply=None):
    supply = _supply_of(reserves, total_supply)
    return burn_liquidity(
        lp_amount=lp_amount,
        reserve0=reserves.reserve0,
        reserve1=reserves.reserve1,
        total_supply=supply,
    )


@dataclass(frozen=True)
class LiquidityQuote:
    amount0: int
    amount1: int
    amount0_min: int
    amount1_min: int
    amount0_refund: int
    amount1_refund: int
    lp_minted: int
    pool_share_bps: int


@dataclass(frozen=True)
class RemoveLiquidityQuote:
    lp_amount: int
    amount0: int
    amount1: int
    amount0_min: int
    amount1_min: int


def quote_add_liquidity(
    amount0_desired: int,
    amount1_desired: int,
    reserves: ReserveSnapshot,
    total_supply=None,
    *,
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
    minimum_liquidity: int = MINIMUM_LIQUIDITY,
) -> LiquidityQuote:
    supply = _supply_of(reserves, total_supply)
    if supply == 0:
        # first deposit sets the price; nothing to trim
        amount0, amount1 = amount0_desired, amount1_desired
        refund0 = refund1 = 0
    else:
        opt = optimal_amounts(amount0_desired, amount1_desired, reserves)
        amount0, amount1 = opt.amount0_used, opt.amount1_used
        refund0, refund1 = opt.amount0_refund, opt.amount1_refund

    minted = estimate_lp_minted(amount0, amount1, reserves, supply, minimum_liquidity=minimum_liquidity)
    share_base = supply if supply else minimum_liquidity
    return LiquidityQuote(
        amount0=amount0,
        amount1=amount1,
        amount0_min=with_slippage(amount0, slippage_bps),
        amount1_min=with_slippage(amount1, slippage_bps),
        amount0_refund=refund0,
        amount1_refund=refund1,
        lp_minted=minted,
        pool_share_bps=estimate_pool_share(minted, share_base),
    )


def quote_remove_liquidity(
    lp_amount: int,
    reserves: ReserveSnapshot,
    total_supply=None,
    *,
    slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
) -> RemoveLiquidityQuote:
    out = estimate_remove_liquidity(lp_amount, reserves, total_supply)
    return RemoveLiquidityQuote(
        lp_amount=lp_amount,
        amount0=out.amount0_out,
        amount1=out.amount1_out,
        amount0_min=with_slippage(out.amount0_out, slippage_bps),
        amount1_min=with_slippage(out.amount1_out, slippage_bps),
    )


@dataclass(frozen=True)
class SingleEthLiquidityQuote:
    eth_amount: int
    eth_swapped: int
    eth_deposited: int
    tokens_from_swap: int
    min_tokens_from_swap: int
    amount0_min: int
    amount1_min: int
    lp_minted: int


def quote_single_eth_liquidity(
    eth_amount: int,
    reserves: ReserveSnapshot,
    fee_bps: int,
    total_supply=None,
    *,
    slippage_bps: int = SINGLE_ETH_SLIPPAGE_BPS,
) -> SingleEthLiquidityQuote:
    """
    Quote the single-sided zap: half the ETH buys the token, the rest is
    deposited alongside the bought tokens against post-swap reserves.
    """
    _require_int("eth_amount", eth_amount)
    if eth_amount < 0:
        raise ValueError(f"eth_amount must be non-negative: {eth_amount}")
    supply = _supply_of(reserves, total_supply)

    half = eth_amount // 2
    tokens = get_amount_out(half, reserves.reserve0, reserves.reserve1, fee_bps)
    after_swap = ReserveSnapshot(
        reserve0=reserves.reserve0 + half,
        reserve1=reserves.reserve1 - tokens,
        supply=supply,
    )
    deposit_eth = eth_amount - half
    opt = optimal_amounts(deposit_eth, tokens, after_swap)
    minted = estimate_lp_minted(opt.amount0_used, opt.amount1_used, after_swap, supply) if tokens else 0

    return SingleEthLiquidityQuote(
        eth_amount=eth_amount,
        eth_swapped=half,
        eth_deposited=opt.amount0_used,
        tokens_from_swap=tokens,
        min_tokens_from_swap=with_slippage(tokens, slippage_bps),
        amount0_min=with_slippage(opt.amount0_used, slippage_bps),
        amount1_min=with_slippage(opt.amount1_used, slippage_bps),
        lp_minted=minted,
    )


def max_eth_for_zap(eth_reserve: int, token_reserve: int, slippage_bps: int = SINGLE_ETH_SLIPPAGE_BPS) -> int:
    """
    Largest zap the pool should take: ``eth_reserve * (slippage_bps * 2 // 100) / 10_000``.

    Doubling the tolerance and dividing by 100 gives a whole number of basis
    points of the reserve: 500 bps allows 0.1% of the ETH reserve and 1000 bps
    0.2%. Tolerances under 50 bps allow nothing, and so do empty pools.
    """
    _require_int("eth_reserve", eth_reserve)
    _require_int("token_reserve", token_reserve)
    _require_int("slippage_bps", slippage_bps)
    if eth_reserve <= 0 or token_reserve <= 0:
        return 0
    max_percentage = slippage_bps * 2 // 100
    return eth_reserve * max_percentage // BPS_DENOM
