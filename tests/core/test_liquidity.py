from __future__ import annotations

import pytest

from zamm_engine.core.liquidity import (
    estimate_lp_minted,
    estimate_pool_share,
    estimate_remove_liquidity,
    max_eth_for_zap,
    optimal_amounts,
    optimal_deposit,
    quote_add_liquidity,
    quote_remove_liquidity,
    quote_single_eth_liquidity,
)
from zamm_engine.errors import BelowMinimumLiquidity, InsufficientLiquidity, NoLiquidity
from zamm_engine.state.pools import ReserveSnapshot


EMPTY = ReserveSnapshot(reserve0=0, reserve1=0, supply=0)
LIVE = ReserveSnapshot(reserve0=1_000, reserve1=2_000, supply=500)


def test_optimal_deposit() -> None:
    assert optimal_deposit(100, 1_000, 2_000) == 200
    assert optimal_deposit(1, 3, 2) == 0
    with pytest.raises(NoLiquidity):
        optimal_deposit(100, 0, 0)


def test_optimal_amounts_uses_snapshot_reserves() -> None:
    res = optimal_amounts(100, 150, LIVE)
    assert (res.amount0_used, res.amount1_used) == (75, 150)


def test_first_deposit_of_1000_each_is_rejected() -> None:
    with pytest.raises(BelowMinimumLiquidity):
        estimate_lp_minted(1_000, 1_000, EMPTY)


def test_estimate_lp_minted_first_and_live() -> None:
    assert estimate_lp_minted(4_000, 1_000, EMPTY) == 1_000
    assert estimate_lp_minted(100, 300, LIVE) == 50
    # explicit supply wins over the snapshot's
    assert estimate_lp_minted(100, 300, LIVE, 1_000) == 100


def test_supply_is_required() -> None:
    with pytest.raises(ValueError):
        estimate_lp_minted(1, 1, ReserveSnapshot(reserve0=1, reserve1=1))


def test_estimate_pool_share() -> None:
    assert estimate_pool_share(50, 500) == 909
    assert estimate_pool_share(0, 500) == 0
    assert estimate_pool_share(500, 0) == 10_000


def test_estimate_remove_liquidity() -> None:
    out = estimate_remove_liquidity(250, LIVE)
    assert (out.amount0_out, out.amount1_out) == (500, 1_000)
    with pytest.raises(InsufficientLiquidity):
        estimate_remove_liquidity(501, LIVE)
    with pytest.raises(NoLiquidity):
        estimate_remove_liquidity(1, EMPTY)


def test_quote_add_liquidity_live_pool() -> None:
    q = quote_add_liquidity(100, 300, LIVE, slippage_bps=200)
    assert (q.amount0, q.amount1) == (100, 200)
    assert (q.amount0_min, q.amount1_min) == (98, 196)
    assert (q.amount0_refund, q.amount1_refund) == (0, 100)
    assert q.lp_minted == 50
    assert q.pool_share_bps == 909


def test_quote_add_liquidity_first_deposit() -> None:
    q = quote_add_liquidity(4_000, 1_000, EMPTY)
    assert (q.amount0, q.amount1, q.amount0_refund, q.amount1_refund) == (4_000, 1_000, 0, 0)
    assert q.lp_minted == 1_000
    # the locked minimum is the rest of the pool
    assert q.pool_share_bps == 5_000


def test_quote_remove_liquidity() -> None:
    q = quote_remove_liquidity(250, LIVE, slippage_bps=100)
    assert (q.amount0, q.amount1, q.amount0_min, q.amount1_min) == (500, 1_000, 495, 990)


def test_single_eth_zap_swaps_half_then_deposits() -> None:
    pool = ReserveSnapshot(reserve0=100_000, reserve1=50_000, supply=70_000)
    q = quote_single_eth_liquidity(2_000, pool, 30)
    assert q.eth_swapped == 1_000
    assert q.tokens_from_swap == 493
    # deposit priced against post-swap reserves (101000, 49507)
    assert q.eth_deposited == 1_000
    assert q.lp_minted == 692
    assert q.min_tokens_from_swap == 468


def test_single_eth_zap_into_empty_pool_fails() -> None:
    with pytest.raises(NoLiquidity):
        quote_single_eth_liquidity(2_000, EMPTY, 30)


def test_max_eth_for_zap() -> None:
    assert max_eth_for_zap(10**20, 10**24, 500) == 10**17
    assert max_eth_for_zap(10**20, 10**24, 1_000) == 2 * 10**17
    # 500 bps of tolerance caps the zap at 0.1% of the reserve
    assert max_eth_for_zap(10**20, 10**24, 500) * 1_000 == 10**20
    assert max_eth_for_zap(10**20, 10**24, 49) == 0
    assert max_eth_for_zap(0, 10**24) == 0
    assert max_eth_for_zap(10**20, 0) == 0
