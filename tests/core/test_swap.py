from __future__ import annotations

from fractions import Fraction

import pytest

from zamm_engine.core.swap import (
    DEFAULT_SLIPPAGE_BPS,
    SLIPPAGE_OPTIONS,
    SlippageDirection,
    estimate_coin_to_coin,
    estimate_price_impact,
    pick_slippage,
    quote_exact_in,
    quote_exact_out,
    to_gross,
    to_net,
    with_slippage,
)
from zamm_engine.errors import InsufficientLiquidity, NoLiquidity
from zamm_engine.state.pools import ReserveSnapshot


POOL = ReserveSnapshot(reserve0=100_000, reserve1=50_000)


def test_with_slippage_directions() -> None:
    assert with_slippage(10_000, 200) == 9_800
    assert with_slippage(10_000, 200, SlippageDirection.MAX_IN) == 10_200
    assert with_slippage(999, 50) == 994
    assert with_slippage(999, 50, SlippageDirection.MAX_IN) == 1_003
    assert with_slippage(999, 0) == 999
    assert with_slippage(999, 10_000) == 0


def test_with_slippage_rejects_bad_tolerance() -> None:
    with pytest.raises(ValueError):
        with_slippage(1, 10_001)
    with pytest.raises(ValueError):
        with_slippage(1, -1)
    with pytest.raises(ValueError):
        with_slippage(-1, 100)


def test_slippage_options_are_valid_tolerances() -> None:
    assert DEFAULT_SLIPPAGE_BPS in {bps for _label, bps in SLIPPAGE_OPTIONS}
    for _label, bps in SLIPPAGE_OPTIONS:
        assert with_slippage(10_000, bps) <= 10_000


def test_quote_exact_in_both_directions() -> None:
    q = quote_exact_in(1_000, POOL, zero_for_one=True, fee_bps=30)
    assert (q.amount_in, q.amount_out, q.minimum_out, q.maximum_in) == (1_000, 493, 483, 1_000)
    assert q.native_value == 0
    assert (q.new_reserve_in, q.new_reserve_out) == (101_000, 49_507)

    flipped = ReserveSnapshot(reserve0=50_000, reserve1=100_000)
    q2 = quote_exact_in(1_000, flipped, zero_for_one=False, fee_bps=30)
    assert q2.amount_out == 493


def test_quote_exact_out_bounds() -> None:
    q = quote_exact_out(493, POOL, zero_for_one=True, fee_bps=30)
    assert not q.exact_in
    assert q.amount_in == 999
    assert (q.minimum_out, q.maximum_in) == (493, 1_018)
    assert q.minimum_out <= q.amount_out and q.maximum_in >= q.amount_in


def test_tax_conversions() -> None:
    assert to_gross(1_000, 10) == 1_002
    assert to_net(1_002, 10) == 1_000
    assert to_net(1_955, 10) == 1_953
    assert to_gross(1_000, 0) == to_net(1_000, 0) == 1_000
    assert to_gross(0, 10) == 0
    for net in (1, 7, 999, 10**18 + 3):
        assert to_net(to_gross(net, 10), 10) >= net
    with pytest.raises(ValueError):
        to_gross(1, 10_000)
    with pytest.raises(ValueError):
        to_net(-1, 10)


def test_native_input_attaches_value() -> None:
    q = quote_exact_in(1_000, POOL, zero_for_one=True, fee_bps=30, native_in=True)
    assert q.native_value == 1_000
    q = quote_exact_out(493, POOL, zero_for_one=True, fee_bps=30, native_in=True)
    assert q.native_value == q.maximum_in == 1_018


def test_taxed_native_input_sends_gross_value() -> None:
    q = quote_exact_in(1_000, POOL, zero_for_one=True, fee_bps=30, tax_bps=10, native_in=True)
    # the pool sees the net amount; the tax rides on top
    assert (q.amount_in, q.amount_out) == (1_000, 493)
    assert (q.native_value, q.tax_bps) == (1_002, 10)

    q = quote_exact_out(493, POOL, zero_for_one=True, fee_bps=30, tax_bps=10, native_in=True)
    assert (q.amount_in, q.maximum_in, q.native_value) == (999, 1_018, 1_020)


def test_taxed_native_output_is_net_of_tax() -> None:
    q = quote_exact_in(1_000, POOL, zero_for_one=False, fee_bps=30, tax_bps=10, native_in=False)
    assert (q.amount_out, q.minimum_out, q.native_value) == (1_953, 1_913, 0)

    q = quote_exact_out(1_000, POOL, zero_for_one=False, fee_bps=30, tax_bps=10, native_in=False)
    # the pool must release the gross amount (1_002) for 1_000 to arrive
    assert (q.amount_out, q.amount_in) == (1_000, 508)
    assert q.new_reserve_out == 100_000 - 1_002


def test_quotes_fail_loudly_on_empty_or_drained_pools() -> None:
    with pytest.raises(NoLiquidity):
        quote_exact_in(1, ReserveSnapshot(0, 0), zero_for_one=True, fee_bps=30)
    with pytest.raises(InsufficientLiquidity):
        quote_exact_out(50_000, POOL, zero_for_one=True, fee_bps=30)


def test_price_impact_concrete() -> None:
    impact = estimate_price_impact(1_000, 100_000, 50_000, 30)
    assert impact.price_before == Fraction(2)
    assert impact.price_after == Fraction(101_000, 49_507)
    assert impact.impact_bps == 200
    assert estimate_price_impact(0, 100_000, 50_000, 30).impact_bps == 0


def test_coin_to_coin_applies_margin_between_legs() -> None:
    source = ReserveSnapshot(reserve0=100_000, reserve1=50_000)  # ETH, coin A
    target = ReserveSnapshot(reserve0=100_000, reserve1=200_000)  # ETH, coin B
    q = estimate_coin_to_coin(1_000, source, target, slippage_bps=200, source_fee_bps=30, target_fee_bps=30)
    # leg 1: 1000 A -> 1955 ETH, margin -> 1915; leg 2: 1915 ETH -> 3746 B
    assert q.native_amount == 1_915
    assert q.amount_out == 3_746
    assert q.min_amount_out == 3_671


def test_coin_to_coin_zero_first_leg() -> None:
    source = ReserveSnapshot(reserve0=10, reserve1=10**18)
    target = ReserveSnapshot(reserve0=100, reserve1=100)
    q = estimate_coin_to_coin(1, source, target)
    assert (q.native_amount, q.amount_out, q.min_amount_out) == (0, 0, 0)


def test_pick_slippage_precedence() -> None:
    assert pick_slippage(1_000, 50) == 50
    assert pick_slippage(1_000, None) == 1_000
    assert pick_slippage(None, None) == DEFAULT_SLIPPAGE_BPS
    with pytest.raises(ValueError):
        pick_slippage(None, 20_000)
