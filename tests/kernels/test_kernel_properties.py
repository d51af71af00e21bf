"""Property tests for the integer kernels (skipped without hypothesis)."""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import assume, given, settings

from zamm_engine.kernels.cpmm_swap import get_amount_in, get_amount_out
from zamm_engine.kernels.fixed_point import integer_sqrt
from zamm_engine.kernels.lp_math import burn_liquidity, mint_liquidity

RESERVE = st.integers(min_value=1, max_value=10**30)
FEE = st.integers(min_value=0, max_value=9_999)


@settings(max_examples=300, deadline=None)
@given(st.integers(min_value=0, max_value=(1 << 256) - 1))
def test_integer_sqrt_floor_property(value: int) -> None:
    r = integer_sqrt(value)
    assert r * r <= value < (r + 1) * (r + 1)


@settings(max_examples=300, deadline=None)
@given(st.integers(min_value=0, max_value=10**36), RESERVE, RESERVE, FEE)
def test_amount_out_is_strictly_below_reserve_out(amount_in: int, r_in: int, r_out: int, fee: int) -> None:
    assert get_amount_out(amount_in, r_in, r_out, fee) < r_out


@settings(max_examples=300, deadline=None)
@given(RESERVE, RESERVE, FEE, st.data())
def test_exact_out_quote_never_under_delivers(r_in: int, r_out: int, fee: int, data) -> None:
    assume(r_out >= 2)
    amount_out = data.draw(st.integers(min_value=1, max_value=r_out - 1))
    amount_in = get_amount_in(amount_out, r_in, r_out, fee)
    assert get_amount_out(amount_in, r_in, r_out, fee) >= amount_out


@settings(max_examples=300, deadline=None)
@given(st.integers(min_value=1, max_value=10**30), RESERVE, RESERVE, FEE)
def test_exact_out_quote_is_at_most_one_above_the_input_that_produced_it(
    amount_in: int, r_in: int, r_out: int, fee: int
) -> None:
    amount_out = get_amount_out(amount_in, r_in, r_out, fee)
    assume(amount_out > 0)
    assert get_amount_in(amount_out, r_in, r_out, fee) <= amount_in + 1


@settings(max_examples=200, deadline=None)
@given(RESERVE, RESERVE, st.integers(min_value=1, max_value=10**30), st.data())
def test_mint_then_burn_never_returns_more_than_deposited(r0: int, r1: int, supply: int, data) -> None:
    a0 = data.draw(st.integers(min_value=0, max_value=10**30))
    a1 = data.draw(st.integers(min_value=0, max_value=10**30))
    lp = (a0 * supply) // r0
    lp = min(lp, (a1 * supply) // r1)
    assume(lp > 0)
    assert mint_liquidity(amount0=a0, amount1=a1, reserve0=r0, reserve1=r1, total_supply=supply) == lp

    out = burn_liquidity(lp_amount=lp, reserve0=r0 + a0, reserve1=r1 + a1, total_supply=supply + lp)
    assert out.amount0_out <= a0
    assert out.amount1_out <= a1
