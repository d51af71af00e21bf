from __future__ import annotations

import pytest

from zamm_engine.core.bonding_curve import (
    FLAG_BITS,
    CurveFlag,
    coins_for_eth,
    coins_to_burn_for_eth,
    finalized_pool_key,
    has_flag,
    pack_cap_with_flags,
    price_at_supply,
    proceeds_for_amount,
    quantize_to_unit_scale,
    quantize_up,
    require_open,
    require_quantized,
    sale_status,
    sell_refund,
    unpack_cap_with_flags,
)
from zamm_engine.core.pool_keys import derive_pool_key
from zamm_engine.errors import QuantizationViolation, SaleCapExceeded, SaleNotOpen
from zamm_engine.kernels.zcurve import UNIT_SCALE
from zamm_engine.state.assets import ETH, ZERO_ADDRESS, erc6909
from zamm_engine.state.pools import AmmVariant
from zamm_engine.state.sales import CurveState, SaleStatus


COOKBOOK = "0x1111111111111111111111111111111111111111"


def _state(**overrides) -> CurveState:
    params = dict(
        sale_cap=1_000 * UNIT_SCALE,
        lp_supply=0,
        eth_target=0,
        divisor=1,
        quad_cap=500 * UNIT_SCALE,
        fee_or_hook=0,
        duration=0,
    )
    params.update(overrides)
    return CurveState(**params)


# -- quantization


def test_quantize_floors_and_is_idempotent() -> None:
    x = 5 * UNIT_SCALE + 123
    assert quantize_to_unit_scale(x) == 5 * UNIT_SCALE
    assert quantize_to_unit_scale(quantize_to_unit_scale(x)) == quantize_to_unit_scale(x)
    assert quantize_to_unit_scale(UNIT_SCALE - 1) == 0
    assert quantize_up(x) == 6 * UNIT_SCALE
    assert quantize_up(5 * UNIT_SCALE) == 5 * UNIT_SCALE


def test_require_quantized() -> None:
    assert require_quantized("amount", 3 * UNIT_SCALE) == 3 * UNIT_SCALE
    with pytest.raises(QuantizationViolation):
        require_quantized("amount", 3 * UNIT_SCALE + 1)


# -- packing


@pytest.mark.parametrize("flags", [0, 1, 0x7F, 0xFF])
def test_pack_round_trips(flags: int) -> None:
    cap = 800_000_000 * 10**18
    packed = pack_cap_with_flags(cap, flags)
    assert unpack_cap_with_flags(packed) == (cap, flags)


def test_pack_layout() -> None:
    assert FLAG_BITS == 8
    assert pack_cap_with_flags(5) == 5 << 8
    assert pack_cap_with_flags(5, 0xFF) == 1_535
    packed = pack_cap_with_flags(5, CurveFlag.LP_UNLOCK)
    assert has_flag(packed, CurveFlag.LP_UNLOCK)
    assert not has_flag(pack_cap_with_flags(5), CurveFlag.LP_UNLOCK)


def test_pack_rejects_out_of_range() -> None:
    with pytest.raises(ValueError):
        pack_cap_with_flags(5, 256)
    with pytest.raises(ValueError):
        pack_cap_with_flags(-1, 0)
    with pytest.raises(ValueError):
        pack_cap_with_flags(1 << 250, 0)
    with pytest.raises(ValueError):
        unpack_cap_with_flags(-1)


# -- pricing


def test_proceeds_for_amount_from_zero() -> None:
    # S(10) = 285 ticks^2, d = 1
    assert proceeds_for_amount(_state(), 10 * UNIT_SCALE) == 285 * 10**18 // 6
    assert proceeds_for_amount(_state(), 0) == 0


def test_proceeds_default_to_net_sold() -> None:
    state = _state(net_sold=10 * UNIT_SCALE)
    assert proceeds_for_amount(state, 5 * UNIT_SCALE) == proceeds_for_amount(state, 5 * UNIT_SCALE, 10 * UNIT_SCALE)


def test_proceeds_straddling_the_quad_cap_adds_both_segments() -> None:
    state = _state()
    whole = proceeds_for_amount(state, 20 * UNIT_SCALE, 490 * UNIT_SCALE)
    left = proceeds_for_amount(state, 10 * UNIT_SCALE, 490 * UNIT_SCALE)
    right = proceeds_for_amount(state, 10 * UNIT_SCALE, 500 * UNIT_SCALE)
    assert whole == left + right


def test_price_is_non_decreasing_and_flat_after_cap() -> None:
    state = _state()
    prices = [price_at_supply(state, n * UNIT_SCALE) for n in (0, 100, 499, 500, 600, 900)]
    assert prices == sorted(prices)
    assert price_at_supply(state, 600 * UNIT_SCALE) == price_at_supply(state, 900 * UNIT_SCALE)


def test_buying_past_the_cap() -> None:
    state = _state(net_sold=990 * UNIT_SCALE)
    proceeds_for_amount(state, 10 * UNIT_SCALE)
    with pytest.raises(SaleCapExceeded):
        proceeds_for_amount(state, 11 * UNIT_SCALE)


def test_closed_sales_take_no_trades() -> None:
    filled = _state(net_sold=1_000 * UNIT_SCALE)
    assert sale_status(filled) is SaleStatus.FILLED
    with pytest.raises(SaleNotOpen) as exc:
        proceeds_for_amount(filled, UNIT_SCALE)
    assert exc.value.status == "FILLED"

    expiring = _state(duration=60, created_at=1_000)
    require_open(expiring, now=1_059)
    with pytest.raises(SaleNotOpen):
        coins_for_eth(expiring, 10**18, now=1_060)
    with pytest.raises(SaleNotOpen):
        sell_refund(_state(finalized=True, net_sold=1_000 * UNIT_SCALE), UNIT_SCALE)


def test_coins_for_eth_inverts_proceeds() -> None:
    state = _state()
    eth = proceeds_for_amount(state, 10 * UNIT_SCALE)
    assert coins_for_eth(state, eth) == 10 * UNIT_SCALE
    assert coins_for_eth(state, eth - 1) == 9 * UNIT_SCALE
    assert coins_for_eth(state, 0) == 0
    # more ETH than the whole remaining supply costs buys at most the remainder
    assert coins_for_eth(state, 10**40) <= state.remaining


def test_sell_refund_and_coins_to_burn() -> None:
    state = _state(net_sold=100 * UNIT_SCALE)
    refund = sell_refund(state, 10 * UNIT_SCALE)
    assert refund == proceeds_for_amount(state, 10 * UNIT_SCALE, 90 * UNIT_SCALE)
    assert coins_to_burn_for_eth(state, refund) == 10 * UNIT_SCALE
    assert coins_to_burn_for_eth(state, 0) == 0
    # selling more than was sold refunds everything
    assert sell_refund(state, 10**30) == sell_refund(state, 100 * UNIT_SCALE)


def test_finalized_pool_key_uses_default_fee_for_zero() -> None:
    key = finalized_pool_key(42, _state(), COOKBOOK)
    assert key.variant is AmmVariant.ZCURVE
    assert (key.token0, key.id0, key.id1, key.fee_or_hook) == (ZERO_ADDRESS, 0, 42, 30)
    # same uint256 encoding as the Cookbook pool it graduates into
    cookbook = derive_pool_key(ETH, erc6909(COOKBOOK, 42), AmmVariant.COOKBOOK, 30)
    assert key.pool_id == cookbook.pool_id

    assert finalized_pool_key(42, _state(fee_or_hook=100), COOKBOOK).fee_or_hook == 100
