from __future__ import annotations

import pytest

from zamm_engine.errors import QuantizationViolation
from zamm_engine.kernels.zcurve import UNIT_SCALE
from zamm_engine.state.sales import CurveState, SaleStatus


def _state(**overrides) -> CurveState:
    params = dict(
        sale_cap=1_000 * UNIT_SCALE,
        lp_supply=200 * UNIT_SCALE,
        eth_target=10**18,
        divisor=1,
        quad_cap=500 * UNIT_SCALE,
        fee_or_hook=0,
        duration=100,
        created_at=1_000,
    )
    params.update(overrides)
    return CurveState(**params)


def test_open_until_deadline() -> None:
    state = _state()
    assert state.deadline == 1_100
    assert state.status() is SaleStatus.OPEN
    assert state.status(now=1_099) is SaleStatus.OPEN
    assert state.status(now=1_100) is SaleStatus.EXPIRED


def test_zero_duration_never_expires() -> None:
    assert _state(duration=0).status(now=10**12) is SaleStatus.OPEN


def test_filled_and_finalized_take_precedence_over_expiry() -> None:
    filled = _state(net_sold=1_000 * UNIT_SCALE)
    assert filled.remaining == 0
    assert filled.status(now=10**9) is SaleStatus.FILLED
    assert _state(net_sold=1_000 * UNIT_SCALE, finalized=True).status(now=10**9) is SaleStatus.FINALIZED


@pytest.mark.parametrize("name", ["sale_cap", "lp_supply", "quad_cap", "net_sold"])
def test_token_parameters_must_be_quantized(name: str) -> None:
    with pytest.raises(QuantizationViolation) as exc:
        _state(**{name: (1_000 if name == "sale_cap" else 100) * UNIT_SCALE + 1})
    assert exc.value.name == name


def test_invalid_curve_parameters() -> None:
    with pytest.raises(ValueError):
        _state(divisor=0)
    with pytest.raises(ValueError):
        _state(quad_cap=2_000 * UNIT_SCALE)
    with pytest.raises(ValueError):
        _state(net_sold=2_000 * UNIT_SCALE)
