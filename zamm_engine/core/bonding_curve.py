"""
zCurve bonding-curve sale quoting.

Prices come from ``kernels.zcurve.cost``: the buy cost of ``amount`` at
``sold`` is ``cost(sold + amount) - cost(sold)``, and a sell refunds the same
difference walking down. The ``divisor`` is a per-sale calibration input and
is never derived here.

The sale contract stores ``quadCap`` packed with a byte of flags:

    packed = (cap << FLAG_BITS) | flags
"""

from __future__ import annotations

import logging
from enum import IntFlag
from typing import Optional, Tuple

from ..errors import QuantizationViolation, SaleCapExceeded, SaleNotOpen
from ..kernels.fixed_point import WAD, _require_int
from ..kernels.zcurve import UNIT_SCALE, cost
from ..state.assets import ETH, erc6909
from ..state.pools import AmmVariant, PoolKey
from ..state.sales import CurveState, SaleStatus
from .pool_keys import derive_pool_key


logger = logging.getLogger(__name__)

FLAG_BITS = 8
FLAG_MASK = (1 << FLAG_BITS) - 1
MAX_PACKED = (1 << 256) - 1


class CurveFlag(IntFlag):
    NONE = 0
    # LP tokens minted at finalization are claimable rather than burned
    LP_UNLOCK = 1


# -- quantization -----------------------------------------------------------


def quantize_to_unit_scale(amount: int) -> int:
    """Floor ``amount`` to a multiple of UNIT_SCALE. Idempotent."""
    _require_int("amount", amount)
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")
    return (amount // UNIT_SCALE) * UNIT_SCALE


def quantize_up(amount: int) -> int:
    _require_int("amount", amount)
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")
    return -(-amount // UNIT_SCALE) * UNIT_SCALE


def require_quantized(name: str, value: int) -> int:
    _require_int(name, value)
    if value % UNIT_SCALE != 0:
        raise QuantizationViolation(name, value, UNIT_SCALE)
    return value


# -- flag packing -----------------------------------------------------------


def pack_cap_with_flags(cap: int, flags: int = 0) -> int:
    _require_int("cap", cap)
    _require_int("flags", int(flags))
    if not (0 <= int(flags) <= FLAG_MASK):
        raise ValueError(f"flags must fit in {FLAG_BITS} bits: {int(flags)}")
    if cap < 0:
        raise ValueError(f"cap must be non-negative: {cap}")
    packed = (cap << FLAG_BITS) | int(flags)
    if packed > MAX_PACKED:
        raise ValueError(f"cap too large to pack into uint256: {cap}")
    return packed


def unpack_cap_with_flags(packed: int) -> Tuple[int, int]:
    """Inverse of ``pack_cap_with_flags``: ``(cap, flags)``."""
    _require_int("packed", packed)
    if not (0 <= packed <= MAX_PACKED):
        raise ValueError(f"packed value out of uint256 range: {packed}")
    return packed >> FLAG_BITS, packed & FLAG_MASK


def has_flag(packed: int, flag: CurveFlag) -> bool:
    return bool(unpack_cap_with_flags(packed)[1] & flag)


# -- sale state -------------------------------------------------------------


def sale_status(state: CurveState, now: Optional[int] = None) -> SaleStatus:
    return state.status(now)


def require_open(state: CurveState, now: Optional[int] = None) -> None:
    status = state.status(now)
    if status is not SaleStatus.OPEN:
        raise SaleNotOpen(status.value)


# -- pricing ----------------------------------------------------------------


def _cost(state: CurveState, n: int) -> int:
    return cost(n, state.quad_cap, state.divisor)


def price_at_supply(state: CurveState, sold: int) -> int:
    """Marginal price in wei of one whole coin (1e18 base units) bought at ``sold``."""
    _require_int("sold", sold)
    if sold < 0:
        raise ValueError(f"sold must be non-negative: {sold}")
    return _cost(state, sold + WAD) - _cost(state, sold)


def proceeds_for_amount(
    state: CurveState,
    amount: int,
    current_sold: Optional[int] = None,
    *,
    now: Optional[int] = None,
) -> int:
    """
    Wei needed to buy ``amount`` coins starting at ``current_sold``
    (defaults to ``state.net_sold``).

    Raises:
        SaleNotOpen: the sale is filled, finalized or expired.
        SaleCapExceeded: the purchase would sell past ``sale_cap``.
    """
    require_open(state, now)
    sold = state.net_sold if current_sold is None else current_sold
    _require_int("amount", amount)
    _require_int("current_sold", sold)
    if amount < 0 or sold < 0:
        raise ValueError("amount and current_sold must be non-negative")
    if sold + amount > state.sale_cap:
        raise SaleCapExceeded(f"buying {amount} at {sold} exceeds sale cap {state.sale_cap}")
    if amount == 0:
        return 0
    return _cost(state, sold + amount) - _cost(state, sold)


def sell_refund(state: CurveState, amount: int, *, now: Optional[int] = None) -> int:
    """Wei returned for selling ``amount`` coins back into the curve (capped at ``net_sold``)."""
    require_open(state, now)
    _require_int("amount", amount)
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")
    if amount == 0:
        return 0
    amount = min(amount, state.net_sold)
    return _cost(state, state.net_sold) - _cost(state, state.net_sold - amount)


def coins_for_eth(state: CurveState, eth_in: int, *, now: Optional[int] = None) -> int:
    """
    Largest quantized amount of coins ``eth_in`` wei can buy.

    Binary search over the remaining supply down to one UNIT_SCALE of
    precision, then floored to UNIT_SCALE.
    """
    require_open(state, now)
    _require_int("eth_in", eth_in)
    if eth_in < 0:
        raise ValueError(f"eth_in must be non-negative: {eth_in}")
    if eth_in == 0:
        return 0

    low, high = 0, state.remaining
    if high <= 0:
        return 0
    base = _cost(state, state.net_sold)
    while high - low > UNIT_SCALE:
        mid = (low + high) // 2
        if _cost(state, state.net_sold + mid) - base <= eth_in:
            low = mid
        else:
            high = mid
    return quantize_to_unit_scale(low)


def coins_to_burn_for_eth(state: CurveState, eth_out: int, *, now: Optional[int] = None) -> int:
    """Quantized amount of coins to sell to receive at least ``eth_out`` wei (rounded up)."""
    require_open(state, now)
    _require_int("eth_out", eth_out)
    if eth_out < 0:
        raise ValueError(f"eth_out must be non-negative: {eth_out}")
    if eth_out == 0:
        return 0

    low, high = 0, state.net_sold
    top = _cost(state, state.net_sold)
    while high - low > UNIT_SCALE:
        mid = (low + high) // 2
        if top - _cost(state, state.net_sold - mid) < eth_out:
            low = mid
        else:
            high = mid
    return quantize_up(high)


# -- graduation -------------------------------------------------------------


def finalized_pool_key(coin_id: int, state: CurveState, coin_contract: str) -> PoolKey:
    """
    Pool the sale graduates into: native vs ``(coin_contract, coin_id)``,
    with the sale's ``fee_or_hook`` (0 meaning the default fee).
    """
    coin = erc6909(coin_contract, coin_id)
    key = derive_pool_key(ETH, coin, AmmVariant.ZCURVE, state.fee_or_hook)
    logger.debug("zCurve coin %d graduates into pool %#x", coin_id, key.pool_id)
    return key
