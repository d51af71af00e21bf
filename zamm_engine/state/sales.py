"""
zCurve sale state.

A sale starts OPEN, becomes FILLED once ``net_sold == sale_cap`` (which
triggers finalization on-chain) and FINALIZED after that. An OPEN sale whose
deadline passes before filling becomes EXPIRED. Only OPEN sales take trades.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import QuantizationViolation
from ..kernels.zcurve import UNIT_SCALE


class SaleStatus(Enum):
    OPEN = "OPEN"
    FILLED = "FILLED"
    FINALIZED = "FINALIZED"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class CurveState:
    """
    One bonding-curve sale as read from chain.

    ``quad_cap`` is the unpacked capacity (see ``unpack_cap_with_flags``).
    ``created_at`` and ``duration`` are unix seconds; the deadline is their sum.
    """

    sale_cap: int
    lp_supply: int
    eth_target: int
    divisor: int
    quad_cap: int
    fee_or_hook: int
    duration: int
    net_sold: int = 0
    created_at: int = 0
    eth_escrow: int = 0
    finalized: bool = False

    def __post_init__(self) -> None:
        for name in (
            "sale_cap",
            "lp_supply",
            "eth_target",
            "divisor",
            "quad_cap",
            "fee_or_hook",
            "duration",
            "net_sold",
            "created_at",
            "eth_escrow",
        ):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if self.divisor == 0:
            raise ValueError("divisor must be positive")
        if self.quad_cap > self.sale_cap:
            raise ValueError(f"quad_cap ({self.quad_cap}) exceeds sale_cap ({self.sale_cap})")
        if self.net_sold > self.sale_cap:
            raise ValueError(f"net_sold ({self.net_sold}) exceeds sale_cap ({self.sale_cap})")
        for name in ("sale_cap", "lp_supply", "quad_cap", "net_sold"):
            v = getattr(self, name)
            if v % UNIT_SCALE != 0:
                raise QuantizationViolation(name, v, UNIT_SCALE)

    @property
    def deadline(self) -> int:
        return self.created_at + self.duration

    @property
    def remaining(self) -> int:
        return self.sale_cap - self.net_sold

    def status(self, now: Optional[int] = None) -> SaleStatus:
        if self.finalized:
            return SaleStatus.FINALIZED
        if self.net_sold == self.sale_cap:
            return SaleStatus.FILLED
        if now is not None and self.duration > 0 and now >= self.deadline:
            return SaleStatus.EXPIRED
        return SaleStatus.OPEN
