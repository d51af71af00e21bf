"""
Pool identity and reserve snapshots.

A pool is identified on-chain by ``keccak256(abi.encode(PoolKey))``. The ZAMM
v0 contract encodes the fee as ``uint96 swapFee``; Cookbook (and pools created
by finalized zCurve sales, which live in Cookbook) encode ``uint256
feeOrHook``, where values above ``HOOK_THRESHOLD`` name a hook contract instead
of a fee.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from eth_abi import encode
from eth_utils import keccak

from .assets import normalize_address


HOOK_THRESHOLD = 10_000
MAX_UINT96 = (1 << 96) - 1


class AmmVariant(Enum):
    ZAMM_V0 = "ZAMM_V0"
    COOKBOOK = "COOKBOOK"
    ZCURVE = "ZCURVE"


# ABI layout of the key tuple per variant.
_KEY_TYPES = {
    AmmVariant.ZAMM_V0: ("uint256", "uint256", "address", "address", "uint96"),
    AmmVariant.COOKBOOK: ("uint256", "uint256", "address", "address", "uint256"),
    AmmVariant.ZCURVE: ("uint256", "uint256", "address", "address", "uint256"),
}


def is_hook(fee_or_hook: int) -> bool:
    """Any feeOrHook strictly greater than HOOK_THRESHOLD is a hook."""
    return fee_or_hook > HOOK_THRESHOLD


@dataclass(frozen=True)
class PoolKey:
    id0: int
    id1: int
    token0: str
    token1: str
    fee_or_hook: int
    variant: AmmVariant

    def __post_init__(self) -> None:
        for name in ("id0", "id1", "fee_or_hook"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if not isinstance(self.variant, AmmVariant):
            raise TypeError("variant must be an AmmVariant")
        if self.variant is AmmVariant.ZAMM_V0 and self.fee_or_hook > MAX_UINT96:
            raise ValueError(f"ZAMM v0 swapFee does not fit uint96: {self.fee_or_hook}")
        object.__setattr__(self, "token0", normalize_address(self.token0))
        object.__setattr__(self, "token1", normalize_address(self.token1))

    @property
    def pool_id(self) -> int:
        return compute_pool_id(self)

    @property
    def has_hook(self) -> bool:
        return is_hook(self.fee_or_hook)

    def as_tuple(self) -> Tuple[int, int, str, str, int]:
        return (self.id0, self.id1, self.token0, self.token1, self.fee_or_hook)

    def to_dict(self) -> dict:
        fee_field = "swapFee" if self.variant is AmmVariant.ZAMM_V0 else "feeOrHook"
        return {
            "id0": self.id0,
            "id1": self.id1,
            "token0": self.token0,
            "token1": self.token1,
            fee_field: self.fee_or_hook,
        }


def encode_pool_key(key: PoolKey) -> bytes:
    return encode(list(_KEY_TYPES[key.variant]), list(key.as_tuple()))


def compute_pool_id(key: PoolKey) -> int:
    """``uint256(keccak256(abi.encode(key)))``."""
    return int.from_bytes(keccak(encode_pool_key(key)), "big")


def pool_id_hex(pool_id: int) -> str:
    return "0x" + pool_id.to_bytes(32, "big").hex()


@dataclass(frozen=True)
class ReserveSnapshot:
    """Reserves (and optionally LP supply) read at one block by an external fetcher."""

    reserve0: int
    reserve1: int
    supply: Optional[int] = None
    block_number: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("reserve0", "reserve1", "supply", "block_number"):
            v = getattr(self, name)
            if v is None and name in ("supply", "block_number"):
                continue
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")

    @property
    def is_empty(self) -> bool:
        return self.reserve0 == 0 and self.reserve1 == 0

    def oriented(self, zero_for_one: bool) -> Tuple[int, int]:
        """``(reserve_in, reserve_out)`` for a swap direction."""
        if zero_for_one:
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0
