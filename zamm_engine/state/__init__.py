"""
Immutable value types passed into the engine
"""

from .assets import AssetDescriptor, AssetStandard, ETH, ZERO_ADDRESS, erc20, erc6909, native
from .pools import AmmVariant, PoolKey, ReserveSnapshot, compute_pool_id, is_hook
from .sales import CurveState, SaleStatus

__all__ = [
    "AssetDescriptor",
    "AssetStandard",
    "ETH",
    "ZERO_ADDRESS",
    "erc20",
    "erc6909",
    "native",
    "AmmVariant",
    "PoolKey",
    "ReserveSnapshot",
    "compute_pool_id",
    "is_hook",
    "CurveState",
    "SaleStatus",
]
