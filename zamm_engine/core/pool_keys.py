"""
Pool key derivation for each AMM variant.

Ordering: every variant sorts by the Hamming weight of the address first,
then the address, then the id. The zero address has weight 0, so the native
coin is always token0. Variants differ only in fee encoding and default fee.

Fee selection: explicit argument, else the first asset-level override, else
the variant default. zCurve sales store ``feeOrHook == 0`` to mean "default".
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from ..errors import InvalidPair
from ..state.assets import AssetDescriptor, AssetKey
from ..state.pools import AmmVariant, PoolKey, is_hook


DEFAULT_FEES: Dict[AmmVariant, int] = {
    AmmVariant.ZAMM_V0: 100,
    AmmVariant.COOKBOOK: 30,
    AmmVariant.ZCURVE: 30,
}


def hamming_weight(address: str) -> int:
    return bin(int(address, 16)).count("1")


def _hamming_sort_key(key: AssetKey) -> Tuple[int, int, int]:
    address, token_id = key
    return (hamming_weight(address), int(address, 16), token_id)


def same_asset(a: AssetDescriptor, b: AssetDescriptor) -> bool:
    return a.key == b.key


def order_assets(asset_a: AssetDescriptor, asset_b: AssetDescriptor) -> Tuple[AssetDescriptor, AssetDescriptor]:
    """Return ``(asset0, asset1)`` in canonical order."""
    if same_asset(asset_a, asset_b):
        raise InvalidPair(f"identical assets on both sides: {asset_a.label}")
    if _hamming_sort_key(asset_a.key) <= _hamming_sort_key(asset_b.key):
        return asset_a, asset_b
    return asset_b, asset_a


def select_fee(
    asset_a: AssetDescriptor,
    asset_b: AssetDescriptor,
    variant: AmmVariant,
    fee_or_hook: Optional[int] = None,
) -> int:
    if fee_or_hook is None:
        for asset in (asset_a, asset_b):
            if asset.fee_override is not None:
                fee_or_hook = asset.fee_override
                break
    if fee_or_hook is None or (variant is AmmVariant.ZCURVE and fee_or_hook == 0):
        return DEFAULT_FEES[variant]
    return fee_or_hook


def derive_pool_key(
    asset_a: AssetDescriptor,
    asset_b: AssetDescriptor,
    variant: AmmVariant,
    fee_or_hook: Optional[int] = None,
) -> PoolKey:
    """
    Canonical pool key for an asset pair under one AMM variant.

    Pure and total: every pair of distinct assets maps to exactly one key.

    Raises:
        InvalidPair: if both descriptors name the same on-chain asset.
    """
    asset0, asset1 = order_assets(asset_a, asset_b)
    fee = select_fee(asset_a, asset_b, variant, fee_or_hook)
    (token0, id0), (token1, id1) = asset0.key, asset1.key
    return PoolKey(id0=id0, id1=id1, token0=token0, token1=token1, fee_or_hook=fee, variant=variant)


def is_token0(asset: AssetDescriptor, key: PoolKey) -> bool:
    """Whether ``asset`` sits on the token0 side of ``key``."""
    if asset.key == (key.token0, key.id0):
        return True
    if asset.key == (key.token1, key.id1):
        return False
    raise InvalidPair(f"{asset.label} is not part of pool {key.to_dict()}")


def fee_bps_for(key: PoolKey) -> int:
    """Numeric swap fee of a key; hooked pools carry no fee in the key."""
    if is_hook(key.fee_or_hook):
        raise InvalidPair(f"pool fee is a hook ({key.fee_or_hook:#x}); supply the hook's fee explicitly")
    return key.fee_or_hook
