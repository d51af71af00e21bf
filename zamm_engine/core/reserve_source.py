"""
Reserve source resolution: which deployed AMM holds the reserves for a pair.

The ecosystem runs two AMM deployments side by side, and a handful of legacy
assets live in hand-picked pools. Resolution order matters:

1. Legacy override table (either side of the pair). Short-circuits everything.
2. Any ERC20 side routes to Cookbook, the deployment that pools ERC20s.
3. ERC6909 ids are split by ``cookbook_id_boundary``: small ids are Cookbook
   coins (graduated zCurve sales), large ids are Coins-contract coins pooled
   in ZAMM v0.

Rule 3 is a heuristic on a single boundary constant; it is configurable and
should be replaced by per-asset metadata when the indexer exposes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ..config import DEFAULT_CONFIG, EngineConfig
from ..errors import ConfigError, InvalidPair
from ..kernels.fixed_point import BPS_DENOM
from ..state.assets import (
    CULT,
    ENS,
    ETH,
    USDT,
    WLFI,
    AssetDescriptor,
    AssetKey,
    AssetStandard,
    normalize_address,
    parse_asset,
)
from ..state.pools import AmmVariant, PoolKey, is_hook
from .pool_keys import derive_pool_key, fee_bps_for, same_asset


logger = logging.getLogger(__name__)


class AmmInstance(Enum):
    ZAMM = "ZAMM"
    COOKBOOK = "COOKBOOK"


class ResolutionRule(Enum):
    LEGACY_OVERRIDE = "LEGACY_OVERRIDE"
    ERC20_POOL = "ERC20_POOL"
    COOKBOOK_ID = "COOKBOOK_ID"
    COINS_ID = "COINS_ID"


_VARIANT_FOR_INSTANCE = {
    AmmInstance.ZAMM: AmmVariant.ZAMM_V0,
    AmmInstance.COOKBOOK: AmmVariant.COOKBOOK,
}


@dataclass(frozen=True)
class LegacyOverride:
    """
    Hard-coded pool for one special-cased asset (always paired with the native coin).

    ``contract_address`` names a hook that fronts the pool; swaps go to it
    instead of the AMM. ``tax_bps`` is what that hook skims off the native side.
    """

    asset_key: AssetKey
    instance: AmmInstance
    pool_key: PoolKey
    swap_fee_bps: int
    slippage_bps: Optional[int] = None
    label: str = ""
    contract_address: Optional[str] = None
    tax_bps: int = 0


@dataclass(frozen=True)
class ReserveSource:
    instance: AmmInstance
    contract_address: str
    pool_key: PoolKey
    pool_id: int
    fee_bps: int
    slippage_bps: int
    rule: ResolutionRule
    tax_bps: int = 0


def _override(
    asset: AssetDescriptor,
    instance: AmmInstance,
    fee_or_hook: int,
    swap_fee_bps: int,
    slippage_bps: Optional[int] = None,
    *,
    contract_address: Optional[str] = None,
    tax_bps: int = 0,
) -> LegacyOverride:
    key = derive_pool_key(ETH, asset, _VARIANT_FOR_INSTANCE[instance], fee_or_hook)
    return LegacyOverride(
        asset_key=asset.key,
        instance=instance,
        pool_key=key,
        swap_fee_bps=swap_fee_bps,
        slippage_bps=slippage_bps,
        label=asset.label,
        contract_address=contract_address,
        tax_bps=tax_bps,
    )


def default_overrides(config: EngineConfig = DEFAULT_CONFIG) -> Tuple[LegacyOverride, ...]:
    cult_hook = int(config.cult_hook_address, 16)
    return (
        # ETH/USDT lives in ZAMM v0 at the Uniswap-v2 fee tier.
        _override(USDT, AmmInstance.ZAMM, 30, 30),
        # CULT trades through its hook, which adds a tax on the ETH leg.
        _override(
            CULT,
            AmmInstance.COOKBOOK,
            cult_hook,
            30,
            slippage_bps=1000,
            contract_address=config.cult_hook_address,
            tax_bps=config.cult_tax_bps,
        ),
        _override(ENS, AmmInstance.COOKBOOK, 30, 30, slippage_bps=500),
        _override(WLFI, AmmInstance.COOKBOOK, 30, 30),
    )


def _parse_asset_ref(raw: str) -> AssetDescriptor:
    try:
        asset = parse_asset(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid override asset {raw!r}: {exc}") from exc
    if asset.is_native:
        raise ConfigError("the native coin cannot carry a legacy override")
    return asset


def _bps_entry(entry: Mapping[str, Any], name: str, default: Optional[int], *, upper: int = BPS_DENOM) -> Optional[int]:
    value = entry.get(name, default)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool):
        raise ConfigError(f"{name} must be an int, got {value!r}")
    if not (0 <= value <= upper):
        raise ConfigError(f"{name} must be in [0, {upper}], got {value}")
    return value


def override_from_mapping(entry: Mapping[str, Any]) -> LegacyOverride:
    """Build a LegacyOverride from a config entry (see ``zamm_engine.config``)."""
    asset = _parse_asset_ref(entry.get("asset"))
    try:
        instance = AmmInstance(str(entry.get("instance", "COOKBOOK")).upper())
    except ValueError as exc:
        raise ConfigError(f"unknown AMM instance in override: {entry.get('instance')!r}") from exc

    fee_or_hook = entry.get("fee_or_hook", 30)
    if isinstance(fee_or_hook, str):
        try:
            fee_or_hook = int(normalize_address(fee_or_hook), 16)
        except ValueError as exc:
            raise ConfigError(f"invalid hook address {fee_or_hook!r}: {exc}") from exc
    if not isinstance(fee_or_hook, int) or isinstance(fee_or_hook, bool) or fee_or_hook < 0:
        raise ConfigError(f"fee_or_hook must be a non-negative int or hook address: {fee_or_hook!r}")

    default_fee = None if is_hook(fee_or_hook) else fee_or_hook
    swap_fee_bps = _bps_entry(entry, "swap_fee_bps", default_fee)
    if swap_fee_bps is None:
        raise ConfigError(f"override for {asset.label} uses a hook; swap_fee_bps is required")
    slippage_bps = _bps_entry(entry, "slippage_bps", None)
    tax_bps = _bps_entry(entry, "tax_bps", 0, upper=BPS_DENOM - 1)

    contract_address = entry.get("contract")
    if contract_address is not None:
        try:
            contract_address = normalize_address(contract_address)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"invalid override contract {contract_address!r}: {exc}") from exc

    return _override(
        asset,
        instance,
        fee_or_hook,
        swap_fee_bps,
        slippage_bps,
        contract_address=contract_address,
        tax_bps=tax_bps,
    )


class ReserveSourceResolver:
    """
    Routes an asset pair to its authoritative pool.

    Build once per config; ``resolve`` is pure and safe to call from any thread.
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        table: Dict[AssetKey, LegacyOverride] = {}
        for ov in default_overrides(config):
            table[ov.asset_key] = ov
        for entry in config.extra_overrides:
            ov = override_from_mapping(entry)
            if ov.asset_key in table:
                logger.info("config override replaces built-in entry for %s", ov.label)
            table[ov.asset_key] = ov
        self._overrides = table

    @property
    def overrides(self) -> Tuple[LegacyOverride, ...]:
        return tuple(self._overrides.values())

    def contract_address(self, instance: AmmInstance) -> str:
        if instance is AmmInstance.ZAMM:
            return self.config.zamm_address
        return self.config.cookbook_address

    def lookup_override(self, asset: AssetDescriptor) -> Optional[LegacyOverride]:
        return self._overrides.get(asset.key)

    def classify_multi_id(self, asset: AssetDescriptor) -> AmmInstance:
        if asset.standard is not AssetStandard.ERC6909:
            raise ValueError(f"{asset.label} is not an ERC6909 asset")
        if asset.token_id < self.config.cookbook_id_boundary:
            return AmmInstance.COOKBOOK
        return AmmInstance.ZAMM

    def _source(
        self,
        instance: AmmInstance,
        key: PoolKey,
        fee_bps: int,
        rule: ResolutionRule,
        slippage_bps: Optional[int] = None,
        *,
        contract_address: Optional[str] = None,
        tax_bps: int = 0,
    ) -> ReserveSource:
        return ReserveSource(
            instance=instance,
            contract_address=contract_address or self.contract_address(instance),
            pool_key=key,
            pool_id=key.pool_id,
            fee_bps=fee_bps,
            slippage_bps=self.config.default_slippage_bps if slippage_bps is None else slippage_bps,
            rule=rule,
            tax_bps=tax_bps,
        )

    def resolve(self, asset_a: AssetDescriptor, asset_b: AssetDescriptor) -> ReserveSource:
        """
        Pick the pool holding the reserves for ``asset_a``/``asset_b``.

        Raises:
            InvalidPair: identical assets, or two ERC6909 coins that live in
                different deployments (route them through the native coin).
        """
        if same_asset(asset_a, asset_b):
            raise InvalidPair(f"identical assets on both sides: {asset_a.label}")

        for asset, other in ((asset_a, asset_b), (asset_b, asset_a)):
            ov = self.lookup_override(asset)
            if ov is None:
                continue
            if not other.is_native:
                logger.warning(
                    "legacy override for %s applied to pair with %s; pool is %s/ETH",
                    ov.label,
                    other.label,
                    ov.label,
                )
            logger.debug("resolved %s/%s via legacy override (%s)", asset_a.label, asset_b.label, ov.instance.value)
            return self._source(
                ov.instance,
                ov.pool_key,
                ov.swap_fee_bps,
                ResolutionRule.LEGACY_OVERRIDE,
                ov.slippage_bps,
                contract_address=ov.contract_address,
                tax_bps=ov.tax_bps,
            )

        if AssetStandard.ERC20 in (asset_a.standard, asset_b.standard):
            key = derive_pool_key(asset_a, asset_b, AmmVariant.COOKBOOK)
            logger.debug("resolved %s/%s to Cookbook ERC20 pool", asset_a.label, asset_b.label)
            return self._source(AmmInstance.COOKBOOK, key, fee_bps_for(key), ResolutionRule.ERC20_POOL)

        instances = {self.classify_multi_id(a) for a in (asset_a, asset_b) if not a.is_native}
        if len(instances) != 1:
            raise InvalidPair(
                f"{asset_a.label} and {asset_b.label} live in different AMM deployments; route via the native coin"
            )
        instance = instances.pop()
        key = derive_pool_key(asset_a, asset_b, _VARIANT_FOR_INSTANCE[instance])
        rule = ResolutionRule.COOKBOOK_ID if instance is AmmInstance.COOKBOOK else ResolutionRule.COINS_ID
        logger.debug("resolved %s/%s to %s by id range", asset_a.label, asset_b.label, instance.value)
        return self._source(instance, key, fee_bps_for(key), rule)

    def resolve_via_native(
        self, asset_in: AssetDescriptor, asset_out: AssetDescriptor
    ) -> Tuple[ReserveSource, ReserveSource]:
        """Two legs for a coin-to-coin trade: ``asset_in -> ETH`` then ``ETH -> asset_out``."""
        if asset_in.is_native or asset_out.is_native:
            raise InvalidPair("one side is already the native coin; use resolve()")
        if same_asset(asset_in, asset_out):
            raise InvalidPair(f"identical assets on both sides: {asset_in.label}")
        return self.resolve(asset_in, ETH), self.resolve(ETH, asset_out)
