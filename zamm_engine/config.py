"""
Engine configuration.

Deployment addresses and tunables that differ between networks (or that the
front end wants to tweak without a release) live here. The defaults are the
Ethereum mainnet deployments. A YAML file can override any field:

    cookbook_id_boundary: 1000000
    default_slippage_bps: 100
    extra_overrides:
      - asset: "0x..."            # ERC20 address, or "0x...#<id>" for ERC6909
        instance: COOKBOOK
        fee_or_hook: 30
        swap_fee_bps: 30
        slippage_bps: 1000
        tax_bps: 0                  # skimmed off the native leg by a hook
        contract: "0x..."           # hook that fronts the pool, if any
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml

from .errors import ConfigError
from .kernels.fixed_point import BPS_DENOM
from .kernels.lp_math import MINIMUM_LIQUIDITY
from .state.assets import normalize_address


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ZAMM_ENGINE_CONFIG"

_ADDRESS_FIELDS = ("zamm_address", "cookbook_address", "cult_hook_address")
_BPS_FIELDS = ("default_slippage_bps", "single_eth_slippage_bps", "cult_tax_bps")


@dataclass(frozen=True)
class EngineConfig:
    """Runtime config for routing and quoting."""

    zamm_address: str = "0x00000000000008882D72EfA6cCE4B6a40b24C860"
    cookbook_address: str = "0x000000000000040470635EB91b7CE4D132D616eD"
    cult_hook_address: str = "0x0000000000C625206C76dFd00bfD8d84A5Bfc948"
    # the CULT hook skims this much of the ETH side on top of the pool fee
    cult_tax_bps: int = 10

    # ERC6909 ids below this are Cookbook coins (graduated zCurve sales); ids at or
    # above it are Coins-contract ids. Provisional until per-asset metadata exists.
    cookbook_id_boundary: int = 1_000_000

    default_slippage_bps: int = 200
    single_eth_slippage_bps: int = 500
    minimum_liquidity: int = MINIMUM_LIQUIDITY

    extra_overrides: Tuple[Mapping[str, Any], ...] = ()

    def __post_init__(self) -> None:
        for name in _ADDRESS_FIELDS:
            try:
                object.__setattr__(self, name, normalize_address(getattr(self, name)))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"{name}: {exc}") from exc
        for name in ("cookbook_id_boundary", "minimum_liquidity", *_BPS_FIELDS):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or v < 0:
                raise ConfigError(f"{name} must be a non-negative int, got {v!r}")
        for name in _BPS_FIELDS:
            if getattr(self, name) > BPS_DENOM:
                raise ConfigError(f"{name} must be <= {BPS_DENOM}")
        if self.cult_tax_bps >= BPS_DENOM:
            raise ConfigError(f"cult_tax_bps must be < {BPS_DENOM}")
        if not isinstance(self.extra_overrides, tuple):
            object.__setattr__(self, "extra_overrides", tuple(self.extra_overrides))
        for entry in self.extra_overrides:
            if not isinstance(entry, Mapping):
                raise ConfigError("extra_overrides entries must be mappings")


DEFAULT_CONFIG = EngineConfig()


def config_from_mapping(data: Mapping[str, Any], base: EngineConfig = DEFAULT_CONFIG) -> EngineConfig:
    if not isinstance(data, Mapping):
        raise ConfigError("config root must be a mapping")
    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
    values = dict(data)
    if "extra_overrides" in values:
        overrides = values["extra_overrides"] or ()
        if not isinstance(overrides, (list, tuple)):
            raise ConfigError("extra_overrides must be a list")
        values["extra_overrides"] = tuple(overrides)
    return replace(base, **values)


def load_config(path: Optional[os.PathLike] = None, *, env: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """
    Load config from ``path`` or from the file named by ``$ZAMM_ENGINE_CONFIG``.

    Returns DEFAULT_CONFIG when neither is given.
    """
    env = os.environ if env is None else env
    if path is None:
        raw = env.get(CONFIG_ENV_VAR)
        if not raw:
            return DEFAULT_CONFIG
        path = raw

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config {p}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {p}: {exc}") from exc

    logger.debug("loaded engine config from %s", p)
    if data is None:
        return DEFAULT_CONFIG
    return config_from_mapping(data)
