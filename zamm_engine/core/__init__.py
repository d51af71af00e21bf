"""
Routing and quoting on top of the kernels
"""

from .pool_keys import DEFAULT_FEES, derive_pool_key, fee_bps_for, is_token0, order_assets
from .reserve_source import (
    AmmInstance,
    LegacyOverride,
    ReserveSource,
    ReserveSourceResolver,
    ResolutionRule,
)
from .swap import (
    DEFAULT_SLIPPAGE_BPS,
    SINGLE_ETH_SLIPPAGE_BPS,
    SlippageDirection,
    SwapQuote,
    estimate_coin_to_coin,
    estimate_price_impact,
    get_amount_in,
    get_amount_out,
    quote_exact_in,
    quote_exact_out,
    to_gross,
    to_net,
    with_slippage,
)
from .liquidity import (
    estimate_lp_minted,
    estimate_pool_share,
    estimate_remove_liquidity,
    max_eth_for_zap,
    optimal_deposit,
    quote_add_liquidity,
    quote_remove_liquidity,
    quote_single_eth_liquidity,
)
from .bonding_curve import (
    CurveFlag,
    coins_for_eth,
    coins_to_burn_for_eth,
    finalized_pool_key,
    pack_cap_with_flags,
    price_at_supply,
    proceeds_for_amount,
    quantize_to_unit_scale,
    sell_refund,
    unpack_cap_with_flags,
)

__all__ = [
    "DEFAULT_FEES",
    "derive_pool_key",
    "fee_bps_for",
    "is_token0",
    "order_assets",
    "AmmInstance",
    "LegacyOverride",
    "ReserveSource",
    "ReserveSourceResolver",
    "ResolutionRule",
    "DEFAULT_SLIPPAGE_BPS",
    "SINGLE_ETH_SLIPPAGE_BPS",
    "SlippageDirection",
    "SwapQuote",
    "estimate_coin_to_coin",
    "estimate_price_impact",
    "get_amount_in",
    "get_amount_out",
    "quote_exact_in",
    "quote_exact_out",
    "to_gross",
    "to_net",
    "with_slippage",
    "estimate_lp_minted",
    "estimate_pool_share",
    "estimate_remove_liquidity",
    "max_eth_for_zap",
    "optimal_deposit",
    "quote_add_liquidity",
    "quote_remove_liquidity",
    "quote_single_eth_liquidity",
    "CurveFlag",
    "coins_for_eth",
    "coins_to_burn_for_eth",
    "finalized_pool_key",
    "pack_cap_with_flags",
    "price_at_supply",
    "proceeds_for_amount",
    "quantize_to_unit_scale",
    "sell_refund",
    "unpack_cap_with_flags",
]
