"""
``zamm-quote``: offline quotes from reserves supplied on the command line.

Examples:

    zamm-quote route ETH USDT
    zamm-quote swap ETH 0x...#42 --amount 1000000000000000000 --reserves 5e18 1e24
    zamm-quote pool-id ETH 0x...#42 --variant COOKBOOK
    zamm-quote zap --eth 1e18 --reserves 5e18 1e24 --supply 7e19
    zamm-quote sale-buy --sale-cap ... --quad-cap ... --divisor ... --eth-in ...

Every command prints one JSON object. Engine errors print ``{"error": ...}``
and exit with status 2.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from enum import Enum
from fractions import Fraction
from typing import Any

from .config import load_config
from .core.bonding_curve import (
    coins_for_eth,
    finalized_pool_key,
    price_at_supply,
    proceeds_for_amount,
    unpack_cap_with_flags,
)
from .core.liquidity import (
    max_eth_for_zap,
    quote_add_liquidity,
    quote_remove_liquidity,
    quote_single_eth_liquidity,
)
from .core.pool_keys import DEFAULT_FEES, derive_pool_key, is_token0
from .core.reserve_source import ReserveSourceResolver
from .core.swap import pick_slippage, quote_exact_in, quote_exact_out
from .errors import EngineError
from .state.assets import parse_asset
from .state.pools import AmmVariant, ReserveSnapshot, pool_id_hex
from .state.sales import CurveState


logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "ZAMM_ENGINE_LOG_LEVEL"


def _int_arg(raw: str) -> int:
    """Integer argument; accepts ``0x`` hex and exact scientific notation like ``5e18``."""
    text = raw.strip().replace("_", "")
    try:
        return int(text, 0)
    except ValueError:
        pass
    try:
        value = Fraction(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from None
    if value.denominator != 1:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}")
    return int(value)


def _jsonable(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Fraction):
        return f"{obj.numerator}/{obj.denominator}"
    if isinstance(obj, dict):
        return {k: _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(v) for v in obj]
    return obj


def _emit(payload: Any) -> None:
    print(json.dumps(_jsonable(payload), indent=2, sort_keys=True))


def _source_payload(source) -> dict:
    return {
        "instance": source.instance,
        "contract": source.contract_address,
        "rule": source.rule,
        "pool_key": source.pool_key.to_dict(),
        "pool_id": pool_id_hex(source.pool_id),
        "fee_bps": source.fee_bps,
        "slippage_bps": source.slippage_bps,
        "tax_bps": source.tax_bps,
    }


def _cmd_route(args, resolver: ReserveSourceResolver) -> dict:
    source = resolver.resolve(parse_asset(args.asset_a), parse_asset(args.asset_b))
    return _source_payload(source)


def _cmd_pool_id(args, resolver: ReserveSourceResolver) -> dict:
    key = derive_pool_key(
        parse_asset(args.asset_a),
        parse_asset(args.asset_b),
        AmmVariant(args.variant),
        args.fee,
    )
    return {"variant": key.variant, "pool_key": key.to_dict(), "pool_id": pool_id_hex(key.pool_id)}


def _cmd_swap(args, resolver: ReserveSourceResolver) -> dict:
    asset_in, asset_out = parse_asset(args.asset_in), parse_asset(args.asset_out)
    source = resolver.resolve(asset_in, asset_out)
    zero_for_one = is_token0(asset_in, source.pool_key)
    reserves = ReserveSnapshot(reserve0=args.reserves[0], reserve1=args.reserves[1])
    fee = source.fee_bps if args.fee is None else args.fee
    slippage = pick_slippage(source.slippage_bps, args.slippage_bps)

    native_in = None
    if asset_in.is_native or asset_out.is_native:
        native_in = asset_in.is_native

    quote_fn = quote_exact_out if args.exact_out else quote_exact_in
    quote = quote_fn(
        args.amount,
        reserves,
        zero_for_one=zero_for_one,
        fee_bps=fee,
        slippage_bps=slippage,
        tax_bps=source.tax_bps,
        native_in=native_in,
    )
    return {"source": _source_payload(source), "quote": quote}


def _cmd_add_liquidity(args, resolver: ReserveSourceResolver) -> dict:
    reserves = ReserveSnapshot(reserve0=args.reserves[0], reserve1=args.reserves[1], supply=args.supply)
    quote = quote_add_liquidity(
        args.amount0,
        args.amount1,
        reserves,
        slippage_bps=pick_slippage(None, args.slippage_bps),
        minimum_liquidity=resolver.config.minimum_liquidity,
    )
    return {"quote": quote}


def _cmd_remove_liquidity(args, resolver: ReserveSourceResolver) -> dict:
    reserves = ReserveSnapshot(reserve0=args.reserves[0], reserve1=args.reserves[1], supply=args.supply)
    quote = quote_remove_liquidity(args.lp, reserves, slippage_bps=pick_slippage(None, args.slippage_bps))
    return {"quote": quote}


def _cmd_zap(args, resolver: ReserveSourceResolver) -> dict:
    reserves = ReserveSnapshot(reserve0=args.reserves[0], reserve1=args.reserves[1], supply=args.supply)
    slippage = args.slippage_bps if args.slippage_bps is not None else resolver.config.single_eth_slippage_bps
    quote = quote_single_eth_liquidity(args.eth, reserves, args.fee, slippage_bps=slippage)
    return {
        "quote": quote,
        "max_eth": max_eth_for_zap(reserves.reserve0, reserves.reserve1, slippage),
    }


def _cmd_sale_buy(args, resolver: ReserveSourceResolver) -> dict:
    quad_cap, flags = unpack_cap_with_flags(args.quad_cap) if args.packed else (args.quad_cap, 0)
    state = CurveState(
        sale_cap=args.sale_cap,
        lp_supply=args.lp_supply,
        eth_target=args.eth_target,
        divisor=args.divisor,
        quad_cap=quad_cap,
        fee_or_hook=args.fee_or_hook,
        duration=args.duration,
        net_sold=args.net_sold,
        created_at=args.created_at,
    )
    out: dict = {
        "status": state.status(args.now),
        "flags": flags,
        "price_per_coin": price_at_supply(state, state.net_sold),
    }
    if args.eth_in is not None:
        coins = coins_for_eth(state, args.eth_in, now=args.now)
        out["coins_out"] = coins
        out["cost"] = proceeds_for_amount(state, coins, now=args.now)
    if args.coins is not None:
        out["cost_for_coins"] = proceeds_for_amount(state, args.coins, now=args.now)
    if args.coin_id is not None:
        key = finalized_pool_key(args.coin_id, state, resolver.config.cookbook_address)
        out["finalized_pool_id"] = pool_id_hex(key.pool_id)
    return out


def _add_reserves(p: argparse.ArgumentParser, with_supply: bool = False) -> None:
    p.add_argument(
        "--reserves",
        nargs=2,
        type=_int_arg,
        required=True,
        metavar=("RESERVE0", "RESERVE1"),
        help="Pool reserves in pool-key order (token0 first)",
    )
    if with_supply:
        p.add_argument("--supply", type=_int_arg, required=True, help="LP total supply (0 for an empty pool)")
    p.add_argument("--slippage-bps", type=_int_arg, default=None, help="Slippage tolerance in bps")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="zamm-quote", description="Offline ZAMM / Cookbook / zCurve quotes.")
    p.add_argument("--config", default=None, help="YAML config file (default: $ZAMM_ENGINE_CONFIG)")
    p.add_argument("--log-level", default=None, help=f"Logging level (default: ${LOG_LEVEL_ENV_VAR} or WARNING)")
    sub = p.add_subparsers(dest="command", required=True)

    route = sub.add_parser("route", help="Resolve which pool holds a pair's reserves")
    route.add_argument("asset_a")
    route.add_argument("asset_b")
    route.set_defaults(func=_cmd_route)

    pool_id = sub.add_parser("pool-id", help="Derive a pool key and its id")
    pool_id.add_argument("asset_a")
    pool_id.add_argument("asset_b")
    pool_id.add_argument("--variant", choices=[v.value for v in AmmVariant], default=AmmVariant.COOKBOOK.value)
    pool_id.add_argument("--fee", type=_int_arg, default=None, help="Fee in bps or hook (default: variant default)")
    pool_id.set_defaults(func=_cmd_pool_id)

    swap = sub.add_parser("swap", help="Quote a single-pool swap")
    swap.add_argument("asset_in")
    swap.add_argument("asset_out")
    swap.add_argument("--amount", type=_int_arg, required=True, help="Input amount (output amount with --exact-out)")
    swap.add_argument("--exact-out", action="store_true", help="Treat --amount as the desired output")
    swap.add_argument("--fee", type=_int_arg, default=None, help="Override the resolved pool fee (bps)")
    _add_reserves(swap)
    swap.set_defaults(func=_cmd_swap)

    add = sub.add_parser("add-liquidity", help="Quote a two-sided deposit")
    add.add_argument("--amount0", type=_int_arg, required=True)
    add.add_argument("--amount1", type=_int_arg, required=True)
    _add_reserves(add, with_supply=True)
    add.set_defaults(func=_cmd_add_liquidity)

    remove = sub.add_parser("remove-liquidity", help="Quote an LP burn")
    remove.add_argument("--lp", type=_int_arg, required=True)
    _add_reserves(remove, with_supply=True)
    remove.set_defaults(func=_cmd_remove_liquidity)

    zap = sub.add_parser("zap", help="Quote a single-sided ETH deposit (ETH must be token0)")
    zap.add_argument("--eth", type=_int_arg, required=True, help="Total ETH in wei; half is swapped")
    zap.add_argument("--fee", type=_int_arg, default=DEFAULT_FEES[AmmVariant.COOKBOOK], help="Pool fee in bps")
    _add_reserves(zap, with_supply=True)
    zap.set_defaults(func=_cmd_zap)

    sale = sub.add_parser("sale-buy", help="Quote a zCurve sale purchase")
    sale.add_argument("--sale-cap", type=_int_arg, required=True)
    sale.add_argument("--quad-cap", type=_int_arg, required=True)
    sale.add_argument("--packed", action="store_true", help="--quad-cap is the on-chain packed value")
    sale.add_argument("--divisor", type=_int_arg, required=True)
    sale.add_argument("--net-sold", type=_int_arg, default=0)
    sale.add_argument("--lp-supply", type=_int_arg, default=0)
    sale.add_argument("--eth-target", type=_int_arg, default=0)
    sale.add_argument("--fee-or-hook", type=_int_arg, default=0)
    sale.add_argument("--duration", type=_int_arg, default=0)
    sale.add_argument("--created-at", type=_int_arg, default=0)
    sale.add_argument("--now", type=_int_arg, default=None, help="Unix time used for expiry (default: ignore)")
    sale.add_argument("--eth-in", type=_int_arg, default=None, help="Quote coins for this much ETH (wei)")
    sale.add_argument("--coins", type=_int_arg, default=None, help="Quote the cost of this many coins")
    sale.add_argument("--coin-id", type=_int_arg, default=None, help="Also print the graduation pool id")
    sale.set_defaults(func=_cmd_sale_buy)

    return p


def _configure_logging(level_name: str | None) -> None:
    level_name = (level_name or os.environ.get(LOG_LEVEL_ENV_VAR) or "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    try:
        resolver = ReserveSourceResolver(load_config(args.config))
        payload = args.func(args, resolver)
    except (EngineError, ValueError, TypeError) as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        _emit({"error": type(exc).__name__, "message": str(exc)})
        return 2

    _emit(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
