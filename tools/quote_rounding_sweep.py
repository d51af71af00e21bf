from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from zamm_engine.core.bonding_curve import coins_for_eth, price_at_supply, proceeds_for_amount
from zamm_engine.kernels.cpmm_swap import get_amount_in, get_amount_out
from zamm_engine.kernels.zcurve import UNIT_SCALE
from zamm_engine.state.sales import CurveState


@dataclass(frozen=True)
class RoundTripMetrics:
    exact_out_violations: int
    max_overquote: int
    flat_inputs: int


def _parse_int_list(raw: str) -> list[int]:
    out = [int(x.strip()) for x in raw.split(",") if x.strip()]
    if not out:
        raise SystemExit(f"empty list: {raw!r}")
    return out


def _iter_reserve_pairs(reserves: list[int], ratios: list[int]) -> Iterator[tuple[int, int]]:
    for r in reserves:
        yield r, r
        for k in ratios:
            yield r, r * k
            yield r * k, r


def sweep_cpmm(*, reserves: list[int], ratios: list[int], amounts: list[int], fee_bps: int) -> RoundTripMetrics:
    """
    Count exact-out quotes that under-deliver (must stay 0) and measure how far
    ``get_amount_in(get_amount_out(x))`` lands above ``x``.
    """
    violations = 0
    max_overquote = 0
    flat = 0
    for r_in, r_out in _iter_reserve_pairs(reserves, ratios):
        for x in amounts:
            out = get_amount_out(x, r_in, r_out, fee_bps)
            if out == 0:
                flat += 1
                continue
            back = get_amount_in(out, r_in, r_out, fee_bps)
            if get_amount_out(back, r_in, r_out, fee_bps) < out:
                violations += 1
            max_overquote = max(max_overquote, back - x)
    return RoundTripMetrics(exact_out_violations=violations, max_overquote=max_overquote, flat_inputs=flat)


def sweep_curve(state: CurveState, checkpoints: int) -> list[dict]:
    rows = []
    step = max(state.sale_cap // checkpoints // UNIT_SCALE, 1) * UNIT_SCALE
    for sold in range(0, state.sale_cap, step):
        rows.append({"sold": sold, "price_per_coin": price_at_supply(state, sold)})
    return rows


def main() -> int:
    ap = argparse.ArgumentParser(description="Deterministic rounding sweep for swap and bonding-curve quotes")
    ap.add_argument("--reserves", type=str, default="1000,100000,1000000000000000000")
    ap.add_argument("--ratios", type=str, default="3,1000")
    ap.add_argument("--amounts", type=str, default="1,7,1000,123456789")
    ap.add_argument("--fee-bps", type=int, default=30)
    ap.add_argument("--sale-cap", type=int, default=800_000_000 * 10**18)
    ap.add_argument("--quad-cap", type=int, default=200_000_000 * 10**18)
    ap.add_argument("--divisor", type=int, required=True, help="Pre-calibrated curve divisor for this sale")
    ap.add_argument("--checkpoints", type=int, default=8)
    ap.add_argument("--out", type=str, default="")
    args = ap.parse_args()

    if not (0 <= args.fee_bps < 10_000):
        raise SystemExit("fee-bps must be in [0, 10000)")
    if args.checkpoints <= 0:
        raise SystemExit("checkpoints must be positive")

    start = time.perf_counter()
    state = CurveState(
        sale_cap=args.sale_cap,
        lp_supply=0,
        eth_target=0,
        divisor=args.divisor,
        quad_cap=args.quad_cap,
        fee_or_hook=0,
        duration=0,
    )
    cpmm = sweep_cpmm(
        reserves=_parse_int_list(args.reserves),
        ratios=_parse_int_list(args.ratios),
        amounts=_parse_int_list(args.amounts),
        fee_bps=args.fee_bps,
    )
    full_cost = proceeds_for_amount(state, state.sale_cap)
    report = {
        "schema": "zamm-engine/rounding-sweep/v1",
        "timestamp_unix": int(time.time()),
        "cpmm": {
            "fee_bps": args.fee_bps,
            "exact_out_violations": cpmm.exact_out_violations,
            "max_overquote": cpmm.max_overquote,
            "flat_inputs": cpmm.flat_inputs,
        },
        "curve": {
            "cost_to_fill": full_cost,
            "coins_for_full_cost": coins_for_eth(state, full_cost),
            "prices": sweep_curve(state, args.checkpoints),
        },
        "elapsed_s": round(time.perf_counter() - start, 4),
    }

    text = json.dumps(report, indent=2, sort_keys=True)
    if args.out:
        Path(args.out).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return 0 if cpmm.exact_out_violations == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
