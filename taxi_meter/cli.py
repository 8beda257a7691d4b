"""Command-line interface for taxi_meter.

Run:
    python -m taxi_meter replay --csv trip.csv
    python -m taxi_meter quote --distance-km 3.2 --minutes 12
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from taxi_meter.config import resolve_tariff
from taxi_meter.csv_io import load_position_fixes
from taxi_meter.errors import MeterError
from taxi_meter.fare import quote
from taxi_meter.formatting import format_distance, format_elapsed, format_fare, ride_summary
from taxi_meter.models import DEFAULT_TZ, FareTariff
from taxi_meter.replay import DEFAULT_FIX_INTERVAL_MS, replay_trip
from taxi_meter.timeutils import dt_from_epoch_ms

logger = logging.getLogger(__name__)


def _tariff_from_args(args: argparse.Namespace) -> FareTariff:
    return resolve_tariff(
        args.tariff,
        base_fare=args.base_fare,
        per_km=args.per_km,
        per_minute=args.per_minute,
        currency=args.currency,
    )


def _cmd_replay(args: argparse.Namespace) -> int:
    tariff = _tariff_from_args(args)
    fixes, summary = load_position_fixes(args.csv)
    result = replay_trip(fixes, tariff, fix_interval_ms=args.fix_interval_ms, keep_steps=args.steps)

    print("### CSV行数")
    print(f"total_rows={summary.rows_total}, parsed={summary.rows_parsed}, skipped={summary.rows_skipped}")
    print(f"meter_dropped={result.dropped}")
    print()

    started_at = ended_at = None
    if result.start_ms is not None and result.end_ms is not None and result.start_ms > 0:
        started_at = dt_from_epoch_ms(result.start_ms, args.tz)
        ended_at = dt_from_epoch_ms(result.end_ms, args.tz)

    print("### 行程小结")
    print(ride_summary(result.summary, tariff.currency, started_at=started_at, ended_at=ended_at))
    print()

    if args.steps:
        print("### 逐点明细")
        for step in result.steps:
            flag = " (已丢弃)" if step.dropped else ""
            print(
                f"#{step.index} lat={step.fix.latitude} lon={step.fix.longitude} "
                f"{format_distance(step.snapshot.distance_m)} {format_elapsed(step.snapshot.elapsed_s)} "
                f"{format_fare(step.snapshot.fare, tariff.currency)}{flag}"
            )
        print()

    if args.json:
        payload = {
            "distance_m": result.summary.distance_m,
            "distance_km": round(result.summary.distance_km, 3),
            "elapsed_s": result.summary.elapsed_s,
            "fare": result.summary.fare,
            "currency": tariff.currency,
            "fixes": summary.rows_parsed,
            "dropped": result.dropped,
            "start_ms": result.start_ms,
            "end_ms": result.end_ms,
            "tariff": {
                "base_fare": tariff.base_fare,
                "per_km": tariff.per_km,
                "per_minute": tariff.per_minute,
            },
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def _cmd_quote(args: argparse.Namespace) -> int:
    if args.distance_km < 0 or args.minutes < 0:
        print("距离和时长不能为负数", file=sys.stderr)
        return 2
    tariff = _tariff_from_args(args)
    fare = quote(args.distance_km, args.minutes, tariff)
    print(
        f"distance={args.distance_km:.2f} km, minutes={args.minutes:g}, "
        f"fare={format_fare(fare, tariff.currency)}"
    )
    return 0


def _add_tariff_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--tariff", type=str, default=None, help="费率JSON文件（base_fare/per_km/per_minute/currency）")
    p.add_argument("--base-fare", type=float, default=None, help="起步价（覆盖费率文件），默认 2.5")
    p.add_argument("--per-km", type=float, default=None, help="每公里价格（覆盖费率文件），默认 1.5")
    p.add_argument("--per-minute", type=float, default=None, help="每分钟价格（覆盖费率文件），默认 0.5")
    p.add_argument("--currency", type=str, default=None, help="货币标签，默认 DH")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="taxi_meter")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="日志级别",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_rep = sub.add_parser("replay", help="用记录的GPS轨迹CSV回放一次行程并计价")
    p_rep.add_argument("--csv", type=str, default="trip.csv", help="输入CSV路径（geoTime/latitude/longitude）")
    p_rep.add_argument("--tz", type=str, default=DEFAULT_TZ, help="时区（IANA），默认 Africa/Casablanca")
    p_rep.add_argument(
        "--fix-interval-ms",
        type=int,
        default=DEFAULT_FIX_INTERVAL_MS,
        help="没有 geoTime 的行按该间隔（毫秒）推进时钟",
    )
    p_rep.add_argument("--steps", action="store_true", help="输出每个定位点之后的计价明细")
    p_rep.add_argument("--json", action="store_true", help="额外输出JSON（便于后处理）")
    _add_tariff_args(p_rep)
    p_rep.set_defaults(func=_cmd_replay)

    p_q = sub.add_parser("quote", help="按总距离/总时长估算车费")
    p_q.add_argument("--distance-km", type=float, required=True, help="总距离（公里）")
    p_q.add_argument("--minutes", type=float, required=True, help="总时长（分钟）")
    _add_tariff_args(p_q)
    p_q.set_defaults(func=_cmd_quote)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        return int(args.func(args))
    except (MeterError, OSError, KeyError, ValueError) as exc:
        logger.debug("command failed", exc_info=True)
        print(f"错误：{exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
