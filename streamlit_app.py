from __future__ import annotations

from pathlib import Path

import streamlit as st

from taxi_meter.config import DEFAULT_BASE_FARE, DEFAULT_PER_KM, DEFAULT_PER_MINUTE, load_tariff
from taxi_meter.csv_io import load_position_fixes
from taxi_meter.errors import MeterError
from taxi_meter.formatting import format_distance, format_elapsed, format_fare, ride_summary
from taxi_meter.models import DEFAULT_CURRENCY, DEFAULT_TZ, FareTariff, PositionFix
from taxi_meter.replay import DEFAULT_FIX_INTERVAL_MS, ReplayResult, replay_trip
from taxi_meter.timeutils import dt_from_epoch_ms


@st.cache_data(show_spinner=False)
def _load_fixes(trip_csv: str, mtime: float) -> tuple[list[PositionFix], int]:
    _ = mtime  # part of cache key so updated files reload automatically
    fixes, summary = load_position_fixes(trip_csv)
    return fixes, summary.rows_skipped


def _tariff_from_sidebar() -> FareTariff | None:
    st.subheader("费率")
    tariff_file = st.text_input("费率JSON文件（可选，留空使用下方数值）", value="")
    if tariff_file.strip():
        try:
            return load_tariff(tariff_file.strip())
        except (MeterError, OSError) as exc:
            st.error(f"费率文件无法使用：{exc}")
            return None

    base_fare = st.number_input("起步价 base_fare", value=DEFAULT_BASE_FARE, min_value=0.0, step=0.5)
    per_km = st.number_input("每公里 per_km", value=DEFAULT_PER_KM, min_value=0.0, step=0.1)
    per_minute = st.number_input("每分钟 per_minute", value=DEFAULT_PER_MINUTE, min_value=0.0, step=0.1)
    currency = st.text_input("货币", value=DEFAULT_CURRENCY)
    try:
        return FareTariff(
            base_fare=float(base_fare),
            per_km=float(per_km),
            per_minute=float(per_minute),
            currency=currency,
        )
    except MeterError as exc:
        st.error(str(exc))
        return None


def _render_result(result: ReplayResult, tariff: FareTariff, tz_name: str) -> None:
    snap = result.summary

    st.subheader("计价器")
    c1, c2, c3 = st.columns(3)
    c1.metric("距离", format_distance(snap.distance_m))
    c2.metric("时间", format_elapsed(snap.elapsed_s))
    c3.metric("车费", format_fare(snap.fare, tariff.currency))

    if result.dropped:
        st.warning(f"有 {result.dropped} 个定位点坐标无效，已被计价器丢弃。")

    started_at = ended_at = None
    if result.start_ms and result.end_ms:
        started_at = dt_from_epoch_ms(result.start_ms, tz_name)
        ended_at = dt_from_epoch_ms(result.end_ms, tz_name)
    with st.expander("行程小结（小票）", expanded=True):
        st.code(ride_summary(snap, tariff.currency, started_at=started_at, ended_at=ended_at))

    if not result.steps:
        return

    st.subheader("车费随时间变化")
    st.line_chart(
        {
            "elapsed_min": [s.snapshot.elapsed_minutes for s in result.steps],
            "fare": [s.snapshot.fare for s in result.steps],
        },
        x="elapsed_min",
        y="fare",
    )

    st.subheader("轨迹")
    kept = [s for s in result.steps if not s.dropped]
    if kept:
        st.map({"lat": [s.fix.latitude for s in kept], "lon": [s.fix.longitude for s in kept]})

    st.subheader("逐点明细")
    rows = [
        {
            "index": s.index,
            "latitude": s.fix.latitude,
            "longitude": s.fix.longitude,
            "distance_m": round(s.snapshot.distance_m, 1),
            "elapsed": format_elapsed(s.snapshot.elapsed_s),
            "fare": s.snapshot.fare,
            "dropped": s.dropped,
        }
        for s in result.steps
    ]
    st.dataframe(rows, use_container_width=True, height=420)


def main() -> None:
    st.set_page_config(page_title="出租车计价器：轨迹回放", layout="wide")
    st.title("出租车计价器：用GPS轨迹回放一次行程")

    with st.sidebar:
        st.subheader("数据与时区")
        tz_name = st.text_input("时区（IANA）", value=DEFAULT_TZ)
        trip_csv = st.text_input("轨迹CSV路径", value="trip.csv")
        fix_interval_ms = st.number_input(
            "无 geoTime 时的定位间隔（毫秒）", value=DEFAULT_FIX_INTERVAL_MS, min_value=0, step=500
        )
        tariff = _tariff_from_sidebar()

    p = Path(trip_csv)
    if not p.exists():
        st.error(f"找不到文件：{trip_csv!r}。可以用 scripts/generate_sample_trip_csv.py 生成示例数据。")
        return
    if tariff is None:
        return

    try:
        fixes, skipped = _load_fixes(trip_csv, p.stat().st_mtime)
    except (KeyError, OSError) as exc:
        st.exception(exc)
        return
    if skipped:
        st.caption(f"CSV中有 {skipped} 行解析失败已跳过。")

    result = replay_trip(fixes, tariff, fix_interval_ms=int(fix_interval_ms))
    _render_result(result, tariff, tz_name)

    st.caption(
        "说明：每个定位点先累计距离，再按该点的 geoTime 推进时钟并重新计价；车费 = 起步价 + 公里数×每公里 + 分钟数×每分钟，四舍五入到分。"
    )


if __name__ == "__main__":
    main()
