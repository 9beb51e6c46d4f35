"""Series normalizer: validates hourly UV forecasts and clips them to the
rest-of-day exposure window."""

import logging
import math
from bisect import bisect_left
from datetime import datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from uvdose.models.common import utc_now
from uvdose.models.errors import InvalidForecastData
from uvdose.models.forecast import ClippedSeries, ExposureWindow, ForecastSeries

logger = logging.getLogger(__name__)

DEFAULT_ZONE = "UTC"


def read_forecast_series(payload: Any) -> ForecastSeries:
    """Validate an Open-Meteo style hourly payload and build a ForecastSeries.

    Expects ``hourly.time`` and a parallel ``hourly.uv_index``, both of
    length >= 2. ``timezone`` is optional and defaults to UTC.

    Raises:
        InvalidForecastData: if any precondition on the payload fails.
    """
    if not isinstance(payload, dict):
        raise InvalidForecastData("Bad input: forecast payload must be a mapping")

    zone = _resolve_zone(payload.get("timezone"))
    hourly = payload.get("hourly")
    if not isinstance(hourly, dict):
        raise InvalidForecastData("Bad input: hourly section is missing")

    raw_times = hourly.get("time")
    raw_values = hourly.get("uv_index")
    if not isinstance(raw_times, list) or not isinstance(raw_values, list):
        raise InvalidForecastData(
            "Bad input: hourly.time and hourly.uv_index must both be lists"
        )
    if len(raw_times) < 2 or len(raw_values) != len(raw_times):
        raise InvalidForecastData(
            "Bad input: hourly.time and hourly.uv_index must exist and have "
            f"same length >= 2 (got {len(raw_times)} and {len(raw_values)})"
        )

    times = tuple(_parse_time(t, zone) for t in raw_times)
    values = tuple(_parse_uv(v, i) for i, v in enumerate(raw_values))

    for i in range(1, len(times)):
        if times[i].timestamp() <= times[i - 1].timestamp():
            raise InvalidForecastData(
                f"Bad input: hourly.time must be strictly increasing "
                f"({raw_times[i - 1]} -> {raw_times[i]})"
            )

    return ForecastSeries(zone=zone, times=times, uv_index=values)


def exposure_window(zone: ZoneInfo, now: datetime | None = None) -> ExposureWindow:
    """Return [now, next local midnight) in the given zone."""
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    local_now = now.astimezone(zone)
    midnight = datetime.combine(
        local_now.date() + timedelta(days=1), time(0), tzinfo=zone
    )
    # Midnight can fall in a DST gap; relabel with the real local time
    end = datetime.fromtimestamp(midnight.timestamp(), tz=zone)
    return ExposureWindow(start=local_now, end=end)


def normalize(series: ForecastSeries, window: ExposureWindow) -> ClippedSeries:
    """Clip a forecast series to the exposure window.

    Keeps the sample just before ``window.start`` so the bracketing segment
    can be interpolated. The last sample is moved to exactly
    ``window.end``: hours past the end of the forecast are padded with a
    zero UV sample, and a sample past the window end is replaced by a
    linearly interpolated one.
    """
    stamps = [t.timestamp() for t in series.times]
    start_ts, end_ts = window.start_ts, window.end_ts

    first_after_now = bisect_left(stamps, start_ts)
    if first_after_now == len(stamps) or stamps[0] >= end_ts:
        logger.debug(
            "Forecast %s..%s does not cover window %s..%s",
            series.times[0].isoformat(), series.times[-1].isoformat(),
            window.start.isoformat(), window.end.isoformat(),
        )
        return _exhausted(series, window)

    lo = max(first_after_now - 1, 0)
    hi = bisect_left(stamps, end_ts, lo=lo)
    ts = stamps[lo:hi + 1]
    uv = list(series.uv_index[lo:hi + 1])

    if ts[-1] < end_ts:
        ts.append(end_ts)
        uv.append(0.0)
    elif ts[-1] > end_ts:
        t0, t1 = ts[-2], ts[-1]
        u0, u1 = uv[-2], uv[-1]
        ts[-1] = end_ts
        uv[-1] = u0 + (u1 - u0) * (end_ts - t0) / (t1 - t0)

    logger.debug(
        "Clipped %d samples to %d for window %s..%s",
        len(stamps), len(ts), window.start.isoformat(), window.end.isoformat(),
    )
    return ClippedSeries(
        zone=series.zone,
        window=window,
        timestamps=tuple(ts),
        uv_index=tuple(uv),
    )


def _exhausted(series: ForecastSeries, window: ExposureWindow) -> ClippedSeries:
    return ClippedSeries(
        zone=series.zone, window=window, timestamps=(), uv_index=()
    )


def _resolve_zone(name: Any) -> ZoneInfo:
    if name is None or name == "":
        name = DEFAULT_ZONE
    if not isinstance(name, str):
        raise InvalidForecastData(f"Bad input: timezone must be a string, got {name!r}")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidForecastData(f"Bad input: unknown timezone {name!r}") from e


def _parse_time(raw: Any, zone: ZoneInfo) -> datetime:
    """Parse a local ISO timestamp; naive values are wall-clock time in zone."""
    try:
        dt = datetime.fromisoformat(raw)
    except (ValueError, TypeError) as e:
        raise InvalidForecastData(f"Bad input: unparsable timestamp {raw!r}") from e
    if dt.tzinfo is None:
        return dt.replace(tzinfo=zone)
    return dt.astimezone(zone)


def _parse_uv(raw: Any, index: int) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise InvalidForecastData(
            f"Bad input: hourly.uv_index[{index}] must be a number, got {raw!r}"
        )
    value = float(raw)
    if math.isnan(value) or value < 0:
        raise InvalidForecastData(
            f"Bad input: hourly.uv_index[{index}] must be non-negative, got {raw!r}"
        )
    return value
