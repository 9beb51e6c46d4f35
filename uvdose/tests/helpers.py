"""Forecast payload builders shared by the tests."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from uvdose.models.forecast import ClippedSeries, ExposureWindow

UTC_ZONE = ZoneInfo("UTC")

# Three hourly segments ending exactly at local midnight (UTC).
SCENARIO_TIMES = [
    "2026-06-01T21:00",
    "2026-06-01T22:00",
    "2026-06-01T23:00",
    "2026-06-02T00:00",
]
SCENARIO_UV = [0, 6, 8, 0]
SCENARIO_NOW = datetime(2026, 6, 1, 21, 0, 0, tzinfo=UTC)
# (0+6)/2*0.025*3600/100 + (6+8)/2*0.025*3600/100 + (8+0)/2*0.025*3600/100 SED
SCENARIO_DOSE_SED = 2.7 + 6.3 + 3.6


def make_payload(times, uv_index, timezone="UTC") -> dict:
    payload = {
        "latitude": 59.33,
        "longitude": 18.07,
        "hourly_units": {"time": "iso8601", "uv_index": ""},
        "hourly": {"time": list(times), "uv_index": list(uv_index)},
    }
    if timezone is not None:
        payload["timezone"] = timezone
    return payload


def hourly_times(start: datetime, hours: int) -> list[str]:
    """Naive local ISO timestamps, one per hour, as Open-Meteo returns them."""
    return [
        datetime.fromtimestamp(start.timestamp() + 3600 * h, tz=start.tzinfo)
        .replace(tzinfo=None)
        .isoformat(timespec="minutes")
        for h in range(hours)
    ]


def make_clipped(timestamps, uv_index) -> ClippedSeries:
    """ClippedSeries over epoch seconds, windowed from first to last sample."""
    window = ExposureWindow(
        start=datetime.fromtimestamp(timestamps[0], tz=UTC),
        end=datetime.fromtimestamp(timestamps[-1], tz=UTC),
    )
    return ClippedSeries(
        zone=UTC_ZONE,
        window=window,
        timestamps=tuple(float(t) for t in timestamps),
        uv_index=tuple(float(u) for u in uv_index),
    )


def random_series(rng, n_max: int = 30, uv_max: float = 12.0):
    """Random strictly increasing epoch timestamps with non-negative UV."""
    n = rng.randint(2, n_max)
    t = 1_780_000_000.0
    stamps, values = [], []
    for _ in range(n):
        stamps.append(t)
        values.append(0.0 if rng.random() < 0.2 else rng.uniform(0.0, uv_max))
        t += rng.uniform(60.0, 7200.0)
    return stamps, values
