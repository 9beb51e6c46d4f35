"""Forecast series and exposure window models."""

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class ForecastSeries:
    zone: ZoneInfo
    times: tuple[datetime, ...]  # aware, in zone, strictly increasing
    uv_index: tuple[float, ...]

    @property
    def zone_name(self) -> str:
        return self.zone.key

    def __len__(self) -> int:
        return len(self.times)


@dataclass(frozen=True)
class ExposureWindow:
    """Half-open interval [start, end) ending at the next local midnight."""

    start: datetime
    end: datetime

    @property
    def start_ts(self) -> float:
        return self.start.timestamp()

    @property
    def end_ts(self) -> float:
        return self.end.timestamp()

    @property
    def duration_seconds(self) -> float:
        return self.end_ts - self.start_ts


@dataclass(frozen=True)
class ClippedSeries:
    """Series restricted to an exposure window.

    Timestamps are epoch seconds so that durations stay correct across
    DST transitions. The last timestamp equals ``window.end_ts`` unless the
    series is exhausted.
    """

    zone: ZoneInfo
    window: ExposureWindow
    timestamps: tuple[float, ...]
    uv_index: tuple[float, ...]

    @property
    def is_exhausted(self) -> bool:
        return len(self.timestamps) < 2
