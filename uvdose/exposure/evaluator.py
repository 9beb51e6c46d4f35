"""Exposure evaluator: percent of the safe limit used by going out now, and
the earliest time it becomes safe to go out for the rest of the day."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from uvdose.config.schema import UvDoseConfig
from uvdose.dose.model import DoseModel
from uvdose.exposure.skin import freeze_med_table, parse_skin_type, threshold_sed
from uvdose.ingest.normalizer import exposure_window, normalize, read_forecast_series
from uvdose.models.common import DEFAULT_MED_SED, MedTable, SkinType
from uvdose.models.errors import InsufficientForecastData
from uvdose.models.exposure import (
    Evaluation,
    ExposureReport,
    InsufficientDataPolicy,
    SafeTimeReport,
    SafeTimeStatus,
)
from uvdose.models.forecast import ClippedSeries, ExposureWindow, ForecastSeries

logger = logging.getLogger(__name__)

DEFAULT_PRECISION_SECONDS = 60.0


@dataclass(frozen=True)
class _Prepared:
    series: ForecastSeries
    window: ExposureWindow
    clipped: ClippedSeries
    model: DoseModel | None  # None when the series is exhausted

    def dose_from_now(self) -> float:
        if self.model is None:
            return 0.0
        return self.model.dose_from_timestamp(self.window.start_ts)


class ExposureEvaluator:
    def __init__(
        self,
        med_table: MedTable = DEFAULT_MED_SED,
        insufficient_data: InsufficientDataPolicy = InsufficientDataPolicy.ASSUME_SAFE,
    ):
        self.med_table = med_table
        self.insufficient_data = InsufficientDataPolicy(insufficient_data)

    @classmethod
    def from_config(cls, config: UvDoseConfig) -> "ExposureEvaluator":
        return cls(
            med_table=freeze_med_table(config.med_sed),
            insufficient_data=config.exposure.insufficient_data,
        )

    def percent_exposure_if_outside_now(
        self,
        forecast: Any,
        skin_type: SkinType | str = SkinType.III,
        margin_fraction: float = 1.0,
        now: datetime | None = None,
    ) -> ExposureReport:
        """Percent of the limit used by going out now and staying until midnight.

        The percent is not clamped; above 100 means the limit is exceeded.
        """
        threshold = threshold_sed(skin_type, margin_fraction, self.med_table)
        prepared = self._prepare(forecast, now)
        return self._exposure_report(prepared, skin_type, margin_fraction, threshold)

    def safe_start_time_for_rest_of_day(
        self,
        forecast: Any,
        skin_type: SkinType | str = SkinType.III,
        margin_fraction: float = 1.0,
        precision_seconds: float = DEFAULT_PRECISION_SECONDS,
        now: datetime | None = None,
    ) -> SafeTimeReport:
        """Earliest time to go out and stay out until midnight within the limit.

        Returns status ``right_now`` when going out now is already within the
        limit, otherwise ``later`` with a safe instant no more than
        ``precision_seconds`` after the true crossing.
        """
        if not precision_seconds > 0:
            raise ValueError(
                f"precision_seconds must be positive, got {precision_seconds}"
            )
        threshold = threshold_sed(skin_type, margin_fraction, self.med_table)
        prepared = self._prepare(forecast, now)
        return self._safe_time_report(prepared, threshold, precision_seconds)

    def evaluate(
        self,
        forecast: Any,
        skin_type: SkinType | str = SkinType.III,
        margin_fraction: float = 1.0,
        precision_seconds: float = DEFAULT_PRECISION_SECONDS,
        now: datetime | None = None,
    ) -> Evaluation:
        """Answer both questions against a single clock read and dose model."""
        if not precision_seconds > 0:
            raise ValueError(
                f"precision_seconds must be positive, got {precision_seconds}"
            )
        threshold = threshold_sed(skin_type, margin_fraction, self.med_table)
        prepared = self._prepare(forecast, now)
        return Evaluation(
            exposure=self._exposure_report(
                prepared, skin_type, margin_fraction, threshold
            ),
            safe_time=self._safe_time_report(prepared, threshold, precision_seconds),
        )

    def _prepare(self, forecast: Any, now: datetime | None) -> _Prepared:
        if isinstance(forecast, ForecastSeries):
            series = forecast
        else:
            series = read_forecast_series(forecast)
        window = exposure_window(series.zone, now)
        clipped = normalize(series, window)

        if clipped.is_exhausted:
            if self.insufficient_data == InsufficientDataPolicy.FAIL:
                raise InsufficientForecastData(
                    f"Forecast for {series.zone_name} does not cover "
                    f"{window.start.isoformat()}..{window.end.isoformat()}"
                )
            logger.warning(
                "Forecast for %s does not cover %s..%s, assuming zero dose",
                series.zone_name, window.start.isoformat(), window.end.isoformat(),
            )
            return _Prepared(series, window, clipped, None)

        return _Prepared(series, window, clipped, DoseModel(clipped))

    def _exposure_report(
        self,
        prepared: _Prepared,
        skin_type: SkinType | str,
        margin_fraction: float,
        threshold: float,
    ) -> ExposureReport:
        dose = prepared.dose_from_now()
        return ExposureReport(
            zone=prepared.series.zone_name,
            window_start=prepared.window.start.isoformat(),
            window_end=prepared.window.end.isoformat(),
            skin_type=parse_skin_type(skin_type),
            margin_fraction=margin_fraction,
            dose_sed=dose,
            threshold_sed=threshold,
            percent=dose / threshold * 100,
        )

    def _safe_time_report(
        self, prepared: _Prepared, threshold: float, precision_seconds: float
    ) -> SafeTimeReport:
        zone = prepared.series.zone
        window = prepared.window

        if prepared.model is None or prepared.dose_from_now() <= threshold:
            return SafeTimeReport(
                status=SafeTimeStatus.RIGHT_NOW,
                safe_time=window.start.isoformat(),
                zone=zone.key,
            )

        safe_ts = earliest_safe_timestamp(
            prepared.model, window.start_ts, window.end_ts, threshold,
            precision_seconds,
        )
        return SafeTimeReport(
            status=SafeTimeStatus.LATER,
            safe_time=datetime.fromtimestamp(safe_ts, tz=zone).isoformat(),
            zone=zone.key,
        )


def earliest_safe_timestamp(
    model: DoseModel,
    lo: float,
    hi: float,
    threshold: float,
    precision_seconds: float,
) -> float:
    """Bisect for the earliest start time whose remaining dose is within threshold.

    Requires dose_from(lo) > threshold and dose_from(hi) <= threshold; both
    hold for every iteration, so the returned ``hi`` is always safe.
    Remaining dose is non-increasing in the start time because UV index is
    non-negative.
    """
    steps = 0
    while hi - lo > precision_seconds:
        mid = lo + (hi - lo) / 2
        if model.dose_from_timestamp(mid) <= threshold:
            hi = mid
        else:
            lo = mid
        steps += 1
    logger.debug("Safe-time search converged in %d steps", steps)
    return hi


_default_evaluator = ExposureEvaluator()


def percent_exposure_if_outside_now(
    forecast: Any,
    skin_type: SkinType | str = SkinType.III,
    margin_fraction: float = 1.0,
    now: datetime | None = None,
) -> ExposureReport:
    return _default_evaluator.percent_exposure_if_outside_now(
        forecast, skin_type, margin_fraction, now
    )


def safe_start_time_for_rest_of_day(
    forecast: Any,
    skin_type: SkinType | str = SkinType.III,
    margin_fraction: float = 1.0,
    precision_seconds: float = DEFAULT_PRECISION_SECONDS,
    now: datetime | None = None,
) -> SafeTimeReport:
    return _default_evaluator.safe_start_time_for_rest_of_day(
        forecast, skin_type, margin_fraction, precision_seconds, now
    )


def evaluate(
    forecast: Any,
    skin_type: SkinType | str = SkinType.III,
    margin_fraction: float = 1.0,
    precision_seconds: float = DEFAULT_PRECISION_SECONDS,
    now: datetime | None = None,
) -> Evaluation:
    return _default_evaluator.evaluate(
        forecast, skin_type, margin_fraction, precision_seconds, now
    )
