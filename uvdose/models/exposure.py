"""Exposure evaluation result models."""

from dataclasses import asdict, dataclass
from enum import StrEnum

from uvdose.models.common import SkinType


class SafeTimeStatus(StrEnum):
    RIGHT_NOW = "right_now"
    LATER = "later"


class InsufficientDataPolicy(StrEnum):
    ASSUME_SAFE = "assume_safe"
    FAIL = "fail"


@dataclass(frozen=True)
class ExposureReport:
    zone: str
    window_start: str  # ISO-8601, in zone
    window_end: str
    skin_type: SkinType
    margin_fraction: float
    dose_sed: float
    threshold_sed: float
    percent: float  # unclamped; > 100 means the limit is exceeded

    @property
    def exceeds_limit(self) -> bool:
        return self.percent > 100.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SafeTimeReport:
    status: SafeTimeStatus
    safe_time: str  # ISO-8601, in zone
    zone: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Evaluation:
    """Both answers computed against the same exposure window."""

    exposure: ExposureReport
    safe_time: SafeTimeReport

    def to_dict(self) -> dict:
        return {
            "exposure": self.exposure.to_dict(),
            "safe_time": self.safe_time.to_dict(),
        }
