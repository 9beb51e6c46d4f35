"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, field_validator

from uvdose.models.common import SkinType
from uvdose.models.exposure import InsufficientDataPolicy


class ExposureConfig(BaseModel):
    model_config = {"extra": "forbid"}

    skin_type: SkinType = SkinType.III
    margin_fraction: float = Field(default=1.0, gt=0.0, le=1.0)
    precision_seconds: float = Field(default=60.0, gt=0.0)
    insufficient_data: InsufficientDataPolicy = InsufficientDataPolicy.ASSUME_SAFE


class UvDoseConfig(BaseModel):
    model_config = {"extra": "forbid"}

    exposure: ExposureConfig = ExposureConfig()
    # MED per skin type in SED
    med_sed: dict[SkinType, float] = {}

    @field_validator("med_sed")
    @classmethod
    def _med_positive(cls, v: dict[SkinType, float]) -> dict[SkinType, float]:
        for skin_type, med in v.items():
            if med <= 0:
                raise ValueError(f"MED for skin type {skin_type} must be positive")
        return v
