"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping, TypeAlias


class SkinType(StrEnum):
    """Fitzpatrick-style skin sensitivity classes."""

    I = "I"  # noqa: E741
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VI = "VI"


MedTable: TypeAlias = Mapping[SkinType, float]

# Representative minimal erythema dose in SED (1 SED = 100 J/m²).
DEFAULT_MED_SED: MedTable = MappingProxyType({
    SkinType.I: 2.5,
    SkinType.II: 3.5,
    SkinType.III: 4.5,
    SkinType.IV: 6.0,
    SkinType.V: 8.0,
    SkinType.VI: 12.0,
})


def utc_now() -> datetime:
    return datetime.now(UTC)
