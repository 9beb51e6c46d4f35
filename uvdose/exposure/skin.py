"""Skin type lookup and exposure threshold computation."""

from types import MappingProxyType
from typing import Mapping

from uvdose.models.common import DEFAULT_MED_SED, MedTable, SkinType
from uvdose.models.errors import UnknownSkinClass


def parse_skin_type(value: object) -> SkinType:
    """Coerce a skin type label ("III", SkinType.III) to a SkinType."""
    if isinstance(value, SkinType):
        return value
    try:
        return SkinType(str(value).strip().upper())
    except ValueError:
        raise UnknownSkinClass(value) from None


def freeze_med_table(overrides: Mapping | None = None) -> MedTable:
    """Build an immutable MED table, filling gaps from the defaults.

    Raises ValueError if any MED is not strictly positive.
    """
    table = dict(DEFAULT_MED_SED)
    for key, med in (overrides or {}).items():
        table[parse_skin_type(key)] = float(med)
    for skin_type, med in table.items():
        if not med > 0:
            raise ValueError(f"MED for skin type {skin_type} must be positive, got {med}")
    return MappingProxyType(table)


def threshold_sed(
    skin_type: object,
    margin_fraction: float,
    med_table: MedTable = DEFAULT_MED_SED,
) -> float:
    """Operative dose limit in SED: MED scaled by the safety margin.

    margin_fraction = 1.0 means 100% corresponds to the full MED; 0.75
    builds in a 25% safety buffer.
    """
    if not 0 < margin_fraction <= 1:
        raise ValueError(f"margin_fraction must be in (0, 1], got {margin_fraction}")
    st = parse_skin_type(skin_type)
    if st not in med_table:
        raise UnknownSkinClass(skin_type)
    return med_table[st] * margin_fraction
