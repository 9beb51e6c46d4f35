"""YAML config loader with runtime get/set."""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from uvdose.config.defaults import DEFAULT_MED_TABLE
from uvdose.config.schema import UvDoseConfig


def load_config(path: str | Path) -> UvDoseConfig:
    """Load and validate config from a YAML file.

    Skin types missing from ``med_sed`` are filled from DEFAULT_MED_TABLE.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    raw["med_sed"] = {**DEFAULT_MED_TABLE, **(raw.get("med_sed") or {})}

    return UvDoseConfig(**raw)


def config_hash(config: UvDoseConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_config_value(config: UvDoseConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'exposure.margin_fraction'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, dict):
            if part not in obj:
                raise KeyError(f"Config key not found: {dotted_key}")
            obj = obj[part]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: UvDoseConfig, dotted_key: str, value: Any) -> UvDoseConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new UvDoseConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        if part not in target:
            raise KeyError(f"Config key not found: {dotted_key}")
        target = target[part]
    # Attempt type coercion for common cases
    old_value = target.get(parts[-1])
    if isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return UvDoseConfig(**data)
