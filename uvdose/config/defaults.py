"""Default configuration values."""

from uvdose.models.common import DEFAULT_MED_SED

DEFAULT_CONFIG_PATH = "ops/configs/default.yaml"

# Plain-string keys so the table round-trips through YAML and JSON.
DEFAULT_MED_TABLE: dict[str, float] = {
    str(skin_type): med for skin_type, med in DEFAULT_MED_SED.items()
}
