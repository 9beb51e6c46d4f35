"""Tests for config loading and get/set."""

from pathlib import Path

import pytest
import yaml

from uvdose.config.defaults import DEFAULT_CONFIG_PATH, DEFAULT_MED_TABLE
from uvdose.config.loader import (
    config_hash,
    get_config_value,
    load_config,
    set_config_value,
)
from uvdose.config.schema import UvDoseConfig
from uvdose.models.common import SkinType


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.exposure.skin_type == SkinType.II
        assert config.exposure.margin_fraction == 0.75

    def test_default_med_table_injected(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert len(config.med_sed) == len(DEFAULT_MED_TABLE)
        assert config.med_sed[SkinType.III] == 4.5

    def test_partial_med_table_merged(self, tmp_path: Path):
        path = tmp_path / "custom.yaml"
        with open(path, "w") as f:
            yaml.dump({"med_sed": {"II": 3.0}}, f)
        config = load_config(path)
        assert config.med_sed[SkinType.II] == 3.0
        assert config.med_sed[SkinType.I] == 2.5

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.exposure.skin_type == SkinType.III
        assert len(config.med_sed) == len(DEFAULT_MED_TABLE)

    def test_fixtures_config(self, fixtures_dir: Path):
        config = load_config(fixtures_dir / "config_default.yaml")
        assert config.exposure.precision_seconds == 60.0
        assert config.med_sed[SkinType.II] == 3.0

    def test_shipped_default_config(self):
        path = Path(__file__).resolve().parents[3] / DEFAULT_CONFIG_PATH
        config = load_config(path)
        assert dict(config.med_sed) == {SkinType(k): v for k, v in DEFAULT_MED_TABLE.items()}

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")


class TestConfigHash:
    def test_deterministic(self):
        assert config_hash(UvDoseConfig()) == config_hash(UvDoseConfig())

    def test_changes_with_content(self):
        a = UvDoseConfig()
        b = UvDoseConfig(exposure={"margin_fraction": 0.5})
        assert config_hash(a) != config_hash(b)


class TestGetSetConfigValue:
    def test_get_nested(self, default_config: UvDoseConfig):
        assert get_config_value(default_config, "exposure.margin_fraction") == 1.0

    def test_get_med_entry(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config = load_config(path)
        assert get_config_value(config, "med_sed.IV") == 6.0

    def test_get_missing_key(self, default_config: UvDoseConfig):
        with pytest.raises(KeyError):
            get_config_value(default_config, "exposure.nope")

    def test_set_coerces_float(self, default_config: UvDoseConfig):
        new = set_config_value(default_config, "exposure.margin_fraction", "0.5")
        assert new.exposure.margin_fraction == 0.5
        assert default_config.exposure.margin_fraction == 1.0

    def test_set_enum(self, default_config: UvDoseConfig):
        new = set_config_value(default_config, "exposure.skin_type", "V")
        assert new.exposure.skin_type == SkinType.V

    def test_set_revalidates(self, default_config: UvDoseConfig):
        with pytest.raises(ValueError):
            set_config_value(default_config, "exposure.margin_fraction", "2.0")
