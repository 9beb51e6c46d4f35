"""Shared test fixtures."""

from datetime import datetime
from pathlib import Path

import pytest
import yaml

from uvdose.config.schema import UvDoseConfig
from uvdose.tests.helpers import SCENARIO_NOW, SCENARIO_TIMES, SCENARIO_UV, make_payload


@pytest.fixture
def scenario_payload() -> dict:
    return make_payload(SCENARIO_TIMES, SCENARIO_UV)


@pytest.fixture
def scenario_now() -> datetime:
    return SCENARIO_NOW


@pytest.fixture
def default_config() -> UvDoseConfig:
    return UvDoseConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "exposure": {"skin_type": "II", "margin_fraction": 0.75},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
