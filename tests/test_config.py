import pytest
import yaml

from printer_queue.core.config import SimulationConfig, create_sample_config
from printer_queue.core.errors import InvalidConfigurationError, SimulationError


def test_defaults():
    config = SimulationConfig()
    assert config.printer_count == 4
    assert config.simulation_speed == 300
    assert config.seconds_to_simulate == 1800
    assert config.job_interval_seconds == 30
    assert config.sheets_per_minute == 7
    assert config.milliseconds_per_sheet == 8571
    assert config.job_interval_ms == 30_000
    assert config.duration_ms == 1_800_000


@pytest.mark.parametrize("field, value", [
    ("printer_count", 0),
    ("printer_count", -2),
    ("simulation_speed", 0),
    ("seconds_to_simulate", 0),
    ("job_interval_seconds", 0),
    ("sheets_per_minute", -1),
    ("tick_sleep_ms", -0.5),
])
def test_invalid_values_fail_fast(field, value):
    with pytest.raises(InvalidConfigurationError):
        SimulationConfig(**{field: value})


def test_invalid_configuration_is_a_value_error():
    assert issubclass(InvalidConfigurationError, ValueError)
    assert issubclass(InvalidConfigurationError, SimulationError)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(InvalidConfigurationError, match="printers"):
        SimulationConfig.from_dict({"printers": 3})


def test_from_dict_empty_uses_defaults():
    assert SimulationConfig.from_dict(None) == SimulationConfig()


def test_from_yaml_top_level(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("printer_count: 2\nseed: 99\n", encoding="utf-8")
    config = SimulationConfig.from_yaml(str(path))
    assert config.printer_count == 2
    assert config.seed == 99


def test_from_yaml_simulation_section(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"simulation": {"simulation_speed": 600}}), encoding="utf-8")
    assert SimulationConfig.from_yaml(str(path)).simulation_speed == 600


def test_from_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        SimulationConfig.from_yaml(str(tmp_path / "missing.yaml"))


def test_from_yaml_rejects_non_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(InvalidConfigurationError):
        SimulationConfig.from_yaml(str(path))


def test_sample_config_round_trips(tmp_path):
    path = create_sample_config(str(tmp_path / "sample.yaml"))
    assert SimulationConfig.from_yaml(path) == SimulationConfig()


@pytest.mark.parametrize("field, value", [
    ("printer_count", "4"),
    ("printer_count", True),
    ("printer_count", 2.0),
    ("simulation_speed", 2.5),
    ("seconds_to_simulate", "1800"),
    ("job_interval_seconds", 30.5),
    ("sheets_per_minute", 7.5),
    ("sheets_per_minute", None),
    ("seed", "42"),
    ("seed", 1.5),
    ("seed", False),
    ("tick_sleep_ms", "1"),
    ("tick_sleep_ms", True),
    ("tick_sleep_ms", None),
])
def test_wrong_value_types_fail_fast(field, value):
    with pytest.raises(InvalidConfigurationError, match=field):
        SimulationConfig(**{field: value})


def test_integer_sleep_is_accepted():
    assert SimulationConfig(tick_sleep_ms=0).tick_sleep_ms == 0


def test_from_yaml_float_speed_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("simulation_speed: 2.5\n", encoding="utf-8")
    with pytest.raises(InvalidConfigurationError, match="simulation_speed must be an integer"):
        SimulationConfig.from_yaml(str(path))


def test_from_yaml_malformed_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("printer_count: [1\n", encoding="utf-8")
    with pytest.raises(InvalidConfigurationError, match="Cannot read configuration file"):
        SimulationConfig.from_yaml(str(path))


def test_from_yaml_directory_path(tmp_path):
    with pytest.raises(InvalidConfigurationError, match="Cannot read configuration file"):
        SimulationConfig.from_yaml(str(tmp_path))


def test_from_yaml_rejects_non_mapping_section(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("simulation: 5\n", encoding="utf-8")
    with pytest.raises(InvalidConfigurationError, match="simulation section"):
        SimulationConfig.from_yaml(str(path))
