from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional
import os
import yaml

from .errors import InvalidConfigurationError

MILLISECONDS_PER_SECOND = 1000
SECONDS_PER_MINUTE = 60
MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24
MILLISECONDS_PER_DAY = MILLISECONDS_PER_SECOND * SECONDS_PER_MINUTE * MINUTES_PER_HOUR * HOURS_PER_DAY
SHEETS_PER_MINUTE = 7
MILLISECONDS_PER_SHEET = MILLISECONDS_PER_SECOND * SECONDS_PER_MINUTE // SHEETS_PER_MINUTE


POSITIVE_INT_FIELDS = (
    "printer_count",
    "simulation_speed",
    "seconds_to_simulate",
    "job_interval_seconds",
    "sheets_per_minute",
)


def _is_int(value) -> bool:
    # bool is an int subclass, but `printer_count: yes` is not a count
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class SimulationConfig:
    printer_count: int = 4
    simulation_speed: int = 300  # simulated seconds per real second
    seconds_to_simulate: int = SECONDS_PER_MINUTE * 30
    job_interval_seconds: int = 30
    sheets_per_minute: int = SHEETS_PER_MINUTE
    seed: Optional[int] = None
    tick_sleep_ms: float = 1.0

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        for name in POSITIVE_INT_FIELDS:
            value = getattr(self, name)
            if not _is_int(value):
                raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidConfigurationError(f"{name} must be positive, got {value}")
        if self.seed is not None and not _is_int(self.seed):
            raise InvalidConfigurationError(f"seed must be an integer or empty, got {self.seed!r}")
        if isinstance(self.tick_sleep_ms, bool) or not isinstance(self.tick_sleep_ms, (int, float)):
            raise InvalidConfigurationError(f"tick_sleep_ms must be a number, got {self.tick_sleep_ms!r}")
        if self.tick_sleep_ms < 0:
            raise InvalidConfigurationError(f"tick_sleep_ms must not be negative, got {self.tick_sleep_ms}")

    @property
    def milliseconds_per_sheet(self) -> int:
        return MILLISECONDS_PER_SECOND * SECONDS_PER_MINUTE // self.sheets_per_minute

    @property
    def job_interval_ms(self) -> int:
        return self.job_interval_seconds * MILLISECONDS_PER_SECOND

    @property
    def duration_ms(self) -> int:
        return self.seconds_to_simulate * MILLISECONDS_PER_SECOND

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Optional[Dict[str, Any]]) -> 'SimulationConfig':
        """Build a config from a plain mapping, rejecting keys the simulation does not know."""
        data = data or {}
        known = {f.name for f in fields(SimulationConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return SimulationConfig(**data)

    @staticmethod
    def from_yaml(path: str) -> 'SimulationConfig':
        """Load a config from a YAML file.

        The file may hold the settings at top level or under a ``simulation`` key.
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise InvalidConfigurationError(f"Cannot read configuration file {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise InvalidConfigurationError(f"Configuration file {path} must contain a mapping")
        if data and 'simulation' in data:
            data = data['simulation']
            if data is not None and not isinstance(data, dict):
                raise InvalidConfigurationError(f"The simulation section of {path} must be a mapping")
        return SimulationConfig.from_dict(data)


def create_sample_config(path: str = "printer_queue_config_sample.yaml") -> str:
    """Write a sample configuration file holding the default settings."""
    sample_config = {"simulation": SimulationConfig().to_dict()}

    with open(path, "w", encoding='utf-8') as f:
        yaml.dump(sample_config, f, default_flow_style=False, indent=2)

    return path
