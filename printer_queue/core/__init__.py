from .config import SimulationConfig
from .errors import SimulationError, InvalidConfigurationError, InvariantViolationError
from .simulation import PrintQueueSimulation, SimulationReport, SimulationState

__all__ = [
    "SimulationConfig",
    "SimulationError",
    "InvalidConfigurationError",
    "InvariantViolationError",
    "PrintQueueSimulation",
    "SimulationReport",
    "SimulationState",
]
