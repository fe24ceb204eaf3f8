class SimulationError(Exception):
    """Custom exception for simulation errors"""
    pass


class InvalidConfigurationError(SimulationError, ValueError):
    """Raised when simulation settings cannot produce a valid run."""
    pass


class InvariantViolationError(SimulationError):
    """Raised when printer or clock bookkeeping reaches an impossible state."""
    pass
