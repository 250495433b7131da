class SimulationError(Exception):
    """Base class for every error raised by the simulation core."""


class ConfigurationError(SimulationError):
    """Raised at construction time for malformed phases, parameters or scenarios."""


class TickError(SimulationError):
    """Raised when the tick driver violates the step contract (e.g. negative elapsed time)."""
