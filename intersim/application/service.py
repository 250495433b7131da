import logging
from collections import deque
from typing import Deque, Optional

from intersim.application.commands import Command
from intersim.domain.errors import ConfigurationError
from intersim.domain.layout import SCENARIOS
from intersim.domain.models import ScenarioConfig, SimulationStatus
from intersim.kernel.parameters import ParameterStore
from intersim.kernel.simulation_kernel import SimulationKernel

logger = logging.getLogger(__name__)


def resolve_scenario(name: Optional[str]) -> Optional[ScenarioConfig]:
    if name is None:
        return None
    if name not in SCENARIOS:
        raise ConfigurationError(f"unknown scenario '{name}', expected one of {sorted(SCENARIOS)}")
    return SCENARIOS[name]


class SimulationService:
    """Drives the kernel from a monotonic clock and applies queued control commands."""

    def __init__(self, kernel: Optional[SimulationKernel] = None,
                 parameters: Optional[ParameterStore] = None):
        self.kernel = kernel or SimulationKernel()
        self.parameters = parameters or ParameterStore()
        self.command_queue: Deque[Command] = deque()
        self.running = False
        self.last_timestamp_ms: Optional[float] = None

    def queue_command(self, command: Command):
        self.command_queue.append(command)

    def start(self):
        if not self.kernel.initialized:
            self.kernel.initialize()
        self.running = True
        self.last_timestamp_ms = None  # Taken from the next tick
        logger.info("Simulation started")

    def stop(self):
        self.running = False
        logger.info("Simulation stopped at tick %d", self.kernel.state.tick_id)

    def reset(self, seed: Optional[int] = None, scenario: Optional[str] = None):
        self.kernel.reset(seed=seed, scenario=resolve_scenario(scenario))
        self.last_timestamp_ms = None

    def tick(self, now_ms: float) -> bool:
        """Apply pending commands, then step by the time since the previous tick.

        Returns True when the kernel was stepped.
        """
        while self.command_queue:
            cmd = self.command_queue.popleft()
            cmd.execute(self)

        if not self.running:
            return False
        if self.last_timestamp_ms is None:
            self.last_timestamp_ms = now_ms
        elapsed = now_ms - self.last_timestamp_ms
        self.kernel.step(elapsed, self.parameters)
        self.last_timestamp_ms = now_ms
        return True

    def status(self) -> SimulationStatus:
        return SimulationStatus(
            running=self.running,
            tick=self.kernel.state.tick_id,
            timeMs=self.kernel.state.time_ms,
            vehicleCount=self.kernel.state.vehicle_count(),
            scenario=self.kernel.scenario.name,
        )
