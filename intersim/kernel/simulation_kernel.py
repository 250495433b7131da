import logging
import math
import random
from typing import Optional

from intersim.domain.errors import TickError
from intersim.domain.layout import SCENARIOS, build_layout
from intersim.domain.models import IntersectionDetails, ScenarioConfig, SceneSnapshot
from intersim.domain.state import SimulationState
from intersim.kernel.parameters import ParameterProvider
from intersim.kernel.snapshot_builder import SnapshotBuilder
from intersim.systems.signal_system import SignalSystem
from intersim.systems.spawn_system import SpawnSystem
from intersim.systems.vehicle_system import VehicleSystem

logger = logging.getLogger(__name__)


class SimulationKernel:
    """Owns the whole world and advances it one step per external tick.

    Within a step the order is fixed: signals, spawning, per-vehicle update,
    eviction. Gating reads the signal state of the same step.
    """

    def __init__(self, scenario: Optional[ScenarioConfig] = None):
        self.scenario = scenario or SCENARIOS["grid"]
        self.state = SimulationState()
        self.rng = random.Random()
        self.seed: Optional[int] = None
        self.initialized = False
        self.signal_system = SignalSystem()
        self.spawn_system = SpawnSystem(self.rng)
        self.vehicle_system = VehicleSystem()
        self.snapshot_builder = SnapshotBuilder()

    def initialize(self, seed: int = 42, scenario: Optional[ScenarioConfig] = None):
        if scenario is not None:
            self.scenario = scenario
        self.seed = seed
        self.rng.seed(seed)
        self.state = SimulationState()
        build_layout(self.state, self.scenario, self.rng)
        self.initialized = True
        logger.info("Simulation Kernel Initialized (scenario=%s, seed=%s)", self.scenario.name, seed)

    def reset(self, seed: Optional[int] = None, scenario: Optional[ScenarioConfig] = None):
        """Re-initialize lanes and signals; without a seed the next one is drawn from the current stream."""
        if seed is None:
            seed = self.rng.randrange(2 ** 32)
        self.initialize(seed, scenario)

    def step(self, elapsed_ms: float, provider: ParameterProvider):
        if not math.isfinite(elapsed_ms) or elapsed_ms < 0:
            raise TickError(f"elapsed time must be finite and >= 0, got {elapsed_ms}")
        if not self.initialized:
            self.initialize()

        params = provider.current()
        self.state.time_ms += elapsed_ms

        # 1. Signals
        self.signal_system.update(self.state.intersections.values(), elapsed_ms)
        # 2. Spawning
        self.spawn_system.update(self.state, params)
        # 3. Vehicles (gating, integration, eviction)
        self.vehicle_system.update(self.state, elapsed_ms / 1000.0)

        self.state.tick_id += 1

    def get_state(self) -> SceneSnapshot:
        return self.snapshot_builder.build(self.state)

    def get_intersection_details(self, intersection_id: str) -> Optional[IntersectionDetails]:
        intersection = self.state.intersections.get(intersection_id)
        if not intersection:
            return None
        return IntersectionDetails(
            id=intersection.id,
            x=intersection.x,
            y=intersection.y,
            horizontalColor=intersection.horizontal.current_color(),
            verticalColor=intersection.vertical.current_color(),
            phaseIndex=intersection.horizontal.current_index,
            timerRemainingMs=intersection.horizontal.remaining_ms(),
        )
