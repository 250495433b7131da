import logging
import random
from typing import List

from intersim.domain import config
from intersim.domain.lane import RoadLane, Vehicle
from intersim.domain.models import LiveParameters
from intersim.domain.state import SimulationState

logger = logging.getLogger(__name__)


class SpawnSystem:
    """Admits new vehicles at lane entries with jittered inter-arrival times."""

    def __init__(self, rng: random.Random, jitter_ms: float = config.SPAWN_JITTER_MS):
        self.rng = rng
        self.jitter_ms = jitter_ms

    def update(self, state: SimulationState, params: LiveParameters) -> List[Vehicle]:
        spawned = []
        for lane in state.lanes.values():
            # Fresh draw per lane per tick
            jitter = self.rng.uniform(0, self.jitter_ms)
            if lane.spawn_due(state.time_ms, params.spawnIntervalMs, jitter):
                spawned.append(self._spawn(state, lane, params))
        return spawned

    def _spawn(self, state: SimulationState, lane: RoadLane, params: LiveParameters) -> Vehicle:
        state.vehicle_serial += 1
        position = lane.spawn_position(state.scenario.placement, config.VEHICLE_RADIUS, config.SAFE_DISTANCE)
        vehicle = Vehicle(
            id=f"v-{state.vehicle_serial}",
            position=position,
            direction=lane.direction,
            acceleration=params.acceleration,
            speed_cap=params.maxSpeed,
        )
        lane.admit(vehicle, state.time_ms)
        logger.debug("Spawned %s on %s at %.1f", vehicle.id, lane.id, position)
        return vehicle
