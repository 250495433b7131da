from typing import List, Optional, Tuple
from pydantic import BaseModel

from intersim.domain import config
from intersim.domain.models import Axis, SpawnPlacement


class Vehicle(BaseModel):
    id: str
    position: float  # Offset along the lane axis
    direction: Tuple[float, float]
    speed: float = 0.0
    acceleration: float
    speed_cap: float
    radius: float = config.VEHICLE_RADIUS
    safe_distance: float = config.SAFE_DISTANCE
    movement_enabled: bool = True

    @property
    def leading_edge(self) -> float:
        return self.position + self.radius

    @property
    def trailing_edge(self) -> float:
        return self.position - self.radius

    @property
    def following_gap(self) -> float:
        """Centre-to-centre distance this vehicle needs behind its leader."""
        return self.safe_distance + 2 * self.radius

    def integrate(self, dt: float):
        # End-of-step speed: accelerate first, then move with the new speed
        if self.movement_enabled and self.speed < self.speed_cap:
            self.speed += self.acceleration * dt
            if self.speed > self.speed_cap:
                self.speed = self.speed_cap
        self.position += self.speed * dt

    def disable_movement(self):
        self.movement_enabled = False
        self.speed = 0.0

    def enable_movement(self):
        self.movement_enabled = True


class RoadLane(BaseModel):
    """One directional track. Vehicles are kept in spawn order, front-most first."""

    id: str  # e.g., "H0"
    axis: Axis
    cross: float  # Fixed coordinate on the other axis
    entry: float
    exit: float
    vehicles: List[Vehicle] = []
    last_spawn_ms: float = 0.0

    @property
    def direction(self) -> Tuple[float, float]:
        return (1.0, 0.0) if self.axis == Axis.HORIZONTAL else (0.0, 1.0)

    def to_scene(self, position: float) -> Tuple[float, float]:
        if self.axis == Axis.HORIZONTAL:
            return position, self.cross
        return self.cross, position

    def rear(self) -> Optional[Vehicle]:
        return self.vehicles[-1] if self.vehicles else None

    def spawn_due(self, now_ms: float, interval_ms: float, jitter_ms: float) -> bool:
        return now_ms - self.last_spawn_ms > interval_ms + jitter_ms

    def spawn_position(self, placement: SpawnPlacement, radius: float, safe_distance: float) -> float:
        rear = self.rear()
        if placement == SpawnPlacement.BOUNDARY or rear is None:
            return self.entry
        gap = safe_distance + 2 * radius
        if rear.position - self.entry >= gap:
            return self.entry
        return rear.position - gap

    def admit(self, vehicle: Vehicle, now_ms: float):
        self.vehicles.append(vehicle)
        self.last_spawn_ms = now_ms

    def evict(self) -> List[Vehicle]:
        """Drop every vehicle whose trailing edge reached the exit boundary."""
        gone = [v for v in self.vehicles if v.trailing_edge >= self.exit]
        if gone:
            self.vehicles = [v for v in self.vehicles if v.trailing_edge < self.exit]
        return gone
