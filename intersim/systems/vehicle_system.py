import bisect
import logging
from typing import Dict, List, Optional, Tuple

from intersim.domain import config
from intersim.domain.lane import RoadLane, Vehicle
from intersim.domain.signals import Intersection
from intersim.domain.state import SimulationState

logger = logging.getLogger(__name__)


class VehicleSystem:
    """Signal gating, following gating, integration and eviction for every lane."""

    def __init__(self, approach_before: float = config.APPROACH_BEFORE,
                 approach_after: float = config.APPROACH_AFTER):
        self.approach_before = approach_before
        self.approach_after = approach_after

    def update(self, state: SimulationState, dt: float) -> List[Vehicle]:
        evicted = []
        for lane in state.lanes.values():
            stops = state.stops.get(lane.id, [])
            offsets = state.stop_offsets.get(lane.id, [])
            for i, v in enumerate(lane.vehicles):
                upcoming = self.upcoming_intersection(v.position, stops, offsets, state.intersections)
                self._update_single_vehicle(lane, v, i, upcoming, dt)
            gone = lane.evict()
            if gone:
                logger.debug("Evicted %d vehicle(s) from %s", len(gone), lane.id)
            evicted.extend(gone)
        return evicted

    def _update_single_vehicle(self, lane: RoadLane, v: Vehicle, idx: int,
                               upcoming: Optional[Intersection], dt: float):
        # A. Signal
        if upcoming is not None and self.in_approach_window(v, upcoming.position_on(lane.axis)) \
                and upcoming.is_blocking(lane.axis):
            v.disable_movement()
        else:
            v.enable_movement()

        # B. Leader
        if idx > 0:
            lead_vehicle = lane.vehicles[idx - 1]
            if lead_vehicle.position - v.position < v.following_gap:
                v.disable_movement()

        # C. Move
        v.integrate(dt)

    def in_approach_window(self, v: Vehicle, stop_line: float) -> bool:
        return stop_line - self.approach_before <= v.leading_edge <= stop_line + self.approach_after

    @staticmethod
    def upcoming_intersection(position: float, stops: List[Tuple[float, str]], offsets: List[float],
                              intersections: Dict[str, Intersection]) -> Optional[Intersection]:
        """Nearest intersection strictly ahead of `position`; `offsets` mirrors `stops`."""
        idx = bisect.bisect_right(offsets, position)
        if idx >= len(stops):
            return None
        return intersections.get(stops[idx][1])
