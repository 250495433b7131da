from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict
from intersim.domain.models import ScenarioConfig
from intersim.domain.signals import Intersection
from intersim.domain.lane import RoadLane
from intersim.domain.graph import RoadNetwork

class SimulationState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    tick_id: int = 0
    time_ms: float = 0.0
    scenario: ScenarioConfig = ScenarioConfig()
    lanes: Dict[str, RoadLane] = {}
    intersections: Dict[str, Intersection] = {}
    vehicle_serial: int = 0

    # Graph based structure
    road_network: Optional[RoadNetwork] = None
    # lane id -> (offset, intersection id), sorted by offset
    stops: Dict[str, List[Tuple[float, str]]] = {}
    # lane id -> offsets of `stops`, for bisect
    stop_offsets: Dict[str, List[float]] = {}

    def vehicle_count(self) -> int:
        return sum(len(lane.vehicles) for lane in self.lanes.values())
