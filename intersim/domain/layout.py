import logging
import random
from typing import Dict

from intersim.domain import config
from intersim.domain.graph import RoadNetwork
from intersim.domain.lane import RoadLane
from intersim.domain.models import Axis, ScenarioConfig, SpawnPlacement
from intersim.domain.signals import Intersection
from intersim.domain.state import SimulationState

logger = logging.getLogger(__name__)

# Preset scenarios: the road grid, and one crossing with queued spawns
SCENARIOS: Dict[str, ScenarioConfig] = {
    "grid": ScenarioConfig(name="grid"),
    "single": ScenarioConfig(
        name="single",
        horizontalRoads=1,
        verticalRoads=1,
        placement=SpawnPlacement.QUEUED,
    ),
}


def road_positions(extent: float, count: int):
    """Evenly spaced cross coordinates for `count` roads across `extent`."""
    spacing = extent / (count + 1)
    return [spacing * (i + 1) for i in range(count)]


def build_layout(state: SimulationState, scenario: ScenarioConfig, rng: random.Random):
    """Populate lanes, intersections and the road network index for a scenario."""
    state.scenario = scenario
    state.lanes = {}
    state.intersections = {}
    network = RoadNetwork()

    rows = road_positions(scenario.height, scenario.horizontalRoads)
    cols = road_positions(scenario.width, scenario.verticalRoads)

    for i, y in enumerate(rows):
        lane = RoadLane(id=f"H{i}", axis=Axis.HORIZONTAL, cross=y,
                        entry=config.ENTRY_OFFSET, exit=scenario.width)
        state.lanes[lane.id] = lane
        network.add_lane(lane.id, lane.axis.value)
    for j, x in enumerate(cols):
        lane = RoadLane(id=f"V{j}", axis=Axis.VERTICAL, cross=x,
                        entry=config.ENTRY_OFFSET, exit=scenario.height)
        state.lanes[lane.id] = lane
        network.add_lane(lane.id, lane.axis.value)

    first_duration = scenario.phasePlan[0].durationMs
    for i, y in enumerate(rows):
        for j, x in enumerate(cols):
            offset = rng.random() * first_duration if scenario.randomizeOffset else 0.0
            intersection = Intersection.from_plan(f"I-{i}-{j}", x, y, scenario.phasePlan, offset)
            state.intersections[intersection.id] = intersection
            network.add_intersection(intersection.id, (x, y))
            network.connect(f"H{i}", intersection.id, x)
            network.connect(f"V{j}", intersection.id, y)

    state.road_network = network
    state.stops = {lane_id: network.stops_along(lane_id) for lane_id in state.lanes}
    state.stop_offsets = {
        lane_id: [offset for offset, _ in stops] for lane_id, stops in state.stops.items()
    }
    logger.info(
        "Layout '%s' built: %d lanes, %d intersections",
        scenario.name, len(state.lanes), len(state.intersections),
    )
