from intersim.domain.models import IntersectionView, LaneView, SceneSnapshot, VehicleView
from intersim.domain.state import SimulationState

class SnapshotBuilder:
    def build(self, state: SimulationState) -> SceneSnapshot:
        lanes = []
        for lane in state.lanes.values():
            vehicles = []
            for v in lane.vehicles:
                x, y = lane.to_scene(v.position)
                vehicles.append(VehicleView(x=x, y=y, radius=v.radius, speed=v.speed, heading=v.direction))
            lanes.append(LaneView(id=lane.id, axis=lane.axis, vehicles=vehicles))
        return SceneSnapshot(
            tick=state.tick_id,
            timeMs=state.time_ms,
            width=state.scenario.width,
            height=state.scenario.height,
            lanes=lanes,
            intersections=[
                IntersectionView(
                    id=i.id,
                    x=i.x,
                    y=i.y,
                    horizontalColor=i.horizontal.current_color(),
                    verticalColor=i.vertical.current_color(),
                )
                for i in state.intersections.values()
            ],
        )
