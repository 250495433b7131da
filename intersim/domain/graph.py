import networkx as nx
from typing import List, Tuple


class RoadNetwork:
    """Lanes and intersections as a bipartite graph.

    An edge lane -> intersection carries the intersection's offset along that
    lane, so each lane can list its stop lines in travel order.
    """

    def __init__(self):
        self.graph = nx.DiGraph()

    def add_intersection(self, intersection_id: str, pos: Tuple[float, float]):
        self.graph.add_node(intersection_id, pos=pos, type="intersection")

    def add_lane(self, lane_id: str, axis: str):
        self.graph.add_node(lane_id, axis=axis, type="lane")

    def connect(self, lane_id: str, intersection_id: str, offset: float):
        self.graph.add_edge(lane_id, intersection_id, offset=offset)

    def stops_along(self, lane_id: str) -> List[Tuple[float, str]]:
        """(offset, intersection_id) pairs for a lane, sorted by offset."""
        return sorted(
            (data["offset"], target)
            for _, target, data in self.graph.out_edges(lane_id, data=True)
        )
