from typing import Iterable
from intersim.domain.signals import Intersection

class SignalSystem:
    def update(self, intersections: Iterable[Intersection], dt_ms: float):
        for intersection in intersections:
            intersection.advance(dt_ms)
