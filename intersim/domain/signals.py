import math
from typing import List, Sequence
from pydantic import BaseModel, model_validator

from intersim.domain.errors import ConfigurationError, TickError
from intersim.domain.models import Axis, PhaseStep, SignalColor, SignalPhase


class SignalCycle(BaseModel):
    """Repeating sequence of timed color phases for one traffic direction.

    The cursor is (current_index, elapsed_ms). When an advance overflows the
    active phase, elapsed_ms restarts at 0 and the cursor moves one phase
    forward; leftover time is dropped rather than carried into the next phase.
    """

    phases: List[SignalPhase]
    current_index: int = 0
    elapsed_ms: float = 0.0

    @model_validator(mode="after")
    def check_cursor(self):
        if not self.phases:
            raise ConfigurationError("signal cycle needs at least one phase")
        if not 0 <= self.current_index < len(self.phases):
            raise ConfigurationError(f"phase index {self.current_index} out of range")
        if not 0 <= self.elapsed_ms < self.phases[self.current_index].duration_ms:
            raise ConfigurationError(f"initial offset {self.elapsed_ms} outside the active phase")
        return self

    def advance(self, delta_ms: float):
        if not math.isfinite(delta_ms) or delta_ms < 0:
            raise TickError(f"signal advance needs a non-negative delta, got {delta_ms}")
        self.elapsed_ms += delta_ms
        if self.elapsed_ms >= self.phases[self.current_index].duration_ms:
            self.elapsed_ms = 0.0
            self.current_index = (self.current_index + 1) % len(self.phases)

    def current_color(self) -> SignalColor:
        return self.phases[self.current_index].color

    def remaining_ms(self) -> float:
        return self.phases[self.current_index].duration_ms - self.elapsed_ms

    def reset(self):
        self.current_index = 0
        self.elapsed_ms = 0.0


class Intersection(BaseModel):
    id: str  # e.g., "I-0-0"
    x: float
    y: float
    horizontal: SignalCycle
    vertical: SignalCycle

    @model_validator(mode="after")
    def check_complementary(self):
        h_phases, v_phases = self.horizontal.phases, self.vertical.phases
        if len(h_phases) != len(v_phases):
            raise ConfigurationError(f"{self.id}: axis cycles have different phase counts")
        for h, v in zip(h_phases, v_phases):
            if h.duration_ms != v.duration_ms:
                raise ConfigurationError(f"{self.id}: axis cycles are not in lock step")
            if h.color == SignalColor.GREEN and v.color == SignalColor.GREEN:
                raise ConfigurationError(f"{self.id}: both axes green in the same phase")
        if (self.horizontal.current_index, self.horizontal.elapsed_ms) != (
            self.vertical.current_index, self.vertical.elapsed_ms
        ):
            raise ConfigurationError(f"{self.id}: axis cycles start at different offsets")
        return self

    @classmethod
    def from_plan(cls, intersection_id: str, x: float, y: float,
                  plan: Sequence[PhaseStep], offset_ms: float = 0.0) -> "Intersection":
        if not plan:
            raise ConfigurationError("phase plan cannot be empty")
        horizontal = SignalCycle(
            phases=[SignalPhase(color=s.horizontal, duration_ms=s.durationMs) for s in plan],
            elapsed_ms=offset_ms,
        )
        vertical = SignalCycle(
            phases=[SignalPhase(color=s.vertical, duration_ms=s.durationMs) for s in plan],
            elapsed_ms=offset_ms,
        )
        return cls(id=intersection_id, x=x, y=y, horizontal=horizontal, vertical=vertical)

    def advance(self, delta_ms: float):
        self.horizontal.advance(delta_ms)
        self.vertical.advance(delta_ms)

    def cycle_for(self, axis: Axis) -> SignalCycle:
        return self.horizontal if axis == Axis.HORIZONTAL else self.vertical

    def color(self, axis: Axis) -> SignalColor:
        return self.cycle_for(axis).current_color()

    def is_blocking(self, axis: Axis) -> bool:
        return self.color(axis) in [SignalColor.RED, SignalColor.YELLOW]

    def position_on(self, axis: Axis) -> float:
        """Coordinate of the stop line along a lane running on `axis`."""
        return self.x if axis == Axis.HORIZONTAL else self.y
