import math
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator

from intersim.domain import config
from intersim.domain.errors import ConfigurationError


def require_positive(name: str, value: float):
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a finite number > 0, got {value}")


class SignalColor(str, Enum):
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"


class Axis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class SpawnPlacement(str, Enum):
    BOUNDARY = "BOUNDARY"  # always at the entry, following gating sorts out overlap
    QUEUED = "QUEUED"      # behind the rearmost vehicle while the entry is occupied


class SignalPhase(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: SignalColor
    duration_ms: float

    @model_validator(mode="after")
    def check_duration(self):
        require_positive("phase duration", self.duration_ms)
        return self


class PhaseStep(BaseModel):
    """One step of an intersection plan: the color shown to each axis and for how long."""
    model_config = ConfigDict(frozen=True)

    horizontal: SignalColor
    vertical: SignalColor
    durationMs: float

    @model_validator(mode="after")
    def check_step(self):
        require_positive("phase duration", self.durationMs)
        if self.horizontal == SignalColor.GREEN and self.vertical == SignalColor.GREEN:
            raise ConfigurationError("a phase step cannot give green to both axes")
        return self


def default_phase_plan() -> List[PhaseStep]:
    return [
        PhaseStep(horizontal=h, vertical=v, durationMs=d)
        for h, v, d in config.DEFAULT_PHASE_PLAN
    ]


class LiveParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    spawnIntervalMs: float = config.SPAWN_INTERVAL_MS
    acceleration: float = config.ACCELERATION
    maxSpeed: float = config.MAX_SPEED

    @model_validator(mode="after")
    def check_positive(self):
        require_positive("spawnIntervalMs", self.spawnIntervalMs)
        require_positive("acceleration", self.acceleration)
        require_positive("maxSpeed", self.maxSpeed)
        return self


class ScenarioConfig(BaseModel):
    name: str = "grid"
    width: float = config.SCENE_WIDTH
    height: float = config.SCENE_HEIGHT
    horizontalRoads: int = config.HORIZONTAL_ROADS
    verticalRoads: int = config.VERTICAL_ROADS
    placement: SpawnPlacement = SpawnPlacement.BOUNDARY
    phasePlan: List[PhaseStep] = Field(default_factory=default_phase_plan)
    randomizeOffset: bool = True  # desync intersections with a random start offset

    @model_validator(mode="after")
    def check_scenario(self):
        require_positive("width", self.width)
        require_positive("height", self.height)
        if self.horizontalRoads < 0 or self.verticalRoads < 0:
            raise ConfigurationError("road counts cannot be negative")
        if self.horizontalRoads + self.verticalRoads == 0:
            raise ConfigurationError("a scenario needs at least one road")
        if not self.phasePlan:
            raise ConfigurationError("phase plan cannot be empty")
        return self


# API/Snapshot Models

class VehicleView(BaseModel):
    x: float
    y: float
    radius: float
    speed: float
    heading: Tuple[float, float]  # unit vector of travel


class LaneView(BaseModel):
    id: str  # e.g., "H0"
    axis: Axis
    vehicles: List[VehicleView]


class IntersectionView(BaseModel):
    id: str  # e.g., "I-0-0"
    x: float
    y: float
    horizontalColor: SignalColor
    verticalColor: SignalColor


class SceneSnapshot(BaseModel):
    tick: int
    timeMs: float
    width: float
    height: float
    lanes: List[LaneView]
    intersections: List[IntersectionView]


class ParameterUpdate(BaseModel):
    spawnIntervalMs: Optional[float] = None
    acceleration: Optional[float] = None
    maxSpeed: Optional[float] = None


class ResetRequest(BaseModel):
    seed: Optional[int] = None
    scenario: Optional[str] = None  # preset name, "grid" or "single"


class SimulationStatus(BaseModel):
    running: bool
    tick: int
    timeMs: float
    vehicleCount: int
    scenario: str


class IntersectionDetails(BaseModel):
    id: str
    x: float
    y: float
    horizontalColor: SignalColor
    verticalColor: SignalColor
    phaseIndex: int
    timerRemainingMs: float
