from abc import ABC, abstractmethod
from typing import Any, Optional
from intersim.domain.models import ParameterUpdate

class Command(ABC):
    @abstractmethod
    def execute(self, service: Any):
        pass

class StartSimulationCommand(Command):
    def execute(self, service: Any):
        service.start()

class StopSimulationCommand(Command):
    def execute(self, service: Any):
        service.stop()

class ResetSimulationCommand(Command):
    def __init__(self, seed: Optional[int] = None, scenario: Optional[str] = None):
        self.seed = seed
        self.scenario = scenario

    def execute(self, service: Any):
        service.reset(seed=self.seed, scenario=self.scenario)

class UpdateParametersCommand(Command):
    def __init__(self, update: ParameterUpdate):
        self.update = update

    def execute(self, service: Any):
        service.parameters.update(self.update)
