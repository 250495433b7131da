import json
import logging
import time
from pathlib import Path
from typing import Dict, List
from pydantic import ValidationError

from intersim.domain.errors import ConfigurationError
from intersim.domain.layout import SCENARIOS
from intersim.domain.models import ScenarioConfig
from intersim.kernel.parameters import StaticParameters
from intersim.kernel.simulation_kernel import SimulationKernel

logger = logging.getLogger(__name__)

FRAME_MS = 1000.0 / 60


def load_scenario(source: str) -> ScenarioConfig:
    """A preset name ("grid", "single") or the path of a scenario JSON file."""
    if source in SCENARIOS:
        return SCENARIOS[source]
    try:
        return ScenarioConfig.model_validate_json(Path(source).read_text())
    except ValidationError as e:
        raise ConfigurationError(f"invalid scenario file {source}: {e}") from e


def run_headless_experiment(scenario: ScenarioConfig, duration_ticks: int = 600,
                            seed: int = 42) -> List[Dict]:
    kernel = SimulationKernel(scenario)
    kernel.initialize(seed=seed)
    params = StaticParameters()

    results = []
    for i in range(duration_ticks):
        kernel.step(FRAME_MS, params)
        state = kernel.state
        results.append({
            "tick": i,
            "vehicle_count": state.vehicle_count(),
            "stopped": sum(
                1 for lane in state.lanes.values() for v in lane.vehicles if v.speed == 0.0
            ),
        })
    return results


if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
    if len(sys.argv) > 2:
        start_time = time.time()
        rows = run_headless_experiment(load_scenario(sys.argv[1]))
        print(f"Experiment finished in {time.time() - start_time:.4f}s")
        with open(sys.argv[2], 'w') as f:
            json.dump(rows, f, indent=2)
    else:
        print("Usage: python -m intersim.experiments.run_experiment <scenario|file.json> <output>")
