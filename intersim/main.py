import asyncio
import logging
import sys
import time
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from intersim.application.commands import (
    StartSimulationCommand, StopSimulationCommand, ResetSimulationCommand, UpdateParametersCommand
)
from intersim.application.service import SimulationService, resolve_scenario
from intersim.domain.errors import ConfigurationError
from intersim.domain.models import (
    IntersectionDetails, LiveParameters, ParameterUpdate, ResetRequest, SceneSnapshot, SimulationStatus
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

TARGET_FPS = 60

# Initialize Service
service = SimulationService()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build the world and start the tick loop (idle until /start)
    service.kernel.initialize()
    loop_task = asyncio.create_task(run_simulation())
    yield
    # Shutdown
    loop_task.cancel()

app = FastAPI(lifespan=lifespan)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def run_frame(now_ms: float) -> bool:
    """Ticks the service once; a failing tick is logged and the loop keeps serving"""
    try:
        return service.tick(now_ms)
    except Exception:
        logger.exception("Simulation tick failed at %.1f ms", now_ms)
        return False

async def run_simulation():
    """One simulation step per frame, timed with a monotonic clock"""
    frame = 1.0 / TARGET_FPS

    while True:
        start_time = time.monotonic()
        run_frame(start_time * 1000.0)

        elapsed = time.monotonic() - start_time
        await asyncio.sleep(max(0.0, frame - elapsed))

@app.get("/api/scene", response_model=SceneSnapshot)
async def get_scene():
    """Returns the renderable scene: vehicles per lane and signal colors"""
    return service.kernel.get_state()

@app.get("/api/status", response_model=SimulationStatus)
async def get_status():
    return service.status()

@app.get("/api/parameters", response_model=LiveParameters)
async def get_parameters():
    """Returns the live parameters applied to newly spawned vehicles"""
    return service.parameters.current()

@app.post("/api/parameters", response_model=LiveParameters)
async def update_parameters(update: ParameterUpdate):
    """Validates and queues a live parameter change for the next tick"""
    try:
        merged = service.parameters.preview(update)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    service.queue_command(UpdateParametersCommand(update))
    return merged

@app.post("/api/simulation/start")
async def start_simulation():
    service.queue_command(StartSimulationCommand())
    return {"status": "Simulation Start Queued"}

@app.post("/api/simulation/stop")
async def stop_simulation():
    service.queue_command(StopSimulationCommand())
    return {"status": "Simulation Stop Queued"}

@app.post("/api/simulation/reset")
async def reset_simulation(request: ResetRequest):
    """Re-initializes lanes and signals, optionally switching scenario"""
    try:
        resolve_scenario(request.scenario)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    service.queue_command(ResetSimulationCommand(seed=request.seed, scenario=request.scenario))
    return {"status": "Simulation Reset Queued", "seed": request.seed, "scenario": request.scenario}

@app.get("/api/intersections/{intersection_id}", response_model=IntersectionDetails)
async def get_intersection(intersection_id: str):
    details = service.kernel.get_intersection_details(intersection_id)
    if not details:
        raise HTTPException(status_code=404, detail="Intersection not found")
    return details

@app.get("/")
def read_root():
    return {"status": "Intersection Simulator Running"}
