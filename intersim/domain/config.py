# Simulation Configuration

# Scene Settings
SCENE_WIDTH = 800.0
SCENE_HEIGHT = 600.0
HORIZONTAL_ROADS = 4
VERTICAL_ROADS = 4
ENTRY_OFFSET = -10.0     # Spawn coordinate, just outside the visible track

# Signal Timings (ms)
GREEN_TIME = 6000.0
YELLOW_TIME = 2000.0

# (horizontal, vertical, duration) for each step of an intersection cycle
DEFAULT_PHASE_PLAN = [
    ("green", "red", GREEN_TIME),
    ("yellow", "red", YELLOW_TIME),
    ("red", "green", GREEN_TIME),
    ("red", "yellow", YELLOW_TIME),
]

# Vehicle Physics
VEHICLE_RADIUS = 8.0
SAFE_DISTANCE = 15.0     # Gap between leading edge and leader's trailing edge

# Live parameter defaults
SPAWN_INTERVAL_MS = 2000.0
ACCELERATION = 50.0      # units/s^2
MAX_SPEED = 100.0        # units/s

# Spawn Jitter
SPAWN_JITTER_MS = 1000.0

# Traffic Rules
APPROACH_BEFORE = 30.0   # Window start, before the stop line
APPROACH_AFTER = 10.0    # Window end, past the stop line
