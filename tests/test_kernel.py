import unittest
from intersim.domain.errors import TickError
from intersim.domain.lane import Vehicle
from intersim.domain.models import Axis, LiveParameters, ScenarioConfig, SignalColor, SpawnPlacement
from intersim.kernel.parameters import StaticParameters
from intersim.kernel.simulation_kernel import SimulationKernel
from intersim.systems.vehicle_system import VehicleSystem

# Spawning effectively disabled
NO_SPAWN = StaticParameters(LiveParameters(spawnIntervalMs=1e9, acceleration=50, maxSpeed=100))


def make_kernel(**kwargs):
    fields = dict(name="test", horizontalRoads=1, verticalRoads=1, randomizeOffset=False)
    fields.update(kwargs)
    kernel = SimulationKernel(ScenarioConfig(**fields))
    kernel.initialize(seed=1)
    return kernel


def set_phase(intersection, index, elapsed_ms=0.0):
    for cycle in (intersection.horizontal, intersection.vertical):
        cycle.current_index = index
        cycle.elapsed_ms = elapsed_ms


def place(lane, vid, position, speed=0.0):
    v = Vehicle(id=vid, position=position, direction=lane.direction, speed=speed,
                acceleration=50.0, speed_cap=100.0)
    lane.vehicles.append(v)
    return v


class TestSignalGating(unittest.TestCase):
    def setUp(self):
        # H0 at y=300 and V0 at x=400 cross at I-0-0 (400, 300)
        self.kernel = make_kernel()
        self.lane = self.kernel.state.lanes["H0"]
        self.intersection = self.kernel.state.intersections["I-0-0"]

    def test_red_light_holds_vehicle_in_window(self):
        set_phase(self.intersection, 2)  # horizontal red
        v = place(self.lane, "a", 380.0, speed=40.0)
        self.kernel.step(16, NO_SPAWN)
        self.assertEqual(v.position, 380.0)
        self.assertEqual(v.speed, 0.0)
        self.assertFalse(v.movement_enabled)

    def test_green_light_lets_vehicle_through(self):
        set_phase(self.intersection, 0)
        v = place(self.lane, "a", 380.0, speed=40.0)
        self.kernel.step(100, NO_SPAWN)
        self.assertAlmostEqual(v.speed, 45.0)
        self.assertAlmostEqual(v.position, 384.5)

    def test_signal_advances_before_gating(self):
        set_phase(self.intersection, 0, elapsed_ms=5990)  # turns yellow during this step
        v = place(self.lane, "a", 380.0, speed=40.0)
        self.kernel.step(16, NO_SPAWN)
        self.assertEqual(self.intersection.color(Axis.HORIZONTAL), SignalColor.YELLOW)
        self.assertEqual(v.position, 380.0)

    def test_outside_window_not_gated(self):
        set_phase(self.intersection, 2)
        v = place(self.lane, "a", 300.0, speed=40.0)  # leading edge 308, window starts at 370
        self.kernel.step(100, NO_SPAWN)
        self.assertGreater(v.position, 300.0)

    def test_past_intersection_never_gated(self):
        set_phase(self.intersection, 2)
        v = place(self.lane, "a", 405.0, speed=40.0)
        self.kernel.step(100, NO_SPAWN)
        self.assertAlmostEqual(v.position, 409.5)

    def test_vertical_lane_reads_its_own_axis(self):
        set_phase(self.intersection, 2)  # vertical green
        v = place(self.kernel.state.lanes["V0"], "b", 280.0, speed=40.0)
        self.kernel.step(100, NO_SPAWN)
        self.assertAlmostEqual(v.position, 284.5)

    def test_follower_stopped_by_queue(self):
        set_phase(self.intersection, 2)
        leader = place(self.lane, "a", 380.0, speed=40.0)
        follower = place(self.lane, "b", 360.0, speed=30.0)  # not in window, but too close
        self.kernel.step(16, NO_SPAWN)
        self.assertEqual(leader.position, 380.0)
        self.assertEqual(follower.position, 360.0)
        self.assertFalse(follower.movement_enabled)

    def test_queue_releases_on_green(self):
        set_phase(self.intersection, 2)
        leader = place(self.lane, "a", 380.0)
        follower = place(self.lane, "b", 349.0)  # exactly one following gap behind
        self.kernel.step(16, NO_SPAWN)
        self.assertEqual(follower.position, 349.0 + 50.0 * 0.016 * 0.016)

        set_phase(self.intersection, 0)
        self.kernel.step(16, NO_SPAWN)
        self.assertGreater(leader.position, 380.0)


class TestNearestIntersection(unittest.TestCase):
    def test_only_nearest_ahead_matters(self):
        # H0 at y=120 crosses V0..V3 at x=160, 320, 480, 640
        kernel = make_kernel(horizontalRoads=4, verticalRoads=4)
        lane = kernel.state.lanes["H0"]
        set_phase(kernel.state.intersections["I-0-1"], 0)  # x=320 green
        set_phase(kernel.state.intersections["I-0-2"], 2)  # x=480 red
        moving = place(lane, "a", 300.0, speed=40.0)
        kernel.step(100, NO_SPAWN)
        self.assertAlmostEqual(moving.position, 304.5)

        kernel = make_kernel(horizontalRoads=4, verticalRoads=4)
        lane = kernel.state.lanes["H0"]
        set_phase(kernel.state.intersections["I-0-1"], 2)
        set_phase(kernel.state.intersections["I-0-2"], 0)
        held = place(lane, "a", 300.0, speed=40.0)
        kernel.step(100, NO_SPAWN)
        self.assertEqual(held.position, 300.0)

    def test_upcoming_intersection_lookup(self):
        kernel = make_kernel(horizontalRoads=4, verticalRoads=4)
        state = kernel.state
        stops, offsets = state.stops["H0"], state.stop_offsets["H0"]

        def lookup(pos):
            return VehicleSystem.upcoming_intersection(pos, stops, offsets, state.intersections)

        self.assertEqual(lookup(0.0).id, "I-0-0")
        self.assertEqual(lookup(320.0).id, "I-0-2")  # sitting on a crossing looks past it
        self.assertEqual(lookup(500.0).id, "I-0-3")
        self.assertIsNone(lookup(640.0))


class TestEngineStep(unittest.TestCase):
    def test_eviction_after_step(self):
        kernel = make_kernel()
        lane = kernel.state.lanes["H0"]
        place(lane, "a", 815.0, speed=50.0)
        place(lane, "b", 500.0, speed=50.0)
        place(lane, "c", 200.0, speed=50.0)
        kernel.step(16, NO_SPAWN)
        self.assertEqual([v.id for v in lane.vehicles], ["b", "c"])

    def test_negative_elapsed_rejected(self):
        kernel = make_kernel()
        with self.assertRaises(TickError):
            kernel.step(-1, NO_SPAWN)

    def test_non_finite_elapsed_rejected(self):
        kernel = make_kernel()
        for elapsed in (float("nan"), float("inf")):
            with self.assertRaises(TickError):
                kernel.step(elapsed, NO_SPAWN)
        self.assertEqual((kernel.state.tick_id, kernel.state.time_ms), (0, 0.0))

    def test_parameters_apply_to_new_vehicles_only(self):
        kernel = make_kernel(verticalRoads=0)
        fast = StaticParameters(LiveParameters(spawnIntervalMs=1, acceleration=50, maxSpeed=100))
        kernel.step(2000, fast)
        lane = kernel.state.lanes["H0"]
        self.assertEqual(len(lane.vehicles), 1)
        first = lane.vehicles[0]

        slow = StaticParameters(LiveParameters(spawnIntervalMs=1, acceleration=10, maxSpeed=20))
        kernel.step(2000, slow)
        self.assertEqual(len(lane.vehicles), 2)
        self.assertEqual((first.acceleration, first.speed_cap), (50, 100))
        self.assertEqual((lane.vehicles[1].acceleration, lane.vehicles[1].speed_cap), (10, 20))

    def test_queue_spacing_without_signals(self):
        kernel = make_kernel(verticalRoads=0, placement=SpawnPlacement.QUEUED)
        params = StaticParameters(LiveParameters(spawnIntervalMs=100, acceleration=50, maxSpeed=100))
        lane = kernel.state.lanes["H0"]
        spawned = 0
        for _ in range(1500):
            before = {v.id for v in lane.vehicles}
            kernel.step(16, params)
            spawned += len({v.id for v in lane.vehicles} - before)
            for lead, follow in zip(lane.vehicles, lane.vehicles[1:]):
                self.assertGreaterEqual(lead.position - follow.position, follow.following_gap - 1e-6)
        self.assertGreater(spawned, 10)

    def test_tick_and_clock(self):
        kernel = make_kernel()
        kernel.step(16, NO_SPAWN)
        kernel.step(0, NO_SPAWN)
        self.assertEqual(kernel.state.tick_id, 2)
        self.assertEqual(kernel.state.time_ms, 16)

    def test_step_initializes_lazily(self):
        kernel = SimulationKernel()
        kernel.step(16, NO_SPAWN)
        self.assertTrue(kernel.initialized)
        self.assertEqual(len(kernel.state.intersections), 16)

    def test_reset_clears_world(self):
        kernel = make_kernel()
        place(kernel.state.lanes["H0"], "a", 100.0)
        kernel.step(16, NO_SPAWN)
        kernel.reset(seed=5)
        self.assertEqual(kernel.state.tick_id, 0)
        self.assertEqual(kernel.state.vehicle_count(), 0)
        self.assertEqual(kernel.seed, 5)


class TestSnapshot(unittest.TestCase):
    def test_snapshot_contents(self):
        kernel = make_kernel()
        place(kernel.state.lanes["H0"], "a", 100.0, speed=10.0)
        place(kernel.state.lanes["V0"], "b", 50.0)
        snapshot = kernel.get_state()

        lanes = {lane.id: lane for lane in snapshot.lanes}
        h = lanes["H0"].vehicles[0]
        self.assertEqual((h.x, h.y, h.radius, h.speed), (100.0, 300.0, 8.0, 10.0))
        v = lanes["V0"].vehicles[0]
        self.assertEqual((v.x, v.y), (400.0, 50.0))
        self.assertEqual((h.heading, v.heading), ((1.0, 0.0), (0.0, 1.0)))

        self.assertEqual(len(snapshot.intersections), 1)
        i = snapshot.intersections[0]
        self.assertEqual((i.x, i.y), (400.0, 300.0))
        self.assertEqual(i.horizontalColor, SignalColor.GREEN)
        self.assertEqual(i.verticalColor, SignalColor.RED)

    def test_intersection_details(self):
        kernel = make_kernel()
        details = kernel.get_intersection_details("I-0-0")
        self.assertEqual(details.phaseIndex, 0)
        self.assertEqual(details.timerRemainingMs, 6000)
        self.assertIsNone(kernel.get_intersection_details("I-9-9"))


if __name__ == '__main__':
    unittest.main()
