import numpy as np
import pytest
from numpy.testing import assert_allclose

from solar_nav.core.logging_utils import FlightRecorder
from solar_nav.core.model import Idle, Landed, OrbitFrame
from solar_nav.core.simulation import build_context, camera_focus, step, walker_world_position
from solar_nav.core.surface_walker import WalkerInput
from solar_nav.data.bodies import BODIES, BODY_DEFINITIONS

DT = 1.0 / 60.0


def make_context(recorder=None):
    return build_context(
        BODY_DEFINITIONS,
        home="earth",
        target="jupiter",
        walker_body="earth",
        rng=np.random.default_rng(0),
        recorder=recorder,
    )


def ready_context(recorder=None):
    ctx = make_context(recorder)
    for name in ctx.registry.names():
        ctx.registry.mark_ready(name)
    return ctx


def run_until_landed(ctx, max_ticks=3000):
    for _ in range(max_ticks):
        step(ctx, DT)
        if any(event[1] == "landed" for event in ctx.events):
            return
    raise AssertionError("ship never landed")


def test_ship_starts_docked_at_home():
    ctx = make_context()
    assert ctx.ship.actor.state == Idle("earth")
    assert ctx.ship.actor.frame == OrbitFrame("earth")
    assert_allclose(ctx.ship.world_transform().position, BODIES["earth"].dock_position())


def test_launch_waits_for_every_body():
    ctx = make_context()
    ctx.controls.set("launch", True)
    names = ctx.registry.names()
    for name in names[:-1]:
        ctx.registry.mark_ready(name)
        assert step(ctx, DT) is False
    assert ctx.tick == 0
    assert ctx.ship.actor.state == Idle("earth")
    ctx.registry.mark_ready(names[-1])
    assert step(ctx, DT) is True
    assert ctx.tick == 1
    assert ctx.ship.actor.is_traveling


def test_ready_bodies_keep_orbiting_while_one_is_loading():
    ctx = make_context()
    for name in ctx.registry.names():
        if name != "neptune":
            ctx.registry.mark_ready(name)
    ctx.controls.set("planet_animation", True)
    start = ctx.walker.walker.position.copy()
    for _ in range(100):
        assert step(ctx, DT, WalkerInput(forward=True)) is False
    assert ctx.registry.get("earth").angle == pytest.approx(1.0)
    assert ctx.registry.get("neptune").angle == 0.0
    assert not np.allclose(ctx.walker.walker.position, start)
    assert ctx.tick == 0
    assert ctx.ship.actor.state == Idle("earth")


def test_launch_event_and_flag_reset():
    ctx = ready_context()
    ctx.controls.set("launch", True)
    step(ctx, DT)
    assert ctx.events[0] == (1, "launch", "jupiter")
    assert ctx.controls.state.launch is False


def test_launch_to_home_is_rejected():
    ctx = ready_context()
    ctx.controls.set("target", "earth")
    ctx.controls.set("launch", True)
    step(ctx, DT)
    assert ctx.events == [(1, "launch_rejected", "earth")]
    assert ctx.ship.actor.state == Idle("earth")


def test_stationary_flight_lands_on_target():
    ctx = ready_context()
    ctx.controls.set("launch", True)
    run_until_landed(ctx)
    assert ctx.events[-1][1:] == ("landed", "jupiter")
    assert ctx.ship.actor.state == Landed("jupiter")


def test_animated_flight_lands_near_moving_target():
    ctx = ready_context()
    ctx.controls.set("planet_animation", True)
    ctx.controls.set("launch", True)
    run_until_landed(ctx)
    jupiter = ctx.orbit_model.position_of("jupiter")
    assert np.linalg.norm(ctx.ship.world_transform().position - jupiter) < 0.5


def test_animation_control_drives_orbit_model():
    ctx = ready_context()
    assert ctx.orbit_model.enabled is False
    ctx.controls.toggle("planet_animation")
    assert ctx.orbit_model.enabled is True
    step(ctx, DT)
    assert abs(ctx.registry.get("earth").angle - BODIES["earth"].angular_speed) < 1e-12


def test_speed_scale_applies_to_orbits():
    ctx = ready_context()
    ctx.controls.set("planet_animation", True)
    ctx.controls.set("speed_scale", 3.0)
    step(ctx, DT)
    assert abs(ctx.registry.get("mars").angle - 3.0 * BODIES["mars"].angular_speed) < 1e-12


def test_walker_moves_with_input():
    ctx = ready_context()
    before = ctx.walker.walker.position.copy()
    step(ctx, DT, WalkerInput(forward=True))
    assert not np.allclose(ctx.walker.walker.position, before)
    assert abs(np.linalg.norm(ctx.walker.walker.position) - BODIES["earth"].bounding_radius) < 1e-9


def test_walker_world_position_rides_on_planet():
    ctx = ready_context()
    earth = BODIES["earth"]
    assert_allclose(walker_world_position(ctx), [earth.orbit_radius, earth.bounding_radius, 0.0], atol=1e-9)


@pytest.mark.parametrize("mode", ["ship", "walker", "free"])
def test_camera_focus_modes(mode):
    ctx = ready_context()
    ctx.controls.set("camera_follow", mode)
    focus = camera_focus(ctx)
    if mode == "ship":
        assert_allclose(focus, ctx.ship.world_transform().position)
    elif mode == "walker":
        assert_allclose(focus, walker_world_position(ctx))
    else:
        assert focus is None


def test_recorder_captures_flight(tmp_path):
    recorder = FlightRecorder(tmp_path, run_id="flight")
    ctx = ready_context(recorder)
    ctx.controls.set("launch", True)
    run_until_landed(ctx)
    recorder.close()
    assert recorder.meta_path.exists()
    samples = recorder.timeseries_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(samples) == ctx.tick + 1
    events = recorder.events_path.read_text(encoding="utf-8")
    assert ",launch,jupiter," in events
    assert ",landed,jupiter," in events
