"""Simulation context and the per-tick update applied by the host."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from .config import EXHAUST_CFG, NAV_CFG, WALKER_CFG, ExhaustCfg, NavigationCfg, WalkerCfg
from .controls import ControlPanel, ControlState
from .exhaust import create_exhaust_emitters
from .frames import to_world
from .logging_utils import FlightRecorder
from .model import OrbitFrame, Transform, TravelingActor
from .orbits import BodyRegistry, OrbitModel
from .spaceship import SpaceshipController
from .surface_walker import SurfaceWalkerController, WalkerInput, place_walker
from .vectors import Y_AXIS, look_rotation

logger = logging.getLogger(__name__)


@dataclass
class SimContext:
    """Everything the per-tick step reads or mutates."""

    registry: BodyRegistry
    orbit_model: OrbitModel
    controls: ControlPanel
    ship: SpaceshipController
    walker: SurfaceWalkerController | None = None
    recorder: FlightRecorder | None = None
    tick: int = 0
    events: list[tuple[int, str, str]] = field(default_factory=list)

    def record_event(self, event_type: str, body: str, **details: object) -> None:
        self.events.append((self.tick, event_type, body))
        if self.recorder is not None:
            self.recorder.log_event(self.tick, event_type, body, details)


def _launch(ctx: SimContext) -> None:
    controls = ctx.controls.state
    target = controls.target
    solution = ctx.ship.request_travel(target, controls.travel_speed, controls.speed_scale)
    ctx.controls.set("launch", False)
    if solution is None:
        ctx.record_event("launch_rejected", target, speed=controls.travel_speed)
        return
    ctx.record_event(
        "launch",
        target,
        eta=solution.time,
        x=float(solution.point[0]),
        y=float(solution.point[1]),
        z=float(solution.point[2]),
    )


def _sample(ctx: SimContext) -> None:
    if ctx.recorder is None:
        return
    position = ctx.ship.world_transform().position
    distance = ctx.ship.distance_to_destination()
    ctx.recorder.log_sample(
        [
            ctx.tick,
            float(position[0]),
            float(position[1]),
            float(position[2]),
            -1.0 if distance is None else distance,
            1 if ctx.ship.actor.is_traveling else 0,
        ]
    )


def step(ctx: SimContext, dt: float, walker_input: WalkerInput | None = None) -> bool:
    """Advance the whole scene by one frame.

    Ready bodies keep orbiting (and a walker on a ready body keeps walking)
    while others are still loading. Launches, ship motion and sampling wait
    for every body; the return value tells whether they ran.
    """

    scene_ready = ctx.registry.all_ready
    controls = ctx.controls.state
    if scene_ready:
        ctx.tick += 1
        if controls.launch:
            _launch(ctx)

    ctx.orbit_model.tick(controls.speed_scale)

    if scene_ready:
        traveling_to = ctx.ship.actor.state.target if ctx.ship.actor.is_traveling else None
        if ctx.ship.update(dt):
            ctx.record_event("landed", traveling_to or "")

    if (
        ctx.walker is not None
        and walker_input is not None
        and ctx.registry.is_ready(ctx.walker.walker.body_name)
    ):
        ctx.walker.update(walker_input, dt)

    if scene_ready:
        _sample(ctx)
    return scene_ready


def walker_world_position(ctx: SimContext) -> np.ndarray | None:
    """World position of the walker: its planet-local point carried by the planet's pivot."""

    if ctx.walker is None:
        return None
    walker = ctx.walker.walker
    body = ctx.registry.get(walker.body_name)
    local = Transform(position=np.array([body.orbit_radius, 0.0, 0.0]) + walker.position)
    return to_world(local, OrbitFrame(walker.body_name), ctx.registry).position


def camera_focus(ctx: SimContext) -> np.ndarray | None:
    """Point the camera should follow, or ``None`` in free mode."""

    mode = ctx.controls.state.camera_follow
    if mode == "ship":
        return ctx.ship.world_transform().position
    if mode == "walker":
        return walker_world_position(ctx)
    return None


def build_context(
    definitions,
    *,
    home: str,
    target: str,
    walker_body: str | None = None,
    nav_cfg: NavigationCfg = NAV_CFG,
    walker_cfg: WalkerCfg = WALKER_CFG,
    exhaust_cfg: ExhaustCfg = EXHAUST_CFG,
    rng: np.random.Generator | None = None,
    recorder: FlightRecorder | None = None,
) -> SimContext:
    """Register ``definitions`` (not yet ready), dock the ship at ``home`` and place the walker.

    The host marks each body ready once its visual has loaded.
    """

    definitions = list(definitions)
    by_key = {definition.key: definition for definition in definitions}
    registry = BodyRegistry(expected=by_key)
    for definition in definitions:
        registry.register(definition.create_body())

    orbit_model = OrbitModel(registry)
    controls = ControlPanel(ControlState(travel_speed=nav_cfg.default_travel_speed, target=target))
    controls.on_change("planet_animation", orbit_model.set_enabled)

    actor = TravelingActor(name="spaceship", emitters=create_exhaust_emitters(exhaust_cfg, rng))
    ship = SpaceshipController(actor, orbit_model, nav_cfg)
    # park facing away from the sun along the orbit
    ship.dock(home, by_key[home].dock_position(), look_rotation(np.array([0.0, 0.0, -1.0]), Y_AXIS))

    walker = None
    if walker_body is not None:
        walker = SurfaceWalkerController(
            place_walker(walker_body, by_key[walker_body].bounding_radius),
            walker_cfg,
        )

    ctx = SimContext(
        registry=registry,
        orbit_model=orbit_model,
        controls=controls,
        ship=ship,
        walker=walker,
        recorder=recorder,
    )
    if recorder is not None:
        recorder.write_meta(
            {
                "home": home,
                "target": target,
                "bodies": {
                    d.key: {"orbit_radius": d.orbit_radius, "angular_speed": d.angular_speed}
                    for d in definitions
                },
                "landing_threshold": nav_cfg.landing_threshold,
                "intercept_horizon": nav_cfg.intercept_horizon,
                "blend_mode": nav_cfg.orientation_blend_mode,
            }
        )
    logger.info("Scene built with %d bodies, ship docked at %s", len(registry), home)
    return ctx


__all__ = [
    "SimContext",
    "build_context",
    "camera_focus",
    "step",
    "walker_world_position",
]
