"""Controller for the spaceship: docking, interception launch, flight and landing."""
from __future__ import annotations

import logging

import numpy as np

from .config import NAV_CFG, NavigationCfg
from .frames import hand_off, to_world
from .intercept import blend_factor, solve_intercept, steer_towards
from .model import (
    WORLD,
    Frame,
    Idle,
    InterceptSolution,
    Landed,
    OrbitFrame,
    Transform,
    Traveling,
    TravelingActor,
)
from .orbits import BodyRegistry, OrbitModel
from .vectors import identity_quat, length

logger = logging.getLogger(__name__)


class SpaceshipController:
    """Moves a :class:`TravelingActor` between orbiting bodies.

    While idle or landed the actor is expressed in a body's orbit frame and
    co-rotates with it. A launch hands it off to the world frame and flies it
    in a straight line to a precomputed interception point, where it is handed
    to the target's orbit frame.
    """

    def __init__(
        self,
        actor: TravelingActor,
        orbit_model: OrbitModel,
        cfg: NavigationCfg = NAV_CFG,
    ) -> None:
        self.actor = actor
        self.orbit_model = orbit_model
        self.cfg = cfg

    @property
    def registry(self) -> BodyRegistry:
        return self.orbit_model.registry

    def dock(
        self,
        body_name: str,
        local_position: np.ndarray,
        orientation: np.ndarray | None = None,
    ) -> None:
        """Place the actor in ``body_name``'s orbit frame and mark it idle there."""

        self.registry.get(body_name)
        self.actor.local = Transform(
            position=np.asarray(local_position, dtype=float).copy(),
            orientation=identity_quat() if orientation is None else np.asarray(orientation, dtype=float),
        )
        self.actor.frame = OrbitFrame(body_name)
        self.actor.state = Idle(body_name)
        self.actor.past_target = body_name

    def world_transform(self) -> Transform:
        return to_world(self.actor.local, self.actor.frame, self.registry)

    def _reparent(self, new_frame: Frame) -> None:
        local = hand_off(self.actor.local, self.actor.frame, new_frame, self.registry)
        self.actor.local, self.actor.frame = local, new_frame

    def _set_exhaust(self, visible: bool) -> None:
        for emitter in self.actor.emitters:
            emitter.visible = visible
            if not visible:
                emitter.reset()

    def request_travel(
        self,
        target: str,
        speed: float | None = None,
        speed_scale: float = 1.0,
    ) -> InterceptSolution | None:
        """Launch toward ``target``; returns the solution or ``None`` if nothing changed."""

        speed = self.cfg.default_travel_speed if speed is None else speed
        state = self.actor.state
        if isinstance(state, Traveling):
            logger.warning("Launch to %s ignored: already traveling to %s", target, state.target)
            return None
        if target not in self.registry or not self.registry.is_ready(target):
            logger.warning("Launch ignored: target %s is not loaded", target)
            return None
        if isinstance(state, (Idle, Landed)) and state.body == target:
            logger.info("Launch ignored: already at %s", target)
            return None

        start = self.world_transform().position
        solution = solve_intercept(
            start,
            self.orbit_model.position_of(target),
            speed,
            self.orbit_model.angular_speed_of(target, speed_scale),
            cfg=self.cfg,
        )
        if solution is None:
            logger.warning(
                "No interception of %s at speed %.4g within %.0f ticks",
                target,
                speed,
                self.cfg.intercept_horizon,
            )
            return None

        self._reparent(WORLD)
        self.actor.state = Traveling(
            target=target,
            destination=solution.point.copy(),
            speed=speed,
            solution=solution,
        )
        self._set_exhaust(True)
        logger.info(
            "Launched %s to %s: eta %.1f ticks, intercept at (%.2f, %.2f, %.2f)",
            self.actor.name,
            target,
            solution.time,
            *solution.point,
        )
        return solution

    def distance_to_destination(self) -> float | None:
        state = self.actor.state
        if not isinstance(state, Traveling):
            return None
        return length(state.destination - self.actor.local.position)

    def update(self, dt: float) -> bool:
        """Advance one tick of flight; returns ``True`` on the tick the actor lands."""

        state = self.actor.state
        if not isinstance(state, Traveling):
            return False

        local = self.actor.local
        offset = state.destination - local.position
        distance = length(offset)
        if distance <= self.cfg.landing_threshold:
            self._land(state)
            return True

        direction = offset / distance
        local.orientation = steer_towards(
            local.orientation,
            local.position,
            state.destination,
            blend_factor(self.cfg, dt),
        )
        local.position = local.position + direction * min(state.speed, distance)

        for emitter in self.actor.emitters:
            if emitter.visible:
                emitter.update_for(dt, local)

        if length(state.destination - local.position) <= self.cfg.landing_threshold:
            self._land(state)
            return True
        return False

    def _land(self, state: Traveling) -> None:
        self._reparent(OrbitFrame(state.target))
        self.actor.state = Landed(state.target)
        self.actor.past_target = state.target
        self._set_exhaust(False)
        logger.info("%s landed on %s", self.actor.name, state.target)


__all__ = ["SpaceshipController"]
