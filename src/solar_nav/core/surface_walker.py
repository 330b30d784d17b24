"""Keeps an actor on the surface of a sphere and turns 2D input into great-circle motion."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .config import WALKER_CFG, WalkerCfg
from .model import ConfigurationError, SurfaceWalker
from .vectors import (
    FORWARD,
    UP,
    length,
    look_rotation,
    normalize,
    quat_from_axis_angle,
    quat_multiply,
    quat_normalize,
    quat_rotate,
    rotate_about_axis,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkerInput:
    turn_left: bool = False
    turn_right: bool = False
    forward: bool = False
    back: bool = False

    @property
    def turn_sign(self) -> int:
        return int(self.turn_left) - int(self.turn_right)

    @property
    def move_sign(self) -> int:
        return int(self.forward) - int(self.back)


def _tangent_heading(normal: np.ndarray, heading: np.ndarray) -> np.ndarray:
    return normalize(heading - float(np.dot(heading, normal)) * normal)


def place_walker(
    body_name: str,
    radius: float,
    direction: np.ndarray = (0.0, 1.0, 0.0),
    heading: np.ndarray = (0.0, 0.0, 1.0),
) -> SurfaceWalker:
    """Create a walker on the sphere at ``direction`` facing along ``heading``.

    ``heading`` is projected onto the tangent plane; if it is parallel to the
    normal any tangent direction is used.
    """

    if radius <= 0.0:
        raise ConfigurationError(f"Walker sphere radius must be positive, got {radius}")
    normal = normalize(np.asarray(direction, dtype=float))
    if not normal.any():
        raise ConfigurationError("Walker placement direction must be non-zero")
    tangent = _tangent_heading(normal, np.asarray(heading, dtype=float))
    if not tangent.any():
        fallback = np.array([1.0, 0.0, 0.0]) if abs(normal[0]) < 0.9 else np.array([0.0, 0.0, 1.0])
        tangent = _tangent_heading(normal, fallback)
    return SurfaceWalker(
        body_name=body_name,
        radius=radius,
        position=normal * radius,
        orientation=look_rotation(tangent, normal),
        up=normal.copy(),
    )


class SurfaceWalkerController:
    """Turns and moves a :class:`SurfaceWalker` so it never leaves its sphere.

    Turning spins the walker about the local normal. Moving rotates both the
    position and the orientation about ``cross(position, heading)``, an axis
    through the sphere center, so the distance to the center is preserved.
    """

    def __init__(self, walker: SurfaceWalker, cfg: WalkerCfg = WALKER_CFG) -> None:
        self.walker = walker
        self.cfg = cfg

    def normal(self) -> np.ndarray:
        return normalize(self.walker.position)

    def heading(self) -> np.ndarray:
        """Forward direction projected onto the tangent plane."""

        forward = quat_rotate(self.walker.orientation, FORWARD)
        return _tangent_heading(self.normal(), forward)

    def turn(self, sign: float, dt: float) -> None:
        if sign == 0 or dt <= 0.0:
            return
        angle = self.cfg.turn_speed * dt * sign
        spin = quat_from_axis_angle(self.normal(), angle)
        self.walker.orientation = quat_normalize(quat_multiply(spin, self.walker.orientation))

    def move(self, sign: float, dt: float) -> None:
        if sign == 0 or dt <= 0.0:
            return
        walker = self.walker
        tangent = self.heading()
        axis = normalize(np.cross(walker.position, tangent))
        if not axis.any():
            logger.debug("Walker heading degenerate at %s, skipping move", walker.position)
            return
        angle = (self.cfg.move_speed * dt / walker.radius) * sign
        walker.position = rotate_about_axis(walker.position, axis, angle)
        step = quat_from_axis_angle(axis, angle)
        walker.orientation = quat_normalize(quat_multiply(step, walker.orientation))
        self._snap_to_surface()
        self._realign_orientation()
        walker.up = self.normal()

    def _snap_to_surface(self) -> None:
        walker = self.walker
        distance = length(walker.position)
        if abs(distance - walker.radius) > self.cfg.drift_tolerance and distance > 0.0:
            walker.position = walker.position * (walker.radius / distance)

    def _realign_orientation(self) -> None:
        # rebuild from heading and normal once local +Y drifts off the surface normal
        normal = self.normal()
        local_up = quat_rotate(self.walker.orientation, UP)
        if 1.0 - float(np.dot(local_up, normal)) > self.cfg.drift_tolerance:
            self.walker.orientation = look_rotation(self.heading(), normal)

    def update(self, inputs: WalkerInput, dt: float) -> None:
        self.turn(inputs.turn_sign, dt)
        self.move(inputs.move_sign, dt)

    def transfer(self, body_name: str, radius: float) -> None:
        """Move the walker to another sphere, keeping its direction and heading."""

        if radius <= 0.0:
            raise ConfigurationError(f"Walker sphere radius must be positive, got {radius}")
        walker = self.walker
        logger.info("Walker moved from %s to %s", walker.body_name, body_name)
        walker.position = self.normal() * radius
        walker.radius = radius
        walker.body_name = body_name
        walker.up = self.normal()


__all__ = ["SurfaceWalkerController", "WalkerInput", "place_walker"]
