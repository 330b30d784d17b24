"""Circular orbit bookkeeping and the registry of loaded bodies."""
from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator

import numpy as np

from .model import TWO_PI, CelestialBody, Transform
from .vectors import Y_AXIS, quat_from_axis_angle, rotate_about_axis

logger = logging.getLogger(__name__)


def wrap_angle(angle: float) -> float:
    """Wrap ``angle`` into ``[0, 2π)``."""

    wrapped = math.fmod(angle, TWO_PI)
    if wrapped < 0.0:
        wrapped += TWO_PI
    return wrapped


def orbital_position(radius: float, angle: float, axis: np.ndarray = Y_AXIS) -> np.ndarray:
    """Point at ``angle`` on a circle of ``radius`` about ``axis`` through the origin.

    With the default +Y axis the circle lies in the X-Z plane and angle 0 is +X.
    """

    return rotate_about_axis(np.array([radius, 0.0, 0.0]), axis, angle)


def advance(body: CelestialBody, speed_scale: float = 1.0) -> float:
    """Step ``body`` along its orbit once; returns the new angle."""

    body.angle = wrap_angle(body.angle + body.angular_speed * speed_scale)
    return body.angle


def pivot_transform(body: CelestialBody) -> Transform:
    """Transform of the body's orbit pivot: origin, rotated about +Y by its angle."""

    return Transform(
        position=np.zeros(3, dtype=float),
        orientation=quat_from_axis_angle(Y_AXIS, body.angle),
    )


def body_position(body: CelestialBody) -> np.ndarray:
    return orbital_position(body.orbit_radius, body.angle)


def effective_angular_speed(body: CelestialBody, speed_scale: float, enabled: bool) -> float:
    """Angular step the body will actually take per tick."""

    if not enabled:
        return 0.0
    return body.angular_speed * speed_scale


class BodyRegistry:
    """Bodies by name plus their load readiness.

    ``expected`` lists the names the scene is waiting for; ``all_ready`` turns
    true once every one of them has been registered and marked ready.
    """

    def __init__(self, expected: Iterable[str] = ()) -> None:
        self._bodies: dict[str, CelestialBody] = {}
        self._ready: set[str] = set()
        self._expected: set[str] = set(expected)

    def register(self, body: CelestialBody, *, ready: bool = False) -> CelestialBody:
        if body.name in self._bodies:
            logger.debug("Replacing registered body %s", body.name)
        self._bodies[body.name] = body
        self._expected.add(body.name)
        if ready:
            self.mark_ready(body.name)
        return body

    def mark_ready(self, name: str) -> None:
        if name not in self._bodies:
            raise KeyError(f"Cannot mark unknown body {name!r} as ready")
        if name not in self._ready:
            self._ready.add(name)
            logger.info("Body %s ready (%d/%d)", name, len(self._ready), len(self._expected))

    def is_ready(self, name: str) -> bool:
        return name in self._ready

    @property
    def all_ready(self) -> bool:
        return bool(self._expected) and self._expected <= self._ready

    def get(self, name: str) -> CelestialBody:
        try:
            return self._bodies[name]
        except KeyError:
            raise KeyError(f"Unknown body {name!r}") from None

    def ready_bodies(self) -> list[CelestialBody]:
        return [body for name, body in self._bodies.items() if name in self._ready]

    def names(self) -> list[str]:
        return list(self._bodies)

    def __contains__(self, name: object) -> bool:
        return name in self._bodies

    def __iter__(self) -> Iterator[CelestialBody]:
        return iter(self._bodies.values())

    def __len__(self) -> int:
        return len(self._bodies)


class OrbitModel:
    """Advances the ready bodies while planet animation is enabled."""

    def __init__(self, registry: BodyRegistry, *, enabled: bool = False) -> None:
        self.registry = registry
        self.enabled = enabled
        self.ticks = 0

    def set_enabled(self, enabled: bool) -> None:
        if enabled != self.enabled:
            logger.info("Planet animation %s", "on" if enabled else "off")
        self.enabled = enabled

    def tick(self, speed_scale: float = 1.0) -> None:
        if not self.enabled:
            return
        for body in self.registry.ready_bodies():
            advance(body, speed_scale)
        self.ticks += 1

    def angular_speed_of(self, name: str, speed_scale: float) -> float:
        return effective_angular_speed(self.registry.get(name), speed_scale, self.enabled)

    def position_of(self, name: str) -> np.ndarray:
        return body_position(self.registry.get(name))


__all__ = [
    "BodyRegistry",
    "OrbitModel",
    "advance",
    "body_position",
    "effective_angular_speed",
    "orbital_position",
    "pivot_transform",
    "wrap_angle",
]
