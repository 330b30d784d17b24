"""Data models for bodies, reference frames and actors."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np

from .vectors import identity_quat

TWO_PI = 2.0 * math.pi


class ConfigurationError(ValueError):
    """Raised when an entity or configuration value is set up with invalid values."""


@dataclass
class CelestialBody:
    """A body moving on a circular orbit around the shared origin."""

    name: str
    orbit_radius: float
    angular_speed: float
    angle: float = 0.0
    bounding_radius: float = 1.0
    visual: Any = None

    def __post_init__(self) -> None:
        if self.orbit_radius < 0.0:
            raise ConfigurationError(
                f"Orbit radius of {self.name!r} must be >= 0, got {self.orbit_radius}"
            )
        self.angle = math.fmod(self.angle, TWO_PI)
        if self.angle < 0.0:
            self.angle += TWO_PI


@dataclass(frozen=True)
class WorldFrame:
    """The world root."""


@dataclass(frozen=True)
class OrbitFrame:
    """The orbit pivot of the body called ``body_name``."""

    body_name: str


Frame = Union[WorldFrame, OrbitFrame]
WORLD = WorldFrame()


@dataclass
class Transform:
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    orientation: np.ndarray = field(default_factory=identity_quat)

    def copy(self) -> "Transform":
        return Transform(position=self.position.copy(), orientation=self.orientation.copy())


@dataclass(frozen=True)
class InterceptSolution:
    """Where and when a constant-speed straight-line path meets a rotating target."""

    time: float
    point: np.ndarray
    heading: np.ndarray


@dataclass(frozen=True)
class Idle:
    body: str


@dataclass(frozen=True)
class Traveling:
    target: str
    destination: np.ndarray
    speed: float
    solution: InterceptSolution | None = None


@dataclass(frozen=True)
class Landed:
    body: str


TravelState = Union[Idle, Traveling, Landed]


@dataclass
class TravelingActor:
    """Actor that rides a body's orbit pivot or flies freely in world space.

    ``local`` is expressed in ``frame``; exactly one frame owns the actor.
    """

    name: str
    local: Transform = field(default_factory=Transform)
    frame: Frame = WORLD
    state: TravelState | None = None
    past_target: str | None = None
    emitters: list = field(default_factory=list)

    @property
    def is_traveling(self) -> bool:
        return isinstance(self.state, Traveling)


@dataclass
class SurfaceWalker:
    """Actor glued to the surface of a sphere in a body's local frame."""

    body_name: str
    radius: float
    position: np.ndarray
    orientation: np.ndarray
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ConfigurationError(
                f"Walker sphere radius must be positive, got {self.radius}"
            )


__all__ = [
    "WORLD",
    "CelestialBody",
    "ConfigurationError",
    "Frame",
    "Idle",
    "InterceptSolution",
    "Landed",
    "OrbitFrame",
    "SurfaceWalker",
    "TWO_PI",
    "Transform",
    "TravelState",
    "Traveling",
    "TravelingActor",
    "WorldFrame",
]
