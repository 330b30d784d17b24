"""Definitions of the bodies that make up the default solar system."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from solar_nav.core.model import CelestialBody


@dataclass(frozen=True)
class BodyDefinition:
    key: str
    name: str
    orbit_radius: float
    angular_speed: float
    scale: float
    description: str
    initial_angle: float = 0.0

    @property
    def bounding_radius(self) -> float:
        # models are normalised to a unit box before scaling
        return 0.5 * self.scale

    def create_body(self) -> CelestialBody:
        return CelestialBody(
            name=self.key,
            orbit_radius=self.orbit_radius,
            angular_speed=self.angular_speed,
            angle=self.initial_angle,
            bounding_radius=self.bounding_radius,
        )

    def dock_position(self, clearance: float = 0.35) -> np.ndarray:
        """Parking spot just outside the body, expressed in its orbit frame."""

        return np.array([self.orbit_radius + self.bounding_radius + clearance, 0.0, 0.0])


BODY_DEFINITIONS: tuple[BodyDefinition, ...] = (
    BodyDefinition(
        key="sun",
        name="Sun",
        orbit_radius=0.0,
        angular_speed=0.0,
        scale=10.0,
        description="Center of the system; does not orbit.",
    ),
    BodyDefinition(
        key="mercury",
        name="Mercury",
        orbit_radius=10.0,
        angular_speed=0.0326,
        scale=2.0,
        description="Innermost and fastest planet.",
    ),
    BodyDefinition(
        key="venus",
        name="Venus",
        orbit_radius=15.0,
        angular_speed=0.0178,
        scale=3.0,
        description="Second planet.",
    ),
    BodyDefinition(
        key="earth",
        name="Earth",
        orbit_radius=22.0,
        angular_speed=0.01,
        scale=3.5,
        description="Home port of the spaceship.",
    ),
    BodyDefinition(
        key="mars",
        name="Mars",
        orbit_radius=29.0,
        angular_speed=0.0066,
        scale=2.5,
        description="Fourth planet.",
    ),
    BodyDefinition(
        key="jupiter",
        name="Jupiter",
        orbit_radius=40.0,
        angular_speed=0.0041,
        scale=6.0,
        description="Largest planet; default travel target.",
    ),
    BodyDefinition(
        key="saturn",
        name="Saturn",
        orbit_radius=50.0,
        angular_speed=0.0029,
        scale=5.0,
        description="Ringed giant.",
    ),
    BodyDefinition(
        key="uranus",
        name="Uranus",
        orbit_radius=60.0,
        angular_speed=0.0022,
        scale=4.5,
        description="Ice giant.",
    ),
    BodyDefinition(
        key="neptune",
        name="Neptune",
        orbit_radius=70.0,
        angular_speed=0.0018,
        scale=4.0,
        description="Outermost planet.",
    ),
)

BODIES: dict[str, BodyDefinition] = {body.key: body for body in BODY_DEFINITIONS}
BODY_DISPLAY_ORDER: list[str] = [body.key for body in BODY_DEFINITIONS]
PLANET_KEYS: list[str] = [key for key in BODY_DISPLAY_ORDER if BODIES[key].orbit_radius > 0.0]
DEFAULT_HOME_KEY = "earth"
DEFAULT_TARGET_KEY = "jupiter"
DEFAULT_WALKER_BODY_KEY = "earth"


__all__ = [
    "BODIES",
    "BODY_DEFINITIONS",
    "BODY_DISPLAY_ORDER",
    "BodyDefinition",
    "DEFAULT_HOME_KEY",
    "DEFAULT_TARGET_KEY",
    "DEFAULT_WALKER_BODY_KEY",
    "PLANET_KEYS",
]
