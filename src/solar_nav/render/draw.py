from __future__ import annotations

import math
from typing import Iterable, TYPE_CHECKING

import numpy as np
import pygame

from solar_nav.core.vectors import FORWARD, quat_rotate

from .assets import BodySprites, body_color, make_disc_sprite
from .camera import TopDownCamera

if TYPE_CHECKING:  # pragma: no cover
    from solar_nav.core.config import RenderCfg
    from solar_nav.core.exhaust import ExhaustEmitter
    from solar_nav.core.model import SurfaceWalker, Transform


def generate_starfield(
    num_stars: int,
    *,
    spread: float,
    colors: Iterable[tuple[int, int, int]],
    rng: np.random.Generator | None = None,
) -> list[dict[str, object]]:
    """Stars scattered uniformly through a cube of side ``spread`` around the origin."""

    rng = rng or np.random.default_rng()
    palette = list(colors)
    positions = (rng.random((num_stars, 3)) - 0.5) * spread
    choices = rng.integers(0, len(palette), size=num_stars)
    sprites = {idx: make_disc_sprite(1, palette[idx], 200) for idx in range(len(palette))}
    return [
        {"pos": positions[i], "surface": sprites[int(choices[i])]}
        for i in range(num_stars)
    ]


def draw_starfield(
    surface: pygame.Surface,
    starfield: Iterable[dict[str, object]],
    camera: TopDownCamera,
    *,
    render_cfg: RenderCfg,
) -> None:
    width, height = surface.get_size()
    ppu = camera.ppu
    offset_x = camera.center[0] * ppu * render_cfg.starfield_parallax
    offset_y = camera.center[1] * ppu * render_cfg.starfield_parallax
    scale = width / render_cfg.star_spread
    for star in starfield:
        pos = star["pos"]  # type: ignore[index]
        sx = int((width / 2 + pos[0] * scale - offset_x) % width)
        sy = int((height / 2 + pos[2] * scale - offset_y) % height)
        surface.blit(star["surface"], (sx - 1, sy - 1))  # type: ignore[arg-type]


def draw_orbit_ring(
    surface: pygame.Surface,
    camera: TopDownCamera,
    radius: float,
    *,
    color: tuple[int, int, int],
) -> None:
    pixel_radius = int(radius * camera.ppu)
    if pixel_radius <= 0:
        return
    pygame.draw.circle(surface, color, camera.world_to_screen(np.zeros(3)), pixel_radius, 1)


def draw_body(
    surface: pygame.Surface,
    camera: TopDownCamera,
    name: str,
    position: np.ndarray,
    radius: float,
    sprites: BodySprites | None = None,
) -> None:
    pixel_radius = max(2, int(radius * camera.ppu))
    center = camera.world_to_screen(position)
    if sprites is None:
        pygame.draw.circle(surface, body_color(name), center, pixel_radius)
        return
    sprite = sprites.get(name, pixel_radius)
    surface.blit(sprite, sprite.get_rect(center=center))


def draw_ship(
    surface: pygame.Surface,
    camera: TopDownCamera,
    transform: Transform,
    *,
    render_cfg: RenderCfg,
) -> None:
    nose = quat_rotate(transform.orientation, FORWARD)
    angle = math.atan2(nose[2], nose[0])
    tip = camera.world_to_screen(transform.position)
    length = render_cfg.ship_heading_length
    half_width = math.radians(150)
    points = [
        (tip[0] + math.cos(angle) * length * 0.6, tip[1] + math.sin(angle) * length * 0.6),
        (tip[0] + math.cos(angle + half_width) * length * 0.5, tip[1] + math.sin(angle + half_width) * length * 0.5),
        (tip[0] + math.cos(angle - half_width) * length * 0.5, tip[1] + math.sin(angle - half_width) * length * 0.5),
    ]
    pygame.draw.polygon(surface, render_cfg.ship_color, points)


def draw_exhaust(
    surface: pygame.Surface,
    camera: TopDownCamera,
    emitters: Iterable[ExhaustEmitter],
    *,
    render_cfg: RenderCfg,
) -> None:
    bounds = surface.get_rect()
    for emitter in emitters:
        if not emitter.visible or emitter.world_positions is None:
            continue
        for position in emitter.world_positions:
            point = camera.world_to_screen(position)
            if bounds.collidepoint(point):
                surface.set_at(point, render_cfg.exhaust_color)


def draw_walker_inset(
    surface: pygame.Surface,
    walker: SurfaceWalker,
    heading: np.ndarray,
    *,
    render_cfg: RenderCfg,
) -> None:
    """Small orthographic view of the walker's planet seen from +Z."""

    size = render_cfg.walker_inset_size
    inset = pygame.Surface((size, size), pygame.SRCALPHA)
    center = (size // 2, size // 2)
    disc_radius = int(size * 0.38)
    pygame.draw.circle(inset, (*body_color(walker.body_name), 160), center, disc_radius)
    pygame.draw.circle(inset, (255, 255, 255, 80), center, disc_radius, 1)

    scale = disc_radius / walker.radius

    def project(point: np.ndarray) -> tuple[int, int]:
        return center[0] + int(point[0] * scale), center[1] - int(point[1] * scale)

    front = walker.position[2] >= 0.0
    marker_color = render_cfg.walker_color if front else (120, 100, 60)
    pos = project(walker.position)
    tip = project(walker.position + heading * walker.radius * 0.25)
    pygame.draw.line(inset, marker_color, pos, tip, 2)
    pygame.draw.circle(inset, marker_color, pos, 4)

    rect = inset.get_rect()
    rect.bottomright = (surface.get_width() - 12, surface.get_height() - 12)
    surface.blit(inset, rect)
