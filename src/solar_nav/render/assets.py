from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]

_BODY_COLORS: dict[str, tuple[int, int, int]] = {
    "sun": (255, 214, 64),
    "mercury": (169, 160, 150),
    "venus": (230, 190, 120),
    "earth": (80, 140, 255),
    "mars": (214, 96, 64),
    "jupiter": (214, 170, 120),
    "saturn": (139, 90, 43),
    "uranus": (150, 220, 230),
    "neptune": (70, 100, 230),
}


def body_color(name: str) -> tuple[int, int, int]:
    color = _BODY_COLORS.get(name)
    if color is not None:
        return color
    # derived from the name so unknown bodies keep their color between runs
    seed = sum(ord(ch) for ch in name)
    return (80 + seed * 37 % 176, 80 + seed * 59 % 176, 80 + seed * 83 % 176)


def _shade(color: tuple[int, int, int], factor: float) -> tuple[int, int, int]:
    return tuple(max(0, min(255, int(c * factor))) for c in color)  # type: ignore[return-value]


class BodySprites:
    """Shaded planet discs, cached per body and on-screen radius.

    Zooming produces many radii, so the cache evicts least recently used
    entries once it holds ``max_entries`` sprites.
    """

    def __init__(self, max_entries: int = 128) -> None:
        self._max_entries = max(1, max_entries)
        self._cache: OrderedDict[tuple[str, int], pygame.Surface] = OrderedDict()

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, name: str, pixel_radius: int) -> pygame.Surface:
        if pixel_radius <= 0:
            raise ValueError("Body sprite radius must be positive")
        key = (name, pixel_radius)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            return cached
        sprite = self._render(name, pixel_radius)
        self._cache[key] = sprite
        if len(self._cache) > self._max_entries:
            self._cache.popitem(last=False)
        return sprite

    @staticmethod
    def _render(name: str, radius: int) -> pygame.Surface:
        base = body_color(name)
        sprite = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        center = (radius, radius)
        pygame.draw.circle(sprite, _shade(base, 0.55), center, radius)
        # brighter toward the center
        for step in range(radius, 0, -max(1, radius // 6)):
            factor = 0.55 + 0.5 * (1.0 - step / radius)
            pygame.draw.circle(sprite, _shade(base, factor), center, step)
        if name == "sun":
            pygame.draw.circle(sprite, (255, 240, 180, 90), center, radius, max(1, radius // 8))
        return sprite


_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color.

    Surfaces retrieved from the cache must be treated as immutable by callers.
    """

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        match = pygame.font.match_font(name, bold=bold)
        if match:
            return pygame.font.Font(match, size)
    return pygame.font.SysFont(names[0] if names else None, size, bold=bold)


def make_disc_sprite(radius: int, color: tuple[int, int, int], alpha: int = 255) -> pygame.Surface:
    """Soft-edged disc used for the starfield."""

    radius = max(1, radius)
    sprite = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
    for r in range(radius, 0, -1):
        fade = int(alpha * (1.0 - (r - 1) / radius))
        pygame.draw.circle(sprite, (*color, fade), (radius, radius), r)
    return sprite
