from __future__ import annotations

import numpy as np


class TopDownCamera:
    """Looks down the +Y axis onto the orbital (X-Z) plane.

    World X maps to screen right and world Z to screen down, so an orbit with
    positive angular speed turns counter-clockwise on screen. ``center`` and
    the follow target are stored as (x, z) pairs.
    """

    def __init__(
        self,
        size: tuple[int, int],
        ppu: float,
        *,
        min_ppu: float,
        max_ppu: float,
    ) -> None:
        if min_ppu <= 0 or max_ppu < min_ppu:
            raise ValueError("Camera zoom limits must satisfy 0 < min_ppu <= max_ppu")
        self._size = size
        self._ppu_range = (min_ppu, max_ppu)
        self._ppu = self._ppu_goal = self._limit(ppu)
        self._center = np.zeros(2, dtype=float)
        self._goal = np.zeros(2, dtype=float)
        self._drag_from: tuple[int, int] | None = None

    def _limit(self, ppu: float) -> float:
        lo, hi = self._ppu_range
        return float(np.clip(ppu, lo, hi))

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def ppu(self) -> float:
        """Pixels per world unit."""
        return self._ppu

    @property
    def center(self) -> np.ndarray:
        return self._center

    def follow(self, position: np.ndarray | None) -> None:
        """Ease toward a world point (x, y, z); ``None`` keeps the current goal."""

        if position is not None:
            self._goal[:] = (position[0], position[2])

    def zoom_by_factor(self, factor: float) -> None:
        self._ppu_goal = self._limit(self._ppu_goal * factor)

    def update(self, smoothing: float = 0.1) -> None:
        self._ppu = self._limit(self._ppu + (self._ppu_goal - self._ppu) * smoothing)
        self._center += (self._goal - self._center) * smoothing

    def begin_pan(self, position: tuple[int, int]) -> None:
        self._drag_from = position

    def pan(self, position: tuple[int, int]) -> None:
        if self._drag_from is None or position == self._drag_from:
            return
        shift = np.subtract(position, self._drag_from) / max(self._ppu, 1e-9)
        self._center -= shift
        # dragging overrides whatever was being followed
        self._goal[:] = self._center
        self._drag_from = position

    def end_pan(self) -> None:
        self._drag_from = None

    def world_to_screen(self, position: np.ndarray) -> tuple[int, int]:
        width, height = self._size
        sx = width // 2 + int((position[0] - self._center[0]) * self._ppu)
        sy = height // 2 + int((position[2] - self._center[1]) * self._ppu)
        return sx, sy

    def screen_to_world(self, pixel: tuple[int, int]) -> np.ndarray:
        """Point on the orbital plane (y = 0) under a screen pixel."""

        width, height = self._size
        x = self._center[0] + (pixel[0] - width // 2) / self._ppu
        z = self._center[1] + (pixel[1] - height // 2) / self._ppu
        return np.array([x, 0.0, z])
