"""Interception solver and steering helpers.

The solver looks for the earliest time ``t`` at which an actor leaving
``start`` now, flying a straight line at constant ``speed``, meets a target
that rotates about ``axis`` (through ``center``) at ``angular_speed`` per tick::

    f(t) = |start - target(t)| - speed * t

``f(0)`` is the current separation. ``f`` is sampled across ``[0, horizon]``
and the first interval where it drops to zero or below is refined by
bisection, so the root returned is the earliest one even when ``f`` is not
monotonic. If ``f`` stays positive over the whole horizon the target cannot
be reached and the solver returns ``None``.
"""
from __future__ import annotations

import logging
import math

import numpy as np

from .config import NAV_CFG, NavigationCfg
from .model import InterceptSolution
from .vectors import (
    UP,
    Y_AXIS,
    length,
    look_rotation,
    normalize,
    quat_slerp,
    rotate_about_axis,
)

logger = logging.getLogger(__name__)


def target_position_at(
    target_start: np.ndarray,
    angular_speed: float,
    t: float,
    *,
    axis: np.ndarray = Y_AXIS,
    center: np.ndarray | None = None,
) -> np.ndarray:
    """Position of a target after rotating for ``t`` ticks."""

    if center is None:
        return rotate_about_axis(np.asarray(target_start, dtype=float), axis, angular_speed * t)
    offset = np.asarray(target_start, dtype=float) - center
    return center + rotate_about_axis(offset, axis, angular_speed * t)


def intercept_gap(
    t: float,
    start: np.ndarray,
    target_start: np.ndarray,
    speed: float,
    angular_speed: float,
    *,
    axis: np.ndarray = Y_AXIS,
    center: np.ndarray | None = None,
) -> float:
    """Remaining distance to the target at ``t`` minus the distance flown by then."""

    target = target_position_at(target_start, angular_speed, t, axis=axis, center=center)
    return length(np.asarray(start, dtype=float) - target) - speed * t


def _bisect(func, lo: float, hi: float, iterations: int, tolerance: float) -> float:
    # invariant: func(lo) > 0 >= func(hi)
    mid = hi
    for _ in range(iterations):
        mid = 0.5 * (lo + hi)
        value = func(mid)
        if abs(value) < tolerance:
            return mid
        if value > 0.0:
            lo = mid
        else:
            hi = mid
    return 0.5 * (lo + hi)


def solve_intercept(
    start: np.ndarray,
    target_start: np.ndarray,
    speed: float,
    angular_speed: float,
    *,
    cfg: NavigationCfg = NAV_CFG,
    horizon: float | None = None,
) -> InterceptSolution | None:
    """Return the earliest interception of a rotating target, or ``None`` if infeasible."""

    start = np.asarray(start, dtype=float)
    target_start = np.asarray(target_start, dtype=float)
    horizon = cfg.intercept_horizon if horizon is None else horizon
    if speed <= 0.0 or horizon <= 0.0:
        return None

    def gap(t: float) -> float:
        return intercept_gap(
            t,
            start,
            target_start,
            speed,
            angular_speed,
            axis=cfg.orbit_axis,
            center=cfg.orbit_center,
        )

    lo = 0.0
    f_lo = gap(lo)
    if f_lo <= 0.0:
        t_star = 0.0
    else:
        t_star = None
        samples = max(1, cfg.intercept_samples)
        for i in range(1, samples + 1):
            hi = horizon * i / samples
            f_hi = gap(hi)
            if f_hi <= 0.0:
                t_star = _bisect(gap, lo, hi, cfg.bisection_iterations, cfg.bisection_tolerance)
                break
            lo = hi
        if t_star is None:
            logger.debug(
                "No intercept within %.1f ticks (speed=%.4g, angular_speed=%.4g)",
                horizon,
                speed,
                angular_speed,
            )
            return None

    point = target_position_at(
        target_start, angular_speed, t_star, axis=cfg.orbit_axis, center=cfg.orbit_center
    )
    heading = normalize(point - start)
    return InterceptSolution(time=t_star, point=point, heading=heading)


def blend_factor(cfg: NavigationCfg = NAV_CFG, dt: float | None = None) -> float:
    """Fraction of the remaining rotation applied this tick.

    ``fixed`` mode returns the configured per-tick fraction regardless of frame
    time; ``exponential`` mode returns ``1 - exp(-rate * dt)``.
    """

    if cfg.orientation_blend_mode == "exponential" and dt is not None:
        return 1.0 - math.exp(-cfg.orientation_blend_rate * max(dt, 0.0))
    return cfg.orientation_blend


def steer_towards(
    orientation: np.ndarray,
    position: np.ndarray,
    destination: np.ndarray,
    blend: float,
    up: np.ndarray = UP,
) -> np.ndarray:
    """Slerp ``orientation`` part of the way toward facing ``destination``."""

    direction = normalize(np.asarray(destination, dtype=float) - position)
    if not direction.any():
        return orientation
    return quat_slerp(orientation, look_rotation(direction, up), blend)


__all__ = [
    "blend_factor",
    "intercept_gap",
    "solve_intercept",
    "steer_towards",
    "target_position_at",
]
