"""Configuration dataclasses and user settings for the navigation core."""
from __future__ import annotations

import dataclasses
import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, TypeVar

import numpy as np

from .model import ConfigurationError

logger = logging.getLogger(__name__)

BLEND_MODES = ("fixed", "exponential")


@dataclass(frozen=True)
class NavigationCfg:
    default_travel_speed: float = 0.1
    landing_threshold: float = 0.1
    intercept_horizon: float = 1000.0
    intercept_samples: int = 64
    bisection_iterations: int = 50
    bisection_tolerance: float = 1e-6
    orientation_blend_mode: str = "fixed"
    orientation_blend: float = 0.05
    orientation_blend_rate: float = 3.0
    orbit_axis: np.ndarray = field(
        default_factory=lambda: np.array([0.0, 1.0, 0.0], dtype=float)
    )
    orbit_center: np.ndarray = field(
        default_factory=lambda: np.zeros(3, dtype=float)
    )

    def validate(self) -> None:
        if self.landing_threshold <= 0.0:
            raise ConfigurationError("landing_threshold must be positive")
        if self.intercept_horizon <= 0.0:
            raise ConfigurationError("intercept_horizon must be positive")
        if self.intercept_samples < 1 or self.bisection_iterations < 1:
            raise ConfigurationError("intercept_samples and bisection_iterations must be >= 1")
        if self.orientation_blend_mode not in BLEND_MODES:
            raise ConfigurationError(
                f"orientation_blend_mode must be one of {BLEND_MODES}, "
                f"got {self.orientation_blend_mode!r}"
            )
        if not 0.0 < self.orientation_blend <= 1.0:
            raise ConfigurationError("orientation_blend must lie in (0, 1]")


@dataclass(frozen=True)
class WalkerCfg:
    turn_speed: float = math.pi / 2.0
    move_speed: float = 1.5
    drift_tolerance: float = 1e-9

    def validate(self) -> None:
        if self.turn_speed < 0.0 or self.move_speed < 0.0:
            raise ConfigurationError("walker speeds must be >= 0")


@dataclass(frozen=True)
class ExhaustCfg:
    particle_count: int = 200
    initial_spread: float = 2.0
    respawn_spread: float = 1.0
    max_distance: float = 1.0
    base_speed: float = 0.3
    speed_jitter: float = 0.1
    position_jitter: float = 0.05
    emitter_offsets: tuple[tuple[float, float, float], ...] = (
        (-1.5, 1.0, -6.5),
        (1.5, 1.0, -6.5),
        (-1.5, -1.0, -6.5),
        (1.5, -1.0, -6.5),
    )
    emitter_scale: float = 0.05

    def validate(self) -> None:
        if self.particle_count < 1:
            raise ConfigurationError("particle_count must be >= 1")


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1200
    height: int = 800
    background_color: tuple[int, int, int] = (0, 0, 0)
    orbit_ring_color: tuple[int, int, int] = (48, 52, 64)
    ship_color: tuple[int, int, int] = (220, 236, 255)
    ship_heading_length: int = 14
    exhaust_color: tuple[int, int, int] = (255, 102, 0)
    walker_color: tuple[int, int, int] = (255, 196, 64)
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    button_color: tuple[int, int, int, int] = (8, 32, 64, int(255 * 0.78))
    button_hover_color: tuple[int, int, int, int] = (18, 52, 94, int(255 * 0.88))
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (88, 140, 255, int(255 * 0.55))
    button_active_color: tuple[int, int, int, int] = (30, 86, 150, int(255 * 0.9))
    button_radius: int = 12
    star_count: int = 3000
    star_spread: float = 1000.0
    star_colors: tuple[tuple[int, int, int], ...] = (
        (255, 255, 255),
        (255, 204, 170),
        (170, 204, 255),
    )
    starfield_parallax: float = 0.12
    pixels_per_unit: float = 6.0
    min_pixels_per_unit: float = 0.5
    max_pixels_per_unit: float = 200.0
    walker_inset_size: int = 220
    target_fps: int = 60


NAV_CFG = NavigationCfg()
WALKER_CFG = WalkerCfg()
EXHAUST_CFG = ExhaustCfg()
RENDER_CFG = RenderCfg()

SETTINGS_DIR = Path.home() / ".solar_nav"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"

CfgT = TypeVar("CfgT")


def load_user_settings(path: Path = SETTINGS_PATH) -> dict[str, Any]:
    """Return persisted settings if the JSON file is readable, else an empty dict."""

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return {}
    if isinstance(data, dict):
        return data
    logger.warning("Ignoring settings file %s: top level is not an object", path)
    return {}


def save_user_settings(settings: Mapping[str, Any], path: Path = SETTINGS_PATH) -> bool:
    """Persist settings; returns ``False`` if the file could not be written."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(dict(settings), fh, indent=2, sort_keys=True)
    except OSError as exc:
        logger.warning("Could not save settings to %s: %s", path, exc)
        return False
    return True


def _coerce(current: Any, value: Any) -> Any:
    if isinstance(current, np.ndarray):
        return np.asarray(value, dtype=float).reshape(current.shape)
    if isinstance(current, bool):
        return bool(value)
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    if isinstance(current, tuple):
        return tuple(tuple(item) if isinstance(item, list) else item for item in value)
    return value


def apply_overrides(cfg: CfgT, overrides: Mapping[str, Any]) -> CfgT:
    """Return a copy of ``cfg`` with the known keys of ``overrides`` applied.

    Unknown keys are logged and skipped. Values that cannot be converted to the
    field's type raise :class:`ConfigurationError`.
    """

    known = {f.name for f in dataclasses.fields(cfg)}
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning("Unknown %s setting %r ignored", type(cfg).__name__, key)
            continue
        try:
            changes[key] = _coerce(getattr(cfg, key), value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid value for {key!r}: {value!r}") from exc
    updated = dataclasses.replace(cfg, **changes)
    validate = getattr(updated, "validate", None)
    if validate is not None:
        validate()
    return updated


def load_configs(
    path: Path = SETTINGS_PATH,
) -> tuple[NavigationCfg, WalkerCfg, ExhaustCfg, RenderCfg]:
    """Build the configs from defaults plus the ``navigation``/``walker``/... sections."""

    settings = load_user_settings(path)
    return (
        apply_overrides(NAV_CFG, settings.get("navigation", {})),
        apply_overrides(WALKER_CFG, settings.get("walker", {})),
        apply_overrides(EXHAUST_CFG, settings.get("exhaust", {})),
        apply_overrides(RENDER_CFG, settings.get("render", {})),
    )


__all__ = [
    "BLEND_MODES",
    "EXHAUST_CFG",
    "ExhaustCfg",
    "NAV_CFG",
    "NavigationCfg",
    "RENDER_CFG",
    "RenderCfg",
    "SETTINGS_PATH",
    "WALKER_CFG",
    "WalkerCfg",
    "apply_overrides",
    "load_configs",
    "load_user_settings",
    "save_user_settings",
]
