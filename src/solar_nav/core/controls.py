"""User-adjustable parameters and their change notifications."""
from __future__ import annotations

import dataclasses
import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

CAMERA_MODES = ("ship", "walker", "free")

ChangeCallback = Callable[[Any], None]


@dataclass
class ControlState:
    speed_scale: float = 1.0
    travel_speed: float = 0.1
    target: str = "jupiter"
    camera_follow: str = "ship"
    planet_animation: bool = False
    launch: bool = False


class ControlPanel:
    """Holds a :class:`ControlState` and notifies listeners when a value changes."""

    def __init__(self, state: ControlState | None = None) -> None:
        self.state = state or ControlState()
        self._kinds = {f.name: type(f.default) for f in dataclasses.fields(self.state)}
        self._callbacks: dict[str, list[ChangeCallback]] = defaultdict(list)

    def _check(self, name: str) -> None:
        if name not in self._kinds:
            raise KeyError(f"Unknown control {name!r}")

    def _coerce(self, name: str, value: Any) -> Any:
        kind = self._kinds[name]
        if kind is float and not isinstance(value, bool):
            try:
                number = float(value)
            except (TypeError, ValueError):
                number = math.nan
            if not math.isfinite(number):
                raise ValueError(f"{name} must be a finite number, got {value!r}")
            return number
        if not isinstance(value, kind):
            raise ValueError(f"{name} must be a {kind.__name__}, got {value!r}")
        return value

    def get(self, name: str) -> Any:
        self._check(name)
        return getattr(self.state, name)

    def on_change(self, name: str, callback: ChangeCallback) -> None:
        self._check(name)
        self._callbacks[name].append(callback)

    def set(self, name: str, value: Any) -> bool:
        """Assign a control; returns ``True`` if the value changed."""

        self._check(name)
        value = self._coerce(name, value)
        if name == "camera_follow" and value not in CAMERA_MODES:
            raise ValueError(f"camera_follow must be one of {CAMERA_MODES}, got {value!r}")
        if getattr(self.state, name) == value:
            return False
        setattr(self.state, name, value)
        logger.debug("Control %s -> %r", name, value)
        for callback in self._callbacks[name]:
            callback(value)
        return True

    def toggle(self, name: str) -> bool:
        value = not bool(self.get(name))
        self.set(name, value)
        return value

    def cycle(self, name: str, options: list[str] | tuple[str, ...]) -> str:
        """Select the option after the current one, wrapping around."""

        current = self.get(name)
        index = options.index(current) if current in options else -1
        choice = options[(index + 1) % len(options)]
        self.set(name, choice)
        return choice

    def nudge(self, name: str, delta: float, lo: float, hi: float) -> float:
        value = max(lo, min(hi, float(self.get(name)) + delta))
        self.set(name, value)
        return value


__all__ = ["CAMERA_MODES", "ControlPanel", "ControlState"]
