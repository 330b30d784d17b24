"""Frame timing for the per-frame simulation step."""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`.

    ``tick`` returns the seconds since the previous call, capped at ``max_dt``
    so a stalled frame (window drag, breakpoint) does not become one huge step.
    """

    max_dt: float = 0.1
    last_time: float = field(default_factory=time.perf_counter)
    frames: int = 0

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        self.frames += 1
        return min(max(dt, 0.0), self.max_dt)

    def reset(self) -> None:
        self.last_time = time.perf_counter()
        self.frames = 0


__all__ = ["FrameTimer"]
