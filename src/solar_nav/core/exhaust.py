"""Exhaust particle trails emitted behind a traveling actor."""
from __future__ import annotations

import numpy as np

from .config import EXHAUST_CFG, ExhaustCfg
from .model import Transform
from .vectors import FORWARD, normalize, quat_conjugate, quat_rotate


class ExhaustEmitter:
    """Particle stream that lives in world space but is anchored to an emitter.

    Particles are kept in world coordinates so that the trail stays behind
    when the emitter turns; :meth:`local_positions` converts them back for
    hosts that attach the particle mesh to the actor.
    """

    def __init__(
        self,
        offset: np.ndarray,
        *,
        cfg: ExhaustCfg = EXHAUST_CFG,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.offset = np.asarray(offset, dtype=float)
        self.cfg = cfg
        self.rng = rng or np.random.default_rng()
        self.visible = False
        self.world_positions: np.ndarray | None = None

    @property
    def particle_count(self) -> int:
        return self.cfg.particle_count

    def emitter_position(self, actor: Transform) -> np.ndarray:
        return actor.position + quat_rotate(actor.orientation, self.offset)

    def engine_direction(self, actor: Transform) -> np.ndarray:
        # exhaust leaves through the rear of the actor
        return normalize(quat_rotate(actor.orientation, -FORWARD))

    def _along_stream(self, origin: np.ndarray, direction: np.ndarray, spread: float, count: int) -> np.ndarray:
        # upstream of the nozzle, so particles flow through the emitter
        distances = self.rng.random(count) * spread
        return origin - distances[:, None] * direction[None, :]

    def reset(self) -> None:
        self.world_positions = None

    def update(self, dt: float, emitter_position: np.ndarray, engine_direction: np.ndarray) -> np.ndarray:
        """Advance every particle by one tick of ``dt`` seconds."""

        cfg = self.cfg
        count = cfg.particle_count
        origin = np.asarray(emitter_position, dtype=float)
        direction = normalize(engine_direction)
        if self.world_positions is None:
            self.world_positions = self._along_stream(origin, direction, cfg.initial_spread, count)

        positions = self.world_positions
        speeds = (cfg.base_speed + self.rng.random(count) * cfg.speed_jitter) * dt
        positions += speeds[:, None] * direction[None, :]
        positions += (self.rng.random((count, 3)) - 0.5) * cfg.position_jitter

        escaped = np.linalg.norm(positions - origin, axis=1) > cfg.max_distance
        n_escaped = int(escaped.sum())
        if n_escaped:
            positions[escaped] = self._along_stream(origin, direction, cfg.respawn_spread, n_escaped)
        return positions

    def update_for(self, dt: float, actor: Transform) -> np.ndarray:
        return self.update(dt, self.emitter_position(actor), self.engine_direction(actor))

    def local_positions(self, actor: Transform) -> np.ndarray:
        """Particle positions relative to the emitter, in the actor's local axes."""

        if self.world_positions is None:
            return np.zeros((0, 3), dtype=float)
        inverse = quat_conjugate(actor.orientation)
        relative = self.world_positions - self.emitter_position(actor)
        return np.array([quat_rotate(inverse, p) for p in relative])


def create_exhaust_emitters(
    cfg: ExhaustCfg = EXHAUST_CFG,
    rng: np.random.Generator | None = None,
) -> list[ExhaustEmitter]:
    """One emitter per engine nozzle, offsets scaled to the actor's size."""

    rng = rng or np.random.default_rng()
    return [
        ExhaustEmitter(np.asarray(offset, dtype=float) * cfg.emitter_scale, cfg=cfg, rng=rng)
        for offset in cfg.emitter_offsets
    ]


__all__ = ["ExhaustEmitter", "create_exhaust_emitters"]
