"""Reference frames and transform hand-off between them."""
from __future__ import annotations

import numpy as np

from .model import Frame, OrbitFrame, Transform, WorldFrame
from .orbits import BodyRegistry, pivot_transform
from .vectors import identity_quat, quat_conjugate, quat_multiply, quat_normalize, quat_rotate


def frame_transform(frame: Frame, registry: BodyRegistry) -> Transform:
    """World transform of ``frame``."""

    if isinstance(frame, WorldFrame):
        return Transform(position=np.zeros(3, dtype=float), orientation=identity_quat())
    if isinstance(frame, OrbitFrame):
        return pivot_transform(registry.get(frame.body_name))
    raise TypeError(f"Unsupported frame {frame!r}")


def compose(parent: Transform, local: Transform) -> Transform:
    """``parent ∘ local``: express a transform given in ``parent`` in the parent's space."""

    return Transform(
        position=parent.position + quat_rotate(parent.orientation, local.position),
        orientation=quat_normalize(quat_multiply(parent.orientation, local.orientation)),
    )


def relative_to(parent: Transform, world: Transform) -> Transform:
    """Inverse of :func:`compose`: express ``world`` in ``parent``'s space."""

    inverse = quat_conjugate(parent.orientation)
    return Transform(
        position=quat_rotate(inverse, world.position - parent.position),
        orientation=quat_normalize(quat_multiply(inverse, world.orientation)),
    )


def to_world(local: Transform, frame: Frame, registry: BodyRegistry) -> Transform:
    return compose(frame_transform(frame, registry), local)


def hand_off(
    local: Transform,
    old_frame: Frame,
    new_frame: Frame,
    registry: BodyRegistry,
) -> Transform:
    """Re-express ``local`` (given in ``old_frame``) in ``new_frame``.

    The world transform is unchanged; both frames are sampled at the same
    instant, so callers must assign the result and the new frame together.
    """

    world = to_world(local, old_frame, registry)
    return relative_to(frame_transform(new_frame, registry), world)


__all__ = ["compose", "frame_transform", "hand_off", "relative_to", "to_world"]
