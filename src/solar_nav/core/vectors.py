"""Vector and quaternion helpers for the navigation core.

Vectors are ``numpy`` arrays of shape ``(3,)``. Quaternions are arrays of shape
``(4,)`` in ``(w, x, y, z)`` order and are expected to be unit length.
"""
from __future__ import annotations

import math

import numpy as np


EPSILON = 1e-12

X_AXIS = np.array([1.0, 0.0, 0.0])
Y_AXIS = np.array([0.0, 1.0, 0.0])
Z_AXIS = np.array([0.0, 0.0, 1.0])

# Local axes of every actor.
FORWARD = Z_AXIS
UP = Y_AXIS


def vec3(x: float, y: float, z: float) -> np.ndarray:
    return np.array([x, y, z], dtype=float)


def length(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def normalize(v: np.ndarray) -> np.ndarray:
    """Return ``v`` scaled to unit length, or the zero vector if ``v`` is degenerate."""

    magnitude = length(v)
    if magnitude < EPSILON:
        return np.zeros(3, dtype=float)
    return np.asarray(v, dtype=float) / magnitude


def rotate_about_axis(v: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotate ``v`` by ``angle`` radians about ``axis`` (Rodrigues' formula)."""

    k = normalize(axis)
    if not k.any():
        return np.array(v, dtype=float)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return v * cos_a + np.cross(k, v) * sin_a + k * float(np.dot(k, v)) * (1.0 - cos_a)


def identity_quat() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0])


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    k = normalize(axis)
    if not k.any():
        return identity_quat()
    half = 0.5 * angle
    s = math.sin(half)
    return np.array([math.cos(half), k[0] * s, k[1] * s, k[2] * s])


def quat_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Hamilton product ``a * b`` (apply ``b`` first, then ``a``)."""

    w1, x1, y1, z1 = a
    w2, x2, y2, z2 = b
    return np.array(
        [
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        ]
    )


def quat_conjugate(q: np.ndarray) -> np.ndarray:
    return np.array([q[0], -q[1], -q[2], -q[3]])


def quat_normalize(q: np.ndarray) -> np.ndarray:
    magnitude = float(np.linalg.norm(q))
    if magnitude < EPSILON:
        return identity_quat()
    return np.asarray(q, dtype=float) / magnitude


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector ``v`` by unit quaternion ``q``."""

    w = q[0]
    u = np.asarray(q[1:], dtype=float)
    t = 2.0 * np.cross(u, v)
    return np.asarray(v, dtype=float) + w * t + np.cross(u, t)


def quat_to_matrix(q: np.ndarray) -> np.ndarray:
    w, x, y, z = q
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )


def quat_from_matrix(rot: np.ndarray) -> np.ndarray:
    """Rotation matrix to quaternion (Shepperd's method)."""

    tr = rot[0, 0] + rot[1, 1] + rot[2, 2]
    if tr > 0:
        s = math.sqrt(tr + 1.0) * 2.0
        w = 0.25 * s
        x = (rot[2, 1] - rot[1, 2]) / s
        y = (rot[0, 2] - rot[2, 0]) / s
        z = (rot[1, 0] - rot[0, 1]) / s
    elif rot[0, 0] > rot[1, 1] and rot[0, 0] > rot[2, 2]:
        s = math.sqrt(1.0 + rot[0, 0] - rot[1, 1] - rot[2, 2]) * 2.0
        w = (rot[2, 1] - rot[1, 2]) / s
        x = 0.25 * s
        y = (rot[0, 1] + rot[1, 0]) / s
        z = (rot[0, 2] + rot[2, 0]) / s
    elif rot[1, 1] > rot[2, 2]:
        s = math.sqrt(1.0 + rot[1, 1] - rot[0, 0] - rot[2, 2]) * 2.0
        w = (rot[0, 2] - rot[2, 0]) / s
        x = (rot[0, 1] + rot[1, 0]) / s
        y = 0.25 * s
        z = (rot[1, 2] + rot[2, 1]) / s
    else:
        s = math.sqrt(1.0 + rot[2, 2] - rot[0, 0] - rot[1, 1]) * 2.0
        w = (rot[1, 0] - rot[0, 1]) / s
        x = (rot[0, 2] + rot[2, 0]) / s
        y = (rot[1, 2] + rot[2, 1]) / s
        z = 0.25 * s
    return quat_normalize(np.array([w, x, y, z]))


def quat_slerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    """Spherical interpolation from ``a`` (t=0) to ``b`` (t=1) along the short arc."""

    dot = float(np.dot(a, b))
    if dot < 0.0:
        b = -b
        dot = -dot
    if dot > 0.9995:
        return quat_normalize(a + t * (b - a))
    theta_0 = math.acos(min(1.0, dot))
    theta = theta_0 * t
    sin_theta_0 = math.sin(theta_0)
    s0 = math.sin(theta_0 - theta) / sin_theta_0
    s1 = math.sin(theta) / sin_theta_0
    return quat_normalize(s0 * a + s1 * b)


def quat_angle_between(a: np.ndarray, b: np.ndarray) -> float:
    dot = abs(float(np.dot(a, b)))
    return 2.0 * math.acos(min(1.0, dot))


def look_rotation(forward: np.ndarray, up: np.ndarray = UP) -> np.ndarray:
    """Orientation whose local +Z points along ``forward`` and local +Y leans toward ``up``.

    Returns the identity quaternion when ``forward`` is degenerate.
    """

    z = normalize(forward)
    if not z.any():
        return identity_quat()
    x = normalize(np.cross(up, z))
    if not x.any():
        # forward is parallel to up, pick any perpendicular reference
        fallback = X_AXIS if abs(z[0]) < 0.9 else Z_AXIS
        x = normalize(np.cross(fallback, z))
    y = np.cross(z, x)
    return quat_from_matrix(np.column_stack((x, y, z)))


__all__ = [
    "EPSILON",
    "FORWARD",
    "UP",
    "X_AXIS",
    "Y_AXIS",
    "Z_AXIS",
    "identity_quat",
    "length",
    "look_rotation",
    "normalize",
    "quat_angle_between",
    "quat_conjugate",
    "quat_from_axis_angle",
    "quat_from_matrix",
    "quat_multiply",
    "quat_normalize",
    "quat_rotate",
    "quat_slerp",
    "quat_to_matrix",
    "rotate_about_axis",
    "vec3",
]
