import math

import numpy as np
from numpy.testing import assert_allclose

from solar_nav.core.vectors import (
    FORWARD,
    UP,
    X_AXIS,
    Y_AXIS,
    identity_quat,
    look_rotation,
    normalize,
    quat_angle_between,
    quat_from_axis_angle,
    quat_from_matrix,
    quat_multiply,
    quat_rotate,
    quat_slerp,
    quat_to_matrix,
    rotate_about_axis,
)


def test_rotation_about_y_moves_x_towards_minus_z():
    rotated = rotate_about_axis(X_AXIS, Y_AXIS, math.pi / 2)
    assert_allclose(rotated, [0.0, 0.0, -1.0], atol=1e-12)


def test_quaternion_rotation_matches_axis_angle():
    axis = normalize(np.array([1.0, 2.0, -0.5]))
    v = np.array([0.3, -1.2, 4.0])
    q = quat_from_axis_angle(axis, 1.1)
    assert_allclose(quat_rotate(q, v), rotate_about_axis(v, axis, 1.1), atol=1e-12)


def test_quaternion_product_applies_right_operand_first():
    a = quat_from_axis_angle(Y_AXIS, 0.4)
    b = quat_from_axis_angle(X_AXIS, 0.9)
    v = np.array([0.0, 0.0, 1.0])
    assert_allclose(quat_rotate(quat_multiply(a, b), v), quat_rotate(a, quat_rotate(b, v)), atol=1e-12)


def test_matrix_conversion_preserves_rotation():
    q = quat_from_axis_angle(normalize(np.array([0.2, -1.0, 0.7])), 2.9)
    back = quat_from_matrix(quat_to_matrix(q))
    assert quat_angle_between(q, back) < 1e-6


def test_look_rotation_points_forward_and_keeps_up():
    direction = normalize(np.array([1.0, 0.0, 1.0]))
    q = look_rotation(direction, UP)
    assert_allclose(quat_rotate(q, FORWARD), direction, atol=1e-9)
    assert_allclose(quat_rotate(q, UP), UP, atol=1e-9)


def test_look_rotation_handles_forward_parallel_to_up():
    q = look_rotation(UP, UP)
    assert_allclose(quat_rotate(q, FORWARD), UP, atol=1e-9)


def test_slerp_endpoints_and_midpoint():
    a = identity_quat()
    b = quat_from_axis_angle(Y_AXIS, 1.0)
    assert quat_angle_between(quat_slerp(a, b, 0.0), a) < 1e-6
    assert quat_angle_between(quat_slerp(a, b, 1.0), b) < 1e-6
    assert abs(quat_angle_between(a, quat_slerp(a, b, 0.5)) - 0.5) < 1e-6


def test_normalize_zero_vector_is_zero():
    assert not normalize(np.zeros(3)).any()
