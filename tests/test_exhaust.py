import numpy as np
from numpy.testing import assert_allclose

from solar_nav.core.config import EXHAUST_CFG, ExhaustCfg
from solar_nav.core.exhaust import ExhaustEmitter, create_exhaust_emitters
from solar_nav.core.model import Transform
from solar_nav.core.vectors import Y_AXIS, quat_from_axis_angle


def test_one_emitter_per_nozzle_with_scaled_offsets():
    emitters = create_exhaust_emitters(EXHAUST_CFG, np.random.default_rng(0))
    assert len(emitters) == len(EXHAUST_CFG.emitter_offsets)
    assert_allclose(emitters[0].offset, np.array(EXHAUST_CFG.emitter_offsets[0]) * EXHAUST_CFG.emitter_scale)
    assert all(not emitter.visible for emitter in emitters)


def test_engine_direction_points_out_of_the_rear():
    emitter = ExhaustEmitter(np.zeros(3))
    assert_allclose(emitter.engine_direction(Transform()), [0.0, 0.0, -1.0])
    turned = Transform(orientation=quat_from_axis_angle(Y_AXIS, np.pi / 2))
    assert_allclose(emitter.engine_direction(turned), [-1.0, 0.0, 0.0], atol=1e-12)


def test_particles_stay_within_max_distance():
    emitter = ExhaustEmitter(np.zeros(3), rng=np.random.default_rng(1))
    actor = Transform(position=np.array([5.0, 0.0, 5.0]))
    for _ in range(100):
        origin = emitter.emitter_position(actor)
        positions = emitter.update_for(1.0 / 60.0, actor)
        distances = np.linalg.norm(positions - origin, axis=1)
        actor.position = actor.position + np.array([0.0, 0.0, 0.1])
        assert positions.shape == (EXHAUST_CFG.particle_count, 3)
        assert np.all(distances <= EXHAUST_CFG.max_distance + 1e-12)


def test_particles_drift_along_engine_direction():
    cfg = ExhaustCfg(particle_count=10, position_jitter=0.0, speed_jitter=0.0, max_distance=100.0)
    emitter = ExhaustEmitter(np.zeros(3), cfg=cfg, rng=np.random.default_rng(2))
    actor = Transform()
    first = emitter.update_for(1.0, actor).copy()
    second = emitter.update_for(1.0, actor)
    assert_allclose(second - first, np.tile([0.0, 0.0, -cfg.base_speed], (10, 1)), atol=1e-12)


def test_reset_and_local_positions():
    emitter = ExhaustEmitter(np.array([0.0, 0.0, -0.3]), rng=np.random.default_rng(4))
    actor = Transform(position=np.array([1.0, 2.0, 3.0]))
    assert emitter.local_positions(actor).shape == (0, 3)
    emitter.update_for(0.1, actor)
    local = emitter.local_positions(actor)
    assert_allclose(local, emitter.world_positions - emitter.emitter_position(actor), atol=1e-12)
    emitter.reset()
    assert emitter.world_positions is None


def test_stream_flows_through_the_nozzle():
    cfg = ExhaustCfg(position_jitter=0.0, speed_jitter=0.0)
    emitter = ExhaustEmitter(np.zeros(3), cfg=cfg, rng=np.random.default_rng(3))
    actor = Transform()
    direction = emitter.engine_direction(actor)
    positions = emitter.update_for(1.0, actor)
    along = (positions - emitter.emitter_position(actor)) @ direction
    assert along.min() < 0.0 < along.max()
    assert np.all(np.abs(along) <= cfg.max_distance)
