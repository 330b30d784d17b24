import json
import logging

import numpy as np
import pytest
from numpy.testing import assert_allclose

from solar_nav.core.config import (
    NAV_CFG,
    WALKER_CFG,
    apply_overrides,
    load_configs,
    load_user_settings,
    save_user_settings,
)
from solar_nav.core.model import ConfigurationError


def test_defaults_are_valid():
    NAV_CFG.validate()
    WALKER_CFG.validate()
    assert NAV_CFG.intercept_horizon == 1000.0
    assert NAV_CFG.landing_threshold == 0.1
    assert NAV_CFG.orientation_blend == 0.05


def test_overrides_are_coerced_to_field_types():
    cfg = apply_overrides(NAV_CFG, {"intercept_samples": "32", "landing_threshold": 1, "orbit_axis": [0, 0, 1]})
    assert cfg.intercept_samples == 32
    assert isinstance(cfg.landing_threshold, float)
    assert_allclose(cfg.orbit_axis, [0.0, 0.0, 1.0])
    assert NAV_CFG.intercept_samples == 64


def test_unknown_override_is_logged_and_skipped(caplog):
    with caplog.at_level(logging.WARNING):
        cfg = apply_overrides(WALKER_CFG, {"jump_height": 3.0})
    assert cfg == WALKER_CFG
    assert "jump_height" in caplog.text


@pytest.mark.parametrize(
    "overrides",
    [
        {"landing_threshold": "close"},
        {"landing_threshold": -1.0},
        {"orientation_blend_mode": "linear"},
        {"orientation_blend": 0.0},
    ],
)
def test_invalid_overrides_raise(overrides):
    with pytest.raises(ConfigurationError):
        apply_overrides(NAV_CFG, overrides)


def test_missing_settings_file_gives_empty_dict(tmp_path):
    assert load_user_settings(tmp_path / "nope.json") == {}


def test_corrupt_settings_file_is_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_user_settings(path) == {}
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_user_settings(path) == {}


def test_saved_sections_feed_load_configs(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    assert save_user_settings({"navigation": {"default_travel_speed": 0.25}, "walker": {"move_speed": 3}}, path)
    assert json.loads(path.read_text(encoding="utf-8"))["walker"] == {"move_speed": 3}
    nav, walker, exhaust, render = load_configs(path)
    assert nav.default_travel_speed == 0.25
    assert walker.move_speed == 3.0
    assert exhaust.particle_count == 200
    assert render.width == 1200
    assert isinstance(nav.orbit_center, np.ndarray)
