import pytest

from solar_nav.core.controls import CAMERA_MODES, ControlPanel, ControlState


def test_set_reports_change_and_notifies_once():
    panel = ControlPanel()
    seen = []
    panel.on_change("planet_animation", seen.append)
    assert panel.set("planet_animation", True) is True
    assert panel.set("planet_animation", True) is False
    assert seen == [True]


def test_unknown_control_rejected():
    panel = ControlPanel()
    with pytest.raises(KeyError):
        panel.set("warp", 9)
    with pytest.raises(KeyError):
        panel.on_change("warp", print)


def test_camera_mode_validated():
    panel = ControlPanel()
    with pytest.raises(ValueError):
        panel.set("camera_follow", "cockpit")
    assert panel.get("camera_follow") == "ship"


def test_cycle_wraps_around():
    panel = ControlPanel()
    assert [panel.cycle("camera_follow", CAMERA_MODES) for _ in range(3)] == ["walker", "free", "ship"]


def test_cycle_from_value_not_in_options_starts_at_first():
    panel = ControlPanel(ControlState(target="sun"))
    assert panel.cycle("target", ["mars", "jupiter"]) == "mars"


def test_nudge_is_clamped():
    panel = ControlPanel()
    assert panel.nudge("speed_scale", 0.5, -2.0, 2.0) == 1.5
    assert panel.nudge("speed_scale", 5.0, -2.0, 2.0) == 2.0
    assert panel.nudge("speed_scale", -10.0, -2.0, 2.0) == -2.0


def test_toggle_flips_boolean():
    panel = ControlPanel()
    assert panel.toggle("planet_animation") is True
    assert panel.toggle("planet_animation") is False


def test_numeric_controls_are_coerced_to_float():
    panel = ControlPanel()
    assert panel.set("speed_scale", "2") is True
    assert panel.get("speed_scale") == 2.0
    assert isinstance(panel.get("speed_scale"), float)
    panel.set("travel_speed", 1)
    assert isinstance(panel.get("travel_speed"), float)


@pytest.mark.parametrize(
    "name, value",
    [
        ("speed_scale", "fast"),
        ("speed_scale", None),
        ("speed_scale", float("nan")),
        ("travel_speed", True),
        ("planet_animation", "yes"),
        ("target", 3),
    ],
)
def test_badly_typed_values_rejected(name, value):
    panel = ControlPanel()
    before = panel.get(name)
    with pytest.raises(ValueError):
        panel.set(name, value)
    assert panel.get(name) == before
