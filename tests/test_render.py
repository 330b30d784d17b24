import numpy as np
import pygame
import pytest

from solar_nav.core.config import RENDER_CFG
from solar_nav.core.controls import ControlPanel
from solar_nav.core.exhaust import ExhaustEmitter
from solar_nav.core.model import Transform
from solar_nav.core.surface_walker import SurfaceWalkerController, place_walker
from solar_nav.render import (
    BodySprites,
    Button,
    ButtonVisualStyle,
    build_control_buttons,
    dispatch_to_buttons,
    TopDownCamera,
    body_color,
    draw_body,
    draw_exhaust,
    draw_orbit_ring,
    draw_ship,
    draw_starfield,
    draw_walker_inset,
    generate_starfield,
)


@pytest.fixture
def camera():
    return TopDownCamera((200, 100), 2.0, min_ppu=0.5, max_ppu=10.0)


def test_world_to_screen_maps_x_right_and_z_down(camera):
    assert camera.world_to_screen(np.zeros(3)) == (100, 50)
    assert camera.world_to_screen(np.array([10.0, 5.0, 0.0])) == (120, 50)
    assert camera.world_to_screen(np.array([0.0, 0.0, 10.0])) == (100, 70)


def test_follow_eases_towards_target(camera):
    camera.follow(np.array([10.0, 0.0, -4.0]))
    for _ in range(200):
        camera.update()
    np.testing.assert_allclose(camera.center, [10.0, -4.0], atol=1e-6)
    camera.follow(None)
    camera.update()
    np.testing.assert_allclose(camera.center, [10.0, -4.0], atol=1e-6)


def test_zoom_is_clamped(camera):
    camera.zoom_by_factor(100.0)
    for _ in range(200):
        camera.update()
    assert camera.ppu == pytest.approx(10.0)


def test_pan_drags_the_view(camera):
    camera.begin_pan((50, 50))
    camera.pan((60, 50))
    camera.end_pan()
    camera.pan((100, 100))
    np.testing.assert_allclose(camera.center, [-5.0, 0.0])


def test_screen_to_world_inverts_projection(camera):
    point = np.array([12.0, 0.0, -7.5])
    np.testing.assert_allclose(camera.screen_to_world(camera.world_to_screen(point)), point)


def test_body_colors_are_stable():
    assert body_color("earth") == (80, 140, 255)
    assert body_color("vulcan") == body_color("vulcan")


def test_scene_draws_onto_surface(camera):
    surface = pygame.Surface((200, 100))
    starfield = generate_starfield(50, spread=100.0, colors=RENDER_CFG.star_colors, rng=np.random.default_rng(0))
    assert len(starfield) == 50
    draw_starfield(surface, starfield, camera, render_cfg=RENDER_CFG)
    draw_orbit_ring(surface, camera, 20.0, color=RENDER_CFG.orbit_ring_color)
    draw_body(surface, camera, "earth", np.array([10.0, 0.0, 0.0]), 2.0)
    assert surface.get_at((120, 50))[:3] == body_color("earth")

    ship = Transform(position=np.array([-20.0, 0.0, 0.0]))
    emitter = ExhaustEmitter(np.zeros(3), rng=np.random.default_rng(1))
    emitter.visible = True
    emitter.update_for(0.1, ship)
    draw_exhaust(surface, camera, [emitter], render_cfg=RENDER_CFG)
    draw_ship(surface, camera, ship, render_cfg=RENDER_CFG)

    walker = SurfaceWalkerController(place_walker("earth", 1.75))
    draw_walker_inset(surface, walker.walker, walker.heading(), render_cfg=RENDER_CFG)


def test_button_fires_on_left_click_inside():
    clicks = []
    style = ButtonVisualStyle(base_color=(0, 0, 0), hover_color=(1, 1, 1), text_color=(255, 255, 255), radius=4)
    button = Button((10, 10, 50, 20), "Launch", lambda: clicks.append(1), style=style)
    inside = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(20, 15))
    outside = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(200, 15))
    right = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(20, 15))
    assert button.handle_event(inside) is True
    assert button.handle_event(outside) is False
    assert button.handle_event(right) is False
    assert clicks == [1]
    assert button.get_text() == "Launch"


def test_body_sprites_are_cached_per_radius():
    sprites = BodySprites(max_entries=2)
    first = sprites.get("mars", 5)
    assert first.get_size() == (10, 10)
    assert sprites.get("mars", 5) is first
    sprites.get("mars", 6)
    sprites.get("earth", 5)
    assert len(sprites) == 2
    assert sprites.get("mars", 5) is not first
    with pytest.raises(ValueError):
        sprites.get("mars", 0)


def test_sprite_body_is_blitted_at_its_position(camera):
    surface = pygame.Surface((200, 100))
    draw_body(surface, camera, "earth", np.array([10.0, 0.0, 0.0]), 2.0, BodySprites())
    assert surface.get_at((120, 50))[:3] != (0, 0, 0)
    assert surface.get_at((10, 10))[:3] == (0, 0, 0)


def click(button):
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=button.rect.center)


def test_control_buttons_drive_the_panel():
    panel = ControlPanel()
    style = ButtonVisualStyle(base_color=(0, 0, 0), hover_color=(1, 1, 1), text_color=(255, 255, 255), radius=4)
    buttons = build_control_buttons(panel, ["mars", "jupiter", "saturn"], style=style, label_for=str.title)
    animation, target, launch, orbit_down, orbit_up, ship_down, ship_up, camera_mode = buttons

    assert dispatch_to_buttons(buttons, click(animation))
    assert panel.state.planet_animation is True
    assert animation.is_active()
    assert animation.get_text() == "Animation: On"

    dispatch_to_buttons(buttons, click(target))
    assert panel.state.target == "saturn"
    assert target.get_text() == "Target: Saturn"

    dispatch_to_buttons(buttons, click(launch))
    assert panel.state.launch is True

    dispatch_to_buttons(buttons, click(orbit_up))
    assert panel.state.speed_scale == 1.5
    dispatch_to_buttons(buttons, click(orbit_down))
    dispatch_to_buttons(buttons, click(orbit_down))
    assert panel.state.speed_scale == 0.5

    dispatch_to_buttons(buttons, click(ship_up))
    assert panel.state.travel_speed == pytest.approx(0.15)
    for _ in range(5):
        dispatch_to_buttons(buttons, click(ship_down))
    assert panel.state.travel_speed == pytest.approx(0.05)

    dispatch_to_buttons(buttons, click(camera_mode))
    assert camera_mode.get_text() == "Camera: walker"


def test_click_outside_buttons_is_not_consumed():
    panel = ControlPanel()
    style = ButtonVisualStyle(base_color=(0, 0, 0), hover_color=(1, 1, 1), text_color=(255, 255, 255), radius=4)
    buttons = build_control_buttons(panel, ["mars"], style=style)
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(900, 900))
    assert dispatch_to_buttons(buttons, event) is False
