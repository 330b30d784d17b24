"""Rendering helpers for the top-down solar system viewer."""

from .camera import TopDownCamera
from .assets import (
    BodySprites,
    body_color,
    get_text_surface,
    load_font,
    make_disc_sprite,
)
from .draw import (
    draw_body,
    draw_exhaust,
    draw_orbit_ring,
    draw_ship,
    draw_starfield,
    draw_walker_inset,
    generate_starfield,
)
from .ui import (
    Button,
    ButtonVisualStyle,
    build_control_buttons,
    build_text_panel,
    dispatch_to_buttons,
)

__all__ = [
    "BodySprites",
    "Button",
    "ButtonVisualStyle",
    "TopDownCamera",
    "body_color",
    "build_control_buttons",
    "build_text_panel",
    "dispatch_to_buttons",
    "draw_body",
    "draw_exhaust",
    "draw_orbit_ring",
    "draw_ship",
    "draw_starfield",
    "draw_walker_inset",
    "generate_starfield",
    "get_text_surface",
    "load_font",
    "make_disc_sprite",
]
