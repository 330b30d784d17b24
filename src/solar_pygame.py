# src/solar_pygame.py
"""Top-down pygame viewer that hosts the solar system navigation core.

Controls
- Buttons: planet animation, travel target, launch, orbit and ship speed, camera follow.
- Arrow keys / WASD: turn and walk the surface walker.
- M: move the walker to the planet the ship last reached.
- Mouse wheel: zoom, right drag: pan, Esc: quit.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
import pygame

from solar_nav.core.config import (
    SETTINGS_PATH,
    load_configs,
    load_user_settings,
    save_user_settings,
)
from solar_nav.core.logging_config import setup_logging
from solar_nav.core.logging_utils import FlightRecorder
from solar_nav.core.model import ConfigurationError, Idle, Landed, Traveling, TravelState
from solar_nav.core.orbits import body_position
from solar_nav.core.simulation import build_context, camera_focus, step
from solar_nav.core.surface_walker import WalkerInput
from solar_nav.core.timekeeping import FrameTimer
from solar_nav.data.bodies import (
    BODIES,
    BODY_DEFINITIONS,
    BODY_DISPLAY_ORDER,
    DEFAULT_HOME_KEY,
    DEFAULT_TARGET_KEY,
    DEFAULT_WALKER_BODY_KEY,
)
from solar_nav.render import (
    BodySprites,
    ButtonVisualStyle,
    TopDownCamera,
    build_control_buttons,
    build_text_panel,
    dispatch_to_buttons,
    draw_body,
    draw_exhaust,
    draw_orbit_ring,
    draw_ship,
    draw_starfield,
    draw_walker_inset,
    generate_starfield,
    load_font,
)

logger = logging.getLogger("solar_nav.viewer")

SAVED_CONTROLS = ("speed_scale", "travel_speed", "target", "camera_follow")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive solar system navigation viewer.")
    parser.add_argument("--settings", type=Path, default=SETTINGS_PATH, help="JSON settings file")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    parser.add_argument("--record", action="store_true", help="Record the flight under data/flights")
    parser.add_argument("--seed", type=int, default=None, help="Seed for stars and exhaust")
    parser.add_argument(
        "--walker-body",
        default=DEFAULT_WALKER_BODY_KEY,
        choices=BODY_DISPLAY_ORDER,
        help="Body the surface walker starts on",
    )
    return parser.parse_args(argv)


def describe_state(state: TravelState | None) -> str:
    if isinstance(state, Traveling):
        return f"traveling to {BODIES[state.target].name}"
    if isinstance(state, (Idle, Landed)):
        verb = "docked at" if isinstance(state, Idle) else "landed on"
        return f"{verb} {BODIES[state.body].name}"
    return "-"


def read_walker_input(pressed) -> WalkerInput:
    return WalkerInput(
        turn_left=bool(pressed[pygame.K_LEFT] or pressed[pygame.K_a]),
        turn_right=bool(pressed[pygame.K_RIGHT] or pressed[pygame.K_d]),
        forward=bool(pressed[pygame.K_UP] or pressed[pygame.K_w]),
        back=bool(pressed[pygame.K_DOWN] or pressed[pygame.K_s]),
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level.upper(), args.log_file)

    try:
        nav_cfg, walker_cfg, exhaust_cfg, render_cfg = load_configs(args.settings)
    except ConfigurationError as exc:
        logger.error("Invalid settings in %s: %s", args.settings, exc)
        return 2

    rng = np.random.default_rng(args.seed)
    recorder = FlightRecorder() if args.record else None
    ctx = build_context(
        BODY_DEFINITIONS,
        home=DEFAULT_HOME_KEY,
        target=DEFAULT_TARGET_KEY,
        walker_body=args.walker_body,
        nav_cfg=nav_cfg,
        walker_cfg=walker_cfg,
        exhaust_cfg=exhaust_cfg,
        rng=rng,
        recorder=recorder,
    )
    saved_controls = load_user_settings(args.settings).get("controls", {})
    for name in SAVED_CONTROLS:
        if name in saved_controls:
            if name == "target" and saved_controls[name] not in BODIES:
                logger.warning("Ignoring saved target %r: unknown body", saved_controls[name])
                continue
            try:
                ctx.controls.set(name, saved_controls[name])
            except ValueError as exc:
                logger.warning("Ignoring saved control %s: %s", name, exc)

    pygame.init()
    screen = pygame.display.set_mode((render_cfg.width, render_cfg.height), pygame.RESIZABLE)
    pygame.display.set_caption("Solar Navigator")
    clock = pygame.time.Clock()
    font = load_font(["Inter", "Segoe UI", "Helvetica", "Arial"], 16)

    camera = TopDownCamera(
        screen.get_size(),
        render_cfg.pixels_per_unit,
        min_ppu=render_cfg.min_pixels_per_unit,
        max_ppu=render_cfg.max_pixels_per_unit,
    )
    starfield = generate_starfield(
        render_cfg.star_count,
        spread=render_cfg.star_spread,
        colors=render_cfg.star_colors,
        rng=rng,
    )

    controls = ctx.controls
    style = ButtonVisualStyle(
        base_color=render_cfg.button_color,
        hover_color=render_cfg.button_hover_color,
        text_color=render_cfg.button_text_color,
        radius=render_cfg.button_radius,
        border_color=render_cfg.button_border_color,
        border_width=1,
        active_color=render_cfg.button_active_color,
    )
    buttons = build_control_buttons(
        controls,
        BODY_DISPLAY_ORDER,
        style=style,
        label_for=lambda key: BODIES[key].name,
    )
    sprites = BodySprites()

    # bodies come in one per frame, standing in for asynchronous model loads
    pending = list(BODY_DISPLAY_ORDER)
    timer = FrameTimer()
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_m and ctx.walker is not None:
                destination = ctx.ship.actor.past_target
                if destination is not None:
                    ctx.walker.transfer(destination, ctx.registry.get(destination).bounding_radius)
            elif event.type == pygame.VIDEORESIZE:
                camera.update_size(screen.get_size())
            elif event.type == pygame.MOUSEWHEEL:
                camera.zoom_by_factor(1.1 ** event.y)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 3:
                camera.begin_pan(event.pos)
            elif event.type == pygame.MOUSEMOTION:
                camera.pan(event.pos)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 3:
                camera.end_pan()
            else:
                dispatch_to_buttons(buttons, event)

        if pending:
            ctx.registry.mark_ready(pending.pop(0))

        dt = timer.tick()
        step(ctx, dt, read_walker_input(pygame.key.get_pressed()))
        camera.follow(camera_focus(ctx))
        camera.update()

        screen.fill(render_cfg.background_color)
        draw_starfield(screen, starfield, camera, render_cfg=render_cfg)
        for body in ctx.registry.ready_bodies():
            draw_orbit_ring(screen, camera, body.orbit_radius, color=render_cfg.orbit_ring_color)
            draw_body(screen, camera, body.name, body_position(body), body.bounding_radius, sprites)
        draw_exhaust(screen, camera, ctx.ship.actor.emitters, render_cfg=render_cfg)
        draw_ship(screen, camera, ctx.ship.world_transform(), render_cfg=render_cfg)
        if ctx.walker is not None:
            draw_walker_inset(screen, ctx.walker.walker, ctx.walker.heading(), render_cfg=render_cfg)

        state = ctx.ship.actor.state
        distance = ctx.ship.distance_to_destination()
        lines = [
            (f"Ship: {describe_state(state)}", render_cfg.hud_text_color),
            (f"Orbit speed x{controls.state.speed_scale:.1f}, ship speed {controls.state.travel_speed:.2f}", render_cfg.hud_text_color),
            (f"Tick {ctx.tick}" + (f"  distance {distance:.2f}" if distance is not None else ""), render_cfg.hud_text_color),
        ]
        if not ctx.registry.all_ready:
            lines.append((f"Loading bodies... {len(pending)} left", render_cfg.hud_text_color))
        panel = build_text_panel(font, lines, background_color=(12, 18, 30, 150))
        screen.blit(panel, (screen.get_width() - panel.get_width() - 12, 12))
        for button in buttons:
            button.draw(screen, font)

        pygame.display.flip()
        clock.tick(render_cfg.target_fps)

    if recorder is not None:
        recorder.close()
        logger.info("Flight recorded to %s", recorder.run_dir)
    settings = load_user_settings(args.settings)
    settings["controls"] = {name: getattr(controls.state, name) for name in SAVED_CONTROLS}
    save_user_settings(settings, args.settings)
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
