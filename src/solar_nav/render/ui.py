from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TYPE_CHECKING

import pygame

from solar_nav.core.controls import CAMERA_MODES

from .assets import Color, get_text_surface

if TYPE_CHECKING:  # pragma: no cover
    from solar_nav.core.controls import ControlPanel


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    border_color: Color | None = None
    border_width: int = 0
    active_color: Color | None = None


class Button:
    """Rectangular button bound to a control.

    ``text_getter`` recomputes the label every frame and ``active_getter``
    marks toggles that are currently on.
    """

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        text_getter: Callable[[], str] | None = None,
        *,
        style: ButtonVisualStyle,
        active_getter: Callable[[], bool] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._text = text
        self._callback = callback
        self._text_getter = text_getter
        self._active_getter = active_getter
        self._style = style

    def get_text(self) -> str:
        if self._text_getter is not None:
            return self._text_getter()
        return self._text

    def is_active(self) -> bool:
        return bool(self._active_getter()) if self._active_getter is not None else False

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
    ) -> None:
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        style = self._style
        if self.rect.collidepoint(mouse_pos):
            color = style.hover_color
        elif self.is_active() and style.active_color is not None:
            color = style.active_color
        else:
            color = style.base_color
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(button_surface, color, button_surface.get_rect(), border_radius=style.radius)
        if style.border_color is not None and style.border_width > 0:
            pygame.draw.rect(
                button_surface,
                style.border_color,
                button_surface.get_rect(),
                style.border_width,
                border_radius=style.radius,
            )
        surface.blit(button_surface, self.rect.topleft)
        text_surf = get_text_surface(font, self.get_text(), style.text_color)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self._callback()
                return True
        return False


def dispatch_to_buttons(buttons: Iterable[Button], event: pygame.event.Event) -> bool:
    """Offer ``event`` to each button until one consumes it."""

    for button in buttons:
        if button.handle_event(event):
            return True
    return False


def build_control_buttons(
    controls: ControlPanel,
    targets: Sequence[str],
    *,
    style: ButtonVisualStyle,
    label_for: Callable[[str], str] = str,
    origin: tuple[int, int] = (12, 12),
    size: tuple[int, int] = (200, 34),
    gap: int = 6,
    orbit_speed_limits: tuple[float, float] = (-10.0, 10.0),
    travel_speed_limits: tuple[float, float] = (0.05, 2.0),
) -> list[Button]:
    """Left-hand button column that drives the parameter panel.

    Rows: planet animation, travel target, launch, orbit speed -/+, ship
    speed -/+ and camera follow mode.
    """

    x, y = origin
    width, height = size
    half = (width - gap) // 2
    state = controls.state

    def row(index: int) -> int:
        return y + index * (height + gap)

    def launch() -> None:
        controls.set("launch", True)

    return [
        Button(
            (x, row(0), width, height),
            "Animation",
            lambda: controls.toggle("planet_animation"),
            lambda: f"Animation: {'On' if state.planet_animation else 'Off'}",
            style=style,
            active_getter=lambda: state.planet_animation,
        ),
        Button(
            (x, row(1), width, height),
            "Target",
            lambda: controls.cycle("target", list(targets)),
            lambda: f"Target: {label_for(state.target)}",
            style=style,
        ),
        Button(
            (x, row(2), width, height),
            "Launch",
            launch,
            style=style,
            active_getter=lambda: state.launch,
        ),
        Button(
            (x, row(3), half, height),
            "Orbit -",
            lambda: controls.nudge("speed_scale", -0.5, *orbit_speed_limits),
            style=style,
        ),
        Button(
            (x + half + gap, row(3), half, height),
            "Orbit +",
            lambda: controls.nudge("speed_scale", 0.5, *orbit_speed_limits),
            style=style,
        ),
        Button(
            (x, row(4), half, height),
            "Ship -",
            lambda: controls.nudge("travel_speed", -0.05, *travel_speed_limits),
            style=style,
        ),
        Button(
            (x + half + gap, row(4), half, height),
            "Ship +",
            lambda: controls.nudge("travel_speed", 0.05, *travel_speed_limits),
            style=style,
        ),
        Button(
            (x, row(5), width, height),
            "Camera",
            lambda: controls.cycle("camera_follow", CAMERA_MODES),
            lambda: f"Camera: {state.camera_follow}",
            style=style,
        ),
    ]


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + padding_x * 2
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(panel_surface, background_color, panel_surface.get_rect(), border_radius=12)
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        panel_surface.blit(get_text_surface(font, text, color), (padding_x, padding_y + idx * line_height))
    return panel_surface
