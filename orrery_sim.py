#!/usr/bin/env python3
"""
Orrery application entry point: window loop, control panel and CLI.

What this module does
- Opens a resizable Pygame window (the canvas) and, unless --no-panel is given,
  a Dear PyGui control panel with the display toggles, zoom and speed sliders,
  focus/reset/scale buttons and the live status readouts.
- Runs a single cooperative frame loop: drain Pygame events into the
  InteractionController, advance the simulation one frame, draw the frame, then
  render one Dear PyGui frame. Dear PyGui callbacks fire inside that call on
  the same thread, so shared state needs no locking.

Keyboard shortcuts (canvas window)
- Arrows: pan | Wheel: zoom | Left-drag / right-drag: pan | Click: ruler pick
- F: next focus | R: reset view | S: visual/realistic scale | Space: pause
- O orbits, T trails, L labels, G glow, P prediction, E lens flare,
  W Milky Way, X dwarf planets, M moons, I inclination, U ruler, D debug
- +/-: speed

Running
1) Install dependencies: `pip install pygame dearpygui`
2) Run this module: `python orrery_sim.py` (or the `orrery-sim` script)
"""

import argparse
import logging
import sys
import time
from typing import Dict, Optional

import dearpygui.dearpygui as dpg
import pygame

from orrery import status
from orrery.catalog import DEFAULT_CATALOG, CatalogError, load_catalog
from orrery.constants import HUD_TEXT_COLOR, KEY_PAN_SPEED, MAX_ZOOM, MIN_ZOOM, VIEW_HEIGHT, VIEW_WIDTH
from orrery.controller import InteractionController
from orrery.draw_utils import draw_text
from orrery.renderer import FrameRenderer
from orrery.settings import Settings
from orrery.simulation import SimulationContext, update
from orrery.status import DictStatusSink
from orrery.textures import ImageDirectoryTextures, NullTextureProvider

logger = logging.getLogger("orrery")

FPS = 60
CLICK_SLOP_PX = 4  # a drag shorter than this counts as a click
MAX_SPEED = 10.0

KEY_TOGGLES = {
    pygame.K_o: "show_orbits",
    pygame.K_t: "show_trails",
    pygame.K_l: "show_labels",
    pygame.K_g: "show_glow",
    pygame.K_p: "show_prediction",
    pygame.K_e: "show_lens_flare",
    pygame.K_w: "show_milky_way",
    pygame.K_x: "show_dwarf_planets",
    pygame.K_m: "show_moons",
    pygame.K_i: "show_inclination",
    pygame.K_u: "distance_ruler",
    pygame.K_d: "show_debug",
}

SETTING_LABELS = {
    "show_orbits": "Show orbits",
    "show_trails": "Show trails",
    "show_labels": "Show labels",
    "show_glow": "Glow effects",
    "show_debug": "Debug overlay",
    "show_prediction": "Orbit prediction",
    "show_lens_flare": "Lens flare",
    "show_milky_way": "Milky Way",
    "show_dwarf_planets": "Dwarf planets",
    "show_moons": "Moons",
    "show_inclination": "Orbital inclination",
    "distance_ruler": "Distance ruler",
}

STATUS_LABELS = (
    (status.SIM_TIME, "Time"),
    (status.SCALE_MODE, "Scale"),
    (status.FOCUSED_NAME, "Focused"),
    (status.FOCUSED_POSITION, "Position"),
    (status.FOCUSED_DISTANCE, "Distance from Sun"),
    (status.FOCUSED_SPEED, "Orbital speed"),
    (status.FOCUSED_PROGRESS, "Orbit progress"),
    (status.RULER_DISTANCE, "Ruler"),
)


def setup_logging(level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


class FanOutSink:
    """Status sink that forwards every write to several sinks."""

    def __init__(self, *sinks):
        self.sinks = list(sinks)

    def add(self, sink) -> None:
        self.sinks.append(sink)

    def write(self, field: str, text: str) -> None:
        for sink in self.sinks:
            sink.write(field, text)


# ============================================================
# Dear PyGui control panel
# ============================================================

class ControlPanel:
    """
    Dear PyGui interface: display toggles, sliders, buttons and status readouts.

    Implements the status sink protocol; widgets are synced from the simulation
    once per frame so keyboard and mouse changes on the canvas show up here.
    """

    def __init__(self, controller: InteractionController):
        self.controller = controller
        self._text_ids: Dict[str, int] = {}
        self._checkbox_ids: Dict[str, int] = {}
        self.zoom_slider_id = None
        self.speed_slider_id = None
        self.info_id = None
        self._build_ui()

    def _build_ui(self) -> None:
        ctx = self.controller.ctx
        dpg.create_context()
        dpg.create_viewport(title="Orrery - Controls", width=380, height=760)
        with dpg.window(label="Controls", tag="controls_window"):
            dpg.add_text("Display")
            for name, label in SETTING_LABELS.items():
                self._checkbox_ids[name] = dpg.add_checkbox(
                    label=label,
                    default_value=getattr(ctx.settings, name),
                    callback=self._on_checkbox,
                    user_data=name,
                )
            dpg.add_separator()
            self.zoom_slider_id = dpg.add_slider_float(
                label="Zoom", min_value=MIN_ZOOM, max_value=MAX_ZOOM,
                default_value=ctx.viewport.zoom, format="%.1fx",
                callback=lambda s, a, u: self.controller.set_zoom(a),
            )
            self.speed_slider_id = dpg.add_slider_float(
                label="Speed", min_value=0.0, max_value=MAX_SPEED,
                default_value=self.controller.speed_value, format="%.1fx",
                callback=lambda s, a, u: self.controller.set_speed(a),
            )
            with dpg.group(horizontal=True):
                dpg.add_button(label="Focus next", callback=lambda: self.controller.next_focus())
                dpg.add_button(label="Reset view", callback=lambda: self.controller.reset_view())
            dpg.add_button(label="Toggle visual / realistic scale", callback=lambda: self.controller.toggle_scale())
            dpg.add_separator()
            for field, label in STATUS_LABELS:
                with dpg.group(horizontal=True):
                    dpg.add_text(f"{label}:")
                    self._text_ids[field] = dpg.add_text("")
            dpg.add_separator()
            self.info_id = dpg.add_text("", wrap=340)
        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("controls_window", True)

    def _on_checkbox(self, sender, app_data, user_data):
        self.controller.set_setting(user_data, app_data)

    def write(self, field: str, text: str) -> None:
        if field == status.FEATURE_INFO:
            dpg.set_value(self.info_id, text)
        elif field in self._text_ids:
            dpg.set_value(self._text_ids[field], text)

    def sync(self) -> None:
        ctx = self.controller.ctx
        for name, item in self._checkbox_ids.items():
            value = getattr(ctx.settings, name)
            if dpg.get_value(item) != value:
                dpg.set_value(item, value)
        dpg.set_value(self.zoom_slider_id, ctx.viewport.zoom)

    def is_running(self) -> bool:
        return dpg.is_dearpygui_running()

    def render(self) -> None:
        dpg.render_dearpygui_frame()

    def close(self) -> None:
        dpg.destroy_context()


# ============================================================
# Pygame canvas and frame loop
# ============================================================

class OrreryApp:
    """
    Pygame loop: input handling, one simulation update and one draw per frame.
    """

    def __init__(self, ctx: SimulationContext, renderer: FrameRenderer, controller: InteractionController,
                 hud: DictStatusSink, panel: Optional[ControlPanel] = None):
        self.ctx = ctx
        self.renderer = renderer
        self.controller = controller
        self.hud = hud
        self.panel = panel
        self.surface = None
        self.clock = None
        self.running = True
        self.playing = True
        self.dragging = False
        self.drag_moved = 0.0
        self.last_mouse = (0, 0)

    def open(self) -> None:
        pygame.display.set_caption("Orrery - Solar System")
        w, h = self.ctx.viewport.size
        self.surface = pygame.display.set_mode((w, h), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()

    def run(self) -> None:
        self.open()
        last_time = time.perf_counter()
        while self.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)
            if self.playing:
                update(self.ctx, real_dt * 1000.0)
            self.draw()

            if self.panel is not None:
                if not self.panel.is_running():
                    break
                self.panel.sync()
                self.panel.render()

            self.clock.tick(FPS)
        logger.info("Frame loop stopped after %d frames", self.ctx.frame)

    def handle_events(self, real_dt: float) -> None:
        keys = pygame.key.get_pressed()
        step = KEY_PAN_SPEED * real_dt
        if keys[pygame.K_LEFT]:
            self.controller.pan(step, 0)
        if keys[pygame.K_RIGHT]:
            self.controller.pan(-step, 0)
        if keys[pygame.K_UP]:
            self.controller.pan(0, step)
        if keys[pygame.K_DOWN]:
            self.controller.pan(0, -step)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.controller.resize(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                self.controller.wheel(event.y, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 2, 3):
                self.dragging = True
                self.drag_moved = 0.0
                self.last_mouse = event.pos

            elif event.type == pygame.MOUSEBUTTONUP and event.button in (1, 2, 3):
                if event.button == 1 and self.drag_moved < CLICK_SLOP_PX:
                    self.controller.click(event.pos)
                self.dragging = False

            elif event.type == pygame.MOUSEMOTION and self.dragging:
                dx = event.pos[0] - self.last_mouse[0]
                dy = event.pos[1] - self.last_mouse[1]
                self.drag_moved += abs(dx) + abs(dy)
                self.controller.pan(dx, dy)
                self.last_mouse = event.pos

            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def handle_key(self, key: int) -> None:
        if key in KEY_TOGGLES:
            self.controller.toggle_setting(KEY_TOGGLES[key])
        elif key == pygame.K_f:
            self.controller.next_focus()
        elif key == pygame.K_r:
            self.controller.reset_view()
        elif key == pygame.K_s:
            self.controller.toggle_scale()
        elif key == pygame.K_SPACE:
            self.playing = not self.playing
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self.controller.set_speed(min(MAX_SPEED, self.controller.speed_value + 0.5))
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.controller.set_speed(max(0.0, self.controller.speed_value - 0.5))
        elif key == pygame.K_ESCAPE:
            self.running = False

    def draw(self) -> None:
        surf = self.surface
        self.renderer.render(surf, self.ctx)

        # HUD text
        hud = self.hud
        draw_text(surf, hud.get(status.SIM_TIME) + ("" if self.playing else "  [Paused]"), 10, 10, HUD_TEXT_COLOR)
        draw_text(surf, f"Scale: {hud.get(status.SCALE_MODE)}  Zoom: {hud.get(status.ZOOM_VALUE)}"
                        f"  Speed: {hud.get(status.SPEED_VALUE)}", 10, 30, HUD_TEXT_COLOR)
        if self.ctx.focused_body() is not None:
            draw_text(surf, f"{hud.get(status.FOCUSED_NAME)}  {hud.get(status.FOCUSED_DISTANCE)}"
                            f"  {hud.get(status.FOCUSED_SPEED)}  {hud.get(status.FOCUSED_PROGRESS)}",
                      10, 50, HUD_TEXT_COLOR)
        if self.ctx.settings.distance_ruler:
            draw_text(surf, "Ruler: " + (hud.get(status.RULER_DISTANCE) or "click two bodies"), 10, 70,
                      HUD_TEXT_COLOR)

        pygame.display.flip()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Real-time 2D solar system viewer.")
    parser.add_argument("--width", type=int, default=VIEW_WIDTH, help="initial canvas width in pixels")
    parser.add_argument("--height", type=int, default=VIEW_HEIGHT, help="initial canvas height in pixels")
    parser.add_argument("--catalog", default=DEFAULT_CATALOG, help="catalog JSON file")
    parser.add_argument("--textures", default=None, help="directory of <texture-key>.png images")
    parser.add_argument("--seed", type=int, default=None, help="seed for stars, asteroids and moon phases")
    parser.add_argument("--no-panel", action="store_true", help="run without the Dear PyGui control panel")
    parser.add_argument("--log-level", default="INFO", help="logging level (DEBUG, INFO, WARNING, ...)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        catalog = load_catalog(args.catalog)
    except CatalogError as exc:
        logger.error("%s", exc)
        return 1

    pygame.init()
    ctx = SimulationContext(catalog, args.width, args.height, Settings(), seed=args.seed)
    hud = DictStatusSink()
    sink = FanOutSink(hud)
    textures = ImageDirectoryTextures(args.textures) if args.textures else NullTextureProvider()
    renderer = FrameRenderer(textures, sink)
    controller = InteractionController(ctx, sink)

    panel = None
    if not args.no_panel:
        panel = ControlPanel(controller)
        sink.add(panel)
    controller.publish_labels()

    app = OrreryApp(ctx, renderer, controller, hud, panel)
    logger.info("Starting Orrery (%s)", catalog.name)
    try:
        app.run()
    finally:
        if panel is not None:
            panel.close()
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
