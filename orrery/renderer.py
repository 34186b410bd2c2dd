#!/usr/bin/env python3
"""
Render pipeline: draws one frame of a SimulationContext onto a pygame Surface.

Pass order (each pass gated by its toggle; background, starfield, sun,
bodies and asteroids always run):

    background -> milky_way -> starfield -> lens_flare -> orbits -> trails
    -> sun -> bodies -> asteroids -> measurement -> debug

Bodies are drawn in ascending screen-Y order, so bodies lower on screen are
painted last and appear in front.

Rendering only reads simulation state; the one side effect is the status
sink, which receives the simulation time, the focused body's stats and the
ruler readout every frame.
"""
import math
from typing import Dict, List, Optional, Tuple

import pygame

from . import status
from .colors import color_at, with_alpha
from .constants import (
    ASTEROID_BELT_GUIDE,
    BACKGROUND_STOPS,
    BASE_TILT,
    BELT_GUIDE_COLOR,
    DEFAULT_RING_TILT,
    DWARF_FOCUS_COLOR,
    DWARF_ORBIT_COLOR,
    FOCUS_COLOR,
    FOCUSED_DWARF_ORBIT_COLOR,
    FOCUSED_ORBIT_COLOR,
    HUD_TEXT_COLOR,
    ORBIT_COLOR,
    PREDICTION_COLOR,
    RING_BANDS,
    RULER_FIRST_COLOR,
    RULER_LINE_COLOR,
    RULER_SECOND_COLOR,
    TWO_PI,
)
from .data_models import MoonList, RuntimeBody, SingleMoon
from .draw_utils import (
    blend_line,
    blit_centered,
    dashed_line,
    dashed_polyline,
    draw_text,
    fill_circle,
    fill_polygon,
    gradient_polyline,
    radial_gradient,
    stroke_circle,
    stroke_ellipse,
    textured_disk,
)
from .orbit_model import moon_offset, orbit_tilt, position_at, prediction_arc
from .simulation import SimulationContext, publish_status
from .status import DictStatusSink, StatusSink
from .textures import NullTextureProvider, TextureProvider
from .vector_utils import polar

PASSES = (
    "background",
    "milky_way",
    "starfield",
    "lens_flare",
    "orbits",
    "trails",
    "sun",
    "bodies",
    "asteroids",
    "measurement",
    "debug",
)

# Pass -> gating setting; passes not listed always run.
PASS_TOGGLES = {
    "milky_way": "show_milky_way",
    "lens_flare": "show_lens_flare",
    "orbits": "show_orbits",
    "trails": "show_trails",
    "measurement": "distance_ruler",
    "debug": "show_debug",
}

SUN_STOPS = ((255, 250, 205), (255, 249, 163), (255, 241, 118), (255, 213, 79), (255, 179, 0), (255, 143, 0))
SUN_GLOW_STOPS = ((255, 200, 50, 77), (255, 200, 50, 77), (255, 180, 0, 26), (255, 160, 0, 0))
SUN_BLOB_COLOR = (255, 140, 0, 26)
MILKY_WAY_STOPS = ((50, 30, 80, 26), (80, 60, 120, 38), (120, 100, 180, 51), (80, 60, 120, 38), (50, 30, 80, 26))
FLARE_RAY_BANDS = ((0.0, 1 / 3, (255, 230, 150, 26)), (1 / 3, 2 / 3, (255, 200, 100, 13)),
                   (2 / 3, 1.0, (255, 180, 80, 4)))
FLARE_RAY_LENGTH = 200
FLARE_RAY_HALF_WIDTH = 0.1
MOON_LIGHT = (240, 240, 240)
MOON_DARK = (128, 128, 128)
ASTEROID_COLOR = (170, 170, 170)


class FrameRenderer:
    """
    Runs the draw passes for one frame.

    Surfaces that depend only on the canvas size (background, Milky Way band)
    are cached and rebuilt when the size changes.
    """

    def __init__(self, textures: Optional[TextureProvider] = None, sink: Optional[StatusSink] = None):
        self.textures = textures or NullTextureProvider()
        self.status = sink or DictStatusSink()
        self._cache: Dict[str, Tuple[Tuple[int, int], pygame.Surface]] = {}

    def render(self, surface: pygame.Surface, ctx: SimulationContext) -> List[str]:
        """Draw every enabled pass in order; returns the names of the passes drawn."""
        executed = []
        for name in PASSES:
            if not self.pass_enabled(name, ctx):
                continue
            getattr(self, f"draw_{name}")(surface, ctx)
            executed.append(name)

        publish_status(ctx, self.status)
        if ctx.settings.distance_ruler:
            # Empty until a pair is selected; rebuilds drop the pair.
            self.status.write(status.RULER_DISTANCE, ctx.measurement.readout() or "")
        return executed

    @staticmethod
    def pass_enabled(name: str, ctx: SimulationContext) -> bool:
        toggle = PASS_TOGGLES.get(name)
        if toggle is not None and not getattr(ctx.settings, toggle):
            return False
        if name == "measurement":
            return len(ctx.measurement.points) > 0
        return True

    # -----------------------
    # Backdrop
    # -----------------------

    def _cached(self, key: str, size: Tuple[int, int], build) -> pygame.Surface:
        """One surface per key, rebuilt when the requested size changes."""
        entry = self._cache.get(key)
        if entry is None or entry[0] != size:
            entry = (size, build(size))
            self._cache[key] = entry
        return entry[1]

    @staticmethod
    def _build_background(size: Tuple[int, int]) -> pygame.Surface:
        w, h = size
        bg = pygame.Surface((w, h))
        bg.fill(BACKGROUND_STOPS[-1])
        glow = radial_gradient(max(w, h), [c + (255,) for c in BACKGROUND_STOPS])
        bg.blit(glow, glow.get_rect(center=(w // 2, h // 2)))
        return bg

    @staticmethod
    def _build_milky_way(size: Tuple[int, int]) -> pygame.Surface:
        # Diagonal gradient sampled on a coarse grid, then smoothed up to size.
        w, h = size
        grid = 64
        small = pygame.Surface((grid, grid), pygame.SRCALPHA)
        for gy in range(grid):
            for gx in range(grid):
                x, y = gx / (grid - 1) * w, gy / (grid - 1) * h
                t = (x * w + y * h) / float(w * w + h * h)
                small.set_at((gx, gy), color_at(MILKY_WAY_STOPS, t))
        return pygame.transform.smoothscale(small, (w, h))

    @staticmethod
    def _build_flare(size: Tuple[int, int], ring: int) -> pygame.Surface:
        return radial_gradient(size[0], ((255, 255, 200, int(255 * 0.05 / (ring + 1))), (255, 200, 100, 0)))

    def draw_background(self, surface, ctx):
        surface.blit(self._cached("background", surface.get_size(), self._build_background), (0, 0))

    def draw_milky_way(self, surface, ctx):
        surface.blit(self._cached("milky_way", surface.get_size(), self._build_milky_way), (0, 0))

    def draw_starfield(self, surface, ctx):
        pan_x, pan_y = ctx.viewport.pan
        glow = ctx.settings.show_glow
        for star in ctx.registry.stars:
            px = star.x - pan_x * star.z * 0.5
            py = star.y - pan_y * star.z * 0.5
            radius = star.radius * (1 + star.z * 0.5)
            if glow and star.radius > 1:
                fill_circle(surface, (px, py), radius + 1.5, with_alpha(star.color, star.opacity * 0.2))
            fill_circle(surface, (px, py), radius, with_alpha(star.color, star.opacity))

        for shot in ctx.registry.shooting_stars:
            alpha = shot.alpha
            head = (shot.x, shot.y)
            tail = (shot.x - shot.vx * 5, shot.y - shot.vy * 5)
            fill_circle(surface, head, 5, with_alpha((255, 255, 255), alpha * 0.25))
            blend_line(surface, head, tail, with_alpha((255, 255, 255), alpha), 2)
            fill_circle(surface, head, 2, with_alpha((255, 255, 255), alpha))

    def draw_lens_flare(self, surface, ctx):
        origin = ctx.viewport.origin
        sun_radius = ctx.registry.sun.radius * ctx.viewport.zoom
        for i in range(3):
            radius = max(1, int(sun_radius * (3 + i)))
            flare = self._cached(f"lens_flare_{i}", (radius, radius), lambda size, i=i: self._build_flare(size, i))
            blit_centered(surface, flare, origin)

        spin = ctx.simulation_time * 0.001
        for i in range(8):
            angle = spin + i / 8 * TWO_PI
            for start, end, color in FLARE_RAY_BANDS:
                d0, d1 = start * FLARE_RAY_LENGTH, end * FLARE_RAY_LENGTH
                corners = [
                    polar(d0, angle - FLARE_RAY_HALF_WIDTH),
                    polar(d1, angle - FLARE_RAY_HALF_WIDTH),
                    polar(d1, angle + FLARE_RAY_HALF_WIDTH),
                    polar(d0, angle + FLARE_RAY_HALF_WIDTH),
                ]
                fill_polygon(surface, [(origin[0] + x, origin[1] + y) for x, y in corners], color)

    # -----------------------
    # Orbits and trails
    # -----------------------

    def draw_orbits(self, surface, ctx):
        vp = ctx.viewport
        zoom = vp.zoom
        show_incl = ctx.settings.show_inclination
        for idx, body in enumerate(ctx.active_bodies()):
            focused = idx == ctx.focus_index
            tilt = orbit_tilt(body.elements.inclination, show_incl)
            center = vp.offset_to_screen((-body.focal_distance * zoom, 0.0))
            if focused:
                color = FOCUSED_DWARF_ORBIT_COLOR if body.is_dwarf else FOCUSED_ORBIT_COLOR
            else:
                color = DWARF_ORBIT_COLOR if body.is_dwarf else ORBIT_COLOR
            stroke_ellipse(surface, center, body.semi_major_axis * zoom,
                           abs(body.semi_minor_axis * zoom * tilt), color, 2 if focused else 1)

            if focused and ctx.settings.show_prediction:
                arc = [vp.offset_to_screen(p) for p in prediction_arc(body, zoom, show_incl)]
                dashed_polyline(surface, arc, PREDICTION_COLOR, dash=5, gap=5, width=2)

        belt = ASTEROID_BELT_GUIDE * zoom
        stroke_ellipse(surface, vp.origin, belt, abs(belt * BASE_TILT), BELT_GUIDE_COLOR)

    def draw_trails(self, surface, ctx):
        vp = ctx.viewport
        for body in ctx.active_bodies():
            if len(body.trail) < 2:
                continue
            points = [vp.to_screen(p) for p in body.trail]
            colors = body.elements.colors
            start = with_alpha(colors[0], 0.0)
            end = colors[1] + ((0x30,) if body.is_dwarf else (0x40,))
            gradient_polyline(surface, points, start, end, 1 if body.is_dwarf else 2)

    # -----------------------
    # Sun and bodies
    # -----------------------

    def draw_sun(self, surface, ctx):
        origin = ctx.viewport.origin
        radius = ctx.registry.sun.radius * ctx.viewport.zoom
        glow = ctx.settings.show_glow
        if glow:
            blit_centered(surface, radial_gradient(int(radius * 2), SUN_GLOW_STOPS), origin)
            fill_circle(surface, origin, radius * 1.15, (255, 179, 0, 60))

        disk = radial_gradient(int(radius), [c + (255,) for c in SUN_STOPS], highlight=(-0.2, -0.2))
        blit_centered(surface, disk, origin)

        for i in range(8):
            angle = (ctx.clock_ms * 0.0001 + i) % TWO_PI
            blob = (origin[0] + math.cos(angle) * radius * 0.3, origin[1] + math.sin(angle) * radius * 0.3)
            fill_circle(surface, blob, radius * 0.15, SUN_BLOB_COLOR)

    def draw_bodies(self, surface, ctx):
        vp = ctx.viewport
        zoom = vp.zoom
        show_incl = ctx.settings.show_inclination
        placed = []
        for idx, body in enumerate(ctx.active_bodies()):
            offset = position_at(body, zoom=zoom, show_inclination=show_incl)
            placed.append((vp.offset_to_screen(offset), idx, body))
        placed.sort(key=lambda item: item[0][1])

        for (x, y), idx, body in placed:
            self._draw_body(surface, ctx, body, (x, y), idx == ctx.focus_index)

    def _draw_body(self, surface, ctx, body: RuntimeBody, pos, focused: bool):
        settings = ctx.settings
        zoom = ctx.viewport.zoom
        radius = body.display_radius * zoom
        colors = body.elements.colors
        accent = DWARF_FOCUS_COLOR if body.is_dwarf else FOCUS_COLOR

        if focused:
            stroke_circle(surface, pos, radius * 2.5 + 3, with_alpha(accent, 0.12), 3)
            stroke_circle(surface, pos, radius * 2.5, with_alpha(accent, 0.3), 2)

        if settings.show_glow:
            fill_circle(surface, pos, radius * 1.5, with_alpha(colors[0], 0.05))
            fill_circle(surface, pos, radius * 1.1, colors[0] + (0x20,))

        if body.elements.rings is not None:
            self._draw_rings(surface, body, pos, radius)

        self._draw_disk(surface, body, pos, radius)
        self._draw_moons(surface, ctx, body, pos)

        if settings.show_labels or focused:
            size = 14 if focused else 12
            color = accent if focused else (255, 255, 255)
            draw_text(surface, body.name, pos[0], pos[1] + radius + 18 - size, color,
                      size=size, bold=focused, center=True, shadow=True)

    @staticmethod
    def _draw_rings(surface, body: RuntimeBody, pos, radius: float):
        rings = body.elements.rings
        tilt_deg = body.elements.axial_tilt
        ring_tilt = abs(math.cos(math.radians(tilt_deg))) if tilt_deg else DEFAULT_RING_TILT
        for i in range(RING_BANDS):
            ring_radius = radius * (rings.inner + i * (rings.outer - rings.inner) / RING_BANDS)
            opacity = rings.opacity * (1 - i * 0.1)
            if rings.tint is not None:
                r, g, b = rings.tint
                color = with_alpha((max(0, r - i * 10), max(0, g - i * 10), max(0, b - i * 10)), opacity)
            else:
                color = with_alpha((150, 150, 200 - i * 20), opacity * 0.5)
            stroke_ellipse(surface, pos, ring_radius, abs(ring_radius * ring_tilt), color, 2)

    def _draw_disk(self, surface, body: RuntimeBody, pos, radius: float):
        texture = self.textures.get(body.elements.texture) if body.elements.texture else None
        if radius < 1.5:
            fill_circle(surface, pos, radius, body.elements.colors[0])
            return
        if texture is not None:
            shade = bool(body.elements.axial_tilt) and body.elements.terminator
            night = body.day_night_angle if shade else None
            blit_centered(surface, textured_disk(texture, radius, body.rotation, night), pos)
            return
        stops = [c + (255,) for c in body.elements.colors]
        blit_centered(surface, radial_gradient(int(round(radius)), stops, highlight=(-0.35, -0.35)), pos)

    @staticmethod
    def _draw_moons(surface, ctx, body: RuntimeBody, pos):
        zoom = ctx.viewport.zoom
        system = body.elements.moons
        if isinstance(system, MoonList):
            if not ctx.settings.show_moons:
                return
            for moon in body.moon_states:
                ox, oy = moon_offset(moon, zoom)
                mx, my = pos[0] + ox, pos[1] + oy
                moon_radius = max(1.5, moon.spec.radius * zoom)
                fill_circle(surface, (mx, my), moon_radius, moon.spec.color)
                if ctx.settings.show_labels:
                    draw_text(surface, moon.spec.name, mx, my - moon_radius - 15, (170, 170, 170),
                              size=10, center=True)
        elif isinstance(system, SingleMoon):
            moon = body.moon_states[0]
            ox, oy = moon_offset(moon, zoom)
            moon_radius = max(2.0, moon.spec.radius * zoom)
            stops = (MOON_LIGHT + (255,), moon.spec.color + (255,), MOON_DARK + (255,))
            blit_centered(surface, radial_gradient(int(round(moon_radius)), stops, highlight=(-0.3, -0.3)),
                          (pos[0] + ox, pos[1] + oy))

    # -----------------------
    # Belt and overlays
    # -----------------------

    def draw_asteroids(self, surface, ctx):
        origin = ctx.viewport.origin
        zoom = ctx.viewport.zoom
        show_incl = ctx.settings.show_inclination
        for a in ctx.registry.asteroids:
            tilt = orbit_tilt(a.inclination, show_incl)
            x, y = polar(a.distance * zoom, a.angle, tilt)
            fill_circle(surface, (origin[0] + x, origin[1] + y), max(0.5, a.radius * zoom),
                        with_alpha(ASTEROID_COLOR, a.brightness))

    def draw_measurement(self, surface, ctx):
        vp = ctx.viewport
        points = [vp.to_screen(p) for p in ctx.measurement.reference_points()]
        for idx, p in enumerate(points):
            stroke_circle(surface, p, 8, RULER_FIRST_COLOR if idx == 0 else RULER_SECOND_COLOR, 3)
        if len(points) == 2:
            dashed_line(surface, points[0], points[1], RULER_LINE_COLOR, dash=10, gap=5, width=2)
            readout = ctx.measurement.readout()
            mid = ((points[0][0] + points[1][0]) / 2, (points[0][1] + points[1][1]) / 2)
            draw_text(surface, readout, mid[0], mid[1] - 22, RULER_LINE_COLOR, size=13, center=True, shadow=True)

    def draw_debug(self, surface, ctx):
        vp = ctx.viewport
        avg_ms = ctx.clock_ms / ctx.frame if ctx.frame else 0.0
        fps = 1000.0 / avg_ms if avg_ms > 0 else 0.0
        lines = [
            f"frame {ctx.frame}  avg {fps:.0f} fps",
            f"zoom {vp.zoom:.2f}x  pan ({vp.pan[0]:.0f}, {vp.pan[1]:.0f})",
            f"bodies {len(ctx.active_bodies())}  asteroids {len(ctx.registry.asteroids)}"
            f"  stars {len(ctx.registry.stars)}",
            f"time speed {ctx.time_speed:.3f}  focus {ctx.focus_index}",
        ]
        for i, line in enumerate(lines):
            draw_text(surface, line, 10, surface.get_height() - 20 * (len(lines) - i) - 10, HUD_TEXT_COLOR, size=14)
