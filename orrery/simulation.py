#!/usr/bin/env python3
"""
Simulation context and the per-frame update step.

What this module does
- SimulationContext owns everything the frame loop mutates: settings, the
  viewport, the body registry, the focus index, the measurement tool, time
  speed and the simulation clock. Passing it explicitly to update and render
  calls keeps independent instances (and tests) isolated.
- update() advances one fixed frame. Given the context, the elapsed wall time
  and the seeded random source, it is deterministic; nothing is drawn here.
- focus_stats()/publish_status() compute the focused body's telemetry and the
  simulation time text written to the status sink.

Threading model
- Single-threaded. The frame loop and the input handlers run on the same
  thread and each runs to completion, so no locking is needed.
"""
import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from . import status
from .camera import Viewport
from .catalog import Catalog
from .constants import DAY_NIGHT_STEP, DEFAULT_TIME_SPEED, ROTATION_STEP, STAR_TWINKLE_FLOOR, TWO_PI, display_to_au
from .data_models import RuntimeBody
from .measurement import MeasurementTool
from .orbit_model import orbital_progress, orbital_speed_estimate, phase_step, position_at
from .registry import BodyRegistry
from .settings import Settings
from .status import StatusSink

logger = logging.getLogger(__name__)

FRAME_MS = 1000.0 / 60.0
DAYS_PER_YEAR = 365.25


@dataclass(frozen=True)
class FocusStats:
    name: str
    dwarf: bool
    position: Tuple[int, int]
    distance_au: float
    speed: float
    progress: float


class SimulationContext:
    """
    Shared mutable state for one viewer instance.

    The registry is rebuilt (trails and phases discarded) on construction,
    resize and whenever settings.realistic_scale differs from the mode the
    current registry was built for.
    """

    def __init__(self, catalog: Catalog, width: int, height: int,
                 settings: Optional[Settings] = None, seed: Optional[int] = None):
        self.catalog = catalog
        self.settings = settings or Settings()
        self.viewport = Viewport(width, height)
        self.rng = random.Random(seed)
        self.measurement = MeasurementTool()
        self.time_speed = DEFAULT_TIME_SPEED
        self.simulation_time = 0.0
        self.clock_ms = 0.0
        self.frame = 0
        self.focus_index = -1
        self.registry: BodyRegistry = None
        self.rebuild()

    def rebuild(self) -> None:
        w, h = self.viewport.size
        self.registry = BodyRegistry(self.catalog, w, h, self.settings.realistic_scale, self.rng)
        # Selected bodies belong to the discarded registry.
        self.measurement.clear()
        logger.info("Registry rebuilt for %dx%d canvas, %s scale",
                    w, h, "realistic" if self.registry.realistic else "visual")

    def resize(self, w: int, h: int) -> None:
        self.viewport.resize(w, h)
        self.rebuild()

    def active_bodies(self) -> List[RuntimeBody]:
        return self.registry.active_bodies(self.settings.show_dwarf_planets)

    def focused_body(self) -> Optional[RuntimeBody]:
        bodies = self.active_bodies()
        if 0 <= self.focus_index < len(bodies):
            return bodies[self.focus_index]
        return None

    def next_focus(self) -> Optional[RuntimeBody]:
        """Cycle focus over the active bodies; dwarf planets only when shown."""
        bodies = self.active_bodies()
        if not bodies:
            self.focus_index = -1
            return None
        self.focus_index = (self.focus_index + 1) % len(bodies)
        return bodies[self.focus_index]

    def sync_focus(self) -> None:
        if self.focus_index >= len(self.active_bodies()):
            self.focus_index = -1


def update(ctx: SimulationContext, elapsed_ms: float = FRAME_MS) -> None:
    """Advance the simulation by one frame."""
    settings = ctx.settings
    if settings.realistic_scale != ctx.registry.realistic:
        ctx.rebuild()
    ctx.sync_focus()

    ctx.simulation_time += ctx.time_speed
    ctx.clock_ms += elapsed_ms
    ctx.frame += 1

    for body in ctx.active_bodies():
        advance_body(body, ctx.time_speed, settings.show_inclination)

    for asteroid in ctx.registry.asteroids:
        asteroid.angle += asteroid.angular_velocity * ctx.time_speed

    for star in ctx.registry.stars:
        star.twinkle(STAR_TWINKLE_FLOOR)
    update_shooting_stars(ctx.registry)


def advance_body(body: RuntimeBody, time_speed: float, show_inclination: bool = False) -> None:
    body.angle += phase_step(body, time_speed)
    body.rotation += ROTATION_STEP
    if body.elements.axial_tilt:
        body.day_night_angle += DAY_NIGHT_STEP / body.elements.orbital_period
    body.add_trail_point(position_at(body, show_inclination=show_inclination))
    for moon in body.moon_states:
        moon.advance(time_speed)


def update_shooting_stars(registry: BodyRegistry) -> None:
    """Move particles; expired or escaped ones are replaced in place."""
    particles = registry.shooting_stars
    for idx, star in enumerate(particles):
        star.x += star.vx
        star.y += star.vy
        star.life -= 1
        if registry.shooting_star_expired(star):
            particles[idx] = registry.spawn_shooting_star()


def format_sim_time(simulation_time: float) -> str:
    years = simulation_time / TWO_PI
    days = years * DAYS_PER_YEAR
    return f"{days:.0f} days ({years:.2f} years)"


def focus_stats(ctx: SimulationContext) -> Optional[FocusStats]:
    body = ctx.focused_body()
    if body is None:
        return None
    x, y = position_at(body, show_inclination=ctx.settings.show_inclination)
    sx, sy = ctx.viewport.to_screen((x, y))
    return FocusStats(
        name=body.name,
        dwarf=body.is_dwarf,
        position=(int(round(sx)), int(round(sy))),
        distance_au=display_to_au(math.hypot(x, y)),
        speed=orbital_speed_estimate(body),
        progress=orbital_progress(body.angle),
    )


def publish_status(ctx: SimulationContext, sink: StatusSink) -> None:
    sink.write(status.SIM_TIME, format_sim_time(ctx.simulation_time))
    stats = focus_stats(ctx)
    if stats is None:
        return
    sink.write(status.FOCUSED_NAME, stats.name + (" (Dwarf)" if stats.dwarf else ""))
    sink.write(status.FOCUSED_POSITION, f"({stats.position[0]}, {stats.position[1]})")
    sink.write(status.FOCUSED_DISTANCE, f"{stats.distance_au:.3f} AU")
    sink.write(status.FOCUSED_SPEED, f"{stats.speed:.1f} km/s")
    sink.write(status.FOCUSED_PROGRESS, f"{stats.progress:.1f}%")
