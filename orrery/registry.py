#!/usr/bin/env python3
"""
Body registry: runtime state for everything drawn on the canvas.

A registry is built from a Catalog for one canvas size and one scale mode.
Startup, canvas resize and scale-mode toggles all build a fresh registry;
nothing (phases, trails, stars) carries over from the previous one.
"""
import logging
import math
import random
from typing import List, Optional

from .catalog import Catalog, SunSpec
from .constants import MIN_DWARF_RADIUS, MIN_PLANET_RADIUS, REAL_RADIUS_DIVISOR, SHOOTING_STAR_MARGIN, TWO_PI
from .data_models import (
    Asteroid,
    MoonList,
    MoonState,
    OrbitalElements,
    RuntimeBody,
    ShootingStar,
    SingleMoon,
    Star,
)
from .orbit_model import angular_velocity, asteroid_angular_velocity, focal_distance, semi_minor_axis

logger = logging.getLogger(__name__)

STAR_WHITE = (255, 255, 255)
STAR_BLUE = (187, 221, 255)
STAR_WARM = (255, 238, 204)


def display_radius(elements: OrbitalElements, realistic: bool) -> float:
    """Visual radius from the catalog, or the real radius scaled down with a floor."""
    if not realistic:
        return elements.radius
    floor = MIN_DWARF_RADIUS if elements.dwarf else MIN_PLANET_RADIUS
    return max(floor, elements.real_radius / REAL_RADIUS_DIVISOR)


def make_moon_states(elements: OrbitalElements, rng: random.Random) -> List[MoonState]:
    system = elements.moons
    if isinstance(system, MoonList):
        specs = list(system.moons)
    elif isinstance(system, SingleMoon):
        specs = [system.moon]
    else:
        specs = []
    return [MoonState(spec=m, angle=rng.random() * TWO_PI, angular_velocity=angular_velocity(m.orbital_period))
            for m in specs]


def make_body(elements: OrbitalElements, realistic: bool, rng: random.Random) -> RuntimeBody:
    a, e = elements.semi_major_axis, elements.eccentricity
    return RuntimeBody(
        elements=elements,
        semi_minor_axis=semi_minor_axis(a, e),
        focal_distance=focal_distance(a, e),
        display_radius=display_radius(elements, realistic),
        angle=elements.start_angle,
        angular_velocity=angular_velocity(elements.orbital_period),
        day_night_angle=rng.random() * TWO_PI,
        moon_states=make_moon_states(elements, rng),
    )


class BodyRegistry:
    """
    Sun, planets, dwarf planets, asteroid belt and starfield for one build.

    Planets and dwarf planets are kept in catalog order; focus indices refer
    to active_bodies(), which appends dwarf planets only when they are shown.
    """

    def __init__(self, catalog: Catalog, width: int, height: int, realistic: bool = False,
                 rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.size = (width, height)
        self.realistic = realistic
        self.rng = rng or random.Random()
        self.sun: SunSpec = catalog.sun
        self.planets = [make_body(p, realistic, self.rng) for p in catalog.planets]
        self.dwarf_planets = [make_body(p, realistic, self.rng) for p in catalog.dwarf_planets]
        self.asteroids = self._make_asteroids()
        self.stars = self._make_stars()
        self.shooting_stars = [self.spawn_shooting_star() for _ in range(catalog.stars.shooting_stars)]
        logger.debug("Built registry %dx%d (%s scale): %d bodies, %d asteroids",
                     width, height, "realistic" if realistic else "visual",
                     len(self.planets) + len(self.dwarf_planets), len(self.asteroids))

    def all_bodies(self) -> List[RuntimeBody]:
        return self.planets + self.dwarf_planets

    def active_bodies(self, show_dwarf_planets: bool) -> List[RuntimeBody]:
        if show_dwarf_planets:
            return self.planets + self.dwarf_planets
        return list(self.planets)

    def _make_asteroids(self) -> List[Asteroid]:
        spec = self.catalog.asteroids
        rng = self.rng
        belt = []
        for _ in range(spec.count):
            distance = spec.min_distance + rng.random() * (spec.max_distance - spec.min_distance)
            belt.append(Asteroid(
                distance=distance,
                angle=rng.random() * TWO_PI,
                radius=spec.min_radius + rng.random() * (spec.max_radius - spec.min_radius),
                angular_velocity=asteroid_angular_velocity(distance),
                brightness=0.3 + rng.random() * 0.4,
                inclination=(rng.random() - 0.5) * 10,
            ))
        return belt

    def _make_stars(self) -> List[Star]:
        w, h = self.size
        rng = self.rng
        stars = []
        for _ in range(self.catalog.stars.count):
            if rng.random() > 0.85:
                color = STAR_BLUE if rng.random() > 0.5 else STAR_WARM
            else:
                color = STAR_WHITE
            stars.append(Star(
                x=rng.random() * w,
                y=rng.random() * h,
                z=rng.random(),
                radius=0.5 + rng.random() * 1.5,
                blink_speed=0.005 + rng.random() * 0.015,
                opacity=rng.random(),
                color=color,
            ))
        return stars

    def spawn_shooting_star(self) -> ShootingStar:
        """New particle on a random canvas edge heading in a random direction."""
        w, h = self.size
        rng = self.rng
        side = rng.randrange(4)
        if side == 0:
            x, y = rng.random() * w, 0.0
        elif side == 1:
            x, y = float(w), rng.random() * h
        elif side == 2:
            x, y = rng.random() * w, float(h)
        else:
            x, y = 0.0, rng.random() * h
        angle = rng.random() * TWO_PI
        speed = 3 + rng.random() * 5
        return ShootingStar(
            x=x,
            y=y,
            vx=math.cos(angle) * speed,
            vy=math.sin(angle) * speed,
            life=60 + rng.random() * 60,
            max_life=60 + rng.random() * 60,
        )

    def shooting_star_expired(self, star: ShootingStar) -> bool:
        w, h = self.size
        m = SHOOTING_STAR_MARGIN
        return (star.life <= 0 or star.x < -m or star.x > w + m
                or star.y < -m or star.y > h + m)
