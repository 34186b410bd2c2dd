#!/usr/bin/env python3
"""
Orbit model: elliptical kinematics for bodies, moons and asteroids.

Responsibilities
- Derive ellipse geometry (semi-minor axis, focal distance) from orbital elements.
- Map a body's phase angle to a simulation-space position, with the sun at the
  focus rather than the ellipse centre.
- Advance phase angles per frame with the visual pacing correction.

Conventions
- Positions are in display units. A zoom argument scales the ellipse
  parameters, giving screen-pixel offsets from the sun; zoom=1 gives
  simulation space.
- The 2-D projection compresses y by a tilt factor (BASE_TILT), optionally
  multiplied by cos(inclination). The tilt is always taken as its absolute
  value so an ellipse can never be mirrored or degenerate to a negative radius.
- Pacing is a visual correction, not physics: inner bodies are slowed so the
  outer system visibly moves at the same time speed.
"""
import math
from typing import List, Optional, Tuple

from .constants import (
    BASE_TILT,
    DISPLAY_UNITS_PER_AU,
    INNER_PACING_FACTOR,
    INNER_PACING_LIMIT,
    MKM_PER_AU,
    PREDICTION_STEP,
    PREDICTION_WINDOW,
    TWO_PI,
)
from .data_models import MoonState, RuntimeBody
from .vector_utils import polar


def semi_minor_axis(semi_major_axis: float, eccentricity: float) -> float:
    return semi_major_axis * math.sqrt(1.0 - eccentricity * eccentricity)


def focal_distance(semi_major_axis: float, eccentricity: float) -> float:
    return semi_major_axis * eccentricity


def angular_velocity(orbital_period: float) -> float:
    """Radians per unit of time speed for a period given in years."""
    return TWO_PI / orbital_period


def orbit_tilt(inclination: float, show_inclination: bool) -> float:
    """Vertical compression for an orbit, never negative."""
    tilt = BASE_TILT
    if show_inclination and inclination:
        tilt = BASE_TILT * math.cos(math.radians(inclination))
    return abs(tilt)


def position_at(body: RuntimeBody, angle: Optional[float] = None, zoom: float = 1.0,
                show_inclination: bool = False) -> Tuple[float, float]:
    """
    Position of a body relative to the sun.

    x = a*cos(t) - c and y = b*sin(t)*tilt, with a, b and c scaled by zoom.
    The current phase is used when no angle is given.
    """
    theta = body.angle if angle is None else angle
    a = body.semi_major_axis * zoom
    b = body.semi_minor_axis * zoom
    c = body.focal_distance * zoom
    tilt = orbit_tilt(body.elements.inclination, show_inclination)
    return (a * math.cos(theta) - c, b * math.sin(theta) * tilt)


def reference_position(body: RuntimeBody) -> Tuple[float, float]:
    """Epoch position: the configured starting phase, zoom 1, no inclination."""
    return position_at(body, angle=body.elements.start_angle)


def speed_multiplier(semi_major_axis: float) -> float:
    return INNER_PACING_FACTOR if semi_major_axis < INNER_PACING_LIMIT else 1.0


def phase_step(body: RuntimeBody, time_speed: float) -> float:
    return body.angular_velocity * time_speed * speed_multiplier(body.semi_major_axis)


def asteroid_angular_velocity(distance: float) -> float:
    """Kepler's third law, normalised so Earth's orbit has a period of one year."""
    return TWO_PI / math.sqrt((distance / DISPLAY_UNITS_PER_AU) ** 3)


def moon_offset(moon: MoonState, zoom: float = 1.0) -> Tuple[float, float]:
    """Offset of a moon from its parent; moons use the fixed base tilt."""
    return polar(moon.spec.distance * zoom, moon.angle, BASE_TILT)


def prediction_arc(body: RuntimeBody, zoom: float = 1.0,
                   show_inclination: bool = False) -> List[Tuple[float, float]]:
    """Points along the orbit from the current phase over the prediction window."""
    points = []
    steps = int(math.ceil(PREDICTION_WINDOW / PREDICTION_STEP))
    for i in range(steps):
        points.append(position_at(body, body.angle + i * PREDICTION_STEP, zoom, show_inclination))
    return points


def orbital_progress(angle: float) -> float:
    """Percentage of the current revolution completed."""
    return (angle % TWO_PI) / TWO_PI * 100.0


def orbital_speed_estimate(body: RuntimeBody) -> float:
    """Speed label shown in the stats panel (km/s); a display estimate."""
    return body.angular_velocity * body.semi_major_axis * MKM_PER_AU / body.elements.orbital_period
