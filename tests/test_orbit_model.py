"""Tests for ellipse geometry, positions and per-frame pacing."""

from __future__ import annotations

import math
import random

import pytest

from orrery.constants import BASE_TILT, MKM_PER_AU
from orrery.data_models import MoonSpec, MoonState
from orrery.orbit_model import (
    asteroid_angular_velocity,
    focal_distance,
    moon_offset,
    orbit_tilt,
    orbital_progress,
    orbital_speed_estimate,
    phase_step,
    position_at,
    prediction_arc,
    reference_position,
    semi_minor_axis,
    speed_multiplier,
)
from orrery.registry import make_body


def _body(catalog, name):
    for elements in catalog.planets + catalog.dwarf_planets:
        if elements.name == name:
            return make_body(elements, False, random.Random(0))
    raise KeyError(name)


def test_derived_geometry_bounded_by_semi_major_axis(catalog) -> None:
    """Semi-minor axis never exceeds a, focal distance stays below a."""
    for elements in catalog.planets + catalog.dwarf_planets:
        a, e = elements.semi_major_axis, elements.eccentricity
        assert semi_minor_axis(a, e) <= a
        assert focal_distance(a, e) < a


def test_earth_geometry_from_catalog(catalog) -> None:
    """Earth (a=140, e=0.017) gives b ~ 139.98 and c ~ 2.38."""
    earth = _body(catalog, 'Earth')
    assert earth.semi_minor_axis == pytest.approx(139.98, abs=0.005)
    assert earth.focal_distance == pytest.approx(2.38, abs=1e-9)


@pytest.mark.parametrize('angle', [0.0, 0.4, math.pi / 2, 2.5, math.pi, 4.9, -1.3])
def test_position_is_periodic(catalog, angle: float) -> None:
    """Adding a full turn to the phase lands on the same point."""
    mars = _body(catalog, 'Mars')
    x1, y1 = position_at(mars, angle)
    x2, y2 = position_at(mars, angle + 2 * math.pi)
    assert x2 == pytest.approx(x1, abs=1e-9)
    assert y2 == pytest.approx(y1, abs=1e-9)


def test_position_is_measured_from_the_focus(catalog) -> None:
    """At phase 0 the body sits at a - c; at pi/2 it is directly above -c."""
    mercury = _body(catalog, 'Mercury')
    a, b, c = mercury.semi_major_axis, mercury.semi_minor_axis, mercury.focal_distance
    assert position_at(mercury, 0.0) == pytest.approx((a - c, 0.0))
    x, y = position_at(mercury, math.pi / 2)
    assert x == pytest.approx(-c)
    assert y == pytest.approx(b * BASE_TILT)


def test_zoom_scales_ellipse_parameters(catalog) -> None:
    saturn = _body(catalog, 'Saturn')
    x1, y1 = position_at(saturn, 1.1)
    x3, y3 = position_at(saturn, 1.1, zoom=3.0)
    assert (x3, y3) == pytest.approx((3 * x1, 3 * y1))


def test_current_phase_is_used_by_default(catalog) -> None:
    earth = _body(catalog, 'Earth')
    earth.angle = 2.0
    assert position_at(earth) == position_at(earth, 2.0)


def test_tilt_is_never_negative() -> None:
    """Steep inclinations flip cos() negative; the tilt is clamped to abs()."""
    assert orbit_tilt(120.0, True) == pytest.approx(BASE_TILT * 0.5)
    assert orbit_tilt(180.0, True) == pytest.approx(BASE_TILT)
    assert orbit_tilt(90.0, True) >= 0.0
    assert orbit_tilt(17.2, False) == BASE_TILT
    assert orbit_tilt(0.0, True) == BASE_TILT


def test_inclination_view_compresses_orbit(catalog) -> None:
    pluto = _body(catalog, 'Pluto')
    _, flat = position_at(pluto, math.pi / 2, show_inclination=False)
    _, inclined = position_at(pluto, math.pi / 2, show_inclination=True)
    assert 0 < inclined < flat
    assert inclined == pytest.approx(flat * math.cos(math.radians(17.2)))


def test_inner_bodies_are_paced_down(catalog) -> None:
    assert speed_multiplier(140) == 0.3
    assert speed_multiplier(199.9) == 0.3
    assert speed_multiplier(200) == 1.0
    earth = _body(catalog, 'Earth')
    jupiter = _body(catalog, 'Jupiter')
    assert phase_step(earth, 0.01) == pytest.approx(2 * math.pi * 0.01 * 0.3)
    assert phase_step(jupiter, 0.01) == pytest.approx(2 * math.pi / 11.86 * 0.01)


def test_asteroid_angular_velocity_follows_keplers_third_law() -> None:
    """An asteroid at Earth's distance orbits once per year."""
    assert asteroid_angular_velocity(140) == pytest.approx(2 * math.pi)
    ratio = asteroid_angular_velocity(140) / asteroid_angular_velocity(560)
    assert ratio == pytest.approx(8.0)


def test_moon_offset_uses_fixed_tilt() -> None:
    moon = MoonState(MoonSpec('Moon', 4, 20, 0.0748), angle=math.pi / 2, angular_velocity=1.0)
    ox, oy = moon_offset(moon)
    assert ox == pytest.approx(0.0, abs=1e-9)
    assert oy == pytest.approx(20 * BASE_TILT)
    assert moon_offset(moon, zoom=2.0)[1] == pytest.approx(40 * BASE_TILT)


def test_prediction_arc_starts_at_body_and_spans_an_eighth(catalog) -> None:
    neptune = _body(catalog, 'Neptune')
    arc = prediction_arc(neptune)
    assert len(arc) == 8
    assert arc[0] == pytest.approx(position_at(neptune))
    assert arc[-1] == pytest.approx(position_at(neptune, neptune.angle + 0.7))


def test_reference_position_uses_start_angle(catalog) -> None:
    earth = _body(catalog, 'Earth')
    earth.angle += 3.0
    assert reference_position(earth) == pytest.approx(position_at(earth, 0.7 * math.pi))


def test_orbital_progress_wraps() -> None:
    assert orbital_progress(0.0) == 0.0
    assert orbital_progress(3 * math.pi) == pytest.approx(50.0)


def test_orbital_speed_estimate(catalog) -> None:
    earth = _body(catalog, 'Earth')
    assert orbital_speed_estimate(earth) == pytest.approx(2 * math.pi * 140 * MKM_PER_AU)
