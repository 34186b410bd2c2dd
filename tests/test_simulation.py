"""Tests for the per-frame update step, focus handling and status output."""

from __future__ import annotations

import math

import pytest

from orrery import status
from orrery.constants import TRAIL_CAPACITY
from orrery.data_models import Star
from orrery.orbit_model import position_at
from orrery.simulation import SimulationContext, focus_stats, format_sim_time, publish_status, update


def test_update_advances_clock_and_phases(ctx, find_body) -> None:
    earth, jupiter = find_body('Earth'), find_body('Jupiter')
    e0, j0 = earth.angle, jupiter.angle
    update(ctx, 20.0)
    assert ctx.frame == 1
    assert ctx.clock_ms == 20.0
    assert ctx.simulation_time == pytest.approx(0.01)
    assert earth.angle - e0 == pytest.approx(2 * math.pi * 0.01 * 0.3)
    assert jupiter.angle - j0 == pytest.approx(2 * math.pi / 11.86 * 0.01)


def test_trail_is_bounded_fifo(ctx, find_body) -> None:
    mars = find_body('Mars')
    positions = []
    for _ in range(TRAIL_CAPACITY + 50):
        update(ctx)
        positions.append(position_at(mars))
    assert len(mars.trail) == TRAIL_CAPACITY
    for stored, expected in zip(mars.trail, positions[-TRAIL_CAPACITY:]):
        assert stored == pytest.approx(expected)


def test_hidden_dwarf_planets_do_not_advance(ctx, find_body) -> None:
    pluto = find_body('Pluto')
    start = pluto.angle
    update(ctx)
    assert pluto.angle == start
    assert len(pluto.trail) == 0
    ctx.settings.show_dwarf_planets = True
    update(ctx)
    assert pluto.angle > start


def test_asteroids_move_with_their_own_rate(ctx) -> None:
    asteroid = ctx.registry.asteroids[0]
    start = asteroid.angle
    update(ctx)
    assert asteroid.angle - start == pytest.approx(asteroid.angular_velocity * 0.01)


def test_star_twinkle_reverses_at_bounds() -> None:
    star = Star(x=0, y=0, z=0.5, radius=1, blink_speed=0.05, opacity=0.98, color=(255, 255, 255))
    star.twinkle(0.3)
    assert star.blink_speed == -0.05
    star.opacity = 0.31
    star.twinkle(0.3)
    assert star.blink_speed == 0.05


def test_shooting_star_count_is_constant(ctx) -> None:
    expected = len(ctx.registry.shooting_stars)
    for _ in range(300):
        update(ctx)
        assert len(ctx.registry.shooting_stars) == expected


def test_expired_shooting_star_replaced_same_frame(ctx) -> None:
    stars = ctx.registry.shooting_stars
    dying, escaping = stars[0], stars[1]
    dying.life = 1
    escaping.x = -1000.0
    update(ctx)
    assert stars[0] is not dying
    assert stars[1] is not escaping
    assert stars[0].life > 0


def test_same_seed_gives_same_frames(catalog) -> None:
    a = SimulationContext(catalog, 640, 480, seed=42)
    b = SimulationContext(catalog, 640, 480, seed=42)
    for _ in range(30):
        update(a)
        update(b)
    assert [s.opacity for s in a.registry.stars] == [s.opacity for s in b.registry.stars]
    assert [(s.x, s.y) for s in a.registry.shooting_stars] == [(s.x, s.y) for s in b.registry.shooting_stars]
    assert [m.angle for m in a.registry.planets[2].moon_states] == [m.angle for m in b.registry.planets[2].moon_states]


def test_focus_cycles_over_planets(ctx) -> None:
    """With dwarf planets hidden, N presses return to the first planet."""
    n = len(ctx.registry.planets)
    assert ctx.next_focus().name == 'Mercury'
    seen = [ctx.next_focus() for _ in range(n)]
    assert ctx.focus_index == 0
    assert seen[-1].name == 'Mercury'
    assert not any(b.is_dwarf for b in seen)


def test_focus_includes_dwarfs_when_shown(ctx) -> None:
    ctx.settings.show_dwarf_planets = True
    names = [ctx.next_focus().name for _ in range(10)]
    assert names[-2:] == ['Pluto', 'Ceres']
    assert ctx.next_focus().name == 'Mercury'


def test_focus_dropped_when_dwarfs_hidden(ctx) -> None:
    ctx.settings.show_dwarf_planets = True
    ctx.focus_index = 9
    ctx.settings.show_dwarf_planets = False
    update(ctx)
    assert ctx.focus_index == -1
    assert ctx.focused_body() is None


def test_scale_change_rebuilds_registry(ctx, find_body) -> None:
    for _ in range(5):
        update(ctx)
    old = ctx.registry
    ctx.settings.realistic_scale = True
    update(ctx)
    assert ctx.registry is not old
    assert ctx.registry.realistic is True
    earth = find_body('Earth')
    assert earth.display_radius == 2
    assert len(earth.trail) == 1


def test_scale_round_trip_restores_radii(ctx) -> None:
    visual = [b.display_radius for b in ctx.registry.all_bodies()]
    ctx.settings.realistic_scale = True
    update(ctx)
    ctx.settings.realistic_scale = False
    update(ctx)
    assert [b.display_radius for b in ctx.registry.all_bodies()] == visual


def test_resize_rebuilds_for_new_canvas(ctx) -> None:
    ctx.resize(400, 300)
    assert ctx.viewport.size == (400, 300)
    assert ctx.registry.size == (400, 300)
    assert all(s.x <= 400 and s.y <= 300 for s in ctx.registry.stars)


def test_format_sim_time() -> None:
    assert format_sim_time(0.0) == '0 days (0.00 years)'
    assert format_sim_time(2 * math.pi) == '365 days (1.00 years)'


def test_publish_status_without_focus(ctx, sink) -> None:
    publish_status(ctx, sink)
    assert sink.get(status.SIM_TIME) == '0 days (0.00 years)'
    assert status.FOCUSED_POSITION not in sink.values


def test_publish_status_for_focused_body(ctx, sink, find_body) -> None:
    ctx.next_focus()
    ctx.next_focus()
    ctx.next_focus()
    ctx.viewport.set_zoom(2.0)
    ctx.viewport.pan_pixels(15, -10)
    earth = find_body('Earth')
    publish_status(ctx, sink)
    x, y = position_at(earth)
    sx, sy = (640 + 15) + x * 2, (400 - 10) + y * 2
    assert sink.get(status.FOCUSED_NAME) == 'Earth'
    assert sink.get(status.FOCUSED_POSITION) == f'({round(sx)}, {round(sy)})'
    assert sink.get(status.FOCUSED_DISTANCE) == f'{math.hypot(x, y) / 140:.3f} AU'
    assert sink.get(status.FOCUSED_SPEED).endswith(' km/s')
    assert sink.get(status.FOCUSED_PROGRESS) == f'{(earth.angle % (2 * math.pi)) / (2 * math.pi) * 100:.1f}%'


def test_dwarf_focus_is_labelled(ctx, sink) -> None:
    ctx.settings.show_dwarf_planets = True
    ctx.focus_index = 8
    stats = focus_stats(ctx)
    assert stats.dwarf is True
    publish_status(ctx, sink)
    assert sink.get(status.FOCUSED_NAME) == 'Pluto (Dwarf)'
