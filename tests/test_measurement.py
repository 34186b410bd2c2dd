"""Tests for the two-point distance ruler."""

from __future__ import annotations

import pytest

from orrery.constants import MKM_PER_AU, au_to_mkm, display_to_au
from orrery.measurement import MeasurementTool
from orrery.orbit_model import reference_position
from orrery.simulation import update
from orrery.vector_utils import vec_dist


def _screen_of(ctx, body):
    return ctx.viewport.to_screen(reference_position(body))


def test_unit_bridge() -> None:
    assert display_to_au(140) == pytest.approx(1.0)
    assert au_to_mkm(2.0) == pytest.approx(2 * MKM_PER_AU)


def test_state_machine_and_capacity(find_body) -> None:
    """A third selection evicts the oldest; the pair advances by one."""
    tool = MeasurementTool()
    assert tool.state == 'empty'
    first, second, third = find_body('Mercury'), find_body('Venus'), find_body('Earth')
    tool.select(first)
    assert tool.state == 'one_selected'
    assert tool.readout() is None
    tool.select(second)
    assert tool.state == 'two_selected'
    tool.select(third)
    assert tool.state == 'two_selected'
    assert list(tool.points) == [second, third]
    tool.clear()
    assert tool.state == 'empty'


def test_mercury_to_earth_readout(ctx, find_body) -> None:
    mercury, earth = find_body('Mercury'), find_body('Earth')
    tool = ctx.measurement
    assert tool.click(_screen_of(ctx, mercury), ctx.active_bodies(), ctx.viewport) is mercury
    assert tool.click(_screen_of(ctx, earth), ctx.active_bodies(), ctx.viewport) is earth

    au = vec_dist(reference_position(mercury), reference_position(earth)) / 140
    assert tool.distance_au() == pytest.approx(au)
    assert tool.distance_mkm() == pytest.approx(au * 149.6)
    assert tool.readout() == f'Mercury ↔ Earth: {au:.3f} AU ({au * 149.6:.1f}M km)'


def test_pick_threshold_scales_with_zoom(ctx, find_body) -> None:
    """The pick radius is in screen pixels, so zooming in shrinks it in simulation units."""
    mercury = find_body('Mercury')
    ctx.viewport.set_zoom(2.0)
    rx, ry = reference_position(mercury)
    bodies = ctx.active_bodies()

    near = ctx.viewport.to_screen((rx, ry + 20))
    far = ctx.viewport.to_screen((rx, ry + 30))
    assert ctx.measurement.pick(near, bodies, ctx.viewport) is mercury
    assert ctx.measurement.pick(far, bodies, ctx.viewport) is None


def test_click_on_empty_space_selects_nothing(ctx) -> None:
    assert ctx.measurement.click((0, 0), ctx.active_bodies(), ctx.viewport) is None
    assert ctx.measurement.state == 'empty'


def test_distance_ignores_animation(ctx, find_body) -> None:
    tool = ctx.measurement
    tool.select(find_body('Mars'))
    tool.select(find_body('Jupiter'))
    before = tool.distance_au()
    for _ in range(50):
        update(ctx)
    assert tool.distance_au() == before
