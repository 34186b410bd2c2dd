"""Tests for the draw pipeline on a headless surface."""

from __future__ import annotations

import pygame
import pytest

from orrery import status
from orrery.renderer import PASSES, FrameRenderer
from orrery.simulation import update

DEFAULT_PASSES = [
    'background', 'milky_way', 'starfield', 'lens_flare',
    'orbits', 'trails', 'sun', 'bodies', 'asteroids',
]


class RecordingTextures:
    """Serves a plain square surface for every key and records the requests."""

    def __init__(self):
        self.requested = []
        self.texture = pygame.Surface((32, 32))
        self.texture.fill((90, 140, 200))

    def get(self, key):
        self.requested.append(key)
        return self.texture if key else None


def test_default_pass_order(ctx, surface, sink) -> None:
    executed = FrameRenderer(sink=sink).render(surface, ctx)
    assert executed == DEFAULT_PASSES


def test_minimal_passes(ctx, surface) -> None:
    for name in ('show_milky_way', 'show_lens_flare', 'show_orbits', 'show_trails'):
        setattr(ctx.settings, name, False)
    executed = FrameRenderer().render(surface, ctx)
    assert executed == ['background', 'starfield', 'sun', 'bodies', 'asteroids']


def test_every_pass_in_order(ctx, surface, find_body) -> None:
    settings = ctx.settings
    for name in settings.names():
        setattr(settings, name, True)
    for _ in range(3):
        update(ctx)
    ctx.measurement.select(find_body('Earth'))
    ctx.measurement.select(find_body('Saturn'))
    ctx.next_focus()
    executed = FrameRenderer().render(surface, ctx)
    assert executed == list(PASSES)


def test_measurement_pass_needs_a_selection(ctx, surface) -> None:
    ctx.settings.distance_ruler = True
    assert 'measurement' not in FrameRenderer().render(surface, ctx)


def test_render_publishes_status(ctx, surface, sink, find_body) -> None:
    ctx.settings.distance_ruler = True
    ctx.measurement.select(find_body('Mars'))
    ctx.measurement.select(find_body('Venus'))
    ctx.next_focus()
    update(ctx)
    FrameRenderer(sink=sink).render(surface, ctx)
    assert sink.get(status.SIM_TIME).endswith('years)')
    assert sink.get(status.FOCUSED_NAME) == 'Mercury'
    assert sink.get(status.RULER_DISTANCE).startswith('Mars ↔ Venus: ')


def test_render_does_not_move_bodies(ctx, surface) -> None:
    before = [b.angle for b in ctx.registry.all_bodies()]
    FrameRenderer().render(surface, ctx)
    assert [b.angle for b in ctx.registry.all_bodies()] == before


def test_textures_are_requested_by_key(ctx, surface) -> None:
    textures = RecordingTextures()
    FrameRenderer(textures=textures).render(surface, ctx)
    assert 'earth' in textures.requested
    assert 'saturn' in textures.requested


@pytest.mark.parametrize('zoom', [0.2, 1.0, 5.0])
def test_extreme_views_render(ctx, surface, zoom: float) -> None:
    """Far pans and both zoom limits keep every primitive drawable."""
    ctx.settings.show_moons = True
    ctx.settings.show_labels = True
    ctx.settings.show_inclination = True
    ctx.settings.show_dwarf_planets = True
    ctx.viewport.set_zoom(zoom)
    ctx.viewport.pan_pixels(5000, -5000)
    for _ in range(3):
        update(ctx)
    FrameRenderer(textures=RecordingTextures()).render(surface, ctx)


def test_realistic_scale_renders(ctx, surface) -> None:
    ctx.settings.realistic_scale = True
    update(ctx)
    assert FrameRenderer().render(surface, ctx) == DEFAULT_PASSES


def test_ruler_readout_cleared_after_external_rebuild(ctx, surface, sink, find_body) -> None:
    renderer = FrameRenderer(sink=sink)
    ctx.settings.distance_ruler = True
    ctx.measurement.select(find_body('Mars'))
    ctx.measurement.select(find_body('Venus'))
    renderer.render(surface, ctx)
    assert sink.get(status.RULER_DISTANCE) != ''

    ctx.settings.realistic_scale = True
    update(ctx)
    renderer.render(surface, ctx)
    assert sink.get(status.RULER_DISTANCE) == ''


def test_lens_flare_glows_are_reused(ctx, surface) -> None:
    renderer = FrameRenderer()
    renderer.render(surface, ctx)
    first = renderer._cache['lens_flare_0'][1]
    renderer.render(surface, ctx)
    assert renderer._cache['lens_flare_0'][1] is first

    ctx.viewport.set_zoom(2.0)
    renderer.render(surface, ctx)
    assert renderer._cache['lens_flare_0'][1] is not first
    assert len([k for k in renderer._cache if k.startswith('lens_flare_')]) == 3
