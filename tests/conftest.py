"""Shared fixtures: headless pygame, the bundled catalog and a seeded context."""

from __future__ import annotations

import os

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pygame  # noqa: E402
import pytest  # noqa: E402

from orrery.catalog import Catalog, load_catalog  # noqa: E402
from orrery.simulation import SimulationContext  # noqa: E402
from orrery.status import DictStatusSink  # noqa: E402

WIDTH = 1280
HEIGHT = 800


@pytest.fixture(scope='session')
def catalog() -> Catalog:
    return load_catalog()


@pytest.fixture
def ctx(catalog: Catalog) -> SimulationContext:
    return SimulationContext(catalog, WIDTH, HEIGHT, seed=7)


@pytest.fixture
def sink() -> DictStatusSink:
    return DictStatusSink()


@pytest.fixture
def surface() -> pygame.Surface:
    pygame.font.init()
    return pygame.Surface((WIDTH, HEIGHT))


@pytest.fixture
def find_body(ctx: SimulationContext):
    """Look a runtime body up by name in the current registry."""

    def _find(name: str):
        for body in ctx.registry.all_bodies():
            if body.name == name:
                return body
        raise KeyError(name)

    return _find
