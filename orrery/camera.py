#!/usr/bin/env python3
"""
Viewport utilities for 2D simulation-to-screen transforms.
"""
from typing import Optional, Tuple

from .constants import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, VIEW_HEIGHT, VIEW_WIDTH
from .vector_utils import clamp


class Viewport:
    """
    Maps simulation space (display units, sun at the origin) to screen pixels.

    screen = canvas_center + sim * zoom + pan
    """

    def __init__(self, width: int = VIEW_WIDTH, height: int = VIEW_HEIGHT, zoom: float = DEFAULT_ZOOM):
        self.size = (width, height)
        self.zoom = clamp(zoom, MIN_ZOOM, MAX_ZOOM)
        self.pan = [0.0, 0.0]

    @property
    def center(self) -> Tuple[float, float]:
        return (self.size[0] / 2, self.size[1] / 2)

    @property
    def origin(self) -> Tuple[float, float]:
        """Screen position of the sun."""
        cx, cy = self.center
        return (cx + self.pan[0], cy + self.pan[1])

    def resize(self, w: int, h: int) -> None:
        self.size = (w, h)

    def to_screen(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        ox, oy = self.origin
        return (ox + pos[0] * self.zoom, oy + pos[1] * self.zoom)

    def offset_to_screen(self, offset: Tuple[float, float]) -> Tuple[float, float]:
        """Place an offset that is already zoom-scaled (orbit geometry, moons)."""
        ox, oy = self.origin
        return (ox + offset[0], oy + offset[1])

    def to_simulation(self, screen: Tuple[float, float]) -> Tuple[float, float]:
        ox, oy = self.origin
        return ((screen[0] - ox) / self.zoom, (screen[1] - oy) / self.zoom)

    def set_zoom(self, zoom: float) -> float:
        self.zoom = clamp(zoom, MIN_ZOOM, MAX_ZOOM)
        return self.zoom

    def zoom_by(self, factor: float, pivot_screen: Optional[Tuple[float, float]] = None) -> float:
        """
        Multiply the zoom, keeping the simulation point under pivot_screen fixed.
        """
        before = None
        if pivot_screen is not None:
            before = self.to_simulation(pivot_screen)
        self.set_zoom(self.zoom * factor)
        if before is not None:
            after = self.to_screen(before)
            self.pan[0] += pivot_screen[0] - after[0]
            self.pan[1] += pivot_screen[1] - after[1]
        return self.zoom

    def pan_pixels(self, dx_pixels: float, dy_pixels: float) -> None:
        self.pan[0] += dx_pixels
        self.pan[1] += dy_pixels

    def reset(self) -> None:
        self.zoom = DEFAULT_ZOOM
        self.pan = [0.0, 0.0]
