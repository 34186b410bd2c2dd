#!/usr/bin/env python3
"""
Drawing helpers shared by the render passes.

pygame.draw writes colours without blending, so anything translucent goes
through pygame.gfxdraw (which blends RGBA onto the target) or through a
temporary SRCALPHA surface that is blitted. gfxdraw takes 16-bit integer
coordinates, so every point passes through safe_point() first and shapes
that would leave the safe range are skipped.
"""
import math
from typing import Dict, Optional, Sequence, Tuple

import pygame
from pygame import gfxdraw

from .colors import color_at, lerp_color
from .constants import SAFE_COORD_LIMIT

Point = Tuple[float, float]

_font_cache: Dict[Tuple[int, bool], pygame.font.Font] = {}


def safe_point(pt: Point) -> Optional[Tuple[int, int]]:
    try:
        x, y = int(round(pt[0])), int(round(pt[1]))
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def _safe_radius(r: float) -> Optional[int]:
    if r != r or r < 0:  # NaN or negative
        return None
    r = int(round(r))
    return r if r <= SAFE_COORD_LIMIT else None


def get_font(size: int = 16, bold: bool = False) -> pygame.font.Font:
    key = (size, bold)
    font = _font_cache.get(key)
    if font is None:
        if not pygame.font.get_init():
            pygame.font.init()
        try:
            font = pygame.font.SysFont("arial", size, bold=bold)
        except (pygame.error, OSError):
            font = pygame.font.Font(None, size + 4)
        _font_cache[key] = font
    return font


def draw_text(surface, text, x, y, color, size=16, bold=False, center=False, shadow=False):
    font = get_font(size, bold)
    img = font.render(text, True, color[:3])
    if len(color) == 4:
        img.set_alpha(color[3])
    rect = img.get_rect()
    if center:
        rect.midtop = (int(x), int(y))
    else:
        rect.topleft = (int(x), int(y))
    if shadow:
        shade = font.render(text, True, (0, 0, 0))
        shade.set_alpha(200)
        surface.blit(shade, rect.move(1, 1))
    surface.blit(img, rect)


def fill_circle(surface, center: Point, radius: float, color) -> None:
    c = safe_point(center)
    r = _safe_radius(radius)
    if c is None or r is None:
        return
    gfxdraw.filled_circle(surface, c[0], c[1], r, color)
    if r > 1:
        gfxdraw.aacircle(surface, c[0], c[1], r, color)


def stroke_circle(surface, center: Point, radius: float, color, width: int = 1) -> None:
    c = safe_point(center)
    r = _safe_radius(radius)
    if c is None or r is None:
        return
    for i in range(width):
        gfxdraw.aacircle(surface, c[0], c[1], r + i, color)


def stroke_ellipse(surface, center: Point, rx: float, ry: float, color, width: int = 1) -> None:
    c = safe_point(center)
    a = _safe_radius(rx)
    b = _safe_radius(ry)
    if c is None or a is None or b is None:
        return
    for i in range(width):
        gfxdraw.aaellipse(surface, c[0], c[1], a + i, b + i, color)


def blend_line(surface, p1: Point, p2: Point, color, width: int = 1) -> None:
    a = safe_point(p1)
    b = safe_point(p2)
    if a is None or b is None:
        return
    # Thicken across the minor direction of the segment.
    steep = abs(b[1] - a[1]) > abs(b[0] - a[0])
    for i in range(width):
        dx, dy = (i, 0) if steep else (0, i)
        gfxdraw.line(surface, a[0] + dx, a[1] + dy, b[0] + dx, b[1] + dy, color)


def fill_polygon(surface, points: Sequence[Point], color) -> None:
    pts = [safe_point(p) for p in points]
    if any(p is None for p in pts) or len(pts) < 3:
        return
    gfxdraw.filled_polygon(surface, pts, color)


def dashed_polyline(surface, points: Sequence[Point], color, dash: float = 5, gap: float = 5,
                    width: int = 1) -> None:
    """Polyline with a dash pattern that continues across vertices."""
    pattern = (dash, gap)
    phase_idx, remaining = 0, dash
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        seg_len = math.hypot(x2 - x1, y2 - y1)
        if seg_len == 0:
            continue
        ux, uy = (x2 - x1) / seg_len, (y2 - y1) / seg_len
        pos = 0.0
        while pos < seg_len:
            step = min(remaining, seg_len - pos)
            if phase_idx == 0:
                start = (x1 + ux * pos, y1 + uy * pos)
                end = (x1 + ux * (pos + step), y1 + uy * (pos + step))
                blend_line(surface, start, end, color, width)
            pos += step
            remaining -= step
            if remaining <= 0:
                phase_idx = 1 - phase_idx
                remaining = pattern[phase_idx]


def dashed_line(surface, p1: Point, p2: Point, color, dash: float = 10, gap: float = 5, width: int = 1) -> None:
    dashed_polyline(surface, [p1, p2], color, dash, gap, width)


def gradient_polyline(surface, points: Sequence[Point], start_color, end_color, width: int = 1) -> None:
    """Polyline whose colour (alpha included) runs from start_color to end_color."""
    n = len(points) - 1
    for i in range(n):
        color = lerp_color(start_color, end_color, (i + 1) / n)
        blend_line(surface, points[i], points[i + 1], color, width)


def radial_gradient(radius: int, stops: Sequence[Sequence[int]],
                    highlight: Tuple[float, float] = (0.0, 0.0)) -> pygame.Surface:
    """
    Square SRCALPHA surface of side 2*radius holding a radial gradient disk.

    stops run from the centre (first) to the rim (last) and must be RGBA.
    highlight shifts the inner stops towards an offset, given as a fraction
    of the radius, for the lit-from-the-upper-left look of sphere shading.
    """
    radius = max(1, int(radius))
    surf = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
    rings = max(2, min(radius, 96))
    hx, hy = highlight
    for i in range(rings, 0, -1):
        t = i / rings
        color = color_at(stops, t)
        shift = 1.0 - t
        cx = radius + hx * radius * shift
        cy = radius + hy * radius * shift
        pygame.draw.circle(surf, color, (int(round(cx)), int(round(cy))), max(1, int(round(radius * t))))
    return surf


def blit_centered(surface, image: pygame.Surface, center: Point) -> None:
    c = safe_point(center)
    if c is None:
        return
    surface.blit(image, image.get_rect(center=c))


def circular_mask(image: pygame.Surface) -> pygame.Surface:
    """Clip a square SRCALPHA image to its inscribed circle."""
    w, h = image.get_size()
    mask = pygame.Surface((w, h), pygame.SRCALPHA)
    pygame.draw.circle(mask, (255, 255, 255, 255), (w // 2, h // 2), min(w, h) // 2)
    image.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)
    return image


def terminator_overlay(size: int) -> pygame.Surface:
    """Left-to-right darkening used as day/night shading on textured disks."""
    overlay = pygame.Surface((size, size), pygame.SRCALPHA)
    stops = ((0, 0, 0, 0), (0, 0, 0, 102), (0, 0, 0, 178))
    for x in range(size):
        color = color_at(stops, x / max(1, size - 1))
        pygame.draw.line(overlay, color, (x, 0), (x, size - 1))
    return overlay


def textured_disk(texture: pygame.Surface, radius: float, rotation: float,
                  terminator_angle: Optional[float] = None) -> pygame.Surface:
    """
    Scale, rotate and circle-clip a texture.

    With terminator_angle set, the night-side shading is rotated to that angle
    (0 puts the dark side on the right).
    """
    side = max(2, int(round(radius * 2)))
    # smoothscale needs 24/32-bit input; palette PNGs are widened first.
    source = pygame.Surface(texture.get_size(), pygame.SRCALPHA)
    source.blit(texture, (0, 0))
    scaled = pygame.transform.smoothscale(source, (side, side))
    rotated = pygame.transform.rotate(scaled, -math.degrees(rotation))
    disk = pygame.Surface((side, side), pygame.SRCALPHA)
    disk.blit(rotated, rotated.get_rect(center=(side // 2, side // 2)))
    if terminator_angle is not None:
        shade = pygame.transform.rotate(terminator_overlay(side), -math.degrees(terminator_angle))
        disk.blit(shade, shade.get_rect(center=(side // 2, side // 2)))
    return circular_mask(disk)
