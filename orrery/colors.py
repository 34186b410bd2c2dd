#!/usr/bin/env python3
"""
Colour helpers: hex parsing, alpha, and multi-stop gradient lookup.

Colours are RGB or RGBA tuples in 0..255, the form pygame accepts directly.
"""
from typing import Sequence, Tuple

from .vector_utils import clamp

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]


def parse_hex(value: str) -> RGB:
    """Parse '#rrggbb' (or '#rgb') into an RGB tuple."""
    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"not a hex colour: {value!r}")
    return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))


def with_alpha(color: Sequence[int], alpha: float) -> RGBA:
    """Attach an alpha channel; alpha is given as 0..1."""
    a = int(round(clamp(alpha, 0.0, 1.0) * 255))
    return (int(color[0]), int(color[1]), int(color[2]), a)


def lerp_color(a: Sequence[int], b: Sequence[int], t: float) -> Tuple[int, ...]:
    t = clamp(t, 0.0, 1.0)
    return tuple(int(round(x + (y - x) * t)) for x, y in zip(a, b))


def color_at(stops: Sequence[Sequence[int]], t: float) -> Tuple[int, ...]:
    """
    Sample evenly spaced gradient stops at position t in [0, 1].

    Matches canvas-style gradients where stop i sits at i / (n - 1).
    """
    if not stops:
        raise ValueError("gradient needs at least one stop")
    if len(stops) == 1:
        return tuple(stops[0])
    t = clamp(t, 0.0, 1.0)
    span = len(stops) - 1
    idx = min(int(t * span), span - 1)
    local = t * span - idx
    return lerp_color(stops[idx], stops[idx + 1], local)
