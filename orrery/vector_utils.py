#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

Points are plain (x, y) tuples in whichever space the caller works in
(simulation space or screen pixels).
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_dist(a: Vec2, b: Vec2) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def polar(radius: float, angle: float, y_scale: float = 1.0) -> Vec2:
    """Point on a (possibly flattened) circle around the origin."""
    return (radius * math.cos(angle), radius * math.sin(angle) * y_scale)
