#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

These are small, fast functions for vector math used by the collision code and
the scene description.
"""
import math
from typing import Iterable, List, Tuple


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Tuple[float, float], b: Tuple[float, float]) -> Tuple[float, float]:
    return (a[0] + b[0], a[1] + b[1])


def vec_dot(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return a[0] * b[0] + a[1] * b[1]


def vec_rotate(a: Tuple[float, float], angle: float) -> Tuple[float, float]:
    """Rotate a about the origin; positive angles turn +x toward +y (screen down)."""
    s, c = math.sin(angle), math.cos(angle)
    return (a[0] * c - a[1] * s, a[0] * s + a[1] * c)


def project(points: Iterable[Tuple[float, float]], axis: Tuple[float, float]) -> Tuple[float, float]:
    """Return (min, max) of the points projected onto axis."""
    dots = [vec_dot(p, axis) for p in points]
    return (min(dots), max(dots))


def rect_corners(x: float, y: float, w: float, h: float) -> List[Tuple[float, float]]:
    return [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]


def lerp_color(a: Tuple[int, int, int], b: Tuple[int, int, int], t: float) -> Tuple[int, int, int]:
    t = clamp(t, 0.0, 1.0)
    return (
        int(round(a[0] + (b[0] - a[0]) * t)),
        int(round(a[1] + (b[1] - a[1]) * t)),
        int(round(a[2] + (b[2] - a[2]) * t)),
    )
