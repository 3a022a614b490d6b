#!/usr/bin/env python3
"""
Collision handling for Flight Simulator.

Supports two narrow-phase modes:
- Silhouette: the body is a rectangle rotated to its heading; it is tested with
  the separating axis theorem against the obstacle blocks and the field edges
- Extent: only the body's vertical extent is compared with the gap, ignoring
  rotation (the classic arcade check)

The broad phase picks the single obstacle whose horizontal span, widened by a
margin, contains the body's fixed x position. With no such obstacle only the
top and bottom of the field can be hit.

This module also counts obstacles whose trailing edge the body has passed.
"""
import math
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .data_models import Body, Obstacle
from .settings import FlightSettings
from .vector_utils import project, rect_corners, vec_add, vec_rotate


class CollisionResult(str, Enum):
    NONE = "none"
    HIT_UPPER = "hit_upper"
    HIT_LOWER = "hit_lower"

    @property
    def is_hit(self) -> bool:
        return self is not CollisionResult.NONE


class CollisionSettings:
    """Container for collision-related settings."""
    def __init__(self, enable: bool = True, mode: str = "silhouette", half_length: float = 48.0,
                 half_height: float = 48.0, obstacle_width: float = 100.0):
        self.enable = enable
        self.mode = mode  # "silhouette" | "extent"
        self.half_length = max(0.0, float(half_length))
        self.half_height = max(0.0, float(half_height))
        self.obstacle_width = float(obstacle_width)

    @classmethod
    def from_settings(cls, settings: FlightSettings) -> "CollisionSettings":
        return cls(
            mode=settings.collision_mode,
            half_length=settings.check_half,
            half_height=settings.check_half * settings.silhouette_ratio,
            obstacle_width=settings.obstacle_width,
        )

    @property
    def margin(self) -> float:
        """Broad-phase widening; the silhouette may reach its circumradius sideways."""
        if self.mode == "silhouette":
            return math.hypot(self.half_length, self.half_height)
        return self.half_length


def body_origin(field_width: float, field_height: float) -> Tuple[float, float]:
    """Screen point the body's vertical_offset is measured from."""
    return (field_width / 3, field_height / 2)


def body_center(body: Body, field_width: float, field_height: float) -> Tuple[float, float]:
    ox, oy = body_origin(field_width, field_height)
    return (ox, oy + body.vertical_offset)


def silhouette(body: Body, field_width: float, field_height: float,
               settings: CollisionSettings) -> List[Tuple[float, float]]:
    """Corners of the rotated body rectangle in field coordinates, clockwise on screen."""
    center = body_center(body, field_width, field_height)
    hl, hh = settings.half_length, settings.half_height
    local = [(-hl, -hh), (hl, -hh), (hl, hh), (-hl, hh)]
    return [vec_add(center, vec_rotate(p, body.angle)) for p in local]


def find_obstacle(obstacles: Sequence[Obstacle], body_x: float, settings: CollisionSettings) -> Optional[Obstacle]:
    """Broad phase: first obstacle whose widened span contains body_x."""
    m = settings.margin
    for ob in obstacles:
        if ob.x - m < body_x < ob.x + settings.obstacle_width + m:
            return ob
    return None


def polygons_overlap(a: Sequence[Tuple[float, float]], b: Sequence[Tuple[float, float]]) -> bool:
    """
    Separating axis test for two convex quadrilaterals.

    Touching edges do not count as overlap.
    """
    for poly in (a, b):
        n = len(poly)
        for i in range(n):
            x0, y0 = poly[i]
            x1, y1 = poly[(i + 1) % n]
            axis = (y0 - y1, x1 - x0)
            if axis == (0.0, 0.0):
                continue
            amin, amax = project(a, axis)
            bmin, bmax = project(b, axis)
            if amax <= bmin or bmax <= amin:
                return False
    return True


def check_collision(body: Body, obstacles: Sequence[Obstacle], field_width: float,
                    field_height: float, settings: CollisionSettings) -> CollisionResult:
    """
    Test the body against the nearest obstacle and the field edges.

    Lower hits (lower block or ground) are reported before upper hits.
    """
    if not settings.enable:
        return CollisionResult.NONE

    bx, by = body_center(body, field_width, field_height)
    ob = find_obstacle(obstacles, bx, settings)

    if settings.mode == "extent":
        top, bottom = (ob.y1, ob.y2) if ob is not None else (0.0, field_height)
        half = settings.half_length
        if by + half > bottom:
            return CollisionResult.HIT_LOWER
        if by - half < top:
            return CollisionResult.HIT_UPPER
        return CollisionResult.NONE

    poly = silhouette(body, field_width, field_height, settings)
    ys = [p[1] for p in poly]
    w = settings.obstacle_width

    if ob is not None and field_height - ob.y2 > 0:
        if polygons_overlap(poly, rect_corners(ob.x, ob.y2, w, field_height - ob.y2)):
            return CollisionResult.HIT_LOWER
    if max(ys) > field_height:
        return CollisionResult.HIT_LOWER
    if ob is not None and ob.y1 > 0:
        if polygons_overlap(poly, rect_corners(ob.x, 0.0, w, ob.y1)):
            return CollisionResult.HIT_UPPER
    if min(ys) < 0:
        return CollisionResult.HIT_UPPER
    return CollisionResult.NONE


def crossed_obstacles(obstacles: Sequence[Obstacle], body_x: float, step_x: float, obstacle_width: float) -> int:
    """
    Count and mark obstacles whose trailing edge the body passes this tick.

    An obstacle counts when body_x < trailing <= body_x + step_x, before the
    world scrolls by step_x. Each obstacle counts at most once.
    """
    count = 0
    for ob in obstacles:
        if ob.scored:
            continue
        trailing = ob.x + obstacle_width
        if body_x < trailing <= body_x + step_x:
            ob.scored = True
            count += 1
    return count
