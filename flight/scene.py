#!/usr/bin/env python3
"""
Renderable scene description.

The engine never draws. Each tick it hands the renderer a Scene: plain values
in field coordinates listing what to fill, stroke and blit, in drawing order.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .constants import BACKGROUND_COLOR, OBSTACLE_COLOR, TRAIL_COLOR
from .data_models import GamePhase, Obstacle
from .vector_utils import clamp, lerp_color

Color = Tuple[int, int, int]
Point = Tuple[float, float]


@dataclass(frozen=True)
class RectCommand:
    x: float
    y: float
    w: float
    h: float
    color: Color


@dataclass(frozen=True)
class TrailBand:
    """A run of trail points stroked in one color; bands share their end points."""
    points: Tuple[Point, ...]
    color: Color


@dataclass(frozen=True)
class SpriteTransform:
    x: float
    y: float
    angle: float
    size: float
    silhouette: Tuple[Point, ...] = ()


@dataclass(frozen=True)
class ObstaclePreview:
    upper: RectCommand
    lower: RectCommand
    distance: float
    intensity: float


@dataclass(frozen=True)
class Scene:
    field_size: Tuple[float, float]
    background: Color
    trail: Tuple[TrailBand, ...]
    body: SpriteTransform
    obstacles: Tuple[RectCommand, ...]
    preview: Optional[ObstaclePreview]
    life: int
    score: int
    best_score: int
    distance: float
    phase: GamePhase
    hints: Tuple[str, ...] = field(default_factory=tuple)


def trail_bands(points: Sequence[Point], origin: Point, band: int, base: Color = TRAIL_COLOR) -> List[TrailBand]:
    """
    Split the trail into bands of `band` points, each one gray level darker.

    The first band starts at the body; every later band also includes the last
    point of the band before it so the polyline has no holes.
    """
    ox, oy = origin
    absolute = [(ox + x, oy + y) for x, y in points]
    bands: List[TrailBand] = []
    for k, start in enumerate(range(0, len(absolute), band)):
        chunk = absolute[max(0, start - 1):start + band]
        color = tuple(int(clamp(c - k, 0, 255)) for c in base)
        bands.append(TrailBand(points=tuple(chunk), color=color))
    return bands


def obstacle_rects(obstacles: Sequence[Obstacle], obstacle_width: float, field_height: float,
                   color: Color = OBSTACLE_COLOR) -> List[RectCommand]:
    rects: List[RectCommand] = []
    for ob in obstacles:
        rects.append(RectCommand(ob.x, 0.0, obstacle_width, ob.y1, color))
        rects.append(RectCommand(ob.x, ob.y2, obstacle_width, field_height - ob.y2, color))
    return rects


def obstacle_preview(obstacles: Sequence[Obstacle], field_width: float, field_height: float,
                     preview_width: float, horizon: float) -> Optional[ObstaclePreview]:
    """
    Warning for the next obstacle still beyond the right edge.

    Intensity rises from 0 at `horizon` past the edge to 1 at the edge; the
    color fades from the background toward the obstacle color accordingly.
    """
    incoming = next((ob for ob in obstacles if ob.x > field_width), None)
    if incoming is None:
        return None
    distance = incoming.x - field_width
    intensity = clamp(1.0 - distance / horizon, 0.0, 1.0) if horizon > 0 else 1.0
    color = lerp_color(BACKGROUND_COLOR, OBSTACLE_COLOR, intensity)
    x = field_width - preview_width
    return ObstaclePreview(
        upper=RectCommand(x, 0.0, preview_width, incoming.y1, color),
        lower=RectCommand(x, incoming.y2, preview_width, field_height - incoming.y2, color),
        distance=distance,
        intensity=intensity,
    )
