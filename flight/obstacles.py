#!/usr/bin/env python3
"""
Procedural obstacle generation for Flight Simulator.

Obstacles spawn off the right edge of the field. The distance past the edge
is sampled from a range whose upper end shrinks as the score grows, so gaps
come faster the better the player does. The vertical placement drifts from
the previous obstacle: the farther away the next one spawns, the farther its
gap may move, which keeps consecutive gaps reachable.

Two vertical strategies exist:
- "window": gap height is drawn from [min_space, max_space], the new upper
  edge from a window around the previous upper edge clamped into the field.
  Always produces a valid obstacle in one draw.
- "edges": both edges are drawn independently around the previous edges and
  the pair is rejected when the gap is too small or too large. Rejection is
  bounded by max_resample_attempts; afterwards the "window" construction is
  used.
"""
import logging
import random
from typing import List, Optional, Tuple

from .data_models import Obstacle
from .settings import FlightSettings
from .vector_utils import clamp

logger = logging.getLogger(__name__)


def uniform(rng: random.Random, lo: float, hi: float) -> float:
    """Uniform sample from [lo, hi]; an empty or inverted range yields lo."""
    if hi <= lo:
        return lo
    return rng.uniform(lo, hi)


class ObstacleGenerator:
    """
    Produces the next obstacle from the previous one and the current score.
    """

    def __init__(self, settings: FlightSettings, rng: Optional[random.Random] = None):
        self.settings = settings
        self.rng = rng if rng is not None else random.Random()

    def spawn_distance_range(self, score: int) -> Tuple[float, float]:
        """
        Range of distances past the right edge for a new obstacle.

        The upper bound is max_spawn_distance / (1 + difficulty_rate * score),
        never below min_spawn_distance.
        """
        s = self.settings
        lo = s.min_spawn_distance
        hi = s.max_spawn_distance / (1.0 + s.difficulty_rate * max(0, score))
        return (lo, max(lo, hi))

    def generate(self, previous: Optional[Obstacle], field_width: float, field_height: float, score: int) -> Obstacle:
        lo, hi = self.spawn_distance_range(score)
        gap_distance = uniform(self.rng, lo, hi)
        x = field_width + gap_distance

        if self.settings.obstacle_strategy == "edges":
            edges = self._sample_edges(previous, field_height)
            if edges is not None:
                return Obstacle(x=x, y1=edges[0], y2=edges[1])
            logger.warning(
                "Edge sampling gave up after %d attempts, using windowed placement",
                self.settings.max_resample_attempts,
            )

        y1, y2 = self._sample_window(previous, field_height, gap_distance)
        return Obstacle(x=x, y1=y1, y2=y2)

    def _sample_window(self, previous: Optional[Obstacle], field_height: float, gap_distance: float) -> Tuple[float, float]:
        s = self.settings
        space = uniform(self.rng, s.min_space, s.max_space)
        if field_height < space:
            logger.debug("Field height %.1f is below gap height %.1f, opening the whole field", field_height, space)
            return (0.0, max(0.0, field_height))

        ref = previous.y1 if previous is not None else field_height / 3
        half = s.body_size + s.drift_ratio * gap_distance
        top = field_height - space
        y1 = uniform(self.rng, clamp(ref - half, 0.0, top), clamp(ref + half, 0.0, top))
        return (y1, y1 + space)

    def _sample_edges(self, previous: Optional[Obstacle], field_height: float) -> Optional[Tuple[float, float]]:
        s = self.settings
        last_y1 = previous.y1 if previous is not None else field_height / 3
        last_y2 = previous.y2 if previous is not None else field_height * 2 / 3
        low_band, high_band = s.min_space, s.max_space
        for _ in range(s.max_resample_attempts):
            y1 = uniform(self.rng, max(0.0, last_y1 - s.edge_window), min(field_height, last_y1 + s.edge_window))
            y2 = uniform(self.rng, max(0.0, last_y2 - s.edge_window), min(field_height, last_y2 + s.edge_window))
            if low_band <= y2 - y1 <= high_band and y2 <= field_height:
                return (y1, y2)
        return None


def needs_spawn(obstacles: List[Obstacle], field_width: float, obstacle_width: float) -> bool:
    """True when the rightmost obstacle has scrolled within spawn range of the right edge."""
    if not obstacles:
        return True
    return obstacles[-1].x < field_width - 2 * obstacle_width


def age_obstacles(obstacles: List[Obstacle], step_x: float, obstacle_width: float) -> List[Obstacle]:
    """Scroll obstacles left by step_x and drop the ones fully past the left edge."""
    kept: List[Obstacle] = []
    for ob in obstacles:
        ob.x -= step_x
        if ob.x > -obstacle_width:
            kept.append(ob)
    return kept
