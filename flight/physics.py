#!/usr/bin/env python3
"""
Core Physics Engine for Flight Simulator

Responsibilities
- Compute the per-tick speed, either constant or altitude dependent.
- Advance the body's heading and vertical offset by one fixed tick.
- Maintain the trail history used for the fading line behind the body.

Turning model
- While flying, the heading is integrated: angle += rotate_up every tick, so the
  nose pitches up smoothly and keeps turning (the body can loop).
- While gliding, the heading is recomputed from the step just taken:
  angle = atan2(step_y + rotate_down_d, step_x). The constant bias pulls the
  nose toward the ground and the heading snaps to the instantaneous fall
  direction instead of accumulating an angular rate.
- Both branches use the step vector computed from the heading at the start of
  the tick.

Speed models
- "constant": v = speed.
- "altitude": v = sqrt(v_min^2 + f * (v_max^2 - v_min^2)) where f is the body's
  screen height fraction (0 at the top, 1 at the bottom). Lower means faster, a
  crude exchange of height for kinetic energy.

Threading
- This module is pure compute over a Body it is handed. The session that owns
  the body decides when to call it.
"""

import math
from typing import Tuple

from .data_models import Body
from .settings import FlightSettings
from .vector_utils import clamp


class FlightPhysics:
    """
    Fixed-tick integrator for the turning/gliding flight model.
    """

    def __init__(self, settings: FlightSettings):
        self.settings = settings

    def speed(self, body: Body, field_height: float) -> float:
        """
        Speed for this tick.

        Args:
            body: The body whose vertical position selects the speed
            field_height: Field height; non-positive heights yield speed_min

        Returns:
            Distance travelled along the heading this tick
        """
        s = self.settings
        if s.speed_model != "altitude":
            return s.speed
        if field_height <= 0:
            return s.speed_min
        screen_y = field_height / 2 + body.vertical_offset
        frac = clamp(screen_y / field_height, 0.0, 1.0)
        return math.sqrt(s.speed_min ** 2 + frac * (s.speed_max ** 2 - s.speed_min ** 2))

    def step_vector(self, angle: float, v: float) -> Tuple[float, float]:
        return (v * math.cos(angle), v * math.sin(angle))

    def next_angle(self, body: Body, step: Tuple[float, float]) -> float:
        if body.is_flying:
            return body.angle + self.settings.rotate_up
        return math.atan2(step[1] + self.settings.rotate_down_d, step[0])

    def step(self, body: Body, field_height: float) -> Tuple[float, float]:
        """
        Advance the body by one tick (modified in place).

        Returns:
            The (x, y) step vector; the caller scrolls the world by -x.
        """
        v = self.speed(body, field_height)
        step = self.step_vector(body.angle, v)
        body.vertical_offset += step[1]
        body.angle = self.next_angle(body, step)
        body.push_trail(step)
        return step
