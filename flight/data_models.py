#!/usr/bin/env python3
"""
Data models for Flight Simulator.

This module defines the Body, Obstacle and GameState dataclasses shared between
physics, collisions, the state machine and the scene description.

Units and usage
- Field coordinates: x grows to the right, y grows downward, origin at the top-left.
- The body never moves horizontally on screen; it sits at field_width / 3 and the
  obstacles scroll past it. vertical_offset is measured from field_height / 2.
- trail stores offsets relative to the body, most recent first; it is mutated by
  the physics step only.
- All instances are owned by a single FlightSession.
"""
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Tuple

from .constants import HISTORY_LEN, MAX_LIFE


@dataclass
class Body:
    """
    The controllable flying body.

    Fields:
    - angle: Heading in radians (0 = flying right, negative = nose up)
    - vertical_offset: Signed distance from the horizontal reference line
    - is_flying: Current intent; True turns the nose up every tick
    - trail: Deque of recent offsets relative to the body, newest first
    """
    angle: float = 0.0
    vertical_offset: float = 0.0
    is_flying: bool = False
    trail: Deque[Tuple[float, float]] = field(default_factory=lambda: deque(maxlen=HISTORY_LEN))

    def reset(self, history_len: int = HISTORY_LEN) -> None:
        """Return to the start-of-attempt pose. The intent is left as is."""
        self.angle = 0.0
        self.vertical_offset = 0.0
        self.trail = deque(maxlen=history_len)

    def push_trail(self, step: Tuple[float, float]) -> None:
        """Shift existing points by -step and prepend the current position."""
        dx, dy = step
        shifted = deque(((x - dx, y - dy) for x, y in self.trail), maxlen=self.trail.maxlen)
        shifted.appendleft((0.0, 0.0))
        self.trail = shifted


@dataclass
class Obstacle:
    """
    An obstacle pair. The upper block spans [0, y1], the lower block spans
    [y2, field_height]; the gap is the open band between them.
    """
    x: float
    y1: float
    y2: float
    scored: bool = False

    @property
    def space(self) -> float:
        return self.y2 - self.y1


class GamePhase(str, Enum):
    IDLE = "idle"
    FLYING = "flying"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    life: int = MAX_LIFE
    score: int = 0
    best_score: int = 0
    distance: float = 0.0
    rounds: int = 0
    phase: GamePhase = GamePhase.IDLE

    @property
    def is_playing(self) -> bool:
        return self.phase == GamePhase.FLYING
