#!/usr/bin/env python3
"""
Tunable settings for a flight session.

Every literal the engine uses lives here as a field so presets can retune the
game without code changes. Defaults come from constants.py.
"""
import logging
import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict

from . import constants as C

logger = logging.getLogger(__name__)

SPEED_MODELS = ("constant", "altitude")
OBSTACLE_STRATEGIES = ("window", "edges")
COLLISION_MODES = ("silhouette", "extent")


@dataclass(frozen=True)
class FlightSettings:
    body_size: float = C.BODY_SIZE
    check_range: float = C.CHECK_RANGE
    silhouette_ratio: float = C.SILHOUETTE_RATIO
    collision_mode: str = "silhouette"

    obstacle_width: float = C.OBSTACLE_WIDTH
    min_space: float = C.MIN_SPACE
    max_space_factor: float = C.MAX_SPACE_FACTOR
    max_spawn_distance: float = C.MAX_SPAWN_DISTANCE
    min_spawn_distance: float = C.MIN_SPAWN_DISTANCE
    difficulty_rate: float = C.DIFFICULTY_RATE
    drift_ratio: float = C.DRIFT_RATIO
    edge_window: float = C.EDGE_WINDOW
    obstacle_strategy: str = "window"
    max_resample_attempts: int = C.MAX_RESAMPLE_ATTEMPTS

    speed_model: str = "constant"
    speed: float = C.SPEED
    speed_min: float = C.SPEED_MIN
    speed_max: float = C.SPEED_MAX
    rotate_up: float = C.ROTATE_UP
    rotate_down_d: float = C.ROTATE_DOWN_D
    history_len: int = C.HISTORY_LEN

    max_life: int = C.MAX_LIFE
    tick_interval_ms: int = C.TICK_INTERVAL_MS

    trail_band: int = C.TRAIL_BAND
    preview_width: float = C.PREVIEW_WIDTH

    @property
    def max_space(self) -> float:
        return self.min_space * self.max_space_factor

    @property
    def check_half(self) -> float:
        """Half-extent of the body used by the collision test."""
        return self.body_size / self.check_range

    def with_overrides(self, **overrides: Any) -> "FlightSettings":
        known = {f.name for f in fields(self)}
        accepted = {k: v for k, v in overrides.items() if k in known}
        for k in overrides.keys() - known:
            logger.warning("Ignoring unknown setting %r", k)
        return replace(self, **accepted).validated()

    def validated(self) -> "FlightSettings":
        """
        Return a copy with out-of-range values corrected.

        Nothing here raises: every correction is logged and the nearest usable
        value is substituted so a bad preset still yields a playable game.
        """
        fixes: Dict[str, Any] = {}

        def fix(name: str, value: Any) -> None:
            logger.warning("Setting %s=%r is out of range, using %r", name, getattr(self, name), value)
            fixes[name] = value

        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, float) and not math.isfinite(value):
                fix(f.name, f.default)
        if fixes:
            return replace(self, **fixes).validated()

        for name in ("body_size", "obstacle_width", "check_range", "min_space"):
            if getattr(self, name) <= 0:
                fix(name, getattr(C, name.upper()))
        if self.silhouette_ratio <= 0:
            fix("silhouette_ratio", C.SILHOUETTE_RATIO)
        if self.max_space_factor < 1.0:
            fix("max_space_factor", 1.0)
        if self.min_spawn_distance < 0:
            fix("min_spawn_distance", 0.0)
        if self.max_spawn_distance < self.min_spawn_distance:
            fix("max_spawn_distance", fixes.get("min_spawn_distance", self.min_spawn_distance))
        if self.difficulty_rate < 0:
            fix("difficulty_rate", 0.0)
        if self.drift_ratio < 0:
            fix("drift_ratio", 0.0)
        if self.rotate_up >= 0:
            fix("rotate_up", C.ROTATE_UP)
        if self.max_resample_attempts < 1:
            fix("max_resample_attempts", 1)
        if self.history_len < 1:
            fix("history_len", 1)
        if self.trail_band < 1:
            fix("trail_band", 1)
        if self.max_life < 1:
            fix("max_life", 1)
        if self.tick_interval_ms < 1:
            fix("tick_interval_ms", C.TICK_INTERVAL_MS)
        if self.speed_min < 0:
            fix("speed_min", 0.0)
        if self.speed_max < fixes.get("speed_min", self.speed_min):
            fix("speed_max", fixes.get("speed_min", self.speed_min))
        if self.speed_model not in SPEED_MODELS:
            fix("speed_model", "constant")
        if self.obstacle_strategy not in OBSTACLE_STRATEGIES:
            fix("obstacle_strategy", "window")
        if self.collision_mode not in COLLISION_MODES:
            fix("collision_mode", "silhouette")

        if not fixes:
            return self
        return replace(self, **fixes)
