#!/usr/bin/env python3
"""
Frame orchestration for Flight Simulator.

A FlightSession owns the body, the obstacle list and the game state and
advances them one tick at a time. Each tick:
1) with an unusable field, the previous scene is returned untouched;
2) the scene for the current state is described (before any movement, so the
   frame shows where the body was when it was tested);
3) outside an attempt nothing else happens;
4) the body is tested for collision; a hit ends the attempt;
5) physics advances the body;
6) obstacles whose trailing edge was passed are scored;
7) the world scrolls, old obstacles are dropped and new ones generated.

The session has no timer and no I/O. Whoever owns it calls tick() at a fixed
rate and forwards intents and resizes.
"""
import logging
import random
from collections import deque
from itertools import islice
from typing import List, Optional

from .collisions import (
    CollisionResult,
    CollisionSettings,
    body_center,
    body_origin,
    check_collision,
    crossed_obstacles,
    silhouette,
)
from .data_models import Body, GamePhase, GameState, Obstacle
from .game_state import GameEvents, GameStateMachine
from .obstacles import ObstacleGenerator, age_obstacles, needs_spawn
from .physics import FlightPhysics
from .scene import (
    Scene,
    SpriteTransform,
    obstacle_preview,
    obstacle_rects,
    trail_bands,
)
from .constants import BACKGROUND_COLOR
from .settings import FlightSettings
from .vector_utils import clamp

logger = logging.getLogger(__name__)

START_HINT = "Tap the screen or press any key to fly"
GAME_OVER_HINT = "Game over"


class FlightSession:
    """
    Owns one simulation: body, obstacles and game state.
    """

    def __init__(self, field_width: float, field_height: float, settings: Optional[FlightSettings] = None,
                 rng: Optional[random.Random] = None, best_score: int = 0, events: Optional[GameEvents] = None):
        self.settings = (settings or FlightSettings()).validated()
        self.rng = rng if rng is not None else random.Random()
        self.field_width = float(field_width)
        self.field_height = float(field_height)
        self.body = Body()
        self.body.reset(self.settings.history_len)
        self.obstacles: List[Obstacle] = []
        self.game = GameStateMachine(self.settings.max_life, best_score=best_score, events=events)
        self.last_collision = CollisionResult.NONE
        self._last_scene: Optional[Scene] = None
        self._build_engine()
        if not self.field_valid:
            logger.warning("Field %sx%s is not usable, ticks are skipped", field_width, field_height)

    def _build_engine(self) -> None:
        self.physics = FlightPhysics(self.settings)
        self.generator = ObstacleGenerator(self.settings, self.rng)
        self.collision_settings = CollisionSettings.from_settings(self.settings)

    @property
    def events(self) -> GameEvents:
        return self.game.events

    @property
    def state(self) -> GameState:
        return self.game.state

    @property
    def field_valid(self) -> bool:
        return self.field_width > 0 and self.field_height > 0

    @property
    def last_scene(self) -> Optional[Scene]:
        return self._last_scene

    # -----------------------
    # Inputs
    # -----------------------

    def set_flying_intent(self, flying: bool) -> None:
        self.body.is_flying = bool(flying)
        if flying and self.game.can_start():
            self.start_round()

    def start_round(self) -> bool:
        if not self.game.start_round():
            return False
        self.body.reset(self.settings.history_len)
        self.obstacles = []
        self.last_collision = CollisionResult.NONE
        return True

    def new_game(self) -> None:
        self.game.new_game()
        self.body.reset(self.settings.history_len)
        self.obstacles = []
        self.last_collision = CollisionResult.NONE

    def resize(self, field_width: float, field_height: float) -> None:
        """
        Accept new field dimensions.

        The body keeps its relative height; obstacles and trail are cleared so no
        obstacle is left with a gap that no longer fits the field.
        """
        if field_width <= 0 or field_height <= 0:
            logger.warning("Ignoring unusable field size %sx%s", field_width, field_height)
            self.field_width, self.field_height = float(field_width), float(field_height)
            return
        old_h = self.field_height
        self.field_width, self.field_height = float(field_width), float(field_height)
        if old_h > 0:
            self.body.vertical_offset *= self.field_height / old_h
        half = self.field_height / 2
        self.body.vertical_offset = clamp(self.body.vertical_offset, -half, half)
        self.body.trail.clear()
        self.obstacles = []
        logger.info("Field resized to %.0fx%.0f", self.field_width, self.field_height)

    def apply_settings(self, settings: FlightSettings) -> None:
        """Swap tunables mid-session; the trail is re-bounded to the new length."""
        self.settings = settings.validated()
        self._build_engine()
        self.game.set_max_life(self.settings.max_life)
        n = self.settings.history_len
        self.body.trail = deque(islice(self.body.trail, n), maxlen=n)

    # -----------------------
    # Tick
    # -----------------------

    def tick(self) -> Optional[Scene]:
        if not self.field_valid:
            return self._last_scene

        scene = self.describe()
        self._last_scene = scene
        if not self.game.is_playing:
            return scene

        w, h = self.field_width, self.field_height
        result = check_collision(self.body, self.obstacles, w, h, self.collision_settings)
        if result.is_hit:
            self.last_collision = result
            self.game.collide(result)
            return scene

        step_x, _ = self.physics.step(self.body, h)

        body_x = body_origin(w, h)[0]
        scored = crossed_obstacles(self.obstacles, body_x, step_x, self.settings.obstacle_width)
        if scored:
            self.game.add_score(scored)

        self.game.add_distance(step_x)
        self._advance_obstacles(step_x)
        return scene

    def _advance_obstacles(self, step_x: float) -> None:
        s = self.settings
        last = self.obstacles[-1] if self.obstacles else None
        spawn = needs_spawn(self.obstacles, self.field_width, s.obstacle_width)
        self.obstacles = age_obstacles(self.obstacles, step_x, s.obstacle_width)
        if spawn:
            self.obstacles.append(
                self.generator.generate(last, self.field_width, self.field_height, self.game.state.score)
            )

    # -----------------------
    # Scene
    # -----------------------

    def describe(self) -> Scene:
        s = self.settings
        w, h = self.field_width, self.field_height
        st = self.game.state
        cx, cy = body_center(self.body, w, h)
        hints = ()
        if st.phase == GamePhase.IDLE:
            hints = (START_HINT,)
        elif st.phase == GamePhase.GAME_OVER:
            hints = (GAME_OVER_HINT,)
        return Scene(
            field_size=(w, h),
            background=BACKGROUND_COLOR,
            trail=tuple(trail_bands(list(self.body.trail), (cx, cy), s.trail_band)),
            body=SpriteTransform(
                x=cx,
                y=cy,
                angle=self.body.angle,
                size=s.body_size,
                silhouette=tuple(silhouette(self.body, w, h, self.collision_settings)),
            ),
            obstacles=tuple(obstacle_rects(self.obstacles, s.obstacle_width, h)),
            preview=obstacle_preview(self.obstacles, w, h, s.preview_width, s.max_spawn_distance),
            life=st.life,
            score=st.score,
            best_score=st.best_score,
            distance=st.distance,
            phase=st.phase,
            hints=hints,
        )
