#!/usr/bin/env python3
"""
Life, score and round state for Flight Simulator.

States
- IDLE: between attempts, waiting for a start intent
- FLYING: an attempt is in progress
- GAME_OVER: no life left; only new_game() leaves this state

Collaborators outside the engine (audio, best-score persistence, fullscreen
requests) subscribe to GameEvents instead of polling the state.
"""
import logging
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, DefaultDict, List, Optional

from .data_models import GamePhase, GameState

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    ROUND_STARTED = "round_started"
    COLLISION = "collision"
    GAME_OVER = "game_over"
    NEW_BEST_SCORE = "new_best_score"


class GameEvents:
    """Listener registry for state changes."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[EventType, List[Callable[..., Any]]] = defaultdict(list)

    def subscribe(self, event: EventType, callback: Callable[..., Any]) -> None:
        self._listeners[event].append(callback)

    def unsubscribe(self, event: EventType, callback: Callable[..., Any]) -> None:
        try:
            self._listeners[event].remove(callback)
        except ValueError:
            pass

    def emit(self, event: EventType, *args: Any) -> None:
        for cb in list(self._listeners[event]):
            try:
                cb(*args)
            except Exception:
                # A broken listener must not stop the simulation.
                logger.exception("Listener for %s failed", event.value)


class GameStateMachine:
    def __init__(self, max_life: int, best_score: int = 0, events: Optional[GameEvents] = None):
        self.max_life = max_life
        self.events = events if events is not None else GameEvents()
        self.state = GameState(life=max_life, best_score=best_score)

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    def can_start(self) -> bool:
        return self.state.phase == GamePhase.IDLE and self.state.life > 0

    def start_round(self) -> bool:
        """Begin a new attempt. Returns False when no attempt is allowed."""
        if not self.can_start():
            return False
        st = self.state
        st.score = 0
        st.distance = 0.0
        st.rounds += 1
        st.phase = GamePhase.FLYING
        logger.info("Round %d started, life %d", st.rounds, st.life)
        self.events.emit(EventType.ROUND_STARTED)
        return True

    def collide(self, result: Any = None) -> bool:
        """
        End the current attempt after a collision.

        Only has an effect while flying, so a second report for the same
        collision cannot take another life. Returns whether life was taken.
        """
        st = self.state
        if st.phase != GamePhase.FLYING:
            return False
        st.life -= 1
        st.phase = GamePhase.IDLE
        logger.info("Collision (%s) at score %d, life left %d", getattr(result, "value", result), st.score, st.life)
        self.events.emit(EventType.COLLISION, st.life)
        if st.life <= 0:
            st.phase = GamePhase.GAME_OVER
            logger.info("Game over after %d rounds, best score %d", st.rounds, st.best_score)
            self.events.emit(EventType.GAME_OVER)
        return True

    def add_score(self, points: int = 1) -> None:
        if points <= 0:
            return
        st = self.state
        st.score += points
        if st.score > st.best_score:
            st.best_score = st.score
            logger.debug("New best score %d", st.score)
            self.events.emit(EventType.NEW_BEST_SCORE, st.score)

    def add_distance(self, dx: float) -> None:
        self.state.distance += dx

    def set_max_life(self, max_life: int) -> None:
        """Lower the remaining life along with the maximum; a raise waits for the next game."""
        self.max_life = max_life
        if self.state.life > max_life:
            logger.info("Life capped at %d", max_life)
            self.state.life = max_life

    def new_game(self) -> None:
        """Restore full life from any state. The best score is kept."""
        best = self.state.best_score
        self.state = GameState(life=self.max_life, best_score=best)
        logger.info("New game, life %d", self.max_life)
