#!/usr/bin/env python3
"""
Best score persistence.

The engine only reports new best scores; this store keeps them between runs
as {"best_score": n} in a JSON file. Scores reported during a tick are only
recorded; the owner writes them with flush() outside the tick.
"""
import json
import logging
import os
from typing import Optional

from .game_state import EventType, GameEvents
from .utils import try_int

logger = logging.getLogger(__name__)

DEFAULT_SCORE_FILE = os.path.join(os.path.expanduser("~"), ".flight_sim_best.json")


class ScoreStore:
    def __init__(self, path: str = DEFAULT_SCORE_FILE):
        self.path = path
        self.pending: Optional[int] = None

    def load(self) -> int:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as e:
            logger.warning("Could not read best score from %s: %s", self.path, e)
            return 0
        best: Optional[int] = try_int(data.get("best_score")) if isinstance(data, dict) else None
        return max(0, best) if best is not None else 0

    def save(self, score: int) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"best_score": int(score)}, f)
        except OSError as e:
            logger.warning("Could not save best score to %s: %s", self.path, e)

    def record(self, score: int) -> None:
        self.pending = score

    def flush(self) -> bool:
        """Write the last recorded score, if any. Returns True when a write was attempted."""
        score, self.pending = self.pending, None
        if score is None:
            return False
        self.save(score)
        return True

    def attach(self, events: GameEvents) -> None:
        """Record every new best score; nothing is written until flush()."""
        events.subscribe(EventType.NEW_BEST_SCORE, self.record)
