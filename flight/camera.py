#!/usr/bin/env python3
"""
Viewport utilities for field-to-window transforms.
"""
from typing import Tuple
from .constants import (
    FIELD_SCALE,
    VIEW_WIDTH,
    VIEW_HEIGHT,
)
from .vector_utils import clamp


class FieldViewport:
    """
    Maps field coordinates to window pixels.

    The field is laid out at `scale` units per window pixel (the simulation runs
    on a canvas larger than the window) and shown uniformly shrunk.
    """

    def __init__(self, scale=FIELD_SCALE):
        self.scale = clamp(float(scale), 0.1, 10.0)
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    @property
    def field_size(self) -> Tuple[float, float]:
        return (self.viewport_size[0] * self.scale, self.viewport_size[1] * self.scale)

    def field_to_screen(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        return (int(pos[0] / self.scale), int(pos[1] / self.scale))

    def length_to_screen(self, length: float) -> int:
        return max(1, int(length / self.scale))

    def rect_to_screen(self, x: float, y: float, w: float, h: float) -> Tuple[int, int, int, int]:
        sx, sy = self.field_to_screen((x, y))
        return (sx, sy, int(round(w / self.scale)), int(round(h / self.scale)))
