#!/usr/bin/env python3
"""
Shared constants for Flight Simulator (field units are canvas pixels).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. FlightSettings takes its defaults from here;
presets override them.
"""

# Body
BODY_SIZE = 120.0  # sprite edge length
CHECK_RANGE = 2.5  # collision half-extent is BODY_SIZE / CHECK_RANGE
SILHOUETTE_RATIO = 1.0  # across-heading half-height relative to along-heading

# Obstacles
OBSTACLE_WIDTH = 100.0
MIN_SPACE = 3.0 * BODY_SIZE  # smallest gap height
MAX_SPACE_FACTOR = 1.5  # largest gap height is MIN_SPACE * MAX_SPACE_FACTOR
MAX_SPAWN_DISTANCE = 5.0 * OBSTACLE_WIDTH
MIN_SPAWN_DISTANCE = 0.5 * OBSTACLE_WIDTH
DIFFICULTY_RATE = 0.1  # per point of score
DRIFT_RATIO = 1.0  # vertical window growth per unit of spawn distance
EDGE_WINDOW = 5.0 * BODY_SIZE  # legacy edge sampling window half-width
MAX_RESAMPLE_ATTEMPTS = 64

# Physics
SPEED = 15.0  # per tick, constant speed model
SPEED_MIN = 10.0  # altitude speed model, top of field
SPEED_MAX = 20.0  # altitude speed model, bottom of field
ROTATE_UP = -0.05  # radians per flying tick
ROTATE_DOWN_D = 1.0  # glide bias added to the vertical step
HISTORY_LEN = 120

# Game
MAX_LIFE = 10
TICK_INTERVAL_MS = 33

# Rendering (scene description)
BACKGROUND_COLOR = (224, 224, 224)
OBSTACLE_COLOR = (80, 80, 80)
TRAIL_COLOR = (255, 255, 255)
TRAIL_BAND = 3  # points per trail color band
PREVIEW_WIDTH = OBSTACLE_WIDTH / 4

# Viewport
VIEW_WIDTH = 800
VIEW_HEIGHT = 600
FIELD_SCALE = 2.0  # field units per window pixel
HUD_COLOR = (40, 40, 40)
SILHOUETTE_COLOR = (240, 180, 40)
