#!/usr/bin/env python3
"""
Flight Simulator application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame thread (viewport, input, fixed-rate ticking)
  and the Dear PyGui control panel (running on the main thread).
- Maintains a shared FlightController that owns the FlightSession; all access is
  guarded by a re-entrant lock for thread-safety.
- Wires the engine's events to the collaborators that live outside it: the best
  score store and the status line of the panel. New best scores are written
  by the panel sync and on exit, never inside a tick.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (key and
  pointer down/up become the flying intent), ticking the session at a fixed
  interval, and drawing the returned scene. It locks the controller around short
  critical sections.
- The UI class runs in the main thread via Dear PyGui. It refreshes readouts on a
  periodic frame callback and retunes the session through lock-protected
  controller methods.

Units and conventions
- The simulation runs on a field FIELD_SCALE times larger than the window; the
  FieldViewport shrinks it for display.
- Colors are RGB tuples in 0..255.

Running
1) Install dependencies: `pip install pygame dearpygui`
2) Run this module: `python flight_sim.py [--preset glide.json] [--no-panel]`

Controls
- Hold any key, mouse button or touch to fly (the nose pitches up); release to glide.
- Escape closes the viewport.
"""

import argparse
import logging
import math
import sys
import threading
from typing import Optional

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from flight.camera import FieldViewport
from flight.constants import FIELD_SCALE, HUD_COLOR, SILHOUETTE_COLOR, VIEW_HEIGHT, VIEW_WIDTH
from flight.data_models import GamePhase
from flight.game_state import EventType
from flight.presets_loader import list_presets, load_preset
from flight.scene import Scene
from flight.score_store import DEFAULT_SCORE_FILE, ScoreStore
from flight.session import FlightSession
from flight.settings import COLLISION_MODES, SPEED_MODELS, FlightSettings

logger = logging.getLogger("flight_sim")


def setup_logging(level: str = "info") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

# ============================================================
# Flight Controller (Shared State)
# ============================================================

class FlightController:
    """
    Shared state between UI thread (DearPyGui) and rendering thread (Pygame).
    Includes thread-safe operations guarded by a lock.
    """
    def __init__(self, settings: FlightSettings, field_size=(VIEW_WIDTH * FIELD_SCALE, VIEW_HEIGHT * FIELD_SCALE),
                 store: Optional[ScoreStore] = None):
        self.lock = threading.RLock()
        self.running = True  # app running
        self.store = store
        best = store.load() if store is not None else 0
        self.session = FlightSession(field_size[0], field_size[1], settings, best_score=best)
        self.preset_name = "Default"
        self.last_status_msg: Optional[str] = None

        events = self.session.events
        if store is not None:
            store.attach(events)
        events.subscribe(EventType.ROUND_STARTED, lambda: self._status("Flying"))
        events.subscribe(EventType.COLLISION, lambda life: self._status(f"Crashed! Lives left: {life}"))
        events.subscribe(EventType.GAME_OVER, lambda: self._status("Game over"))
        events.subscribe(EventType.NEW_BEST_SCORE, lambda score: self._status(f"New best score: {score}"))

    def _status(self, msg: str):
        with self.lock:
            self.last_status_msg = msg

    @property
    def settings(self) -> FlightSettings:
        with self.lock:
            return self.session.settings

    def tick(self) -> Optional[Scene]:
        with self.lock:
            return self.session.tick()

    def set_flying_intent(self, flying: bool):
        with self.lock:
            self.session.set_flying_intent(flying)

    def resize(self, w: float, h: float):
        with self.lock:
            self.session.resize(w, h)

    def new_game(self):
        with self.lock:
            self.session.new_game()
        self._status("New game")

    def apply_settings(self, **overrides):
        with self.lock:
            self.session.apply_settings(self.session.settings.with_overrides(**overrides))

    def load_preset(self, file_name: str) -> str:
        settings, display = load_preset(file_name)
        with self.lock:
            self.session.apply_settings(settings)
            self.preset_name = display
        logger.info("Loaded preset %s", display)
        return display

    def save_best_score(self):
        """Write a pending best score. Called off the tick path, without the lock held."""
        if self.store is not None:
            self.store.flush()

    def snapshot(self) -> dict:
        with self.lock:
            st = self.session.state
            return {
                "phase": st.phase,
                "life": st.life,
                "score": st.score,
                "best_score": st.best_score,
                "distance": st.distance,
                "rounds": st.rounds,
                "preset": self.preset_name,
            }

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: ticks the session at a fixed rate and draws the scene it returns.
    Turns key, mouse and touch presses into the flying intent.
    """
    def __init__(self, sim: FlightController, sprite_path: Optional[str] = None, field_scale: float = FIELD_SCALE):
        super().__init__(daemon=True)
        self.sim = sim
        self.viewport = FieldViewport(field_scale)
        self.sprite_path = sprite_path
        self.sprite = None
        self.surface = None
        self.clock = None
        self.running = True

    def _load_sprite(self):
        if not self.sprite_path:
            return
        try:
            self.sprite = pygame.image.load(self.sprite_path).convert_alpha()
        except (pygame.error, FileNotFoundError) as e:
            logger.warning("Could not load sprite %s: %s", self.sprite_path, e)
            self.sprite = None

    def run(self):
        pygame.init()
        pygame.display.set_caption("Flight Simulator - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.viewport.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.sim.resize(*self.viewport.field_size)
        self.clock = pygame.time.Clock()
        self._load_sprite()

        while self.running and self.sim.running:
            self.handle_events()
            scene = self.sim.tick()
            if scene is not None:
                self.draw(scene)
            # Fixed tick rate; late frames are simply late
            self.clock.tick(1000.0 / self.sim.settings.tick_interval_ms)

        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.viewport.set_viewport_size(event.w, event.h)
                self.sim.resize(*self.viewport.field_size)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.sim.running = False
                    self.running = False
                else:
                    self.sim.set_flying_intent(True)

            elif event.type in (pygame.MOUSEBUTTONDOWN, pygame.FINGERDOWN):
                self.sim.set_flying_intent(True)

            elif event.type in (pygame.KEYUP, pygame.MOUSEBUTTONUP, pygame.FINGERUP):
                self.sim.set_flying_intent(False)

    def draw_trail(self, surf, scene: Scene):
        width = max(1, self.viewport.length_to_screen(3))
        for band in scene.trail:
            pts = [_safe_point(self.viewport.field_to_screen(p)) for p in band.points]
            pts = [p for p in pts if p]
            if len(pts) > 1:
                try:
                    pygame.draw.lines(surf, band.color, False, pts, width)
                except (TypeError, ValueError):
                    pass

    def draw_body(self, surf, scene: Scene):
        body = scene.body
        center = _safe_point(self.viewport.field_to_screen((body.x, body.y)))
        if center is None:
            return
        if self.sprite is not None:
            size = self.viewport.length_to_screen(body.size)
            img = pygame.transform.smoothscale(self.sprite, (size, size))
            img = pygame.transform.rotate(img, -math.degrees(body.angle))
            surf.blit(img, img.get_rect(center=center))
            return
        pts = [_safe_point(self.viewport.field_to_screen(p)) for p in body.silhouette]
        if len(pts) > 2 and all(pts):
            try:
                gfxdraw.filled_polygon(surf, pts, SILHOUETTE_COLOR)
                gfxdraw.aapolygon(surf, pts, (0, 0, 0))
            except (TypeError, ValueError):
                pass
        # Heading tick so the rotation is visible without a sprite
        nose = (body.x + math.cos(body.angle) * body.size / 2, body.y + math.sin(body.angle) * body.size / 2)
        nose_s = _safe_point(self.viewport.field_to_screen(nose))
        if nose_s:
            pygame.draw.line(surf, (0, 0, 0), center, nose_s, 2)

    def draw(self, scene: Scene):
        surf = self.surface
        surf.fill(scene.background)

        self.draw_trail(surf, scene)
        self.draw_body(surf, scene)

        for r in scene.obstacles:
            if r.h > 0:
                pygame.draw.rect(surf, r.color, pygame.Rect(*self.viewport.rect_to_screen(r.x, r.y, r.w, r.h)))

        if scene.preview is not None:
            for r in (scene.preview.upper, scene.preview.lower):
                if r.h > 0:
                    pygame.draw.rect(surf, r.color, pygame.Rect(*self.viewport.rect_to_screen(r.x, r.y, r.w, r.h)))

        # HUD text
        w, h = self.viewport.viewport_size
        draw_text(surf, f"Life: {scene.life}", 10, 10, HUD_COLOR)
        draw_text(surf, f"Score: {scene.score:0>9}", 10, 30, HUD_COLOR)
        draw_text(surf, f"Best: {scene.best_score}", 10, 50, HUD_COLOR)
        if scene.preview is not None:
            draw_text(surf, f"Next: {scene.preview.distance:.0f}", w - 120, 10, HUD_COLOR)
        for i, hint in enumerate(scene.hints):
            draw_text(surf, hint, w // 2 - 4 * len(hint), h // 2 + 20 * i, HUD_COLOR)

        pygame.display.flip()

_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        try:
            _cached_font = pygame.font.SysFont("consolas", 16)
        except (pygame.error, OSError):
            _cached_font = pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

SAFE_COORD_LIMIT = 30000

def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: game readouts, presets, tuning sliders and a New game button.
    """
    def __init__(self, sim: FlightController):
        self.sim = sim

        self.phase_id = None
        self.life_id = None
        self.score_id = None
        self.best_id = None
        self.distance_id = None
        self.status_msg_id = None

        self._build_ui()

        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Flight Simulator - Controls', width=460, height=520)

        s = self.sim.settings
        with dpg.window(label="Controls", width=440, height=500, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Preset:")
                self._preset_map = {display: fn for fn, display in list_presets()}
                preset_items = list(self._preset_map.keys()) or ["(no presets found)"]
                dpg.add_combo(preset_items, default_value=preset_items[0], width=220, tag="preset_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_preset(dpg.get_value("preset_combo")))

            dpg.add_separator()

            dpg.add_text("Game")
            self.phase_id = dpg.add_text("Phase: ")
            with dpg.group(horizontal=True):
                self.life_id = dpg.add_text("Life: ")
                self.score_id = dpg.add_text("Score: ")
                self.best_id = dpg.add_text("Best: ")
            self.distance_id = dpg.add_text("Distance: ")
            dpg.add_button(label="New game", callback=self._on_new_game)
            self.status_msg_id = dpg.add_text("")

            dpg.add_separator()

            dpg.add_text("Flight")
            dpg.add_combo(list(SPEED_MODELS), label="Speed model", default_value=s.speed_model, width=150,
                          callback=lambda s_, a, u: self.sim.apply_settings(speed_model=a), tag="speed_model_combo")
            dpg.add_slider_float(label="Speed", min_value=1.0, max_value=40.0, default_value=s.speed, width=220,
                                 callback=lambda s_, a, u: self.sim.apply_settings(speed=float(a)), tag="speed_slider")
            dpg.add_slider_float(label="Rotate up", min_value=-0.2, max_value=-0.005, default_value=s.rotate_up, width=220,
                                 callback=lambda s_, a, u: self.sim.apply_settings(rotate_up=float(a)), tag="rotate_up_slider")
            dpg.add_slider_float(label="Glide bias", min_value=0.0, max_value=5.0, default_value=s.rotate_down_d, width=220,
                                 callback=lambda s_, a, u: self.sim.apply_settings(rotate_down_d=float(a)), tag="glide_slider")

            dpg.add_text("Obstacles")
            dpg.add_slider_float(label="Difficulty rate", min_value=0.0, max_value=1.0, default_value=s.difficulty_rate,
                                 width=220, callback=lambda s_, a, u: self.sim.apply_settings(difficulty_rate=float(a)),
                                 tag="difficulty_slider")
            dpg.add_combo(list(COLLISION_MODES), label="Collision test", default_value=s.collision_mode, width=150,
                          callback=lambda s_, a, u: self.sim.apply_settings(collision_mode=a), tag="collision_mode_combo")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _on_new_game(self):
        self.sim.new_game()

    def load_preset(self, display: str):
        fn = self._preset_map.get(display)
        if fn is None:
            self._set_status(f"Unknown preset: {display}", color=(255, 120, 120))
            return
        self.sim.load_preset(fn)
        s = self.sim.settings
        dpg.set_value("speed_model_combo", s.speed_model)
        dpg.set_value("speed_slider", s.speed)
        dpg.set_value("rotate_up_slider", s.rotate_up)
        dpg.set_value("glide_slider", s.rotate_down_d)
        dpg.set_value("difficulty_slider", s.difficulty_rate)
        dpg.set_value("collision_mode_combo", s.collision_mode)
        self._set_status(f"Loaded preset: {display}")

    def _sync_ui_with_sim(self):
        """
        Periodic UI update to reflect the game state and any new status message.
        """
        if not self.sim.running:
            # Viewport was closed
            dpg.stop_dearpygui()
            return
        snap = self.sim.snapshot()
        phase = snap["phase"]
        dpg.set_value(self.phase_id, f"Phase: {phase.value}  (round {snap['rounds']}, preset {snap['preset']})")
        dpg.set_value(self.life_id, f"Life: {snap['life']}")
        dpg.set_value(self.score_id, f"Score: {snap['score']}")
        dpg.set_value(self.best_id, f"Best: {snap['best_score']}")
        dpg.set_value(self.distance_id, f"Distance: {snap['distance']:.0f}")

        with self.sim.lock:
            msg = self.sim.last_status_msg
            self.sim.last_status_msg = None
        if msg:
            color = (255, 120, 120) if phase == GamePhase.GAME_OVER else (180, 220, 180)
            self._set_status(msg, color)
        self.sim.save_best_score()
        # Reschedule next sync
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Side-scrolling flight simulator.")
    parser.add_argument("--preset", help="Preset JSON file name (in presets/) or path.")
    parser.add_argument("--log-level", default="info", help="debug, info, warning or error.")
    parser.add_argument("--best-score-file", default=DEFAULT_SCORE_FILE, help="Where the best score is kept.")
    parser.add_argument("--sprite", help="Optional image drawn for the body instead of its silhouette.")
    parser.add_argument("--no-panel", action="store_true", help="Run the viewport only, without the control panel.")
    return parser.parse_args(argv)

def main(argv=None):
    args = _parse_args(argv)
    setup_logging(args.log_level)

    settings = FlightSettings()
    preset_name = "Default"
    if args.preset:
        settings, preset_name = load_preset(args.preset, settings)

    sim = FlightController(settings, store=ScoreStore(args.best_score_file))
    sim.preset_name = preset_name

    renderer = PygameRenderer(sim, sprite_path=args.sprite)

    if args.no_panel:
        # Same loop, on the main thread
        renderer.run()
        sim.save_best_score()
        return 0

    # Start Pygame renderer thread
    renderer.start()

    UI(sim)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        # Stop simulation and renderer
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        sim.save_best_score()
        dpg.destroy_context()
    return 0

if __name__ == "__main__":
    sys.exit(main())
