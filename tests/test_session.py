import math
import random

import pytest

from flight.collisions import CollisionResult
from flight.constants import BACKGROUND_COLOR
from flight.data_models import GamePhase, Obstacle
from flight.game_state import EventType
from flight.session import GAME_OVER_HINT, START_HINT, FlightSession
from flight.settings import FlightSettings

W, H = 800.0, 600.0


def new_session(seed=0, **kw):
    return FlightSession(W, H, FlightSettings(**kw), rng=random.Random(seed))


def start(session):
    session.set_flying_intent(True)
    session.set_flying_intent(False)
    assert session.state.phase == GamePhase.FLYING


def crash(session):
    session.set_flying_intent(True)
    session.body.vertical_offset = -H / 2 + 10.0  # silhouette pokes through the ceiling
    session.tick()
    session.set_flying_intent(False)


def test_glide_tick_scenario():
    s = new_session(speed=10.0)
    start(s)
    s.obstacles = [Obstacle(x=500.0, y1=200.0, y2=400.0)]
    s.tick()
    assert s.body.angle == math.atan2(10.0 * math.sin(0.0) + s.settings.rotate_down_d, 10.0 * math.cos(0.0))
    assert s.body.vertical_offset == 0.0
    assert s.obstacles[0].x == 490.0
    assert len(s.obstacles) == 2
    assert s.obstacles[1].x > W
    assert s.state.distance == 10.0


def test_idle_ticks_do_not_move_anything():
    s = new_session()
    scene = s.tick()
    assert scene.phase == GamePhase.IDLE
    assert scene.hints == (START_HINT,)
    assert s.body.angle == 0.0
    assert s.obstacles == []


def test_flying_intent_starts_round():
    s = new_session()
    events = []
    s.events.subscribe(EventType.ROUND_STARTED, lambda: events.append("start"))
    s.set_flying_intent(True)
    assert s.body.is_flying
    assert s.state.is_playing
    assert events == ["start"]
    s.set_flying_intent(True)
    assert events == ["start"]


def test_collision_takes_one_life_and_freezes():
    s = new_session()
    start(s)
    s.body.vertical_offset = -H / 2 + 10.0
    s.tick()
    assert s.state.life == s.settings.max_life - 1
    assert not s.state.is_playing
    assert s.last_collision is CollisionResult.HIT_UPPER
    frozen = (s.body.angle, s.body.vertical_offset, len(s.body.trail))
    for _ in range(5):
        s.tick()
    assert (s.body.angle, s.body.vertical_offset, len(s.body.trail)) == frozen
    assert s.state.life == s.settings.max_life - 1


def test_round_start_resets_everything():
    s = new_session()
    start(s)
    s.set_flying_intent(True)
    for _ in range(10):
        s.tick()
    s.obstacles.append(Obstacle(x=W - 1000.0, y1=0.0, y2=H))
    s.game.add_score(4)
    crash(s)
    assert s.state.phase == GamePhase.IDLE
    s.set_flying_intent(True)
    assert s.body.vertical_offset == 0.0
    assert s.body.angle == 0.0
    assert len(s.body.trail) == 0
    assert s.obstacles == []
    assert s.state.score == 0
    assert s.state.best_score == 4


def test_score_crossing_counts_once():
    s = new_session(speed=10.0)
    start(s)
    body_x = W / 3
    s.obstacles = [Obstacle(x=body_x - 100.0 + 5.0, y1=0.0, y2=H)]
    s.tick()
    assert s.state.score == 1
    s.tick()
    s.tick()
    assert s.state.score == 1


def test_ten_crashes_end_the_game():
    s = new_session(max_life=10)
    over = []
    s.events.subscribe(EventType.GAME_OVER, lambda: over.append(True))
    for _ in range(10):
        crash(s)
    assert s.state.life == 0
    assert s.state.phase == GamePhase.GAME_OVER
    assert over == [True]
    s.set_flying_intent(True)
    assert s.state.phase == GamePhase.GAME_OVER
    assert s.state.rounds == 10
    scene = s.tick()
    assert scene.phase == GamePhase.GAME_OVER
    assert scene.hints == (GAME_OVER_HINT,)
    assert scene.life == 0


def test_new_game_after_game_over():
    s = new_session(max_life=1)
    crash(s)
    assert s.state.phase == GamePhase.GAME_OVER
    s.new_game()
    assert s.state.life == 1
    s.set_flying_intent(True)
    assert s.state.is_playing


def test_unusable_field_skips_ticks():
    s = FlightSession(0, H)
    assert s.tick() is None
    s.resize(W, H)
    assert s.tick() is not None
    last = s.last_scene
    s.resize(-5, H)
    assert s.tick() is last


def test_resize_rescales_and_clears():
    s = new_session()
    start(s)
    for _ in range(5):
        s.tick()
    s.body.vertical_offset = 100.0
    s.resize(W, H / 2)
    assert s.body.vertical_offset == 50.0
    assert s.obstacles == []
    assert len(s.body.trail) == 0
    s.body.vertical_offset = 10000.0
    s.resize(W, H)
    assert s.body.vertical_offset == H / 2


def test_scene_describes_state_before_the_step():
    s = new_session(speed=10.0)
    start(s)
    s.obstacles = [Obstacle(x=500.0, y1=200.0, y2=400.0)]
    scene = s.tick()
    assert scene.background == BACKGROUND_COLOR
    assert scene.body.x == W / 3
    assert scene.body.y == H / 2
    assert scene.body.angle == 0.0
    assert len(scene.body.silhouette) == 4
    assert scene.obstacles[0].x == 500.0
    assert (scene.obstacles[0].y, scene.obstacles[0].h) == (0.0, 200.0)
    assert (scene.obstacles[1].y, scene.obstacles[1].h) == (400.0, 200.0)
    assert scene.trail == ()


def test_trail_bands_darken():
    s = new_session()
    start(s)
    for _ in range(7):
        s.tick()
    bands = s.describe().trail
    assert [b.color for b in bands] == [(255, 255, 255), (254, 254, 254), (253, 253, 253)]
    assert len(bands[0].points) == 3
    assert bands[1].points[0] == bands[0].points[-1]
    assert bands[2].points[0] == bands[1].points[-1]
    assert bands[0].points[0] == (W / 3, H / 2 + s.body.vertical_offset)


def test_preview_of_incoming_obstacle():
    s = new_session()
    s.obstacles = [Obstacle(x=100.0, y1=100.0, y2=500.0), Obstacle(x=W + 100.0, y1=150.0, y2=550.0)]
    preview = s.describe().preview
    assert preview is not None
    assert preview.distance == pytest.approx(100.0)
    assert preview.intensity == pytest.approx(0.8)
    assert preview.upper.h == 150.0
    assert preview.lower.y == 550.0
    assert preview.upper.x == W - s.settings.preview_width
    assert preview.upper.color == (109, 109, 109)


def test_no_preview_when_everything_is_on_screen():
    s = new_session()
    s.obstacles = [Obstacle(x=300.0, y1=100.0, y2=500.0)]
    assert s.describe().preview is None


def test_apply_settings_rebounds_trail():
    s = new_session()
    start(s)
    for _ in range(20):
        s.tick()
    s.apply_settings(FlightSettings(history_len=5))
    assert len(s.body.trail) == 5
    assert s.body.trail.maxlen == 5


def test_long_run_invariants():
    rng = random.Random(11)
    s = new_session(seed=5, history_len=40)
    st = s.settings
    for i in range(4000):
        if i % 7 == 0:
            s.set_flying_intent(rng.random() < 0.35)
        if s.state.phase == GamePhase.IDLE:
            s.set_flying_intent(True)
        elif s.state.phase == GamePhase.GAME_OVER:
            s.new_game()
        s.tick()
        assert len(s.body.trail) <= st.history_len
        xs = [ob.x for ob in s.obstacles]
        assert xs == sorted(xs)
        for ob in s.obstacles:
            assert st.min_space <= ob.space <= st.max_space + 1e-9
            assert 0.0 <= ob.y1 and ob.y2 <= H
            assert ob.x > -st.obstacle_width


def test_apply_settings_caps_life_mid_game():
    s = new_session(max_life=10)
    crash(s)
    assert s.state.life == 9
    s.apply_settings(FlightSettings(max_life=3))
    assert s.state.life == 3
    crash(s)
    crash(s)
    crash(s)
    assert s.state.phase == GamePhase.GAME_OVER
