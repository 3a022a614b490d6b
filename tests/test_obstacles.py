import logging
import random

import pytest

from flight.data_models import Obstacle
from flight.obstacles import ObstacleGenerator, age_obstacles, needs_spawn, uniform
from flight.settings import FlightSettings

W, H = 1600.0, 1200.0


def generator(seed=1, **kw):
    return ObstacleGenerator(FlightSettings(**kw).validated(), random.Random(seed))


def assert_valid(ob, settings, field_height=H):
    assert settings.min_space <= ob.space <= settings.max_space + 1e-9
    assert ob.y1 >= 0
    assert ob.y2 <= field_height


@pytest.mark.parametrize("strategy", ["window", "edges"])
def test_generated_gaps_stay_in_band(strategy):
    gen = generator(obstacle_strategy=strategy)
    prev = None
    for i in range(500):
        ob = gen.generate(prev, W, H, score=i % 20)
        assert_valid(ob, gen.settings)
        prev = ob


def test_spawn_distance_range_shrinks_with_score():
    gen = generator()
    lo0, hi0 = gen.spawn_distance_range(0)
    lo5, hi5 = gen.spawn_distance_range(5)
    assert lo0 == lo5
    assert hi5 < hi0
    assert (hi5 - lo5) < (hi0 - lo0)
    assert hi0 == pytest.approx(500.0)
    assert hi5 == pytest.approx(500.0 / 1.5)


def test_spawn_distance_has_a_floor():
    gen = generator()
    lo, hi = gen.spawn_distance_range(10 ** 6)
    assert lo == hi == gen.settings.min_spawn_distance
    ob = gen.generate(None, W, H, score=10 ** 6)
    assert ob.x == W + gen.settings.min_spawn_distance


def test_x_is_past_the_right_edge_within_range():
    gen = generator(seed=4)
    for score in (0, 3, 9):
        lo, hi = gen.spawn_distance_range(score)
        for _ in range(50):
            ob = gen.generate(None, W, H, score)
            assert W + lo <= ob.x <= W + hi


def test_vertical_drift_is_bounded_by_distance():
    gen = generator(seed=7)
    s = gen.settings
    prev = Obstacle(x=0.0, y1=300.0, y2=300.0 + s.min_space)
    for _ in range(200):
        ob = gen.generate(prev, W, H, score=0)
        distance = ob.x - W
        assert abs(ob.y1 - prev.y1) <= s.body_size + s.drift_ratio * distance + 1e-9


def test_reference_defaults_to_a_third_of_the_field():
    gen = generator(seed=2, drift_ratio=0.0, max_spawn_distance=50.0, min_spawn_distance=50.0)
    for _ in range(50):
        ob = gen.generate(None, W, H, score=0)
        assert abs(ob.y1 - H / 3) <= gen.settings.body_size + 1e-9


def test_window_is_clamped_when_previous_is_off_field():
    gen = generator(seed=3)
    prev = Obstacle(x=0.0, y1=5000.0, y2=5400.0)
    ob = gen.generate(prev, W, H, score=0)
    assert_valid(ob, gen.settings)


def test_field_shorter_than_gap_opens_whole_field():
    gen = generator()
    ob = gen.generate(None, W, 100.0, score=0)
    assert (ob.y1, ob.y2) == (0.0, 100.0)


def test_edge_sampling_gives_up_and_falls_back(caplog):
    gen = generator(obstacle_strategy="edges", edge_window=0.0, max_resample_attempts=5)
    prev = Obstacle(x=0.0, y1=400.0, y2=420.0)  # gap far below min_space
    with caplog.at_level(logging.WARNING, logger="flight.obstacles"):
        ob = gen.generate(prev, W, H, score=0)
    assert_valid(ob, gen.settings)
    assert "gave up after 5 attempts" in caplog.text


def test_uniform_handles_empty_range():
    rng = random.Random(0)
    assert uniform(rng, 3.0, 3.0) == 3.0
    assert uniform(rng, 5.0, 2.0) == 5.0


def test_needs_spawn():
    assert needs_spawn([], 800.0, 100.0)
    assert not needs_spawn([Obstacle(650.0, 0, 1)], 800.0, 100.0)
    assert not needs_spawn([Obstacle(600.0, 0, 1)], 800.0, 100.0)
    assert needs_spawn([Obstacle(599.0, 0, 1)], 800.0, 100.0)


def test_age_obstacles_scrolls_and_evicts():
    obs = [Obstacle(-95.0, 0, 1), Obstacle(10.0, 0, 1), Obstacle(700.0, 0, 1)]
    kept = age_obstacles(obs, 5.0, 100.0)
    assert [o.x for o in kept] == [5.0, 695.0]
