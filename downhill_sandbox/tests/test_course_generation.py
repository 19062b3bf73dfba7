"""Tests for seeded course generation and its pacing rules."""
from __future__ import annotations

import pytest

from downhill_sandbox.src.generation.course import HARD_DIFFICULTY, CourseGenerator
from downhill_sandbox.src.generation.tiles import ObstacleType, SlopeIntensity, TileType


def _signature(tiles):
    return [
        (
            tile.type,
            tile.slope,
            tuple((o.type, o.normalized_x, o.normalized_y) for o in tile.obstacles),
            tuple((g.normalized_x, g.normalized_y) for g in tile.gates),
        )
        for tile in tiles
    ]


# //1.- Same seed and length must reproduce the exact course.
def test_course_is_deterministic_for_seed():
    first = CourseGenerator(12345).generate_course(20)
    second = CourseGenerator(12345).generate_course(20)
    assert _signature(first) == _signature(second)


def test_different_seeds_produce_different_courses():
    first = CourseGenerator(12345).generate_course(20)
    second = CourseGenerator(54321).generate_course(20)
    assert _signature(first) != _signature(second)


def test_first_tile_is_gentle_warmup():
    for seed in (12345, 54321, 99999, 2024, 777):
        tile = CourseGenerator(seed).generate_course(20)[0]
        assert tile.type is TileType.WARMUP
        assert tile.slope is SlopeIntensity.GENTLE
        assert tile.gates == ()
        assert len(tile.obstacles) <= 1


def test_incremental_generation_matches_batch():
    count = 30
    batch = CourseGenerator(2024).generate_course(count)
    generator = CourseGenerator(2024)
    incremental = [generator.generate_tile(index / count) for index in range(count)]
    assert _signature(batch) == _signature(incremental)


# //2.- Never more than two consecutive hard tiles in long endless-style runs.
@pytest.mark.parametrize("seed", [12345, 54321, 99999, 2024, 777])
def test_pacing_breaks_hard_streaks(seed):
    generator = CourseGenerator(seed)
    tiles = [generator.generate_tile(min(1.0, index / 100)) for index in range(300)]
    streak = 0
    for tile in tiles:
        if tile.difficulty >= HARD_DIFFICULTY:
            streak += 1
        else:
            streak = 0
        assert streak <= 2


def test_late_course_pacing_inserts_steep_speed_tile():
    generator = CourseGenerator(777)
    tiles = [generator.generate_tile(1.0) for _ in range(12)]
    # Progress 1.0 always rates 4-5, so every third tile is a recovery tile.
    for position, tile in enumerate(tiles):
        if position % 3 == 2:
            assert tile.type is TileType.SPEED
            assert tile.slope is SlopeIntensity.STEEP
            assert tile.difficulty < HARD_DIFFICULTY
        else:
            assert tile.difficulty >= HARD_DIFFICULTY


def test_slalom_gates_alternate_and_space_evenly():
    generator = CourseGenerator(99999)
    tiles = [generator.generate_tile(min(1.0, index / 60)) for index in range(60)]
    slaloms = [tile for tile in tiles if tile.type is TileType.SLALOM]
    assert slaloms, "expected at least one slalom tile in sixty"
    sides = []
    for tile in slaloms:
        count = len(tile.gates)
        assert 2 <= count <= 4
        for index, gate in enumerate(tile.gates):
            assert gate.normalized_y == pytest.approx((index + 1) / (count + 1))
            assert 0.2 - 1e-9 <= gate.normalized_x <= 0.8 + 1e-9
            sides.append(gate.normalized_x > 0.5)
    # The side flag carries across tiles, so the whole sequence alternates.
    assert all(a != b for a, b in zip(sides, sides[1:]))


def test_non_slalom_tiles_have_no_gates():
    generator = CourseGenerator(12345)
    for tile in generator.generate_course(50):
        if tile.type is not TileType.SLALOM:
            assert tile.gates == ()


def test_obstacles_stay_inside_margins_and_respect_difficulty():
    generator = CourseGenerator(54321)
    for tile in generator.generate_course(80):
        for obstacle in tile.obstacles:
            assert 0.1 <= obstacle.normalized_x < 0.9
            assert 0.1 <= obstacle.normalized_y < 0.9
            if tile.difficulty <= 2 and tile.type is not TileType.SPEED:
                assert obstacle.type in (ObstacleType.SMALL_TREE, ObstacleType.LARGE_TREE)
            if obstacle.type is ObstacleType.CABIN:
                assert tile.difficulty >= 5 or tile.type is TileType.SPEED


def test_obstacle_field_counts_scale_with_difficulty():
    generator = CourseGenerator(2024)
    for tile in generator.generate_course(80):
        if tile.type is TileType.OBSTACLE_FIELD:
            assert 3 + tile.difficulty <= len(tile.obstacles) <= 5 + tile.difficulty


def test_generate_course_rejects_negative_count():
    with pytest.raises(ValueError):
        CourseGenerator(1).generate_course(-1)
    assert CourseGenerator(1).generate_course(0) == []


def test_short_course_reproducible_and_seed_sensitive():
    course = CourseGenerator(12345).generate_course(10)
    assert course[0].type is TileType.WARMUP
    assert course[0].slope is SlopeIntensity.GENTLE
    assert _signature(course) == _signature(CourseGenerator(12345).generate_course(10))
    other = CourseGenerator(54321).generate_course(10)
    assert course[1] != other[1]
