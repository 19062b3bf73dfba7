"""Seeded course generation with difficulty ramps and pacing rules."""
from __future__ import annotations

from typing import Dict, List, Tuple

from .random_source import SeededRandom
from .tiles import GateSpawn, ObstacleSpawn, ObstacleType, SlopeIntensity, TileData, TileType

WARMUP_PROGRESS = 0.05
HARD_DIFFICULTY = 4
MAX_HARD_STREAK = 2

# //1.- Half-open difficulty brackets keyed by the upper progress bound.
_DIFFICULTY_BRACKETS: Tuple[Tuple[float, int, int], ...] = (
    (0.25, 1, 3),
    (0.50, 2, 4),
    (0.75, 3, 5),
)
_FINAL_BRACKET = (4, 6)

_TYPE_TIERS: Dict[int, Tuple[TileType, ...]] = {
    1: (TileType.WARMUP, TileType.SPEED, TileType.OBSTACLE_FIELD),
    2: (TileType.WARMUP, TileType.SPEED, TileType.OBSTACLE_FIELD),
    3: (TileType.OBSTACLE_FIELD, TileType.SLALOM, TileType.SPEED),
    4: (TileType.OBSTACLE_FIELD, TileType.SLALOM, TileType.SPEED),
}
_HARDEST_TYPES = (TileType.OBSTACLE_FIELD, TileType.SLALOM, TileType.RAMP)

# //2.- Cumulative obstacle weights; the last entry catches the remainder.
_OBSTACLE_WEIGHTS: Tuple[Tuple[int, Tuple[Tuple[float, ObstacleType], ...]], ...] = (
    (2, ((0.8, ObstacleType.SMALL_TREE), (1.0, ObstacleType.LARGE_TREE))),
    (4, ((0.4, ObstacleType.SMALL_TREE), (0.7, ObstacleType.LARGE_TREE), (1.0, ObstacleType.ROCK))),
)
_HARDEST_WEIGHTS = (
    (0.2, ObstacleType.SMALL_TREE),
    (0.5, ObstacleType.LARGE_TREE),
    (0.8, ObstacleType.ROCK),
    (1.0, ObstacleType.CABIN),
)

GATE_LEFT_X = 0.3
GATE_RIGHT_X = 0.7
GATE_JITTER = 0.1


class CourseGenerator:
    """Produce ``TileData`` one call at a time from a single seeded stream.

    Batch (``generate_course``) and endless (``generate_tile``) generation share
    the same previous-type, hard-streak and gate alternation state, so a course
    grown tile by tile matches one generated in bulk for the same progress values.
    """

    def __init__(self, seed: int) -> None:
        self._rng = SeededRandom(seed)
        self._previous_type = TileType.WARMUP
        self._hard_streak = 0
        self._alternate_gate_side = False

    @property
    def seed(self) -> int:
        return self._rng.seed

    @property
    def previous_type(self) -> TileType:
        return self._previous_type

    @property
    def hard_streak(self) -> int:
        return self._hard_streak

    def generate_course(self, tile_count: int) -> List[TileData]:
        if tile_count < 0:
            raise ValueError("tile_count must be non-negative")
        return [self.generate_tile(index / tile_count) for index in range(tile_count)]

    def generate_tile(self, progress: float) -> TileData:
        tile = self._build_tile(progress)
        self._previous_type = tile.type
        return tile

    def _build_tile(self, progress: float) -> TileData:
        # //3.- Courses always open on a gentle warmup tile.
        if progress < WARMUP_PROGRESS:
            self._hard_streak = 0
            return TileData(
                TileType.WARMUP,
                SlopeIntensity.GENTLE,
                self._generate_obstacles(TileType.WARMUP, 0),
                difficulty=1,
            )

        difficulty = self.difficulty_rating(progress)

        # //4.- Pacing rule: two hard tiles in a row buy the player a speed tile.
        if self._hard_streak >= MAX_HARD_STREAK:
            self._hard_streak = 0
            return TileData(
                TileType.SPEED,
                SlopeIntensity.STEEP,
                self._generate_obstacles(TileType.SPEED, difficulty),
                difficulty=min(difficulty, HARD_DIFFICULTY - 1),
            )

        tile_type = self._choose_tile_type(difficulty)
        slope = self._choose_slope(difficulty)
        if difficulty >= HARD_DIFFICULTY:
            self._hard_streak += 1
        else:
            self._hard_streak = 0

        obstacles = self._generate_obstacles(tile_type, difficulty)
        gates = self._generate_gates(difficulty) if tile_type is TileType.SLALOM else ()
        return TileData(tile_type, slope, obstacles, gates, difficulty=difficulty)

    def difficulty_rating(self, progress: float) -> int:
        for upper, low, high in _DIFFICULTY_BRACKETS:
            if progress < upper:
                return self._rng.next_int(low, high)
        return self._rng.next_int(*_FINAL_BRACKET)

    def _choose_tile_type(self, difficulty: int) -> TileType:
        return self._rng.choose(_TYPE_TIERS.get(difficulty, _HARDEST_TYPES))

    def _choose_slope(self, difficulty: int) -> SlopeIntensity:
        if difficulty <= 2:
            return SlopeIntensity.GENTLE
        if difficulty == 3:
            return SlopeIntensity.MODERATE if self._rng.next_float() > 0.5 else SlopeIntensity.GENTLE
        if difficulty == 4:
            return SlopeIntensity.STEEP if self._rng.next_float() > 0.5 else SlopeIntensity.MODERATE
        return SlopeIntensity.STEEP

    def _obstacle_count(self, tile_type: TileType, difficulty: int) -> int:
        if tile_type in (TileType.WARMUP, TileType.SPEED):
            return self._rng.next_int(0, 2)
        if tile_type is TileType.OBSTACLE_FIELD:
            return self._rng.next_int(3, 6) + difficulty
        # Slalom and ramp tiles keep room for gates and approach lines.
        return self._rng.next_int(1, 3)

    def _generate_obstacles(self, tile_type: TileType, difficulty: int) -> Tuple[ObstacleSpawn, ...]:
        spawns: List[ObstacleSpawn] = []
        for _ in range(self._obstacle_count(tile_type, difficulty)):
            obstacle_type = self._choose_obstacle_type(difficulty)
            x = self._rng.range(0.1, 0.9)
            y = self._rng.range(0.1, 0.9)
            spawns.append(ObstacleSpawn(obstacle_type, x, y))
        return tuple(spawns)

    def _choose_obstacle_type(self, difficulty: int) -> ObstacleType:
        roll = self._rng.next_float()
        weights = _HARDEST_WEIGHTS
        for ceiling, tier in _OBSTACLE_WEIGHTS:
            if difficulty <= ceiling:
                weights = tier
                break
        for threshold, obstacle_type in weights:
            if roll < threshold:
                return obstacle_type
        return weights[-1][1]

    def _generate_gates(self, difficulty: int) -> Tuple[GateSpawn, ...]:
        # //5.- 2-4 evenly spaced gates alternating sides; the side flag carries over tiles.
        if difficulty <= 2:
            gate_count = 2
        elif difficulty <= 4:
            gate_count = 3
        else:
            gate_count = 4
        gates: List[GateSpawn] = []
        for index in range(gate_count):
            normalized_y = (index + 1) / (gate_count + 1)
            base_x = GATE_RIGHT_X if self._alternate_gate_side else GATE_LEFT_X
            normalized_x = base_x + self._rng.range(-GATE_JITTER, GATE_JITTER)
            gates.append(GateSpawn(normalized_x, normalized_y))
            self._alternate_gate_side = not self._alternate_gate_side
        return tuple(gates)
