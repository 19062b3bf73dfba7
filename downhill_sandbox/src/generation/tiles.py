"""Immutable tile layout records produced by the course generator."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


# //1.- Enumerate the tile archetypes a course can be stitched from.
class TileType(Enum):
    WARMUP = "warmup"
    SLALOM = "slalom"
    OBSTACLE_FIELD = "obstacle_field"
    SPEED = "speed"
    RAMP = "ramp"


# //2.- Map slope intensities to their fixed skier speed multipliers.
class SlopeIntensity(Enum):
    GENTLE = 0.8
    MODERATE = 1.0
    STEEP = 1.3

    @property
    def multiplier(self) -> float:
        return float(self.value)


class ObstacleType(Enum):
    SMALL_TREE = "small_tree"
    LARGE_TREE = "large_tree"
    ROCK = "rock"
    CABIN = "cabin"


# //3.- Normalized spawn points live in [0, 1] x [0, 1] tile space.
@dataclass(frozen=True)
class ObstacleSpawn:
    type: ObstacleType
    normalized_x: float
    normalized_y: float


@dataclass(frozen=True)
class GateSpawn:
    normalized_x: float
    normalized_y: float


# //4.- A generated tile; never mutated once appended to the course.
@dataclass(frozen=True)
class TileData:
    type: TileType
    slope: SlopeIntensity
    obstacles: Tuple[ObstacleSpawn, ...] = field(default_factory=tuple)
    gates: Tuple[GateSpawn, ...] = field(default_factory=tuple)
    difficulty: int = 1

    @property
    def slope_multiplier(self) -> float:
        return self.slope.multiplier

    def summary(self) -> str:
        return f"{self.type.name}/{self.slope.name}"
