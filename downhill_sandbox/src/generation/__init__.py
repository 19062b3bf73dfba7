"""Course generation utilities for the downhill sandbox."""
from .random_source import SeededRandom
from .tiles import GateSpawn, ObstacleSpawn, ObstacleType, SlopeIntensity, TileData, TileType
from .course import CourseGenerator
from .config import DEFAULT_SEED, SeedConfig, load_seed_config

__all__ = [
    "SeededRandom",
    "GateSpawn",
    "ObstacleSpawn",
    "ObstacleType",
    "SlopeIntensity",
    "TileData",
    "TileType",
    "CourseGenerator",
    "DEFAULT_SEED",
    "SeedConfig",
    "load_seed_config",
]
