"""Downhill sandbox package.

Simulation core for a downhill skiing run: a seeded course generator, a
streamed window of tiles around the skier, gate pass/miss tracking, a yeti
that chases the skier in endless mode and the skier's steering model. Nothing
here renders or plays sound; hosts drive the ``RunOrchestrator`` with inputs
and ``dt`` and read back snapshots and events.
"""

from .src.generation import CourseGenerator, SeededRandom, SeedConfig, TileData, load_seed_config
from .src.gameplay.gates import GateData, GateTracker
from .src.gameplay.pursuer import PursuerConfig, PursuerDriver, PursuerZone
from .src.gameplay.skier import SkierInput, SkierMotion
from .src.gameplay.settings import RunSettings, load_run_settings
from .src.gameplay.streaming import TileStreamer
from .src.gameplay.world import GameMode, RunOrchestrator, RunState

__all__ = [
    "CourseGenerator",
    "SeededRandom",
    "SeedConfig",
    "TileData",
    "load_seed_config",
    "GateData",
    "GateTracker",
    "PursuerConfig",
    "PursuerDriver",
    "PursuerZone",
    "SkierInput",
    "SkierMotion",
    "RunSettings",
    "load_run_settings",
    "TileStreamer",
    "GameMode",
    "RunOrchestrator",
    "RunState",
]
