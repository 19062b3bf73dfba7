"""Tile streaming around the skier over a fixed or endless course."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .events import Signal
from .gates import GateData, GateTracker
from .obstacles import ObstacleInstance
from .settings import TileSettings
from .skier import SkierMotion
from ..generation.course import CourseGenerator
from ..generation.tiles import TileData

LOGGER = logging.getLogger(__name__)

ENDLESS_BOOTSTRAP_EXTRA = 5


# //1.- Live handle for a materialized tile and everything it spawned.
@dataclass(eq=False)
class TileInstance:
    index: int
    data: TileData
    center_y: float
    obstacles: List[ObstacleInstance] = field(default_factory=list)
    gates: List[GateData] = field(default_factory=list)

    @property
    def slope_multiplier(self) -> float:
        return self.data.slope_multiplier

    def release(self) -> None:
        self.obstacles.clear()
        self.gates.clear()


class TileStreamer:
    """Keep a contiguous window of tiles live around the player's Y position."""

    def __init__(
        self,
        generator: CourseGenerator,
        settings: Optional[TileSettings] = None,
        *,
        endless: bool = False,
        gate_tracker: Optional[GateTracker] = None,
        skier: Optional[SkierMotion] = None,
    ) -> None:
        self.generator = generator
        self.settings = settings or TileSettings()
        self.endless = bool(endless)
        self.gate_tracker = gate_tracker
        self.skier = skier
        self.loaded: Dict[int, TileInstance] = {}
        self.current_index = 0
        self.tile_spawned = Signal("tile_spawned")
        self.tile_despawned = Signal("tile_despawned")

        # //2.- Endless runs bootstrap a short course; time trials build it all up front.
        if self.endless:
            self.course: List[TileData] = generator.generate_course(self.settings.tiles_ahead + ENDLESS_BOOTSTRAP_EXTRA)
        else:
            self.course = generator.generate_course(self.settings.total_tiles)
        self.highest_generated = len(self.course) - 1

    @property
    def total_tiles(self) -> Optional[int]:
        return None if self.endless else self.settings.total_tiles

    @property
    def last_tile_center_y(self) -> Optional[float]:
        if self.endless:
            return None
        return -(self.settings.total_tiles - 1) * self.settings.tile_height

    def spawn_initial(self) -> None:
        for index in range(self.settings.tiles_ahead + 1):
            self.spawn_tile(index)

    def tile_index_for(self, player_y: float) -> int:
        index = math.floor(-player_y / self.settings.tile_height)
        if self.endless:
            return max(0, index)
        return max(0, min(index, self.settings.total_tiles - 1))

    def window(self) -> Tuple[int, int]:
        start = max(0, self.current_index - self.settings.tiles_behind)
        end = self.current_index + self.settings.tiles_ahead
        if not self.endless:
            end = min(self.settings.total_tiles - 1, end)
        return start, end

    def update(self, player_y: float) -> float:
        self.current_index = self.tile_index_for(player_y)
        start, end = self.window()
        if self.endless and end > self.highest_generated:
            self._generate_through(end)
        for index in range(start, end + 1):
            if index not in self.loaded:
                self.spawn_tile(index)
        # //3.- Collect first so despawning never mutates the dict under iteration.
        to_unload = [index for index in self.loaded if index < start or index > end]
        for index in to_unload:
            self.despawn_tile(index)
        return self._apply_slope()

    def _generate_through(self, target_index: int) -> None:
        span = float(self.settings.endless_progress_span)
        while self.highest_generated < target_index:
            self.highest_generated += 1
            progress = min(1.0, self.highest_generated / span)
            self.course.append(self.generator.generate_tile(progress))

    def _apply_slope(self) -> float:
        tile = self.loaded.get(self.current_index)
        multiplier = tile.slope_multiplier if tile is not None else 1.0
        if tile is not None and self.skier is not None:
            self.skier.set_slope_multiplier(multiplier)
        return multiplier

    def _resolve(self, center_y: float, normalized_x: float, normalized_y: float) -> Tuple[float, float]:
        x = (normalized_x - 0.5) * self.settings.tile_width
        y = center_y + (normalized_y - 0.5) * self.settings.tile_height
        return x, y

    def spawn_tile(self, index: int) -> Optional[TileInstance]:
        if index < 0 or index >= len(self.course) or index in self.loaded:
            return None
        data = self.course[index]
        center_y = -index * self.settings.tile_height
        instance = TileInstance(index=index, data=data, center_y=center_y)
        for spawn in data.obstacles:
            x, y = self._resolve(center_y, spawn.normalized_x, spawn.normalized_y)
            instance.obstacles.append(ObstacleInstance(spawn.type, x, y))
        for spawn in data.gates:
            x, y = self._resolve(center_y, spawn.normalized_x, spawn.normalized_y)
            gate = GateData(index=0, x=x, y=y)
            instance.gates.append(gate)
            if self.gate_tracker is not None:
                self.gate_tracker.register_gate(gate)
        self.loaded[index] = instance
        LOGGER.debug("Spawned tile %d (%s)", index, data.summary())
        self.tile_spawned.emit(instance)
        return instance

    def despawn_tile(self, index: int) -> bool:
        instance = self.loaded.pop(index, None)
        if instance is None:
            return False
        if self.gate_tracker is not None and instance.gates:
            self.gate_tracker.unregister_gates(instance.gates)
        LOGGER.debug("Despawned tile %d", index)
        self.tile_despawned.emit(instance)
        instance.release()
        return True

    def active_obstacles(self) -> List[ObstacleInstance]:
        return [obstacle for index in sorted(self.loaded) for obstacle in self.loaded[index].obstacles]

    def band_summary(self) -> str:
        keys = sorted(self.loaded.keys())
        return ", ".join(f"{k}:{self.loaded[k].data.summary()}" for k in keys)
