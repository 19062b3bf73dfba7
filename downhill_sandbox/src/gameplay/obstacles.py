"""Obstacle effects and the skier's scalar collision response."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..generation.tiles import ObstacleType
from .audio import AudioCue, AudioService, NullAudioService
from .skier import SkierMotion


# //1.- Per-type response: speed multiplier, crash flag, deflection and hit extent.
@dataclass(frozen=True)
class ObstacleEffect:
    speed_penalty: float
    causes_crash: bool
    deflection_deg: float
    extent: float
    box: bool
    cue: AudioCue


OBSTACLE_EFFECTS: Dict[ObstacleType, ObstacleEffect] = {
    ObstacleType.SMALL_TREE: ObstacleEffect(0.8, False, 0.0, 0.25, False, AudioCue.TREE_HIT),
    ObstacleType.LARGE_TREE: ObstacleEffect(0.4, False, 30.0, 0.375, False, AudioCue.TREE_HIT),
    ObstacleType.ROCK: ObstacleEffect(0.0, True, 0.0, 0.3125, False, AudioCue.ROCK_HIT),
    ObstacleType.CABIN: ObstacleEffect(0.0, True, 0.0, 0.375, True, AudioCue.CABIN_HIT),
}


def effect_for(obstacle_type: ObstacleType) -> ObstacleEffect:
    return OBSTACLE_EFFECTS[obstacle_type]


# //2.- A materialized obstacle in world space, owned by its tile.
@dataclass(eq=False)
class ObstacleInstance:
    type: ObstacleType
    x: float
    y: float
    hit: bool = False

    @property
    def effect(self) -> ObstacleEffect:
        return effect_for(self.type)

    def overlaps(self, x: float, y: float, radius: float) -> bool:
        effect = self.effect
        dx = x - self.x
        dy = y - self.y
        if effect.box:
            # Circle vs axis-aligned square using the closest point on the box.
            nearest_x = max(-effect.extent, min(effect.extent, dx))
            nearest_y = max(-effect.extent, min(effect.extent, dy))
            ox = dx - nearest_x
            oy = dy - nearest_y
            return ox * ox + oy * oy <= radius * radius
        reach = effect.extent + radius
        return dx * dx + dy * dy <= reach * reach


class CollisionHandler:
    """Apply crash, penalty and deflection when the skier touches an obstacle."""

    def __init__(self, skier: SkierMotion, audio: Optional[AudioService] = None) -> None:
        self._skier = skier
        self._audio = audio or NullAudioService()

    def resolve(self, obstacle: ObstacleInstance) -> bool:
        if self._skier.is_crashed:
            return False
        effect = obstacle.effect
        obstacle.hit = True
        if effect.causes_crash:
            return self._skier.crash()
        # //3.- Push away from the obstacle: hitting it on the left deflects right.
        pushed_right = self._skier.position[0] >= obstacle.x
        direction = -1.0 if pushed_right else 1.0
        self._skier.apply_speed_penalty(effect.speed_penalty)
        self._skier.apply_deflection(effect.deflection_deg * direction)
        self._audio.play_sfx(effect.cue)
        return True
