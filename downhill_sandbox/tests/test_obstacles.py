"""Tests for obstacle overlap and the collision response."""
from __future__ import annotations

import pytest

from downhill_sandbox.src.gameplay.audio import AudioCue, NullAudioService
from downhill_sandbox.src.gameplay.obstacles import CollisionHandler, ObstacleInstance, effect_for
from downhill_sandbox.src.gameplay.skier import SkierInput, SkierMotion
from downhill_sandbox.src.generation.tiles import ObstacleType


class RecordingAudio(NullAudioService):
    def __init__(self) -> None:
        self.cues: list[AudioCue] = []

    def play_sfx(self, cue: AudioCue, volume_scale: float = 1.0) -> None:  # type: ignore[override]
        self.cues.append(cue)


def _moving_skier(audio=None) -> SkierMotion:
    skier = SkierMotion(audio=audio)
    skier.step(SkierInput(), 0.1)
    return skier


# //1.- Circles use summed radii; cabins are boxes tested at the closest point.
def test_circle_overlap():
    tree = ObstacleInstance(ObstacleType.SMALL_TREE, 0.0, 0.0)
    assert tree.overlaps(0.5, 0.0, 0.25)
    assert not tree.overlaps(0.51, 0.0, 0.25)


def test_box_overlap_uses_corners():
    cabin = ObstacleInstance(ObstacleType.CABIN, 0.0, 0.0)
    assert cabin.overlaps(0.6, 0.0, 0.25)
    # Diagonal from the corner (0.375, 0.375) is farther than the radius.
    assert not cabin.overlaps(0.6, 0.6, 0.25)


def test_small_tree_slows_without_deflection():
    audio = RecordingAudio()
    skier = _moving_skier(audio)
    tree = ObstacleInstance(ObstacleType.SMALL_TREE, float(skier.position[0]), float(skier.position[1]))
    assert CollisionHandler(skier, audio).resolve(tree)
    assert tree.hit
    assert skier.speed == pytest.approx(20.0)
    assert skier.heading == 0.0
    assert audio.cues == [AudioCue.TREE_HIT]


def test_large_tree_deflects_away():
    skier = _moving_skier()
    handler = CollisionHandler(skier)
    left_tree = ObstacleInstance(ObstacleType.LARGE_TREE, float(skier.position[0]) - 0.2, float(skier.position[1]))
    handler.resolve(left_tree)
    assert skier.speed == pytest.approx(10.0)
    assert skier.heading == pytest.approx(-30.0)
    right_tree = ObstacleInstance(ObstacleType.LARGE_TREE, float(skier.position[0]) + 0.2, float(skier.position[1]))
    handler.resolve(right_tree)
    assert skier.heading == pytest.approx(0.0)


@pytest.mark.parametrize("obstacle_type", [ObstacleType.ROCK, ObstacleType.CABIN])
def test_rocks_and_cabins_crash(obstacle_type):
    audio = RecordingAudio()
    skier = _moving_skier(audio)
    obstacle = ObstacleInstance(obstacle_type, 0.0, float(skier.position[1]))
    handler = CollisionHandler(skier, audio)
    assert handler.resolve(obstacle)
    assert skier.is_crashed
    assert audio.cues == [AudioCue.CRASH]
    # While crashed, further contacts are ignored.
    assert not handler.resolve(ObstacleInstance(ObstacleType.SMALL_TREE, 0.0, 0.0))


def test_effect_table_covers_every_type():
    for obstacle_type in ObstacleType:
        assert effect_for(obstacle_type).extent > 0


def test_tree_hit_shortens_following_step():
    skier = _moving_skier()
    start_y = float(skier.position[1])
    tree = ObstacleInstance(ObstacleType.SMALL_TREE, 0.0, start_y)
    CollisionHandler(skier).resolve(tree)
    skier.step(SkierInput(), 0.1)
    assert float(skier.position[1]) == pytest.approx(start_y - 2.0)
