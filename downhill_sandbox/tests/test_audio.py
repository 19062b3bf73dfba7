"""Tests for the tick-driven loop mixer."""
from __future__ import annotations

from typing import Optional

import pytest

from downhill_sandbox.src.gameplay.audio import AudioCue, MixerAudioService, MixerLevels
from downhill_sandbox.src.gameplay.skier import SkierInput, SkierMotion


class RecordingBackend:
    def __init__(self) -> None:
        self.clips: list[tuple[AudioCue, float]] = []
        self.loops: list[tuple[Optional[AudioCue], float]] = []

    def play_clip(self, cue: AudioCue, volume: float) -> None:
        self.clips.append((cue, volume))

    def set_loop(self, cue: Optional[AudioCue], volume: float) -> None:
        self.loops.append((cue, volume))


def test_sfx_scaled_by_mixer_levels():
    backend = RecordingBackend()
    mixer = MixerAudioService(backend, MixerLevels(master=0.5, sfx=0.8))
    mixer.play_sfx(AudioCue.GATE_PASS, 0.5)
    assert backend.clips == [(AudioCue.GATE_PASS, pytest.approx(0.2))]


def test_start_loop_is_idempotent():
    backend = RecordingBackend()
    mixer = MixerAudioService(backend)
    mixer.start_loop(AudioCue.SKI_LOOP)
    mixer.start_loop(AudioCue.SKI_LOOP)
    assert backend.loops == [(AudioCue.SKI_LOOP, pytest.approx(0.5))]
    mixer.stop_loop()
    assert backend.loops[-1][0] is None


# //1.- Fade out over the first half, switch, fade in over the second half.
def test_crossfade_progression():
    mixer = MixerAudioService()
    mixer.start_loop(AudioCue.SKI_LOOP)
    mixer.crossfade_to_loop(AudioCue.TUCK_WIND_LOOP, 1.0)
    mixer.update(0.25)
    assert mixer.current_loop is AudioCue.SKI_LOOP
    assert mixer.loop_volume == pytest.approx(0.25)
    mixer.update(0.25)
    assert mixer.current_loop is AudioCue.TUCK_WIND_LOOP
    assert mixer.loop_volume == pytest.approx(0.0)
    mixer.update(0.25)
    assert mixer.loop_volume == pytest.approx(0.25)
    mixer.update(0.25)
    assert mixer.loop_volume == pytest.approx(0.5)
    assert mixer.crossfade is None


def test_crossfade_to_current_loop_is_ignored():
    mixer = MixerAudioService()
    mixer.start_loop(AudioCue.SKI_LOOP)
    mixer.crossfade_to_loop(AudioCue.SKI_LOOP)
    assert mixer.crossfade is None


def test_loop_volume_is_clamped():
    mixer = MixerAudioService()
    mixer.start_loop(AudioCue.SKI_LOOP)
    mixer.set_loop_volume(2.0)
    assert mixer.loop_volume == pytest.approx(0.5)
    mixer.set_loop_volume(-1.0)
    assert mixer.loop_volume == 0.0


# //2.- Releasing a tuck mid-fade must land back on the ski loop.
def test_tuck_released_before_midpoint_keeps_ski_loop():
    mixer = MixerAudioService()
    skier = SkierMotion(audio=mixer)
    mixer.start_loop(AudioCue.SKI_LOOP)
    skier.step(SkierInput(tuck=True), 0.02)
    mixer.update(0.02)
    assert mixer.crossfade is not None
    for _ in range(50):
        skier.step(SkierInput(), 0.02)
        mixer.update(0.02)
    assert mixer.current_loop is AudioCue.SKI_LOOP
    assert mixer.crossfade is None


def test_tuck_released_after_switch_fades_back():
    mixer = MixerAudioService()
    mixer.start_loop(AudioCue.SKI_LOOP)
    mixer.crossfade_to_loop(AudioCue.TUCK_WIND_LOOP, 0.3)
    mixer.update(0.2)
    assert mixer.current_loop is AudioCue.TUCK_WIND_LOOP
    mixer.crossfade_to_loop(AudioCue.SKI_LOOP, 0.3)
    assert mixer.crossfade is not None
    assert mixer.crossfade.target is AudioCue.SKI_LOOP
    for _ in range(10):
        mixer.update(0.05)
    assert mixer.current_loop is AudioCue.SKI_LOOP
    assert mixer.crossfade is None


def test_repeated_request_for_fade_target_is_ignored():
    mixer = MixerAudioService()
    mixer.start_loop(AudioCue.SKI_LOOP)
    mixer.crossfade_to_loop(AudioCue.TUCK_WIND_LOOP, 1.0)
    mixer.update(0.25)
    fade = mixer.crossfade
    mixer.crossfade_to_loop(AudioCue.TUCK_WIND_LOOP, 1.0)
    assert mixer.crossfade is fade
    assert fade.elapsed == pytest.approx(0.25)
