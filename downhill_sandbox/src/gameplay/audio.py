"""Injected audio service interface and a tick-driven loop mixer.

The simulation never plays sound itself. Components receive an ``AudioService``
at construction and emit cues into it; hosts plug in a backend that actually
plays clips. ``MixerAudioService`` keeps the loop/crossfade bookkeeping so a
backend only has to mirror the volumes it is told about.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Protocol


class AudioCue(Enum):
    SKI_LOOP = auto()
    TUCK_WIND_LOOP = auto()
    SNOW_SPRAY = auto()
    TREE_HIT = auto()
    ROCK_HIT = auto()
    CABIN_HIT = auto()
    CRASH = auto()
    GATE_PASS = auto()
    GATE_MISS = auto()
    YETI_GROWL = auto()
    YETI_FOOTSTEP = auto()
    YETI_CATCH = auto()
    MENU_SELECT = auto()
    GAME_START = auto()
    GAME_FINISH = auto()
    GAME_OVER = auto()


class AudioService(Protocol):
    """Protocol consumed by gameplay components that want to be heard."""

    def play_sfx(self, cue: AudioCue, volume_scale: float = 1.0) -> None:
        """Fire a one-shot effect."""

    def start_loop(self, cue: AudioCue) -> None:
        """Start a looping bed unless it is already playing."""

    def stop_loop(self) -> None:
        """Stop the looping bed."""

    def set_loop_volume(self, normalized: float) -> None:
        """Scale the loop volume by a 0-1 factor."""

    def crossfade_to_loop(self, cue: AudioCue, duration: float = 0.5) -> None:
        """Fade the current loop out and the new one in over ``duration``."""

    def update(self, dt: float) -> None:
        """Advance time-based fades."""


class AudioBackend(Protocol):
    """Host-side sink that performs the actual playback."""

    def play_clip(self, cue: AudioCue, volume: float) -> None:
        """Play a one-shot clip at an absolute volume."""

    def set_loop(self, cue: Optional[AudioCue], volume: float) -> None:
        """Mirror the loop channel (``None`` stops it)."""


class NullAudioService:
    """Silent implementation used when the host does not care about audio."""

    def play_sfx(self, cue: AudioCue, volume_scale: float = 1.0) -> None:
        return

    def start_loop(self, cue: AudioCue) -> None:
        return

    def stop_loop(self) -> None:
        return

    def set_loop_volume(self, normalized: float) -> None:
        return

    def crossfade_to_loop(self, cue: AudioCue, duration: float = 0.5) -> None:
        return

    def update(self, dt: float) -> None:
        return


# //1.- Explicit crossfade state advanced by dt instead of a suspended coroutine.
@dataclass
class Crossfade:
    target: AudioCue
    duration: float
    start_volume: float
    elapsed: float = 0.0
    switched: bool = False

    @property
    def half(self) -> float:
        return max(self.duration * 0.5, 1e-6)


@dataclass
class MixerLevels:
    master: float = 1.0
    sfx: float = 1.0
    music: float = 0.7
    loop: float = 0.5


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class MixerAudioService:
    """Track loop state and crossfades; forward audible changes to a backend."""

    def __init__(self, backend: Optional[AudioBackend] = None, levels: Optional[MixerLevels] = None) -> None:
        self._backend = backend
        self.levels = levels or MixerLevels()
        self.current_loop: Optional[AudioCue] = None
        self.loop_playing = False
        self.loop_volume = 0.0
        self.crossfade: Optional[Crossfade] = None

    @property
    def full_loop_volume(self) -> float:
        return self.levels.loop * self.levels.master

    def play_sfx(self, cue: AudioCue, volume_scale: float = 1.0) -> None:
        if self._backend is not None:
            self._backend.play_clip(cue, self.levels.sfx * self.levels.master * volume_scale)

    def start_loop(self, cue: AudioCue) -> None:
        if self.loop_playing and self.current_loop is cue:
            return
        self.current_loop = cue
        self.loop_playing = True
        self.loop_volume = self.full_loop_volume
        self._sync_loop()

    def stop_loop(self) -> None:
        self.loop_playing = False
        self.crossfade = None
        self._sync_loop()

    def set_loop_volume(self, normalized: float) -> None:
        self.loop_volume = self.full_loop_volume * _clamp01(normalized)
        self._sync_loop()

    def crossfade_to_loop(self, cue: AudioCue, duration: float = 0.5) -> None:
        # //2.- A new request replaces any fade in flight rather than racing it.
        fade = self.crossfade
        effective = fade.target if fade is not None else self.current_loop
        if effective is cue and (fade is not None or self.loop_playing):
            return
        if fade is not None and not fade.switched and self.current_loop is cue:
            # Fade still on its way out: cancel it and restore the current loop.
            self.crossfade = None
            self.loop_volume = self.full_loop_volume
            self._sync_loop()
            return
        self.crossfade = Crossfade(target=cue, duration=max(0.0, float(duration)), start_volume=self.loop_volume)

    def update(self, dt: float) -> None:
        fade = self.crossfade
        if fade is None:
            return
        fade.elapsed += max(0.0, dt)
        if not fade.switched:
            if fade.elapsed < fade.half:
                self.loop_volume = fade.start_volume * (1.0 - fade.elapsed / fade.half)
                self._sync_loop()
                return
            # //3.- Swap clips at the silent midpoint, then fade the new loop in.
            fade.switched = True
            fade.elapsed -= fade.half
            self.current_loop = fade.target
            self.loop_playing = True
            self.loop_volume = 0.0
        if fade.elapsed < fade.half:
            self.loop_volume = self.full_loop_volume * (fade.elapsed / fade.half)
        else:
            self.loop_volume = self.full_loop_volume
            self.crossfade = None
        self._sync_loop()

    def _sync_loop(self) -> None:
        if self._backend is None:
            return
        self._backend.set_loop(self.current_loop if self.loop_playing else None, self.loop_volume)
