"""Continuous-angle skier steering and speed model."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .audio import AudioCue, AudioService, NullAudioService
from .events import Signal


# //1.- Abstract per-tick input; device polling happens outside the core.
@dataclass(frozen=True)
class SkierInput:
    turn_left: bool = False
    turn_right: bool = False
    tuck: bool = False

    @property
    def turn_axis(self) -> int:
        # Simultaneous left and right cancel out.
        return int(self.turn_left) - int(self.turn_right)


# //2.- Bundle tunable parameters for the skier model.
@dataclass(frozen=True)
class SkierParameters:
    base_speed: float = 25.0
    tuck_bonus: float = 0.2
    max_speed: float = 40.0
    low_speed_threshold: float = 15.0
    high_speed_threshold: float = 30.0
    tuck_turn_penalty: float = 0.6
    base_turn_rate_deg: float = 120.0
    max_heading_deg: float = 80.0
    crash_recovery_s: float = 1.75
    collision_radius: float = 0.25

    def __post_init__(self) -> None:
        if not 0.0 <= self.low_speed_threshold <= self.high_speed_threshold <= self.max_speed:
            raise ValueError("turn thresholds must satisfy 0 <= low <= high <= max_speed")
        if not 0.0 < self.tuck_turn_penalty <= 1.0:
            raise ValueError("tuck_turn_penalty must be in (0, 1]")


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _inverse_lerp(start: float, end: float, value: float) -> float:
    if start == end:
        return 1.0 if value >= end else 0.0
    return _clamp01((value - start) / (end - start))


class TurnCalculator:
    """Speed-dependent turn responsiveness and tuck-widened turn radius."""

    def __init__(
        self,
        low_speed_threshold: float,
        high_speed_threshold: float,
        max_speed: float,
        tuck_turn_penalty: float = 0.6,
        base_turn_radius: float = 1.0,
    ) -> None:
        self.low_speed_threshold = float(low_speed_threshold)
        self.high_speed_threshold = float(high_speed_threshold)
        self.max_speed = float(max_speed)
        self.tuck_turn_penalty = float(tuck_turn_penalty)
        self.base_turn_radius = float(base_turn_radius)

    def turn_response(self, speed: float) -> float:
        # //3.- Direct control when slow, momentum dominated near top speed.
        if speed <= self.low_speed_threshold:
            return 1.0
        if speed >= self.high_speed_threshold:
            factor = _inverse_lerp(self.high_speed_threshold, self.max_speed, speed)
            return 0.5 + (0.3 - 0.5) * factor
        factor = _inverse_lerp(self.low_speed_threshold, self.high_speed_threshold, speed)
        return 1.0 + (0.5 - 1.0) * factor

    def turn_radius(self, tucking: bool) -> float:
        if tucking:
            return self.base_turn_radius / self.tuck_turn_penalty
        return self.base_turn_radius


@dataclass(frozen=True)
class SkierStats:
    base_speed: float
    tuck_bonus: float = 0.12

    def effective_speed(self, tucking: bool, slope_multiplier: float) -> float:
        speed = self.base_speed * slope_multiplier
        if tucking:
            speed *= 1.0 + self.tuck_bonus
        return speed


def heading_vector(heading_deg: float) -> np.ndarray:
    """Unit direction for a heading: 0 points down the slope, positive turns left."""

    radians = math.radians(heading_deg)
    return np.array([-math.sin(radians), -math.cos(radians)], dtype=float)


class SkierMotion:
    """Integrate heading, speed and position for the player each fixed step."""

    def __init__(
        self,
        parameters: Optional[SkierParameters] = None,
        position: Sequence[float] = (0.0, 0.0),
        audio: Optional[AudioService] = None,
    ) -> None:
        self.parameters = parameters or SkierParameters()
        self._audio = audio or NullAudioService()
        self.turns = TurnCalculator(
            self.parameters.low_speed_threshold,
            self.parameters.high_speed_threshold,
            self.parameters.max_speed,
            self.parameters.tuck_turn_penalty,
        )
        self.stats = SkierStats(self.parameters.base_speed, self.parameters.tuck_bonus)
        self.crashed = Signal("crashed")
        self.recovered = Signal("recovered")
        self.reset(position)

    def reset(self, position: Sequence[float] = (0.0, 0.0)) -> None:
        self.position = np.array(position, dtype=float)
        self.velocity = np.zeros(2, dtype=float)
        self.heading = 0.0
        self.speed = 0.0
        self.slope_multiplier = 1.0
        self.tucking = False
        self._was_tucking = False
        self._recovery_timer = 0.0
        self._pending_penalty = 1.0

    @property
    def is_crashed(self) -> bool:
        return self._recovery_timer > 0.0

    def set_slope_multiplier(self, multiplier: float) -> None:
        self.slope_multiplier = float(multiplier)

    def _clamp_heading(self, heading: float) -> float:
        limit = self.parameters.max_heading_deg
        return max(-limit, min(limit, heading))

    def step(self, inputs: SkierInput, dt: float) -> np.ndarray:
        if dt < 0:
            raise ValueError("dt must be non-negative")
        if self.is_crashed:
            # //4.- Input is ignored and the skier stays put until recovery elapses.
            self._recovery_timer = max(0.0, self._recovery_timer - dt)
            if not self.is_crashed:
                self._audio.start_loop(AudioCue.SKI_LOOP)
                self.recovered.emit()
            return self.velocity

        self.tucking = bool(inputs.tuck)
        response = self.turns.turn_response(self.speed)
        radius = self.turns.turn_radius(self.tucking)
        turn_rate = inputs.turn_axis * self.parameters.base_turn_rate_deg * response / radius
        self.heading = self._clamp_heading(self.heading + turn_rate * dt)

        effective = self.stats.effective_speed(self.tucking, self.slope_multiplier)
        self.speed = min(effective, self.parameters.max_speed) * self._pending_penalty
        self._pending_penalty = 1.0
        self.velocity = heading_vector(self.heading) * self.speed
        self.position = self.position + self.velocity * dt
        self._update_audio()
        return self.velocity

    def _update_audio(self) -> None:
        if self.tucking != self._was_tucking:
            self._was_tucking = self.tucking
            cue = AudioCue.TUCK_WIND_LOOP if self.tucking else AudioCue.SKI_LOOP
            self._audio.crossfade_to_loop(cue, 0.3)
        normalized = _clamp01(self.speed / self.parameters.max_speed)
        self._audio.set_loop_volume(0.3 + normalized * 0.7)

    def apply_speed_penalty(self, multiplier: float) -> None:
        # //5.- One-shot: scales the current speed and the next integration step only.
        self.speed *= multiplier
        self.velocity = self.velocity * multiplier
        self._pending_penalty *= multiplier

    def apply_deflection(self, degrees: float) -> None:
        self.heading = self._clamp_heading(self.heading + degrees)

    def crash(self) -> bool:
        if self.is_crashed:
            return False
        self._recovery_timer = self.parameters.crash_recovery_s
        self._pending_penalty = 1.0
        self.velocity = np.zeros(2, dtype=float)
        self.speed = 0.0
        self._audio.play_sfx(AudioCue.CRASH)
        self._audio.stop_loop()
        self.crashed.emit()
        return True
