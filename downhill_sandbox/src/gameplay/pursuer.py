"""Yeti pursuit model: speed ramp, danger zones and the chasing driver."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .audio import AudioCue, AudioService, NullAudioService
from .events import Signal

LOGGER = logging.getLogger(__name__)


# //1.- Ordered so "zone >= DANGER" reads naturally in effect code.
class PursuerZone(IntEnum):
    SAFE = 0
    WARNING = 1
    DANGER = 2
    CRITICAL = 3


@dataclass(frozen=True)
class PursuerConfig:
    base_speed: float = 80.0
    max_speed: float = 150.0
    ramp_duration: float = 120.0
    safe_distance: float = 50.0
    warning_distance: float = 30.0
    danger_distance: float = 10.0
    catch_distance: float = 2.0
    start_offset: float = 60.0

    def __post_init__(self) -> None:
        if self.ramp_duration <= 0:
            raise ValueError("ramp_duration must be positive")
        if self.max_speed < self.base_speed:
            raise ValueError("max_speed must be at least base_speed")
        if not self.safe_distance > self.warning_distance > self.danger_distance >= self.catch_distance:
            raise ValueError("zone thresholds must satisfy safe > warning > danger >= catch")


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def _inverse_lerp(start: float, end: float, value: float) -> float:
    if start == end:
        return 0.0
    return _clamp01((value - start) / (end - start))


# //2.- Pure helpers over the config; the driver below is the only stateful part.
def pursuer_speed(config: PursuerConfig, elapsed: float) -> float:
    return _lerp(config.base_speed, config.max_speed, _clamp01(elapsed / config.ramp_duration))


def pursuer_zone(config: PursuerConfig, distance: float) -> PursuerZone:
    if distance > config.safe_distance:
        return PursuerZone.SAFE
    if distance > config.warning_distance:
        return PursuerZone.WARNING
    if distance > config.danger_distance:
        return PursuerZone.DANGER
    return PursuerZone.CRITICAL


def tension(config: PursuerConfig, distance: float) -> float:
    """Presentation-only 0-1 intensity, rising as the pursuer closes in."""

    if distance >= config.safe_distance:
        return 0.0
    return _inverse_lerp(config.safe_distance, config.catch_distance, distance)


def has_caught(config: PursuerConfig, distance: float) -> bool:
    return distance <= config.catch_distance


class PursuerDriver:
    """Move the pursuer down the slope toward the player each fixed step."""

    def __init__(self, config: Optional[PursuerConfig] = None, audio: Optional[AudioService] = None) -> None:
        self.config = config or PursuerConfig()
        self._audio = audio or NullAudioService()
        self.x = 0.0
        self.y = 0.0
        self.speed = self.config.base_speed
        self.distance = float("inf")
        self.zone = PursuerZone.SAFE
        self.active = False
        self.zone_changed = Signal("zone_changed")
        self.player_caught = Signal("player_caught")

    @property
    def tension(self) -> float:
        return tension(self.config, self.distance)

    def activate(self, player_x: float, player_y: float) -> None:
        # //3.- Drop in a fixed distance upslope of the player.
        self.x = float(player_x)
        self.y = float(player_y) + self.config.start_offset
        self.distance = self.y - float(player_y)
        self.speed = self.config.base_speed
        self.zone = PursuerZone.SAFE
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def step(self, elapsed: float, player_x: float, player_y: float, dt: float) -> None:
        if not self.active:
            return
        self.speed = pursuer_speed(self.config, elapsed)
        # //4.- Snap onto the catch offset once level so the pursuer cannot oscillate.
        if self.y > player_y:
            self.y -= self.speed * dt
        else:
            self.y = player_y + self.config.catch_distance
        self.x = float(player_x)
        self.distance = self.y - player_y

        zone = pursuer_zone(self.config, self.distance)
        if zone is not self.zone:
            self.zone = zone
            LOGGER.info("Pursuer zone changed to %s (distance %.1f)", zone.name, self.distance)
            self.zone_changed.emit(zone)

        if has_caught(self.config, self.distance):
            self.active = False
            LOGGER.info("Pursuer caught the player at distance %.2f", self.distance)
            self._audio.stop_loop()
            self._audio.play_sfx(AudioCue.YETI_CATCH)
            self.player_caught.emit()


@dataclass(frozen=True)
class PursuerCueSettings:
    growl_interval_base: float = 8.0
    growl_interval_min: float = 2.0
    footstep_interval: float = 0.5


class PursuerCues:
    """Schedule growl and footstep cues from the driver's zone and tension."""

    def __init__(
        self,
        driver: PursuerDriver,
        audio: AudioService,
        settings: Optional[PursuerCueSettings] = None,
    ) -> None:
        self._driver = driver
        self._audio = audio
        self.settings = settings or PursuerCueSettings()
        self._clock = 0.0
        self._next_growl = 0.0
        self._next_footstep = 0.0

    def reset(self) -> None:
        self._clock = 0.0
        self._next_growl = 0.0
        self._next_footstep = 0.0

    def update(self, dt: float) -> None:
        if not self._driver.active:
            return
        self._clock += dt
        zone = self._driver.zone
        if zone >= PursuerZone.WARNING and self._clock >= self._next_growl:
            factor = self._driver.tension
            interval = _lerp(self.settings.growl_interval_base, self.settings.growl_interval_min, factor)
            self._next_growl = self._clock + interval
            self._audio.play_sfx(AudioCue.YETI_GROWL, 0.3 + factor * 0.7)
        if zone >= PursuerZone.DANGER and self._clock >= self._next_footstep:
            self._next_footstep = self._clock + self.settings.footstep_interval
            volume = 0.8 if zone is PursuerZone.CRITICAL else 0.5
            self._audio.play_sfx(AudioCue.YETI_FOOTSTEP, volume)
