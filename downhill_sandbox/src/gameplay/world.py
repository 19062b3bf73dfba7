"""Run orchestrator stitching course streaming, gates, pursuit and skier motion."""
from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, Sequence, Tuple

from ..generation.course import CourseGenerator
from .audio import AudioCue, AudioService, NullAudioService
from .events import Signal
from .gates import GateData, GateTracker
from .obstacles import CollisionHandler
from .pursuer import PursuerCues, PursuerDriver, PursuerZone
from .settings import RunSettings
from .skier import SkierInput, SkierMotion
from .streaming import TileStreamer

LOGGER = logging.getLogger(__name__)


# //1.- Lightweight telemetry client that posts run events when configured.
class TelemetryClient:
    def __init__(self, base_url: Optional[str] = None) -> None:
        self._base_url = base_url.rstrip("/") if base_url else None

    def post_event(self, event_type: str, payload: Dict[str, object]) -> None:
        if not self._base_url:
            return
        url = f"{self._base_url}/events/{event_type}"
        body = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(url, data=body, headers={"Content-Type": "application/json"}, method="POST")
        try:
            urllib.request.urlopen(request, timeout=2.0)
        except urllib.error.URLError as exc:
            LOGGER.warning("Telemetry post to %s failed: %s", url, exc)


class GameMode(Enum):
    TIME_TRIAL = auto()
    ENDLESS = auto()


class RunState(Enum):
    NOT_STARTED = auto()
    RUNNING = auto()
    FINISHED = auto()
    GAME_OVER = auto()


# //2.- Aggregate run statistics for telemetry reporting.
@dataclass
class RunStats:
    elapsed: float = 0.0
    distance: float = 0.0
    total_penalty: float = 0.0
    gates_missed: int = 0
    max_speed: float = 0.0
    collisions: int = 0

    @property
    def total_time(self) -> float:
        return self.elapsed + self.total_penalty

    def as_payload(self, seed: int) -> Dict[str, object]:
        return {
            "seed": seed,
            "elapsed": self.elapsed,
            "distance": self.distance,
            "total_penalty": self.total_penalty,
            "gates_missed": self.gates_missed,
            "total_time": self.total_time,
            "max_speed": self.max_speed,
            "collisions": self.collisions,
        }


@dataclass(frozen=True)
class RunSnapshot:
    state: RunState
    elapsed: float
    position: Tuple[float, float]
    velocity: Tuple[float, float]
    heading: float
    speed: float
    tile_index: int
    slope_multiplier: float
    pursuer_y: Optional[float]
    pursuer_distance: Optional[float]
    pursuer_zone: Optional[PursuerZone]
    total_penalty: float
    distance: float


# //3.- Orchestrate one run: owns the clock, penalties and lifecycle transitions.
class RunOrchestrator:
    def __init__(
        self,
        seed: int,
        mode: GameMode = GameMode.TIME_TRIAL,
        settings: Optional[RunSettings] = None,
        audio: Optional[AudioService] = None,
        telemetry: Optional[TelemetryClient] = None,
        start_position: Sequence[float] = (0.0, 0.0),
    ) -> None:
        self.seed = int(seed)
        self.mode = mode
        self.settings = settings or RunSettings()
        self.audio = audio or NullAudioService()
        self.telemetry = telemetry or TelemetryClient()
        self.start_position = (float(start_position[0]), float(start_position[1]))

        self.gates = GateTracker(self.settings.gates, self.audio)
        self.skier = SkierMotion(self.settings.skier, self.start_position, self.audio)
        self.collisions = CollisionHandler(self.skier, self.audio)
        self.pursuer = PursuerDriver(self.settings.pursuer, self.audio)
        self.pursuer_cues = PursuerCues(self.pursuer, self.audio)

        self.run_started = Signal("run_started")
        self.run_finished = Signal("run_finished")
        self.run_game_over = Signal("run_game_over")
        self.penalty_added = Signal("penalty_added")

        self.gates.gate_missed.connect(self._handle_gate_missed)
        self.pursuer.player_caught.connect(self._handle_player_caught)

        self.state = RunState.NOT_STARTED
        self.stats = RunStats()
        self._start_y = self.start_position[1]
        self._accumulator = 0.0
        self.streamer = self._build_streamer()

    @property
    def is_running(self) -> bool:
        return self.state is RunState.RUNNING

    @property
    def elapsed(self) -> float:
        return self.stats.elapsed

    @property
    def total_penalty(self) -> float:
        return self.stats.total_penalty

    @property
    def gates_missed(self) -> int:
        return self.stats.gates_missed

    @property
    def total_time(self) -> float:
        return self.stats.total_time

    @property
    def distance_traveled(self) -> float:
        return self.stats.distance

    @property
    def finish_line_y(self) -> Optional[float]:
        last_center = self.streamer.last_tile_center_y
        if last_center is None:
            return None
        return last_center - self.settings.loop.finish_line_offset

    def _build_streamer(self, previous: Optional[TileStreamer] = None) -> TileStreamer:
        streamer = TileStreamer(
            CourseGenerator(self.seed),
            self.settings.tiles,
            endless=self.mode is GameMode.ENDLESS,
            gate_tracker=self.gates,
            skier=self.skier,
        )
        if previous is not None:
            # Carry tile observers over so subscribers survive a restart.
            streamer.tile_spawned = previous.tile_spawned
            streamer.tile_despawned = previous.tile_despawned
        streamer.spawn_initial()
        return streamer

    def start(self) -> bool:
        if self.state is not RunState.NOT_STARTED:
            return False
        self.stats = RunStats()
        self._accumulator = 0.0
        self._start_y = float(self.skier.position[1])
        self.state = RunState.RUNNING
        if self.mode is GameMode.ENDLESS:
            self.pursuer.activate(float(self.skier.position[0]), self._start_y)
        self.pursuer_cues.reset()
        self.audio.play_sfx(AudioCue.GAME_START)
        self.audio.start_loop(AudioCue.SKI_LOOP)
        LOGGER.info("Run started (seed=%d, mode=%s)", self.seed, self.mode.name)
        self.telemetry.post_event(
            "start",
            {"seed": self.seed, "mode": self.mode.name, "position": list(self.start_position)},
        )
        self.run_started.emit()
        return True

    def restart(self) -> None:
        # //4.- Total reset: registry cleared, window rebuilt, clock zeroed.
        self.pursuer.deactivate()
        self.gates.clear()
        self.skier.reset(self.start_position)
        self.state = RunState.NOT_STARTED
        self.streamer = self._build_streamer(self.streamer)
        self.start()

    def shutdown(self) -> None:
        self.gates.gate_missed.disconnect(self._handle_gate_missed)
        self.pursuer.player_caught.disconnect(self._handle_player_caught)
        self.pursuer.deactivate()
        self.audio.stop_loop()

    def fixed_update(self, inputs: SkierInput, dt: float) -> None:
        if not self.is_running:
            return
        previous = self.skier.position.copy()
        self.skier.step(inputs, dt)
        self.stats.max_speed = max(self.stats.max_speed, self.skier.speed)
        self._resolve_collisions()
        self.gates.check_crossing(previous, self.skier.position, self.settings.skier.collision_radius)
        if self.mode is GameMode.ENDLESS and self.is_running:
            x, y = float(self.skier.position[0]), float(self.skier.position[1])
            self.pursuer.step(self.stats.elapsed, x, y, dt)

    def _resolve_collisions(self) -> None:
        x, y = float(self.skier.position[0]), float(self.skier.position[1])
        radius = self.settings.skier.collision_radius
        for obstacle in self.streamer.active_obstacles():
            if obstacle.hit or not obstacle.overlaps(x, y, radius):
                continue
            if self.collisions.resolve(obstacle):
                self.stats.collisions += 1

    def update(self, dt: float) -> None:
        if dt < 0:
            raise ValueError("dt must be non-negative")
        if self.is_running:
            y = float(self.skier.position[1])
            self.stats.elapsed += dt
            self.stats.distance = max(self.stats.distance, abs(y - self._start_y))
            self.streamer.update(y)
            self.gates.check_player_position(y)
            finish_y = self.finish_line_y
            if finish_y is not None and y <= finish_y:
                self.finish()
            self.pursuer_cues.update(dt)
        self.audio.update(dt)

    def tick(self, inputs: SkierInput, dt: float) -> RunSnapshot:
        """Run every fixed step owed for ``dt``, then one bookkeeping update."""

        if dt < 0:
            raise ValueError("dt must be non-negative")
        fixed_dt = self.settings.loop.fixed_dt
        self._accumulator += dt
        while self._accumulator >= fixed_dt:
            self.fixed_update(inputs, fixed_dt)
            self._accumulator -= fixed_dt
        self.update(dt)
        return self.snapshot()

    def add_time_penalty(self, penalty: float) -> None:
        self.stats.total_penalty += penalty
        self.stats.gates_missed += 1
        LOGGER.info("Penalty added: +%.1fs (total %.1fs)", penalty, self.stats.total_penalty)
        self.penalty_added.emit(penalty)

    def _handle_gate_missed(self, gate: GateData, penalty: float) -> None:
        self.add_time_penalty(penalty)

    def _handle_player_caught(self) -> None:
        self.trigger_game_over()

    def finish(self) -> bool:
        if not self.is_running or self.finish_line_y is None:
            return False
        self.state = RunState.FINISHED
        self.pursuer.deactivate()
        self.audio.stop_loop()
        self.audio.play_sfx(AudioCue.GAME_FINISH)
        total = self.stats.total_time
        LOGGER.info(
            "Finished: %.2fs + %.2fs penalty = %.2fs total",
            self.stats.elapsed,
            self.stats.total_penalty,
            total,
        )
        self.telemetry.post_event("finish", self.stats.as_payload(self.seed))
        self.run_finished.emit(total)
        return True

    def trigger_game_over(self) -> bool:
        if not self.is_running:
            return False
        self.state = RunState.GAME_OVER
        self.pursuer.deactivate()
        self.audio.play_sfx(AudioCue.GAME_OVER, 0.8)
        LOGGER.info("Game over: distance traveled %.0fm", self.stats.distance)
        self.telemetry.post_event("game_over", self.stats.as_payload(self.seed))
        self.run_game_over.emit(self.stats.distance)
        return True

    def snapshot(self) -> RunSnapshot:
        pursuer_active = self.mode is GameMode.ENDLESS and self.state is not RunState.NOT_STARTED
        return RunSnapshot(
            state=self.state,
            elapsed=self.stats.elapsed,
            position=(float(self.skier.position[0]), float(self.skier.position[1])),
            velocity=(float(self.skier.velocity[0]), float(self.skier.velocity[1])),
            heading=self.skier.heading,
            speed=self.skier.speed,
            tile_index=self.streamer.current_index,
            slope_multiplier=self.skier.slope_multiplier,
            pursuer_y=self.pursuer.y if pursuer_active else None,
            pursuer_distance=self.pursuer.distance if pursuer_active else None,
            pursuer_zone=self.pursuer.zone if pursuer_active else None,
            total_penalty=self.stats.total_penalty,
            distance=self.stats.distance,
        )
