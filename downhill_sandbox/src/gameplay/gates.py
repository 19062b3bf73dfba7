"""Gate registry tracking passes and misses along the course."""
from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .audio import AudioCue, AudioService, NullAudioService
from .events import Signal

LOGGER = logging.getLogger(__name__)

DEFAULT_PENALTY_PER_MISS = 3.0
DEFAULT_MISS_BUFFER = 2.0
DEFAULT_GATE_HALF_WIDTH = 1.5


class GateState(Enum):
    PENDING = "pending"
    PASSED = "passed"
    MISSED = "missed"


# //1.- Mutable gate record; state only ever leaves PENDING once.
@dataclass(eq=False)
class GateData:
    index: int
    x: float
    y: float
    state: GateState = GateState.PENDING

    def mark_passed(self) -> bool:
        if self.state is not GateState.PENDING:
            return False
        self.state = GateState.PASSED
        return True

    def mark_missed(self) -> bool:
        if self.state is not GateState.PENDING:
            return False
        self.state = GateState.MISSED
        return True

    @property
    def is_pending(self) -> bool:
        return self.state is GateState.PENDING

    @property
    def is_passed(self) -> bool:
        return self.state is GateState.PASSED

    @property
    def is_missed(self) -> bool:
        return self.state is GateState.MISSED


@dataclass(frozen=True)
class GateSettings:
    penalty_per_miss: float = DEFAULT_PENALTY_PER_MISS
    miss_buffer: float = DEFAULT_MISS_BUFFER
    half_width: float = DEFAULT_GATE_HALF_WIDTH


def _descending_y(gate: GateData) -> float:
    return -gate.y


class GateTracker:
    """Keep gates sorted down the slope and resolve each exactly once."""

    def __init__(self, settings: Optional[GateSettings] = None, audio: Optional[AudioService] = None) -> None:
        self.settings = settings or GateSettings()
        self._audio = audio or NullAudioService()
        self._gates: List[GateData] = []
        self._next_index = 0
        self.gates_passed = 0
        self.gates_missed = 0
        self.gate_passed = Signal("gate_passed")
        self.gate_missed = Signal("gate_missed")

    @property
    def total_gates(self) -> int:
        return len(self._gates)

    @property
    def next_index(self) -> int:
        return self._next_index

    @property
    def penalty_per_miss(self) -> float:
        return self.settings.penalty_per_miss

    @property
    def total_penalty(self) -> float:
        return self.gates_missed * self.settings.penalty_per_miss

    @property
    def gates(self) -> Tuple[GateData, ...]:
        return tuple(self._gates)

    def get_gate(self, index: int) -> Optional[GateData]:
        if 0 <= index < len(self._gates):
            return self._gates[index]
        return None

    def register_gate(self, gate: GateData) -> None:
        # //2.- Binary insertion after equal Y keeps the same order a stable re-sort would.
        position = bisect.bisect_right(self._gates, _descending_y(gate), key=_descending_y)
        self._gates.insert(position, gate)
        if position < self._next_index:
            self._next_index += 1
        self._reindex()

    def unregister_gates(self, gates: Iterable[GateData]) -> None:
        doomed = {id(gate) for gate in gates}
        if not doomed:
            return
        self._gates = [gate for gate in self._gates if id(gate) not in doomed]
        self._reindex()
        # //3.- Re-anchor the cursor on the first unresolved gate still registered.
        self._next_index = next(
            (gate.index for gate in self._gates if gate.is_pending),
            len(self._gates),
        )

    def _reindex(self) -> None:
        for position, gate in enumerate(self._gates):
            gate.index = position

    def notify_passed(self, gate: GateData) -> None:
        if not gate.is_pending:
            return
        self._miss_gates_above(gate.y)
        gate.mark_passed()
        self.gates_passed += 1
        self._next_index = max(self._next_index, gate.index + 1)
        LOGGER.debug("Gate %d passed at y=%.2f", gate.index, gate.y)
        self._audio.play_sfx(AudioCue.GATE_PASS)
        self.gate_passed.emit(gate)

    def check_player_position(self, player_y: float) -> None:
        # //4.- Gates are position sorted, so the first unmissed gate ends the scan.
        for gate in self._gates[self._next_index:]:
            if not gate.is_pending:
                continue
            if player_y < gate.y - self.settings.miss_buffer:
                self._mark_missed(gate)
            else:
                break

    def check_crossing(
        self,
        previous: Sequence[float],
        current: Sequence[float],
        skier_radius: float = 0.0,
    ) -> List[GateData]:
        """Pass every pending gate whose line the skier crossed between ticks."""

        upper = max(float(previous[1]), float(current[1]))
        lower = min(float(previous[1]), float(current[1]))
        reach = self.settings.half_width + skier_radius
        crossed: List[GateData] = []
        for gate in tuple(self._gates[self._next_index:]):
            if gate.y > upper:
                continue
            if gate.y < lower:
                break
            if not gate.is_pending:
                continue
            # //5.- Interpolate the skier's X where the path meets the gate line.
            span = float(previous[1]) - float(current[1])
            t = (float(previous[1]) - gate.y) / span if span else 1.0
            x_at_gate = float(previous[0]) + (float(current[0]) - float(previous[0])) * t
            if abs(x_at_gate - gate.x) <= reach:
                self.notify_passed(gate)
                crossed.append(gate)
        return crossed

    def _miss_gates_above(self, gate_y: float) -> None:
        for gate in tuple(self._gates):
            if gate.is_pending and gate.y > gate_y:
                self._mark_missed(gate)

    def _mark_missed(self, gate: GateData) -> None:
        if not gate.mark_missed():
            return
        self.gates_missed += 1
        self._next_index = max(self._next_index, gate.index + 1)
        LOGGER.debug("Gate %d missed at y=%.2f", gate.index, gate.y)
        self._audio.play_sfx(AudioCue.GATE_MISS)
        self.gate_missed.emit(gate, self.settings.penalty_per_miss)

    def clear(self) -> None:
        self._gates.clear()
        self._next_index = 0
        self.gates_passed = 0
        self.gates_missed = 0
