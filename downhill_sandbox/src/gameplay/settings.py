"""Structured loader for run tunables bundled as JSON."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .gates import GateSettings
from .pursuer import PursuerConfig
from .skier import SkierParameters


# //1.- Capture tile geometry and streaming window sizes.
@dataclass(frozen=True)
class TileSettings:
    tile_height: float = 20.0
    tile_width: float = 15.0
    tiles_ahead: int = 3
    tiles_behind: int = 1
    total_tiles: int = 20
    endless_progress_span: int = 100

    def __post_init__(self) -> None:
        if self.tile_height <= 0 or self.tile_width <= 0:
            raise ValueError("tile dimensions must be positive")
        if self.tiles_ahead < 0 or self.tiles_behind < 0:
            raise ValueError("window sizes must be non-negative")
        if self.total_tiles <= 0:
            raise ValueError("total_tiles must be positive")
        if self.endless_progress_span <= 0:
            raise ValueError("endless_progress_span must be positive")


# //2.- Loop timing for the orchestrator.
@dataclass(frozen=True)
class LoopSettings:
    fixed_dt: float = 0.02
    finish_line_offset: float = 10.0

    def __post_init__(self) -> None:
        if self.fixed_dt <= 0:
            raise ValueError("fixed_dt must be positive")


# //3.- Aggregate complete run settings for downstream modules.
@dataclass(frozen=True)
class RunSettings:
    tiles: TileSettings = field(default_factory=TileSettings)
    skier: SkierParameters = field(default_factory=SkierParameters)
    pursuer: PursuerConfig = field(default_factory=PursuerConfig)
    gates: GateSettings = field(default_factory=GateSettings)
    loop: LoopSettings = field(default_factory=LoopSettings)


def _default_config_directory() -> str:
    base_dir = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    return os.path.join(base_dir, "config")


def _read_json_config(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


# //4.- Coerce every known key to float/int and reject unknown ones loudly.
def _coerce_section(section: str, payload: Mapping[str, Any], defaults: Any) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"section {section!r} must be a JSON object")
    known = {name: type(getattr(defaults, name)) for name in defaults.__dataclass_fields__}
    values: Dict[str, Any] = {}
    for key, raw in payload.items():
        if key not in known:
            raise ValueError(f"unknown setting {section}.{key}")
        try:
            values[key] = known[key](raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"invalid value for {section}.{key}: {raw!r}") from exc
    return values


def settings_from_mapping(payload: Mapping[str, Any]) -> RunSettings:
    return RunSettings(
        tiles=TileSettings(**_coerce_section("tiles", payload.get("tiles", {}), TileSettings())),
        skier=SkierParameters(**_coerce_section("skier", payload.get("skier", {}), SkierParameters())),
        pursuer=PursuerConfig(**_coerce_section("pursuer", payload.get("pursuer", {}), PursuerConfig())),
        gates=GateSettings(**_coerce_section("gates", payload.get("gates", {}), GateSettings())),
        loop=LoopSettings(**_coerce_section("run", payload.get("run", {}), LoopSettings())),
    )


# //5.- Public helper assembling the full settings bundle from disk.
def load_run_settings(config_path: Optional[str] = None) -> RunSettings:
    path = config_path or os.path.join(_default_config_directory(), "run.json")
    return settings_from_mapping(_read_json_config(path))
