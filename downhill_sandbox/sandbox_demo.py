"""Headless demonstration run for the downhill sandbox."""
from __future__ import annotations

import argparse
import json
import logging
import math
from typing import Optional

from .src.gameplay.gates import GateTracker
from .src.gameplay.settings import load_run_settings
from .src.gameplay.skier import SkierInput, SkierMotion
from .src.gameplay.world import GameMode, RunOrchestrator
from .src.generation.config import load_seed_config

LOGGER = logging.getLogger(__name__)

FRAME_DT = 1.0 / 60.0
HEADING_TOLERANCE_DEG = 2.0


def autopilot_input(skier: SkierMotion, gates: GateTracker) -> SkierInput:
    """Steer toward the next pending gate below the skier, tucking otherwise."""

    x, y = float(skier.position[0]), float(skier.position[1])
    target = next((gate for gate in gates.gates if gate.is_pending and gate.y < y), None)
    if target is None:
        return SkierInput(tuck=True)
    # //1.- Positive headings move toward -x, so the desired heading mirrors dx.
    desired = math.degrees(math.atan2(-(target.x - x), y - target.y))
    if desired > skier.heading + HEADING_TOLERANCE_DEG:
        return SkierInput(turn_left=True)
    if desired < skier.heading - HEADING_TOLERANCE_DEG:
        return SkierInput(turn_right=True)
    return SkierInput(tuck=True)


def run_demo(seed: int, mode: GameMode, duration: float, config_path: Optional[str] = None) -> dict:
    settings = load_run_settings(config_path)
    run = RunOrchestrator(seed, mode=mode, settings=settings)
    run.start()
    LOGGER.info("Course band: %s", run.streamer.band_summary())
    clock = 0.0
    while run.is_running and clock < duration:
        run.tick(autopilot_input(run.skier, run.gates), FRAME_DT)
        clock += FRAME_DT
    summary = run.stats.as_payload(run.seed)
    summary["mode"] = mode.name
    summary["state"] = run.state.name
    summary["gates_passed"] = run.gates.gates_passed
    run.shutdown()
    return summary


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Run a headless downhill course with an autopilot skier.")
    parser.add_argument("--seed", type=int, default=None, help="Course seed (defaults to the weekly seed)")
    parser.add_argument("--mode", choices=[mode.name.lower() for mode in GameMode], default="time_trial")
    parser.add_argument("--duration", type=float, default=120.0, help="Maximum simulated seconds")
    parser.add_argument("--seeds-file", type=str, default=None, help="Alternative seeds.json path")
    parser.add_argument("--config", type=str, default=None, help="Alternative run.json path")
    parser.add_argument("--log-level", type=str, default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="[%(asctime)s] %(levelname)s %(message)s")
    seed = args.seed
    if seed is None:
        seed = load_seed_config(args.seeds_file, env_prefix="DOWNHILL").choose_seed()
    summary = run_demo(seed, GameMode[args.mode.upper()], args.duration, args.config)
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
