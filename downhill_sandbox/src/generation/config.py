"""Seed configuration helpers for deterministic course generation."""
from __future__ import annotations

import json
import logging
import os
import random
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

LOGGER = logging.getLogger(__name__)

DEFAULT_SEED = 12345


# //1.- Define dataclass holding the weekly seed and the pool of test seeds.
@dataclass(frozen=True)
class SeedConfig:
    """Seeds driving course generation; weekly runs share one seed."""

    weekly_seed: int = DEFAULT_SEED
    test_seeds: Tuple[int, ...] = field(default_factory=tuple)

    # //2.- Build from a decoded JSON payload, tolerating missing or bad entries.
    @classmethod
    def from_mapping(cls, payload: Optional[Mapping[str, object]] = None) -> "SeedConfig":
        if not payload:
            return cls()
        try:
            weekly = int(payload.get("weeklySeed", payload.get("weekly_seed", DEFAULT_SEED)))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            LOGGER.warning("Unparseable weekly seed %r, using default seed", payload.get("weeklySeed"))
            weekly = DEFAULT_SEED
        raw_tests = payload.get("testSeeds", payload.get("test_seeds", ()))
        tests = []
        if isinstance(raw_tests, (list, tuple)):
            for value in raw_tests:
                try:
                    tests.append(int(value))
                except (TypeError, ValueError):
                    LOGGER.warning("Skipping unparseable test seed %r", value)
        return cls(weekly_seed=weekly, test_seeds=tuple(tests))

    # //3.- Allow overriding the weekly seed through the environment.
    @classmethod
    def from_environment(cls, prefix: str = "DOWNHILL", base: Optional["SeedConfig"] = None) -> "SeedConfig":
        base = base or cls()
        raw = os.getenv(f"{prefix}_WEEKLY_SEED")
        if raw is None:
            return base
        try:
            return cls(weekly_seed=int(raw), test_seeds=base.test_seeds)
        except ValueError:
            LOGGER.warning("Ignoring non-integer %s_WEEKLY_SEED=%r", prefix, raw)
            return base

    def choose_seed(self, use_weekly: bool = True, rng: Optional[random.Random] = None) -> int:
        if use_weekly:
            return self.weekly_seed
        if self.test_seeds:
            return (rng or random.Random()).choice(self.test_seeds)
        return DEFAULT_SEED


def _default_seed_path() -> str:
    base_dir = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    return os.path.join(base_dir, "config", "seeds.json")


# //4.- Canonical accessor: mapping wins, then file, then the default seed.
def load_seed_config(
    path: Optional[str] = None,
    *,
    mapping: Optional[Mapping[str, object]] = None,
    env_prefix: Optional[str] = None,
) -> SeedConfig:
    if mapping is not None:
        config = SeedConfig.from_mapping(mapping)
    else:
        config = _read_seed_file(path or _default_seed_path())
    if env_prefix:
        config = SeedConfig.from_environment(prefix=env_prefix, base=config)
    return config


def _read_seed_file(path: str) -> SeedConfig:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError:
        LOGGER.warning("No seeds file at %s, using default seed", path)
        return SeedConfig()
    except (OSError, json.JSONDecodeError) as exc:
        LOGGER.warning("Could not read seeds file %s (%s), using default seed", path, exc)
        return SeedConfig()
    if not isinstance(payload, Mapping):
        LOGGER.warning("Seeds file %s is not a JSON object, using default seed", path)
        return SeedConfig()
    return SeedConfig.from_mapping(payload)
