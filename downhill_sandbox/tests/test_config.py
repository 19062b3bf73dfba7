"""Tests for seed configuration loading and fallbacks."""
from __future__ import annotations

import json
import logging
import random

from downhill_sandbox.src.generation import DEFAULT_SEED, SeedConfig, load_seed_config


# //1.- Bundled seeds file carries the weekly seed and the test pool.
def test_bundled_seed_file():
    config = load_seed_config()
    assert config.weekly_seed == 12345
    assert config.test_seeds == (54321, 99999, 2024, 777)


def test_missing_file_falls_back_to_default(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        config = load_seed_config(str(tmp_path / "missing.json"))
    assert config.weekly_seed == DEFAULT_SEED
    assert config.test_seeds == ()
    assert "No seeds file" in caplog.text


def test_corrupt_file_falls_back_to_default(tmp_path):
    path = tmp_path / "seeds.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_seed_config(str(path)).weekly_seed == DEFAULT_SEED
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_seed_config(str(path)).weekly_seed == DEFAULT_SEED


def test_custom_file(tmp_path):
    path = tmp_path / "seeds.json"
    path.write_text(json.dumps({"weeklySeed": 42, "testSeeds": [1, "x", 3]}), encoding="utf-8")
    config = load_seed_config(str(path))
    assert config.weekly_seed == 42
    assert config.test_seeds == (1, 3)


def test_mapping_accepts_snake_case_and_bad_values():
    assert SeedConfig.from_mapping({"weekly_seed": "7"}).weekly_seed == 7
    assert SeedConfig.from_mapping({"weeklySeed": "seven"}).weekly_seed == DEFAULT_SEED
    assert SeedConfig.from_mapping(None) == SeedConfig()


def test_environment_override(monkeypatch):
    monkeypatch.setenv("DOWNHILL_WEEKLY_SEED", "2468")
    config = load_seed_config(mapping={"weeklySeed": 1, "testSeeds": [5]}, env_prefix="DOWNHILL")
    assert config.weekly_seed == 2468
    assert config.test_seeds == (5,)
    monkeypatch.setenv("DOWNHILL_WEEKLY_SEED", "nope")
    assert load_seed_config(mapping={"weeklySeed": 1}, env_prefix="DOWNHILL").weekly_seed == 1


def test_choose_seed():
    config = SeedConfig(weekly_seed=10, test_seeds=(1, 2, 3))
    assert config.choose_seed() == 10
    assert config.choose_seed(use_weekly=False, rng=random.Random(0)) in (1, 2, 3)
    assert SeedConfig(test_seeds=()).choose_seed(use_weekly=False) == DEFAULT_SEED
