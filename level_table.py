# -*- coding: utf-8 -*-
########################
# level_table.py
########################
# Purpose:
# - Static difficulty tiers and the pure mapping from elapsed play time to a tier.
#
# Design notes:
# - No Qt usage. Pure and deterministic.
# - duration_threshold_seconds is the elapsed time at which a tier hands over to the next one.
#   The last tier has no successor, so its threshold is never used as an upper bound.
# - Tiers never revert: level_for_elapsed_seconds is monotonic in elapsed time.
#
########################
# Interfaces:
# Public dataclasses:
# - Level(name: str, duration_threshold_seconds: int, speed_multiplier: float, frequency_multiplier: float)
#
# Public constants:
# - EASY, MEDIUM, HARD, LEVELS (ordered easiest first)
#
# Public functions:
# - level_for_elapsed_seconds(elapsed_seconds: int) -> Level
# - tick_delay_ms(base_speed_ms: float, level: Level) -> int
#
########################

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Level:
    name: str
    duration_threshold_seconds: int
    speed_multiplier: float
    frequency_multiplier: float


EASY = Level(name="EASY", duration_threshold_seconds=4 * 60, speed_multiplier=1.0, frequency_multiplier=1.0)
MEDIUM = Level(name="MEDIUM", duration_threshold_seconds=8 * 60, speed_multiplier=0.7, frequency_multiplier=1.5)
HARD = Level(name="HARD", duration_threshold_seconds=12 * 60, speed_multiplier=0.4, frequency_multiplier=2.0)

LEVELS: Tuple[Level, ...] = (EASY, MEDIUM, HARD)


def level_for_elapsed_seconds(elapsed_seconds: int) -> Level:
    elapsed = int(elapsed_seconds)
    for level in LEVELS[:-1]:
        if elapsed < int(level.duration_threshold_seconds):
            return level
    return LEVELS[-1]


def tick_delay_ms(base_speed_ms: float, level: Level) -> int:
    delay = float(base_speed_ms) * float(level.speed_multiplier)
    return max(1, int(round(delay)))


def _run_unit_tests() -> None:
    assert level_for_elapsed_seconds(0) is EASY
    assert level_for_elapsed_seconds(239) is EASY
    assert level_for_elapsed_seconds(240) is MEDIUM
    assert level_for_elapsed_seconds(479) is MEDIUM
    assert level_for_elapsed_seconds(480) is HARD
    assert level_for_elapsed_seconds(10_000) is HARD
    assert tick_delay_ms(1000, MEDIUM) == 700


if __name__ == "__main__":
    _run_unit_tests()
    print("level_table.py: ok")
