# -*- coding: utf-8 -*-
########################
# timing_model.py
########################
# Purpose:
# - Single source of truth for wall-clock time in gameplay.
# - Converts a monotonic seconds source into the millisecond timestamps used by events and judgements.
#
# Design notes:
# - Gameplay code must use TimingModel.now_ms. Event fire times and reaction times share this clock.
# - No Qt usage. The time source is injected so tests can drive time by hand.
# - Time never runs backwards: a source that steps back is clamped to the last reading.
#
########################
# Interfaces:
# Public classes:
# - class TimingModel
#   - __init__(time_source: Callable[[], float] = time.monotonic)
#   - now_ms() -> float
#
# Public functions:
# - format_clock_text(seconds: int) -> str   ("m:ss" for the HUD)
#
########################

from __future__ import annotations

import time
from typing import Callable


def format_clock_text(seconds: int) -> str:
    total_seconds = max(0, int(seconds))
    minutes, remainder = divmod(total_seconds, 60)
    return f"{minutes}:{remainder:02d}"


class TimingModel:
    def __init__(self, time_source: Callable[[], float] = time.monotonic) -> None:
        self._time_source = time_source
        self._last_ms = float("-inf")

    def now_ms(self) -> float:
        value = float(self._time_source()) * 1000.0
        if value < self._last_ms:
            value = self._last_ms
        self._last_ms = value
        return value


def _run_unit_tests() -> None:
    readings = [1.0, 1.5, 1.2]
    model = TimingModel(lambda: readings.pop(0))
    assert model.now_ms() == 1000.0
    assert model.now_ms() == 1500.0
    assert model.now_ms() == 1500.0

    assert format_clock_text(0) == "0:00"
    assert format_clock_text(65) == "1:05"
    assert format_clock_text(600) == "10:00"


if __name__ == "__main__":
    _run_unit_tests()
    print("timing_model.py: ok")
