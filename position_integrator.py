# -*- coding: utf-8 -*-
########################
# position_integrator.py
########################
# Purpose:
# - Advance the token around the 12-position circular track once per tick.
# - Map a track position to a point on screen for the renderer.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Wraparound uses Python's floor modulo, so negative directions land in [0, 11].
# - A tick moves JUMP_STEPS when a JUMP fired at exactly this tick's timestamp, otherwise NORMAL_STEPS.
#
########################
# Interfaces:
# Public functions:
# - integrate_position(position: int, steps: int, direction: int) -> int
# - step_count_for_tick(pending_events: Mapping[EventKind, PendingEvent], now_ms: float) -> int
# - track_point(position: int, center_x: float, center_y: float, radius: float) -> tuple[float, float]
#
########################

from __future__ import annotations

import math
from typing import Mapping, Tuple

import gameplay_models


def integrate_position(position: int, steps: int, direction: int) -> int:
    return (int(position) + int(steps) * int(direction)) % gameplay_models.TRACK_POSITIONS


def step_count_for_tick(
    pending_events: Mapping[gameplay_models.EventKind, gameplay_models.PendingEvent],
    now_ms: float,
) -> int:
    jump_event = pending_events.get(gameplay_models.EventKind.JUMP)
    if jump_event is not None and float(jump_event.fired_at_ms) == float(now_ms):
        return gameplay_models.JUMP_STEPS
    return gameplay_models.NORMAL_STEPS


def track_point(position: int, center_x: float, center_y: float, radius: float) -> Tuple[float, float]:
    # Position 0 sits at 12 o'clock; positions advance clockwise in screen space.
    degrees_per_position = 360.0 / float(gameplay_models.TRACK_POSITIONS)
    angle = math.radians(float(position) * degrees_per_position - 90.0)
    return (
        float(center_x) + float(radius) * math.cos(angle),
        float(center_y) + float(radius) * math.sin(angle),
    )


def _run_unit_tests() -> None:
    assert integrate_position(0, 1, -1) == 11
    assert integrate_position(11, 1, 1) == 0
    assert integrate_position(1, 3, -1) == 10
    assert integrate_position(10, 3, 1) == 1

    events = gameplay_models.never_fired_events()
    assert step_count_for_tick(events, 5000.0) == 1
    events[gameplay_models.EventKind.JUMP] = gameplay_models.PendingEvent(
        kind=gameplay_models.EventKind.JUMP, fired_at_ms=5000.0
    )
    assert step_count_for_tick(events, 5000.0) == 3
    assert step_count_for_tick(events, 6000.0) == 1

    x, y = track_point(0, 100.0, 100.0, 50.0)
    assert abs(x - 100.0) < 1e-9 and abs(y - 50.0) < 1e-9


if __name__ == "__main__":
    _run_unit_tests()
    print("position_integrator.py: ok")
