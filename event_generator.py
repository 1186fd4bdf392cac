# -*- coding: utf-8 -*-
########################
# event_generator.py
########################
# Purpose:
# - Decide once per tick whether a mutation event fires and which kind it is.
# - Apply the mutation to a GameState and record the per-kind PendingEvent.
#
# Design notes:
# - No Qt usage. Pure gameplay logic; randomness and time are injected.
# - Draw order per tick (deterministic given the rng):
#   1) nothing at all while the global cooldown is active
#   2) gate sample, fires iff sample < change_frequency * level.frequency_multiplier
#   3) kind sample, mapped through EVENT_KIND_SPANS
#   4) SHAPE and COLOR draw a candidate from the whole enum; drawing the current value is a no-op
# - TURN flips direction. JUMP only records the event; position_integrator applies the extra steps.
# - A real mutation overwrites the kind's PendingEvent (an unacknowledged one is forfeited silently)
#   and pushes the cooldown to now + EVENT_COOLDOWN_MS. Score is never touched here.
#
########################
# Interfaces:
# Public dataclasses:
# - EventKindSpan(kind: EventKind, span_start: float, span_end: float)
# - GeneratedEvent(state: GameState, fired_kind: Optional[EventKind])
#
# Public constants:
# - EVENT_KIND_SPANS: tuple[EventKindSpan, ...] covering [0.0, 1.0) without overlap
#
# Public functions:
# - choose_event_kind(sample: float) -> EventKind
# - event_probability(change_frequency: float, level: Level) -> float
# - generate_event(state: GameState, *, change_frequency: float, now_ms: float, rng: random.Random) -> GeneratedEvent
#
########################

from __future__ import annotations

import dataclasses
import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

import gameplay_models
import level_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventKindSpan:
    kind: gameplay_models.EventKind
    span_start: float
    span_end: float

    def contains(self, sample: float) -> bool:
        return float(self.span_start) <= float(sample) < float(self.span_end)


EVENT_KIND_SPANS: Tuple[EventKindSpan, ...] = (
    EventKindSpan(kind=gameplay_models.EventKind.SHAPE, span_start=0.00, span_end=0.25),
    EventKindSpan(kind=gameplay_models.EventKind.COLOR, span_start=0.25, span_end=0.50),
    EventKindSpan(kind=gameplay_models.EventKind.TURN, span_start=0.50, span_end=0.75),
    EventKindSpan(kind=gameplay_models.EventKind.JUMP, span_start=0.75, span_end=1.00),
)


@dataclass(frozen=True)
class GeneratedEvent:
    state: gameplay_models.GameState
    fired_kind: Optional[gameplay_models.EventKind] = None


def choose_event_kind(sample: float) -> gameplay_models.EventKind:
    for span in EVENT_KIND_SPANS:
        if span.contains(sample):
            return span.kind
    # Samples outside [0, 1) clamp to the nearest end of the table.
    if float(sample) < EVENT_KIND_SPANS[0].span_start:
        return EVENT_KIND_SPANS[0].kind
    return EVENT_KIND_SPANS[-1].kind


def event_probability(change_frequency: float, level: level_table.Level) -> float:
    return float(change_frequency) * float(level.frequency_multiplier)


def _mutate(
    state: gameplay_models.GameState,
    kind: gameplay_models.EventKind,
    rng: random.Random,
) -> Optional[gameplay_models.GameState]:
    if kind == gameplay_models.EventKind.SHAPE:
        new_shape = gameplay_models.Shape(rng.choice(list(gameplay_models.Shape)))
        if new_shape == state.shape:
            return None
        return dataclasses.replace(state, shape=new_shape)

    if kind == gameplay_models.EventKind.COLOR:
        new_color = gameplay_models.Color(rng.choice(list(gameplay_models.Color)))
        if new_color == state.color:
            return None
        return dataclasses.replace(state, color=new_color)

    if kind == gameplay_models.EventKind.TURN:
        return dataclasses.replace(state, direction=gameplay_models.Direction(state.direction).flipped())

    return state


def generate_event(
    state: gameplay_models.GameState,
    *,
    change_frequency: float,
    now_ms: float,
    rng: random.Random,
) -> GeneratedEvent:
    now = float(now_ms)
    if now <= float(state.cooldown_until_ms):
        return GeneratedEvent(state=state)

    gate_sample = float(rng.random())
    if gate_sample >= event_probability(change_frequency, state.level):
        return GeneratedEvent(state=state)

    kind = choose_event_kind(float(rng.random()))
    mutated = _mutate(state, kind, rng)
    if mutated is None:
        logger.debug("event %s drew the current value; no change", kind.value)
        return GeneratedEvent(state=state)

    pending_event = gameplay_models.PendingEvent(kind=kind, fired_at_ms=now, acknowledged=False)
    stats = dataclasses.replace(mutated.stats, events_fired=int(mutated.stats.events_fired) + 1)
    next_state = dataclasses.replace(
        mutated,
        pending_events=mutated.with_pending_event(pending_event),
        cooldown_until_ms=now + gameplay_models.EVENT_COOLDOWN_MS,
        stats=stats,
    )
    logger.debug("event fired: %s at %.0f ms", kind.value, now)
    return GeneratedEvent(state=next_state, fired_kind=kind)


class _ScriptedRandom:
    def __init__(self, samples, choices=()) -> None:
        self._samples = list(samples)
        self._choices = list(choices)

    def random(self) -> float:
        return self._samples.pop(0)

    def choice(self, options):
        return self._choices.pop(0)


def _run_unit_tests() -> None:
    assert choose_event_kind(0.0) == gameplay_models.EventKind.SHAPE
    assert choose_event_kind(0.25) == gameplay_models.EventKind.COLOR
    assert choose_event_kind(0.74) == gameplay_models.EventKind.TURN
    assert choose_event_kind(0.99) == gameplay_models.EventKind.JUMP

    state = gameplay_models.GameState(is_playing=True)
    result = generate_event(state, change_frequency=0.3, now_ms=1000.0, rng=_ScriptedRandom([0.1, 0.6]))  # type: ignore[arg-type]
    assert result.fired_kind == gameplay_models.EventKind.TURN
    assert result.state.direction == gameplay_models.Direction.COUNTER_CLOCKWISE
    assert result.state.cooldown_until_ms == 3000.0

    cooled = generate_event(result.state, change_frequency=0.3, now_ms=2000.0, rng=_ScriptedRandom([]))  # type: ignore[arg-type]
    assert cooled.fired_kind is None


if __name__ == "__main__":
    _run_unit_tests()
    print("event_generator.py: ok")
