# -*- coding: utf-8 -*-
########################
# gameplay_models.py
########################
# Purpose:
# - Core gameplay data models for the timing/event engine.
# - Defines the token attributes, per-kind pending events and the authoritative GameState snapshot.
#
# Design notes:
# - Keep these models stable. Prefer extending with new optional fields rather than breaking changes.
# - No Qt usage. These are plain enums and frozen dataclasses.
# - Every transition builds a new GameState with dataclasses.replace; nothing mutates a snapshot in place.
#
########################
# Interfaces:
# Public enums:
# - EventKind: SHAPE, COLOR, TURN, JUMP
# - Shape: CIRCLE, SQUARE, TRIANGLE
# - Color: RED, BLUE, GREEN, YELLOW, PURPLE
# - Direction: CLOCKWISE (+1), COUNTER_CLOCKWISE (-1)
#
# Public dataclasses:
# - PendingEvent(kind: EventKind, fired_at_ms: float, acknowledged: bool)
# - RunStats(events_fired: int, events_caught: int, excellent_count: int, good_count: int, missed_presses: int)
# - GameState(is_playing, is_paused, score, high_score, elapsed_seconds, level, position, shape, color,
#             direction, pending_events, cooldown_until_ms, stats)
# - JudgementEvent(time_ms: float, kind: EventKind, elapsed_ms: float, judgement: str, points: int)
# - RunSummary(score, high_score, is_new_high_score, elapsed_seconds, level_name, stats)
#
# Public functions:
# - never_fired_events() -> dict[EventKind, PendingEvent]
#
# Inputs/Outputs:
# - These types are exchanged between event_generator, position_integrator, judge, game_engine,
#   game_loop and overlay_renderer.
#
########################

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Mapping

import level_table

TRACK_POSITIONS = 12
NORMAL_STEPS = 1
JUMP_STEPS = 3
EVENT_COOLDOWN_MS = 2000.0

# Fire time of a kind that has not occurred yet. Any "now" minus this is +inf,
# so it can never fall inside a reaction window.
NEVER_FIRED_MS = float("-inf")


class EventKind(str, enum.Enum):
    SHAPE = "SHAPE"
    COLOR = "COLOR"
    TURN = "TURN"
    JUMP = "JUMP"


class Shape(str, enum.Enum):
    CIRCLE = "circle"
    SQUARE = "square"
    TRIANGLE = "triangle"


class Color(str, enum.Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"


class Direction(enum.IntEnum):
    CLOCKWISE = 1
    COUNTER_CLOCKWISE = -1

    def flipped(self) -> "Direction":
        return Direction(-int(self))


@dataclass(frozen=True)
class PendingEvent:
    kind: EventKind
    fired_at_ms: float = NEVER_FIRED_MS
    acknowledged: bool = False

    @property
    def has_fired(self) -> bool:
        return self.fired_at_ms != NEVER_FIRED_MS


def never_fired_events() -> Dict[EventKind, PendingEvent]:
    return {kind: PendingEvent(kind=kind) for kind in EventKind}


@dataclass(frozen=True)
class RunStats:
    events_fired: int = 0
    events_caught: int = 0
    excellent_count: int = 0
    good_count: int = 0
    missed_presses: int = 0


@dataclass(frozen=True)
class GameState:
    is_playing: bool = False
    is_paused: bool = False
    score: int = 0
    high_score: int = 0
    elapsed_seconds: int = 0
    level: level_table.Level = level_table.EASY
    position: int = 0
    shape: Shape = Shape.CIRCLE
    color: Color = Color.RED
    direction: Direction = Direction.CLOCKWISE
    pending_events: Mapping[EventKind, PendingEvent] = field(default_factory=never_fired_events)
    cooldown_until_ms: float = NEVER_FIRED_MS
    stats: RunStats = field(default_factory=RunStats)

    @property
    def level_name(self) -> str:
        return self.level.name

    def pending_event(self, kind: EventKind) -> PendingEvent:
        return self.pending_events.get(EventKind(kind), PendingEvent(kind=EventKind(kind)))

    def with_pending_event(self, pending_event: PendingEvent) -> Dict[EventKind, PendingEvent]:
        updated = dict(self.pending_events)
        updated[pending_event.kind] = pending_event
        return updated


@dataclass(frozen=True)
class JudgementEvent:
    time_ms: float
    kind: EventKind
    elapsed_ms: float
    judgement: str
    points: int


@dataclass(frozen=True)
class RunSummary:
    score: int
    high_score: int
    is_new_high_score: bool
    elapsed_seconds: int
    level_name: str
    stats: RunStats
