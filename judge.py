# -*- coding: utf-8 -*-
########################
# judge.py
########################
# Purpose:
# - Reaction judgement and scoring engine.
# - Matches a player interaction of one EventKind against that kind's PendingEvent.
# - Awards tiered points (excellent, good) and marks the occurrence acknowledged.
#
# Design notes:
# - No Qt usage. Pure gameplay logic.
# - Strict inputs: consume only the GameState, the pressed kind, the current time and the score windows.
# - Tiers are checked in order, first match wins. Beyond the good window nothing is awarded and the
#   PendingEvent stays unacknowledged. There is no penalty for late presses or forfeited events.
# - An acknowledged occurrence can never score again, so score only grows within a run.
# - A kind that has never fired has nothing to react to; pressing it changes nothing.
#
########################
# Interfaces:
# Public enums:
# - JudgementOutcome: EXCELLENT, GOOD, MISSED, IGNORED
#
# Public dataclasses:
# - ScoreWindow(time_ms: float, points: int)
# - ScoreWindows(excellent: ScoreWindow, good: ScoreWindow)
#   - classify_elapsed(elapsed_ms: float) -> Optional[tuple[JudgementOutcome, int]]
# - JudgementResult(state: GameState, outcome: JudgementOutcome, points: int, event: Optional[JudgementEvent])
#
# Public functions:
# - judge_interaction(state: GameState, kind: EventKind, *, now_ms: float, windows: ScoreWindows) -> JudgementResult
#
# Inputs:
# - EventKind pressed by the player and the current wall-clock time in milliseconds.
#
# Outputs:
# - Next GameState (score, pending event acknowledgement, run stats) and a JudgementEvent for the UI.
#
########################

from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import gameplay_models

logger = logging.getLogger(__name__)


class JudgementOutcome(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MISSED = "missed"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ScoreWindow:
    time_ms: float
    points: int


@dataclass(frozen=True)
class ScoreWindows:
    excellent: ScoreWindow
    good: ScoreWindow

    def classify_elapsed(self, elapsed_ms: float) -> Optional[Tuple[JudgementOutcome, int]]:
        elapsed = float(elapsed_ms)
        if elapsed <= float(self.excellent.time_ms):
            return JudgementOutcome.EXCELLENT, int(self.excellent.points)
        if elapsed <= float(self.good.time_ms):
            return JudgementOutcome.GOOD, int(self.good.points)
        return None


@dataclass(frozen=True)
class JudgementResult:
    state: gameplay_models.GameState
    outcome: JudgementOutcome
    points: int = 0
    event: Optional[gameplay_models.JudgementEvent] = None


def judge_interaction(
    state: gameplay_models.GameState,
    kind: gameplay_models.EventKind,
    *,
    now_ms: float,
    windows: ScoreWindows,
) -> JudgementResult:
    if not state.is_playing:
        return JudgementResult(state=state, outcome=JudgementOutcome.IGNORED)

    event_kind = gameplay_models.EventKind(kind)
    pending_event = state.pending_event(event_kind)
    if pending_event.acknowledged:
        return JudgementResult(state=state, outcome=JudgementOutcome.IGNORED)
    if not pending_event.has_fired:
        return JudgementResult(state=state, outcome=JudgementOutcome.IGNORED)

    elapsed_ms = float(now_ms) - float(pending_event.fired_at_ms)
    classified = windows.classify_elapsed(elapsed_ms)

    if classified is None:
        stats = dataclasses.replace(state.stats, missed_presses=int(state.stats.missed_presses) + 1)
        next_state = dataclasses.replace(state, stats=stats)
        judgement_event = gameplay_models.JudgementEvent(
            time_ms=float(now_ms),
            kind=event_kind,
            elapsed_ms=elapsed_ms,
            judgement=JudgementOutcome.MISSED.value,
            points=0,
        )
        logger.debug("press %s missed (elapsed %.0f ms)", event_kind.value, elapsed_ms)
        return JudgementResult(state=next_state, outcome=JudgementOutcome.MISSED, event=judgement_event)

    outcome, points = classified
    stats = state.stats
    if outcome == JudgementOutcome.EXCELLENT:
        stats = dataclasses.replace(stats, excellent_count=int(stats.excellent_count) + 1)
    else:
        stats = dataclasses.replace(stats, good_count=int(stats.good_count) + 1)
    stats = dataclasses.replace(stats, events_caught=int(stats.events_caught) + 1)

    acknowledged = dataclasses.replace(pending_event, acknowledged=True)
    next_state = dataclasses.replace(
        state,
        score=int(state.score) + int(points),
        pending_events=state.with_pending_event(acknowledged),
        stats=stats,
    )
    judgement_event = gameplay_models.JudgementEvent(
        time_ms=float(now_ms),
        kind=event_kind,
        elapsed_ms=elapsed_ms,
        judgement=outcome.value,
        points=int(points),
    )
    logger.debug("press %s judged %s (+%d, elapsed %.0f ms)", event_kind.value, outcome.value, points, elapsed_ms)
    return JudgementResult(state=next_state, outcome=outcome, points=int(points), event=judgement_event)


def _run_unit_tests() -> None:
    windows = ScoreWindows(excellent=ScoreWindow(time_ms=1000, points=20), good=ScoreWindow(time_ms=2000, points=10))
    jump = gameplay_models.PendingEvent(kind=gameplay_models.EventKind.JUMP, fired_at_ms=5000.0)
    state = gameplay_models.GameState(is_playing=True)
    state = dataclasses.replace(state, pending_events=state.with_pending_event(jump))

    hit = judge_interaction(state, gameplay_models.EventKind.JUMP, now_ms=5500.0, windows=windows)
    assert hit.outcome == JudgementOutcome.EXCELLENT
    assert hit.state.score == 20

    again = judge_interaction(hit.state, gameplay_models.EventKind.JUMP, now_ms=7000.0, windows=windows)
    assert again.outcome == JudgementOutcome.IGNORED
    assert again.state.score == 20

    stray = judge_interaction(state, gameplay_models.EventKind.SHAPE, now_ms=5500.0, windows=windows)
    assert stray.outcome == JudgementOutcome.IGNORED
    assert stray.state is state


if __name__ == "__main__":
    _run_unit_tests()
    print("judge.py: ok")
