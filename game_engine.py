# -*- coding: utf-8 -*-
########################
# game_engine.py
########################
# Purpose:
# - Pure state transitions for one game run.
# - Composes event_generator, position_integrator, level_table and judge into tick, heartbeat and
#   interaction steps that take the current GameState and return the next one.
#
# Design notes:
# - No Qt usage. No timers. GameLoop owns scheduling and calls into this module.
# - Tick order is fixed: generate event -> integrate position -> return state.
#   The integrator reads the post-mutation direction, so a TURN fired this tick already steers this tick.
# - The next tick delay is derived from the level in effect when the tick started.
# - Every transition is a no-op unless the game is playing and not paused (interactions only need playing).
#
########################
# Interfaces:
# Public dataclasses:
# - TickOutcome(state: GameState, fired_kind: Optional[EventKind], next_delay_ms: int)
#
# Public functions:
# - new_game_state(high_score: int = 0) -> GameState
# - start_game(state: GameState) -> GameState
# - set_paused(state: GameState, is_paused: bool) -> GameState
# - advance_tick(state, settings, *, now_ms, rng) -> TickOutcome
# - advance_heartbeat(state: GameState) -> GameState
# - apply_interaction(state, kind, settings, *, now_ms) -> judge.JudgementResult
# - end_game(state: GameState) -> tuple[GameState, RunSummary]
#
########################

from __future__ import annotations

import dataclasses
import random
from dataclasses import dataclass
from typing import Optional, Tuple

import config
import event_generator
import gameplay_models
import judge
import level_table
import position_integrator


@dataclass(frozen=True)
class TickOutcome:
    state: gameplay_models.GameState
    fired_kind: Optional[gameplay_models.EventKind]
    next_delay_ms: int


def new_game_state(high_score: int = 0) -> gameplay_models.GameState:
    return gameplay_models.GameState(high_score=max(0, int(high_score)))


def start_game(state: gameplay_models.GameState) -> gameplay_models.GameState:
    # Everything except the high score goes back to its initial value, including the cooldown.
    return gameplay_models.GameState(is_playing=True, is_paused=False, high_score=int(state.high_score))


def set_paused(state: gameplay_models.GameState, is_paused: bool) -> gameplay_models.GameState:
    if not state.is_playing or bool(state.is_paused) == bool(is_paused):
        return state
    return dataclasses.replace(state, is_paused=bool(is_paused))


def advance_tick(
    state: gameplay_models.GameState,
    settings: config.GameSettings,
    *,
    now_ms: float,
    rng: random.Random,
) -> TickOutcome:
    next_delay_ms = level_table.tick_delay_ms(settings.base_speed_ms, state.level)
    if not state.is_playing or state.is_paused:
        return TickOutcome(state=state, fired_kind=None, next_delay_ms=next_delay_ms)

    generated = event_generator.generate_event(
        state,
        change_frequency=float(settings.change_frequency),
        now_ms=float(now_ms),
        rng=rng,
    )
    after_event = generated.state

    steps = position_integrator.step_count_for_tick(after_event.pending_events, float(now_ms))
    position = position_integrator.integrate_position(after_event.position, steps, int(after_event.direction))
    next_state = dataclasses.replace(after_event, position=position)
    return TickOutcome(state=next_state, fired_kind=generated.fired_kind, next_delay_ms=next_delay_ms)


def advance_heartbeat(state: gameplay_models.GameState) -> gameplay_models.GameState:
    if not state.is_playing or state.is_paused:
        return state
    elapsed_seconds = int(state.elapsed_seconds) + 1
    return dataclasses.replace(
        state,
        elapsed_seconds=elapsed_seconds,
        level=level_table.level_for_elapsed_seconds(elapsed_seconds),
    )


def apply_interaction(
    state: gameplay_models.GameState,
    kind: gameplay_models.EventKind,
    settings: config.GameSettings,
    *,
    now_ms: float,
) -> judge.JudgementResult:
    return judge.judge_interaction(state, kind, now_ms=float(now_ms), windows=settings.to_score_windows())


def end_game(state: gameplay_models.GameState) -> Tuple[gameplay_models.GameState, gameplay_models.RunSummary]:
    is_new_high_score = int(state.score) > int(state.high_score)
    high_score = int(state.score) if is_new_high_score else int(state.high_score)
    stopped = dataclasses.replace(state, is_playing=False, is_paused=False, high_score=high_score)
    summary = gameplay_models.RunSummary(
        score=int(state.score),
        high_score=high_score,
        is_new_high_score=is_new_high_score,
        elapsed_seconds=int(state.elapsed_seconds),
        level_name=state.level.name,
        stats=state.stats,
    )
    return stopped, summary
