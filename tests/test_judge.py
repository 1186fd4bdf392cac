import dataclasses

import pytest

import gameplay_models
import judge

EventKind = gameplay_models.EventKind

WINDOWS = judge.ScoreWindows(
    excellent=judge.ScoreWindow(time_ms=1000, points=20),
    good=judge.ScoreWindow(time_ms=2000, points=10),
)


def state_with_event(kind, fired_at_ms, **overrides):
    state = gameplay_models.GameState(is_playing=True)
    pending = gameplay_models.PendingEvent(kind=kind, fired_at_ms=fired_at_ms)
    return dataclasses.replace(state, pending_events=state.with_pending_event(pending), **overrides)


@pytest.mark.parametrize(
    "elapsed_ms, outcome, points",
    [
        (0, judge.JudgementOutcome.EXCELLENT, 20),
        (1000, judge.JudgementOutcome.EXCELLENT, 20),
        (1001, judge.JudgementOutcome.GOOD, 10),
        (2000, judge.JudgementOutcome.GOOD, 10),
        (2001, judge.JudgementOutcome.MISSED, 0),
    ],
)
def test_tiers_by_elapsed_time(elapsed_ms, outcome, points):
    state = state_with_event(EventKind.COLOR, 5000.0)
    result = judge.judge_interaction(state, EventKind.COLOR, now_ms=5000.0 + elapsed_ms, windows=WINDOWS)
    assert result.outcome == outcome
    assert result.points == points
    assert result.state.score == points


def test_jump_scenario_scores_once():
    state = state_with_event(EventKind.JUMP, 5000.0)

    first = judge.judge_interaction(state, EventKind.JUMP, now_ms=5500.0, windows=WINDOWS)
    assert first.state.score == 20
    assert first.state.pending_event(EventKind.JUMP).acknowledged is True
    assert first.event is not None and first.event.judgement == "excellent"

    second = judge.judge_interaction(first.state, EventKind.JUMP, now_ms=7000.0, windows=WINDOWS)
    assert second.outcome == judge.JudgementOutcome.IGNORED
    assert second.state is first.state
    assert second.state.score == 20


def test_late_press_awards_nothing_and_leaves_event_open():
    state = state_with_event(EventKind.COLOR, 0.0)
    result = judge.judge_interaction(state, EventKind.COLOR, now_ms=10_000.0, windows=WINDOWS)

    assert result.outcome == judge.JudgementOutcome.MISSED
    assert result.state.score == 0
    assert result.state.pending_event(EventKind.COLOR).acknowledged is False
    assert result.state.stats.missed_presses == 1


def test_never_fired_kind_cannot_score():
    state = gameplay_models.GameState(is_playing=True)
    for now_ms in (0.0, 500.0, 1e12):
        result = judge.judge_interaction(state, EventKind.SHAPE, now_ms=now_ms, windows=WINDOWS)
        assert result.outcome == judge.JudgementOutcome.IGNORED
        assert result.points == 0
        assert result.state is state
        assert result.event is None
        assert result.state.stats.missed_presses == 0


def test_not_playing_is_ignored():
    state = state_with_event(EventKind.TURN, 5000.0, is_playing=False)
    result = judge.judge_interaction(state, EventKind.TURN, now_ms=5100.0, windows=WINDOWS)
    assert result.outcome == judge.JudgementOutcome.IGNORED
    assert result.state is state
    assert result.event is None


def test_only_the_pressed_kind_is_matched():
    state = state_with_event(EventKind.TURN, 5000.0)
    result = judge.judge_interaction(state, EventKind.SHAPE, now_ms=5100.0, windows=WINDOWS)
    assert result.points == 0
    assert result.state.pending_event(EventKind.TURN).acknowledged is False


def test_stats_count_catches_by_tier():
    state = state_with_event(EventKind.TURN, 5000.0)
    pending = gameplay_models.PendingEvent(kind=EventKind.SHAPE, fired_at_ms=5000.0)
    state = dataclasses.replace(state, pending_events=state.with_pending_event(pending))

    state = judge.judge_interaction(state, EventKind.TURN, now_ms=5200.0, windows=WINDOWS).state
    state = judge.judge_interaction(state, EventKind.SHAPE, now_ms=6500.0, windows=WINDOWS).state

    assert state.score == 30
    assert state.stats.events_caught == 2
    assert state.stats.excellent_count == 1
    assert state.stats.good_count == 1


def test_score_never_decreases_over_many_presses():
    state = state_with_event(EventKind.COLOR, 0.0)
    previous_score = 0
    for now_ms in range(0, 5000, 250):
        for kind in EventKind:
            state = judge.judge_interaction(state, kind, now_ms=float(now_ms), windows=WINDOWS).state
            assert state.score >= previous_score >= 0
            previous_score = state.score
    assert state.score == 20
