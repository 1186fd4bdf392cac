import dataclasses

import pytest

import event_generator
import gameplay_models
import level_table

EventKind = gameplay_models.EventKind


def playing_state(**overrides):
    return dataclasses.replace(gameplay_models.GameState(is_playing=True), **overrides)


def test_kind_spans_cover_unit_interval_without_overlap():
    spans = event_generator.EVENT_KIND_SPANS
    assert spans[0].span_start == 0.0
    assert spans[-1].span_end == 1.0
    for previous, current in zip(spans, spans[1:]):
        assert previous.span_end == current.span_start
    assert {span.kind for span in spans} == set(EventKind)


@pytest.mark.parametrize(
    "sample, expected",
    [
        (0.0, EventKind.SHAPE),
        (0.2499, EventKind.SHAPE),
        (0.25, EventKind.COLOR),
        (0.4999, EventKind.COLOR),
        (0.5, EventKind.TURN),
        (0.7499, EventKind.TURN),
        (0.75, EventKind.JUMP),
        (0.9999, EventKind.JUMP),
    ],
)
def test_choose_event_kind_quartiles(sample, expected):
    assert event_generator.choose_event_kind(sample) == expected


def test_gate_above_probability_fires_nothing(scripted_rng):
    scripted_rng.queue(0.3)
    state = playing_state()
    result = event_generator.generate_event(state, change_frequency=0.3, now_ms=1000.0, rng=scripted_rng)
    assert result.fired_kind is None
    assert result.state is state


def test_level_multiplier_raises_gate_probability(scripted_rng):
    scripted_rng.queue(0.5)
    easy = event_generator.generate_event(playing_state(), change_frequency=0.3, now_ms=1000.0, rng=scripted_rng)
    assert easy.fired_kind is None

    scripted_rng.queue(0.5, 0.6)
    hard = event_generator.generate_event(
        playing_state(level=level_table.HARD), change_frequency=0.3, now_ms=1000.0, rng=scripted_rng
    )
    assert hard.fired_kind == EventKind.TURN


def test_cooldown_blocks_without_drawing(scripted_rng):
    state = playing_state(cooldown_until_ms=3000.0)
    result = event_generator.generate_event(state, change_frequency=0.9, now_ms=3000.0, rng=scripted_rng)
    assert result.fired_kind is None
    assert scripted_rng.random_calls == 0

    scripted_rng.queue(0.0, 0.6)
    after = event_generator.generate_event(state, change_frequency=0.9, now_ms=3001.0, rng=scripted_rng)
    assert after.fired_kind == EventKind.TURN


def test_shape_change_records_pending_event_and_cooldown(scripted_rng):
    scripted_rng.queue(0.1, 0.1, choices=[gameplay_models.Shape.SQUARE])
    result = event_generator.generate_event(playing_state(), change_frequency=0.3, now_ms=5000.0, rng=scripted_rng)

    assert result.fired_kind == EventKind.SHAPE
    assert result.state.shape == gameplay_models.Shape.SQUARE
    pending = result.state.pending_event(EventKind.SHAPE)
    assert pending.fired_at_ms == 5000.0
    assert pending.acknowledged is False
    assert result.state.cooldown_until_ms == 7000.0
    assert result.state.stats.events_fired == 1
    assert result.state.score == 0


def test_shape_drawing_current_value_is_a_no_op(scripted_rng):
    scripted_rng.queue(0.1, 0.1, choices=[gameplay_models.Shape.CIRCLE])
    state = playing_state()
    result = event_generator.generate_event(state, change_frequency=0.3, now_ms=5000.0, rng=scripted_rng)

    assert result.fired_kind is None
    assert result.state is state
    assert not result.state.pending_event(EventKind.SHAPE).has_fired
    assert result.state.cooldown_until_ms == gameplay_models.NEVER_FIRED_MS


def test_color_change(scripted_rng):
    scripted_rng.queue(0.1, 0.3, choices=[gameplay_models.Color.PURPLE])
    result = event_generator.generate_event(playing_state(), change_frequency=0.3, now_ms=5000.0, rng=scripted_rng)
    assert result.fired_kind == EventKind.COLOR
    assert result.state.color == gameplay_models.Color.PURPLE
    assert result.state.pending_event(EventKind.COLOR).fired_at_ms == 5000.0


def test_color_drawing_current_value_is_a_no_op(scripted_rng):
    scripted_rng.queue(0.1, 0.3, choices=[gameplay_models.Color.RED])
    state = playing_state()
    result = event_generator.generate_event(state, change_frequency=0.3, now_ms=5000.0, rng=scripted_rng)
    assert result.fired_kind is None
    assert result.state is state


def test_turn_always_flips_direction(scripted_rng):
    scripted_rng.queue(0.1, 0.6)
    result = event_generator.generate_event(playing_state(), change_frequency=0.3, now_ms=5000.0, rng=scripted_rng)
    assert result.fired_kind == EventKind.TURN
    assert result.state.direction == gameplay_models.Direction.COUNTER_CLOCKWISE

    scripted_rng.queue(0.1, 0.6)
    again = event_generator.generate_event(result.state, change_frequency=0.3, now_ms=8000.0, rng=scripted_rng)
    assert again.state.direction == gameplay_models.Direction.CLOCKWISE


def test_jump_records_event_without_moving(scripted_rng):
    scripted_rng.queue(0.1, 0.9)
    state = playing_state(position=4)
    result = event_generator.generate_event(state, change_frequency=0.3, now_ms=5000.0, rng=scripted_rng)
    assert result.fired_kind == EventKind.JUMP
    assert result.state.position == 4
    assert result.state.pending_event(EventKind.JUMP).fired_at_ms == 5000.0


def test_new_occurrence_overwrites_unacknowledged_one(scripted_rng):
    scripted_rng.queue(0.1, 0.9)
    first = event_generator.generate_event(playing_state(), change_frequency=0.3, now_ms=5000.0, rng=scripted_rng)
    scripted_rng.queue(0.1, 0.9)
    second = event_generator.generate_event(first.state, change_frequency=0.3, now_ms=9000.0, rng=scripted_rng)

    pending = second.state.pending_event(EventKind.JUMP)
    assert pending.fired_at_ms == 9000.0
    assert pending.acknowledged is False
    assert second.state.stats.events_fired == 2
