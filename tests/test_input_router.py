import pytest
from PyQt6.QtCore import Qt

import gameplay_models
import input_router

EventKind = gameplay_models.EventKind


class FakeKeyEvent:
    def __init__(self, key, auto_repeat=False):
        self._key = int(key.value)
        self._auto_repeat = auto_repeat

    def key(self):
        return self._key

    def isAutoRepeat(self):  # noqa: N802
        return self._auto_repeat


@pytest.fixture()
def router(qapp):
    routed = input_router.InputRouter()
    routed.pressed_kinds = []
    routed.interaction.connect(routed.pressed_kinds.append)
    return routed


@pytest.mark.parametrize(
    "key, kind",
    [
        (Qt.Key.Key_Q, EventKind.JUMP),
        (Qt.Key.Key_Up, EventKind.JUMP),
        (Qt.Key.Key_E, EventKind.COLOR),
        (Qt.Key.Key_Right, EventKind.COLOR),
        (Qt.Key.Key_Z, EventKind.TURN),
        (Qt.Key.Key_Left, EventKind.TURN),
        (Qt.Key.Key_C, EventKind.SHAPE),
        (Qt.Key.Key_Down, EventKind.SHAPE),
    ],
)
def test_default_mapping(router, key, kind):
    assert router.handle_key_press(FakeKeyEvent(key)) is True
    assert router.pressed_kinds == [kind]


def test_unmapped_key_is_not_consumed(router):
    assert router.handle_key_press(FakeKeyEvent(Qt.Key.Key_X)) is False
    assert router.pressed_kinds == []


def test_held_key_and_auto_repeat_are_debounced(router):
    router.handle_key_press(FakeKeyEvent(Qt.Key.Key_Q))
    assert router.handle_key_press(FakeKeyEvent(Qt.Key.Key_Q, auto_repeat=True)) is True
    assert router.handle_key_press(FakeKeyEvent(Qt.Key.Key_Q)) is True
    assert router.pressed_kinds == [EventKind.JUMP]

    assert router.handle_key_release(FakeKeyEvent(Qt.Key.Key_Q)) is True
    router.handle_key_press(FakeKeyEvent(Qt.Key.Key_Q))
    assert router.pressed_kinds == [EventKind.JUMP, EventKind.JUMP]


def test_clear_pressed_keys_after_focus_loss(router):
    router.handle_key_press(FakeKeyEvent(Qt.Key.Key_E))
    router.clear_pressed_keys()
    router.handle_key_press(FakeKeyEvent(Qt.Key.Key_E))
    assert router.pressed_kinds == [EventKind.COLOR, EventKind.COLOR]
