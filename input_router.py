# -*- coding: utf-8 -*-
########################
# input_router.py
########################
# Purpose:
# - Single keyboard listener for the four reaction controls.
# - Translates key presses into gameplay_models.EventKind and emits a Qt signal.
#
# Design notes:
# - This must be the only control input source for the keyboard. No duplicate key mapping elsewhere.
# - Debounce rules:
#   - Ignore auto repeat.
#   - Track pressed keys to avoid duplicate presses.
# - The router never judges timing. GameLoop.handle_interaction stamps and judges the press.
# - Only QtCore is used; key events are read through key() and isAutoRepeat().
#
########################
# Interfaces:
# Public classes:
# - class InputRouter(PyQt6.QtCore.QObject)
#   - Signals:
#     - interaction(gameplay_models.EventKind)
#   - Methods:
#     - handle_key_press(event) -> bool
#     - handle_key_release(event) -> bool
#     - clear_pressed_keys() -> None
#
# Inputs:
# - Raw QKeyEvent from the Qt event loop (anything exposing key() and isAutoRepeat()).
#
# Outputs:
# - EventKind presses consumed by GameLoop.handle_interaction.
#
########################

from __future__ import annotations

from typing import Any, Dict, Optional, Set

from PyQt6.QtCore import QObject, Qt, pyqtSignal

import gameplay_models


def _build_default_key_to_kind_map() -> Dict[int, gameplay_models.EventKind]:
    """
    Default mapping for the four corner controls.

      JUMP  = top left      (Q, Up)
      COLOR = top right     (E, Right)
      TURN  = bottom left   (Z, Left)
      SHAPE = bottom right  (C, Down)
    """
    key_to_kind: Dict[int, gameplay_models.EventKind] = {}

    def bind(key_constant: Any, kind: gameplay_models.EventKind) -> None:
        key_to_kind[int(key_constant.value)] = kind

    # Corner letters
    bind(Qt.Key.Key_Q, gameplay_models.EventKind.JUMP)
    bind(Qt.Key.Key_E, gameplay_models.EventKind.COLOR)
    bind(Qt.Key.Key_Z, gameplay_models.EventKind.TURN)
    bind(Qt.Key.Key_C, gameplay_models.EventKind.SHAPE)

    # Arrow keys
    bind(Qt.Key.Key_Up, gameplay_models.EventKind.JUMP)
    bind(Qt.Key.Key_Right, gameplay_models.EventKind.COLOR)
    bind(Qt.Key.Key_Left, gameplay_models.EventKind.TURN)
    bind(Qt.Key.Key_Down, gameplay_models.EventKind.SHAPE)

    return key_to_kind


def _key_code(event: Any) -> int:
    key_value = event.key()
    return int(getattr(key_value, "value", key_value))


class InputRouter(QObject):
    """
    Central keyboard router for the reaction controls.

    Its only job is to:
      - map keys to event kinds
      - drop auto repeats and presses of keys that are still held
      - emit an EventKind for each valid press
    """

    interaction = pyqtSignal(object)

    def __init__(
        self,
        parent: Optional[QObject] = None,
        key_to_kind_map: Optional[Dict[int, gameplay_models.EventKind]] = None,
    ) -> None:
        super().__init__(parent)

        self._key_to_kind: Dict[int, gameplay_models.EventKind] = (
            dict(key_to_kind_map) if key_to_kind_map is not None else _build_default_key_to_kind_map()
        )

        # Press tracking for debounce and focus loss handling.
        self._pressed_keys: Set[int] = set()

    def handle_key_press(self, event: Any) -> bool:
        """
        Handle a key press.

        Returns True if this router consumed the event, False otherwise.
        """
        key_code = _key_code(event)
        kind = self._key_to_kind.get(key_code)

        if event.isAutoRepeat() or key_code in self._pressed_keys:
            return kind is not None

        if kind is None:
            return False

        self._pressed_keys.add(key_code)
        self.interaction.emit(kind)
        return True

    def handle_key_release(self, event: Any) -> bool:
        key_code = _key_code(event)

        if event.isAutoRepeat():
            return key_code in self._key_to_kind

        self._pressed_keys.discard(key_code)
        return key_code in self._key_to_kind

    def clear_pressed_keys(self) -> None:
        """Called on focus loss or window deactivation."""
        self._pressed_keys.clear()

    @property
    def key_to_kind_map(self) -> Dict[int, gameplay_models.EventKind]:
        return dict(self._key_to_kind)


def _run_unit_tests() -> None:
    router = InputRouter()

    assert router.key_to_kind_map[int(Qt.Key.Key_Q.value)] == gameplay_models.EventKind.JUMP
    assert router.key_to_kind_map[int(Qt.Key.Key_Up.value)] == gameplay_models.EventKind.JUMP
    assert router.key_to_kind_map[int(Qt.Key.Key_E.value)] == gameplay_models.EventKind.COLOR
    assert router.key_to_kind_map[int(Qt.Key.Key_Z.value)] == gameplay_models.EventKind.TURN
    assert router.key_to_kind_map[int(Qt.Key.Key_C.value)] == gameplay_models.EventKind.SHAPE


if __name__ == "__main__":
    _run_unit_tests()
    print("input_router.py: ok")
