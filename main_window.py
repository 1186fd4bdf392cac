# -*- coding: utf-8 -*-
########################
# main_window.py
########################
# Purpose:
# - Primary Qt window and UI host.
# - Hosts the track overlay, the four corner reaction buttons, the Start/Pause/Stop bar and the
#   settings dialog, and wires them to a GameLoop.
#
# Design notes:
# - MainWindow stays thin. It never changes game state directly; every intent goes through GameLoop.
# - Keyboard: Return starts, Space toggles pause, Escape stops, F11 toggles fullscreen.
#   Reaction keys are delegated to InputRouter.
# - Settings open while idle or paused and apply from the next tick. Spin box ranges are the UI ranges from config.
#
########################
# Interfaces:
# Public classes:
# - class SettingsDialog(PyQt6.QtWidgets.QDialog)
#   - values() -> dict   (partial settings mapping for GameLoop.update_settings)
# - class MainWindow(PyQt6.QtWidgets.QMainWindow)
#   - __init__(game_loop: GameLoop, router: Optional[InputRouter] = None)
#   - on_action_settings() -> None
#   - on_action_fullscreen_toggle() -> None
#
# Inputs:
# - QKeyEvent and button clicks.
#
# Outputs:
# - GameLoop intents; TrackOverlayWidget updates from GameLoop signals.
#
########################
# Unit Tests:
# - Keep as manual UI smoke:
#   - python vigi.py
########################

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtGui import QKeyEvent
from PyQt6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QDoubleSpinBox,
    QFormLayout,
    QGridLayout,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

import config
import game_loop
import gameplay_models
import input_router
import overlay_renderer

logger = logging.getLogger(__name__)

# (kind, row, column, accent) for the corner buttons around the overlay.
CORNER_BUTTONS = (
    (gameplay_models.EventKind.JUMP, 0, 0, "#a855f7"),
    (gameplay_models.EventKind.COLOR, 0, 2, "#3b82f6"),
    (gameplay_models.EventKind.TURN, 2, 0, "#22c55e"),
    (gameplay_models.EventKind.SHAPE, 2, 2, "#ef4444"),
)


class SettingsDialog(QDialog):
    def __init__(self, settings: config.GameSettings, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")

        self._base_speed = QSpinBox(self)
        self._base_speed.setRange(*config.BASE_SPEED_RANGE_MS)
        self._base_speed.setSingleStep(100)
        self._base_speed.setSuffix(" ms")
        self._base_speed.setValue(int(settings.base_speed_ms))

        self._change_frequency = QDoubleSpinBox(self)
        self._change_frequency.setRange(*config.CHANGE_FREQUENCY_RANGE)
        self._change_frequency.setSingleStep(0.1)
        self._change_frequency.setDecimals(1)
        self._change_frequency.setValue(float(settings.change_frequency))

        windows = settings.score_windows
        self._excellent_time = self._make_window_time(int(windows.excellent.time_ms))
        self._excellent_points = self._make_points(int(windows.excellent.points))
        self._good_time = self._make_window_time(int(windows.good.time_ms))
        self._good_points = self._make_points(int(windows.good.points))

        form = QFormLayout()
        form.addRow("Speed (ms per step)", self._base_speed)
        form.addRow("Change frequency", self._change_frequency)
        form.addRow("Excellent window", self._excellent_time)
        form.addRow("Excellent points", self._excellent_points)
        form.addRow("Good window", self._good_time)
        form.addRow("Good points", self._good_points)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel, parent=self
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(buttons)

    def _make_window_time(self, value: int) -> QSpinBox:
        spin_box = QSpinBox(self)
        spin_box.setRange(100, 10000)
        spin_box.setSingleStep(100)
        spin_box.setSuffix(" ms")
        spin_box.setValue(value)
        return spin_box

    def _make_points(self, value: int) -> QSpinBox:
        spin_box = QSpinBox(self)
        spin_box.setRange(0, 1000)
        spin_box.setValue(value)
        return spin_box

    def values(self) -> Dict[str, Any]:
        return {
            "base_speed_ms": int(self._base_speed.value()),
            "change_frequency": round(float(self._change_frequency.value()), 2),
            "score_windows": {
                "excellent": {"time_ms": int(self._excellent_time.value()), "points": int(self._excellent_points.value())},
                "good": {"time_ms": int(self._good_time.value()), "points": int(self._good_points.value())},
            },
        }


class MainWindow(QMainWindow):
    def __init__(
        self,
        game_loop_obj: game_loop.GameLoop,
        router: Optional[input_router.InputRouter] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Vigi")

        self._game_loop = game_loop_obj
        self._router = router if router is not None else input_router.InputRouter(parent=self)
        self._router.interaction.connect(self._game_loop.handle_interaction)

        self._overlay = overlay_renderer.TrackOverlayWidget(parent=self)
        self._overlay.set_game_state(self._game_loop.state())

        grid = QGridLayout()
        grid.addWidget(self._overlay, 0, 0, 3, 3)
        for kind, row, column, accent in CORNER_BUTTONS:
            button = QPushButton(kind.value, self)
            button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            button.setMinimumSize(120, 90)
            button.setStyleSheet(
                f"QPushButton {{ color: {accent}; border: 3px solid {accent}; border-radius: 18px;"
                " background: transparent; font-weight: bold; font-size: 16px; }"
                " QPushButton:pressed { background: rgba(255, 255, 255, 25); }"
            )
            button.clicked.connect(lambda _checked=False, pressed_kind=kind: self._game_loop.handle_interaction(pressed_kind))
            alignment = (Qt.AlignmentFlag.AlignTop if row == 0 else Qt.AlignmentFlag.AlignBottom) | (
                Qt.AlignmentFlag.AlignLeft if column == 0 else Qt.AlignmentFlag.AlignRight
            )
            grid.addWidget(button, row, column, alignment)

        self._start_button = self._make_bar_button("Start", self._game_loop.start)
        self._pause_button = self._make_bar_button("Pause", self._game_loop.toggle_pause)
        self._stop_button = self._make_bar_button("Stop", self._game_loop.stop)
        self._settings_button = self._make_bar_button("Settings", self.on_action_settings)

        bar = QHBoxLayout()
        bar.addStretch(1)
        for button in (self._start_button, self._pause_button, self._stop_button, self._settings_button):
            bar.addWidget(button)
        bar.addStretch(1)

        root_layout = QVBoxLayout()
        root_layout.addLayout(grid, 1)
        root_layout.addLayout(bar)

        root_widget = QWidget(self)
        root_widget.setLayout(root_layout)
        self.setCentralWidget(root_widget)

        self._game_loop.stateChanged.connect(self._on_state_changed)
        self._game_loop.reactionJudged.connect(self._overlay.set_judgement)
        self._game_loop.gameStopped.connect(self._overlay.set_run_summary)
        self._sync_buttons(self._game_loop.state())

    def _make_bar_button(self, text: str, handler) -> QPushButton:
        button = QPushButton(text, self)
        button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        button.clicked.connect(lambda _checked=False: handler())
        return button

    def _on_state_changed(self, state: gameplay_models.GameState) -> None:
        self._overlay.set_game_state(state)
        self._sync_buttons(state)

    def _sync_buttons(self, state: gameplay_models.GameState) -> None:
        self._start_button.setText("Restart" if state.is_playing else "Start")
        self._pause_button.setEnabled(state.is_playing)
        self._pause_button.setText("Resume" if state.is_paused else "Pause")
        self._stop_button.setEnabled(state.is_playing)
        self._settings_button.setEnabled(not state.is_playing or state.is_paused)

    # -----------------
    # Menu-like actions
    # -----------------

    def on_action_settings(self) -> None:
        dialog = SettingsDialog(self._game_loop.settings(), parent=self)
        if dialog.exec() != QDialog.DialogCode.Accepted.value:
            return
        try:
            self._game_loop.update_settings(dialog.values())
        except ValueError as exception:
            logger.warning("settings rejected: %s", exception)
            QMessageBox.warning(self, "Settings", str(exception))

    def on_action_fullscreen_toggle(self) -> None:
        if self.isFullScreen():
            self.showNormal()
        else:
            self.showFullScreen()

    # -----------------
    # Keyboard
    # -----------------

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        key = int(event.key())
        if not event.isAutoRepeat():
            if key in (Qt.Key.Key_Return.value, Qt.Key.Key_Enter.value):
                self._game_loop.start()
                event.accept()
                return
            if key == Qt.Key.Key_Space.value:
                self._game_loop.toggle_pause()
                event.accept()
                return
            if key == Qt.Key.Key_Escape.value:
                if self._game_loop.state().is_playing:
                    self._game_loop.stop()
                elif self.isFullScreen():
                    self.showNormal()
                event.accept()
                return
            if key == Qt.Key.Key_F11.value:
                self.on_action_fullscreen_toggle()
                event.accept()
                return

        if self._router.handle_key_press(event):
            event.accept()
            return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if self._router.handle_key_release(event):
            event.accept()
            return
        super().keyReleaseEvent(event)

    def changeEvent(self, event: QEvent) -> None:  # noqa: N802
        if event.type() == QEvent.Type.ActivationChange and not self.isActiveWindow():
            self._router.clear_pressed_keys()
            self._game_loop.pause()
        super().changeEvent(event)
