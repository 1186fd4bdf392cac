# -*- coding: utf-8 -*-
########################
# overlay_renderer.py
########################
# Purpose:
# - Gameplay overlay Qt widget.
# - Renders the circular track, the moving token and the HUD from the latest GameState.
#
########################
# Key Logic:
# - The token sits on one of 12 track positions (position_integrator.track_point), drawn in its
#   current shape and colour.
# - HUD: score, high score, level name and m:ss elapsed time.
# - Reaction feedback: the latest JudgementEvent text fades out after a short lifetime.
# - Banners: PAUSED while paused, the run summary after a game stops.
# - Strict boundaries:
#   - GameLoop provides state through set_game_state and set_judgement. The widget never mutates it.
#
########################
# Interfaces:
# Public dataclasses:
# - OverlayConfig(track_radius_ratio: float, token_size_pixels: float, feedback_lifetime_seconds: float, ...)
#
# Public classes:
# - class TrackOverlayWidget(PyQt6.QtWidgets.QWidget)
#   - set_game_state(state: GameState) -> None
#   - set_judgement(result: judge.JudgementResult) -> None
#   - set_run_summary(summary: Optional[RunSummary]) -> None
#
# Inputs:
# - GameLoop signals routed via MainWindow wiring.
#
# Outputs:
# - Painted overlay visuals on the widget surface.
#
########################

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from PyQt6.QtCore import QPointF, QRectF, Qt, QTimer
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen, QPolygonF
from PyQt6.QtWidgets import QWidget

import gameplay_models
import judge
import position_integrator
import timing_model

TOKEN_COLORS: Dict[gameplay_models.Color, QColor] = {
    gameplay_models.Color.RED: QColor(239, 68, 68),
    gameplay_models.Color.BLUE: QColor(59, 130, 246),
    gameplay_models.Color.GREEN: QColor(34, 197, 94),
    gameplay_models.Color.YELLOW: QColor(234, 179, 8),
    gameplay_models.Color.PURPLE: QColor(168, 85, 247),
}

FEEDBACK_COLORS: Dict[str, QColor] = {
    judge.JudgementOutcome.EXCELLENT.value: QColor(120, 255, 140),
    judge.JudgementOutcome.GOOD.value: QColor(255, 220, 120),
    judge.JudgementOutcome.MISSED.value: QColor(200, 200, 200),
}


@dataclass(frozen=True)
class OverlayConfig:
    track_radius_ratio: float = 0.30
    token_size_pixels: float = 60.0
    marker_size_pixels: float = 6.0
    feedback_lifetime_seconds: float = 0.9


class TrackOverlayWidget(QWidget):
    def __init__(self, *, config: Optional[OverlayConfig] = None, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._config = config or OverlayConfig()
        self._state = gameplay_models.GameState()
        self._summary: Optional[gameplay_models.RunSummary] = None

        self._feedback_text = ""
        self._feedback_color = QColor(240, 240, 240)
        self._feedback_started = -999.0

        self._paint_timer = QTimer(self)
        self._paint_timer.setInterval(16)
        self._paint_timer.timeout.connect(self.update)
        self._paint_timer.start()

    def set_game_state(self, state: gameplay_models.GameState) -> None:
        self._state = state
        if state.is_playing:
            self._summary = None

    def set_judgement(self, result: judge.JudgementResult) -> None:
        if result.event is None:
            return
        judgement = str(result.event.judgement)
        if result.points > 0:
            self._feedback_text = f"{judgement.upper()} +{result.points}"
        else:
            self._feedback_text = judgement.upper()
        self._feedback_color = FEEDBACK_COLORS.get(judgement, QColor(240, 240, 240))
        self._feedback_started = time.monotonic()

    def set_run_summary(self, summary: Optional[gameplay_models.RunSummary]) -> None:
        self._summary = summary

    def _track_center_and_radius(self) -> tuple[QPointF, float]:
        width = float(self.width())
        height = float(self.height())
        radius = min(width, height) * float(self._config.track_radius_ratio)
        return QPointF(width / 2.0, height / 2.0), radius

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), QBrush(QColor(17, 24, 39)))

        center, radius = self._track_center_and_radius()
        self._paint_track(painter, center, radius)
        self._paint_token(painter, center, radius)
        self._paint_hud(painter)
        self._paint_feedback(painter)

        if self._state.is_playing and self._state.is_paused:
            self._paint_banner(painter, ["PAUSED", "Space to resume"])
        elif not self._state.is_playing:
            self._paint_banner(painter, self._idle_banner_lines())

        painter.end()

    def _paint_track(self, painter: QPainter, center: QPointF, radius: float) -> None:
        painter.save()
        painter.setPen(QPen(QColor(31, 41, 55), 2.0))
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawEllipse(center, radius, radius)

        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(55, 65, 81)))
        marker = float(self._config.marker_size_pixels)
        for position in range(gameplay_models.TRACK_POSITIONS):
            x, y = position_integrator.track_point(position, center.x(), center.y(), radius)
            painter.drawEllipse(QPointF(x, y), marker, marker)
        painter.restore()

    def _paint_token(self, painter: QPainter, center: QPointF, radius: float) -> None:
        x, y = position_integrator.track_point(self._state.position, center.x(), center.y(), radius)
        half = float(self._config.token_size_pixels) / 2.0

        painter.save()
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(TOKEN_COLORS.get(self._state.color, QColor(240, 240, 240))))
        if self._state.shape == gameplay_models.Shape.CIRCLE:
            painter.drawEllipse(QPointF(x, y), half, half)
        elif self._state.shape == gameplay_models.Shape.SQUARE:
            painter.drawRect(QRectF(x - half, y - half, half * 2.0, half * 2.0))
        else:
            painter.drawPolygon(
                QPolygonF([QPointF(x, y - half), QPointF(x + half, y + half), QPointF(x - half, y + half)])
            )
        painter.restore()

    def _paint_hud(self, painter: QPainter) -> None:
        width = float(self.width())
        painter.save()
        painter.setPen(QPen(QColor(240, 240, 240)))
        painter.setFont(QFont("Arial", 28, weight=QFont.Weight.Bold))
        painter.drawText(QRectF(0.0, 12.0, width, 40.0), int(Qt.AlignmentFlag.AlignHCenter), str(self._state.score))

        painter.setPen(QPen(QColor(156, 163, 175)))
        painter.setFont(QFont("Arial", 10))
        painter.drawText(
            QRectF(0.0, 54.0, width, 16.0),
            int(Qt.AlignmentFlag.AlignHCenter),
            f"HIGH: {self._state.high_score}",
        )

        painter.setPen(QPen(QColor(250, 204, 21)))
        painter.setFont(QFont("Arial", 14))
        painter.drawText(QRectF(0.0, 72.0, width, 22.0), int(Qt.AlignmentFlag.AlignHCenter), self._state.level_name)

        painter.setPen(QPen(QColor(240, 240, 240)))
        painter.setFont(QFont("Arial", 11))
        painter.drawText(
            QRectF(0.0, 96.0, width, 18.0),
            int(Qt.AlignmentFlag.AlignHCenter),
            timing_model.format_clock_text(self._state.elapsed_seconds),
        )
        painter.restore()

    def _paint_feedback(self, painter: QPainter) -> None:
        age = time.monotonic() - self._feedback_started
        lifetime = float(self._config.feedback_lifetime_seconds)
        if not self._feedback_text or age < 0.0 or age > lifetime:
            return

        painter.save()
        painter.setOpacity(1.0 - min(1.0, age / lifetime))
        painter.setPen(QPen(self._feedback_color))
        painter.setFont(QFont("Arial", 18, weight=QFont.Weight.Bold))
        painter.drawText(
            QRectF(0.0, float(self.height()) / 2.0 - 14.0, float(self.width()), 28.0),
            int(Qt.AlignmentFlag.AlignHCenter),
            self._feedback_text,
        )
        painter.restore()

    def _idle_banner_lines(self) -> List[str]:
        if self._summary is None:
            return ["Press Enter to start"]

        stats = self._summary.stats
        lines = [
            "NEW HIGH SCORE!" if self._summary.is_new_high_score else "GAME OVER",
            f"Score {self._summary.score}   High {self._summary.high_score}",
            f"Caught {stats.events_caught} of {stats.events_fired} changes",
            f"Excellent {stats.excellent_count}   Good {stats.good_count}   Missed presses {stats.missed_presses}",
            f"Reached {self._summary.level_name} in {timing_model.format_clock_text(self._summary.elapsed_seconds)}",
            "Press Enter to play again",
        ]
        return lines

    def _paint_banner(self, painter: QPainter, lines: List[str]) -> None:
        line_height = 26.0
        block_height = line_height * float(len(lines)) + 24.0
        top = float(self.height()) / 2.0 - block_height / 2.0

        painter.save()
        painter.fillRect(self.rect(), QBrush(QColor(0, 0, 0, 128)))
        painter.setPen(QPen(QColor(240, 240, 240)))
        painter.setFont(QFont("Arial", 14, weight=QFont.Weight.Bold))
        for index, line in enumerate(lines):
            painter.drawText(
                QRectF(0.0, top + 12.0 + float(index) * line_height, float(self.width()), line_height),
                int(Qt.AlignmentFlag.AlignHCenter),
                line,
            )
        painter.restore()
