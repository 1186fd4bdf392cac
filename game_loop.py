# -*- coding: utf-8 -*-
########################
# game_loop.py
########################
# Purpose:
# - The single authoritative run loop for a game.
# - Owns the GameState, the two timers (variable step loop, fixed one-second heartbeat) and the
#   asynchronous player interactions, and publishes every state change as a Qt signal.
#
# Design notes:
# - All mutation funnels through this object on the Qt thread. game_engine provides the transitions.
# - The step timer is single-shot and re-armed after every tick with the delay derived from the level
#   in effect when that tick started. Level changes therefore apply from the next scheduled tick on.
# - Each armed step carries a generation number. Pause, stop and restart revoke it, so a timeout
#   that was already queued by the event loop is discarded instead of running a stale tick.
# - start() while playing is an implicit restart. stop() while idle, pause() while paused and
#   resume() while running are no-ops.
# - The first tick of a run executes immediately on start(). After resume() the first tick waits a
#   full fresh delay.
# - The high score is written through HighScoreStore only when a stopped run beats it.
#
########################
# Interfaces:
# Public classes:
# - class GameLoop(PyQt6.QtCore.QObject)
#   - Signals:
#     - stateChanged(GameState)
#     - eventFired(EventKind)
#     - reactionJudged(JudgementResult)
#     - settingsChanged(GameSettings)
#     - gameStopped(RunSummary)
#   - Methods:
#     - start() -> None
#     - stop() -> Optional[RunSummary]
#     - pause() -> None, resume() -> None, toggle_pause() -> None
#     - handle_interaction(kind: EventKind | str) -> judge.JudgementResult
#     - update_settings(partial: Mapping[str, Any]) -> GameSettings
#     - state() -> GameState, settings() -> GameSettings, run_stats() -> RunStats
#     - last_summary() -> Optional[RunSummary]
#     - is_tick_scheduled() -> bool, is_heartbeat_running() -> bool, scheduled_delay_ms() -> Optional[int]
#
# Inputs:
# - UI intents (start, stop, pause, resume, settings updates) and InputRouter interactions.
# - TimingModel for wall-clock milliseconds and an injected random source.
#
# Outputs:
# - Signals consumed by TrackOverlayWidget and MainWindow.
#
########################

from __future__ import annotations

import logging
import random
from typing import Any, Mapping, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

import config
import game_engine
import gameplay_models
import high_score_store
import judge
import level_table
import timing_model

logger = logging.getLogger(__name__)

HEARTBEAT_INTERVAL_MS = 1000


class GameLoop(QObject):
    stateChanged = pyqtSignal(object)
    eventFired = pyqtSignal(object)
    reactionJudged = pyqtSignal(object)
    settingsChanged = pyqtSignal(object)
    gameStopped = pyqtSignal(object)

    def __init__(
        self,
        *,
        settings: Optional[config.GameSettings] = None,
        score_store: Optional[high_score_store.HighScoreStore] = None,
        timing: Optional[timing_model.TimingModel] = None,
        rng: Optional[random.Random] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings if settings is not None else config.GameSettings()
        self._score_store = score_store
        self._timing = timing if timing is not None else timing_model.TimingModel()
        self._rng = rng if rng is not None else random.Random()

        initial_high_score = self._score_store.load() if self._score_store is not None else 0
        self._state = game_engine.new_game_state(initial_high_score)
        self._last_summary: Optional[gameplay_models.RunSummary] = None

        self._step_generation = 0
        self._armed_generation: Optional[int] = None
        self._scheduled_delay_ms: Optional[int] = None

        self._step_timer = QTimer(self)
        self._step_timer.setSingleShot(True)
        self._step_timer.timeout.connect(self._on_step_timer)

        self._heartbeat_timer = QTimer(self)
        self._heartbeat_timer.setInterval(HEARTBEAT_INTERVAL_MS)
        self._heartbeat_timer.timeout.connect(self._on_heartbeat)

    # -----------------
    # Read access
    # -----------------

    def state(self) -> gameplay_models.GameState:
        return self._state

    def settings(self) -> config.GameSettings:
        return self._settings

    def run_stats(self) -> gameplay_models.RunStats:
        return self._state.stats

    def last_summary(self) -> Optional[gameplay_models.RunSummary]:
        return self._last_summary

    def is_tick_scheduled(self) -> bool:
        return self._armed_generation is not None and self._step_timer.isActive()

    def is_heartbeat_running(self) -> bool:
        return self._heartbeat_timer.isActive()

    def scheduled_delay_ms(self) -> Optional[int]:
        if not self.is_tick_scheduled():
            return None
        return self._scheduled_delay_ms

    # -----------------
    # Lifecycle
    # -----------------

    def start(self) -> None:
        if self._state.is_playing:
            logger.info("restarting game in progress")
        self._cancel_timers()
        self._last_summary = None
        self._commit(game_engine.start_game(self._state))
        logger.info("game started (base speed %d ms, frequency %.2f)", self._settings.base_speed_ms, self._settings.change_frequency)

        self._heartbeat_timer.start()
        self._run_tick()

    def stop(self) -> Optional[gameplay_models.RunSummary]:
        if not self._state.is_playing:
            return None

        self._cancel_timers()
        stopped_state, summary = game_engine.end_game(self._state)
        if summary.is_new_high_score and self._score_store is not None:
            self._score_store.record_if_higher(summary.score)

        self._last_summary = summary
        self._commit(stopped_state)
        logger.info(
            "game stopped: score %d, caught %d of %d events, %s",
            summary.score,
            summary.stats.events_caught,
            summary.stats.events_fired,
            "new high score" if summary.is_new_high_score else f"high score {summary.high_score}",
        )
        self.gameStopped.emit(summary)
        return summary

    def pause(self) -> None:
        if not self._state.is_playing or self._state.is_paused:
            return
        self._cancel_timers()
        self._commit(game_engine.set_paused(self._state, True))
        logger.info("game paused at %ds", self._state.elapsed_seconds)

    def resume(self) -> None:
        if not self._state.is_playing or not self._state.is_paused:
            return
        self._commit(game_engine.set_paused(self._state, False))
        logger.info("game resumed")
        self._heartbeat_timer.start()
        self._schedule_next_tick(level_table.tick_delay_ms(self._settings.base_speed_ms, self._state.level))

    def toggle_pause(self) -> None:
        if self._state.is_paused:
            self.resume()
        else:
            self.pause()

    # -----------------
    # Inputs
    # -----------------

    def handle_interaction(self, kind: Any) -> judge.JudgementResult:
        event_kind = gameplay_models.EventKind(kind)
        result = game_engine.apply_interaction(
            self._state,
            event_kind,
            self._settings,
            now_ms=self._timing.now_ms(),
        )
        if result.state is not self._state:
            self._commit(result.state)
        if result.event is not None:
            self.reactionJudged.emit(result)
        return result

    def update_settings(self, partial: Mapping[str, Any]) -> config.GameSettings:
        self._settings = config.merge_game_settings(self._settings, partial)
        logger.info("settings updated: %s", self._settings.model_dump())
        self.settingsChanged.emit(self._settings)
        return self._settings

    # -----------------
    # Timers
    # -----------------

    def _schedule_next_tick(self, delay_ms: int) -> int:
        self._step_generation += 1
        self._armed_generation = self._step_generation
        self._scheduled_delay_ms = int(delay_ms)
        self._step_timer.start(int(delay_ms))
        return self._armed_generation

    def _cancel_timers(self) -> None:
        self._step_generation += 1
        self._armed_generation = None
        self._scheduled_delay_ms = None
        self._step_timer.stop()
        self._heartbeat_timer.stop()

    def _on_step_timer(self) -> None:
        if self._armed_generation is None or self._armed_generation != self._step_generation:
            logger.debug("discarding stale step timeout")
            return
        self._armed_generation = None
        self._run_tick()

    def _run_tick(self) -> None:
        if not self._state.is_playing or self._state.is_paused:
            return

        outcome = game_engine.advance_tick(
            self._state,
            self._settings,
            now_ms=self._timing.now_ms(),
            rng=self._rng,
        )
        self._commit(outcome.state)
        if outcome.fired_kind is not None:
            self.eventFired.emit(outcome.fired_kind)
        self._schedule_next_tick(outcome.next_delay_ms)

    def _on_heartbeat(self) -> None:
        previous_level = self._state.level
        next_state = game_engine.advance_heartbeat(self._state)
        if next_state is self._state:
            return
        self._commit(next_state)
        if next_state.level is not previous_level:
            logger.info("level up: %s at %ds", next_state.level.name, next_state.elapsed_seconds)

    def _commit(self, next_state: gameplay_models.GameState) -> None:
        self._state = next_state
        self.stateChanged.emit(next_state)
