"""Controller shared by the terminal and web front ends."""

from __future__ import annotations

import logging
from typing import Callable

from repset.core.engine import TimerEngine
from repset.core.scheduler import AsyncioScheduler, Scheduler
from repset.core.state import EngineConfig, ProgressSnapshot, RunMode
from repset.ui.cues import CuePlayer, SilentCues
from repset.workout.model import TimelineStep
from repset.workout.timeline import build_timeline


logger = logging.getLogger(__name__)


class WorkoutController:
    def __init__(
        self,
        cues: CuePlayer | None = None,
        scheduler: Scheduler | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self._cues = cues or SilentCues()
        self._engine = TimerEngine(
            scheduler or AsyncioScheduler(),
            config,
            on_progress=self._on_progress,
            on_pulse=self._on_pulse,
            on_cue=self._on_cue,
            on_finish=self._on_finish,
        )
        self._progress_listeners: list[Callable[[ProgressSnapshot], None]] = []
        self._pulse_listeners: list[Callable[[], None]] = []
        self._cue_listeners: list[Callable[[], None]] = []
        self._finish_listeners: list[Callable[[], None]] = []

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def run_mode(self) -> RunMode:
        return self._engine.run_mode

    @property
    def timeline(self) -> tuple[TimelineStep, ...]:
        return self._engine.timeline

    def snapshot(self) -> ProgressSnapshot:
        return self._engine.snapshot()

    def add_progress_listener(self, callback: Callable[[ProgressSnapshot], None]) -> None:
        self._progress_listeners.append(callback)

    def add_pulse_listener(self, callback: Callable[[], None]) -> None:
        self._pulse_listeners.append(callback)

    def add_cue_listener(self, callback: Callable[[], None]) -> None:
        self._cue_listeners.append(callback)

    def add_finish_listener(self, callback: Callable[[], None]) -> None:
        self._finish_listeners.append(callback)

    def start(self, raw_text: str) -> bool:
        timeline = build_timeline(raw_text)
        if not timeline:
            logger.info("Workout text produced no steps; nothing to start")
            return False
        return self._engine.start(timeline)

    def pause(self) -> bool:
        return self._engine.pause()

    def resume(self) -> bool:
        return self._engine.resume()

    def stop(self) -> None:
        self._engine.stop()

    def toggle(self, raw_text: str) -> bool:
        """Resume a paused run, otherwise start a new one from ``raw_text``."""
        if self._engine.run_mode == RunMode.PAUSED:
            return self.resume()
        return self.start(raw_text)

    def _on_progress(self, snapshot: ProgressSnapshot) -> None:
        for callback in self._progress_listeners:
            callback(snapshot)

    def _on_pulse(self) -> None:
        for callback in self._pulse_listeners:
            callback()

    def _on_cue(self) -> None:
        self._play(self._cues.play_cue, "cue")
        for callback in self._cue_listeners:
            callback()

    def _on_finish(self) -> None:
        self._play(self._cues.play_finish, "finish")
        for callback in self._finish_listeners:
            callback()

    def _play(self, play: Callable[[], None], label: str) -> None:
        try:
            play()
        except Exception as exc:
            logger.warning("Unable to play %s sound: %s", label, exc)
