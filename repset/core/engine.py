"""Single-active-timer state machine driving a flattened workout timeline."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from repset.core.scheduler import Handle, Scheduler, SchedulerError
from repset.core.state import EngineConfig, ProgressSnapshot, RunMode, TimerState
from repset.workout.model import TimelineStep
from repset.workout.timeline import total_duration_sec


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressSnapshot], None]
EventCallback = Callable[[], None]


class TimerEngine:
    """Advance through a timeline once per tick and emit progress and cue events.

    Two scheduled tasks exist at most: the recurring tick and the pending
    pre-end cue. Every transition cancels them before arming new ones.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        config: EngineConfig | None = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
        on_pulse: Optional[EventCallback] = None,
        on_cue: Optional[EventCallback] = None,
        on_finish: Optional[EventCallback] = None,
    ) -> None:
        self._scheduler = scheduler
        self._config = config or EngineConfig()
        self.on_progress = on_progress
        self.on_pulse = on_pulse
        self.on_cue = on_cue
        self.on_finish = on_finish
        self._state = TimerState()
        self._tick_handle: Handle | None = None
        self._cue_handle: Handle | None = None

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def run_mode(self) -> RunMode:
        return self._state.run_mode

    @property
    def timeline(self) -> tuple[TimelineStep, ...]:
        return self._state.timeline

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def remaining_sec(self) -> int:
        return self._state.remaining_sec

    @property
    def elapsed_sec(self) -> int:
        return self._state.elapsed_sec

    @property
    def tick_pending(self) -> bool:
        return self._tick_handle is not None

    @property
    def cue_pending(self) -> bool:
        return self._cue_handle is not None

    def snapshot(self) -> ProgressSnapshot:
        if self._state.run_mode == RunMode.FINISHED:
            return ProgressSnapshot.finished(self._state.elapsed_sec)
        return ProgressSnapshot.from_state(self._state)

    # Control operations

    def start(self, timeline: Sequence[TimelineStep]) -> bool:
        if not timeline:
            logger.debug("Ignoring start with an empty timeline")
            return False

        self._cancel_tasks()
        self._state = TimerState(timeline=tuple(timeline), run_mode=RunMode.RUNNING)
        logger.info(
            "Workout started: %d steps, %ds total",
            len(self._state.timeline),
            total_duration_sec(self._state.timeline),
        )
        self._begin_step(subtract_one=False)
        return True

    def pause(self) -> bool:
        if self._state.run_mode != RunMode.RUNNING:
            logger.debug("Ignoring pause while %s", self._state.run_mode.value)
            return False
        self._cancel_tasks()
        self._state.run_mode = RunMode.PAUSED
        logger.info(
            "Workout paused at %ds remaining in step %d",
            self._state.remaining_sec,
            self._state.current_index + 1,
        )
        return True

    def resume(self) -> bool:
        if self._state.run_mode != RunMode.PAUSED:
            logger.debug("Ignoring resume while %s", self._state.run_mode.value)
            return False
        self._cancel_tasks()
        self._state.run_mode = RunMode.RUNNING
        logger.info("Workout resumed")
        self._arm_tick()
        self._schedule_cue()
        return True

    def stop(self) -> None:
        self._cancel_tasks()
        was = self._state.run_mode
        self._state = TimerState()
        if was != RunMode.IDLE:
            logger.info("Workout stopped")
        self._emit_progress(ProgressSnapshot.reset())

    def tick(self) -> None:
        state = self._state
        if state.run_mode != RunMode.RUNNING:
            return
        if state.remaining_sec <= 0:
            self._advance_step()
            return

        state.remaining_sec -= 1
        state.elapsed_sec += 1
        self._emit_progress(ProgressSnapshot.from_state(state))
        if state is not self._state or state.run_mode != RunMode.RUNNING:
            return
        self._emit(self.on_pulse, "pulse")

    # Step transitions

    def _begin_step(self, *, subtract_one: bool) -> None:
        state = self._state
        step = state.timeline[state.current_index]
        state.remaining_sec = max(0, step.duration_sec - (1 if subtract_one else 0))
        state.cue_fired = False
        logger.debug(
            "Step %d/%d '%s' (%ds)",
            state.current_index + 1,
            len(state.timeline),
            step.name,
            step.duration_sec,
        )
        self._emit_progress(ProgressSnapshot.from_state(state))
        if state is not self._state or state.run_mode != RunMode.RUNNING:
            # A listener stopped or restarted the run.
            return
        self._arm_tick()
        self._schedule_cue()

    def _advance_step(self) -> None:
        state = self._state
        state.current_index += 1
        if state.current_index >= len(state.timeline):
            self._finish()
            return
        # Continue the cadence of the previous step instead of replaying a full second.
        self._begin_step(subtract_one=True)

    def _finish(self) -> None:
        self._cancel_tasks()
        self._state.remaining_sec = 0
        self._state.run_mode = RunMode.FINISHED
        logger.info("Workout finished after %ds", self._state.elapsed_sec)
        self._emit(self.on_finish, "finish")

    # Scheduled tasks

    def _arm_tick(self) -> None:
        self._cancel_tick()
        self._tick_handle = self._call_later(self._config.tick_interval_sec, self._on_tick_due, "tick")

    def _on_tick_due(self) -> None:
        self._tick_handle = None
        if self._state.run_mode != RunMode.RUNNING:
            return
        self.tick()
        if self._state.run_mode == RunMode.RUNNING and self._tick_handle is None:
            self._arm_tick()

    def _schedule_cue(self) -> None:
        self._cancel_cue()
        state = self._state
        if state.is_last_step or state.cue_fired:
            return

        lead = self._config.cue_lead_sec
        if state.remaining_sec > lead:
            delay = (state.remaining_sec - lead) * self._config.tick_interval_sec
            self._cue_handle = self._call_later(delay, self._on_cue_due, "cue")
            if self._cue_handle is not None:
                logger.debug("Cue scheduled in %ss", delay)
        elif state.remaining_sec == lead:
            self._fire_cue()

    def _on_cue_due(self) -> None:
        self._cue_handle = None
        if self._state.run_mode != RunMode.RUNNING:
            return
        self._fire_cue()

    def _fire_cue(self) -> None:
        if self._state.cue_fired:
            return
        self._state.cue_fired = True
        self._emit(self.on_cue, "cue")

    def _call_later(
        self, delay_sec: float, callback: Callable[[], None], label: str
    ) -> Handle | None:
        try:
            return self._scheduler.call_later(delay_sec, callback)
        except (SchedulerError, RuntimeError) as exc:
            logger.warning("Unable to schedule %s (%s); timer will not advance", label, exc)
            return None

    def _cancel_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _cancel_cue(self) -> None:
        if self._cue_handle is not None:
            self._cue_handle.cancel()
            self._cue_handle = None

    def _cancel_tasks(self) -> None:
        self._cancel_tick()
        self._cancel_cue()

    # Listeners

    def _emit_progress(self, snapshot: ProgressSnapshot) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(snapshot)
        except Exception as exc:
            logger.warning("Progress listener failed: %s", exc)

    def _emit(self, callback: Optional[EventCallback], label: str) -> None:
        if callback is None:
            return
        try:
            callback()
        except Exception as exc:
            logger.warning("%s listener failed: %s", label.capitalize(), exc)
