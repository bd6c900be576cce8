"""Timer state owned by the engine, plus the snapshot handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from repset.workout.model import TimelineStep


class RunMode(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class EngineConfig:
    tick_interval_sec: float = 1.0
    cue_lead_sec: int = 3


@dataclass
class TimerState:
    timeline: tuple[TimelineStep, ...] = ()
    current_index: int = 0
    remaining_sec: int = 0
    elapsed_sec: int = 0
    run_mode: RunMode = RunMode.IDLE
    # Set once the current step's pre-end cue has fired.
    cue_fired: bool = False

    @property
    def current_step(self) -> TimelineStep | None:
        if 0 <= self.current_index < len(self.timeline):
            return self.timeline[self.current_index]
        return None

    @property
    def is_last_step(self) -> bool:
        return self.current_index == len(self.timeline) - 1

    @property
    def total_remaining_sec(self) -> int:
        step = self.current_step
        if step is None:
            return 0
        upcoming = sum(item.duration_sec for item in self.timeline[self.current_index :])
        return upcoming - (step.duration_sec - self.remaining_sec)


@dataclass(frozen=True)
class ProgressSnapshot:
    remaining_sec: int
    elapsed_sec: int
    activity_name: str
    total_remaining_sec: int
    interval: int | None = None
    interval_total: int | None = None
    step_index: int = 0
    step_total: int = 0
    run_mode: RunMode = RunMode.IDLE

    @classmethod
    def reset(cls) -> ProgressSnapshot:
        return cls(
            remaining_sec=0,
            elapsed_sec=0,
            activity_name="ready",
            total_remaining_sec=0,
        )

    @classmethod
    def finished(cls, elapsed_sec: int) -> ProgressSnapshot:
        return cls(
            remaining_sec=0,
            elapsed_sec=elapsed_sec,
            activity_name="done",
            total_remaining_sec=0,
            run_mode=RunMode.FINISHED,
        )

    @classmethod
    def from_state(cls, state: TimerState) -> ProgressSnapshot:
        step = state.current_step
        if step is None:
            return cls.reset()
        return cls(
            remaining_sec=state.remaining_sec,
            elapsed_sec=state.elapsed_sec,
            activity_name=step.name,
            total_remaining_sec=state.total_remaining_sec,
            interval=step.interval,
            interval_total=step.interval_total,
            step_index=state.current_index + 1,
            step_total=len(state.timeline),
            run_mode=state.run_mode,
        )
