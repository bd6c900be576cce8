"""Workout domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Activity:
    duration_sec: int
    name: str = ""


@dataclass(frozen=True)
class WorkoutSet:
    repeat: int
    steps: tuple[Activity, ...]

    @property
    def total_duration_sec(self) -> int:
        return self.repeat * sum(step.duration_sec for step in self.steps)


PlanNode = Union[Activity, WorkoutSet]


@dataclass(frozen=True)
class TimelineStep:
    duration_sec: int
    name: str = ""
    interval: int | None = None
    interval_total: int | None = None

    @property
    def in_set(self) -> bool:
        return self.interval is not None


@dataclass(frozen=True)
class WorkoutPlan:
    name: str
    nodes: tuple[PlanNode, ...]

    @property
    def total_duration_sec(self) -> int:
        total = 0
        for node in self.nodes:
            if isinstance(node, WorkoutSet):
                total += node.total_duration_sec
            else:
                total += node.duration_sec
        return total
