"""Set expansion: plan nodes to a flat, ordered timeline."""

from __future__ import annotations

from typing import Iterable, Sequence

from repset.workout.model import Activity, PlanNode, TimelineStep, WorkoutSet
from repset.workout.parser import parse_workout


Timeline = tuple[TimelineStep, ...]


def flatten(plan: Iterable[PlanNode]) -> Timeline:
    steps: list[TimelineStep] = []
    for node in plan:
        if isinstance(node, WorkoutSet):
            steps.extend(_expand_set(node))
        elif isinstance(node, Activity):
            steps.append(TimelineStep(duration_sec=node.duration_sec, name=node.name))
    return tuple(steps)


def _expand_set(node: WorkoutSet) -> list[TimelineStep]:
    # Full pass through the steps before the next repetition.
    return [
        TimelineStep(
            duration_sec=step.duration_sec,
            name=step.name,
            interval=repetition,
            interval_total=node.repeat,
        )
        for repetition in range(1, node.repeat + 1)
        for step in node.steps
    ]


def build_timeline(text: str) -> Timeline:
    return flatten(parse_workout(text))


def total_duration_sec(timeline: Sequence[TimelineStep]) -> int:
    return sum(step.duration_sec for step in timeline)
