from __future__ import annotations

from repset.workout.model import Activity, TimelineStep, WorkoutSet
from repset.workout.parser import parse_workout
from repset.workout.timeline import build_timeline, flatten, total_duration_sec


def test_set_expands_repetition_major() -> None:
    timeline = build_timeline("3x(1min run, 30s rest)")

    assert [(step.name, step.interval, step.interval_total) for step in timeline] == [
        ("run", 1, 3),
        ("rest", 1, 3),
        ("run", 2, 3),
        ("rest", 2, 3),
        ("run", 3, 3),
        ("rest", 3, 3),
    ]


def test_activity_has_no_interval_annotation() -> None:
    timeline = flatten([Activity(duration_sec=300, name="walk")])

    assert timeline == (TimelineStep(duration_sec=300, name="walk"),)
    assert not timeline[0].in_set


def test_length_law() -> None:
    plan = [
        Activity(duration_sec=60, name="a"),
        WorkoutSet(repeat=4, steps=(Activity(20), Activity(10))),
        Activity(duration_sec=30, name="b"),
        WorkoutSet(repeat=2, steps=(Activity(5), Activity(5), Activity(5))),
    ]

    assert len(flatten(plan)) == 2 + 4 * 2 + 2 * 3


def test_empty_plan_gives_empty_timeline() -> None:
    assert flatten([]) == ()
    assert build_timeline("nothing useful") == ()


def test_end_to_end_walk_run_timeline() -> None:
    plan = parse_workout("5min walk\n3x(1min run, 30s rest)")
    timeline = flatten(plan)

    assert len(plan) == 2
    assert len(timeline) == 7
    assert total_duration_sec(timeline) == 300 + 3 * (60 + 30)
    assert timeline[0].interval is None
    assert timeline[-1] == TimelineStep(duration_sec=30, name="rest", interval=3, interval_total=3)
