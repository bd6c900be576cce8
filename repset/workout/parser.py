"""Text workout parser.

One workout item per line::

    5min walk
    30s
    3x(1min run, 30s rest)

Lines that do not match the grammar are dropped rather than reported.
"""

from __future__ import annotations

import re
from pathlib import Path

from repset.workout.model import Activity, PlanNode, WorkoutPlan, WorkoutSet


class WorkoutParseError(ValueError):
    """Raised when a workout file cannot be read."""


_SET_RE = re.compile(r"^(\d+)x\s*\((.+)\)$", re.IGNORECASE)
_ACTIVITY_RE = re.compile(
    r"^(\d+\s*(?:min|m|sec|s)(?:\s*\d+\s*(?:sec|s))?)(?:\s+(.*))?$",
    re.IGNORECASE,
)
_MINUTES_RE = re.compile(r"(\d+)\s*(?:min|m)(?![a-z])", re.IGNORECASE)
_SECONDS_RE = re.compile(r"(\d+)\s*(?:sec|s)(?![a-z])", re.IGNORECASE)


def parse_duration(raw: str) -> int:
    """Sum the minute and second tokens of a duration such as ``1min30s``."""
    total = 0
    minutes = _MINUTES_RE.search(raw)
    seconds = _SECONDS_RE.search(raw)
    if minutes:
        total += int(minutes.group(1)) * 60
    if seconds:
        total += int(seconds.group(1))
    return total


def parse_activity(text: str) -> Activity | None:
    match = _ACTIVITY_RE.match(text.strip())
    if match is None:
        return None
    name = (match.group(2) or "").strip()
    return Activity(duration_sec=parse_duration(match.group(1)), name=name)


def _parse_set(repeat_raw: str, items_raw: str) -> WorkoutSet | None:
    repeat = int(repeat_raw)
    steps = tuple(
        activity
        for activity in (parse_activity(item) for item in items_raw.split(","))
        if activity is not None
    )
    if repeat <= 0 or not steps:
        return None
    return WorkoutSet(repeat=repeat, steps=steps)


def parse_workout(text: str) -> list[PlanNode]:
    nodes: list[PlanNode] = []
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        set_match = _SET_RE.match(line)
        node: PlanNode | None
        if set_match is not None:
            node = _parse_set(set_match.group(1), set_match.group(2))
        else:
            node = parse_activity(line)
        if node is not None:
            nodes.append(node)
    return nodes


def read_workout_file(path: str | Path) -> str:
    file_path = Path(path)
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise WorkoutParseError(f"Unable to read workout '{file_path}': {exc}") from exc


def load_workout_file(path: str | Path) -> WorkoutPlan:
    file_path = Path(path)
    text = read_workout_file(file_path)
    return WorkoutPlan(name=file_path.stem, nodes=tuple(parse_workout(text)))
