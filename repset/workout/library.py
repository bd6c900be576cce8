"""Built-in text workouts for common interval formats."""

from __future__ import annotations

from dataclasses import dataclass

from repset.workout.model import WorkoutPlan
from repset.workout.parser import parse_workout


@dataclass(frozen=True)
class WorkoutTemplate:
    key: str
    name: str
    category: str
    text: str


TEMPLATES: tuple[WorkoutTemplate, ...] = (
    WorkoutTemplate(
        key="walk_run_10",
        name="Walk/Run Starter",
        category="Running",
        text="5min walk\n3x(1min run, 30s rest)",
    ),
    WorkoutTemplate(
        key="couch_to_5k_w1",
        name="Couch to 5K Week 1",
        category="Running",
        text="5min warmup walk\n8x(1min run, 1min30s walk)\n5min cooldown walk",
    ),
    WorkoutTemplate(
        key="tabata",
        name="Tabata",
        category="HIIT",
        text="2min warmup\n8x(20s work, 10s rest)\n2min cooldown",
    ),
    WorkoutTemplate(
        key="hiit_20",
        name="HIIT 20",
        category="HIIT",
        text=(
            "3min warmup\n"
            "4x(40s burpees, 20s rest, 40s squats, 20s rest, 40s plank, 20s rest)\n"
            "3min cooldown"
        ),
    ),
    WorkoutTemplate(
        key="emom_10",
        name="EMOM 10",
        category="Strength",
        text="10x(1min)",
    ),
    WorkoutTemplate(
        key="plank_ladder",
        name="Plank Ladder",
        category="Core",
        text="30s plank\n15s rest\n45s plank\n15s rest\n1min plank\n15s rest\n1min15s plank",
    ),
)


def list_templates() -> tuple[WorkoutTemplate, ...]:
    return TEMPLATES


def get_template(template_key: str) -> WorkoutTemplate:
    template = next((item for item in TEMPLATES if item.key == template_key), None)
    if template is None:
        raise ValueError(f"Unknown workout template '{template_key}'")
    return template


def build_plan_from_template(template_key: str) -> WorkoutPlan:
    template = get_template(template_key)
    return WorkoutPlan(name=template.name, nodes=tuple(parse_workout(template.text)))
