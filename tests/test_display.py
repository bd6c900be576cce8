from __future__ import annotations

from repset.core.state import ProgressSnapshot, RunMode
from repset.ui.display import format_clock, render_display, render_status_line


def test_format_clock() -> None:
    assert format_clock(0) == "0:00"
    assert format_clock(65) == "1:05"
    assert format_clock(570) == "9:30"
    assert format_clock(-3) == "0:00"


def test_render_running_snapshot_with_interval() -> None:
    snapshot = ProgressSnapshot(
        remaining_sec=42,
        elapsed_sec=318,
        activity_name="run",
        total_remaining_sec=252,
        interval=2,
        interval_total=3,
        step_index=4,
        step_total=7,
        run_mode=RunMode.RUNNING,
    )

    assert render_display(snapshot) == {
        "clock": "0:42",
        "activity": "run",
        "interval": "2 / 3",
        "elapsed": "5:18",
        "remaining": "4:12",
    }


def test_unnamed_activity_renders_empty_name() -> None:
    snapshot = ProgressSnapshot(
        remaining_sec=45,
        elapsed_sec=0,
        activity_name="",
        total_remaining_sec=45,
        run_mode=RunMode.RUNNING,
    )

    view = render_display(snapshot)

    assert view["activity"] == ""
    assert view["interval"] == ""
    assert "0:45" in render_status_line(snapshot)


def test_render_idle_and_finished() -> None:
    idle = render_display(ProgressSnapshot.reset())
    assert idle == {
        "clock": "00:00",
        "activity": "ready",
        "interval": "",
        "elapsed": "0:00",
        "remaining": "0:00",
    }

    done = render_display(ProgressSnapshot.finished(elapsed_sec=570))
    assert done["clock"] == "🎉"
    assert done["activity"] == "done"
    assert done["elapsed"] == "9:30"


def test_status_line_marks_paused() -> None:
    snapshot = ProgressSnapshot(
        remaining_sec=10,
        elapsed_sec=5,
        activity_name="walk",
        total_remaining_sec=10,
        run_mode=RunMode.PAUSED,
    )

    assert render_status_line(snapshot).endswith("(paused)")
