"""Snapshot formatting shared by the terminal and web front ends."""

from __future__ import annotations

from typing import TypedDict

from repset.core.state import ProgressSnapshot, RunMode


class DisplayState(TypedDict):
    clock: str
    activity: str
    interval: str
    elapsed: str
    remaining: str


IDLE_CLOCK = "00:00"
FINISHED_CLOCK = "🎉"


def format_clock(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes:d}:{seconds:02d}"


def format_interval(snapshot: ProgressSnapshot) -> str:
    if snapshot.interval is None or snapshot.interval_total is None:
        return ""
    return f"{snapshot.interval} / {snapshot.interval_total}"


def render_idle() -> DisplayState:
    return {
        "clock": IDLE_CLOCK,
        "activity": "ready",
        "interval": "",
        "elapsed": format_clock(0),
        "remaining": format_clock(0),
    }


def render_finished(elapsed_sec: int = 0) -> DisplayState:
    return {
        "clock": FINISHED_CLOCK,
        "activity": "done",
        "interval": "",
        "elapsed": format_clock(elapsed_sec),
        "remaining": format_clock(0),
    }


def render_display(snapshot: ProgressSnapshot) -> DisplayState:
    if snapshot.run_mode == RunMode.IDLE:
        return render_idle()
    if snapshot.run_mode == RunMode.FINISHED:
        return render_finished(snapshot.elapsed_sec)
    return {
        "clock": format_clock(snapshot.remaining_sec),
        "activity": snapshot.activity_name,
        "interval": format_interval(snapshot),
        "elapsed": format_clock(snapshot.elapsed_sec),
        "remaining": format_clock(snapshot.total_remaining_sec),
    }


def render_status_line(snapshot: ProgressSnapshot) -> str:
    view = render_display(snapshot)
    bits = [f"{view['clock']:>6}", view["activity"] or "-"]
    if view["interval"]:
        bits.append(f"[{view['interval']}]")
    bits.append(f"elapsed {view['elapsed']}")
    bits.append(f"left {view['remaining']}")
    if snapshot.run_mode == RunMode.PAUSED:
        bits.append("(paused)")
    return " | ".join(bits)
