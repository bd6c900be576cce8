"""NiceGUI web UI for Repset Timer."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from nicegui import Client, app, ui

from repset.core.state import EngineConfig, ProgressSnapshot, RunMode
from repset.ui.controller import WorkoutController
from repset.ui.cues import UNLOCK_AUDIO_JS, WebAudioCues
from repset.ui.display import format_clock, render_display
from repset.workout.library import get_template, list_templates
from repset.workout.timeline import build_timeline, total_duration_sec


logger = logging.getLogger(__name__)

DEFAULT_WORKOUT_TEXT = "5min walk\n3x(1min run, 30s rest)"
REFRESH_SEC = 0.1
PULSE_SEC = 0.12


@dataclass
class WebState:
    snapshot: ProgressSnapshot | None = None
    audio_unlocked: bool = False
    pulse_until: float = 0.0
    status: str = "Ready"


def _preview_text(text: str) -> str:
    timeline = build_timeline(text)
    if not timeline:
        return "No steps recognised"
    return f"{len(timeline)} steps | total {format_clock(total_duration_sec(timeline))}"


def run_web_ui(
    *,
    host: str = "127.0.0.1",
    port: int = 8090,
    config: EngineConfig | None = None,
    initial_text: str | None = None,
    cue_sound: str | None = None,
) -> int:
    sample_url: str | None = None
    if cue_sound:
        sound_path = Path(cue_sound)
        if sound_path.is_file():
            sample_url = app.add_media_file(
                local_file=sound_path, url_path=f"/cue-sound{sound_path.suffix}"
            )
        else:
            logger.warning("Cue sound '%s' not found, using beep", cue_sound)

    @ui.page("/")
    def index(client: Client) -> None:
        build_timer_page(
            client,
            config=config,
            initial_text=initial_text or DEFAULT_WORKOUT_TEXT,
            sample_url=sample_url,
        )

    ui.run(host=host, port=port, reload=False, title="Repset Timer", show=False)
    return 0


def build_timer_page(
    client: Client,
    *,
    config: EngineConfig | None,
    initial_text: str,
    sample_url: str | None,
) -> None:
    state = WebState()
    cues = WebAudioCues(
        client.run_javascript,
        can_play_audio=lambda: state.audio_unlocked,
        sample_url=sample_url,
    )
    controller = WorkoutController(cues=cues, config=config)

    ui.add_head_html(
        """
        <style>
          body { background: #0b1220; color: #e5e7eb; font-family: Arial, "Segoe UI", sans-serif; }
          .rs-clock { font-size: 6rem; font-weight: 700; line-height: 1; transition: transform 0.1s; }
          .rs-activity { font-size: 2rem; font-weight: 600; min-height: 2.5rem; }
          .rs-muted { color: #9caecf; }
          .rs-active { box-shadow: 0 0 0 2px #38bdf8; }
        </style>
        """
    )

    with ui.column().classes("w-full max-w-xl mx-auto items-center gap-3 p-4"):
        ui.label("REPSET TIMER").classes("text-xl font-semibold tracking-wide")
        clock_label = ui.label("00:00").classes("rs-clock")
        activity_label = ui.label("ready").classes("rs-activity")
        interval_label = ui.label("").classes("text-lg rs-muted")
        with ui.row().classes("gap-6"):
            elapsed_label = ui.label("Elapsed 0:00").classes("text-sm")
            remaining_label = ui.label("Remaining 0:00").classes("text-sm")

        with ui.row().classes("gap-2"):
            start_btn = ui.button("Start")
            pause_btn = ui.button("Pause")
            stop_btn = ui.button("Stop").props("color=negative")

        workout_input = ui.textarea(
            "Workout",
            value=initial_text,
            placeholder="5min walk\n3x(1min run, 30s rest)",
        ).props("autogrow outlined").classes("w-full")
        preview_label = ui.label(_preview_text(initial_text)).classes("text-sm rs-muted")

        template_select = ui.select(
            {template.key: f"{template.name} ({template.category})" for template in list_templates()},
            label="Templates",
        ).classes("w-full")
        sound_toggle = ui.switch("Sound cues", value=True)
        status_label = ui.label("Ready").classes("text-sm rs-muted")

    def refresh_ui() -> None:
        view = render_display(state.snapshot or ProgressSnapshot.reset())
        clock_label.text = view["clock"]
        activity_label.text = view["activity"]
        interval_label.text = view["interval"]
        elapsed_label.text = f"Elapsed {view['elapsed']}"
        remaining_label.text = f"Remaining {view['remaining']}"
        scale = "1.05" if time.monotonic() < state.pulse_until else "1"
        clock_label.style(f"transform: scale({scale});")

        mode = controller.run_mode
        start_btn.text = "Resume" if mode == RunMode.PAUSED else "Start"
        if mode == RunMode.RUNNING:
            start_btn.classes(add="rs-active")
        else:
            start_btn.classes(remove="rs-active")
        if mode == RunMode.PAUSED:
            pause_btn.classes(add="rs-active")
        else:
            pause_btn.classes(remove="rs-active")
        pause_btn.set_enabled(mode == RunMode.RUNNING)
        status_label.text = state.status

    def on_progress(snapshot: ProgressSnapshot) -> None:
        state.snapshot = snapshot

    def on_pulse() -> None:
        state.pulse_until = time.monotonic() + PULSE_SEC

    def on_finish() -> None:
        state.snapshot = controller.snapshot()
        state.status = "Workout completed"

    def on_start() -> None:
        # Sent in response to the click; the context resumes once the browser has seen the gesture.
        client.run_javascript(UNLOCK_AUDIO_JS)
        state.audio_unlocked = True
        text = str(workout_input.value or "")
        if controller.toggle(text):
            state.status = "Running"
        elif controller.run_mode != RunMode.RUNNING:
            state.status = "No steps recognised"
        refresh_ui()

    def on_pause() -> None:
        if controller.pause():
            state.status = "Paused"
        refresh_ui()

    def on_stop() -> None:
        controller.stop()
        state.status = "Stopped"
        refresh_ui()

    def on_text_change() -> None:
        preview_label.text = _preview_text(str(workout_input.value or ""))

    def on_template_pick() -> None:
        key = template_select.value
        if not key:
            return
        workout_input.value = get_template(str(key)).text

    def on_sound_toggle() -> None:
        cues.enabled = bool(sound_toggle.value)

    controller.add_progress_listener(on_progress)
    controller.add_pulse_listener(on_pulse)
    controller.add_finish_listener(on_finish)

    start_btn.on_click(on_start)
    pause_btn.on_click(on_pause)
    stop_btn.on_click(on_stop)
    workout_input.on_value_change(lambda _: on_text_change())
    template_select.on_value_change(lambda _: on_template_pick())
    sound_toggle.on_value_change(lambda _: on_sound_toggle())
    client.on_disconnect(controller.stop)

    ui.timer(REFRESH_SEC, refresh_ui)
