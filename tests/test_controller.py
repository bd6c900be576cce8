from __future__ import annotations

import io

from repset.core.scheduler import ManualScheduler
from repset.core.state import ProgressSnapshot, RunMode
from repset.ui.controller import WorkoutController
from repset.ui.cues import TerminalBell, WebAudioCues
from repset.ui.display import render_display


class RecordingCues:
    def __init__(self) -> None:
        self.cues = 0
        self.finishes = 0

    def play_cue(self) -> None:
        self.cues += 1

    def play_finish(self) -> None:
        self.finishes += 1


def _controller() -> tuple[WorkoutController, ManualScheduler, RecordingCues]:
    scheduler = ManualScheduler()
    cues = RecordingCues()
    return WorkoutController(cues=cues, scheduler=scheduler), scheduler, cues


def test_start_then_stop_resets_display() -> None:
    controller, scheduler, _ = _controller()
    snapshots: list[ProgressSnapshot] = []
    controller.add_progress_listener(snapshots.append)

    assert controller.start("5min walk\n3x(1min run, 30s rest)") is True
    assert len(controller.timeline) == 7
    assert snapshots[0].total_remaining_sec == 570

    controller.stop()

    view = render_display(snapshots[-1])
    assert (view["clock"], view["activity"], view["elapsed"]) == ("00:00", "ready", "0:00")
    assert controller.run_mode == RunMode.IDLE
    assert scheduler.pending == 0


def test_unparseable_text_does_not_start() -> None:
    controller, scheduler, _ = _controller()

    assert controller.start("just some notes") is False
    assert controller.run_mode == RunMode.IDLE
    assert scheduler.pending == 0


def test_toggle_starts_then_resumes() -> None:
    controller, scheduler, _ = _controller()

    assert controller.toggle("30s plank\n30s rest") is True
    scheduler.advance(5)
    assert controller.pause() is True

    assert controller.toggle("ignored while paused") is True
    assert controller.run_mode == RunMode.RUNNING
    assert controller.snapshot().remaining_sec == 25
    assert controller.snapshot().activity_name == "plank"


def test_cues_and_finish_reach_audio_player() -> None:
    controller, scheduler, cues = _controller()
    finished: list[bool] = []
    cue_events: list[bool] = []
    controller.add_finish_listener(lambda: finished.append(True))
    controller.add_cue_listener(lambda: cue_events.append(True))

    controller.start("3x(10s work, 5s rest)")
    scheduler.run_until_idle()

    # Every step except the last one warns.
    assert cues.cues == 5
    assert len(cue_events) == 5
    assert cues.finishes == 1
    assert finished == [True]


class BrokenCues:
    def play_cue(self) -> None:
        raise RuntimeError("device gone")

    def play_finish(self) -> None:
        raise RuntimeError("device gone")


def test_failing_player_still_notifies_listeners() -> None:
    scheduler = ManualScheduler()
    controller = WorkoutController(cues=BrokenCues(), scheduler=scheduler)
    cue_events: list[bool] = []
    finished: list[bool] = []
    controller.add_cue_listener(lambda: cue_events.append(True))
    controller.add_finish_listener(lambda: finished.append(True))

    controller.start("10s a\n5s b")
    scheduler.run_until_idle()

    assert cue_events == [True]
    assert finished == [True]
    assert controller.run_mode == RunMode.FINISHED


def test_terminal_bell_respects_audio_predicate() -> None:
    stream = io.StringIO()
    ready = False
    bell = TerminalBell(stream=stream, can_play_audio=lambda: ready)

    bell.play_cue()
    assert stream.getvalue() == ""

    ready = True
    bell.play_cue()
    bell.play_finish()
    assert stream.getvalue() == "\a\a\a"


def test_web_cues_drop_until_unlocked_and_swallow_failures() -> None:
    scripts: list[str] = []
    unlocked = {"value": False}
    cues = WebAudioCues(scripts.append, can_play_audio=lambda: unlocked["value"])

    cues.play_cue()
    assert scripts == []

    unlocked["value"] = True
    cues.play_cue()
    cues.play_finish()
    assert len(scripts) == 2
    assert "createOscillator" in scripts[0]

    def broken(_script: str) -> None:
        raise RuntimeError("client disconnected")

    WebAudioCues(broken).play_cue()


def test_web_cues_use_sample_when_configured() -> None:
    scripts: list[str] = []
    cues = WebAudioCues(scripts.append, sample_url="/cue-sound.wav")

    cues.play_cue()

    assert '"/cue-sound.wav"' in scripts[0]
    assert "decodeAudioData" in scripts[0]
