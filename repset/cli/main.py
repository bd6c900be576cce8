"""Terminal CLI entrypoint for Repset Timer."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from repset.core.scheduler import ManualScheduler
from repset.core.state import EngineConfig, ProgressSnapshot, RunMode
from repset.ui.controller import WorkoutController
from repset.ui.cues import CuePlayer, SilentCues, TerminalBell
from repset.ui.display import format_clock, render_status_line
from repset.workout.library import get_template, list_templates
from repset.workout.parser import WorkoutParseError, read_workout_file
from repset.workout.timeline import build_timeline, total_duration_sec


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Repset interval timer",
        epilog="Workout lines: '5min walk', '30s', '3x(1min run, 30s rest)'",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--text", default=None, help="Workout text (use \\n between lines)")
    source.add_argument("--file", default=None, help="Read workout text from a file")
    source.add_argument("--template", default=None, help="Use a built-in workout template")
    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="List built-in workout templates",
    )
    parser.add_argument(
        "--plan",
        action="store_true",
        help="Print the expanded timeline and exit",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Run the whole workout instantly on a virtual clock",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Real-time acceleration factor (2 = twice as fast)",
    )
    parser.add_argument(
        "--cue-lead",
        type=int,
        default=3,
        help="Seconds before the end of a step at which the cue fires",
    )
    parser.add_argument("--no-sound", action="store_true", help="Disable cue sounds")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI)",
    )
    parser.add_argument(
        "--web-host",
        default="127.0.0.1",
        help="Host bind for --ui-web",
    )
    parser.add_argument(
        "--web-port",
        type=int,
        default=8090,
        help="Port for --ui-web",
    )
    parser.add_argument(
        "--cue-sound",
        default=None,
        help="Audio file played as the pre-end cue in the web UI",
    )
    return parser


def read_workout_text(args: argparse.Namespace) -> str | None:
    if args.text is not None:
        return args.text.replace("\\n", "\n")
    if args.file is not None:
        return read_workout_file(args.file)
    if args.template is not None:
        return get_template(args.template).text
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return None


def print_templates() -> int:
    for template in list_templates():
        total = total_duration_sec(build_timeline(template.text))
        print(f"{template.key:<16} {template.name:<22} {template.category:<10} {format_clock(total)}")
    return 0


def print_plan(text: str) -> int:
    timeline = build_timeline(text)
    if not timeline:
        print("No workout steps found")
        return 1
    for index, step in enumerate(timeline, start=1):
        interval = f" [{step.interval}/{step.interval_total}]" if step.in_set else ""
        print(f"{index:>3}. {format_clock(step.duration_sec):>6} {step.name or '-'}{interval}")
    print(f"Total: {format_clock(total_duration_sec(timeline))} ({len(timeline)} steps)")
    return 0


def run_simulated(text: str, config: EngineConfig) -> int:
    scheduler = ManualScheduler()
    controller = WorkoutController(scheduler=scheduler, config=config)

    def on_progress(snapshot: ProgressSnapshot) -> None:
        print(f"[{format_clock(int(scheduler.now)):>6}] {render_status_line(snapshot)}")

    controller.add_progress_listener(on_progress)
    controller.add_cue_listener(lambda: print("[CUE] step ending soon"))
    if not controller.start(text):
        print("No workout steps found")
        return 1
    scheduler.run_until_idle()
    print(f"[DONE] elapsed {format_clock(controller.snapshot().elapsed_sec)}")
    return 0


async def run_terminal(text: str, config: EngineConfig, cues: CuePlayer) -> int:
    controller = WorkoutController(cues=cues, config=config)
    done = asyncio.Event()

    def on_progress(snapshot: ProgressSnapshot) -> None:
        print("\r" + render_status_line(snapshot).ljust(72), end="", flush=True)

    def on_finish() -> None:
        print(f"\n[DONE] elapsed {format_clock(controller.snapshot().elapsed_sec)}")
        done.set()

    controller.add_progress_listener(on_progress)
    controller.add_finish_listener(on_finish)
    if not controller.start(text):
        print("No workout steps found")
        return 1

    interactive = _attach_keyboard(controller, done)
    if interactive:
        print("Commands: p + Enter = pause/resume, s + Enter = stop")
    try:
        await done.wait()
    except asyncio.CancelledError:
        controller.stop()
        raise
    finally:
        if interactive:
            asyncio.get_running_loop().remove_reader(sys.stdin.fileno())
    return 0


def _attach_keyboard(controller: WorkoutController, done: asyncio.Event) -> bool:
    if not sys.stdin.isatty():
        return False

    def on_command() -> None:
        command = sys.stdin.readline().strip().lower()
        if command == "p":
            if controller.run_mode == RunMode.PAUSED:
                controller.resume()
            else:
                controller.pause()
                print("\r" + render_status_line(controller.snapshot()).ljust(72), end="", flush=True)
        elif command in {"s", "q"}:
            controller.stop()
            print("\n[STOP] workout stopped")
            done.set()

    try:
        asyncio.get_running_loop().add_reader(sys.stdin.fileno(), on_command)
    except (NotImplementedError, OSError) as exc:
        logger.debug("Keyboard commands unavailable: %s", exc)
        return False
    return True


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_templates:
        return print_templates()
    if args.speed <= 0:
        parser.error("--speed must be > 0")
    if args.cue_lead < 0:
        parser.error("--cue-lead must be >= 0")

    config = EngineConfig(tick_interval_sec=1.0 / args.speed, cue_lead_sec=args.cue_lead)

    try:
        if args.ui_web and args.text is None and args.file is None and args.template is None:
            text = None
        else:
            text = read_workout_text(args)
    except (WorkoutParseError, ValueError) as exc:
        print(f"Error: {exc}")
        return 1

    if args.ui_web:
        from repset.ui.web_app import run_web_ui

        return run_web_ui(
            host=args.web_host,
            port=args.web_port,
            config=config,
            initial_text=text,
            cue_sound=args.cue_sound,
        )

    if text is None:
        parser.print_help()
        return 1

    if args.plan:
        return print_plan(text)

    if args.simulate:
        return run_simulated(text, config)

    cues: CuePlayer = SilentCues() if args.no_sound else TerminalBell()
    try:
        return asyncio.run(run_terminal(text, config, cues))
    except KeyboardInterrupt:
        print("\n[STOP] interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
