from __future__ import annotations

import asyncio

import pytest

from repset.core.engine import TimerEngine
from repset.core.scheduler import AsyncioScheduler, ManualScheduler, SchedulerError
from repset.core.state import EngineConfig, RunMode
from repset.workout.model import TimelineStep


def test_manual_scheduler_runs_in_due_then_insertion_order() -> None:
    scheduler = ManualScheduler()
    calls: list[str] = []
    scheduler.call_later(2, lambda: calls.append("late"))
    scheduler.call_later(1, lambda: calls.append("first"))
    scheduler.call_later(1, lambda: calls.append("second"))

    scheduler.advance(1)
    assert calls == ["first", "second"]
    assert scheduler.now == 1.0

    scheduler.advance(5)
    assert calls == ["first", "second", "late"]
    assert scheduler.now == 6.0


def test_manual_scheduler_cancel() -> None:
    scheduler = ManualScheduler()
    calls: list[int] = []
    handle = scheduler.call_later(1, lambda: calls.append(1))
    assert scheduler.pending == 1

    handle.cancel()
    scheduler.advance(10)

    assert calls == []
    assert scheduler.pending == 0


def test_manual_scheduler_run_until_idle_respects_limit() -> None:
    scheduler = ManualScheduler()
    calls: list[float] = []

    def rearm() -> None:
        calls.append(scheduler.now)
        scheduler.call_later(1, rearm)

    scheduler.call_later(1, rearm)
    scheduler.run_until_idle(limit_sec=5)

    assert calls == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert scheduler.pending == 1


def test_asyncio_scheduler_requires_running_loop() -> None:
    with pytest.raises(SchedulerError):
        AsyncioScheduler().call_later(1, lambda: None)


def test_engine_outside_event_loop_degrades_without_crashing() -> None:
    engine = TimerEngine(AsyncioScheduler())

    assert engine.start((TimelineStep(duration_sec=10, name="walk"), TimelineStep(5))) is True

    assert engine.run_mode == RunMode.RUNNING
    assert engine.remaining_sec == 10
    assert not engine.tick_pending


def test_engine_runs_on_asyncio_loop() -> None:
    async def _run() -> None:
        finished = asyncio.Event()
        cues: list[int] = []
        engine = TimerEngine(
            AsyncioScheduler(),
            EngineConfig(tick_interval_sec=0.01),
            on_finish=finished.set,
        )
        engine.on_cue = lambda: cues.append(engine.current_index)

        engine.start((TimelineStep(duration_sec=5, name="run"), TimelineStep(duration_sec=2, name="rest")))
        await asyncio.wait_for(finished.wait(), timeout=5.0)

        assert engine.run_mode == RunMode.FINISHED
        assert engine.elapsed_sec == 6
        assert cues == [0]

    asyncio.run(_run())


def test_asyncio_pause_stops_callbacks() -> None:
    async def _run() -> None:
        engine = TimerEngine(AsyncioScheduler(), EngineConfig(tick_interval_sec=0.01))
        engine.start((TimelineStep(duration_sec=100, name="hold"),))
        await asyncio.sleep(0.05)
        engine.pause()
        remaining = engine.remaining_sec

        await asyncio.sleep(0.05)

        assert engine.run_mode == RunMode.PAUSED
        assert engine.remaining_sec == remaining
        assert remaining < 100

    asyncio.run(_run())
