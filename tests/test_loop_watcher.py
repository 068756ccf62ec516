import asyncio

import pytest

from src.host.interfaces import QUARTER_BLICKS
from src.host.memory import MemoryHost, MemoryPlayback, MemoryTrack
from src.playback.loop_watcher import LoopWatcher, reset_playback_marker, start_loop
from src.timeline.pairs import NumberRange


def _host() -> MemoryHost:
    return MemoryHost.for_track(MemoryTrack())


def test_reset_playback_marker_restores_playhead_and_view():
    host = _host()
    host.playback = MemoryPlayback(playhead=3.0, status="looping")
    host.editor.navigation.time_left = 42.0

    reset_playback_marker(host, 3600.0)

    assert host.playback.calls == [
        ("pause", ()),
        ("loop", (0.0, 3600.0)),
        ("pause", ()),
        ("seek", (3.0,)),
    ]
    assert host.playback.playhead == 3.0
    assert host.playback.status == "stopped"
    assert host.editor.navigation.time_left == 42.0


def test_start_loop_seeks_end_first():
    host = _host()
    start, end = start_loop(host, NumberRange(QUARTER_BLICKS, 3 * QUARTER_BLICKS))
    assert (start, end) == pytest.approx((0.5, 1.5))
    assert [name for name, _ in host.playback.calls] == ["seek", "seek", "loop"]
    assert host.playback.calls[0][1] == pytest.approx((1.5,))
    assert host.playback.loop_range == pytest.approx((0.5, 1.5))
    assert host.playback.status == "looping"


def test_watcher_stops_when_looping_ends():
    host = _host()
    host.playback.status = "looping"
    host.playback.status_script = ["looping", "looping", "playing"]
    watcher = LoopWatcher(host, interval_ms=1, end_marker_seconds=3600.0)

    asyncio.run(watcher.wait())

    assert watcher.finished
    assert watcher.ticks == 3
    assert host.playback.loop_range == (0.0, 3600.0)
    assert host.playback.status == "stopped"


def test_cancelled_watcher_still_resets_marker():
    host = _host()
    host.playback.status = "looping"
    watcher = LoopWatcher(host, interval_ms=5, end_marker_seconds=1800.0)

    async def scenario():
        watcher.start()
        await asyncio.sleep(0.02)
        assert watcher.running
        watcher.cancel()
        await watcher.wait()

    asyncio.run(scenario())

    assert watcher.finished
    assert not watcher.running
    assert ("loop", (0.0, 1800.0)) in host.playback.calls


def test_wait_after_finish_returns_immediately():
    host = _host()
    watcher = LoopWatcher(host, interval_ms=1, end_marker_seconds=10.0)
    asyncio.run(watcher.wait())
    calls = len(host.playback.calls)
    asyncio.run(watcher.wait())
    assert len(host.playback.calls) == calls
