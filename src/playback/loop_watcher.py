from __future__ import annotations

"""Loop playback of a blick range and restore the transport when it ends."""

import asyncio
from typing import Optional, Tuple

from src.common.logging_utils import get_logger
from src.host.interfaces import Host
from src.timeline.pairs import NumberRange

logger = get_logger(__name__)


def reset_playback_marker(host: Host, end_marker_seconds: float) -> None:
    """Clear the loop region and stop, keeping the playhead and view in place."""
    playback = host.get_playback()
    navigation = host.get_main_editor().get_navigation()
    playhead = playback.get_playhead()
    time_left = navigation.get_time_view_left()
    # Pause before resetting the region or the audio cuts off with a click.
    playback.pause()
    playback.loop(0.0, end_marker_seconds)
    playback.pause()
    # Resetting the region rewinds the playhead.
    playback.seek(playhead)
    navigation.set_time_left(time_left)


def start_loop(host: Host, range_: NumberRange) -> Tuple[float, float]:
    """Start looping ``range_`` and return it in seconds."""
    axis = host.get_time_axis()
    playback = host.get_playback()
    start_seconds = axis.seconds_from_blick(range_.start)
    end_seconds = axis.seconds_from_blick(range_.end)
    # Seeking to the end first keeps the view from scrolling past the range.
    playback.seek(end_seconds)
    playback.seek(start_seconds)
    playback.loop(start_seconds, end_seconds)
    logger.info("start_loop start=%.3fs end=%.3fs", start_seconds, end_seconds)
    return start_seconds, end_seconds


class LoopWatcher:
    """Poll the transport until looping stops, then reset the loop marker.

    Leaving the loop region in place would block playback past its end, so
    the reset also runs when the watcher is cancelled.
    """

    def __init__(self, host: Host, *, interval_ms: int, end_marker_seconds: float) -> None:
        self._host = host
        self._interval = interval_ms / 1000.0
        self._end_marker_seconds = end_marker_seconds
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0
        self.finished = False

    async def run(self) -> None:
        playback = self._host.get_playback()
        try:
            while True:
                await asyncio.sleep(self._interval)
                self.ticks += 1
                if playback.get_status() != "looping":
                    break
        finally:
            reset_playback_marker(self._host, self._end_marker_seconds)
            self.finished = True
            logger.info("loop watcher finished ticks=%s", self.ticks)

    def start(self) -> asyncio.Task:
        """Schedule the watcher on the running event loop."""
        if self._task is None:
            self._task = asyncio.create_task(self.run())

            def _cleanup(_: asyncio.Task) -> None:
                self._task = None
                # A task cancelled before its first step never reaches run()'s finally.
                if not self.finished:
                    reset_playback_marker(self._host, self._end_marker_seconds)
                    self.finished = True

            self._task.add_done_callback(_cleanup)
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def wait(self) -> None:
        """Start the watcher if needed and wait until it has finished or been cancelled."""
        if self.finished:
            return
        task = self._task or self.start()
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
