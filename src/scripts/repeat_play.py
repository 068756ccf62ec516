from __future__ import annotations

"""Loop playback over the selected notes or over the next phrase."""

from typing import List, Optional

from src.common.logging_utils import get_logger
from src.config import Settings
from src.host.interfaces import Host
from src.playback.loop_watcher import LoopWatcher, reset_playback_marker, start_loop
from src.timeline.pairs import NoteOnsetPair, collect_selected_pairs
from src.timeline.phrase import next_phrase
from src.timeline.playback_range import build_playback_range

logger = get_logger(__name__)


def _loop_pairs(host: Host, pairs: List[NoteOnsetPair], settings: Settings) -> LoopWatcher:
    track = host.get_main_editor().get_current_track()
    range_ = build_playback_range(pairs, track, host.get_time_axis(), settings)
    start_loop(host, range_)
    return LoopWatcher(
        host,
        interval_ms=settings.timer_interval_ms,
        end_marker_seconds=settings.not_in_loop_end_marker_seconds,
    )


def repeat_selected_notes(host: Host, settings: Settings) -> Optional[LoopWatcher]:
    """Loop the selected notes; when already playing, stop instead."""
    playback = host.get_playback()
    if playback.get_status() != "stopped":
        reset_playback_marker(host, settings.not_in_loop_end_marker_seconds)
        logger.info("repeat_selected_notes stopped running playback")
        return None
    editor = host.get_main_editor()
    pairs = collect_selected_pairs(editor.get_selection(), editor.get_current_group())
    if not pairs:
        return None
    return _loop_pairs(host, pairs, settings)


def repeat_next_phrase(host: Host, settings: Settings) -> Optional[LoopWatcher]:
    """Loop the phrase after the one nearest the playhead."""
    playback = host.get_playback()
    if playback.get_status() != "stopped":
        reset_playback_marker(host, settings.not_in_loop_end_marker_seconds)
    axis = host.get_time_axis()
    track = host.get_main_editor().get_current_track()
    playhead = axis.blick_from_seconds(playback.get_playhead())
    pairs = next_phrase(playhead, track)
    if not pairs:
        logger.info("repeat_next_phrase found no phrase after playhead=%s", playhead)
        return None
    return _loop_pairs(host, pairs, settings)
