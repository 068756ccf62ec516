from __future__ import annotations

"""Move the nearest note edge to the playhead."""

from typing import Optional

from src.common.logging_utils import get_logger
from src.config import Settings
from src.host.interfaces import Host, NoteGroupReference, Selection
from src.scripts.errors import EditorActionError
from src.timeline.neighbors import find_nearest, find_next, find_previous
from src.timeline.pairs import NoteOnsetPair

logger = get_logger(__name__)

SCRIPT_NAME = "fit_note_edge_to_playhead"


def _selection_side(
    nearest: NoteOnsetPair,
    selection: Selection,
    current_ref: NoteGroupReference,
) -> Optional[bool]:
    """Return which edge two selected neighbors point at, or None.

    True means the leading edge of ``nearest``, False its trailing edge.
    """
    if nearest.ref.target.uuid != current_ref.target.uuid:
        return None
    selected = list(selection.get_selected_notes())
    if len(selected) != 2:
        return None
    near_index = nearest.note.index_in_parent()
    indices = [note.index_in_parent() for note in selected]
    if near_index not in indices:
        return None
    other_index = indices[1 - indices.index(near_index)]
    if other_index == near_index - 1:
        return True
    if other_index == near_index + 1:
        return False
    return None


def fit_note_edge_to_playhead(host: Host, settings: Optional[Settings] = None) -> Optional[int]:
    """Move the edge nearest the playhead onto it; returns the new edge position.

    Adjacent notes sharing the edge are resized together. When the edge is
    already on the playhead, the playhead is snapped to the grid and the edge
    follows it. Returns None when nothing was changed.
    """
    editor = host.get_main_editor()
    track = editor.get_current_track()
    playhead = int(round(host.get_time_axis().blick_from_seconds(host.get_playback().get_playhead())))
    nearest = find_nearest(playhead, track, "both")
    if nearest is None:
        raise EditorActionError(
            script=SCRIPT_NAME,
            detail="no_notes",
            message="No notes were found on the current track.",
        )

    near_leading = playhead < nearest.onset + nearest.note.duration / 2
    side = _selection_side(nearest, editor.get_selection(), editor.get_current_group())
    if side is not None:
        near_leading = side

    before: Optional[NoteOnsetPair]
    after: Optional[NoteOnsetPair]
    if near_leading:
        after = nearest
        before = find_previous(after.onset, track)
        already_fit = playhead == after.onset
        if before is not None and before.end != after.onset:
            before = None
    else:
        before = nearest
        after = find_next(before.end, track)
        already_fit = playhead == before.end
        if after is not None and before.end != after.onset:
            after = None

    if already_fit:
        playhead = int(editor.get_navigation().snap(playhead))
        if before is not None and playhead <= before.onset:
            before = after = None
        if after is not None and playhead >= after.end:
            before = after = None

    if before is not None and playhead - before.onset <= 0:
        return None
    if after is not None and after.end - playhead <= 0:
        return None
    if before is None and after is None:
        return None

    if before is not None:
        before.note.duration = playhead - before.onset
    if after is not None:
        after_end = after.end
        after.note.duration = after_end - playhead
        after.note.onset = playhead - after.ref.onset
        after.refresh()
    logger.info("fit_note_edge_to_playhead edge=%s", playhead)
    return playhead
