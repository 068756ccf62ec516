from __future__ import annotations

"""Step the note selection forward in the current group."""

from typing import Optional

from src.config import Settings
from src.host.interfaces import Host, Note
from src.timeline.locator import find_note_at_or_after


def select_next_note(host: Host, settings: Optional[Settings] = None) -> Optional[Note]:
    """Select the note after the selected one, or the one nearest the playhead.

    With several notes selected only the first stays selected.
    """
    editor = host.get_main_editor()
    selection = editor.get_selection()
    current_ref = editor.get_current_group()
    group = current_ref.target
    target: Optional[Note] = None
    selected = list(selection.get_selected_notes())
    if selected:
        target = selected[0]
        if len(selected) == 1:
            index = target.index_in_parent()
            if index + 1 < group.num_notes():
                target = group.get_note(index + 1)
    else:
        playhead = host.get_time_axis().blick_from_seconds(host.get_playback().get_playhead())
        target = find_note_at_or_after(playhead, current_ref)
        if target is not None and target.index_in_parent() > 0:
            prev_note = group.get_note(target.index_in_parent() - 1)
            center = (target.onset + prev_note.onset + prev_note.duration) / 2 + current_ref.onset
            if playhead < center:
                target = prev_note
    selection.clear_all()
    if target is not None:
        selection.select_note(target)
    return target
