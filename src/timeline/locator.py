from __future__ import annotations

"""Binary search for notes inside one group reference."""

from typing import Optional

from src.host.interfaces import Note, NoteGroupReference


def find_note_index_at_or_after(position: float, ref: NoteGroupReference) -> int:
    """Return the index of the first note whose onset is at or after ``position``.

    ``position`` is a timeline position; it is converted to the group's local
    time first. Returns the group's note count when every note starts before
    ``position``, which makes the result usable as an insertion cursor.
    """
    group = ref.target
    target = position - ref.onset
    lo = 0
    hi = group.num_notes()
    # Invariant: onset(lo - 1) < target <= onset(hi), with the out-of-range
    # ends treated as -inf and +inf.
    while lo < hi:
        mid = (lo + hi) // 2
        if group.get_note(mid).onset < target:
            lo = mid + 1
        else:
            hi = mid
    return lo


def find_note_at_or_after(position: float, ref: NoteGroupReference) -> Optional[Note]:
    """Return the note with the smallest onset at or after ``position``, or None."""
    group = ref.target
    index = find_note_index_at_or_after(position, ref)
    if index >= group.num_notes():
        return None
    return group.get_note(index)
