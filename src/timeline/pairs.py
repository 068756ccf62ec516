from __future__ import annotations

"""Absolute note positions and the small value types shared by the timeline code."""

from dataclasses import dataclass, field
from typing import List

from src.host.interfaces import Note, NoteGroupReference, Selection


def absolute_onset(note: Note, ref: NoteGroupReference) -> int:
    """Return a note's timeline position through the reference it is seen through."""
    return note.onset + ref.onset


@dataclass
class NoteOnsetPair:
    """A note together with the group reference that places it on the timeline.

    Grouped notes can appear at several places in a project, so the note alone
    does not determine a timeline position. ``onset`` is derived; call
    ``refresh()`` after moving the note or the reference.
    """
    note: Note
    ref: NoteGroupReference
    onset: int = field(init=False)

    def __post_init__(self) -> None:
        self.refresh()

    def refresh(self) -> None:
        self.onset = absolute_onset(self.note, self.ref)

    @property
    def end(self) -> int:
        return self.onset + self.note.duration


@dataclass
class NumberRange:
    """A ``[start, end]`` span in blicks."""
    start: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.start


def collect_selected_pairs(selection: Selection, current_ref: NoteGroupReference) -> List[NoteOnsetPair]:
    """Return selected notes from every group in timeline order.

    Selecting a group does not select its notes, so notes of selected group
    references are collected as well.
    """
    pairs: List[NoteOnsetPair] = []
    if not selection.has_selected_content():
        return pairs
    for note in selection.get_selected_notes():
        pairs.append(NoteOnsetPair(note, current_ref))
    for ref in selection.get_selected_groups():
        group = ref.target
        for index in range(group.num_notes()):
            pairs.append(NoteOnsetPair(group.get_note(index), ref))
    pairs.sort(key=lambda pair: pair.onset)
    return pairs
