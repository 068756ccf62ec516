from __future__ import annotations

"""Phrase detection: maximal runs of back-to-back notes across group references."""

from dataclasses import dataclass
import logging
from typing import List

from src.common.logging_utils import get_logger
from src.host.interfaces import NoteGroup, NoteGroupReference, Track
from src.timeline.locator import find_note_index_at_or_after
from src.timeline.neighbors import find_nearest
from src.timeline.pairs import NoteOnsetPair

logger = get_logger(__name__)


@dataclass
class _GroupCursor:
    """Walk state for one group reference."""
    ref: NoteGroupReference
    group: NoteGroup
    left: int
    right: int
    count: int


def _cursors_at(position: float, track: Track) -> List[_GroupCursor]:
    cursors: List[_GroupCursor] = []
    for ref_index in range(track.num_groups()):
        ref = track.get_group_reference(ref_index)
        group = ref.target
        index = find_note_index_at_or_after(position, ref)
        cursors.append(
            _GroupCursor(ref=ref, group=group, left=index, right=index, count=group.num_notes())
        )
    return cursors


def phrase_containing(seed: NoteOnsetPair, track: Track) -> List[NoteOnsetPair]:
    """Return the phrase around ``seed`` in timeline order.

    A phrase is a run of notes where each note starts exactly where the
    previous one ends. Notes may come from different group references, so
    every reference keeps its own cursor and passes repeat until none of them
    can extend the run. Any gap, even one blick, ends the phrase.
    """
    cursors = _cursors_at(seed.onset, track)
    phrase: List[NoteOnsetPair] = []

    frontier = seed.onset
    grown = True
    while grown:
        grown = False
        for cursor in cursors:
            if cursor.right >= cursor.count:
                continue
            note = cursor.group.get_note(cursor.right)
            if note.onset + cursor.ref.onset == frontier:
                phrase.append(NoteOnsetPair(note, cursor.ref))
                frontier += note.duration
                cursor.right += 1
                grown = True

    frontier = seed.onset
    grown = True
    while grown:
        grown = False
        for cursor in cursors:
            if cursor.left <= 0:
                continue
            note = cursor.group.get_note(cursor.left - 1)
            if note.onset + note.duration + cursor.ref.onset == frontier:
                phrase.insert(0, NoteOnsetPair(note, cursor.ref))
                frontier -= note.duration
                cursor.left -= 1
                grown = True

    if not phrase:
        phrase.append(seed)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "phrase_containing seed=%s start=%s end=%s notes=%s",
            seed.onset,
            phrase[0].onset,
            phrase[-1].end,
            len(phrase),
        )
    return phrase


def next_phrase(position: float, track: Track) -> List[NoteOnsetPair]:
    """Return the phrase following the one nearest ``position``.

    Empty when the track has no notes or nothing follows the current phrase.
    """
    nearest = find_nearest(position, track, "both")
    if nearest is None:
        return []
    current = phrase_containing(nearest, track)
    following = find_nearest(current[-1].end + 1, track, "after")
    if following is None:
        return []
    return phrase_containing(following, track)
