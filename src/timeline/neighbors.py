from __future__ import annotations

"""Previous/next/nearest note lookups across every group reference on a track."""

import logging
from typing import Literal, Optional

from src.common.logging_utils import get_logger
from src.host.interfaces import Note, NoteGroupReference, Track
from src.timeline.locator import find_note_index_at_or_after
from src.timeline.pairs import NoteOnsetPair

logger = get_logger(__name__)

NearestMode = Literal["both", "before", "after"]
NEAREST_MODES = ("both", "before", "after")


def find_previous(position: float, track: Track) -> Optional[NoteOnsetPair]:
    """Return the latest note that ends at or before ``position`` on the track.

    A note that contains ``position`` is not a previous neighbor; its own
    predecessor is used instead.
    """
    best: Optional[NoteOnsetPair] = None
    for ref_index in range(track.num_groups()):
        ref = track.get_group_reference(ref_index)
        group = ref.target
        index = find_note_index_at_or_after(position, ref)
        if index > 0 and NoteOnsetPair(group.get_note(index - 1), ref).end > position:
            index -= 1
        if index == 0:
            continue
        pair = NoteOnsetPair(group.get_note(index - 1), ref)
        if pair.end <= position and (best is None or pair.onset > best.onset):
            best = pair
    return best


def find_next(position: float, track: Track) -> Optional[NoteOnsetPair]:
    """Return the note starting at or closest after ``position`` on the track."""
    best: Optional[NoteOnsetPair] = None
    for ref_index in range(track.num_groups()):
        ref = track.get_group_reference(ref_index)
        group = ref.target
        index = find_note_index_at_or_after(position, ref)
        if index >= group.num_notes():
            continue
        pair = NoteOnsetPair(group.get_note(index), ref)
        if pair.onset >= position and (best is None or pair.onset < best.onset):
            best = pair
    return best


def _candidate_in_group(position: float, ref: NoteGroupReference, mode: NearestMode) -> Optional[Note]:
    """Pick the note of one group reference that competes for ``position``."""
    group = ref.target
    count = group.num_notes()
    index = find_note_index_at_or_after(position, ref)
    if mode == "after":
        return group.get_note(index) if index < count else None
    if index >= count:
        return group.get_note(count - 1)
    if index == 0:
        return None if mode == "before" else group.get_note(0)
    prev_note = group.get_note(index - 1)
    if mode == "before":
        return prev_note
    note = group.get_note(index)
    local = position - ref.onset
    prev_end = prev_note.onset + prev_note.duration
    # Prefer the previous note when the position is still inside it or closer to its end.
    if local < prev_end or abs(note.onset - local) > abs(prev_end - local):
        return prev_note
    return note


def _distance(position: float, pair: NoteOnsetPair) -> float:
    """Return 0 inside the note span, else the gap to the nearer edge."""
    if position < pair.onset:
        return pair.onset - position
    if position > pair.end:
        return position - pair.end
    return 0


def find_nearest(position: float, track: Track, mode: NearestMode = "both") -> Optional[NoteOnsetPair]:
    """Return the note nearest ``position`` across all group references.

    ``mode`` restricts the search to notes before or after the position;
    ``"both"`` looks on either side. Ties keep the earliest reference.
    """
    if mode not in NEAREST_MODES:
        raise ValueError(f"Unknown nearest-note mode: {mode}")
    best: Optional[NoteOnsetPair] = None
    best_score = 0.0
    for ref_index in range(track.num_groups()):
        ref = track.get_group_reference(ref_index)
        if ref.target.num_notes() == 0:
            continue
        note = _candidate_in_group(position, ref, mode)
        if note is None:
            continue
        pair = NoteOnsetPair(note, ref)
        score = _distance(position, pair)
        if best is None or score < best_score:
            best = pair
            best_score = score
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "find_nearest position=%s mode=%s onset=%s",
            position,
            mode,
            None if best is None else best.onset,
        )
    return best
