from __future__ import annotations

"""Loop range computation: padding and keeping clear of neighboring notes."""

from typing import Sequence

from src.config import Settings
from src.host.interfaces import QUARTER_BLICKS, TimeAxis, Track
from src.timeline.neighbors import find_next, find_previous
from src.timeline.pairs import NoteOnsetPair, NumberRange

# Padding may reach this fraction of the way toward a neighbor note. Kept at
# 0.51 for compatibility; it has no derivation beyond "just past the midpoint".
SURROUNDING_NOTE_BIAS = 0.51


def beats_to_blicks(beats: float) -> float:
    return beats * QUARTER_BLICKS


def range_of_pairs(pairs: Sequence[NoteOnsetPair]) -> NumberRange:
    """Return the span from the first pair's onset to the last pair's end."""
    if not pairs:
        raise ValueError("At least one note is required to build a range.")
    return NumberRange(pairs[0].onset, pairs[-1].end)


def apply_padding(
    range_: NumberRange,
    axis: TimeAxis,
    before_blicks: float = 0.0,
    after_blicks: float = 0.0,
    *,
    before_seconds: float = 0.0,
    after_seconds: float = 0.0,
) -> NumberRange:
    """Widen a range by blick padding and second padding.

    The blick padding is applied first, then the range is converted to
    seconds so second padding can be added regardless of tempo.
    """
    start_seconds = axis.seconds_from_blick(range_.start - before_blicks) - before_seconds
    end_seconds = axis.seconds_from_blick(range_.end + after_blicks) + after_seconds
    return NumberRange(axis.blick_from_seconds(start_seconds), axis.blick_from_seconds(end_seconds))


def exclude_surrounding_notes(
    original: NumberRange,
    padded: NumberRange,
    track: Track,
    bias: float = SURROUNDING_NOTE_BIAS,
) -> NumberRange:
    """Pull padded bounds back so the range stays clear of neighbor notes.

    Each bound may move at most ``bias`` of the way from the original bound
    toward the adjacent note. If the clamped bounds cross, both collapse to
    their midpoint.
    """
    result = NumberRange(padded.start, padded.end)
    prev_pair = find_previous(original.start, track)
    if prev_pair is not None:
        prev_end = prev_pair.end
        limit = prev_end + (original.start - prev_end) * bias
        if result.start < limit:
            result.start = limit
    next_pair = find_next(original.end, track)
    if next_pair is not None:
        next_onset = next_pair.onset
        limit = next_onset - (next_onset - original.end) * bias
        if result.end > limit:
            result.end = limit
    if result.start > result.end:
        middle = (result.start + result.end) / 2
        result = NumberRange(middle, middle)
    return result


def build_playback_range(
    pairs: Sequence[NoteOnsetPair],
    track: Track,
    axis: TimeAxis,
    settings: Settings,
) -> NumberRange:
    """Return the loop range for ``pairs`` with the configured padding rules."""
    original = range_of_pairs(pairs)
    padded = apply_padding(
        original,
        axis,
        beats_to_blicks(settings.padding_before_beat),
        beats_to_blicks(settings.padding_after_beat),
        before_seconds=settings.padding_before_seconds,
        after_seconds=settings.padding_after_seconds,
    )
    if settings.excludes_play_surrounding_notes:
        padded = exclude_surrounding_notes(
            original, padded, track, bias=settings.surrounding_note_bias
        )
    return padded
