"""
Timeline Module

Note position lookups, phrase detection, loop ranges and automation packing
over the host capability protocols.
"""

from src.timeline.pairs import NoteOnsetPair, NumberRange, absolute_onset, collect_selected_pairs
from src.timeline.locator import find_note_at_or_after, find_note_index_at_or_after
from src.timeline.neighbors import find_nearest, find_next, find_previous
from src.timeline.phrase import next_phrase, phrase_containing
from src.timeline.playback_range import (
    apply_padding,
    build_playback_range,
    exclude_surrounding_notes,
    range_of_pairs,
)
from src.timeline.automation import (
    PARAMETER_TYPES,
    move_range_into_child,
    pack_parameters_to_group,
    packing_window,
)

__all__ = [
    # Positions
    "NoteOnsetPair",
    "NumberRange",
    "absolute_onset",
    "collect_selected_pairs",
    # Search
    "find_note_at_or_after",
    "find_note_index_at_or_after",
    "find_previous",
    "find_next",
    "find_nearest",
    # Phrases
    "phrase_containing",
    "next_phrase",
    # Playback ranges
    "range_of_pairs",
    "apply_padding",
    "exclude_surrounding_notes",
    "build_playback_range",
    # Automation
    "PARAMETER_TYPES",
    "move_range_into_child",
    "packing_window",
    "pack_parameters_to_group",
]
