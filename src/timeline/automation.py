from __future__ import annotations

"""Move parameter automation from a parent group into a nested child group."""

from typing import List, Sequence

from src.common.logging_utils import get_logger
from src.host.interfaces import Automation, NoteGroupReference, Track
from src.timeline.neighbors import find_next, find_previous
from src.timeline.pairs import NumberRange

logger = get_logger(__name__)

PARAMETER_TYPES = (
    "pitchDelta",
    "vibratoEnv",
    "loudness",
    "tension",
    "breathiness",
    "voicing",
    "gender",
)


def move_range_into_child(
    parent: Automation,
    child: Automation,
    group_start: float,
    group_end: float,
    group_offset: float,
) -> bool:
    """Move the parent's curve over ``[group_start, group_end]`` into ``child``.

    ``group_start``/``group_end`` are parent-local; ``group_offset`` converts
    them to child-local time. Moved values are added to what the child
    already has, and the parent is left at its default inside the window
    with its values one blick outside kept. Returns False when the parent
    has no points in the window and is at its default on both edges.

    The window must not be inverted; this is not checked.
    """
    default = parent.default_value
    points = parent.get_points(group_start, group_end)
    start_value = parent.get(group_start)
    end_value = parent.get(group_end)
    if not points and start_value == default and end_value == default:
        return False

    child_start = group_start - group_offset
    child_end = group_end - group_offset
    child_start_value = child.get(child_start)
    child_end_value = child.get(child_end)
    child_point_values = [child.get(time - group_offset) for time, _ in points]
    parent_before_value = parent.get(group_start - 1)
    parent_after_value = parent.get(group_end + 1)

    child.add(child_start - 1, default)
    child.add(child_start, child_start_value + start_value)
    for (time, value), child_value in zip(points, child_point_values):
        child.add(time - group_offset, child_value + value)
    child.add(child_end, child_end_value + end_value)
    child.add(child_end + 1, default)

    for time, _ in points:
        parent.remove(time)
    parent.add(group_start - 1, parent_before_value)
    parent.add(group_start, default)
    parent.add(group_end, default)
    parent.add(group_end + 1, parent_after_value)
    return True


def packing_window(
    parent_ref: NoteGroupReference,
    child_ref: NoteGroupReference,
    track: Track,
    before_blicks: float = 0.0,
    after_blicks: float = 0.0,
) -> NumberRange:
    """Return the parent-local window to move into ``child_ref``.

    The child's span is widened by the padding, but never past the midpoint
    toward the previous or next note on the track.
    """
    child_start = child_ref.onset
    child_end = child_ref.onset + child_ref.duration
    start = float(child_start - before_blicks)
    end = float(child_end + after_blicks)
    prev_pair = find_previous(child_start, track)
    if prev_pair is not None:
        start = max((child_start + prev_pair.end) / 2, start)
    next_pair = find_next(child_end, track)
    if next_pair is not None:
        end = min((child_end + next_pair.onset) / 2, end)
    return NumberRange(start - parent_ref.onset, end - parent_ref.onset)


def pack_parameters_to_group(
    parent_ref: NoteGroupReference,
    child_ref: NoteGroupReference,
    track: Track,
    before_blicks: float = 0.0,
    after_blicks: float = 0.0,
    parameter_types: Sequence[str] = PARAMETER_TYPES,
) -> List[str]:
    """Pack every parameter type around ``child_ref`` and return the ones moved."""
    window = packing_window(parent_ref, child_ref, track, before_blicks, after_blicks)
    group_offset = child_ref.onset - parent_ref.onset
    parent_group = parent_ref.target
    child_group = child_ref.target
    packed: List[str] = []
    for name in parameter_types:
        moved = move_range_into_child(
            parent_group.get_parameter(name),
            child_group.get_parameter(name),
            window.start,
            window.end,
            group_offset,
        )
        if moved:
            packed.append(name)
    logger.info(
        "pack_parameters_to_group child=%s window=%s..%s packed=%s",
        child_group.uuid,
        window.start,
        window.end,
        packed,
    )
    return packed
