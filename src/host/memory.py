from __future__ import annotations

"""In-memory host implementation for tests and offline use."""

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import uuid

import numpy as np

from src.host.interfaces import QUARTER_BLICKS

PARAMETER_DEFAULTS: Dict[str, float] = {
    "pitchDelta": 0.0,
    "vibratoEnv": 1.0,
    "loudness": 0.0,
    "tension": 0.0,
    "breathiness": 0.0,
    "voicing": 1.0,
    "gender": 0.0,
}


@dataclass(eq=False)
class MemoryNote:
    """Mutable note; identity is the object itself."""
    onset: int
    duration: int
    pitch: int = 60
    lyrics: str = "la"
    phonemes: str = ""
    attributes: Dict[str, Any] = field(default_factory=dict)
    _parent: Optional["MemoryGroup"] = field(default=None, init=False, repr=False)

    def index_in_parent(self) -> int:
        """Return the note's index within its group."""
        if self._parent is None:
            raise ValueError("Note is not attached to a group.")
        return self._parent.index_of(self)


@dataclass
class MemoryAutomation:
    """Control points with linear interpolation between them."""
    default: float = 0.0
    _points: List[Tuple[float, float]] = field(default_factory=list, init=False, repr=False)

    @property
    def default_value(self) -> float:
        return self.default

    def get(self, time: float) -> float:
        """Return the interpolated value, holding the edge values outside the points."""
        if not self._points:
            return self.default
        times = [point[0] for point in self._points]
        values = [point[1] for point in self._points]
        return float(np.interp(time, times, values))

    def get_points(self, start: float, end: float) -> List[Tuple[float, float]]:
        return [(t, v) for t, v in self._points if start <= t <= end]

    def all_points(self) -> List[Tuple[float, float]]:
        return list(self._points)

    def add(self, time: float, value: float) -> None:
        """Add a point, replacing any point already at ``time``."""
        times = [point[0] for point in self._points]
        index = bisect_left(times, time)
        if index < len(times) and times[index] == time:
            self._points[index] = (time, value)
        else:
            self._points.insert(index, (time, value))

    def remove(self, time: float) -> None:
        self._points = [point for point in self._points if point[0] != time]


@dataclass(eq=False)
class MemoryGroup:
    """Notes sorted by onset plus named automation parameters."""
    name: str = ""
    uuid: str = field(default_factory=lambda: uuid.uuid4().hex)
    _notes: List[MemoryNote] = field(default_factory=list, init=False, repr=False)
    _parameters: Dict[str, MemoryAutomation] = field(default_factory=dict, init=False, repr=False)

    def add_note(self, note: MemoryNote) -> MemoryNote:
        """Insert a note in onset order; overlapping notes are rejected."""
        if note.duration <= 0:
            raise ValueError(f"Note duration must be positive: {note.duration}")
        onsets = [existing.onset for existing in self._notes]
        index = bisect_left(onsets, note.onset)
        if index > 0:
            prev = self._notes[index - 1]
            if prev.onset + prev.duration > note.onset:
                raise ValueError(f"Note at {note.onset} overlaps note at {prev.onset}.")
        if index < len(self._notes) and note.onset + note.duration > self._notes[index].onset:
            raise ValueError(
                f"Note at {note.onset} overlaps note at {self._notes[index].onset}."
            )
        self._notes.insert(index, note)
        note._parent = self
        return note

    def num_notes(self) -> int:
        return len(self._notes)

    def get_note(self, index: int) -> MemoryNote:
        return self._notes[index]

    def index_of(self, note: MemoryNote) -> int:
        for index, candidate in enumerate(self._notes):
            if candidate is note:
                return index
        raise ValueError("Note does not belong to this group.")

    def extent(self) -> int:
        """Return the end of the last note in group-local blicks."""
        if not self._notes:
            return 0
        last = self._notes[-1]
        return last.onset + last.duration

    def get_parameter(self, name: str) -> MemoryAutomation:
        automation = self._parameters.get(name)
        if automation is None:
            automation = MemoryAutomation(default=PARAMETER_DEFAULTS.get(name, 0.0))
            self._parameters[name] = automation
        return automation


class GroupLibrary:
    """Groups by id. References resolve their target through this lookup."""

    def __init__(self) -> None:
        self._groups: Dict[str, MemoryGroup] = {}

    def add(self, group: MemoryGroup) -> MemoryGroup:
        self._groups[group.uuid] = group
        return group

    def get(self, group_id: str) -> MemoryGroup:
        try:
            return self._groups[group_id]
        except KeyError:
            raise KeyError(f"Unknown group id: {group_id}") from None

    def __contains__(self, group_id: object) -> bool:
        return group_id in self._groups

    def __len__(self) -> int:
        return len(self._groups)


@dataclass(eq=False)
class MemoryGroupReference:
    """Placement of a group; holds the target id, not the group."""
    library: GroupLibrary = field(repr=False)
    target_id: str
    onset: int = 0
    duration: int = 0
    pitch_offset: int = 0

    @property
    def target(self) -> MemoryGroup:
        return self.library.get(self.target_id)


class MemoryTrack:
    """Ordered group references sharing one group library."""

    def __init__(self, library: Optional[GroupLibrary] = None) -> None:
        self.library = library if library is not None else GroupLibrary()
        self._refs: List[MemoryGroupReference] = []

    def place(
        self,
        group: MemoryGroup,
        *,
        onset: int = 0,
        duration: Optional[int] = None,
        pitch_offset: int = 0,
        index: Optional[int] = None,
    ) -> MemoryGroupReference:
        """Register ``group`` and add a reference to it at ``onset``."""
        if group.uuid not in self.library:
            self.library.add(group)
        ref = MemoryGroupReference(
            library=self.library,
            target_id=group.uuid,
            onset=onset,
            duration=group.extent() if duration is None else duration,
            pitch_offset=pitch_offset,
        )
        if index is None:
            self._refs.append(ref)
        else:
            self._refs.insert(index, ref)
        return ref

    def add_group_reference(self, ref: MemoryGroupReference) -> None:
        self._refs.append(ref)

    def remove_group_reference(self, index: int) -> MemoryGroupReference:
        return self._refs.pop(index)

    def num_groups(self) -> int:
        return len(self._refs)

    def get_group_reference(self, index: int) -> MemoryGroupReference:
        return self._refs[index]


def make_group(
    notes: Iterable[Tuple[int, int]],
    *,
    name: str = "",
    lyrics: str = "la",
) -> MemoryGroup:
    """Build a group from ``(onset, duration)`` tuples."""
    group = MemoryGroup(name=name)
    for onset, duration in notes:
        group.add_note(MemoryNote(onset=onset, duration=duration, lyrics=lyrics))
    return group


class TempoTimeAxis:
    """Blick/second conversion over a piecewise-constant tempo map."""

    def __init__(self, tempos: Sequence[Tuple[int, float]] = ((0, 120.0),)) -> None:
        if not tempos:
            raise ValueError("At least one tempo mark is required.")
        ordered = sorted(tempos, key=lambda mark: mark[0])
        self._blicks = np.array([float(mark[0]) for mark in ordered])
        self._bpms = np.array([float(mark[1]) for mark in ordered])
        # Seconds at each tempo mark.
        seconds = [0.0]
        for i in range(len(ordered) - 1):
            span = self._blicks[i + 1] - self._blicks[i]
            seconds.append(seconds[-1] + self._span_seconds(span, self._bpms[i]))
        self._seconds = np.array(seconds)

    @staticmethod
    def _span_seconds(blicks: float, bpm: float) -> float:
        return float(blicks) / QUARTER_BLICKS * 60.0 / float(bpm)

    def seconds_from_blick(self, blick: float) -> float:
        idx = max(int(np.searchsorted(self._blicks, blick, side="right")) - 1, 0)
        return float(self._seconds[idx]) + self._span_seconds(
            blick - self._blicks[idx], self._bpms[idx]
        )

    def blick_from_seconds(self, seconds: float) -> float:
        idx = max(int(np.searchsorted(self._seconds, seconds, side="right")) - 1, 0)
        elapsed = seconds - float(self._seconds[idx])
        return float(self._blicks[idx]) + elapsed * float(self._bpms[idx]) / 60.0 * QUARTER_BLICKS


@dataclass
class MemoryPlayback:
    """Recording transport stub.

    ``status_script`` feeds successive ``get_status`` results; once it runs
    out the current ``status`` is returned.
    """
    playhead: float = 0.0
    status: str = "stopped"
    loop_range: Optional[Tuple[float, float]] = None
    status_script: List[str] = field(default_factory=list)
    calls: List[Tuple[str, Tuple[float, ...]]] = field(default_factory=list)

    def get_playhead(self) -> float:
        return self.playhead

    def seek(self, seconds: float) -> None:
        self.calls.append(("seek", (seconds,)))
        self.playhead = seconds

    def pause(self) -> None:
        self.calls.append(("pause", ()))
        self.status = "stopped"

    def loop(self, start_seconds: float, end_seconds: float) -> None:
        self.calls.append(("loop", (start_seconds, end_seconds)))
        self.loop_range = (start_seconds, end_seconds)
        self.status = "looping"

    def get_status(self) -> str:
        if self.status_script:
            self.status = self.status_script.pop(0)
        return self.status


@dataclass
class MemoryNavigation:
    time_left: float = 0.0
    grid_blicks: int = QUARTER_BLICKS // 4

    def get_time_view_left(self) -> float:
        return self.time_left

    def set_time_left(self, blick: float) -> None:
        self.time_left = blick

    def snap(self, blick: float) -> float:
        return round(blick / self.grid_blicks) * self.grid_blicks


@dataclass
class MemorySelection:
    notes: List[MemoryNote] = field(default_factory=list)
    groups: List[MemoryGroupReference] = field(default_factory=list)

    def has_selected_content(self) -> bool:
        return bool(self.notes or self.groups)

    def get_selected_notes(self) -> List[MemoryNote]:
        return list(self.notes)

    def get_selected_groups(self) -> List[MemoryGroupReference]:
        return list(self.groups)

    def clear_all(self) -> None:
        self.notes.clear()
        self.groups.clear()

    def select_note(self, note: MemoryNote) -> None:
        if not any(existing is note for existing in self.notes):
            self.notes.append(note)


@dataclass
class MemoryEditor:
    track: MemoryTrack
    current_group: MemoryGroupReference
    selection: MemorySelection = field(default_factory=MemorySelection)
    navigation: MemoryNavigation = field(default_factory=MemoryNavigation)

    def get_current_track(self) -> MemoryTrack:
        return self.track

    def get_current_group(self) -> MemoryGroupReference:
        return self.current_group

    def get_selection(self) -> MemorySelection:
        return self.selection

    def get_navigation(self) -> MemoryNavigation:
        return self.navigation


@dataclass
class MemoryHost:
    """Host stub that records message boxes instead of showing them."""
    editor: MemoryEditor
    playback: MemoryPlayback = field(default_factory=MemoryPlayback)
    time_axis: TempoTimeAxis = field(default_factory=TempoTimeAxis)
    messages: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def for_track(cls, track: MemoryTrack, main_group: Optional[MemoryGroup] = None) -> "MemoryHost":
        """Build a host whose current group is the track's first reference.

        When ``main_group`` is given it is placed at onset 0 first.
        """
        if main_group is not None:
            current = track.place(main_group, onset=0, index=0)
        elif track.num_groups() > 0:
            current = track.get_group_reference(0)
        else:
            current = track.place(MemoryGroup(name="main"), onset=0)
        return cls(editor=MemoryEditor(track=track, current_group=current))

    def get_main_editor(self) -> MemoryEditor:
        return self.editor

    def get_playback(self) -> MemoryPlayback:
        return self.playback

    def get_time_axis(self) -> TempoTimeAxis:
        return self.time_axis

    def show_message_box(self, title: str, message: str) -> None:
        self.messages.append((title, message))
