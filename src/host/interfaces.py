from __future__ import annotations

"""Capability protocols for the editor host.

The timeline algorithms only talk to the host through these protocols, so a
real editor binding and the in-memory host in ``src.host.memory`` are
interchangeable.
"""

from typing import Any, Dict, List, Protocol, Sequence, Tuple

# Blicks per quarter note.
QUARTER_BLICKS = 705_600_000


class Note(Protocol):
    """A note placed in a group; onset is local to that group."""
    onset: int
    duration: int
    pitch: int
    lyrics: str
    phonemes: str
    attributes: Dict[str, Any]

    def index_in_parent(self) -> int:
        """Return the note's index within its group."""
        raise NotImplementedError


class Automation(Protocol):
    """A parameter curve with control points in group-local time."""
    def get(self, time: float) -> float:
        """Return the curve value at ``time``."""
        raise NotImplementedError

    def get_points(self, start: float, end: float) -> List[Tuple[float, float]]:
        """Return ``(time, value)`` points with ``start <= time <= end``."""
        raise NotImplementedError

    def add(self, time: float, value: float) -> None:
        raise NotImplementedError

    def remove(self, time: float) -> None:
        raise NotImplementedError

    @property
    def default_value(self) -> float:
        raise NotImplementedError


class NoteGroup(Protocol):
    """An ordered, non-overlapping sequence of notes."""
    uuid: str

    def num_notes(self) -> int:
        raise NotImplementedError

    def get_note(self, index: int) -> Note:
        raise NotImplementedError

    def get_parameter(self, name: str) -> Automation:
        raise NotImplementedError


class NoteGroupReference(Protocol):
    """Placement of a group on a track."""
    onset: int
    duration: int
    pitch_offset: int

    @property
    def target(self) -> NoteGroup:
        raise NotImplementedError


class Track(Protocol):
    def num_groups(self) -> int:
        raise NotImplementedError

    def get_group_reference(self, index: int) -> NoteGroupReference:
        raise NotImplementedError


class TimeAxis(Protocol):
    """Conversion between blicks and seconds."""
    def seconds_from_blick(self, blick: float) -> float:
        raise NotImplementedError

    def blick_from_seconds(self, seconds: float) -> float:
        raise NotImplementedError


class Playback(Protocol):
    """Transport control. Positions are in seconds."""
    def get_playhead(self) -> float:
        raise NotImplementedError

    def seek(self, seconds: float) -> None:
        raise NotImplementedError

    def pause(self) -> None:
        raise NotImplementedError

    def loop(self, start_seconds: float, end_seconds: float) -> None:
        raise NotImplementedError

    def get_status(self) -> str:
        """Return ``"stopped"``, ``"playing"`` or ``"looping"``."""
        raise NotImplementedError


class Navigation(Protocol):
    def get_time_view_left(self) -> float:
        raise NotImplementedError

    def set_time_left(self, blick: float) -> None:
        raise NotImplementedError

    def snap(self, blick: float) -> float:
        """Snap a blick position to the current quantize grid."""
        raise NotImplementedError


class Selection(Protocol):
    def has_selected_content(self) -> bool:
        raise NotImplementedError

    def get_selected_notes(self) -> Sequence[Note]:
        raise NotImplementedError

    def get_selected_groups(self) -> Sequence[NoteGroupReference]:
        raise NotImplementedError

    def clear_all(self) -> None:
        raise NotImplementedError

    def select_note(self, note: Note) -> None:
        raise NotImplementedError


class Editor(Protocol):
    """The piano-roll view the scripts operate on."""
    def get_current_track(self) -> Track:
        raise NotImplementedError

    def get_current_group(self) -> NoteGroupReference:
        raise NotImplementedError

    def get_selection(self) -> Selection:
        raise NotImplementedError

    def get_navigation(self) -> Navigation:
        raise NotImplementedError


class Host(Protocol):
    """Entry point handed to every editor action."""
    def get_main_editor(self) -> Editor:
        raise NotImplementedError

    def get_playback(self) -> Playback:
        raise NotImplementedError

    def get_time_axis(self) -> TimeAxis:
        raise NotImplementedError

    def show_message_box(self, title: str, message: str) -> None:
        raise NotImplementedError
