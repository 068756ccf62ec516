"""
Editor Actions

Each action takes the host and the loaded settings and performs one edit or
playback command.
"""

from src.scripts.errors import EditorActionError
from src.scripts.fit_note_edge import fit_note_edge_to_playhead
from src.scripts.pack_parameter import pack_parameter_to_group
from src.scripts.repeat_play import repeat_next_phrase, repeat_selected_notes
from src.scripts.select_next_note import select_next_note
from src.scripts.registry import SCRIPTS, Script, run_script

__all__ = [
    "EditorActionError",
    "SCRIPTS",
    "Script",
    "run_script",
    # Playback
    "repeat_selected_notes",
    "repeat_next_phrase",
    # Editing
    "pack_parameter_to_group",
    "fit_note_edge_to_playhead",
    "select_next_note",
]
