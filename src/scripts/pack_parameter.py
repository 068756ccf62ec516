from __future__ import annotations

"""Move automation drawn around selected groups into those groups."""

from typing import Dict, List

from src.config import Settings
from src.host.interfaces import Host
from src.scripts.errors import EditorActionError
from src.timeline.automation import pack_parameters_to_group
from src.timeline.playback_range import beats_to_blicks

SCRIPT_NAME = "pack_parameter_to_group"


def pack_parameter_to_group(host: Host, settings: Settings) -> Dict[str, List[str]]:
    """Pack parameters for each selected group; returns packed names by group id."""
    editor = host.get_main_editor()
    child_refs = editor.get_selection().get_selected_groups()
    if not child_refs:
        raise EditorActionError(
            script=SCRIPT_NAME,
            detail="no_group_selected",
            message="No group is selected.",
        )
    parent_ref = editor.get_current_group()
    track = editor.get_current_track()
    packed: Dict[str, List[str]] = {}
    for child_ref in child_refs:
        packed[child_ref.target.uuid] = pack_parameters_to_group(
            parent_ref,
            child_ref,
            track,
            beats_to_blicks(settings.pack_padding_before_beat),
            beats_to_blicks(settings.pack_padding_after_beat),
        )
    return packed
