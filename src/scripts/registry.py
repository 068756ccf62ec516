from __future__ import annotations

"""Editor action table and the runner that executes one action."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import uuid

from src.common.logging_utils import clear_log_context, get_logger, set_log_context, summarize_payload
from src.config import Settings, load_settings
from src.host.interfaces import Host
from src.playback.loop_watcher import LoopWatcher
from src.scripts.errors import EditorActionError
from src.scripts.fit_note_edge import fit_note_edge_to_playhead
from src.scripts.pack_parameter import pack_parameter_to_group
from src.scripts.repeat_play import repeat_next_phrase, repeat_selected_notes
from src.scripts.select_next_note import select_next_note

logger = get_logger(__name__)


@dataclass(frozen=True)
class Script:
    name: str
    title: str
    category: str
    handler: Callable[[Host, Settings], Any]


SCRIPTS: Dict[str, Script] = {
    script.name: script
    for script in (
        Script(
            name="repeat_play_of_selected_notes",
            title="Repeat play of selected notes",
            category="playback",
            handler=repeat_selected_notes,
        ),
        Script(
            name="repeat_play_of_next_phrase",
            title="Repeat play of next phrase",
            category="playback",
            handler=repeat_next_phrase,
        ),
        Script(
            name="pack_parameter_to_group",
            title="Pack parameter to group",
            category="edit note",
            handler=pack_parameter_to_group,
        ),
        Script(
            name="fit_note_edge_to_playhead",
            title="Fit note edge to playhead",
            category="edit note",
            handler=fit_note_edge_to_playhead,
        ),
        Script(
            name="select_next_note",
            title="Select next note",
            category="edit note",
            handler=select_next_note,
        ),
    )
}


async def run_script(name: str, host: Host, settings: Optional[Settings] = None) -> Any:
    """Run one action; a returned loop watcher is awaited until playback stops.

    ``EditorActionError`` is reported through the host's message box and
    yields None.
    """
    script = SCRIPTS.get(name)
    if script is None:
        raise KeyError(f"Unknown script: {name}")
    if settings is None:
        settings = load_settings()
    set_log_context(script=name, run_id=uuid.uuid4().hex[:12])
    try:
        try:
            result = script.handler(host, settings)
        except EditorActionError as exc:
            logger.warning("run_script rejected payload=%s", exc.to_payload())
            host.show_message_box(script.title, exc.message)
            return None
        if isinstance(result, LoopWatcher):
            await result.wait()
            logger.info("run_script loop finished ticks=%s", result.ticks)
        else:
            logger.info("run_script done result=%s", summarize_payload(result))
        return result
    finally:
        clear_log_context()
