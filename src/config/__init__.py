from __future__ import annotations

"""Script settings loaded from environment variables and an optional YAML file."""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional
import os

import yaml

ENV_PREFIX = "SVS_"


def _env_int(name: str, default: int) -> int:
    """Read an int env var with a default."""
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    """Read a float env var with a default."""
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean env var with a default."""
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.lower() in {"1", "true", "yes"}


def _app_env() -> str:
    """Return the application environment name."""
    return os.getenv("APP_ENV") or os.getenv("ENV") or "dev"


@dataclass(frozen=True)
class Settings:
    """Tunables shared by the playback and editing actions."""
    padding_before_seconds: float = 0.0
    padding_after_seconds: float = 0.0
    padding_before_beat: float = 0.25
    padding_after_beat: float = 0.25
    excludes_play_surrounding_notes: bool = True
    not_in_loop_end_marker_seconds: float = 3600.0
    timer_interval_ms: int = 50
    pack_padding_before_beat: float = 0.25
    pack_padding_after_beat: float = 0.25
    # Fraction of the gap to a neighbor note that padding may not cross.
    surrounding_note_bias: float = 0.51
    app_env: str = "dev"

    @classmethod
    def from_env(cls) -> "Settings":
        """Construct settings from ``SVS_*`` environment variables."""
        defaults = cls()
        return cls(
            padding_before_seconds=_env_float(
                "SVS_PADDING_BEFORE_SECONDS", defaults.padding_before_seconds
            ),
            padding_after_seconds=_env_float(
                "SVS_PADDING_AFTER_SECONDS", defaults.padding_after_seconds
            ),
            padding_before_beat=_env_float("SVS_PADDING_BEFORE_BEAT", defaults.padding_before_beat),
            padding_after_beat=_env_float("SVS_PADDING_AFTER_BEAT", defaults.padding_after_beat),
            excludes_play_surrounding_notes=_env_bool(
                "SVS_EXCLUDES_PLAY_SURROUNDING_NOTES", defaults.excludes_play_surrounding_notes
            ),
            not_in_loop_end_marker_seconds=_env_float(
                "SVS_NOT_IN_LOOP_END_MARKER_SECONDS", defaults.not_in_loop_end_marker_seconds
            ),
            timer_interval_ms=_env_int("SVS_TIMER_INTERVAL_MS", defaults.timer_interval_ms),
            pack_padding_before_beat=_env_float(
                "SVS_PACK_PADDING_BEFORE_BEAT", defaults.pack_padding_before_beat
            ),
            pack_padding_after_beat=_env_float(
                "SVS_PACK_PADDING_AFTER_BEAT", defaults.pack_padding_after_beat
            ),
            surrounding_note_bias=_env_float(
                "SVS_SURROUNDING_NOTE_BIAS", defaults.surrounding_note_bias
            ),
            app_env=_app_env(),
        )

    def validate(self) -> "Settings":
        """Reject values the actions cannot work with."""
        if self.timer_interval_ms <= 0:
            raise ValueError("timer_interval_ms must be positive.")
        if self.not_in_loop_end_marker_seconds <= 0:
            raise ValueError("not_in_loop_end_marker_seconds must be positive.")
        if not 0.0 < self.surrounding_note_bias < 1.0:
            raise ValueError("surrounding_note_bias must be between 0 and 1.")
        for name in (
            "padding_before_seconds",
            "padding_after_seconds",
            "padding_before_beat",
            "padding_after_beat",
            "pack_padding_before_beat",
            "pack_padding_after_beat",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative.")
        return self


def _read_overrides(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping of setting overrides."""
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Script config must be a mapping: {path}")
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown script config keys in {path}: {', '.join(unknown)}")
    return data


def load_settings(path: Optional[str | Path] = None) -> Settings:
    """Return env settings overlaid with a YAML file.

    The file comes from ``path`` or ``SVS_SCRIPT_CONFIG``; without either the
    environment settings are returned as is.
    """
    settings = Settings.from_env()
    config_value = path if path is not None else os.getenv(f"{ENV_PREFIX}SCRIPT_CONFIG")
    if config_value:
        config_path = Path(config_value)
        if not config_path.exists():
            raise FileNotFoundError(f"Script config not found: {config_path}")
        settings = replace(settings, **_read_overrides(config_path))
    return settings.validate()
