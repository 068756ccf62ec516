from __future__ import annotations

"""Logging helpers for editor actions and timeline lookups.

Records carry the running script name and a per-run ID. Library modules only
create loggers; handlers come from ``configure_logging`` or, when ``LOG_DIR``
is set, from a per-module log file.
"""

from typing import Any, Dict, Optional
from pathlib import Path
import contextvars
import json
import logging
import logging.config
import os
from datetime import datetime, timezone

CONTEXT_LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s %(filename)s:%(lineno)d:%(funcName)s "
    "script=%(script)s run_id=%(run_id)s %(message)s"
)

_script = contextvars.ContextVar("log_script", default="-")
_run_id = contextvars.ContextVar("log_run_id", default="-")


def summarize_payload(value: Any, *, max_list: int = 20, max_str: int = 200, depth: int = 3) -> Any:
    """Return a size-limited copy of an action result for log lines."""
    if depth <= 0:
        return f"<{type(value).__name__}>"
    if isinstance(value, dict):
        return {
            str(key): summarize_payload(val, max_list=max_list, max_str=max_str, depth=depth - 1)
            for key, val in list(value.items())[:max_list]
        }
    if isinstance(value, (list, tuple)):
        if len(value) > max_list:
            return {"__len__": len(value), "sample": list(value[:5])}
        return [
            summarize_payload(item, max_list=max_list, max_str=max_str, depth=depth - 1)
            for item in value
        ]
    if isinstance(value, str) and len(value) > max_str:
        return value[:max_str] + "...(truncated)"
    return value


def set_log_context(*, script: Optional[str] = None, run_id: Optional[str] = None) -> None:
    if script is not None:
        _script.set(script)
    if run_id is not None:
        _run_id.set(run_id)


def clear_log_context() -> None:
    _script.set("-")
    _run_id.set("-")


class LoggingContextFilter(logging.Filter):
    """Copy the script name and run ID onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.script = _script.get()
        record.run_id = _run_id.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "line": record.lineno,
            "function": record.funcName,
            "message": record.getMessage(),
            "script": getattr(record, "script", "-"),
            "run_id": getattr(record, "run_id", "-"),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _use_json_logs() -> bool:
    return os.getenv("LOG_FORMAT", "").lower() == "json"


def build_formatter() -> logging.Formatter:
    """Return the JSON formatter when ``LOG_FORMAT=json``, else the plain one."""
    if _use_json_logs():
        return JsonFormatter()
    return logging.Formatter(CONTEXT_LOG_FORMAT)


def attach_context_filter(handler: logging.Handler) -> None:
    if not any(isinstance(f, LoggingContextFilter) for f in handler.filters):
        handler.addFilter(LoggingContextFilter())


def configure_logging() -> None:
    """Apply ``config/logging.json`` (or ``LOG_CONFIG``) to the root logger.

    ``LOG_FORMAT=json`` switches every configured handler to the JSON
    formatter and ``LOG_LEVEL`` overrides the root level.
    """
    root_dir = Path(__file__).resolve().parents[2]
    config_path = root_dir / "config" / "logging.json"
    override_path = os.getenv("LOG_CONFIG")
    if override_path:
        config_path = Path(override_path)
        if not config_path.is_absolute():
            config_path = root_dir / config_path
    if config_path.exists():
        config = json.loads(config_path.read_text(encoding="utf-8"))
        if _use_json_logs() and "json" in config.get("formatters", {}):
            for handler in config.get("handlers", {}).values():
                handler["formatter"] = "json"
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(level=logging.INFO, format=CONTEXT_LOG_FORMAT)
    level_override = os.getenv("LOG_LEVEL")
    if level_override:
        logging.getLogger().setLevel(level_override.upper())
    for handler in logging.getLogger().handlers:
        attach_context_filter(handler)


def get_logger(module_name: str) -> logging.Logger:
    """Return a module logger, writing to ``$LOG_DIR/<module>.log`` when set."""
    logger = logging.getLogger(module_name)
    log_dir = os.getenv("LOG_DIR")
    if not log_dir or getattr(logger, "_file_handler_attached", False):
        return logger
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path / (module_name.replace(".", "_") + ".log"), encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(build_formatter())
    attach_context_filter(handler)
    logger.addHandler(handler)
    setattr(logger, "_file_handler_attached", True)
    return logger
