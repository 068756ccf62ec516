import asyncio
import json
import logging
import uuid

from src.common.logging_utils import (
    JsonFormatter,
    LoggingContextFilter,
    build_formatter,
    clear_log_context,
    configure_logging,
    get_logger,
    set_log_context,
    summarize_payload,
)


def _has_file_handler(logger: logging.Logger) -> bool:
    return any(isinstance(handler, logging.FileHandler) for handler in logger.handlers)


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test_path.py",
        lineno=12,
        msg="hello",
        args=(),
        exc_info=None,
        func="test_func",
    )


def test_get_logger_without_log_dir_writes_no_files(monkeypatch, tmp_path):
    monkeypatch.delenv("LOG_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    logger = get_logger(f"test_logger_plain_{uuid.uuid4().hex}")
    assert not _has_file_handler(logger)
    assert list(tmp_path.iterdir()) == []


def test_get_logger_with_log_dir_has_one_file_handler(monkeypatch, tmp_path):
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    name = f"test_logger_file_{uuid.uuid4().hex}"
    logger = get_logger(name)
    assert _has_file_handler(logger)
    assert (tmp_path / f"{name}.log").exists()
    assert get_logger(name) is logger
    assert sum(isinstance(h, logging.FileHandler) for h in logger.handlers) == 1
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_log_format_includes_context_fields(monkeypatch):
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    record = _record()
    set_log_context(script="select_next_note", run_id="r1")
    LoggingContextFilter().filter(record)
    formatted = build_formatter().format(record)
    assert "script=select_next_note" in formatted
    assert "run_id=r1" in formatted
    clear_log_context()


def test_json_format_includes_context_fields(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "json")
    formatter = build_formatter()
    assert isinstance(formatter, JsonFormatter)
    record = _record()
    set_log_context(script="repeat_play_of_next_phrase", run_id="r2")
    LoggingContextFilter().filter(record)
    payload = json.loads(formatter.format(record))
    assert payload["script"] == "repeat_play_of_next_phrase"
    assert payload["run_id"] == "r2"
    assert payload["message"] == "hello"
    clear_log_context()


def test_cleared_context_uses_placeholders():
    clear_log_context()
    record = _record()
    LoggingContextFilter().filter(record)
    assert record.script == "-"
    assert record.run_id == "-"


def test_summarize_payload_truncates_long_values():
    summary = summarize_payload({"notes": list(range(50)), "lyrics": "a" * 300})
    assert summary["notes"]["__len__"] == 50
    assert summary["lyrics"].endswith("...(truncated)")


def test_configure_logging_reads_override_config(monkeypatch, tmp_path):
    config_path = tmp_path / "logging.json"
    config_path.write_text(
        json.dumps(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "handlers": {"null": {"class": "logging.NullHandler"}},
                "root": {"level": "WARNING", "handlers": ["null"]},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("LOG_CONFIG", str(config_path))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        configure_logging()
        assert root.level == logging.DEBUG
        null_handlers = [h for h in root.handlers if isinstance(h, logging.NullHandler)]
        assert len(null_handlers) == 1
        assert any(isinstance(f, LoggingContextFilter) for f in null_handlers[0].filters)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_rejected_action_logs_warning(caplog):
    from src.host.memory import MemoryHost, MemoryTrack
    from src.config import Settings
    from src.scripts import run_script

    host = MemoryHost.for_track(MemoryTrack())
    with caplog.at_level(logging.WARNING, logger="src.scripts.registry"):
        result = asyncio.run(run_script("pack_parameter_to_group", host, Settings()))
    assert result is None
    assert "no_group_selected" in caplog.text
    assert host.messages
