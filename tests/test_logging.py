"""Tests for logging configuration and utilities."""

import json
import logging
import os
import time

from rich.logging import RichHandler

from cadence.logging import (
    ComponentFormatter,
    JSONLHandler,
    configure_logging,
    prune_old_logs,
    resolve_level,
)


def _record(name: str, msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestResolveLevel:
    """Tests for resolve_level."""

    def test_explicit(self):
        assert resolve_level("debug") == "DEBUG"

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("CADENCE_LOG_LEVEL", "warning")
        assert resolve_level() == "WARNING"

    def test_default(self):
        assert resolve_level() == "INFO"

    def test_unknown_falls_back_to_info(self):
        assert resolve_level("chatty") == "INFO"


class TestComponentFormatter:
    """Tests for ComponentFormatter."""

    def test_shortens_cadence_logger(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")
        assert formatter.format(_record("cadence.manager", "hi")) == "manager | hi"

    def test_keeps_foreign_logger_root(self):
        formatter = ComponentFormatter("%(component)s | %(message)s")
        assert formatter.format(_record("asyncio", "hi")) == "asyncio | hi"

    def test_appends_extra_fields(self):
        formatter = ComponentFormatter("%(message)s")
        record = _record("cadence.manager", "schedule_started", **{"schedule.handle": 3})
        assert formatter.format(record) == "schedule_started schedule.handle=3"


class TestJSONLHandler:
    """Tests for JSONLHandler."""

    def test_writes_json_lines(self, tmp_path):
        handler = JSONLHandler(tmp_path / "logs")
        try:
            handler.emit(
                _record("cadence.manager", "schedule_stopped", **{"schedule.handle": 7})
            )
        finally:
            handler.close()

        files = list((tmp_path / "logs").glob("*.jsonl"))
        assert len(files) == 1
        entry = json.loads(files[0].read_text().strip())
        assert entry["component"] == "manager"
        assert entry["message"] == "schedule_stopped"
        assert entry["extra"] == {"schedule.handle": 7}
        assert entry["level"] == "INFO"

    def test_no_extra_key_without_extra(self, tmp_path):
        handler = JSONLHandler(tmp_path)
        try:
            handler.emit(_record("cadence.cli", "plain"))
        finally:
            handler.close()

        entry = json.loads(next(tmp_path.glob("*.jsonl")).read_text())
        assert "extra" not in entry


class TestPruneOldLogs:
    """Tests for prune_old_logs."""

    def test_missing_dir(self, tmp_path):
        assert prune_old_logs(tmp_path / "nope") == 0

    def test_deletes_only_old_matching_files(self, tmp_path):
        old = tmp_path / "2020-01-01.jsonl"
        new = tmp_path / "today.jsonl"
        other = tmp_path / "old.txt"
        for path in (old, new, other):
            path.write_text("{}")
        ancient = time.time() - 30 * 86400
        os.utime(old, (ancient, ancient))
        os.utime(other, (ancient, ancient))

        assert prune_old_logs(tmp_path, retention_days=7) == 1
        assert not old.exists()
        assert new.exists()
        assert other.exists()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_level_and_console_handler(self):
        configure_logging("DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert any(type(h) is logging.StreamHandler for h in root.handlers)

    def test_rich_handler(self):
        configure_logging("INFO", use_rich=True)
        assert any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)

    def test_log_to_file(self, tmp_path):
        configure_logging("INFO", log_to_file=True, logs_dir=tmp_path / "logs")
        logging.getLogger("cadence.test").info("hello")

        handlers = [
            h for h in logging.getLogger().handlers if isinstance(h, JSONLHandler)
        ]
        assert len(handlers) == 1
        assert list((tmp_path / "logs").glob("*.jsonl"))

    def test_log_to_file_defaults_to_home(self, cadence_home):
        configure_logging("INFO", log_to_file=True)
        assert (cadence_home / "logs").is_dir()
