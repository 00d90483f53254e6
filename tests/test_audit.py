"""Tests for the event audit log."""

import json

from core.audit import log_event_creation


class TestEventAuditLog:
    def test_log_creates_file_and_writes_ndjson(self, tmp_path, monkeypatch) -> None:
        # Redirect log dir to tmp
        monkeypatch.setattr("core.audit.LOG_DIR", tmp_path)

        log_event_creation(
            "meet-1739786400000-abcd1234",
            "created",
            {"summary": "Team Sync", "meeting_link": "https://meet.google.com/abc"},
        )

        # Find the log file (named by today's date)
        log_files = list(tmp_path.glob("*.log"))
        assert len(log_files) == 1

        lines = log_files[0].read_text().strip().split("\n")
        assert len(lines) == 1

        entry = json.loads(lines[0])
        assert entry["request_id"] == "meet-1739786400000-abcd1234"
        assert entry["outcome"] == "created"
        assert entry["event"]["meeting_link"] == "https://meet.google.com/abc"
        assert entry["logged_at"].endswith("Z")

    def test_multiple_logs_append(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setattr("core.audit.LOG_DIR", tmp_path)

        for i in range(3):
            log_event_creation(f"meet-{i}", "failed")

        log_files = list(tmp_path.glob("*.log"))
        lines = log_files[0].read_text().strip().split("\n")
        assert len(lines) == 3
        assert json.loads(lines[2])["event"] == {}

    def test_creates_log_directory(self, tmp_path, monkeypatch) -> None:
        log_dir = tmp_path / "nested" / "events"
        monkeypatch.setattr("core.audit.LOG_DIR", log_dir)

        log_event_creation("meet-1", "created")
        assert log_dir.is_dir()

    def test_write_failure_is_logged_not_raised(self, tmp_path, monkeypatch, caplog) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        monkeypatch.setattr("core.audit.LOG_DIR", blocker / "sub")

        log_event_creation("meet-1", "created")
        assert "Failed to write event audit log" in caplog.text
