"""Unit tests for structured logging."""

import json

from unidir.logging import configure_logging, get_logger


def last_entry(capsys) -> dict:
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    return json.loads(lines[-1])


class TestLogging:
    """Tests for the configured structlog loggers."""

    def test_level_filtering(self, capsys):
        configure_logging("WARNING", json_output=True)
        logger = get_logger("test")
        logger.info("ignored")
        assert capsys.readouterr().out == ""

        logger.warning("kept", user_id=3)
        entry = last_entry(capsys)
        assert entry["event"] == "kept"
        assert entry["level"] == "warning"
        assert entry["user_id"] == 3

    def test_secrets_are_redacted(self, capsys):
        configure_logging("INFO", json_output=True)
        get_logger("test").info("login", password="correct-horse", token="abc")
        entry = last_entry(capsys)
        assert entry["password"] == "corr***"
        assert entry["token"] == "***"
