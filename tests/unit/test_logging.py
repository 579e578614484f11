"""
Unit tests for the structlog configuration.
"""

import json
import logging

import structlog
from contentquarry.config import MonitoringConfig
from contentquarry.observability.logging import add_document_url, configure_logging


class TestLogging:
    """Test cases for configure_logging."""

    def teardown_method(self):
        structlog.contextvars.clear_contextvars()
        structlog.reset_defaults()
        logging.basicConfig(handlers=[logging.NullHandler()], force=True)

    def test_add_document_url_from_context(self):
        with structlog.contextvars.bound_contextvars(document_url="https://example.com/a"):
            event = add_document_url(None, "info", {"event": "x"})
        assert event["document_url"] == "https://example.com/a"

    def test_add_document_url_without_context(self):
        assert add_document_url(None, "info", {"event": "x"}) == {"event": "x"}

    def test_json_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "contentquarry.log"
        configure_logging(MonitoringConfig(log_level="INFO", log_file=str(log_file)))

        with structlog.contextvars.bound_contextvars(document_url="https://example.com/a"):
            structlog.get_logger("contentquarry.test").info("Parsed", attempts=2)
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
        parsed = [line for line in lines if line["event"] == "Parsed"]
        assert len(parsed) == 1
        assert parsed[0]["attempts"] == 2
        assert parsed[0]["document_url"] == "https://example.com/a"
        assert parsed[0]["level"] == "info"

    def test_level_filters_debug(self, tmp_path):
        log_file = tmp_path / "app.log"
        configure_logging(MonitoringConfig(log_level="WARNING", log_file=str(log_file)))

        structlog.get_logger("contentquarry.test").info("Hidden")
        structlog.get_logger("contentquarry.test").warning("Shown")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text()
        assert "Shown" in text
        assert "Hidden" not in text
