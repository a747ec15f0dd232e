"""
Test suite for logging_config module

Tests structured JSON output, handler setup and log_action.
"""

import json
import logging

from console_bank.logging_config import JSONFormatter, get_logger, log_action, setup_logging


class TestJSONFormatter:
    """Test the JSON log formatter"""

    def test_structured_fields(self):
        logger = logging.getLogger("bharat_bank.test")
        record = logger.makeRecord(logger.name, logging.INFO, __name__, 0, "Deposit recorded", (), None)
        record.action = "deposit"
        record.resource = "BB100000000001"
        record.extra = {"amount": "500.00"}

        data = json.loads(JSONFormatter().format(record))

        assert data['level'] == "INFO"
        assert data['logger'] == "bharat_bank.test"
        assert data['message'] == "Deposit recorded"
        assert data['action'] == "deposit"
        assert data['resource'] == "BB100000000001"
        assert data['extra'] == {"amount": "500.00"}
        assert "timestamp" in data

    def test_missing_fields_are_dropped(self):
        logger = logging.getLogger("bharat_bank.test")
        record = logger.makeRecord(logger.name, logging.WARNING, __name__, 0, "plain", (), None)

        data = json.loads(JSONFormatter().format(record))

        assert "action" not in data
        assert "resource" not in data
        assert "extra" not in data


class TestSetupLogging:
    """Test logger configuration"""

    def test_json_file_output(self, tmp_path):
        log_file = tmp_path / "bank.log"
        logger = setup_logging(level="INFO", log_file=str(log_file))

        log_action(
            get_logger("bharat_bank.accounts"), "info", "Account opened",
            action="open", resource="BB100000000001"
        )

        data = json.loads(log_file.read_text(encoding="utf-8").strip())
        assert data['message'] == "Account opened"
        assert data['logger'] == "bharat_bank.accounts"
        assert data['action'] == "open"
        assert logger.propagate is False

    def test_text_format(self, tmp_path):
        log_file = tmp_path / "bank.log"
        logger = setup_logging(level="DEBUG", log_format="text", log_file=str(log_file))
        logger.warning("hello")

        line = log_file.read_text(encoding="utf-8").strip()
        assert line.endswith("| WARNING  | bharat_bank | hello")

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path):
        setup_logging(log_file=str(tmp_path / "a.log"))
        logger = setup_logging(log_file=str(tmp_path / "b.log"))
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back_to_warning(self, tmp_path):
        logger = setup_logging(level="chatty", log_file=str(tmp_path / "bank.log"))
        assert logger.level == logging.WARNING

    def test_level_filters_output(self, tmp_path):
        log_file = tmp_path / "bank.log"
        setup_logging(level="WARNING", log_file=str(log_file))

        log_action(get_logger("bharat_bank.session"), "info", "Logged out", action="logout")

        assert log_file.read_text(encoding="utf-8") == ""


class TestLogAction:

    def test_attaches_structured_attributes(self, caplog):
        caplog.set_level(logging.INFO, logger="bharat_bank")
        log_action(
            get_logger("bharat_bank.cli"), "warning", "PIN verification attempts exhausted",
            action="pin_lockout", resource="BB100000000001", extra={"operation": "withdrawal"}
        )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.action == "pin_lockout"
        assert record.resource == "BB100000000001"
        assert record.extra == {"operation": "withdrawal"}
