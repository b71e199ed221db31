"""
Tests for the structured logging helpers.
"""

import logging

import structlog
from structlog.testing import capture_logs

from utilities.logger import RequestLogger, get_logger, setup_logging


class TestRequestLogger:
    """Test cases for RequestLogger."""

    def test_success_logged_at_info(self):
        """Test that successful requests log at info level."""
        with capture_logs() as logs:
            RequestLogger().log_request("GET", "/books", 200, 1.234)

        assert logs == [{
            "event": "Request handled",
            "log_level": "info",
            "method": "GET",
            "path": "/books",
            "status_code": 200,
            "duration_ms": 1.23
        }]

    def test_client_and_server_errors_raise_level(self):
        """Test that 4xx logs a warning and 5xx logs an error."""
        with capture_logs() as logs:
            request_logger = RequestLogger()
            request_logger.log_request("GET", "/books/9", 404, 0.5)
            request_logger.log_request("GET", "/books", 500, 0.5)

        assert [entry["log_level"] for entry in logs] == ["warning", "error"]

    def test_unhandled_error(self):
        """Test that unhandled errors carry the exception."""
        error = RuntimeError("boom")

        with capture_logs() as logs:
            RequestLogger().log_unhandled_error("GET", "/books", error)

        assert logs[0]["log_level"] == "error"
        assert logs[0]["error"] == "boom"
        assert logs[0]["exc_info"] is error


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_file_handler_added(self, tmp_path):
        """Test that a log file handler is attached when a path is given."""
        log_file = tmp_path / "logs" / "api.log"
        root_logger = logging.getLogger()
        handlers_before = list(root_logger.handlers)

        try:
            setup_logging(log_level="DEBUG", log_format="console", log_file=log_file, debug=True)

            assert log_file.parent.exists()
            new_handlers = [h for h in root_logger.handlers if h not in handlers_before]
            assert any(isinstance(h, logging.FileHandler) for h in new_handlers)
        finally:
            for handler in root_logger.handlers[:]:
                if handler not in handlers_before:
                    root_logger.removeHandler(handler)
                    handler.close()
            structlog.reset_defaults()

    def test_get_logger(self):
        """Test that get_logger returns a usable structlog logger."""
        logger = get_logger("tests")

        with capture_logs() as logs:
            logger.info("hello", answer=42)

        assert logs[0]["event"] == "hello"
        assert logs[0]["answer"] == 42
