# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import unittest

from shopfront.config.logging_config import (
    RedactTokensFilter,
    setup_logging,
)


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Start each test with a bare shopfront logger."""
        self.root_logger = logging.getLogger("shopfront")
        self._close_handlers()

    def tearDown(self) -> None:
        self._close_handlers()

    def _close_handlers(self) -> None:
        for handler in list(self.root_logger.handlers):
            handler.close()
            self.root_logger.removeHandler(handler)

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_logs_dir(self) -> None:
        """Log file is created inside the logs/ directory."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")

    def test_file_and_console_levels(self) -> None:
        """File handler logs DEBUG, console only WARNING."""
        setup_logging()
        file_handlers = [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        stream_handlers = [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        count_before = len(self.root_logger.handlers)
        setup_logging()
        self.assertEqual(len(self.root_logger.handlers), count_before)

    def test_bearer_tokens_are_redacted(self) -> None:
        """A logged Authorization header never reaches the file."""
        log_path = setup_logging()
        logging.getLogger("shopfront.gateway").info(
            "headers=%s", {"Authorization": "Bearer s3cr3t.t0ken"}
        )
        for handler in self.root_logger.handlers:
            handler.flush()
        content = log_path.read_text(encoding="utf-8")
        self.assertNotIn("s3cr3t.t0ken", content)
        self.assertIn("Bearer ***", content)


class TestRedactTokensFilter(unittest.TestCase):
    """Unit tests for the redaction filter."""

    def _record(self, msg: str, *args: object) -> logging.LogRecord:
        return logging.LogRecord(
            "shopfront", logging.INFO, __file__, 1, msg, args, None
        )

    def test_plain_messages_untouched(self) -> None:
        record = self._record("Loaded %d products", 3)
        self.assertTrue(RedactTokensFilter().filter(record))
        self.assertEqual(record.getMessage(), "Loaded 3 products")

    def test_masks_token(self) -> None:
        record = self._record("Bearer abc.def-123")
        RedactTokensFilter().filter(record)
        self.assertEqual(record.getMessage(), "Bearer ***")


if __name__ == "__main__":
    unittest.main()
