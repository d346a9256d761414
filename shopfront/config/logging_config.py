# shopfront/config/logging_config.py

"""Per-run timestamped logging configuration for shopfront.

Every launch writes to its own ``logs/run_<timestamp>.log`` file. All
``shopfront.*`` loggers (gateway, auth, catalog, cart, ui, cli) share
that file handler, and only warnings reach the terminal so the TUI and
JSON output on stdout stay clean.

Bearer tokens must never land in a log file, so both handlers carry a
:class:`RedactTokensFilter`.
"""

import logging
import os
import re
import sys
from datetime import datetime
from pathlib import Path

from shopfront.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9\-._~+/]+=*")


class RedactTokensFilter(logging.Filter):
    """Mask ``Bearer <token>`` fragments in formatted log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "Bearer" in message:
            record.msg = _BEARER_RE.sub(r"\1***", message)
            record.args = None
        return True


def setup_logging(log_dir: Path | None = None) -> Path:
    """Initialise the ``shopfront`` logger tree for the current run.

    Args:
        log_dir: Directory for the run log. Defaults to
            ``Settings.LOGS_DIR``.

    Returns:
        The path of the log file created for this run.
    """
    logs_dir = log_dir or Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger("shopfront")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, TUI restarts) keep the first handlers
    if root_logger.handlers:
        return log_file

    redact = RedactTokensFilter()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )
    file_handler.addFilter(redact)

    console_level = os.getenv("SHOPFRONT_CONSOLE_LOG_LEVEL", "WARNING")
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(
        logging.getLevelName(console_level.upper())
    )
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )
    console_handler.addFilter(redact)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
