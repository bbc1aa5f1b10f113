"""Logging configuration.

Loggers are created per module with ``logging.getLogger(__name__)`` and
attach structured context through ``extra={...}``. ``setup_logging`` wires a
stdout handler using either a plain text format or ``JSONLogFormatter``.
"""

import json
import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Extra fields copied into JSON output when present on a record
EXTRA_FIELDS = (
    "path",
    "line",
    "rows_read",
    "rows_skipped",
    "categories_created",
    "transactions_count",
    "attempt",
    "error_code",
    "error_type",
    "duration_ms",
)


class JSONLogFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """
    Configure root logger.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        fmt: 'text' for human-readable lines, 'json' for structured output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if fmt == "json":
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)
