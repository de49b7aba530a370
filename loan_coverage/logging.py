"""Logging setup for loan-coverage.

Engine modules log through module-level loggers under the ``loan_coverage``
namespace. Per-loan messages carry the loan ID as a record attribute so the
JSON output can be filtered by loan.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Record attributes promoted to top-level JSON keys when present
CONTEXT_FIELDS = ("loan_id", "week_index", "evaluated_at")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Install a single console handler on the root logger.

    Parameters
    ----------
    level : str
        Log level name. Unknown names fall back to INFO.
    format_type : str
        ``"standard"`` for pipe-separated text, ``"json"`` for one JSON
        object per line.
    stream : TextIO | None
        Destination stream (default stdout).
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger("loan_coverage").setLevel(log_level)

    # Faker logs locale lookups at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents.

    Decimals, dates and other non-JSON values are rendered with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)

        if hasattr(record, "extra"):
            payload.update(record.extra)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, ensure_ascii=False)


def get_logger(name: str, loan_id: str | None = None) -> logging.Logger | logging.LoggerAdapter:
    """Get a logger, bound to a loan when ``loan_id`` is given.

    Parameters
    ----------
    name : str
        Logger name (usually __name__).
    loan_id : str | None
        When set, every record emitted through the returned adapter carries
        a ``loan_id`` attribute.

    Returns
    -------
    logging.Logger | logging.LoggerAdapter
        Plain logger, or an adapter injecting the loan ID.
    """
    logger = logging.getLogger(name)
    if loan_id is None:
        return logger
    return logging.LoggerAdapter(logger, {"loan_id": loan_id})
