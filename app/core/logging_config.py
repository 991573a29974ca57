"""Logging setup for the API and seed processes."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone
from typing import Any
import logging
import sys

from pythonjsonlogger import jsonlogger

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JobsJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and source fields to each record."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        if record.levelno >= logging.WARNING:
            log_record["line"] = record.lineno
            log_record["pathname"] = record.pathname


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Replace root handlers with a single stdout handler.

    JSON output is meant for deployed processes; plain output for local runs.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        formatter: logging.Formatter = JobsJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s")
    else:
        formatter = logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
