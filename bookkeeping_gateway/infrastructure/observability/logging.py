"""JSON logs on stdout, one object per record"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, TextIO

from pythonjsonlogger import jsonlogger

from bookkeeping_gateway.config import settings

# Libraries that log every request at INFO
CHATTY_LOGGERS = ("httpx", "httpcore")


class GatewayJsonFormatter(jsonlogger.JsonFormatter):
    """Adds UTC timestamp, level name and service to every record"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO", stream: TextIO = sys.stdout) -> None:
    """Route the root logger to ``stream`` as JSON; safe to call more than once"""
    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(GatewayJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_preview(request_id: str, kind: str, **figures: float) -> None:
    """Record the figures a preview showed, to compare with what the API later settles"""
    logging.info(
        f"{kind} preview computed",
        extra={"request_id": request_id, "preview_kind": kind, **figures},
    )
