"""
JSON log output for the registry.

Every record is written to stdout as a single JSON line carrying the
request id of the HTTP call that produced it. Services log through named
channels so photo and cleanup entries can be told apart from request traffic.
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# Set by the request middleware, read by the formatter
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ["http", "db", "lifecycle", "storage", "cleanup"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Render a LogRecord as one JSON object.

    Keys: timestamp (UTC, millisecond precision), level, message, channel,
    context (request_id merged with student_id / asset_ref / task_id when
    given), extra, and exception when a traceback is attached.
    """

    def format(self, record: logging.LogRecord) -> str:
        channel = getattr(record, "channel", None)
        if channel is None:
            channel = record.name.rsplit(".", 1)[-1] if "." in record.name else "app"

        entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": channel,
            "context": {"request_id": request_id_var.get(""),
                        **(getattr(record, "context", None) or {})},
            "extra": getattr(record, "extra_data", None) or {},
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging():
    """Install the JSON handler on the root logger and level the registry channels."""
    level = getattr(logging, LOG_LEVEL, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        get_logger(channel).setLevel(level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger(f"student_registry.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None,
                     exc_info: bool = False):
    """
    Log message on logger at the named level.

    context holds identifiers of the student, photo or cleanup task involved;
    extra_data holds measurements and error text. Pass exc_info=True from an
    except block to include the traceback.
    """
    logger.log(
        getattr(logging, level.upper(), logging.INFO),
        message,
        exc_info=exc_info,
        extra={
            "context": context or {},
            "extra_data": extra_data or {},
            "channel": logger.name.rsplit(".", 1)[-1],
        },
    )


def generate_request_id() -> str:
    return str(uuid.uuid4())
