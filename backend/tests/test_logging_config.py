"""JSON log lines - channel, request id and context fields."""

import json
import logging

from student_registry.logging_config import (
    StructuredJsonFormatter, get_logger, log_with_context, request_id_var
)


class _Capture(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _emit(**kwargs):
    logger = get_logger("cleanup")
    handler = _Capture()
    logger.addHandler(handler)
    try:
        log_with_context(logger, "ERROR", "Asset deletion failed", **kwargs)
    finally:
        logger.removeHandler(handler)
    return json.loads(StructuredJsonFormatter().format(handler.records[0]))


def test_entry_carries_channel_request_id_and_context():
    token = request_id_var.set("req-1")
    try:
        entry = _emit(context={"asset_ref": "students/a"}, extra_data={"reason": "delete"})
    finally:
        request_id_var.reset(token)

    assert entry["level"] == "ERROR"
    assert entry["channel"] == "cleanup"
    assert entry["context"] == {"request_id": "req-1", "asset_ref": "students/a"}
    assert entry["extra"] == {"reason": "delete"}
    assert "exception" not in entry


def test_exc_info_attaches_traceback():
    try:
        raise RuntimeError("connection reset")
    except RuntimeError:
        entry = _emit(exc_info=True)
    assert "RuntimeError: connection reset" in entry["exception"]
