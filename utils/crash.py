"""Last-resort crash reporting to stderr and a JSON-lines file."""

import json
import os
import sys
import traceback
import uuid

from utils.timestamp import format_timestamp

# overridden by configure()
_crash_log = "logs/crash.log"


def configure(crash_file):
    global _crash_log
    _crash_log = crash_file


def _crash_record(exc_name, exc_msg, tb, context=None):
    record = {
        "id": uuid.uuid4().hex[:12],
        "timestamp": format_timestamp(),
        "type": exc_name,
        "msg": exc_msg,
        "traceback": tb,
    }
    if context:
        record["context"] = context
    return record


def _write_crash(record):
    """Append the record to the crash log. Never raises."""
    try:
        log_dir = os.path.dirname(_crash_log)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(_crash_log, "a") as f:
            f.write(json.dumps(record, default=str) + "\n")
    except OSError:
        pass


def log_crash(exc_type, exc_value, exc_tb):
    """sys.excepthook replacement."""
    exc_name = exc_type.__name__ if exc_type else "Unknown"
    tb = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    record = _crash_record(exc_name, str(exc_value) if exc_value else "", tb)

    bar = "=" * 60
    sys.stderr.write(f"\n{bar}\nCRASH [{record['id']}] {record['timestamp']}\n{bar}\n")
    sys.stderr.write(f"{exc_name}: {record['msg']}\n{'-' * 60}\n{tb}{bar}\n\n")
    _write_crash(record)
    return record


def log_async_crash(exc, context, logger=None):
    """Report an exception that escaped an asyncio task or callback."""
    exc_name = type(exc).__name__ if exc else "AsyncError"
    exc_msg = str(exc) if exc else context.get("message", "Unknown")
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)) if exc else None

    if logger:
        logger.error("async exception", error=exc_msg, task=str(context.get("future", "unknown")))

    record = _crash_record(exc_name, exc_msg, tb, str(context))
    _write_crash(record)
    return record


def create_async_handler(logger=None):
    """Exception handler for ``loop.set_exception_handler``."""
    def handler(loop, context):
        log_async_crash(context.get("exception"), context, logger)
    return handler


def install_crash_handler():
    sys.excepthook = log_crash
