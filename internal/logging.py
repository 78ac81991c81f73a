import asyncio
import json
import os
import sys
import threading
from enum import IntEnum

from utils.timestamp import format_timestamp


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40


_logger = None
_logger_lock = threading.Lock()


class StructuredLogger:
    """One JSON object per line on stderr."""

    def __init__(self, level=LogLevel.INFO, stream=None):
        self.level = level
        self.stream = stream

    def _emit(self, level, message, error=None, **fields):
        if level < self.level:
            return
        record = {"timestamp": format_timestamp(), "level": level.name, "msg": message, **fields}
        if error is not None:
            record["err"] = str(error)
        try:
            print(json.dumps(record, default=str), file=self.stream or sys.stderr, flush=True)
        except (OSError, ValueError):
            # closed or broken stream
            pass

    def debug(self, message, **fields):
        self._emit(LogLevel.DEBUG, message, **fields)

    def info(self, message, **fields):
        self._emit(LogLevel.INFO, message, **fields)

    def warn(self, message, error=None, **fields):
        self._emit(LogLevel.WARN, message, error, **fields)

    def error(self, message, error=None, **fields):
        self._emit(LogLevel.ERROR, message, error, **fields)

    @classmethod
    def configure(cls, min_level=LogLevel.INFO, stream=None):
        global _logger
        with _logger_lock:
            _logger = cls(min_level, stream)
        return _logger


def get_logger():
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = StructuredLogger()
    return _logger


class AsyncFileLogger:
    """Appends JSON lines to a file from a background task.

    ``try_log`` never blocks the caller: when the queue is full the record is
    dropped and counted.
    """

    def __init__(self, file_path, queue_size=1000):
        self.path = file_path
        self.queue = asyncio.Queue(maxsize=queue_size)
        self._task = None
        self._stop = asyncio.Event()
        self.written = 0
        self.dropped = 0

    def try_log(self, kind, data):
        try:
            self.queue.put_nowait({"timestamp": format_timestamp(), "kind": kind, "data": data})
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        return True

    async def start(self):
        if self._task:
            return
        dir_path = os.path.dirname(self.path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)
        self._stop.clear()
        self._task = asyncio.create_task(self._run())

    async def stop(self):
        self._stop.set()
        if self._task:
            await self._task
            self._task = None

    def get_stats(self):
        return {
            "queued": self.queue.qsize(),
            "written": self.written,
            "dropped": self.dropped,
        }

    def _write(self, file, record):
        file.write(json.dumps(record, default=str) + "\n")
        self.written += 1

    async def _run(self):
        with open(self.path, "a") as file:
            while not self._stop.is_set():
                try:
                    record = await asyncio.wait_for(self.queue.get(), timeout=0.5)
                except asyncio.TimeoutError:
                    continue
                try:
                    self._write(file, record)
                    file.flush()
                except OSError as exc:
                    self.dropped += 1
                    get_logger().warn("file log write failed", error=exc, path=self.path)

            while not self.queue.empty():
                self._write(file, self.queue.get_nowait())
            file.flush()
