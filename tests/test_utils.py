"""Unit tests for utilities, logging, errors and health checks."""

import asyncio
import io
import json
import sys

import pytest

from communication.bus import EventBus
from core.errors import BusError, EmptyDomainError, LifeError, PatternError
from core.health import (
    CheckResult,
    HealthChecker,
    Status,
    aggregate,
    create_bus_check,
    create_engine_check,
)
from internal.logging import AsyncFileLogger, LogLevel, StructuredLogger
from utils import crash
from utils.timestamp import format_timestamp, now_micros


class TestTimestamp:
    """Tests for timestamp utilities."""

    def test_format_timestamp_iso_format(self):
        ts = format_timestamp()
        assert "T" in ts
        assert ts.endswith("Z")

    def test_format_timestamp_has_microseconds(self):
        assert format_timestamp(1_700_000_000_000_006) == "2023-11-14T22:13:20.000006Z"

    def test_now_micros(self):
        micros = now_micros()
        assert isinstance(micros, int)
        assert micros > 1577836800000000  # 2020-01-01


class TestErrors:
    """Tests for the error hierarchy."""

    def test_str_includes_error_id(self):
        error = EmptyDomainError("World cannot be empty")
        assert str(error) == f"[{error.error_id}] World cannot be empty"
        assert isinstance(error, LifeError)

    def test_context_defaults_empty(self):
        assert EmptyDomainError("x").context == {}

    def test_pattern_context(self):
        error = PatternError("bad", pattern="blinker", context={"rows": 2})
        assert error.context == {"rows": 2, "pattern": "blinker"}

    def test_bus_error_context(self):
        assert BusError("bad", subscriber_name="ui").context == {"subscriber_name": "ui"}

    def test_unique_ids(self):
        assert LifeError("a").error_id != LifeError("a").error_id


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_emits_json_line(self):
        stream = io.StringIO()
        logger = StructuredLogger(LogLevel.DEBUG, stream)
        logger.info("world settled", generation=2, period=2)
        record = json.loads(stream.getvalue())
        assert record["level"] == "INFO"
        assert record["msg"] == "world settled"
        assert record["period"] == 2

    def test_filters_below_level(self):
        stream = io.StringIO()
        logger = StructuredLogger(LogLevel.WARN, stream)
        logger.info("quiet")
        assert stream.getvalue() == ""

    def test_error_field(self):
        stream = io.StringIO()
        StructuredLogger(stream=stream).error("tick fail", error=ValueError("boom"))
        assert json.loads(stream.getvalue())["err"] == "boom"


class TestAsyncFileLogger:
    """Tests for AsyncFileLogger."""

    @pytest.mark.asyncio
    async def test_writes_records(self, tmp_path):
        path = tmp_path / "logs" / "life.log"
        file_logger = AsyncFileLogger(str(path))
        await file_logger.start()
        assert file_logger.try_log("generation", {"generation": 1})
        await file_logger.stop()

        lines = path.read_text().splitlines()
        assert json.loads(lines[0])["data"] == {"generation": 1}
        assert file_logger.get_stats()["written"] == 1

    @pytest.mark.asyncio
    async def test_full_queue_drops(self, tmp_path):
        file_logger = AsyncFileLogger(str(tmp_path / "life.log"), queue_size=1)
        assert file_logger.try_log("event", {}) is True
        assert file_logger.try_log("event", {}) is False
        assert file_logger.dropped == 1


class TestHealth:
    """Tests for health aggregation and checks."""

    def test_aggregate(self):
        ok = CheckResult("a", Status.OK)
        degraded = CheckResult("b", Status.DEGRADED)
        failed = CheckResult("c", Status.FAIL)
        assert aggregate([(ok, True)]) == Status.OK
        assert aggregate([(ok, True), (degraded, True)]) == Status.DEGRADED
        assert aggregate([(failed, False)]) == Status.DEGRADED
        assert aggregate([(ok, True), (failed, True)]) == Status.FAIL

    @pytest.mark.asyncio
    async def test_failing_check_reported(self):
        async def broken():
            raise RuntimeError("down")

        checker = HealthChecker(ttl=0)
        checker.register("broken", broken)
        report = await checker.check()
        assert report.status == Status.FAIL
        assert report.checks[0].msg == "down"

    @pytest.mark.asyncio
    async def test_bus_check_degrades_on_drops(self):
        bus = EventBus(queue_size=1)
        await bus.subscribe("slow")
        await bus.publish(1)
        await bus.publish(2)
        result = await create_bus_check(bus, max_drop_ratio=0.1)()
        assert result.status == Status.DEGRADED

    @pytest.mark.asyncio
    async def test_engine_check_detects_stuck_engine(self, engine):
        now = [100.0]
        check = create_engine_check(engine, threshold=5.0, clock=lambda: now[0])
        engine._state = "running"

        assert (await check()).status == Status.OK
        now[0] += 10
        result = await check()
        assert result.status == Status.FAIL
        assert result.msg == "stuck@0"

        await engine.step()
        assert (await check()).status == Status.OK


class TestCrashHandler:
    """Tests for crash handling utilities."""

    def test_configure_sets_path(self, tmp_path):
        original = crash._crash_log
        crash.configure(str(tmp_path / "crash.log"))
        assert crash._crash_log == str(tmp_path / "crash.log")
        crash.configure(original)

    def test_log_crash_writes_record(self, tmp_path, capsys):
        original = crash._crash_log
        crash.configure(str(tmp_path / "crash.log"))
        try:
            raise EmptyDomainError("World cannot be empty")
        except EmptyDomainError:
            record = crash.log_crash(*sys.exc_info())
        finally:
            crash.configure(original)

        written = json.loads((tmp_path / "crash.log").read_text())
        assert written["id"] == record["id"]
        assert written["type"] == "EmptyDomainError"
        assert "CRASH" in capsys.readouterr().err

    def test_install_crash_handler(self):
        original_hook = sys.excepthook
        crash.install_crash_handler()
        assert sys.excepthook == crash.log_crash
        sys.excepthook = original_hook

    @pytest.mark.asyncio
    async def test_async_handler(self, tmp_path):
        original = crash._crash_log
        crash.configure(str(tmp_path / "crash.log"))
        try:
            handler = crash.create_async_handler()
            handler(asyncio.get_running_loop(), {"message": "task died", "exception": None})
        finally:
            crash.configure(original)
        record = json.loads((tmp_path / "crash.log").read_text())
        assert record["type"] == "AsyncError"
        assert record["msg"] == "task died"
