import asyncio
import time
from enum import Enum

from utils.timestamp import format_timestamp


class Status(Enum):
    OK = "healthy"
    DEGRADED = "degraded"
    FAIL = "unhealthy"


class CheckResult:
    __slots__ = ("name", "status", "msg")

    def __init__(self, name, status, msg=""):
        self.name = name
        self.status = status
        self.msg = msg

    def to_dict(self):
        return {"name": self.name, "status": self.status.value, "msg": self.msg}


class HealthReport:
    __slots__ = ("status", "checks", "uptime", "timestamp")

    def __init__(self, status, checks, uptime=0):
        self.status = status
        self.checks = checks
        self.uptime = uptime
        self.timestamp = format_timestamp()

    def to_dict(self):
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "uptime": round(self.uptime, 1),
            "checks": [check.to_dict() for check in self.checks],
        }


def aggregate(results):
    """Overall status from (CheckResult, critical) pairs."""
    status = Status.OK
    for result, is_critical in results:
        if result.status == Status.FAIL and is_critical:
            return Status.FAIL
        if result.status != Status.OK:
            status = Status.DEGRADED
    return status


class HealthChecker:
    """Runs registered async checks, caching the report for ``ttl`` seconds."""

    def __init__(self, ttl=1.0, timeout=5.0):
        self._checks = {}
        self._cache = None
        self._cache_time = 0
        self._ttl = ttl
        self._timeout = timeout
        self._start_time = time.time()

    def register(self, name, check_fn, critical=True):
        self._checks[name] = (check_fn, critical)

    async def _run(self, name, check_fn):
        try:
            return await asyncio.wait_for(check_fn(), timeout=self._timeout)
        except asyncio.TimeoutError:
            return CheckResult(name, Status.FAIL, "timeout")
        except Exception as exc:
            return CheckResult(name, Status.FAIL, str(exc))

    async def check(self):
        now = time.time()
        if self._cache and now - self._cache_time < self._ttl:
            return self._cache

        results = [(await self._run(name, check_fn), critical)
                   for name, (check_fn, critical) in self._checks.items()]

        self._cache = HealthReport(aggregate(results), [result for result, _ in results],
                                   now - self._start_time)
        self._cache_time = now
        return self._cache


async def check_event_loop():
    await asyncio.sleep(0)
    return CheckResult("loop", Status.OK)


def create_bus_check(bus, max_drop_ratio=0.1):
    async def check():
        stats = bus.get_stats()
        if stats["total_published"] and stats["total_dropped"] / stats["total_published"] > max_drop_ratio:
            return CheckResult("bus", Status.DEGRADED, "drops")
        return CheckResult("bus", Status.OK, f"{stats['subscriber_count']}sub")
    return check


def create_engine_check(engine, threshold=5.0, clock=time.time):
    """Unhealthy when a running engine has not advanced for ``threshold`` seconds."""
    last_seen = [None, clock()]

    async def check():
        snapshot = await engine.get_snapshot()
        now = clock()
        state = engine.state

        if state == "stopped":
            return CheckResult("engine", Status.DEGRADED, "stopped")

        if state == "paused":
            last_seen[0], last_seen[1] = snapshot.generation, now
            return CheckResult("engine", Status.OK, f"paused@{snapshot.generation}")

        if last_seen[0] == snapshot.generation and now - last_seen[1] > threshold:
            return CheckResult("engine", Status.FAIL, f"stuck@{snapshot.generation}")

        if last_seen[0] != snapshot.generation:
            last_seen[0], last_seen[1] = snapshot.generation, now
        return CheckResult("engine", Status.OK, f"g{snapshot.generation}")
    return check


def create_logger_check(file_logger):
    async def check():
        queued, capacity = file_logger.queue.qsize(), file_logger.queue.maxsize
        if capacity and queued / capacity > 0.9:
            return CheckResult("log", Status.DEGRADED, f"{queued}/{capacity}")
        return CheckResult("log", Status.OK)
    return check
