import asyncio
import time
from collections import deque

from config import load_config
from internal.logging import get_logger
from life.patterns import build_initial_state
from life.state import WorldSnapshot
from life.world import World


class EngineState:
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class SimulationEngine:
    """Drives a World one generation per tick and publishes snapshots."""

    def __init__(self, bus, config=None):
        self.bus = bus
        self.config = config or load_config().simulation
        self._lock = asyncio.Lock()
        self._log = get_logger()
        self._state = EngineState.STOPPED
        self._task = None
        self._stop = asyncio.Event()
        self._last_publish_generation = -1
        self.world = None
        self.period = None
        self._history = deque(maxlen=max(1, self.config.history_size))
        self.reset()

    @property
    def paused(self):
        return self._state == EngineState.PAUSED

    @property
    def state(self):
        return self._state

    @property
    def generation(self):
        return self.world.generation_count

    def reset(self):
        initial_state = build_initial_state(self.config.pattern, self.config.rows, self.config.cols)
        self.world = World(initial_state)
        self.period = None
        self._history.clear()
        self._last_publish_generation = -1

    def _advance(self):
        previous = self.world
        self._history.append(previous)
        self.world = previous.calculate_next_generation()
        if self.period is None:
            self.period = self._detect_period()
            if self.period is not None:
                self._log.info("world settled", generation=self.generation, period=self.period)
                return True
        return False

    def _detect_period(self):
        # history[-1] is one generation back, history[-k] is k back
        for back in range(1, len(self._history) + 1):
            if self._history[-back] == self.world:
                return back
        return None

    async def step(self):
        """Advance a single generation, also while paused."""
        async with self._lock:
            settled = self._advance()
            snapshot = WorldSnapshot.from_world(self.world, self.period)
        await self._publish(snapshot, settled)
        return snapshot

    async def start(self):
        if self._task:
            return
        self._stop.clear()
        self._state = EngineState.RUNNING
        self._task = asyncio.create_task(self._loop())

    async def stop(self):
        self._stop.set()
        if self._task:
            await self._task
            self._task = None
        self._state = EngineState.STOPPED
        await self.bus.publish({"kind": "engine_stopped", "generation": self.generation})

    async def pause(self):
        """Hold the tick loop. A stopped engine stays stopped."""
        async with self._lock:
            if self._task is None:
                return
            self._state = EngineState.PAUSED
            self._log.info(f"engine paused generation={self.generation}")

    async def resume(self):
        """Continue ticking; starts the loop when it is not running yet."""
        if self._task is None:
            await self.start()
            self._log.info(f"engine resumed generation={self.generation}")
            return
        async with self._lock:
            self._state = EngineState.RUNNING
            self._log.info(f"engine resumed generation={self.generation}")

    async def get_snapshot(self):
        async with self._lock:
            return WorldSnapshot.from_world(self.world, self.period)

    async def _publish(self, snapshot, settled=False):
        if snapshot.generation == self._last_publish_generation:
            return
        await self.bus.publish(snapshot)
        self._last_publish_generation = snapshot.generation
        if settled:
            await self.bus.publish({"kind": "settled", "generation": snapshot.generation,
                                    "period": snapshot.period})

    async def _loop(self):
        tick_interval = self.config.tick_interval
        next_tick_time = time.perf_counter()
        self._log.info(f"engine start dt={tick_interval} pattern={self.config.pattern}")

        while not self._stop.is_set():
            wait_time = next_tick_time - time.perf_counter()
            if wait_time > 0:
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=wait_time)
                    break
                except asyncio.TimeoutError:
                    pass
            next_tick_time += tick_interval

            settled = False
            try:
                async with self._lock:
                    if self._state == EngineState.RUNNING:
                        settled = self._advance()
                    snapshot = WorldSnapshot.from_world(self.world, self.period)
            except Exception as exc:
                self._log.error("tick fail", error=exc, generation=self.generation)
                continue

            try:
                await self._publish(snapshot, settled)
            except Exception as exc:
                self._log.warn("publish fail", error=exc)

        self._log.info(f"engine stop generation={self.generation}")
