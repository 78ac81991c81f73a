"""FastAPI application factory."""

import asyncio
import json
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse

from communication.bus import EventBus
from config import load_config
from core.health import (
    HealthChecker,
    check_event_loop,
    create_bus_check,
    create_engine_check,
    create_logger_check,
)
from internal.logging import AsyncFileLogger, LogLevel, StructuredLogger
from life.engine import SimulationEngine
from life.state import WorldSnapshot
from ui.routes import api, control, health
from utils.crash import create_async_handler

VERSION = "1.0.0"


def create_app(config=None):
    """Wire bus, engine, loggers and routes into a FastAPI app."""
    config = config or load_config()

    logger = StructuredLogger.configure(min_level=LogLevel[config.logging.level.upper()])

    bus = EventBus(queue_size=100)
    engine = SimulationEngine(bus=bus, config=config.simulation)
    file_logger = AsyncFileLogger(file_path=config.logging.file)

    health_checker = HealthChecker()
    health_checker.register("event_loop", check_event_loop, critical=True)
    health_checker.register("event_bus", create_bus_check(bus), critical=True)
    health_checker.register("simulation_engine", create_engine_check(engine), critical=True)
    health_checker.register("file_logger", create_logger_check(file_logger), critical=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("application starting", version=VERSION, pattern=config.simulation.pattern)
        asyncio.get_running_loop().set_exception_handler(create_async_handler(logger))

        await file_logger.start()
        log_sub = await bus.subscribe("file-logger", max_queue_size=200)

        async def log_worker():
            while True:
                item = await log_sub.queue.get()
                if isinstance(item, WorldSnapshot):
                    file_logger.try_log("generation", item.to_dict())
                else:
                    file_logger.try_log("event", item)

        app.state.log_worker = asyncio.create_task(log_worker())
        await engine.start()
        logger.info("application started")

        yield

        logger.info("application shutting down")
        await engine.stop()
        app.state.log_worker.cancel()
        try:
            await app.state.log_worker
        except asyncio.CancelledError:
            pass
        await bus.unsubscribe("file-logger")
        await file_logger.stop()
        logger.info("application shutdown complete")

    app = FastAPI(
        title="Game of Life",
        version=VERSION,
        description="bounded-domain Game of Life simulation service",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.bus = bus

    control.init(engine, bus)
    api.init(engine, bus, file_logger)
    health.init(engine, health_checker)

    app.include_router(control.router)
    app.include_router(api.router)
    app.include_router(health.router)

    @app.get("/events")
    async def events(request: Request):
        """Server-Sent Events stream of generations and engine events."""
        subscriber_name = f"sse-{uuid.uuid4().hex[:8]}"
        sub = await bus.subscribe(subscriber_name, max_queue_size=10)

        async def event_generator():
            try:
                snapshot = await engine.get_snapshot()
                yield format_sse("generation", snapshot.to_dict())

                while not await request.is_disconnected():
                    try:
                        item = await asyncio.wait_for(sub.queue.get(), timeout=1.0)
                    except asyncio.TimeoutError:
                        yield ": keep-alive\n\n"
                        continue

                    if isinstance(item, WorldSnapshot):
                        yield format_sse("generation", item.to_dict())
                    else:
                        yield format_sse("event", item)
            finally:
                await bus.unsubscribe(subscriber_name)

        return StreamingResponse(event_generator(), media_type="text/event-stream")

    return app


def format_sse(event, data):
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"
