"""Pytest fixtures for all tests."""

import pytest
from httpx import AsyncClient, ASGITransport

from communication.bus import EventBus
from config import Config, LoggingConfig, SimulationConfig
from life.cell import Status
from life.engine import SimulationEngine
from ui.app import create_app

A = Status.ALIVE
D = Status.DEAD


@pytest.fixture
def full_block():
    """3x3 table, every cell alive."""
    return [[A, A, A], [A, A, A], [A, A, A]]


@pytest.fixture
def vertical_blinker():
    """5x5 table with a vertical line of three in column 2."""
    return [
        [D, D, D, D, D],
        [D, D, A, D, D],
        [D, D, A, D, D],
        [D, D, A, D, D],
        [D, D, D, D, D],
    ]


@pytest.fixture
def sim_config():
    return SimulationConfig(tick_interval=0.05, pattern="blinker", rows=5, cols=5, history_size=4)


@pytest.fixture
async def bus():
    return EventBus(queue_size=10)


@pytest.fixture
async def engine(bus, sim_config):
    eng = SimulationEngine(bus=bus, config=sim_config)
    yield eng
    if eng._task:
        await eng.stop()


@pytest.fixture
def app_config(tmp_path, sim_config):
    return Config(
        simulation=sim_config,
        logging=LoggingConfig(file=str(tmp_path / "life.log"), crash_file=str(tmp_path / "crash.log")),
    )


@pytest.fixture
async def app(app_config):
    application = create_app(app_config)
    yield application
    engine = application.state.engine
    if engine._task:
        await engine.stop()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
