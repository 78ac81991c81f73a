"""World, stats and subscriber routes."""

from fastapi import APIRouter, Depends

from utils.timestamp import format_timestamp
from ui.auth import verify_basic_auth

router = APIRouter(prefix="/api/v1", tags=["api"])

# set by app.py
_engine = None
_bus = None
_file_logger = None


def init(engine, bus, file_logger):
    global _engine, _bus, _file_logger
    _engine = engine
    _bus = bus
    _file_logger = file_logger


@router.get("/world")
async def world(username=Depends(verify_basic_auth)):
    """Current generation with its alive coordinates."""
    snapshot = await _engine.get_snapshot()
    return snapshot.to_dict()


@router.get("/stats")
async def stats(username=Depends(verify_basic_auth)):
    snapshot = await _engine.get_snapshot()
    return {
        "timestamp": format_timestamp(),
        "simulation": {
            "generation": snapshot.generation,
            "population": snapshot.population,
            "period": snapshot.period,
            "state": _engine.state,
            "config": _engine.config.to_dict(),
        },
        "bus": _bus.get_stats(),
        "logger": _file_logger.get_stats(),
    }


@router.get("/subscribers")
async def subscribers(username=Depends(verify_basic_auth)):
    return await _bus.get_subscriber_info()
