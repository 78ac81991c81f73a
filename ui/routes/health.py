"""Health and liveness routes."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.health import Status
from utils.timestamp import format_timestamp

router = APIRouter(prefix="/api/v1", tags=["health"])

# set by app.py
_engine = None
_health_checker = None


def init(engine, health_checker):
    global _engine, _health_checker
    _engine = engine
    _health_checker = health_checker


@router.get("/health")
async def health():
    report = await _health_checker.check()
    status_code = 503 if report.status == Status.FAIL else 200
    return JSONResponse(content=report.to_dict(), status_code=status_code)


@router.get("/heartbeat")
async def heartbeat():
    """Cheap liveness probe."""
    snapshot = await _engine.get_snapshot()
    return {
        "status": "ok",
        "timestamp": format_timestamp(),
        "generation": snapshot.generation,
        "population": snapshot.population,
        "engine_state": _engine.state,
    }
