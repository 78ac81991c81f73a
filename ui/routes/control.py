"""Simulation control routes."""

import time

from fastapi import APIRouter, Depends

from ui.auth import verify_basic_auth

router = APIRouter(prefix="/api/v1/control", tags=["control"])

# set by app.py
_engine = None
_bus = None


def init(engine, bus):
    global _engine, _bus
    _engine = engine
    _bus = bus


@router.post("/pause")
async def pause(username=Depends(verify_basic_auth)):
    await _engine.pause()
    await _bus.publish({"kind": "paused", "generation": _engine.generation, "timestamp": time.time()})
    return {"ok": True, "generation": _engine.generation}


@router.post("/resume")
async def resume(username=Depends(verify_basic_auth)):
    await _engine.resume()
    await _bus.publish({"kind": "resumed", "generation": _engine.generation, "timestamp": time.time()})
    return {"ok": True, "generation": _engine.generation}


@router.post("/reset")
async def reset(username=Depends(verify_basic_auth)):
    """Rebuild generation 0 from the configured pattern."""
    _engine.reset()
    await _bus.publish({"kind": "reset", "generation": 0, "timestamp": time.time()})
    return {"ok": True, "generation": _engine.generation}


@router.post("/step")
async def step(username=Depends(verify_basic_auth)):
    """Advance exactly one generation, even while paused."""
    snapshot = await _engine.step()
    return {"ok": True, "generation": snapshot.generation, "period": snapshot.period}
