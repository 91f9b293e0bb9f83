"""Control API routes: state reset and the webhook simulator."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import Application
from ...logging_config import get_logger

logger = get_logger(__name__)


class ResetResponse(BaseModel):
    status: str
    sessions_cleared: int


class SimResponse(BaseModel):
    running: bool


# Set by main.py; sim.Sim lives outside the nestbot package
_sim = None


def set_sim_instance(sim) -> None:
    global _sim
    _sim = sim


def _require_sim():
    if _sim is None:
        raise HTTPException(status_code=404, detail="Simulator not configured")
    return _sim


def create_control_router(app: Application) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.post("/reset", response_model=ResetResponse)
    async def reset() -> dict:
        """Drop sessions, cached data and trace events."""
        sessions_cleared = len(app.sessions)
        await app.reset()
        logger.info("Reset requested, %d sessions dropped", sessions_cleared)
        return {"status": "ok", "sessions_cleared": sessions_cleared}

    @router.get("/sim", response_model=SimResponse)
    async def sim_status() -> dict:
        return {"running": _require_sim().running}

    @router.post("/sim/start", response_model=SimResponse)
    async def start_sim() -> dict:
        """Start posting scripted messages to /webhook."""
        sim = _require_sim()
        await sim.start()
        return {"running": sim.running}

    @router.post("/sim/stop", response_model=SimResponse)
    async def stop_sim() -> dict:
        sim = _require_sim()
        await sim.stop()
        return {"running": sim.running}

    return router
