"""Liveness, readiness and session counters for the running bot."""
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from gravybot.config import VERSION
from gravybot.application.session import SessionState, SessionStatus
from gravybot.schemas import HealthResponse, ReadinessResponse, StatusResponse

router = APIRouter()


def _status(request: Request) -> SessionStatus:
    return request.app.state.session_status


@router.get("/health", response_model=HealthResponse)
async def health():
    """Simple liveness probe - always returns ok if the process is running."""
    return {"status": "ok", "ts": datetime.now(timezone.utc).isoformat()}


@router.get("/readiness", response_model=ReadinessResponse)
async def readiness(request: Request):
    """Readiness probe - ready only while the session is streaming."""
    status = _status(request)
    return {
        "ready": status.state == SessionState.STREAMING,
        "state": status.state.value,
        "ts": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/status", response_model=StatusResponse)
async def session_status(request: Request):
    return {"version": VERSION, **_status(request).snapshot()}
