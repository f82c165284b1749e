"""Optional FastAPI status server running beside the session loop."""
import logging
import threading
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gravybot.application.session import SessionStatus
from gravybot.config import VERSION
from gravybot.routers import all_routers

logger = logging.getLogger(__name__)


def create_app(status: SessionStatus) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):  # pragma: no cover
        logger.info("🚀 Status server started")
        yield
        logger.info("👋 Status server shutdown")

    app = FastAPI(
        title="Gravybot",
        description="Session status for the MUSH bot",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.session_status = status

    for router in all_routers:
        app.include_router(router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):  # pragma: no cover
        logger.exception("Unhandled error")
        return JSONResponse(status_code=500, content={
            "error": {"type": exc.__class__.__name__, "message": str(exc)},
        })

    return app


def start_status_server(status: SessionStatus, port: int, host: str = "0.0.0.0") -> threading.Thread:
    """Serve the status app from a daemon thread; it dies with the process."""
    config = uvicorn.Config(create_app(status), host=host, port=port, log_level="warning")
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, name="status-server", daemon=True)
    thread.start()
    logger.info(f"🩺 Status server listening on {host}:{port}")
    return thread
