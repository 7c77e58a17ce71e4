"""Control API application — token middleware + app factory + server thread."""

from __future__ import annotations

import logging
import threading

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from checkthesite import __version__
from checkthesite.api.routes import router
from checkthesite.config import settings
from checkthesite.scheduling import PollScheduler

logger = logging.getLogger(__name__)


# ── Auth middleware ───────────────────────────────────────────────────────────


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """Reject requests missing or having an invalid X-Api-Token header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Skip auth if no token is configured
        token = settings.api_token
        if not token or request.url.path == "/health":
            return await call_next(request)

        provided = request.headers.get("X-Api-Token", "")
        if provided != token:
            return JSONResponse(
                status_code=401,
                content={"detail": "Invalid or missing X-Api-Token"},
            )

        return await call_next(request)


# ── App factory ──────────────────────────────────────────────────────────────


def create_app(scheduler: PollScheduler) -> FastAPI:
    """Create the control API bound to ``scheduler``."""
    app = FastAPI(title="check-the-site control API", version=__version__)
    app.state.scheduler = scheduler
    app.add_middleware(TokenAuthMiddleware)
    app.include_router(router)
    return app


def serve_in_background(app: FastAPI, host: str, port: int, log_level: str = "info") -> threading.Thread:
    """Run uvicorn on a daemon thread next to the console loop."""
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level=log_level.lower()))
    thread = threading.Thread(target=server.run, name="control-api", daemon=True)
    thread.start()
    logger.info("Control API listening on http://%s:%d", host, port)
    return thread
