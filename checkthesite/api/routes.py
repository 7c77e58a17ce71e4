"""Control API endpoints.

Endpoints:
  GET  /health   — liveness
  GET  /status   — scheduler state, gate, last outcome, next poll
  POST /confirm  — confirm a POSITIVE result and resume polling (409 when
                   periodic scheduling is off, 503 after shutdown)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from checkthesite import __version__
from checkthesite.scheduling import ConfirmResult

logger = logging.getLogger(__name__)

router = APIRouter()


class ConfirmResponse(BaseModel):
    result: ConfirmResult
    scheduling_enabled: bool


@router.get("/health")
def health() -> dict[str, Any]:
    return {"ok": True, "version": __version__}


@router.get("/status")
def status(request: Request) -> dict[str, Any]:
    return request.app.state.scheduler.status()


@router.post("/confirm", response_model=ConfirmResponse)
def confirm(request: Request) -> ConfirmResponse:
    scheduler = request.app.state.scheduler
    result = scheduler.confirm()
    logger.info("Confirm requested via API: %s", result.value)
    if result is ConfirmResult.UNSUPPORTED:
        raise HTTPException(
            status_code=409,
            detail="Confirm not supported: periodic scheduling is disabled in the configuration",
        )
    if result is ConfirmResult.SHUT_DOWN:
        raise HTTPException(status_code=503, detail="Poll scheduler is shut down")
    return ConfirmResponse(result=result, scheduling_enabled=scheduler.gate.enabled)
