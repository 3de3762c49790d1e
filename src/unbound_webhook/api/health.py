"""Liveness and readiness probes."""

import threading

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse


class HealthStatus:
    """Healthy and ready flags shared between the probes and the main thread.

    Each flag is guarded on its own; readers may see one flipped before the
    other during startup and shutdown.
    """

    def __init__(self) -> None:
        self._healthy = False
        self._ready = False
        self._healthy_lock = threading.Lock()
        self._ready_lock = threading.Lock()

    def set_healthy(self, healthy: bool) -> None:
        with self._healthy_lock:
            self._healthy = healthy

    def set_ready(self, ready: bool) -> None:
        with self._ready_lock:
            self._ready = ready

    def is_healthy(self) -> bool:
        with self._healthy_lock:
            return self._healthy

    def is_ready(self) -> bool:
        with self._ready_lock:
            return self._ready


router = APIRouter()


def _probe(ok: bool) -> PlainTextResponse:
    if ok:
        return PlainTextResponse("OK", status_code=200)
    return PlainTextResponse("Service Unavailable", status_code=503)


@router.get("/")
@router.get("/ready")
async def readiness(request: Request):
    """Kubernetes readiness probe."""
    return _probe(request.app.state.health.is_ready())


@router.get("/health")
async def liveness(request: Request):
    """Kubernetes liveness probe."""
    return _probe(request.app.state.health.is_healthy())


def create_health_app(status: HealthStatus) -> FastAPI:
    """Probe application reading, never writing, ``status``."""
    app = FastAPI(title="Unbound webhook health", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.health = status
    app.include_router(router)
    return app
