"""external-dns webhook API endpoints."""

import asyncio
import logging

from fastapi import APIRouter, Body, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from unbound_webhook import __version__
from unbound_webhook.core.errors import ApplyFailedError, ResolverError, UpstreamUnavailableError
from unbound_webhook.core.models import Changes, Endpoint
from unbound_webhook.core.provider import UnboundProvider

logger = logging.getLogger(__name__)

MEDIA_TYPE = "application/external.dns.webhook+json;version=1"


class WebhookJSONResponse(JSONResponse):
    media_type = MEDIA_TYPE


router = APIRouter(default_response_class=WebhookJSONResponse)


def get_provider(request: Request) -> UnboundProvider:
    return request.app.state.provider


@router.get("/")
async def negotiate(request: Request):
    """Domain filter negotiation."""
    return get_provider(request).domain_filter.to_json()


@router.get("/records")
async def get_records(request: Request):
    """Current records held by unbound."""
    endpoints = await get_provider(request).records()
    return [e.to_wire() for e in endpoints]


@router.post("/records", status_code=204)
async def apply_changes(request: Request, changes: Changes):
    """Apply a change set computed by the planner."""
    await get_provider(request).apply_changes(changes)
    return Response(status_code=204)


@router.post("/adjustendpoints")
async def adjust_endpoints(request: Request, endpoints: list[Endpoint] = Body(...)):
    """Normalise desired endpoints before planning."""
    adjusted = get_provider(request).adjust_endpoints(endpoints)
    return [e.to_wire() for e in adjusted]


def create_webhook_app(provider: UnboundProvider, write_timeout: float | None = None) -> FastAPI:
    """Webhook application serving ``provider``.

    Requests running longer than ``write_timeout`` seconds get a 503.
    """
    app = FastAPI(
        title="Unbound external-dns webhook",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.provider = provider
    app.include_router(router)

    @app.exception_handler(UpstreamUnavailableError)
    async def upstream_unavailable(request: Request, exc: UpstreamUnavailableError):
        logger.error(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(ApplyFailedError)
    async def apply_failed(request: Request, exc: ApplyFailedError):
        logger.error(f"Failed to apply changes: {exc}")
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(ResolverError)
    async def resolver_error(request: Request, exc: ResolverError):
        logger.error(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    if write_timeout:

        @app.middleware("http")
        async def request_deadline(request: Request, call_next):
            try:
                return await asyncio.wait_for(call_next(request), timeout=write_timeout)
            except asyncio.TimeoutError:
                logger.error(f"{request.method} {request.url.path} exceeded {write_timeout}s")
                return JSONResponse(status_code=503, content={"detail": "Request timed out"})

    return app
