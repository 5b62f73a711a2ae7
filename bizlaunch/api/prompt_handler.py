"""Shared plumbing for the AI handlers.

Each handler only builds its prompts and reshapes the model output; running
the completion off the event loop and mapping failures onto HTTP status
codes happens here, once.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator

import httpx
from fastapi import HTTPException, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from bizlaunch.config import ConfigurationError
from bizlaunch.services.gateway_client import (
    GatewayClient,
    GatewayError,
    GatewayQuotaExceededError,
    GatewayRateLimitedError,
)

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Rate limits exceeded, please try again later."
QUOTA_EXCEEDED_MESSAGE = "Payment required, please add funds."
INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again."


def request_id_of(request: Request) -> str:
    return getattr(request.state, "request_id", "?")


def state_service(request: Request, name: str):
    """Retrieve a client the lifespan stored in app state, or answer 503."""
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=503,
            detail="The service is still starting up. Please try again in a moment.",
        )
    return service


def get_gateway(request: Request) -> GatewayClient:
    return state_service(request, "gateway")


def to_http_error(exc: Exception, handler: str, request_id: str) -> HTTPException:
    """Translate a handler failure into the client-facing error."""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, GatewayRateLimitedError):
        logger.warning("[%s] %s: upstream rate limited", request_id, handler)
        return HTTPException(status_code=429, detail=RATE_LIMITED_MESSAGE)
    if isinstance(exc, GatewayQuotaExceededError):
        logger.warning("[%s] %s: upstream quota exhausted", request_id, handler)
        return HTTPException(status_code=402, detail=QUOTA_EXCEEDED_MESSAGE)
    if isinstance(exc, ConfigurationError | GatewayError):
        logger.error("[%s] Error in %s: %s", request_id, handler, exc)
        return HTTPException(status_code=500, detail=str(exc))

    logger.exception("[%s] Error in %s", request_id, handler, exc_info=exc)
    return HTTPException(status_code=500, detail=INTERNAL_ERROR_MESSAGE)


async def complete_prompt(
    request: Request,
    handler: str,
    system_prompt: str,
    user_prompt: str,
) -> str:
    """Run one buffered completion for *handler* and return the text."""
    gateway = get_gateway(request)
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
    try:
        # httpx.Client is blocking; keep the event loop free
        return await asyncio.to_thread(gateway.complete, messages, operation=handler)
    except Exception as exc:
        raise to_http_error(exc, handler, request_id_of(request)) from exc


def _relay(upstream: httpx.Response) -> Iterator[bytes]:
    try:
        yield from upstream.iter_raw()
    finally:
        upstream.close()


async def stream_prompt(
    request: Request,
    handler: str,
    messages: list[dict[str, str]],
) -> StreamingResponse:
    """Open a streamed completion and pass the upstream body through as-is."""
    gateway = get_gateway(request)
    try:
        upstream = await asyncio.to_thread(gateway.open_stream, messages, operation=handler)
    except Exception as exc:
        raise to_http_error(exc, handler, request_id_of(request)) from exc

    # Closed here as well when the client leaves before the first chunk
    return StreamingResponse(
        _relay(upstream),
        media_type="text/event-stream",
        background=BackgroundTask(upstream.close),
    )
