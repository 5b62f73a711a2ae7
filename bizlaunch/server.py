"""FastAPI server for the BizLaunch360 backend.

Run with:
    uvicorn bizlaunch.server:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bizlaunch.api.prompt_handler import INTERNAL_ERROR_MESSAGE, request_id_of
from bizlaunch.api.routes import router
from bizlaunch.api.storage_routes import router as storage_router
from bizlaunch.config import CORS_ALLOW_ORIGIN, SERVER_HOST, SERVER_PORT
from bizlaunch.services.assistant import BusinessAssistant
from bizlaunch.services.email_client import CustomerMailer
from bizlaunch.services.gateway_client import GatewayClient
from bizlaunch.services.metrics import metrics

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": CORS_ALLOW_ORIGIN,
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, PATCH, DELETE, OPTIONS",
}


# ── Lifespan: initialise / tear-down shared resources ────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Build the outbound clients once and store them in app state.

    None of them touches a secret here; keys are resolved on each call so a
    missing one fails only the requests that need it.
    """
    gateway = GatewayClient()
    application.state.gateway = gateway
    application.state.assistant = BusinessAssistant()
    application.state.mailer = CustomerMailer()
    logger.info("Clients ready (gateway model: %s).", gateway.model)
    yield
    gateway.close()
    metrics.flush()


# ── FastAPI application ──────────────────────────────────────────────
app = FastAPI(
    title="BizLaunch360 API",
    description=(
        "AI helpers for small-business owners: customer messaging, forecasts, "
        "marketing ideas, business plans, plus appointment and plan storage."
    ),
    version="1.0.0",
    lifespan=lifespan,
)


# ── Request-ID middleware ────────────────────────────────────────────
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Attach a unique request ID to every request for log correlation."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    logger.info("[%s] %s %s", request_id, request.method, request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ── CORS ─────────────────────────────────────────────────────────────
@app.middleware("http")
async def add_cors_headers(request: Request, call_next) -> Response:
    """Answer every pre-flight directly and stamp CORS headers on the rest.

    Registered last, so it wraps the request-ID middleware: OPTIONS never
    reaches a route.  Starlette's ``CORSMiddleware`` is not used because it
    only answers pre-flights that carry an ``Origin`` header, and every
    OPTIONS request must get 200 with an empty body.
    """
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# ── Error bodies: always {"error": "..."} ────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    logger.warning("[%s] Invalid request body: %s", request_id_of(request), problems)
    return JSONResponse(status_code=500, content={"error": f"Invalid request body: {problems}"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the middleware stack, so the CORS headers are added here
    logger.exception("[%s] Unhandled error", request_id_of(request), exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": INTERNAL_ERROR_MESSAGE},
        headers=CORS_HEADERS,
    )


# ── Register routes ──────────────────────────────────────────────────
app.include_router(router, prefix="/api")
app.include_router(storage_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "BizLaunch360 API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


# ── CLI entry point ──────────────────────────────────────────────────

if __name__ == "__main__":
    logger.info("Starting BizLaunch360 API server on %s:%d", SERVER_HOST, SERVER_PORT)
    uvicorn.run(
        "bizlaunch.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
    )
