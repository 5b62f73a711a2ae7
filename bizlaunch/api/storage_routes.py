"""REST routes over the storage adapters.

The caller's database access token comes in the ``Authorization: Bearer``
header; records go out in the dashboard's camelCase shape.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from bizlaunch.api.prompt_handler import request_id_of, to_http_error
from bizlaunch.config import ConfigurationError
from bizlaunch.storage import appointment_storage, business_plan_storage
from bizlaunch.storage.models import Appointment, BusinessPlan, Service, StatusUpdate
from bizlaunch.storage.session import (
    AuthenticationError,
    RecordNotFoundError,
    StorageSession,
    open_session,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_storage_session(request: Request) -> StorageSession:
    """Open a database session acting as the bearer of the request token."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    access_token = token.strip() if scheme.lower() == "bearer" else None
    try:
        return open_session(access_token or None)
    except ConfigurationError as exc:
        logger.error("[%s] Storage unavailable: %s", request_id_of(request), exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


async def _run(request: Request, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
    """Run a blocking storage call in a worker thread and map its errors."""
    try:
        return await asyncio.to_thread(fn, *args)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise to_http_error(exc, operation, request_id_of(request)) from exc


# ── Appointments ─────────────────────────────────────────────────────


@router.get("/appointments", response_model=list[Appointment])
async def list_appointments(request: Request, session: StorageSession = Depends(get_storage_session)):
    return await _run(request, "load-appointments", appointment_storage.load_appointments, session)


@router.post("/appointments", response_model=Appointment)
async def save_appointment(
    body: Appointment,
    request: Request,
    session: StorageSession = Depends(get_storage_session),
):
    """Create the appointment, or update it when the body carries an ``id``."""
    return await _run(request, "save-appointment", appointment_storage.save_appointment, session, body)


@router.patch("/appointments/{appointment_id}/status", status_code=204)
async def update_appointment_status(
    appointment_id: str,
    body: StatusUpdate,
    request: Request,
    session: StorageSession = Depends(get_storage_session),
):
    await _run(
        request, "update-appointment-status",
        appointment_storage.update_appointment_status, session, appointment_id, body.status,
    )
    return Response(status_code=204)


@router.delete("/appointments/{appointment_id}", status_code=204)
async def delete_appointment(
    appointment_id: str,
    request: Request,
    session: StorageSession = Depends(get_storage_session),
):
    await _run(request, "delete-appointment", appointment_storage.delete_appointment, session, appointment_id)
    return Response(status_code=204)


# ── Services ─────────────────────────────────────────────────────────


@router.get("/services", response_model=list[Service])
async def list_services(request: Request, session: StorageSession = Depends(get_storage_session)):
    return await _run(request, "load-services", appointment_storage.load_services, session)


@router.post("/services", response_model=Service)
async def save_service(
    body: Service,
    request: Request,
    session: StorageSession = Depends(get_storage_session),
):
    return await _run(request, "save-service", appointment_storage.save_service, session, body)


@router.delete("/services/{service_id}", status_code=204)
async def delete_service(
    service_id: str,
    request: Request,
    session: StorageSession = Depends(get_storage_session),
):
    await _run(request, "delete-service", appointment_storage.delete_service, session, service_id)
    return Response(status_code=204)


# ── Business plans ───────────────────────────────────────────────────


@router.get("/business-plans", response_model=list[BusinessPlan])
async def list_business_plans(request: Request, session: StorageSession = Depends(get_storage_session)):
    return await _run(request, "load-business-plans", business_plan_storage.load_business_plans, session)


@router.post("/business-plans", response_model=BusinessPlan)
async def save_business_plan(
    body: BusinessPlan,
    request: Request,
    session: StorageSession = Depends(get_storage_session),
):
    return await _run(request, "save-business-plan", business_plan_storage.save_business_plan, session, body)


@router.get("/business-plans/{plan_id}", response_model=BusinessPlan)
async def get_business_plan(
    plan_id: str,
    request: Request,
    session: StorageSession = Depends(get_storage_session),
):
    return await _run(request, "load-business-plan", business_plan_storage.load_business_plan, session, plan_id)


@router.delete("/business-plans/{plan_id}", status_code=204)
async def delete_business_plan(
    plan_id: str,
    request: Request,
    session: StorageSession = Depends(get_storage_session),
):
    await _run(request, "delete-business-plan", business_plan_storage.delete_business_plan, session, plan_id)
    return Response(status_code=204)
