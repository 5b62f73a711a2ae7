"""Appointment and service persistence.

One database round trip per call, plus a fresh user lookup for the
operations that need the caller's identity.  Deletes and status updates go
straight to the table; ownership is enforced by row-level security.
"""

from __future__ import annotations

import logging

from bizlaunch.storage.models import Appointment, AppointmentStatus, Service
from bizlaunch.storage.session import StorageSession

logger = logging.getLogger(__name__)

APPOINTMENTS_TABLE = "appointments"
SERVICES_TABLE = "services"


# ── Appointments ─────────────────────────────────────────────────────


def save_appointment(session: StorageSession, appointment: Appointment) -> Appointment:
    user = session.current_user("save appointments")
    row = session.upsert(APPOINTMENTS_TABLE, appointment.id, appointment.to_row(user.id))
    logger.debug("Saved appointment %s", row.get("id"))
    return Appointment.from_row(row)


def load_appointments(session: StorageSession) -> list[Appointment]:
    """All of the caller's appointments, earliest date first."""
    user = session.current_user("load appointments")
    response = (
        session.table(APPOINTMENTS_TABLE)
        .select("*")
        .eq("user_id", user.id)
        .order("appointment_date")
        .execute()
    )
    return [Appointment.from_row(row) for row in response.data or []]


def delete_appointment(session: StorageSession, appointment_id: str) -> None:
    session.table(APPOINTMENTS_TABLE).delete().eq("id", appointment_id).execute()


def update_appointment_status(
    session: StorageSession,
    appointment_id: str,
    status: AppointmentStatus,
) -> None:
    """Set the status column.  Any status may follow any other."""
    session.table(APPOINTMENTS_TABLE).update({"status": str(status)}).eq("id", appointment_id).execute()


# ── Services ─────────────────────────────────────────────────────────


def save_service(session: StorageSession, service: Service) -> Service:
    user = session.current_user("save services")
    row = session.upsert(SERVICES_TABLE, service.id, service.to_row(user.id))
    return Service.from_row(row)


def load_services(session: StorageSession) -> list[Service]:
    user = session.current_user("load services")
    response = (
        session.table(SERVICES_TABLE)
        .select("*")
        .eq("user_id", user.id)
        .order("name")
        .execute()
    )
    return [Service.from_row(row) for row in response.data or []]


def delete_service(session: StorageSession, service_id: str) -> None:
    session.table(SERVICES_TABLE).delete().eq("id", service_id).execute()
