"""Tests for the storage adapters against a mock database client."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import patch

import pytest

from bizlaunch.storage import appointment_storage, business_plan_storage
from bizlaunch.storage.models import Appointment, AppointmentStatus, BusinessPlan, Service
from bizlaunch.storage.session import (
    AuthenticationError,
    RecordNotFoundError,
    StorageSession,
    open_session,
)

APPOINTMENT_ROW = {
    "id": "appt-1",
    "user_id": "user-1",
    "title": "Cleaning",
    "customer_name": "Jane Doe",
    "customer_email": "jane@example.com",
    "customer_phone": None,
    "appointment_date": "2026-11-02",
    "appointment_time": "10:00",
    "duration": 45,
    "status": "pending",
    "service_name": "Teeth cleaning",
    "notes": None,
    "created_at": "2026-10-01T09:00:00+00:00",
    "updated_at": "2026-10-01T09:00:00+00:00",
}


def _appointment(**overrides) -> Appointment:
    fields = {
        "title": "Cleaning",
        "customer_name": "Jane Doe",
        "customer_email": "jane@example.com",
        "appointment_date": "2026-11-02",
        "appointment_time": "10:00",
        "duration": 45,
        "service_name": "Teeth cleaning",
    }
    fields.update(overrides)
    return Appointment(**fields)


@pytest.fixture
def session(db_client):
    return StorageSession(client=db_client, access_token="user-token")


# ── Session ──────────────────────────────────────────────────────────


class TestSession:
    def test_current_user_without_token_raises(self, db_client):
        session = StorageSession(client=db_client)
        with pytest.raises(AuthenticationError, match="to save appointments"):
            session.current_user("save appointments")
        db_client.auth.get_user.assert_not_called()

    def test_current_user_when_auth_returns_nobody(self, session, db_client):
        db_client.auth.get_user.return_value = SimpleNamespace(user=None)
        with pytest.raises(AuthenticationError):
            session.current_user("load services")

    def test_current_user_is_not_cached(self, session, db_client):
        session.current_user("a")
        session.current_user("b")
        assert db_client.auth.get_user.call_count == 2
        db_client.auth.get_user.assert_called_with("user-token")

    def test_open_session_authorises_queries_with_token(self):
        with patch("bizlaunch.storage.session.create_client") as mock_create:
            session = open_session("user-token")
        mock_create.assert_called_once_with("https://test-project.supabase.co", "test-anon-key")
        mock_create.return_value.postgrest.auth.assert_called_once_with("user-token")
        assert session.access_token == "user-token"

    def test_open_session_without_token(self):
        with patch("bizlaunch.storage.session.create_client") as mock_create:
            session = open_session(None)
        mock_create.return_value.postgrest.auth.assert_not_called()
        assert session.access_token is None


# ── Appointments ─────────────────────────────────────────────────────


class TestSaveAppointment:
    def test_new_appointment_is_inserted_with_owner(self, session, db_client, db_result):
        table = db_client.table.return_value
        table.insert.return_value.execute.return_value = db_result(APPOINTMENT_ROW)

        saved = appointment_storage.save_appointment(session, _appointment())

        db_client.table.assert_called_with("appointments")
        row = table.insert.call_args[0][0]
        assert row["user_id"] == "user-1"
        assert row["status"] == "pending"
        assert "id" not in row and "created_at" not in row
        table.update.assert_not_called()
        assert saved.id == "appt-1"
        assert saved.customer_name == "Jane Doe"

    def test_existing_appointment_is_updated_by_id(self, session, db_client, db_result):
        table = db_client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = db_result(APPOINTMENT_ROW)

        appointment_storage.save_appointment(session, _appointment(id="appt-1"))

        table.update.return_value.eq.assert_called_once_with("id", "appt-1")
        table.insert.assert_not_called()

    def test_update_sends_only_supplied_fields(self, session, db_client, db_result):
        table = db_client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = db_result(APPOINTMENT_ROW)

        appointment_storage.save_appointment(session, _appointment(id="appt-1"))

        row = table.update.call_args[0][0]
        assert "status" not in row
        assert "customer_phone" not in row and "notes" not in row
        assert row["duration"] == 45
        assert row["user_id"] == "user-1"

    def test_update_matching_nothing_raises(self, session, db_client, db_result):
        table = db_client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = db_result()
        with pytest.raises(RecordNotFoundError):
            appointment_storage.save_appointment(session, _appointment(id="missing"))

    def test_save_without_user_raises(self, db_client):
        session = StorageSession(client=db_client)
        with pytest.raises(AuthenticationError, match="User must be authenticated"):
            appointment_storage.save_appointment(session, _appointment())
        db_client.table.assert_not_called()


class TestLoadAppointments:
    def test_loads_callers_rows_by_date(self, session, db_client, db_result):
        query = db_client.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value = db_result(APPOINTMENT_ROW)

        appointments = appointment_storage.load_appointments(session)

        query.eq.assert_called_once_with("user_id", "user-1")
        query.eq.return_value.order.assert_called_once_with("appointment_date")
        assert len(appointments) == 1
        assert appointments[0].status is AppointmentStatus.PENDING

    def test_view_model_is_camel_case(self, session, db_client, db_result):
        query = db_client.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value = db_result(APPOINTMENT_ROW)

        view = appointment_storage.load_appointments(session)[0].model_dump(by_alias=True)
        assert view["customerName"] == "Jane Doe"
        assert view["appointmentDate"] == "2026-11-02"
        assert view["userId"] == "user-1"

    def test_no_user_raises(self, db_client):
        with pytest.raises(AuthenticationError):
            appointment_storage.load_appointments(StorageSession(client=db_client))


class TestAppointmentWrites:
    def test_status_update_touches_only_status(self, session, db_client):
        table = db_client.table.return_value
        appointment_storage.update_appointment_status(session, "appt-1", AppointmentStatus.CONFIRMED)
        table.update.assert_called_once_with({"status": "confirmed"})
        table.update.return_value.eq.assert_called_once_with("id", "appt-1")

    def test_any_status_may_follow_any_other(self, session, db_client):
        table = db_client.table.return_value
        appointment_storage.update_appointment_status(session, "appt-1", AppointmentStatus.COMPLETED)
        appointment_storage.update_appointment_status(session, "appt-1", AppointmentStatus.PENDING)
        assert table.update.call_count == 2

    def test_delete_by_id(self, session, db_client):
        table = db_client.table.return_value
        assert appointment_storage.delete_appointment(session, "appt-1") is None
        table.delete.return_value.eq.assert_called_once_with("id", "appt-1")
        table.delete.return_value.eq.return_value.execute.assert_called_once()
        db_client.auth.get_user.assert_not_called()


# ── Services ─────────────────────────────────────────────────────────


class TestServices:
    def test_save_service_inserts(self, session, db_client, db_result):
        table = db_client.table.return_value
        table.insert.return_value.execute.return_value = db_result(
            {"id": "svc-1", "user_id": "user-1", "name": "Haircut", "duration": 30, "price": 25.0},
        )
        saved = appointment_storage.save_service(session, Service(name="Haircut", duration=30, price=25))
        db_client.table.assert_called_with("services")
        assert table.insert.call_args[0][0]["price"] == 25.0
        assert saved.id == "svc-1"

    def test_load_services_by_name(self, session, db_client, db_result):
        query = db_client.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value = db_result(
            {"id": "svc-1", "name": "Haircut", "duration": 30, "price": "25.00"},
        )
        services = appointment_storage.load_services(session)
        query.eq.return_value.order.assert_called_once_with("name")
        assert services[0].price == 25.0

    def test_delete_service(self, session, db_client):
        appointment_storage.delete_service(session, "svc-1")
        db_client.table.assert_called_with("services")
        db_client.table.return_value.delete.return_value.eq.assert_called_once_with("id", "svc-1")


# ── Business plans ───────────────────────────────────────────────────


class TestBusinessPlans:
    def test_untitled_plan_gets_default_title(self, session, db_client, db_result):
        table = db_client.table.return_value
        table.insert.return_value.execute.return_value = db_result(
            {"id": "plan-1", "title": "Untitled Business Plan"},
        )
        saved = business_plan_storage.save_business_plan(session, BusinessPlan(marketing="Flyers"))
        row = table.insert.call_args[0][0]
        assert row["title"] == "Untitled Business Plan"
        assert row["marketing"] == "Flyers"
        assert saved.title == "Untitled Business Plan"

    def test_rename_leaves_sections_untouched(self, session, db_client, db_result):
        table = db_client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = db_result(
            {"id": "plan-1", "title": "New name", "marketing": "Flyers"},
        )
        business_plan_storage.save_business_plan(session, BusinessPlan(id="plan-1", title="New name"))
        assert table.update.call_args[0][0] == {"title": "New name", "user_id": "user-1"}

    def test_update_without_title_keeps_stored_title(self, session, db_client, db_result):
        table = db_client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = db_result(
            {"id": "plan-1", "title": "Bakery", "marketing": "Radio"},
        )
        business_plan_storage.save_business_plan(session, BusinessPlan(id="plan-1", marketing="Radio"))
        assert table.update.call_args[0][0] == {"marketing": "Radio", "user_id": "user-1"}

    def test_load_plans_most_recent_first(self, session, db_client, db_result):
        query = db_client.table.return_value.select.return_value
        query.eq.return_value.order.return_value.execute.return_value = db_result(
            {"id": "plan-2", "title": "B"}, {"id": "plan-1", "title": "A"},
        )
        plans = business_plan_storage.load_business_plans(session)
        query.eq.return_value.order.assert_called_once_with("updated_at", desc=True)
        assert [p.id for p in plans] == ["plan-2", "plan-1"]

    def test_load_one_plan_by_id(self, session, db_client, db_result):
        query = db_client.table.return_value.select.return_value
        query.eq.return_value.execute.return_value = db_result({"id": "plan-1", "title": "A"})
        plan = business_plan_storage.load_business_plan(session, "plan-1")
        query.eq.assert_called_once_with("id", "plan-1")
        assert plan.title == "A"
        db_client.auth.get_user.assert_not_called()

    def test_load_missing_plan_raises(self, session, db_client, db_result):
        query = db_client.table.return_value.select.return_value
        query.eq.return_value.execute.return_value = db_result()
        with pytest.raises(RecordNotFoundError):
            business_plan_storage.load_business_plan(session, "nope")

    def test_delete_plan(self, session, db_client):
        business_plan_storage.delete_business_plan(session, "plan-1")
        db_client.table.assert_called_with("business_plans")
        db_client.table.return_value.delete.return_value.eq.assert_called_once_with("id", "plan-1")
