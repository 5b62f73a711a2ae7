"""Records stored per user: appointments, services and business plans.

Field names match the table columns (snake_case); the aliases are the
dashboard's camelCase names, so one model serves both the row and the view.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Server-managed columns, never written by the adapters
_SERVER_COLUMNS = {"id", "user_id", "created_at", "updated_at"}


class AppointmentStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class StoredRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str | None = None
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]):
        return cls.model_validate(row)

    def to_row(self, user_id: str) -> dict[str, Any]:
        """Column payload for insert/update, stamped with the owner.

        An update (``id`` set) carries only the fields the caller supplied,
        so omitted columns keep their stored values.
        """
        row = self.model_dump(
            mode="json",
            exclude=_SERVER_COLUMNS,
            exclude_unset=self.id is not None,
        )
        row["user_id"] = user_id
        return row


class Appointment(StoredRecord):
    title: str
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    appointment_date: str
    appointment_time: str
    duration: int = 60
    status: AppointmentStatus = AppointmentStatus.PENDING
    service_name: str
    notes: str | None = None


class Service(StoredRecord):
    name: str
    description: str | None = None
    duration: int
    price: float


class BusinessPlan(StoredRecord):
    title: str | None = None
    executive_summary: str | None = ""
    business_description: str | None = ""
    market_analysis: str | None = ""
    organization: str | None = ""
    products: str | None = ""
    marketing: str | None = ""
    funding: str | None = ""
    financials: str | None = ""

    def to_row(self, user_id: str) -> dict[str, Any]:
        row = super().to_row(user_id)
        if self.id is None or "title" in self.model_fields_set:
            row["title"] = self.title or "Untitled Business Plan"
        return row


class StatusUpdate(BaseModel):
    status: AppointmentStatus
