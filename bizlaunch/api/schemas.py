"""Pydantic schemas for the FastAPI endpoints.

Request bodies arrive in camelCase from the dashboard; every model accepts
either camelCase or snake_case keys and ignores unknown ones.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = int | float


class _Body(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


# ── Shared payload fragments ─────────────────────────────────────────


class BusinessInfo(_Body):
    """Business details sent by the dashboard.

    Handlers read different subsets: the quick AI tools use ``name``/``type``
    etc., while plan generation and the advisor chat send the profile columns
    (``business_name``, ``business_type``...).
    """

    name: str | None = None
    type: str | None = None
    industry: str | None = None
    location: str | None = None
    customer_count: str | None = None
    business_name: str | None = None
    business_type: str | None = None
    business_description: str | None = None
    business_address: str | None = None
    business_email: str | None = None
    business_phone: str | None = None
    business_website: str | None = None


class CustomerInfo(_Body):
    name: str | None = None
    email: str | None = None


class FinancialData(_Body):
    monthly_revenue: Number | None = None
    monthly_expenses: Number | None = None
    total_customers: Number | None = None
    average_transaction: Number | None = None


class BusinessData(_Body):
    pending_invoices: Number | None = None
    overdue_invoices: Number | None = None
    new_leads: Number | None = None
    upcoming_appointments: Number | None = None
    inactive_customers: Number | None = None
    days_since_last_marketing: Number | None = None
    outstanding_expenses: Number | None = None


class AppointmentInfo(_Body):
    customer_name: str | None = None
    service_name: str | None = None
    date: str | None = None
    time: str | None = None
    duration: Number | None = None
    notes: str | None = None


class ChatMessage(_Body):
    role: Literal["system", "user", "assistant"]
    content: str


# ── Requests ─────────────────────────────────────────────────────────


class AssistantRequest(_Body):
    message: str = Field(..., min_length=1, description="The user's message")
    conversation: list[ChatMessage] = Field(default_factory=list)


class CustomerMessageRequest(_Body):
    message_type: str | None = None
    customer_info: CustomerInfo = Field(default_factory=CustomerInfo)
    business_info: BusinessInfo = Field(default_factory=BusinessInfo)
    context: str | None = None


class FinancialForecastRequest(_Body):
    business_info: BusinessInfo = Field(default_factory=BusinessInfo)
    financial_data: FinancialData = Field(default_factory=FinancialData)


class MarketingIdeasRequest(_Body):
    business_info: BusinessInfo = Field(default_factory=BusinessInfo)
    budget: str | None = None
    target_audience: str | None = None


class TaskSuggestionsRequest(_Body):
    business_data: BusinessData = Field(default_factory=BusinessData)


class AppointmentReminderRequest(_Body):
    appointment: AppointmentInfo = Field(default_factory=AppointmentInfo)
    business_info: BusinessInfo = Field(default_factory=BusinessInfo)
    reminder_type: str | None = None


class BusinessPlanRequest(_Body):
    title: str = Field(..., min_length=1, description="What the plan is for")
    context: dict[str, Any] | None = None
    business_info: BusinessInfo | None = None


class GenerateContentRequest(_Body):
    prompt: str = Field(..., min_length=1)
    type: str | None = "general"


class StreamingChatRequest(_Body):
    messages: list[ChatMessage] = Field(default_factory=list)
    business_info: BusinessInfo | None = None


class SendEmailRequest(_Body):
    # Optional here so the handler can answer 400 with its own message
    to: str | None = None
    subject: str | None = None
    message: str | None = None
    business_name: str | None = None
    business_email: str | None = None


# ── Responses ────────────────────────────────────────────────────────


class AssistantResponse(BaseModel):
    response: str
    conversation: list[dict[str, str]]


class CustomerMessageResponse(BaseModel):
    message: str


class FinancialForecastResponse(BaseModel):
    forecast: dict[str, Any]


class MarketingIdeasResponse(BaseModel):
    ideas: list[Any]


class TaskSuggestionsResponse(BaseModel):
    tasks: list[Any]


class AppointmentReminderResponse(BaseModel):
    reminder: str


class BusinessPlanResponse(BaseModel):
    plan: dict[str, str]


class SendEmailResponse(BaseModel):
    success: bool = True
    data: dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    service: str = "bizlaunch360-api"
