"""FastAPI route definitions for the AI handlers and customer e-mail."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request

from bizlaunch import prompts
from bizlaunch.api.prompt_handler import (
    complete_prompt,
    request_id_of,
    state_service,
    stream_prompt,
    to_http_error,
)
from bizlaunch.api.schemas import (
    AppointmentReminderRequest,
    AppointmentReminderResponse,
    AssistantRequest,
    AssistantResponse,
    BusinessPlanRequest,
    BusinessPlanResponse,
    CustomerMessageRequest,
    CustomerMessageResponse,
    FinancialForecastRequest,
    FinancialForecastResponse,
    GenerateContentRequest,
    HealthResponse,
    MarketingIdeasRequest,
    MarketingIdeasResponse,
    SendEmailRequest,
    SendEmailResponse,
    StreamingChatRequest,
    TaskSuggestionsRequest,
    TaskSuggestionsResponse,
)
from bizlaunch.extraction import JsonExtractionError, JsonShape, extract_json, extract_json_or

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse()


@router.post("/ai-assistant", response_model=AssistantResponse)
async def ai_assistant(body: AssistantRequest, http_request: Request):
    """Platform help chat.  The client sends back the conversation it received."""
    assistant = state_service(http_request, "assistant")
    history = [turn.model_dump() for turn in body.conversation]
    try:
        reply, conversation = await asyncio.to_thread(assistant.reply, body.message, history)
    except Exception as exc:
        raise to_http_error(exc, "ai-assistant", request_id_of(http_request)) from exc
    return AssistantResponse(response=reply, conversation=conversation)


@router.post("/ai-customer-messaging", response_model=CustomerMessageResponse)
async def ai_customer_messaging(body: CustomerMessageRequest, http_request: Request):
    user_prompt = prompts.build_customer_message_prompt(
        body.message_type, body.customer_info, body.business_info, body.context,
    )
    message = await complete_prompt(
        http_request, "ai-customer-messaging",
        prompts.CUSTOMER_MESSAGING_SYSTEM_PROMPT, user_prompt,
    )
    return CustomerMessageResponse(message=message)


@router.post("/ai-financial-forecast", response_model=FinancialForecastResponse)
async def ai_financial_forecast(body: FinancialForecastRequest, http_request: Request):
    """12-month forecast; falls back to ``{"raw": text}`` if no JSON object comes back."""
    content = await complete_prompt(
        http_request, "ai-financial-forecast",
        prompts.FINANCIAL_FORECAST_SYSTEM_PROMPT,
        prompts.build_financial_forecast_prompt(body.business_info, body.financial_data),
    )
    return FinancialForecastResponse(
        forecast=extract_json_or(content, JsonShape.OBJECT, {"raw": content}),
    )


@router.post("/ai-marketing-ideas", response_model=MarketingIdeasResponse)
async def ai_marketing_ideas(body: MarketingIdeasRequest, http_request: Request):
    content = await complete_prompt(
        http_request, "ai-marketing-ideas",
        prompts.MARKETING_IDEAS_SYSTEM_PROMPT,
        prompts.build_marketing_ideas_prompt(body.business_info, body.budget, body.target_audience),
    )
    return MarketingIdeasResponse(ideas=extract_json_or(content, JsonShape.ARRAY, []))


@router.post("/ai-task-suggestions", response_model=TaskSuggestionsResponse)
async def ai_task_suggestions(body: TaskSuggestionsRequest, http_request: Request):
    content = await complete_prompt(
        http_request, "ai-task-suggestions",
        prompts.TASK_SUGGESTIONS_SYSTEM_PROMPT,
        prompts.build_task_suggestions_prompt(body.business_data),
    )
    return TaskSuggestionsResponse(tasks=extract_json_or(content, JsonShape.ARRAY, []))


@router.post("/ai-appointment-reminders", response_model=AppointmentReminderResponse)
async def ai_appointment_reminders(body: AppointmentReminderRequest, http_request: Request):
    reminder = await complete_prompt(
        http_request, "ai-appointment-reminders",
        prompts.APPOINTMENT_REMINDER_SYSTEM_PROMPT,
        prompts.build_appointment_reminder_prompt(
            body.reminder_type, body.appointment, body.business_info,
        ),
    )
    return AppointmentReminderResponse(reminder=reminder)


@router.post("/generate-business-plan", response_model=BusinessPlanResponse)
async def generate_business_plan(body: BusinessPlanRequest, http_request: Request):
    """Generate all eight plan sections in one completion.

    Unlike the quick AI tools, an unparseable answer fails the request: a
    plan of empty strings would silently overwrite the user's draft.
    """
    request_id = request_id_of(http_request)
    logger.info("[%s] Generating business plan for: %s", request_id, body.title)
    content = await complete_prompt(
        http_request, "generate-business-plan",
        prompts.BUSINESS_PLAN_SYSTEM_PROMPT,
        prompts.build_business_plan_prompt(body.title, body.context, body.business_info),
    )
    try:
        raw_plan = extract_json(content, JsonShape.OBJECT)
    except JsonExtractionError as exc:
        logger.error("[%s] JSON parse error: %s Content: %r", request_id, exc, content[:500])
        raise HTTPException(status_code=500, detail="Failed to parse AI response as JSON") from exc

    logger.info("[%s] Business plan generated successfully", request_id)
    return BusinessPlanResponse(plan=prompts.normalize_business_plan(raw_plan))


@router.post("/generate-content")
async def generate_content(body: GenerateContentRequest, http_request: Request):
    """Stream free-form business content as server-sent events."""
    logger.info("[%s] Generating content with type: %s", request_id_of(http_request), body.type)
    messages = [
        {"role": "system", "content": prompts.get_content_system_prompt(body.type)},
        {"role": "user", "content": body.prompt},
    ]
    return await stream_prompt(http_request, "generate-content", messages)


@router.post("/streaming-chat")
async def streaming_chat(body: StreamingChatRequest, http_request: Request):
    """Advisor chat; the upstream event stream is relayed untouched."""
    logger.info(
        "[%s] Starting streaming chat with business context: %s",
        request_id_of(http_request), body.business_info is not None,
    )
    messages = [{"role": "system", "content": prompts.get_advisor_system_prompt(body.business_info)}]
    messages += [turn.model_dump() for turn in body.messages]
    return await stream_prompt(http_request, "streaming-chat", messages)


@router.post("/send-customer-email", response_model=SendEmailResponse)
async def send_customer_email(body: SendEmailRequest, http_request: Request):
    if not (body.to and body.subject and body.message):
        raise HTTPException(status_code=400, detail="Missing required fields: to, subject, message")

    mailer = state_service(http_request, "mailer")
    try:
        data = await asyncio.to_thread(
            mailer.send,
            body.to,
            body.subject,
            body.message,
            business_name=body.business_name,
            business_email=body.business_email,
        )
    except Exception as exc:
        raise to_http_error(exc, "send-customer-email", request_id_of(http_request)) from exc
    return SendEmailResponse(data=data)
