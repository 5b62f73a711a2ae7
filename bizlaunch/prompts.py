"""System prompts and user-prompt builders for every AI handler.

Builders take the validated request models and fill in a fallback for every
optional field, so a sparse request still yields a complete prompt.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bizlaunch.api.schemas import (
        AppointmentInfo,
        BusinessData,
        BusinessInfo,
        CustomerInfo,
        FinancialData,
    )

PLAN_SECTIONS: tuple[str, ...] = (
    "executiveSummary",
    "businessDescription",
    "marketAnalysis",
    "organization",
    "products",
    "marketing",
    "funding",
    "financials",
)


def _or(value: Any, fallback: Any) -> Any:
    """Return *value* unless it is empty/zero/None, else *fallback*."""
    return value if value else fallback


class _KeyedEnum(StrEnum):
    """Enum keyed by the caller's type string.

    Unknown or missing keys resolve to the ``GENERAL`` member.
    """

    @classmethod
    def _missing_(cls, value):
        return cls.GENERAL


_NO_MARKDOWN_RULES = """CRITICAL FORMATTING RULES:
- Do NOT use any markdown formatting (no hashtags, asterisks, bullet points with dashes, or special characters)
- Write in clear, professional paragraphs
- Use numbered lists only when listing specific steps or items (1. 2. 3.)"""


# ── ai-assistant ─────────────────────────────────────────────────────

ASSISTANT_SYSTEM_PROMPT = """You are an AI assistant for BizLaunch360, a comprehensive business success platform. You help entrepreneurs and business owners understand how to use the platform's features effectively.

BizLaunch360 offers the following key features:

1. **AI-Powered Business Plans**: Generate comprehensive business plans in minutes with intelligent AI assistance
2. **Professional Invoicing**: Create beautiful invoices and get paid faster with integrated Stripe payments
3. **Smart Appointment Booking**: 24/7 customer booking system with intuitive scheduling
4. **Customer Management (CRM)**: Track interactions and build stronger customer relationships
5. **Real-time Analytics Dashboard**: Monitor revenue, expenses, and business growth
6. **Business Setup Assistant**: Help with registration, EIN applications, and compliance for US entrepreneurs

The platform includes these main sections:
- Dashboard: Overview of business metrics and quick actions
- Business Plan: AI-powered business plan generation and management
- Finance: Invoicing, expense tracking, and financial analytics
- Appointments: Scheduling system and calendar management
- CRM: Customer relationship management and contact tracking
- Settings: Account configuration and preferences

You should:
- Be helpful and knowledgeable about business topics
- Guide users through platform features
- Provide practical business advice
- Be encouraging and supportive to entrepreneurs
- Keep responses concise but informative
- Focus on how BizLaunch360 can solve their specific business challenges

Always maintain a professional yet friendly tone, and remember you're helping entrepreneurs succeed with their business goals."""


# ── ai-customer-messaging ────────────────────────────────────────────


class MessageType(_KeyedEnum):
    FOLLOW_UP = "follow-up"
    REMINDER = "reminder"
    CONFIRMATION = "confirmation"
    THANK_YOU = "thank-you"
    PROMOTION = "promotion"
    REPLY = "reply"
    GENERAL = "general"


MESSAGE_TYPE_DESCRIPTIONS: dict[MessageType, str] = {
    MessageType.FOLLOW_UP: "a friendly follow-up message to check in with the customer",
    MessageType.REMINDER: "a polite reminder about an upcoming appointment or payment",
    MessageType.CONFIRMATION: "a confirmation message for a booking or order",
    MessageType.THANK_YOU: "a genuine thank you message for their business",
    MessageType.PROMOTION: "a personalized promotional message about a special offer",
    MessageType.REPLY: "a professional and helpful reply to their inquiry",
    MessageType.GENERAL: "a professional message",
}

CUSTOMER_MESSAGING_SYSTEM_PROMPT = """You are a friendly business communication assistant. Write short, professional messages that sound natural and personal - not robotic.

Guidelines:
- Keep messages under 100 words
- Use a warm, professional tone
- Include the customer's name when provided
- Be specific to the business type
- End with a clear call-to-action when appropriate
- Don't use excessive exclamation marks or emojis"""


def build_customer_message_prompt(
    message_type: str | None,
    customer: CustomerInfo,
    business: BusinessInfo,
    context: str | None,
) -> str:
    kind = MESSAGE_TYPE_DESCRIPTIONS[MessageType(message_type)]
    lines = [
        f"Write {kind} for:",
        "",
        f"Business: {_or(business.name, 'Our Business')} ({_or(business.type, 'Service Business')})",
        f"Customer: {_or(customer.name, 'Valued Customer')}",
    ]
    if customer.email:
        lines.append(f"Email: {customer.email}")
    if context:
        lines.append(f"Context: {context}")
    lines += ["", "Generate just the message text, ready to send."]
    return "\n".join(lines)


# ── ai-financial-forecast ────────────────────────────────────────────

FINANCIAL_FORECAST_SYSTEM_PROMPT = """You are a financial advisor AI for small businesses. Based on the provided business and financial data, generate a concise financial forecast.

Provide your response in this JSON format:
{
  "revenueProjection": { "month1": number, "month3": number, "month6": number, "month12": number },
  "expenseProjection": { "month1": number, "month3": number, "month6": number, "month12": number },
  "profitProjection": { "month1": number, "month3": number, "month6": number, "month12": number },
  "insights": ["insight1", "insight2", "insight3"],
  "recommendations": ["rec1", "rec2", "rec3"]
}

Keep insights and recommendations short (1 sentence each), practical, and actionable for small business owners."""


def build_financial_forecast_prompt(business: BusinessInfo, financials: FinancialData) -> str:
    return (
        "Business Information:\n"
        f"- Business Type: {_or(business.business_type, 'General Business')}\n"
        f"- Industry: {_or(business.industry, 'Not specified')}\n"
        f"- Monthly Revenue: ${_or(financials.monthly_revenue, 0)}\n"
        f"- Monthly Expenses: ${_or(financials.monthly_expenses, 0)}\n"
        f"- Total Customers: {_or(financials.total_customers, 0)}\n"
        f"- Average Transaction: ${_or(financials.average_transaction, 0)}\n"
        "\n"
        "Generate a realistic 12-month financial forecast based on this data."
    )


# ── ai-marketing-ideas ───────────────────────────────────────────────

MARKETING_IDEAS_SYSTEM_PROMPT = """You are a creative marketing advisor for small businesses. Generate practical, low-cost marketing ideas.

Respond with a JSON array of 5 marketing ideas:
[
  {
    "title": "Short idea title",
    "description": "2-3 sentence description of the idea",
    "effort": "low" | "medium" | "high",
    "cost": "free" | "$" | "$$",
    "timeframe": "immediate" | "this week" | "this month",
    "expectedImpact": "Short description of expected results"
  }
]

Focus on actionable ideas that a solo entrepreneur or small team can implement quickly."""


def build_marketing_ideas_prompt(
    business: BusinessInfo,
    budget: str | None,
    target_audience: str | None,
) -> str:
    return (
        "Generate 5 marketing ideas for this business:\n"
        "\n"
        f"Business Type: {_or(business.type, 'Small Business')}\n"
        f"Industry: {_or(business.industry, 'General')}\n"
        f"Location: {_or(business.location, 'Local')}\n"
        f"Target Audience: {_or(target_audience, 'General consumers')}\n"
        f"Marketing Budget: {_or(budget, 'Low budget')}\n"
        f"Current Customers: {_or(business.customer_count, 'Starting out')}\n"
        "\n"
        "Focus on practical ideas they can start today with minimal resources."
    )


# ── ai-task-suggestions ──────────────────────────────────────────────

TASK_SUGGESTIONS_SYSTEM_PROMPT = """You are a smart business assistant that suggests actionable tasks for small business owners.

Respond with a JSON array of 5 task suggestions:
[
  {
    "title": "Short task title",
    "description": "One sentence description",
    "priority": "high" | "medium" | "low",
    "category": "customers" | "finance" | "marketing" | "operations" | "appointments"
  }
]

Focus on practical, immediate actions the business owner can take today. Be specific based on the data provided."""


def build_task_suggestions_prompt(data: BusinessData) -> str:
    return (
        "Based on this business data, suggest 5 priority tasks:\n"
        "\n"
        f"- Pending Invoices: {_or(data.pending_invoices, 0)}\n"
        f"- Overdue Invoices: {_or(data.overdue_invoices, 0)}\n"
        f"- New Leads: {_or(data.new_leads, 0)}\n"
        f"- Upcoming Appointments: {_or(data.upcoming_appointments, 0)}\n"
        f"- Inactive Customers: {_or(data.inactive_customers, 0)}\n"
        f"- Days Since Last Marketing: {_or(data.days_since_last_marketing, 'Unknown')}\n"
        f"- Outstanding Expenses: {_or(data.outstanding_expenses, 0)}\n"
        "\n"
        "What should this business owner focus on right now?"
    )


# ── ai-appointment-reminders ─────────────────────────────────────────


class ReminderType(_KeyedEnum):
    DAY_BEFORE = "24h"
    HOUR_BEFORE = "1h"
    WEEK_BEFORE = "1week"
    CONFIRMATION = "confirmation"
    GENERAL = "general"


REMINDER_TYPE_DESCRIPTIONS: dict[ReminderType, str] = {
    ReminderType.DAY_BEFORE: "a reminder for tomorrow",
    ReminderType.HOUR_BEFORE: "a reminder for 1 hour from now",
    ReminderType.WEEK_BEFORE: "a reminder for next week",
    ReminderType.CONFIRMATION: "a booking confirmation",
    ReminderType.GENERAL: "an appointment reminder",
}

APPOINTMENT_REMINDER_SYSTEM_PROMPT = """You are a friendly appointment reminder assistant. Write short, clear reminder messages.

Guidelines:
- Keep messages under 80 words
- Include the appointment date, time, and service
- Be warm but professional
- Include any preparation instructions if relevant
- End with a way to contact if they need to reschedule"""


def build_appointment_reminder_prompt(
    reminder_type: str | None,
    appointment: AppointmentInfo,
    business: BusinessInfo,
) -> str:
    kind = REMINDER_TYPE_DESCRIPTIONS[ReminderType(reminder_type)]
    lines = [
        f"Write {kind} for:",
        "",
        f"Business: {_or(business.name, 'Our Business')}",
        f"Customer: {_or(appointment.customer_name, 'Valued Customer')}",
        f"Service: {_or(appointment.service_name, 'Appointment')}",
        f"Date: {_or(appointment.date, 'Scheduled date')}",
        f"Time: {_or(appointment.time, 'Scheduled time')}",
        f"Duration: {_or(appointment.duration, 60)} minutes",
    ]
    if appointment.notes:
        lines.append(f"Notes: {appointment.notes}")
    lines += ["", "Generate just the reminder message text."]
    return "\n".join(lines)


# ── generate-business-plan ───────────────────────────────────────────

BUSINESS_PLAN_SYSTEM_PROMPT = f"""You are an expert business consultant and strategist for BizLaunch360. Your role is to create comprehensive, investor-ready business plans that help entrepreneurs succeed.

{_NO_MARKDOWN_RULES}
- Keep content practical, specific, and actionable
- Focus on realistic projections and achievable goals

Your expertise covers:
- Market analysis and competitive positioning
- Financial planning and projections
- Business strategy and growth tactics
- Operations and organizational structure
- Funding and investor relations

Return ONLY raw JSON with these exact keys: {", ".join(PLAN_SECTIONS)}.
Do not include markdown fences or extra text."""

_BUSINESS_PLAN_REQUIREMENTS = """Requirements for each section:

1. executiveSummary: Write a compelling 2-3 paragraph executive summary including:
   - Mission statement and vision
   - Unique value proposition
   - Key success factors
   - Brief financial highlights
   - Growth potential

2. businessDescription: Provide detailed business description covering:
   - Business model and revenue streams
   - Products or services offered
   - Target customer personas
   - Competitive advantages
   - Industry positioning

3. marketAnalysis: Conduct thorough market analysis including:
   - Total Addressable Market (TAM), Serviceable Addressable Market (SAM), and Serviceable Obtainable Market (SOM)
   - Target market demographics and psychographics
   - Competitor analysis (at least 3 competitors with strengths/weaknesses)
   - Market trends and opportunities
   - SWOT analysis

4. organization: Detail the organizational structure:
   - Leadership team and key roles
   - Organizational hierarchy
   - Advisory board recommendations
   - Hiring plan for first year
   - Company culture and values

5. products: Describe products/services comprehensively:
   - Detailed product/service descriptions
   - Pricing strategy with justification
   - Product lifecycle and roadmap
   - Differentiation from competitors
   - Future product development plans

6. marketing: Create actionable marketing strategy:
   - Brand positioning statement
   - Marketing channels (digital, traditional, partnerships)
   - Customer acquisition strategy with costs
   - Sales funnel and conversion strategy
   - Customer retention and loyalty programs
   - First-year marketing budget allocation

7. funding: Detail funding requirements:
   - Total capital requirements with breakdown
   - Funding stages and milestones
   - Use of funds (specific allocations)
   - Potential funding sources
   - Investor value proposition and expected returns

8. financials: Provide realistic financial projections:
   - 3-year revenue projections by quarter
   - Expense forecasts and categorization
   - Break-even analysis with timeline
   - Key financial metrics (gross margin, net margin, CAC, LTV)
   - Cash flow summary
   - Key assumptions clearly stated

Make all content specific to the business type and title provided. Be realistic and practical.
Return strictly valid JSON."""


def build_business_plan_prompt(
    title: str,
    context: dict[str, Any] | None,
    business: BusinessInfo | None,
) -> str:
    business_context = ""
    if business is not None:
        business_context = (
            "\nBusiness Information:\n"
            f"- Business Name: {_or(business.business_name, 'Not specified')}\n"
            f"- Business Type: {_or(business.business_type, 'Not specified')}\n"
            f"- Description: {_or(business.business_description, 'Not specified')}\n"
            f"- Location: {_or(business.business_address, 'Not specified')}\n"
            f"- Email: {_or(business.business_email, 'Not specified')}\n"
            f"- Phone: {_or(business.business_phone, 'Not specified')}\n"
            f"- Website: {_or(business.business_website, 'Not specified')}\n"
        )
    return (
        f"Create a comprehensive business plan for: {title}\n"
        f"{business_context}\n"
        "Existing content to improve (empty strings mean generate new content):\n"
        f"{json.dumps(context or {}, indent=2)}\n"
        "\n"
        f"{_BUSINESS_PLAN_REQUIREMENTS}"
    )


def normalize_business_plan(raw: dict[str, Any]) -> dict[str, str]:
    """Keep exactly the plan sections; anything missing or non-string becomes ``""``."""
    return {key: raw[key] if isinstance(raw.get(key), str) else "" for key in PLAN_SECTIONS}


# ── generate-content ─────────────────────────────────────────────────


class ContentType(_KeyedEnum):
    GENERAL = "general"
    BUSINESS = "business"
    MARKETING = "marketing"


CONTENT_SYSTEM_PROMPTS: dict[ContentType, str] = {
    ContentType.GENERAL: f"""You are a professional business content generator for BizLaunch360. Generate clear, practical business content that is actionable and professional.

{_NO_MARKDOWN_RULES}
- Keep content practical, specific, and actionable""",
    ContentType.BUSINESS: f"""You are a business plan expert for BizLaunch360. Generate professional, investor-ready business plan content.

Your expertise includes:
- Executive summaries and business descriptions
- Market analysis and competitive positioning
- Financial projections and funding strategies
- Organizational structure and team planning
- Marketing and sales strategies

{_NO_MARKDOWN_RULES}
- Be specific and include realistic numbers where applicable
- Focus on actionable, practical content""",
    ContentType.MARKETING: f"""You are a marketing strategist for BizLaunch360. Generate compelling marketing strategies and content tailored for small and medium businesses.

Your expertise includes:
- Brand positioning and messaging
- Customer acquisition strategies
- Digital marketing (SEO, PPC, social media)
- Sales funnel optimization
- Customer retention programs

{_NO_MARKDOWN_RULES}
- Include specific tactics and realistic budget estimates
- Focus on ROI and measurable outcomes""",
}


def get_content_system_prompt(content_type: str | None) -> str:
    return CONTENT_SYSTEM_PROMPTS[ContentType(content_type)]


# ── streaming-chat ───────────────────────────────────────────────────

_ADVISOR_SYSTEM_PROMPT = """You are BizLaunch360 AI, an expert business advisor and consultant. You specialize in helping entrepreneurs and small business owners succeed.

Your expertise includes:
1. Business Planning: Creating comprehensive business plans, executive summaries, and strategic roadmaps
2. Market Analysis: Analyzing target markets, competition, industry trends, and customer segments
3. Financial Planning: Revenue projections, expense management, break-even analysis, funding strategies
4. Business Strategy: Growth tactics, competitive positioning, operational efficiency
5. Marketing: Customer acquisition, brand positioning, digital marketing, sales strategies

IMPORTANT GUIDELINES:
- Provide practical, actionable advice tailored to small and medium businesses
- Be specific and give concrete examples when possible
- When discussing financials, use realistic numbers and explain your assumptions
- If you don't have enough information, ask clarifying questions
- Always consider the user's business type and context when giving advice

FORMATTING RULES:
- Do NOT use markdown formatting (no hashtags, asterisks, bullet points with dashes)
- Write in clear, professional paragraphs
- Use numbered lists only when listing specific steps (1. 2. 3.)
- Keep responses focused and easy to read
"""


def get_advisor_system_prompt(business: BusinessInfo | None) -> str:
    """Streaming-chat system prompt, personalised when business info is known."""
    if business is None:
        return _ADVISOR_SYSTEM_PROMPT
    return (
        f"{_ADVISOR_SYSTEM_PROMPT}\n"
        "The user's business information:\n"
        f"- Business Name: {_or(business.business_name, 'Not specified')}\n"
        f"- Business Type: {_or(business.business_type, 'Not specified')}\n"
        f"- Description: {_or(business.business_description, 'Not provided')}\n"
        f"- Location: {_or(business.business_address, 'Not specified')}\n"
        "\n"
        "Use this information to provide personalized, relevant advice."
    )
