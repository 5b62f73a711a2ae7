"""Business plan persistence."""

from __future__ import annotations

from bizlaunch.storage.models import BusinessPlan
from bizlaunch.storage.session import StorageSession, first_row

BUSINESS_PLANS_TABLE = "business_plans"


def save_business_plan(session: StorageSession, plan: BusinessPlan) -> BusinessPlan:
    user = session.current_user("save business plan")
    row = session.upsert(BUSINESS_PLANS_TABLE, plan.id, plan.to_row(user.id))
    return BusinessPlan.from_row(row)


def load_business_plans(session: StorageSession) -> list[BusinessPlan]:
    """The caller's plans, most recently edited first."""
    user = session.current_user("load business plans")
    response = (
        session.table(BUSINESS_PLANS_TABLE)
        .select("*")
        .eq("user_id", user.id)
        .order("updated_at", desc=True)
        .execute()
    )
    return [BusinessPlan.from_row(row) for row in response.data or []]


def load_business_plan(session: StorageSession, plan_id: str) -> BusinessPlan:
    response = session.table(BUSINESS_PLANS_TABLE).select("*").eq("id", plan_id).execute()
    return BusinessPlan.from_row(first_row(response, BUSINESS_PLANS_TABLE, plan_id))


def delete_business_plan(session: StorageSession, plan_id: str) -> None:
    session.table(BUSINESS_PLANS_TABLE).delete().eq("id", plan_id).execute()
