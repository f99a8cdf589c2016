"""
Entitlement check endpoint

POST /v1/entitlements/check - graduated ALLOW / WARN / BLOCK decision for one
usage metric, plus upgrade prompts and usage-driven suggestions.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from tierscore.api.deps import get_resolver, parse_plan_param
from tierscore.core.config import settings
from tierscore.features.entitlements.service import EntitlementResolver
from tierscore.models.usage import UsageCounters, UsageMetric

router = APIRouter(prefix="/v1/entitlements", tags=["entitlements"])


class EntitlementCheckRequest(BaseModel):
    plan: str
    usage: UsageCounters = Field(default_factory=UsageCounters)
    metric: UsageMetric = UsageMetric.CHATS
    warning_threshold: Optional[float] = None
    block_threshold: Optional[float] = None
    user_id: Optional[str] = None

    @field_validator("plan")
    @classmethod
    def _trim(cls, value: str) -> str:
        return value.strip()


@router.post("/check")
async def check_entitlement(body: EntitlementCheckRequest, resolver: EntitlementResolver = Depends(get_resolver)) -> dict:
    plan = parse_plan_param(body.plan)
    warning = body.warning_threshold if body.warning_threshold is not None else settings.USAGE_WARNING_THRESHOLD
    block = body.block_threshold if body.block_threshold is not None else settings.USAGE_BLOCK_THRESHOLD

    decision = resolver.evaluate_usage(
        body.usage,
        plan,
        body.metric,
        warning_threshold=warning,
        block_threshold=block,
        user_id=body.user_id,
    )

    return {
        "data": {
            "plan": plan.value,
            "decision": decision.status.value,
            "allowed": decision.allowed,
            "warning_threshold": decision.warning_threshold,
            "block_threshold": decision.block_threshold,
            "usage": decision.usage.model_dump(mode="json"),
            "upgrade_prompts": [p.model_dump(mode="json") for p in resolver.suggest_upgrade(plan)],
            "suggestions": [s.model_dump(mode="json") for s in resolver.usage_upgrade_suggestions(body.usage, plan)],
        }
    }
