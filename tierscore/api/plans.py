"""
Plan API Endpoints

GET /v1/plans/compare?current=FREE&target=PRO - side-by-side comparison
GET /v1/plans/{plan} - feature set for a plan
GET /v1/plans/{plan}/capabilities/{capability} - single capability check
GET /v1/plans/{plan}/upgrades - static upgrade prompts
"""

from fastapi import APIRouter, Depends, Query

from tierscore.api.deps import get_resolver, parse_plan_param
from tierscore.core.errors import ValidationError
from tierscore.features.entitlements.service import EntitlementResolver
from tierscore.models.plan import CapabilityFlag

router = APIRouter(prefix="/v1/plans", tags=["plans"])


@router.get("/compare")
async def compare_plans(
    current: str = Query(..., description="Current plan tag"),
    target: str = Query(..., description="Plan to compare against"),
    resolver: EntitlementResolver = Depends(get_resolver),
) -> dict:
    """
    Compare two plans.

    Returns:
        {
            "data": {
                "current": {...feature set...},
                "target": {...feature set...},
                "deltas": {"max_chats": 90, "storage_limit_gb": 9, ...},
                "is_upgrade": true,
                "new_capabilities": ["advanced_features", ...],
                "lost_capabilities": []
            }
        }
    """
    comparison = resolver.compare_plans(parse_plan_param(current), parse_plan_param(target))
    return {"data": comparison.model_dump(mode="json")}


@router.get("/{plan}")
async def get_plan_features(plan: str, resolver: EntitlementResolver = Depends(get_resolver)) -> dict:
    feature_set = resolver.resolve_feature_set(parse_plan_param(plan))
    return {"data": feature_set.model_dump(mode="json")}


@router.get("/{plan}/capabilities/{capability}")
async def get_plan_capability(
    plan: str,
    capability: str,
    resolver: EntitlementResolver = Depends(get_resolver),
) -> dict:
    parsed_plan = parse_plan_param(plan)
    try:
        flag = CapabilityFlag(capability)
    except ValueError:
        raise ValidationError(f"Unknown capability: {capability}")
    return {
        "data": {
            "plan": parsed_plan.value,
            "capability": flag.value,
            "allowed": resolver.has_capability(parsed_plan, flag),
        }
    }


@router.get("/{plan}/upgrades")
async def get_plan_upgrades(plan: str, resolver: EntitlementResolver = Depends(get_resolver)) -> dict:
    prompts = resolver.suggest_upgrade(parse_plan_param(plan))
    return {"data": [p.model_dump(mode="json") for p in prompts]}
