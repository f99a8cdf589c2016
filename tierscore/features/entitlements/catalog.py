"""
tierscore/features/entitlements/catalog.py

Static plan tables (feature sets + upgrade prompts).

A PlanCatalog is built once and handed to EntitlementResolver; tests can
build their own catalog instead of patching module state.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from tierscore.core.errors import ConfigurationError
from tierscore.models.plan import (
    NUMERIC_LIMITS,
    Plan,
    PlanFeatureSet,
    UNLIMITED,
    UpgradePrompt,
)


DEFAULT_FEATURES: Dict[str, Dict[str, Any]] = {
    "FREE": {
        "max_chats": 10,
        "max_files": 5,
        "max_assistants": 1,
        "monthly_token_limit": 10000,
        "storage_limit_gb": 1,
        "advanced_features": False,
        "api_access": False,
        "premium_models": False,
        "custom_tools": False,
        "webhooks": False,
        "team_collaboration": False,
        "priority_support": False,
        "custom_branding": False,
    },
    "PRO": {
        "max_chats": 100,
        "max_files": 50,
        "max_assistants": 10,
        "monthly_token_limit": 100000,
        "storage_limit_gb": 10,
        "advanced_features": True,
        "api_access": True,
        "premium_models": True,
        "custom_tools": True,
        "webhooks": False,
        "team_collaboration": False,
        "priority_support": False,
        "custom_branding": True,
    },
    "ENTERPRISE": {
        "max_chats": UNLIMITED,
        "max_files": UNLIMITED,
        "max_assistants": UNLIMITED,
        "monthly_token_limit": UNLIMITED,
        "storage_limit_gb": UNLIMITED,
        "advanced_features": True,
        "api_access": True,
        "premium_models": True,
        "custom_tools": True,
        "webhooks": True,
        "team_collaboration": True,
        "priority_support": True,
        "custom_branding": True,
    },
}


DEFAULT_UPGRADE_PROMPTS: Dict[str, Tuple[Dict[str, Any], ...]] = {
    "FREE": (
        {
            "title": "Upgrade to PRO",
            "description": "Unlock advanced features and higher limits",
            "button_text": "Get PRO for $29/month",
            "features": (
                "100 chats per month",
                "Premium AI models",
                "Custom tools",
                "API access",
                "10GB storage",
            ),
            "current_limit": "10 chats remaining",
            "target_plan": "PRO",
            "urgency": "medium",
        },
        {
            "title": "Go Enterprise",
            "description": "Perfect for teams and businesses",
            "button_text": "Contact Sales",
            "features": (
                "Unlimited everything",
                "Team collaboration",
                "Priority support",
                "Custom integrations",
                "SLA guarantees",
            ),
            "target_plan": "ENTERPRISE",
            "urgency": "low",
        },
    ),
    "PRO": (
        {
            "title": "Upgrade to Enterprise",
            "description": "Scale your AI operations with unlimited access",
            "button_text": "Contact Sales",
            "features": (
                "Unlimited chats & storage",
                "Team collaboration",
                "Webhook integrations",
                "Priority support",
                "Custom SLA",
            ),
            "target_plan": "ENTERPRISE",
            "urgency": "low",
        },
    ),
    "ENTERPRISE": (),
}


def _at_least(higher: Union[int, float], lower: Union[int, float]) -> bool:
    """Unlimited dominates every finite limit."""
    if higher <= 0:
        return True
    if lower <= 0:
        return False
    return higher >= lower


class PlanCatalog:
    """Immutable Plan -> (PlanFeatureSet, upgrade prompts) table."""

    def __init__(
        self,
        features: Mapping[Plan, PlanFeatureSet],
        upgrade_prompts: Mapping[Plan, Iterable[UpgradePrompt]],
    ):
        missing = [plan.value for plan in Plan if plan not in features]
        if missing:
            raise ConfigurationError(f"Plan catalog missing feature sets for: {', '.join(missing)}")
        for plan, feature_set in features.items():
            if feature_set.plan != plan:
                raise ConfigurationError(
                    f"Feature set for {plan.value} is tagged {feature_set.plan.value}"
                )
        for plan, prompts in upgrade_prompts.items():
            for prompt in prompts:
                if prompt.target_plan <= plan:
                    raise ConfigurationError(
                        f"Upgrade prompt '{prompt.title}' for {plan.value} targets {prompt.target_plan.value}"
                    )

        self._features = MappingProxyType(dict(features))
        self._upgrade_prompts = MappingProxyType(
            {plan: tuple(upgrade_prompts.get(plan, ())) for plan in Plan}
        )

    @classmethod
    def from_dict(
        cls,
        features: Mapping[str, Mapping[str, Any]],
        upgrade_prompts: Mapping[str, Iterable[Mapping[str, Any]]],
    ) -> "PlanCatalog":
        """Build a catalog from plain mappings keyed by plan tag."""
        feature_sets = {}
        for tag, values in features.items():
            plan = Plan.parse(tag)
            feature_sets[plan] = PlanFeatureSet(plan=plan, **values)
        prompts = {
            Plan.parse(tag): tuple(UpgradePrompt(**item) for item in items)
            for tag, items in upgrade_prompts.items()
        }
        return cls(feature_sets, prompts)

    def feature_set(self, plan: Plan) -> PlanFeatureSet:
        try:
            return self._features[plan]
        except KeyError:
            raise ConfigurationError(f"No feature set configured for plan {plan!r}")

    def upgrade_prompts(self, plan: Plan) -> Tuple[UpgradePrompt, ...]:
        return self._upgrade_prompts.get(plan, ())

    @property
    def plans(self) -> Tuple[Plan, ...]:
        return tuple(sorted(self._features))

    def is_monotonic(self) -> bool:
        """True when each tier's limits are unlimited or >= the tier below it."""
        ordered = self.plans
        for lower, higher in zip(ordered, ordered[1:]):
            low_set, high_set = self._features[lower], self._features[higher]
            for name in NUMERIC_LIMITS:
                if not _at_least(high_set.limit(name), low_set.limit(name)):
                    return False
        return True


def build_default_catalog() -> PlanCatalog:
    return PlanCatalog.from_dict(DEFAULT_FEATURES, DEFAULT_UPGRADE_PROMPTS)


DEFAULT_CATALOG = build_default_catalog()
