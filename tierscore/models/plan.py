"""
tierscore/models/plan.py

Plan tiers and their static entitlement records.

Plans are ordered FREE < PRO < ENTERPRISE. A numeric limit of -1 means
unlimited. Feature sets and upgrade prompts are immutable once built.
"""

from enum import Enum
from typing import Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from tierscore.core.errors import ConfigurationError


UNLIMITED = -1


class Plan(str, Enum):
    FREE = "FREE"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"

    @property
    def rank(self) -> int:
        return _PLAN_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, Plan):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Plan):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Plan):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Plan):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, tag: Union["Plan", str]) -> "Plan":
        """Resolve a plan tag. Unknown tags are a configuration error, never FREE."""
        if isinstance(tag, Plan):
            return tag
        try:
            return cls(str(tag).strip().upper())
        except ValueError:
            raise ConfigurationError(f"Unknown plan tag: {tag!r}")


_PLAN_ORDER = (Plan.FREE, Plan.PRO, Plan.ENTERPRISE)


class CapabilityFlag(str, Enum):
    """Boolean capabilities carried by every PlanFeatureSet (value == field name)."""
    ADVANCED_FEATURES = "advanced_features"
    API_ACCESS = "api_access"
    PREMIUM_MODELS = "premium_models"
    CUSTOM_TOOLS = "custom_tools"
    WEBHOOKS = "webhooks"
    TEAM_COLLABORATION = "team_collaboration"
    PRIORITY_SUPPORT = "priority_support"
    CUSTOM_BRANDING = "custom_branding"


# Numeric limits compared by compare_plans, in display order
NUMERIC_LIMITS = (
    "max_chats",
    "max_files",
    "max_assistants",
    "monthly_token_limit",
    "storage_limit_gb",
)


class PlanFeatureSet(BaseModel):
    """
    Entitlements for a single plan.

    Limits:
    - max_chats, max_files, max_assistants (per month / concurrent)
    - monthly_token_limit
    - storage_limit_gb

    -1 on any limit means unlimited.
    """
    model_config = ConfigDict(frozen=True)

    plan: Plan
    max_chats: int
    max_files: int
    max_assistants: int
    monthly_token_limit: int
    storage_limit_gb: float

    advanced_features: bool = False
    api_access: bool = False
    premium_models: bool = False
    custom_tools: bool = False
    webhooks: bool = False
    team_collaboration: bool = False
    priority_support: bool = False
    custom_branding: bool = False

    def limit(self, name: str) -> Union[int, float]:
        return getattr(self, name)

    def is_unlimited(self, name: str) -> bool:
        return self.limit(name) <= 0

    def capabilities(self) -> Dict[str, bool]:
        return {flag.value: getattr(self, flag.value) for flag in CapabilityFlag}


class UpgradePrompt(BaseModel):
    """Static upgrade suggestion shown to users of a lower tier."""
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    button_text: str
    features: Tuple[str, ...]
    target_plan: Plan
    urgency: str = "low"  # low | medium | high
    current_limit: Optional[str] = None


class PlanComparison(BaseModel):
    """
    Side-by-side view of two plans.

    deltas holds target - current per numeric limit. Downgrades produce
    negative deltas. None means exactly one side is unlimited; two unlimited
    limits compare as 0.
    """
    model_config = ConfigDict(frozen=True)

    current: PlanFeatureSet
    target: PlanFeatureSet
    deltas: Dict[str, Optional[float]]
    is_upgrade: bool
    new_capabilities: Tuple[str, ...] = ()
    lost_capabilities: Tuple[str, ...] = ()
