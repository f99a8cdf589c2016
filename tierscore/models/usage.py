"""
tierscore/models/usage.py

Usage snapshots and the statuses derived from them.

UsageCounters are owned by the billing/account side; this package only
reads them. UsageStatus is recomputed on every check and never stored.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class UsageMetric(str, Enum):
    CHATS = "chats"
    TOKENS = "tokens"
    STORAGE = "storage"

    @property
    def limit_field(self) -> str:
        return _LIMIT_FIELDS[self]

    @property
    def counter_field(self) -> str:
        return _COUNTER_FIELDS[self]


_LIMIT_FIELDS = {
    UsageMetric.CHATS: "max_chats",
    UsageMetric.TOKENS: "monthly_token_limit",
    UsageMetric.STORAGE: "storage_limit_gb",
}

_COUNTER_FIELDS = {
    UsageMetric.CHATS: "monthly_chat_count",
    UsageMetric.TOKENS: "monthly_token_usage",
    UsageMetric.STORAGE: "storage_used_gb",
}


class UsageCounters(BaseModel):
    """Per-user consumption snapshot for the current billing month."""
    model_config = ConfigDict(frozen=True)

    monthly_chat_count: int = Field(default=0, ge=0)
    monthly_token_usage: int = Field(default=0, ge=0)
    storage_used_gb: float = Field(default=0.0, ge=0)

    def current(self, metric: UsageMetric) -> Number:
        return getattr(self, metric.counter_field)


class UsageStatus(BaseModel):
    """
    Derived read of how much of a quota has been consumed.

    percentage is clamped to 0..100 and is 0 for unlimited metrics.
    remaining is None when the metric is unlimited.
    """
    model_config = ConfigDict(frozen=True)

    metric: UsageMetric
    percentage: float
    remaining: Optional[Number]
    is_blocked: bool
    current: Number
    limit: Number
    unlimited: bool


class UsageDecisionStatus(str, Enum):
    """Graduated response to a usage check."""
    ALLOW = "ALLOW"
    WARN = "WARN"
    BLOCK = "BLOCK"


class UsageDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: UsageDecisionStatus
    usage: UsageStatus
    warning_threshold: float
    block_threshold: float

    @property
    def allowed(self) -> bool:
        return self.status != UsageDecisionStatus.BLOCK


class UsageSuggestion(BaseModel):
    """Usage-driven nudge to upgrade (e.g. 'You've used 85% of your monthly chats')."""
    model_config = ConfigDict(frozen=True)

    type: UsageMetric
    message: str
    urgency: str  # medium | high


class LimitSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    used: Number
    limit: Number
    remaining: Optional[Number]
    percentage: float
    unlimited: bool
