"""
tierscore/features/entitlements/service.py

Entitlement resolver.

Handles:
- Feature set / capability lookup per plan
- Usage status and graduated ALLOW / WARN / BLOCK decisions
- Static and usage-driven upgrade suggestions
- Plan comparison for display

Everything here is a pure function of the plan catalog and the snapshot
passed in. Structured logs only.
"""

import logging
from typing import List, Optional, Tuple, Union

from tierscore.core.errors import ConfigurationError, ValidationError
from tierscore.features.entitlements.catalog import DEFAULT_CATALOG, PlanCatalog
from tierscore.features.partnertech.scoring_engine import round_half_up
from tierscore.models.plan import (
    NUMERIC_LIMITS,
    CapabilityFlag,
    Plan,
    PlanComparison,
    PlanFeatureSet,
    UpgradePrompt,
)
from tierscore.models.usage import (
    LimitSummary,
    UsageCounters,
    UsageDecision,
    UsageDecisionStatus,
    UsageMetric,
    UsageStatus,
    UsageSuggestion,
)


logger = logging.getLogger("tierscore")

DEFAULT_WARNING_THRESHOLD = 80.0
DEFAULT_BLOCK_THRESHOLD = 100.0
DEFAULT_SUGGESTION_THRESHOLD = 80.0
DEFAULT_HIGH_URGENCY_THRESHOLD = 95.0

BYTES_PER_GB = 1024 ** 3

PlanLike = Union[Plan, str]

_SUGGESTION_SUBJECT = {
    UsageMetric.CHATS: "monthly chats",
    UsageMetric.TOKENS: "monthly tokens",
    UsageMetric.STORAGE: "storage",
}


def should_warn(status: UsageStatus, warning_threshold: float = DEFAULT_WARNING_THRESHOLD) -> bool:
    return status.percentage >= warning_threshold


def should_block(status: UsageStatus, block_threshold: float = DEFAULT_BLOCK_THRESHOLD) -> bool:
    return status.percentage >= block_threshold


def _parse_metric(metric: Union[UsageMetric, str]) -> UsageMetric:
    try:
        return UsageMetric(metric)
    except ValueError:
        raise ConfigurationError(f"Unknown usage metric: {metric!r}")


def _parse_capability(capability: Union[CapabilityFlag, str]) -> CapabilityFlag:
    try:
        return CapabilityFlag(capability)
    except ValueError:
        raise ConfigurationError(f"Unknown capability: {capability!r}")


def _check_thresholds(warning_threshold: float, block_threshold: float) -> None:
    for name, value in (("warning_threshold", warning_threshold), ("block_threshold", block_threshold)):
        if not 0 <= value <= 100:
            raise ValidationError(f"{name} must be between 0 and 100, got {value}")
    if warning_threshold > block_threshold:
        raise ValidationError("warning_threshold must not exceed block_threshold")


class EntitlementResolver:
    """Answers 'can this plan do X' and 'how much quota is left'."""

    def __init__(
        self,
        catalog: Optional[PlanCatalog] = None,
        *,
        suggestion_threshold: float = DEFAULT_SUGGESTION_THRESHOLD,
        high_urgency_threshold: float = DEFAULT_HIGH_URGENCY_THRESHOLD,
    ):
        self.catalog = catalog or DEFAULT_CATALOG
        self.suggestion_threshold = suggestion_threshold
        self.high_urgency_threshold = high_urgency_threshold

    # Feature lookup

    def resolve_feature_set(self, plan: PlanLike) -> PlanFeatureSet:
        """Return the feature set for plan. Unknown tags raise ConfigurationError."""
        return self.catalog.feature_set(Plan.parse(plan))

    def has_capability(self, plan: PlanLike, capability: Union[CapabilityFlag, str]) -> bool:
        flag = _parse_capability(capability)
        return bool(getattr(self.resolve_feature_set(plan), flag.value))

    # Usage

    def usage_status(self, counters: UsageCounters, plan: PlanLike, metric: Union[UsageMetric, str]) -> UsageStatus:
        """
        Derive the usage status of one metric.

        Limits <= 0 are unlimited: 0%, never blocked, remaining None.
        Otherwise percentage = clamp(current / limit * 100, 0, 100).
        """
        metric = _parse_metric(metric)
        limit = self.resolve_feature_set(plan).limit(metric.limit_field)
        current = counters.current(metric)

        if limit <= 0:
            return UsageStatus(
                metric=metric,
                percentage=0.0,
                remaining=None,
                is_blocked=False,
                current=current,
                limit=limit,
                unlimited=True,
            )

        percentage = max(0.0, min(current * 100 / limit, 100.0))
        return UsageStatus(
            metric=metric,
            percentage=percentage,
            remaining=max(0, limit - current),
            is_blocked=percentage >= 100,
            current=current,
            limit=limit,
            unlimited=False,
        )

    def remaining_usage(self, counters: UsageCounters, plan: PlanLike, metric: Union[UsageMetric, str]):
        """Remaining quota, or None when unlimited."""
        return self.usage_status(counters, plan, metric).remaining

    def is_usage_limit_reached(self, counters: UsageCounters, plan: PlanLike, metric: Union[UsageMetric, str]) -> bool:
        status = self.usage_status(counters, plan, metric)
        return not status.unlimited and status.current >= status.limit

    def evaluate_usage(
        self,
        counters: UsageCounters,
        plan: PlanLike,
        metric: Union[UsageMetric, str],
        *,
        warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
        block_threshold: float = DEFAULT_BLOCK_THRESHOLD,
        user_id: Optional[str] = None,
    ) -> UsageDecision:
        """Graduated decision: ALLOW below warning, WARN below block, BLOCK at/above block."""
        _check_thresholds(warning_threshold, block_threshold)
        status = self.usage_status(counters, plan, metric)

        if should_block(status, block_threshold):
            decision = UsageDecisionStatus.BLOCK
        elif should_warn(status, warning_threshold):
            decision = UsageDecisionStatus.WARN
        else:
            decision = UsageDecisionStatus.ALLOW

        log_fn = logger.info if decision == UsageDecisionStatus.ALLOW else logger.warning
        log_fn(
            f"[entitlement] {decision.value}",
            extra={
                "user_id": user_id,
                "plan": Plan.parse(plan).value,
                "metric": status.metric.value,
                "current_usage": status.current,
                "limit": status.limit,
                "percentage": round(status.percentage, 2),
            },
        )
        return UsageDecision(
            status=decision,
            usage=status,
            warning_threshold=warning_threshold,
            block_threshold=block_threshold,
        )

    def limit_summary(self, counters: UsageCounters, plan: PlanLike, metric: Union[UsageMetric, str]) -> LimitSummary:
        status = self.usage_status(counters, plan, metric)
        return LimitSummary(
            used=status.current,
            limit=status.limit,
            remaining=status.remaining,
            percentage=status.percentage,
            unlimited=status.unlimited,
        )

    def chat_limits(self, counters: UsageCounters, plan: PlanLike) -> LimitSummary:
        return self.limit_summary(counters, plan, UsageMetric.CHATS)

    def storage_limits(self, counters: UsageCounters, plan: PlanLike) -> LimitSummary:
        return self.limit_summary(counters, plan, UsageMetric.STORAGE)

    def can_start_new_chat(self, counters: UsageCounters, plan: PlanLike) -> bool:
        return not should_block(self.usage_status(counters, plan, UsageMetric.CHATS))

    def can_upload_file(self, counters: UsageCounters, plan: PlanLike, file_size_bytes: int) -> bool:
        """Storage must not be blocked and the new total must fit the limit."""
        if file_size_bytes < 0:
            raise ValidationError("file_size_bytes must be non-negative")
        status = self.usage_status(counters, plan, UsageMetric.STORAGE)
        if should_block(status):
            return False
        if status.unlimited:
            return True
        return status.current + file_size_bytes / BYTES_PER_GB <= status.limit

    # Upgrades

    def suggest_upgrade(self, plan: PlanLike) -> Tuple[UpgradePrompt, ...]:
        """Static upgrade prompts for plan, best first. Empty for the top tier."""
        return self.catalog.upgrade_prompts(Plan.parse(plan))

    def usage_upgrade_suggestions(self, counters: UsageCounters, plan: PlanLike) -> List[UsageSuggestion]:
        plan = Plan.parse(plan)
        if plan == max(self.catalog.plans):
            return []

        suggestions = []
        for metric in UsageMetric:
            status = self.usage_status(counters, plan, metric)
            if status.percentage < self.suggestion_threshold:
                continue
            suggestions.append(
                UsageSuggestion(
                    type=metric,
                    message=f"You've used {round_half_up(status.percentage)}% of your {_SUGGESTION_SUBJECT[metric]}",
                    urgency="high" if status.percentage >= self.high_urgency_threshold else "medium",
                )
            )
        return suggestions

    def compare_plans(self, current: PlanLike, target: PlanLike) -> PlanComparison:
        """
        Compare two plans for display.

        Any pair is accepted: downgrades give negative deltas and the same
        plan gives all-zero deltas. A delta is None when exactly one side is
        unlimited.
        """
        current_set = self.resolve_feature_set(current)
        target_set = self.resolve_feature_set(target)

        deltas = {}
        for name in NUMERIC_LIMITS:
            before, after = current_set.limit(name), target_set.limit(name)
            if before <= 0 and after <= 0:
                deltas[name] = 0
            elif before <= 0 or after <= 0:
                deltas[name] = None
            else:
                deltas[name] = after - before

        before_caps = current_set.capabilities()
        after_caps = target_set.capabilities()
        return PlanComparison(
            current=current_set,
            target=target_set,
            deltas=deltas,
            is_upgrade=target_set.plan > current_set.plan,
            new_capabilities=tuple(k for k, v in after_caps.items() if v and not before_caps[k]),
            lost_capabilities=tuple(k for k, v in before_caps.items() if v and not after_caps[k]),
        )
