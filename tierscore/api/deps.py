"""Shared FastAPI dependencies."""

from functools import lru_cache

from tierscore.core.config import settings
from tierscore.core.errors import ConfigurationError, ValidationError
from tierscore.features.entitlements.service import EntitlementResolver
from tierscore.features.partnertech.service import PartnerScoringService
from tierscore.models.plan import Plan


@lru_cache(maxsize=1)
def get_resolver() -> EntitlementResolver:
    return EntitlementResolver(
        suggestion_threshold=settings.UPGRADE_SUGGESTION_THRESHOLD,
        high_urgency_threshold=settings.UPGRADE_HIGH_URGENCY_THRESHOLD,
    )


@lru_cache(maxsize=1)
def get_scoring_service() -> PartnerScoringService:
    return PartnerScoringService()


def parse_plan_param(tag: str) -> Plan:
    """Unknown plan tags from clients are rejected, not treated as config defects."""
    try:
        return Plan.parse(tag)
    except ConfigurationError:
        raise ValidationError(f"Unknown plan: {tag}")
