"""
Environment validation utilities.

Ensures the service fails fast on misconfigured usage thresholds while
remaining bypassable for tests via SKIP_ENV_VALIDATION.
"""

import os
from typing import Optional

from tierscore.core.config import settings
from tierscore.core.errors import ConfigurationError


def _check_percent(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not 0 <= number <= 100:
        raise ConfigurationError(f"{name} must be between 0 and 100, got {number}")
    return number


def validate_env(env: Optional[str] = None, settings_obj=None) -> bool:
    """Validate environment configuration.

    Args:
        env: Override environment name (defaults to settings.ENV)
        settings_obj: Override settings object (defaults to tierscore.core.config.settings)

    Returns:
        True if validation passes.

    Raises:
        ConfigurationError when a rule is violated.
    """
    if os.getenv("SKIP_ENV_VALIDATION") == "1":
        return True

    cfg = settings_obj or settings
    mode = (env or getattr(cfg, "ENV", "development") or "development").lower()

    warning = _check_percent("USAGE_WARNING_THRESHOLD", getattr(cfg, "USAGE_WARNING_THRESHOLD", 80))
    block = _check_percent("USAGE_BLOCK_THRESHOLD", getattr(cfg, "USAGE_BLOCK_THRESHOLD", 100))
    if warning > block:
        raise ConfigurationError("USAGE_WARNING_THRESHOLD must not exceed USAGE_BLOCK_THRESHOLD")

    suggest = _check_percent("UPGRADE_SUGGESTION_THRESHOLD", getattr(cfg, "UPGRADE_SUGGESTION_THRESHOLD", 80))
    urgent = _check_percent("UPGRADE_HIGH_URGENCY_THRESHOLD", getattr(cfg, "UPGRADE_HIGH_URGENCY_THRESHOLD", 95))
    if suggest > urgent:
        raise ConfigurationError("UPGRADE_SUGGESTION_THRESHOLD must not exceed UPGRADE_HIGH_URGENCY_THRESHOLD")

    if mode == "production" and block < 100:
        raise ConfigurationError("USAGE_BLOCK_THRESHOLD below 100 is not allowed in production")

    return True
