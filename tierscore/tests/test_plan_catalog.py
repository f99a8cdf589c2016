"""
Tests for the static plan catalog.
"""
import pytest

from tierscore.core.errors import ConfigurationError
from tierscore.features.entitlements.catalog import (
    DEFAULT_CATALOG,
    DEFAULT_FEATURES,
    DEFAULT_UPGRADE_PROMPTS,
    PlanCatalog,
    build_default_catalog,
)
from tierscore.models.plan import NUMERIC_LIMITS, Plan


def test_exactly_one_feature_set_per_plan():
    assert DEFAULT_CATALOG.plans == (Plan.FREE, Plan.PRO, Plan.ENTERPRISE)
    for plan in Plan:
        assert DEFAULT_CATALOG.feature_set(plan).plan is plan


def test_default_limits():
    free = DEFAULT_CATALOG.feature_set(Plan.FREE)
    pro = DEFAULT_CATALOG.feature_set(Plan.PRO)
    assert (free.max_chats, free.max_files, free.max_assistants) == (10, 5, 1)
    assert (free.monthly_token_limit, free.storage_limit_gb) == (10000, 1)
    assert (pro.max_chats, pro.max_files, pro.max_assistants) == (100, 50, 10)
    assert (pro.monthly_token_limit, pro.storage_limit_gb) == (100000, 10)


def test_enterprise_limits_unlimited_or_above_pro():
    pro = DEFAULT_CATALOG.feature_set(Plan.PRO)
    enterprise = DEFAULT_CATALOG.feature_set(Plan.ENTERPRISE)
    for name in NUMERIC_LIMITS:
        value = enterprise.limit(name)
        assert value == -1 or value >= pro.limit(name)
    assert DEFAULT_CATALOG.is_monotonic()


def test_capabilities_never_lost_on_higher_tier():
    ordered = DEFAULT_CATALOG.plans
    for lower, higher in zip(ordered, ordered[1:]):
        low_caps = DEFAULT_CATALOG.feature_set(lower).capabilities()
        high_caps = DEFAULT_CATALOG.feature_set(higher).capabilities()
        for name, enabled in low_caps.items():
            if enabled:
                assert high_caps[name], f"{higher.value} lost {name}"


def test_catalog_is_deterministic():
    again = build_default_catalog()
    for plan in Plan:
        assert again.feature_set(plan) == DEFAULT_CATALOG.feature_set(plan)


def test_enterprise_has_no_upgrade_prompts():
    assert DEFAULT_CATALOG.upgrade_prompts(Plan.ENTERPRISE) == ()


def test_catalog_mapping_is_read_only():
    with pytest.raises(TypeError):
        DEFAULT_CATALOG._features[Plan.FREE] = DEFAULT_CATALOG.feature_set(Plan.PRO)


def test_missing_plan_is_configuration_error():
    features = {k: v for k, v in DEFAULT_FEATURES.items() if k != "PRO"}
    with pytest.raises(ConfigurationError):
        PlanCatalog.from_dict(features, DEFAULT_UPGRADE_PROMPTS)


def test_unknown_plan_tag_in_table_is_configuration_error():
    features = dict(DEFAULT_FEATURES)
    features["GOLD"] = DEFAULT_FEATURES["PRO"]
    with pytest.raises(ConfigurationError):
        PlanCatalog.from_dict(features, DEFAULT_UPGRADE_PROMPTS)


def test_upgrade_prompt_must_target_higher_plan():
    prompts = dict(DEFAULT_UPGRADE_PROMPTS)
    prompts["PRO"] = (dict(DEFAULT_UPGRADE_PROMPTS["FREE"][0]),)  # targets PRO from PRO
    with pytest.raises(ConfigurationError):
        PlanCatalog.from_dict(DEFAULT_FEATURES, prompts)


def test_non_monotonic_catalog_detected():
    features = {k: dict(v) for k, v in DEFAULT_FEATURES.items()}
    features["PRO"]["max_chats"] = 5
    catalog = PlanCatalog.from_dict(features, DEFAULT_UPGRADE_PROMPTS)
    assert catalog.is_monotonic() is False
