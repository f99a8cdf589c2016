"""
Tests for Plan, PlanFeatureSet and UpgradePrompt models.
"""
import pytest

from tierscore.core.errors import ConfigurationError
from tierscore.models.plan import CapabilityFlag, Plan, PlanFeatureSet, UpgradePrompt


def _feature_set(**overrides):
    values = dict(
        plan=Plan.FREE,
        max_chats=10,
        max_files=5,
        max_assistants=1,
        monthly_token_limit=10000,
        storage_limit_gb=1,
    )
    values.update(overrides)
    return PlanFeatureSet(**values)


def test_feature_set_frozen():
    """PlanFeatureSet should be immutable (frozen=True)."""
    fs = _feature_set()

    try:
        fs.max_chats = 20
        assert False, "PlanFeatureSet should be immutable"
    except Exception:
        pass  # Expected


def test_upgrade_prompt_frozen():
    prompt = UpgradePrompt(
        title="Upgrade to PRO",
        description="More",
        button_text="Go",
        features=("a", "b"),
        target_plan=Plan.PRO,
    )
    with pytest.raises(Exception):
        prompt.urgency = "high"


def test_capability_flags_default_false():
    fs = _feature_set()
    assert fs.capabilities() == {flag.value: False for flag in CapabilityFlag}


def test_unlimited_limit_detection():
    fs = _feature_set(max_chats=-1)
    assert fs.is_unlimited("max_chats")
    assert not fs.is_unlimited("max_files")


def test_plans_are_ordered():
    assert Plan.FREE < Plan.PRO < Plan.ENTERPRISE
    assert Plan.ENTERPRISE >= Plan.ENTERPRISE
    assert sorted([Plan.ENTERPRISE, Plan.FREE, Plan.PRO]) == [Plan.FREE, Plan.PRO, Plan.ENTERPRISE]
    assert max([Plan.PRO, Plan.ENTERPRISE, Plan.FREE]) is Plan.ENTERPRISE


@pytest.mark.parametrize("tag,expected", [
    ("FREE", Plan.FREE),
    ("pro", Plan.PRO),
    (" Enterprise ", Plan.ENTERPRISE),
    (Plan.PRO, Plan.PRO),
])
def test_parse_known_tags(tag, expected):
    assert Plan.parse(tag) is expected


@pytest.mark.parametrize("tag", ["", "GOLD", "premium", None])
def test_parse_unknown_tag_fails_fast(tag):
    """Unknown tags must never fall back to FREE."""
    with pytest.raises(ConfigurationError) as exc:
        Plan.parse(tag)
    assert exc.value.code == "configuration_error"
