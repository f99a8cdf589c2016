"""
Behavior event scoring tests.

Verify:
1. Base impact table and engagement multiplier
2. Value bonus capped at 5 points
3. Unknown types degrade to 0 rather than failing
4. Half-up rounding
5. Validation of identifying fields
"""

import pytest

from tierscore.core.errors import ValidationError
from tierscore.features.partnertech.scoring_engine import (
    BehaviorScoringEngine,
    ScoringConfig,
    round_half_up,
    score_behavior_event,
)
from tierscore.models.events import BehaviorEvent


def make_event(type_="click", category="navigation", value=None, **overrides):
    values = dict(
        type=type_,
        category=category,
        action="test_action",
        user_id="user_123",
        session_id="sess_abc",
        value=value,
    )
    values.update(overrides)
    return BehaviorEvent(**values)


class TestBaseImpact:

    @pytest.mark.parametrize("event_type,expected", [
        ("page_view", 1),
        ("click", 2),
        ("scroll", 1),
        ("ai_query", 5),
        ("feature_use", 3),
        ("session_start", 5),
        ("session_end", 0),
    ])
    def test_base_impacts(self, event_type, expected):
        assert score_behavior_event(make_event(event_type)) == expected

    def test_unknown_type_scores_zero(self):
        assert score_behavior_event(make_event("unknown_type", category="other", value=0)) == 0

    def test_unknown_type_still_gets_value_bonus(self):
        assert score_behavior_event(make_event("unknown_type", value=300)) == 3


class TestEngagement:

    def test_ai_query_engagement_rounds_up(self):
        """5 * 1.5 = 7.5 rounds to 8."""
        assert score_behavior_event(make_event("ai_query", category="engagement", value=0)) == 8

    def test_feature_use_engagement_half_rounds_up(self):
        """3 * 1.5 = 4.5 rounds to 5, not to the even 4."""
        assert score_behavior_event(make_event("feature_use", category="engagement")) == 5

    def test_category_match_is_exact(self):
        assert score_behavior_event(make_event("ai_query", category="Engagement")) == 5


class TestValueBonus:

    @pytest.mark.parametrize("value,expected", [
        (None, 2),
        (0, 2),
        (-50, 2),
        (100, 3),
        (250, 5),  # 2 + 2.5 = 4.5 -> 5
        (499, 7),  # 2 + 4.99
        (10_000, 7),  # bonus capped at 5
    ])
    def test_click_value_bonus(self, value, expected):
        assert score_behavior_event(make_event("click", value=value)) == expected

    def test_engagement_then_bonus(self):
        # (5 * 1.5) + min(1000/100, 5) = 12.5 -> 13
        assert score_behavior_event(make_event("ai_query", category="engagement", value=1000)) == 13


class TestValidation:

    @pytest.mark.parametrize("field", ["user_id", "session_id", "type", "category", "action"])
    def test_missing_required_field(self, field):
        with pytest.raises(ValidationError) as exc:
            score_behavior_event(make_event(**{field: None}) if field != "type" else make_event(type_=None))
        assert exc.value.status_code == 400

    def test_empty_string_is_missing(self):
        with pytest.raises(ValidationError):
            score_behavior_event(make_event(user_id=""))

    def test_from_payload_camel_case(self, behavior_payload):
        event = BehaviorEvent.from_payload(behavior_payload)
        assert event.user_id == "user_123"
        assert event.session_id == "sess_abc"
        assert event.timestamp.year == 2025
        assert score_behavior_event(event) == 2

    def test_from_payload_missing_session(self, behavior_payload):
        del behavior_payload["sessionId"]
        event = BehaviorEvent.from_payload(behavior_payload)
        with pytest.raises(ValidationError):
            score_behavior_event(event)

    def test_non_numeric_value_rejected(self, behavior_payload):
        behavior_payload["value"] = "lots"
        with pytest.raises(ValidationError):
            BehaviorEvent.from_payload(behavior_payload)

    def test_non_string_type_rejected(self, behavior_payload):
        behavior_payload["type"] = ["click"]
        with pytest.raises(ValidationError):
            score_behavior_event(BehaviorEvent.from_payload(behavior_payload))

    @pytest.mark.parametrize("metadata", [["a", "b"], "page=home", 42])
    def test_non_object_metadata_rejected(self, behavior_payload, metadata):
        behavior_payload["metadata"] = metadata
        with pytest.raises(ValidationError):
            BehaviorEvent.from_payload(behavior_payload)

    def test_object_metadata_kept(self, behavior_payload):
        behavior_payload["metadata"] = {"page": "home"}
        assert BehaviorEvent.from_payload(behavior_payload).metadata == {"page": "home"}

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan")])
    def test_non_finite_value_rejected(self, behavior_payload, value):
        behavior_payload["value"] = value
        with pytest.raises(ValidationError):
            BehaviorEvent.from_payload(behavior_payload)

    def test_huge_finite_value_hits_bonus_cap(self, behavior_payload):
        behavior_payload["value"] = 1e308
        assert score_behavior_event(BehaviorEvent.from_payload(behavior_payload)) == 7

    @pytest.mark.parametrize("timestamp", [10**20, -(10**20)])
    def test_out_of_range_epoch_rejected(self, behavior_payload, timestamp):
        behavior_payload["timestamp"] = timestamp
        with pytest.raises(ValidationError):
            BehaviorEvent.from_payload(behavior_payload)


class TestDeterminism:

    def test_same_event_same_score(self):
        event = make_event("ai_query", category="engagement", value=420)
        assert score_behavior_event(event) == score_behavior_event(event)

    def test_injected_tables(self):
        config = ScoringConfig(behavior_impacts={"share": 10}, engagement_multiplier=2.0)
        engine = BehaviorScoringEngine(config)
        assert engine.score(make_event("share", category="engagement")) == 20
        assert engine.score(make_event("click")) == 0


@pytest.mark.parametrize("raw,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (7.5, 8), (0.0, 0)])
def test_round_half_up(raw, expected):
    assert round_half_up(raw) == expected
