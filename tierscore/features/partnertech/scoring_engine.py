"""
Partner Scoring Engine

Pure, deterministic conversion of one behavior or query event into an
integer score contribution. No external calls, no randomness, no side effects.

Scoring is a transparent linear model:
- Behavior: base impact by type, x1.5 for engagement, + min(value/100, 5)
- Query: 10 + complexity*2 + quality*1.5 + (success ? 10 : -5), times a
  per-type multiplier
- Complexity is 1..10, quality is 0..10
- Final scores are rounded half up and never negative
"""

import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Pattern, Sequence, Tuple

from tierscore.models.events import BehaviorEvent, QueryEvent, SessionMetrics


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), like browser Math.round."""
    return int(math.floor(value + 0.5))


def _word_pattern(words: Iterable[str]) -> Pattern:
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


@dataclass(frozen=True)
class LexicalFactor:
    """A whole-word, case-insensitive term list and its per-match weight."""

    name: str
    words: Tuple[str, ...]
    weight: float
    pattern: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "pattern", _word_pattern(self.words))

    def count(self, text: str) -> int:
        return len(self.pattern.findall(text))

    def score(self, text: str) -> float:
        return self.count(text) * self.weight


DEFAULT_LEXICAL_FACTORS: Tuple[LexicalFactor, ...] = (
    LexicalFactor("question_words", ("how", "what", "why", "when", "where", "who", "which"), 0.5),
    LexicalFactor(
        "technical_terms",
        ("algorithm", "api", "framework", "database", "integration", "optimization", "analytics"),
        0.8,
    ),
    LexicalFactor("conditionals", ("if", "unless", "provided", "assuming", "given", "considering"), 0.4),
    LexicalFactor("multi_part", ("and", "or", "also", "additionally", "furthermore", "moreover"), 0.3),
    LexicalFactor("specificity", ("specific", "exactly", "precisely", "detailed", "comprehensive"), 0.6),
)


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ScoringConfig:
    """All tables and weights used by the scoring engines."""

    # Behavior scoring
    behavior_impacts: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "page_view": 1,
        "click": 2,
        "scroll": 1,
        "ai_query": 5,
        "feature_use": 3,
        "session_start": 5,
        "session_end": 0,
    }))
    engagement_category: str = "engagement"
    engagement_multiplier: float = 1.5
    value_bonus_divisor: float = 100.0
    value_bonus_cap: float = 5.0

    # Query complexity
    length_divisor: float = 100.0
    length_weight: float = 2.0
    lexical_factors: Tuple[LexicalFactor, ...] = DEFAULT_LEXICAL_FACTORS
    complexity_min: float = 1.0
    complexity_max: float = 10.0

    # Query quality
    success_quality: float = 3.0
    fast_response_ms: float = 3000.0
    ok_response_ms: float = 8000.0
    clear_prompt_min_length: int = 10
    engagement_baseline: float = 1.0
    model_scores: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "gpt-4": 3,
        "gpt-4-turbo": 3,
        "claude-3-sonnet": 3,
        "claude-3-opus": 3,
        "gpt-3.5": 2,
        "claude-3-haiku": 2,
        "claude-2": 1,
        "basic": 1,
    }))
    unknown_model_score: float = 1.0
    quality_max: float = 10.0

    # Query score
    query_base_score: float = 10.0
    complexity_weight: float = 2.0
    quality_weight: float = 1.5
    success_bonus: float = 10.0
    failure_penalty: float = -5.0
    type_multipliers: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "ai_chat": 1.2,
        "search": 1.0,
        "voice": 1.5,
        "help": 0.8,
    }))
    default_type_multiplier: float = 1.0


DEFAULT_SCORING_CONFIG = ScoringConfig()


class BehaviorScoringEngine:
    """Score a single BehaviorEvent."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or DEFAULT_SCORING_CONFIG

    def base_impact(self, event_type: Optional[str]) -> float:
        # Unseen types degrade to zero rather than failing the request
        return float(self.config.behavior_impacts.get(event_type, 0))

    def value_bonus(self, value: Optional[float]) -> float:
        if not value or value <= 0:
            return 0.0
        return min(value / self.config.value_bonus_divisor, self.config.value_bonus_cap)

    def score(self, event: BehaviorEvent) -> int:
        """Raises ValidationError when identifying fields are missing."""
        event.validate()
        cfg = self.config

        impact = self.base_impact(event.type)
        if event.category == cfg.engagement_category:
            impact *= cfg.engagement_multiplier
        impact += self.value_bonus(event.value)

        return max(0, round_half_up(impact))


class QueryScoringEngine:
    """Derive complexity/quality for a QueryEvent and score it."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or DEFAULT_SCORING_CONFIG

    def complexity_factors(self, prompt: str) -> dict:
        cfg = self.config
        factors = {"length": min(len(prompt) / cfg.length_divisor, 1) * cfg.length_weight}
        for factor in cfg.lexical_factors:
            factors[factor.name] = factor.score(prompt)
        return factors

    def complexity(self, prompt: str) -> float:
        """Linguistic richness of a prompt, clamped to 1..10."""
        cfg = self.config
        total = sum(self.complexity_factors(prompt or "").values())
        return min(max(total, cfg.complexity_min), cfg.complexity_max)

    def model_score(self, model: Optional[str]) -> float:
        return float(self.config.model_scores.get(model, self.config.unknown_model_score))

    def response_time_score(self, duration_ms: float) -> float:
        cfg = self.config
        if duration_ms < cfg.fast_response_ms:
            return 2.0
        if duration_ms < cfg.ok_response_ms:
            return 1.0
        return 0.0

    def quality(self, event: QueryEvent) -> float:
        """Interaction outcome, capped at 10."""
        cfg = self.config
        factors = (
            cfg.success_quality if event.success else 0.0,
            self.response_time_score(event.duration),
            2.0 if len(event.prompt or "") > cfg.clear_prompt_min_length else 1.0,
            cfg.engagement_baseline,
            self.model_score(event.model),
        )
        return min(sum(factors), cfg.quality_max)

    def type_multiplier(self, query_type: Optional[str]) -> float:
        return float(self.config.type_multipliers.get(query_type, self.config.default_type_multiplier))

    def score_from_metrics(self, query_type: Optional[str], complexity: float, quality: float, success: bool) -> int:
        cfg = self.config
        total = (
            cfg.query_base_score
            + complexity * cfg.complexity_weight
            + quality * cfg.quality_weight
            + (cfg.success_bonus if success else cfg.failure_penalty)
        ) * self.type_multiplier(query_type)
        return max(round_half_up(total), 0)

    def metrics(self, event: QueryEvent) -> Tuple[float, float]:
        """(complexity, quality), with client values clamped to 1..10 and 0..10."""
        cfg = self.config
        if event.complexity:
            complexity = min(max(event.complexity, cfg.complexity_min), cfg.complexity_max)
        else:
            complexity = self.complexity(event.prompt)
        if event.quality:
            quality = min(max(event.quality, 0.0), cfg.quality_max)
        else:
            quality = self.quality(event)
        return complexity, quality

    def evaluate(self, event: QueryEvent) -> Tuple[int, float, float]:
        """
        Return (score, complexity, quality).

        Client-supplied complexity/quality are honoured when truthy; otherwise
        they are derived from the event.
        """
        event.validate()
        complexity, quality = self.metrics(event)
        return self.score_from_metrics(event.type, complexity, quality, event.success), complexity, quality

    def score(self, event: QueryEvent) -> int:
        return self.evaluate(event)[0]


def overall_query_score(queries: Sequence[QueryEvent], engine: Optional[QueryScoringEngine] = None) -> int:
    """Mean of quality*0.4 + complexity*0.3 + (success ? 30 : 0) over a session's queries."""
    if not queries:
        return 0
    engine = engine or QueryScoringEngine()
    total = 0.0
    for query in queries:
        complexity, quality = engine.metrics(query)
        total += quality * 0.4 + complexity * 0.3 + (30 if query.success else 0)
    return round_half_up(total / len(queries))


def session_behavior_score(session: SessionMetrics) -> int:
    """
    Engagement score for one browsing session, 0..700.

    - duration: up to 200 for 30+ minutes
    - interactions: up to 150 for 50+
    - page views: up to 100 for 10+
    - distinct features: up to 150 for 5+
    - queries: up to 100 for 10+
    """
    minutes = max(session.duration_ms, 0) / (1000 * 60)
    factors = (
        min(minutes / 30, 1) * 200,
        min(max(session.interactions, 0) / 50, 1) * 150,
        min(max(session.page_views, 0) / 10, 1) * 100,
        min(len(set(session.features_used)) / 5, 1) * 150,
        min(max(session.queries_count, 0) / 10, 1) * 100,
    )
    return round_half_up(sum(factors))


_default_behavior_engine = BehaviorScoringEngine()
_default_query_engine = QueryScoringEngine()


def score_behavior_event(event: BehaviorEvent) -> int:
    return _default_behavior_engine.score(event)


def score_query_event(event: QueryEvent) -> int:
    return _default_query_engine.score(event)
