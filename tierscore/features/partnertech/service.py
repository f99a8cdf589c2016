"""
Partner scoring service

Adapts raw tracker payloads into events, scores them with the engines and
shapes the response. Forwarding scores to the partner platform is left to
the caller.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

from tierscore.core.logging import log_event
from tierscore.features.partnertech.scoring_engine import (
    BehaviorScoringEngine,
    QueryScoringEngine,
    ScoringConfig,
)
from tierscore.models.events import BehaviorEvent, QueryEvent


def _new_id(prefix: str, now: datetime) -> str:
    return f"{prefix}_{int(now.timestamp() * 1000)}_{uuid4().hex[:9]}"


class PartnerScoringService:
    """Score behavior and query payloads with graceful handling of unknown types."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.behavior_engine = BehaviorScoringEngine(config)
        self.query_engine = QueryScoringEngine(config)

    def process_behavior_event(self, payload: Mapping[str, Any], *, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Score one behavior event.

        Returns:
            {"success", "event_id", "score_impact", "processed_at"}

        Raises:
            ValidationError: missing type/category/action/userId/sessionId
        """
        processed_at = now or datetime.now(timezone.utc)
        event = BehaviorEvent.from_payload(payload)
        score_impact = self.behavior_engine.score(event)

        if event.type not in self.behavior_engine.config.behavior_impacts:
            log_event(
                "warning",
                "[partnertech] unknown behavior type",
                user_id=event.user_id,
                session_id=event.session_id,
                event_type=event.type,
            )

        log_event(
            "info",
            "[partnertech] event scored",
            user_id=event.user_id,
            session_id=event.session_id,
            event_type=event.type,
            extra={"category": event.category, "action": event.action, "score_impact": score_impact},
        )
        return {
            "success": True,
            "event_id": _new_id("evt", processed_at),
            "score_impact": score_impact,
            "processed_at": processed_at.isoformat(),
        }

    def process_query_event(self, payload: Mapping[str, Any], *, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Score one AI query.

        Returns:
            {"success", "query_id", "score_impact", "complexity", "quality", "processed_at"}

        Raises:
            ValidationError: missing type/prompt/userId/sessionId
        """
        processed_at = now or datetime.now(timezone.utc)
        event = QueryEvent.from_payload(payload)
        score_impact, complexity, quality = self.query_engine.evaluate(event)

        log_event(
            "info",
            "[partnertech] query scored",
            user_id=event.user_id,
            session_id=event.session_id,
            event_type=event.type,
            extra={
                "model": event.model,
                "success": event.success,
                "complexity": round(complexity, 2),
                "quality": quality,
                "score_impact": score_impact,
            },
        )
        return {
            "success": True,
            "query_id": event.query_id or _new_id("qry", processed_at),
            "score_impact": score_impact,
            "complexity": complexity,
            "quality": quality,
            "processed_at": processed_at.isoformat(),
        }
