"""
Partner scoring event models.

BehaviorEvent and QueryEvent are ephemeral: created by client-side
instrumentation, scored once, never retained. Both accept the camelCase
payloads emitted by the browser tracker via from_payload().
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from tierscore.core.errors import ValidationError


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept datetimes, ISO-8601 strings or JS epoch milliseconds."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool):
        raise ValidationError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValidationError(f"Timestamp out of range: {value!r}")
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _number(name: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a finite number")
    return number


def _text(name: str, value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(f"{name} must be a string")


def _metadata(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError("metadata must be an object")
    return dict(value)


def _require(event: object, names: List[str]) -> None:
    missing = [name for name in names if not getattr(event, name)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    wrong = [name for name in names if not isinstance(getattr(event, name), str)]
    if wrong:
        raise ValidationError(f"Fields must be strings: {', '.join(wrong)}")


@dataclass(frozen=True)
class BehaviorEvent:
    """One user action (page_view, click, scroll, ai_query, feature_use, session_start, session_end)."""

    type: Optional[str]
    category: Optional[str]
    action: Optional[str]
    user_id: Optional[str]
    session_id: Optional[str]
    timestamp: Optional[datetime] = None
    label: Optional[str] = None
    value: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    REQUIRED = ("type", "category", "action", "user_id", "session_id")

    def validate(self) -> None:
        _require(self, list(self.REQUIRED))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "BehaviorEvent":
        if not isinstance(payload, Mapping):
            raise ValidationError("Event payload must be an object")
        return cls(
            type=_pick(payload, "type"),
            category=_pick(payload, "category"),
            action=_pick(payload, "action"),
            user_id=_pick(payload, "userId", "user_id"),
            session_id=_pick(payload, "sessionId", "session_id"),
            timestamp=parse_timestamp(_pick(payload, "timestamp")),
            label=_pick(payload, "label"),
            value=_number("value", _pick(payload, "value")),
            metadata=_metadata(_pick(payload, "metadata")),
        )


@dataclass(frozen=True)
class QueryEvent:
    """One AI-query interaction (ai_chat, search, voice, help)."""

    type: Optional[str]
    prompt: Optional[str]
    user_id: Optional[str]
    session_id: Optional[str]
    duration: float = 0.0  # milliseconds
    success: bool = False
    model: Optional[str] = None
    timestamp: Optional[datetime] = None
    query_id: Optional[str] = None
    response: Optional[str] = None
    # Precomputed by the client; recomputed server-side when absent
    complexity: Optional[float] = None
    quality: Optional[float] = None

    REQUIRED = ("type", "prompt", "user_id", "session_id")

    def validate(self) -> None:
        _require(self, list(self.REQUIRED))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "QueryEvent":
        if not isinstance(payload, Mapping):
            raise ValidationError("Query payload must be an object")
        prompt = _pick(payload, "prompt")
        return cls(
            type=_pick(payload, "type"),
            prompt=str(prompt) if prompt is not None else None,
            user_id=_pick(payload, "userId", "user_id"),
            session_id=_pick(payload, "sessionId", "session_id"),
            duration=_number("duration", _pick(payload, "duration")) or 0.0,
            success=bool(_pick(payload, "success")),
            model=_text("model", _pick(payload, "model")),
            timestamp=parse_timestamp(_pick(payload, "timestamp")),
            query_id=_pick(payload, "queryId", "query_id"),
            response=_pick(payload, "response"),
            complexity=_number("complexity", _pick(payload, "complexity")),
            quality=_number("quality", _pick(payload, "quality")),
        )


@dataclass(frozen=True)
class SessionMetrics:
    """Per-session engagement counters kept by the browser tracker."""

    session_id: str
    user_id: str
    duration_ms: float = 0.0
    page_views: int = 0
    interactions: int = 0
    queries_count: int = 0
    features_used: List[str] = field(default_factory=list)
