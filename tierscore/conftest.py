# tierscore/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to PYTHONPATH so `tierscore.*` imports resolve without install
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def resolver():
    """Resolver over the built-in plan catalog."""
    from tierscore.features.entitlements.service import EntitlementResolver
    return EntitlementResolver()


@pytest.fixture
def counters():
    """Factory for usage snapshots: counters(chats=10, tokens=0, storage=0.5)."""
    from tierscore.models.usage import UsageCounters

    def _make(chats: int = 0, tokens: int = 0, storage: float = 0.0):
        return UsageCounters(
            monthly_chat_count=chats,
            monthly_token_usage=tokens,
            storage_used_gb=storage,
        )

    return _make


@pytest.fixture
def behavior_payload():
    """Minimal valid tracker payload for a behavior event."""
    return {
        "type": "click",
        "category": "navigation",
        "action": "open_menu",
        "userId": "user_123",
        "sessionId": "sess_abc",
        "timestamp": "2025-12-21T14:30:00Z",
    }


@pytest.fixture
def query_payload():
    """Minimal valid tracker payload for an AI query."""
    return {
        "queryId": "q_1",
        "type": "ai_chat",
        "prompt": "How does the algorithm optimize database integration?",
        "userId": "user_123",
        "sessionId": "sess_abc",
        "duration": 2000,
        "success": True,
        "model": "gpt-4",
        "timestamp": 1766327400000,
    }


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from tierscore.main import app
    return TestClient(app)
