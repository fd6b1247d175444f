"""
Hedge Layer CLI - Pytest Configuration

Configures:
- An isolated config directory per test (never touches ~/.hedgelayer)
- Transcripts for both wire protocols
- Sample API payloads
"""

from typing import Any, Dict

import pytest

from tests.helpers import data_line, ui_line



# ============================================================
# Environment Isolation
# ============================================================

@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config store at a temp directory and clear env overrides."""
    config_dir = tmp_path / "hedgelayer"
    monkeypatch.setenv("HEDGELAYER_CONFIG_DIR", str(config_dir))
    for name in ("HEDGELAYER_TOKEN", "HEDGELAYER_API_URL", "HEDGELAYER_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    return config_dir


# ============================================================
# Stream Fixtures
# ============================================================

@pytest.fixture
def bundle() -> Dict[str, Any]:
    """A minimal hedge bundle as returned by the agent."""
    return {
        "positions": [
            {
                "market": {"question": "Will a Cat 4 hurricane hit Miami in 2025?"},
                "yesPrice": 0.12,
                "correlationWeight": 0.9,
                "positionSize": 1000,
                "estimatedCost": 120,
                "potentialPayout": 1000,
                "coverageExplanation": "Pays out if a major hurricane lands",
                "wasCapped": True,
            }
        ],
        "totalCost": 120,
        "totalCoverage": 1000,
        "hedgeEfficiency": 8.33,
        "assetValue": 500000,
    }


@pytest.fixture
def ui_transcript(bundle) -> str:
    """A full UI message stream with one bundle-producing tool call."""
    return "".join([
        ui_line({"type": "text-delta", "delta": "Looking at "}),
        ui_line({"type": "text-delta", "delta": "markets ☂️ now."}),
        ui_line({"type": "tool-input-start", "toolCallId": "c1", "toolName": "buildHedgeBundle"}),
        ui_line({"type": "tool-input-delta", "toolCallId": "c1", "inputTextDelta": '{"assetValue":'}),
        ui_line({"type": "tool-input-delta", "toolCallId": "c1", "inputTextDelta": "500000}"}),
        ui_line({
            "type": "tool-input-available",
            "toolCallId": "c1",
            "toolName": "buildHedgeBundle",
            "input": {"assetValue": 500000},
        }),
        ui_line({"type": "tool-output-available", "toolCallId": "c1", "output": bundle}),
        ui_line({"type": "text-delta", "delta": " Done."}),
        "data: [DONE]\n",
    ])


@pytest.fixture
def data_transcript(bundle) -> str:
    """A full data stream with a tool call and a finish payload."""
    return "".join([
        data_line("0", "Searching "),
        data_line("0", "Miami ☀ markets"),
        data_line("9", {"toolCallId": "t1", "toolName": "searchMarkets"}),
        data_line("a", {"toolCallId": "t1", "argsTextDelta": '{"query":'}),
        data_line("a", {"toolCallId": "t1", "argsTextDelta": '"hurricane"}'}),
        data_line("b", {"toolCallId": "t1", "result": {"markets": []}}),
        data_line("d", [{"finishReason": "stop"}, bundle]),
    ])


# ============================================================
# API Payloads
# ============================================================

@pytest.fixture
def profile_payload() -> Dict[str, Any]:
    return {
        "user_id": "user-123",
        "handle": "alice",
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-16T10:30:00Z",
    }


@pytest.fixture
def markets_payload() -> Dict[str, Any]:
    return {
        "markets": [
            {
                "id": "m1",
                "question": "Will a hurricane make landfall in Florida?",
                "slug": "hurricane-florida",
                "conditionId": "0xabc",
                "clobTokenIds": '["111","222"]',
                "outcomePrices": '["0.35","0.65"]',
                "outcomes": '["Yes","No"]',
                "volume": "1250000",
                "liquidity": "50000",
                "endDate": "2025-11-30T00:00:00Z",
                "active": True,
                "closed": False,
            }
        ],
        "total": 1,
    }


@pytest.fixture
def orderbook_payload() -> Dict[str, Any]:
    return {
        "book": {
            "bids": [{"price": "0.34", "size": "500"}],
            "asks": [{"price": "0.36", "size": "800"}, {"price": "0.38", "size": "200"}],
        },
        "spread": {"bid": 0.34, "ask": 0.36, "spread": 0.057},
        "askDepth": 364.0,
        "slippage": {"avgPrice": 0.365, "worstPrice": 0.38, "slippage": 0.014, "fillableSize": 1000},
    }


@pytest.fixture
def assessment_payload(bundle) -> Dict[str, Any]:
    return {
        "id": "a1b2c3d4-0000-0000-0000-000000000000",
        "user_id": "user-123",
        "status": "completed",
        "risk_profile": {
            "location": "33109",
            "assetType": "residential",
            "riskTypes": ["hurricane", "flood"],
            "assetValue": 500000,
        },
        "hedge_bundle": bundle,
        "messages": [],
        "metadata": None,
        "created_at": "2024-01-15T10:30:00Z",
        "updated_at": "2024-01-15T11:00:00Z",
    }
