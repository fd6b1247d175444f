"""
Hedge Layer CLI - Model Tests
"""

import pytest

from hedgelayer.errors import InvalidRequestError
from hedgelayer.models import (
    Assessment,
    ChatMessage,
    HedgeBundle,
    Market,
    MarketSearchResult,
    OrderbookSummary,
    RiskProfile,
    UserProfile,
)


class TestMarket:
    """Tests for market models."""

    def test_from_dict(self, markets_payload):
        result = MarketSearchResult.from_dict(markets_payload)

        assert result.total == 1
        market = result.markets[0]
        assert market.id == "m1"
        assert market.condition_id == "0xabc"
        assert market.end_date == "2025-11-30T00:00:00Z"
        assert market.active is True

    def test_yes_price(self, markets_payload):
        market = Market.from_dict(markets_payload["markets"][0])

        assert market.prices == (0.35, 0.65)
        assert market.yes_price == 0.35

    @pytest.mark.parametrize("prices", ["", "not json", '["0.5"]', "{}"])
    def test_unparseable_prices(self, prices):
        market = Market(id="1", question="q", outcome_prices=prices)
        assert market.yes_price is None

    def test_total_defaults_to_count(self):
        result = MarketSearchResult.from_dict({"markets": [{"id": 1, "question": "q"}]})

        assert result.total == 1
        assert result.markets[0].id == "1"


class TestOrderbookSummary:
    def test_from_dict(self, orderbook_payload):
        summary = OrderbookSummary.from_dict(orderbook_payload)

        assert summary.book.asks[0].price == "0.36"
        assert summary.spread.ask == 0.36
        assert summary.ask_depth == 364.0
        assert summary.slippage.fillable_size == 1000.0

    def test_empty_book(self):
        summary = OrderbookSummary.from_dict({"book": {"bids": [], "asks": []}, "spread": None})

        assert summary.spread is None
        assert summary.slippage is None
        assert summary.book.bids == []


class TestHedgeBundle:
    def test_from_dict(self, bundle):
        parsed = HedgeBundle.from_dict(bundle)

        assert parsed.total_cost == 120.0
        assert parsed.asset_value == 500000.0
        position = parsed.positions[0]
        assert position.market_question == "Will a Cat 4 hurricane hit Miami in 2025?"
        assert position.was_capped is True
        assert position.slippage_estimate is None

    def test_missing_market_question(self):
        parsed = HedgeBundle.from_dict({"positions": [{"yesPrice": 0.5}], "totalCost": 1})
        assert parsed.positions[0].market_question == "Unknown"


class TestRiskProfile:
    """Tests for RiskProfile parsing and validation."""

    def test_from_dict(self):
        profile = RiskProfile.from_dict({
            "location": "33109",
            "assetType": "commercial",
            "riskTypes": ["hurricane", "flood"],
            "assetValue": 500000,
        })

        assert profile.location == "33109"
        assert profile.asset_type == "commercial"
        assert profile.risk_types == ["hurricane", "flood"]
        assert profile.asset_value == 500000.0
        profile.validate()

    def test_asset_type_default(self):
        profile = RiskProfile.from_dict({"location": "x", "assetValue": 1, "riskTypes": ["flood"]})
        assert profile.asset_type == "residential"

    @pytest.mark.parametrize("data", [
        {"assetValue": 1, "riskTypes": ["flood"]},
        {"location": "x", "riskTypes": ["flood"]},
        {"location": "x", "assetValue": 1, "riskTypes": []},
        {"location": "x", "assetValue": 1, "riskTypes": "flood"},
    ])
    def test_validate_rejects_incomplete(self, data):
        with pytest.raises(InvalidRequestError, match="at least one riskType"):
            RiskProfile.from_dict(data).validate()

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(InvalidRequestError):
            RiskProfile.from_dict([1, 2])

    def test_to_prompt(self):
        profile = RiskProfile(location="Miami, FL", asset_value=500000, risk_types=["hurricane", "flood"])

        assert profile.to_prompt() == (
            "I need to hedge a residential property worth $500,000 in Miami, FL "
            "against hurricane, flood risks. "
            "Please search for relevant markets and build a hedge bundle."
        )

    def test_to_dict_uses_wire_keys(self):
        profile = RiskProfile(location="x", asset_value=1.0, risk_types=["flood"])

        assert profile.to_dict() == {
            "location": "x",
            "assetType": "residential",
            "riskTypes": ["flood"],
            "assetValue": 1.0,
        }


class TestAssessment:
    def test_from_dict(self, assessment_payload):
        assessment = Assessment.from_dict(assessment_payload)

        assert assessment.short_id == "a1b2c3d4"
        assert assessment.status == "completed"
        assert assessment.risk_profile.location == "33109"
        assert assessment.hedge_bundle.total_cost == 120.0

    def test_in_progress_without_results(self):
        assessment = Assessment.from_dict({"id": "x", "status": "in_progress", "risk_profile": None})

        assert assessment.risk_profile is None
        assert assessment.hedge_bundle is None
        assert assessment.messages == []

    def test_keeps_server_payload(self, assessment_payload):
        """The untouched payload is kept for JSON output but ignored by equality."""
        assessment = Assessment.from_dict(assessment_payload)

        assert assessment.raw is assessment_payload
        assert assessment == Assessment.from_dict({**assessment_payload, "extra": 1})


class TestAccountModels:
    def test_display_name_prefers_handle(self, profile_payload):
        assert UserProfile.from_dict(profile_payload).display_name == "alice"

    def test_display_name_falls_back_to_id(self):
        assert UserProfile.from_dict({"user_id": "u1", "handle": None}).display_name == "u1"

    def test_chat_message(self):
        assert ChatMessage.user("hi").to_dict() == {"role": "user", "content": "hi"}
        assert ChatMessage.assistant("yo").role == "assistant"
