"""
Hedge Layer CLI - Data Models

Dataclasses mirroring the Hedge Layer API payloads. Only the subset
needed for display and API interaction is modelled; the server owns
all hedge computation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import InvalidRequestError


def _float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


# ============================================================
# Market Models
# ============================================================

@dataclass
class Market:
    """A prediction market."""
    id: str
    question: str
    slug: str = ""
    condition_id: str = ""
    clob_token_ids: str = ""
    outcome_prices: str = ""
    outcomes: str = ""
    volume: str = ""
    liquidity: str = ""
    end_date: str = ""
    active: bool = False
    closed: bool = False
    image: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Market:
        """Create from dictionary."""
        return cls(
            id=str(data.get("id", "")),
            question=data.get("question", ""),
            slug=data.get("slug", ""),
            condition_id=data.get("conditionId", ""),
            clob_token_ids=data.get("clobTokenIds", ""),
            outcome_prices=data.get("outcomePrices", ""),
            outcomes=data.get("outcomes", ""),
            volume=str(data.get("volume", "")),
            liquidity=str(data.get("liquidity", "")),
            end_date=data.get("endDate", "") or "",
            active=bool(data.get("active", False)),
            closed=bool(data.get("closed", False)),
            image=data.get("image"),
            description=data.get("description"),
        )

    @property
    def prices(self) -> Optional[Tuple[float, float]]:
        """YES/NO prices parsed from the JSON-encoded ``outcomePrices``."""
        try:
            parsed = json.loads(self.outcome_prices)
        except (json.JSONDecodeError, TypeError):
            return None
        if isinstance(parsed, list) and len(parsed) == 2:
            return _float(parsed[0]), _float(parsed[1])
        return None

    @property
    def yes_price(self) -> Optional[float]:
        prices = self.prices
        return prices[0] if prices else None


@dataclass
class MarketSearchResult:
    """Result of a market search."""
    markets: List[Market] = field(default_factory=list)
    total: int = 0
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MarketSearchResult:
        markets = [Market.from_dict(m) for m in data.get("markets", [])]
        return cls(markets=markets, total=data.get("total", len(markets)), raw=data)


# ============================================================
# Orderbook Models
# ============================================================

@dataclass
class OrderbookLevel:
    """One price level of an orderbook."""
    price: str
    size: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> OrderbookLevel:
        return cls(price=str(data.get("price", "")), size=str(data.get("size", "")))


@dataclass
class Orderbook:
    """Bids and asks for a CLOB token."""
    bids: List[OrderbookLevel] = field(default_factory=list)
    asks: List[OrderbookLevel] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Orderbook:
        return cls(
            bids=[OrderbookLevel.from_dict(level) for level in data.get("bids", [])],
            asks=[OrderbookLevel.from_dict(level) for level in data.get("asks", [])],
        )


@dataclass
class Spread:
    """Best bid/ask and relative spread."""
    bid: float
    ask: float
    spread: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Spread:
        return cls(
            bid=_float(data.get("bid")),
            ask=_float(data.get("ask")),
            spread=_float(data.get("spread")),
        )


@dataclass
class SlippageResult:
    """Server-side slippage estimate for a given order size."""
    avg_price: float
    worst_price: float
    slippage: float
    fillable_size: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SlippageResult:
        return cls(
            avg_price=_float(data.get("avgPrice")),
            worst_price=_float(data.get("worstPrice")),
            slippage=_float(data.get("slippage")),
            fillable_size=_float(data.get("fillableSize")),
        )


@dataclass
class OrderbookSummary:
    """Response of the orderbook endpoint."""
    book: Orderbook
    spread: Optional[Spread] = None
    ask_depth: float = 0.0
    slippage: Optional[SlippageResult] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> OrderbookSummary:
        spread = data.get("spread")
        slippage = data.get("slippage")
        return cls(
            book=Orderbook.from_dict(data.get("book") or {}),
            spread=Spread.from_dict(spread) if spread else None,
            ask_depth=_float(data.get("askDepth")),
            slippage=SlippageResult.from_dict(slippage) if slippage else None,
            raw=data,
        )


# ============================================================
# Hedge Models
# ============================================================

@dataclass
class HedgePosition:
    """A position in a hedge bundle."""
    market_question: str
    yes_price: float = 0.0
    correlation_weight: float = 0.0
    position_size: float = 0.0
    estimated_cost: float = 0.0
    potential_payout: float = 0.0
    coverage_explanation: str = ""
    slippage_estimate: Optional[float] = None
    effective_cost: Optional[float] = None
    was_capped: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HedgePosition:
        market = data.get("market")
        question = market.get("question") if isinstance(market, dict) else None
        slippage = data.get("slippageEstimate")
        effective = data.get("effectiveCost")
        return cls(
            market_question=question or "Unknown",
            yes_price=_float(data.get("yesPrice")),
            correlation_weight=_float(data.get("correlationWeight")),
            position_size=_float(data.get("positionSize")),
            estimated_cost=_float(data.get("estimatedCost")),
            potential_payout=_float(data.get("potentialPayout")),
            coverage_explanation=data.get("coverageExplanation", "") or "",
            slippage_estimate=_float(slippage) if slippage is not None else None,
            effective_cost=_float(effective) if effective is not None else None,
            was_capped=bool(data.get("wasCapped", False)),
        )


@dataclass
class HedgeBundle:
    """A basket of positions offsetting a real-world risk."""
    positions: List[HedgePosition] = field(default_factory=list)
    total_cost: float = 0.0
    total_coverage: float = 0.0
    hedge_efficiency: float = 0.0
    asset_value: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> HedgeBundle:
        positions = data.get("positions") or []
        return cls(
            positions=[HedgePosition.from_dict(p) for p in positions if isinstance(p, dict)],
            total_cost=_float(data.get("totalCost")),
            total_coverage=_float(data.get("totalCoverage")),
            hedge_efficiency=_float(data.get("hedgeEfficiency")),
            asset_value=_float(data.get("assetValue")),
        )


@dataclass
class RiskProfile:
    """What the user wants to hedge."""
    location: str
    asset_value: float
    risk_types: List[str] = field(default_factory=list)
    asset_type: str = "residential"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RiskProfile:
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise InvalidRequestError("Invalid JSON input. Expected a RiskProfile object.")
        risk_types = data.get("riskTypes") or []
        return cls(
            location=str(data.get("location") or ""),
            asset_value=_float(data.get("assetValue")),
            risk_types=[str(r) for r in risk_types] if isinstance(risk_types, list) else [],
            asset_type=data.get("assetType") or "residential",
        )

    def validate(self) -> None:
        """
        Check required fields.

        Raises:
            InvalidRequestError: If location, asset value or risk types are missing.
        """
        if not self.location or not self.asset_value or not self.risk_types:
            raise InvalidRequestError(
                "Risk profile must include location, assetValue, and at least one riskType."
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "assetType": self.asset_type,
            "riskTypes": list(self.risk_types),
            "assetValue": self.asset_value,
        }

    def to_prompt(self) -> str:
        """Chat prompt asking the agent to build a hedge bundle."""
        return (
            f"I need to hedge a {self.asset_type} property worth ${self.asset_value:,.0f} "
            f"in {self.location} against {', '.join(self.risk_types)} risks. "
            "Please search for relevant markets and build a hedge bundle."
        )


# ============================================================
# Account Models
# ============================================================

@dataclass
class Assessment:
    """A stored risk assessment."""
    id: str
    status: str
    user_id: str = ""
    risk_profile: Optional[RiskProfile] = None
    hedge_bundle: Optional[HedgeBundle] = None
    messages: List[Any] = field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    created_at: str = ""
    updated_at: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Assessment:
        risk_profile = data.get("risk_profile")
        bundle = data.get("hedge_bundle")
        return cls(
            id=str(data.get("id", "")),
            status=data.get("status", ""),
            user_id=data.get("user_id", ""),
            risk_profile=RiskProfile.from_dict(risk_profile) if isinstance(risk_profile, dict) else None,
            hedge_bundle=HedgeBundle.from_dict(bundle) if isinstance(bundle, dict) else None,
            messages=data.get("messages") or [],
            metadata=data.get("metadata"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            raw=data,
        )

    @property
    def short_id(self) -> str:
        return self.id[:8]


@dataclass
class UserProfile:
    """The authenticated user."""
    user_id: str
    handle: str = ""
    created_at: str = ""
    updated_at: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> UserProfile:
        return cls(
            user_id=data.get("user_id", ""),
            handle=data.get("handle", "") or "",
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            raw=data,
        )

    @property
    def display_name(self) -> str:
        return self.handle or self.user_id


@dataclass
class ChatMessage:
    """A chat turn sent to the agent."""
    role: str
    content: str

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> ChatMessage:
        return cls(role="assistant", content=content)

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}
