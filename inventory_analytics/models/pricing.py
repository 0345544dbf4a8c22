"""
Pricing output models.

``PriceRecommendation`` comes from the stock-bucket optimizer: one suggested
price plus the demand the elasticity model expects at that price.

``DynamicPricingResult`` comes from the multi-factor dynamic pricer and
carries the individual factor values in ``metadata`` so callers can show why
a price moved.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, field_validator

from inventory_analytics.taxonomy.labels import PricingStrategy


def _check_confidence(v: float) -> float:
    if not math.isfinite(v) or not 0.0 <= v <= 100.0:
        raise ValueError(f"confidence must be in [0, 100], got {v}.")
    return v


class PriceRecommendation(BaseModel):
    """Suggested price from the stock-level heuristic.

    Attributes:
        optimized_price: Suggested unit price, rounded to cents unless that
            would make it zero.
        confidence: Fixed per stock bucket (percentage).
        expected_demand: Demand projected through the elasticity model.
        reasoning: Short tag naming the stock bucket that applied.
    """

    model_config = ConfigDict(frozen=True)

    optimized_price: float
    confidence: float
    expected_demand: int
    reasoning: str

    @field_validator("optimized_price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError(f"optimized_price must be positive, got {v}.")
        return v

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        return _check_confidence(v)

    @field_validator("expected_demand")
    @classmethod
    def validate_demand(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"expected_demand must be non-negative, got {v}.")
        return v


class PricingFactors(BaseModel):
    """Raw factor values feeding a dynamic price.

    Attributes:
        demand_score: 0–1 blend of trend, seasonality, velocity, stock-out risk.
        expiry_urgency: 0–1, 1 meaning expired or about to expire.
        competition_factor: Multiplier from the competitor price ratio.
        seasonality_factor: Multiplier from the current month's share of sales.
    """

    model_config = ConfigDict(frozen=True)

    demand_score: float
    expiry_urgency: float
    competition_factor: float
    seasonality_factor: float


class DynamicPricingResult(BaseModel):
    """Multi-factor price recommendation for one product."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    current_price: float
    recommended_price: float
    price_change: float
    change_percentage: float
    confidence: float
    strategy: PricingStrategy
    factors: list[str]
    explanation: str
    metadata: PricingFactors

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        return _check_confidence(v)

    @field_validator("recommended_price")
    @classmethod
    def validate_recommended(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError(f"recommended_price must be non-negative, got {v}.")
        return v
