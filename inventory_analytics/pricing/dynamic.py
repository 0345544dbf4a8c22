"""
Multi-factor dynamic pricing.

Multiplier assembly (applied in this order)
-------------------------------------------
    demand score > 0.7    × 1.15   high_demand
    demand score > 0.4    × 1.05   medium_demand
    otherwise             × 0.95   low_demand

    expiry urgency > 0.8  × 0.70   urgent_expiry      (strategy → expiry_based)
    expiry urgency > 0.5  × 0.85   approaching_expiry

    × competition factor           competitive_pricing (< 0.95)
                                   premium_positioning (> 1.05)
    × seasonality factor           seasonal_peak (> 1.1) / seasonal_low (< 0.9)

Bounds
------
    recommended = max(cost · 1.1, min(price · 2, price · multiplier))

Without a cost the floor is zero.

Confidence (percent)
--------------------
Starts at 50; +30 / +20 / +10 for at least 100 / 30 / 10 sale records; +10
when the demand score moved off neutral; +10 when expiry urgency is non-zero;
+10 when the product has an expiry date; capped at 95.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from inventory_analytics.config import DynamicPricingConfig
from inventory_analytics.models.inventory import PricedProduct, SaleRecord
from inventory_analytics.models.pricing import DynamicPricingResult, PricingFactors
from inventory_analytics.pricing import signals
from inventory_analytics.taxonomy.labels import PricingStrategy

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = DynamicPricingConfig()

# (minimum sale records, confidence bonus); first match wins
_DATA_VOLUME_BONUS: tuple[tuple[int, float], ...] = (
    (100, 30.0),
    (30,  20.0),
    (10,  10.0),
)


def pricing_confidence(
    n_records: int,
    demand: float,
    urgency: float,
    has_expiry_date: bool,
    cap: float = 95.0,
) -> float:
    """Confidence in a dynamic price, driven by data volume and signal strength."""
    confidence = 50.0
    for min_records, bonus in _DATA_VOLUME_BONUS:
        if n_records >= min_records:
            confidence += bonus
            break
    if demand != signals.NEUTRAL_SCORE:
        confidence += 10.0
    if urgency > 0:
        confidence += 10.0
    if has_expiry_date:
        confidence += 10.0
    return min(cap, confidence)


def explain_pricing(
    strategy: PricingStrategy,
    demand: float,
    urgency: float,
    change_percentage: float,
) -> str:
    """Human-readable sentence describing why the price moved."""
    if strategy is PricingStrategy.DEMAND_BASED:
        lead = f"Based on {'strong' if demand > 0.6 else 'moderate'} demand patterns"
    elif strategy is PricingStrategy.EXPIRY_BASED:
        lead = (
            f"Inventory clearance for {'urgently' if urgency > 0.7 else 'approaching'} "
            "expiring products"
        )
    elif strategy is PricingStrategy.HYBRID:
        lead = "Balanced approach considering both demand patterns and inventory age"
    else:
        lead = "Market-aligned pricing based on competitor analysis"

    direction = "increase" if change_percentage >= 0 else "decrease"
    magnitude = abs(change_percentage)
    if magnitude > 15:
        size = "significant"
    elif magnitude > 5:
        size = "moderate"
    else:
        size = "slight"
    return f"{lead}. Recommended {size} {direction} to optimize revenue."


def calculate_dynamic_pricing(
    product: PricedProduct,
    sales_history: Sequence[SaleRecord],
    similar_products: Iterable[PricedProduct] = (),
    today: Optional[date] = None,
    config: Optional[DynamicPricingConfig] = None,
) -> DynamicPricingResult:
    """Recommend a price from demand, expiry, competition and seasonality.

    Args:
        product:          The product being priced.
        sales_history:    Its sale records, in any order.
        similar_products: Competing products; only their prices are used.
        today:            Reference date for expiry and seasonality
                          (defaults to ``date.today()``).
        config:           Price bounds and confidence cap.

    Returns:
        ``DynamicPricingResult`` with the factor breakdown in ``metadata``.
    """
    cfg = config or _DEFAULT_CONFIG
    today = today or date.today()

    demand = signals.demand_score(product, sales_history)
    urgency = signals.expiry_urgency(product.expiry_date, today)
    competition = signals.competition_factor(product.price, similar_products)
    seasonality = signals.seasonality_factor(sales_history, today)

    multiplier = 1.0
    strategy = PricingStrategy.DEMAND_BASED
    factors: list[str] = []

    # ── Demand ────────────────────────────────────────────────────────────────
    if demand > 0.7:
        multiplier *= 1.15
        factors.append("high_demand")
    elif demand > 0.4:
        multiplier *= 1.05
        factors.append("medium_demand")
    else:
        multiplier *= 0.95
        factors.append("low_demand")

    # ── Expiry ────────────────────────────────────────────────────────────────
    if urgency > 0.8:
        multiplier *= 0.7
        factors.append("urgent_expiry")
        strategy = PricingStrategy.EXPIRY_BASED
    elif urgency > 0.5:
        multiplier *= 0.85
        factors.append("approaching_expiry")

    # ── Competition ───────────────────────────────────────────────────────────
    multiplier *= competition
    if competition < 0.95:
        factors.append("competitive_pricing")
    if competition > 1.05:
        factors.append("premium_positioning")

    # ── Seasonality ───────────────────────────────────────────────────────────
    multiplier *= seasonality
    if seasonality > 1.1:
        factors.append("seasonal_peak")
    if seasonality < 0.9:
        factors.append("seasonal_low")

    base_price = product.price
    floor = (product.cost or 0.0) * cfg.min_cost_markup
    ceiling = base_price * cfg.max_price_multiple
    recommended = max(floor, min(ceiling, base_price * multiplier))

    price_change = recommended - base_price
    change_percentage = price_change / base_price * 100.0

    confidence = pricing_confidence(
        n_records=len(sales_history),
        demand=demand,
        urgency=urgency,
        has_expiry_date=product.expiry_date is not None,
        cap=cfg.max_confidence,
    )

    logger.debug(
        "calculate_dynamic_pricing: product=%s demand=%.3f urgency=%.2f "
        "competition=%.2f seasonality=%.2f multiplier=%.4f",
        product.id, demand, urgency, competition, seasonality, multiplier,
    )

    return DynamicPricingResult(
        product_id=product.id,
        current_price=base_price,
        recommended_price=round(recommended, 2),
        price_change=round(price_change, 2),
        change_percentage=round(change_percentage, 1),
        confidence=confidence,
        strategy=strategy,
        factors=factors,
        explanation=explain_pricing(strategy, demand, urgency, change_percentage),
        metadata=PricingFactors(
            demand_score=demand,
            expiry_urgency=urgency,
            competition_factor=competition,
            seasonality_factor=seasonality,
        ),
    )
